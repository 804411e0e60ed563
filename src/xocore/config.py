"""Environment-driven settings for the xocore service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    # JSON list of puzzles; the built-in library is used when unset
    catalog_path: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("XOCORE_HOST", cls.host),
            port=int(env.get("XOCORE_PORT", str(cls.port))),
            log_level=env.get("XOCORE_LOG_LEVEL", cls.log_level).upper(),
            catalog_path=env.get("XOCORE_CATALOG") or None,
        )
