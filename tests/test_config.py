"""Tests for environment-driven settings."""

import pytest

from xocore.config import Settings


def test_defaults_without_environment():
    settings = Settings.from_env({})
    assert settings == Settings()
    assert settings.port == 8000
    assert settings.catalog_path is None


def test_reads_prefixed_variables():
    settings = Settings.from_env(
        {
            "XOCORE_HOST": "127.0.0.1",
            "XOCORE_PORT": "9001",
            "XOCORE_LOG_LEVEL": "debug",
            "XOCORE_CATALOG": "/srv/puzzles.json",
        }
    )
    assert settings.host == "127.0.0.1"
    assert settings.port == 9001
    assert settings.log_level == "DEBUG"
    assert settings.catalog_path == "/srv/puzzles.json"


def test_blank_catalog_means_builtin_library():
    assert Settings.from_env({"XOCORE_CATALOG": ""}).catalog_path is None


def test_bad_port_is_rejected():
    with pytest.raises(ValueError):
        Settings.from_env({"XOCORE_PORT": "eighty"})
