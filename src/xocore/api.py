"""FastAPI service exposing board rules, analysis and puzzles over HTTP."""

from __future__ import annotations

import logging
import random
import threading
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query

from . import difficulty, selector, strategist
from .board import BoardState, IllegalMoveError, InvalidBoardError, Player
from .config import Settings
from .library import default_catalog, load_catalog
from .profile import PuzzleProfile, recently_solved
from .puzzles import PuzzleCatalog, PuzzleSpec
from .schemas import (
    AttemptRequest,
    BoardPayload,
    GameMoveRequest,
    MoveRequest,
    NewGameRequest,
    NextPuzzleRequest,
    OpponentRequest,
    PuzzlePayload,
    SelectRequest,
)
from .validator import validate, validate_catalog

logger = logging.getLogger(__name__)


def build_catalog(settings: Settings) -> PuzzleCatalog:
    """Load the configured puzzles and keep only those that validate."""

    if settings.catalog_path:
        source = load_catalog(settings.catalog_path)
        logger.info("Loaded %d puzzles from %s", len(source), settings.catalog_path)
    else:
        source = default_catalog()

    results = validate_catalog(source)
    catalog = PuzzleCatalog(puzzle for puzzle in source if results[puzzle.id])
    dropped = len(source) - len(catalog)
    if dropped:
        logger.warning("Dropped %d invalid puzzle(s) from the catalog", dropped)
    if not len(catalog):
        raise RuntimeError("Puzzle catalog is empty; nothing can be served")
    return catalog


# Resolved once at import: an unreadable or fully invalid XOCORE_CATALOG makes
# `import xocore.api` itself raise.
SETTINGS = Settings.from_env()
CATALOG = build_catalog(SETTINGS)

app = FastAPI(title="xocore", description="Tic-tac-toe analysis and puzzle service")


@dataclass
class GameSession:
    """A running game between a caller and the strategist."""

    board: BoardState
    human: Player
    max_depth: Optional[int] = None
    move_log: List[Dict[str, object]] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}


@dataclass
class ProfileSession:
    profile: PuzzleProfile = field(default_factory=PuzzleProfile)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


PROFILES: Dict[str, ProfileSession] = {}


# ---- serialization ----


def _serialize_board(state: BoardState) -> Dict[str, object]:
    winner = state.winner()
    return {
        "cells": [mark if mark != "." else "" for mark in state.cells()],
        "layout": state.to_layout(),
        "toMove": state.to_move.value,
        "winner": winner.value if winner else None,
        "drawn": state.is_draw(),
        "terminal": state.is_terminal(),
        "legalMoves": list(state.legal_moves()),
        "winningLine": state.winning_line(),
    }


def _serialize_puzzle(puzzle: PuzzleSpec) -> Dict[str, object]:
    payload = PuzzlePayload.from_puzzle(puzzle).model_dump(by_alias=True, mode="json")
    payload["displayName"] = puzzle.type.display_name
    payload["instruction"] = puzzle.type.instruction
    payload["points"] = puzzle.difficulty.points
    return payload


def _serialize_profile(
    profile_id: str, session: ProfileSession, today: date
) -> Dict[str, object]:
    with session.lock:
        profile = session.profile
        summary = profile.summary()
        return {
            "id": profile_id,
            "currentDifficulty": summary.current_difficulty.value,
            "totalAttempts": summary.total_attempts,
            "totalSolved": summary.total_solved,
            "successRate": summary.success_rate,
            "currentStreak": summary.current_streak,
            "longestStreak": summary.longest_streak,
            "totalPoints": summary.total_points,
            "typeSolves": {kind.value: count for kind, count in profile.type_solves.items()},
            "averageSolveSeconds": {
                level.value: seconds
                for level, seconds in profile.average_solve_seconds.items()
            },
            "dailyCompleted": profile.daily_completed(today),
        }


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        state: Dict[str, object] = {
            "id": game_id,
            "human": session.human.value,
            "board": _serialize_board(session.board),
            "moveLog": list(session.move_log),
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


# ---- helpers ----


def _to_state(payload: BoardPayload) -> BoardState:
    try:
        return payload.to_state()
    except InvalidBoardError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _apply(state: BoardState, cell: int) -> BoardState:
    try:
        return state.apply_move(cell)
    except IllegalMoveError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _get_profile(profile_id: str) -> ProfileSession:
    try:
        return PROFILES[profile_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Profile not found") from exc


def _get_puzzle(puzzle_id: str) -> PuzzleSpec:
    puzzle = CATALOG.get(puzzle_id)
    if puzzle is None:
        raise HTTPException(status_code=404, detail="Puzzle not found")
    return puzzle


def _play_strategist_turn(session: GameSession) -> None:
    board = session.board
    if board.is_terminal() or board.to_move is session.human:
        return
    move = strategist.best_move(board, session.max_depth)
    if move is None:
        return
    session.move_log.append({"player": board.to_move.value, "cell": move})
    session.board = board.apply_move(move)


# ---- board & analysis ----


@app.post("/api/board/move")
def apply_move(request: MoveRequest) -> Dict[str, object]:
    state = _apply(_to_state(request.board), request.cell)
    return _serialize_board(state)


@app.post("/api/analysis")
def analyze(request: BoardPayload) -> Dict[str, object]:
    state = _to_state(request)
    result = strategist.analyze(state)
    return {
        "board": _serialize_board(state),
        "bestMove": result.best_move,
        "winningMoves": sorted(result.winning_moves),
        "blockingMoves": sorted(result.blocking_moves),
        "score": result.score,
        "heuristic": result.heuristic,
        "difficulty": difficulty.estimate(state).value,
    }


@app.post("/api/opponent")
def opponent_move(request: OpponentRequest) -> Dict[str, object]:
    state = _to_state(request.board)
    move = strategist.choose_move(state, request.suggestion, request.max_depth)
    accepted = request.suggestion is not None and move == request.suggestion
    return {"move": move, "suggestionAccepted": accepted}


# ---- games ----


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    session = GameSession(
        board=BoardState.empty(), human=request.human, max_depth=request.max_depth
    )
    game_id = uuid.uuid4().hex
    with session.lock:
        _play_strategist_turn(session)
    SESSIONS[game_id] = session
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: GameMoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        board = session.board
        if board.is_terminal():
            raise HTTPException(status_code=400, detail="Game already finished")
        if board.to_move is not session.human:
            raise HTTPException(status_code=400, detail="Not your turn")
        session.board = _apply(board, request.cell)
        session.move_log.append({"player": board.to_move.value, "cell": request.cell})
        _play_strategist_turn(session)
    return _serialize_session(game_id, session)


# ---- puzzles ----


@app.get("/api/puzzles")
def list_puzzles() -> List[Dict[str, object]]:
    return [_serialize_puzzle(puzzle) for puzzle in CATALOG]


@app.get("/api/puzzles/daily")
def daily_puzzle(
    day: Optional[date] = Query(default=None, alias="date")
) -> Dict[str, object]:
    day = day or date.today()
    puzzle = selector.select_daily(CATALOG, day)
    if puzzle is None:
        raise HTTPException(status_code=404, detail="No puzzles available")
    payload = _serialize_puzzle(puzzle)
    payload["date"] = day.isoformat()
    return payload


@app.post("/api/puzzles/select")
def select_puzzle(request: SelectRequest) -> Dict[str, object]:
    stats = {puzzle_id: entry.to_stats() for puzzle_id, entry in request.stats.items()}
    excluded = set(request.exclude_ids) | recently_solved(stats)
    puzzle = selector.select_for_profile(
        CATALOG,
        request.difficulty,
        request.puzzle_type,
        excluded,
        random.Random(request.seed),
    )
    if puzzle is None:
        raise HTTPException(status_code=404, detail="No puzzles available")
    return _serialize_puzzle(puzzle)


@app.post("/api/puzzles/validate")
def validate_puzzle(request: PuzzlePayload) -> Dict[str, object]:
    try:
        puzzle = request.to_puzzle()
    except InvalidBoardError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    result = validate(puzzle)
    return {
        "id": request.id,
        "valid": result.valid,
        "failedStep": result.step.value if result.step else None,
        "detail": result.detail,
    }


@app.get("/api/puzzles/{puzzle_id}")
def get_puzzle(puzzle_id: str) -> Dict[str, object]:
    return _serialize_puzzle(_get_puzzle(puzzle_id))


# ---- profiles ----


@app.post("/api/profile")
def create_profile() -> Dict[str, object]:
    profile_id = uuid.uuid4().hex
    session = ProfileSession()
    PROFILES[profile_id] = session
    return _serialize_profile(profile_id, session, date.today())


@app.get("/api/profile/{profile_id}")
def get_profile(profile_id: str) -> Dict[str, object]:
    session = _get_profile(profile_id)
    now = datetime.now()
    with session.lock:
        session.profile.refresh_streak(now)
    return _serialize_profile(profile_id, session, now.date())


@app.post("/api/profile/{profile_id}/attempt")
def record_attempt(profile_id: str, request: AttemptRequest) -> Dict[str, object]:
    session = _get_profile(profile_id)
    puzzle = _get_puzzle(request.puzzle_id)
    when = request.completed_at or datetime.now()
    if when.tzinfo is not None:
        # Profiles keep naive local times
        when = when.astimezone().replace(tzinfo=None)
    daily = selector.select_daily(CATALOG, when.date())
    with session.lock:
        session.profile.record_attempt(
            puzzle,
            request.solved,
            request.seconds,
            when,
            daily=daily is not None and daily.id == puzzle.id,
        )
    return _serialize_profile(profile_id, session, when.date())


@app.post("/api/profile/{profile_id}/next")
def next_puzzle(profile_id: str, request: NextPuzzleRequest) -> Dict[str, object]:
    session = _get_profile(profile_id)
    with session.lock:
        level = session.profile.current_difficulty
        excluded = session.profile.recently_solved_ids()
    puzzle = selector.select_for_profile(
        CATALOG, level, request.puzzle_type, excluded, random.Random(request.seed)
    )
    if puzzle is None:
        raise HTTPException(status_code=404, detail="No puzzles available")
    return _serialize_puzzle(puzzle)
