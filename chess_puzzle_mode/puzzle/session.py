"""
Puzzle session management.

The session manager owns the traversal of one collection: it keeps the active
puzzle's controller, tracks attempts, hints and solved puzzles, and writes a
snapshot of that progress to the session store after every mutating call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..core.models import (
    PuzzleConfigurationError,
    PuzzleDefinition,
    PuzzleSessionState,
)
from ..core.storage import SaveResult, SessionStore
from .controller import PuzzleController

logger = logging.getLogger(__name__)

STORAGE_PREFIX = "puzzle-mode:"


def session_key(collection_id: str) -> str:
    """Storage key holding the session of a collection."""
    return f"{STORAGE_PREFIX}{collection_id}"


@dataclass(frozen=True)
class MoveEvaluation:
    """Result of a move as seen by the host."""

    accepted: bool
    complete: bool
    cursor: int


class PuzzleSessionManager:
    """
    Drives one player's progress through a puzzle collection.

    The starting puzzle is the explicit start id if given, else the persisted
    current puzzle, else the first one. Opening any puzzle other than the
    persisted one (an explicit choice, or a fallback when the persisted id is
    no longer in the collection) starts a fresh attempt while solved puzzles
    carry over.
    """

    def __init__(
        self,
        collection_id: str,
        puzzles: Sequence[PuzzleDefinition],
        auto_advance: bool = True,
        allow_hints: bool = True,
        start_puzzle_id: Optional[str] = None,
        store: Optional[SessionStore] = None,
        on_persistence_warning: Optional[Callable[[Optional[str]], None]] = None,
    ):
        """
        Initialize the session manager.

        Args:
            collection_id: Identifier scoping the persisted session
            puzzles: Ordered puzzles of the collection
            auto_advance: Default for moving on after a solve
            allow_hints: Whether the host may request hints
            start_puzzle_id: Puzzle to open instead of the persisted one
            store: Session store; an in-memory store when omitted
            on_persistence_warning: Called with the error when a write is not durable

        Raises:
            PuzzleConfigurationError: If no puzzles are given or any puzzle
                has an empty solution or variant
        """
        self.collection_id = collection_id
        self.puzzles: List[PuzzleDefinition] = list(puzzles)
        if not self.puzzles:
            raise PuzzleConfigurationError("At least one puzzle is required")
        # Reject unplayable puzzles now rather than when play reaches them
        for puzzle in self.puzzles:
            PuzzleController(puzzle)

        self.allow_hints = allow_hints
        self.store = store if store is not None else SessionStore()
        self.persistence_key = session_key(collection_id)
        self._on_persistence_warning = on_persistence_warning

        persisted = self._load_persisted_state()
        persisted_puzzle_id = persisted.get("currentPuzzleId") if persisted else None
        initial_puzzle_id = start_puzzle_id or persisted_puzzle_id
        self._current_index = self._index_of(initial_puzzle_id)

        puzzle = self.puzzles[self._current_index]
        self._controller = PuzzleController(puzzle)

        # Counters only carry over when reopening the persisted puzzle itself
        fresh_start = puzzle.id != persisted_puzzle_id
        persisted = persisted or {}
        self._state = PuzzleSessionState(
            collection_id=collection_id,
            current_puzzle_id=puzzle.id,
            move_cursor=0,
            attempts=0 if fresh_start else _as_count(persisted.get("attempts")),
            solved_puzzles=set(_as_ids(persisted.get("solvedPuzzles"))),
            hint_usage=0 if fresh_start else _as_count(persisted.get("hintUsage")),
            auto_advance=_as_bool(persisted.get("autoAdvance"), auto_advance),
            persisted_at=persisted.get("persistedAt") if isinstance(persisted.get("persistedAt"), str) else None,
        )
        if persisted:
            logger.info(f"Restored session for {collection_id} at puzzle {puzzle.id}")

    def _index_of(self, puzzle_id: Optional[str]) -> int:
        if puzzle_id:
            for index, puzzle in enumerate(self.puzzles):
                if puzzle.id == puzzle_id:
                    return index
            logger.warning(f"Unknown puzzle id {puzzle_id!r}; starting with the first puzzle")
        return 0

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def controller(self) -> PuzzleController:
        return self._controller

    def get_current_puzzle(self) -> PuzzleDefinition:
        return self.puzzles[self._current_index]

    def get_state(self) -> PuzzleSessionState:
        """Snapshot of the current session state."""
        return self._state.snapshot()

    def get_solved_puzzle_ids(self) -> List[str]:
        """Solved puzzle ids in collection order, unknown ids last."""
        solved = self._state.solved_puzzles
        known = [puzzle.id for puzzle in self.puzzles if puzzle.id in solved]
        return known + sorted(solved.difference(known))

    def peek_next_move(self) -> Optional[str]:
        return self._controller.peek_next_move()

    def is_last_puzzle(self) -> bool:
        return self._current_index + 1 >= len(self.puzzles)

    def handle_move(self, san: str) -> MoveEvaluation:
        """Submit a validated SAN move for the current puzzle."""
        result = self._controller.handle_move(san)
        self._state.move_cursor = result.cursor
        self._state.attempts = self._controller.attempts

        if not result.success:
            self._persist_state()
            return MoveEvaluation(accepted=False, complete=False, cursor=result.cursor)

        if result.complete:
            self._state.solved_puzzles.add(self.get_current_puzzle().id)
        self._persist_state()
        return MoveEvaluation(accepted=True, complete=result.complete, cursor=result.cursor)

    def reset_current_puzzle(self) -> None:
        """Restart the current puzzle and clear its counters."""
        self._controller.reset()
        self._state.move_cursor = 0
        self._state.attempts = 0
        self._state.hint_usage = 0
        self._persist_state()

    def record_hint_usage(self) -> int:
        """Count one hint against the current puzzle and return the new total."""
        self._state.hint_usage += 1
        self._persist_state()
        return self._state.hint_usage

    def auto_advance_if_needed(self) -> bool:
        if not self._state.auto_advance:
            return False
        return self.advance_to_next_puzzle()

    def advance_to_next_puzzle(self) -> bool:
        """Open the next puzzle of the collection; False when already on the last one."""
        if self.is_last_puzzle():
            return False
        puzzle = self.puzzles[self._current_index + 1]
        self._controller = PuzzleController(puzzle)
        self._current_index += 1
        self._state.current_puzzle_id = puzzle.id
        logger.debug(f"Advanced {self.collection_id} to puzzle {puzzle.id}")
        self.reset_current_puzzle()
        return True

    def destroy(self) -> None:
        """Tear down the session and forget its persisted progress."""
        self._controller.reset()
        self.store.clear(self.persistence_key)
        logger.info(f"Cleared persisted session for {self.collection_id}")

    def _load_persisted_state(self) -> Optional[Dict[str, Any]]:
        return self.store.load(self.persistence_key)

    def _persist_state(self) -> SaveResult:
        persisted_at = datetime.now(timezone.utc).isoformat()
        payload = {
            "currentPuzzleId": self._state.current_puzzle_id,
            "solvedPuzzles": self.get_solved_puzzle_ids(),
            "autoAdvance": self._state.auto_advance,
            "attempts": self._state.attempts,
            "hintUsage": self._state.hint_usage,
            "persistedAt": persisted_at,
        }
        result = self.store.save(self.persistence_key, payload)
        if result.persisted:
            self._state.persisted_at = persisted_at
        else:
            logger.warning(f"Session {self.collection_id} not persisted: {result.error}")
            if self._on_persistence_warning is not None:
                self._on_persistence_warning(result.error)
        return result


def _as_count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return 0
    return value


def _as_bool(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _as_ids(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]
