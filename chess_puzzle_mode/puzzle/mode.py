"""
Host-facing puzzle mode.

`PuzzleMode` is what a board integration talks to. It forwards validated SAN
moves and hint requests to the session manager and hint service, and reports
what happened as events, in this order for a winning move: `puzzle:move`,
`puzzle:complete`, then `puzzle:load` for the next puzzle when auto-advance is
on.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Union

from ..core.models import CompletionSummary, PuzzleDefinition, PuzzleModeConfig, PuzzleSessionState
from ..core.storage import SessionStore
from .events import PuzzleEventType, emit_puzzle_event, resolve_completion_behavior
from .hints import HintResult, HintType, PuzzleHintService
from .session import MoveEvaluation, PuzzleSessionManager

logger = logging.getLogger(__name__)


class PuzzleMode:
    """
    Puzzle session bound to a host configuration.

    Emits `puzzle:load` for the starting puzzle on construction.
    """

    def __init__(
        self,
        config: PuzzleModeConfig,
        store: Optional[SessionStore] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize puzzle mode.

        Args:
            config: Host configuration with puzzles and callbacks
            store: Session store used for progress
            clock: Monotonic clock in seconds, used for solve durations

        Raises:
            PuzzleConfigurationError: If the configuration cannot start a session
        """
        self.config = config
        self._clock = clock
        self.session = PuzzleSessionManager(
            collection_id=config.collection_id,
            puzzles=config.puzzles,
            auto_advance=config.auto_advance,
            allow_hints=config.allow_hints,
            start_puzzle_id=config.start_puzzle_id,
            store=store,
            on_persistence_warning=self._on_persistence_warning,
        )
        self.hints = PuzzleHintService(self.session)
        self._loaded_at = self._clock()
        self._emit_load()

    @property
    def current_puzzle(self) -> PuzzleDefinition:
        return self.session.get_current_puzzle()

    @property
    def state(self) -> PuzzleSessionState:
        return self.session.get_state()

    def submit_move(self, san: str) -> MoveEvaluation:
        """Submit a SAN move already validated by the host's rules engine."""
        puzzle = self.current_puzzle
        evaluation = self.session.handle_move(san)
        state = self.session.get_state()
        self._emit(PuzzleEventType.MOVE, {
            "puzzle_id": puzzle.id,
            "move": san,
            "result": "correct" if evaluation.accepted else "incorrect",
            "cursor": evaluation.cursor,
            "attempts": state.attempts,
        })

        if evaluation.accepted and evaluation.complete:
            self._complete(puzzle, state.attempts)
        return evaluation

    def _complete(self, puzzle: PuzzleDefinition, attempts: int) -> None:
        duration_ms = int(round((self._clock() - self._loaded_at) * 1000))
        summary = CompletionSummary(puzzle_id=puzzle.id, attempts=attempts, duration_ms=duration_ms)
        self._emit(PuzzleEventType.COMPLETE, {
            "puzzle_id": summary.puzzle_id,
            "attempts": summary.attempts,
            "duration_ms": summary.duration_ms,
        })

        behavior = resolve_completion_behavior(self.config)
        if behavior.invoke_callback:
            try:
                self.config.on_complete(summary)
            except Exception:
                logger.exception(f"on_complete callback failed for {puzzle.id}")

        if behavior.auto_advance and self.session.auto_advance_if_needed():
            self._puzzle_changed()

    def request_hint(self, hint_type: Union[HintType, str] = HintType.TEXT) -> Optional[HintResult]:
        """Request a hint; None when hints are disabled for this session."""
        if not self.session.allow_hints:
            logger.debug("Hint requested while hints are disabled")
            return None
        hint = self.hints.request_hint(hint_type)
        if hint is not None:
            self._emit(PuzzleEventType.HINT, {
                "puzzle_id": hint.puzzle.id,
                "hint_type": hint.type.value,
                "hint_payload": hint.payload,
                "hint_usage": hint.hint_usage,
            })
        return hint

    def reset(self) -> None:
        """Restart the current puzzle."""
        self.session.reset_current_puzzle()
        self._puzzle_changed()

    def next_puzzle(self) -> bool:
        """Skip to the next puzzle regardless of auto-advance."""
        if not self.session.advance_to_next_puzzle():
            return False
        self._puzzle_changed()
        return True

    def destroy(self) -> None:
        """End the session and clear its stored progress."""
        self.session.destroy()

    def _puzzle_changed(self) -> None:
        self._loaded_at = self._clock()
        self._emit_load()

    def _emit_load(self) -> None:
        self._emit(PuzzleEventType.LOAD, {
            "collection_id": self.config.collection_id,
            "puzzle": self.current_puzzle,
            "session": self.session.get_state(),
        })

    def _on_persistence_warning(self, error: Optional[str]) -> None:
        self._emit(PuzzleEventType.PERSISTENCE_WARNING, {
            "error": error or "Progress could not be saved",
            "fallback": "memory",
        })

    def _emit(self, event_type: PuzzleEventType, payload: dict) -> None:
        emit_puzzle_event(self.config.on_puzzle_event, event_type, payload)
