"""
Puzzle events delivered to the host.

Events are plain records with a type and a payload dictionary. Handler
failures are logged and never propagate into the engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..core.models import PuzzleModeConfig

logger = logging.getLogger(__name__)


class PuzzleEventType(Enum):
    """Names of the events emitted during a puzzle session."""

    LOAD = "puzzle:load"
    MOVE = "puzzle:move"
    HINT = "puzzle:hint"
    COMPLETE = "puzzle:complete"
    PERSISTENCE_WARNING = "puzzle:persistence-warning"


@dataclass(frozen=True)
class PuzzleEvent:
    """One event and its payload."""

    type: PuzzleEventType
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.type.value


PuzzleEventHandler = Callable[[PuzzleEvent], None]


def emit_puzzle_event(
    handler: Optional[PuzzleEventHandler],
    event_type: PuzzleEventType,
    payload: Dict[str, Any],
) -> PuzzleEvent:
    """Build an event and hand it to the handler, if any."""
    event = PuzzleEvent(type=event_type, payload=payload)
    if handler is not None:
        try:
            handler(event)
        except Exception:
            logger.exception(f"Puzzle event handler failed for {event.name}")
    return event


@dataclass(frozen=True)
class CompletionBehavior:
    """What the host should do once a puzzle is solved."""

    auto_advance: bool
    stay_on_board: bool
    invoke_callback: bool


def resolve_completion_behavior(config: Optional[PuzzleModeConfig]) -> CompletionBehavior:
    auto_advance = config.auto_advance if config is not None else True
    return CompletionBehavior(
        auto_advance=auto_advance is not False,
        stay_on_board=auto_advance is False,
        invoke_callback=config is not None and callable(config.on_complete),
    )
