"""
Hints for the active puzzle.

Hints are derived from the next move of the canonical line without a rules
engine: a text nudge, or the destination square of that move for the board to
highlight. Every request counts as one hint, whether or not it has content.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import chess

from ..core.models import PuzzleDefinition
from .session import PuzzleSessionManager

GENERIC_HINT = "Look for forcing moves near the king."

_SQUARE = re.compile(r"[a-h][1-8]")
_DECORATIONS = re.compile(r"[+#?!]")


class HintType(Enum):
    """Kinds of hints a host can request."""

    TEXT = "text"
    ORIGIN_HIGHLIGHT = "origin-highlight"


@dataclass(frozen=True)
class HintResult:
    """A hint and the usage count after requesting it."""

    type: HintType
    puzzle: PuzzleDefinition
    hint_usage: int
    message: Optional[str] = None          # Text hints
    target_square: Optional[str] = None    # Highlight hints

    @property
    def payload(self) -> Optional[str]:
        """Message for text hints, square for highlight hints."""
        return self.message if self.type == HintType.TEXT else self.target_square


def text_hint(puzzle: PuzzleDefinition, next_move: Optional[str]) -> str:
    """Authored hint if present, else a nudge toward the next move, else a generic one."""
    if puzzle.hint and puzzle.hint.strip():
        return puzzle.hint.strip()
    if next_move:
        return f"Consider candidate moves similar to {next_move}."
    return GENERIC_HINT


def castle_target(puzzle: PuzzleDefinition, queenside: bool) -> str:
    """
    King destination for castling.

    The side is read from the puzzle's starting position, not the live
    board, so it is only right while the solver is the side to move there.
    """
    rank = "1" if puzzle.side_to_move == chess.WHITE else "8"
    return ("c" if queenside else "g") + rank


def extract_target_square(san: str, puzzle: PuzzleDefinition) -> Optional[str]:
    """
    Destination square of a SAN move, or None when none can be read.

    Examples:
        "Nbxd7" -> "d7", "e8=Q+" -> "e8", "O-O" (white to move) -> "g1"
    """
    cleaned = _DECORATIONS.sub("", san).strip()
    if cleaned.startswith("O-O-O"):
        return castle_target(puzzle, queenside=True)
    if cleaned.startswith("O-O"):
        return castle_target(puzzle, queenside=False)
    squares = _SQUARE.findall(cleaned)
    return squares[-1] if squares else None


class PuzzleHintService:
    """Produces hints for the session's current puzzle."""

    def __init__(self, session: PuzzleSessionManager):
        self.session = session

    def request_hint(self, hint_type: Union[HintType, str] = HintType.TEXT) -> Optional[HintResult]:
        """
        Build a hint for the current puzzle and record its usage.

        Args:
            hint_type: "text" or "origin-highlight"

        Returns:
            The hint, or None when there is no current puzzle
        """
        hint_type = HintType(hint_type)
        puzzle = self.session.get_current_puzzle()
        if puzzle is None:
            return None

        next_move = self.session.peek_next_move()
        hint_usage = self.session.record_hint_usage()

        if hint_type == HintType.ORIGIN_HIGHLIGHT:
            target = extract_target_square(next_move, puzzle) if next_move else None
            return HintResult(type=hint_type, puzzle=puzzle, hint_usage=hint_usage, target_square=target)

        return HintResult(
            type=hint_type,
            puzzle=puzzle,
            hint_usage=hint_usage,
            message=text_hint(puzzle, next_move),
        )
