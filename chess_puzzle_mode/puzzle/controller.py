"""
Move matching for a single puzzle.

A puzzle is solved by playing any of its winning lines: the canonical
solution or one of its variants. The controller keeps every line that is
still consistent with the moves played so far and reports completion as soon
as one of them is fully consumed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..core.models import PuzzleConfigurationError, PuzzleDefinition, PuzzleVariant

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_move(move: str) -> str:
    """Trim a SAN string and collapse internal whitespace; decorations are kept."""
    return _WHITESPACE.sub(" ", move.strip())


@dataclass(frozen=True)
class MoveResult:
    """Outcome of submitting one move to a controller."""

    success: bool
    complete: bool
    cursor: int


class PuzzleController:
    """
    Validates moves for one puzzle against its winning lines.

    Lines are stored canonical first. Matching is literal after whitespace
    normalization: check, mate and promotion markers are part of the key and
    no SAN equivalence (such as `e4` against `e2e4`) is attempted.
    """

    def __init__(self, puzzle: PuzzleDefinition, variants: Optional[Iterable[PuzzleVariant]] = None):
        """
        Initialize the controller.

        Args:
            puzzle: Puzzle whose canonical solution is the first line
            variants: Alternate lines; defaults to the puzzle's own variants

        Raises:
            PuzzleConfigurationError: If the solution or a variant has no moves
        """
        if not puzzle.solution:
            raise PuzzleConfigurationError(f"Puzzle {puzzle.id} must include at least one solution move")

        variants = list(puzzle.variants if variants is None else variants)
        for variant in variants:
            if not variant.moves:
                raise PuzzleConfigurationError(f"Variant {variant.id} of puzzle {puzzle.id} has no moves")

        self.puzzle = puzzle
        self._lines: List[Tuple[str, ...]] = [tuple(puzzle.solution)] + [tuple(v.moves) for v in variants]
        self._normalized: List[Tuple[str, ...]] = [
            tuple(normalize_move(move) for move in line) for line in self._lines
        ]
        self.reset()

    def reset(self) -> None:
        """Return to the starting position of the puzzle."""
        self._cursor = 0
        self._attempts = 0
        self._solved = False
        self._active_lines: Tuple[int, ...] = tuple(range(len(self._normalized)))

    @property
    def cursor(self) -> int:
        """Number of moves accepted so far."""
        return self._cursor

    @property
    def attempts(self) -> int:
        """Number of rejected moves since the last reset."""
        return self._attempts

    @property
    def is_solved(self) -> bool:
        return self._solved

    @property
    def active_lines(self) -> Tuple[int, ...]:
        """Indexes of lines still consistent with the moves played (0 is canonical)."""
        return self._active_lines

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def handle_move(self, move: str) -> MoveResult:
        """
        Submit the next move of the attempt.

        A wrong move increments the attempt counter but keeps the cursor, so
        only the offending move has to be retried.
        """
        if self._solved:
            return MoveResult(success=False, complete=True, cursor=self._cursor)

        normalized = normalize_move(move)
        matching = tuple(
            index for index in self._active_lines
            if self._cursor < len(self._normalized[index])
            and self._normalized[index][self._cursor] == normalized
        )

        if not matching:
            self._attempts += 1
            logger.debug(f"Rejected {normalized!r} for {self.puzzle.id} at move {self._cursor + 1}")
            return MoveResult(success=False, complete=False, cursor=self._cursor)

        self._active_lines = matching
        self._cursor += 1

        if any(len(self._normalized[index]) == self._cursor for index in matching):
            self._solved = True
            logger.debug(f"Puzzle {self.puzzle.id} solved in {self._cursor} moves")
            return MoveResult(success=True, complete=True, cursor=self._cursor)

        return MoveResult(success=True, complete=False, cursor=self._cursor)

    def peek_next_move(self) -> Optional[str]:
        """Canonical line's move at the cursor, or None when solved or past its end."""
        canonical = self._lines[0]
        if self._solved or self._cursor >= len(canonical):
            return None
        return canonical[self._cursor]
