"""
Core data models for Chess Puzzle Mode.

This module defines the fundamental data structures shared by the puzzle
engine: puzzle definitions and collections, the persisted session state and
the host-facing configuration object.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

import chess


class PuzzleConfigurationError(Exception):
    """Raised when a puzzle or collection cannot be used to start a session."""
    pass


class PuzzleDifficulty(Enum):
    """Author-assigned difficulty of a puzzle."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @classmethod
    def order(cls) -> List[PuzzleDifficulty]:
        """Difficulties from easiest to hardest."""
        return [cls.BEGINNER, cls.INTERMEDIATE, cls.ADVANCED]


@dataclass(frozen=True)
class PuzzleVariant:
    """An alternate winning line accepted as equally correct."""

    id: str
    label: str
    moves: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "moves", tuple(self.moves))


@dataclass(frozen=True)
class PuzzleDefinition:
    """A single tactical puzzle with its canonical solution line."""

    id: str                                     # Unique within a collection
    title: str                                  # Human-readable title
    fen: str                                    # Starting position
    solution: Tuple[str, ...] = ()              # Canonical SAN line
    variants: Tuple[PuzzleVariant, ...] = ()    # Alternate winning lines
    difficulty: PuzzleDifficulty = PuzzleDifficulty.BEGINNER
    tags: Tuple[str, ...] = ()
    hint: Optional[str] = None                  # Authored hint text
    author: Optional[str] = None
    source_pgn: Optional[str] = None

    def __post_init__(self):
        """Validate the puzzle after initialization."""
        if not self.id:
            raise ValueError("Puzzle id cannot be empty")

        try:
            chess.Board(self.fen)
        except ValueError as e:
            raise ValueError(f"Invalid FEN for puzzle {self.id}: {self.fen} - {e}")

        if isinstance(self.difficulty, str):
            object.__setattr__(self, "difficulty", PuzzleDifficulty(self.difficulty))
        object.__setattr__(self, "solution", tuple(self.solution))
        object.__setattr__(self, "variants", tuple(self.variants))
        object.__setattr__(self, "tags", tuple(self.tags))

    @property
    def side_to_move(self) -> chess.Color:
        """Color to move in the starting position."""
        return chess.Board(self.fen).turn


@dataclass(frozen=True)
class PuzzleCollection:
    """An ordered, named set of puzzles."""

    id: str
    title: str
    description: Optional[str] = None
    puzzles: Tuple[PuzzleDefinition, ...] = ()

    def __post_init__(self):
        """Validate that puzzle ids are unique."""
        object.__setattr__(self, "puzzles", tuple(self.puzzles))
        seen: Set[str] = set()
        for puzzle in self.puzzles:
            if puzzle.id in seen:
                raise ValueError(f"Duplicate puzzle id in collection {self.id}: {puzzle.id}")
            seen.add(puzzle.id)

    def get_puzzle(self, puzzle_id: str) -> Optional[PuzzleDefinition]:
        """Look up a puzzle by id."""
        for puzzle in self.puzzles:
            if puzzle.id == puzzle_id:
                return puzzle
        return None


@dataclass
class PuzzleSessionState:
    """Progress through a collection, persisted between sessions."""

    collection_id: str
    current_puzzle_id: str
    move_cursor: int = 0                       # Moves accepted so far
    attempts: int = 0                          # Incorrect submissions since last reset
    solved_puzzles: Set[str] = field(default_factory=set)
    hint_usage: int = 0                        # Hints requested for the active puzzle
    auto_advance: bool = True
    persisted_at: Optional[str] = None         # ISO timestamp of the last durable write

    def snapshot(self) -> PuzzleSessionState:
        """Independent copy safe to hand to callers."""
        return replace(self, solved_puzzles=set(self.solved_puzzles))


@dataclass(frozen=True)
class CompletionSummary:
    """Summary passed to the host when a puzzle is solved."""

    puzzle_id: str
    attempts: int
    duration_ms: Optional[int] = None


@dataclass
class PuzzleModeConfig:
    """Host configuration for a puzzle session."""

    collection_id: str
    puzzles: List[PuzzleDefinition] = field(default_factory=list)
    auto_advance: bool = True
    allow_hints: bool = True
    start_puzzle_id: Optional[str] = None

    # Host callbacks
    on_complete: Optional[Callable[[CompletionSummary], None]] = None
    on_puzzle_event: Optional[Callable[[Any], None]] = None

    @classmethod
    def for_collection(cls, collection: PuzzleCollection, **kwargs: Any) -> PuzzleModeConfig:
        """Create a config that plays every puzzle of a collection."""
        return cls(collection_id=collection.id, puzzles=list(collection.puzzles), **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            field.name: getattr(self, field.name)
            for field in self.__dataclass_fields__.values()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PuzzleModeConfig:
        """Create config from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
