"""
Chess Puzzle Mode - a puzzle-solving engine for interactive chessboards.

This package validates a player's candidate moves against one or more winning
lines, tracks solving progress across a collection of tactical puzzles,
computes hints from the expected next move, and persists progress so a player
can resume later.
"""

__version__ = "0.3.0"
__author__ = "Chess Puzzle Mode Team"
__license__ = "MIT"

# Core imports
from .core.models import (
    PuzzleCollection,
    PuzzleConfigurationError,
    PuzzleDefinition,
    PuzzleDifficulty,
    PuzzleModeConfig,
    PuzzleSessionState,
    PuzzleVariant,
)
from .core.storage import JsonFileStorage, MemoryStorage, SessionStore
from .puzzle.controller import PuzzleController
from .puzzle.session import PuzzleSessionManager
from .puzzle.hints import PuzzleHintService
from .puzzle.mode import PuzzleMode
from .cli import main

__all__ = [
    "PuzzleCollection",
    "PuzzleConfigurationError",
    "PuzzleDefinition",
    "PuzzleDifficulty",
    "PuzzleModeConfig",
    "PuzzleSessionState",
    "PuzzleVariant",
    "JsonFileStorage",
    "MemoryStorage",
    "SessionStore",
    "PuzzleController",
    "PuzzleSessionManager",
    "PuzzleHintService",
    "PuzzleMode",
    "main",
]
