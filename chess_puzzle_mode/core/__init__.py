"""
Core package for Chess Puzzle Mode.

This package contains the fundamental components shared by the puzzle engine:
data models, configuration and session storage.
"""

from .models import (
    CompletionSummary,
    PuzzleCollection,
    PuzzleConfigurationError,
    PuzzleDefinition,
    PuzzleDifficulty,
    PuzzleModeConfig,
    PuzzleSessionState,
    PuzzleVariant,
)

from .storage import (
    JsonFileStorage,
    MemoryStorage,
    SaveResult,
    SessionStore,
    StorageBackend,
    StorageError,
    probe_storage,
)

__all__ = [
    # Data models
    "CompletionSummary",
    "PuzzleCollection",
    "PuzzleConfigurationError",
    "PuzzleDefinition",
    "PuzzleDifficulty",
    "PuzzleModeConfig",
    "PuzzleSessionState",
    "PuzzleVariant",

    # Storage
    "JsonFileStorage",
    "MemoryStorage",
    "SaveResult",
    "SessionStore",
    "StorageBackend",
    "StorageError",
    "probe_storage",
]
