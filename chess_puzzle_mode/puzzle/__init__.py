"""
Chess Puzzle Solving Engine

This package validates a player's moves against the winning lines of a
puzzle and manages progress through a collection:
- Controller: move matching over the canonical line and its variants
- Session: attempts, hints, solved set, advancing and persistence
- Hints: text nudges and destination-square highlights
- Mode: the host-facing facade that reports progress as events
"""

from .controller import MoveResult, PuzzleController, normalize_move
from .session import MoveEvaluation, PuzzleSessionManager, session_key
from .hints import HintResult, HintType, PuzzleHintService, extract_target_square
from .events import (
    CompletionBehavior,
    PuzzleEvent,
    PuzzleEventType,
    emit_puzzle_event,
    resolve_completion_behavior,
)
from .mode import PuzzleMode
from .loader import (
    PuzzleCollectionFilters,
    PuzzleCollectionPage,
    load_collection_file,
    load_puzzle_collection,
    normalize_puzzle_collection,
    normalize_puzzle_definition,
)
from .database import demo_collection

__all__ = [
    'MoveResult',
    'PuzzleController',
    'normalize_move',
    'MoveEvaluation',
    'PuzzleSessionManager',
    'session_key',
    'HintResult',
    'HintType',
    'PuzzleHintService',
    'extract_target_square',
    'CompletionBehavior',
    'PuzzleEvent',
    'PuzzleEventType',
    'emit_puzzle_event',
    'resolve_completion_behavior',
    'PuzzleMode',
    'PuzzleCollectionFilters',
    'PuzzleCollectionPage',
    'load_collection_file',
    'load_puzzle_collection',
    'normalize_puzzle_collection',
    'normalize_puzzle_definition',
    'demo_collection',
]
