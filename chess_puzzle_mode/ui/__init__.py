"""
UI package for Chess Puzzle Mode.

This package contains terminal presentation helpers built on Rich: board
rendering and event descriptions.
"""

from .board import BoardColors, ChessBoardRenderer, PieceStyle, render_puzzle_board
from .messages import format_event_message

__all__ = [
    "BoardColors",
    "ChessBoardRenderer",
    "PieceStyle",
    "render_puzzle_board",
    "format_event_message",
]
