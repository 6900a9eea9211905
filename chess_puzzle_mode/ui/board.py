"""
Chess board rendering for the terminal puzzle player.

Renders a position as a Rich panel with Unicode pieces, highlighting the last
move played and any hint square.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Set

import chess
from rich.align import Align
from rich.box import ROUNDED
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


class PieceStyle(Enum):
    """Chess piece display styles."""
    UNICODE = "unicode"
    LETTERS = "letters"


@dataclass
class BoardColors:
    """Color scheme for board rendering."""
    white_square: str = "white"
    black_square: str = "grey23"
    white_piece: str = "bright_white"
    black_piece: str = "grey0"
    highlight_hint: str = "yellow"
    highlight_last_move: str = "green"
    border: str = "cyan"
    coordinates: str = "dim white"


class ChessBoardRenderer:
    """
    Terminal renderer for puzzle positions.

    The board is drawn from the solver's side: flipped when the puzzle starts
    with black to move.
    """

    # Filled glyphs for both sides; color comes from the style
    UNICODE_PIECES: Dict[int, str] = {
        chess.PAWN: "♟",
        chess.ROOK: "♜",
        chess.KNIGHT: "♞",
        chess.BISHOP: "♝",
        chess.QUEEN: "♛",
        chess.KING: "♚",
    }

    def __init__(
        self,
        piece_style: PieceStyle = PieceStyle.UNICODE,
        colors: Optional[BoardColors] = None,
        flip_board: bool = False,
        show_coordinates: bool = True,
    ):
        """
        Initialize the renderer.

        Args:
            piece_style: Style for chess pieces
            colors: Color scheme for the board
            flip_board: If True, display from black's perspective
            show_coordinates: Whether to show file/rank labels
        """
        self.piece_style = piece_style
        self.colors = colors or BoardColors()
        self.flip_board = flip_board
        self.show_coordinates = show_coordinates

    def render_board(
        self,
        board: chess.Board,
        title: str = "",
        last_move: Optional[chess.Move] = None,
        hint_square: Optional[str] = None,
    ) -> Panel:
        """
        Render a position as a Rich Panel.

        Args:
            board: Position to render
            title: Panel title, typically the puzzle title
            last_move: Move whose squares are highlighted
            hint_square: Square name to highlight as a hint, e.g. "e8"

        Returns:
            Rich Panel containing the board
        """
        last_move_squares: Set[chess.Square] = set()
        if last_move is not None:
            last_move_squares = {last_move.from_square, last_move.to_square}
        hint = chess.parse_square(hint_square) if hint_square else None

        table = Table.grid(padding=0)
        columns = 8 + (2 if self.show_coordinates else 0)
        for index in range(columns):
            coordinate_column = self.show_coordinates and index in (0, columns - 1)
            table.add_column(justify="center", width=2 if coordinate_column else 3)

        files = "abcdefgh"[::-1] if self.flip_board else "abcdefgh"
        file_row = ["  ", *(Text(f, style=self.colors.coordinates) for f in files), "  "]

        if self.show_coordinates:
            table.add_row(*file_row)

        ranks = range(1, 9) if self.flip_board else range(8, 0, -1)
        for rank in ranks:
            row = []
            if self.show_coordinates:
                row.append(Text(str(rank), style=self.colors.coordinates))
            for file_char in files:
                square = chess.parse_square(f"{file_char}{rank}")
                row.append(self._render_square(board, square, last_move_squares, hint))
            if self.show_coordinates:
                row.append(Text(str(rank), style=self.colors.coordinates))
            table.add_row(*row)

        if self.show_coordinates:
            table.add_row(*file_row)

        return Panel(
            Align.center(table),
            title=title or None,
            subtitle=self._status_line(board),
            border_style=self.colors.border,
            box=ROUNDED,
            padding=(0, 1),
        )

    def _render_square(
        self,
        board: chess.Board,
        square: chess.Square,
        last_move_squares: Set[chess.Square],
        hint: Optional[chess.Square],
    ) -> Text:
        piece = board.piece_at(square)
        is_light_square = (chess.square_file(square) + chess.square_rank(square)) % 2 == 1

        if square == hint:
            bg_color = self.colors.highlight_hint
        elif square in last_move_squares:
            bg_color = self.colors.highlight_last_move
        elif is_light_square:
            bg_color = self.colors.white_square
        else:
            bg_color = self.colors.black_square

        if piece:
            piece_char = self._get_piece_char(piece)
            piece_color = self.colors.white_piece if piece.color == chess.WHITE else self.colors.black_piece
        else:
            piece_char = " "
            piece_color = "white"

        return Text(f" {piece_char} ", style=f"{piece_color} on {bg_color}")

    def _get_piece_char(self, piece: chess.Piece) -> str:
        if self.piece_style == PieceStyle.LETTERS:
            return piece.symbol()
        return self.UNICODE_PIECES[piece.piece_type]

    def _status_line(self, board: chess.Board) -> str:
        turn = "White" if board.turn == chess.WHITE else "Black"
        if board.is_checkmate():
            return f"Checkmate - {'Black' if board.turn == chess.WHITE else 'White'} wins"
        if board.is_stalemate():
            return "Stalemate"
        if board.is_check():
            return f"{turn} to play - check"
        return f"{turn} to play"


def render_puzzle_board(
    board: chess.Board,
    title: str = "",
    flip_board: bool = False,
    last_move: Optional[chess.Move] = None,
    hint_square: Optional[str] = None,
) -> Panel:
    """Render a position with the default renderer."""
    renderer = ChessBoardRenderer(flip_board=flip_board)
    return renderer.render_board(board, title=title, last_move=last_move, hint_square=hint_square)
