"""
Unit tests for puzzle hints.

Tests target square extraction from SAN and the hint service's text and
highlight hints.
"""

import unittest

from chess_puzzle_mode.core.storage import MemoryStorage, SessionStore
from chess_puzzle_mode.puzzle.hints import (
    GENERIC_HINT,
    HintResult,
    HintType,
    PuzzleHintService,
    extract_target_square,
    text_hint,
)
from chess_puzzle_mode.puzzle.session import PuzzleSessionManager
from tests.helpers import make_puzzle, make_variant

CASTLING_FEN_WHITE = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
CASTLING_FEN_BLACK = "r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1"


class ExtractTargetSquareTests(unittest.TestCase):
    """Test reading the destination square from SAN."""

    def setUp(self):
        self.puzzle = make_puzzle()

    def test_piece_moves(self):
        self.assertEqual(extract_target_square("Nbxd7", self.puzzle), "d7")
        self.assertEqual(extract_target_square("R1e2", self.puzzle), "e2")
        self.assertEqual(extract_target_square("Qh4xe1", self.puzzle), "e1")

    def test_decorations_and_promotion(self):
        self.assertEqual(extract_target_square("e8=Q", self.puzzle), "e8")
        self.assertEqual(extract_target_square("Bxf7+", self.puzzle), "f7")
        self.assertEqual(extract_target_square("Qxd8#!?", self.puzzle), "d8")

    def test_castling_uses_side_to_move(self):
        white = make_puzzle("white-castles", ["O-O"], fen=CASTLING_FEN_WHITE)
        black = make_puzzle("black-castles", ["O-O-O"], fen=CASTLING_FEN_BLACK)

        self.assertEqual(extract_target_square("O-O", white), "g1")
        self.assertEqual(extract_target_square("O-O-O+", white), "c1")
        self.assertEqual(extract_target_square("O-O", black), "g8")
        self.assertEqual(extract_target_square("O-O-O", black), "c8")

    def test_unreadable(self):
        self.assertIsNone(extract_target_square("resigns", self.puzzle))


class TextHintTests(unittest.TestCase):

    def test_authored_hint_first(self):
        puzzle = make_puzzle(hint="  The f7 pawn is weak. ")
        self.assertEqual(text_hint(puzzle, "Bxf7+"), "The f7 pawn is weak.")

    def test_blank_authored_hint_ignored(self):
        puzzle = make_puzzle(hint="   ")
        self.assertEqual(text_hint(puzzle, "Bxf7+"), "Consider candidate moves similar to Bxf7+.")

    def test_generic_without_next_move(self):
        self.assertEqual(text_hint(make_puzzle(), None), GENERIC_HINT)


class PuzzleHintServiceTests(unittest.TestCase):
    """Test PuzzleHintService against a live session."""

    def setUp(self):
        puzzle = make_puzzle(variants=[make_variant("knight-line", ["Bxf7+", "Nxe5+"])])
        self.session = PuzzleSessionManager("hints", [puzzle], store=SessionStore(MemoryStorage()))
        self.service = PuzzleHintService(self.session)

    def test_text_hint(self):
        hint = self.service.request_hint()

        self.assertIsInstance(hint, HintResult)
        self.assertEqual(hint.type, HintType.TEXT)
        self.assertEqual(hint.message, "Consider candidate moves similar to Bxf7+.")
        self.assertIsNone(hint.target_square)
        self.assertEqual(hint.payload, hint.message)
        self.assertEqual(hint.hint_usage, 1)

    def test_highlight_hint(self):
        hint = self.service.request_hint("origin-highlight")

        self.assertEqual(hint.type, HintType.ORIGIN_HIGHLIGHT)
        self.assertEqual(hint.target_square, "f7")
        self.assertEqual(hint.payload, "f7")

    def test_every_request_counts(self):
        self.service.request_hint(HintType.TEXT)
        self.service.request_hint(HintType.ORIGIN_HIGHLIGHT)
        hint = self.service.request_hint(HintType.TEXT)

        self.assertEqual(hint.hint_usage, 3)
        self.assertEqual(self.session.get_state().hint_usage, 3)

    def test_hints_follow_canonical_line(self):
        """Test hints point at the canonical move even when playing a variant."""
        self.session.handle_move("Bxf7+")
        hint = self.service.request_hint("origin-highlight")
        self.assertEqual(hint.target_square, "d8")

    def test_solved_puzzle_gets_empty_hints(self):
        """Test hints after a solve still count but carry no move."""
        self.session.handle_move("Bxf7+")
        self.session.handle_move("Qxd8+")

        text = self.service.request_hint("text")
        highlight = self.service.request_hint("origin-highlight")

        self.assertEqual(text.message, GENERIC_HINT)
        self.assertIsNone(highlight.target_square)
        self.assertEqual(highlight.hint_usage, 2)

    def test_unknown_hint_type(self):
        with self.assertRaises(ValueError):
            self.service.request_hint("arrow")


if __name__ == "__main__":
    unittest.main()
