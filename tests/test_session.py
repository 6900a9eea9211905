"""
Unit tests for the puzzle session manager.

Tests traversal of a collection, resuming from stored progress and behaviour
when storage cannot keep up.
"""

import json
import unittest

from chess_puzzle_mode.core.models import PuzzleConfigurationError
from chess_puzzle_mode.core.storage import MemoryStorage, SessionStore
from chess_puzzle_mode.puzzle.session import MoveEvaluation, PuzzleSessionManager, session_key
from tests.helpers import KINGS_FEN, FlakyStorage, make_puzzle, make_variant


def two_puzzles():
    return [
        make_puzzle("p1"),
        make_puzzle("p2", solution=["Ka2"], fen=KINGS_FEN),
    ]


class PuzzleSessionManagerTests(unittest.TestCase):
    """Test PuzzleSessionManager traversal and counters."""

    def setUp(self):
        self.backend = MemoryStorage()
        self.store = SessionStore(self.backend)
        self.puzzles = two_puzzles()

    def create_manager(self, **kwargs):
        kwargs.setdefault("store", self.store)
        return PuzzleSessionManager("daily", self.puzzles, **kwargs)

    def stored_payload(self):
        return json.loads(self.backend.get(session_key("daily")))

    def test_requires_puzzles(self):
        with self.assertRaises(PuzzleConfigurationError):
            PuzzleSessionManager("daily", [], store=self.store)

    def test_every_puzzle_checked_at_construction(self):
        """Test an unplayable later puzzle is rejected before play starts."""
        unsolvable = [make_puzzle("p1"), make_puzzle("p2", solution=[], fen=KINGS_FEN)]
        with self.assertRaises(PuzzleConfigurationError) as context:
            PuzzleSessionManager("daily", unsolvable, store=self.store)
        self.assertIn("p2", str(context.exception))

        bad_variant = [make_puzzle("p1"), make_puzzle("p2", variants=[make_variant("empty", [])])]
        with self.assertRaises(PuzzleConfigurationError):
            PuzzleSessionManager("daily", bad_variant, store=self.store)

    def test_advance_reaches_every_puzzle(self):
        manager = self.create_manager()
        self.assertTrue(manager.advance_to_next_puzzle())
        self.assertEqual(manager.current_index, 1)
        self.assertEqual(manager.controller.puzzle.id, "p2")
        self.assertEqual(manager.get_state().current_puzzle_id, "p2")

    def test_starts_at_first_puzzle(self):
        manager = self.create_manager()
        state = manager.get_state()

        self.assertEqual(manager.get_current_puzzle().id, "p1")
        self.assertEqual(state.collection_id, "daily")
        self.assertEqual(state.attempts, 0)
        self.assertEqual(state.solved_puzzles, set())
        self.assertTrue(state.auto_advance)
        self.assertIsNone(state.persisted_at)

    def test_session_key(self):
        self.assertEqual(session_key("daily"), "puzzle-mode:daily")

    def test_rejected_move_counts_attempt(self):
        manager = self.create_manager()

        evaluation = manager.handle_move("Nc3")

        self.assertEqual(evaluation, MoveEvaluation(accepted=False, complete=False, cursor=0))
        self.assertEqual(manager.get_state().attempts, 1)
        self.assertEqual(self.stored_payload()["attempts"], 1)

    def test_completion_marks_solved(self):
        manager = self.create_manager()
        manager.handle_move("Bxf7+")

        evaluation = manager.handle_move("Qxd8+")

        self.assertTrue(evaluation.accepted)
        self.assertTrue(evaluation.complete)
        self.assertEqual(manager.get_solved_puzzle_ids(), ["p1"])
        self.assertEqual(manager.get_state().move_cursor, 2)

    def test_payload_keys(self):
        """Test the stored document uses the documented field names."""
        manager = self.create_manager()
        manager.handle_move("Nc3")

        payload = self.stored_payload()

        self.assertEqual(
            set(payload),
            {"currentPuzzleId", "solvedPuzzles", "autoAdvance", "attempts", "hintUsage", "persistedAt"},
        )
        self.assertEqual(payload["currentPuzzleId"], "p1")
        self.assertEqual(manager.get_state().persisted_at, payload["persistedAt"])

    def test_resume_restores_progress(self):
        """Test a new manager picks up where the previous one stopped."""
        manager = self.create_manager()
        manager.handle_move("Bxf7+")
        manager.handle_move("Qxd8+")
        manager.advance_to_next_puzzle()
        manager.handle_move("Kb1")
        manager.record_hint_usage()

        resumed = self.create_manager()
        state = resumed.get_state()

        self.assertEqual(resumed.get_current_puzzle().id, "p2")
        self.assertEqual(resumed.current_index, 1)
        self.assertEqual(state.solved_puzzles, {"p1"})
        self.assertEqual(state.attempts, 1)
        self.assertEqual(state.hint_usage, 1)
        self.assertEqual(state.move_cursor, 0)

    def test_explicit_start_resets_counters(self):
        """Test choosing another puzzle clears counters but keeps solved puzzles."""
        manager = self.create_manager()
        manager.handle_move("Nc3")
        manager.handle_move("Bxf7+")
        manager.handle_move("Qxd8+")
        manager.record_hint_usage()

        resumed = self.create_manager(start_puzzle_id="p2")
        state = resumed.get_state()

        self.assertEqual(state.current_puzzle_id, "p2")
        self.assertEqual(state.attempts, 0)
        self.assertEqual(state.hint_usage, 0)
        self.assertEqual(state.solved_puzzles, {"p1"})

    def test_explicit_start_on_persisted_puzzle_keeps_counters(self):
        manager = self.create_manager()
        manager.handle_move("Nc3")

        resumed = self.create_manager(start_puzzle_id="p1")

        self.assertEqual(resumed.get_state().attempts, 1)

    def test_unknown_start_falls_back_to_first(self):
        with self.assertLogs("chess_puzzle_mode.puzzle.session", level="WARNING"):
            manager = self.create_manager(start_puzzle_id="missing")
        self.assertEqual(manager.get_current_puzzle().id, "p1")

    def test_removed_persisted_puzzle_starts_fresh(self):
        """Test counters of a puzzle no longer in the collection are not carried over."""
        self.backend.set(session_key("daily"), json.dumps({
            "currentPuzzleId": "retired",
            "solvedPuzzles": ["p1"],
            "attempts": 4,
            "hintUsage": 2,
        }))

        with self.assertLogs("chess_puzzle_mode.puzzle.session", level="WARNING"):
            manager = self.create_manager()
        state = manager.get_state()

        self.assertEqual(state.current_puzzle_id, "p1")
        self.assertEqual(state.attempts, 0)
        self.assertEqual(state.hint_usage, 0)
        self.assertEqual(state.solved_puzzles, {"p1"})

    def test_advance(self):
        manager = self.create_manager()
        manager.handle_move("Nc3")
        manager.record_hint_usage()

        self.assertTrue(manager.advance_to_next_puzzle())
        state = manager.get_state()
        self.assertEqual(state.current_puzzle_id, "p2")
        self.assertEqual(state.attempts, 0)
        self.assertEqual(state.hint_usage, 0)
        self.assertTrue(manager.is_last_puzzle())

        self.assertFalse(manager.advance_to_next_puzzle())
        self.assertEqual(manager.get_current_puzzle().id, "p2")

    def test_auto_advance_disabled(self):
        manager = self.create_manager(auto_advance=False)
        manager.handle_move("Bxf7+")
        manager.handle_move("Qxd8+")

        self.assertFalse(manager.auto_advance_if_needed())
        self.assertEqual(manager.get_current_puzzle().id, "p1")

    def test_auto_advance_enabled(self):
        manager = self.create_manager()
        self.assertTrue(manager.auto_advance_if_needed())
        self.assertEqual(manager.get_current_puzzle().id, "p2")

    def test_persisted_auto_advance_wins(self):
        self.create_manager(auto_advance=False).handle_move("Nc3")
        resumed = self.create_manager(auto_advance=True)
        self.assertFalse(resumed.get_state().auto_advance)

    def test_reset_clears_counters(self):
        manager = self.create_manager()
        manager.handle_move("Bxf7+")
        manager.handle_move("Nc3")
        manager.record_hint_usage()

        manager.reset_current_puzzle()

        state = manager.get_state()
        self.assertEqual((state.move_cursor, state.attempts, state.hint_usage), (0, 0, 0))
        self.assertEqual(manager.peek_next_move(), "Bxf7+")

    def test_get_state_is_a_copy(self):
        manager = self.create_manager()
        manager.get_state().solved_puzzles.add("p2")
        self.assertEqual(manager.get_solved_puzzle_ids(), [])

    def test_solved_ids_in_collection_order(self):
        self.backend.set(session_key("daily"), json.dumps({"solvedPuzzles": ["zz-retired", "p2", "p1"]}))
        manager = self.create_manager()
        self.assertEqual(manager.get_solved_puzzle_ids(), ["p1", "p2", "zz-retired"])

    def test_malformed_payload_uses_defaults(self):
        self.backend.set(session_key("daily"), json.dumps({
            "currentPuzzleId": 7,
            "solvedPuzzles": "p1",
            "attempts": -3,
            "hintUsage": "two",
            "autoAdvance": "no",
        }))

        state = self.create_manager().get_state()

        self.assertEqual(state.current_puzzle_id, "p1")
        self.assertEqual(state.solved_puzzles, set())
        self.assertEqual(state.attempts, 0)
        self.assertEqual(state.hint_usage, 0)
        self.assertTrue(state.auto_advance)

    def test_destroy_forgets_progress(self):
        manager = self.create_manager()
        manager.handle_move("Nc3")

        manager.destroy()

        self.assertIsNone(self.backend.get(session_key("daily")))
        self.assertEqual(self.create_manager().get_state().attempts, 0)


class SessionPersistenceFailureTests(unittest.TestCase):
    """Test the session keeps working when writes are not durable."""

    def setUp(self):
        self.backend = FlakyStorage()
        self.store = SessionStore(self.backend)
        self.warnings = []
        self.manager = PuzzleSessionManager(
            "daily",
            two_puzzles(),
            store=self.store,
            on_persistence_warning=self.warnings.append,
        )

    def test_warning_per_failed_write(self):
        self.backend.fail_writes = True

        with self.assertLogs("chess_puzzle_mode.puzzle.session", level="WARNING"):
            self.manager.handle_move("Nc3")
            self.manager.handle_move("Bxf7+")

        self.assertEqual(self.warnings, ["quota exceeded", "quota exceeded"])
        self.assertIsNone(self.manager.get_state().persisted_at)
        self.assertEqual(self.manager.get_state().attempts, 1)

    def test_progress_survives_in_memory(self):
        """Test a resumed manager on the same store sees the unsaved progress."""
        self.backend.fail_writes = True
        with self.assertLogs("chess_puzzle_mode.puzzle.session", level="WARNING"):
            self.manager.handle_move("Nc3")

        resumed = PuzzleSessionManager("daily", two_puzzles(), store=self.store)

        self.assertEqual(resumed.get_state().attempts, 1)

    def test_persisted_at_advances_only_on_success(self):
        self.manager.handle_move("Nc3")
        saved_at = self.manager.get_state().persisted_at
        self.assertIsNotNone(saved_at)

        self.backend.reject_writes = True
        with self.assertLogs("chess_puzzle_mode.puzzle.session", level="WARNING"):
            self.manager.handle_move("Nc3")

        self.assertEqual(self.manager.get_state().persisted_at, saved_at)
        self.assertEqual(self.warnings, ["Storage backend rejected the write"])

    def test_memory_only_store_warns(self):
        warnings = []
        manager = PuzzleSessionManager("daily", two_puzzles(), on_persistence_warning=warnings.append)

        with self.assertLogs("chess_puzzle_mode.puzzle.session", level="WARNING"):
            manager.record_hint_usage()

        self.assertEqual(len(warnings), 1)
        self.assertEqual(manager.get_state().hint_usage, 1)


if __name__ == "__main__":
    unittest.main()
