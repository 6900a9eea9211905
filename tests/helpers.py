"""Shared fixtures for the puzzle mode tests."""

from chess_puzzle_mode.core.models import PuzzleDefinition, PuzzleDifficulty, PuzzleVariant
from chess_puzzle_mode.core.storage import MemoryStorage

ITALIAN_FEN = "r1bqkbnr/pppp1ppp/2n5/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 2 3"
KINGS_FEN = "8/8/8/8/8/8/8/K6k w - - 0 1"


def make_puzzle(puzzle_id="mate-in-two", solution=("Bxf7+", "Qxd8+"), fen=ITALIAN_FEN, **kwargs):
    """Build a puzzle with sensible defaults."""
    kwargs.setdefault("title", puzzle_id.replace("-", " ").title())
    kwargs.setdefault("difficulty", PuzzleDifficulty.INTERMEDIATE)
    return PuzzleDefinition(id=puzzle_id, fen=fen, solution=list(solution), **kwargs)


def make_variant(variant_id, moves, label=None):
    return PuzzleVariant(id=variant_id, label=label or variant_id, moves=list(moves))


class FlakyStorage(MemoryStorage):
    """Memory backend whose writes can be switched to fail after the probe."""

    def __init__(self, error="quota exceeded"):
        super().__init__()
        self.fail_writes = False
        self.reject_writes = False
        self.error = error
        self.write_calls = 0

    def set(self, key, value):
        self.write_calls += 1
        if self.fail_writes:
            raise OSError(self.error)
        if self.reject_writes:
            return False
        return super().set(key, value)


class BrokenStorage:
    """Backend that cannot do anything."""

    def get(self, key):
        raise OSError("storage disabled")

    def set(self, key, value):
        raise OSError("storage disabled")

    def remove(self, key):
        raise OSError("storage disabled")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now
