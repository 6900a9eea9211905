"""
Built-in puzzle collection.

A small set of classic tactical positions used by the terminal player when no
collection file is given. Solutions list both sides' moves in SAN, starting
with the side to move in the FEN.
"""

from __future__ import annotations

from typing import Dict, List

from ..core.models import PuzzleCollection, PuzzleDefinition, PuzzleDifficulty, PuzzleVariant

DEMO_COLLECTION_ID = "demo-tactics"


def _demo_puzzles() -> List[PuzzleDefinition]:
    return [
        PuzzleDefinition(
            id="scholars-mate",
            title="Scholar's Mate",
            fen="r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR w KQkq - 4 4",
            solution=["Qxf7#"],
            difficulty=PuzzleDifficulty.BEGINNER,
            tags=["mate", "opening"],
            hint="The f7 pawn is defended only by the king.",
        ),
        PuzzleDefinition(
            id="fools-mate",
            title="Fool's Mate",
            fen="rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq g3 0 2",
            solution=["Qh4#"],
            difficulty=PuzzleDifficulty.BEGINNER,
            tags=["mate", "opening"],
        ),
        PuzzleDefinition(
            id="back-rank-mate",
            title="Back Rank Mate",
            fen="6k1/5ppp/8/8/8/8/5PPP/4R1K1 w - - 0 1",
            solution=["Re8#"],
            difficulty=PuzzleDifficulty.BEGINNER,
            tags=["mate", "back-rank"],
        ),
        PuzzleDefinition(
            id="two-rooks",
            title="Either Rook Will Do",
            fen="6k1/5ppp/8/8/8/8/5PPP/R3R1K1 w - - 0 1",
            solution=["Re8#"],
            variants=[PuzzleVariant(id="a-file", label="Mate with the a-file rook", moves=["Ra8#"])],
            difficulty=PuzzleDifficulty.INTERMEDIATE,
            tags=["mate", "back-rank"],
        ),
        PuzzleDefinition(
            id="smothered-mate",
            title="Smothered Mate",
            fen="6rk/6pp/8/6N1/8/8/8/6K1 w - - 0 1",
            solution=["Nf7#"],
            difficulty=PuzzleDifficulty.INTERMEDIATE,
            tags=["mate", "knight"],
            hint="The black king is boxed in by its own pieces.",
        ),
        PuzzleDefinition(
            id="doubled-rooks",
            title="Doubled Rooks",
            fen="r5k1/5ppp/8/8/8/4R3/5PPP/4R1K1 w - - 0 1",
            solution=["Re8+", "Rxe8", "Rxe8#"],
            difficulty=PuzzleDifficulty.ADVANCED,
            tags=["mate", "back-rank", "deflection"],
        ),
        PuzzleDefinition(
            id="castle-to-safety",
            title="Castle to Safety",
            fen="r3k2r/pppq1ppp/2npbn2/2b1p3/2B1P3/2NP1N2/PPPQ1PPP/R3K2R w KQkq - 0 1",
            solution=["O-O"],
            difficulty=PuzzleDifficulty.BEGINNER,
            tags=["king-safety"],
        ),
    ]


def demo_collection() -> PuzzleCollection:
    """The built-in demo collection."""
    return PuzzleCollection(
        id=DEMO_COLLECTION_ID,
        title="Demo Tactics",
        description="Classic mates and motifs for trying out puzzle mode",
        puzzles=_demo_puzzles(),
    )


def get_stats() -> Dict[str, int]:
    """Puzzle counts of the demo collection by difficulty."""
    puzzles = demo_collection().puzzles
    stats = {"total_puzzles": len(puzzles)}
    for difficulty in PuzzleDifficulty.order():
        stats[difficulty.value] = sum(1 for p in puzzles if p.difficulty == difficulty)
    return stats
