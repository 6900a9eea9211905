"""
Puzzle collection loading.

Raw collection documents (as found in JSON files) are normalized into
`PuzzleCollection` objects: text fields trimmed, tags de-duplicated and
unknown difficulties mapped to beginner. Loaded collections can then be
filtered, sorted and paginated for browsing.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..core.models import PuzzleCollection, PuzzleDefinition, PuzzleDifficulty, PuzzleVariant

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_TITLE = "Puzzle Collection"
DEFAULT_PUZZLE_TITLE = "Untitled Puzzle"
DEFAULT_PAGE_SIZE = 10


def _clean(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _moves(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [str(move) for move in value]


def normalize_tags(tags: Any) -> List[str]:
    """Trimmed, non-empty tags in first-seen order."""
    if not isinstance(tags, (list, tuple)):
        return []
    seen: Dict[str, None] = {}
    for tag in tags:
        cleaned = _clean(tag)
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def normalize_difficulty(candidate: Any) -> PuzzleDifficulty:
    if isinstance(candidate, PuzzleDifficulty):
        return candidate
    try:
        return PuzzleDifficulty(candidate)
    except ValueError:
        return PuzzleDifficulty.BEGINNER


def normalize_puzzle_variant(raw: Mapping[str, Any]) -> PuzzleVariant:
    variant_id = str(raw.get("id", ""))
    return PuzzleVariant(
        id=variant_id,
        label=_clean(raw.get("label")) or variant_id,
        moves=_moves(raw.get("moves")),
    )


def normalize_puzzle_definition(raw: Mapping[str, Any]) -> PuzzleDefinition:
    """
    Build a puzzle from a raw mapping.

    Missing solutions become empty lines; they are rejected when a controller
    is created for the puzzle rather than here.
    """
    variants = raw.get("variants")
    return PuzzleDefinition(
        id=str(raw.get("id", "")),
        title=_clean(raw.get("title")) or DEFAULT_PUZZLE_TITLE,
        fen=str(raw.get("fen", "")),
        solution=_moves(raw.get("solution")),
        variants=[normalize_puzzle_variant(v) for v in variants] if isinstance(variants, list) else [],
        difficulty=normalize_difficulty(raw.get("difficulty")),
        tags=normalize_tags(raw.get("tags")),
        hint=_clean(raw.get("hint")),
        author=_clean(raw.get("author")),
        source_pgn=_clean(raw.get("sourcePgn", raw.get("source_pgn"))),
    )


def normalize_puzzle_collection(raw: Mapping[str, Any]) -> PuzzleCollection:
    puzzles = raw.get("puzzles") or []
    return PuzzleCollection(
        id=str(raw.get("id", "")),
        title=_clean(raw.get("title")) or DEFAULT_COLLECTION_TITLE,
        description=_clean(raw.get("description")),
        puzzles=[normalize_puzzle_definition(p) for p in puzzles],
    )


def load_collection_file(path: Union[Path, str]) -> PuzzleCollection:
    """
    Read a collection from a JSON file.

    Raises:
        ValueError: If the file is not a JSON object or a puzzle is invalid
        OSError: If the file cannot be read
    """
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a puzzle collection object")
    collection = normalize_puzzle_collection(data)
    logger.info(f"Loaded collection {collection.id} with {len(collection.puzzles)} puzzles from {path}")
    return collection


@dataclass
class PuzzleCollectionFilters:
    """Criteria for narrowing a collection; empty criteria match everything."""

    difficulty: List[PuzzleDifficulty] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    search: Optional[str] = None


@dataclass
class PuzzleCollectionPage:
    """One page of a filtered, sorted collection."""

    collection: PuzzleCollection
    puzzles: List[PuzzleDefinition]
    total: int
    page: int
    page_size: int
    has_previous: bool
    has_next: bool


def _matches_difficulty(puzzle: PuzzleDefinition, filters: PuzzleCollectionFilters) -> bool:
    if not filters.difficulty:
        return True
    wanted = {normalize_difficulty(d) for d in filters.difficulty}
    return puzzle.difficulty in wanted


def _matches_tags(puzzle: PuzzleDefinition, filters: PuzzleCollectionFilters) -> bool:
    if not filters.tags:
        return True
    return any(tag in puzzle.tags for tag in filters.tags)


def _matches_search(puzzle: PuzzleDefinition, filters: PuzzleCollectionFilters) -> bool:
    query = _clean(filters.search)
    if not query:
        return True
    haystack = " ".join(
        part for part in [puzzle.title, puzzle.author, puzzle.hint, *puzzle.tags] if part
    ).lower()
    return query.lower() in haystack


def filter_puzzles(
    puzzles: Iterable[PuzzleDefinition],
    filters: Optional[PuzzleCollectionFilters] = None,
) -> List[PuzzleDefinition]:
    filters = filters or PuzzleCollectionFilters()
    return [
        p for p in puzzles
        if _matches_difficulty(p, filters) and _matches_tags(p, filters) and _matches_search(p, filters)
    ]


def sort_puzzles(puzzles: Iterable[PuzzleDefinition], sort_by: Optional[str] = None) -> List[PuzzleDefinition]:
    """Sort by "difficulty" (then title) or "title"; any other value keeps collection order."""
    puzzles = list(puzzles)
    if sort_by == "difficulty":
        order = PuzzleDifficulty.order()
        return sorted(puzzles, key=lambda p: (order.index(p.difficulty), p.title))
    if sort_by == "title":
        return sorted(puzzles, key=lambda p: p.title)
    return puzzles


def load_puzzle_collection(
    raw: Union[PuzzleCollection, Mapping[str, Any]],
    filters: Optional[PuzzleCollectionFilters] = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    sort_by: Optional[str] = None,
) -> PuzzleCollectionPage:
    """Normalize a collection and return the requested page of matching puzzles."""
    collection = raw if isinstance(raw, PuzzleCollection) else normalize_puzzle_collection(raw)
    matching = sort_puzzles(filter_puzzles(collection.puzzles, filters), sort_by)

    page_size = max(1, page_size)
    page = max(1, page)
    start = (page - 1) * page_size
    puzzles = matching[start:start + page_size]

    return PuzzleCollectionPage(
        collection=collection,
        puzzles=puzzles,
        total=len(matching),
        page=page,
        page_size=page_size,
        has_previous=start > 0,
        has_next=start + len(puzzles) < len(matching),
    )
