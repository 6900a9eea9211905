"""
One-line, screen-reader friendly descriptions of puzzle events.
"""

from __future__ import annotations

from typing import Optional

from ..puzzle.events import PuzzleEvent, PuzzleEventType


def format_event_message(event: PuzzleEvent, title: Optional[str] = None) -> str:
    """
    Describe an event in one sentence.

    Args:
        event: Event to describe
        title: Puzzle title for completion messages; the puzzle id is used otherwise
    """
    payload = event.payload

    if event.type == PuzzleEventType.LOAD:
        return f"Puzzle loaded: {payload['puzzle'].title}"

    if event.type == PuzzleEventType.MOVE:
        return "Correct move entered." if payload.get("result") == "correct" else "Incorrect move."

    if event.type == PuzzleEventType.HINT:
        content = payload.get("hint_payload")
        if payload.get("hint_type") == "text":
            return f"Hint: {content}" if content else "Hint requested."
        return f"Highlighting target square {content}." if content else "Highlight hint requested."

    if event.type == PuzzleEventType.COMPLETE:
        return f"Puzzle complete: {title or payload.get('puzzle_id', '')}"

    if event.type == PuzzleEventType.PERSISTENCE_WARNING:
        return str(payload.get("error", ""))

    return ""
