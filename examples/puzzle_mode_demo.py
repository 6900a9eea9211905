#!/usr/bin/env python3
"""
Puzzle Mode Demo

Walks through a puzzle session without a terminal board, printing every event
the engine emits.

Features demonstrated:
- Loading a collection from JSON
- Wrong moves, variant lines and completion
- Text and highlight hints
- Auto-advance and resuming from saved progress
"""

import sys
import tempfile
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chess_puzzle_mode.core.models import PuzzleModeConfig
from chess_puzzle_mode.core.storage import JsonFileStorage, SessionStore
from chess_puzzle_mode.puzzle.loader import load_collection_file
from chess_puzzle_mode.puzzle.mode import PuzzleMode
from chess_puzzle_mode.ui.messages import format_event_message
from rich.console import Console
from rich.panel import Panel

console = Console()


def print_demo_header(title: str, description: str = ""):
    """Print a demo section header."""
    content = f"[bold cyan]{title}[/bold cyan]"
    if description:
        content += f"\n[dim]{description}[/dim]"

    console.print(Panel(content, border_style="cyan", padding=(1, 2)))


def print_event(event):
    console.print(f"  [magenta]{event.name}[/magenta] {format_event_message(event)}")


def main():
    collection = load_collection_file(Path(__file__).parent / "sample_collection.json")
    storage_path = Path(tempfile.mkdtemp()) / "sessions.json"

    print_demo_header("Solving", f"Collection: {collection.title}")
    config = PuzzleModeConfig.for_collection(collection, on_puzzle_event=print_event)
    mode = PuzzleMode(config, store=SessionStore(JsonFileStorage(storage_path)))

    mode.submit_move("Rd8")       # not part of any line
    mode.request_hint("text")
    mode.submit_move("Re8#")      # solves the first puzzle, advances
    mode.request_hint("origin-highlight")
    mode.submit_move("Ra8#")      # variant line of the second puzzle

    print_demo_header("Resuming", f"Progress saved in {storage_path}")
    resumed = PuzzleMode(
        PuzzleModeConfig.for_collection(collection, on_puzzle_event=print_event),
        store=SessionStore(JsonFileStorage(storage_path)),
    )
    console.print(f"  Solved so far: {resumed.session.get_solved_puzzle_ids()}")
    for san in ["Re8+", "Rxe8", "Rxe8#"]:
        resumed.submit_move(san)

    resumed.destroy()
    console.print("[green]Demo complete.[/green]")


if __name__ == "__main__":
    main()
