"""
Command-line interface for Chess Puzzle Mode.

This module provides an interactive terminal player for a puzzle collection.
It plays the part of the board host: typed moves are checked for legality with
python-chess, converted to canonical SAN and handed to the puzzle engine;
progress is saved to a JSON session file between runs.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import chess
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Prompt
from rich.table import Table

from .core.models import PuzzleCollection, PuzzleConfigurationError, PuzzleModeConfig
from .core.storage import JsonFileStorage, SessionStore
from .puzzle.database import demo_collection, get_stats
from .puzzle.events import PuzzleEvent, PuzzleEventType
from .puzzle.hints import HintType
from .puzzle.loader import load_collection_file
from .puzzle.mode import PuzzleMode
from .puzzle.session import PuzzleSessionManager
from .ui.board import render_puzzle_board
from .ui.messages import format_event_message

STORAGE_ENV_VAR = "CHESS_PUZZLE_STORAGE"
DEFAULT_STORAGE_PATH = Path("~/.chess_puzzle_mode/sessions.json")


def setup_logging(verbose: bool = False) -> None:
    """Route logging to Rich when verbose, otherwise keep the terminal clean."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if verbose:
        root_logger.addHandler(RichHandler(show_path=False, markup=False))
        root_logger.setLevel(logging.DEBUG)
    else:
        root_logger.addHandler(logging.NullHandler())
        root_logger.setLevel(logging.INFO)


logger = logging.getLogger(__name__)

console = Console()

HELP_TEXT = (
    "Enter moves in SAN (Nf3, exd5, O-O, e8=Q) or one of: "
    "hint, show, reset, next, progress, help, quit"
)


def default_storage_path() -> Path:
    """Session file from the environment, or the per-user default."""
    return Path(os.environ.get(STORAGE_ENV_VAR) or DEFAULT_STORAGE_PATH).expanduser()


class PuzzlePlayer:
    """
    Interactive terminal host for one puzzle collection.

    Keeps its own board for the current puzzle and applies a move to it only
    once the puzzle engine has accepted it.
    """

    def __init__(
        self,
        collection: PuzzleCollection,
        store: SessionStore,
        auto_advance: bool = True,
        allow_hints: bool = True,
        start_puzzle_id: Optional[str] = None,
        output: Optional[Console] = None,
    ):
        """
        Initialize the player.

        Args:
            collection: Puzzles to play
            store: Session store used for progress
            auto_advance: Move on automatically after a solve
            allow_hints: Whether hint commands are available
            start_puzzle_id: Puzzle to open instead of the saved one
            output: Console to draw on
        """
        self.console = output or console
        self.collection = collection
        self.board = chess.Board()
        self.flip_board = False
        self.last_move: Optional[chess.Move] = None
        self.hint_square: Optional[str] = None
        self.running = True

        config = PuzzleModeConfig.for_collection(
            collection,
            auto_advance=auto_advance,
            allow_hints=allow_hints,
            start_puzzle_id=start_puzzle_id,
            on_puzzle_event=self.handle_event,
        )
        self.mode = PuzzleMode(config, store=store)

    def handle_event(self, event: PuzzleEvent) -> None:
        """Update the board and tell the player what happened."""
        if event.type == PuzzleEventType.LOAD:
            puzzle = event.payload["puzzle"]
            self.board = chess.Board(puzzle.fen)
            self.flip_board = self.board.turn == chess.BLACK
            self.last_move = None
            self.hint_square = None
            self.console.print(f"\n[bold cyan]{format_event_message(event)}[/bold cyan]")
            return

        if event.type == PuzzleEventType.MOVE:
            style = "green" if event.payload["result"] == "correct" else "red"
            self.console.print(f"[{style}]{format_event_message(event)}[/{style}]")
        elif event.type == PuzzleEventType.COMPLETE:
            puzzle = self.collection.get_puzzle(event.payload["puzzle_id"])
            message = format_event_message(event, title=puzzle.title if puzzle else None)
            self.console.print(f"[bold green]{message}[/bold green] (attempts: {event.payload['attempts']})")
        elif event.type == PuzzleEventType.HINT:
            self.console.print(f"[yellow]{format_event_message(event)}[/yellow]")
        elif event.type == PuzzleEventType.PERSISTENCE_WARNING:
            self.console.print(f"[bold yellow]⚠️  {format_event_message(event)}[/bold yellow]")

    def render(self) -> None:
        puzzle = self.mode.current_puzzle
        position = self.mode.session.current_index + 1
        title = f"{position}/{len(self.collection.puzzles)} {puzzle.title} ({puzzle.difficulty.value})"
        self.console.print(render_puzzle_board(
            self.board,
            title=title,
            flip_board=self.flip_board,
            last_move=self.last_move,
            hint_square=self.hint_square,
        ))

    def dispatch(self, text: str) -> None:
        """Run one line of player input."""
        command = text.strip()
        if not command:
            return
        lowered = command.lower()

        if lowered in ("quit", "exit", "q"):
            self.running = False
        elif lowered in ("help", "?"):
            self.console.print(HELP_TEXT)
        elif lowered == "hint":
            self._hint(HintType.TEXT)
        elif lowered == "show":
            self._hint(HintType.ORIGIN_HIGHLIGHT)
        elif lowered == "reset":
            self.mode.reset()
        elif lowered == "next":
            if not self.mode.next_puzzle():
                self.console.print("[dim]This is the last puzzle of the collection.[/dim]")
        elif lowered == "progress":
            self.console.print(progress_table(self.collection, self.mode))
        else:
            self.play(command)

    def _hint(self, hint_type: HintType) -> None:
        hint = self.mode.request_hint(hint_type)
        if hint is None:
            self.console.print("[dim]Hints are disabled for this session.[/dim]")
        elif hint_type == HintType.ORIGIN_HIGHLIGHT:
            self.hint_square = hint.target_square

    def play(self, text: str) -> bool:
        """Validate and submit a move; return whether the engine accepted it."""
        if self.mode.session.controller.is_solved:
            self.console.print("[dim]Puzzle solved. Type 'next' to continue or 'reset' to replay.[/dim]")
            return False

        board = self.board
        try:
            move = board.parse_san(text)
        except ValueError:
            self.console.print(f"[red]Illegal or unreadable move: {text}[/red]")
            return False

        san = board.san(move)
        board.push(move)
        evaluation = self.mode.submit_move(san)

        if not evaluation.accepted:
            board.pop()
        elif self.board is board:
            # Same puzzle still on the board: keep the move and clear stale hints
            self.last_move = move
            self.hint_square = None
        return evaluation.accepted

    def run(self) -> int:
        """Read and apply player input until quit or end of input."""
        self.console.print(f"[bold]{self.collection.title}[/bold] - {HELP_TEXT}")
        while self.running:
            self.render()
            try:
                text = Prompt.ask("[bold]Your move[/bold]", console=self.console)
            except (EOFError, KeyboardInterrupt):
                break
            self.dispatch(text)
        solved = len(self.mode.session.get_solved_puzzle_ids())
        self.console.print(f"\n{solved} of {len(self.collection.puzzles)} puzzles solved.")
        return 0


def progress_table(collection: PuzzleCollection, mode: PuzzleMode) -> Table:
    """Table of the collection with solved and current markers."""
    state = mode.state
    table = Table(title=f"🧩 {collection.title}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Puzzle")
    table.add_column("Difficulty")
    table.add_column("Status", justify="center")

    for index, puzzle in enumerate(collection.puzzles, start=1):
        if puzzle.id == state.current_puzzle_id:
            status = "[cyan]▶ current[/cyan]"
        elif puzzle.id in state.solved_puzzles:
            status = "[green]✓ solved[/green]"
        else:
            status = ""
        table.add_row(str(index), puzzle.title, puzzle.difficulty.value, status)

    table.caption = f"{len(state.solved_puzzles)} solved · {state.attempts} attempts · {state.hint_usage} hints"
    return table


def collection_table(collection: PuzzleCollection) -> Table:
    table = Table(title=f"🧩 {collection.title} ({collection.id})")
    table.add_column("Id", style="cyan")
    table.add_column("Title")
    table.add_column("Difficulty")
    table.add_column("Moves", justify="right")
    table.add_column("Tags", style="dim")
    for puzzle in collection.puzzles:
        table.add_row(
            puzzle.id,
            puzzle.title,
            puzzle.difficulty.value,
            str(len(puzzle.solution)),
            ", ".join(puzzle.tags),
        )
    return table


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="🧩 Chess Puzzle Mode - solve tactical puzzles in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
🎯 Examples:
  # Play the built-in demo collection
  %(prog)s

  # Play your own collection, starting at a given puzzle
  %(prog)s --collection my_puzzles.json --start back-rank-mate

  # Forget saved progress for a collection
  %(prog)s --collection my_puzzles.json --forget
        """
    )
    parser.add_argument(
        "--collection",
        type=Path,
        help="JSON file with a puzzle collection (default: built-in demo collection)"
    )
    parser.add_argument(
        "--storage",
        type=Path,
        help=f"Session file for saved progress (default: ${STORAGE_ENV_VAR} or {DEFAULT_STORAGE_PATH})"
    )
    parser.add_argument(
        "--start",
        type=str,
        help="Puzzle id to start from"
    )
    parser.add_argument(
        "--no-auto-advance",
        action="store_true",
        help=(
            "Stay on a solved puzzle instead of moving to the next one. "
            "The choice is saved with the collection's progress and applies to later runs "
            "until --forget clears it"
        )
    )
    parser.add_argument(
        "--no-hints",
        action="store_true",
        help="Disable hint commands"
    )
    parser.add_argument(
        "--forget",
        action="store_true",
        help="Clear saved progress for the collection and exit"
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the puzzles of the collection and exit"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        collection = load_collection_file(args.collection) if args.collection else demo_collection()
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Could not load collection: {e}[/bold red]")
        return 1

    if args.list:
        console.print(collection_table(collection))
        if not args.collection:
            stats = get_stats()
            console.print(", ".join(f"{name}: {count}" for name, count in stats.items()))
        return 0

    store = SessionStore(JsonFileStorage(args.storage or default_storage_path()))
    if not store.available:
        console.print("[bold yellow]⚠️  Session file is not writable; progress will not be saved.[/bold yellow]")

    try:
        if args.forget:
            PuzzleSessionManager(collection.id, collection.puzzles, store=store).destroy()
            console.print(f"[green]Cleared saved progress for {collection.id}[/green]")
            return 0

        player = PuzzlePlayer(
            collection,
            store,
            auto_advance=not args.no_auto_advance,
            allow_hints=not args.no_hints,
            start_puzzle_id=args.start,
        )
    except PuzzleConfigurationError as e:
        console.print(f"[bold red]Invalid puzzle collection: {e}[/bold red]")
        return 1

    try:
        return player.run()
    except KeyboardInterrupt:
        console.print("\n[bold yellow]Interrupted by user[/bold yellow]")
        return 130
    except Exception as e:
        console.print(f"\n[bold red]Puzzle session failed: {e}[/bold red]")
        logger.exception("Puzzle session failed with exception")
        return 1


if __name__ == "__main__":
    sys.exit(main())
