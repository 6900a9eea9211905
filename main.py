#!/usr/bin/env python3
"""
Chess Puzzle Mode - Main Entry Point

Runs the interactive terminal puzzle player from the chess_puzzle_mode
package.

Quick Examples:
    # Play the built-in demo collection
    python main.py

    # Play a collection file and keep progress in a custom location
    python main.py --collection examples/sample_collection.json --storage /tmp/sessions.json

    # List the puzzles of a collection
    python main.py --list
"""

import sys

from chess_puzzle_mode.cli import main

if __name__ == "__main__":
    sys.exit(main())
