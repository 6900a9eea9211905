"""
Test package for Chess Puzzle Mode.

This package contains unit tests for the puzzle engine: move matching,
session management and persistence, hints, events, collection loading and the
terminal player.
"""
