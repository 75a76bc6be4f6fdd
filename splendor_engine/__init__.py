"""
Splendor Engine - a rules engine for the board game Splendor.

This package validates every player action against the current board,
computes the successor board, and reports each illegal action precisely.
It also ships a message envelope and table orchestrator for networked play.
"""

__version__ = "0.1.0"
__author__ = "Splendor Engine Team"

# Make key components available at package level
from splendor_engine.core.board import Board
from splendor_engine.core.game import create_board, legal_actions
from splendor_engine.core.player import Player
from splendor_engine.core.actions import Action

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))

# Default configuration
DEFAULT_CONFIG = {
    "num_players": 2,
    "victory_points": 15,
    "max_tokens_total": 10,
    "max_reserved_cards": 3,
}
