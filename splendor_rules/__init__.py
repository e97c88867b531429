"""
Splendor Rules - a deterministic rules engine for the board game Splendor.

The engine takes a full game state and a proposed action, decides whether the
action is legal, and produces the next state. Transport, lobbies and user
interfaces are left to the embedding application.
"""

__version__ = "0.1.0"
__author__ = "Splendor Rules Team"

# Make key components available at package level
from splendor_rules.core.game import GameState, create_game
from splendor_rules.core.config import GameConfig
from splendor_rules.core.validators import validate_action
from splendor_rules.core.engine import apply_action
from splendor_rules.core.availability import get_available_actions

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))

__all__ = [
    'GameState', 'GameConfig',
    'create_game', 'validate_action', 'apply_action', 'get_available_actions',
]
