"""
Constants for the Splendor rules engine.

This module defines all the game constants used throughout the engine,
including gem types, card tiers, game phases, game limits, and victory conditions.
"""
from enum import Enum
from typing import Dict, List, Final


class GemColor(Enum):
    """Enum representing the different gem types in Splendor.

    The value of each member is its wire name.
    """
    EMERALD = "emerald"
    DIAMOND = "diamond"
    SAPPHIRE = "sapphire"
    ONYX = "onyx"
    RUBY = "ruby"
    GOLD = "gold"  # Special wild/joker gem


# List of regular gems (excluding gold)
REGULAR_GEMS: Final[List[GemColor]] = [
    GemColor.EMERALD,
    GemColor.DIAMOND,
    GemColor.SAPPHIRE,
    GemColor.ONYX,
    GemColor.RUBY,
]

# All gems including gold
ALL_GEMS: Final[List[GemColor]] = REGULAR_GEMS + [GemColor.GOLD]

# Display names for gems (for pretty printing)
GEM_DISPLAY_NAMES: Final[Dict[GemColor, str]] = {
    GemColor.EMERALD: "Emerald",
    GemColor.DIAMOND: "Diamond",
    GemColor.SAPPHIRE: "Sapphire",
    GemColor.ONYX: "Onyx",
    GemColor.RUBY: "Ruby",
    GemColor.GOLD: "Gold",
}

# Rich markup styles for gems (for terminal display)
GEM_STYLES: Final[Dict[GemColor, str]] = {
    GemColor.EMERALD: "green",
    GemColor.DIAMOND: "bright_white",
    GemColor.SAPPHIRE: "blue",
    GemColor.ONYX: "bright_black",
    GemColor.RUBY: "red",
    GemColor.GOLD: "yellow",
}


class CardTier(Enum):
    """Enum representing the three tiers of development cards."""
    TIER_1 = 1
    TIER_2 = 2
    TIER_3 = 3


class GamePhase(Enum):
    """Lifecycle phase of a game."""
    WAITING = "waiting"
    PLAYING = "playing"
    FINAL_ROUND = "final_round"  # Someone reached the victory threshold
    ENDED = "ended"


# Number of cards in each tier's deck
CARDS_PER_TIER: Final[Dict[CardTier, int]] = {
    CardTier.TIER_1: 40,
    CardTier.TIER_2: 30,
    CardTier.TIER_3: 20,
}

# Number of market slots in each tier
VISIBLE_CARDS_PER_TIER: Final[int] = 4

# Player limits
MIN_PLAYERS: Final[int] = 2
MAX_PLAYERS: Final[int] = 4
MAX_RESERVED_CARDS: Final[int] = 3
MAX_GEMS_TOTAL: Final[int] = 10  # Maximum total gems a player may keep at end of turn

# Victory conditions
VICTORY_POINTS: Final[int] = 15  # Points needed to trigger end game

# Noble settings
NOBLE_POINTS: Final[int] = 3  # Each noble is worth 3 prestige points

# Card prestige bounds
MIN_CARD_POINTS: Final[int] = 0
MAX_CARD_POINTS: Final[int] = 5

# Gem supply based on player count
GEMS_PER_COLOR_BY_PLAYERS: Final[Dict[int, int]] = {
    2: 4,
    3: 5,
    4: 7,
}

# Gold gems are always 5 regardless of player count
GOLD_GEMS_COUNT: Final[int] = 5

# Action limits
MIN_GEMS_FOR_TAKE_TWO: Final[int] = 4  # Bank must hold 4+ of a color to take 2
MAX_GEMS_TAKE_DIFFERENT: Final[int] = 3  # Can take up to 3 gems of different colors
