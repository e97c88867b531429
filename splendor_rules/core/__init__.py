"""
Splendor Rules Core Package

This package contains the rules engine for Splendor, including:
- Game state representation and setup
- Action types and wire payload parsing
- Validation, state transitions and the availability query
- Card and noble catalog
- Constants and enums

All core components can be imported directly from this package.
"""

# Game state and setup
from splendor_rules.core.game import (
    GameState, PlayerInfo, NormalTurn, AwaitingDiscard, AwaitingNobleChoice,
    create_game, create_initial_bank, create_player, shuffle
)

# Player
from splendor_rules.core.player import Player

# Cards and nobles
from splendor_rules.core.cards import (
    DevelopmentCard, Noble,
    get_cards_by_tier, get_all_cards, get_all_nobles,
    find_card_by_id, find_noble_by_id
)

# Actions
from splendor_rules.core.actions import (
    Action, ActionType,
    TakeThreeGemsAction, TakeTwoGemsAction, ReserveCardAction,
    PurchaseCardAction, SelectNobleAction, DiscardGemsAction
)
from splendor_rules.core.payloads import create_action_from_dict, create_action_from_json

# Rules
from splendor_rules.core.validators import ValidationErrorCode, ValidationResult, validate_action
from splendor_rules.core.engine import apply_action
from splendor_rules.core.availability import (
    AvailableActions, get_available_actions, enumerate_legal_actions
)

# Configuration and errors
from splendor_rules.core.config import GameConfig
from splendor_rules.core.exceptions import SplendorError, GameSetupError, InvalidActionError

# Constants
from splendor_rules.core.constants import (
    GemColor, CardTier, GamePhase,
    REGULAR_GEMS, ALL_GEMS,
    VICTORY_POINTS, MAX_GEMS_TOTAL, MAX_RESERVED_CARDS
)

__all__ = [
    # Game
    'GameState', 'PlayerInfo', 'NormalTurn', 'AwaitingDiscard', 'AwaitingNobleChoice',
    'create_game', 'create_initial_bank', 'create_player', 'shuffle',

    # Player
    'Player',

    # Cards
    'DevelopmentCard', 'Noble',
    'get_cards_by_tier', 'get_all_cards', 'get_all_nobles',
    'find_card_by_id', 'find_noble_by_id',

    # Actions
    'Action', 'ActionType',
    'TakeThreeGemsAction', 'TakeTwoGemsAction', 'ReserveCardAction',
    'PurchaseCardAction', 'SelectNobleAction', 'DiscardGemsAction',
    'create_action_from_dict', 'create_action_from_json',

    # Rules
    'ValidationErrorCode', 'ValidationResult', 'validate_action',
    'apply_action',
    'AvailableActions', 'get_available_actions', 'enumerate_legal_actions',

    # Configuration and errors
    'GameConfig', 'SplendorError', 'GameSetupError', 'InvalidActionError',

    # Constants
    'GemColor', 'CardTier', 'GamePhase',
    'REGULAR_GEMS', 'ALL_GEMS',
    'VICTORY_POINTS', 'MAX_GEMS_TOTAL', 'MAX_RESERVED_CARDS'
]
