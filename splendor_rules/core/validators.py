"""
Action validation for Splendor.

Every action is checked here before the engine applies it. Validation never
mutates the state and never raises for a rule violation: the verdict, a
message and a machine-readable ValidationErrorCode come back in a
ValidationResult.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from splendor_rules.core.constants import (
    GemColor, CardTier, GamePhase, REGULAR_GEMS, ALL_GEMS,
    MAX_GEMS_TOTAL, MAX_RESERVED_CARDS, MIN_GEMS_FOR_TAKE_TWO, MAX_GEMS_TAKE_DIFFERENT
)
from splendor_rules.core.cards import DevelopmentCard
from splendor_rules.core.actions import (
    Action, ActionType, MAIN_ACTION_TYPES, TakeThreeGemsAction, TakeTwoGemsAction,
    ReserveCardAction, PurchaseCardAction, SelectNobleAction, DiscardGemsAction
)
from splendor_rules.core.game import GameState, AwaitingDiscard, AwaitingNobleChoice


class ValidationErrorCode(str, Enum):
    """Machine-readable reasons for rejecting an action."""
    NOT_PLAYERS_TURN = "NOT_PLAYERS_TURN"
    INSUFFICIENT_GEMS_IN_BANK = "INSUFFICIENT_GEMS_IN_BANK"
    GEMS_NOT_DISTINCT = "GEMS_NOT_DISTINCT"
    REQUIRES_FOUR_GEMS_FOR_TWO = "REQUIRES_FOUR_GEMS_FOR_TWO"
    CANNOT_TAKE_GOLD = "CANNOT_TAKE_GOLD"
    MAX_RESERVED_CARDS = "MAX_RESERVED_CARDS"
    CARD_NOT_AVAILABLE = "CARD_NOT_AVAILABLE"
    INSUFFICIENT_PAYMENT = "INSUFFICIENT_PAYMENT"
    NOBLE_NOT_ELIGIBLE = "NOBLE_NOT_ELIGIBLE"
    INVALID_DISCARD_AMOUNT = "INVALID_DISCARD_AMOUNT"
    GAME_NOT_IN_PROGRESS = "GAME_NOT_IN_PROGRESS"
    INVALID_ACTION = "INVALID_ACTION"
    PENDING_DISCARD_REQUIRED = "PENDING_DISCARD_REQUIRED"
    PENDING_NOBLE_REQUIRED = "PENDING_NOBLE_REQUIRED"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating an action."""
    valid: bool
    error: Optional[str] = None
    error_code: Optional[ValidationErrorCode] = None

    @classmethod
    def ok(cls) -> 'ValidationResult':
        return cls(valid=True)

    @classmethod
    def fail(cls, error_code: ValidationErrorCode, error: str) -> 'ValidationResult':
        return cls(valid=False, error=error, error_code=error_code)

    def __bool__(self) -> bool:
        return self.valid

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"valid": self.valid}
        if self.error is not None:
            data["error"] = self.error
        if self.error_code is not None:
            data["errorCode"] = self.error_code.value
        return data


_NOT_YOUR_TURN = "It's not your turn"


def validate_action(state: GameState, action: Action) -> ValidationResult:
    """
    Validate any player action.

    Checks run in order: the game must be running, then any pending sub-flow
    (discard or noble choice) must be resolved by its player before anything
    else, then the rules of the specific action apply.

    Args:
        state: Current game state
        action: Action to validate

    Returns:
        ValidationResult indicating whether the action is legal
    """
    if not is_game_in_progress(state):
        return ValidationResult.fail(
            ValidationErrorCode.GAME_NOT_IN_PROGRESS, "Game is not in progress"
        )

    gate = _check_turn_phase(state, action)
    if gate is not None:
        return gate

    validator = _VALIDATORS.get(getattr(action, "action_type", None))
    if validator is None:
        return ValidationResult.fail(ValidationErrorCode.INVALID_ACTION, "Invalid action type")
    return validator(state, action)


def _check_turn_phase(state: GameState, action: Action) -> Optional[ValidationResult]:
    phase = state.turn_phase
    action_type = getattr(action, "action_type", None)

    if isinstance(phase, AwaitingDiscard):
        if action.player_id != phase.player_id:
            return ValidationResult.fail(ValidationErrorCode.NOT_PLAYERS_TURN, _NOT_YOUR_TURN)
        if action_type != ActionType.DISCARD_GEMS:
            return ValidationResult.fail(
                ValidationErrorCode.PENDING_DISCARD_REQUIRED,
                f"Must discard {phase.amount} gems before doing anything else"
            )
        return None

    if isinstance(phase, AwaitingNobleChoice):
        if action.player_id != phase.player_id:
            return ValidationResult.fail(ValidationErrorCode.NOT_PLAYERS_TURN, _NOT_YOUR_TURN)
        if action_type != ActionType.SELECT_NOBLE:
            return ValidationResult.fail(
                ValidationErrorCode.PENDING_NOBLE_REQUIRED,
                "Must choose a noble before doing anything else"
            )
        return None

    if action_type in MAIN_ACTION_TYPES or action_type is None:
        return None
    pending = "noble choice" if action_type == ActionType.SELECT_NOBLE else "discard"
    return ValidationResult.fail(ValidationErrorCode.INVALID_ACTION, f"No {pending} is pending")


def validate_take_three_gems(state: GameState, action: TakeThreeGemsAction) -> ValidationResult:
    """
    Validate taking 1-3 gems of different colors.

    Rules:
    - Must take 1-3 gems, all of different colors
    - Gold cannot be taken this way
    - Each chosen color must be in the bank
    """
    if not is_players_turn(state, action.player_id):
        return ValidationResult.fail(ValidationErrorCode.NOT_PLAYERS_TURN, _NOT_YOUR_TURN)

    gems = list(action.gems)
    if not 1 <= len(gems) <= MAX_GEMS_TAKE_DIFFERENT:
        return ValidationResult.fail(ValidationErrorCode.INVALID_ACTION, "Must take 1 to 3 gems")

    if len(set(gems)) != len(gems):
        return ValidationResult.fail(
            ValidationErrorCode.GEMS_NOT_DISTINCT, "All gems must be different colors"
        )

    for gem in gems:
        if gem not in REGULAR_GEMS:
            return ValidationResult.fail(
                ValidationErrorCode.CANNOT_TAKE_GOLD, "Cannot take gold gems with this action"
            )

    for gem in gems:
        if state.bank.get(gem, 0) < 1:
            return ValidationResult.fail(
                ValidationErrorCode.INSUFFICIENT_GEMS_IN_BANK, f"Not enough {gem.value} gems in bank"
            )

    return ValidationResult.ok()


def validate_take_two_gems(state: GameState, action: TakeTwoGemsAction) -> ValidationResult:
    """
    Validate taking two gems of the same color.

    The bank must hold at least four of that color before taking.
    """
    if not is_players_turn(state, action.player_id):
        return ValidationResult.fail(ValidationErrorCode.NOT_PLAYERS_TURN, _NOT_YOUR_TURN)

    if action.gem not in REGULAR_GEMS:
        return ValidationResult.fail(
            ValidationErrorCode.CANNOT_TAKE_GOLD, "Cannot take gold gems with this action"
        )

    if state.bank.get(action.gem, 0) < MIN_GEMS_FOR_TAKE_TWO:
        return ValidationResult.fail(
            ValidationErrorCode.REQUIRES_FOUR_GEMS_FOR_TWO,
            f"Bank must have at least {MIN_GEMS_FOR_TAKE_TWO} {action.gem.value} gems to take 2"
        )

    return ValidationResult.ok()


def validate_reserve_card(state: GameState, action: ReserveCardAction) -> ValidationResult:
    """
    Validate reserving a card.

    Rules:
    - A player may hold at most three reserved cards
    - A named card must be face up in the market
    - A blind draw needs a non-empty deck for the requested tier
    """
    if not is_players_turn(state, action.player_id):
        return ValidationResult.fail(ValidationErrorCode.NOT_PLAYERS_TURN, _NOT_YOUR_TURN)

    player = state.get_player(action.player_id)
    if player is None:
        return ValidationResult.fail(ValidationErrorCode.INVALID_ACTION, "Player not found")

    if len(player.reserved_cards) >= MAX_RESERVED_CARDS:
        return ValidationResult.fail(
            ValidationErrorCode.MAX_RESERVED_CARDS,
            f"Cannot have more than {MAX_RESERVED_CARDS} reserved cards"
        )

    if not action.is_blind:
        if find_card_in_market(state, action.card_id) is None:
            return ValidationResult.fail(ValidationErrorCode.CARD_NOT_AVAILABLE, "Card not found in market")
    else:
        if action.tier is None:
            return ValidationResult.fail(
                ValidationErrorCode.INVALID_ACTION, "A blind reservation must name a tier"
            )
        if not get_deck_by_tier(state, action.tier):
            return ValidationResult.fail(
                ValidationErrorCode.CARD_NOT_AVAILABLE,
                f"No cards remaining in tier {action.tier.value} deck"
            )

    return ValidationResult.ok()


def validate_purchase_card(state: GameState, action: PurchaseCardAction) -> ValidationResult:
    """
    Validate purchasing a card from the market or the player's reserve.

    Bonuses reduce the cost first; gold covers whatever colors are still short.
    """
    if not is_players_turn(state, action.player_id):
        return ValidationResult.fail(ValidationErrorCode.NOT_PLAYERS_TURN, _NOT_YOUR_TURN)

    player = state.get_player(action.player_id)
    if player is None:
        return ValidationResult.fail(ValidationErrorCode.INVALID_ACTION, "Player not found")

    card = find_purchasable_card(state, action.player_id, action.card_id)
    if card is None:
        return ValidationResult.fail(ValidationErrorCode.CARD_NOT_AVAILABLE, "Card not found")

    if not player.can_afford_card(card):
        return ValidationResult.fail(ValidationErrorCode.INSUFFICIENT_PAYMENT, "Cannot afford this card")

    return ValidationResult.ok()


def validate_select_noble(state: GameState, action: SelectNobleAction) -> ValidationResult:
    """Validate choosing a noble: it must be in play and the player must meet it."""
    player = state.get_player(action.player_id)
    if player is None:
        return ValidationResult.fail(ValidationErrorCode.INVALID_ACTION, "Player not found")

    noble = next((n for n in state.nobles if n.id == action.noble_id), None)
    if noble is None:
        return ValidationResult.fail(ValidationErrorCode.NOBLE_NOT_ELIGIBLE, "Noble not available")

    if not player.meets_requirements(noble):
        return ValidationResult.fail(
            ValidationErrorCode.NOBLE_NOT_ELIGIBLE, "Player does not meet noble requirements"
        )

    return ValidationResult.ok()


def validate_discard_gems(state: GameState, action: DiscardGemsAction) -> ValidationResult:
    """
    Validate discarding gems.

    Rules:
    - The player must hold more than ten gems
    - Each discarded count must be non-negative and no more than held
    - The discard must bring the total to exactly ten
    """
    player = state.get_player(action.player_id)
    if player is None:
        return ValidationResult.fail(ValidationErrorCode.INVALID_ACTION, "Player not found")

    total_gems = player.get_total_gems()
    if total_gems <= MAX_GEMS_TOTAL:
        return ValidationResult.fail(
            ValidationErrorCode.INVALID_ACTION, "Player does not need to discard gems"
        )

    total_discard = 0
    for gem, count in action.gems.items():
        if gem not in ALL_GEMS:
            return ValidationResult.fail(ValidationErrorCode.INVALID_ACTION, f"Unknown gem type: {gem}")
        if count < 0:
            return ValidationResult.fail(
                ValidationErrorCode.INVALID_DISCARD_AMOUNT, f"Cannot discard a negative amount of {gem.value}"
            )
        held = player.gems.get(gem, 0)
        if held < count:
            return ValidationResult.fail(
                ValidationErrorCode.INVALID_DISCARD_AMOUNT,
                f"Cannot discard {count} {gem.value} gems - only have {held}"
            )
        total_discard += count

    if total_gems - total_discard != MAX_GEMS_TOTAL:
        return ValidationResult.fail(
            ValidationErrorCode.INVALID_DISCARD_AMOUNT,
            f"Must discard exactly {total_gems - MAX_GEMS_TOTAL} gems to get to {MAX_GEMS_TOTAL}"
        )

    return ValidationResult.ok()


_VALIDATORS = {
    ActionType.TAKE_THREE_GEMS: validate_take_three_gems,
    ActionType.TAKE_TWO_GEMS: validate_take_two_gems,
    ActionType.RESERVE_CARD: validate_reserve_card,
    ActionType.PURCHASE_CARD: validate_purchase_card,
    ActionType.SELECT_NOBLE: validate_select_noble,
    ActionType.DISCARD_GEMS: validate_discard_gems,
}


# Helper checks shared with the engine and the availability query

def is_players_turn(state: GameState, player_id: str) -> bool:
    """Check if it's the given player's turn."""
    return state.current_player.id == player_id


def is_game_in_progress(state: GameState) -> bool:
    """Check if the game accepts actions."""
    return state.phase in (GamePhase.PLAYING, GamePhase.FINAL_ROUND)


def find_card_in_market(state: GameState, card_id: str) -> Optional[DevelopmentCard]:
    """Find a face-up card in the market by ID."""
    location = locate_card_in_market(state, card_id)
    if location is None:
        return None
    tier, index = location
    return state.market[tier][index]


def locate_card_in_market(state: GameState, card_id: str) -> Optional[Tuple[CardTier, int]]:
    """Find the tier and slot index of a face-up market card."""
    for tier in CardTier:
        for index, card in enumerate(state.market.get(tier, [])):
            if card is not None and card.id == card_id:
                return tier, index
    return None


def find_purchasable_card(state: GameState, player_id: str, card_id: str) -> Optional[DevelopmentCard]:
    """Find a card in the market or in the player's reserve."""
    card = find_card_in_market(state, card_id)
    if card is not None:
        return card
    player = state.get_player(player_id)
    if player is None:
        return None
    return player.find_reserved_card(card_id)


def get_deck_by_tier(state: GameState, tier: CardTier) -> List[DevelopmentCard]:
    return state.decks.get(tier, [])


def calculate_effective_cost(
    state: GameState, player_id: str, card_id: str
) -> Optional[Dict[GemColor, int]]:
    """
    Calculate the cost of a card after applying the player's bonuses.

    Args:
        state: Current game state
        player_id: ID of the buying player
        card_id: ID of a market card or one of the player's reserved cards

    Returns:
        Per-color cost, never below zero, or None if the player or card is unknown
    """
    player = state.get_player(player_id)
    card = find_purchasable_card(state, player_id, card_id)
    if player is None or card is None:
        return None
    return player.effective_cost(card)


def can_afford_card(state: GameState, player_id: str, card_id: str) -> bool:
    """Check if the player can pay for a card, using gold for any shortfall."""
    player = state.get_player(player_id)
    card = find_purchasable_card(state, player_id, card_id)
    if player is None or card is None:
        return False
    return player.can_afford_card(card)


def get_eligible_nobles(state: GameState, player_id: str) -> List[str]:
    """Get the IDs of the nobles in play whose requirements the player meets."""
    player = state.get_player(player_id)
    if player is None:
        return []
    return [noble.id for noble in state.nobles if player.meets_requirements(noble)]


def get_total_gems(state: GameState, player_id: str) -> int:
    """Get the total number of gems a player holds, gold included."""
    player = state.get_player(player_id)
    if player is None:
        return 0
    return player.get_total_gems()


def needs_to_discard_gems(state: GameState, player_id: str) -> bool:
    """Check if the player holds more gems than allowed."""
    return get_total_gems(state, player_id) > MAX_GEMS_TOTAL
