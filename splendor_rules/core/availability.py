"""
Action availability for Splendor.

get_available_actions summarizes what a player may do right now so a client
can enable or disable controls. enumerate_legal_actions expands the same
information into concrete actions, each of which passes validate_action.
Neither function changes the state or raises for an unknown player.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Sequence

from splendor_rules.core.constants import (
    GemColor, CardTier, REGULAR_GEMS, ALL_GEMS, MIN_GEMS_FOR_TAKE_TWO, MAX_GEMS_TAKE_DIFFERENT
)
from splendor_rules.core.cards import DevelopmentCard
from splendor_rules.core.actions import (
    Action, TakeThreeGemsAction, TakeTwoGemsAction, ReserveCardAction,
    PurchaseCardAction, SelectNobleAction, DiscardGemsAction
)
from splendor_rules.core.game import GameState, NormalTurn
from splendor_rules.core.validators import (
    is_players_turn, is_game_in_progress, can_afford_card,
    find_purchasable_card, get_eligible_nobles
)


@dataclass
class TakeGemsOptions:
    """Colors the bank can supply for each gem-taking action."""
    can_take_three: bool = False
    available_for_three: List[GemColor] = field(default_factory=list)
    available_for_two: List[GemColor] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "canTakeThree": self.can_take_three,
            "availableForThree": [color.value for color in self.available_for_three],
            "availableForTwo": [color.value for color in self.available_for_two],
        }


@dataclass
class ReservableCards:
    """Cards the player could reserve."""
    can_reserve: bool = False
    market_cards: List[str] = field(default_factory=list)
    blind_draw_tiers: List[CardTier] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "canReserve": self.can_reserve,
            "marketCards": list(self.market_cards),
            "blindDrawTiers": [tier.value for tier in self.blind_draw_tiers],
        }


@dataclass
class PurchasableCards:
    """Cards the player can afford right now."""
    market_cards: List[str] = field(default_factory=list)
    reserved_cards: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "marketCards": list(self.market_cards),
            "reservedCards": list(self.reserved_cards),
        }


@dataclass
class AvailableActions:
    """
    Everything a player may do at this point of the game.

    While a discard or noble choice is pending for the player only that
    sub-flow is reported; the main-action option sets stay empty.
    """
    is_player_turn: bool = False
    must_discard_gems: bool = False
    gems_to_discard: int = 0
    must_select_noble: bool = False
    selectable_nobles: List[str] = field(default_factory=list)
    take_gems: TakeGemsOptions = field(default_factory=TakeGemsOptions)
    reservable_cards: ReservableCards = field(default_factory=ReservableCards)
    purchasable_cards: PurchasableCards = field(default_factory=PurchasableCards)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isPlayerTurn": self.is_player_turn,
            "mustDiscardGems": self.must_discard_gems,
            "gemsToDiscard": self.gems_to_discard,
            "mustSelectNoble": self.must_select_noble,
            "selectableNobles": list(self.selectable_nobles),
            "takeGems": self.take_gems.to_dict(),
            "reservableCards": self.reservable_cards.to_dict(),
            "purchasableCards": self.purchasable_cards.to_dict(),
        }


def get_available_actions(state: GameState, player_id: str) -> AvailableActions:
    """
    Get the actions available to a player.

    Args:
        state: Current game state
        player_id: Player to check actions for

    Returns:
        AvailableActions; all option sets are empty when the player is unknown,
        it is not their turn, the game is not running, or someone else must
        resolve a pending discard or noble choice
    """
    player = state.get_player(player_id)
    if player is None:
        return AvailableActions()

    is_my_turn = is_players_turn(state, player_id) and is_game_in_progress(state)

    pending_discard = state.pending_gem_discard
    must_discard = is_my_turn and pending_discard is not None and pending_discard.player_id == player_id

    pending_noble = state.pending_noble_selection
    eligible = get_eligible_nobles(state, player_id)
    must_select_noble = (
        is_my_turn and pending_noble is not None and pending_noble.player_id == player_id
        and len(eligible) > 1
    )

    pending = not isinstance(state.turn_phase, NormalTurn)
    if not is_my_turn or pending:
        return AvailableActions(
            is_player_turn=is_my_turn,
            must_discard_gems=must_discard,
            gems_to_discard=player.gems_over_limit() if must_discard else 0,
            must_select_noble=must_select_noble,
            selectable_nobles=eligible if must_select_noble else [],
        )

    return AvailableActions(
        is_player_turn=True,
        take_gems=get_take_gem_options(state),
        reservable_cards=get_reservable_cards(state, player_id),
        purchasable_cards=get_purchasable_cards(state, player_id),
    )


def get_take_gem_options(state: GameState) -> TakeGemsOptions:
    """Get the colors available for taking different gems and for taking two."""
    available_for_three = [color for color in REGULAR_GEMS if state.bank.get(color, 0) >= 1]
    available_for_two = [
        color for color in REGULAR_GEMS if state.bank.get(color, 0) >= MIN_GEMS_FOR_TAKE_TWO
    ]
    return TakeGemsOptions(
        can_take_three=len(available_for_three) >= 1,
        available_for_three=available_for_three,
        available_for_two=available_for_two,
    )


def get_reservable_cards(state: GameState, player_id: str) -> ReservableCards:
    """Get the market cards and deck tiers the player could reserve from."""
    player = state.get_player(player_id)
    if player is None or not player.can_reserve_card():
        return ReservableCards()

    return ReservableCards(
        can_reserve=True,
        market_cards=[card.id for card in get_market_cards(state)],
        blind_draw_tiers=[tier for tier in CardTier if has_deck_cards(state, tier)],
    )


def get_purchasable_cards(state: GameState, player_id: str) -> PurchasableCards:
    """Get the market and reserved cards the player can afford."""
    player = state.get_player(player_id)
    if player is None:
        return PurchasableCards()

    return PurchasableCards(
        market_cards=[card.id for card in get_market_cards(state) if player.can_afford_card(card)],
        reserved_cards=[card.id for card in player.reserved_cards if player.can_afford_card(card)],
    )


def can_purchase_card(state: GameState, player_id: str, card_id: str) -> bool:
    """Check if a specific card can be purchased by a player."""
    return can_afford_card(state, player_id, card_id)


def get_card_shortfall(state: GameState, player_id: str, card_id: str) -> Dict[GemColor, int]:
    """
    Get the gems a player still misses for a card, per color.

    Gold is spread over the missing colors in color order, so the result is
    all zeros exactly when the card is affordable. Unknown players or cards
    give all zeros.
    """
    player = state.get_player(player_id)
    card = find_purchasable_card(state, player_id, card_id)
    if player is None or card is None:
        return {color: 0 for color in REGULAR_GEMS}
    return player.get_card_shortfall(card)


def get_market_cards(state: GameState) -> List[DevelopmentCard]:
    """Get every face-up card, tier 1 first, skipping empty slots."""
    return [card for tier in CardTier for card in get_market_cards_by_tier(state, tier)]


def get_market_cards_by_tier(state: GameState, tier: CardTier) -> List[DevelopmentCard]:
    return [card for card in state.market.get(tier, []) if card is not None]


def has_deck_cards(state: GameState, tier: CardTier) -> bool:
    return len(state.decks.get(tier, [])) > 0


def enumerate_legal_actions(state: GameState, player_id: str) -> List[Action]:
    """
    Get every concrete action the player may submit right now.

    Args:
        state: Current game state
        player_id: ID of the player

    Returns:
        List of actions, each accepted by validate_action
    """
    available = get_available_actions(state, player_id)
    player = state.get_player(player_id)
    if player is None:
        return []

    if available.must_discard_gems:
        return [
            DiscardGemsAction(player_id=player_id, gems=gems)
            for gems in _discard_combinations(player.gems, available.gems_to_discard)
        ]

    if available.must_select_noble:
        return [
            SelectNobleAction(player_id=player_id, noble_id=noble_id)
            for noble_id in available.selectable_nobles
        ]

    if not available.is_player_turn:
        return []

    actions: List[Action] = []

    # 1. Take gems
    colors = available.take_gems.available_for_three
    for num_colors in range(1, min(MAX_GEMS_TAKE_DIFFERENT, len(colors)) + 1):
        for combination in _get_color_combinations(colors, num_colors):
            actions.append(TakeThreeGemsAction(player_id=player_id, gems=combination))
    for color in available.take_gems.available_for_two:
        actions.append(TakeTwoGemsAction(player_id=player_id, gem=color))

    # 2. Reserve
    for card_id in available.reservable_cards.market_cards:
        actions.append(ReserveCardAction(player_id=player_id, card_id=card_id))
    for tier in available.reservable_cards.blind_draw_tiers:
        actions.append(ReserveCardAction(player_id=player_id, tier=tier))

    # 3. Purchase
    purchasable = available.purchasable_cards
    for card_id in purchasable.market_cards + purchasable.reserved_cards:
        actions.append(PurchaseCardAction(player_id=player_id, card_id=card_id))

    return actions


def _get_color_combinations(colors: Sequence[GemColor], num_colors: int) -> List[List[GemColor]]:
    """
    Get all combinations of colors of a given length, in color order.

    Args:
        colors: Colors to choose from
        num_colors: Number of colors to include in each combination

    Returns:
        List of color combinations
    """
    if num_colors == 0:
        return [[]]
    if len(colors) < num_colors:
        return []

    first, rest = colors[0], colors[1:]
    with_first = [[first] + combo for combo in _get_color_combinations(rest, num_colors - 1)]
    return with_first + _get_color_combinations(rest, num_colors)


def _discard_combinations(gems: Dict[GemColor, int], amount: int) -> Iterator[Dict[GemColor, int]]:
    """Yield every way of giving back exactly ``amount`` of the held gems."""
    held = [(color, gems.get(color, 0)) for color in ALL_GEMS if gems.get(color, 0) > 0]

    def walk(index: int, remaining: int, chosen: Dict[GemColor, int]) -> Iterator[Dict[GemColor, int]]:
        if remaining == 0:
            yield dict(chosen)
            return
        if index == len(held):
            return
        color, count = held[index]
        for take in range(min(count, remaining), -1, -1):
            if take:
                chosen[color] = take
            yield from walk(index + 1, remaining - take, chosen)
            chosen.pop(color, None)

    if amount > 0:
        yield from walk(0, amount, {})
