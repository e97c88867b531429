"""
State transitions for Splendor.

apply_action validates an action, then produces the next state. Each
``apply_*`` function works on a clone of the state it receives, so the
caller's state is never changed and no half-updated state escapes.

After a main action the end-of-turn pipeline runs:

1. more than ten gems: wait for a discard
2. nobles: one qualifies and is awarded, several qualify and the player chooses
3. end trigger: the first player at fifteen points starts the final round
4. next player; completing the final round ends the game

A discard resumes the pipeline at step 2, a noble choice at step 3.
"""
import logging
from typing import Callable, Dict, List, Optional

from splendor_rules.core.constants import (
    GemColor, CardTier, GamePhase, VICTORY_POINTS
)
from splendor_rules.core.cards import DevelopmentCard
from splendor_rules.core.actions import (
    Action, ActionType, TakeThreeGemsAction, TakeTwoGemsAction, ReserveCardAction,
    PurchaseCardAction, SelectNobleAction, DiscardGemsAction
)
from splendor_rules.core.exceptions import InvalidActionError
from splendor_rules.core.game import GameState, NormalTurn, AwaitingDiscard, AwaitingNobleChoice
from splendor_rules.core.validators import (
    validate_action, find_purchasable_card, locate_card_in_market, get_eligible_nobles
)

logger = logging.getLogger(__name__)


def apply_action(state: GameState, action: Action) -> GameState:
    """
    Apply an action and return the resulting state.

    Args:
        state: Current game state; left untouched
        action: Action to apply

    Returns:
        New game state

    Raises:
        InvalidActionError: If the action fails validation
    """
    result = validate_action(state, action)
    if not result.valid:
        raise InvalidActionError(result.error or "Invalid action", result.error_code)

    new_state = _APPLIERS[action.action_type](state, action)
    logger.debug("Game %s: %s", new_state.id, action)
    return new_state


def apply_take_three_gems(state: GameState, action: TakeThreeGemsAction) -> GameState:
    """Move one gem of each chosen color from the bank to the player."""
    new_state = state.clone()
    player = new_state.get_player(action.player_id)

    for gem in action.gems:
        new_state.bank[gem] -= 1
        player.gems[gem] += 1

    return _finish_turn(new_state, action.player_id)


def apply_take_two_gems(state: GameState, action: TakeTwoGemsAction) -> GameState:
    """Move two gems of one color from the bank to the player."""
    new_state = state.clone()
    player = new_state.get_player(action.player_id)

    new_state.bank[action.gem] -= 2
    player.gems[action.gem] += 2

    return _finish_turn(new_state, action.player_id)


def apply_reserve_card(state: GameState, action: ReserveCardAction) -> GameState:
    """
    Reserve a market card (refilling its slot) or the top card of a deck.

    The player also receives one gold gem while the bank has any.
    """
    new_state = state.clone()
    player = new_state.get_player(action.player_id)

    card: Optional[DevelopmentCard] = None
    if not action.is_blind:
        card = _remove_card_from_market(new_state, action.card_id)
        if card is not None:
            _refill_market_slot(new_state, card.tier)
    elif action.tier is not None:
        deck = new_state.decks[action.tier]
        if deck:
            card = deck.pop(0)

    if card is not None:
        player.reserved_cards.append(card)

    if new_state.bank[GemColor.GOLD] > 0:
        new_state.bank[GemColor.GOLD] -= 1
        player.gems[GemColor.GOLD] += 1

    return _finish_turn(new_state, action.player_id)


def apply_purchase_card(state: GameState, action: PurchaseCardAction) -> GameState:
    """
    Buy a card from the market or the player's reserve.

    Payment uses each color up to its effective cost and gold for the rest.
    A market slot is refilled from its deck; a reserved card leaves no gap.
    """
    new_state = state.clone()
    player = new_state.get_player(action.player_id)

    # Payment is computed while the card can still be found
    payment = calculate_payment(new_state, action.player_id, action.card_id)
    if payment is None:
        raise InvalidActionError("Cannot afford this card")

    card = _remove_card_from_market(new_state, action.card_id)
    from_reserved = False
    if card is None:
        card = player.find_reserved_card(action.card_id)
        if card is None:
            raise InvalidActionError("Card not found")
        player.reserved_cards.remove(card)
        from_reserved = True

    for color, count in payment.items():
        player.gems[color] -= count
        new_state.bank[color] += count

    player.add_card(card)

    if not from_reserved:
        _refill_market_slot(new_state, card.tier)

    return _finish_turn(new_state, action.player_id)


def apply_select_noble(state: GameState, action: SelectNobleAction) -> GameState:
    """Award the chosen noble, clear the pending choice and continue the turn."""
    new_state = state.clone()
    player = new_state.get_player(action.player_id)

    noble = next((n for n in new_state.nobles if n.id == action.noble_id), None)
    if noble is None:
        raise InvalidActionError("Noble not found")
    new_state.nobles.remove(noble)
    player.add_noble(noble)

    new_state.turn_phase = NormalTurn()
    return _check_end_and_advance(new_state)


def apply_discard_gems(state: GameState, action: DiscardGemsAction) -> GameState:
    """Return gems to the bank, clear the pending discard and continue the turn."""
    new_state = state.clone()
    player = new_state.get_player(action.player_id)

    for gem, count in action.gems.items():
        if count <= 0:
            continue
        player.gems[gem] -= count
        new_state.bank[gem] += count

    new_state.turn_phase = NormalTurn()
    return _award_nobles_and_advance(new_state, action.player_id)


_APPLIERS: Dict[ActionType, Callable[[GameState, Action], GameState]] = {
    ActionType.TAKE_THREE_GEMS: apply_take_three_gems,
    ActionType.TAKE_TWO_GEMS: apply_take_two_gems,
    ActionType.RESERVE_CARD: apply_reserve_card,
    ActionType.PURCHASE_CARD: apply_purchase_card,
    ActionType.SELECT_NOBLE: apply_select_noble,
    ActionType.DISCARD_GEMS: apply_discard_gems,
}


def _finish_turn(state: GameState, player_id: str) -> GameState:
    player = state.get_player(player_id)
    excess = player.gems_over_limit()
    if excess > 0:
        state.turn_phase = AwaitingDiscard(player_id=player_id, amount=excess)
        logger.debug("Game %s: %s must discard %d gems", state.id, player_id, excess)
        return state

    return _award_nobles_and_advance(state, player_id)


def _award_nobles_and_advance(state: GameState, player_id: str) -> GameState:
    eligible = get_eligible_nobles(state, player_id)

    if len(eligible) == 1:
        noble = next(n for n in state.nobles if n.id == eligible[0])
        state.nobles.remove(noble)
        state.get_player(player_id).add_noble(noble)
        logger.debug("Game %s: %s is visited by %s", state.id, player_id, noble.id)
    elif len(eligible) > 1:
        state.turn_phase = AwaitingNobleChoice(player_id=player_id, eligible_noble_ids=tuple(eligible))
        return state

    return _check_end_and_advance(state)


def _check_end_and_advance(state: GameState) -> GameState:
    check_game_end_trigger(state)
    return advance_turn(state)


def advance_turn(state: GameState) -> GameState:
    """
    Pass the turn to the next player, in place.

    Wrapping back to the first seat starts a new round, and ends the game if
    that completes the final round.

    Args:
        state: State to update (normally a clone owned by the engine)

    Returns:
        The same state object
    """
    if state.phase == GamePhase.ENDED:
        return state

    state.current_player_index = (state.current_player_index + 1) % len(state.players)

    if state.current_player_index == 0:
        state.round += 1
        if state.phase == GamePhase.FINAL_ROUND:
            check_game_end(state)

    return state


def check_game_end_trigger(state: GameState) -> GameState:
    """
    Start the final round, in place, once any player reaches the victory threshold.

    The triggering player is the first such player in seat order.
    """
    if state.phase != GamePhase.PLAYING:
        return state

    for player in state.players:
        if player.prestige_points >= VICTORY_POINTS:
            state.end_game_triggered_by = player.id
            state.phase = GamePhase.FINAL_ROUND
            logger.info(
                "Game %s: %s reached %d points, final round begins",
                state.id, player.id, player.prestige_points
            )
            break

    return state


def check_game_end(state: GameState) -> GameState:
    """End the game, in place, if it is in its final round."""
    if state.phase != GamePhase.FINAL_ROUND:
        return state

    state.phase = GamePhase.ENDED
    state.winners = determine_winners(state)
    logger.info("Game %s ended after round %d, winners: %s",
                state.id, state.round - 1, ", ".join(state.winners))
    return state


def determine_winners(state: GameState) -> List[str]:
    """
    Determine the winner(s) of a completed game.

    Tiebreaker rules:
    1. Highest prestige points
    2. Fewest purchased cards
    3. If still tied, shared victory

    Returns:
        IDs of the winning players in seat order
    """
    if not state.players:
        return []

    max_points = max(player.prestige_points for player in state.players)
    candidates = [p for p in state.players if p.prestige_points == max_points]
    if len(candidates) == 1:
        return [candidates[0].id]

    min_cards = min(len(p.purchased_cards) for p in candidates)
    return [p.id for p in candidates if len(p.purchased_cards) == min_cards]


def calculate_payment(state: GameState, player_id: str, card_id: str) -> Optional[Dict[GemColor, int]]:
    """
    Work out which gems pay for a card.

    Args:
        state: Current game state
        player_id: ID of the buying player
        card_id: ID of a market card or one of the player's reserved cards

    Returns:
        Gems paid per type (gold included), or None if the player, the card,
        or the means to pay are missing
    """
    player = state.get_player(player_id)
    card = find_purchasable_card(state, player_id, card_id)
    if player is None or card is None:
        return None
    return player.get_affordable_payment(card)


def refill_market(state: GameState, tier: CardTier) -> GameState:
    """Return a copy of the state with the first empty slot of a tier refilled."""
    new_state = state.clone()
    _refill_market_slot(new_state, tier)
    return new_state


def _remove_card_from_market(state: GameState, card_id: str) -> Optional[DevelopmentCard]:
    # The slot is left empty so the other cards keep their positions
    location = locate_card_in_market(state, card_id)
    if location is None:
        return None
    tier, index = location
    card = state.market[tier][index]
    state.market[tier][index] = None
    return card


def _refill_market_slot(state: GameState, tier: CardTier) -> None:
    deck = state.decks[tier]
    slots = state.market[tier]
    if not deck or None not in slots:
        return
    slots[slots.index(None)] = deck.pop(0)
