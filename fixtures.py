"""
Shared state builders for the test suite.

States are always created through create_game with a seeded random source and
then adjusted. Helpers that move gems or cards keep the totals intact so the
conservation checks still hold on the adjusted states.
"""
import random
from typing import Dict, Iterator, List, Optional

from splendor_rules.core.constants import GemColor, CardTier, ALL_GEMS, REGULAR_GEMS
from splendor_rules.core.cards import DevelopmentCard, find_card_by_id
from splendor_rules.core.config import GameConfig
from splendor_rules.core.game import GameState, PlayerInfo, create_game
from splendor_rules.core.engine import apply_action
from splendor_rules.core.availability import enumerate_legal_actions
from splendor_rules.simulation import acting_player_id

NAMES = ["Alice", "Bob", "Carol", "Dave"]


def new_game(player_count: int = 2, seed: int = 7, game_id: str = "test-game") -> GameState:
    """Create a seeded game with players p1..pN."""
    players = [PlayerInfo(id=f"p{i + 1}", name=NAMES[i]) for i in range(player_count)]
    return create_game(
        GameConfig(player_count),
        players,
        random_source=random.Random(seed).random,
        game_id=game_id,
    )


def give_gems(state: GameState, player_id: str, gems: Dict[GemColor, int]) -> None:
    """Move gems from the bank to a player."""
    player = state.get_player(player_id)
    for color, count in gems.items():
        if state.bank[color] < count:
            raise ValueError(f"Bank only has {state.bank[color]} {color.name}")
        state.bank[color] -= count
        player.gems[color] += count


def set_bonuses(state: GameState, player_id: str, bonuses: Dict[GemColor, int]) -> None:
    player = state.get_player(player_id)
    player.bonuses = {color: bonuses.get(color, 0) for color in REGULAR_GEMS}


def place_card_in_market(state: GameState, card_id: str, slot: int = 0) -> DevelopmentCard:
    """Swap a catalog card into a market slot, wherever it currently is in its tier."""
    card = find_card_by_id(card_id)
    slots = state.market[card.tier]
    deck = state.decks[card.tier]
    if card in slots:
        index = slots.index(card)
        slots[index], slots[slot] = slots[slot], slots[index]
    else:
        index = deck.index(card)
        deck[index], slots[slot] = slots[slot], card
    return card


def put_custom_card_in_market(state: GameState, card: DevelopmentCard, slot: int = 0) -> None:
    """Overwrite a market slot with a card built for the test."""
    state.market[card.tier][slot] = card


def gem_totals(state: GameState) -> Dict[GemColor, int]:
    """Bank plus every player's holdings, per gem type."""
    totals = {color: state.bank.get(color, 0) for color in ALL_GEMS}
    for player in state.players:
        for color in ALL_GEMS:
            totals[color] += player.gems.get(color, 0)
    return totals


def card_ids_in_play(state: GameState) -> List[str]:
    """IDs of every card in the market, the decks and all players' hands."""
    ids = []
    for tier in CardTier:
        ids.extend(card.id for card in state.market[tier] if card is not None)
        ids.extend(card.id for card in state.decks[tier])
    for player in state.players:
        ids.extend(card.id for card in player.reserved_cards)
        ids.extend(card.id for card in player.purchased_cards)
    return ids


def random_playthrough(
    state: GameState, seed: int = 0, max_actions: int = 400
) -> Iterator[GameState]:
    """Yield every state reached by applying random legal actions."""
    rng = random.Random(seed)
    for _ in range(max_actions):
        if state.is_over:
            return
        actions = enumerate_legal_actions(state, acting_player_id(state))
        if not actions:
            return
        state = apply_action(state, rng.choice(actions))
        yield state


def first_state_matching(states: Iterator[GameState], predicate) -> Optional[GameState]:
    for state in states:
        if predicate(state):
            return state
    return None
