"""
Game state and setup for Splendor.

This module defines the core game data, including:
- TurnPhase: which sub-flow (if any) the game is waiting on
- GameState: complete representation of a game's state
- create_game and its setup helpers (shuffling, bank, players)

States are plain data. Transitions live in ``splendor_rules.core.engine`` and
always work on a clone, so a state handed to a caller is never changed again.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar, Union
import copy
import json
import logging
import math
import random
import uuid

from splendor_rules.core.constants import (
    GemColor, CardTier, GamePhase, REGULAR_GEMS, ALL_GEMS, GOLD_GEMS_COUNT,
    GEMS_PER_COLOR_BY_PLAYERS, VISIBLE_CARDS_PER_TIER
)
from splendor_rules.core.cards import (
    DevelopmentCard, Noble, get_cards_by_tier, get_all_nobles,
    find_card_by_id, find_noble_by_id
)
from splendor_rules.core.config import GameConfig
from splendor_rules.core.exceptions import GameSetupError
from splendor_rules.core.player import Player

logger = logging.getLogger(__name__)

T = TypeVar("T")
RandomSource = Callable[[], float]


@dataclass(frozen=True)
class NormalTurn:
    """The current player may take any main action."""

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "normal"}


@dataclass(frozen=True)
class AwaitingDiscard:
    """A player holds more than 10 gems and must discard before play continues."""
    player_id: str
    amount: int

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "awaiting_discard", "playerId": self.player_id, "amount": self.amount}


@dataclass(frozen=True)
class AwaitingNobleChoice:
    """A player qualifies for several nobles and must pick one."""
    player_id: str
    eligible_noble_ids: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "awaiting_noble_choice",
            "playerId": self.player_id,
            "eligibleNobleIds": list(self.eligible_noble_ids),
        }


TurnPhase = Union[NormalTurn, AwaitingDiscard, AwaitingNobleChoice]


def turn_phase_from_dict(data: Mapping[str, Any]) -> TurnPhase:
    """Rebuild a turn phase from its dictionary representation."""
    kind = data["kind"]
    if kind == "normal":
        return NormalTurn()
    if kind == "awaiting_discard":
        return AwaitingDiscard(player_id=data["playerId"], amount=data["amount"])
    if kind == "awaiting_noble_choice":
        return AwaitingNobleChoice(
            player_id=data["playerId"],
            eligible_noble_ids=tuple(data["eligibleNobleIds"]),
        )
    raise ValueError(f"Unknown turn phase: {kind}")


@dataclass(frozen=True)
class PlayerInfo:
    """Seat information supplied when creating a game."""
    id: str
    name: str

    @classmethod
    def coerce(cls, value: Union['PlayerInfo', Mapping[str, Any]]) -> 'PlayerInfo':
        if isinstance(value, cls):
            return value
        return cls(id=value["id"], name=value["name"])


def _tier_key(tier: CardTier) -> str:
    return f"tier{tier.value}"


def _tier_from_key(key: str) -> CardTier:
    return CardTier(int(key[len("tier"):]))


@dataclass
class GameState:
    """
    Complete representation of a Splendor game state.

    The market holds exactly four slots per tier; an emptied slot stays as
    ``None`` until the deck refills it. Decks are ordered top first.
    """
    id: str
    phase: GamePhase
    players: List[Player]
    current_player_index: int
    bank: Dict[GemColor, int]
    market: Dict[CardTier, List[Optional[DevelopmentCard]]]
    decks: Dict[CardTier, List[DevelopmentCard]]
    nobles: List[Noble]
    round: int = 1
    end_game_triggered_by: Optional[str] = None
    winners: List[str] = field(default_factory=list)
    turn_phase: TurnPhase = field(default_factory=NormalTurn)

    @property
    def current_player(self) -> Player:
        """Get the player whose turn it is."""
        return self.players[self.current_player_index]

    @property
    def num_players(self) -> int:
        """Get the number of players in the game."""
        return len(self.players)

    @property
    def pending_gem_discard(self) -> Optional[AwaitingDiscard]:
        """The pending discard, if the game is waiting on one."""
        if isinstance(self.turn_phase, AwaitingDiscard):
            return self.turn_phase
        return None

    @property
    def pending_noble_selection(self) -> Optional[AwaitingNobleChoice]:
        """The pending noble choice, if the game is waiting on one."""
        if isinstance(self.turn_phase, AwaitingNobleChoice):
            return self.turn_phase
        return None

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.ENDED

    def get_player(self, player_id: str) -> Optional[Player]:
        """
        Get a player by ID.

        Args:
            player_id: ID of the player to get

        Returns:
            Player object, or None if no such player sits at this table
        """
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def get_player_index(self, player_id: str) -> Optional[int]:
        for index, player in enumerate(self.players):
            if player.id == player_id:
                return index
        return None

    def clone(self) -> GameState:
        """
        Create a deep copy of the game state.

        Cards and nobles are immutable and stay shared with the original.

        Returns:
            Copy of the game state
        """
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the game state to a dictionary for serialization.

        Cards and nobles are stored by ID and resolved against the catalog on load.

        Returns:
            Dictionary representation of the game state
        """
        return {
            "id": self.id,
            "phase": self.phase.value,
            "players": [player.to_dict() for player in self.players],
            "currentPlayerIndex": self.current_player_index,
            "bank": {color.value: self.bank.get(color, 0) for color in ALL_GEMS},
            "market": {
                _tier_key(tier): [card.id if card is not None else None for card in slots]
                for tier, slots in self.market.items()
            },
            "decks": {
                _tier_key(tier): [card.id for card in deck]
                for tier, deck in self.decks.items()
            },
            "nobles": [noble.id for noble in self.nobles],
            "round": self.round,
            "endGameTriggeredBy": self.end_game_triggered_by,
            "winners": list(self.winners),
            "turnPhase": self.turn_phase.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GameState:
        """
        Create a game state from a dictionary representation.

        Args:
            data: Dictionary representation of the game state

        Returns:
            GameState object
        """
        def card(card_id: str) -> DevelopmentCard:
            found = find_card_by_id(card_id)
            if found is None:
                raise ValueError(f"Unknown card id: {card_id}")
            return found

        def noble(noble_id: str) -> Noble:
            found = find_noble_by_id(noble_id)
            if found is None:
                raise ValueError(f"Unknown noble id: {noble_id}")
            return found

        return cls(
            id=data["id"],
            phase=GamePhase(data["phase"]),
            players=[Player.from_dict(player_data) for player_data in data["players"]],
            current_player_index=data["currentPlayerIndex"],
            bank={GemColor(color): count for color, count in data["bank"].items()},
            market={
                _tier_from_key(key): [card(card_id) if card_id is not None else None for card_id in slots]
                for key, slots in data["market"].items()
            },
            decks={
                _tier_from_key(key): [card(card_id) for card_id in deck]
                for key, deck in data["decks"].items()
            },
            nobles=[noble(noble_id) for noble_id in data["nobles"]],
            round=data["round"],
            end_game_triggered_by=data.get("endGameTriggeredBy"),
            winners=list(data.get("winners", [])),
            turn_phase=turn_phase_from_dict(data.get("turnPhase", {"kind": "normal"})),
        )

    def to_json(self) -> str:
        """
        Convert the game state to a JSON string.

        Returns:
            JSON string representation of the game state
        """
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> GameState:
        """
        Create a game state from a JSON string.

        Args:
            json_str: JSON string representation of the game state

        Returns:
            GameState object
        """
        return cls.from_dict(json.loads(json_str))

    def get_observation(self, player_id: str) -> Dict[str, Any]:
        """
        Get an observation of the game state from a player's perspective.

        This includes only information that would be visible to the player
        at a real table. Deck contents and order are reduced to counts;
        reserved cards are public and shown in full for every player.

        Args:
            player_id: ID of the viewing player

        Returns:
            Dictionary containing the observation
        """
        from splendor_rules.core.availability import get_available_actions

        players = []
        for player in self.players:
            info = {
                "id": player.id,
                "name": player.name,
                "gems": {color.value: player.gems.get(color, 0) for color in ALL_GEMS},
                "bonuses": {color.value: player.bonuses.get(color, 0) for color in REGULAR_GEMS},
                "reservedCards": [card.to_dict() for card in player.reserved_cards],
                "purchasedCards": [card.to_dict() for card in player.purchased_cards],
                "nobles": [noble.to_dict() for noble in player.nobles],
                "prestigePoints": player.prestige_points,
            }
            players.append(info)

        return {
            "id": self.id,
            "phase": self.phase.value,
            "players": players,
            "currentPlayerIndex": self.current_player_index,
            "bank": {color.value: self.bank.get(color, 0) for color in ALL_GEMS},
            "market": {
                _tier_key(tier): [card.to_dict() if card is not None else None for card in slots]
                for tier, slots in self.market.items()
            },
            "deckCounts": {_tier_key(tier): len(deck) for tier, deck in self.decks.items()},
            "nobles": [noble.to_dict() for noble in self.nobles],
            "round": self.round,
            "endGameTriggeredBy": self.end_game_triggered_by,
            "winners": list(self.winners),
            "turnPhase": self.turn_phase.to_dict(),
            "availableActions": get_available_actions(self, player_id).to_dict(),
        }

    def __str__(self) -> str:
        """
        Return a human-readable string representation of the game state.

        Returns:
            String representation
        """
        lines = [
            f"Game {self.id} | {self.phase.value} | round {self.round} | "
            f"current: {self.current_player.name}",
            "Bank: " + ", ".join(f"{count} {color.name}" for color, count in self.bank.items()),
        ]
        for tier in CardTier:
            slots = self.market.get(tier, [])
            lines.append(
                f"Tier {tier.value} ({len(self.decks.get(tier, []))} in deck): "
                + ", ".join(card.id if card is not None else "-" for card in slots)
            )
        lines.append("Nobles: " + ", ".join(noble.id for noble in self.nobles))
        for player in self.players:
            lines.append(
                f"  {player.name}: {player.prestige_points} points, "
                f"{player.get_total_gems()} gems, {len(player.purchased_cards)} cards"
            )
        if self.winners:
            lines.append("Winners: " + ", ".join(self.winners))
        return "\n".join(lines)


def shuffle(items: Sequence[T], random_source: Optional[RandomSource] = None) -> List[T]:
    """
    Return a shuffled copy of ``items`` (Fisher-Yates).

    Each step draws ``r()`` once and swaps position ``i`` with
    ``floor(r() * (i + 1))``, walking from the end of the list to index 1.

    Args:
        items: Items to shuffle; left untouched
        random_source: Callable returning floats in [0, 1)

    Returns:
        New shuffled list
    """
    draw = random_source if random_source is not None else random.random
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = math.floor(draw() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result


def create_initial_bank(player_count: int) -> Dict[GemColor, int]:
    """
    Create the starting gem supply for a player count.

    Args:
        player_count: Number of players (2-4)

    Returns:
        Dictionary mapping every gem type to its starting count
    """
    if player_count not in GEMS_PER_COLOR_BY_PLAYERS:
        raise GameSetupError(f"Unsupported player count: {player_count}")
    per_color = GEMS_PER_COLOR_BY_PLAYERS[player_count]
    bank = {color: per_color for color in REGULAR_GEMS}
    bank[GemColor.GOLD] = GOLD_GEMS_COUNT
    return bank


def create_player(info: Union[PlayerInfo, Mapping[str, Any]]) -> Player:
    """Create a player with no gems, cards or nobles."""
    info = PlayerInfo.coerce(info)
    return Player(id=info.id, name=info.name)


def create_game(
    config: Union[GameConfig, int, Mapping[str, Any]],
    players: Sequence[Union[PlayerInfo, Mapping[str, Any]]],
    random_source: Optional[RandomSource] = None,
    game_id: Optional[str] = None
) -> GameState:
    """
    Create a new Splendor game.

    Randomness is drawn in a fixed order: seat order first, then the tier 1,
    tier 2 and tier 3 decks, then the nobles. Passing a seeded source
    therefore reproduces the same game.

    Args:
        config: Game configuration, a player count, or a ``{"playerCount": n}`` mapping
        players: Seat information, one entry per player
        random_source: Callable returning floats in [0, 1); defaults to random.random
        game_id: Identifier for the new game; generated when omitted

    Returns:
        GameState in the PLAYING phase, first round, first seat to act
    """
    config = GameConfig.coerce(config)
    infos = [PlayerInfo.coerce(info) for info in players]

    if len(infos) != config.player_count:
        raise GameSetupError(
            f"Expected {config.player_count} players, got {len(infos)}"
        )
    ids = [info.id for info in infos]
    if len(set(ids)) != len(ids):
        raise GameSetupError(f"Player ids must be unique: {ids}")

    seats = shuffle(infos, random_source)

    market: Dict[CardTier, List[Optional[DevelopmentCard]]] = {}
    decks: Dict[CardTier, List[DevelopmentCard]] = {}
    for tier in CardTier:
        cards = shuffle(get_cards_by_tier(tier), random_source)
        market[tier] = list(cards[:VISIBLE_CARDS_PER_TIER])
        decks[tier] = cards[VISIBLE_CARDS_PER_TIER:]

    nobles = shuffle(get_all_nobles(), random_source)[:config.player_count + 1]

    state = GameState(
        id=game_id if game_id is not None else f"game_{uuid.uuid4().hex[:12]}",
        phase=GamePhase.PLAYING,
        players=[create_player(info) for info in seats],
        current_player_index=0,
        bank=create_initial_bank(config.player_count),
        market=market,
        decks=decks,
        nobles=nobles,
    )
    logger.info(
        "Created game %s with %d players (seat order: %s)",
        state.id, state.num_players, ", ".join(p.id for p in state.players)
    )
    return state
