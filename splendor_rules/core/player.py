"""
Player representation for the Splendor game.

This module defines the Player class which tracks a player's holdings (gems,
bonuses, reserved and purchased cards, nobles, points) and the cost rule shared
by purchase validation, payment and the availability query.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from splendor_rules.core.constants import (
    GemColor, REGULAR_GEMS, ALL_GEMS, MAX_GEMS_TOTAL, MAX_RESERVED_CARDS
)
from splendor_rules.core.cards import (
    DevelopmentCard, Noble, find_card_by_id, find_noble_by_id
)


def empty_gem_collection() -> Dict[GemColor, int]:
    """Create a gem collection with every gem type, gold included, at zero."""
    return {color: 0 for color in ALL_GEMS}


def empty_bonus_collection() -> Dict[GemColor, int]:
    """Create a collection with every regular color at zero."""
    return {color: 0 for color in REGULAR_GEMS}


@dataclass
class Player:
    """
    Represents a player in the Splendor game.

    Tracks the player's gems, cards, nobles, points, and provides methods
    for the cost rule: bonuses reduce the printed cost first, then each color's
    shortfall against held gems must be covered by gold.
    """
    id: str
    name: str
    gems: Dict[GemColor, int] = field(default_factory=empty_gem_collection)
    bonuses: Dict[GemColor, int] = field(default_factory=empty_bonus_collection)
    reserved_cards: List[DevelopmentCard] = field(default_factory=list)
    purchased_cards: List[DevelopmentCard] = field(default_factory=list)
    nobles: List[Noble] = field(default_factory=list)
    prestige_points: int = 0

    def __post_init__(self):
        """Fill in missing gem and bonus entries."""
        for color in ALL_GEMS:
            self.gems.setdefault(color, 0)
        for color in REGULAR_GEMS:
            self.bonuses.setdefault(color, 0)

    def effective_cost(self, card: DevelopmentCard) -> Dict[GemColor, int]:
        """
        Get the cost of a card after applying this player's bonuses.

        Args:
            card: The card to price

        Returns:
            Dictionary mapping every regular color to the gems still owed
        """
        return {
            color: max(0, card.cost_of(color) - self.bonuses.get(color, 0))
            for color in REGULAR_GEMS
        }

    def gold_needed(self, card: DevelopmentCard) -> int:
        """Get how many gold gems must cover colors the player is short of."""
        needed = 0
        for color, cost in self.effective_cost(card).items():
            shortfall = cost - self.gems.get(color, 0)
            if shortfall > 0:
                needed += shortfall
        return needed

    def can_afford_card(self, card: DevelopmentCard) -> bool:
        """
        Check if the player can afford to purchase a card.

        Args:
            card: The card to check

        Returns:
            True if held gold covers every color shortfall, False otherwise
        """
        return self.gems.get(GemColor.GOLD, 0) >= self.gold_needed(card)

    def get_affordable_payment(self, card: DevelopmentCard) -> Optional[Dict[GemColor, int]]:
        """
        Get the payment for a card if the player can afford it.

        Regular gems are used up to the effective cost of each color and gold
        covers the remainder, so the payment is fully determined by the state.

        Args:
            card: The card to purchase

        Returns:
            Dictionary mapping every gem type (gold included) to the count paid,
            or None if the card can't be afforded
        """
        payment = empty_gem_collection()
        for color, cost in self.effective_cost(card).items():
            available = self.gems.get(color, 0)
            if available >= cost:
                payment[color] = cost
            else:
                payment[color] = available
                payment[GemColor.GOLD] += cost - available

        if payment[GemColor.GOLD] > self.gems.get(GemColor.GOLD, 0):
            return None
        return payment

    def get_card_shortfall(self, card: DevelopmentCard) -> Dict[GemColor, int]:
        """
        Get how many gems of each color the player still misses for a card.

        Held gold is spread over the missing colors in color order, so the
        result sums to zero exactly when the card is affordable.
        """
        shortfall = {
            color: max(0, cost - self.gems.get(color, 0))
            for color, cost in self.effective_cost(card).items()
        }
        gold_available = self.gems.get(GemColor.GOLD, 0)
        for color in REGULAR_GEMS:
            if gold_available > 0 and shortfall[color] > 0:
                gold_used = min(gold_available, shortfall[color])
                shortfall[color] -= gold_used
                gold_available -= gold_used
        return shortfall

    def meets_requirements(self, noble: Noble) -> bool:
        """Check whether this player's bonuses attract a noble."""
        return noble.can_visit(self.bonuses)

    def can_reserve_card(self) -> bool:
        """
        Check if the player can reserve another card.

        Returns:
            True if the player holds fewer than the maximum reserved cards
        """
        return len(self.reserved_cards) < MAX_RESERVED_CARDS

    def find_reserved_card(self, card_id: str) -> Optional[DevelopmentCard]:
        """Get a reserved card by ID, if the player holds it."""
        for card in self.reserved_cards:
            if card.id == card_id:
                return card
        return None

    def add_card(self, card: DevelopmentCard) -> None:
        """
        Add a purchased card to the player's collection.

        Updates bonuses and points.

        Args:
            card: The card to add
        """
        self.purchased_cards.append(card)
        self.bonuses[card.bonus] = self.bonuses.get(card.bonus, 0) + 1
        self.prestige_points += card.prestige_points

    def add_noble(self, noble: Noble) -> None:
        """
        Add a noble to the player's collection.

        Updates points.

        Args:
            noble: The noble to add
        """
        self.nobles.append(noble)
        self.prestige_points += noble.prestige_points

    def add_gems(self, gems: Dict[GemColor, int]) -> None:
        """
        Add gems to the player's collection.

        Args:
            gems: Dictionary mapping gem colors to counts
        """
        for color, count in gems.items():
            self.gems[color] = self.gems.get(color, 0) + count

    def remove_gems(self, gems: Dict[GemColor, int]) -> None:
        """
        Remove gems from the player's collection.

        Args:
            gems: Dictionary mapping gem colors to counts
        """
        for color, count in gems.items():
            if self.gems.get(color, 0) < count:
                raise ValueError(f"Not enough {color.name} gems")
            self.gems[color] -= count

    def get_total_gems(self) -> int:
        """
        Get the total number of gems the player has, gold included.

        Returns:
            Total gem count
        """
        return sum(self.gems.values())

    def gems_over_limit(self) -> int:
        """Get how many gems the player must give back to reach the limit."""
        return max(0, self.get_total_gems() - MAX_GEMS_TOTAL)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the player to a dictionary for serialization.

        Returns:
            Dictionary representation of the player
        """
        return {
            "id": self.id,
            "name": self.name,
            "gems": {color.value: self.gems.get(color, 0) for color in ALL_GEMS},
            "bonuses": {color.value: self.bonuses.get(color, 0) for color in REGULAR_GEMS},
            "reservedCards": [card.id for card in self.reserved_cards],
            "purchasedCards": [card.id for card in self.purchased_cards],
            "nobles": [noble.id for noble in self.nobles],
            "prestigePoints": self.prestige_points,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Player':
        """
        Create a player from a dictionary representation.

        Cards and nobles are resolved against the catalog by ID.

        Args:
            data: Dictionary representation of the player

        Returns:
            Player object
        """
        return cls(
            id=data["id"],
            name=data["name"],
            gems={GemColor(color): count for color, count in data["gems"].items()},
            bonuses={GemColor(color): count for color, count in data["bonuses"].items()},
            reserved_cards=[_lookup_card(card_id) for card_id in data["reservedCards"]],
            purchased_cards=[_lookup_card(card_id) for card_id in data["purchasedCards"]],
            nobles=[_lookup_noble(noble_id) for noble_id in data["nobles"]],
            prestige_points=data["prestigePoints"],
        )

    def __str__(self) -> str:
        """
        Return a human-readable string representation of the player.

        Returns:
            String representation
        """
        gem_str = ", ".join(f"{count} {color.name}" for color, count in self.gems.items() if count > 0)
        bonus_str = ", ".join(f"{count} {color.name}" for color, count in self.bonuses.items() if count > 0)

        return (
            f"Player {self.name} (ID: {self.id})\n"
            f"Points: {self.prestige_points}\n"
            f"Gems: {gem_str}\n"
            f"Bonuses: {bonus_str}\n"
            f"Cards: {len(self.purchased_cards)}\n"
            f"Reserved Cards: {len(self.reserved_cards)}\n"
            f"Nobles: {len(self.nobles)}"
        )


def _lookup_card(card_id: str) -> DevelopmentCard:
    card = find_card_by_id(card_id)
    if card is None:
        raise ValueError(f"Unknown card id: {card_id}")
    return card


def _lookup_noble(noble_id: str) -> Noble:
    noble = find_noble_by_id(noble_id)
    if noble is None:
        raise ValueError(f"Unknown noble id: {noble_id}")
    return noble
