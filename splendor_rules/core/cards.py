"""
Cards and Nobles for the Splendor game.

This module defines the immutable data structures for development cards and
nobles, the fixed catalog of 90 cards and 10 nobles, and lookup helpers.

Cards and nobles are created once, at import time, and are shared by reference
between every game state. Copying a state never copies a card: both classes
return themselves from ``__copy__``/``__deepcopy__``.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from splendor_rules.core.constants import (
    GemColor, CardTier, REGULAR_GEMS, CARDS_PER_TIER,
    NOBLE_POINTS, MIN_CARD_POINTS, MAX_CARD_POINTS
)


@dataclass(frozen=True)
class DevelopmentCard:
    """
    Represents a development card in Splendor.

    Each card has a tier, prestige points, a gem cost, and provides a permanent gem bonus.
    """
    id: str  # Unique identifier
    tier: CardTier  # Card tier (1, 2, or 3)
    cost: Dict[GemColor, int]  # Cost in colored gems
    bonus: GemColor  # Gem color this card provides as bonus
    prestige_points: int = 0

    def __post_init__(self):
        """Validate the card after initialization."""
        # Gold is only used as a joker when paying
        if GemColor.GOLD in self.cost:
            raise ValueError("Card cost cannot include gold gems")

        if self.bonus == GemColor.GOLD:
            raise ValueError("Card bonus cannot be gold")

        if any(count < 0 for count in self.cost.values()):
            raise ValueError(f"Card {self.id} has a negative cost")

        if not any(count > 0 for count in self.cost.values()):
            raise ValueError(f"Card {self.id} must cost at least one gem")

        if not MIN_CARD_POINTS <= self.prestige_points <= MAX_CARD_POINTS:
            raise ValueError(
                f"Card points ({self.prestige_points}) outside valid range "
                f"({MIN_CARD_POINTS}-{MAX_CARD_POINTS})"
            )

    def __hash__(self) -> int:
        return hash(self.id)

    def __copy__(self) -> 'DevelopmentCard':
        return self

    def __deepcopy__(self, memo) -> 'DevelopmentCard':
        return self

    def cost_of(self, color: GemColor) -> int:
        """Get the printed cost of this card in one color."""
        return self.cost.get(color, 0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the card to its wire representation."""
        return {
            "id": self.id,
            "tier": self.tier.value,
            "cost": {color.value: self.cost_of(color) for color in REGULAR_GEMS},
            "bonus": self.bonus.value,
            "prestigePoints": self.prestige_points,
        }

    def __str__(self) -> str:
        """String representation of the card."""
        cost_str = ", ".join(f"{count} {color.name}" for color, count in self.cost.items())
        return (f"Card {self.id}(Tier: {self.tier.value}, Points: {self.prestige_points}, "
                f"Bonus: {self.bonus.name}, Cost: {cost_str})")


@dataclass(frozen=True)
class Noble:
    """
    Represents a noble in Splendor.

    Nobles provide prestige points when a player meets their requirements.
    Requirements are based on the player's gem bonuses (cards), not their gems.
    """
    id: str  # Unique identifier
    requirements: Dict[GemColor, int] = field(default_factory=dict)  # Required gem bonuses
    prestige_points: int = NOBLE_POINTS  # Always 3 points

    def __post_init__(self):
        """Validate the noble after initialization."""
        if GemColor.GOLD in self.requirements:
            raise ValueError("Noble requirements cannot include gold")

        if self.prestige_points != NOBLE_POINTS:
            raise ValueError(f"Nobles are always worth {NOBLE_POINTS} points")

    def __hash__(self) -> int:
        return hash(self.id)

    def __copy__(self) -> 'Noble':
        return self

    def __deepcopy__(self, memo) -> 'Noble':
        return self

    def can_visit(self, bonuses: Dict[GemColor, int]) -> bool:
        """
        Check if the noble can visit a player with the given bonuses.

        Args:
            bonuses: Dictionary of gem color bonuses from purchased cards

        Returns:
            True if every requirement is met, False otherwise
        """
        for color in REGULAR_GEMS:
            if bonuses.get(color, 0) < self.requirements.get(color, 0):
                return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert the noble to its wire representation."""
        return {
            "id": self.id,
            "requirements": {color.value: self.requirements.get(color, 0) for color in REGULAR_GEMS},
            "prestigePoints": self.prestige_points,
        }

    def __str__(self) -> str:
        """String representation of the noble."""
        req_str = ", ".join(f"{count} {color.name}" for color, count in self.requirements.items())
        return f"Noble {self.id}(Points: {self.prestige_points}, Requirements: {req_str})"


E, D, S, O, R = (
    GemColor.EMERALD, GemColor.DIAMOND, GemColor.SAPPHIRE, GemColor.ONYX, GemColor.RUBY
)

# (id, bonus, points, cost)
_CardRow = Tuple[str, GemColor, int, Dict[GemColor, int]]

_TIER_1_ROWS: List[_CardRow] = [
    # Diamond bonus
    ("t1_d01", D, 0, {S: 1, E: 1, R: 1, O: 1}),
    ("t1_d02", D, 0, {S: 1, E: 2, R: 1, O: 1}),
    ("t1_d03", D, 0, {S: 2, E: 2, O: 1}),
    ("t1_d04", D, 0, {E: 3, R: 1, O: 1}),
    ("t1_d05", D, 0, {S: 3}),
    ("t1_d06", D, 0, {S: 2, O: 2}),
    ("t1_d07", D, 0, {S: 2, E: 2, R: 1}),
    ("t1_d08", D, 1, {O: 4}),
    # Sapphire bonus
    ("t1_s01", S, 0, {D: 1, E: 1, R: 1, O: 1}),
    ("t1_s02", S, 0, {D: 1, E: 1, R: 2, O: 1}),
    ("t1_s03", S, 0, {D: 1, E: 2, R: 2}),
    ("t1_s04", S, 0, {D: 1, E: 3, R: 1}),
    ("t1_s05", S, 0, {O: 3}),
    ("t1_s06", S, 0, {E: 2, O: 2}),
    ("t1_s07", S, 0, {D: 1, O: 2, E: 2}),
    ("t1_s08", S, 1, {R: 4}),
    # Emerald bonus
    ("t1_e01", E, 0, {D: 1, S: 1, R: 1, O: 1}),
    ("t1_e02", E, 0, {D: 1, S: 1, R: 1, O: 2}),
    ("t1_e03", E, 0, {S: 1, R: 2, O: 2}),
    ("t1_e04", E, 0, {D: 1, S: 3, E: 1}),
    ("t1_e05", E, 0, {R: 3}),
    ("t1_e06", E, 0, {S: 2, R: 2}),
    ("t1_e07", E, 0, {D: 2, S: 1, O: 2}),
    ("t1_e08", E, 1, {S: 4}),
    # Ruby bonus
    ("t1_r01", R, 0, {D: 1, S: 1, E: 1, O: 1}),
    ("t1_r02", R, 0, {D: 2, S: 1, E: 1, O: 1}),
    ("t1_r03", R, 0, {D: 2, E: 1, O: 2}),
    ("t1_r04", R, 0, {D: 1, R: 1, O: 3}),
    ("t1_r05", R, 0, {D: 3}),
    ("t1_r06", R, 0, {D: 2, E: 2}),
    ("t1_r07", R, 0, {D: 2, S: 2, E: 1}),
    ("t1_r08", R, 1, {E: 4}),
    # Onyx bonus
    ("t1_o01", O, 0, {D: 1, S: 1, E: 1, R: 1}),
    ("t1_o02", O, 0, {D: 1, S: 2, E: 1, R: 1}),
    ("t1_o03", O, 0, {D: 2, S: 2, R: 1}),
    ("t1_o04", O, 0, {S: 1, E: 3, R: 1}),
    ("t1_o05", O, 0, {E: 3}),
    ("t1_o06", O, 0, {D: 2, R: 2}),
    ("t1_o07", O, 0, {E: 2, R: 1, O: 2}),
    ("t1_o08", O, 1, {D: 4}),
]

_TIER_2_ROWS: List[_CardRow] = [
    # Diamond bonus
    ("t2_d01", D, 1, {E: 3, S: 2, O: 2}),
    ("t2_d02", D, 1, {E: 2, R: 3, O: 3}),
    ("t2_d03", D, 2, {D: 5, S: 3}),
    ("t2_d04", D, 2, {R: 5}),
    ("t2_d05", D, 2, {R: 5, O: 3}),
    ("t2_d06", D, 3, {R: 6}),
    # Sapphire bonus
    ("t2_s01", S, 1, {D: 2, E: 2, R: 3}),
    ("t2_s02", S, 1, {D: 3, E: 3, O: 2}),
    ("t2_s03", S, 2, {S: 5, E: 3}),
    ("t2_s04", S, 2, {D: 5}),
    ("t2_s05", S, 2, {D: 5, E: 3}),
    ("t2_s06", S, 3, {D: 6}),
    # Emerald bonus
    ("t2_e01", E, 1, {D: 2, S: 3, O: 2}),
    ("t2_e02", E, 1, {D: 3, S: 2, R: 3}),
    ("t2_e03", E, 2, {E: 5, R: 3}),
    ("t2_e04", E, 2, {S: 5}),
    ("t2_e05", E, 2, {S: 5, R: 3}),
    ("t2_e06", E, 3, {S: 6}),
    # Ruby bonus
    ("t2_r01", R, 1, {S: 2, E: 3, O: 3}),
    ("t2_r02", R, 1, {D: 2, S: 2, O: 3}),
    ("t2_r03", R, 2, {D: 3, R: 5}),
    ("t2_r04", R, 2, {O: 5}),
    ("t2_r05", R, 2, {D: 3, O: 5}),
    ("t2_r06", R, 3, {O: 6}),
    # Onyx bonus
    ("t2_o01", O, 1, {D: 3, S: 3, R: 2}),
    ("t2_o02", O, 1, {S: 3, E: 2, R: 2}),
    ("t2_o03", O, 2, {E: 3, O: 5}),
    ("t2_o04", O, 2, {E: 5}),
    ("t2_o05", O, 2, {D: 3, E: 5}),
    ("t2_o06", O, 3, {E: 6}),
]

_TIER_3_ROWS: List[_CardRow] = [
    # Diamond bonus
    ("t3_d01", D, 3, {E: 3, R: 3, O: 5, S: 3}),
    ("t3_d02", D, 4, {O: 7}),
    ("t3_d03", D, 4, {O: 7, D: 3}),
    ("t3_d04", D, 5, {O: 7, R: 3}),
    # Sapphire bonus
    ("t3_s01", S, 3, {D: 3, E: 3, R: 5, O: 3}),
    ("t3_s02", S, 4, {D: 7}),
    ("t3_s03", S, 4, {D: 7, S: 3}),
    ("t3_s04", S, 5, {D: 7, O: 3}),
    # Emerald bonus
    ("t3_e01", E, 3, {D: 3, S: 5, R: 3, O: 3}),
    ("t3_e02", E, 4, {S: 7}),
    ("t3_e03", E, 4, {S: 7, E: 3}),
    ("t3_e04", E, 5, {S: 7, D: 3}),
    # Ruby bonus
    ("t3_r01", R, 3, {D: 5, S: 3, E: 3, O: 3}),
    ("t3_r02", R, 4, {E: 7}),
    ("t3_r03", R, 4, {E: 7, R: 3}),
    ("t3_r04", R, 5, {E: 7, S: 3}),
    # Onyx bonus
    ("t3_o01", O, 3, {D: 3, S: 3, E: 5, R: 3}),
    ("t3_o02", O, 4, {R: 7}),
    ("t3_o03", O, 4, {R: 7, O: 3}),
    ("t3_o04", O, 5, {R: 7, E: 3}),
]


def _build_tier(tier: CardTier, rows: List[_CardRow]) -> Tuple[DevelopmentCard, ...]:
    cards = tuple(
        DevelopmentCard(id=card_id, tier=tier, cost=cost, bonus=bonus, prestige_points=points)
        for card_id, bonus, points, cost in rows
    )
    if len(cards) != CARDS_PER_TIER[tier]:
        raise ValueError(f"Tier {tier.value} catalog has {len(cards)} cards")
    return cards


CARD_CATALOG: Dict[CardTier, Tuple[DevelopmentCard, ...]] = {
    CardTier.TIER_1: _build_tier(CardTier.TIER_1, _TIER_1_ROWS),
    CardTier.TIER_2: _build_tier(CardTier.TIER_2, _TIER_2_ROWS),
    CardTier.TIER_3: _build_tier(CardTier.TIER_3, _TIER_3_ROWS),
}

# These are the 10 nobles: four ask for 4+4 bonuses, six for 3+3+3
NOBLE_CATALOG: Tuple[Noble, ...] = (
    Noble(id="noble_01", requirements={D: 4, O: 4}),
    Noble(id="noble_02", requirements={S: 4, E: 4}),
    Noble(id="noble_03", requirements={E: 4, R: 4}),
    Noble(id="noble_04", requirements={O: 4, R: 4}),
    Noble(id="noble_05", requirements={D: 3, S: 3, O: 3}),
    Noble(id="noble_06", requirements={D: 3, S: 3, E: 3}),
    Noble(id="noble_07", requirements={S: 3, E: 3, R: 3}),
    Noble(id="noble_08", requirements={E: 3, R: 3, O: 3}),
    Noble(id="noble_09", requirements={D: 3, R: 3, O: 3}),
    Noble(id="noble_10", requirements={D: 3, E: 3, O: 3}),
)

_CARDS_BY_ID: Dict[str, DevelopmentCard] = {
    card.id: card for cards in CARD_CATALOG.values() for card in cards
}
_NOBLES_BY_ID: Dict[str, Noble] = {noble.id: noble for noble in NOBLE_CATALOG}


def get_cards_by_tier(tier: CardTier) -> List[DevelopmentCard]:
    """
    Get a fresh list of the catalog cards of one tier.

    Args:
        tier: The card tier

    Returns:
        List of cards in catalog order (safe to shuffle)
    """
    return list(CARD_CATALOG[tier])


def get_all_cards() -> List[DevelopmentCard]:
    """Get every card of the catalog, tier 1 first."""
    return [card for tier in CardTier for card in CARD_CATALOG[tier]]


def get_all_nobles() -> List[Noble]:
    """Get a fresh list of the 10 catalog nobles."""
    return list(NOBLE_CATALOG)


def find_card_by_id(card_id: str) -> Optional[DevelopmentCard]:
    """Look up a catalog card by ID."""
    return _CARDS_BY_ID.get(card_id)


def find_noble_by_id(noble_id: str) -> Optional[Noble]:
    """Look up a catalog noble by ID."""
    return _NOBLES_BY_ID.get(noble_id)
