"""
Actions for the Splendor game.

This module defines every action a player can submit:
- Taking gems (up to three distinct colors, or two of one color)
- Reserving cards (from the market or blind from a deck)
- Purchasing development cards (from the market or the reserve)
- Resolving a sub-flow (choosing a noble, discarding down to the gem limit)

Actions are plain data. Legality is decided by ``splendor_rules.core.validators``
and effects by ``splendor_rules.core.engine``; wire payloads are parsed in
``splendor_rules.core.payloads``.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional

from splendor_rules.core.constants import GemColor, CardTier, ALL_GEMS


class ActionType(Enum):
    """Enum representing the different types of actions; values are wire tags."""
    TAKE_THREE_GEMS = "TAKE_THREE_GEMS"
    TAKE_TWO_GEMS = "TAKE_TWO_GEMS"
    RESERVE_CARD = "RESERVE_CARD"
    PURCHASE_CARD = "PURCHASE_CARD"
    SELECT_NOBLE = "SELECT_NOBLE"
    DISCARD_GEMS = "DISCARD_GEMS"


# Actions that make up a turn, as opposed to resolving a pending sub-flow
MAIN_ACTION_TYPES = frozenset({
    ActionType.TAKE_THREE_GEMS,
    ActionType.TAKE_TWO_GEMS,
    ActionType.RESERVE_CARD,
    ActionType.PURCHASE_CARD,
})


class Action(ABC):
    """
    Abstract base class for all Splendor actions.

    Every action names the player submitting it.
    """
    action_type: ClassVar[ActionType]
    player_id: str

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the action to its wire representation.

        Returns:
            Dictionary with a ``type`` tag and camelCase fields
        """

    @abstractmethod
    def __str__(self) -> str:
        """
        Return a human-readable string representation of the action.

        Returns:
            String representation
        """


@dataclass
class TakeThreeGemsAction(Action):
    """
    Action to take one gem each of up to three different colors.

    Fewer than three colors is allowed when the bank runs short.
    """
    action_type: ClassVar[ActionType] = ActionType.TAKE_THREE_GEMS
    player_id: str
    gems: List[GemColor] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.action_type.value,
            "playerId": self.player_id,
            "gems": [color.value for color in self.gems],
        }

    def __str__(self) -> str:
        return f"{self.player_id} takes {', '.join(color.name for color in self.gems)}"


@dataclass
class TakeTwoGemsAction(Action):
    """Action to take two gems of one color (bank must hold at least four)."""
    action_type: ClassVar[ActionType] = ActionType.TAKE_TWO_GEMS
    player_id: str
    gem: GemColor

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.action_type.value,
            "playerId": self.player_id,
            "gem": self.gem.value,
        }

    def __str__(self) -> str:
        return f"{self.player_id} takes 2 {self.gem.name}"


@dataclass
class ReserveCardAction(Action):
    """
    Action to reserve a card.

    Names a market card by ``card_id``, or leaves it unset to draw the top
    card of the ``tier`` deck without looking.
    """
    action_type: ClassVar[ActionType] = ActionType.RESERVE_CARD
    player_id: str
    card_id: Optional[str] = None
    tier: Optional[CardTier] = None

    @property
    def is_blind(self) -> bool:
        return self.card_id is None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.action_type.value, "playerId": self.player_id}
        if self.card_id is not None:
            data["cardId"] = self.card_id
        if self.tier is not None:
            data["tier"] = self.tier.value
        return data

    def __str__(self) -> str:
        if self.card_id is not None:
            return f"{self.player_id} reserves {self.card_id}"
        tier = self.tier.value if self.tier is not None else "?"
        return f"{self.player_id} reserves from tier {tier} deck"


@dataclass
class PurchaseCardAction(Action):
    """Action to purchase a card from the market or the player's reserve."""
    action_type: ClassVar[ActionType] = ActionType.PURCHASE_CARD
    player_id: str
    card_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.action_type.value,
            "playerId": self.player_id,
            "cardId": self.card_id,
        }

    def __str__(self) -> str:
        return f"{self.player_id} purchases {self.card_id}"


@dataclass
class SelectNobleAction(Action):
    """Action to choose one noble when several qualify at once."""
    action_type: ClassVar[ActionType] = ActionType.SELECT_NOBLE
    player_id: str
    noble_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.action_type.value,
            "playerId": self.player_id,
            "nobleId": self.noble_id,
        }

    def __str__(self) -> str:
        return f"{self.player_id} selects {self.noble_id}"


@dataclass
class DiscardGemsAction(Action):
    """Action to return gems to the bank until the player holds exactly ten."""
    action_type: ClassVar[ActionType] = ActionType.DISCARD_GEMS
    player_id: str
    gems: Dict[GemColor, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.gems.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.action_type.value,
            "playerId": self.player_id,
            "gems": {color.value: self.gems[color] for color in ALL_GEMS if color in self.gems},
        }

    def __str__(self) -> str:
        gem_str = ", ".join(f"{count} {color.name}" for color, count in self.gems.items() if count)
        return f"{self.player_id} discards {gem_str}"

