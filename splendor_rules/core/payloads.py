"""
Wire payload parsing for Splendor actions.

Clients send actions as JSON objects tagged by ``type`` with camelCase fields,
for example ``{"type": "TAKE_TWO_GEMS", "playerId": "p1", "gem": "ruby"}``.
The pydantic models below check the shape of a payload and turn it into an
action dataclass. Whether the action is legal is decided later by
validate_action.

Gold is accepted wherever a gem name is, so that taking gold is reported as a
rule violation rather than a parse error. Unknown gem names, unknown action
types and missing fields raise pydantic.ValidationError.
"""
from abc import ABC, abstractmethod
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from splendor_rules.core.constants import GemColor, CardTier
from splendor_rules.core.actions import (
    Action, TakeThreeGemsAction, TakeTwoGemsAction, ReserveCardAction,
    PurchaseCardAction, SelectNobleAction, DiscardGemsAction
)


class ActionPayload(BaseModel, ABC):
    """Fields shared by every action payload."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    player_id: str = Field(alias="playerId", min_length=1, description="Acting player")

    @abstractmethod
    def to_action(self) -> Action:
        """Build the action this payload describes."""


class TakeThreeGemsPayload(ActionPayload):
    type: Literal["TAKE_THREE_GEMS"]
    gems: List[GemColor] = Field(description="One to three distinct colors")

    def to_action(self) -> TakeThreeGemsAction:
        return TakeThreeGemsAction(player_id=self.player_id, gems=list(self.gems))


class TakeTwoGemsPayload(ActionPayload):
    type: Literal["TAKE_TWO_GEMS"]
    gem: GemColor

    def to_action(self) -> TakeTwoGemsAction:
        return TakeTwoGemsAction(player_id=self.player_id, gem=self.gem)


class ReserveCardPayload(ActionPayload):
    type: Literal["RESERVE_CARD"]
    card_id: Optional[str] = Field(default=None, alias="cardId")
    tier: Optional[CardTier] = Field(default=None, description="Deck to draw from when no card is named")

    @model_validator(mode="after")
    def check_target(self) -> 'ReserveCardPayload':
        if self.card_id is None and self.tier is None:
            raise ValueError("RESERVE_CARD needs a cardId or a tier")
        return self

    def to_action(self) -> ReserveCardAction:
        return ReserveCardAction(player_id=self.player_id, card_id=self.card_id, tier=self.tier)


class PurchaseCardPayload(ActionPayload):
    type: Literal["PURCHASE_CARD"]
    card_id: str = Field(alias="cardId")

    def to_action(self) -> PurchaseCardAction:
        return PurchaseCardAction(player_id=self.player_id, card_id=self.card_id)


class SelectNoblePayload(ActionPayload):
    type: Literal["SELECT_NOBLE"]
    noble_id: str = Field(alias="nobleId")

    def to_action(self) -> SelectNobleAction:
        return SelectNobleAction(player_id=self.player_id, noble_id=self.noble_id)


class DiscardGemsPayload(ActionPayload):
    type: Literal["DISCARD_GEMS"]
    gems: Dict[GemColor, int] = Field(default_factory=dict, description="Count to return per gem type")

    def to_action(self) -> DiscardGemsAction:
        return DiscardGemsAction(player_id=self.player_id, gems=dict(self.gems))


AnyActionPayload = Annotated[
    Union[
        TakeThreeGemsPayload,
        TakeTwoGemsPayload,
        ReserveCardPayload,
        PurchaseCardPayload,
        SelectNoblePayload,
        DiscardGemsPayload,
    ],
    Field(discriminator="type"),
]

_PAYLOAD_ADAPTER: TypeAdapter = TypeAdapter(AnyActionPayload)


def parse_action_payload(data: Mapping[str, Any]) -> ActionPayload:
    """
    Validate the shape of an action payload.

    Args:
        data: Decoded JSON object

    Returns:
        The matching payload model

    Raises:
        pydantic.ValidationError: If the payload is malformed
    """
    return _PAYLOAD_ADAPTER.validate_python(data)


def create_action_from_dict(data: Mapping[str, Any]) -> Action:
    """
    Create an action from its wire representation.

    Args:
        data: Dictionary representation of the action

    Returns:
        Action object
    """
    return parse_action_payload(data).to_action()


def create_action_from_json(json_str: Union[str, bytes]) -> Action:
    """Create an action from a JSON document."""
    return _PAYLOAD_ADAPTER.validate_json(json_str).to_action()
