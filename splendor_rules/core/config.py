"""
Game configuration for the Splendor rules engine.
"""
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union

from splendor_rules.core.constants import MIN_PLAYERS, MAX_PLAYERS


@dataclass(frozen=True)
class GameConfig:
    """
    Configuration for creating a game.

    Attributes:
        player_count: Number of seats (2-4)
    """
    player_count: int = 2

    def __post_init__(self):
        """Validate configuration."""
        if isinstance(self.player_count, bool) or not isinstance(self.player_count, int):
            raise ValueError(f"player_count must be an integer, got {self.player_count!r}")
        if not MIN_PLAYERS <= self.player_count <= MAX_PLAYERS:
            raise ValueError(
                f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the configuration to its wire representation."""
        return {"playerCount": self.player_count}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'GameConfig':
        """
        Create a configuration from a mapping.

        Both ``playerCount`` and ``player_count`` keys are accepted.
        """
        if "playerCount" in data:
            return cls(player_count=data["playerCount"])
        if "player_count" in data:
            return cls(player_count=data["player_count"])
        raise ValueError("Configuration is missing playerCount")

    @classmethod
    def coerce(cls, value: Union['GameConfig', int, Mapping[str, Any]]) -> 'GameConfig':
        """Normalize a config, a plain player count, or a mapping into a GameConfig."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.from_dict(value)
        return cls(player_count=value)
