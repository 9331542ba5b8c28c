"""
Game rule configuration and validation.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class RuleConfig(BaseModel):
    """Configuration for game rules and settings."""

    min_players: int = Field(
        default=1,
        ge=1,
        description="Minimum number of players required to start"
    )
    max_players: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum number of players allowed (None = unlimited)"
    )
    require_even_teams: bool = Field(
        default=False,
        description="Refuse to start unless both teams get the same number of seats"
    )
    room_timeout: int = Field(
        default=3600,
        ge=1,
        description="Room inactivity timeout in seconds"
    )
    reap_interval: int = Field(
        default=60,
        ge=1,
        description="Seconds between idle-room sweeps"
    )
    log_limit: int = Field(
        default=20,
        ge=0,
        description="Number of recent log lines included in state snapshots"
    )

    @field_validator('max_players')
    @classmethod
    def validate_max_players(cls, v, info):
        """Validate maximum players doesn't undercut the minimum."""
        min_players = info.data.get('min_players', 1)
        if v is not None and v < min_players:
            raise ValueError(f'max_players ({v}) must be >= min_players ({min_players})')
        return v

    def room_has_space(self, player_count: int) -> bool:
        return self.max_players is None or player_count < self.max_players


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)


def rules_from_env() -> RuleConfig:
    """Build a RuleConfig from LITERATURE_* environment variables."""
    overrides = {}
    for name in ('min_players', 'max_players', 'room_timeout', 'reap_interval', 'log_limit'):
        value = os.getenv(f"LITERATURE_{name.upper()}")
        if value:
            overrides[name] = int(value)
    even = os.getenv("LITERATURE_REQUIRE_EVEN_TEAMS")
    if even:
        overrides['require_even_teams'] = even.lower() in ("1", "true", "yes")
    return create_rules(**overrides)
