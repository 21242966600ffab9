"""
Pydantic models for table rules and seat configuration.

Validation failures surface as pydantic ``ValidationError`` here; the hand
factory re-raises them as ``InvalidConfigurationError``.
"""

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from holdem.core.rules import MAX_PLAYERS, MIN_PLAYERS, OddChipRule
from holdem.errors import InvalidConfigurationError


# Two hole cards each, plus a five card board with a burn before every street
MAX_SEATS = 22


class TableRules(BaseModel):
    """Betting policy for a hand. The defaults describe a game without blinds."""
    model_config = ConfigDict(frozen=True)

    small_blind: int = Field(default=0, ge=0)
    big_blind: int = Field(default=0, ge=0)
    ante: int = Field(default=0, ge=0)
    min_players: int = Field(default=MIN_PLAYERS, ge=2, le=MAX_SEATS)
    max_players: int = Field(default=MAX_PLAYERS, ge=2, le=MAX_SEATS)
    burn_cards: bool = Field(default=False, description="Burn one card before each street")
    enforce_min_raise: bool = Field(default=False, description="Require full-size bets and raises")
    odd_chip_rule: OddChipRule = OddChipRule.LEFT_OF_BUTTON

    @field_validator("big_blind")
    @classmethod
    def validate_big_blind(cls, v, info):
        if v < info.data.get("small_blind", 0):
            raise ValueError("small_blind cannot exceed big_blind")
        return v

    @field_validator("max_players")
    @classmethod
    def validate_max_players(cls, v, info):
        if v < info.data.get("min_players", MIN_PLAYERS):
            raise ValueError("min_players cannot exceed max_players")
        return v

    @property
    def has_blinds(self) -> bool:
        return self.big_blind > 0


class SeatConfig(BaseModel):
    """A player joining the hand."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    stack: int = Field(gt=0, description="Starting chips, must be positive")


def load_rules(rules: Optional[Union[TableRules, Mapping[str, Any]]] = None) -> TableRules:
    """Build a ``TableRules`` from a model, a plain mapping or nothing."""
    if rules is None:
        return TableRules()
    if isinstance(rules, TableRules):
        return rules
    try:
        return TableRules.model_validate(dict(rules))
    except ValidationError as exc:
        raise InvalidConfigurationError(f"Invalid table rules: {exc}") from exc


def load_seat(entry: Any) -> SeatConfig:
    """
    Build a ``SeatConfig`` from a ``(name, stack)`` pair, a mapping or a model.

    Raises:
        InvalidConfigurationError: If the entry is malformed or the stack is
            not positive.
    """
    if isinstance(entry, SeatConfig):
        return entry
    try:
        if isinstance(entry, Mapping):
            return SeatConfig.model_validate(dict(entry))
        name, stack = entry
        return SeatConfig(name=name, stack=stack)
    except ValidationError as exc:
        raise InvalidConfigurationError(f"Invalid player {entry!r}: {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise InvalidConfigurationError(f"Invalid player {entry!r}: expected (name, stack)") from exc
