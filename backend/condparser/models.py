"""
Pydantic models for condparser configuration.

Defines the parser settings, flag tables and condition rules that can be
loaded from a YAML configuration file.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")


def _check_identifier(name: str) -> str:
    if not IDENTIFIER_PATTERN.match(name):
        raise ValueError(
            f"Flag name '{name}' must be an ASCII identifier "
            "(a letter followed by letters or digits)"
        )
    return name


class MatchStrategy(str, Enum):
    """How rules are selected."""
    FIRST_MATCH = "first_match"
    PRIORITY = "priority"
    ALL_MATCH = "all_match"


class ConflictResolution(str, Enum):
    """What to do when several rules match with different outcomes."""
    FIRST_WINS = "first_wins"
    WARN = "warn"
    ERROR = "error"


class ParserSettings(BaseModel):
    """Settings applied to every evaluation."""

    model_config = ConfigDict(extra="forbid")

    id_length: int = Field(
        default=32,
        ge=2,
        description="Identifier buffer size; names keep id_length - 1 characters",
    )
    require_end: bool = Field(
        default=True,
        description="Treat input left after a complete expression as an error",
    )


class FlagTable(BaseModel):
    """
    Named boolean flags used to resolve identifiers.

    Unknown names resolve to `default`.
    """

    model_config = ConfigDict(extra="forbid")

    flags: Dict[str, bool] = Field(default_factory=dict)
    default: bool = False

    @field_validator("flags")
    @classmethod
    def validate_flag_names(cls, v: Dict[str, bool]) -> Dict[str, bool]:
        for name in v:
            _check_identifier(name)
        return v

    def resolve(self, name: str) -> bool:
        """Return the value of a flag."""
        return self.flags.get(name, self.default)

    def __call__(self, name: str) -> bool:
        return self.resolve(name)

    def with_overrides(
        self,
        set_flags: Iterable[str] = (),
        unset_flags: Iterable[str] = (),
    ) -> "FlagTable":
        """Return a copy with some flags forced on or off."""
        flags = dict(self.flags)
        for name in set_flags:
            flags[_check_identifier(name)] = True
        for name in unset_flags:
            flags[_check_identifier(name)] = False
        return FlagTable(flags=flags, default=self.default)


class ConditionRule(BaseModel):
    """A condition and the outcome selected when it holds."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    when: str = Field(..., description="Condition expression")
    then: Any = None
    priority: int = 0

    @field_validator("when")
    @classmethod
    def validate_when(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Rule condition must not be empty")
        return v


class RuleSet(BaseModel):
    """An ordered list of rules with its selection policy."""

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    match_strategy: MatchStrategy = MatchStrategy.FIRST_MATCH
    conflict_resolution: ConflictResolution = ConflictResolution.FIRST_WINS
    items: List[ConditionRule] = Field(default_factory=list)

    @field_validator("items")
    @classmethod
    def validate_unique_ids(cls, v: List[ConditionRule]) -> List[ConditionRule]:
        seen = set()
        for rule in v:
            if rule.id in seen:
                raise ValueError(f"Duplicate rule id: {rule.id}")
            seen.add(rule.id)
        return v


class ConditionConfig(BaseModel):
    """Top-level configuration file contents."""

    model_config = ConfigDict(extra="forbid")

    settings: ParserSettings = Field(default_factory=ParserSettings)
    flags: Dict[str, bool] = Field(default_factory=dict)
    default_flag: bool = False
    rules: RuleSet = Field(default_factory=RuleSet)

    @field_validator("flags")
    @classmethod
    def validate_flag_names(cls, v: Dict[str, bool]) -> Dict[str, bool]:
        for name in v:
            _check_identifier(name)
        return v

    def flag_table(self, overrides: Optional[Dict[str, bool]] = None) -> FlagTable:
        """Build the flag table, applying optional overrides."""
        flags = dict(self.flags)
        if overrides:
            flags.update(overrides)
        return FlagTable(flags=flags, default=self.default_flag)
