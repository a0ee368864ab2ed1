"""
Rule selection.

Picks configuration outcomes from a list of rules whose conditions are
evaluated against a resolver.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..models import (
    ConditionRule,
    ConflictResolution,
    MatchStrategy,
    ParserSettings,
    RuleSet,
)
from .evaluator import ConditionError, ConditionEvaluator
from .parser import Resolver

logger = logging.getLogger(__name__)


@dataclass
class RuleMatch:
    """A rule whose condition held."""
    rule_id: str
    result: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"rule_id": self.rule_id, "result": self.result}


@dataclass
class SelectionResult:
    """Outcome of evaluating a rule set."""
    matches: List[RuleMatch] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def first_match(self) -> Optional[RuleMatch]:
        return self.matches[0] if self.matches else None

    @property
    def matched_count(self) -> int:
        return len(self.matches)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "matches": [m.to_dict() for m in self.matches],
            "matched_count": self.matched_count,
            "first_match": self.first_match.to_dict() if self.first_match else None,
            "warnings": self.warnings,
            "errors": self.errors,
        }


class RuleEngine:
    """
    Evaluates condition rules and selects the matching outcomes.

    Match strategies:
    - first_match: stop at the first rule that holds, in list order
    - priority: like first_match, after sorting by descending priority
    - all_match: collect every rule that holds

    A rule whose condition is malformed never matches; its diagnostics are
    logged and returned in the result's errors.
    """

    def __init__(
        self,
        settings: Optional[ParserSettings] = None,
        match_strategy: str = MatchStrategy.FIRST_MATCH.value,
        conflict_resolution: str = ConflictResolution.FIRST_WINS.value,
    ):
        """
        Initialize the rule engine.

        Args:
            settings: Parser settings used for every condition.
            match_strategy: first_match, priority or all_match.
            conflict_resolution: first_wins, warn or error (all_match only).
        """
        self.evaluator = ConditionEvaluator(settings)
        self.match_strategy = MatchStrategy(match_strategy)
        self.conflict_resolution = ConflictResolution(conflict_resolution)

    @classmethod
    def from_rule_set(
        cls,
        rule_set: RuleSet,
        settings: Optional[ParserSettings] = None,
    ) -> "RuleEngine":
        """Create an engine using the policy stored in a RuleSet."""
        return cls(
            settings=settings,
            match_strategy=rule_set.match_strategy,
            conflict_resolution=rule_set.conflict_resolution,
        )

    def select(
        self,
        rules: Sequence[ConditionRule],
        resolver: Resolver,
    ) -> SelectionResult:
        """
        Evaluate rules against a resolver.

        Args:
            rules: Rules to evaluate.
            resolver: Maps identifier names to booleans.

        Returns:
            SelectionResult with matches, warnings and errors.

        Raises:
            ConditionError: If conflict_resolution is 'error' and matching
                rules disagree.
        """
        result = SelectionResult()

        ordered = list(rules)
        if self.match_strategy is MatchStrategy.PRIORITY:
            ordered.sort(key=lambda r: r.priority, reverse=True)

        for rule in ordered:
            outcome = self.evaluator.evaluate_detailed(rule.when, resolver)
            if not outcome.valid:
                for line in outcome.errors:
                    message = f"Rule '{rule.id}': {line}"
                    logger.warning(message)
                    result.errors.append(message)
                continue

            if outcome.value:
                result.matches.append(RuleMatch(rule_id=rule.id, result=rule.then))
                if self.match_strategy is not MatchStrategy.ALL_MATCH:
                    break

        if self.match_strategy is MatchStrategy.ALL_MATCH and len(result.matches) > 1:
            self._check_conflicts(result)

        return result

    def select_value(
        self,
        rules: Sequence[ConditionRule],
        resolver: Resolver,
        default: Any = None,
    ) -> Any:
        """Return the outcome of the first matching rule, or default."""
        result = self.select(rules, resolver)
        if result.first_match is None:
            return default
        return result.first_match.result

    def _check_conflicts(self, result: SelectionResult) -> None:
        unique_results = set(repr(m.result) for m in result.matches)
        if len(unique_results) <= 1:
            return

        rule_ids = [m.rule_id for m in result.matches]
        if self.conflict_resolution is ConflictResolution.ERROR:
            raise ConditionError(
                f"Conflicting rules matched: {rule_ids}. "
                "Set rules.conflict_resolution to 'first_wins' or 'warn' "
                "to accept the first match."
            )
        if self.conflict_resolution is ConflictResolution.WARN:
            warning = (
                f"Conflicting rules matched: {rule_ids}. "
                f"Using first match: {result.matches[0].rule_id}"
            )
            logger.warning(warning)
            result.warnings.append(warning)
        # For first_wins, silently use first match
