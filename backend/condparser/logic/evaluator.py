"""
Condition Evaluator.

Public entry points for evaluating condition expressions against
caller-supplied identifier values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..diagnostics import CollectingSink
from ..models import ParserSettings
from .lexer import ID_LENGTH, Report
from .parser import ConditionParser, Resolver

logger = logging.getLogger(__name__)


class ConditionError(ValueError):
    """Raised when a condition cannot be evaluated cleanly."""

    def __init__(self, message: str, expression: str = "", diagnostics: str = ""):
        super().__init__(message)
        self.expression = expression
        self.diagnostics = diagnostics


@dataclass
class EvaluationResult:
    """
    Outcome of a checked evaluation.

    Attributes:
        expression: The evaluated expression.
        value: The boolean produced by the parser. Meaningless when not valid.
        valid: False if any diagnostic was reported.
        diagnostics: All diagnostic text, concatenated.
    """
    expression: str
    value: bool
    valid: bool
    diagnostics: str = ""

    @property
    def errors(self) -> List[str]:
        """Diagnostic text split into lines."""
        return [line for line in self.diagnostics.splitlines() if line]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "expression": self.expression,
            "value": self.value,
            "valid": self.valid,
            "errors": self.errors,
        }


def evaluate(
    expression: str,
    resolver: Resolver,
    sink: Optional[Report] = None,
    *,
    id_length: int = ID_LENGTH,
) -> bool:
    """
    Evaluate a condition expression.

    Errors are only reported through the sink. The returned value of a
    malformed expression is whatever the parser had folded so far, usually
    False. Input left over after a complete expression is ignored, so
    "true )" evaluates to True without a diagnostic.

    Args:
        expression: The expression, e.g. "isWindows && !isDebug".
        resolver: Maps an identifier name to its boolean value.
        sink: Optional callable receiving diagnostic fragments.
        id_length: Identifier buffer size; names keep id_length - 1 chars.

    Returns:
        The value of the expression.
    """
    parser = ConditionParser(expression, resolver, sink, id_length=id_length)
    return parser.parse()


def evaluate_detailed(
    expression: str,
    resolver: Resolver,
    sink: Optional[Report] = None,
    *,
    id_length: int = ID_LENGTH,
    require_end: bool = True,
) -> EvaluationResult:
    """
    Evaluate a condition and report whether it was well-formed.

    Unlike evaluate(), this also treats input left after the expression as an
    error when require_end is set.

    Args:
        expression: The expression to evaluate.
        resolver: Maps an identifier name to its boolean value.
        sink: Optional callable that also receives every diagnostic fragment.
        id_length: Identifier buffer size; names keep id_length - 1 chars.
        require_end: Report trailing tokens as an error.

    Returns:
        EvaluationResult with value, validity and diagnostics.
    """
    collector = CollectingSink(forward=sink)
    parser = ConditionParser(expression, resolver, collector, id_length=id_length)
    value = parser.parse()

    if require_end and not parser.at_end():
        parser.fail("Error: unexpected trailing input: ", *parser.token.fragments(), "\n")

    result = EvaluationResult(
        expression=expression,
        value=value,
        valid=not parser.error,
        diagnostics=collector.text,
    )
    if not result.valid:
        logger.debug("Malformed condition %r: %s", expression, "; ".join(result.errors))
    return result


def evaluate_strict(
    expression: str,
    resolver: Resolver,
    *,
    id_length: int = ID_LENGTH,
    require_end: bool = True,
) -> bool:
    """
    Evaluate a condition, raising on any diagnostic.

    Raises:
        ConditionError: If the expression is malformed.
    """
    result = evaluate_detailed(
        expression, resolver, id_length=id_length, require_end=require_end
    )
    if not result.valid:
        raise ConditionError(
            f"Invalid condition {expression!r}: {'; '.join(result.errors)}",
            expression=expression,
            diagnostics=result.diagnostics,
        )
    return result.value


class ConditionEvaluator:
    """
    Evaluator bound to a set of parser settings.

    Provides the same entry points as the module-level functions, with the
    identifier length and trailing-input policy taken from ParserSettings.
    """

    def __init__(self, settings: Optional[ParserSettings] = None):
        """
        Initialize the evaluator.

        Args:
            settings: Parser settings. Defaults are used if omitted.
        """
        self.settings = settings or ParserSettings()

    def evaluate(
        self,
        expression: str,
        resolver: Resolver,
        sink: Optional[Report] = None,
    ) -> bool:
        """Evaluate without any well-formedness checks."""
        return evaluate(expression, resolver, sink, id_length=self.settings.id_length)

    def evaluate_detailed(
        self,
        expression: str,
        resolver: Resolver,
        sink: Optional[Report] = None,
    ) -> EvaluationResult:
        """Evaluate and collect diagnostics."""
        return evaluate_detailed(
            expression,
            resolver,
            sink,
            id_length=self.settings.id_length,
            require_end=self.settings.require_end,
        )

    def evaluate_strict(self, expression: str, resolver: Resolver) -> bool:
        """Evaluate, raising ConditionError on any diagnostic."""
        return evaluate_strict(
            expression,
            resolver,
            id_length=self.settings.id_length,
            require_end=self.settings.require_end,
        )

    def validate(self, expression: str) -> Tuple[bool, Optional[str]]:
        """
        Check an expression without real identifier values.

        Every identifier resolves to False.

        Returns:
            Tuple of (is_valid, error_message).
        """
        result = self.evaluate_detailed(expression, lambda name: False)
        if result.valid:
            return True, None
        return False, "; ".join(result.errors)
