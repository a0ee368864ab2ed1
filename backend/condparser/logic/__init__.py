"""
Logic engine for condparser.

Provides the lexer, the evaluating parser and rule selection.
"""

from .lexer import ID_LENGTH, Lexer, Token, TokenType
from .parser import ConditionParser
from .evaluator import (
    ConditionError,
    ConditionEvaluator,
    EvaluationResult,
    evaluate,
    evaluate_detailed,
    evaluate_strict,
)
from .rules import RuleEngine, RuleMatch, SelectionResult

__all__ = [
    "ID_LENGTH",
    "Lexer",
    "Token",
    "TokenType",
    "ConditionParser",
    "ConditionError",
    "ConditionEvaluator",
    "EvaluationResult",
    "evaluate",
    "evaluate_detailed",
    "evaluate_strict",
    "RuleEngine",
    "RuleMatch",
    "SelectionResult",
]
