"""
condparser: boolean condition expressions over named flags.

Evaluates expressions such as "isWindows && !isDebug" against
caller-supplied identifier values, reporting problems through a
diagnostic sink.
"""

from .logic import (
    ID_LENGTH,
    ConditionError,
    ConditionEvaluator,
    EvaluationResult,
    RuleEngine,
    Token,
    TokenType,
    evaluate,
    evaluate_detailed,
    evaluate_strict,
)
from .models import (
    ParserSettings,
    FlagTable,
    ConditionRule,
    RuleSet,
    ConditionConfig,
    MatchStrategy,
    ConflictResolution,
)
from .diagnostics import CollectingSink, LoggingSink, StreamSink
from .config import ConfigError, load_config, load_flag_table

__version__ = "1.0.0"
__all__ = [
    "ID_LENGTH",
    "evaluate",
    "evaluate_detailed",
    "evaluate_strict",
    "ConditionError",
    "ConditionEvaluator",
    "EvaluationResult",
    "RuleEngine",
    "Token",
    "TokenType",
    "ParserSettings",
    "FlagTable",
    "ConditionRule",
    "RuleSet",
    "ConditionConfig",
    "MatchStrategy",
    "ConflictResolution",
    "CollectingSink",
    "LoggingSink",
    "StreamSink",
    "ConfigError",
    "load_config",
    "load_flag_table",
]
