"""
Tests for rule selection.
"""

import logging

import pytest

from backend.condparser import ConditionError, ConditionRule, FlagTable, RuleSet
from backend.condparser.logic.rules import RuleEngine, RuleMatch, SelectionResult


@pytest.fixture
def flags():
    return FlagTable(flags={"isWindows": True, "isDebug": False, "isLinux": False})


@pytest.fixture
def rules():
    return [
        ConditionRule(id="linux", when="isLinux", then={"renderer": "vulkan"}),
        ConditionRule(
            id="windows-release",
            when="isWindows && !isDebug",
            then={"renderer": "d3d12"},
            priority=1,
        ),
        ConditionRule(id="fallback", when="!isLinux", then={"renderer": "gl"}, priority=5),
    ]


class TestSelectionResult:
    """Tests for SelectionResult dataclass."""

    def test_initial_state(self):
        """Test initial state of result."""
        result = SelectionResult()
        assert result.matches == []
        assert result.first_match is None
        assert result.matched_count == 0

    def test_to_dict(self):
        """Test conversion to dictionary."""
        result = SelectionResult(matches=[RuleMatch(rule_id="a", result=1)])
        data = result.to_dict()
        assert data["matched_count"] == 1
        assert data["first_match"] == {"rule_id": "a", "result": 1}
        assert data["warnings"] == []


class TestRuleEngine:
    """Tests for RuleEngine strategies."""

    def test_first_match(self, rules, flags):
        """Test list order decides with first_match."""
        result = RuleEngine().select(rules, flags)
        assert [m.rule_id for m in result.matches] == ["windows-release"]
        assert result.first_match.result == {"renderer": "d3d12"}

    def test_priority(self, rules, flags):
        """Test the highest priority matching rule wins."""
        result = RuleEngine(match_strategy="priority").select(rules, flags)
        assert result.first_match.rule_id == "fallback"

    def test_all_match_first_wins(self, rules, flags):
        """Test all_match collects every matching rule."""
        result = RuleEngine(match_strategy="all_match").select(rules, flags)
        assert [m.rule_id for m in result.matches] == ["windows-release", "fallback"]
        assert result.warnings == []

    def test_all_match_warn(self, rules, flags, caplog):
        """Test warn attaches and logs a conflict warning."""
        engine = RuleEngine(match_strategy="all_match", conflict_resolution="warn")
        with caplog.at_level(logging.WARNING):
            result = engine.select(rules, flags)
        assert len(result.warnings) == 1
        assert "Using first match: windows-release" in result.warnings[0]
        assert "Conflicting rules matched" in caplog.text

    def test_all_match_error(self, rules, flags):
        """Test error raises on conflicting outcomes."""
        engine = RuleEngine(match_strategy="all_match", conflict_resolution="error")
        with pytest.raises(ConditionError) as exc_info:
            engine.select(rules, flags)
        assert "Conflicting rules matched" in str(exc_info.value)
        assert "rules.conflict_resolution" in str(exc_info.value)

    def test_all_match_same_result_no_conflict(self, flags):
        """Test identical outcomes are not a conflict."""
        same = [
            ConditionRule(id="a", when="isWindows", then="x"),
            ConditionRule(id="b", when="!isDebug", then="x"),
        ]
        engine = RuleEngine(match_strategy="all_match", conflict_resolution="error")
        assert engine.select(same, flags).matched_count == 2

    def test_no_match(self, flags):
        """Test no rule holding gives an empty result."""
        result = RuleEngine().select([ConditionRule(id="a", when="isDebug", then=1)], flags)
        assert result.first_match is None

    def test_malformed_rule_never_matches(self, flags, caplog):
        """Test a broken condition is reported and skipped."""
        broken = [
            ConditionRule(id="bad", when="(isWindows", then=1),
            ConditionRule(id="good", when="isWindows", then=2),
        ]
        with caplog.at_level(logging.WARNING):
            result = RuleEngine().select(broken, flags)
        assert result.first_match.rule_id == "good"
        assert result.errors == ["Rule 'bad': Error: expected ')', found: END"]
        assert "Rule 'bad'" in caplog.text

    def test_select_value(self, rules, flags):
        """Test select_value returns the outcome or the default."""
        engine = RuleEngine()
        assert engine.select_value(rules, flags) == {"renderer": "d3d12"}
        assert engine.select_value([], flags, default="none") == "none"

    def test_invalid_strategy(self):
        """Test unknown strategies are rejected."""
        with pytest.raises(ValueError):
            RuleEngine(match_strategy="random")

    def test_from_rule_set(self, rules, flags):
        """Test the engine takes its policy from a RuleSet."""
        rule_set = RuleSet(match_strategy="priority", items=rules)
        engine = RuleEngine.from_rule_set(rule_set)
        assert engine.select(rule_set.items, flags).first_match.rule_id == "fallback"

    def test_every_condition_resolved(self, flags):
        """Test the resolver sees both sides of each condition."""
        seen = []

        def resolver(name):
            seen.append(name)
            return flags.resolve(name)

        RuleEngine().select([ConditionRule(id="a", when="isDebug && isLinux", then=1)], resolver)
        assert seen == ["isDebug", "isLinux"]
