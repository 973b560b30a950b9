"""Tests for the rule table and pattern helpers."""

import re

import pytest

from rulescan.errors import InvalidPattern
from rulescan.rules import (
    Rule,
    RuleTable,
    compile_pattern,
    is_anchored,
    normalize_patterns,
    parse_rule_spec,
)


class TestIsAnchored:
    """Anchor detection on pattern sources."""

    @pytest.mark.parametrize(
        "source",
        [r"^\w+", r"\A\d", r"(?i)^abc", r"(?mx)^ a", r"^(?=.)", r"^"],
    )
    def test_anchored(self, source: str) -> None:
        assert is_anchored(re.compile(source))

    @pytest.mark.parametrize(
        "source",
        [r"\w+", r"a^", r"(^a)", r"[\^]", r"\^a", r"(?:^a)", r" ^a"],
    )
    def test_not_anchored(self, source: str) -> None:
        assert not is_anchored(re.compile(source))


class TestCompilePattern:
    """compile_pattern / normalize_patterns."""

    def test_compiles_strings(self) -> None:
        assert compile_pattern(r"^a").pattern == r"^a"

    def test_passes_compiled_through(self) -> None:
        pattern = re.compile(r"^a", re.IGNORECASE)
        assert compile_pattern(pattern) is pattern

    def test_rejects_other_types(self) -> None:
        with pytest.raises(InvalidPattern, match="got int"):
            compile_pattern(1, rule="r")

    def test_normalize_single(self) -> None:
        assert len(normalize_patterns(r"^a")) == 1

    def test_normalize_iterable(self) -> None:
        patterns = normalize_patterns((r"^a", re.compile(r"^b")))
        assert [p.pattern for p in patterns] == [r"^a", r"^b"]

    def test_normalize_generator(self) -> None:
        patterns = normalize_patterns(f"^{c}" for c in "xyz")
        assert [p.pattern for p in patterns] == ["^x", "^y", "^z"]


class TestParseRuleSpec:
    """Accepted shapes for a single rule spec."""

    def test_type_regex_mapping(self) -> None:
        assert parse_rule_spec({"type": "a", "regex": r"^a"}) == ("a", r"^a")

    def test_name_pattern_mapping(self) -> None:
        assert parse_rule_spec({"name": "a", "pattern": r"^a"}) == ("a", r"^a")

    def test_pair(self) -> None:
        assert parse_rule_spec(("a", [r"^a"])) == ("a", [r"^a"])

    def test_rule(self) -> None:
        rule = Rule("a", (re.compile(r"^a"),))
        assert parse_rule_spec(rule) == ("a", rule.patterns)

    @pytest.mark.parametrize("spec", ["a", ("a",), {"type": "a"}, 5])
    def test_rejects_unknown_shapes(self, spec: object) -> None:
        with pytest.raises(InvalidPattern):
            parse_rule_spec(spec)


class TestRuleTable:
    """RuleTable ordering and lookup."""

    def test_add_returns_rule(self) -> None:
        rule = RuleTable().add("a", r"^a")
        assert rule == Rule("a", (re.compile(r"^a"),))

    def test_iteration_order(self) -> None:
        table = RuleTable()
        for name in ["z", "a", "m"]:
            table.add(name, f"^{name}")
        assert [rule.name for rule in table] == ["z", "a", "m"]
        assert [name for name, _ in table.items()] == ["z", "a", "m"]

    def test_replace_keeps_position(self) -> None:
        table = RuleTable()
        table.add("a", r"^a")
        table.add("b", r"^b")
        table.add("a", [r"^x", r"^y"])
        assert table.names() == ["a", "b"]
        assert len(table.get("a").patterns) == 2

    def test_contains_and_len(self) -> None:
        table = RuleTable()
        table.add("a", r"^a")
        assert "a" in table
        assert "b" not in table
        assert len(table) == 1

    def test_get_missing(self) -> None:
        assert RuleTable().get("nope") is None

    def test_rejects_non_string_name(self) -> None:
        with pytest.raises(InvalidPattern, match="rule name"):
            RuleTable().add(1, r"^a")  # type: ignore[arg-type]

    def test_failed_add_leaves_table_unchanged(self) -> None:
        table = RuleTable()
        table.add("a", r"^a")
        with pytest.raises(InvalidPattern):
            table.add("a", [r"^b", 3])
        assert table.get("a").patterns == (re.compile(r"^a"),)

    def test_repr(self) -> None:
        table = RuleTable()
        table.add("a", r"^a")
        assert repr(table) == "RuleTable(['a'])"

    def test_rule_is_frozen(self) -> None:
        rule = Rule("a", ())
        with pytest.raises(AttributeError):
            rule.name = "b"  # type: ignore[misc]
