"""Rule table for the rulescan scanner.

A rule is a name plus an ordered tuple of anchored regular expressions.
Rules are tried in registration order and the first pattern that matches
wins, so the table is an insertion-ordered mapping keyed by name.

Re-registering a name replaces its patterns but keeps its place in the
evaluation order.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Union

from rulescan.errors import InvalidPattern

PatternLike = Union[str, "re.Pattern[str]"]

# ^ or \A, optionally behind a leading global flag group such as (?i) or (?mx)
_ANCHOR_RE = re.compile(r"(?:\(\?[aiLmsux]+\))?(?:\^|\\A)")


@dataclass(frozen=True, slots=True)
class Rule:
    """A named, ordered set of anchored patterns.

    Attributes:
        name: Unique rule name; becomes the token type
        patterns: Compiled patterns, tried in order
    """

    name: str
    patterns: tuple[re.Pattern[str], ...]


def is_anchored(pattern: re.Pattern[str]) -> bool:
    """Return True if ``pattern`` can only match at the start of the input.

    Example:
        >>> is_anchored(re.compile(r"^\\w+"))
        True
        >>> is_anchored(re.compile(r"\\w+"))
        False
    """
    return _ANCHOR_RE.match(pattern.pattern) is not None


def compile_pattern(pattern: Any, rule: str | None = None) -> re.Pattern[str]:
    """Compile ``pattern`` if it is a string, otherwise check it is a pattern.

    Raises:
        InvalidPattern: If ``pattern`` is neither a str nor a compiled str
            pattern, or fails to compile
    """
    if isinstance(pattern, re.Pattern):
        if not isinstance(pattern.pattern, str):
            raise InvalidPattern("expected a str pattern, got a bytes pattern", rule=rule)
        return pattern
    if isinstance(pattern, str):
        try:
            return re.compile(pattern)
        except re.error as e:
            raise InvalidPattern(f"invalid regular expression {pattern!r}: {e}", rule=rule) from e
    raise InvalidPattern(
        f"expected a regular expression, got {type(pattern).__name__}", rule=rule
    )


def normalize_patterns(patterns: Any, rule: str | None = None) -> tuple[re.Pattern[str], ...]:
    """Normalize one pattern or an iterable of patterns to a tuple."""
    if isinstance(patterns, (str, re.Pattern)):
        return (compile_pattern(patterns, rule),)
    if isinstance(patterns, Iterable):
        return tuple(compile_pattern(p, rule) for p in patterns)
    return (compile_pattern(patterns, rule),)


def parse_rule_spec(spec: Any) -> tuple[str, Any]:
    """Split a single rule spec into ``(name, patterns)``.

    Accepted shapes:
        - ``Rule`` instances
        - mappings with ``type``/``regex`` or ``name``/``pattern`` keys
        - ``(name, pattern_or_patterns)`` pairs

    Raises:
        InvalidPattern: If the spec has none of these shapes
    """
    if isinstance(spec, Rule):
        return spec.name, spec.patterns
    if isinstance(spec, Mapping):
        if "type" in spec and "regex" in spec:
            return spec["type"], spec["regex"]
        if "name" in spec and "pattern" in spec:
            return spec["name"], spec["pattern"]
        raise InvalidPattern(f"rule spec needs 'type' and 'regex' keys, got {sorted(spec)!r}")
    if isinstance(spec, tuple) and len(spec) == 2:
        return spec[0], spec[1]
    raise InvalidPattern(f"unrecognized rule spec: {spec!r}")


class RuleTable:
    """Insertion-ordered mapping from rule name to compiled patterns.

    Usage:
        >>> table = RuleTable()
        >>> table.add("text", r"^\\w+")
        >>> [rule.name for rule in table]
        ['text']

    """

    __slots__ = ("_rules",)

    def __init__(self) -> None:
        self._rules: dict[str, tuple[re.Pattern[str], ...]] = {}

    def add(self, name: str, patterns: Any) -> Rule:
        """Register ``patterns`` under ``name``, replacing any existing entry."""
        if not isinstance(name, str):
            raise InvalidPattern(f"rule name must be a string, got {type(name).__name__}")
        compiled = normalize_patterns(patterns, rule=name)
        self._rules[name] = compiled
        return Rule(name, compiled)

    def get(self, name: str) -> Rule | None:
        """Return the rule registered under ``name``, or None."""
        patterns = self._rules.get(name)
        if patterns is None:
            return None
        return Rule(name, patterns)

    def names(self) -> list[str]:
        """Rule names in evaluation order."""
        return list(self._rules)

    def items(self) -> Iterator[tuple[str, tuple[re.Pattern[str], ...]]]:
        """Iterate ``(name, patterns)`` pairs in evaluation order."""
        return iter(self._rules.items())

    def __iter__(self) -> Iterator[Rule]:
        for name, patterns in self._rules.items():
            yield Rule(name, patterns)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __repr__(self) -> str:
        return f"RuleTable({self.names()!r})"
