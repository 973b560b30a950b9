"""Token and ScanMatch definitions for the rulescan scanner.

The scanner produces Token objects that callers consume one at a time.
Each Token has a type (the rule name), a value, the raw match it came from,
and its absolute range in the original input.

Thread Safety:
Token and ScanMatch are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from rulescan.utils.text import shorten

_EMPTY: Mapping[str, str] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class ScanMatch:
    """Raw result of a successful pattern match.

    Offsets are absolute: ``index`` is the position in the original input
    where the match starts, not the index within the remaining text.

    Attributes:
        text: The full matched text (group 0)
        index: Absolute start offset
        groups: Positional capture groups (None for groups that did not take part)
        named: Named capture groups

    Examples:
        >>> m = ScanMatch("foo", 4, ("f",))
        >>> m[0], m[1], m.span
        ('foo', 'f', (4, 7))

    """

    text: str
    index: int
    groups: tuple[str | None, ...] = ()
    named: Mapping[str, str | None] = field(default_factory=lambda: _EMPTY, compare=False)

    @classmethod
    def from_re(cls, mo: re.Match[str], index: int) -> ScanMatch:
        """Build from a ``re.Match`` taken against the remaining text.

        Args:
            mo: Match object from ``pattern.match(remaining)``
            index: Absolute offset of the start of ``remaining``
        """
        named = mo.groupdict()
        return cls(
            text=mo.group(0),
            index=index + mo.start(),
            groups=mo.groups(),
            named=MappingProxyType(named) if named else _EMPTY,
        )

    @property
    def end(self) -> int:
        """Absolute end offset (exclusive)."""
        return self.index + len(self.text)

    @property
    def span(self) -> tuple[int, int]:
        """Absolute ``(start, end)`` offsets."""
        return (self.index, self.end)

    def group(self, n: int | str = 0) -> str | None:
        """Return group ``n``: 0 is the full text, ints are positional, strs are named."""
        if isinstance(n, str):
            return self.named[n]
        if n == 0:
            return self.text
        return self.groups[n - 1]

    def __getitem__(self, n: int | str) -> str | None:
        return self.group(n)

    def __len__(self) -> int:
        return len(self.text)


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the scanner.

    Attributes:
        type: Name of the rule that matched
        value: Token value (group 1 if present and non-empty, else the full match)
        match: The raw ScanMatch
        range: Absolute ``(start, end)`` offsets in the original input
        extras: Named captures that took part in the match

    Thread Safety:
        Frozen dataclass ensures immutability for safe sharing.

    """

    type: str
    value: Any
    match: ScanMatch = field(repr=False)
    range: tuple[int, int]
    extras: Mapping[str, str] = field(default_factory=lambda: _EMPTY, repr=False, compare=False)

    @property
    def start(self) -> int:
        """Absolute start offset (convenience accessor)."""
        return self.range[0]

    @property
    def end(self) -> int:
        """Absolute end offset (convenience accessor)."""
        return self.range[1]

    @property
    def text(self) -> str:
        """The full matched text, regardless of ``value``."""
        return self.match.text

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.value
        if isinstance(val, str):
            val = shorten(val)
        return f"Token({self.type}, {val!r}, {self.range[0]}:{self.range[1]})"
