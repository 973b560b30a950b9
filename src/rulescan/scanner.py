"""Incremental rule-based scanner.

The Scanner holds an input string, an ordered rule table, a cursor
(remaining text, absolute position, consumed prefix) and a FIFO queue of
tokens that were matched for lookahead but not yet consumed.

Tokens are produced on demand. ``scan()`` serves the queue first and only
runs the rule table when the queue is empty; ``peek()``/``lookahead(n)``
fill the queue without moving the cursor.

Invariants:
    - ``consumed + remaining == input`` and ``position == len(consumed)``
      (unless a caller passes an untrue ``value`` to ``consume``)
    - queued tokens are in input order; new matches start at the lookahead
      head, just past the end of the last queued token
    - the scanner never advances by zero characters

Thread Safety:
Scanner instances are single-consumer. Create one per input string and
drive it from one thread; there is no internal locking.

"""

from __future__ import annotations

import re
from collections import deque
from collections.abc import Callable, Iterator, Mapping
from typing import Any, NamedTuple

from rulescan.config import ScannerConfig, get_scanner_config
from rulescan.errors import (
    InvalidArgument,
    InvalidInput,
    InvalidPattern,
    InvalidToken,
    ScannerError,
    UnsafeZeroWidthMatch,
)
from rulescan.protocols import TokenFactoryLike, as_token_factory
from rulescan.rules import RuleTable, is_anchored, parse_rule_spec
from rulescan.tokens import ScanMatch
from rulescan.utils.logger import get_logger
from rulescan.utils.text import shorten, snippet

logger = get_logger(__name__)


class _Pending(NamedTuple):
    """A queued token and the match that produced it."""

    token: Any
    match: ScanMatch


class Scanner:
    """Pull-based scanner over a single input string.

    Usage:
        >>> scanner = Scanner("//foo/bar.com", {
        ...     "slash": r"^/",
        ...     "dot": r"^\\.",
        ...     "text": r"^\\w+",
        ... })
        >>> [(t.type, t.value) for t in scanner.scan_while()]
        [('slash', '/'), ('slash', '/'), ('text', 'foo'), ('slash', '/'), ('text', 'bar'), ('dot', '.'), ('text', 'com')]

    """

    __slots__ = (
        "_input",
        "_remaining",
        "_position",
        "_consumed",
        "_queue",
        "_rules",
        "_validated",  # id(pattern) -> pattern for patterns known to be anchored
        "_factory",
        "_config",
        "_advanced",  # last token handed out by advance(), with its match
    )

    def __init__(
        self,
        input: str,
        rules: Mapping[str, Any] | list[Any] | None = None,
        *,
        token_factory: TokenFactoryLike | None = None,
        config: ScannerConfig | None = None,
    ) -> None:
        """Initialize scanner with input text and optional rules.

        Args:
            input: Text to scan
            rules: Mapping of name to pattern(s), or a sequence of rule specs
            token_factory: Builds the token object for each match; defaults to
                the config's factory, then to ``DefaultTokenFactory``
            config: Configuration; defaults to the active context config

        Raises:
            InvalidInput: If ``input`` is not a string
        """
        if not isinstance(input, str):
            raise InvalidInput(f"expected a string, got {type(input).__name__}")
        self._config = config if config is not None else get_scanner_config()
        self._input = input
        self._remaining = input
        self._position = 0
        self._consumed = ""
        self._queue: deque[_Pending] = deque()
        self._rules = RuleTable()
        self._validated: dict[int, re.Pattern[str]] = {}
        self._advanced: _Pending | None = None
        self._factory = as_token_factory(
            token_factory if token_factory is not None else self._config.token_factory
        )

        if rules:
            self.add_rules(rules)

    # =========================================================================
    # State accessors
    # =========================================================================

    @property
    def input(self) -> str:
        """The original input string."""
        return self._input

    @property
    def remaining(self) -> str:
        """Input not yet consumed (includes text covered by queued tokens)."""
        return self._remaining

    @property
    def position(self) -> int:
        """Absolute offset of the cursor."""
        return self._position

    @property
    def consumed(self) -> str:
        """Text consumed so far."""
        return self._consumed

    @property
    def queue(self) -> tuple[Any, ...]:
        """Snapshot of queued lookahead tokens, front first."""
        return tuple(p.token for p in self._queue)

    @property
    def rules(self) -> RuleTable:
        """The rule table, in evaluation order."""
        return self._rules

    @property
    def config(self) -> ScannerConfig:
        return self._config

    # =========================================================================
    # Rule registration
    # =========================================================================

    def add_rule(self, rule: Any, patterns: Any = None) -> Scanner:
        """Register one or more patterns under ``rule``.

        ``rule`` may also be a single rule spec (``{"type": ..., "regex": ...}``,
        a ``(name, pattern)`` pair or a ``Rule``), in which case ``patterns``
        is omitted. Existing rules with the same name are replaced.

        Raises:
            InvalidPattern: If a pattern is not a regular expression

        Returns:
            self for method chaining
        """
        if patterns is None and not isinstance(rule, str):
            rule, patterns = parse_rule_spec(rule)
        registered = self._rules.add(rule, patterns)
        logger.debug("Registered rule %r (%d pattern(s))", registered.name, len(registered.patterns))
        return self

    def add_rules(self, rules: Mapping[str, Any] | list[Any]) -> Scanner:
        """Register several rules, preserving input order.

        Args:
            rules: Mapping of name to pattern(s), or a sequence of rule specs

        Returns:
            self for method chaining
        """
        if isinstance(rules, Mapping):
            for name, patterns in rules.items():
                self.add_rule(name, patterns)
        else:
            for spec in rules:
                self.add_rule(spec)
        return self

    # =========================================================================
    # Match primitive
    # =========================================================================

    def _check_anchored(self, pattern: re.Pattern[str]) -> None:
        # Keep a reference so the id cannot be reused by another pattern
        if self._validated.get(id(pattern)) is pattern:
            return
        if not isinstance(pattern, re.Pattern):
            raise InvalidPattern(f"expected a regular expression, got {type(pattern).__name__}")
        if not is_anchored(pattern):
            raise InvalidPattern(f"expected pattern {pattern.pattern!r} to start with '^'")
        self._validated[id(pattern)] = pattern

    def _match_at(self, pattern: re.Pattern[str], offset: int) -> ScanMatch | None:
        """Match ``pattern`` against the remaining text starting at ``offset``."""
        if offset >= len(self._remaining):
            return None
        self._check_anchored(pattern)
        text = self._remaining[offset:] if offset else self._remaining
        mo = pattern.match(text)
        if mo is None:
            return None
        if mo.end() == 0:
            raise UnsafeZeroWidthMatch(
                f"unsafe pattern {pattern.pattern!r}: patterns must not match an empty string"
            )
        return ScanMatch.from_re(mo, self._position + offset)

    def match(self, pattern: re.Pattern[str]) -> ScanMatch | None:
        """Match ``pattern`` at the start of the remaining text.

        Returns:
            A ScanMatch with absolute offsets, or None at end of input or
            when the pattern does not match

        Raises:
            InvalidPattern: If ``pattern`` is not anchored with ``^`` or ``\\A``
            UnsafeZeroWidthMatch: If ``pattern`` matches the empty string
        """
        return self._match_at(pattern, 0)

    # =========================================================================
    # Advance
    # =========================================================================

    def token(self, rule: str, match: ScanMatch) -> Any:
        """Build the token for ``match`` using the token factory."""
        return self._factory.build(rule, match)

    def _head(self) -> int:
        """Offset into the remaining text just past the last queued token."""
        if self._queue:
            return self._queue[-1].match.end - self._position
        return 0

    def _advance(self) -> _Pending | None:
        offset = self._head()
        if offset >= len(self._remaining):
            return None
        for rule, patterns in self._rules.items():
            for pattern in patterns:
                try:
                    match = self._match_at(pattern, offset)
                except ScannerError as e:
                    raise e.annotate(
                        rule=rule,
                        snippet=snippet(self._remaining[offset:], self._config.snippet_length),
                    ) from None
                if match is not None:
                    token = self.token(rule, match)
                    if token is None:
                        raise InvalidToken(
                            "token factory returned None",
                            rule=rule,
                            snippet=snippet(self._remaining[offset:], self._config.snippet_length),
                        )
                    if self._config.trace_tokens:
                        logger.debug("Matched %r at %d: %r", rule, match.index, shorten(match.text))
                    return _Pending(token, match)
        logger.debug(
            "No rule matched at position %d: %r",
            self._position + offset,
            snippet(self._remaining[offset:], self._config.snippet_length),
        )
        return None

    def advance(self) -> Any:
        """Match the next token at the lookahead head without consuming it.

        Rules are tried in registration order and, within a rule, patterns in
        registration order; the first match wins. The token is neither
        queued nor consumed; use ``enqueue`` or ``peek`` to keep it.

        Returns:
            The token, or None if the input is exhausted or no rule matches

        Raises:
            InvalidPattern, UnsafeZeroWidthMatch: Annotated with the rule name
                and a snippet of the text being scanned
            InvalidToken: If the token factory returns None
        """
        pending = self._advanced = self._advance()
        return pending.token if pending is not None else None

    # =========================================================================
    # Lookahead queue
    # =========================================================================

    def _pop(self) -> _Pending | None:
        if not self._queue:
            return None
        self._advanced = None
        return self._queue.popleft()

    def _push(self, pending: _Pending) -> None:
        # The lookahead head moves, so an earlier advance() result is stale
        self._advanced = None
        self._queue.append(pending)

    def _match_for(self, token: Any) -> ScanMatch:
        advanced = self._advanced
        if advanced is not None and advanced.token is token:
            return advanced.match
        match = getattr(token, "match", None)
        if isinstance(match, ScanMatch):
            return match
        raise InvalidArgument(f"cannot enqueue {type(token).__name__} token without a match")

    def enqueue(self, token: Any, match: ScanMatch | None = None) -> Any:
        """Push ``token`` onto the lookahead queue.

        Args:
            token: Token to queue; None is ignored
            match: Match the token covers; defaults to the match of the
                token last returned by ``advance``, then to ``token.match``

        Returns:
            The token

        Raises:
            InvalidArgument: If no match is known for ``token``
        """
        if token is not None:
            self._push(_Pending(token, match if match is not None else self._match_for(token)))
        return token

    def dequeue(self) -> Any:
        """Remove and return the front of the queue, or None if it is empty.

        The token's text stays in ``remaining``. Tokens still queued keep their
        place, and ``scan`` always consumes through the end of the token it
        returns, so any text skipped this way is consumed with the next token.
        """
        pending = self._pop()
        return pending.token if pending is not None else None

    def lookahead(self, n: int) -> Any:
        """Return the ``n``-th upcoming token (1-indexed) without consuming.

        Intermediate tokens are queued so later ``scan`` calls return them in
        order. ``lookahead(0)`` returns None.

        Raises:
            InvalidArgument: If ``n`` is not a non-negative integer
        """
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise InvalidArgument(f"expected a non-negative integer, got {n!r}")
        while len(self._queue) < n:
            pending = self._advance()
            if pending is None:
                break
            self._push(pending)
        if 0 < n <= len(self._queue):
            return self._queue[n - 1].token
        return None

    def peek(self) -> Any:
        """Return the next token without consuming it, or None."""
        return self.lookahead(1)

    def _next(self) -> _Pending | None:
        return self._pop() or self._advance()

    def next_token(self) -> Any:
        """Take the front of the queue, or match a new token if it is empty.

        Nothing is consumed; ``scan`` is the consuming counterpart.
        """
        pending = self._next()
        return pending.token if pending is not None else None

    # =========================================================================
    # Consume & scan
    # =========================================================================

    def _consume(self, length: int, value: str | None = None) -> str:
        if value is None:
            value = self._remaining[:length]
            length = len(value)
        self._advanced = None
        self._consumed += value
        self._position += length
        self._remaining = self._remaining[length:]
        return value

    def consume(self, length: int, value: str | None = None) -> str:
        """Remove ``length`` characters from the front of the remaining text.

        Args:
            length: Number of characters to consume
            value: The text being consumed, if already known. Trusted verbatim.

        Returns:
            The consumed text

        Raises:
            InvalidArgument: If ``length`` is not a non-negative integer
        """
        if isinstance(length, bool) or not isinstance(length, int) or length < 0:
            raise InvalidArgument(f"expected a non-negative integer, got {length!r}")
        if self._queue:
            # Queued tokens describe text at the old cursor
            logger.debug("Discarding %d queued token(s) on direct consume", len(self._queue))
            self._queue.clear()
        return self._consume(length, value)

    def scan(self) -> Any:
        """Return the next token and move the cursor past it.

        Returns:
            The token, or None if the input is exhausted or no rule matches
        """
        pending = self._next()
        if pending is None:
            return None
        match = pending.match
        length = max(match.end - self._position, 0)
        self._consume(length, match.text if length == len(match.text) else None)
        return pending.token

    def scan_while(self, predicate: Callable[[Any], bool] | None = None) -> list[Any]:
        """Scan tokens while ``predicate(next_token)`` is true.

        The predicate sees each upcoming token before it is consumed, or None
        when no token can be produced. Scanning also stops when no token can
        be produced, whatever the predicate says.
        A token the predicate refuses is not left in the lookahead queue.

        Args:
            predicate: Continue condition; defaults to "a token is available"

        Returns:
            Tokens consumed, in order
        """
        if predicate is None:
            predicate = _has_token
        scanned = []
        while True:
            queued = len(self._queue)
            if not predicate(self.peek()):
                # A refused token is not kept in the queue
                while len(self._queue) > queued:
                    self._queue.pop()
                break
            token = self.scan()
            if token is None:
                break
            scanned.append(token)
        return scanned

    def scan_all(self) -> list[Any]:
        """Scan until no token can be produced."""
        return list(self)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.scan, None)

    # =========================================================================
    # Boundary queries
    # =========================================================================

    def bos(self) -> bool:
        """True if nothing has been consumed yet."""
        return not self._consumed

    def eos(self) -> bool:
        """True if the remaining text and the queue are both empty."""
        return self._remaining == "" and not self._queue

    def __repr__(self) -> str:
        return f"<Scanner {self._position} {shorten(self._remaining)!r} queued={len(self._queue)}>"


def _has_token(token: Any) -> bool:
    return token is not None
