"""Protocols and the default token factory for rulescan.

A token factory decides what object the scanner hands out for each match.
The scanner never inspects the object a custom factory returns; it keeps
the raw ScanMatch alongside it to know how much input the token covers.
"""

from __future__ import annotations

from collections.abc import Callable
from types import MappingProxyType
from typing import Any, Protocol, Union, runtime_checkable

from rulescan.tokens import ScanMatch, Token


@runtime_checkable
class TokenFactory(Protocol):
    """Protocol for objects that turn a rule match into a token.

    Implementations are called once per produced token and should not
    touch the scanner.
    """

    def build(self, rule: str, match: ScanMatch) -> Any:
        """Build a token for ``rule`` from ``match``.

        Args:
            rule: Name of the rule that matched
            match: Raw match with absolute offsets

        Returns:
            Any token object; it is passed to the caller verbatim
        """
        ...


TokenFactoryLike = Union[TokenFactory, Callable[[str, ScanMatch], Any]]


class DefaultTokenFactory:
    """Builds ``Token`` objects.

    The value is capture group 1 when it is present and non-empty, otherwise
    the full matched text. Named captures that took part in the match are
    exposed as ``Token.extras``.
    """

    __slots__ = ()

    def build(self, rule: str, match: ScanMatch) -> Token:
        value = match.groups[0] if match.groups and match.groups[0] else match.text
        extras = {k: v for k, v in match.named.items() if v is not None}
        if extras:
            return Token(rule, value, match, match.span, MappingProxyType(extras))
        return Token(rule, value, match, match.span)


class CallableTokenFactory:
    """Adapts a plain ``(rule, match) -> token`` callable to TokenFactory."""

    __slots__ = ("_func",)

    def __init__(self, func: Callable[[str, ScanMatch], Any]) -> None:
        self._func = func

    def build(self, rule: str, match: ScanMatch) -> Any:
        return self._func(rule, match)

    def __repr__(self) -> str:
        return f"CallableTokenFactory({self._func!r})"


DEFAULT_TOKEN_FACTORY = DefaultTokenFactory()


def as_token_factory(factory: TokenFactoryLike | None) -> TokenFactory:
    """Normalize ``factory`` to an object with a ``build`` method.

    None gives the default factory; objects with ``build`` are used as is;
    any other callable is wrapped.

    Raises:
        TypeError: If ``factory`` is neither a TokenFactory nor callable.
    """
    if factory is None:
        return DEFAULT_TOKEN_FACTORY
    if isinstance(factory, TokenFactory):
        return factory
    if callable(factory):
        return CallableTokenFactory(factory)
    raise TypeError(f"expected a token factory or callable, got {type(factory).__name__}")
