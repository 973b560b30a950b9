"""Text helpers for diagnostics."""

from __future__ import annotations


def snippet(text: str, length: int = 20) -> str:
    """Return the first ``length`` characters of ``text``.

    Used to localize errors and debug records without dumping the whole input.

    Example:
        >>> snippet("hello world", 5)
        'hello'
    """
    if length <= 0:
        return ""
    return text[:length]


def shorten(text: str, width: int = 20) -> str:
    """Shorten ``text`` for compact reprs, marking truncation with ``...``.

    Example:
        >>> shorten("abcdefghij", 8)
        'abcde...'
    """
    if len(text) <= width:
        return text
    return text[: max(width - 3, 0)] + "..."
