"""Exception classes for rulescan.

Provides standardized exceptions for error handling throughout rulescan.
Every error raised by a Scanner derives from ScannerError and carries the
offending rule name and a snippet of unconsumed input when they are known.

"No rule matched" is never an error: the scanner returns None instead.
"""

from __future__ import annotations


class ScannerError(Exception):
    """Base exception for all rulescan errors.

    Attributes:
        message: Error description without location context
        rule: Name of the rule being evaluated (None if unknown)
        snippet: Short excerpt of the unconsumed input (None if unknown)
    """

    def __init__(
        self,
        message: str,
        rule: str | None = None,
        snippet: str | None = None,
    ) -> None:
        """Initialize scanner error with optional rule context.

        Args:
            message: Error description
            rule: Rule name being evaluated when the error occurred
            snippet: Excerpt of the input at the scan head
        """
        self.message = message
        self.rule = rule
        self.snippet = snippet
        super().__init__(self._format())

    def _format(self) -> str:
        context = []
        if self.rule is not None:
            context.append(f"rule {self.rule!r}")
        if self.snippet is not None:
            context.append(f"at {self.snippet!r}")
        if context:
            return f"{self.message} ({', '.join(context)})"
        return self.message

    def annotate(self, rule: str | None = None, snippet: str | None = None) -> ScannerError:
        """Fill in missing rule/snippet context and rebuild the message.

        Context already present is kept, so the innermost annotation wins.

        Returns:
            self, so callers can ``raise err.annotate(...)``
        """
        if self.rule is None:
            self.rule = rule
        if self.snippet is None:
            self.snippet = snippet
        self.args = (self._format(),)
        return self


class InvalidInput(ScannerError, TypeError):
    """The scanner was constructed with something other than a string."""

    pass


class InvalidPattern(ScannerError, ValueError):
    """A pattern is not a regular expression or is not anchored at the start.

    Patterns must begin with ``^`` or ``\\A`` so that they can only match at
    the start of the remaining input.
    """

    pass


class UnsafeZeroWidthMatch(ScannerError, ValueError):
    """A pattern matched without consuming any characters.

    The scanner must always advance; an empty match would loop forever.
    """

    pass


class InvalidArgument(ScannerError, ValueError):
    """An operation received an argument outside its domain.

    Raised by ``lookahead`` and ``consume`` for non-integer or negative counts,
    and by ``enqueue`` for a token whose match is unknown.
    """

    pass


class InvalidToken(ScannerError, TypeError):
    """A token factory returned None for a successful match.

    None is how the scanner reports that no token is available, so it cannot
    also stand for a token.
    """

    pass
