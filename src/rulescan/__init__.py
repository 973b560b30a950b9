"""
rulescan — Incremental rule-based scanner for hand-written parsers.

Register named, anchored regular expressions; pull tokens one at a time
with ``scan()``, look ahead with ``peek()``/``lookahead(n)``, and keep
track of the cursor position and consumed text. Zero runtime dependencies.

Quick Start:
    >>> from rulescan import Scanner
    >>> scanner = Scanner('var foo = "bar";', {
    ...     "space": r"^ +",
    ...     "text": r"^\\w+",
    ...     "equal": r"^=",
    ...     "quote": r"^[\\"']",
    ...     "semi": r"^;",
    ... })
    >>> scanner.scan()
    Token(text, 'var', 0:3)
    >>> scanner.peek()
    Token(space, ' ', 3:4)
    >>> scanner.position
    3

Custom tokens:
    >>> scanner = Scanner("a1", {"word": r"^\\w+"}, token_factory=lambda rule, m: (rule, m.text))
    >>> scanner.scan()
    ('word', 'a1')
"""

from rulescan.config import (
    ScannerConfig,
    get_scanner_config,
    reset_scanner_config,
    scanner_config_context,
    set_scanner_config,
)
from rulescan.errors import (
    InvalidArgument,
    InvalidInput,
    InvalidPattern,
    InvalidToken,
    ScannerError,
    UnsafeZeroWidthMatch,
)
from rulescan.protocols import DefaultTokenFactory, TokenFactory
from rulescan.rules import Rule, RuleTable, is_anchored
from rulescan.scanner import Scanner
from rulescan.tokens import ScanMatch, Token

__version__ = "0.1.0"

__all__ = [
    # Core
    "Scanner",
    "Token",
    "ScanMatch",
    # Rules
    "Rule",
    "RuleTable",
    "is_anchored",
    # Token factories
    "TokenFactory",
    "DefaultTokenFactory",
    # Configuration
    "ScannerConfig",
    "get_scanner_config",
    "set_scanner_config",
    "reset_scanner_config",
    "scanner_config_context",
    # Errors
    "ScannerError",
    "InvalidInput",
    "InvalidPattern",
    "UnsafeZeroWidthMatch",
    "InvalidArgument",
    "InvalidToken",
    "__version__",
]
