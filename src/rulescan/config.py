"""ContextVar-based scanner configuration for rulescan.

Provides context-local configuration using Python's ContextVars (PEP 567).
A Scanner captures the active config once, at construction time.

Usage:
    # Direct use
    from rulescan.config import ScannerConfig, set_scanner_config, reset_scanner_config

    set_scanner_config(ScannerConfig(snippet_length=40))
    try:
        scanner = Scanner(source, rules)
    finally:
        reset_scanner_config()

    # Or use the context manager
    with scanner_config_context(ScannerConfig(trace_tokens=True)):
        scanner = Scanner(source, rules)

    # Or skip the context entirely
    scanner = Scanner(source, rules, config=ScannerConfig(snippet_length=40))

"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from rulescan.protocols import TokenFactoryLike


@dataclass(frozen=True, slots=True)
class ScannerConfig:
    """Immutable scanner configuration.

    Attributes:
        snippet_length: Characters of unconsumed input attached to errors
            and debug records
        token_factory: Default token factory for scanners that are not given
            one explicitly (None uses the built-in factory)
        trace_tokens: Log every produced token at debug level

    """

    snippet_length: int = 20
    token_factory: TokenFactoryLike | None = None
    trace_tokens: bool = False

    @classmethod
    def from_dict(cls, config_dict: dict) -> ScannerConfig:
        """Create ScannerConfig from dictionary.

        Only includes keys that are valid ScannerConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = ScannerConfig.from_dict({
            ...     "snippet_length": 40,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.snippet_length
            40

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ScannerConfig = ScannerConfig()

_scanner_config: ContextVar[ScannerConfig] = ContextVar(
    "scanner_config",
    default=_DEFAULT_CONFIG,
)


def get_scanner_config() -> ScannerConfig:
    """Get the scanner configuration active in the current context."""
    return _scanner_config.get()


def set_scanner_config(config: ScannerConfig) -> None:
    """Set scanner configuration for the current context.

    Only affects scanners constructed afterwards.
    """
    _scanner_config.set(config)


def reset_scanner_config() -> None:
    """Reset to the default configuration."""
    _scanner_config.set(_DEFAULT_CONFIG)


@contextmanager
def scanner_config_context(config: ScannerConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with scanner_config_context(ScannerConfig(snippet_length=5)):
        ...     scanner = Scanner("hello world")
        >>> scanner.config.snippet_length
        5

    """
    previous = _scanner_config.get()
    _scanner_config.set(config)
    try:
        yield
    finally:
        _scanner_config.set(previous)


__all__ = [
    "ScannerConfig",
    "get_scanner_config",
    "set_scanner_config",
    "reset_scanner_config",
    "scanner_config_context",
]
