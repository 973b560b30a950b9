"""Minimal logging utilities for rulescan.

Scanner modules log through ``get_logger(__name__)``. Records go to the
"rulescan" hierarchy at debug level and no handlers are installed, so
enable them from the application:

    >>> import logging
    >>> logging.getLogger("rulescan").setLevel(logging.DEBUG)

With ``ScannerConfig(trace_tokens=True)`` every produced token is logged as
``Matched 'text' at 4: 'foo'``.
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "rulescan." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'rulescan.mymodule'
    """
    if not (name == "rulescan" or name.startswith("rulescan.")):
        name = f"rulescan.{name}"
    return logging.getLogger(name)
