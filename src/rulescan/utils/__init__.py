"""Utility modules for rulescan.

Provides:
- logger: get_logger for logging
- text: snippet, shorten for diagnostic text
"""

from rulescan.utils.logger import get_logger
from rulescan.utils.text import shorten, snippet

__all__ = [
    "get_logger",
    "shorten",
    "snippet",
]
