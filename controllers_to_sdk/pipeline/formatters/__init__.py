"""
Post-processing formatters for generated code.
"""

from __future__ import annotations

from .base import Formatter, parser_for
from .prettier_formatter import PrettierFormatter, find_prettier_config

__all__ = [
    "Formatter",
    "PrettierFormatter",
    "find_prettier_config",
    "parser_for",
]
