"""
Formatter interface for the generated files.

The generator hands each file to `Formatter.format_file`, which picks the
parser from the file's extension.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import PurePath

from ..config import FormatterConfig

# Parser of each generated file extension
PARSERS = {
    ".ts": "typescript",
    ".json": "json",
}


def parser_for(file_name: str | PurePath) -> str:
    """Parser of a generated file, TypeScript unless its extension says otherwise."""
    return PARSERS.get(PurePath(file_name).suffix, "typescript")


class Formatter(ABC):
    """Post-processing step applied to the generated files."""

    def format_file(self, code: str, file_name: str | PurePath, config: FormatterConfig) -> str:
        return self.format(code, config, parser_for(file_name))

    @abstractmethod
    def format(self, code: str, config: FormatterConfig, parser: str = "typescript") -> str:
        """Format code with the given parser ("typescript" or "json")."""

    @abstractmethod
    def is_available(self, config: FormatterConfig) -> bool:
        """Whether the formatter can run with this configuration."""
