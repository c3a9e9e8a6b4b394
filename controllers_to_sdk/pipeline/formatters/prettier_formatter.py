"""
Prettier formatter for TypeScript and JSON output.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ..config import FormatterConfig
from .base import Formatter

logger = logging.getLogger(__name__)

PRETTIER_CONFIG_FILES = (".prettierrc", ".prettierrc.json")


def find_prettier_config(start: str | Path) -> Path | None:
    """Find a prettier configuration file in `start` or one of its parents."""
    directory = Path(start).resolve()
    for candidate in [directory, *directory.parents]:
        for name in PRETTIER_CONFIG_FILES:
            config_file = candidate / name
            if config_file.is_file():
                return config_file
    return None


class PrettierFormatter(Formatter):
    """Formatter running prettier in a subprocess."""

    def __init__(self):
        self._available = None

    def is_available(self, config: FormatterConfig) -> bool:
        """Check if prettier can be run."""
        if self._available is None:
            try:
                result = subprocess.run(
                    [*config.command, "--version"],
                    capture_output=True,
                    text=True,
                    timeout=config.timeout,
                )
                self._available = result.returncode == 0
            except (subprocess.SubprocessError, FileNotFoundError):
                self._available = False
        return self._available

    def format(self, code: str, config: FormatterConfig, parser: str = "typescript") -> str:
        """
        Format code using prettier.

        Args:
            code: Source code to format
            config: Formatter configuration
            parser: Prettier parser ("typescript" or "json")

        Returns:
            Formatted code, or the original code if prettier failed
        """
        if not self.is_available(config):
            return code

        cmd = [*config.command, "--parser", parser]

        if config.config_path:
            cmd.extend(["--config", config.config_path])

        try:
            result = subprocess.run(
                cmd,
                input=code,
                capture_output=True,
                text=True,
                timeout=config.timeout,
            )
        except subprocess.SubprocessError as e:
            logger.warning("Prettier failed, keeping unformatted output: %s", e)
            return code

        if result.returncode != 0:
            logger.warning("Prettier failed, keeping unformatted output: %s", result.stderr.strip())
            return code

        return result.stdout
