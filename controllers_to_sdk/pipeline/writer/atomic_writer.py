"""
Atomic file writer for safe code generation.

Ensures that file writes are atomic to prevent data corruption
from interrupted operations.
"""

from __future__ import annotations

import json
import tempfile
from collections.abc import Callable
from pathlib import Path

from ..errors import InternalConsistencyError

STRING_DELIMITERS = "'\"`"


def count_unbalanced_braces(content: str) -> int:
    """
    Count the braces of TypeScript code, outside of strings and comments.

    Returns:
        Number of opened braces minus number of closed braces
    """
    depth = 0
    i = 0
    length = len(content)

    while i < length:
        char = content[i]

        if char in STRING_DELIMITERS:
            i += 1
            while i < length and content[i] != char:
                i += 2 if content[i] == "\\" else 1
        elif content.startswith("//", i):
            newline = content.find("\n", i)
            i = length if newline == -1 else newline
        elif content.startswith("/*", i):
            end = content.find("*/", i + 2)
            i = length if end == -1 else end + 1
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1

        i += 1

    return depth


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file

    This ensures that an interrupted write operation never leaves
    the target file in an incomplete state.
    """

    def __init__(
        self,
        validate_typescript: Callable[[str], None] | None = None,
        validate_json: Callable[[str], None] | None = None,
    ):
        """Initialize the atomic writer.

        Args:
            validate_typescript: Optional validation function for TypeScript code
            validate_json: Optional validation function for JSON documents
        """
        self._validate_typescript = validate_typescript or self._default_validate_typescript
        self._validate_json = validate_json or self._default_validate_json

    def write(
        self,
        path: Path,
        content: str,
        language: str,
        validate: bool = True,
    ) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            language: Language for validation ("typescript" or "json")
            validate: Whether to validate before finalizing

        Raises:
            InternalConsistencyError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )

        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self.validate(content, language)

            temp_path.replace(path)

        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

    def validate(self, content: str, language: str) -> None:
        if language == "typescript":
            self._validate_typescript(content)
        elif language == "json":
            self._validate_json(content)

    def _default_validate_typescript(self, content: str) -> None:
        """Default TypeScript validation.

        Raises:
            InternalConsistencyError: If the braces are unbalanced
        """
        unbalanced = count_unbalanced_braces(content)
        if unbalanced != 0:
            raise InternalConsistencyError(f"Generated TypeScript code has unbalanced braces ({unbalanced:+d})")

    def _default_validate_json(self, content: str) -> None:
        try:
            json.loads(content)
        except json.JSONDecodeError as e:
            raise InternalConsistencyError(f"Generated JSON is not valid: {e}") from e
