"""
Utility functions for the SDK generator.
"""

import re

# Regex pattern to split an identifier into parts on any non-word character
_PART_SEPARATOR = re.compile(r"[^a-zA-Z0-9_]")


def camelcase(text: str) -> str:
    """Convert a name to camelCase.

    Examples:
        "UsersController" -> "usersController"
        "user-profile" -> "userProfile"
        "admin users" -> "adminUsers"

    Args:
        text: The text to convert

    Returns:
        camelCase string
    """
    parts = _PART_SEPARATOR.split(text)
    out = []
    for index, part in enumerate(parts):
        first = part[:1]
        out.append((first.lower() if index == 0 else first.upper()) + part[1:])
    return "".join(out)


def replace_suffix(text: str, add_suffix: str = "", remove_suffix: str = "") -> str:
    """Remove a suffix from a name (if present), then add another one.

    Examples:
        replace_suffix("UsersController", remove_suffix="Controller") -> "Users"
        replace_suffix("users", add_suffix="Api") -> "usersApi"
    """
    if remove_suffix and text.endswith(remove_suffix):
        text = text[: -len(remove_suffix)]
    return text + add_suffix
