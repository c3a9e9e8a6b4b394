"""
Type dependencies resolution.

Types coming from the source AST reference declarations of other files
through embedded qualifiers of the form `import("path/to/file").TypeName`.
The resolver strips these qualifiers and records them as dependency edges,
so that the backends can emit proper import statements.
"""

from __future__ import annotations

import posixpath
import re

from ..errors import InternalConsistencyError
from .ir_nodes import ResolvedTypeDeps

# Regex to match or replace imported types
IMPORTED_TYPE_REGEX = re.compile(r"""\bimport\((['"])([^'"]+)\1\)\.([a-zA-Z0-9_$]+)\b""")

_STRING_LITERAL_REGEX = re.compile(r""""(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'""")
_IDENTIFIER_REGEX = re.compile(r"(?<![\w$.])([A-Za-z_$][\w$]*)(?![\w$])(?!\s*\??:)")

# Identifiers that never need an import in generated TypeScript
NATIVE_TYPES = frozenset(
    {
        "any",
        "Array",
        "bigint",
        "boolean",
        "Date",
        "false",
        "keyof",
        "Map",
        "never",
        "null",
        "number",
        "object",
        "Omit",
        "Partial",
        "Pick",
        "Promise",
        "readonly",
        "Readonly",
        "Record",
        "Required",
        "Set",
        "string",
        "symbol",
        "true",
        "typeof",
        "undefined",
        "unknown",
        "void",
    }
)


def _to_posix(path: str) -> str:
    return path.replace("\\", "/")


def _is_absolute(path: str) -> bool:
    return posixpath.isabs(_to_posix(path)) or re.match(r"^[A-Za-z]:[\\/]", path) is not None


def resolve_type_dependencies(type_text: str, relative_file_path: str, absolute_src_path: str) -> ResolvedTypeDeps:
    """
    Resolve the dependencies of a textual type.

    Args:
        type_text: The raw type, possibly containing import("...") qualifiers
        relative_file_path: File the type originates from, relative to the source root
        absolute_src_path: Absolute path to the source root

    Returns:
        The resolved type along with its dependencies

    Raises:
        InternalConsistencyError: If a path is still absolute or a qualifier
            survived the stripping
    """
    if _is_absolute(relative_file_path):
        raise InternalConsistencyError(
            f"Internal error: got absolute file path in type dependencies resolver, when expecting a relative one (got {relative_file_path})"
        )

    src_root = _to_posix(absolute_src_path)
    dependencies: dict[str, list[str]] = {}

    def _collect(match: re.Match[str]) -> str:
        matched_file_path = _to_posix(match.group(2))
        type_name = match.group(3)

        if _is_absolute(matched_file_path):
            file_path = posixpath.relpath(matched_file_path, src_root)
        else:
            file_path = matched_file_path

        deps = dependencies.setdefault(file_path, [])
        if type_name not in deps:
            deps.append(type_name)

        return type_name

    # Single pass: collect the edges and strip the qualifiers
    resolved_type = IMPORTED_TYPE_REGEX.sub(_collect, type_text)

    if "import(" in resolved_type:
        raise InternalConsistencyError(f"Internal error: resolved type still contains an import(...) statement: {resolved_type}")

    for dep_file in dependencies:
        if _is_absolute(dep_file):
            raise InternalConsistencyError(
                "Internal error: resolved absolute file path in type dependencies, when should have resolved a relative one\n"
                f"In type: {type_text}\nGot: {dep_file}"
            )

    imported = {name for names in dependencies.values() for name in names}

    return ResolvedTypeDeps(
        raw_type=type_text,
        resolved_type=resolved_type,
        relative_file_path=_to_posix(relative_file_path),
        dependencies={path: tuple(names) for path, names in dependencies.items()},
        local_types=_find_local_types(resolved_type, imported),
    )


def _find_local_types(resolved_type: str, imported: set[str]) -> tuple[str, ...]:
    """Find the identifiers of a resolved type that are neither native nor imported."""
    without_strings = _STRING_LITERAL_REGEX.sub('""', resolved_type)
    local_types: list[str] = []

    for match in _IDENTIFIER_REGEX.finditer(without_strings):
        name = match.group(1)
        if name in NATIVE_TYPES or name in imported or name in local_types:
            continue
        local_types.append(name)

    return tuple(local_types)


def get_import_resolved_type(type_text: str) -> str:
    """
    Strip the qualifiers of a type.

    Example: 'import("dir/file").TypeName' => "TypeName"
    """
    return IMPORTED_TYPE_REGEX.sub(lambda match: match.group(3), type_text)


def normalize_external_file_path(imported_file_path: str) -> str:
    """
    Convert paths of files located above the source root.

    Example: "../../lib/types" => "_external2/lib/types"

    Args:
        imported_file_path: A root-relative file path

    Returns:
        A path that never climbs above the root
    """
    imported_file_path = _to_posix(imported_file_path)

    if not imported_file_path.startswith("../"):
        return imported_file_path

    level = 0
    while imported_file_path.startswith("../"):
        level += 1
        imported_file_path = imported_file_path[3:]

    return f"_external{level}/{imported_file_path}"
