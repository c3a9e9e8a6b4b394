"""
Source AST node definitions.

These nodes are the interface between the analyzer and the service reading
the API's source code. All type texts are TypeScript type expressions in
which references to declarations of the analyzed tree are embedded as
`import("path/to/file").TypeName` qualifiers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol


@dataclass(frozen=True)
class DecoratorArg:
    """An argument given to a decorator or marker call."""

    # Source text of the argument
    text: str = ""

    # Whether the argument is a literal value (string, number, ...)
    is_literal: bool = False
    value: Any = None

    # Identifiers, when the argument is a name or a list of names
    names: tuple[str, ...] = ()

    @property
    def is_string_literal(self) -> bool:
        return self.is_literal and isinstance(self.value, str)


@dataclass(frozen=True)
class DecoratorNode:
    """A decorator (or a marker used in an annotation)."""

    name: str
    # False for `@Controller`, True for `@Controller()`
    is_called: bool = True
    args: tuple[DecoratorArg, ...] = ()
    kwargs: dict[str, DecoratorArg] = field(default_factory=dict)
    text: str = ""


@dataclass(frozen=True)
class ParamNode:
    """A method parameter."""

    name: str
    decorators: tuple[DecoratorNode, ...] = ()
    type_text: str = "any"
    # Whether the type is an object type (class, mapping, array...)
    is_object: bool = False
    # Property names of the object type, when known
    properties: tuple[str, ...] = ()
    text: str = ""


@dataclass(frozen=True)
class MethodNode:
    """A method of a class."""

    name: str
    decorators: tuple[DecoratorNode, ...] = ()
    params: tuple[ParamNode, ...] = ()
    return_type_text: str = "any"


@dataclass(frozen=True)
class ClassNode:
    """A class declaration."""

    name: str
    decorators: tuple[DecoratorNode, ...] = ()
    methods: tuple[MethodNode, ...] = ()
    # Root-relative path of the declaring file
    file_path: str = ""

    def get_decorator(self, name: str) -> DecoratorNode | None:
        return next((dec for dec in self.decorators if dec.name == name), None)


@dataclass(frozen=True)
class DeclarationNode:
    """A type declaration (class, enum or alias) referenced by the API."""

    name: str
    kind: str  # "interface", "enum" or "alias"
    # TypeScript text of the declaration's body, with qualifiers
    body_text: str
    # Root-relative path of the declaring file
    file_path: str
    type_params: tuple[str, ...] = ()


class SourceAstService(Protocol):
    """Capabilities the analyzer needs from the source reader."""

    @property
    def root(self) -> Path:
        """Absolute path to the source root."""

    def list_files(self) -> list[str]:
        """List the root-relative paths of all source files."""

    def classes_in_file(self, file_path: str) -> list[ClassNode]:
        """List the classes declared at the top level of a file."""

    def resolve_class(self, file_path: str, name: str) -> ClassNode | None:
        """Find a class visible under `name` in a file (declared or imported)."""

    def find_declaration(self, module_path: str, name: str) -> DeclarationNode | None:
        """Find a type declaration from a root-relative module path (as found in qualifiers)."""
