"""
IR (Intermediate Representation) node definitions.

These nodes represent the analyzed API, ready for code generation.
Every node is created once during analysis and never mutated afterwards:
the backends only read them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class HttpMethod(str, Enum):
    """HTTP method of a controller's method."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @classmethod
    def from_decorator(cls, decorator_name: str) -> HttpMethod | None:
        """Map a decorator name (e.g. "Get") to an HTTP method, or None if unrecognized."""
        return _DECORATOR_TO_HTTP_METHOD.get(decorator_name)


_DECORATOR_TO_HTTP_METHOD = {
    "Get": HttpMethod.GET,
    "Post": HttpMethod.POST,
    "Put": HttpMethod.PUT,
    "Patch": HttpMethod.PATCH,
    "Delete": HttpMethod.DELETE,
}


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LiteralSegment:
    """A literal part of a route (e.g. "users")."""

    text: str


@dataclass(frozen=True)
class ParamSegment:
    """A named parameter of a route (e.g. ":id")."""

    name: str


RouteSegment = LiteralSegment | ParamSegment


@dataclass(frozen=True)
class Route:
    """A parsed route template.

    Segments are the "/"-separated parts of the template, including empty
    literal segments, so that unparsing gives back the exact template.
    """

    segments: tuple[RouteSegment, ...] = ()

    def to_dict(self) -> list[dict[str, str]]:
        out = []
        for segment in self.segments:
            if isinstance(segment, ParamSegment):
                out.append({"param": segment.name})
            else:
                out.append({"static": segment.text})
        return out


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResolvedTypeDeps:
    """Type with resolved level 1 dependencies.

    Dependencies' own dependencies are not looked up here; the type index
    builder takes care of walking them.
    """

    # The original raw type, with import("...") qualifiers
    raw_type: str = ""

    # The resolved type, without qualifiers
    resolved_type: str = ""

    # File from which the type originates (relative to the source root)
    relative_file_path: str = ""

    # Root-relative file path -> type names imported from it
    dependencies: dict[str, tuple[str, ...]] = field(default_factory=dict)

    # Non-native identifiers left bare (neither builtin nor imported)
    local_types: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "rawType": self.raw_type,
            "resolvedType": self.resolved_type,
            "relativeFilePath": self.relative_file_path,
            "dependencies": {path: list(names) for path, names in self.dependencies.items()},
            "localTypes": list(self.local_types),
        }


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AbsentSlot:
    """No decorated argument of this kind."""

    def to_dict(self) -> None:
        return None


@dataclass(frozen=True)
class SingleSlot:
    """A single keyless argument: the whole object is the parameter."""

    type: ResolvedTypeDeps

    # Property names of the object type, as reported by the source AST
    properties: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return self.type.to_dict()


@dataclass(frozen=True)
class KeyedSlot:
    """One or more keyed arguments, merged into a composite object type."""

    entries: tuple[tuple[str, ResolvedTypeDeps], ...] = ()

    def keys(self) -> list[str]:
        return [key for key, _ in self.entries]

    def to_dict(self) -> dict[str, Any]:
        return {key: typ.to_dict() for key, typ in self.entries}


ParamSlot = AbsentSlot | SingleSlot | KeyedSlot

ABSENT = AbsentSlot()


def slot_resolved_types(slot: ParamSlot) -> list[ResolvedTypeDeps]:
    """List every resolved type referenced by a parameter slot."""
    match slot:
        case AbsentSlot():
            return []
        case SingleSlot(type=typ):
            return [typ]
        case KeyedSlot(entries=entries):
            return [typ for _, typ in entries]
    raise TypeError(f"Unknown parameter slot: {slot!r}")


def slot_is_present(slot: ParamSlot) -> bool:
    match slot:
        case AbsentSlot():
            return False
        case SingleSlot() | KeyedSlot():
            return True
    raise TypeError(f"Unknown parameter slot: {slot!r}")


@dataclass(frozen=True)
class MethodParams:
    """Parameters of a controller's method, split by source."""

    route_params: ParamSlot = ABSENT
    query_params: ParamSlot = ABSENT
    body_params: ParamSlot = ABSENT

    def slots(self) -> list[ParamSlot]:
        return [self.route_params, self.query_params, self.body_params]

    def has_any(self) -> bool:
        return any(slot_is_present(slot) for slot in self.slots())

    def resolved_types(self) -> list[ResolvedTypeDeps]:
        out: list[ResolvedTypeDeps] = []
        for slot in self.slots():
            out.extend(slot_resolved_types(slot))
        return out

    def to_dict(self) -> dict[str, Any]:
        return {
            "routeParams": self.route_params.to_dict(),
            "queryParams": self.query_params.to_dict(),
            "bodyParams": self.body_params.to_dict(),
        }


# ---------------------------------------------------------------------------
# Methods, controllers, modules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SdkMethod:
    """SDK interface for a single controller's method."""

    name: str
    http_method: HttpMethod
    route: Route
    uri_path: str
    params: MethodParams
    return_type: ResolvedTypeDeps

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "httpMethod": self.http_method.value,
            "route": self.route.to_dict(),
            "uriPath": self.uri_path,
            "params": self.params.to_dict(),
            "returnType": self.return_type.to_dict(),
        }


@dataclass(frozen=True)
class SdkController:
    """SDK interface of a controller."""

    class_name: str
    camel_class_name: str
    registration_name: str
    # Original controller file's path, relative to the source root
    path: str
    methods: tuple[SdkMethod, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "className": self.class_name,
            "camelClassName": self.camel_class_name,
            "registrationName": self.registration_name,
            "path": self.path,
            "methods": [method.to_dict() for method in self.methods],
        }


SdkModules = dict[str, dict[str, SdkController]]


@dataclass(frozen=True)
class TypeDeclaration:
    """A type declaration to emit in the generated `_types` tree."""

    name: str
    kind: str  # "interface", "enum" or "alias"
    # TypeScript text of the declaration's body, with qualifiers
    body: ResolvedTypeDeps
    type_params: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "typeParams": list(self.type_params),
            "body": self.body.to_dict(),
        }


SdkTypes = dict[str, tuple[TypeDeclaration, ...]]


@dataclass(frozen=True)
class SdkContent:
    """The complete output of the analysis phase."""

    types: SdkTypes = field(default_factory=dict)
    modules: SdkModules = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "types": {path: [decl.to_dict() for decl in decls] for path, decls in self.types.items()},
            "modules": {
                module_name: {name: controller.to_dict() for name, controller in controllers.items()}
                for module_name, controllers in self.modules.items()
            },
        }
