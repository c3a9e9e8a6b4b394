"""
Route templates parsing.

A route template is a "/"-separated path where segments prefixed with ":"
are named parameters, e.g. "/users/:id/profile".
"""

from __future__ import annotations

from collections.abc import Callable

from ..errors import RouteFormatError
from .ir_nodes import LiteralSegment, ParamSegment, Route

PARAM_MARKER = ":"

# Express-style URL features that cannot be rendered statically
UNSUPPORTED_CHARACTERS = {
    "*": "wildcards",
    "?": "optional segments",
    "+": "repeated segments",
    "(": "regular expressions",
    ")": "regular expressions",
}


def parse_route(template: str) -> Route:
    """
    Parse a route template into a Route.

    Args:
        template: The route template (e.g. "/users/:id")

    Returns:
        The parsed route

    Raises:
        RouteFormatError: If the template uses unsupported URL features
            or declares the same parameter twice
    """
    segments: list[LiteralSegment | ParamSegment] = []
    seen: set[str] = set()

    for part in template.split("/"):
        for char, feature in UNSUPPORTED_CHARACTERS.items():
            if char in part:
                raise RouteFormatError(f"Unsupported URL feature ({feature}) in segment {part!r} of route {template!r}")

        if not part.startswith(PARAM_MARKER):
            segments.append(LiteralSegment(part))
            continue

        name = part[len(PARAM_MARKER) :]

        if not name.isidentifier():
            raise RouteFormatError(f"Invalid parameter name {name!r} in route {template!r}")

        if name in seen:
            raise RouteFormatError(f"Parameter {name!r} is declared twice in route {template!r}")

        seen.add(name)
        segments.append(ParamSegment(name))

    return Route(tuple(segments))


def unparse_route(route: Route) -> str:
    """Convert a route back to its template form."""
    return resolve_route_with(route, lambda name: PARAM_MARKER + name)


def resolve_route_with(route: Route, resolver: Callable[[str], str]) -> str:
    """
    Render a route, replacing each parameter with `resolver(name)`.

    Args:
        route: The route to render
        resolver: Function mapping a parameter name to its replacement

    Returns:
        The rendered route

    Raises:
        RouteFormatError: If the route object contains an unknown segment
    """
    parts = []

    for segment in route.segments:
        if isinstance(segment, ParamSegment):
            parts.append(resolver(segment.name))
        elif isinstance(segment, LiteralSegment):
            parts.append(segment.text)
        else:
            raise RouteFormatError(f"Unknown route segment: {segment!r}")

    return "/".join(parts)


def params_from_route(route: Route) -> list[str]:
    """Get the parameter names of a route, in order of appearance."""
    return [segment.name for segment in route.segments if isinstance(segment, ParamSegment)]


def debug_route(route: Route, style: Callable[[str], str] = lambda text: text) -> str:
    """Render a route for log output, applying `style` to its parameters."""
    return resolve_route_with(route, lambda name: style(PARAM_MARKER + name))
