"""
Analyzer for the methods of the API's controllers.
"""

from __future__ import annotations

import logging

import click

from ..errors import DecoratorFormatError, RouteFormatError
from ..source_ast.nodes import ClassNode
from .ir_nodes import HttpMethod, SdkMethod
from .params import MethodContext, extract_params
from .route import debug_route, parse_route
from .typedeps import resolve_type_dependencies

logger = logging.getLogger(__name__)


def build_uri(controller_uri_prefix: str | None, uri_path: str) -> str:
    """Prefix a method's URI path with its controller's registration name, if any."""
    if not controller_uri_prefix:
        return uri_path

    uri_path = uri_path.lstrip("/")
    return f"/{controller_uri_prefix}/{uri_path}" if uri_path else f"/{controller_uri_prefix}"


def analyze_methods(
    controller_class: ClassNode,
    controller_uri_prefix: str | None,
    file_path: str,
    absolute_src_path: str,
) -> list[SdkMethod]:
    """
    Generate the SDK interface of a controller's methods.

    Args:
        controller_class: The class declaration of the controller
        controller_uri_prefix: Optional URI prefix for this controller (e.g. `@Controller("registrationName")`)
        file_path: Path to the controller's file, relative to the source root
        absolute_src_path: Absolute path to the source directory

    Returns:
        The methods exposed over HTTP, in declaration order

    Raises:
        DecoratorFormatError: If an HTTP decorator is used with unsupported arguments
        RouteFormatError: If a route cannot be parsed
    """
    collected: list[SdkMethod] = []

    for method in controller_class.methods:
        logger.debug("├─ Found method: %s", method.name)

        decorators = [dec for dec in method.decorators if HttpMethod.from_decorator(dec.name) is not None]

        if len(decorators) > 1:
            raise DecoratorFormatError(
                f"Detected multiple HTTP decorators on method {controller_class.name}.{method.name}: "
                + ", ".join(dec.name for dec in decorators)
            )

        if not decorators:
            # Not reachable from the outside: no interface to generate
            logger.debug("├─── Skipping this method as it does not have an HTTP decorator")
            continue

        dec = decorators[0]
        http_method = HttpMethod.from_decorator(dec.name)

        logger.debug("├─── Detected HTTP method: %s", http_method.value)

        if len(dec.args) > 1:
            raise DecoratorFormatError(
                f"Multiple ({len(dec.args)}) arguments were provided to the HTTP decorator of {controller_class.name}.{method.name}"
            )

        if not dec.args:
            logger.debug("├─── No argument found for decorator, using base URI path.")
            uri_path = ""
        else:
            uri_name_arg = dec.args[0]

            # Variables are not supported
            if not uri_name_arg.is_string_literal:
                raise DecoratorFormatError(f"The argument provided to the HTTP decorator is not a string literal:\n>> {uri_name_arg.text}")

            uri_path = uri_name_arg.value
            logger.debug("├─── Detected argument in HTTP decorator, mapping this method to custom URI name")

        logger.debug("├─── Detected URI name: %s", uri_path)

        try:
            route = parse_route(build_uri(controller_uri_prefix, uri_path))
        except RouteFormatError as e:
            raise RouteFormatError(
                f"Detected unsupported URI format in {controller_class.name}.{method.name} ({file_path}):\n{e}"
            ) from e

        logger.debug("├─── Parsed URI name to route: %s", debug_route(route, lambda text: click.style(text, fg="blue")))

        logger.debug("├─── Analyzing arguments...")
        params = extract_params(
            MethodContext(
                controller_class=controller_class,
                method=method,
                http_method=http_method,
                route=route,
                file_path=file_path,
                absolute_src_path=absolute_src_path,
            )
        )

        logger.debug("├─── Resolving return type...")
        return_type = resolve_type_dependencies(method.return_type_text, file_path, absolute_src_path)

        logger.debug("├─── Detected return type: %s", return_type.resolved_type)

        collected.append(
            SdkMethod(
                name=method.name,
                http_method=http_method,
                route=route,
                uri_path=uri_path,
                params=params,
                return_type=return_type,
            )
        )

    return collected
