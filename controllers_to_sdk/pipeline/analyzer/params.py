"""
Analyzer for the parameters of controllers' methods.

Arguments can be requested individually by key, or as a whole object:

    def get_stuff(self, email: Annotated[str, Query("email")], company_id: Annotated[CompanyId, Query("companyId")])

gives the SDK method parameter `{ email: string, companyId: CompanyId }`, while

    def get_stuff(self, query: Annotated[EmailAndCompanyId, Query()])

gives `EmailAndCompanyId`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..errors import DecoratorFormatError, ParamContractError
from ..source_ast.nodes import ClassNode, DecoratorNode, MethodNode, ParamNode
from .ir_nodes import ABSENT, AbsentSlot, HttpMethod, KeyedSlot, MethodParams, ParamSlot, Route, SingleSlot, slot_is_present
from .route import params_from_route
from .typedeps import get_import_resolved_type, resolve_type_dependencies

logger = logging.getLogger(__name__)

# Keys that would shadow a property every JavaScript object inherits
JS_OBJECT_PROPERTIES = frozenset(
    {
        "constructor",
        "hasOwnProperty",
        "isPrototypeOf",
        "propertyIsEnumerable",
        "toLocaleString",
        "toString",
        "valueOf",
        "__proto__",
        "__defineGetter__",
        "__defineSetter__",
        "__lookupGetter__",
        "__lookupSetter__",
    }
)


class ArgDecorator(str, Enum):
    """Markers telling where a method argument comes from."""

    PARAM = "Param"
    QUERY = "Query"
    BODY = "Body"

    @classmethod
    def names(cls) -> set[str]:
        return {member.value for member in cls}


@dataclass(frozen=True)
class MethodContext:
    """Everything known about a method when analyzing its arguments."""

    controller_class: ClassNode
    method: MethodNode
    http_method: HttpMethod
    route: Route
    file_path: str
    absolute_src_path: str

    def describe(self) -> dict[str, Any]:
        return {
            "controller": self.controller_class.name,
            "method": self.method.name,
            "httpMethod": self.http_method.value,
            "filePath": self.file_path,
        }


@dataclass(frozen=True)
class DecoratedArg:
    """A method argument carrying a Param/Query/Body marker."""

    arg: ParamNode
    arg_param_key: str | None
    decorator: DecoratorNode
    decorator_type: ArgDecorator
    context: MethodContext


def extract_params(context: MethodContext) -> MethodParams:
    """
    Build the SDK interface of a method's parameters.

    Args:
        context: The method being analyzed

    Returns:
        The route, query and body parameter slots

    Raises:
        ParamContractError: If the decorated arguments break a contract
        DecoratorFormatError: If a marker is used with unsupported arguments
    """
    decorated_args = extract_decorated_args(context)

    params = MethodParams(
        route_params=merge_decorated_args(decorated_args[ArgDecorator.PARAM]),
        query_params=merge_decorated_args(decorated_args[ArgDecorator.QUERY]),
        body_params=merge_decorated_args(decorated_args[ArgDecorator.BODY]),
    )

    # Route params must exist in the route URL
    allowed_route_params = set(params_from_route(context.route))

    for used_param in _exposed_names(params.route_params):
        if used_param not in allowed_route_params:
            raise ParamContractError(f"Route param {used_param} does not appear in route URL", context.describe())

    if context.http_method == HttpMethod.GET and slot_is_present(params.body_params):
        raise ParamContractError(f"{context.http_method.value} {context.method.name} should not have Body params", context.describe())

    if context.http_method != HttpMethod.GET and slot_is_present(params.query_params):
        raise ParamContractError(f"{context.http_method.value} {context.method.name} should not have Query params", context.describe())

    # Every route param must be bound by the caller; a keyless object of unknown shape is trusted
    if not (isinstance(params.route_params, SingleSlot) and not params.route_params.properties):
        exposed_route_params = set(_exposed_names(params.route_params))
        for route_param in params_from_route(context.route):
            if route_param not in exposed_route_params:
                raise ParamContractError(
                    f"Route param {route_param} is not declared with a Param() argument",
                    context.describe(),
                )

    return params


def _exposed_names(slot: ParamSlot) -> list[str]:
    """Names a parameter slot exposes to the caller."""
    match slot:
        case AbsentSlot():
            return []
        case SingleSlot(properties=properties):
            # A single keyless argument exposes the properties of its object type
            return list(properties)
        case KeyedSlot():
            return slot.keys()
    raise TypeError(f"Unknown parameter slot: {slot!r}")


def extract_decorated_args(context: MethodContext) -> dict[ArgDecorator, list[DecoratedArg]]:
    """Collect the method's arguments carrying a Param/Query/Body marker."""
    decorated_args: dict[ArgDecorator, list[DecoratedArg]] = {kind: [] for kind in ArgDecorator}
    controller_name = context.controller_class.name
    method_name = context.method.name

    for arg in context.method.params:
        logger.debug("├───── Detected argument: %s: %s", arg.name, get_import_resolved_type(arg.type_text))

        arg_decorators = [dec for dec in arg.decorators if dec.name in ArgDecorator.names()]

        if not arg_decorators:
            logger.debug("├───── Skipping this argument as it does not have a decorator")
            continue

        if len(arg_decorators) > 1:
            raise DecoratorFormatError(
                f"{controller_name} {method_name} has multiple decorators on argument {arg.name} "
                f"{', '.join(dec.name for dec in arg_decorators)}"
            )

        decorator = arg_decorators[0]
        decorator_type = ArgDecorator(decorator.name)
        arg_param_key = extract_arg_param_key(context, arg, decorator)

        if arg_param_key is None and not arg.is_object:
            raise ParamContractError(
                f"{controller_name} {method_name} generic controller argument {decorator_type.value}() {arg.name} must be an object type",
                context.describe(),
            )

        decorated_args[decorator_type].append(
            DecoratedArg(
                arg=arg,
                arg_param_key=arg_param_key,
                decorator=decorator,
                decorator_type=decorator_type,
                context=context,
            )
        )

    return decorated_args


def extract_arg_param_key(context: MethodContext, arg: ParamNode, decorator: DecoratorNode) -> str | None:
    """Get the key given to an argument marker, e.g. "id" for `Param("id")`."""
    if not decorator.is_called or not decorator.args:
        return None

    if len(decorator.args) > 1:
        raise DecoratorFormatError(
            f"{context.controller_class.name} {context.method.name} {decorator.name}() {arg.name} argument decorator has multiple parameters"
        )

    decorator_arg = decorator.args[0]

    if not decorator_arg.is_string_literal:
        raise DecoratorFormatError(f"The argument provided to the decorator is not a string literal:\n>>> {decorator.text}")

    param_key = decorator_arg.value

    if param_key in JS_OBJECT_PROPERTIES:
        raise ParamContractError(
            f"{decorator.name}('{param_key}') param name collides with JavaScript native object property",
            context.describe(),
        )

    return param_key


def merge_decorated_args(decorated_args: list[DecoratedArg]) -> ParamSlot:
    """
    Merge the arguments of a same kind into a single parameter slot.

    Returns:
        AbsentSlot if there is no argument, SingleSlot for a single keyless
        argument, KeyedSlot for one or more keyed arguments

    Raises:
        ParamContractError: On duplicate keys, duplicate keyless arguments,
            or keyed and keyless arguments mixed together
    """
    generic_param: SingleSlot | None = None
    param_map: dict[str, Any] = {}

    for decorated_arg in decorated_args:
        context = decorated_arg.context
        decorator_type = decorated_arg.decorator_type.value
        resolved_type = resolve_type_dependencies(decorated_arg.arg.type_text, context.file_path, context.absolute_src_path)

        if decorated_arg.arg_param_key is not None:
            if decorated_arg.arg_param_key in param_map:
                raise ParamContractError(
                    f"{decorator_type}('{decorated_arg.arg_param_key}') used twice in controller method",
                    context.describe(),
                )
            param_map[decorated_arg.arg_param_key] = resolved_type
        else:
            if generic_param is not None:
                raise ParamContractError(f"{decorator_type}() used twice in controller method", context.describe())
            generic_param = SingleSlot(type=resolved_type, properties=decorated_arg.arg.properties)

    if generic_param is not None and param_map:
        first = decorated_args[0]
        raise ParamContractError(f"Cannot mix generic and specific {first.decorator_type.value}()", first.context.describe())

    if param_map:
        return KeyedSlot(entries=tuple(param_map.items()))

    return generic_param if generic_param is not None else ABSENT
