"""
Analyzer for the API's controllers.
"""

from __future__ import annotations

import logging

from ...utils import camelcase
from ..errors import DecoratorFormatError
from ..source_ast.nodes import ClassNode
from .ir_nodes import SdkController
from .methods import analyze_methods

logger = logging.getLogger(__name__)

CONTROLLER_DECORATOR = "Controller"


def analyze_controller(controller_class: ClassNode, absolute_src_path: str) -> SdkController | None:
    """
    Generate the SDK interface of a controller.

    By default, a controller is registered under its camel-cased class name,
    unless it provides a string literal to its @Controller() decorator; that
    name is then also used as URI prefix for all of its methods.

    Args:
        controller_class: The controller's class declaration
        absolute_src_path: Absolute path to the source directory

    Returns:
        The SDK interface of the controller, or None if the class is not a controller

    Raises:
        DecoratorFormatError: If @Controller() has more than one argument, or a non-literal one
    """
    class_name = controller_class.name
    file_path = controller_class.file_path

    logger.debug("Found class declaration: %s", class_name)

    registration_name = camelcase(class_name)
    controller_uri_prefix: str | None = None

    decorator = controller_class.get_decorator(CONTROLLER_DECORATOR)

    if decorator is None:
        logger.warning("Skipping class %s (%s) as it does not have a @Controller() decorator", class_name, file_path)
        return None

    if not decorator.is_called:
        logger.warning("@Controller decorator of %s is not called, registering it under name %s", class_name, registration_name)

    if len(decorator.args) > 1:
        raise DecoratorFormatError(f"The @Controller() decorator of {class_name} ({file_path}) is called with more than 1 argument")

    if decorator.args:
        name_arg = decorator.args[0]

        # Variables are not supported
        if not name_arg.is_string_literal:
            raise DecoratorFormatError(f"The @Controller() decorator's argument of {class_name} ({file_path}) is not a string literal: {name_arg.text}")

        registration_name = camelcase(name_arg.value)
        controller_uri_prefix = registration_name
        logger.debug("Registering controller %s as %s (as specified in @Controller())", class_name, registration_name)
    else:
        logger.debug("@Controller() was called without argument, registering controller under name %s", registration_name)

    methods = analyze_methods(controller_class, controller_uri_prefix, file_path, absolute_src_path)

    logger.debug("└─ Done for controller %s", file_path)

    return SdkController(
        class_name=class_name,
        camel_class_name=camelcase(class_name),
        registration_name=registration_name,
        path=file_path,
        methods=tuple(methods),
    )
