"""
Analyzer for the API's modules.

A module is a class decorated with `@Module(controllers=[...])`; the listed
controllers are resolved through the module file's own declarations and
imports.
"""

from __future__ import annotations

import logging

from ..errors import SdkFormatError
from ..source_ast.nodes import ClassNode, SourceAstService
from .controller import analyze_controller
from .ir_nodes import SdkController, SdkModules

logger = logging.getLogger(__name__)

MODULE_DECORATOR = "Module"


def find_modules(source: SourceAstService) -> list[ClassNode]:
    """Find every class decorated with @Module in the source tree."""
    modules = []
    for file_path in source.list_files():
        for class_node in source.classes_in_file(file_path):
            if class_node.get_decorator(MODULE_DECORATOR) is not None:
                modules.append(class_node)
    return modules


def get_module_controller_names(module_class: ClassNode) -> tuple[str, ...]:
    """Get the names listed in a module's `controllers=[...]` argument."""
    decorator = module_class.get_decorator(MODULE_DECORATOR)
    if decorator is None:
        raise SdkFormatError(f"Module class {module_class.name} is missing @Module decorator\nModule path is: {module_class.file_path}")

    controllers_arg = decorator.kwargs.get("controllers")
    if controllers_arg is None:
        return ()

    if not controllers_arg.names and controllers_arg.text not in ("[]", "()"):
        raise SdkFormatError(
            f"The controllers of module {module_class.name} must be given as a list of class names (got {controllers_arg.text})"
        )

    return controllers_arg.names


def analyze_modules(source: SourceAstService) -> SdkModules:
    """
    Group the API's controllers by module.

    Args:
        source: The source AST service

    Returns:
        Module name -> controller name -> controller

    Raises:
        SdkFormatError: If two modules share a name, or a controller is claimed by two modules
    """
    modules: SdkModules = {}
    owners: dict[tuple[str, str], str] = {}
    absolute_src_path = str(source.root)

    for module_class in find_modules(source):
        module_name = module_class.name
        logger.debug("Analyzing module: %s (%s)", module_name, module_class.file_path)

        if module_name in modules:
            raise SdkFormatError(f"Module name {module_name} is declared twice (found again in {module_class.file_path})")

        controllers: dict[str, SdkController] = {}

        for controller_name in get_module_controller_names(module_class):
            controller_class = source.resolve_class(module_class.file_path, controller_name)

            if controller_class is None:
                logger.warning("Skipping controller %s of module %s as its declaration was not found", controller_name, module_name)
                continue

            key = (controller_class.file_path, controller_class.name)
            if key in owners:
                raise SdkFormatError(f"Controller {controller_class.name} is declared by both modules {owners[key]} and {module_name}")
            owners[key] = module_name

            controller = analyze_controller(controller_class, absolute_src_path)
            if controller is not None:
                controllers[controller.class_name] = controller

        modules[module_name] = controllers

    return modules
