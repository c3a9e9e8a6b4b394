"""
Type index builder.

Collects every type declaration the SDK depends on, transitively, so that
the backends can emit them in the `_types` tree.
"""

from __future__ import annotations

import logging

from ..source_ast.nodes import SourceAstService
from .ir_nodes import ResolvedTypeDeps, SdkModules, SdkTypes, TypeDeclaration
from .typedeps import resolve_type_dependencies

logger = logging.getLogger(__name__)


def collect_model_dependencies(modules: SdkModules) -> list[tuple[str, str]]:
    """List the (file, type name) pairs referenced by the methods, in order of first use."""
    collected: list[tuple[str, str]] = []

    for controllers in modules.values():
        for controller in controllers.values():
            for method in controller.methods:
                for resolved in [method.return_type, *method.params.resolved_types()]:
                    for file_path, type_names in resolved.dependencies.items():
                        for type_name in type_names:
                            if (file_path, type_name) not in collected:
                                collected.append((file_path, type_name))

    return collected


def build_types_index(modules: SdkModules, source: SourceAstService) -> SdkTypes:
    """
    Build the type-file index of the SDK.

    Args:
        modules: The analyzed modules
        source: The source AST service

    Returns:
        Root-relative file path -> type declarations to emit for this file
    """
    absolute_src_path = str(source.root)
    pending = collect_model_dependencies(modules)
    seen: set[tuple[str, str]] = set()
    index: dict[str, list[TypeDeclaration]] = {}

    while pending:
        file_path, type_name = pending.pop(0)

        if (file_path, type_name) in seen:
            continue
        seen.add((file_path, type_name))

        declaration = source.find_declaration(file_path, type_name)

        if declaration is None:
            logger.warning("Type %s was not found in %s, it will be typed as unknown", type_name, file_path)
            index.setdefault(file_path, []).append(
                TypeDeclaration(
                    name=type_name,
                    kind="alias",
                    body=ResolvedTypeDeps(raw_type="unknown", resolved_type="unknown", relative_file_path=file_path),
                )
            )
            continue

        body = resolve_type_dependencies(declaration.body_text, declaration.file_path, absolute_src_path)

        for dep_file, dep_names in body.dependencies.items():
            pending.extend((dep_file, dep_name) for dep_name in dep_names)

        index.setdefault(file_path, []).append(
            TypeDeclaration(name=type_name, kind=declaration.kind, body=body, type_params=declaration.type_params)
        )

    return {file_path: tuple(declarations) for file_path, declarations in index.items()}
