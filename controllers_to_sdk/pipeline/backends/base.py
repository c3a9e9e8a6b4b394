"""
Base class for SDK generation backends.

Defines the behavior shared by all flavors: controller naming, type imports,
queries/mutations partition, request descriptors, and the `_types` tree.
"""

from __future__ import annotations

import json
import os
import posixpath
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import jinja2

from ...utils import replace_suffix
from ..analyzer.ir_nodes import (
    AbsentSlot,
    HttpMethod,
    KeyedSlot,
    LiteralSegment,
    ParamSlot,
    Route,
    SdkContent,
    SdkController,
    SdkMethod,
    SdkModules,
    SdkTypes,
    SingleSlot,
)
from ..analyzer.route import params_from_route, resolve_route_with, unparse_route
from ..analyzer.typedeps import normalize_external_file_path
from ..config import Flavor, SdkGeneratorConfig
from ..errors import SdkFormatError

TYPES_DIRECTORY = "_types"

TEMPLATES_PATH = Path(__file__).parent.parent.parent / "templates"

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def create_template_environment() -> jinja2.Environment:
    """Create the Jinja2 environment shared by the backends."""
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATES_PATH)),
        lstrip_blocks=True,
        trim_blocks=True,
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
    )


def slot_to_type(slot: ParamSlot) -> str:
    """Render a parameter slot as a TypeScript type."""
    match slot:
        case AbsentSlot():
            return ""
        case SingleSlot(type=typ):
            return typ.resolved_type
        case KeyedSlot(entries=entries):
            return "{ " + "; ".join(f"{property_name(name)}: {typ.resolved_type}" for name, typ in entries) + " }"
    raise TypeError(f"Unknown parameter slot: {slot!r}")


def property_name(key: str) -> str:
    """Render an object type key, quoting it when it is not a valid identifier."""
    return key if IDENTIFIER_PATTERN.match(key) else json.dumps(key)


def escape_string_literal(text: str, quote: str = "'") -> str:
    return text.replace("\\", "\\\\").replace(quote, "\\" + quote)


def escape_template_literal(text: str) -> str:
    return escape_string_literal(text, "`").replace("${", "\\${")


def route_expression(route: Route) -> str:
    """
    Render a route as a TypeScript expression.

    Routes with parameters become template literals interpolating the
    destructured parameters; other routes become single-quoted strings.
    """
    if not params_from_route(route):
        return "'" + escape_string_literal(unparse_route(route)) + "'"

    escaped = Route(
        tuple(
            LiteralSegment(escape_template_literal(segment.text)) if isinstance(segment, LiteralSegment) else segment
            for segment in route.segments
        )
    )
    return "`" + resolve_route_with(escaped, lambda param: "${" + param + "}") + "`"


def merged_args_type(method: SdkMethod) -> str:
    """Intersection of the method's route, query and body parameter types."""
    input_types = [slot_to_type(slot) for slot in method.params.slots()]
    return " & ".join(typ for typ in input_types if typ)


def awaited_type(type_text: str) -> str:
    prefix = "Promise<"
    return type_text[len(prefix) : -1] if type_text.startswith(prefix) and type_text.endswith(">") else type_text


def promised_type(type_text: str) -> str:
    return type_text if type_text.startswith("Promise<") else f"Promise<{type_text}>"


def partition_methods(methods: tuple[SdkMethod, ...] | list[SdkMethod]) -> tuple[list[SdkMethod], list[SdkMethod]]:
    """Split methods into queries (GET) and mutations (everything else)."""
    queries = [method for method in methods if method.http_method == HttpMethod.GET]
    mutations = [method for method in methods if method.http_method != HttpMethod.GET]
    return queries, mutations


def type_file_path(file_path: str) -> str:
    """Path of the generated type file for a root-relative source module path."""
    return normalize_external_file_path(file_path) + ".ts"


def check_unique_file_names(exports: list[dict[str, str]]) -> None:
    """
    Ensure no two controllers are generated into the same file or under the same name.

    Raises:
        SdkFormatError: On a collision
    """
    for key in ("file_name", "name"):
        seen: set[str] = set()
        for export in exports:
            if export[key] in seen:
                raise SdkFormatError(f"Two controllers would be generated with the same {key.replace('_', ' ')}: {export[key]}")
            seen.add(export[key])


class SdkBackend(ABC):
    """Abstract base class for SDK generation backends."""

    FLAVOR: Flavor

    # Template directory name
    TEMPLATE_DIR: str = ""

    # Dispatch entry file; its presence marks a directory as a previous output
    ENTRY_FILE: str = ""

    def __init__(self, config: SdkGeneratorConfig, generation_comment: str = ""):
        """
        Initialize the backend.

        Args:
            config: SDK generation configuration
            generation_comment: Comment written at the top of each generated file
        """
        self.config = config
        self.generation_comment = generation_comment
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        self.jinja_env = create_template_environment()
        self.controller_template = self.jinja_env.get_template(f"{self.TEMPLATE_DIR}/controller.ts.jinja2")
        self.index_template = self.jinja_env.get_template(f"{self.TEMPLATE_DIR}/index.ts.jinja2")
        self.entry_template = self.jinja_env.get_template(f"{self.TEMPLATE_DIR}/{self.ENTRY_FILE}.jinja2")
        self.type_file_template = self.jinja_env.get_template("types/type_file.ts.jinja2")

    def generate(self, sdk_content: SdkContent) -> dict[str, str]:
        """
        Generate the SDK files.

        Args:
            sdk_content: The analyzed API

        Returns:
            Path relative to the flavor's output directory -> file content
        """
        files: dict[str, str] = {}

        for file_path, content in self.generate_type_files(sdk_content.types).items():
            files[f"{TYPES_DIRECTORY}/{file_path}"] = content

        files.update(self.generate_modules(sdk_content.modules))
        files[self.ENTRY_FILE] = self.entry_template.render(header=self.generation_comment, interface_path=self.interface_import_path())

        return files

    @abstractmethod
    def generate_modules(self, modules: SdkModules) -> dict[str, str]:
        """
        Generate the controller files and the index file.

        Args:
            modules: The analyzed modules

        Returns:
            File name -> file content
        """

    # ------------------------------------------------------------------
    # Naming
    # ------------------------------------------------------------------

    def controller_export_name(self, controller: SdkController) -> str:
        rule = self.config.controller_output.export_name
        return replace_suffix(controller.class_name, rule.add_suffix, rule.remove_suffix)

    def controller_endpoint_group_name(self, controller: SdkController) -> str:
        rule = self.config.controller_output.endpoint_group_name
        return replace_suffix(controller.camel_class_name, rule.add_suffix, rule.remove_suffix)

    def controller_file_name(self, controller: SdkController) -> str:
        """Name of the controller's generated file, without extension."""
        rule = self.config.controller_output.file_name
        return replace_suffix(controller.camel_class_name, rule.add_suffix, rule.remove_suffix)

    def interface_import_path(self) -> str:
        """Import path of the SDK interface, relative to the flavor's output directory."""
        output_dir = self.config.flavor_output_path(self.FLAVOR)
        relative = Path(os.path.relpath(self.config.sdk_interface_path, output_dir)).as_posix()
        relative = posixpath.splitext(relative)[0] if relative.endswith((".ts", ".tsx", ".js", ".jsx")) else relative
        return relative if relative.startswith(".") else f"./{relative}"

    # ------------------------------------------------------------------
    # Controllers
    # ------------------------------------------------------------------

    def collect_imports(self, controller: SdkController) -> list[tuple[str, list[str]]]:
        """
        Build the deduplicated type imports of a controller.

        Returns:
            (import path, type names) pairs, in order of first use
        """
        imports: dict[str, list[str]] = {}

        for method in controller.methods:
            for dep in [method.return_type, *method.params.resolved_types()]:
                for file_path, type_names in dep.dependencies.items():
                    imported = imports.setdefault(file_path, [])
                    for type_name in type_names:
                        if type_name not in imported:
                            imported.append(type_name)

        return [(f"./{TYPES_DIRECTORY}/{normalize_external_file_path(file_path)}", names) for file_path, names in imports.items()]

    def method_context(self, method: SdkMethod, args_name: str) -> dict[str, Any]:
        """
        Prepare the template context for a method's request descriptor.

        Args:
            method: The method
            args_name: Name of the argument holding the caller-supplied parameters

        Returns:
            Dictionary of template variables
        """
        route_params = params_from_route(method.route)
        has_any_params = method.params.has_any()
        is_get = method.http_method == HttpMethod.GET

        destructure = ""
        if has_any_params:
            bindings = ", ".join([*route_params, "...rest"])
            destructure = f"const {{ {bindings} }} = {args_name}"

        return_type = method.return_type.resolved_type

        return {
            "name": method.name,
            "http_method": method.http_method.value,
            "route": unparse_route(method.route),
            "args_type": merged_args_type(method),
            "destructure": destructure,
            "route_expr": route_expression(method.route),
            "body": "rest" if has_any_params and not is_get else "null",
            "query": "rest" if has_any_params and is_get else "{}",
            "return_type": return_type,
            "promised_type": promised_type(return_type),
            "awaited_type": awaited_type(return_type),
        }

    def controller_context(self, module_name: str, controller: SdkController, args_name: str) -> dict[str, Any]:
        """Prepare the template context for a controller file."""
        queries, mutations = partition_methods(controller.methods)
        return {
            "header": self.generation_comment,
            "module_name": module_name,
            "class_name": controller.class_name,
            "registration_name": controller.registration_name,
            "export_name": self.controller_export_name(controller),
            "source_path": controller.path,
            "methods_count": len(controller.methods),
            "imports": self.collect_imports(controller),
            "queries": [self.method_context(method, args_name) for method in queries],
            "mutations": [self.method_context(method, args_name) for method in mutations],
        }

    # ------------------------------------------------------------------
    # Type files
    # ------------------------------------------------------------------

    def generate_type_files(self, types: SdkTypes) -> dict[str, str]:
        """
        Generate the `_types` tree.

        Args:
            types: Root-relative module path -> declarations

        Returns:
            Path relative to the `_types` directory -> file content
        """
        files: dict[str, str] = {}

        for file_path, declarations in types.items():
            target = type_file_path(file_path)
            target_dir = posixpath.dirname(target)
            imports: dict[str, list[str]] = {}

            for declaration in declarations:
                for dep_file, dep_names in declaration.body.dependencies.items():
                    if dep_file == file_path:
                        continue
                    dep_target = posixpath.splitext(type_file_path(dep_file))[0]
                    relative = posixpath.relpath(dep_target, target_dir or ".")
                    relative = relative if relative.startswith(".") else f"./{relative}"
                    imported = imports.setdefault(relative, [])
                    imported.extend(name for name in dep_names if name not in imported)

            files[target] = self.type_file_template.render(
                header=self.generation_comment,
                source_path=file_path,
                imports=list(imports.items()),
                declarations=[
                    {
                        "name": declaration.name,
                        "kind": declaration.kind,
                        "type_params": f"<{', '.join(declaration.type_params)}>" if declaration.type_params else "",
                        "body": declaration.body.resolved_type,
                    }
                    for declaration in declarations
                ],
            )

        return files
