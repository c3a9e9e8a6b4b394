"""
RTK flavor backend.

Each controller becomes a class holding static `queries` and `mutations`
tables of request descriptors, plus a `build` function registering them on
an endpoint builder. The index merges every controller's endpoints.
"""

from __future__ import annotations

from ..analyzer.ir_nodes import SdkModules
from ..config import Flavor
from .base import SdkBackend, check_unique_file_names


class RtkSdkBackend(SdkBackend):
    """Generates query/mutation builder tables."""

    FLAVOR = Flavor.RTK
    TEMPLATE_DIR = "rtk"
    ENTRY_FILE = "baseRequest.ts"

    def generate_modules(self, modules: SdkModules) -> dict[str, str]:
        files: dict[str, str] = {}
        exports: list[dict[str, str]] = []

        for module_name, controllers in modules.items():
            for controller in controllers.values():
                file_name = self.controller_file_name(controller)
                context = self.controller_context(module_name, controller, args_name="args")
                files[f"{file_name}.ts"] = self.controller_template.render(**context)
                exports.append({"name": context["export_name"], "file_name": file_name})

        check_unique_file_names(exports)

        files["index.ts"] = self.index_template.render(header=self.generation_comment, controllers=exports)
        return files
