"""
Plain flavor backend.

Each controller becomes a file exporting its methods as async functions that
return a call to the SDK interface's `request` function.
"""

from __future__ import annotations

from ..analyzer.ir_nodes import SdkModules
from ..config import Flavor
from .base import SdkBackend, check_unique_file_names


class PlainSdkBackend(SdkBackend):
    """Generates async request wrappers."""

    FLAVOR = Flavor.PLAIN
    TEMPLATE_DIR = "plain"
    ENTRY_FILE = "central.ts"

    def generate_modules(self, modules: SdkModules) -> dict[str, str]:
        files: dict[str, str] = {}
        exports: list[dict[str, str]] = []

        for module_name, controllers in modules.items():
            for controller in controllers.values():
                file_name = self.controller_file_name(controller)
                context = self.controller_context(module_name, controller, args_name="params")
                files[f"{file_name}.ts"] = self.controller_template.render(**context)
                exports.append({"name": self.controller_endpoint_group_name(controller), "file_name": file_name})

        check_unique_file_names(exports)

        files["index.ts"] = self.index_template.render(header=self.generation_comment, controllers=exports)
        return files
