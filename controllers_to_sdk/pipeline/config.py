"""
Configuration for the SDK generator pipeline.

The configuration is an explicit value threaded through the pipeline; it is
loaded from a JSON file whose relative paths are resolved against the file's
own directory.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .errors import ConfigError


class Flavor(str, Enum):
    """Shape of the generated client code."""

    PLAIN = "plain"  # Async request wrappers
    RTK = "rtk"  # Query/mutation builder table


@dataclass
class SuffixRule:
    """Suffix adjustment applied to a generated name."""

    add_suffix: str = ""
    remove_suffix: str = ""

    @staticmethod
    def from_dict(d: dict) -> SuffixRule:
        return SuffixRule(add_suffix=d.get("add_suffix", ""), remove_suffix=d.get("remove_suffix", ""))

    def to_dict(self) -> dict:
        return {"add_suffix": self.add_suffix, "remove_suffix": self.remove_suffix}


@dataclass
class ControllerOutputConfig:
    """Naming rules for the generated controller files."""

    # Name of the controller's endpoint group
    endpoint_group_name: SuffixRule = field(default_factory=SuffixRule)

    # Name of the exported controller
    export_name: SuffixRule = field(default_factory=SuffixRule)

    # Name of the controller's file
    file_name: SuffixRule = field(default_factory=SuffixRule)

    @staticmethod
    def from_dict(d: dict) -> ControllerOutputConfig:
        return ControllerOutputConfig(
            endpoint_group_name=SuffixRule.from_dict(d.get("endpoint_group_name", {})),
            export_name=SuffixRule.from_dict(d.get("export_name", {})),
            file_name=SuffixRule.from_dict(d.get("file_name", {})),
        )

    def to_dict(self) -> dict:
        return {
            "endpoint_group_name": self.endpoint_group_name.to_dict(),
            "export_name": self.export_name.to_dict(),
            "file_name": self.file_name.to_dict(),
        }


@dataclass
class FormatterConfig:
    """Configuration for the post-processing formatter."""

    # Whether formatting is enabled
    enabled: bool = True

    # Command running prettier
    command: list[str] = field(default_factory=lambda: ["npx", "--no-install", "prettier"])

    # Path to prettier's configuration file (searched above the output directory if empty)
    config_path: str = ""

    # Timeout of a single formatter run, in seconds
    timeout: float = 30.0


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        validate_before_write: Whether to validate code before writing
        atomic_write: Whether to use atomic file writes
    """

    validate_before_write: bool = True
    atomic_write: bool = True


def _build_section(section_class, name: str, d: dict):
    try:
        return section_class(**d)
    except TypeError as e:
        raise ConfigError(f"Invalid {name} configuration: {e}") from e


@dataclass
class SdkGeneratorConfig:
    """Configuration options for SDK generation."""

    # Path to the API's source directory
    api_input_path: str = ""

    # Path to generate the SDK at (each flavor gets its own subdirectory)
    sdk_output_path: str = ""

    # Path to the SDK interface file (the request dispatch implementation)
    sdk_interface_path: str = ""

    # Flavors to generate
    flavors: list[Flavor] = field(default_factory=lambda: [Flavor.PLAIN])

    # Naming rules for controllers
    controller_output: ControllerOutputConfig = field(default_factory=ControllerOutputConfig)

    # If the SDK interface file does not exist yet, create one automatically
    generate_default_sdk_interface: bool = True

    # Write generation timestamp in each TypeScript file
    generate_timestamps: bool = True

    # Write the analyzed model as JSON to this path
    json_output: str = ""

    # Prettify the JSON output
    json_pretty_output: bool = False

    # Python type name -> TypeScript type used in its place
    type_overrides: dict[str, str] = field(default_factory=dict)

    # If the output directory already exists, overwrite it
    overwrite_old_output_dir: bool = True

    # Enable verbose mode
    verbose: bool = False

    # Disable colored output
    no_color: bool = False

    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict, base_path: str | Path | None = None) -> SdkGeneratorConfig:
        """
        Create a config from a dictionary.

        Args:
            d: The configuration dictionary
            base_path: Directory relative paths are resolved against

        Raises:
            ConfigError: If a required key is missing or a value is invalid
        """
        config = SdkGeneratorConfig()
        for k, v in d.items():
            if k == "flavors":
                try:
                    config.flavors = [Flavor(flavor) for flavor in v]
                except ValueError as e:
                    raise ConfigError(f"Unknown flavor in configuration: {e}") from e
            elif k == "controller_output" and isinstance(v, dict):
                config.controller_output = ControllerOutputConfig.from_dict(v)
            elif k == "formatter" and isinstance(v, dict):
                config.formatter = _build_section(FormatterConfig, k, v)
            elif k == "output" and isinstance(v, dict):
                config.output = _build_section(OutputConfig, k, v)
            elif hasattr(config, k):
                setattr(config, k, v)

        for key in ("api_input_path", "sdk_output_path", "sdk_interface_path"):
            if not getattr(config, key):
                raise ConfigError(f"Missing required configuration key: {key}")

        if base_path is not None:
            config.resolve_paths(base_path)

        return config

    @staticmethod
    def from_file(path: str | Path) -> SdkGeneratorConfig:
        """Load a configuration file."""
        path = Path(path)

        if not path.is_file():
            raise ConfigError(f"Config file was not found at path: {path.resolve()}")

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Failed to parse configuration file: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError("Failed to parse configuration file: expected a JSON object")

        return SdkGeneratorConfig.from_dict(data, base_path=path.resolve().parent)

    def resolve_paths(self, base_path: str | Path) -> None:
        """Make the configured paths absolute, relative to `base_path`."""
        base = Path(base_path)
        self.api_input_path = str((base / self.api_input_path).resolve())
        self.sdk_output_path = str((base / self.sdk_output_path).resolve())
        self.sdk_interface_path = str((base / self.sdk_interface_path).resolve())
        if self.json_output:
            self.json_output = str((base / self.json_output).resolve())
        if self.formatter.config_path:
            self.formatter.config_path = str((base / self.formatter.config_path).resolve())

    def flavor_output_path(self, flavor: Flavor) -> Path:
        """Output directory of a flavor: flavors never share a subtree."""
        return Path(self.sdk_output_path) / flavor.value

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "api_input_path": self.api_input_path,
            "sdk_output_path": self.sdk_output_path,
            "sdk_interface_path": self.sdk_interface_path,
            "flavors": [flavor.value for flavor in self.flavors],
            "controller_output": self.controller_output.to_dict(),
            "generate_default_sdk_interface": self.generate_default_sdk_interface,
            "generate_timestamps": self.generate_timestamps,
            "json_output": self.json_output,
            "json_pretty_output": self.json_pretty_output,
            "type_overrides": self.type_overrides,
            "overwrite_old_output_dir": self.overwrite_old_output_dir,
            "verbose": self.verbose,
            "no_color": self.no_color,
            "formatter": {
                "enabled": self.formatter.enabled,
                "command": self.formatter.command,
                "config_path": self.formatter.config_path,
                "timeout": self.formatter.timeout,
            },
            "output": {
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
