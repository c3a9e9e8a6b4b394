"""
Pipeline orchestrator.

Runs the analysis, renders every requested flavor in memory, then writes the
output. Every fatal error (format, contract, output directory) is raised
before the first file is written.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from .. import __version__
from .analyzer import SdkAnalyzer, SdkContent
from .backends import BACKENDS, render_default_sdk_interface
from .config import Flavor, SdkGeneratorConfig
from .errors import ConfigError, OutputDirectoryError
from .formatters import Formatter, PrettierFormatter, find_prettier_config, parser_for
from .source_ast import PythonSourceAst, SourceAstService
from .writer import AtomicWriter, check_output_dir, reset_output_dir

logger = logging.getLogger(__name__)


class PipelineGenerator:
    """
    Main entry point for SDK generation.

    Example:
        config = SdkGeneratorConfig.from_file("sdk-config.json")
        generator = PipelineGenerator(config)
        generator.run()
    """

    def __init__(
        self,
        config: SdkGeneratorConfig,
        source: SourceAstService | None = None,
        formatter: Formatter | None = None,
        writer: AtomicWriter | None = None,
        command_line: str = "controllers_to_sdk",
    ):
        """
        Initialize the generator.

        Args:
            config: SDK generation configuration
            source: Service reading the API's source code (defaults to a Python reader)
            formatter: Post-processing formatter (defaults to prettier)
            writer: File writer
            command_line: Command line reported in the generation header
        """
        self.config = config
        self.source = source or PythonSourceAst(config.api_input_path, type_overrides=config.type_overrides)
        self.formatter = formatter or PrettierFormatter()
        self.writer = writer or AtomicWriter()
        self.command_line = command_line
        self.formatter_config = config.formatter

    @property
    def flavors(self) -> list[Flavor]:
        """Requested flavors, without duplicates."""
        return list(dict.fromkeys(self.config.flavors))

    def generation_comment(self) -> str:
        """Comment written at the top of each generated file."""
        if not self.config.generate_timestamps:
            return ""

        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        return f"/// Generated by controllers_to_sdk v{__version__} on {timestamp} : {self.command_line}"

    def analyze(self) -> SdkContent:
        """Phase 1: analyze the source API."""
        return SdkAnalyzer(self.source).analyze()

    def generate(self, sdk_content: SdkContent) -> dict[Flavor, dict[str, str]]:
        """
        Phase 2: render every requested flavor in memory.

        Returns:
            Flavor -> path relative to the flavor's output directory -> content
        """
        comment = self.generation_comment()
        outputs = {}

        for flavor in self.flavors:
            logger.info("> Generating the %s SDK...", flavor.value)
            backend = BACKENDS[flavor](self.config, comment)
            outputs[flavor] = backend.generate(sdk_content)

        return outputs

    def run(self) -> SdkContent:
        """
        Run the whole pipeline: analyze, generate, format and write.

        Returns:
            The analyzed SDK content
        """
        sdk_content = self.analyze()
        outputs = self.generate(sdk_content)

        self.check_output_dirs()
        format_output = self._prepare_formatter()

        # Every file is formatted and validated before a previous output is removed
        flavor_files = {
            self.config.flavor_output_path(flavor): {
                file_name: self._prepare(Path(file_name), content, format_output) for file_name, content in files.items()
            }
            for flavor, files in outputs.items()
        }

        other_files = {}
        if self.config.json_output:
            other_files[Path(self.config.json_output)] = self.render_json_output(sdk_content, format_output)

        interface = self.render_default_sdk_interface(format_output)
        if interface is not None:
            other_files[Path(self.config.sdk_interface_path)] = interface

        Path(self.config.sdk_output_path).mkdir(exist_ok=True)

        for output, files in flavor_files.items():
            reset_output_dir(output)

            logger.info("> Writing %d file(s) to %s", len(files), output)
            for file_name, content in files.items():
                self._write(output / file_name, content)

        for path, content in other_files.items():
            logger.info("> Writing %s", path)
            self._write(path, content)

        return sdk_content

    def check_output_dirs(self) -> None:
        """
        Check every flavor's output directory before anything is written.

        Raises:
            OutputDirectoryError: If an output directory cannot be used
        """
        root = Path(self.config.sdk_output_path)

        if not root.parent.is_dir():
            raise OutputDirectoryError(f"Output directory's parent {root.parent} does not exist.")

        if root.exists() and not root.is_dir():
            raise OutputDirectoryError(f"Provided output path {root} exists and is not a directory.")

        if not root.exists():
            return

        for flavor in self.flavors:
            check_output_dir(self.config.flavor_output_path(flavor), BACKENDS[flavor].ENTRY_FILE, self.config.overwrite_old_output_dir)

    def render_json_output(self, sdk_content: SdkContent, format_output: bool = False) -> str:
        """Render the analyzed model as a validated JSON document."""
        indent = 4 if self.config.json_pretty_output else None
        content = json.dumps(sdk_content.to_dict(), indent=indent) + "\n"
        return self._prepare(Path(self.config.json_output), content, format_output and self.config.json_pretty_output)

    def write_json_output(self, sdk_content: SdkContent) -> None:
        """Write the analyzed model as JSON."""
        content = self.render_json_output(sdk_content)

        logger.info("> Writing the SDK content to %s", self.config.json_output)
        self._write(Path(self.config.json_output), content)

    def render_default_sdk_interface(self, format_output: bool = False) -> str | None:
        """Render the default SDK interface, unless the interface file already exists."""
        interface_path = Path(self.config.sdk_interface_path)

        if interface_path.exists() or not self.config.generate_default_sdk_interface:
            return None

        logger.info("> Generating default SDK interface at %s", interface_path)
        return self._prepare(interface_path, render_default_sdk_interface(self.flavors), format_output)

    def _prepare_formatter(self) -> bool:
        """
        Decide whether the output gets formatted, and locate prettier's configuration.

        Raises:
            ConfigError: If the configured prettier configuration does not exist
        """
        formatter_config = self.config.formatter

        if not formatter_config.enabled:
            logger.debug("NOTE: files will not be prettified with Prettier")
            return False

        if formatter_config.config_path:
            if not Path(formatter_config.config_path).is_file():
                raise ConfigError(f"Prettier configuration was not found at specified path {formatter_config.config_path}")
        else:
            found = find_prettier_config(self.config.sdk_output_path)
            if found is not None:
                logger.debug("Using prettier configuration %s", found)
                formatter_config = replace(formatter_config, config_path=str(found))

        self.formatter_config = formatter_config

        if not self.formatter.is_available(formatter_config):
            logger.warning("Prettier is not available, files will not be prettified")
            return False

        return True

    def _prepare(self, path: Path, content: str, format_output: bool) -> str:
        """
        Format a file's content and validate it, without writing anything.

        Raises:
            InternalConsistencyError: If the content is not valid
        """
        if format_output:
            content = self.formatter.format_file(content, path, self.formatter_config)

        if self.config.output.validate_before_write:
            self.writer.validate(content, parser_for(path))

        return content

    def _write(self, path: Path, content: str) -> None:
        if self.config.output.atomic_write:
            self.writer.write(path, content, parser_for(path), validate=False)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
