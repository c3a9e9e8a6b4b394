"""
API analyzer that builds the SDK content.

Phase 1 of the pipeline: walk the modules and controllers of the source tree,
resolve routes, parameters and types, and build the immutable SdkContent the
backends render from.
"""

from __future__ import annotations

import logging

from ..source_ast.nodes import SourceAstService
from .ir_nodes import SdkContent
from .module import analyze_modules
from .types_index import build_types_index

logger = logging.getLogger(__name__)


class SdkAnalyzer:
    """Analyzes a source tree and builds the SDK content."""

    def __init__(self, source: SourceAstService):
        """
        Initialize the analyzer.

        Args:
            source: The service reading the API's source code
        """
        self.source = source

    def analyze(self) -> SdkContent:
        """
        Analyze the whole source tree.

        Analysis completes entirely before returning: the backends need the
        complete type index to deduplicate imports.

        Returns:
            The SDK content
        """
        logger.info("> Analyzing the source API at %s...", self.source.root)

        modules = analyze_modules(self.source)

        controllers_count = sum(len(controllers) for controllers in modules.values())
        logger.info("> Found %d module(s) and %d controller(s)", len(modules), controllers_count)

        logger.info("> Building the types index...")
        types = build_types_index(modules, self.source)

        return SdkContent(types=types, modules=modules)
