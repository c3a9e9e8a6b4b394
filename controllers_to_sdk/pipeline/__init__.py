"""
Pipeline - Controllers to TypeScript SDK generator.

This module provides a multi-phase architecture for generating a typed
TypeScript client from an annotated Python API:

1. Phase 1 (Source AST): Read the API's modules, controllers and types
2. Phase 2 (Analyzer): Resolve routes, parameters and type dependencies into SdkContent
3. Phase 3 (Backends): Render each requested flavor (plain, rtk) in memory
4. Phase 4 (Formatter): Optional post-processing with prettier
5. Phase 5 (Writer): Replace the previous output and write files atomically
"""

from __future__ import annotations

from .config import ControllerOutputConfig, Flavor, FormatterConfig, OutputConfig, SdkGeneratorConfig, SuffixRule
from .errors import (
    ConfigError,
    DecoratorFormatError,
    InternalConsistencyError,
    OutputDirectoryError,
    ParamContractError,
    RouteFormatError,
    SdkFormatError,
    SdkGeneratorError,
)
from .generator import PipelineGenerator
from .writer import AtomicWriter

__all__ = [
    "PipelineGenerator",
    "SdkGeneratorConfig",
    "ControllerOutputConfig",
    "Flavor",
    "FormatterConfig",
    "OutputConfig",
    "SuffixRule",
    "AtomicWriter",
    "SdkGeneratorError",
    "ConfigError",
    "SdkFormatError",
    "RouteFormatError",
    "DecoratorFormatError",
    "ParamContractError",
    "InternalConsistencyError",
    "OutputDirectoryError",
]
