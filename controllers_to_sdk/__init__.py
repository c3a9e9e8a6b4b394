"""Controllers to SDK

Generate a typed TypeScript client SDK from the controllers of a Python API.
Supports a plain async-function flavor and an RTK Query endpoint-builder
flavor, with transitive type collection and prettier formatting.
"""

__version__ = "1.0.0"

from .pipeline import (
    AtomicWriter,
    Flavor,
    PipelineGenerator,
    SdkGeneratorConfig,
    SdkGeneratorError,
)

__all__ = [
    "PipelineGenerator",
    "SdkGeneratorConfig",
    "Flavor",
    "SdkGeneratorError",
    "AtomicWriter",
]
