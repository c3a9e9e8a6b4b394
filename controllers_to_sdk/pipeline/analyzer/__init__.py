"""
Analyzer module.

Contains route parsing, type dependency resolution, parameter merging and
the model builder.
"""

from __future__ import annotations

from .analyzer import SdkAnalyzer
from .ir_nodes import (
    ABSENT,
    AbsentSlot,
    HttpMethod,
    KeyedSlot,
    MethodParams,
    ResolvedTypeDeps,
    Route,
    SdkContent,
    SdkController,
    SdkMethod,
    SdkModules,
    SingleSlot,
    TypeDeclaration,
)

__all__ = [
    "ABSENT",
    "AbsentSlot",
    "HttpMethod",
    "KeyedSlot",
    "MethodParams",
    "ResolvedTypeDeps",
    "Route",
    "SdkAnalyzer",
    "SdkContent",
    "SdkController",
    "SdkMethod",
    "SdkModules",
    "SingleSlot",
    "TypeDeclaration",
]
