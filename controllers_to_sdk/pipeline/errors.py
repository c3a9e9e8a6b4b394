"""
Errors raised by the SDK generation pipeline.

User-facing errors (bad annotations in the analyzed API) derive from
SdkFormatError or ParamContractError. Defects of the generator itself raise
InternalConsistencyError, which is kept outside of the user error branch.
"""

from __future__ import annotations

import json
from typing import Any


class SdkGeneratorError(Exception):
    """Base class for every fatal error of the generator."""


class ConfigError(SdkGeneratorError):
    """Raised when the configuration file is missing or invalid."""


class SdkFormatError(SdkGeneratorError):
    """Raised when a declaration of the analyzed API has an unsupported format."""


class RouteFormatError(SdkFormatError):
    """Raised when a route template cannot be parsed.

    This can happen when:
    - The template uses wildcards, regex groups or optional segments
    - Two parameter segments share the same name
    - A parameter segment has no name
    """


class DecoratorFormatError(SdkFormatError):
    """Raised when a decorator is used with unsupported arguments.

    Multiple arguments, non-literal arguments and multiple HTTP verb
    decorators on a single method all end up here.
    """


class ParamContractError(SdkGeneratorError):
    """Raised when the decorated arguments of a method violate a contract.

    The context (controller, method, HTTP verb, file) is appended to the
    message so the author can find the faulty annotation.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.reason = message
        self.context = context or {}
        if self.context:
            message = f"{message}\n{json.dumps(self.context, indent=2)}"
        super().__init__(message)


class InternalConsistencyError(SdkGeneratorError):
    """Raised when an internal invariant of the generator does not hold.

    This indicates a defect in the generator, not bad input.
    """


class OutputDirectoryError(SdkGeneratorError):
    """Raised when the output directory cannot be safely (re)generated."""
