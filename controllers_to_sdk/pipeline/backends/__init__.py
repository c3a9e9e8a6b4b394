"""
Code generation backends.

Contains the flavor-specific SDK generators.
"""

from __future__ import annotations

from ..config import Flavor
from .base import SdkBackend
from .interfaces import render_default_sdk_interface
from .plain_backend import PlainSdkBackend
from .rtk_backend import RtkSdkBackend

BACKENDS: dict[Flavor, type[SdkBackend]] = {
    Flavor.PLAIN: PlainSdkBackend,
    Flavor.RTK: RtkSdkBackend,
}

__all__ = [
    "BACKENDS",
    "SdkBackend",
    "PlainSdkBackend",
    "RtkSdkBackend",
    "render_default_sdk_interface",
]
