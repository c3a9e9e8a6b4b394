"""
Default SDK interface.

The SDK interface is the user-owned file performing the actual requests. When
it is missing, a default implementation is generated exporting what every
requested flavor imports from it.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..config import Flavor
from .base import create_template_environment


def render_default_sdk_interface(flavors: Iterable[Flavor]) -> str:
    """
    Render the default SDK interface.

    Args:
        flavors: The flavors the interface must serve

    Returns:
        The interface's TypeScript source
    """
    flavors = set(flavors)
    template = create_template_environment().get_template("interfaces/sdk_interface.ts.jinja2")
    return template.render(plain=Flavor.PLAIN in flavors, rtk=Flavor.RTK in flavors)
