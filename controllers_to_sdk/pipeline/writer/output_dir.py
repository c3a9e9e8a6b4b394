"""
Output directory preparation.

A directory is only ever removed when it holds the entry file of a previous
generation of the same flavor, so that a misconfigured output path never
erases unrelated files.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..errors import OutputDirectoryError

logger = logging.getLogger(__name__)


def check_output_dir(output: Path, entry_file: str, overwrite: bool) -> None:
    """
    Check that an output directory can be (re)generated, without touching it.

    Args:
        output: The output directory
        entry_file: File marking the directory as a previous output
        overwrite: Whether an existing output may be replaced

    Raises:
        OutputDirectoryError: If the directory cannot be used
    """
    if not output.parent.is_dir():
        raise OutputDirectoryError(f"Output directory's parent {output.parent} does not exist.")

    if not output.exists():
        return

    if not overwrite:
        raise OutputDirectoryError(f"Please provide an output directory that doesn't exist yet (found: {output})")

    if not output.is_dir():
        raise OutputDirectoryError(f"Provided output path {output} exists and is not a directory.")

    if not (output / entry_file).is_file() and any(output.iterdir()):
        raise OutputDirectoryError(
            f"Provided output path {output} exists but doesn't seem to contain an SDK output ({entry_file} not found). "
            "Please check the output directory."
        )


def reset_output_dir(output: Path) -> None:
    """Remove a previous output and create an empty directory in its place."""
    if output.exists():
        logger.debug("Removing previous output at %s", output)
        shutil.rmtree(output)
    output.mkdir()

