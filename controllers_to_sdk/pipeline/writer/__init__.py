"""
Output writing: output directory handling and atomic file writes.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter
from .output_dir import check_output_dir, reset_output_dir

__all__ = [
    "AtomicWriter",
    "check_output_dir",
    "reset_output_dir",
]
