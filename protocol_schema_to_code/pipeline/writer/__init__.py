"""
Writing generated code to disk.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter, validate_python

__all__ = ["AtomicWriter", "validate_python"]
