"""
Code generation backends.

Each backend renders the resolved protocol model as source code.
"""

from __future__ import annotations

from .base import CodeBackend
from .python_backend import PythonBackend, python_identifier

__all__ = ["CodeBackend", "PythonBackend", "python_identifier"]
