"""
Formatters for post-processing generated code.
"""

from __future__ import annotations

from .base import Formatter
from .black_formatter import BlackFormatter

__all__ = ["Formatter", "BlackFormatter"]
