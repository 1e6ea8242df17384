"""
Analyzer module.

Contains reference resolution, type inference, message pairing and the
resolved model (IR).
"""

from __future__ import annotations

from .analyzer import SchemaAnalyzer, collapse_type_list
from .context import Inference, ResolutionContext
from .ir_nodes import (
    IR,
    EnumDef,
    EnumMember,
    EventPair,
    PrimitiveType,
    PropertyDef,
    RecordDef,
    RequestPair,
    TypeKind,
    TypeRef,
)
from .name_resolver import camel_case_to_upper_case, escape_reserved_word
from .pairing import FREE_FORM_ARGUMENT_TYPES

__all__ = [
    "RecordDef",
    "PropertyDef",
    "TypeRef",
    "TypeKind",
    "PrimitiveType",
    "EnumDef",
    "EnumMember",
    "RequestPair",
    "EventPair",
    "IR",
    "Inference",
    "ResolutionContext",
    "SchemaAnalyzer",
    "collapse_type_list",
    "camel_case_to_upper_case",
    "escape_reserved_word",
    "FREE_FORM_ARGUMENT_TYPES",
]
