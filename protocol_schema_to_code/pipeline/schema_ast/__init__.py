"""
Schema AST (Abstract Syntax Tree) module.

Contains the AST node definitions and parser for protocol schemas.
"""

from __future__ import annotations

from .nodes import (
    AllOfNode,
    ArrayNode,
    DefinitionNode,
    DefinitionShape,
    EnumNode,
    ObjectNode,
    PrimitiveNode,
    PropertyDef,
    RefNode,
    SchemaAST,
    SchemaNode,
    TypeListNode,
)
from .parser import SchemaParser

__all__ = [
    "SchemaNode",
    "ObjectNode",
    "ArrayNode",
    "RefNode",
    "PrimitiveNode",
    "EnumNode",
    "TypeListNode",
    "AllOfNode",
    "PropertyDef",
    "DefinitionNode",
    "DefinitionShape",
    "SchemaAST",
    "SchemaParser",
]
