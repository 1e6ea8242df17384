"""
AST node definitions for a protocol JSON Schema.

These nodes represent the parsed structure of the schema before any
reference resolution. A definition body is always one of the three
definition shapes (object, enumeration, allOf composition); property
fragments use the remaining node types.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class SchemaNode:
    """Base class for all AST nodes."""

    # Location in the schema (for error messages)
    source_path: str = ""

    description: str | None = None


@dataclass
class PrimitiveNode(SchemaNode):
    """A scalar type: "string", "integer", "number", "boolean", "null".

    An empty type name means the fragment declared no usable type.
    """

    type_name: str = ""


@dataclass
class EnumNode(SchemaNode):
    """A string enumeration, closed (`enum`) or open (`_enum`)."""

    values: list[str] = field(default_factory=list)
    descriptions: list[str | None] = field(default_factory=list)
    is_open: bool = False


@dataclass
class TypeListNode(SchemaNode):
    """A heterogeneous `type: [...]` list."""

    types: list[str] = field(default_factory=list)


@dataclass
class RefNode(SchemaNode):
    """A $ref (unresolved reference)."""

    ref_path: str = ""  # e.g., "#/definitions/Source"


@dataclass
class ArrayNode(SchemaNode):
    """An array type."""

    items: SchemaNode | None = None


@dataclass
class PropertyDef(SchemaNode):
    """A property in an object."""

    name: str = ""
    type_node: SchemaNode | None = None
    is_required: bool = False


@dataclass
class ObjectNode(SchemaNode):
    """An object type, either a definition body or an inline fragment."""

    properties: list[PropertyDef] = field(default_factory=list)

    # Whether a `properties` mapping was declared at all (possibly empty)
    has_properties: bool = False

    # True, a parsed value schema, or None when absent
    additional_properties: SchemaNode | bool | None = None

    def get_property(self, name: str) -> PropertyDef | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


@dataclass
class AllOfNode(SchemaNode):
    """Single inheritance via allOf."""

    base_ref: RefNode | None = None  # The $ref part
    extension: ObjectNode | None = None  # The inline object, if any


# Shapes a definition body can take
DefinitionShape = ObjectNode | EnumNode | AllOfNode


@dataclass
class DefinitionNode(SchemaNode):
    """One entry of the schema's `definitions` mapping."""

    name: str = ""
    body: DefinitionShape | None = None


@dataclass
class SchemaAST:
    """Root of the parsed schema AST."""

    definitions: list[DefinitionNode] = field(default_factory=list)

    def get_definition(self, name: str) -> DefinitionNode | None:
        for def_node in self.definitions:
            if def_node.name == name:
                return def_node
        return None
