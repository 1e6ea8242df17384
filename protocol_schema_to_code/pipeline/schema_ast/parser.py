"""
Protocol JSON Schema parser that builds an AST.

Phase 1 of the pipeline: classify every definition into its shape and
parse property fragments, without resolving references.
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import UnsupportedCompositionError
from .nodes import (
    AllOfNode,
    ArrayNode,
    DefinitionNode,
    EnumNode,
    ObjectNode,
    PrimitiveNode,
    PropertyDef,
    RefNode,
    SchemaAST,
    SchemaNode,
    TypeListNode,
)

logger = logging.getLogger(__name__)


class SchemaParser:
    """Parses a protocol JSON Schema into an AST."""

    def __init__(self, open_enum_marker: str = "_enum"):
        """
        Initialize the parser.

        Args:
            open_enum_marker: Key holding suggested (non-exhaustive) string values
        """
        self.open_enum_marker = open_enum_marker

    def parse(self, schema: dict[str, Any]) -> SchemaAST:
        """
        Parse a protocol JSON Schema into an AST.

        Args:
            schema: The JSON Schema dictionary

        Returns:
            SchemaAST with one DefinitionNode per definition, in schema order
        """
        ast = SchemaAST()

        definitions = schema.get("definitions") or {}
        for name, def_schema in definitions.items():
            # Skip comment fields (strings) and _comment prefixed keys
            if not isinstance(def_schema, dict) or name.startswith("_comment"):
                continue

            path = f"#/definitions/{name}"
            ast.definitions.append(
                DefinitionNode(
                    name=name,
                    body=self._parse_definition_body(name, def_schema, path),
                    source_path=path,
                    description=def_schema.get("description"),
                )
            )

        logger.debug("Parsed %d definitions", len(ast.definitions))
        return ast

    def _parse_definition_body(self, name: str, schema: dict[str, Any], path: str) -> ObjectNode | EnumNode | AllOfNode:
        """Classify a definition as composition, enumeration or plain object."""
        if "allOf" in schema:
            return self._parse_allof_node(name, schema, path)

        if "enum" in schema:
            return self._parse_enum_node(schema, schema["enum"], path, is_open=False)

        if self.open_enum_marker in schema:
            return self._parse_enum_node(schema, schema[self.open_enum_marker], path, is_open=True)

        return self._parse_object_node(schema, path)

    def _parse_allof_node(self, name: str, schema: dict[str, Any], path: str) -> AllOfNode:
        """Parse an allOf node (inheritance)."""
        node = AllOfNode(source_path=path, description=schema.get("description"))
        extensions = []

        for i, member in enumerate(schema["allOf"]):
            member_path = f"{path}/allOf/{i}"
            if "$ref" in member:
                # The last reference wins when several are listed
                node.base_ref = RefNode(ref_path=member["$ref"], source_path=member_path)
            else:
                extensions.append(self._parse_object_node(member, member_path))

        if len(extensions) > 1:
            raise UnsupportedCompositionError("allOf composition has more than one inline object", name, path)

        if extensions:
            node.extension = extensions[0]
            if node.description is None:
                node.description = node.extension.description

        return node

    def _parse_enum_node(self, schema: dict[str, Any], values: list[Any], path: str, is_open: bool) -> EnumNode:
        """Parse an enumeration, dropping duplicate values."""
        descriptions = schema.get("enumDescriptions") or []
        node = EnumNode(source_path=path, description=schema.get("description"), is_open=is_open)

        for i, value in enumerate(values):
            value = str(value)
            if value in node.values:
                logger.warning("Duplicate enum value %r dropped at %s", value, path)
                continue
            node.values.append(value)
            node.descriptions.append(descriptions[i] if i < len(descriptions) else None)

        return node

    def _parse_object_node(self, schema: dict[str, Any], path: str) -> ObjectNode:
        """Parse an object type node."""
        properties = []
        required_fields = schema.get("required", [])

        for prop_name, prop_schema in (schema.get("properties") or {}).items():
            prop_path = f"{path}/properties/{prop_name}"
            properties.append(
                PropertyDef(
                    name=prop_name,
                    type_node=self._parse_schema_node(prop_schema, prop_path),
                    is_required=prop_name in required_fields,
                    source_path=prop_path,
                    description=prop_schema.get("description"),
                )
            )

        additional = schema.get("additionalProperties")
        if isinstance(additional, dict):
            additional = self._parse_schema_node(additional, f"{path}/additionalProperties")
        elif additional is not True:
            additional = None

        return ObjectNode(
            properties=properties,
            has_properties="properties" in schema,
            additional_properties=additional,
            source_path=path,
            description=schema.get("description"),
        )

    def _parse_schema_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        """
        Parse a property fragment recursively.

        Args:
            schema: The schema dictionary
            path: Current path in schema (for error messages)

        Returns:
            Appropriate SchemaNode subclass
        """
        description = schema.get("description")

        if "$ref" in schema:
            return RefNode(ref_path=schema["$ref"], source_path=path, description=description)

        type_value = schema.get("type")

        if isinstance(type_value, list):
            return TypeListNode(types=list(type_value), source_path=path, description=description)

        if type_value == "array":
            items = schema.get("items")
            return ArrayNode(
                items=self._parse_schema_node(items, f"{path}/items") if isinstance(items, dict) else None,
                source_path=path,
                description=description,
            )

        if type_value == "object":
            return self._parse_object_node(schema, path)

        if type_value in (None, "string"):
            if "enum" in schema:
                return self._parse_enum_node(schema, schema["enum"], path, is_open=False)
            if self.open_enum_marker in schema:
                return self._parse_enum_node(schema, schema[self.open_enum_marker], path, is_open=True)

        if type_value is None and "properties" in schema:
            return self._parse_object_node(schema, path)

        return PrimitiveNode(type_name=type_value or "", source_path=path, description=description)
