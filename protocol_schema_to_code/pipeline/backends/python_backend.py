"""
Python code generation backend.

Renders the resolved protocol model as Python source: closed enums as
`str` enums, open enums as constant holders, records as dataclasses and
the paired requests/events as two `typing.Protocol` interfaces.
"""

from __future__ import annotations

import collections
import json
import keyword
import re
from collections.abc import Callable
from typing import Any

from ..analyzer.ir_nodes import IR, EnumDef, EventPair, PrimitiveType, PropertyDef, RecordDef, RequestPair, TypeKind, TypeRef
from ..analyzer.name_resolver import escape_reserved_word
from ..config import CodeGeneratorConfig
from .base import CodeBackend

# Names a generated class body must not rebind: Python keywords and the
# helpers used in field declarations
PYTHON_RESERVED = frozenset(keyword.kwlist) | {"field", "config"}

STDLIB_MODULES = {"dataclasses", "enum", "typing"}

_NON_IDENTIFIER = re.compile(r"\W")


def python_identifier(name: str) -> str:
    """Turn a wire name into a valid, non-reserved Python identifier."""
    result = _NON_IDENTIFIER.sub("_", name)
    if not result or result[0].isdigit():
        result = f"_{result}"
    # A leading double underscore would be name-mangled inside the class body
    if result.startswith("__") and not result.endswith("__"):
        result = f"{result.lstrip('_')}_"
    return escape_reserved_word(result, PYTHON_RESERVED)


class PythonBackend(CodeBackend):
    """Python code generation backend."""

    TEMPLATE_LANG = "python"
    FILE_EXTENSION = "py"

    TYPE_MAP = {
        PrimitiveType.STRING: "str",
        PrimitiveType.INTEGER: "int",
        PrimitiveType.NUMBER: "float",
        PrimitiveType.BOOLEAN: "bool",
    }

    def __init__(self, config: CodeGeneratorConfig):
        super().__init__(config)
        self.python_imports: set[tuple[str, str]] = set()

    def _template_filters(self) -> dict[str, Callable[..., Any]]:
        return {**super()._template_filters(), "docstring_lines": self._docstring_lines}

    def generate(self, ir: IR, generation_comment: str = "") -> str:
        """Generate Python code from the protocol model."""
        self.python_imports = {("__future__", "annotations")}

        enums = self._ordered_enums(ir.enums)
        records = self._ordered_records(ir.records)

        content = ""
        for enum_def in enums:
            content += self.enum_template.render(self._prepare_enum_context(enum_def)) + "\n\n"

        for record in records:
            content += self.class_template.render(self._prepare_record_context(record)) + "\n\n"

        if ir.requests:
            content += self._render_interface(
                self.config.server_interface_name,
                "Requests handled by a debug adapter.",
                [self._prepare_request_context(pair) for pair in ir.requests],
            )
        if ir.events:
            content += self._render_interface(
                self.config.client_interface_name,
                "Events sent by a debug adapter to its client.",
                [self._prepare_event_context(pair) for pair in ir.events],
            )

        prefix = self.prefix_template.render(
            generation_comment=generation_comment,
            required_imports=self._assemble_imports(),
            schema_version=json.dumps(ir.version),
        )
        return (prefix + content).rstrip("\n") + "\n"

    def translate_type(self, type_ref: TypeRef) -> str:
        """Translate IR type to Python type string."""
        result = self._translate_type_inner(type_ref)

        # Any already admits None
        if type_ref.is_nullable and type_ref.kind not in (TypeKind.ANY, TypeKind.VOID):
            result = f"{result} | None"
        return result

    def _translate_type_inner(self, type_ref: TypeRef) -> str:
        """Inner type translation without nullable handling."""
        if type_ref.kind == TypeKind.PRIMITIVE:
            return self.TYPE_MAP[type_ref.primitive]

        if type_ref.kind in (TypeKind.REFERENCE, TypeKind.INLINE_ENUM, TypeKind.ANONYMOUS_OBJECT):
            return type_ref.name

        if type_ref.kind == TypeKind.ARRAY:
            return f"list[{self.translate_type(type_ref.element)}]"

        if type_ref.kind == TypeKind.MAP:
            return f"dict[str, {self.translate_type(type_ref.value)}]"

        if type_ref.kind == TypeKind.UNION:
            return " | ".join(self.translate_type(member) for member in type_ref.type_args)

        if type_ref.kind == TypeKind.VOID:
            return "None"

        self.python_imports.add(("typing", "Any"))
        return "Any"

    def _prepare_enum_context(self, enum_def: EnumDef) -> dict[str, Any]:
        if not enum_def.is_open:
            self.python_imports.add(("enum", "Enum"))

        members = []
        used: set[str] = set()
        for member in enum_def.members:
            label = python_identifier(member.label)
            while label in used:
                label = f"{label}_"
            used.add(label)
            members.append(
                {
                    "label": label,
                    "value": json.dumps(member.value),
                    "description": member.description,
                }
            )

        return {
            "CLASS_NAME": enum_def.name,
            "OPEN": enum_def.is_open,
            "description": enum_def.description,
            "members": members,
        }

    def _prepare_record_context(self, record: RecordDef) -> dict[str, Any]:
        self.python_imports.add(("dataclasses", "dataclass"))
        self.python_imports.add(("dataclasses_json", "dataclass_json"))

        return {
            "CLASS_NAME": record.name,
            "EXTENDS": record.base_class,
            "description": record.description,
            "properties": [self._prepare_field_context(prop) for prop in record.properties],
        }

    def _prepare_field_context(self, prop: PropertyDef) -> dict[str, Any]:
        """
        Prepare the template context for a record property.

        Args:
            prop: The property definition

        Returns:
            Dictionary of template variables
        """
        name = python_identifier(prop.name)
        default = None if prop.is_required else "None"

        # Escaped names keep their wire name through dataclasses_json
        if name != prop.name:
            self.python_imports.add(("dataclasses", "field"))
            self.python_imports.add(("dataclasses_json", "config"))
            metadata = f"metadata=config(field_name={json.dumps(prop.name)})"
            default = f"field(default=None, {metadata})" if default else f"field({metadata})"

        return {
            "name": name,
            "type": self.translate_type(prop.type_ref),
            "init": default,
            "description": prop.description,
            "open_enum": prop.type_ref.open_enum,
        }

    def _prepare_request_context(self, pair: RequestPair) -> dict[str, Any]:
        return {
            "name": python_identifier(pair.command),
            "wire_name": pair.command,
            "args": self.translate_type(pair.arguments) if pair.arguments is not None else None,
            "returns": self.translate_type(pair.return_type),
            "description": pair.description,
            "returns_description": pair.response_description,
        }

    def _prepare_event_context(self, pair: EventPair) -> dict[str, Any]:
        return {
            "name": python_identifier(pair.event),
            "wire_name": pair.event,
            "args": self.translate_type(pair.body) if pair.body is not None else None,
            "returns": "None",
            "description": pair.description,
            "returns_description": None,
        }

    def _render_interface(self, name: str, description: str, methods: list[dict[str, Any]]) -> str:
        self.python_imports.add(("typing", "Protocol"))
        rendered = self.interface_template.render(
            CLASS_NAME=name,
            description=description,
            methods=methods,
        )
        return rendered + "\n\n"

    def _docstring_lines(self, text: str | None) -> list[str]:
        """Description lines escaped for a triple-quoted docstring."""
        return [line.replace("\\", "\\\\").replace('"""', '\\"\\"\\"') for line in self._comment_lines(text)]

    def _assemble_imports(self) -> list[str]:
        """Assemble Python import statements."""
        # Group imports by module
        import_groups: dict[str, set[str]] = collections.defaultdict(set)
        for module, name in self.python_imports:
            import_groups[module].add(name)

        stdlib_groups = {m: import_groups[m] for m in import_groups if m in STDLIB_MODULES}
        third_party_groups = {m: import_groups[m] for m in import_groups if m not in STDLIB_MODULES and m != "__future__"}

        assembled = []

        # __future__ imports first
        if "__future__" in import_groups:
            names = sorted(import_groups["__future__"])
            assembled.append(f"from __future__ import {', '.join(names)}")
            if stdlib_groups or third_party_groups:
                assembled.append("")

        for module in sorted(stdlib_groups):
            assembled.append(f"from {module} import {', '.join(sorted(stdlib_groups[module]))}")

        if stdlib_groups and third_party_groups:
            assembled.append("")

        for module in sorted(third_party_groups):
            assembled.append(f"from {module} import {', '.join(sorted(third_party_groups[module]))}")

        return assembled
