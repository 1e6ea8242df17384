"""
Base class for code generation backends.

Defines the interface that all language-specific backends must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any

import jinja2

from ..analyzer.ir_nodes import IR, EnumDef, RecordDef, TypeRef
from ..config import CodeGeneratorConfig


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.jinja_env.filters.update(self._template_filters())

        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")
        self.enum_template = self.jinja_env.get_template(f"enum.{self.FILE_EXTENSION}.jinja2")
        self.class_template = self.jinja_env.get_template(f"class.{self.FILE_EXTENSION}.jinja2")
        self.interface_template = self.jinja_env.get_template(f"interface.{self.FILE_EXTENSION}.jinja2")

    def _template_filters(self) -> dict[str, Callable[..., Any]]:
        """Custom Jinja2 filters, registered before the templates are loaded."""
        return {"comment_lines": self._comment_lines}

    @abstractmethod
    def generate(self, ir: IR, generation_comment: str = "") -> str:
        """
        Generate code from IR.

        Args:
            ir: The resolved protocol model
            generation_comment: Header comment, empty for none

        Returns:
            Generated code as a string
        """

    @abstractmethod
    def translate_type(self, type_ref: TypeRef) -> str:
        """
        Translate an IR type to a language-specific type string.

        Args:
            type_ref: The type reference

        Returns:
            Language-specific type string
        """

    def _comment_lines(self, text: str | None) -> list[str]:
        """Split a description into lines, dropping trailing blanks."""
        if not text:
            return []
        return [line.rstrip() for line in text.strip().splitlines()]

    def _ordered_records(self, records: list[RecordDef]) -> list[RecordDef]:
        """
        Order records so every base class precedes its subclasses.

        Records keep their model order otherwise; bases outside the model
        are assumed to be provided by the target runtime.
        """
        by_name = {record.name: record for record in records}
        emitted: set[str] = set()
        ordered: list[RecordDef] = []

        def visit(record: RecordDef, stack: tuple[str, ...]) -> None:
            if record.name in emitted or record.name in stack:
                return
            base = by_name.get(record.base_class or "")
            if base is not None:
                visit(base, (*stack, record.name))
            emitted.add(record.name)
            ordered.append(record)

        for record in records:
            visit(record, ())
        return ordered

    def _ordered_enums(self, enums: list[EnumDef]) -> list[EnumDef]:
        """Closed enums first; open enums only document suggested values."""
        return [e for e in enums if not e.is_open] + [e for e in enums if e.is_open]
