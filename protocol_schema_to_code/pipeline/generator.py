"""
Pipeline generator tying the phases together.

1. Parse the schema into the Schema AST
2. Resolve it into the protocol model
3. Render the model with the Python backend
4. Optionally format the result with black
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .analyzer import IR, SchemaAnalyzer
from .backends import PythonBackend
from .config import CodeGeneratorConfig
from .formatters import BlackFormatter
from .schema_ast import SchemaAST, SchemaParser
from .writer import AtomicWriter

logger = logging.getLogger(__name__)


class PipelineGenerator:
    """Generates Python bindings for a protocol JSON Schema."""

    def __init__(
        self,
        schema: dict[str, Any],
        config: CodeGeneratorConfig | None = None,
        version: str = "",
        command_line: str = "",
    ):
        """
        Initialize the generator.

        Args:
            schema: The protocol JSON Schema
            config: Code generation configuration
            version: Opaque schema version carried into the output
            command_line: Command line recorded in the generation comment
        """
        self.schema = schema
        self.config = config or CodeGeneratorConfig()
        self.version = version
        self.command_line = command_line

    def parse(self) -> SchemaAST:
        """Phase 1: parse the schema."""
        parser = SchemaParser(open_enum_marker=self.config.open_enum_marker)
        return parser.parse(self.schema)

    def resolve(self) -> IR:
        """
        Phases 1 and 2: parse and resolve the schema into the protocol model.

        Raises:
            SchemaResolutionError: If any definition cannot be resolved
        """
        return SchemaAnalyzer(self.config).analyze(self.parse(), self.version)

    def generate(self) -> str:
        """Run the pipeline and return the generated Python code."""
        ir = self.resolve()

        code = PythonBackend(self.config).generate(ir, self._generation_comment())

        if self.config.formatter.enabled:
            code = BlackFormatter().format(code, self.config.formatter)

        return code

    def write(self, output: Path) -> None:
        """
        Generate and write the code according to the output configuration.

        Raises:
            SchemaResolutionError: If any definition cannot be resolved
            GeneratedCodeError: If the generated code does not parse
            FileExistsError: If the output exists and overwriting is not allowed
        """
        code = self.generate()
        AtomicWriter().write_output(output, code, self.config.output)
        logger.info("Generated %s", output)

    def _generation_comment(self) -> str:
        if not self.config.add_generation_comment:
            return ""

        from .. import __version__

        lines = [f"Generated by protocol_schema_to_code {__version__}. Do not edit."]
        if self.command_line:
            lines.append(f"Command: {self.command_line}")
        if self.version:
            lines.append(f"Schema version: {self.version}")
        return "\n".join(lines)
