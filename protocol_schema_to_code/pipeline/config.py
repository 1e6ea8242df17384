"""
Configuration for the protocol code generator pipeline.

The resolver options control how strictly the schema is interpreted;
the formatter and output options only affect rendering and writing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Base message types every target already provides
RESERVED_BASE_TYPES = ["ProtocolMessage", "Request", "Event", "Response"]


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to validate code before writing
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class FormatterConfig:
    """Configuration for the black post-processing step."""

    # Whether formatting is enabled
    enabled: bool = False

    # Line length for the formatter
    line_length: int = 100

    # Python version target (e.g., "py312")
    target_version: str = "py312"

    # Whether to use string normalization (convert single quotes to double)
    string_normalization: bool = True

    magic_trailing_comma: bool = True


@dataclass
class CodeGeneratorConfig:
    """Configuration options for resolution and code generation."""

    # Raise MalformedReferenceError instead of logging and using the raw $ref
    strict_references: bool = False

    # Schema key marking representative but non-exhaustive values
    open_enum_marker: str = "_enum"

    # Definitions that are never emitted
    reserved_base_types: list[str] = field(default_factory=lambda: list(RESERVED_BASE_TYPES))

    # Definitions to skip entirely
    ignore_classes: list[str] = field(default_factory=list)

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Names of the rendered request/event interfaces
    server_interface_name: str = "DebugProtocolServer"
    client_interface_name: str = "DebugProtocolClient"

    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "strict_references": self.strict_references,
            "open_enum_marker": self.open_enum_marker,
            "reserved_base_types": self.reserved_base_types,
            "ignore_classes": self.ignore_classes,
            "add_generation_comment": self.add_generation_comment,
            "server_interface_name": self.server_interface_name,
            "client_interface_name": self.client_interface_name,
            "formatter": {
                "enabled": self.formatter.enabled,
                "line_length": self.formatter.line_length,
                "target_version": self.formatter.target_version,
                "string_normalization": self.formatter.string_normalization,
                "magic_trailing_comma": self.formatter.magic_trailing_comma,
            },
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
