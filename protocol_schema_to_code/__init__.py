"""Protocol Schema to Code

Resolves a debug-protocol-style JSON Schema (requests, responses, events
and their payload types) into a typed protocol model and renders it as
Python bindings.
"""

__version__ = "1.0.0"

from .pipeline import (
    IR,
    AtomicWriter,
    CodeGeneratorConfig,
    FormatterConfig,
    GeneratedCodeError,
    OutputConfig,
    OutputMode,
    PipelineGenerator,
    SchemaAnalyzer,
    SchemaResolutionError,
)

__all__ = [
    "PipelineGenerator",
    "SchemaAnalyzer",
    "IR",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "OutputConfig",
    "OutputMode",
    "AtomicWriter",
    "SchemaResolutionError",
    "GeneratedCodeError",
]
