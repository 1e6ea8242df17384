"""
Pipeline - protocol JSON Schema to Python bindings.

1. Phase 1 (Parser): Parse the JSON Schema into the Schema AST
2. Phase 2 (Analyzer): Resolve references, infer types and pair messages
3. Phase 3 (Backend): Render the resolved model with Jinja2 templates
4. Phase 4 (Formatter): Optional post-processing with black
5. Phase 5 (Writer): Validate and write the output atomically
"""

from __future__ import annotations

from .analyzer import IR, SchemaAnalyzer
from .config import CodeGeneratorConfig, FormatterConfig, OutputConfig, OutputMode
from .errors import (
    DuplicateEntityNameError,
    GeneratedCodeError,
    MalformedReferenceError,
    MissingDiscriminatorError,
    MissingResponseDefinitionError,
    SchemaResolutionError,
    UnhandledObjectShapeError,
    UnresolvedReferenceError,
    UnsupportedCompositionError,
    UnsupportedUnionArityError,
)
from .generator import PipelineGenerator
from .writer import AtomicWriter

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
    "UnresolvedReferenceError",
    "MalformedReferenceError",
    "MissingResponseDefinitionError",
    "MissingDiscriminatorError",
    "UnsupportedUnionArityError",
    "UnhandledObjectShapeError",
    "UnsupportedCompositionError",
    "DuplicateEntityNameError",
    "GeneratedCodeError",
]
