"""
Errors raised while resolving a protocol schema.

Every error aborts the whole resolution pass: no partial model is ever
handed to a backend.
"""

from __future__ import annotations


class SchemaResolutionError(Exception):
    """Base class for all resolution failures.

    Attributes:
        type_name: The definition being resolved when the error occurred
        detail: Property name or schema path, when known
    """

    def __init__(self, message: str, type_name: str = "", detail: str = ""):
        self.type_name = type_name
        self.detail = detail
        location = type_name
        if detail:
            location = f"{type_name} ({detail})" if type_name else detail
        super().__init__(f"{message}: {location}" if location else message)


class UnresolvedReferenceError(SchemaResolutionError):
    """A well-formed $ref names a type absent from the definitions."""


class MalformedReferenceError(SchemaResolutionError):
    """A $ref does not have the `#/section/TypeName` shape (strict mode only)."""


class MissingResponseDefinitionError(SchemaResolutionError):
    """A request type has no `<X>Response` counterpart."""


class MissingDiscriminatorError(SchemaResolutionError):
    """A request or event carries no fixed command/event enumeration."""


class UnsupportedUnionArityError(SchemaResolutionError):
    """A type list collapses to more alternatives than a union can encode."""


class UnhandledObjectShapeError(SchemaResolutionError):
    """An inline object with properties appears where no entity can be synthesized."""


class UnsupportedCompositionError(SchemaResolutionError):
    """An allOf composition carries more than one inline object."""


class DuplicateEntityNameError(SchemaResolutionError):
    """Two entities of the model, declared or synthesized, share a name."""


class GeneratedCodeError(Exception):
    """Rendered code failed validation before being written."""
