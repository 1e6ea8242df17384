"""
IR (Intermediate Representation) node definitions.

These nodes represent the resolved protocol model handed to a backend.
All references are resolved, every inline enum and object has become a
named entity, and requests are paired with their responses. Nodes are
frozen: the model is built once and only read afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TypeKind(Enum):
    """Kind of type descriptor in the IR."""

    PRIMITIVE = "primitive"  # String, Integer, Number, Boolean
    REFERENCE = "reference"  # A definition of the schema
    ARRAY = "array"  # list[T]
    MAP = "map"  # dict[str, T]
    UNION = "union"  # T | U (| V)
    INLINE_ENUM = "inline_enum"  # Synthesized closed enum
    ANONYMOUS_OBJECT = "anonymous_object"  # Synthesized record
    ANY = "any"  # Untyped escape hatch
    VOID = "void"  # No value (response without body)


class PrimitiveType(str, Enum):
    STRING = "String"
    INTEGER = "Integer"
    NUMBER = "Number"
    BOOLEAN = "Boolean"


@dataclass(frozen=True)
class TypeRef:
    """A resolved type descriptor."""

    kind: TypeKind = TypeKind.ANY

    # Primitive type for PRIMITIVE
    primitive: PrimitiveType | None = None

    # Entity name for REFERENCE, INLINE_ENUM and ANONYMOUS_OBJECT
    name: str = ""

    # Element for ARRAY, value for MAP, members for UNION
    type_args: tuple[TypeRef, ...] = ()

    # Optional or explicitly null-able (boxed for numerics and booleans)
    is_nullable: bool = False

    # Open enum documenting the suggested values of a string
    open_enum: str | None = None

    @property
    def element(self) -> TypeRef:
        return self.type_args[0]

    @property
    def value(self) -> TypeRef:
        return self.type_args[-1]

    def with_nullable(self, is_nullable: bool) -> TypeRef:
        return TypeRef(
            kind=self.kind,
            primitive=self.primitive,
            name=self.name,
            type_args=self.type_args,
            is_nullable=is_nullable,
            open_enum=self.open_enum,
        )


def primitive(primitive_type: PrimitiveType, is_nullable: bool = False, open_enum: str | None = None) -> TypeRef:
    return TypeRef(kind=TypeKind.PRIMITIVE, primitive=primitive_type, is_nullable=is_nullable, open_enum=open_enum)


def reference(name: str) -> TypeRef:
    return TypeRef(kind=TypeKind.REFERENCE, name=name)


def array_of(element: TypeRef) -> TypeRef:
    return TypeRef(kind=TypeKind.ARRAY, type_args=(element,))


def map_of(value: TypeRef) -> TypeRef:
    return TypeRef(kind=TypeKind.MAP, type_args=(primitive(PrimitiveType.STRING), value))


def union_of(members: tuple[TypeRef, ...]) -> TypeRef:
    return TypeRef(kind=TypeKind.UNION, type_args=members)


ANY = TypeRef(kind=TypeKind.ANY)
VOID = TypeRef(kind=TypeKind.VOID)


@dataclass(frozen=True)
class PropertyDef:
    """A resolved property of a record."""

    name: str = ""
    type_ref: TypeRef = ANY
    is_required: bool = False
    description: str | None = None

    @property
    def is_nullable(self) -> bool:
        return self.type_ref.is_nullable


@dataclass(frozen=True)
class EnumMember:
    """One value of a closed or open enum."""

    value: str = ""  # Wire-format string
    label: str = ""  # UPPER_CASE form
    description: str | None = None

    # Whether the label does not map back to the value by the plain rule
    needs_serialized_name: bool = False


@dataclass(frozen=True)
class RecordDef:
    """A structured type with named properties."""

    name: str = ""
    base_class: str | None = None
    properties: tuple[PropertyDef, ...] = ()
    description: str | None = None

    # Whether this record was synthesized from an inline object
    is_synthesized: bool = False

    def get_property(self, name: str) -> PropertyDef | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


@dataclass(frozen=True)
class EnumDef:
    """A closed (exhaustive) or open (suggested values only) enum."""

    name: str = ""
    members: tuple[EnumMember, ...] = ()
    is_open: bool = False
    description: str | None = None
    is_synthesized: bool = False

    @property
    def values(self) -> list[str]:
        return [member.value for member in self.members]


Entity = RecordDef | EnumDef


@dataclass(frozen=True)
class RequestPair:
    """A request bound to its response by naming convention."""

    request_name: str = ""
    response_name: str = ""
    command: str = ""

    # None when the request takes no arguments
    arguments: TypeRef | None = None

    # VOID when the response declares no body
    return_type: TypeRef = VOID

    description: str | None = None
    response_description: str | None = None


@dataclass(frozen=True)
class EventPair:
    """An event exposed as a notification operation."""

    event_name: str = ""
    event: str = ""

    # None when the event carries no body
    body: TypeRef | None = None

    description: str | None = None


@dataclass(frozen=True)
class IR:
    """The complete resolved protocol model."""

    # Records and enums, synthesized ones included, in first-encountered order
    entities: tuple[Entity, ...] = ()

    requests: tuple[RequestPair, ...] = ()
    events: tuple[EventPair, ...] = ()

    # Opaque schema version passed through to the backend
    version: str = ""

    _index: dict[str, Entity] = field(default_factory=dict, init=False, compare=False, repr=False)

    def __post_init__(self):
        self._index.update({entity.name: entity for entity in self.entities})

    @property
    def records(self) -> list[RecordDef]:
        return [e for e in self.entities if isinstance(e, RecordDef)]

    @property
    def enums(self) -> list[EnumDef]:
        return [e for e in self.entities if isinstance(e, EnumDef)]

    def get_entity(self, name: str) -> Entity | None:
        return self._index.get(name)
