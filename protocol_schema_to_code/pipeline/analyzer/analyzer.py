"""
Schema analyzer that transforms the AST into the resolved protocol model.

Phase 2 of the pipeline: resolve references and inheritance, infer a type
descriptor for every property, synthesize named entities for inline enums
and objects, and pair requests with responses.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from ..config import CodeGeneratorConfig
from ..errors import (
    DuplicateEntityNameError,
    SchemaResolutionError,
    UnhandledObjectShapeError,
    UnsupportedUnionArityError,
)
from ..schema_ast.nodes import (
    AllOfNode,
    ArrayNode,
    DefinitionNode,
    EnumNode,
    ObjectNode,
    PrimitiveNode,
    RefNode,
    SchemaAST,
    SchemaNode,
    TypeListNode,
)
from .context import Inference, ResolutionContext
from .ir_nodes import (
    ANY,
    IR,
    EnumDef,
    EnumMember,
    Entity,
    PrimitiveType,
    PropertyDef,
    RecordDef,
    TypeKind,
    TypeRef,
    array_of,
    map_of,
    primitive,
    reference,
    union_of,
)
from .name_resolver import camel_case_to_upper_case
from .pairing import EVENT_BASE_TYPE, REQUEST_BASE_TYPE, MessagePairer
from .reference_resolver import ReferenceResolver

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = {
    "string": PrimitiveType.STRING,
    "integer": PrimitiveType.INTEGER,
    "number": PrimitiveType.NUMBER,
    "boolean": PrimitiveType.BOOLEAN,
}

# Members of a `type: [...]` list; None collapses the whole list to ANY
UNION_MEMBER_TYPES: dict[str, PrimitiveType | None] = {
    "string": PrimitiveType.STRING,
    "integer": PrimitiveType.INTEGER,
    "number": PrimitiveType.INTEGER,
    "boolean": PrimitiveType.BOOLEAN,
    "array": None,
    "object": None,
}

ALL_JSON_TYPES = frozenset({"array", "boolean", "integer", "null", "number", "object", "string"})

MAX_UNION_ARITY = 3


def collapse_type_list(
    types: list[str],
    is_required: bool,
    member_types: Mapping[str, PrimitiveType | None] = UNION_MEMBER_TYPES,
    owner: str = "",
    path: str = "",
) -> TypeRef:
    """
    Collapse a heterogeneous `type: [...]` list into a single descriptor.

    Args:
        types: The JSON Schema type names
        is_required: Whether the owning property is required
        member_types: Mapping of type names to union members (None means Object)
        owner: Definition being resolved, for error messages
        path: Schema path, for error messages

    Returns:
        ANY, a primitive or a UNION of two or three members

    Raises:
        UnsupportedUnionArityError: If more than three distinct members remain
    """
    # A null member makes the property nullable even when it is required
    is_nullable = not is_required or "null" in types

    if len(types) == len(ALL_JSON_TYPES) and set(types) == ALL_JSON_TYPES:
        return ANY.with_nullable(is_nullable)

    members: list[PrimitiveType] = []
    for type_name in types:
        if type_name == "null":
            continue
        member = member_types.get(type_name)
        if member is None:
            return ANY.with_nullable(is_nullable)
        if member not in members:
            members.append(member)

    if not members:
        return ANY.with_nullable(is_nullable)
    if len(members) == 1:
        return primitive(members[0], is_nullable=is_nullable)
    if len(members) > MAX_UNION_ARITY:
        raise UnsupportedUnionArityError(f"Type list collapses to {len(members)} alternatives", owner, path)

    return union_of(tuple(primitive(m) for m in members)).with_nullable(is_nullable)


class SchemaAnalyzer:
    """Analyzes the schema AST and builds the protocol model."""

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the analyzer.

        Args:
            config: Code generation configuration
        """
        self.config = config

        # Will be set during analysis
        self.ast: SchemaAST | None = None
        self.ref_resolver: ReferenceResolver | None = None

    def analyze(self, ast: SchemaAST, version: str = "") -> IR:
        """
        Analyze the AST and build the model in a single pass.

        Args:
            ast: The parsed schema AST
            version: Opaque schema version carried into the model

        Returns:
            The resolved protocol model

        Raises:
            SchemaResolutionError: On the first definition that cannot be resolved
        """
        self.ast = ast
        self.ref_resolver = ReferenceResolver(ast, strict=self.config.strict_references)
        pairer = MessagePairer(self)

        entities: list[Entity] = []
        origins: dict[str, str] = {}
        requests = []
        events = []

        for def_node in ast.definitions:
            if def_node.name in self.config.ignore_classes or def_node.name in self.config.reserved_base_types:
                continue

            produced: list[Entity] = []
            body = def_node.body
            if isinstance(body, AllOfNode):
                base_class = self._resolve_base_class(def_node, body)
                if base_class == REQUEST_BASE_TYPE:
                    result = pairer.pair_request(def_node, body)
                    requests.append(result.pair)
                    produced.extend(result.entities)
                elif base_class == EVENT_BASE_TYPE:
                    result = pairer.pair_event(def_node, body)
                    events.append(result.pair)
                    produced.extend(result.entities)
                elif base_class in self.config.reserved_base_types:
                    # Responses are consumed by their request
                    continue
                else:
                    produced.extend(self._analyze_record(def_node.name, body.extension, base_class, body.description))
            elif isinstance(body, EnumNode):
                produced.append(self._build_enum(def_node.name, body))
            elif isinstance(body, ObjectNode):
                produced.extend(self._analyze_record(def_node.name, body, None, body.description))
            else:
                raise SchemaResolutionError("Unsupported definition shape", def_node.name, def_node.source_path)

            self._check_unique_names(produced, def_node, origins)
            entities.extend(produced)

        logger.info(
            "Resolved %d entities, %d requests and %d events",
            len(entities),
            len(requests),
            len(events),
        )
        return IR(entities=tuple(entities), requests=tuple(requests), events=tuple(events), version=version)

    def _check_unique_names(self, produced: list[Entity], def_node: DefinitionNode, origins: dict[str, str]) -> None:
        """
        Record where each new entity comes from, rejecting a name already taken.

        Raises:
            DuplicateEntityNameError: If a declared or synthesized name is reused
        """
        for entity in produced:
            if entity.is_synthesized:
                origin = f"synthesized in {def_node.source_path}"
            else:
                origin = def_node.source_path

            previous = origins.get(entity.name)
            if previous is not None:
                raise DuplicateEntityNameError(
                    f"Entity {entity.name!r} from {origin} clashes with {previous}",
                    def_node.name,
                    def_node.source_path,
                )
            origins[entity.name] = origin

    def _resolve_base_class(self, def_node: DefinitionNode, allof: AllOfNode) -> str | None:
        """Resolve the supertype of an allOf composition."""
        if allof.base_ref is None:
            return None
        return self.ref_resolver.resolve(allof.base_ref, def_node.name).target_name

    def _analyze_record(
        self,
        name: str,
        obj: ObjectNode | None,
        base_class: str | None,
        description: str | None,
        owner: str | None = None,
        is_synthesized: bool = False,
    ) -> list[Entity]:
        """Build a record followed by the entities its properties synthesized."""
        properties = []
        synthesized: list[Entity] = []

        if obj is not None:
            for prop in obj.properties:
                context = ResolutionContext(
                    owner=owner or name,
                    anchor=name,
                    property_name=prop.name,
                    source_path=prop.source_path,
                    is_required=prop.is_required,
                )
                inference = self.infer_type(prop.type_node, context)
                properties.append(
                    PropertyDef(
                        name=prop.name,
                        type_ref=inference.type_ref,
                        is_required=prop.is_required,
                        description=prop.description,
                    )
                )
                synthesized.extend(inference.entities)

        record = RecordDef(
            name=name,
            base_class=base_class,
            properties=tuple(properties),
            description=description,
            is_synthesized=is_synthesized,
        )
        return [record, *synthesized]

    def _build_enum(self, name: str, node: EnumNode, is_synthesized: bool = False) -> EnumDef:
        """Build a closed or open enum with UPPER_CASE member labels."""
        members = []
        for value, description in zip(node.values, node.descriptions):
            label, needs_serialized_name = camel_case_to_upper_case(value)
            members.append(
                EnumMember(
                    value=value,
                    label=label,
                    description=description,
                    needs_serialized_name=needs_serialized_name,
                )
            )

        return EnumDef(
            name=name,
            members=tuple(members),
            is_open=node.is_open,
            description=node.description,
            is_synthesized=is_synthesized,
        )

    def infer_type(self, node: SchemaNode | None, context: ResolutionContext) -> Inference:
        """
        Infer the type descriptor of a property fragment.

        Args:
            node: The parsed fragment
            context: Position of the fragment in the schema

        Returns:
            The descriptor and any entities synthesized for inline enums/objects
        """
        is_nullable = not context.is_required

        if isinstance(node, RefNode):
            resolved = self.ref_resolver.resolve(node, context.owner)
            return Inference(reference(resolved.target_name).with_nullable(is_nullable))

        if isinstance(node, ArrayNode):
            if node.items is None:
                return Inference(array_of(ANY).with_nullable(is_nullable))
            items = self.infer_type(node.items, context.for_items(node.items.source_path))
            return Inference(array_of(items.type_ref).with_nullable(is_nullable), items.entities)

        if isinstance(node, ObjectNode):
            return self._infer_object_type(node, context)

        if isinstance(node, EnumNode):
            enum_def = self._build_enum(context.entity_name(), node, is_synthesized=True)
            if node.is_open:
                # Suggested values only: the wire type stays a plain string
                return Inference(primitive(PrimitiveType.STRING, is_nullable, open_enum=enum_def.name), (enum_def,))
            type_ref = TypeRef(kind=TypeKind.INLINE_ENUM, name=enum_def.name, is_nullable=is_nullable)
            return Inference(type_ref, (enum_def,))

        if isinstance(node, TypeListNode):
            return Inference(collapse_type_list(node.types, context.is_required, owner=context.owner, path=node.source_path))

        if isinstance(node, PrimitiveNode) and node.type_name in PRIMITIVE_TYPES:
            return Inference(primitive(PRIMITIVE_TYPES[node.type_name], is_nullable))

        # Untyped, "null" or unknown type names
        is_null = isinstance(node, PrimitiveNode) and node.type_name == "null"
        return Inference(ANY.with_nullable(is_nullable or is_null))

    def _infer_object_type(self, node: ObjectNode, context: ResolutionContext) -> Inference:
        """Synthesize a record for an inline object, or map it to MAP/ANY."""
        is_nullable = not context.is_required

        if node.has_properties:
            name = context.entity_name()
            entities = self._analyze_record(
                name,
                node,
                None,
                node.description,
                owner=context.owner,
                is_synthesized=True,
            )
            type_ref = TypeRef(kind=TypeKind.ANONYMOUS_OBJECT, name=name, is_nullable=is_nullable)
            return Inference(type_ref, tuple(entities))

        additional = node.additional_properties
        if additional is not None:
            if isinstance(additional, ObjectNode) and additional.has_properties:
                raise UnhandledObjectShapeError(
                    "Inline object with properties as additionalProperties",
                    context.owner,
                    additional.source_path,
                )
            return Inference(map_of(primitive(PrimitiveType.STRING)).with_nullable(is_nullable))

        return Inference(ANY.with_nullable(is_nullable))
