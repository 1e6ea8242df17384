"""
Request/response and event pairing.

A `<X>Request` definition is bound to its `<X>Response` by name; an event
definition becomes a notification operation taking its body.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import MissingDiscriminatorError, MissingResponseDefinitionError
from ..schema_ast.nodes import AllOfNode, DefinitionNode, EnumNode, ObjectNode, PropertyDef
from .context import Inference, ResolutionContext
from .ir_nodes import ANY, VOID, Entity, EventPair, RequestPair, TypeKind, TypeRef, map_of

if TYPE_CHECKING:
    from .analyzer import SchemaAnalyzer

REQUEST_BASE_TYPE = "Request"
EVENT_BASE_TYPE = "Event"

REQUEST_SUFFIX = "Request"
RESPONSE_SUFFIX = "Response"

# Launch and attach arguments are free-form JSON taken from the user's launch
# configuration, whatever the schema declares for them.
FREE_FORM_ARGUMENT_TYPES = frozenset({"LaunchRequestArguments", "AttachRequestArguments"})


def response_name_for(request_name: str) -> str | None:
    """`<X>Request` -> `<X>Response`; None when the suffix is missing."""
    if not request_name.endswith(REQUEST_SUFFIX):
        return None
    return request_name[: -len(REQUEST_SUFFIX)] + RESPONSE_SUFFIX


@dataclass(frozen=True)
class PairingResult:
    """A paired operation and the entities synthesized for its payloads."""

    pair: RequestPair | EventPair
    entities: tuple[Entity, ...] = ()


class MessagePairer:
    """Pairs Request- and Event-derived definitions."""

    def __init__(self, analyzer: SchemaAnalyzer):
        self.analyzer = analyzer

    def pair_request(self, def_node: DefinitionNode, allof: AllOfNode) -> PairingResult:
        """
        Bind a request to its response.

        Raises:
            MissingDiscriminatorError: If the request has no fixed command
            MissingResponseDefinitionError: If `<X>Response` is not defined
        """
        name = def_node.name
        request = allof.extension or ObjectNode()
        command = self._fixed_value(name, request, "command")

        response_name = response_name_for(name)
        response_def = self.analyzer.ref_resolver.get_definition(response_name) if response_name else None
        if response_def is None:
            expected = response_name or f"{name}{RESPONSE_SUFFIX}"
            raise MissingResponseDefinitionError(f"No response definition {expected!r}", name)

        entities: list[Entity] = []

        arguments = None
        arguments_prop = request.get_property("arguments")
        if arguments_prop is not None:
            inference = self._infer_payload(name, arguments_prop, name, "arguments")
            arguments = self._free_form_arguments(inference.type_ref)
            entities.extend(inference.entities)

        return_type = VOID
        body_prop = self._response_body(response_def)
        if body_prop is not None:
            # An inline body becomes a record named after the response itself
            inference = self._infer_payload(name, body_prop, response_def.name)
            return_type = inference.type_ref
            entities.extend(inference.entities)

        pair = RequestPair(
            request_name=name,
            response_name=response_def.name,
            command=command,
            arguments=arguments,
            return_type=return_type,
            description=allof.description,
            response_description=response_def.body.description if response_def.body else None,
        )
        return PairingResult(pair, tuple(entities))

    def pair_event(self, def_node: DefinitionNode, allof: AllOfNode) -> PairingResult:
        """
        Expose an event as a notification taking its body.

        Raises:
            MissingDiscriminatorError: If the event has no fixed event name
        """
        name = def_node.name
        event = allof.extension or ObjectNode()
        event_name = self._fixed_value(name, event, "event")

        body = None
        entities: tuple[Entity, ...] = ()
        body_prop = event.get_property("body")
        if body_prop is not None:
            inference = self._infer_payload(name, body_prop, f"{name}Arguments")
            body = inference.type_ref
            entities = inference.entities

        pair = EventPair(event_name=name, event=event_name, body=body, description=allof.description)
        return PairingResult(pair, entities)

    def _infer_payload(self, owner: str, prop: PropertyDef, anchor: str, property_name: str = "") -> Inference:
        context = ResolutionContext(
            owner=owner,
            anchor=anchor,
            property_name=property_name,
            source_path=prop.source_path,
            is_required=prop.is_required,
        )
        return self.analyzer.infer_type(prop.type_node, context)

    def _free_form_arguments(self, type_ref: TypeRef) -> TypeRef:
        if type_ref.kind == TypeKind.REFERENCE and type_ref.name in FREE_FORM_ARGUMENT_TYPES:
            return map_of(ANY).with_nullable(type_ref.is_nullable)
        return type_ref

    def _response_body(self, response_def: DefinitionNode) -> PropertyDef | None:
        body = response_def.body
        if isinstance(body, AllOfNode):
            body = body.extension
        if isinstance(body, ObjectNode):
            return body.get_property("body")
        return None

    def _fixed_value(self, owner: str, obj: ObjectNode, property_name: str) -> str:
        """The single enumerated value of the `command`/`event` property."""
        prop = obj.get_property(property_name)
        if prop is None or not isinstance(prop.type_node, EnumNode) or not prop.type_node.values:
            raise MissingDiscriminatorError(f"No fixed {property_name!r} value", owner)
        return prop.type_node.values[0]
