"""
Resolution context and inference result shared by the analyzer and pairing.
"""

from __future__ import annotations

from dataclasses import dataclass

from .ir_nodes import Entity, TypeRef
from .name_resolver import synthesized_name


@dataclass(frozen=True)
class ResolutionContext:
    """Where a fragment sits, threaded explicitly through type inference."""

    # Top-level definition being resolved (for error messages)
    owner: str = ""

    # Enclosing entity used to name synthesized entities
    anchor: str = ""

    # Property holding the fragment; empty when the anchor itself is the name
    property_name: str = ""

    source_path: str = ""
    is_required: bool = True

    def entity_name(self) -> str:
        """Name for an entity synthesized at this position."""
        if not self.property_name:
            return self.anchor
        return synthesized_name(self.anchor, self.property_name)

    def for_items(self, path: str) -> ResolutionContext:
        return ResolutionContext(
            owner=self.owner,
            anchor=self.anchor,
            property_name=self.property_name,
            source_path=path,
            is_required=True,
        )


@dataclass(frozen=True)
class Inference:
    """A type descriptor plus the entities synthesized while inferring it."""

    type_ref: TypeRef
    entities: tuple[Entity, ...] = ()
