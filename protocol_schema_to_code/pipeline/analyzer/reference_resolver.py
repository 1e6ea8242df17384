"""
Reference resolver for $ref resolution.

Resolves `#/<section>/<TypeName>` paths to definitions of the schema.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..errors import MalformedReferenceError, UnresolvedReferenceError
from ..schema_ast.nodes import DefinitionNode, RefNode, SchemaAST

logger = logging.getLogger(__name__)

_REF_PATTERN = re.compile(r"#/(.+)/(.+)")


@dataclass
class ResolvedRef:
    """A resolved $ref."""

    target_name: str = ""  # Referenced type name


class ReferenceResolver:
    """Resolves $ref to actual definitions."""

    def __init__(self, ast: SchemaAST, strict: bool = False):
        """
        Initialize the resolver.

        Args:
            ast: The parsed schema AST
            strict: Raise on malformed $ref strings instead of logging them
        """
        self.ast = ast
        self.strict = strict

    def resolve(self, ref_node: RefNode, owner: str = "") -> ResolvedRef:
        """
        Resolve a $ref node to its target.

        Args:
            ref_node: The RefNode to resolve
            owner: Definition being resolved, for error messages

        Returns:
            ResolvedRef with target information

        Raises:
            UnresolvedReferenceError: If the referenced type does not exist
            MalformedReferenceError: If the path is malformed and strict mode is on
        """
        ref_path = ref_node.ref_path

        match = _REF_PATTERN.fullmatch(ref_path)
        if match is None:
            if self.strict:
                raise MalformedReferenceError(f"Malformed $ref {ref_path!r}", owner, ref_node.source_path)
            logger.warning("Malformed $ref %r at %s, using it verbatim", ref_path, ref_node.source_path)
            return ResolvedRef(target_name=ref_path)

        def_name = match.group(2)
        if self.ast.get_definition(def_name) is None:
            raise UnresolvedReferenceError(f"Unresolved $ref {ref_path!r}", owner, ref_node.source_path)

        return ResolvedRef(target_name=def_name)

    def get_definition(self, name: str) -> DefinitionNode | None:
        """Get a definition by name."""
        return self.ast.get_definition(name)
