"""Projection protocols -- the seams around the engine.

TypeResolution: maps a node's rdf:type URIs onto a schema type
DocumentTarget: serializes a projected document for a consumer
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from rdflib.term import Node

from graphdoc.core.models import ProjectionType

T = TypeVar("T", covariant=True)


@runtime_checkable
class TypeResolution(Protocol):
    """Resolves one node's type URIs to the schema type governing it."""

    def resolve(self, type_uris: set[str], node: Node | None = None) -> ProjectionType | None:
        """Return the resolved type, or None when nothing matches."""
        ...


@runtime_checkable
class DocumentTarget(Protocol[T]):
    """Serializes a projected document to a target format."""

    def serialize(self, document: dict[str, Any]) -> T:
        """Serialize the document to the target format."""
        ...
