"""Type resolution: map every rdf:typed node of a graph onto a schema type."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from rdflib import Graph
from rdflib.term import Node, URIRef

from graphdoc.core.graph import RDF_TYPE
from graphdoc.core.models import ProjectionType
from graphdoc.core.schema import Schema
from graphdoc.errors import TypeResolutionError
from graphdoc.projectors.base import TypeResolution
from graphdoc.projectors.config import ModelType


def collect_rdf_types(graph: Graph) -> dict[Node, set[str]]:
    """Every subject with at least one rdf:type fact → its type URIs."""
    result: dict[Node, set[str]] = {}
    for subject, _, rdf_type in graph.triples((None, RDF_TYPE, None)):
        if not isinstance(rdf_type, URIRef):
            # literal or blank-node types name no schema type
            continue
        result.setdefault(subject, set()).add(str(rdf_type))
    return result


@dataclass(frozen=True)
class TypeResolver:
    """Computes node → ProjectionType for a whole graph, under one policy.

    Resolution is global and eager: every typed node is resolved, reachable
    from the start node or not, so diagnostics can report unreached nodes.
    """

    schema: Schema
    model_type: ModelType = ModelType.ALL

    def resolve(self, type_uris: set[str], node: Node | None = None) -> ProjectionType | None:
        """Resolve one node's type URIs. None when the schema has no match."""
        if self.model_type == ModelType.ROOT:
            if len(type_uris) != 1:
                raise TypeResolutionError(
                    f"expecting exactly one type, found {len(type_uris)}",
                    node=_label(node),
                    values=sorted(type_uris),
                )
            (type_uri,) = type_uris
            resolved = self.schema.type_for_uri(type_uri)
            if resolved is None:
                raise TypeResolutionError(
                    "type is not declared in the schema",
                    node=_label(node),
                    values=[type_uri],
                )
            return resolved

        if self.model_type == ModelType.PROFILE:
            return self.schema.best_matching_type(type_uris)

        if self.model_type == ModelType.ALL:
            return self.schema.union_type(type_uris)

        raise TypeResolutionError(f"unsupported model type {self.model_type!r}")

    def resolve_graph(self, graph: Graph) -> Mapping[Node, ProjectionType]:
        return resolve_graph(graph, self)


def resolve_graph(graph: Graph, resolution: TypeResolution) -> Mapping[Node, ProjectionType]:
    """Resolve every typed node of graph. Unmatched nodes are left out."""
    type_map: dict[Node, ProjectionType] = {}
    for node, type_uris in collect_rdf_types(graph).items():
        resolved = resolution.resolve(type_uris, node)
        if resolved is not None:
            type_map[node] = resolved
    return MappingProxyType(type_map)


def _label(node: Node | None) -> str | None:
    return None if node is None else str(node)
