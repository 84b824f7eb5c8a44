"""Per-run projection state. Created for one top-level call, then discarded."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from rdflib import Graph
from rdflib.term import Node

from graphdoc.core.graph import Fact
from graphdoc.core.models import ProjectionType


@dataclass
class ProjectionContext:
    """Bookkeeping for one projection run.

    consumed only records which facts were read; the source graph is never
    modified.
    """

    graph: Graph
    type_map: Mapping[Node, ProjectionType]
    projected: set[Node] = field(default_factory=set)
    consumed: set[Fact] = field(default_factory=set)
    document: dict[str, Any] = field(default_factory=lambda: {"data": {}, "included": []})

    def is_projected(self, node: Node) -> bool:
        return node in self.projected

    def mark_projected(self, node: Node) -> None:
        self.projected.add(node)

    def consume(self, fact: Fact) -> None:
        self.consumed.add(fact)

    def include(self, instance: dict[str, Any]) -> None:
        self.document["included"].append(instance)
