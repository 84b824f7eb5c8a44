"""Post-run diagnostics: what a projection left behind.

Purely observational. A report never changes the projected document.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rdflib import Graph

from graphdoc.core.graph import Fact
from graphdoc.projectors.context import ProjectionContext


@dataclass(frozen=True)
class ProjectionReport:
    """Typed nodes never reached from the start node, and facts never read."""

    root: str
    missed_subjects: tuple[str, ...]
    unconsumed_facts: tuple[Fact, ...]
    typed_subject_count: int

    @classmethod
    def from_context(cls, context: ProjectionContext, root: str) -> ProjectionReport:
        missed = sorted(str(n) for n in context.type_map if n not in context.projected)
        unconsumed = sorted(
            (fact for fact in context.graph if fact not in context.consumed),
            key=lambda fact: tuple(term.n3() for term in fact),
        )
        return cls(
            root=root,
            missed_subjects=tuple(missed),
            unconsumed_facts=tuple(unconsumed),
            typed_subject_count=len(context.type_map),
        )

    @property
    def is_clean(self) -> bool:
        return not self.missed_subjects and not self.unconsumed_facts

    def unconsumed_graph(self) -> Graph:
        graph = Graph()
        for fact in self.unconsumed_facts:
            graph.add(fact)
        return graph

    def unconsumed_turtle(self) -> str:
        return self.unconsumed_graph().serialize(format="turtle")

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "typed_subjects": self.typed_subject_count,
            "missed_subjects": list(self.missed_subjects),
            "unconsumed_facts": [[term.n3() for term in fact] for fact in self.unconsumed_facts],
        }
