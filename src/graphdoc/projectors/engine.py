"""Projection engine: graph + start node → {"data": ..., "included": [...]}.

The walk is depth first and strictly sequential. Each node is projected at
most once per run; a node reached again (cycle or diamond) is left as a
reference. The document is only returned once the whole walk succeeded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rdflib import Graph
from rdflib.term import Node, URIRef

from graphdoc.core.graph import RDF_TYPE
from graphdoc.core.models import Attribute, ProjectionType
from graphdoc.core.schema import Schema
from graphdoc.errors import TypeResolutionError
from graphdoc.observability import get_logger
from graphdoc.projectors.attributes import AttributeProjector
from graphdoc.projectors.base import TypeResolution
from graphdoc.projectors.config import JsonRootType, JsonType, ProjectionConfig
from graphdoc.projectors.context import ProjectionContext
from graphdoc.projectors.report import ProjectionReport
from graphdoc.projectors.resolver import TypeResolver, resolve_graph

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProjectionResult:
    document: dict[str, Any]
    report: ProjectionReport


class ProjectionEngine:
    """Projects RDF graphs into documents through a Schema.

    Usage:
        engine = ProjectionEngine(Schema.load("schema.yaml"), ProjectionConfig())
        document = engine.project(graph, "http://example.org/p1")

    The engine holds no per-run state and can be shared across threads as
    long as the graphs it reads are not mutated concurrently.
    """

    def __init__(
        self,
        schema: Schema,
        config: ProjectionConfig | None = None,
        resolver: TypeResolution | None = None,
    ) -> None:
        self.schema = schema
        self.config = config or ProjectionConfig()
        # A custom resolver replaces the policy chosen by config.model_type
        self.resolver: TypeResolution = resolver or TypeResolver(schema, self.config.model_type)
        self.attribute_projector = AttributeProjector(self.config)

    def __call__(self, graph: Graph, root: str) -> dict[str, Any]:
        return self.project(graph, root)

    def project(self, graph: Graph, root: str) -> dict[str, Any]:
        """Project root and everything it references."""
        context = self._run(graph, root)
        if self.config.report_issues:
            self.log_report(ProjectionReport.from_context(context, str(root)))
        return context.document

    def project_with_report(self, graph: Graph, root: str) -> ProjectionResult:
        """Like project(), also returning diagnostics (always computed)."""
        context = self._run(graph, root)
        report = ProjectionReport.from_context(context, str(root))
        if self.config.report_issues:
            self.log_report(report)
        return ProjectionResult(document=context.document, report=report)

    def create_context(self, graph: Graph) -> ProjectionContext:
        return ProjectionContext(graph=graph, type_map=resolve_graph(graph, self.resolver))

    # -------------------------------------------------------------------------
    # Walk
    # -------------------------------------------------------------------------

    def _run(self, graph: Graph, root: str) -> ProjectionContext:
        context = self.create_context(graph)
        subject = URIRef(str(root))

        data: dict[str, Any] = {}
        self.project_instance(context, subject, data)
        context.document["data"] = data

        logger.debug(
            "projection.completed",
            root=str(subject),
            included=len(context.document["included"]),
            consumed_facts=len(context.consumed),
        )
        return context

    def project_instance(
        self, context: ProjectionContext, subject: Node, instance: dict[str, Any]
    ) -> None:
        """Project one node into instance, then its references into "included"."""
        if context.is_projected(subject):
            return

        projection_type = context.type_map.get(subject)
        if projection_type is None:
            raise TypeResolutionError("node has no resolvable type", node=str(subject))

        instance["uri"] = str(subject)
        self._set_type(instance, projection_type)
        self._set_root_type(instance, projection_type)

        # bookkeeping must happen before attributes, so cycles stop here
        context.mark_projected(subject)
        for type_uri in projection_type.type_uris:
            fact = (subject, RDF_TYPE, URIRef(type_uri))
            if fact in context.graph:
                context.consume(fact)

        for attribute in projection_type.attributes:
            references = self.attribute_projector.project(
                context, subject, projection_type, attribute, instance
            )
            for value in references:
                self._include(context, projection_type, attribute, value)

    def _include(
        self,
        context: ProjectionContext,
        projection_type: ProjectionType,
        attribute: Attribute,
        value: Node,
    ) -> None:
        if value not in context.type_map:
            # dangling: the reference stays, but nothing is included for it
            logger.warning(
                "projection.untyped_reference",
                type=projection_type.root_class_id,
                attribute=attribute.attribute_id,
                uri=str(value),
            )
            return

        if context.is_projected(value):
            return

        linked: dict[str, Any] = {}
        self.project_instance(context, value, linked)
        context.include(linked)

    def _set_type(self, instance: dict[str, Any], projection_type: ProjectionType) -> None:
        if self.config.json_type == JsonType.DISABLED:
            return

        if self.config.json_type == JsonType.ROOT:
            instance["type"] = projection_type.root_class_id
            return

        class_ids = projection_type.class_ids
        if len(class_ids) == 1:
            instance["type"] = class_ids[0]
        else:
            instance["type"] = list(class_ids)

    def _set_root_type(self, instance: dict[str, Any], projection_type: ProjectionType) -> None:
        if self.config.json_root_type == JsonRootType.ENABLED:
            instance["rootType"] = projection_type.root_class_id

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    def log_report(self, report: ProjectionReport) -> None:
        if report.missed_subjects:
            logger.warning(
                "projection.missed_subjects",
                root=report.root,
                missed=len(report.missed_subjects),
                total=report.typed_subject_count,
                subjects=list(report.missed_subjects),
            )
        if report.unconsumed_facts:
            logger.warning(
                "projection.unconsumed_facts",
                root=report.root,
                count=len(report.unconsumed_facts),
                turtle=report.unconsumed_turtle(),
            )
