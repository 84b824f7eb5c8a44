"""Attribute projection: one node × one attribute → document fields."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rdflib.term import BNode, Literal, Node, URIRef

from graphdoc.core import graph as vocab
from graphdoc.core.graph import sort_key
from graphdoc.core.models import Attribute, ProjectionType
from graphdoc.errors import (
    BlankNodeError,
    CardinalityError,
    DuplicateLanguageError,
    ProjectionError,
    SchemaIntegrityError,
)
from graphdoc.observability import get_logger
from graphdoc.projectors.config import ProjectionConfig
from graphdoc.projectors.context import ProjectionContext
from graphdoc.projectors.literals import LiteralValue, convert

logger = get_logger(__name__)


@dataclass(frozen=True)
class AttributeProjector:
    """Renders the values of one attribute into a node's document.

    Reference attributes land under "references" as URIs; data attributes
    under "attributes", keyed by type tag. Referenced nodes are returned to
    the caller, which decides whether to project them into "included".
    """

    config: ProjectionConfig

    def project(
        self,
        context: ProjectionContext,
        subject: Node,
        projection_type: ProjectionType,
        attribute: Attribute,
        instance: dict[str, Any],
    ) -> list[Node]:
        """Project attribute of subject into instance. Returns referenced nodes."""
        if self.config.is_ignored(attribute.attribute_id):
            return []

        values = self.get_values(context, subject, attribute)
        if not values:
            return []

        if attribute.inverse and not self.config.inverse_attributes_supported:
            logger.error(
                "projection.inverse_attribute_disabled",
                uri=str(subject),
                attribute=attribute.attribute_id,
                values=[v.n3() for v in values],
            )
            return []

        if attribute.is_reference:
            self._add_references(subject, attribute, values, instance)
            return values

        if attribute.is_data:
            self._add_attributes(subject, attribute, values, instance)
            return []

        raise SchemaIntegrityError(
            f"attribute is neither a reference nor data on type {projection_type.root_class_id}",
            node=str(subject),
            attribute=attribute.attribute_id,
        )

    def get_values(
        self, context: ProjectionContext, subject: Node, attribute: Attribute
    ) -> list[Node]:
        """Values of attribute for subject, in canonical order. Marks facts consumed."""
        predicate = URIRef(attribute.predicate)

        if attribute.inverse:
            pattern = (None, predicate, subject)
        else:
            pattern = (subject, predicate, None)

        values: list[Node] = []
        for fact in context.graph.triples(pattern):
            context.consume(fact)
            values.append(fact[0] if attribute.inverse else fact[2])
        return sorted(values, key=sort_key)

    # -------------------------------------------------------------------------
    # References
    # -------------------------------------------------------------------------

    def _add_references(
        self,
        subject: Node,
        attribute: Attribute,
        values: list[Node],
        instance: dict[str, Any],
    ) -> None:
        for value in values:
            if isinstance(value, BNode):
                raise BlankNodeError(
                    "blank nodes are not supported as references",
                    node=str(subject),
                    attribute=attribute.attribute_id,
                    values=[value],
                )
            if isinstance(value, Literal):
                raise ProjectionError(
                    "reference attribute must contain a resource",
                    node=str(subject),
                    attribute=attribute.attribute_id,
                    values=[value],
                )

        references = instance.setdefault("references", {})
        if attribute.is_list:
            references[attribute.attribute_id] = [str(v) for v in values]
            return

        if len(values) != 1:
            raise CardinalityError(
                f"single reference has {len(values)} values",
                node=str(subject),
                attribute=attribute.attribute_id,
                values=values,
            )
        references[attribute.attribute_id] = str(values[0])

    # -------------------------------------------------------------------------
    # Data
    # -------------------------------------------------------------------------

    def _add_attributes(
        self,
        subject: Node,
        attribute: Attribute,
        values: list[Node],
        instance: dict[str, Any],
    ) -> None:
        converted = [
            convert(
                v,
                plain_as_string=self.config.plain_literals_as_string,
                node=str(subject),
                attribute=attribute.attribute_id,
            )
            for v in values
        ]

        if attribute.is_single:
            field = self._single_field(subject, attribute, values, converted)
        else:
            field = self._list_field(converted)

        instance.setdefault("attributes", {})[attribute.attribute_id] = field

    def _single_field(
        self,
        subject: Node,
        attribute: Attribute,
        values: list[Node],
        converted: list[LiteralValue],
    ) -> dict[str, Any]:
        if len(converted) == 0:
            raise CardinalityError(
                "single attribute has no values", node=str(subject), attribute=attribute.attribute_id
            )

        if len(converted) > 1:
            # several values are only allowed as one language string per language
            if not all(c.is_language_string for c in converted):
                raise CardinalityError(
                    f"single attribute has {len(converted)} values",
                    node=str(subject),
                    attribute=attribute.attribute_id,
                    values=values,
                )
            languages: set[str] = set()
            for c in converted:
                if c.language in languages:
                    raise DuplicateLanguageError(
                        f"more than one language string for language {c.language!r}",
                        node=str(subject),
                        attribute=attribute.attribute_id,
                        values=[v for v in values if getattr(v, "language", None) == c.language],
                    )
                languages.add(c.language)

        field: dict[str, Any] = {}
        for c in converted:
            if c.is_language_string:
                field.setdefault(vocab.LANG_STRING, {})[c.language] = c.value
            else:
                field[c.tag] = c.value
        return field

    def _list_field(self, converted: list[LiteralValue]) -> dict[str, Any]:
        field: dict[str, Any] = {}
        for c in converted:
            if c.is_language_string:
                field.setdefault(vocab.LANG_STRING, {}).setdefault(c.language, []).append(c.value)
            else:
                field.setdefault(c.tag, []).append(c.value)
        return field
