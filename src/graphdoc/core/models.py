"""Core data models for the projection schema.

These models define the contract between components:
- Schema files are loaded into ProjectionTypes and Attributes
- The TypeResolver maps graph nodes onto ProjectionTypes
- The engine reads Attributes to decide what each node projects into
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class AttributeKind(str, Enum):
    """Whether an attribute's values are other typed nodes or literals."""

    REFERENCE = "reference"  # value is another typed node, projected into "included"
    DATA = "data"  # value is a literal (or a plain URI kept as data)


class Cardinality(str, Enum):
    SINGLE = "single"
    LIST = "list"


@dataclass(frozen=True)
class Attribute:
    """A predicate-bound field of a ProjectionType."""

    attribute_id: str
    predicate: str
    kind: AttributeKind
    cardinality: Cardinality = Cardinality.SINGLE

    # Inverse: the projected node is the object of the fact, not its subject
    inverse: bool = False

    @property
    def is_reference(self) -> bool:
        return self.kind == AttributeKind.REFERENCE

    @property
    def is_data(self) -> bool:
        return self.kind == AttributeKind.DATA

    @property
    def is_list(self) -> bool:
        return self.cardinality == Cardinality.LIST

    @property
    def is_single(self) -> bool:
        return self.cardinality == Cardinality.SINGLE


@dataclass(frozen=True)
class ProjectionType:
    """A schema-level classification of graph nodes.

    class_ids holds the root class followed by every supertype, so a Dog
    carries ("Dog", "Mammal", "Animal"). type_uris holds the rdf:type URIs
    that mark a node as a member, including those inherited from supertypes;
    own_type_uris only the ones declared on this type.
    """

    root_class_id: str
    class_ids: tuple[str, ...]
    type_uris: frozenset[str]
    own_type_uris: frozenset[str] = field(default_factory=frozenset)
    attributes: tuple[Attribute, ...] = ()

    def __post_init__(self) -> None:
        if not self.class_ids:
            raise ValueError(f"type {self.root_class_id!r} has no class ids")
        if not self.type_uris:
            raise ValueError(f"type {self.root_class_id!r} has no type uris")

    @property
    def is_composite(self) -> bool:
        """True for a union type synthesized from several schema types."""
        return not self.own_type_uris

    def get_attribute(self, attribute_id: str) -> Attribute | None:
        for attribute in self.attributes:
            if attribute.attribute_id == attribute_id:
                return attribute
        return None
