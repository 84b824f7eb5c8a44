"""Schema model, graph vocabulary and loading."""

from graphdoc.core.models import Attribute, AttributeKind, Cardinality, ProjectionType
from graphdoc.core.schema import Schema, TypeDeclaration

__all__ = [
    "Attribute",
    "AttributeKind",
    "Cardinality",
    "ProjectionType",
    "Schema",
    "TypeDeclaration",
]
