"""Projectors -- turn typed RDF graphs into documents.

Core abstractions:
- ProjectionConfig: output-shape toggles, validated at construction
- TypeResolver: node → schema type, for a whole graph
- AttributeProjector: one node × one attribute → document fields
- ProjectionEngine: orchestrates the walk, returns {"data", "included"}
- DocumentTarget: serializes documents (json, yaml)
"""

from graphdoc.projectors.attributes import AttributeProjector
from graphdoc.projectors.base import DocumentTarget, TypeResolution
from graphdoc.projectors.config import JsonRootType, JsonType, ModelType, ProjectionConfig
from graphdoc.projectors.engine import ProjectionEngine, ProjectionResult
from graphdoc.projectors.report import ProjectionReport
from graphdoc.projectors.resolver import TypeResolver

__all__ = [
    "AttributeProjector",
    "DocumentTarget",
    "JsonRootType",
    "JsonType",
    "ModelType",
    "ProjectionConfig",
    "ProjectionEngine",
    "ProjectionReport",
    "ProjectionResult",
    "TypeResolution",
    "TypeResolver",
]
