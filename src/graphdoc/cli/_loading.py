"""Shared loading of schema, configuration and graph for CLI commands."""

from __future__ import annotations

from pathlib import Path

from rdflib import Graph

from graphdoc.cli._config import get_config
from graphdoc.cli._errors import handle_error
from graphdoc.core.graph import load_graph
from graphdoc.core.schema import Schema
from graphdoc.errors import GraphdocError
from graphdoc.projectors.config import ProjectionConfig


def load_schema(schema: Path | None) -> Schema:
    path = get_config().resolve_schema(schema)
    if path is None:
        handle_error("no schema given: use --schema or set GRAPHDOC_SCHEMA")
    return Schema.load(path)


def load_projection_config(config: Path | None) -> ProjectionConfig:
    return ProjectionConfig.load(get_config().resolve_config(config))


def read_graph(path: Path, fmt: str | None) -> Graph:
    try:
        return load_graph(path, fmt)
    except FileNotFoundError:
        raise
    except Exception as e:
        # rdflib raises parser-specific exceptions
        raise GraphdocError(f"could not parse graph file {path}: {e}") from e
