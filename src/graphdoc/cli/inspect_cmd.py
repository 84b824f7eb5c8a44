"""CLI commands for inspecting schemas and resolved graph types."""

from __future__ import annotations

from pathlib import Path

import typer

from graphdoc.cli._errors import graphdoc_errors
from graphdoc.cli._loading import load_projection_config, load_schema, read_graph
from graphdoc.projectors.resolver import TypeResolver

app = typer.Typer(help="Inspect schemas and how a graph resolves against them.")


@app.command()
@graphdoc_errors
def schema(
    schema_file: Path = typer.Argument(None, help="Schema YAML file"),
) -> None:
    """List schema types with their class ids and attributes."""
    loaded = load_schema(schema_file)
    if not len(loaded):
        typer.echo("No types found.")
        return

    for t in loaded.types:
        typer.echo(f"{t.root_class_id}  [{', '.join(t.class_ids)}]")
        for uri in sorted(t.type_uris):
            typer.echo(f"  a {uri}")
        for a in t.attributes:
            flags = [a.kind.value, a.cardinality.value]
            if a.inverse:
                flags.append("inverse")
            typer.echo(f"  {a.attribute_id:<20} {a.predicate}  ({', '.join(flags)})")


@app.command()
@graphdoc_errors
def types(
    graph_file: Path = typer.Argument(..., help="RDF file holding the graph"),
    schema: Path = typer.Option(None, "--schema", "-s", help="Schema YAML file"),
    config: Path = typer.Option(None, "--config", "-c", help="Projection config YAML file"),
    rdf_format: str = typer.Option(None, "--rdf-format", help="rdflib parser name"),
) -> None:
    """Show which schema type every typed node of GRAPH_FILE resolves to."""
    projection_config = load_projection_config(config)
    resolver = TypeResolver(load_schema(schema), projection_config.model_type)
    type_map = resolver.resolve_graph(read_graph(graph_file, rdf_format))
    if not type_map:
        typer.echo("No typed nodes resolved.")
        return

    for node in sorted(type_map, key=str):
        typer.echo(f"{node}  {type_map[node].root_class_id}")
