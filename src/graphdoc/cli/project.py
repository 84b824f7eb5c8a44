"""CLI commands for projecting graph nodes into documents."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from graphdoc.cli._config import get_config
from graphdoc.cli._errors import graphdoc_errors
from graphdoc.cli._loading import load_projection_config, load_schema, read_graph
from graphdoc.projectors.engine import ProjectionEngine

app = typer.Typer(help="Project graph nodes into documents.")


def _write_output(result: str, output: Path | None, label: str) -> None:
    """Write string result to file or stdout."""
    if output:
        output.write_text(result)
        typer.echo(f"Wrote {label} to {output}")
    else:
        typer.echo(result)


@app.command()
@graphdoc_errors
def run(
    graph_file: Path = typer.Argument(..., help="RDF file holding the graph"),
    uri: str = typer.Argument(..., help="URI of the node to project"),
    schema: Path = typer.Option(None, "--schema", "-s", help="Schema YAML file"),
    config: Path = typer.Option(None, "--config", "-c", help="Projection config YAML file"),
    fmt: str = typer.Option(None, "--format", "-f", help="Output format: json or yaml"),
    rdf_format: str = typer.Option(None, "--rdf-format", help="rdflib parser name"),
    output: Path = typer.Option(None, "--output", "-o", help="Output file path"),
    report: bool = typer.Option(False, "--report", help="Print diagnostics to stderr"),
) -> None:
    """Project URI (and everything it references) from GRAPH_FILE."""
    from graphdoc.projectors import registry
    from graphdoc.projectors.targets import register_defaults

    register_defaults()
    target_name = fmt or get_config().output_format
    try:
        target = registry.get_target(target_name)
    except KeyError as e:
        raise typer.BadParameter(str(e.args[0]), param_hint="--format") from None

    engine = ProjectionEngine(load_schema(schema), load_projection_config(config))
    graph = read_graph(graph_file, rdf_format)

    result = engine.project_with_report(graph, uri)
    _write_output(target.serialize(result.document), output, f"{target_name} document")

    if report:
        typer.echo(json.dumps(result.report.to_dict(), indent=2), err=True)
