"""graphdoc CLI -- typer-based command interface.

Commands:
    graphdoc project run <graph> <uri>   Project a node into a document
    graphdoc inspect schema <schema>     List schema types and attributes
    graphdoc inspect types <graph>       Show resolved node types
"""

from __future__ import annotations

import typer

from graphdoc.cli import inspect_cmd, project
from graphdoc.observability import ObservabilityConfig, setup_logging

app = typer.Typer(
    name="graphdoc",
    help="Project typed RDF graphs into JSON documents through a schema.",
    no_args_is_help=True,
)

app.add_typer(project.app, name="project")
app.add_typer(inspect_cmd.app, name="inspect")


@app.callback()
def _setup(
    log_level: str = typer.Option(None, "--log-level", help="Override GRAPHDOC_LOG_LEVEL"),
) -> None:
    """Wire structured logging before any command runs."""
    config = ObservabilityConfig()
    if log_level:
        config.log_level = log_level
    setup_logging(config)


def main() -> None:
    """Entry point for the graphdoc CLI."""
    app()
