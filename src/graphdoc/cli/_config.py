"""CLI configuration via environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _path_env(var: str) -> Path | None:
    raw = os.environ.get(var)
    return Path(raw).expanduser() if raw else None


@dataclass
class GraphdocConfig:
    """Configuration for the graphdoc CLI.

    Reads from environment variables with GRAPHDOC_ prefix. Command-line
    options win over these.
    """

    # Default schema file, used when --schema is not given
    schema_path: Path | None = field(default_factory=lambda: _path_env("GRAPHDOC_SCHEMA"))

    # Default projection config file, used when --config is not given
    config_path: Path | None = field(default_factory=lambda: _path_env("GRAPHDOC_CONFIG"))

    # Default output format for `project run`
    output_format: str = field(
        default_factory=lambda: os.environ.get("GRAPHDOC_OUTPUT_FORMAT", "json")
    )

    def resolve_schema(self, option: Path | None) -> Path | None:
        return option or self.schema_path

    def resolve_config(self, option: Path | None) -> Path | None:
        return option or self.config_path


def get_config() -> GraphdocConfig:
    """Get the current configuration."""
    return GraphdocConfig()
