"""YAMLTarget -- serialize a projected document to a YAML string."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import yaml


@dataclass
class YAMLTarget:
    """Serialize documents to YAML.

    Implements the DocumentTarget[str] protocol.
    """

    def serialize(self, document: dict[str, Any]) -> str:
        return yaml.safe_dump(
            document, default_flow_style=False, sort_keys=False, allow_unicode=True
        )
