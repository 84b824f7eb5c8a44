"""JSONTarget -- serialize a projected document to a JSON string."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


@dataclass
class JSONTarget:
    """Serialize documents to JSON.

    Implements the DocumentTarget[str] protocol. Key order is kept as
    projected (uri, type, rootType, references, attributes).
    """

    indent: int | None = 2
    sort_keys: bool = False

    def serialize(self, document: dict[str, Any]) -> str:
        return json.dumps(
            document, indent=self.indent, sort_keys=self.sort_keys, ensure_ascii=False
        )
