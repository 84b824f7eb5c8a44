"""graphdoc exceptions.

Fatal errors abort the whole projection: no partial document is returned.
Recoverable conditions (inverse attributes while unsupported, references to
untyped nodes) are logged instead and never raise.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class GraphdocError(Exception):
    """Base class for every error raised by graphdoc."""


class ConfigurationError(GraphdocError, ValueError):
    """Raised when a ProjectionConfig is malformed. Detected at construction."""


class SchemaError(GraphdocError, ValueError):
    """Raised when a schema document cannot be turned into ProjectionTypes."""


class ProjectionError(GraphdocError):
    """A fatal error during projection.

    Attributes:
        node: URI (or n3 form) of the node being projected, if known
        attribute: attribute id being projected, if known
        values: the offending values, rendered as n3 strings
    """

    def __init__(
        self,
        message: str,
        *,
        node: str | None = None,
        attribute: str | None = None,
        values: Iterable[Any] = (),
    ) -> None:
        self.message = message
        self.node = node
        self.attribute = attribute
        self.values = [_render(v) for v in values]
        super().__init__(self._format())

    def _format(self) -> str:
        parts = [self.message]
        if self.node is not None:
            parts.append(f"node={self.node}")
        if self.attribute is not None:
            parts.append(f"attribute={self.attribute}")
        if self.values:
            parts.append(f"values=[{', '.join(self.values)}]")
        return "; ".join(parts)


class TypeResolutionError(ProjectionError):
    """A node's rdf:type facts cannot be mapped onto a schema type."""


class SchemaIntegrityError(ProjectionError):
    """An attribute is neither a reference nor a data attribute."""


class CardinalityError(ProjectionError):
    """A single-valued attribute has zero or several values."""


class DuplicateLanguageError(CardinalityError):
    """A single-valued language string has two values for one language."""


class BlankNodeError(ProjectionError):
    """A blank node was found as an attribute value."""


class LiteralConversionError(ProjectionError):
    """A literal's datatype is unknown or its lexical form is ill-formed."""


def _render(value: Any) -> str:
    n3 = getattr(value, "n3", None)
    if callable(n3):
        return n3()
    return str(value)
