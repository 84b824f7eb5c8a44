"""Projection configuration: output-shape toggles, validated at construction.

Priority when loading: env var > YAML file > default.
Env vars use GRAPHDOC_{FIELD_NAME} convention (e.g. GRAPHDOC_JSON_TYPE=root).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from graphdoc.errors import ConfigurationError

_TRUTHY = {"1", "true", "on", "yes"}
_FALSY = {"0", "false", "off", "no"}


class JsonRootType(str, Enum):
    """Whether each node carries a "rootType" field with its most specific class."""

    ENABLED = "enabled"
    DISABLED = "disabled"


class JsonType(str, Enum):
    """How the "type" field is emitted.

    ALL emits every applicable class id (Dog, Mammal, Animal), ROOT only the
    root class id, DISABLED nothing (then rootType must be enabled).
    """

    ALL = "all"
    ROOT = "root"
    DISABLED = "disabled"


class ModelType(str, Enum):
    """How nodes carry their rdf:types in the graph, i.e. how they are resolved.

    ROOT: exactly one rdf:type per node, the root type.
    PROFILE: a subset of the hierarchy; the best matching type wins.
    ALL: the full hierarchy; all matching types are united.
    """

    ALL = "all"
    PROFILE = "profile"
    ROOT = "root"


_ENUM_FIELDS: dict[str, type[Enum]] = {
    "json_root_type": JsonRootType,
    "json_type": JsonType,
    "model_type": ModelType,
}
_BOOL_FIELDS = ("inverse_attributes_supported", "report_issues", "plain_literals_as_string")

_ENV_NAMES = {
    "json_root_type": "GRAPHDOC_JSON_ROOT_TYPE",
    "json_type": "GRAPHDOC_JSON_TYPE",
    "model_type": "GRAPHDOC_MODEL_TYPE",
    "inverse_attributes_supported": "GRAPHDOC_INVERSE_ATTRIBUTES",
    "report_issues": "GRAPHDOC_REPORT_ISSUES",
    "plain_literals_as_string": "GRAPHDOC_PLAIN_LITERALS_AS_STRING",
    "ignored_attributes": "GRAPHDOC_IGNORED_ATTRIBUTES",
}


def _coerce_enum(name: str, value: Any) -> Enum:
    enum_cls = _ENUM_FIELDS[name]
    if value is None:
        raise ConfigurationError(
            "Please configure all of 'json_root_type', 'json_type' and 'model_type'."
        )
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ConfigurationError(f"{name}: {value!r} is not one of {allowed}") from None


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ConfigurationError(f"{name}: {value!r} is not a boolean")


@dataclass(frozen=True)
class ProjectionConfig:
    json_root_type: JsonRootType = JsonRootType.DISABLED
    json_type: JsonType = JsonType.ALL
    model_type: ModelType = ModelType.ALL

    # Attribute ids skipped entirely (their facts stay unconsumed)
    ignored_attributes: frozenset[str] = field(default_factory=frozenset)

    inverse_attributes_supported: bool = False
    # Log unreached typed nodes and unconsumed facts after each run
    report_issues: bool = False
    # Read literals without datatype or language as xsd:string (RDF 1.1)
    plain_literals_as_string: bool = False

    def __post_init__(self) -> None:
        # Frozen: coerce through object.__setattr__
        for name in _ENUM_FIELDS:
            object.__setattr__(self, name, _coerce_enum(name, getattr(self, name)))
        for name in _BOOL_FIELDS:
            object.__setattr__(self, name, _coerce_bool(name, getattr(self, name)))
        if isinstance(self.ignored_attributes, str):
            raise ConfigurationError("ignored_attributes must be a collection of ids")
        object.__setattr__(self, "ignored_attributes", frozenset(self.ignored_attributes))

        if self.json_root_type == JsonRootType.DISABLED and self.json_type == JsonType.DISABLED:
            raise ConfigurationError("Please enable at least one of 'json_root_type' or 'json_type'.")

    @classmethod
    def load(cls, path: Path | None = None) -> ProjectionConfig:
        """Load configuration from a YAML file, then override with env vars."""
        file_values: dict[str, Any] = {}
        if path is not None:
            if not path.exists():
                raise ConfigurationError(f"configuration file not found: {path}")
            try:
                raw = yaml.safe_load(path.read_text()) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"could not parse configuration file {path}: {e}") from e
            if not isinstance(raw, dict):
                raise ConfigurationError(f"configuration file {path} must contain a mapping")
            known = {f.name for f in fields(cls)}
            unknown = sorted(set(raw) - known)
            if unknown:
                raise ConfigurationError(f"unknown configuration keys: {unknown}")
            file_values = raw

        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            env_key = _ENV_NAMES[f.name]
            if env_key in os.environ:
                kwargs[f.name] = os.environ[env_key]
            elif f.name in file_values:
                kwargs[f.name] = file_values[f.name]

        ignored = kwargs.get("ignored_attributes")
        if isinstance(ignored, str):
            kwargs["ignored_attributes"] = frozenset(
                v.strip() for v in ignored.split(",") if v.strip()
            )
        elif ignored is not None:
            kwargs["ignored_attributes"] = frozenset(str(v) for v in ignored)
        elif "ignored_attributes" in kwargs:
            kwargs["ignored_attributes"] = frozenset()
        return cls(**kwargs)

    def is_ignored(self, attribute_id: str) -> bool:
        return attribute_id in self.ignored_attributes

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, frozenset):
                value = sorted(value)
            d[f.name] = value
        return d
