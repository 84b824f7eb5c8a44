"""Target registry -- register and retrieve document targets by name."""

from __future__ import annotations

from typing import Any

from graphdoc.projectors.base import DocumentTarget

_targets: dict[str, type] = {}


def reset() -> None:
    """Clear the registry. Use in test fixtures for isolation."""
    _targets.clear()


def register_target(name: str, cls: type) -> None:
    _targets[name] = cls


def get_target(name: str, **kwargs: Any) -> DocumentTarget:
    if name not in _targets:
        raise KeyError(f"Unknown document target: {name!r}. Available: {list(_targets)}")
    return _targets[name](**kwargs)


def available_targets() -> list[str]:
    return list(_targets)
