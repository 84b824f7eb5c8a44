"""Document targets: JSON and YAML, registered by name."""

from graphdoc.projectors import registry
from graphdoc.projectors.targets.json_target import JSONTarget
from graphdoc.projectors.targets.yaml_target import YAMLTarget


def register_defaults() -> None:
    """(Re-)register the built-in targets. Idempotent."""
    registry.register_target("json", JSONTarget)
    registry.register_target("yaml", YAMLTarget)


register_defaults()

__all__ = ["JSONTarget", "YAMLTarget", "register_defaults"]
