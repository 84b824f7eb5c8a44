"""Schema: the set of ProjectionTypes a graph is projected through.

A schema is declared as plain data (usually YAML):

    prefixes:
      ex: http://example.org/
    types:
      Person:
        type: ex:Person
        superclasses: [Agent]
        attributes:
          name: {predicate: ex:name, kind: data}
          friend: {predicate: ex:friend, kind: reference, cardinality: list}
          ownedBy: {predicate: ex:owns, kind: reference, inverse: true}

Declarations are expanded once: each type inherits the class ids, type
URIs and attributes of its supertypes. The resulting Schema is read-only and
answers the three type-resolution questions the TypeResolver asks.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from graphdoc.core.models import Attribute, AttributeKind, Cardinality, ProjectionType
from graphdoc.errors import SchemaError

DEFAULT_PREFIXES: dict[str, str] = {
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
    "owl": "http://www.w3.org/2002/07/owl#",
}


@dataclass(frozen=True)
class TypeDeclaration:
    """A type as written in a schema file, before inheritance is expanded."""

    class_id: str
    type_uris: tuple[str, ...]
    superclasses: tuple[str, ...] = ()
    attributes: tuple[Attribute, ...] = ()


def _specificity(t: ProjectionType, uris: frozenset[str]) -> tuple[int, int, str]:
    # Lower sorts first: most class ids, then most overlap, then by id
    return (-len(t.class_ids), -len(t.type_uris & uris), t.root_class_id)


class Schema:
    """Read-only lookup over expanded ProjectionTypes."""

    def __init__(self, types: Iterable[ProjectionType]) -> None:
        self._types: dict[str, ProjectionType] = {}
        self._by_type_uri: dict[str, ProjectionType] = {}

        for t in types:
            if t.root_class_id in self._types:
                raise SchemaError(f"duplicate type {t.root_class_id!r}")
            self._types[t.root_class_id] = t

            for uri in t.own_type_uris or t.type_uris:
                other = self._by_type_uri.get(uri)
                if other is not None:
                    raise SchemaError(
                        f"type uri {uri!r} is declared by both "
                        f"{other.root_class_id!r} and {t.root_class_id!r}"
                    )
                self._by_type_uri[uri] = t

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_declarations(cls, declarations: Iterable[TypeDeclaration]) -> Schema:
        """Expand supertypes of every declaration and build a Schema."""
        declared = {}
        for d in declarations:
            if d.class_id in declared:
                raise SchemaError(f"duplicate type {d.class_id!r}")
            if not d.type_uris:
                raise SchemaError(f"type {d.class_id!r} declares no type uri")
            declared[d.class_id] = d

        return cls(_expand(declared[class_id], declared) for class_id in declared)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Schema:
        """Build a Schema from its plain-data form (see module docstring)."""
        if not isinstance(data, Mapping):
            raise SchemaError("schema document must be a mapping")

        prefixes = dict(DEFAULT_PREFIXES)
        prefixes.update(data.get("prefixes") or {})

        raw_types = data.get("types")
        if not isinstance(raw_types, Mapping) or not raw_types:
            raise SchemaError("schema document has no 'types' mapping")

        return cls.from_declarations(
            _parse_type(class_id, body or {}, prefixes)
            for class_id, body in raw_types.items()
        )

    @classmethod
    def load(cls, path: Path | str) -> Schema:
        """Load a Schema from a YAML (or JSON) file."""
        path = Path(path)
        try:
            data = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise SchemaError(f"could not parse schema file {path}: {e}") from e
        return cls.from_dict(data or {})

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    @property
    def types(self) -> list[ProjectionType]:
        return list(self._types.values())

    def get_type(self, class_id: str) -> ProjectionType | None:
        return self._types.get(class_id)

    def __contains__(self, class_id: object) -> bool:
        return class_id in self._types

    def __len__(self) -> int:
        return len(self._types)

    # -------------------------------------------------------------------------
    # Type resolution
    # -------------------------------------------------------------------------

    def type_for_uri(self, type_uri: str) -> ProjectionType | None:
        """The type that declares type_uri as its own rdf:type, if any."""
        return self._by_type_uri.get(type_uri)

    def matching_types(self, type_uris: Iterable[str]) -> list[ProjectionType]:
        """Every type declaring one of type_uris, most specific first."""
        uris = frozenset(type_uris)
        matched = {
            self._by_type_uri[u].root_class_id: self._by_type_uri[u]
            for u in uris
            if u in self._by_type_uri
        }
        return sorted(matched.values(), key=lambda t: _specificity(t, uris))

    def best_matching_type(self, type_uris: Iterable[str]) -> ProjectionType | None:
        """The most specific type matching a node's rdf:types.

        Specificity is the number of class ids (deeper in the hierarchy wins),
        then the overlap between the type's URIs and the node's, then the
        root class id so the choice never depends on set iteration order.
        """
        matched = self.matching_types(type_uris)
        return matched[0] if matched else None

    def union_type(self, type_uris: Iterable[str]) -> ProjectionType | None:
        """A type exposing everything implied by all of a node's rdf:types.

        When the most specific match already covers the others (the usual
        case of a node typed with its class and all its superclasses) that
        type is returned as is. Otherwise a composite type is synthesized.
        """
        matched = self.matching_types(type_uris)
        if not matched:
            return None

        primary, others = matched[0], matched[1:]
        covered = set(primary.class_ids)
        if all(covered.issuperset(t.class_ids) for t in others):
            return primary

        class_ids = list(primary.class_ids)
        attributes = list(primary.attributes)
        seen_attributes = {a.attribute_id for a in attributes}
        type_uris_union = set(primary.type_uris)
        for t in others:
            class_ids.extend(c for c in t.class_ids if c not in covered)
            covered.update(t.class_ids)
            type_uris_union.update(t.type_uris)
            for a in t.attributes:
                if a.attribute_id not in seen_attributes:
                    seen_attributes.add(a.attribute_id)
                    attributes.append(a)

        return ProjectionType(
            root_class_id=primary.root_class_id,
            class_ids=tuple(class_ids),
            type_uris=frozenset(type_uris_union),
            attributes=tuple(attributes),
        )


# =============================================================================
# Declaration expansion
# =============================================================================


def _ancestry(class_id: str, declared: Mapping[str, TypeDeclaration]) -> list[str]:
    """class_id followed by all its supertypes, breadth first, no repeats."""
    order = [class_id]
    queue = [class_id]
    while queue:
        current = queue.pop(0)
        for parent in declared[current].superclasses:
            if parent not in declared:
                raise SchemaError(f"type {current!r} extends unknown type {parent!r}")
            if parent == class_id:
                raise SchemaError(f"type {class_id!r} is its own supertype")
            if parent not in order:
                order.append(parent)
                queue.append(parent)
    return order


def _expand(d: TypeDeclaration, declared: Mapping[str, TypeDeclaration]) -> ProjectionType:
    class_ids = _ancestry(d.class_id, declared)

    type_uris: set[str] = set()
    attributes: list[Attribute] = []
    seen: set[str] = set()
    for class_id in class_ids:
        ancestor = declared[class_id]
        type_uris.update(ancestor.type_uris)
        for a in ancestor.attributes:
            if a.attribute_id not in seen:
                seen.add(a.attribute_id)
                attributes.append(a)

    return ProjectionType(
        root_class_id=d.class_id,
        class_ids=tuple(class_ids),
        type_uris=frozenset(type_uris),
        own_type_uris=frozenset(d.type_uris),
        attributes=tuple(attributes),
    )


# =============================================================================
# Plain-data parsing
# =============================================================================


def expand_curie(value: str, prefixes: Mapping[str, str]) -> str:
    """Expand 'ex:Person' through prefixes. Full URIs pass through unchanged."""
    prefix, sep, local = value.partition(":")
    if sep and prefix in prefixes and not local.startswith("//"):
        return prefixes[prefix] + local
    return value


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _parse_enum(enum_cls: type, raw: Any, where: str) -> Any:
    try:
        return enum_cls(str(raw).lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise SchemaError(f"{where}: {raw!r} is not one of {allowed}") from None


def _parse_attribute(
    class_id: str, attribute_id: str, body: Any, prefixes: Mapping[str, str]
) -> Attribute:
    where = f"{class_id}.{attribute_id}"
    if not isinstance(body, Mapping):
        raise SchemaError(f"{where}: attribute must be a mapping")
    if "predicate" not in body:
        raise SchemaError(f"{where}: missing 'predicate'")
    if "kind" not in body:
        raise SchemaError(f"{where}: missing 'kind'")

    return Attribute(
        attribute_id=str(attribute_id),
        predicate=expand_curie(str(body["predicate"]), prefixes),
        kind=_parse_enum(AttributeKind, body["kind"], where),
        cardinality=_parse_enum(Cardinality, body.get("cardinality", "single"), where),
        inverse=bool(body.get("inverse", False)),
    )


def _parse_type(class_id: str, body: Any, prefixes: Mapping[str, str]) -> TypeDeclaration:
    if not isinstance(body, Mapping):
        raise SchemaError(f"{class_id}: type must be a mapping")

    type_uris = [expand_curie(str(u), prefixes) for u in _as_list(body.get("type"))]
    raw_attributes = body.get("attributes") or {}
    if not isinstance(raw_attributes, Mapping):
        raise SchemaError(f"{class_id}: 'attributes' must be a mapping")

    return TypeDeclaration(
        class_id=str(class_id),
        type_uris=tuple(type_uris),
        superclasses=tuple(str(s) for s in _as_list(body.get("superclasses"))),
        attributes=tuple(
            _parse_attribute(class_id, attribute_id, attribute_body, prefixes)
            for attribute_id, attribute_body in raw_attributes.items()
        ),
    )
