"""Tests for the schema model: declarations, inheritance, YAML loading, lookup."""

from __future__ import annotations

import pytest
from conftest import EX, data, ref

from graphdoc.core.models import Attribute, AttributeKind, Cardinality, ProjectionType
from graphdoc.core.schema import Schema, TypeDeclaration, expand_curie
from graphdoc.errors import SchemaError

# -------------------------------------------------------------------------
# Models
# -------------------------------------------------------------------------


class TestAttribute:
    def test_defaults(self):
        a = Attribute("name", str(EX.name), AttributeKind.DATA)
        assert a.is_single
        assert not a.is_list
        assert a.is_data
        assert not a.is_reference
        assert a.inverse is False

    def test_reference_list(self):
        a = ref("pets", "owns", Cardinality.LIST)
        assert a.is_reference
        assert a.is_list

    def test_frozen(self):
        a = data("name", "name")
        with pytest.raises(AttributeError):
            a.attribute_id = "other"  # type: ignore[misc]


class TestProjectionType:
    def test_requires_class_ids(self):
        with pytest.raises(ValueError):
            ProjectionType(root_class_id="X", class_ids=(), type_uris=frozenset({"u"}))

    def test_requires_type_uris(self):
        with pytest.raises(ValueError):
            ProjectionType(root_class_id="X", class_ids=("X",), type_uris=frozenset())

    def test_get_attribute(self, person_schema):
        person = person_schema.get_type("Person")
        assert person.get_attribute("friend").is_reference
        assert person.get_attribute("missing") is None


# -------------------------------------------------------------------------
# Inheritance
# -------------------------------------------------------------------------


class TestInheritance:
    def test_class_ids_root_first(self, person_schema):
        dog = person_schema.get_type("Dog")
        assert dog.class_ids == ("Dog", "Animal")

    def test_type_uris_include_supertypes(self, person_schema):
        dog = person_schema.get_type("Dog")
        assert dog.type_uris == {str(EX.Dog), str(EX.Animal)}
        assert dog.own_type_uris == {str(EX.Dog)}

    def test_attributes_inherited_after_own(self, person_schema):
        dog = person_schema.get_type("Dog")
        assert [a.attribute_id for a in dog.attributes] == ["ownedBy", "name"]

    def test_own_attribute_overrides_inherited(self):
        schema = Schema.from_declarations(
            [
                TypeDeclaration("Base", (str(EX.Base),), attributes=(data("label", "label"),)),
                TypeDeclaration(
                    "Sub",
                    (str(EX.Sub),),
                    superclasses=("Base",),
                    attributes=(data("label", "subLabel"),),
                ),
            ]
        )
        sub = schema.get_type("Sub")
        assert len(sub.attributes) == 1
        assert sub.attributes[0].predicate == str(EX.subLabel)

    def test_diamond_hierarchy_lists_each_class_once(self):
        schema = Schema.from_declarations(
            [
                TypeDeclaration("Top", (str(EX.Top),)),
                TypeDeclaration("Left", (str(EX.Left),), superclasses=("Top",)),
                TypeDeclaration("Right", (str(EX.Right),), superclasses=("Top",)),
                TypeDeclaration("Bottom", (str(EX.Bottom),), superclasses=("Left", "Right")),
            ]
        )
        assert schema.get_type("Bottom").class_ids == ("Bottom", "Left", "Right", "Top")

    def test_unknown_superclass(self):
        with pytest.raises(SchemaError, match="unknown type"):
            Schema.from_declarations(
                [TypeDeclaration("Dog", (str(EX.Dog),), superclasses=("Ghost",))]
            )

    def test_cycle(self):
        with pytest.raises(SchemaError, match="own supertype"):
            Schema.from_declarations(
                [
                    TypeDeclaration("A", (str(EX.A),), superclasses=("B",)),
                    TypeDeclaration("B", (str(EX.B),), superclasses=("A",)),
                ]
            )

    def test_duplicate_type_uri(self):
        with pytest.raises(SchemaError, match="declared by both"):
            Schema.from_declarations(
                [
                    TypeDeclaration("A", (str(EX.Thing),)),
                    TypeDeclaration("B", (str(EX.Thing),)),
                ]
            )

    def test_declaration_without_type_uri(self):
        with pytest.raises(SchemaError, match="no type uri"):
            Schema.from_declarations([TypeDeclaration("A", ())])


# -------------------------------------------------------------------------
# Resolution lookups
# -------------------------------------------------------------------------


class TestLookup:
    def test_type_for_uri(self, person_schema):
        assert person_schema.type_for_uri(str(EX.Dog)).root_class_id == "Dog"
        assert person_schema.type_for_uri(str(EX.Cat)) is None

    def test_best_match_prefers_most_specific(self, person_schema):
        best = person_schema.best_matching_type({str(EX.Animal), str(EX.Dog)})
        assert best.root_class_id == "Dog"

    def test_best_match_ignores_unknown_uris(self, person_schema):
        best = person_schema.best_matching_type({str(EX.Animal), str(EX.Unknown)})
        assert best.root_class_id == "Animal"

    def test_best_match_none(self, person_schema):
        assert person_schema.best_matching_type({str(EX.Unknown)}) is None

    def test_union_returns_covering_type(self, person_schema):
        union = person_schema.union_type({str(EX.Dog), str(EX.Animal)})
        assert union is person_schema.get_type("Dog")

    def test_union_synthesizes_composite(self, person_schema):
        union = person_schema.union_type({str(EX.Dog), str(EX.Person)})
        assert union.is_composite
        # Dog is deeper than Person, so it leads the composite
        assert union.root_class_id == "Dog"
        assert union.class_ids == ("Dog", "Animal", "Person")
        assert str(EX.Person) in union.type_uris
        ids = [a.attribute_id for a in union.attributes]
        assert ids[:2] == ["ownedBy", "name"]
        assert "friend" in ids
        assert ids.count("name") == 1

    def test_union_none(self, person_schema):
        assert person_schema.union_type(set()) is None


# -------------------------------------------------------------------------
# Plain data / YAML
# -------------------------------------------------------------------------

SCHEMA_YAML = """
prefixes:
  ex: http://example.org/
types:
  Agent:
    type: ex:Agent
    attributes:
      name: {predicate: ex:name, kind: data}
  Person:
    type: [ex:Person]
    superclasses: [Agent]
    attributes:
      friends:
        predicate: ex:friend
        kind: reference
        cardinality: list
      ownedBy:
        predicate: http://example.org/owns
        kind: Reference
        inverse: true
"""


class TestFromDict:
    def test_load_yaml(self, tmp_path):
        path = tmp_path / "schema.yaml"
        path.write_text(SCHEMA_YAML)
        schema = Schema.load(path)

        assert len(schema) == 2
        assert "Person" in schema
        person = schema.get_type("Person")
        assert person.class_ids == ("Person", "Agent")
        friends = person.get_attribute("friends")
        assert friends.predicate == str(EX.friend)
        assert friends.is_list and friends.is_reference
        owned_by = person.get_attribute("ownedBy")
        assert owned_by.inverse
        assert owned_by.predicate == str(EX.owns)
        assert person.get_attribute("name").is_single

    def test_default_prefixes(self):
        schema = Schema.from_dict(
            {"types": {"Label": {"type": "rdfs:Class", "attributes": {"l": {"predicate": "rdfs:label", "kind": "data"}}}}}
        )
        assert schema.type_for_uri("http://www.w3.org/2000/01/rdf-schema#Class") is not None

    def test_missing_types(self):
        with pytest.raises(SchemaError, match="no 'types'"):
            Schema.from_dict({"prefixes": {}})

    def test_not_a_mapping(self):
        with pytest.raises(SchemaError):
            Schema.from_dict(["nope"])  # type: ignore[arg-type]

    def test_missing_predicate(self):
        with pytest.raises(SchemaError, match="missing 'predicate'"):
            Schema.from_dict({"types": {"A": {"type": "urn:a", "attributes": {"x": {"kind": "data"}}}}})

    def test_bad_kind(self):
        with pytest.raises(SchemaError, match="is not one of"):
            Schema.from_dict(
                {"types": {"A": {"type": "urn:a", "attributes": {"x": {"predicate": "urn:p", "kind": "both"}}}}}
            )

    def test_bad_cardinality(self):
        with pytest.raises(SchemaError, match="is not one of"):
            Schema.from_dict(
                {
                    "types": {
                        "A": {
                            "type": "urn:a",
                            "attributes": {"x": {"predicate": "urn:p", "kind": "data", "cardinality": "many"}},
                        }
                    }
                }
            )

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "schema.yaml"
        path.write_text("types: [unclosed")
        with pytest.raises(SchemaError, match="could not parse"):
            Schema.load(path)


class TestExpandCurie:
    def test_expands_known_prefix(self):
        assert expand_curie("ex:Person", {"ex": "http://example.org/"}) == "http://example.org/Person"

    def test_full_uri_unchanged(self):
        assert expand_curie("http://example.org/x", {"http": "nope"}) == "http://example.org/x"

    def test_unknown_prefix_unchanged(self):
        assert expand_curie("foo:bar", {}) == "foo:bar"
