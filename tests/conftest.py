"""Shared fixtures: a small people-and-pets schema and graph builders."""

from __future__ import annotations

import logging
import os

import pytest
from rdflib import RDF, XSD, Graph, Literal, Namespace

from graphdoc.core.models import Attribute, AttributeKind, Cardinality
from graphdoc.core.schema import Schema, TypeDeclaration
from graphdoc.projectors import registry
from graphdoc.projectors.targets import register_defaults

EX = Namespace("http://example.org/")


# =============================================================================
# Helpers
# =============================================================================


def data(attribute_id: str, predicate: str, cardinality: Cardinality = Cardinality.SINGLE) -> Attribute:
    return Attribute(attribute_id, str(EX[predicate]), AttributeKind.DATA, cardinality)


def ref(
    attribute_id: str,
    predicate: str,
    cardinality: Cardinality = Cardinality.SINGLE,
    inverse: bool = False,
) -> Attribute:
    return Attribute(attribute_id, str(EX[predicate]), AttributeKind.REFERENCE, cardinality, inverse)


def person_graph(*uris: str) -> Graph:
    """A graph where each uri is typed ex:Person."""
    g = Graph()
    for uri in uris:
        g.add((EX[uri], RDF.type, EX.Person))
    return g


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def person_schema() -> Schema:
    """Person with a name, a single friend, a list of pets and an inverse owner."""
    return Schema.from_declarations(
        [
            TypeDeclaration(
                class_id="Person",
                type_uris=(str(EX.Person),),
                attributes=(
                    data("name", "name"),
                    data("nickname", "nickname", Cardinality.LIST),
                    ref("friend", "friend"),
                    ref("knows", "knows", Cardinality.LIST),
                    ref("pets", "owns", Cardinality.LIST),
                ),
            ),
            TypeDeclaration(
                class_id="Animal",
                type_uris=(str(EX.Animal),),
                attributes=(data("name", "name"),),
            ),
            TypeDeclaration(
                class_id="Dog",
                type_uris=(str(EX.Dog),),
                superclasses=("Animal",),
                attributes=(ref("ownedBy", "owns", inverse=True),),
            ),
        ]
    )


@pytest.fixture
def ann_graph() -> Graph:
    g = person_graph("P1")
    g.add((EX.P1, EX.name, Literal("Ann", datatype=XSD.string)))
    return g


@pytest.fixture(autouse=True)
def _isolate_logging_and_registry():
    """Drop CLI-installed log handlers and restore the default targets."""
    root = logging.getLogger()
    level = root.level
    yield
    root.handlers = [h for h in root.handlers if not getattr(h, "_graphdoc_managed", False)]
    root.setLevel(level)
    registry.reset()
    register_defaults()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep GRAPHDOC_* variables from the calling shell out of every test."""
    for key in list(os.environ):
        if key.startswith("GRAPHDOC_"):
            monkeypatch.delenv(key)
