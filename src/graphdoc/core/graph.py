"""Graph vocabulary and loading.

The graph is a plain rdflib.Graph. This module names the fixed type tags
used in projected documents and loads graph files from disk.
"""

from __future__ import annotations

from pathlib import Path

from rdflib import RDF, XSD, Graph
from rdflib.term import Node

# A single (subject, predicate, object) statement
Fact = tuple[Node, Node, Node]

# Type tags: keys under which literal values land in "attributes"
LANG_STRING = "rdf:langString"
RESOURCE = "rdfs:Resource"
STRING = "xsd:string"
BOOLEAN = "xsd:boolean"
DATE = "xsd:date"
DATE_TIME = "xsd:dateTime"
INT = "xsd:int"
LONG = "xsd:long"
FLOAT = "xsd:float"
DOUBLE = "xsd:double"
ANY_URI = "xsd:anyURI"

RDF_TYPE = RDF.type
RDF_LANG_STRING = RDF.langString

# Datatype URI → type tag, for the datatypes with a fixed tag
DATATYPE_TAGS: dict[str, str] = {
    str(XSD.string): STRING,
    str(XSD.boolean): BOOLEAN,
    str(XSD.date): DATE,
    str(XSD.dateTime): DATE_TIME,
    str(XSD.int): INT,
    str(XSD.long): LONG,
    str(XSD.float): FLOAT,
    str(XSD.double): DOUBLE,
    str(XSD.anyURI): ANY_URI,
}

_SUFFIX_FORMATS = {
    ".ttl": "turtle",
    ".nt": "nt",
    ".n3": "n3",
    ".jsonld": "json-ld",
    ".json": "json-ld",
    ".rdf": "xml",
    ".xml": "xml",
    ".owl": "xml",
    ".trig": "trig",
    ".nq": "nquads",
}


def guess_format(path: Path) -> str:
    """Guess the rdflib parser name from a file suffix. Defaults to turtle."""
    return _SUFFIX_FORMATS.get(path.suffix.lower(), "turtle")


def load_graph(path: Path | str, fmt: str | None = None) -> Graph:
    """Parse an RDF file into a new Graph."""
    path = Path(path)
    graph = Graph()
    graph.parse(str(path), format=fmt or guess_format(path))
    return graph


def sort_key(node: Node) -> str:
    """Canonical ordering key for graph nodes, independent of insertion order."""
    return node.n3()
