"""graphdoc: project typed RDF graphs into JSON documents through a schema."""

__version__ = "0.1.0"
