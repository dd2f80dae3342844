"""
RDF I/O for the declaration engine, through rdflib.
"""

from owl_declarator.formats.rdflib_graph import (
    from_rdflib_term,
    to_rdflib_term,
    load_rdflib_graph,
    to_rdflib_graph,
    parse_file,
    serialize,
)

__all__ = [
    "from_rdflib_term",
    "to_rdflib_term",
    "load_rdflib_graph",
    "to_rdflib_graph",
    "parse_file",
    "serialize",
]
