"""
rdflib bridge.

Moves triples between rdflib graphs and the engine's GraphStore, so that any
format rdflib reads (Turtle, RDF/XML, N-Triples, JSON-LD, ...) can be fed to
the declaration engine and the completed graph written back out.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import rdflib
from rdflib import BNode, Literal, URIRef
from rdflib.util import guess_format

from owl_declarator.storage.facts import FactStore, GraphStore, Triple
from owl_declarator.storage.terms import Term
from owl_declarator.vocabulary import OWL_NS, RDF_NS, RDFS_NS, SKOS_NS, SWRL_NS, XSD_NS

logger = logging.getLogger(__name__)

PREFIXES = {
    "rdf": RDF_NS,
    "rdfs": RDFS_NS,
    "owl": OWL_NS,
    "xsd": XSD_NS,
    "skos": SKOS_NS,
    "swrl": SWRL_NS,
}


def from_rdflib_term(node) -> Term:
    """Convert an rdflib node to a Term."""
    if isinstance(node, URIRef):
        return Term.iri(str(node))
    if isinstance(node, BNode):
        return Term.bnode(str(node))
    if isinstance(node, Literal):
        datatype = str(node.datatype) if node.datatype is not None else None
        return Term.literal(str(node), datatype, node.language)
    raise ValueError(f"Unsupported rdflib node: {node!r}")


def to_rdflib_term(term: Term):
    """Convert a Term to an rdflib node."""
    if term.is_iri:
        return URIRef(term.lex)
    if term.is_bnode:
        return BNode(term.lex)
    if term.lang:
        return Literal(term.lex, lang=term.lang)
    if term.datatype:
        return Literal(term.lex, datatype=URIRef(term.datatype))
    return Literal(term.lex)


def load_rdflib_graph(graph: rdflib.Graph, store: Optional[GraphStore] = None) -> GraphStore:
    """
    Copy every triple of an rdflib graph into a store.

    Args:
        graph: Source graph
        store: Target store; a new FactStore if None

    Returns:
        The target store
    """
    if store is None:
        store = FactStore()
    added = 0
    for s, p, o in graph:
        if store.add(Triple.of(from_rdflib_term(s), from_rdflib_term(p), from_rdflib_term(o))):
            added += 1
    logger.debug(f"Loaded {added} triples from rdflib graph")
    return store


def to_rdflib_graph(store: GraphStore) -> rdflib.Graph:
    """Copy the store into a new rdflib graph with the usual prefixes bound."""
    graph = rdflib.Graph()
    for prefix, ns in PREFIXES.items():
        graph.bind(prefix, ns)
    for t in store:
        graph.add((to_rdflib_term(t.subject), to_rdflib_term(t.predicate), to_rdflib_term(t.object)))
    return graph


def parse_file(path: Union[str, Path], format: Optional[str] = None,
               store: Optional[GraphStore] = None) -> GraphStore:
    """
    Parse an RDF file into a store.

    The format is guessed from the file extension when not given.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No such file: {path}")
    if format is None:
        format = guess_format(str(path)) or "turtle"
    graph = rdflib.Graph()
    graph.parse(str(path), format=format)
    logger.info(f"Parsed {len(graph)} triples from {path} ({format})")
    return load_rdflib_graph(graph, store)


def serialize(store: GraphStore, format: str = "turtle") -> str:
    """Serialize the store in any format rdflib writes."""
    return to_rdflib_graph(store).serialize(format=format)
