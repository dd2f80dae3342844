"""
RDF collection helpers.

An RDF list is a chain of nodes linked by rdf:rest, each carrying one
rdf:first member, and terminated by rdf:nil.
"""

from typing import List, Optional, Set

from owl_declarator.storage.facts import GraphStore
from owl_declarator.storage.terms import Term, TermKind
from owl_declarator.vocabulary import RDF_FIRST, RDF_NIL, RDF_REST


def can_as_list(store: GraphStore, node: Term) -> bool:
    """
    Check that the node heads a well-formed RDF list.

    Well-formed means: every cell has exactly one rdf:first and one rdf:rest,
    the chain reaches rdf:nil, and no cell is visited twice.
    """
    return _walk(store, node) is not None


def list_members(store: GraphStore, node: Term) -> List[Term]:
    """
    Members of the list headed by node, in order.

    Returns an empty list for rdf:nil and for anything that is not a
    well-formed list.
    """
    members = _walk(store, node)
    return members if members is not None else []


def _walk(store: GraphStore, node: Term) -> Optional[List[Term]]:
    if node.kind == TermKind.LITERAL:
        return None
    items: List[Term] = []
    visited: Set[Term] = set()  # Prevent infinite loops
    current = node
    while current != RDF_NIL:
        if current.kind == TermKind.LITERAL or current in visited:
            return None
        visited.add(current)
        first = store.find(current, RDF_FIRST, None)
        rest = store.find(current, RDF_REST, None)
        if len(first) != 1 or len(rest) != 1:
            return None
        items.append(first[0].object)
        current = rest[0].object
    return items
