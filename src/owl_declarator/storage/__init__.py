"""
OWL Declarator Storage Layer.

Dictionary-encoded terms and an indexed in-memory triple store.
"""

from owl_declarator.storage.terms import (
    TermKind,
    TermId,
    TermDict,
    Term,
)
from owl_declarator.storage.facts import (
    Triple,
    GraphStore,
    FactStore,
)
from owl_declarator.storage.lists import (
    can_as_list,
    list_members,
)

__all__ = [
    "TermKind",
    "TermId",
    "TermDict",
    "Term",
    "Triple",
    "GraphStore",
    "FactStore",
    "can_as_list",
    "list_members",
]
