"""
OWL Declarator: restores the missing declarations of an OWL ontology graph.

Takes the triples of an ontology, infers the kind of every resource used in
it (class, datatype, object/data/annotation property, individual,
restriction) and adds the rdf:type declarations a strict OWL 2 consumer
needs.
"""

__version__ = "0.1.0"

from owl_declarator.storage import Term, TermKind, Triple, GraphStore, FactStore
from owl_declarator.vocabulary import Vocabulary, DEFAULT_VOCABULARY, VOCABULARIES
from owl_declarator.config import DeclarationConfig, ConfigValidationError, load_config
from owl_declarator.declarations import (
    ManifestDeclarator,
    ReasonerDeclarator,
    OWLDeclarationTransform,
    DeclarationResult,
    TransformError,
    declare_missing,
)

__all__ = [
    "Term",
    "TermKind",
    "Triple",
    "GraphStore",
    "FactStore",
    "Vocabulary",
    "DEFAULT_VOCABULARY",
    "VOCABULARIES",
    "DeclarationConfig",
    "ConfigValidationError",
    "load_config",
    "ManifestDeclarator",
    "ReasonerDeclarator",
    "OWLDeclarationTransform",
    "DeclarationResult",
    "TransformError",
    "declare_missing",
]
