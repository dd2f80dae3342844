"""
Graph Transform Base.

A transform is a unit of work performed on a triple store before the graph
is handed to a strict consumer: restoring missed declarations, removing RDFS
garbage and so on. Every transform works against an explicit GraphStore and
an explicit Vocabulary; neither is ever looked up globally.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence

from owl_declarator.storage.facts import GraphStore, Triple
from owl_declarator.storage.terms import Term
from owl_declarator.vocabulary import DEFAULT_VOCABULARY, RDF_TYPE, Vocabulary

logger = logging.getLogger(__name__)


class TransformError(Exception):
    """Raised when a transform cannot complete."""

    def __init__(self, transform: str, message: str):
        self.transform = transform
        super().__init__(f"[{transform}] {message}")


class Transform(ABC):
    """
    Base class for graph transforms.

    Subclasses implement perform(); callers use process(), which runs the
    transform only if test() agrees and returns the triples it could not
    handle.
    """

    def __init__(self, store: GraphStore, vocabulary: Optional[Vocabulary] = None):
        if store is None:
            raise ValueError("Null graph store.")
        self._store = store
        self._vocabulary = vocabulary if vocabulary is not None else DEFAULT_VOCABULARY

    @property
    def store(self) -> GraphStore:
        return self._store

    @property
    def vocabulary(self) -> Vocabulary:
        return self._vocabulary

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def perform(self) -> None:
        """Performs the graph transformation."""

    def test(self) -> bool:
        """Decides whether the transformation is needed."""
        return True

    def process(self) -> List[Triple]:
        """
        Run the transform if it is applicable.

        Returns:
            Triples the transform was not able to handle
        """
        if self.test():
            logger.debug(f"Process {self.name} on store with {len(self._store)} triples")
            try:
                self.perform()
            except TransformError:
                raise
            except Exception as e:
                raise TransformError(self.name, str(e)) from e
        return list(self.uncertain_triples())

    def uncertain_triples(self) -> Sequence[Triple]:
        """Triples found while processing that could not be handled."""
        return ()

    # -------------------------------------------------------------------------
    # Graph helpers
    # -------------------------------------------------------------------------

    def statements(
        self,
        subject: Optional[Term] = None,
        predicate: Optional[Term] = None,
        obj: Optional[Term] = None,
    ) -> List[Triple]:
        """Sorted snapshot of the matching triples; safe to mutate the store while iterating."""
        return sorted(self._store.find(subject, predicate, obj), key=Triple.sort_key)

    def object_resource(self, subject: Term, predicate: Term) -> Optional[Term]:
        """The first object of (subject, predicate) if it is an IRI or blank node."""
        obj = self._store.first_object(subject, predicate)
        return obj if obj is not None and obj.is_resource else None

    def object_literal(self, subject: Term, predicate: Term) -> Optional[Term]:
        """The first object of (subject, predicate) if it is a literal."""
        obj = self._store.first_object(subject, predicate)
        return obj if obj is not None and obj.is_literal else None

    def has_type(self, resource: Term, type_: Term) -> bool:
        if not resource.is_resource:
            return False
        return self._store.contains(Triple(resource, RDF_TYPE, type_))

    def has_any_type(self, resource: Term, types: Iterable[Term]) -> bool:
        return any(self.has_type(resource, t) for t in types)

    def has_any_predicate(self, resource: Term, predicates: Iterable[Term]) -> bool:
        if not resource.is_resource:
            return False
        return any(self._store.has_predicate(resource, p) for p in predicates)

    def declare(self, subject: Term, type_: Term) -> "Transform":
        """Adds a declaration triple."""
        if type_ is None:
            raise ValueError(f"Declare: null type for resource '{subject}'")
        if subject.is_resource:
            self._store.add(Triple(subject, RDF_TYPE, type_))
        return self

    def undeclare(self, subject: Term, type_: Term) -> "Transform":
        """Removes a declaration triple."""
        if type_ is None:
            raise ValueError(f"Undeclare: null type for resource '{subject}'")
        if subject.is_resource:
            self._store.remove(Triple(subject, RDF_TYPE, type_))
        return self

    def __repr__(self) -> str:
        return f"[{self.name}:{len(self._store)}]"
