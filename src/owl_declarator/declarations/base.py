"""
Declaration Primitives.

The classifier shared by the manifest and reasoner phases: pure predicates
answering "what might this node already be" from reserved vocabulary,
existing declarations and local structural markers, plus the declaration
actions that write new category triples.
"""

from typing import AbstractSet, Iterable, List, Optional

from owl_declarator.declarations.transform import Transform
from owl_declarator.storage.facts import GraphStore, Triple
from owl_declarator.storage.lists import can_as_list, list_members
from owl_declarator.storage.terms import Term
from owl_declarator.vocabulary import (
    ANONYMOUS_INDIVIDUAL,
    OWL_ALL_VALUES_FROM,
    OWL_ANNOTATION_PROPERTY,
    OWL_CARDINALITY,
    OWL_CLASS,
    OWL_COMPLEMENT_OF,
    OWL_DATATYPE_PROPERTY,
    OWL_HAS_VALUE,
    OWL_INTERSECTION_OF,
    OWL_INVERSE_OF,
    OWL_MAX_CARDINALITY,
    OWL_MAX_QUALIFIED_CARDINALITY,
    OWL_MIN_CARDINALITY,
    OWL_MIN_QUALIFIED_CARDINALITY,
    OWL_NAMED_INDIVIDUAL,
    OWL_OBJECT_PROPERTY,
    OWL_ON_CLASS,
    OWL_ON_DATA_RANGE,
    OWL_ON_PROPERTIES,
    OWL_ON_PROPERTY,
    OWL_ONE_OF,
    OWL_QUALIFIED_CARDINALITY,
    OWL_RESTRICTION,
    OWL_SOME_VALUES_FROM,
    OWL_UNION_OF,
    RDFS_DATATYPE,
    Vocabulary,
)

RESTRICTION_PROPERTY_MARKERS = (
    OWL_ON_PROPERTY, OWL_ALL_VALUES_FROM, OWL_SOME_VALUES_FROM, OWL_HAS_VALUE,
    OWL_ON_CLASS, OWL_ON_DATA_RANGE, OWL_CARDINALITY, OWL_QUALIFIED_CARDINALITY,
    OWL_MAX_CARDINALITY, OWL_MAX_QUALIFIED_CARDINALITY, OWL_MIN_CARDINALITY,
    OWL_MIN_QUALIFIED_CARDINALITY, OWL_ON_PROPERTIES,
)

ANONYMOUS_CLASS_MARKERS = (OWL_INTERSECTION_OF, OWL_UNION_OF, OWL_COMPLEMENT_OF)


class BaseDeclarator(Transform):
    """
    Classifier and declaration actions for ManifestDeclarator and ReasonerDeclarator.

    Declarations are written straight into the store, so every later
    classification within the same pass sees them.
    """

    def __init__(self, store: GraphStore, vocabulary: Optional[Vocabulary] = None):
        super().__init__(store, vocabulary)

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    def subject_and_members(self, statement: Triple) -> List[Term]:
        """The statement subject followed by the resource members of its list object."""
        res = [statement.subject]
        for m in list_members(self._store, statement.object):
            if m.is_resource and m not in res:
                res.append(m)
        return res

    def members(self, subject: Term, predicate: Term) -> List[Term]:
        """Resource members of every list hanging off (subject, predicate)."""
        res: List[Term] = []
        for t in self.statements(subject, predicate, None):
            for m in list_members(self._store, t.object):
                if m.is_resource and m not in res:
                    res.append(m)
        return res

    def is_list(self, node: Term) -> bool:
        return can_as_list(self._store, node)

    def contains_class_expression_property(self, candidate: Term) -> bool:
        if self.has_any_predicate(candidate, ANONYMOUS_CLASS_MARKERS):
            return True
        # a oneOf of literals only is a data enumeration
        return any(
            any(not m.is_literal for m in list_members(self._store, t.object))
            for t in self._store.find(candidate, OWL_ONE_OF, None)
        )

    def contains_restriction_property(self, candidate: Term) -> bool:
        return self.has_any_predicate(candidate, RESTRICTION_PROPERTY_MARKERS)

    # -------------------------------------------------------------------------
    # Classifier
    # -------------------------------------------------------------------------

    def is_class_expression(self, candidate: Term) -> bool:
        if candidate in self._vocabulary.classes or self.has_any_type(candidate, (OWL_CLASS, OWL_RESTRICTION)):
            return True
        # structure alone never overrides a data range declaration
        return not self.is_data_range(candidate) and self.contains_class_expression_property(candidate)

    def is_class(self, candidate: Term) -> bool:
        return (candidate.is_iri and self.has_type(candidate, OWL_CLASS)) \
            or candidate in self._vocabulary.classes

    def is_data_range(self, candidate: Term) -> bool:
        return candidate in self._vocabulary.datatypes or self.has_type(candidate, RDFS_DATATYPE)

    def is_object_property_expression(self, candidate: Term) -> bool:
        return (
            candidate in self._vocabulary.object_properties
            or self.has_type(candidate, OWL_OBJECT_PROPERTY)
            or self.has_any_predicate(candidate, (OWL_INVERSE_OF,))
        )

    def is_data_property(self, candidate: Term) -> bool:
        return candidate in self._vocabulary.data_properties \
            or self.has_type(candidate, OWL_DATATYPE_PROPERTY)

    def is_annotation_property(self, candidate: Term) -> bool:
        return candidate in self._vocabulary.annotation_properties \
            or self.has_type(candidate, OWL_ANNOTATION_PROPERTY)

    def is_individual(self, candidate: Term) -> bool:
        return self.has_type(candidate, OWL_NAMED_INDIVIDUAL) \
            or self.has_type(candidate, ANONYMOUS_INDIVIDUAL)

    def can_be_class(self, candidate: Term) -> bool:
        return candidate in self._vocabulary.classes or candidate not in self._vocabulary.datatypes

    def can_be_datatype(self, candidate: Term) -> bool:
        return candidate in self._vocabulary.datatypes or candidate not in self._vocabulary.classes

    # -------------------------------------------------------------------------
    # Declaration actions
    # -------------------------------------------------------------------------

    def declare_object_property(
        self, resource: Term, forbidden: Optional[AbstractSet[Term]] = None,
    ) -> "BaseDeclarator":
        return self._declare_property(
            resource, OWL_OBJECT_PROPERTY,
            self._vocabulary.object_properties if forbidden is None else forbidden,
        )

    def declare_data_property(
        self, resource: Term, forbidden: Optional[AbstractSet[Term]] = None,
    ) -> "BaseDeclarator":
        return self._declare_property(
            resource, OWL_DATATYPE_PROPERTY,
            self._vocabulary.data_properties if forbidden is None else forbidden,
        )

    def declare_annotation_property(
        self, resource: Term, forbidden: Optional[AbstractSet[Term]] = None,
    ) -> "BaseDeclarator":
        return self._declare_property(
            resource, OWL_ANNOTATION_PROPERTY,
            self._vocabulary.annotation_properties if forbidden is None else forbidden,
        )

    def _declare_property(
        self, resource: Term, type_: Term, forbidden: AbstractSet[Term],
    ) -> "BaseDeclarator":
        if resource.is_literal:
            return self
        if resource.is_bnode:
            # a blank node is never a property
            self.undeclare(resource, type_)
            return self
        self.declare_if_allowed(resource, type_, forbidden)
        return self

    def declare_individual(self, resource: Term) -> "BaseDeclarator":
        if resource.is_literal:
            return self
        if resource.is_bnode:
            self.undeclare(resource, OWL_NAMED_INDIVIDUAL)
            self.declare(resource, ANONYMOUS_INDIVIDUAL)
        else:
            self.declare(resource, OWL_NAMED_INDIVIDUAL)
        return self

    def declare_datatype(self, resource: Term) -> "BaseDeclarator":
        if resource.is_resource:
            self.declare_if_allowed(resource, RDFS_DATATYPE, self._vocabulary.datatypes)
        return self

    def declare_class(self, resource: Term) -> bool:
        """
        Declares the resource a class expression, if it can be one.

        IRIs and nodes carrying a class-expression marker become owl:Class,
        anonymous nodes carrying a restriction marker become owl:Restriction.

        Returns:
            True if the resource is now (or already was) a class expression
        """
        if resource in self._vocabulary.classes:
            return True
        if resource.is_literal or resource in self._vocabulary.datatypes:
            return False
        if resource.is_bnode and self.is_data_range(resource):
            return False
        if resource.is_iri or self.contains_class_expression_property(resource):
            type_ = OWL_CLASS
        elif self.contains_restriction_property(resource):
            type_ = OWL_RESTRICTION
        else:
            return False
        self.declare(resource, type_)
        return True

    def declare_all(self, resources: Iterable[Term], action) -> None:
        for r in resources:
            action(r)

    def declare_if_allowed(self, subject: Term, type_: Term, forbidden: AbstractSet[Term]) -> None:
        if subject in forbidden:
            return
        self.declare(subject, type_)
