"""
Manifest Phase.

Declarations that follow unambiguously from a single local pattern, for
example "C1 rdfs:subClassOf C2" makes both sides classes. Runs once, before
the reasoner phase, in a fixed order of rule families.
"""

import logging
from typing import Callable, FrozenSet, Iterable, List, Optional

from owl_declarator.declarations.base import BaseDeclarator
from owl_declarator.storage.facts import GraphStore, Triple
from owl_declarator.storage.lists import list_members
from owl_declarator.storage.terms import Term
from owl_declarator.vocabulary import (
    ANONYMOUS_INDIVIDUAL,
    OWL_ALL_DIFFERENT,
    OWL_ALL_DISJOINT_CLASSES,
    OWL_ALL_VALUES_FROM,
    OWL_ANNOTATED_PROPERTY,
    OWL_ANNOTATED_SOURCE,
    OWL_ANNOTATED_TARGET,
    OWL_ANNOTATION,
    OWL_ASSERTION_PROPERTY,
    OWL_ASYMMETRIC_PROPERTY,
    OWL_AXIOM,
    OWL_COMPLEMENT_OF,
    OWL_DATATYPE_COMPLEMENT_OF,
    OWL_DIFFERENT_FROM,
    OWL_DISJOINT_UNION_OF,
    OWL_DISJOINT_WITH,
    OWL_DISTINCT_MEMBERS,
    OWL_HAS_KEY,
    OWL_HAS_SELF,
    OWL_HAS_VALUE,
    OWL_INVERSE_FUNCTIONAL_PROPERTY,
    OWL_INVERSE_OF,
    OWL_IRREFLEXIVE_PROPERTY,
    OWL_MEMBERS,
    OWL_NEGATIVE_PROPERTY_ASSERTION,
    OWL_ON_CLASS,
    OWL_ON_DATA_RANGE,
    OWL_ON_DATATYPE,
    OWL_ON_PROPERTIES,
    OWL_ON_PROPERTY,
    OWL_ONE_OF,
    OWL_PROPERTY_CHAIN_AXIOM,
    OWL_REFLEXIVE_PROPERTY,
    OWL_RESTRICTION,
    OWL_SAME_AS,
    OWL_SOME_VALUES_FROM,
    OWL_SOURCE_INDIVIDUAL,
    OWL_SYMMETRIC_PROPERTY,
    OWL_TARGET_INDIVIDUAL,
    OWL_TARGET_VALUE,
    OWL_TRANSITIVE_PROPERTY,
    OWL_WITH_RESTRICTIONS,
    RDF_TYPE,
    RDFS_SUBCLASS_OF,
    SWRL_ARGUMENT1,
    SWRL_ARGUMENT2,
    SWRL_CLASS_ATOM,
    SWRL_CLASS_PREDICATE,
    SWRL_DATA_RANGE,
    SWRL_DATA_RANGE_ATOM,
    SWRL_DATAVALUED_PROPERTY_ATOM,
    SWRL_DIFFERENT_INDIVIDUALS_ATOM,
    SWRL_INDIVIDUAL_PROPERTY_ATOM,
    SWRL_PROPERTY_PREDICATE,
    SWRL_SAME_INDIVIDUAL_ATOM,
    SWRL_VARIABLE,
    XSD_TRUE,
    Vocabulary,
)

logger = logging.getLogger(__name__)

OBJECT_PROPERTY_CHARACTERISTICS = (
    OWL_INVERSE_FUNCTIONAL_PROPERTY,
    OWL_REFLEXIVE_PROPERTY,
    OWL_IRREFLEXIVE_PROPERTY,
    OWL_SYMMETRIC_PROPERTY,
    OWL_ASYMMETRIC_PROPERTY,
    OWL_TRANSITIVE_PROPERTY,
)

SWRL_ARG1_ATOM_TYPES = (
    SWRL_CLASS_ATOM,
    SWRL_DATAVALUED_PROPERTY_ATOM,
    SWRL_INDIVIDUAL_PROPERTY_ATOM,
    SWRL_DIFFERENT_INDIVIDUALS_ATOM,
    SWRL_SAME_INDIVIDUAL_ATOM,
)

SWRL_ARG2_ATOM_TYPES = (
    SWRL_INDIVIDUAL_PROPERTY_ATOM,
    SWRL_DIFFERENT_INDIVIDUALS_ATOM,
    SWRL_SAME_INDIVIDUAL_ATOM,
)


def _unique(terms: Iterable[Term]) -> List[Term]:
    """Distinct resources in sorted order."""
    return sorted({t for t in terms if t.is_resource})


class ManifestDeclarator(BaseDeclarator):
    """
    Declares everything that can be read off a single, unambiguous pattern.

    Example:
        >>> store = FactStore.from_triples([Triple(a, RDFS_SUBCLASS_OF, b)])
        >>> ManifestDeclarator(store).process()
        []
        >>> store.contains(Triple(a, RDF_TYPE, OWL_CLASS))
        True
    """

    def __init__(
        self,
        store: GraphStore,
        vocabulary: Optional[Vocabulary] = None,
        process_swrl: bool = True,
    ):
        super().__init__(store, vocabulary)
        self._process_swrl = process_swrl
        self._forbidden_class_candidates = self._collect_forbidden_class_candidates()

    def perform(self) -> None:
        self.parse_annotations()
        self.parse_class_expressions()
        self.parse_data_range_expressions()
        self.parse_one_of_expression()
        self.parse_object_property_expressions()
        self.parse_object_or_data_properties()
        self.parse_individuals()
        self.parse_class_assertions()
        if self._process_swrl:
            self.parse_swrl()
        logger.debug(f"{self.name}: store has {len(self._store)} triples after manifest rules")

    # -------------------------------------------------------------------------
    # Rule families
    # -------------------------------------------------------------------------

    def parse_annotations(self) -> None:
        # _:x a owl:Axiom; owl:annotatedSource s; owl:annotatedProperty rdf:type;
        # owl:annotatedTarget T  =>  s rdf:type T
        for t in self.statements(None, OWL_ANNOTATED_PROPERTY, RDF_TYPE):
            axiom = t.subject
            if not axiom.is_bnode:
                continue
            if not (self.has_type(axiom, OWL_ANNOTATION) or self.has_type(axiom, OWL_AXIOM)):
                continue
            source = self.object_resource(axiom, OWL_ANNOTATED_SOURCE)
            target = self.object_resource(axiom, OWL_ANNOTATED_TARGET)
            if source is None or target is None:
                continue
            self.declare(source, target)

    def parse_class_expressions(self) -> None:
        # C1 rdfs:subClassOf C2, C1 owl:disjointWith C2
        sides = [
            x
            for p in (RDFS_SUBCLASS_OF, OWL_DISJOINT_WITH)
            for t in self.statements(None, p, None)
            for x in (t.subject, t.object)
        ]
        for r in _unique(sides):
            self.declare_class(r)

        # _:x owl:complementOf C
        sides = [x for t in self.statements(None, OWL_COMPLEMENT_OF, None) for x in (t.subject, t.object)]
        for r in _unique(sides):
            self.declare_class(r)

        # _:x a owl:AllDisjointClasses; owl:members (C1 ... Cn)
        members = [
            m
            for t in self.statements(None, RDF_TYPE, OWL_ALL_DISJOINT_CLASSES)
            if t.subject.is_bnode
            for m in self.members(t.subject, OWL_MEMBERS)
        ]
        for r in _unique(members):
            self.declare_class(r)

        # CN owl:disjointUnionOf (C1 ... Cn)
        union = []
        for t in self.statements(None, OWL_DISJOINT_UNION_OF, None):
            if t.subject.is_iri:
                union.append(t.subject)
                union.extend(self.members(t.subject, OWL_DISJOINT_UNION_OF))
        for r in _unique(union):
            self.declare_class(r)

        # C owl:hasKey (P1 ... Pn)
        for t in self.statements(None, OWL_HAS_KEY, None):
            self.declare_class(t.subject)

        # _:x owl:onProperty P; owl:onClass C
        for t in self.statements(None, OWL_ON_CLASS, None):
            if t.subject.is_bnode and t.object.is_resource \
                    and self._store.has_predicate(t.subject, OWL_ON_PROPERTY):
                self.declare(t.subject, OWL_RESTRICTION)
                self.declare_class(t.object)

    def parse_data_range_expressions(self) -> None:
        # _:x owl:datatypeComplementOf D
        for t in self.statements(None, OWL_DATATYPE_COMPLEMENT_OF, None):
            if t.object.is_resource:
                self.declare_datatype(t.subject).declare_datatype(t.object)

        # _:x owl:onDatatype DN; owl:withRestrictions (_:x1 ... _:xn)
        for t in self.statements(None, OWL_ON_DATATYPE, None):
            if not t.object.is_iri:
                continue
            restrictions = self._store.first_object(t.subject, OWL_WITH_RESTRICTIONS)
            if restrictions is None or not self.is_list(restrictions):
                continue
            self.declare_datatype(t.subject).declare_datatype(t.object)

        # _:x owl:onProperties (R1 ... Rn); owl:allValuesFrom|owl:someValuesFrom Dn
        for t in self.statements(None, OWL_ON_PROPERTIES, None):
            if not (t.subject.is_bnode and self.is_list(t.object)):
                continue
            for p in (OWL_ALL_VALUES_FROM, OWL_SOME_VALUES_FROM):
                for v in self.statements(t.subject, p, None):
                    if v.object.is_bnode:
                        self.declare_datatype(v.object)
            self.declare(t.subject, OWL_RESTRICTION)

        # _:x owl:onProperty R; owl:onDataRange D
        for t in self.statements(None, OWL_ON_DATA_RANGE, None):
            if t.subject.is_bnode and t.object.is_resource \
                    and self._store.has_predicate(t.subject, OWL_ON_PROPERTY):
                self.declare(t.subject, OWL_RESTRICTION)
                self.declare_datatype(t.object)

    def parse_one_of_expression(self) -> None:
        # _:x owl:oneOf (a1 ... an) or _:x owl:oneOf (v1 ... vn)
        for t in self.statements(None, OWL_ONE_OF, None):
            if not (t.subject.is_bnode and self.is_list(t.object)):
                continue
            values = list_members(self._store, t.object)
            if not values:
                continue
            if all(v.is_literal for v in values):
                self.declare_datatype(t.subject)
            else:
                self.declare_class(t.subject)
                for v in values:
                    self.declare_individual(v)

    def parse_object_property_expressions(self) -> None:
        # P a owl:TransitiveProperty, etc.
        characterized = [
            t.subject
            for c in OBJECT_PROPERTY_CHARACTERISTICS
            for t in self.statements(None, RDF_TYPE, c)
        ]
        for r in _unique(characterized):
            self.declare_object_property(r)

        # P1 owl:inverseOf P2
        inverses = [
            x
            for t in self.statements(None, OWL_INVERSE_OF, None)
            if t.object.is_iri
            for x in (t.subject, t.object)
        ]
        for r in _unique(inverses):
            self.declare_object_property(r)

        # P owl:propertyChainAxiom (P1 ... Pn)
        chained = [x for t in self.statements(None, OWL_PROPERTY_CHAIN_AXIOM, None)
                   for x in self.subject_and_members(t)]
        for r in _unique(chained):
            self.declare_object_property(r)

        # _:x owl:onProperty P; owl:hasSelf true
        for t in self.statements(None, OWL_HAS_SELF, XSD_TRUE):
            if not (t.subject.is_bnode and self._store.has_predicate(t.subject, OWL_ON_PROPERTY)):
                continue
            p = self.object_resource(t.subject, OWL_ON_PROPERTY)
            if p is None:
                continue
            self.declare_object_property(p).declare(t.subject, OWL_RESTRICTION)

    def parse_object_or_data_properties(self) -> None:
        # _:x owl:onProperty R; owl:hasValue v  or  _:x owl:onProperty P; owl:hasValue a
        for t in self.statements(None, OWL_HAS_VALUE, None):
            p = self.object_resource(t.subject, OWL_ON_PROPERTY)
            if p is None:
                continue
            self.declare(t.subject, OWL_RESTRICTION)
            if t.object.is_literal:
                self.declare_data_property(p)
            else:
                self.declare_individual(t.object).declare_object_property(p)

        # _:x a owl:NegativePropertyAssertion; owl:sourceIndividual a;
        # owl:assertionProperty P; owl:targetIndividual b | owl:targetValue v
        for t in self.statements(None, RDF_TYPE, OWL_NEGATIVE_PROPERTY_ASSERTION):
            r = t.subject
            if not r.is_bnode:
                continue
            source = self.object_resource(r, OWL_SOURCE_INDIVIDUAL)
            prop = self.object_resource(r, OWL_ASSERTION_PROPERTY)
            if source is None or prop is None:
                continue
            target = self.object_resource(r, OWL_TARGET_INDIVIDUAL)
            if target is None and self.object_literal(r, OWL_TARGET_VALUE) is None:
                continue
            self.declare_individual(source)
            if target is not None:
                self.declare_object_property(prop).declare_individual(target)
            else:
                self.declare_data_property(prop)

    def parse_individuals(self) -> None:
        # a1 owl:sameAs a2, a1 owl:differentFrom a2
        sides = [
            x
            for p in (OWL_SAME_AS, OWL_DIFFERENT_FROM)
            for t in self.statements(None, p, None)
            for x in (t.subject, t.object)
        ]
        for r in _unique(sides):
            self.declare_individual(r)

        # _:x a owl:AllDifferent; owl:members (a1 ... an)
        distinct = [
            m
            for t in self.statements(None, RDF_TYPE, OWL_ALL_DIFFERENT)
            if t.subject.is_bnode
            for p in (OWL_MEMBERS, OWL_DISTINCT_MEMBERS)
            for m in self.members(t.subject, p)
        ]
        for r in _unique(distinct):
            self.declare_individual(r)

    def parse_class_assertions(self) -> None:
        # a rdf:type C
        for t in self.statements(None, RDF_TYPE, None):
            if t.object.is_resource and t.object not in self._forbidden_class_candidates:
                self.declare_individual(t.subject)
                self.declare_class(t.object)

    def parse_swrl(self) -> None:
        self.process_swrl(
            SWRL_ARGUMENT1,
            lambda t: t.subject.is_bnode and self.has_any_type(t.subject, SWRL_ARG1_ATOM_TYPES),
            lambda r: not self.has_type(r, SWRL_VARIABLE),
            self.declare_individual,
        )
        self.process_swrl(
            SWRL_ARGUMENT2,
            lambda t: t.subject.is_bnode and self.has_any_type(t.subject, SWRL_ARG2_ATOM_TYPES),
            lambda r: not self.has_type(r, SWRL_VARIABLE),
            self.declare_individual,
        )
        self.process_swrl(
            SWRL_CLASS_PREDICATE,
            lambda t: t.subject.is_bnode and self.has_type(t.subject, SWRL_CLASS_ATOM),
            None,
            self.declare_class,
        )
        self.process_swrl(
            SWRL_DATA_RANGE,
            lambda t: t.subject.is_bnode and self.has_type(t.subject, SWRL_DATA_RANGE_ATOM),
            None,
            self.declare_datatype,
        )
        self.process_swrl(
            SWRL_PROPERTY_PREDICATE,
            lambda t: t.subject.is_bnode and self.has_type(t.subject, SWRL_INDIVIDUAL_PROPERTY_ATOM),
            None,
            self.declare_object_property,
        )
        self.process_swrl(
            SWRL_PROPERTY_PREDICATE,
            lambda t: t.subject.is_bnode and self.has_type(t.subject, SWRL_DATAVALUED_PROPERTY_ATOM),
            None,
            self.declare_data_property,
        )

    def process_swrl(
        self,
        predicate: Term,
        statement_filter: Callable[[Triple], bool],
        resource_check: Optional[Callable[[Term], bool]],
        action: Callable[[Term], object],
    ) -> None:
        """Applies action to every resource object of a matching SWRL atom statement."""
        for t in self.statements(None, predicate, None):
            if not statement_filter(t) or not t.object.is_resource:
                continue
            if resource_check is not None and not resource_check(t.object):
                continue
            action(t.object)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _collect_forbidden_class_candidates(self) -> FrozenSet[Term]:
        vocab = self._vocabulary
        return (vocab.system_resources | {ANONYMOUS_INDIVIDUAL}) - vocab.classes
