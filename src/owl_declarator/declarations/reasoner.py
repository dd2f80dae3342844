"""
Reasoner Phase.

Declarations that need more than one local pattern, or that depend on what
other rules have already declared. Every candidate statement is tested by
the rule for its predicate; rules answer TRUE (handled), FALSE (malformed,
nothing to do) or UNKNOWN (not decidable yet). UNKNOWN statements are
re-queued and retried until the queue drains, stops shrinking with no more
strategies to try, or the round limit is reached.

Strategy ladder:
    STRICT -> [GUESS_CLASS] -> PREFER_ANNOTATION

A stage is only left when a whole round made no progress, so defaults are
taken as late as possible.
"""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from owl_declarator.config import DEFAULT_MAX_ROUNDS
from owl_declarator.declarations.base import BaseDeclarator
from owl_declarator.storage.facts import GraphStore, Triple
from owl_declarator.storage.lists import list_members
from owl_declarator.storage.terms import Term
from owl_declarator.vocabulary import (
    OWL_ALL_DISJOINT_PROPERTIES,
    OWL_ALL_VALUES_FROM,
    OWL_CLASS,
    OWL_EQUIVALENT_CLASS,
    OWL_EQUIVALENT_PROPERTY,
    OWL_FUNCTIONAL_PROPERTY,
    OWL_HAS_KEY,
    OWL_INTERSECTION_OF,
    OWL_MEMBERS,
    OWL_ON_PROPERTY,
    OWL_PROPERTY_DISJOINT_WITH,
    OWL_RESTRICTION,
    OWL_SOME_VALUES_FROM,
    OWL_UNION_OF,
    RDF_TYPE,
    RDFS_DOMAIN,
    RDFS_RANGE,
    RDFS_SUBPROPERTY_OF,
    XSD_STRING,
    Vocabulary,
)

logger = logging.getLogger(__name__)


class Res(Enum):
    """Outcome of testing one statement."""
    TRUE = auto()     # handled
    FALSE = auto()    # malformed, can not be handled
    UNKNOWN = auto()  # ambiguous, retry later


@dataclass(frozen=True)
class Strategy:
    """A stage of the ambiguity ladder: which defaults rules may take."""
    name: str
    prefer_annotation: bool = False
    guess_class: bool = False


STRICT = Strategy("strict")
GUESS_CLASS = Strategy("guess-class", guess_class=True)
PREFER_ANNOTATION = Strategy("prefer-annotation", prefer_annotation=True)


def strategy_ladder(annotation_default: bool = True, guess_class: bool = False) -> Tuple[Strategy, ...]:
    """
    Build the ordered strategy ladder.

    Args:
        annotation_default: include the stage that defaults undecidable
            properties to annotation properties
        guess_class: include the stage that guesses class (or datatype)
            for undecidable restriction fillers and union/intersection
            operands; the annotation stage then guesses too
    """
    ladder = [STRICT]
    if guess_class:
        ladder.append(GUESS_CLASS)
    if annotation_default:
        ladder.append(replace(PREFER_ANNOTATION, guess_class=guess_class))
    return tuple(ladder)


DEFAULT_LADDER = strategy_ladder()


class RerunRecord(NamedTuple):
    """A statement whose rule answered UNKNOWN, to be retried."""
    triple: Triple
    rule_id: str
    test: Callable[[Triple], Res]


class ReasonerDeclarator(BaseDeclarator):
    """
    Fixed-point declaration inference over ambiguous patterns.

    After process(), unresolved holds the statements that stayed ambiguous.
    """

    def __init__(
        self,
        store: GraphStore,
        vocabulary: Optional[Vocabulary] = None,
        ladder: Optional[Sequence[Strategy]] = None,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
    ):
        super().__init__(store, vocabulary)
        if max_rounds <= 0:
            raise ValueError(f"max_rounds must be positive, got {max_rounds}")
        self._ladder: Tuple[Strategy, ...] = tuple(ladder) if ladder is not None else DEFAULT_LADDER
        if not self._ladder:
            raise ValueError("Strategy ladder must not be empty")
        self._max_rounds = max_rounds
        self._stage = 0
        self._rerun: List[RerunRecord] = []
        self._unresolved: List[Triple] = []
        self._rounds = 0
        self._stats: Dict[str, Counter] = defaultdict(Counter)

    @property
    def max_rounds(self) -> int:
        return self._max_rounds

    @property
    def ladder(self) -> Tuple[Strategy, ...]:
        return self._ladder

    @property
    def strategy(self) -> Optional[Strategy]:
        """The active strategy, or None once the ladder is exhausted."""
        if self._stage < len(self._ladder):
            return self._ladder[self._stage]
        return None

    @property
    def rounds(self) -> int:
        """Number of retry rounds run by the last perform()."""
        return self._rounds

    @property
    def unresolved(self) -> List[Triple]:
        return list(self._unresolved)

    @property
    def rule_stats(self) -> Dict[str, Dict[str, int]]:
        """Outcome counts per rule, e.g. {"domains": {"TRUE": 3, "UNKNOWN": 1}}."""
        return {rule: dict(counts) for rule, counts in self._stats.items()}

    def uncertain_triples(self) -> Sequence[Triple]:
        return self.unresolved

    def perform(self) -> None:
        self._stage = 0
        self._rounds = 0
        self._unresolved = []
        self._stats.clear()
        try:
            self.parse()
            self._unresolved = self.parse_tail()
        finally:
            self._rerun = []

    # -------------------------------------------------------------------------
    # Driver
    # -------------------------------------------------------------------------

    def parse(self) -> None:
        """First full pass over every rule, in fixed order."""
        self.parse_data_and_object_restrictions()
        self.parse_property_domains()
        self.parse_ranges()
        self.parse_equivalent_classes()
        self.parse_union_and_intersection_class_expressions()
        self.parse_equivalent_and_disjoint_properties()
        self.parse_all_disjoint_properties()
        self.parse_sub_properties()
        # last, it scans the whole store
        self.parse_property_assertions()
        logger.debug(f"{self.name}: {len(self._rerun)} statement(s) queued after first pass")

    def parse_tail(self) -> List[Triple]:
        """
        Retry the queued statements until nothing is left or no progress
        can be made.

        Returns:
            The statements that are still ambiguous
        """
        prev = self._rerun
        nxt: List[RerunRecord] = []
        if not prev:
            return []
        while self._rounds < self._max_rounds:
            self._rounds += 1
            nxt = [r for r in prev if self._evaluate(r) is Res.UNKNOWN]
            if not nxt:
                logger.debug(f"{self.name}: queue drained after {self._rounds} round(s)")
                return []
            if len(nxt) == len(prev):
                self._stage += 1
                if self.strategy is None:
                    break
                logger.debug(f"{self.name}: no progress, switching to strategy '{self.strategy.name}'")
            prev = nxt
        unresolved = [r.triple for r in nxt]
        logger.warning(
            f"Ambiguous statements ({len(unresolved)}): "
            + ", ".join(str(t) for t in unresolved)
        )
        return unresolved

    def _schedule(self, statement: Triple, rule_id: str, test: Callable[[Triple], Res]) -> None:
        record = RerunRecord(statement, rule_id, test)
        if self._evaluate(record) is Res.UNKNOWN:
            self._rerun.append(record)

    def _evaluate(self, record: RerunRecord) -> Res:
        res = record.test(record.triple)
        self._stats[record.rule_id][res.name] += 1
        return res

    def _prefer_annotation(self) -> bool:
        strategy = self.strategy
        return strategy is not None and strategy.prefer_annotation

    def _guess_class(self) -> bool:
        strategy = self.strategy
        return strategy is not None and strategy.guess_class

    # -------------------------------------------------------------------------
    # Restrictions
    # -------------------------------------------------------------------------

    def parse_data_and_object_restrictions(self) -> None:
        # _:x owl:onProperty P; owl:allValuesFrom C  or  _:x owl:onProperty R; owl:someValuesFrom D
        candidates = self._candidates(OWL_ALL_VALUES_FROM, OWL_SOME_VALUES_FROM)
        for t in candidates:
            self._schedule(t, "restrictions", self.test_restrictions)

    def test_restrictions(self, statement: Triple) -> Res:
        p = self.object_resource(statement.subject, OWL_ON_PROPERTY)
        c = self.object_resource(statement.subject, statement.predicate)
        if p is None or c is None:
            return Res.FALSE
        self.declare(statement.subject, OWL_RESTRICTION)
        if self.is_class_expression(c) or self.is_object_property_expression(p):
            self.declare_object_property(p)
            if self.declare_class(c):
                return Res.TRUE
        if self.is_data_range(c) or self.is_data_property(p):
            self.declare_data_property(p).declare_datatype(c)
            return Res.TRUE
        if self._guess_class():
            if self.can_be_class(c):
                self.declare_object_property(p).declare_class(c)
            elif self.can_be_datatype(c):
                self.declare_data_property(p).declare_datatype(c)
            else:
                return Res.FALSE
            return Res.TRUE
        return Res.UNKNOWN

    # -------------------------------------------------------------------------
    # Domains and ranges
    # -------------------------------------------------------------------------

    def parse_property_domains(self) -> None:
        for t in self.statements(None, RDFS_DOMAIN, None):
            if t.object.is_resource:
                self._schedule(t, "domains", self.test_domains)

    def test_domains(self, statement: Triple) -> Res:
        left, right = statement.subject, statement.object
        if self.is_annotation_property(left) and right.is_iri:
            return Res.TRUE
        if self.is_data_property(left) or self.is_object_property_expression(left):
            if self.declare_class(right):
                return Res.TRUE
        if right.is_bnode:
            self.declare_class(right)
        if self._prefer_annotation():
            self.declare_annotation_property(left)
            return Res.TRUE
        return Res.UNKNOWN

    def parse_ranges(self) -> None:
        for t in self.statements(None, RDFS_RANGE, None):
            if t.object.is_resource:
                self._schedule(t, "ranges", self.test_property_ranges)

    def test_property_ranges(self, statement: Triple) -> Res:
        left, right = statement.subject, statement.object
        if self.is_annotation_property(left) and right.is_iri:
            return Res.TRUE
        if self.is_class_expression(right):
            self.declare_object_property(left)
            return Res.TRUE
        if self.is_data_range(right):
            self.declare_data_property(left)
            return Res.TRUE
        if self._prefer_annotation():
            self.declare_annotation_property(left)
            return Res.TRUE
        return Res.UNKNOWN

    # -------------------------------------------------------------------------
    # Class expressions
    # -------------------------------------------------------------------------

    def parse_equivalent_classes(self) -> None:
        for t in self.statements(None, OWL_EQUIVALENT_CLASS, None):
            if t.object.is_resource:
                self._schedule(t, "equivalent-classes", self.test_equivalent_classes)

    def test_equivalent_classes(self, statement: Triple) -> Res:
        a, b = statement.subject, statement.object
        if self.is_class_expression(a) or self.is_class_expression(b):
            self.declare_class(a)
            self.declare_class(b)
            return Res.TRUE
        if a.is_iri and (self.is_data_range(a) or self.is_data_range(b)):
            self.declare_datatype(a).declare_datatype(b)
            return Res.TRUE
        return Res.UNKNOWN

    def parse_union_and_intersection_class_expressions(self) -> None:
        # _:x owl:unionOf (D1 ... Dn), _:x owl:intersectionOf (C1 ... Cn)
        for t in self._candidates(OWL_UNION_OF, OWL_INTERSECTION_OF):
            if t.subject.is_bnode and self.is_list(t.object):
                self._schedule(t, "union-intersection", self.test_union_and_intersection_class_expressions)

    def test_union_and_intersection_class_expressions(self, statement: Triple) -> Res:
        operands = self.subject_and_members(statement)
        # the subject's own unionOf/intersectionOf marker is not evidence
        if self.has_any_type(statement.subject, (OWL_CLASS, OWL_RESTRICTION)) \
                or any(self.is_class_expression(x) for x in operands[1:]):
            self.declare_all(operands, self.declare_class)
            return Res.TRUE
        if any(self.is_data_range(x) for x in operands):
            self.declare_all(operands, self.declare_datatype)
            return Res.TRUE
        if self._guess_class():
            if all(self.can_be_class(x) for x in operands):
                self.declare_all(operands, self.declare_class)
            elif all(self.can_be_datatype(x) for x in operands):
                self.declare_all(operands, self.declare_datatype)
            else:
                return Res.FALSE
            return Res.TRUE
        return Res.UNKNOWN

    # -------------------------------------------------------------------------
    # Property axioms
    # -------------------------------------------------------------------------

    def parse_equivalent_and_disjoint_properties(self) -> None:
        for t in self._candidates(OWL_EQUIVALENT_PROPERTY, OWL_PROPERTY_DISJOINT_WITH):
            if t.object.is_resource:
                self._schedule(t, "equivalent-disjoint-properties", self.test_equivalent_and_disjoint_properties)

    def test_equivalent_and_disjoint_properties(self, statement: Triple) -> Res:
        a, b = statement.subject, statement.object
        forbidden = self._vocabulary.builtin_properties
        if self.is_object_property_expression(a) or self.is_object_property_expression(b):
            self.declare_object_property(a, forbidden).declare_object_property(b, forbidden)
            return Res.TRUE
        if self.is_data_property(a) or self.is_data_property(b):
            self.declare_data_property(a, forbidden).declare_data_property(b, forbidden)
            return Res.TRUE
        return Res.UNKNOWN

    def parse_all_disjoint_properties(self) -> None:
        # _:x rdf:type owl:AllDisjointProperties; owl:members (P1 ... Pn)
        for t in self.statements(None, RDF_TYPE, OWL_ALL_DISJOINT_PROPERTIES):
            if t.subject.is_bnode and self._store.has_predicate(t.subject, OWL_MEMBERS):
                self._schedule(t, "all-disjoint-properties", self.test_all_disjoint_properties)

    def test_all_disjoint_properties(self, statement: Triple) -> Res:
        properties = self.members(statement.subject, OWL_MEMBERS)
        if not properties:
            return Res.FALSE
        if any(self.is_object_property_expression(x) for x in properties):
            self.declare_all(properties, self.declare_object_property)
            return Res.TRUE
        if any(self.is_data_property(x) for x in properties):
            self.declare_all(properties, self.declare_data_property)
            return Res.TRUE
        return Res.UNKNOWN

    def parse_sub_properties(self) -> None:
        for t in self.statements(None, RDFS_SUBPROPERTY_OF, None):
            if t.object.is_resource:
                self._schedule(t, "sub-properties", self.test_sub_properties)

    def test_sub_properties(self, statement: Triple) -> Res:
        a, b = statement.subject, statement.object
        forbidden = self._vocabulary.builtin_properties
        res = Res.UNKNOWN
        if self.is_object_property_expression(a) or self.is_object_property_expression(b):
            self.declare_object_property(a, forbidden).declare_object_property(b, forbidden)
            res = Res.TRUE
        if self.is_data_property(a) or self.is_data_property(b):
            self.declare_data_property(a, forbidden).declare_data_property(b, forbidden)
            res = Res.TRUE
        if self.is_annotation_property(a) or self.is_annotation_property(b) \
                or (res is Res.UNKNOWN and self._prefer_annotation()):
            self.declare_annotation_property(a, forbidden).declare_annotation_property(b, forbidden)
            res = Res.TRUE
        return res

    # -------------------------------------------------------------------------
    # Property assertions
    # -------------------------------------------------------------------------

    def parse_property_assertions(self) -> None:
        # a1 PN a2, a R v, s A t
        system_properties = self._vocabulary.system_properties
        for t in self.statements():
            if t.predicate not in system_properties:
                self._schedule(t, "property-assertions", self.test_property_assertions)

    def test_property_assertions(self, statement: Triple) -> Res:
        subject, prop, right = statement
        if self.is_annotation_property(prop):
            return Res.TRUE
        if right.is_literal:
            if self.is_data_property(prop):
                self.declare_individual(subject)
                return Res.TRUE
            if self.is_individual(subject) and self.can_be_data_property_in_assertion(prop):
                self.declare_data_property(prop)
                return Res.TRUE
            if self.must_be_data_or_object_property(prop):
                self.declare_data_property(prop).declare_individual(subject)
                return Res.TRUE
            if self.is_class(subject):
                # a punned class carrying a plain value
                self.declare_individual(subject).declare_annotation_property(prop)
                return Res.TRUE
        elif self.is_individual(right) or self.can_be_individual(right):
            if self.is_object_property_expression(prop):
                self.declare_individual(subject).declare_individual(right)
                return Res.TRUE
            if self.is_individual(subject):
                self.declare_object_property(prop).declare_individual(right)
                return Res.TRUE
            if self.must_be_data_or_object_property(prop):
                self.declare_object_property(prop).declare_individual(subject).declare_individual(right)
                return Res.TRUE
        if self._prefer_annotation():
            self.declare_annotation_property(prop)
            return Res.TRUE
        return Res.UNKNOWN

    def must_be_data_or_object_property(self, candidate: Term) -> bool:
        """True if candidate is functional or used as a key; annotations can be neither."""
        if self.has_type(candidate, OWL_FUNCTIONAL_PROPERTY):
            return True
        return any(
            candidate in list_members(self._store, t.object)
            for t in self._store.find(None, OWL_HAS_KEY, None)
        )

    def can_be_individual(self, candidate: Term) -> bool:
        if candidate.is_bnode:
            return not self.is_list(candidate)
        return candidate.is_iri and candidate not in self._vocabulary.reserved

    def can_be_data_property_in_assertion(self, candidate: Term) -> bool:
        """True if candidate is used somewhere with a typed (non xsd:string) literal."""
        return any(
            t.object.is_literal and t.object.effective_datatype != XSD_STRING.lex
            for t in self._store.find(None, candidate, None)
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _candidates(self, *predicates: Term) -> List[Triple]:
        found = [t for p in predicates for t in self._store.find(None, p, None)]
        return sorted(found, key=Triple.sort_key)
