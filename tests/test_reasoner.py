"""
Tests for the reasoner phase: rule outcomes, the strategy ladder and the
fixed-point driver.
"""

import logging

import pytest

from owl_declarator.declarations import (
    GUESS_CLASS,
    ManifestDeclarator,
    PREFER_ANNOTATION,
    STRICT,
    ReasonerDeclarator,
    Res,
    Strategy,
    strategy_ladder,
)
from owl_declarator.storage import Term, Triple
from owl_declarator.vocabulary import (
    OWL_ALL_DISJOINT_PROPERTIES,
    OWL_ANNOTATION_PROPERTY,
    OWL_CLASS,
    OWL_DATATYPE_PROPERTY,
    OWL_EQUIVALENT_CLASS,
    OWL_EQUIVALENT_PROPERTY,
    OWL_FUNCTIONAL_PROPERTY,
    OWL_HAS_KEY,
    OWL_INTERSECTION_OF,
    OWL_MEMBERS,
    OWL_NAMED_INDIVIDUAL,
    OWL_OBJECT_PROPERTY,
    OWL_ON_PROPERTY,
    OWL_ONE_OF,
    OWL_RESTRICTION,
    OWL_SOME_VALUES_FROM,
    OWL_ALL_VALUES_FROM,
    OWL_UNION_OF,
    RDF_TYPE,
    RDFS_DATATYPE,
    RDFS_DOMAIN,
    RDFS_LABEL,
    RDFS_RANGE,
    RDFS_SUBPROPERTY_OF,
    XSD_NS,
)

from graph_helpers import bn, ex, is_a, lit, rdf_list, types_of

XSD_INTEGER = Term.iri(XSD_NS + "integer")


def reasoner(store, **kwargs) -> ReasonerDeclarator:
    r = ReasonerDeclarator(store, **kwargs)
    r.process()
    return r


class TestStrategies:
    def test_default_ladder(self):
        assert strategy_ladder() == (STRICT, PREFER_ANNOTATION)

    def test_guess_class_ladder(self):
        ladder = strategy_ladder(guess_class=True)
        assert ladder[:2] == (STRICT, GUESS_CLASS)
        assert ladder[2].prefer_annotation and ladder[2].guess_class

    def test_strict_only(self):
        assert strategy_ladder(annotation_default=False) == (STRICT,)

    def test_strict_takes_no_defaults(self):
        assert not STRICT.prefer_annotation and not STRICT.guess_class

    def test_invalid_rounds(self, store):
        with pytest.raises(ValueError):
            ReasonerDeclarator(store, max_rounds=0)

    def test_empty_ladder(self, store):
        with pytest.raises(ValueError):
            ReasonerDeclarator(store, ladder=[])


class TestRestrictions:
    def test_object_property_gives_class(self, store):
        store.add_all([
            Triple(ex("P"), RDF_TYPE, OWL_OBJECT_PROPERTY),
            Triple(bn("x"), OWL_ON_PROPERTY, ex("P")),
            Triple(bn("x"), OWL_SOME_VALUES_FROM, ex("C")),
        ])
        r = reasoner(store)
        assert is_a(store, ex("C"), OWL_CLASS)
        assert is_a(store, bn("x"), OWL_RESTRICTION)
        assert r.unresolved == []
        assert r.rounds == 0

    def test_datatype_gives_data_property(self, store):
        store.add_all([
            Triple(bn("x"), OWL_ON_PROPERTY, ex("P")),
            Triple(bn("x"), OWL_ALL_VALUES_FROM, XSD_INTEGER),
        ])
        reasoner(store)
        assert is_a(store, ex("P"), OWL_DATATYPE_PROPERTY)
        assert not is_a(store, XSD_INTEGER, RDFS_DATATYPE)

    def test_missing_on_property_is_false(self, store):
        store.add(Triple(bn("x"), OWL_SOME_VALUES_FROM, ex("C")))
        r = reasoner(store)
        assert r.unresolved == []
        assert r.rule_stats["restrictions"] == {"FALSE": 1}
        assert types_of(store, bn("x")) == set()

    def test_ambiguous_restriction_stays_unresolved(self, store, caplog):
        stmt = Triple(bn("x"), OWL_SOME_VALUES_FROM, ex("D"))
        store.add_all([Triple(bn("x"), OWL_ON_PROPERTY, ex("P")), stmt])
        with caplog.at_level(logging.WARNING):
            r = reasoner(store)
        assert r.unresolved == [stmt]
        assert r.uncertain_triples() == [stmt]
        assert r.rounds == 2
        assert r.rule_stats["restrictions"] == {"UNKNOWN": 3}
        assert types_of(store, ex("P")) == set()
        assert types_of(store, ex("D")) == set()
        assert "Ambiguous statements" in caplog.text

    def test_guess_class_resolves_ambiguity(self, store):
        store.add_all([
            Triple(bn("x"), OWL_ON_PROPERTY, ex("P")),
            Triple(bn("x"), OWL_SOME_VALUES_FROM, ex("D")),
        ])
        r = reasoner(store, ladder=strategy_ladder(guess_class=True))
        assert r.unresolved == []
        assert is_a(store, ex("P"), OWL_OBJECT_PROPERTY)
        assert is_a(store, ex("D"), OWL_CLASS)
        assert r.rounds == 2


class TestDomainsAndRanges:
    def test_default_policy(self, store):
        store.add(Triple(ex("A"), RDFS_DOMAIN, ex("B")))
        r = reasoner(store)
        assert r.unresolved == []
        assert types_of(store, ex("A")) == {OWL_ANNOTATION_PROPERTY}
        assert types_of(store, ex("B")) == set()

    def test_no_annotation_default(self, store):
        stmt = Triple(ex("A"), RDFS_DOMAIN, ex("B"))
        store.add(stmt)
        r = reasoner(store, ladder=strategy_ladder(annotation_default=False))
        assert r.unresolved == [stmt]
        assert r.rounds == 1

    def test_object_property_domain(self, store):
        store.add_all([Triple(ex("p"), RDF_TYPE, OWL_OBJECT_PROPERTY), Triple(ex("p"), RDFS_DOMAIN, ex("C"))])
        reasoner(store)
        assert is_a(store, ex("C"), OWL_CLASS)

    def test_annotation_property_domain(self, store):
        store.add_all([Triple(ex("a"), RDF_TYPE, OWL_ANNOTATION_PROPERTY), Triple(ex("a"), RDFS_DOMAIN, ex("U"))])
        r = reasoner(store)
        assert r.rule_stats["domains"] == {"TRUE": 1}
        assert types_of(store, ex("U")) == set()

    def test_range_class(self, store):
        store.add_all([Triple(ex("C"), RDF_TYPE, OWL_CLASS), Triple(ex("p"), RDFS_RANGE, ex("C"))])
        reasoner(store)
        assert is_a(store, ex("p"), OWL_OBJECT_PROPERTY)

    def test_range_datatype(self, store):
        store.add(Triple(ex("p"), RDFS_RANGE, XSD_INTEGER))
        reasoner(store)
        assert is_a(store, ex("p"), OWL_DATATYPE_PROPERTY)

    def test_range_resolved_by_later_rule(self, store):
        # the range becomes decidable once the union rule has typed C
        union = rdf_list(store, "l", [ex("C"), ex("K")])
        store.add_all([
            Triple(ex("K"), RDF_TYPE, OWL_CLASS),
            Triple(bn("u"), OWL_UNION_OF, union),
            Triple(ex("p"), RDFS_RANGE, ex("C")),
        ])
        r = reasoner(store, ladder=strategy_ladder(annotation_default=False))
        assert r.unresolved == []
        assert is_a(store, ex("C"), OWL_CLASS)
        assert is_a(store, ex("p"), OWL_OBJECT_PROPERTY)
        assert r.rounds == 1


class TestClassAxioms:
    def test_equivalent_classes(self, store):
        store.add_all([Triple(ex("A"), RDF_TYPE, OWL_CLASS), Triple(ex("A"), OWL_EQUIVALENT_CLASS, ex("B"))])
        reasoner(store)
        assert is_a(store, ex("B"), OWL_CLASS)

    def test_equivalent_datatypes(self, store):
        store.add(Triple(ex("MyInt"), OWL_EQUIVALENT_CLASS, XSD_INTEGER))
        reasoner(store)
        assert is_a(store, ex("MyInt"), RDFS_DATATYPE)

    def test_intersection_of_data_ranges(self, store):
        store.add(Triple(bn("i"), OWL_INTERSECTION_OF, rdf_list(store, "l", [XSD_INTEGER, ex("D")])))
        reasoner(store)
        assert is_a(store, bn("i"), RDFS_DATATYPE)
        assert is_a(store, ex("D"), RDFS_DATATYPE)


class TestPropertyAxioms:
    def test_equivalent_properties(self, store):
        store.add_all([
            Triple(ex("p"), RDF_TYPE, OWL_DATATYPE_PROPERTY),
            Triple(ex("p"), OWL_EQUIVALENT_PROPERTY, ex("q")),
        ])
        reasoner(store)
        assert is_a(store, ex("q"), OWL_DATATYPE_PROPERTY)

    def test_all_disjoint_properties(self, store):
        members = rdf_list(store, "l", [ex("p"), ex("q")])
        store.add_all([
            Triple(ex("q"), RDF_TYPE, OWL_OBJECT_PROPERTY),
            Triple(bn("d"), RDF_TYPE, OWL_ALL_DISJOINT_PROPERTIES),
            Triple(bn("d"), OWL_MEMBERS, members),
        ])
        reasoner(store)
        assert is_a(store, ex("p"), OWL_OBJECT_PROPERTY)

    def test_all_disjoint_properties_empty(self, store):
        store.add_all([
            Triple(bn("d"), RDF_TYPE, OWL_ALL_DISJOINT_PROPERTIES),
            Triple(bn("d"), OWL_MEMBERS, rdf_list(store, "l", [])),
        ])
        r = reasoner(store)
        assert r.rule_stats["all-disjoint-properties"] == {"FALSE": 1}

    def test_sub_property_of_annotation(self, store):
        store.add(Triple(ex("myLabel"), RDFS_SUBPROPERTY_OF, RDFS_LABEL))
        reasoner(store, ladder=strategy_ladder(annotation_default=False))
        assert is_a(store, ex("myLabel"), OWL_ANNOTATION_PROPERTY)
        assert not is_a(store, RDFS_LABEL, OWL_ANNOTATION_PROPERTY)

    def test_sub_property_of_object(self, store):
        store.add_all([
            Triple(ex("q"), RDF_TYPE, OWL_OBJECT_PROPERTY),
            Triple(ex("p"), RDFS_SUBPROPERTY_OF, ex("q")),
        ])
        reasoner(store)
        assert types_of(store, ex("p")) == {OWL_OBJECT_PROPERTY}

    def test_sub_property_default(self, store):
        store.add(Triple(ex("p"), RDFS_SUBPROPERTY_OF, ex("q")))
        reasoner(store)
        assert is_a(store, ex("p"), OWL_ANNOTATION_PROPERTY)
        assert is_a(store, ex("q"), OWL_ANNOTATION_PROPERTY)


class TestPropertyAssertions:
    def test_object_property_assertion(self, store):
        store.add_all([Triple(ex("p"), RDF_TYPE, OWL_OBJECT_PROPERTY), Triple(ex("a"), ex("p"), ex("b"))])
        reasoner(store)
        assert is_a(store, ex("a"), OWL_NAMED_INDIVIDUAL)
        assert is_a(store, ex("b"), OWL_NAMED_INDIVIDUAL)

    def test_typed_literal_makes_data_property(self, store):
        store.add_all([
            Triple(ex("a"), RDF_TYPE, OWL_NAMED_INDIVIDUAL),
            Triple(ex("a"), ex("age"), lit("5", XSD_NS + "int")),
        ])
        reasoner(store)
        assert is_a(store, ex("age"), OWL_DATATYPE_PROPERTY)

    def test_plain_literal_is_ambiguous(self, store):
        store.add_all([
            Triple(ex("a"), RDF_TYPE, OWL_NAMED_INDIVIDUAL),
            Triple(ex("a"), ex("note"), lit("hello")),
        ])
        r = reasoner(store)
        # defaulted in the annotation-preferring stage
        assert is_a(store, ex("note"), OWL_ANNOTATION_PROPERTY)
        assert r.rounds == 2

    def test_functional_property(self, store):
        store.add_all([Triple(ex("p"), RDF_TYPE, OWL_FUNCTIONAL_PROPERTY), Triple(ex("a"), ex("p"), ex("b"))])
        reasoner(store)
        assert is_a(store, ex("p"), OWL_OBJECT_PROPERTY)
        assert is_a(store, ex("a"), OWL_NAMED_INDIVIDUAL)
        assert is_a(store, ex("b"), OWL_NAMED_INDIVIDUAL)

    def test_key_property_with_literal(self, store):
        store.add_all([
            Triple(ex("C"), OWL_HAS_KEY, rdf_list(store, "k", [ex("id")])),
            Triple(ex("a"), ex("id"), lit("42")),
        ])
        reasoner(store)
        assert is_a(store, ex("id"), OWL_DATATYPE_PROPERTY)
        assert is_a(store, ex("a"), OWL_NAMED_INDIVIDUAL)

    def test_class_with_value(self, store):
        store.add_all([Triple(ex("C"), RDF_TYPE, OWL_CLASS), Triple(ex("C"), ex("note"), lit("x"))])
        reasoner(store)
        assert is_a(store, ex("C"), OWL_NAMED_INDIVIDUAL)
        assert is_a(store, ex("note"), OWL_ANNOTATION_PROPERTY)

    def test_reserved_predicates_skipped(self, store):
        store.add(Triple(ex("a"), RDFS_LABEL, lit("x")))
        r = reasoner(store)
        assert "property-assertions" not in r.rule_stats
        assert types_of(store, ex("a")) == set()


class TestDriver:
    def test_rerun_state_cleared(self, store):
        store.add_all([
            Triple(bn("x"), OWL_ON_PROPERTY, ex("P")),
            Triple(bn("x"), OWL_SOME_VALUES_FROM, ex("D")),
        ])
        r = reasoner(store)
        assert r._rerun == []
        # a second run starts from scratch
        r.process()
        assert r.rounds == 2
        assert len(r.unresolved) == 1

    def test_round_limit(self, store):
        store.add_all([
            Triple(bn("x"), OWL_ON_PROPERTY, ex("P")),
            Triple(bn("x"), OWL_SOME_VALUES_FROM, ex("D")),
        ])
        r = reasoner(store, max_rounds=1)
        assert r.rounds == 1
        assert len(r.unresolved) == 1

    def test_nothing_to_do(self, store):
        r = reasoner(store)
        assert r.rounds == 0
        assert r.unresolved == []
        assert r.strategy == STRICT

    def test_custom_strategy(self, store):
        eager = Strategy("eager", prefer_annotation=True)
        store.add(Triple(ex("A"), RDFS_DOMAIN, ex("B")))
        r = reasoner(store, ladder=[eager])
        assert r.rounds == 0
        assert is_a(store, ex("A"), OWL_ANNOTATION_PROPERTY)

    def test_res_values(self):
        assert {r.name for r in Res} == {"TRUE", "FALSE", "UNKNOWN"}


class TestDataEnumerations:
    """A oneOf of literals is a data range, never class evidence."""

    @pytest.fixture
    def enumeration(self, store):
        store.add(Triple(bn("v"), OWL_ONE_OF, rdf_list(store, "e", [lit("a"), lit("b")])))
        return bn("v")

    def test_restriction_on_declared_enumeration(self, store, enumeration):
        store.add_all([
            Triple(enumeration, RDF_TYPE, RDFS_DATATYPE),
            Triple(bn("r"), OWL_ON_PROPERTY, ex("p")),
            Triple(bn("r"), OWL_SOME_VALUES_FROM, enumeration),
        ])
        r = reasoner(store)
        assert r.unresolved == []
        assert types_of(store, ex("p")) == {OWL_DATATYPE_PROPERTY}
        assert types_of(store, enumeration) == {RDFS_DATATYPE}

    def test_restriction_after_manifest(self, store, enumeration):
        store.add_all([
            Triple(bn("r"), OWL_ON_PROPERTY, ex("p")),
            Triple(bn("r"), OWL_SOME_VALUES_FROM, enumeration),
        ])
        ManifestDeclarator(store).process()
        reasoner(store)
        assert types_of(store, ex("p")) == {OWL_DATATYPE_PROPERTY}
        assert types_of(store, enumeration) == {RDFS_DATATYPE}

    def test_undeclared_enumeration_is_not_a_class(self, store, enumeration):
        store.add_all([
            Triple(bn("r"), OWL_ON_PROPERTY, ex("p")),
            Triple(bn("r"), OWL_SOME_VALUES_FROM, enumeration),
        ])
        r = reasoner(store, ladder=strategy_ladder(annotation_default=False))
        assert len(r.unresolved) == 1
        assert types_of(store, ex("p")) == set()
        assert types_of(store, enumeration) == set()

    def test_union_with_enumeration_operand(self, store, enumeration):
        store.add_all([
            Triple(enumeration, RDF_TYPE, RDFS_DATATYPE),
            Triple(bn("u"), OWL_UNION_OF, rdf_list(store, "l", [enumeration, XSD_INTEGER])),
        ])
        reasoner(store)
        assert types_of(store, bn("u")) == {RDFS_DATATYPE}
        assert types_of(store, enumeration) == {RDFS_DATATYPE}
