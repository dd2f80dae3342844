"""
Tests for terms, the term dictionary, the fact store and RDF list helpers.
"""

import polars as pl
import pytest

from owl_declarator.storage import FactStore, Term, TermDict, TermKind, Triple, can_as_list, list_members
from owl_declarator.storage.terms import get_term_kind
from owl_declarator.vocabulary import RDF_FIRST, RDF_NIL, RDF_REST, RDF_TYPE, OWL_CLASS, XSD_NS

from graph_helpers import bn, ex, lit, rdf_list


class TestTerm:
    """Test term construction and ordering."""

    def test_plain_literal_is_xsd_string(self):
        assert lit("x").effective_datatype == XSD_NS + "string"

    def test_explicit_xsd_string_normalized(self):
        assert Term.literal("x", XSD_NS + "string") == lit("x")

    def test_language_literal(self):
        t = lit("chat", lang="fr")
        assert t.datatype is None
        assert t.effective_datatype.endswith("#langString")

    def test_typed_literal(self):
        t = lit("1", XSD_NS + "int")
        assert t.effective_datatype == XSD_NS + "int"
        assert str(t) == f'"1"^^<{XSD_NS}int>'

    def test_effective_datatype_of_resource(self):
        assert ex("A").effective_datatype is None

    def test_kinds(self):
        assert ex("A").is_iri and ex("A").is_resource
        assert bn("x").is_bnode and bn("x").is_resource
        assert lit("v").is_literal and not lit("v").is_resource

    def test_ordering_is_total(self):
        terms = [bn("b"), lit("v"), ex("B"), ex("A")]
        assert sorted(terms) == [ex("A"), ex("B"), lit("v"), bn("b")]

    def test_str(self):
        assert str(ex("A")) == "<http://example.org/onto#A>"
        assert str(bn("x")) == "_:x"
        assert str(lit('say "hi"')) == '"say \\"hi\\""'


class TestTermDict:
    """Test term interning."""

    def test_interning_is_stable(self):
        td = TermDict()
        a = td.get_or_create(ex("A"))
        assert td.get_or_create(ex("A")) == a
        assert td.lookup(a) == ex("A")
        assert len(td) == 1

    def test_kind_encoded_in_id(self):
        td = TermDict()
        assert get_term_kind(td.get_or_create(ex("A"))) == TermKind.IRI
        assert get_term_kind(td.get_or_create(bn("x"))) == TermKind.BNODE
        assert get_term_kind(td.get_or_create(lit("v"))) == TermKind.LITERAL

    def test_get_id_does_not_create(self):
        td = TermDict()
        assert td.get_id(ex("A")) is None
        assert not td.contains(ex("A"))

    def test_count_by_kind(self):
        td = TermDict()
        td.get_or_create_batch([ex("A"), ex("B"), bn("x")])
        counts = td.count_by_kind()
        assert counts[TermKind.IRI] == 2
        assert counts[TermKind.BNODE] == 1
        assert counts[TermKind.LITERAL] == 0

    def test_to_dataframe(self):
        td = TermDict()
        td.get_or_create(lit("v", lang="en"))
        df = td.to_dataframe()
        assert df.height == 1
        assert df["lang"][0] == "en"
        assert df.schema["term_id"] == pl.UInt64


class TestTriple:
    """Test triple construction."""

    def test_literal_subject_rejected(self):
        with pytest.raises(ValueError):
            Triple.of(lit("v"), RDF_TYPE, OWL_CLASS)

    def test_blank_predicate_rejected(self):
        with pytest.raises(ValueError):
            Triple.of(ex("A"), bn("p"), OWL_CLASS)

    def test_str(self):
        t = Triple(ex("A"), RDF_TYPE, OWL_CLASS)
        assert str(t).endswith(" .")


class TestFactStore:
    """Test the in-memory store."""

    def test_add_is_idempotent(self, store):
        t = Triple(ex("A"), RDF_TYPE, OWL_CLASS)
        assert store.add(t) is True
        assert store.add(t) is False
        assert len(store) == 1
        assert t in store

    def test_add_rejects_ill_formed(self, store):
        with pytest.raises(ValueError):
            store.add(Triple(lit("v"), RDF_TYPE, OWL_CLASS))

    def test_remove(self, store):
        t = Triple(ex("A"), RDF_TYPE, OWL_CLASS)
        store.add(t)
        assert store.remove(t) is True
        assert store.remove(t) is False
        assert len(store) == 0
        assert store.find() == []

    def test_remove_unknown_terms(self, store):
        assert store.remove(Triple(ex("X"), ex("p"), ex("Y"))) is False

    def test_find_patterns(self, store):
        p, q = ex("p"), ex("q")
        store.add_all([
            Triple(ex("a"), p, ex("b")),
            Triple(ex("a"), q, lit("v")),
            Triple(ex("c"), p, ex("b")),
        ])
        assert len(store.find(ex("a"))) == 2
        assert len(store.find(None, p)) == 2
        assert len(store.find(None, None, ex("b"))) == 2
        assert len(store.find(ex("a"), p)) == 1
        assert len(store.find(ex("a"), None, ex("b"))) == 1
        assert len(store.find(None, p, ex("b"))) == 2
        assert store.find(ex("a"), p, ex("b")) == [Triple(ex("a"), p, ex("b"))]
        assert store.find(ex("zzz")) == []
        assert len(store.find()) == 3

    def test_remove_all(self, store):
        store.add_all([Triple(ex("a"), ex("p"), ex(str(i))) for i in range(5)])
        assert store.remove_all(ex("a"), ex("p")) == 5
        assert len(store) == 0

    def test_first_object_is_smallest(self, store):
        store.add_all([Triple(ex("a"), ex("p"), ex("z")), Triple(ex("a"), ex("p"), ex("b"))])
        assert store.first_object(ex("a"), ex("p")) == ex("b")
        assert store.first_object(ex("a"), ex("q")) is None

    def test_has_predicate(self, store):
        store.add(Triple(ex("a"), ex("p"), lit("v")))
        assert store.has_predicate(ex("a"), ex("p"))
        assert not store.has_predicate(ex("a"), ex("q"))

    def test_from_triples(self):
        store = FactStore.from_triples([Triple(ex("a"), ex("p"), ex("b"))])
        assert len(store) == 1

    def test_scan_facts(self, store):
        store.add(Triple(ex("a"), ex("p"), ex("b")))
        df = store.scan_facts()
        assert df.columns == ["s", "p", "o"]
        assert df.schema["s"] == pl.UInt64
        assert df.height == 1

    def test_to_dataframe_sorted(self, store):
        store.add_all([Triple(ex("b"), ex("p"), lit("2")), Triple(ex("a"), ex("p"), ex("c"))])
        df = store.to_dataframe()
        assert df["subject"].to_list() == [str(ex("a")), str(ex("b"))]
        assert df["object_kind"].to_list() == [int(TermKind.IRI), int(TermKind.LITERAL)]

    def test_stats(self, store):
        store.add_all([Triple(ex("a"), ex("p"), ex("b")), Triple(ex("a"), ex("q"), ex("b"))])
        stats = store.stats()
        assert stats["total_facts"] == 2
        assert stats["unique_subjects"] == 1
        assert stats["unique_predicates"] == 2


class TestLists:
    """Test RDF collection helpers."""

    def test_well_formed(self, store):
        head = rdf_list(store, "l", [ex("A"), lit("v"), ex("B")])
        assert can_as_list(store, head)
        assert list_members(store, head) == [ex("A"), lit("v"), ex("B")]

    def test_nil_is_empty_list(self, store):
        assert can_as_list(store, RDF_NIL)
        assert list_members(store, RDF_NIL) == []

    def test_unterminated(self, store):
        store.add(Triple(bn("l"), RDF_FIRST, ex("A")))
        assert not can_as_list(store, bn("l"))
        assert list_members(store, bn("l")) == []

    def test_cycle(self, store):
        store.add_all([
            Triple(bn("l0"), RDF_FIRST, ex("A")),
            Triple(bn("l0"), RDF_REST, bn("l1")),
            Triple(bn("l1"), RDF_FIRST, ex("B")),
            Triple(bn("l1"), RDF_REST, bn("l0")),
        ])
        assert not can_as_list(store, bn("l0"))

    def test_two_firsts(self, store):
        head = rdf_list(store, "l", [ex("A")])
        store.add(Triple(head, RDF_FIRST, ex("B")))
        assert not can_as_list(store, head)

    def test_literal_is_not_list(self, store):
        assert not can_as_list(store, lit("v"))
