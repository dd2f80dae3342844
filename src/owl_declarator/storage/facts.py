"""
Triple Store.

Provides the graph-store abstraction the declaration engine works against,
and an in-memory, dictionary-encoded implementation of it:
- GraphStore: find / contains / add / remove over Triples
- FactStore: integer-encoded facts with SPO, POS and OSP indexes,
  exportable to a Polars DataFrame
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Set, Tuple

import polars as pl

from owl_declarator.storage.terms import Term, TermDict, TermId, TermKind


class Triple(NamedTuple):
    """A (subject, predicate, object) statement."""
    subject: Term
    predicate: Term
    object: Term

    @classmethod
    def of(cls, subject: Term, predicate: Term, obj: Term) -> "Triple":
        """Create a triple, checking the RDF positional constraints."""
        if subject.kind == TermKind.LITERAL:
            raise ValueError(f"Literal subject is not allowed: {subject}")
        if predicate.kind != TermKind.IRI:
            raise ValueError(f"Predicate must be an IRI: {predicate}")
        return cls(subject, predicate, obj)

    def sort_key(self):
        return (self.subject.sort_key(), self.predicate.sort_key(), self.object.sort_key())

    def __str__(self) -> str:
        return f"{self.subject} {self.predicate} {self.object} ."


class GraphStore(ABC):
    """
    Mutable set of triples with pattern lookup.

    Any of subject, predicate and object in a pattern may be None (wildcard).
    """

    @abstractmethod
    def find(
        self,
        subject: Optional[Term] = None,
        predicate: Optional[Term] = None,
        obj: Optional[Term] = None,
    ) -> List[Triple]:
        """Return all triples matching the pattern, as a snapshot list."""

    @abstractmethod
    def add(self, triple: Triple) -> bool:
        """Add a triple. Returns True if the store changed."""

    @abstractmethod
    def remove(self, triple: Triple) -> bool:
        """Remove a triple. Returns True if the store changed."""

    @abstractmethod
    def __len__(self) -> int:
        ...

    def contains(self, triple: Triple) -> bool:
        return bool(self.find(*triple))

    def __contains__(self, triple: Triple) -> bool:
        return self.contains(triple)

    def __iter__(self) -> Iterator[Triple]:
        return iter(self.find())

    def add_all(self, triples: Iterable[Triple]) -> int:
        """Add many triples. Returns the number actually added."""
        return sum(1 for t in triples if self.add(t))

    def remove_all(
        self,
        subject: Optional[Term] = None,
        predicate: Optional[Term] = None,
        obj: Optional[Term] = None,
    ) -> int:
        """Remove every triple matching the pattern. Returns the count removed."""
        return sum(1 for t in self.find(subject, predicate, obj) if self.remove(t))

    def first_object(self, subject: Term, predicate: Term) -> Optional[Term]:
        """The object of the first (sorted) matching triple, or None."""
        found = self.find(subject, predicate, None)
        if not found:
            return None
        return min(found, key=Triple.sort_key).object

    def has_predicate(self, subject: Term, predicate: Term) -> bool:
        return bool(self.find(subject, predicate, None))


_Key = Tuple[TermId, TermId, TermId]


class FactStore(GraphStore):
    """
    In-memory, dictionary-encoded triple store.

    Facts are stored as (s, p, o) TermId tuples with three nested indexes
    so that every lookup pattern touches a single index.

    Thread-safety: NOT thread-safe; the declaration engine is its only writer.
    """

    def __init__(self, term_dict: Optional[TermDict] = None):
        self._term_dict = term_dict if term_dict is not None else TermDict()
        self._facts: Set[_Key] = set()
        self._spo: Dict[TermId, Dict[TermId, Set[TermId]]] = defaultdict(lambda: defaultdict(set))
        self._pos: Dict[TermId, Dict[TermId, Set[TermId]]] = defaultdict(lambda: defaultdict(set))
        self._osp: Dict[TermId, Dict[TermId, Set[TermId]]] = defaultdict(lambda: defaultdict(set))

    @property
    def term_dict(self) -> TermDict:
        return self._term_dict

    @classmethod
    def from_triples(cls, triples: Iterable[Triple]) -> "FactStore":
        store = cls()
        store.add_all(triples)
        return store

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    def _encode(self, triple: Triple) -> _Key:
        td = self._term_dict
        return (
            td.get_or_create(triple.subject),
            td.get_or_create(triple.predicate),
            td.get_or_create(triple.object),
        )

    def _lookup_id(self, term: Optional[Term]) -> Optional[TermId]:
        if term is None:
            return None
        return self._term_dict.get_id(term)

    def _decode(self, key: _Key) -> Triple:
        lookup = self._term_dict.lookup
        return Triple(lookup(key[0]), lookup(key[1]), lookup(key[2]))

    # -------------------------------------------------------------------------
    # GraphStore
    # -------------------------------------------------------------------------

    def add(self, triple: Triple) -> bool:
        if triple.subject.kind == TermKind.LITERAL or triple.predicate.kind != TermKind.IRI:
            raise ValueError(f"Ill-formed triple: {triple}")
        key = self._encode(triple)
        if key in self._facts:
            return False
        s, p, o = key
        self._facts.add(key)
        self._spo[s][p].add(o)
        self._pos[p][o].add(s)
        self._osp[o][s].add(p)
        return True

    def remove(self, triple: Triple) -> bool:
        ids = [self._lookup_id(t) for t in triple]
        if None in ids:
            return False
        key = (ids[0], ids[1], ids[2])
        if key not in self._facts:
            return False
        s, p, o = key
        self._facts.discard(key)
        self._discard(self._spo, s, p, o)
        self._discard(self._pos, p, o, s)
        self._discard(self._osp, o, s, p)
        return True

    @staticmethod
    def _discard(index, a: TermId, b: TermId, c: TermId) -> None:
        inner = index[a]
        inner[b].discard(c)
        if not inner[b]:
            del inner[b]
        if not inner:
            del index[a]

    def contains(self, triple: Triple) -> bool:
        ids = [self._lookup_id(t) for t in triple]
        if None in ids:
            return False
        return (ids[0], ids[1], ids[2]) in self._facts

    def find(
        self,
        subject: Optional[Term] = None,
        predicate: Optional[Term] = None,
        obj: Optional[Term] = None,
    ) -> List[Triple]:
        s = self._lookup_id(subject)
        p = self._lookup_id(predicate)
        o = self._lookup_id(obj)
        # an unknown bound term can match nothing
        if (subject is not None and s is None) or (predicate is not None and p is None) \
                or (obj is not None and o is None):
            return []
        return [self._decode(k) for k in self._match(s, p, o)]

    def _match(self, s: Optional[TermId], p: Optional[TermId], o: Optional[TermId]) -> List[_Key]:
        if s is not None and p is not None and o is not None:
            return [(s, p, o)] if (s, p, o) in self._facts else []
        if s is not None:
            by_p = self._spo.get(s, {})
            if p is not None:
                return [(s, p, x) for x in by_p.get(p, ())]
            if o is not None:
                return [(s, x, o) for x in self._osp.get(o, {}).get(s, ())]
            return [(s, pp, oo) for pp, objs in by_p.items() for oo in objs]
        if p is not None:
            by_o = self._pos.get(p, {})
            if o is not None:
                return [(x, p, o) for x in by_o.get(o, ())]
            return [(ss, p, oo) for oo, subs in by_o.items() for ss in subs]
        if o is not None:
            return [(ss, pp, o) for ss, preds in self._osp.get(o, {}).items() for pp in preds]
        return list(self._facts)

    def __len__(self) -> int:
        return len(self._facts)

    # -------------------------------------------------------------------------
    # Columnar view
    # -------------------------------------------------------------------------

    def scan_facts(self) -> pl.DataFrame:
        """All facts as a DataFrame of TermIds (columns s, p, o)."""
        facts = list(self._facts)
        return pl.DataFrame(
            {
                "s": [f[0] for f in facts],
                "p": [f[1] for f in facts],
                "o": [f[2] for f in facts],
            },
            schema={"s": pl.UInt64, "p": pl.UInt64, "o": pl.UInt64},
        )

    def to_dataframe(self) -> pl.DataFrame:
        """
        All facts as a decoded DataFrame.

        Columns: subject, predicate, object (N-Triples rendering of each term)
        and object_kind (TermKind value). Rows are sorted.
        """
        triples = sorted(self.find(), key=Triple.sort_key)
        return pl.DataFrame(
            {
                "subject": [str(t.subject) for t in triples],
                "predicate": [t.predicate.lex for t in triples],
                "object": [str(t.object) for t in triples],
                "object_kind": [int(t.object.kind) for t in triples],
            },
            schema={
                "subject": pl.Utf8,
                "predicate": pl.Utf8,
                "object": pl.Utf8,
                "object_kind": pl.UInt8,
            },
        )

    def stats(self) -> Dict[str, int]:
        """Basic store statistics."""
        return {
            "total_facts": len(self._facts),
            "unique_subjects": len(self._spo),
            "unique_predicates": len(self._pos),
            "unique_objects": len(self._osp),
            "terms": len(self._term_dict),
        }
