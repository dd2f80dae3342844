"""
Terms and the Term Dictionary.

RDF nodes are modelled as a closed tagged union over three kinds
(IRI, blank node, literal). The dictionary maps every term to a u64 TermId
whose high bits carry the kind, so the kind of an encoded node is an O(1)
bit test.

Key design decisions:
- Tagged ID space: high bits encode term kind
- Interning: equal terms always get the same TermId
- Terms are immutable and totally ordered, so rule evaluation can be sorted
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Optional, Tuple

import polars as pl


# =============================================================================
# Term Identity and Encoding
# =============================================================================

class TermKind(IntEnum):
    """
    RDF term kind enumeration.

    Encoded in the high 2 bits of TermId for O(1) kind detection.
    """
    IRI = 0
    LITERAL = 1
    BNODE = 2


# Type alias for term identifiers (u64)
TermId = int

# Constants for ID encoding
KIND_SHIFT = 62
KIND_MASK = 0x3  # 2 bits
PAYLOAD_MASK = (1 << KIND_SHIFT) - 1

XSD_STRING = "http://www.w3.org/2001/XMLSchema#string"
RDF_LANGSTRING = "http://www.w3.org/1999/02/22-rdf-syntax-ns#langString"


def make_term_id(kind: TermKind, payload: int) -> TermId:
    """Create a TermId from kind and payload."""
    return (kind << KIND_SHIFT) | (payload & PAYLOAD_MASK)


def get_term_kind(term_id: TermId) -> TermKind:
    """Extract the term kind from a TermId (O(1) operation)."""
    return TermKind((term_id >> KIND_SHIFT) & KIND_MASK)


# =============================================================================
# Term Representation
# =============================================================================

@dataclass(frozen=True, slots=True)
class Term:
    """
    A graph node.

    Attributes:
        kind: The type of term (IRI, LITERAL, BNODE)
        lex: Lexical form (IRI string, literal value, bnode label)
        datatype: Datatype IRI (typed literals only)
        lang: Language tag (language-tagged literals only)
    """
    kind: TermKind
    lex: str
    datatype: Optional[str] = None
    lang: Optional[str] = None

    @classmethod
    def iri(cls, value: str) -> "Term":
        """Create an IRI term."""
        return cls(kind=TermKind.IRI, lex=value)

    @classmethod
    def literal(
        cls,
        value: str,
        datatype: Optional[str] = None,
        lang: Optional[str] = None,
    ) -> "Term":
        """Create a literal term."""
        if lang is not None:
            datatype = None
        elif datatype == XSD_STRING:
            datatype = None
        return cls(kind=TermKind.LITERAL, lex=value, datatype=datatype, lang=lang)

    @classmethod
    def bnode(cls, label: str) -> "Term":
        """Create a blank node term."""
        return cls(kind=TermKind.BNODE, lex=label)

    @property
    def is_iri(self) -> bool:
        return self.kind == TermKind.IRI

    @property
    def is_bnode(self) -> bool:
        return self.kind == TermKind.BNODE

    @property
    def is_literal(self) -> bool:
        return self.kind == TermKind.LITERAL

    @property
    def is_resource(self) -> bool:
        """IRIs and blank nodes; everything that may stand as a subject."""
        return self.kind != TermKind.LITERAL

    @property
    def effective_datatype(self) -> Optional[str]:
        """
        The datatype IRI of a literal as RDF 1.1 defines it.

        Plain literals are xsd:string, language-tagged ones rdf:langString.
        Returns None for non-literals.
        """
        if self.kind != TermKind.LITERAL:
            return None
        if self.lang is not None:
            return RDF_LANGSTRING
        return self.datatype or XSD_STRING

    def sort_key(self) -> Tuple[int, str, str, str]:
        return (int(self.kind), self.lex, self.datatype or "", self.lang or "")

    def __lt__(self, other: "Term") -> bool:
        if not isinstance(other, Term):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        if self.kind == TermKind.IRI:
            return f"<{self.lex}>"
        if self.kind == TermKind.BNODE:
            return f"_:{self.lex}"
        escaped = self.lex.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
        if self.lang:
            return f'"{escaped}"@{self.lang}'
        if self.datatype:
            return f'"{escaped}"^^<{self.datatype}>'
        return f'"{escaped}"'


# =============================================================================
# Term Dictionary
# =============================================================================

class TermDict:
    """
    Dictionary-encoded term catalog.

    Maps RDF terms to integer TermIds with O(1) kind detection
    via the tagged ID space.

    Thread-safety: NOT thread-safe. Use external synchronization for concurrent access.
    """

    def __init__(self):
        # Per-kind sequence counters
        # NOTE: Start at 1 to reserve TermId 0 as the universal "null" value
        self._next_payload: dict[TermKind, int] = {kind: 1 for kind in TermKind}

        # Forward map: Term -> TermId (for interning)
        self._term_to_id: dict[Term, TermId] = {}

        # Reverse map: TermId -> Term (for lookup)
        self._id_to_term: dict[TermId, Term] = {}

    def _allocate_id(self, kind: TermKind) -> TermId:
        """Allocate the next TermId for a given kind."""
        payload = self._next_payload[kind]
        self._next_payload[kind] = payload + 1
        return make_term_id(kind, payload)

    def get_or_create(self, term: Term) -> TermId:
        """
        Intern a term, returning its TermId.

        If the term already exists, returns the existing ID.
        Otherwise, allocates a new ID and stores the term.
        """
        existing = self._term_to_id.get(term)
        if existing is not None:
            return existing
        term_id = self._allocate_id(term.kind)
        self._term_to_id[term] = term_id
        self._id_to_term[term_id] = term
        return term_id

    def get_or_create_batch(self, terms: list[Term]) -> list[TermId]:
        """Bulk intern a batch of terms. Returns TermIds in the same order."""
        return [self.get_or_create(term) for term in terms]

    def get_id(self, term: Term) -> Optional[TermId]:
        """Get the TermId for a term if it exists, without creating it."""
        return self._term_to_id.get(term)

    def lookup(self, term_id: TermId) -> Optional[Term]:
        """Look up a term by its ID."""
        return self._id_to_term.get(term_id)

    def contains(self, term: Term) -> bool:
        """Check if a term is already interned."""
        return term in self._term_to_id

    def __len__(self) -> int:
        return len(self._id_to_term)

    def __iter__(self) -> Iterator[Tuple[TermId, Term]]:
        return iter(self._id_to_term.items())

    def count_by_kind(self) -> dict[TermKind, int]:
        """Return counts of interned terms by kind."""
        return {kind: self._next_payload[kind] - 1 for kind in TermKind}

    def to_dataframe(self) -> pl.DataFrame:
        """
        Export the term dictionary to a Polars DataFrame.

        Schema:
        - term_id: u64
        - kind: u8
        - lex: string
        - datatype: string (nullable)
        - lang: string (nullable)
        """
        return pl.DataFrame(
            {
                "term_id": [tid for tid in self._id_to_term],
                "kind": [int(t.kind) for t in self._id_to_term.values()],
                "lex": [t.lex for t in self._id_to_term.values()],
                "datatype": [t.datatype for t in self._id_to_term.values()],
                "lang": [t.lang for t in self._id_to_term.values()],
            },
            schema={
                "term_id": pl.UInt64,
                "kind": pl.UInt8,
                "lex": pl.Utf8,
                "datatype": pl.Utf8,
                "lang": pl.Utf8,
            },
        )
