"""
Declaration Engine.

Restores the missing declarations of an ontology graph: runs the manifest
phase once, then the reasoner phase, and finally removes the temporary
anonymous-individual markers and the RDFS typings made redundant by a more
specific OWL declaration.

Usage:
    store = FactStore.from_triples(triples)
    result = declare_missing(store)
    print(result.summary())
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

import polars as pl

from owl_declarator.config import ConfigValidator, DeclarationConfig
from owl_declarator.declarations.manifest import ManifestDeclarator
from owl_declarator.declarations.reasoner import ReasonerDeclarator, strategy_ladder
from owl_declarator.declarations.transform import Transform
from owl_declarator.storage.facts import GraphStore, Triple
from owl_declarator.vocabulary import (
    ANONYMOUS_INDIVIDUAL,
    OWL_ANNOTATION_PROPERTY,
    OWL_CLASS,
    OWL_DATATYPE_PROPERTY,
    OWL_NAMED_INDIVIDUAL,
    OWL_OBJECT_PROPERTY,
    OWL_RESTRICTION,
    RDF_PROPERTY,
    RDF_TYPE,
    RDFS_CLASS,
    RDFS_DATATYPE,
    Vocabulary,
)

logger = logging.getLogger(__name__)

# Category name -> declaration type
CATEGORIES = {
    "Class": OWL_CLASS,
    "Datatype": RDFS_DATATYPE,
    "ObjectProperty": OWL_OBJECT_PROPERTY,
    "DataProperty": OWL_DATATYPE_PROPERTY,
    "AnnotationProperty": OWL_ANNOTATION_PROPERTY,
    "NamedIndividual": OWL_NAMED_INDIVIDUAL,
    "Restriction": OWL_RESTRICTION,
}

OWL_PROPERTY_TYPES = (OWL_OBJECT_PROPERTY, OWL_DATATYPE_PROPERTY, OWL_ANNOTATION_PROPERTY)
OWL_CLASS_TYPES = (OWL_CLASS, RDFS_DATATYPE)


@dataclass
class DeclarationResult:
    """Outcome of one engine run."""
    added: List[Triple] = field(default_factory=list)
    removed: List[Triple] = field(default_factory=list)
    unresolved: List[Triple] = field(default_factory=list)
    rounds: int = 0
    category_counts: pl.DataFrame = field(default_factory=lambda: category_counts(None))
    rule_stats: Dict[str, Dict[str, int]] = field(default_factory=dict)
    duration_ms: float = 0.0

    @property
    def resolved(self) -> bool:
        return not self.unresolved

    def summary(self) -> Dict[str, Any]:
        return {
            "added": len(self.added),
            "removed": len(self.removed),
            "unresolved": len(self.unresolved),
            "rounds": self.rounds,
            "duration_ms": round(self.duration_ms, 3),
        }


def category_counts(store: Optional[GraphStore]) -> pl.DataFrame:
    """Number of resources declared in each category, as columns category / count."""
    names = list(CATEGORIES)
    counts = [
        len(store.find(None, RDF_TYPE, CATEGORIES[n])) if store is not None else 0
        for n in names
    ]
    return pl.DataFrame(
        {"category": names, "count": counts},
        schema={"category": pl.Utf8, "count": pl.UInt32},
    )


class OWLDeclarationTransform(Transform):
    """
    Manifest and reasoner phases plus cleanup, as a single transform.

    The cleanup runs even when a phase fails.
    """

    def __init__(
        self,
        store: GraphStore,
        vocabulary: Optional[Vocabulary] = None,
        config: Optional[DeclarationConfig] = None,
    ):
        config = config if config is not None else DeclarationConfig()
        ConfigValidator.validate_or_raise(config)
        super().__init__(store, vocabulary if vocabulary is not None else config.build_vocabulary())
        self._config = config
        self._reasoner = ReasonerDeclarator(
            store,
            self._vocabulary,
            ladder=strategy_ladder(config.annotation_default, config.guess_class),
            max_rounds=config.max_rounds,
        )
        self._manifest = ManifestDeclarator(store, self._vocabulary, process_swrl=config.process_swrl)

    @property
    def config(self) -> DeclarationConfig:
        return self._config

    @property
    def reasoner(self) -> ReasonerDeclarator:
        return self._reasoner

    def test(self) -> bool:
        return self._config.enabled

    def perform(self) -> None:
        try:
            self._manifest.process()
            self._reasoner.process()
        finally:
            self.clean()

    def uncertain_triples(self) -> List[Triple]:
        return self._reasoner.unresolved

    def clean(self) -> None:
        """Remove the anonymous-individual markers and redundant RDFS typings."""
        markers = self._store.remove_all(None, RDF_TYPE, ANONYMOUS_INDIVIDUAL)
        garbage = 0
        for t in self.statements(None, RDF_TYPE, RDF_PROPERTY):
            if t.subject.is_iri and self.has_any_type(t.subject, OWL_PROPERTY_TYPES):
                garbage += self._store.remove(t)
        for t in self.statements(None, RDF_TYPE, RDFS_CLASS):
            if t.subject.is_iri and self.has_any_type(t.subject, OWL_CLASS_TYPES):
                garbage += self._store.remove(t)
        logger.debug(f"{self.name}: removed {markers} marker(s) and {garbage} redundant typing(s)")

    def run(self) -> DeclarationResult:
        """Process the store and report what changed."""
        start = time.perf_counter()
        before = self._declarations()
        unresolved = self.process()
        after = self._declarations()
        result = DeclarationResult(
            added=sorted(after - before, key=Triple.sort_key),
            removed=sorted(before - after, key=Triple.sort_key),
            unresolved=unresolved,
            rounds=self._reasoner.rounds,
            category_counts=category_counts(self._store),
            rule_stats=self._reasoner.rule_stats,
            duration_ms=(time.perf_counter() - start) * 1000,
        )
        logger.info(
            f"Declarations: {len(result.added)} added, {len(result.removed)} removed, "
            f"{len(result.unresolved)} unresolved in {result.rounds} round(s)"
        )
        return result

    def _declarations(self) -> Set[Triple]:
        return set(self._store.find(None, RDF_TYPE, None))


def declare_missing(
    store: GraphStore,
    config: Optional[DeclarationConfig] = None,
    vocabulary: Optional[Vocabulary] = None,
) -> DeclarationResult:
    """
    Infer and add the missing declarations of the ontology held in store.

    Args:
        store: The graph to complete; modified in place
        config: Engine configuration (defaults if None)
        vocabulary: Reserved vocabulary; built from config if None

    Returns:
        DeclarationResult with added/removed declarations and diagnostics
    """
    return OWLDeclarationTransform(store, vocabulary, config).run()
