"""
Declaration inference: the transform protocol, the classifier, the manifest
and reasoner phases and the engine that runs them.
"""

from owl_declarator.declarations.transform import Transform, TransformError
from owl_declarator.declarations.base import BaseDeclarator
from owl_declarator.declarations.manifest import ManifestDeclarator
from owl_declarator.declarations.reasoner import (
    Res,
    Strategy,
    STRICT,
    GUESS_CLASS,
    PREFER_ANNOTATION,
    RerunRecord,
    ReasonerDeclarator,
    strategy_ladder,
)
from owl_declarator.declarations.engine import (
    CATEGORIES,
    DeclarationResult,
    OWLDeclarationTransform,
    category_counts,
    declare_missing,
)

__all__ = [
    "Transform",
    "TransformError",
    "BaseDeclarator",
    "ManifestDeclarator",
    "Res",
    "Strategy",
    "STRICT",
    "GUESS_CLASS",
    "PREFER_ANNOTATION",
    "RerunRecord",
    "ReasonerDeclarator",
    "strategy_ladder",
    "CATEGORIES",
    "DeclarationResult",
    "OWLDeclarationTransform",
    "category_counts",
    "declare_missing",
]
