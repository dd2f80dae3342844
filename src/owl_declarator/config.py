"""
Declaration Engine Configuration.

Provides:
- DeclarationConfig: the knobs of one engine run
- Configuration validation
- Loading from YAML or JSON files
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from owl_declarator.vocabulary import VOCABULARIES, Vocabulary

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 10
DEFAULT_VOCABULARIES = ("owl", "dc", "skos", "swrl")


class ConfigValidationError(Exception):
    """Configuration validation error."""
    pass


@dataclass
class DeclarationConfig:
    """Configuration for a declaration run."""
    enabled: bool = True
    max_rounds: int = DEFAULT_MAX_ROUNDS
    annotation_default: bool = True   # default undecidable properties to annotation properties
    guess_class: bool = False         # guess class / datatype for undecidable fillers
    process_swrl: bool = True
    vocabularies: List[str] = field(default_factory=lambda: list(DEFAULT_VOCABULARIES))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "max_rounds": self.max_rounds,
            "annotation_default": self.annotation_default,
            "guess_class": self.guess_class,
            "process_swrl": self.process_swrl,
            "vocabularies": list(self.vocabularies),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeclarationConfig":
        return cls(
            enabled=data.get("enabled", True),
            max_rounds=data.get("max_rounds", DEFAULT_MAX_ROUNDS),
            annotation_default=data.get("annotation_default", True),
            guess_class=data.get("guess_class", False),
            process_swrl=data.get("process_swrl", True),
            vocabularies=list(data.get("vocabularies", DEFAULT_VOCABULARIES)),
        )

    def build_vocabulary(self) -> Vocabulary:
        """Union of the configured named vocabularies."""
        ConfigValidator.validate_or_raise(self)
        return Vocabulary.union(*(VOCABULARIES[name] for name in self.vocabularies))

    def save(self, path: Union[str, Path]) -> None:
        """Save configuration as YAML (or JSON for a .json path)."""
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                json.dump(self.to_dict(), f, indent=2)
            else:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


class ConfigValidator:
    """Validates declaration configuration."""

    @staticmethod
    def validate(config: DeclarationConfig) -> List[str]:
        """
        Validate configuration.

        Returns list of error messages (empty if valid).
        """
        errors = []

        if not isinstance(config.max_rounds, int) or isinstance(config.max_rounds, bool):
            errors.append(f"max_rounds must be an integer, got {config.max_rounds!r}")
        elif config.max_rounds <= 0:
            errors.append("max_rounds must be positive")

        for name in ("enabled", "annotation_default", "guess_class", "process_swrl"):
            if not isinstance(getattr(config, name), bool):
                errors.append(f"{name} must be a boolean")

        if not config.vocabularies:
            errors.append("at least one vocabulary is required")
        for name in config.vocabularies:
            if name not in VOCABULARIES:
                errors.append(
                    f"Unknown vocabulary: {name} (expected one of {', '.join(sorted(VOCABULARIES))})"
                )

        return errors

    @staticmethod
    def validate_or_raise(config: DeclarationConfig) -> None:
        """Validate configuration, raising on errors."""
        errors = ConfigValidator.validate(config)
        if errors:
            raise ConfigValidationError("; ".join(errors))


def load_config(path: Union[str, Path]) -> DeclarationConfig:
    """
    Load and validate a configuration file.

    JSON is used for a .json suffix, YAML otherwise. An empty file yields
    the defaults.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigValidationError(f"Configuration root must be a mapping: {path}")
    config = DeclarationConfig.from_dict(data)
    ConfigValidator.validate_or_raise(config)
    logger.debug(f"Loaded configuration from {path}")
    return config
