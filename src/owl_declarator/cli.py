"""
Command line entry point.

    owl-declarator ontology.ttl -o fixed.ttl --config declarator.yaml -v
"""

import argparse
import logging
import sys
from typing import List, Optional

from owl_declarator import __version__
from owl_declarator.config import ConfigValidationError, ConfigValidator, DeclarationConfig, load_config
from owl_declarator.declarations.engine import declare_missing
from owl_declarator.declarations.transform import TransformError
from owl_declarator.formats.rdflib_graph import parse_file, serialize

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="owl-declarator",
        description="Restore the missing OWL declarations of an ontology file",
    )
    parser.add_argument("input", help="Input RDF file")
    parser.add_argument("--output", "-o", type=str, default=None,
                        help="Output file (default: stdout)")
    parser.add_argument("--format", "-f", type=str, default=None,
                        help="Input format (default: guessed from extension)")
    parser.add_argument("--output-format", type=str, default="turtle",
                        help="Output format (default: turtle)")
    parser.add_argument("--config", type=str, default=None,
                        help="YAML or JSON configuration file")
    parser.add_argument("--max-rounds", type=int, default=None,
                        help="Maximum number of reasoner retry rounds")
    parser.add_argument("--guess-class", action="store_true",
                        help="Guess class or datatype for ambiguous restriction fillers")
    parser.add_argument("--no-annotation-default", action="store_true",
                        help="Never default undecidable properties to annotation properties")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase log verbosity (-v info, -vv debug)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _resolve_config(args: argparse.Namespace) -> DeclarationConfig:
    config = load_config(args.config) if args.config else DeclarationConfig()
    if args.max_rounds is not None:
        config.max_rounds = args.max_rounds
    if args.guess_class:
        config.guess_class = True
    if args.no_annotation_default:
        config.annotation_default = False
    ConfigValidator.validate_or_raise(config)
    return config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        config = _resolve_config(args)
    except (ConfigValidationError, OSError, ValueError) as e:
        print(f"owl-declarator: configuration error: {e}", file=sys.stderr)
        return 2

    try:
        store = parse_file(args.input, args.format)
    except Exception as e:
        print(f"owl-declarator: cannot read {args.input}: {e}", file=sys.stderr)
        return 1

    try:
        result = declare_missing(store, config)
    except TransformError as e:
        print(f"owl-declarator: declaration failed for {args.input}: {e}", file=sys.stderr)
        return 1
    for t in result.unresolved:
        logger.info(f"Unresolved: {t}")

    output = serialize(store, args.output_format)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        logger.info(f"Wrote {len(store)} triples to {args.output}")
    else:
        sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
