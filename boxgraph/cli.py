"""CLI entrypoint for knowledge graph builds (``boxgraph``)."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .logging import configure_logging, get_logger
from .orchestrator import Orchestrator


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="boxgraph",
        description="Build a box registry, search index and repair templates for a source tree.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output directory for artifacts (defaults to output_dir in .boxgraph.yml).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for boxgraph builds."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    logger = get_logger("cli")

    orchestrator = Orchestrator()
    try:
        result = orchestrator.run_build(args.path, output_dir=args.output)
    except Exception as exc:
        logger.exception("Build aborted")
        parser.exit(1, f"boxgraph build failed: {exc}\n")

    print("Knowledge graph complete")
    print(f"  Boxes:           {len(result.legend.boxes)}")
    print(f"  Categories:      {len(result.legend.categories)}")
    print(f"  Embeddings:      {len(result.embeddings)}")
    print(f"  Error templates: {len(result.error_templates.templates)}")
    print(f"  Output:          {_relativize(result.output_dir)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
