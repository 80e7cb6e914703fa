"""Query CLI over a built knowledge graph (``boxgraph-query``)."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Dict, List, Sequence

from . import query
from .config import load_config
from .logging import configure_logging, get_logger
from .models import Box

HELP_TEXT = """\
boxgraph-query: look up boxes in a knowledge graph built by `boxgraph`.

Usage: boxgraph-query <command> [arguments]

Commands:

  category <name>       List all boxes in a category
                        Example: boxgraph-query category script-engine

  keyword <word>        Search for a keyword in box metadata
                        Example: boxgraph-query keyword transaction

  depends <filename>    Show which boxes include a file
                        Example: boxgraph-query depends script.h

  box <boxId>           Show detailed info about a box
                        Example: boxgraph-query box ScriptBox

  categories            List all available categories

  stats                 Show overall statistics

  semantic <query>      Natural language search (keyword fallback, no vector search)
                        Example: boxgraph-query semantic "transaction validation"

  help                  Show this help message

Artifacts are read from the output directory configured in .boxgraph.yml
(default: ./project-knowledge).
"""

DESCRIPTION_PREVIEW = 80
LIST_PREVIEW = 10


def format_bytes(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def _preview(text: str) -> str:
    return f"{text[:DESCRIPTION_PREVIEW]}..."


def _print_box_line(box: Box, *, relevance: int | None = None) -> None:
    header = f"{box.id} ({relevance} occurrences)" if relevance is not None else box.id
    print(header)
    print(f"   Path: {box.path}")
    print(f"   Category: {box.category}")
    print(f"   Desc: {_preview(box.description)}")
    print()


def show_category(ctx: query.QueryContext, name: str) -> None:
    print(f"\nQuery: boxes in category \"{name}\"\n")
    result = query.by_category(ctx, name)
    if not result.found:
        print(f"Category \"{name}\" not found")
        print("\nAvailable categories:")
        for category, count in result.available:
            print(f"  - {category} ({count} boxes)")
        return
    print(f"Found {len(result.boxes)} boxes:\n")
    for box in result.boxes:
        print(box.id)
        print(f"   Path: {box.path}")
        print(f"   Desc: {_preview(box.description)}")
        print(
            f"   Functions: {len(box.interface.functions)} | Classes: {len(box.interface.classes)}"
        )
        print()


def _print_keyword_result(result: query.KeywordResult) -> None:
    print(f"Found {result.total} matches:\n")
    for match in result.matches:
        _print_box_line(match.box, relevance=match.relevance)
    if result.overflow:
        print(f"... and {result.overflow} more matches\n")


def show_keyword(ctx: query.QueryContext, keyword: str) -> None:
    print(f"\nQuery: boxes containing \"{keyword}\"\n")
    _print_keyword_result(query.by_keyword(ctx, keyword))


def show_dependents(ctx: query.QueryContext, name: str) -> None:
    print(f"\nQuery: what depends on \"{name}\"?\n")
    result = query.by_dependency(ctx, name)
    if not result.found:
        print(f"No boxes depend on \"{name}\"")
        if result.suggestions:
            print("\nSimilar dependencies:")
            for suggestion in result.suggestions:
                print(f"  - {suggestion}")
        return
    print(f"{len(result.dependents)} boxes depend on {name}:\n")
    for box in result.dependents:
        print(box.id)
        print(f"   Path: {box.path}")
        print(f"   Category: {box.category}")
        print()


def _print_list(items: List[str], *, indent: str) -> None:
    for item in items[:LIST_PREVIEW]:
        print(f"{indent}- {item}")
    if len(items) > LIST_PREVIEW:
        print(f"{indent}... and {len(items) - LIST_PREVIEW} more")


def show_box(ctx: query.QueryContext, box_id: str) -> None:
    print(f"\nBox details: {box_id}\n")
    result = query.by_box_id(ctx, box_id)
    box = result.box
    if box is None:
        print(f"Box \"{box_id}\" not found")
        if result.suggestions:
            print("\nSimilar boxes:")
            for suggestion in result.suggestions:
                print(f"  - {suggestion}")
        return

    print(f"ID:          {box.id}")
    print(f"Path:        {box.path}")
    print(f"Type:        {box.type}")
    print(f"Category:    {box.category}")
    print("\nDescription:")
    print(f"  {box.description}")
    print("\nAI Context:")
    for line in box.ai_context.splitlines():
        print(f"  {line}")
    print("\nInterface:")
    print(f"  Functions:   {len(box.interface.functions)}")
    _print_list(box.interface.functions, indent="    ")
    print(f"  Classes:     {len(box.interface.classes)}")
    _print_list(box.interface.classes, indent="    ")
    print(f"  OP_CODES:    {len(box.interface.opcodes)}")
    if box.interface.opcodes:
        print(f"    - {', '.join(box.interface.opcodes)}")
    print(f"\nDependencies: {len(box.dependencies)}")
    _print_list(box.dependencies, indent="  ")
    print("\nMetadata:")
    print(f"  Lines:       {box.metadata.lines}")
    print(f"  Size:        {format_bytes(box.metadata.size)}")
    print(f"  Hash:        {box.metadata.hash[:16]}...")
    print()


def show_categories(ctx: query.QueryContext) -> None:
    ranked = query.list_categories(ctx)
    print(f"\nCategories ({len(ranked)} total):\n")
    for name, count in ranked:
        print(f"{name:<20} {count} boxes")
    print()


def show_stats(ctx: query.QueryContext) -> None:
    summary = query.stats(ctx)
    metadata = summary.metadata
    print(f"\n{metadata.get('project', 'Project')} Knowledge Graph Statistics\n")
    print(f"Total Boxes:       {summary.boxes}")
    print(f"Categories:        {summary.categories}")
    print(f"Dependencies:      {summary.dependencies}")
    print(f"Embeddings:        {summary.embeddings}")
    print(f"Error Templates:   {summary.error_templates}")
    print(f"\nProject:           {metadata.get('project', '')}")
    print(f"Description:       {metadata.get('description', '')}")
    print(f"Version:           {metadata.get('version', '')}")
    print(f"Protocol:          {metadata.get('protocol', '')}")
    print(f"Created:           {metadata.get('created', '')}")
    if summary.security:
        print("\nSecurity Status:")
        for key, value in summary.security.items():
            if isinstance(value, list):
                value = ", ".join(str(item) for item in value) or "none"
            elif isinstance(value, bool):
                value = "yes" if value else "no"
            print(f"  {key + ':':<17}{value}")
    print()


def show_semantic(ctx: query.QueryContext, text: str) -> None:
    print(f"\nSemantic query: \"{text}\"\n")
    result = query.semantic(ctx, text)
    print(
        "(Note: keyword fallback. Stored vectors are hash placeholders, "
        "so no vector search is performed.)\n"
    )
    _print_keyword_result(result)


_HANDLERS: Dict[str, Callable[[query.QueryContext, str], None]] = {
    "category": show_category,
    "keyword": show_keyword,
    "depends": show_dependents,
    "box": show_box,
    "categories": lambda ctx, _arg: show_categories(ctx),
    "stats": lambda ctx, _arg: show_stats(ctx),
    "semantic": show_semantic,
}


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint; returns the process exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args or args[0] == "help":
        print(HELP_TEXT)
        return 0

    command = args[0]
    handler = _HANDLERS.get(command)
    if handler is None:
        print(f"Unknown command: {command}")
        print("Run 'boxgraph-query help' for usage\n")
        return 0

    configure_logging()
    logger = get_logger("query")
    try:
        output_dir = load_config(Path.cwd()).output_dir
        ctx = query.QueryContext.load(output_dir)
    except Exception as exc:
        logger.error("Failed to load knowledge graph: %s", exc)
        return 1
    logger.info("Loaded %d boxes", len(ctx.legend.boxes))

    handler(ctx, " ".join(args[1:]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
