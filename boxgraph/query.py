"""Lookups over a loaded knowledge graph.

All operations are pure functions of a :class:`QueryContext`, which is built
once from the persisted artifacts and handed to each handler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .models import Box, ErrorTemplateSet, Legend, SearchIndex
from .stores import ArtifactStore

KEYWORD_RESULT_LIMIT = 10
DEPENDENCY_SUGGESTION_LIMIT = 5
BOX_SUGGESTION_LIMIT = 10


@dataclass
class QueryContext:
    legend: Legend
    search_index: SearchIndex
    error_templates: ErrorTemplateSet

    @classmethod
    def load(cls, output_dir: Path) -> "QueryContext":
        """Load the legend, search index and error templates; failures propagate."""
        store = ArtifactStore(output_dir)
        return cls(
            legend=store.load_legend(),
            search_index=store.load_search_index(),
            error_templates=store.load_error_templates(),
        )


@dataclass
class CategoryResult:
    name: str
    found: bool
    boxes: List[Box] = field(default_factory=list)
    available: List[Tuple[str, int]] = field(default_factory=list)


@dataclass
class KeywordMatch:
    box: Box
    relevance: int


@dataclass
class KeywordResult:
    keyword: str
    matches: List[KeywordMatch]
    total: int
    fallback: bool = False

    @property
    def overflow(self) -> int:
        return max(0, self.total - len(self.matches))


@dataclass
class DependencyResult:
    name: str
    found: bool
    dependents: List[Box] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


@dataclass
class BoxResult:
    box_id: str
    box: Optional[Box]
    suggestions: List[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.box is not None


@dataclass
class Stats:
    boxes: int
    categories: int
    dependencies: int
    embeddings: int
    error_templates: int
    metadata: Dict[str, Any]
    security: Dict[str, Any]


def list_categories(ctx: QueryContext) -> List[Tuple[str, int]]:
    """Return ``(category, box count)`` pairs, largest first."""
    counts = [(name, len(ids)) for name, ids in ctx.legend.categories.items()]
    return sorted(counts, key=lambda item: item[1], reverse=True)


def by_category(ctx: QueryContext, name: str) -> CategoryResult:
    box_ids = ctx.legend.categories.get(name)
    if box_ids is None:
        available = [(category, len(ids)) for category, ids in ctx.legend.categories.items()]
        return CategoryResult(name=name, found=False, available=available)
    boxes = [ctx.legend.boxes[box_id] for box_id in box_ids if box_id in ctx.legend.boxes]
    return CategoryResult(name=name, found=True, boxes=boxes)


def search_text(box: Box) -> str:
    """The lowercased text blob keyword queries run against."""
    parts = [
        box.path,
        box.description,
        box.ai_context,
        " ".join(box.interface.functions),
        " ".join(box.interface.classes),
        " ".join(box.interface.opcodes),
    ]
    return "\n".join(parts).lower()


def by_keyword(
    ctx: QueryContext, keyword: str, *, limit: int = KEYWORD_RESULT_LIMIT
) -> KeywordResult:
    """Rank boxes by how often ``keyword`` occurs in their text blob."""
    needle = keyword.lower()
    matches: List[KeywordMatch] = []
    if needle:
        for box in ctx.legend.boxes.values():
            relevance = search_text(box).count(needle)
            if relevance:
                matches.append(KeywordMatch(box=box, relevance=relevance))
    # sorted() is stable, so equal counts keep registry order.
    ranked = sorted(matches, key=lambda match: match.relevance, reverse=True)
    return KeywordResult(keyword=keyword, matches=ranked[:limit], total=len(ranked))


def by_dependency(ctx: QueryContext, name: str) -> DependencyResult:
    box_ids = ctx.legend.dependencies.get(name)
    if box_ids is None:
        suggestions = [
            dependency
            for dependency in ctx.legend.dependencies
            if name in dependency or dependency in name
        ]
        return DependencyResult(
            name=name, found=False, suggestions=suggestions[:DEPENDENCY_SUGGESTION_LIMIT]
        )
    dependents = [ctx.legend.boxes[box_id] for box_id in box_ids if box_id in ctx.legend.boxes]
    return DependencyResult(name=name, found=True, dependents=dependents)


def by_box_id(ctx: QueryContext, box_id: str) -> BoxResult:
    box = ctx.legend.boxes.get(box_id)
    if box is not None:
        return BoxResult(box_id=box_id, box=box)
    needle = box_id.lower()
    suggestions = [candidate for candidate in ctx.legend.boxes if needle in candidate.lower()]
    return BoxResult(box_id=box_id, box=None, suggestions=suggestions[:BOX_SUGGESTION_LIMIT])


def stats(ctx: QueryContext) -> Stats:
    return Stats(
        boxes=len(ctx.legend.boxes),
        categories=len(ctx.legend.categories),
        dependencies=len(ctx.legend.dependencies),
        embeddings=len(ctx.search_index.vectors),
        error_templates=len(ctx.error_templates.templates),
        metadata=ctx.legend.metadata.to_dict(),
        security=dict(ctx.legend.security),
    )


def semantic(ctx: QueryContext, query: str) -> KeywordResult:
    """Keyword search standing in for vector retrieval.

    The stored vectors are hash placeholders, so ranking by them would be
    meaningless. The result is flagged as a fallback so callers can say so.
    """
    result = by_keyword(ctx, query)
    result.fallback = True
    return result


__all__ = [
    "BoxResult",
    "CategoryResult",
    "DependencyResult",
    "KeywordMatch",
    "KeywordResult",
    "QueryContext",
    "Stats",
    "by_box_id",
    "by_category",
    "by_dependency",
    "by_keyword",
    "list_categories",
    "search_text",
    "semantic",
    "stats",
]
