"""FastAPI application exposing read-only knowledge graph queries."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Callable, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel

from .. import query
from ..config import load_config
from ..logging import configure_logging
from ..models import Box


class HealthResponse(BaseModel):
    status: str


class BoxSummary(BaseModel):
    id: str
    path: str
    category: str
    description: str
    relevance: Optional[int] = None


class CategoryCount(BaseModel):
    name: str
    count: int


class CategoryResponse(BaseModel):
    name: str
    boxes: List[BoxSummary]


class SearchResponse(BaseModel):
    query: str
    total: int
    fallback: bool
    results: List[BoxSummary]


class DependencyResponse(BaseModel):
    name: str
    dependents: List[BoxSummary]


class StatsResponse(BaseModel):
    boxes: int
    categories: int
    dependencies: int
    embeddings: int
    error_templates: int
    metadata: Dict[str, object]
    security: Dict[str, object]


def _summary(box: Box, relevance: Optional[int] = None) -> BoxSummary:
    return BoxSummary(
        id=box.id,
        path=box.path,
        category=box.category,
        description=box.description,
        relevance=relevance,
    )


def _search_response(result: query.KeywordResult) -> SearchResponse:
    return SearchResponse(
        query=result.keyword,
        total=result.total,
        fallback=result.fallback,
        results=[_summary(match.box, match.relevance) for match in result.matches],
    )


def _default_context() -> query.QueryContext:
    return query.QueryContext.load(load_config(Path.cwd()).output_dir)


def create_app(
    context_factory: Callable[[], query.QueryContext] = _default_context,
) -> FastAPI:
    """Create the FastAPI application; artifacts are loaded once at creation."""
    context = context_factory()
    app = FastAPI(title="boxgraph query service", version="1.0.0")

    def get_context() -> query.QueryContext:
        return context

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/categories", response_model=List[CategoryCount])
    async def categories(
        ctx: query.QueryContext = Depends(get_context),
    ) -> List[CategoryCount]:
        return [CategoryCount(name=name, count=count) for name, count in query.list_categories(ctx)]

    @app.get("/categories/{name}", response_model=CategoryResponse)
    async def category(
        name: str, ctx: query.QueryContext = Depends(get_context)
    ) -> CategoryResponse:
        result = query.by_category(ctx, name)
        if not result.found:
            raise HTTPException(
                status_code=404,
                detail={
                    "message": f"Category '{name}' not found",
                    "available": [
                        {"name": category, "count": count} for category, count in result.available
                    ],
                },
            )
        return CategoryResponse(name=name, boxes=[_summary(box) for box in result.boxes])

    @app.get("/search", response_model=SearchResponse)
    async def search(
        q: str = Query(..., min_length=1), ctx: query.QueryContext = Depends(get_context)
    ) -> SearchResponse:
        return _search_response(query.by_keyword(ctx, q))

    @app.get("/semantic", response_model=SearchResponse)
    async def semantic(
        q: str = Query(..., min_length=1), ctx: query.QueryContext = Depends(get_context)
    ) -> SearchResponse:
        return _search_response(query.semantic(ctx, q))

    @app.get("/dependencies/{name:path}", response_model=DependencyResponse)
    async def dependency(
        name: str, ctx: query.QueryContext = Depends(get_context)
    ) -> DependencyResponse:
        result = query.by_dependency(ctx, name)
        if not result.found:
            raise HTTPException(
                status_code=404,
                detail={
                    "message": f"No boxes depend on '{name}'",
                    "suggestions": result.suggestions,
                },
            )
        return DependencyResponse(
            name=name, dependents=[_summary(box) for box in result.dependents]
        )

    @app.get("/boxes/{box_id}")
    async def box(box_id: str, ctx: query.QueryContext = Depends(get_context)) -> Dict[str, object]:
        result = query.by_box_id(ctx, box_id)
        if result.box is None:
            raise HTTPException(
                status_code=404,
                detail={
                    "message": f"Box '{box_id}' not found",
                    "suggestions": result.suggestions,
                },
            )
        return result.box.to_dict()

    @app.get("/stats", response_model=StatsResponse)
    async def stats(ctx: query.QueryContext = Depends(get_context)) -> StatsResponse:
        summary = query.stats(ctx)
        return StatsResponse(
            boxes=summary.boxes,
            categories=summary.categories,
            dependencies=summary.dependencies,
            embeddings=summary.embeddings,
            error_templates=summary.error_templates,
            metadata=summary.metadata,
            security=summary.security,
        )

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)


def main(argv: list[str] | None = None) -> None:  # pragma: no cover - integration path
    """Entry point for ``boxgraph-serve``; run from the project root."""
    parser = argparse.ArgumentParser(
        prog="boxgraph-serve", description="Serve knowledge graph queries over HTTP."
    )
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")
    args = parser.parse_args(argv)
    configure_logging()
    run_service(host=args.host, port=args.port)
