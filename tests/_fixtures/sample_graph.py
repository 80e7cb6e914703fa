"""Hand-built knowledge graphs for query-side tests."""

from __future__ import annotations

from typing import Dict, List, Mapping, Sequence

from boxgraph.models import (
    Box,
    BoxContract,
    BoxInterface,
    BoxMetrics,
    EmbeddingInfo,
    ErrorTemplateSet,
    Legend,
    LegendMetadata,
    SearchIndex,
)
from boxgraph.query import QueryContext

SAMPLE_PROJECT: Dict[str, str] = {
    "src/main.cpp": """
        // Main loop for the node
        #include "util.h"

        int main(int argc, char* argv[])
        {
            return 0;
        }

        bool AppMain(int argc, char* argv[])
        {
            return true;
        }
        """,
    "src/util.h": """
        // Shared helpers
        int64 GetTime();
        """,
    "src/net.cpp": """
        /*
         * Peer to peer networking
         */
        #include "util.h"
        #include <vector>

        void ThreadSocketHandler(void* parg)
        {
        }
        """,
    "README.md": """
        # Sample node
        Build with make.
        """,
}


def make_box(
    box_id: str,
    path: str,
    *,
    category: str = "other",
    description: str = "No description available",
    ai_context: str = "",
    functions: Sequence[str] = (),
    classes: Sequence[str] = (),
    opcodes: Sequence[str] = (),
    dependencies: Sequence[str] = (),
) -> Box:
    return Box(
        id=box_id,
        path=path,
        type="source",
        category=category,
        description=description,
        ai_context=ai_context,
        interface=BoxInterface(
            functions=list(functions), classes=list(classes), opcodes=list(opcodes)
        ),
        dependencies=list(dependencies),
        metadata=BoxMetrics(lines=10, size=2048, hash="f" * 64),
        contract=BoxContract(),
        embedding=EmbeddingInfo(available=True, model="lumen-bridge-v1", dimensions=16),
    )


def make_context(
    boxes: Sequence[Box], *, security: Mapping[str, object] | None = None
) -> QueryContext:
    """Index ``boxes`` the way the legend builder would."""
    categories: Dict[str, List[str]] = {}
    dependencies: Dict[str, List[str]] = {}
    for box in boxes:
        categories.setdefault(box.category, []).append(box.id)
        for dependency in box.dependencies:
            dependencies.setdefault(dependency, []).append(box.id)
    legend = Legend(
        metadata=LegendMetadata(
            project="Sample",
            description="Sample project",
            version="1.0.0",
            created="2026-01-01T00:00:00Z",
            protocol="City of Boxes v1.0",
            total_files=len(boxes),
        ),
        boxes={box.id: box for box in boxes},
        categories=categories,
        dependencies=dependencies,
        security=dict(security or {}),
    )
    return QueryContext(
        legend=legend,
        search_index=SearchIndex(created="2026-01-01T00:00:00Z", embedding_dimensions=16),
        error_templates=ErrorTemplateSet(
            protocol="City of Boxes Context-Rich Errors",
            version="1.0",
            created="2026-01-01T00:00:00Z",
        ),
    )


__all__ = ["SAMPLE_PROJECT", "make_box", "make_context"]
