"""JSON persistence for knowledge graph artifacts."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping

from ..logging import get_logger
from ..models import Embedding, ErrorTemplateSet, Legend, SearchIndex

LEGEND_FILENAME = "master-legend.json"
EMBEDDINGS_FILENAME = "embeddings.json"
SEARCH_INDEX_FILENAME = "search-index.json"
ERROR_TEMPLATES_FILENAME = "error-templates.json"
SUMMARY_FILENAME = "KNOWLEDGE_GRAPH_SUMMARY.md"


class ArtifactStore:
    """Reads and writes the artifacts under one output directory.

    Write failures and unreadable or malformed artifacts raise; callers decide
    whether that ends the run.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.logger = get_logger("store")

    def write_legend(self, legend: Legend) -> Path:
        return self._write_json(LEGEND_FILENAME, legend.to_dict())

    def write_embeddings(self, embeddings: Mapping[str, Embedding]) -> Path:
        payload = {box_id: embedding.to_dict() for box_id, embedding in embeddings.items()}
        return self._write_json(EMBEDDINGS_FILENAME, payload)

    def write_search_index(self, index: SearchIndex) -> Path:
        return self._write_json(SEARCH_INDEX_FILENAME, index.to_dict())

    def write_error_templates(self, templates: ErrorTemplateSet) -> Path:
        return self._write_json(ERROR_TEMPLATES_FILENAME, templates.to_dict())

    def write_summary(self, summary: str) -> Path:
        self.path.mkdir(parents=True, exist_ok=True)
        target = self.path / SUMMARY_FILENAME
        target.write_text(summary, encoding="utf-8")
        self.logger.info("Saved %s", SUMMARY_FILENAME)
        return target

    def load_legend(self) -> Legend:
        return Legend.from_dict(self._read_json(LEGEND_FILENAME))

    def load_embeddings(self) -> Dict[str, Embedding]:
        payload = self._read_json(EMBEDDINGS_FILENAME)
        return {str(box_id): Embedding.from_dict(raw) for box_id, raw in payload.items()}

    def load_search_index(self) -> SearchIndex:
        return SearchIndex.from_dict(self._read_json(SEARCH_INDEX_FILENAME))

    def load_error_templates(self) -> ErrorTemplateSet:
        return ErrorTemplateSet.from_dict(self._read_json(ERROR_TEMPLATES_FILENAME))

    # ------------------------------------------------------------------
    # Internal helpers

    def _write_json(self, filename: str, payload: Mapping[str, Any]) -> Path:
        self.path.mkdir(parents=True, exist_ok=True)
        target = self.path / filename
        target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        self.logger.info("Saved %s", filename)
        return target

    def _read_json(self, filename: str) -> Dict[str, Any]:
        target = self.path / filename
        data = json.loads(target.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{target} must contain a JSON object")
        return data


__all__ = [
    "ArtifactStore",
    "EMBEDDINGS_FILENAME",
    "ERROR_TEMPLATES_FILENAME",
    "LEGEND_FILENAME",
    "SEARCH_INDEX_FILENAME",
    "SUMMARY_FILENAME",
]
