"""Search index and embedding table construction."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping

from ..legend import generate_box_id
from ..logging import get_logger
from ..models import Embedding, FileMetadata, Legend, SearchEntry, SearchIndex, utc_timestamp
from .embedder import Embedder

logger = get_logger("rag")


def embedding_text(metadata: FileMetadata) -> str:
    return f"{metadata.ai_context}\n\n{metadata.excerpt}"


def embed_files(embedder: Embedder, files: Iterable[FileMetadata]) -> Dict[str, Embedding]:
    """Embed every file, keyed by box id (later files win on id collisions)."""
    embeddings: Dict[str, Embedding] = {}
    for metadata in files:
        logger.debug("Embedding %s", metadata.path)
        embeddings[generate_box_id(metadata.path)] = embedder.embed(embedding_text(metadata))
    logger.info("Generated %d embeddings with %s", len(embeddings), embedder.model)
    return embeddings


def build_search_index(
    legend: Legend,
    embeddings: Mapping[str, Embedding],
    *,
    dimensions: int = 16,
    created: str | None = None,
) -> SearchIndex:
    """Flatten embeddings and box fields into one mapping."""
    index = SearchIndex(created=created or utc_timestamp(), embedding_dimensions=dimensions)
    for box_id, embedding in embeddings.items():
        box = legend.boxes.get(box_id)
        if box is None or not embedding.vector:
            continue
        index.vectors[box_id] = SearchEntry(
            embedding=list(embedding.vector),
            box_path=box.path,
            category=box.category,
            description=box.description,
        )
    return index


__all__ = ["build_search_index", "embed_files", "embedding_text"]
