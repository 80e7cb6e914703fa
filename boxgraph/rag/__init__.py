"""Embedding backends and the flat search index."""

from .embedder import Embedder, HTTPEmbedder, HashEmbedder, build_embedder
from .index import build_search_index, embed_files, embedding_text

__all__ = [
    "Embedder",
    "HTTPEmbedder",
    "HashEmbedder",
    "build_embedder",
    "build_search_index",
    "embed_files",
    "embedding_text",
]
