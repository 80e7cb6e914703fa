"""Persistence helpers for knowledge graph artifacts."""

from .artifacts import ArtifactStore

__all__ = ["ArtifactStore"]
