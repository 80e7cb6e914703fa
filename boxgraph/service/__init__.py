"""Read-only HTTP service over a built knowledge graph."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
