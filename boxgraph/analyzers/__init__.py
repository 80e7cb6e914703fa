"""Heuristic metadata extraction for discovered files."""

from __future__ import annotations

from .base import SignatureExtractor
from .file_analyzer import FileAnalyzer
from .heuristics import (
    NO_DESCRIPTION,
    RegexSignatureExtractor,
    extract_dependencies,
    extract_description,
    extract_opcodes,
)
from .purpose import build_ai_context

__all__ = [
    "FileAnalyzer",
    "NO_DESCRIPTION",
    "RegexSignatureExtractor",
    "SignatureExtractor",
    "build_ai_context",
    "extract_dependencies",
    "extract_description",
    "extract_opcodes",
]
