"""Per-file metadata extraction."""

from __future__ import annotations

import hashlib
from pathlib import Path

from ..logging import get_logger
from ..models import FileDescriptor, FileMetadata, FileType
from .base import SignatureExtractor
from .heuristics import (
    RegexSignatureExtractor,
    extract_dependencies,
    extract_description,
    extract_opcodes,
)
from .purpose import build_ai_context

EXCERPT_CHARS = 1000

_CODE_TYPES = frozenset({FileType.SOURCE, FileType.HEADER})


class FileAnalyzer:
    """Turns a discovered file into immutable :class:`FileMetadata`."""

    def __init__(
        self,
        *,
        project: str = "Repository",
        extractor: SignatureExtractor | None = None,
    ) -> None:
        self.project = project
        self.extractor = extractor or RegexSignatureExtractor()
        self.logger = get_logger("analyzer")

    def analyze(self, descriptor: FileDescriptor) -> FileMetadata:
        """Read the file from disk and analyze it; read errors propagate."""
        self.logger.debug("Analyzing %s", descriptor.relative_path)
        # Bytes are decoded directly so line endings reach the hash untouched.
        raw = Path(descriptor.absolute_path).read_bytes()
        content = raw.decode("utf-8", errors="replace")
        return self.analyze_text(descriptor, content)

    def analyze_text(self, descriptor: FileDescriptor, content: str) -> FileMetadata:
        is_code = descriptor.type in _CODE_TYPES
        functions = self.extractor.extract_signatures(content) if is_code else []
        classes = self.extractor.extract_classes(content) if is_code else []

        return FileMetadata(
            path=descriptor.relative_path,
            type=descriptor.type,
            size=descriptor.size,
            lines=len(content.split("\n")),
            hash=hashlib.sha256(content.encode("utf-8")).hexdigest(),
            description=extract_description(content),
            functions=tuple(functions),
            classes=tuple(classes),
            dependencies=tuple(extract_dependencies(content)),
            opcodes=tuple(extract_opcodes(content)),
            ai_context=build_ai_context(descriptor.relative_path, descriptor.type, self.project),
            excerpt=content[:EXCERPT_CHARS],
        )


__all__ = ["FileAnalyzer"]
