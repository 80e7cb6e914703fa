"""Source tree discovery for knowledge graph builds."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import AbstractSet, Iterable, Iterator, List, Pattern, Sequence

from .config import ConfigError
from .logging import get_logger
from .models import FileDescriptor, FileType

_TYPE_BY_SUFFIX = {
    ".cpp": FileType.SOURCE,
    ".c": FileType.SOURCE,
    ".h": FileType.HEADER,
    ".md": FileType.DOCUMENTATION,
    ".sh": FileType.SCRIPT,
    ".pro": FileType.PROJECT,
    "": FileType.CONFIG,
}


def detect_file_type(filename: str) -> FileType:
    """Map a file name to its coarse type using the extension alone."""
    suffix = os.path.splitext(filename)[1].lower()
    return _TYPE_BY_SUFFIX.get(suffix, FileType.OTHER)


class IncludePattern:
    """Permissive glob test applied to relative paths.

    The first ``**/`` is dropped and the first ``*`` widened to ``.*``; the
    result is searched anywhere in the path. A path ending with the pattern
    minus its first ``*`` also matches, so ``*.md`` accepts ``docs/guide.md``.
    """

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.suffix = pattern.replace("*", "", 1)
        expression = pattern.replace("**/", "", 1).replace("*", ".*", 1)
        try:
            self._regex: Pattern[str] = re.compile(expression)
        except re.error as exc:
            raise ConfigError(f"Invalid include pattern '{pattern}': {exc}") from exc

    def matches(self, rel_path: str) -> bool:
        return bool(self._regex.search(rel_path)) or rel_path.endswith(self.suffix)


class Discoverer:
    """Walks a directory tree and selects files by include/exclude rules."""

    def __init__(self) -> None:
        self.logger = get_logger("discovery")

    def discover(
        self,
        root: str | Path,
        include_patterns: Sequence[str],
        exclude_patterns: Sequence[str],
        *,
        skip_dirs: Iterable[str] = (),
    ) -> List[FileDescriptor]:
        """Return descriptors for every matching regular file under ``root``.

        ``exclude_patterns`` are substrings tested anywhere in a relative path.
        ``skip_dirs`` are exact relative directory paths whose whole subtree is
        left out, such as the artifact output directory.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Project path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {root}")

        includes = [IncludePattern(pattern) for pattern in include_patterns]
        excludes = [pattern for pattern in exclude_patterns if pattern]
        skipped = frozenset(path.strip("/") for path in skip_dirs if path.strip("/"))

        files = list(self._walk(root_path, "", includes, excludes, skipped))
        self.logger.info("Discovered %d files under %s", len(files), root_path)
        return files

    def _walk(
        self,
        directory: Path,
        rel_dir: str,
        includes: Sequence[IncludePattern],
        excludes: Sequence[str],
        skipped: AbstractSet[str],
    ) -> Iterator[FileDescriptor]:
        # Directory read errors propagate.
        with os.scandir(directory) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)

        for entry in entries:
            rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
            if any(pattern in rel_path for pattern in excludes):
                continue

            if entry.is_dir(follow_symlinks=True):
                if rel_path in skipped:
                    self.logger.debug("Skipping directory %s", rel_path)
                    continue
                yield from self._walk(Path(entry.path), rel_path, includes, excludes, skipped)
            elif entry.is_file(follow_symlinks=True):
                if not any(pattern.matches(rel_path) for pattern in includes):
                    continue
                self.logger.debug("Selected %s", rel_path)
                yield FileDescriptor(
                    relative_path=rel_path,
                    absolute_path=entry.path,
                    type=detect_file_type(entry.name),
                    size=entry.stat(follow_symlinks=True).st_size,
                )


__all__ = ["Discoverer", "IncludePattern", "detect_file_type"]
