"""Pipeline orchestration for knowledge graph builds."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from .analyzers import FileAnalyzer, SignatureExtractor
from .config import BoxGraphConfig, load_config
from .discovery import Discoverer
from .legend import LegendBuilder
from .logging import get_logger
from .models import Embedding, ErrorTemplateSet, FileMetadata, Legend, SearchIndex
from .rag import Embedder, build_embedder, build_search_index, embed_files
from .repair import generate_error_templates
from .stores import ArtifactStore
from .summary import render_summary


@dataclass
class BuildResult:
    """Everything produced by one build run."""

    config: BoxGraphConfig
    files: List[FileMetadata]
    legend: Legend
    embeddings: Dict[str, Embedding]
    search_index: SearchIndex
    error_templates: ErrorTemplateSet
    output_dir: Path


class Orchestrator:
    """Runs discovery, analysis, indexing and persistence in sequence.

    Any stage failure propagates; nothing is written until every in-memory
    artifact has been built.
    """

    def __init__(
        self,
        discoverer: Discoverer | None = None,
        extractor: SignatureExtractor | None = None,
        embedder: Embedder | None = None,
    ) -> None:
        self.discoverer = discoverer or Discoverer()
        self.extractor = extractor
        self._embedder = embedder
        self.logger = get_logger("orchestrator")

    def run_build(self, path: str, *, output_dir: str | Path | None = None) -> BuildResult:
        root = Path(path).expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Project path not found: {path}")
        if not root.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {path}")
        self.logger.info("Starting knowledge graph build for %s", root)

        config = load_config(root)
        if output_dir is not None:
            config.output_dir = (root / Path(output_dir)).resolve()

        skip_dirs: List[str] = []
        output_rel = _display_path(config.output_dir, root)
        if output_rel not in {".", os.fspath(config.output_dir)}:
            # Artifacts from a previous run must not feed back into this one.
            skip_dirs.append(output_rel)
        descriptors = self.discoverer.discover(
            root, config.include_patterns, config.exclude_patterns, skip_dirs=skip_dirs
        )

        analyzer = FileAnalyzer(
            project=config.project.description or config.project.name,
            extractor=self.extractor,
        )
        files = [analyzer.analyze(descriptor) for descriptor in descriptors]
        self.logger.info("Analyzed %d files", len(files))

        embedder = self._embedder or build_embedder(config.embedder)
        legend = LegendBuilder(
            project=config.project.name,
            description=config.project.description,
            version=config.project.version,
            protocol=config.project.protocol,
            security=config.security,
            embedding_model=embedder.model,
            embedding_dimensions=embedder.dimensions,
        ).build(files)

        embeddings = embed_files(embedder, files)
        search_index = build_search_index(legend, embeddings, dimensions=embedder.dimensions)
        error_templates = generate_error_templates(legend)

        result = BuildResult(
            config=config,
            files=files,
            legend=legend,
            embeddings=embeddings,
            search_index=search_index,
            error_templates=error_templates,
            output_dir=config.output_dir,
        )
        self._persist(result, root)
        return result

    def _persist(self, result: BuildResult, root: Path) -> None:
        store = ArtifactStore(result.output_dir)
        store.write_legend(result.legend)
        store.write_embeddings(result.embeddings)
        store.write_search_index(result.search_index)
        store.write_error_templates(result.error_templates)
        store.write_summary(
            render_summary(
                result.legend,
                result.search_index,
                result.error_templates,
                output_dir=_display_path(result.output_dir, root),
            )
        )


def _display_path(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return os.fspath(path)


__all__ = ["BuildResult", "Orchestrator"]
