from __future__ import annotations

from pathlib import Path

import pytest

from boxgraph.orchestrator import BuildResult, Orchestrator
from boxgraph.rag import HashEmbedder
from tests._fixtures.repo_builder import RepoBuilder
from tests._fixtures.sample_graph import SAMPLE_PROJECT


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def built_graph(repo_builder: RepoBuilder) -> BuildResult:
    """Build the sample project into ``<repo>/project-knowledge``."""
    repo_builder.write(SAMPLE_PROJECT)
    orchestrator = Orchestrator(embedder=HashEmbedder(delay=0.0))
    return orchestrator.run_build(str(repo_builder.path()))
