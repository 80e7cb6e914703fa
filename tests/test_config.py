"""Tests for boxgraph.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from boxgraph.config import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_INCLUDE_PATTERNS,
    BoxGraphConfig,
    ConfigError,
    load_config,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, BoxGraphConfig)
    assert config.root == tmp_path.resolve()
    assert config.project.name == tmp_path.resolve().name
    assert config.project.protocol == "City of Boxes v1.0"
    assert config.output_dir == tmp_path.resolve() / "project-knowledge"
    assert config.include_patterns == list(DEFAULT_INCLUDE_PATTERNS)
    assert config.exclude_patterns == list(DEFAULT_EXCLUDE_PATTERNS)
    assert config.embedder.backend == "hash"
    assert config.embedder.dimensions == 16
    assert config.embedder.delay == 0.1
    assert config.security == {
        "phase1_complete": False,
        "phase2_pending": [],
        "audit_required": True,
    }


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".boxgraph.yml"
    config_file.write_text(
        """
project:
  name: "AumCoin"
  description: "Blockchain with restored opcodes"
  version: "2.1.0"
output_dir: "knowledge"
include_patterns:
  - "src/**/*.cpp"
  - "*.md"
exclude_patterns: []
embedder:
  backend: "HTTP"
  model: "nomic-embed-text"
  dimensions: 768
  base_url: "http://localhost:11434/v1"
  api_key: "test-key"
  request_timeout: 30
security:
  phase1_complete: true
  phase2_pending: ["OP_CAT"]
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.project.name == "AumCoin"
    assert config.project.description == "Blockchain with restored opcodes"
    assert config.project.version == "2.1.0"
    assert config.output_dir == tmp_path.resolve() / "knowledge"
    assert config.include_patterns == ["src/**/*.cpp", "*.md"]
    assert config.exclude_patterns == []
    assert config.embedder.backend == "http"
    assert config.embedder.model == "nomic-embed-text"
    assert config.embedder.dimensions == 768
    assert config.embedder.base_url == "http://localhost:11434/v1"
    assert config.embedder.api_key == "test-key"
    assert config.embedder.request_timeout == 30.0
    assert config.security == {"phase1_complete": True, "phase2_pending": ["OP_CAT"]}


def test_load_config_accepts_file_path(tmp_path: Path) -> None:
    config_file = tmp_path / ".boxgraph.yml"
    config_file.write_text("output_dir: out\n", encoding="utf-8")

    config = load_config(config_file)

    assert config.root == tmp_path.resolve()
    assert config.output_dir == tmp_path.resolve() / "out"


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".boxgraph.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.include_patterns == list(DEFAULT_INCLUDE_PATTERNS)


def test_load_config_rejects_unknown_backend(tmp_path: Path) -> None:
    (tmp_path / ".boxgraph.yml").write_text("embedder:\n  backend: quantum\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".boxgraph.yml").write_text("project: [unterminated\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".boxgraph.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "body",
    [
        "embedder:\n  dimensions: 64\n",
        "embedder:\n  backend: hash\n  dimensions: 0\n",
        "embedder:\n  backend: http\n  base_url: http://localhost:9000\n  dimensions: -3\n",
    ],
)
def test_load_config_rejects_unusable_dimensions(tmp_path: Path, body: str) -> None:
    (tmp_path / ".boxgraph.yml").write_text(body, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_http_backend_allows_wide_vectors(tmp_path: Path) -> None:
    (tmp_path / ".boxgraph.yml").write_text(
        "embedder:\n  backend: http\n  base_url: http://localhost:9000\n  dimensions: 768\n",
        encoding="utf-8",
    )

    assert load_config(tmp_path).embedder.dimensions == 768
