"""Configuration loading for boxgraph (.boxgraph.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".boxgraph.yml"

DEFAULT_INCLUDE_PATTERNS: tuple[str, ...] = (
    "src/**/*.cpp",
    "src/**/*.h",
    "src/**/*.c",
    "*.md",
    "*.sh",
    "Dockerfile",
    "docker-compose.yml",
    "*.pro",
)

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "node_modules",
    ".git",
    "build",
    "obj",
    "obj-test",
    "*.o",
    "*.a",
)

DEFAULT_OUTPUT_DIR = "project-knowledge"
DEFAULT_PROTOCOL = "City of Boxes v1.0"
EMBEDDER_BACKENDS = ("hash", "http")
# One SHA-256 digest byte per component.
MAX_HASH_DIMENSIONS = 32


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ProjectConfig:
    """Project identity echoed into the legend metadata."""

    name: str
    description: str = ""
    version: str = "1.0.0"
    protocol: str = DEFAULT_PROTOCOL


@dataclass
class EmbedderConfig:
    """Embedding backend selection."""

    backend: str = "hash"
    model: str = "lumen-bridge-v1"
    dimensions: int = 16
    delay: float = 0.1
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    request_timeout: float = 60.0


@dataclass
class BoxGraphConfig:
    """Represents the settings for one knowledge graph build."""

    root: Path
    project: ProjectConfig
    output_dir: Path
    include_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE_PATTERNS))
    exclude_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    embedder: EmbedderConfig = field(default_factory=EmbedderConfig)
    security: Dict[str, Any] = field(default_factory=lambda: _default_security())


def _default_security() -> Dict[str, Any]:
    return {
        "phase1_complete": False,
        "phase2_pending": [],
        "audit_required": True,
    }


def load_config(config_path: Path) -> BoxGraphConfig:
    """Load configuration from disk, falling back to compiled defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    project = ProjectConfig(name=root.name or "Repository")

    if not config_file.exists():
        return BoxGraphConfig(root=root, project=project, output_dir=root / DEFAULT_OUTPUT_DIR)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    project_data = _as_dict(data.get("project"))
    if project_data:
        project.name = _as_str(project_data.get("name")) or project.name
        project.description = _as_str(project_data.get("description")) or project.description
        project.version = _as_str(project_data.get("version")) or project.version
        project.protocol = _as_str(project_data.get("protocol")) or project.protocol

    output_dir_str = _as_str(data.get("output_dir")) or DEFAULT_OUTPUT_DIR
    output_dir = root / output_dir_str

    include = _as_str_list(data.get("include_patterns")) or list(DEFAULT_INCLUDE_PATTERNS)
    exclude = (
        _as_str_list(data.get("exclude_patterns"))
        if "exclude_patterns" in data
        else list(DEFAULT_EXCLUDE_PATTERNS)
    )

    embedder = EmbedderConfig()
    embedder_data = _as_dict(data.get("embedder"))
    if embedder_data:
        backend = (_as_str(embedder_data.get("backend")) or embedder.backend).lower()
        if backend not in EMBEDDER_BACKENDS:
            choices = ", ".join(EMBEDDER_BACKENDS)
            raise ConfigError(f"Unknown embedder backend '{backend}' (expected one of: {choices})")
        embedder.backend = backend
        embedder.model = _as_str(embedder_data.get("model")) or embedder.model
        dimensions = _as_int(embedder_data.get("dimensions"))
        if dimensions is not None:
            embedder.dimensions = dimensions
        _check_dimensions(embedder)
        delay = _as_float(embedder_data.get("delay"))
        if delay is not None:
            embedder.delay = delay
        embedder.base_url = _as_str(embedder_data.get("base_url"))
        embedder.api_key = _as_str(embedder_data.get("api_key"))
        timeout = _as_float(embedder_data.get("request_timeout"))
        if timeout is not None:
            embedder.request_timeout = timeout

    security = _default_security()
    if "security" in data:
        security = _as_dict(data.get("security"))

    return BoxGraphConfig(
        root=root,
        project=project,
        output_dir=output_dir,
        include_patterns=include,
        exclude_patterns=exclude,
        embedder=embedder,
        security=security,
    )


def _check_dimensions(embedder: EmbedderConfig) -> None:
    if embedder.dimensions < 1:
        raise ConfigError(f"embedder.dimensions must be positive, got {embedder.dimensions}")
    if embedder.backend == "hash" and embedder.dimensions > MAX_HASH_DIMENSIONS:
        raise ConfigError(
            f"The hash embedder supports at most {MAX_HASH_DIMENSIONS} dimensions, "
            f"got {embedder.dimensions}"
        )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
