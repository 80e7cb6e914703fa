"""Core data models shared across boxgraph components.

Every entity serialises to the JSON layout of the persisted artifacts through
``to_dict`` and is rebuilt with ``from_dict``; the query tool depends on that
round trip being lossless.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


def utc_timestamp() -> str:
    """Return the current time as an ISO-8601 UTC string."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class FileType(str, Enum):
    """Coarse file classification derived from the extension."""

    SOURCE = "source"
    HEADER = "header"
    DOCUMENTATION = "documentation"
    SCRIPT = "script"
    PROJECT = "project"
    CONFIG = "config"
    OTHER = "other"


@dataclass(frozen=True)
class FileDescriptor:
    """A file selected by the discoverer."""

    relative_path: str
    absolute_path: str
    type: FileType
    size: int


@dataclass(frozen=True)
class FunctionSignature:
    name: str
    return_type: str
    signature: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "returnType": self.return_type, "signature": self.signature}


@dataclass(frozen=True)
class ClassDeclaration:
    name: str
    parent: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "inherits": self.parent}


@dataclass(frozen=True)
class FileMetadata:
    """Heuristic facts extracted from a single file."""

    path: str
    type: FileType
    size: int
    lines: int
    hash: str
    description: str
    functions: tuple[FunctionSignature, ...]
    classes: tuple[ClassDeclaration, ...]
    dependencies: tuple[str, ...]
    opcodes: tuple[str, ...]
    ai_context: str
    excerpt: str


@dataclass
class BoxContract:
    """Heuristic inputs/outputs plus static error kinds and guarantees."""

    inputs: Dict[str, Dict[str, str]] = field(default_factory=dict)
    outputs: Dict[str, Dict[str, str]] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    guarantees: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputs": {name: dict(spec) for name, spec in self.inputs.items()},
            "outputs": {name: dict(spec) for name, spec in self.outputs.items()},
            "errors": list(self.errors),
            "guarantees": list(self.guarantees),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "BoxContract":
        return cls(
            inputs={str(k): dict(v) for k, v in (payload.get("inputs") or {}).items()},
            outputs={str(k): dict(v) for k, v in (payload.get("outputs") or {}).items()},
            errors=list(payload.get("errors") or []),
            guarantees=list(payload.get("guarantees") or []),
        )


@dataclass
class BoxInterface:
    functions: List[str] = field(default_factory=list)
    classes: List[str] = field(default_factory=list)
    opcodes: List[str] = field(default_factory=list)


@dataclass
class BoxMetrics:
    lines: int
    size: int
    hash: str


@dataclass
class EmbeddingInfo:
    available: bool
    model: str
    dimensions: int


@dataclass
class Box:
    """The externally exposed unit: one analyzed file plus its generated id."""

    id: str
    path: str
    type: str
    category: str
    description: str
    ai_context: str
    interface: BoxInterface
    dependencies: List[str]
    metadata: BoxMetrics
    contract: BoxContract
    embedding: EmbeddingInfo

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "path": self.path,
            "type": self.type,
            "category": self.category,
            "description": self.description,
            "aiContext": self.ai_context,
            "interface": {
                "functions": list(self.interface.functions),
                "classes": list(self.interface.classes),
                "opcodes": list(self.interface.opcodes),
            },
            "dependencies": list(self.dependencies),
            "metadata": {
                "lines": self.metadata.lines,
                "size": self.metadata.size,
                "hash": self.metadata.hash,
            },
            "contract": self.contract.to_dict(),
            "embedding": {
                "available": self.embedding.available,
                "model": self.embedding.model,
                "dimensions": self.embedding.dimensions,
            },
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Box":
        interface = payload.get("interface") or {}
        metrics = payload.get("metadata") or {}
        embedding = payload.get("embedding") or {}
        return cls(
            id=str(payload["id"]),
            path=str(payload["path"]),
            type=str(payload.get("type", FileType.OTHER.value)),
            category=str(payload.get("category", "other")),
            description=str(payload.get("description", "")),
            ai_context=str(payload.get("aiContext", "")),
            interface=BoxInterface(
                functions=list(interface.get("functions") or []),
                classes=list(interface.get("classes") or []),
                opcodes=list(interface.get("opcodes") or []),
            ),
            dependencies=list(payload.get("dependencies") or []),
            metadata=BoxMetrics(
                lines=int(metrics.get("lines", 0)),
                size=int(metrics.get("size", 0)),
                hash=str(metrics.get("hash", "")),
            ),
            contract=BoxContract.from_dict(payload.get("contract") or {}),
            embedding=EmbeddingInfo(
                available=bool(embedding.get("available", False)),
                model=str(embedding.get("model", "")),
                dimensions=int(embedding.get("dimensions", 0)),
            ),
        )


@dataclass
class LegendMetadata:
    project: str
    description: str
    version: str
    created: str
    protocol: str
    total_files: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project": self.project,
            "description": self.description,
            "version": self.version,
            "created": self.created,
            "protocol": self.protocol,
            "totalFiles": self.total_files,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LegendMetadata":
        return cls(
            project=str(payload.get("project", "")),
            description=str(payload.get("description", "")),
            version=str(payload.get("version", "")),
            created=str(payload.get("created", "")),
            protocol=str(payload.get("protocol", "")),
            total_files=int(payload.get("totalFiles", 0)),
        )


@dataclass
class Legend:
    """Registry of boxes with category and reverse dependency indices."""

    metadata: LegendMetadata
    boxes: Dict[str, Box] = field(default_factory=dict)
    categories: Dict[str, List[str]] = field(default_factory=dict)
    dependencies: Dict[str, List[str]] = field(default_factory=dict)
    security: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "boxes": {box_id: box.to_dict() for box_id, box in self.boxes.items()},
            "categories": {name: list(ids) for name, ids in self.categories.items()},
            "dependencies": {name: list(ids) for name, ids in self.dependencies.items()},
            "security": dict(self.security),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Legend":
        return cls(
            metadata=LegendMetadata.from_dict(payload.get("metadata") or {}),
            boxes={
                str(box_id): Box.from_dict(raw)
                for box_id, raw in (payload.get("boxes") or {}).items()
            },
            categories={
                str(name): list(ids) for name, ids in (payload.get("categories") or {}).items()
            },
            dependencies={
                str(name): list(ids) for name, ids in (payload.get("dependencies") or {}).items()
            },
            security=dict(payload.get("security") or {}),
        )


@dataclass
class Embedding:
    """Fixed-length vector for a box. The hash backend makes it non-semantic."""

    model: str
    vector: List[float]
    tokens: int
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "embedding": list(self.vector),
            "tokens": self.tokens,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Embedding":
        return cls(
            model=str(payload.get("model", "")),
            vector=[float(value) for value in payload.get("embedding") or []],
            tokens=int(payload.get("tokens", 0)),
            timestamp=str(payload.get("timestamp", "")),
        )


@dataclass
class SearchEntry:
    embedding: List[float]
    box_path: str
    category: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "embedding": list(self.embedding),
            "boxPath": self.box_path,
            "category": self.category,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SearchEntry":
        return cls(
            embedding=[float(value) for value in payload.get("embedding") or []],
            box_path=str(payload.get("boxPath", "")),
            category=str(payload.get("category", "")),
            description=str(payload.get("description", "")),
        )


@dataclass
class SearchIndex:
    """Flat box id -> vector mapping; queries scan it linearly."""

    created: str
    embedding_dimensions: int
    vectors: Dict[str, SearchEntry] = field(default_factory=dict)
    search_cache: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": {
                "created": self.created,
                "totalBoxes": len(self.vectors),
                "embeddingDimensions": self.embedding_dimensions,
            },
            "vectors": {box_id: entry.to_dict() for box_id, entry in self.vectors.items()},
            "searchCache": dict(self.search_cache),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SearchIndex":
        metadata = payload.get("metadata") or {}
        return cls(
            created=str(metadata.get("created", "")),
            embedding_dimensions=int(metadata.get("embeddingDimensions", 0)),
            vectors={
                str(box_id): SearchEntry.from_dict(raw)
                for box_id, raw in (payload.get("vectors") or {}).items()
            },
            search_cache=dict(payload.get("searchCache") or {}),
        )


@dataclass
class ErrorTemplate:
    """Context-rich error layout for one box."""

    box_id: str
    box_path: str
    definition: str
    purpose: str
    contract: BoxContract
    runtime_template: Dict[str, Any]
    repair_prompt: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "boxId": self.box_id,
            "boxPath": self.box_path,
            "definition": self.definition,
            "purpose": self.purpose,
            "contract": self.contract.to_dict(),
            "runtimeTemplate": dict(self.runtime_template),
            "repairPrompt": self.repair_prompt,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ErrorTemplate":
        return cls(
            box_id=str(payload.get("boxId", "")),
            box_path=str(payload.get("boxPath", "")),
            definition=str(payload.get("definition", "")),
            purpose=str(payload.get("purpose", "")),
            contract=BoxContract.from_dict(payload.get("contract") or {}),
            runtime_template=dict(payload.get("runtimeTemplate") or {}),
            repair_prompt=str(payload.get("repairPrompt", "")),
        )


@dataclass
class ErrorTemplateSet:
    protocol: str
    version: str
    created: str
    templates: Dict[str, ErrorTemplate] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": {
                "protocol": self.protocol,
                "version": self.version,
                "created": self.created,
            },
            "templates": {box_id: item.to_dict() for box_id, item in self.templates.items()},
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ErrorTemplateSet":
        metadata = payload.get("metadata") or {}
        return cls(
            protocol=str(metadata.get("protocol", "")),
            version=str(metadata.get("version", "")),
            created=str(metadata.get("created", "")),
            templates={
                str(box_id): ErrorTemplate.from_dict(raw)
                for box_id, raw in (payload.get("templates") or {}).items()
            },
        )
