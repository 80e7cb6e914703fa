"""Master legend construction: box ids, categories and contracts."""

from __future__ import annotations

import posixpath
import re
from typing import Callable, Dict, Iterable, List, Sequence

from .config import DEFAULT_PROTOCOL
from .logging import get_logger
from .models import (
    Box,
    BoxContract,
    BoxInterface,
    BoxMetrics,
    EmbeddingInfo,
    FileMetadata,
    Legend,
    LegendMetadata,
    utc_timestamp,
)

PathPredicate = Callable[[str], bool]


def _contains(*needles: str) -> PathPredicate:
    return lambda path: any(needle in path for needle in needles)


def _endswith(suffix: str) -> PathPredicate:
    return lambda path: path.endswith(suffix)


# Evaluated top to bottom against the lowercased path; the first hit wins.
CATEGORY_RULES: tuple[tuple[PathPredicate, str], ...] = (
    (_contains("script"), "script-engine"),
    (_contains("main"), "core-consensus"),
    (_contains("net"), "network"),
    (_contains("rpc"), "api"),
    (_contains("wallet"), "wallet"),
    (_contains("crypto", "key"), "cryptography"),
    (_contains("db"), "storage"),
    (_contains("util"), "utilities"),
    (_contains("test"), "testing"),
    (_endswith(".md"), "documentation"),
    (_endswith(".sh"), "build-system"),
    (_contains("docker"), "infrastructure"),
)

DEFAULT_CATEGORY = "other"

CONTRACT_ERRORS: tuple[str, ...] = (
    "SchemaValidationError",
    "FileNotFoundError",
    "CompilationError",
    "RuntimeError",
)

CONTRACT_GUARANTEES: tuple[str, ...] = (
    "Thread-safe if documented",
    "Memory cleanup on destruction",
    "Error messages include context",
)

_ACCESSOR_PREFIXES = ("get", "set")
_WORD_SEPARATORS = re.compile(r"[-_]")


def generate_box_id(path: str) -> str:
    """Derive the box id from the base name: ``src/my-file_name.cpp`` -> ``MyFileNameBox``."""
    stem = posixpath.splitext(posixpath.basename(path))[0]
    words = _WORD_SEPARATORS.split(stem)
    return "".join(word[:1].upper() + word[1:] for word in words) + "Box"


def categorize(path: str, rules: Sequence[tuple[PathPredicate, str]] = CATEGORY_RULES) -> str:
    lowered = path.lower()
    for predicate, label in rules:
        if predicate(lowered):
            return label
    return DEFAULT_CATEGORY


def generate_contract(metadata: FileMetadata) -> BoxContract:
    """Build the box contract.

    Inputs and outputs come from the extracted functions (accessor-looking
    names count as inputs). Error kinds and guarantees are fixed documentation
    strings and are never derived from the file.
    """
    inputs: Dict[str, Dict[str, str]] = {}
    outputs: Dict[str, Dict[str, str]] = {}
    for function in metadata.functions:
        if function.name.startswith(_ACCESSOR_PREFIXES):
            inputs[function.name] = {
                "type": function.return_type,
                "description": f"Parameter for {function.name}",
            }
        outputs[function.name] = {
            "type": function.return_type,
            "description": function.signature,
        }
    return BoxContract(
        inputs=inputs,
        outputs=outputs,
        errors=list(CONTRACT_ERRORS),
        guarantees=list(CONTRACT_GUARANTEES),
    )


class LegendBuilder:
    """Registers every analyzed file as a box and builds the cross indices."""

    def __init__(
        self,
        *,
        project: str = "Repository",
        description: str = "",
        version: str = "1.0.0",
        protocol: str = DEFAULT_PROTOCOL,
        security: Dict[str, object] | None = None,
        embedding_model: str = "lumen-bridge-v1",
        embedding_dimensions: int = 16,
        category_rules: Sequence[tuple[PathPredicate, str]] = CATEGORY_RULES,
    ) -> None:
        self.project = project
        self.description = description
        self.version = version
        self.protocol = protocol
        self.security = dict(security or {})
        self.embedding_model = embedding_model
        self.embedding_dimensions = embedding_dimensions
        self.category_rules = tuple(category_rules)
        self.logger = get_logger("legend")

    def build(self, files: Iterable[FileMetadata], *, created: str | None = None) -> Legend:
        analyzed: List[FileMetadata] = list(files)
        legend = Legend(
            metadata=LegendMetadata(
                project=self.project,
                description=self.description,
                version=self.version,
                created=created or utc_timestamp(),
                protocol=self.protocol,
                total_files=len(analyzed),
            ),
            security=dict(self.security),
        )

        for metadata in analyzed:
            box = self.build_box(metadata)
            previous = legend.boxes.get(box.id)
            if previous is not None:
                # Ids only see the base name; the later file replaces the earlier box.
                self.logger.warning(
                    "Box id %s for %s replaces %s", box.id, box.path, previous.path
                )
            legend.boxes[box.id] = box
            legend.categories.setdefault(box.category, []).append(box.id)
            for dependency in metadata.dependencies:
                legend.dependencies.setdefault(dependency, []).append(box.id)

        self.logger.info(
            "Legend holds %d boxes across %d categories",
            len(legend.boxes),
            len(legend.categories),
        )
        return legend

    def build_box(self, metadata: FileMetadata) -> Box:
        return Box(
            id=generate_box_id(metadata.path),
            path=metadata.path,
            type=metadata.type.value,
            category=categorize(metadata.path, self.category_rules),
            description=metadata.description,
            ai_context=metadata.ai_context,
            interface=BoxInterface(
                functions=[function.name for function in metadata.functions],
                classes=[declaration.name for declaration in metadata.classes],
                opcodes=list(metadata.opcodes),
            ),
            dependencies=list(metadata.dependencies),
            metadata=BoxMetrics(lines=metadata.lines, size=metadata.size, hash=metadata.hash),
            contract=generate_contract(metadata),
            embedding=EmbeddingInfo(
                available=True,
                model=self.embedding_model,
                dimensions=self.embedding_dimensions,
            ),
        )


__all__ = [
    "CATEGORY_RULES",
    "CONTRACT_ERRORS",
    "CONTRACT_GUARANTEES",
    "LegendBuilder",
    "categorize",
    "generate_box_id",
    "generate_contract",
]
