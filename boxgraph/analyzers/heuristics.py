"""Regular-expression heuristics for C/C++ style sources.

None of this is a parser. Patterns work line by line with no awareness of
strings, macros or templates, and every helper degrades to an empty result or
a default string instead of raising.
"""

from __future__ import annotations

import re
from typing import List

from ..models import ClassDeclaration, FunctionSignature
from .base import SignatureExtractor

NO_DESCRIPTION = "No description available"

DESCRIPTION_SCAN_LINES = 30
DESCRIPTION_MAX_LINES = 5
MAX_FUNCTIONS = 50
MAX_OPCODES = 20

_CONTROL_KEYWORDS = frozenset({"if", "for", "while", "switch", "catch"})

_LINE_COMMENT = re.compile(r"^(//|#)\s*")
_BLOCK_CONTINUATION = re.compile(r"^\s*\*\s*")
_FUNCTION_PATTERN = re.compile(
    r"^\s*(?:static\s+)?(?:inline\s+)?(\w+)\s+(\w+)\s*\([^)]*\)",
    re.MULTILINE,
)
_CLASS_PATTERN = re.compile(r"class\s+(\w+)(?:\s*:\s*public\s+(\w+))?")
_INCLUDE_PATTERN = re.compile(r"#include\s*[<\"]([^>\"]+)[>\"]")
_OPCODE_PATTERN = re.compile(r"\b(OP_[A-Z_0-9]+)\b")


class RegexSignatureExtractor(SignatureExtractor):
    """Default extractor backed by single-pass regular expressions."""

    def __init__(self, *, max_functions: int = MAX_FUNCTIONS) -> None:
        self.max_functions = max_functions

    def extract_signatures(self, text: str) -> List[FunctionSignature]:
        functions: List[FunctionSignature] = []
        for match in _FUNCTION_PATTERN.finditer(text):
            return_type, name = match.group(1), match.group(2)
            if return_type in _CONTROL_KEYWORDS:
                continue
            functions.append(
                FunctionSignature(
                    name=name,
                    return_type=return_type,
                    signature=match.group(0).strip(),
                )
            )
        return functions[: self.max_functions]

    def extract_classes(self, text: str) -> List[ClassDeclaration]:
        return [
            ClassDeclaration(name=match.group(1), parent=match.group(2))
            for match in _CLASS_PATTERN.finditer(text)
        ]


def extract_description(text: str) -> str:
    """Collect header comment lines from the top of a file."""
    collected: List[str] = []
    in_comment = False
    for raw_line in text.split("\n")[:DESCRIPTION_SCAN_LINES]:
        line = raw_line.strip()
        if line.startswith("//") or line.startswith("#"):
            collected.append(_LINE_COMMENT.sub("", line, count=1))
        elif line.startswith("/*"):
            in_comment = True
        elif "*/" in line:
            in_comment = False
        elif in_comment:
            collected.append(_BLOCK_CONTINUATION.sub("", line, count=1))

    description = " ".join(collected[:DESCRIPTION_MAX_LINES]).strip()
    return description or NO_DESCRIPTION


def extract_dependencies(text: str) -> List[str]:
    """Return include targets, deduplicated in first-seen order."""
    return list(dict.fromkeys(match.group(1) for match in _INCLUDE_PATTERN.finditer(text)))


def extract_opcodes(text: str) -> List[str]:
    """Return distinct ``OP_*`` tokens, skipping the scan when none can exist."""
    if "OP_" not in text:
        return []
    tokens = dict.fromkeys(match.group(1) for match in _OPCODE_PATTERN.finditer(text))
    return list(tokens)[:MAX_OPCODES]


__all__ = [
    "NO_DESCRIPTION",
    "RegexSignatureExtractor",
    "extract_dependencies",
    "extract_description",
    "extract_opcodes",
]
