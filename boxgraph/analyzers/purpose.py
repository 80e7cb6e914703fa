"""Natural-language purpose strings for analyzed files."""

from __future__ import annotations

import posixpath

from ..models import FileType

WELL_KNOWN_PURPOSES = {
    "script.cpp": (
        "Core script evaluation engine. Handles all OP_CODES including restored "
        "operations (CAT, MUL, DIV, MOD, LSHIFT, RSHIFT, etc.)"
    ),
    "main.cpp": "Core blockchain logic, consensus rules, transaction validation, block handling",
    "init.cpp": "Initialization, configuration, command-line argument parsing",
    "util.cpp": "Utility functions, logging, file operations, string manipulation",
    "bitcoinrpc.cpp": "RPC server, JSON-RPC handlers, network API",
}

TYPE_PURPOSES = {
    FileType.DOCUMENTATION: "Documentation and guides for developers/users",
    FileType.SCRIPT: "Build or deployment automation script",
}


def describe_purpose(path: str, file_type: FileType, project: str) -> str:
    """Purpose line for a file; ``project`` labels the generic fallback."""
    basename = posixpath.basename(path)
    if basename in WELL_KNOWN_PURPOSES:
        return WELL_KNOWN_PURPOSES[basename]
    if file_type in TYPE_PURPOSES:
        return TYPE_PURPOSES[file_type]
    label = file_type.value
    return f"{label[:1].upper()}{label[1:]} file for {project}"


def build_ai_context(path: str, file_type: FileType, project: str) -> str:
    """Return the ``File/Type/Purpose`` block handed to downstream agents."""
    purpose = describe_purpose(path, file_type, project)
    return f"File: {path}\nType: {file_type.value}\nPurpose: {purpose}"


__all__ = ["WELL_KNOWN_PURPOSES", "build_ai_context", "describe_purpose"]
