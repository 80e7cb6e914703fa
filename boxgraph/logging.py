"""Logging setup shared by the boxgraph builder, query tool and service.

Every component logs through ``get_logger("<stage>")``, which places it under
the ``boxgraph`` logger. Console lines carry the stage name so a build log
reads as a trace of the pipeline::

    [boxgraph:discovery] INFO Discovered 412 files under /src/aumcoin
"""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "boxgraph"
CONSOLE_FORMAT = "[%(stage)s] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(stage)s: %(message)s"


class StageFormatter(logging.Formatter):
    """Formatter exposing ``%(stage)s``: ``boxgraph:<stage>`` or plain ``boxgraph``."""

    def format(self, record: logging.LogRecord) -> str:
        prefix = f"{ROOT_LOGGER}."
        if record.name.startswith(prefix):
            record.stage = f"{ROOT_LOGGER}:{record.name[len(prefix):]}"
        else:
            record.stage = record.name
        return super().format(record)


def get_logger(stage: str | None = None) -> logging.Logger:
    """Return the logger for a pipeline stage (``discovery``, ``legend``, ...)."""
    return logging.getLogger(f"{ROOT_LOGGER}.{stage}" if stage else ROOT_LOGGER)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach console (stderr) and optional file handlers to the boxgraph logger.

    Calling it again replaces the handlers instead of stacking them, so tools
    invoked several times in one process log each line once.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(StageFormatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        # The file always records per-file detail, whatever the console shows.
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(StageFormatter(FILE_FORMAT))
        logger.addHandler(sink)
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["CONSOLE_FORMAT", "ROOT_LOGGER", "StageFormatter", "configure_logging", "get_logger"]
