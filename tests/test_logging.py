"""Tests for boxgraph.logging."""

from __future__ import annotations

import logging

import pytest

from boxgraph.logging import ROOT_LOGGER, configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset_root_logger():
    yield
    configure_logging()


def test_console_lines_name_the_stage(capsys) -> None:
    configure_logging()

    get_logger("discovery").info("Discovered %d files", 3)
    get_logger().warning("plain")

    err = capsys.readouterr().err
    assert "[boxgraph:discovery] INFO Discovered 3 files" in err
    assert "[boxgraph] WARNING plain" in err


def test_debug_is_hidden_unless_verbose(capsys) -> None:
    configure_logging()
    get_logger("legend").debug("hidden")
    assert "hidden" not in capsys.readouterr().err

    configure_logging(verbose=True)
    get_logger("legend").debug("shown")
    assert "[boxgraph:legend] DEBUG shown" in capsys.readouterr().err


def test_repeated_configuration_does_not_stack_handlers() -> None:
    configure_logging()
    configure_logging()

    logger = logging.getLogger(ROOT_LOGGER)
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_log_file_records_debug_detail(tmp_path, capsys) -> None:
    log_file = tmp_path / "logs" / "build.log"
    configure_logging(log_file=log_file)

    get_logger("analyzer").debug("Analyzing src/main.cpp")

    for handler in logging.getLogger(ROOT_LOGGER).handlers:
        handler.flush()
    assert "DEBUG boxgraph:analyzer: Analyzing src/main.cpp" in log_file.read_text(
        encoding="utf-8"
    )
    assert "Analyzing" not in capsys.readouterr().err
