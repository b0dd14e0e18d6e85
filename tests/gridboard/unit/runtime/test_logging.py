from __future__ import annotations

import logging

import pytest

from gridboard.api.logging import LayoutLoggingConfig
from gridboard.runtime.json_codec import loads
from gridboard.runtime.logging import (
    PACKAGE_LOGGER,
    JsonFormatter,
    configure_layout_logging,
    setup_layout_logging,
    shutdown_layout_logging,
)


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    try:
        yield root
    finally:
        shutdown_layout_logging()
        root.handlers.clear()
        root.handlers.extend(original_handlers)


def test_setup_layout_logging_configures_package_logger(root_logger, monkeypatch) -> None:
    root_logger.handlers.clear()
    monkeypatch.setenv("GRIDBOARD_LOG_LEVEL", "DEBUG")

    logger = setup_layout_logging()

    assert logger is logging.getLogger(PACKAGE_LOGGER)
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert not logger.propagate
    assert root_logger.handlers == []


def test_setup_layout_logging_defers_to_host_handlers(root_logger) -> None:
    root_logger.handlers.clear()
    root_logger.addHandler(logging.NullHandler())
    assert setup_layout_logging() is None
    assert logging.getLogger(PACKAGE_LOGGER).handlers == []


def test_reconfigure_replaces_installed_handlers(root_logger) -> None:
    configure_layout_logging(LayoutLoggingConfig())
    logger = configure_layout_logging(LayoutLoggingConfig(level_name="warning", propagate=True))
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
    assert logger.propagate

    shutdown_layout_logging()
    assert logger.handlers == []
    assert logger.level == logging.NOTSET
    assert logger.propagate


def test_file_output_is_json_lines(root_logger, tmp_path) -> None:
    path = tmp_path / "logs" / "layout.jsonl"
    configure_layout_logging(LayoutLoggingConfig(console_format="text", file_path=str(path)))

    logging.getLogger("gridboard.layout.block").info("block %s committed", "cn3", extra={"block_id": "cn3"})
    shutdown_layout_logging()

    payload = loads(path.read_text(encoding="utf-8").splitlines()[-1])
    assert payload["logger"] == "gridboard.layout.block"
    assert payload["msg"] == "block cn3 committed"
    assert payload["fields"] == {"block_id": "cn3"}


def test_json_formatter_keeps_extra_fields() -> None:
    record = logging.LogRecord(
        name="gridboard.layout.block",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="block %s committed",
        args=("cn7",),
        exc_info=None,
    )
    record.block_id = "cn7"

    payload = loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "gridboard.layout.block"
    assert payload["msg"] == "block cn7 committed"
    assert payload["fields"] == {"block_id": "cn7"}
