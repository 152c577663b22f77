from __future__ import annotations

import json
import logging
from io import StringIO
from pathlib import Path

from pii_hasher.logging.error_log import ErrorLogBuffer
from pii_hasher.logging.init import (
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    setup_logging,
)
from pii_hasher.models.error_record import ErrorRecord


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()

    assert logger.name == "pii_hasher"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    assert setup_logging() is setup_logging()
    assert get_logger() is setup_logging()


def test_logging_labeled_prefixes():
    captured = StringIO()
    logger = logging.getLogger("test_pii_hasher_labels")
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    handler = logging.StreamHandler(captured)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(SUMMARY_LEVEL, "Test summary message")

    lines = captured.getvalue().strip().split("\n")
    assert lines == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_module_loggers_propagate_to_app_logger(capsys):
    setup_logging()
    logging.getLogger("pii_hasher.services.orchestrator").info("from module")
    log_summary("files=0/0")

    out = capsys.readouterr().out
    assert "INFO from module" in out
    assert "SUMMARY files=0/0" in out


def test_error_log_buffer_flush(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()

    buf.append(ErrorRecord.create("a.csv", "PARSE_ERROR", "bad"))
    buf.append(ErrorRecord.create("b.csv", "NO_TARGET_COLUMNS", "none"))
    assert len(buf) == 2

    path = buf.flush()
    assert path is not None and path.parent == tmp_path / "logs"
    assert path.name.startswith("errors-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["file"] for line in lines] == ["a.csv", "b.csv"]
    assert len(buf) == 0


def test_error_log_buffer_appends_on_second_flush(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    buf.append(ErrorRecord.create("a.csv", "PARSE_ERROR", "bad"))
    first = buf.flush()
    buf.append(ErrorRecord.create("b.csv", "PARSE_ERROR", "bad"))
    second = buf.flush()

    assert first == second
    assert len(second.read_text(encoding="utf-8").splitlines()) == 2
