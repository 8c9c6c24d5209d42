import json
import logging

import pytest

from apicheck.logger import JsonFormatter, parse_level, setup_logger


@pytest.mark.parametrize("name, expected", [
    ("debug", logging.DEBUG),
    ("info", logging.INFO),
    ("warn", logging.WARNING),
    ("WARNING", logging.WARNING),
    ("error", logging.ERROR),
    ("fatal", logging.CRITICAL),
    ("panic", logging.CRITICAL),
])
def test_parse_level(name, expected):
    assert parse_level(name) == expected


def test_parse_level_rejects_unknown_names():
    with pytest.raises(ValueError):
        parse_level("verbose")


def _record(msg, level=logging.INFO):
    return logging.LogRecord("apicheck", level, __file__, 1, msg, None, None)


def test_formatter_plain_message():
    data = json.loads(JsonFormatter().format(_record("GET failed")))
    assert data["level"] == "INFO"
    assert data["message"] == "GET failed"
    assert "timestamp" in data


def test_formatter_merges_dict_messages():
    data = json.loads(JsonFormatter().format(_record({"message": "Entrypoint params", "url": "http://x", "timeout": 5.0})))
    assert data["message"] == "Entrypoint params"
    assert data["url"] == "http://x"
    assert data["timeout"] == 5.0


def test_setup_logger_does_not_stack_handlers(tmp_path):
    logger = setup_logger(logging.INFO)
    setup_logger(logging.INFO, log_file=str(tmp_path / "check.log"))
    logger = setup_logger(logging.DEBUG)
    try:
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
