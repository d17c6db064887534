"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging

import pytest

from homeledger.config import BaseConfig
from homeledger.logging_config import JSONFormatter, get_logger, setup_logging


def test_json_formatter_includes_extra_fields():
    formatter = JSONFormatter()
    record = logging.LogRecord(
        name="homeledger.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=42,
        msg="Balance moved",
        args=(),
        exc_info=None,
    )
    record.asset_id = "abc"

    log_data = json.loads(formatter.format(record))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "homeledger.test"
    assert log_data["message"] == "Balance moved"
    assert log_data["line"] == 42
    assert log_data["extra"] == {"asset_id": "abc"}
    assert "timestamp" in log_data


def test_json_formatter_with_exception():
    formatter = JSONFormatter()
    try:
        raise ValueError("Test error")
    except ValueError:
        import sys

        exc_info = sys.exc_info()

    record = logging.LogRecord(
        name="homeledger.test",
        level=logging.ERROR,
        pathname="test.py",
        lineno=1,
        msg="Failed",
        args=(),
        exc_info=exc_info,
    )

    log_data = json.loads(formatter.format(record))

    assert log_data["exception"]["type"] == "ValueError"
    assert log_data["exception"]["message"] == "Test error"
    assert "Traceback" in log_data["exception"]["traceback"]


def test_setup_logging_writes_json_file(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("HOMELEDGER_DATA_DIR", str(tmp_path))
    logger = setup_logging(BaseConfig())

    get_logger("tests").info("hello", extra={"asset_id": "xyz"})
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "logs" / "homeledger.log").read_text(encoding="utf-8").splitlines()
    entries = [json.loads(line) for line in lines]
    assert entries[-1]["message"] == "hello"
    assert entries[-1]["logger"] == "homeledger.tests"
    assert entries[-1]["extra"] == {"asset_id": "xyz"}


def test_setup_logging_does_not_stack_handlers(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("HOMELEDGER_DATA_DIR", str(tmp_path))

    setup_logging(BaseConfig())
    logger = setup_logging(BaseConfig())

    assert len(logger.handlers) == 2


def test_get_logger_nests_under_package():
    assert get_logger("homeledger.services.balances").name == "homeledger.services.balances"
    assert get_logger("scripts").name == "homeledger.scripts"


def test_transaction_create_is_logged(api, asset_factory, category_factory, caplog):
    asset = asset_factory(balance=10)
    category = category_factory()

    with caplog.at_level(logging.INFO, logger="homeledger"):
        api.post(
            "/api/transactions",
            json={
                "date": "2024-01-01",
                "type": "EXPENSE",
                "amount": 4,
                "assetId": str(asset.id),
                "categoryId": str(category.id),
            },
        )

    messages = [record.getMessage() for record in caplog.records]
    assert "Transaction created" in messages
    assert "Asset balance adjusted" in messages


def test_json_formatter_skips_asctime_set_by_console_formatter():
    record = logging.LogRecord(
        name="homeledger.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg="Hello",
        args=(),
        exc_info=None,
    )
    logging.Formatter("%(asctime)s %(message)s").format(record)

    log_data = json.loads(JSONFormatter().format(record))

    assert "asctime" in record.__dict__
    assert "extra" not in log_data
