# tests/assetgraph/core/test_logging.py
from __future__ import annotations

import json
import logging
import logging.handlers
import sys
from pathlib import Path

import pytest

from assetgraph.core.logging import clearLogContext, configureLogging, getLogContext, setLogContext
from assetgraph.core.logging.filters import RecurringSuppressFilter
from assetgraph.core.logging.formatters import DevFormatter, JsonFormatter


def makeRecord(msg: str = "hello %s", args: tuple = ("world",), level: int = logging.WARNING) -> logging.LogRecord:
    return logging.LogRecord("assetgraph.test", level, __file__, 1, msg, args, None)


@pytest.fixture(autouse=True)
def _cleanContext():
    clearLogContext()
    yield
    clearLogContext()

# ----------------------------------------
# Context
# ----------------------------------------

def test_log_context_updates_and_clears() -> None:
    assert getLogContext() is None
    setLogContext(requestId="r1", path=None)
    setLogContext(path="/assets/manifest")
    assert getLogContext() == {"requestId": "r1", "path": "/assets/manifest"}
    clearLogContext()
    assert getLogContext() is None

# ----------------------------------------
# Formatters
# ----------------------------------------

def test_dev_formatter_appends_request_context() -> None:
    formatter = DevFormatter()
    assert formatter.format(makeRecord()) == "WARNING: [assetgraph.test] hello world"
    setLogContext(requestId="r1", path="/health")
    assert formatter.format(makeRecord()) == "WARNING: [assetgraph.test] hello world [r1 /health]"


def test_json_formatter_emits_one_json_line() -> None:
    setLogContext(requestId="r2")
    line = JsonFormatter().format(makeRecord())
    assert "\n" not in line
    data = json.loads(line)
    assert data["level"] == "warning"
    assert data["logger"] == "assetgraph.test"
    assert data["msg"] == "hello world"
    assert data["ctx"] == {"requestId": "r2"}


def test_json_formatter_includes_exception() -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
    data = json.loads(JsonFormatter().format(record))
    assert data["exc"]["type"] == "ValueError"
    assert data["exc"]["message"] == "boom"

# ----------------------------------------
# Recurring suppression
# ----------------------------------------

def test_recurring_messages_are_suppressed_after_limit() -> None:
    suppress = RecurringSuppressFilter(windowSeconds=60, maxPerWindow=2)
    results = [suppress.filter(makeRecord("The package '%s' is unknown", ("nope",))) for _ in range(5)]
    assert results == [True, True, False, False, False]
    # a different message has its own window
    assert suppress.filter(makeRecord("The package '%s' is unknown", ("other",))) is True


def test_summary_is_emitted_when_window_frees_up(monkeypatch, caplog) -> None:
    clock = {"now": 1000.0}
    monkeypatch.setattr("assetgraph.core.logging.filters.time.monotonic", lambda: clock["now"])
    suppress = RecurringSuppressFilter(windowSeconds=10, maxPerWindow=1)
    
    assert suppress.filter(makeRecord()) is True
    assert suppress.filter(makeRecord()) is False
    assert suppress.filter(makeRecord()) is False
    
    clock["now"] += 30
    with caplog.at_level(logging.INFO, logger="assetgraph.test"):
        assert suppress.filter(makeRecord()) is True
    summaries = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Suppressed")]
    assert summaries == ["Suppressed 2 repeated logs: hello world"]

# ----------------------------------------
# configureLogging
# ----------------------------------------

def test_configureLogging_dev_console_only(restoreRootLogging) -> None:
    configureLogging({"logging": {"devMode": True}})
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, DevFormatter)
    assert logging.getLogger("uvicorn").propagate is False


def test_configureLogging_prod_with_file_and_suppression(restoreRootLogging, tmp_path: Path) -> None:
    logFile = tmp_path / "assetgraph.log"
    configureLogging({
        "logging": {
            "devMode": False,
            "file": str(logFile),
            "suppressRecurringMessages": {"enabled": True, "maxPerWindow": 1, "summaryLevel": "warning"},
        },
    })
    root = logging.getLogger()
    assert root.level == logging.INFO
    fileHandlers = [h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
    assert len(fileHandlers) == 1
    assert isinstance(fileHandlers[0].formatter, JsonFormatter)
    assert all(any(isinstance(f, RecurringSuppressFilter) for f in h.filters) for h in root.handlers)
    
    logging.getLogger("assetgraph.test").info("Indexed %d module(s)", 3)
    fileHandlers[0].flush()
    lines = logFile.read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[-1])["msg"] == "Indexed 3 module(s)"


def test_shared_filter_gives_every_handler_the_same_verdict() -> None:
    suppress = RecurringSuppressFilter(windowSeconds=60, maxPerWindow=1)
    first = makeRecord()
    # console handler, then file handler
    assert suppress.filter(first) is True
    assert suppress.filter(first) is True
    second = makeRecord()
    assert suppress.filter(second) is False
    assert suppress.filter(second) is False


def test_same_record_is_counted_once_across_handlers(restoreRootLogging, tmp_path: Path, capsys) -> None:
    logFile = tmp_path / "assetgraph.log"
    configureLogging({
        "logging": {
            "devMode": True,
            "file": str(logFile),
            "suppressRecurringMessages": {"enabled": True, "maxPerWindow": 2},
        },
    })
    log = logging.getLogger("assetgraph.test")
    for _ in range(3):
        log.warning("The package '%s' doesn't have any associated file", "nope")
    for handler in logging.getLogger().handlers:
        handler.flush()

    lines = logFile.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert capsys.readouterr().err.count("doesn't have any associated file") == 2
