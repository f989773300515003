"""Unit tests for logging helpers."""

import logging

from newsagg.utils.logging import CustomJsonFormatter, LogContext, get_logger


def test_get_logger_returns_adapter_with_extra():
    logger = get_logger("newsagg.test", extra={"component": "fetcher"})

    assert isinstance(logger, logging.LoggerAdapter)
    assert logger.extra == {"component": "fetcher"}


def test_log_context_attaches_run_id_and_restores_factory():
    original_factory = logging.getLogRecordFactory()

    with LogContext(run_id="run-123"):
        record = logging.getLogRecordFactory()(
            "newsagg.test", logging.INFO, __file__, 1, "hello", None, None
        )
        assert record.run_id == "run-123"

    assert logging.getLogRecordFactory() is original_factory


def test_json_formatter_includes_run_id():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    record = logging.LogRecord("newsagg.test", logging.WARNING, __file__, 10, "careful", None, None)
    record.run_id = "abc"

    output = formatter.format(record)

    assert '"run_id": "abc"' in output
    assert '"level": "WARNING"' in output
    assert '"message": "careful"' in output
