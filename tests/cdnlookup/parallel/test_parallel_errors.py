"""
tests/cdnlookup/parallel/test_parallel_errors.py - ErrorCollector 테스트
"""

import json
import logging
import threading
from concurrent.futures import TimeoutError as FutureTimeoutError

import pytest
import requests

from cdnlookup.exceptions import CacheCorruptError, FetchError, ProviderNotFoundError
from cdnlookup.parallel import (
    CollectedError,
    ErrorCategory,
    ErrorCollector,
    ErrorSeverity,
    categorize_error,
)


class TestCategorizeError:
    """예외 분류 테스트"""

    @pytest.mark.parametrize(
        "error, expected",
        [
            (requests.Timeout("read timed out"), ErrorCategory.TIMEOUT),
            (FutureTimeoutError(), ErrorCategory.TIMEOUT),
            (requests.HTTPError("503"), ErrorCategory.HTTP),
            (requests.ConnectionError("refused"), ErrorCategory.NETWORK),
            (ConnectionResetError(), ErrorCategory.NETWORK),
            (requests.TooManyRedirects(), ErrorCategory.NETWORK),
            (json.JSONDecodeError("Expecting value", "", 0), ErrorCategory.DECODE),
            (KeyError("prefixes"), ErrorCategory.DECODE),
            (CacheCorruptError("x", "invalid json"), ErrorCategory.CACHE),
            (RuntimeError("boom"), ErrorCategory.UNKNOWN),
        ],
    )
    def test_categories(self, error, expected):
        assert categorize_error(error) == expected

    def test_fetch_error_uses_cause(self):
        error = FetchError("x", "HTTPError", cause=requests.HTTPError("404"))

        assert categorize_error(error) == ErrorCategory.HTTP

    def test_fetch_error_without_cause(self):
        assert categorize_error(FetchError("x", "empty")) == ErrorCategory.UNKNOWN


class TestErrorCollector:
    """ErrorCollector 테스트"""

    def test_collect(self):
        collector = ErrorCollector("lookup")

        collected = collector.collect(FetchError("fastly", "Timeout"), "fastly", "fetch_with_cache")

        assert isinstance(collected, CollectedError)
        assert collected.provider == "fastly"
        assert collected.error_type == "FetchError"
        assert collected.severity == ErrorSeverity.WARNING
        assert collector.has_errors
        assert collector.errors == [collected]

    def test_message_includes_cause(self):
        collector = ErrorCollector()
        error = FetchError("x", "ConnectionError", cause=requests.ConnectionError("refused"))

        collected = collector.collect(error, "x", "fetch")

        assert "refused" in collected.error_message
        assert "x.fetch" in str(collected)

    def test_plain_exception_message(self):
        collected = ErrorCollector().collect(ValueError("bad"), "x", "parse")

        assert collected.error_message == "bad"

    @pytest.mark.parametrize(
        "severity, level",
        [
            (ErrorSeverity.CRITICAL, logging.ERROR),
            (ErrorSeverity.WARNING, logging.WARNING),
            (ErrorSeverity.INFO, logging.INFO),
            (ErrorSeverity.DEBUG, logging.DEBUG),
        ],
    )
    def test_log_level_follows_severity(self, caplog, severity, level):
        collector = ErrorCollector("scope")

        with caplog.at_level(logging.DEBUG, logger="cdnlookup.parallel.errors"):
            collector.collect(ProviderNotFoundError("x"), "x", "get", severity)

        [record] = caplog.records
        assert record.levelno == level
        assert "(scope)" in record.getMessage()

    def test_get_by_provider(self):
        collector = ErrorCollector()
        collector.collect(ValueError("a1"), "a", "op")
        collector.collect(ValueError("b1"), "b", "op")
        collector.collect(ValueError("a2"), "a", "op")

        grouped = collector.get_by_provider()

        assert [e.error_message for e in grouped["a"]] == ["a1", "a2"]
        assert len(grouped["b"]) == 1

    def test_summary(self):
        collector = ErrorCollector()
        assert collector.get_summary() == "no errors"

        collector.collect(requests.Timeout(), "a", "op")
        collector.collect(requests.Timeout(), "b", "op")
        collector.collect(requests.ConnectionError(), "c", "op")

        assert collector.get_summary() == "3 errors (network: 1, timeout: 2)"

    def test_clear(self):
        collector = ErrorCollector()
        collector.collect(ValueError("x"), "a", "op")

        collector.clear()

        assert not collector.has_errors
        assert collector.errors == []

    def test_to_dict(self):
        collected = ErrorCollector().collect(KeyError("field"), "a", "op", ErrorSeverity.INFO)

        data = collected.to_dict()

        assert data["category"] == "decode"
        assert data["severity"] == "info"
        assert data["provider"] == "a"

    def test_thread_safety(self):
        collector = ErrorCollector()

        def worker(i):
            for j in range(50):
                collector.collect(ValueError(j), f"p{i}", "op", ErrorSeverity.DEBUG)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(collector.errors) == 400
