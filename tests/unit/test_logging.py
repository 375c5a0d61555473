"""
CacheAPI — Structured Logging Tests
"""

import json
import logging

from cacheapi.errors import CacheAPIError, DependencyError
from cacheapi.observability import JSONFormatter, setup_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="cacheapi.cache.base",
        level=logging.WARNING,
        pathname=__file__,
        lineno=10,
        msg="Cache %s failed",
        args=("get_data",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields() -> None:
    payload = json.loads(JSONFormatter().format(_record(key="widgets", backend="memory")))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "cacheapi.cache.base"
    assert payload["message"] == "Cache get_data failed"
    assert payload["key"] == "widgets"
    assert payload["backend"] == "memory"
    assert payload["timestamp"].endswith("Z")


def test_json_formatter_serializes_unknown_types() -> None:
    payload = json.loads(JSONFormatter().format(_record(path=object())))
    assert isinstance(payload["path"], str)


def test_setup_logging_is_idempotent() -> None:
    logger = setup_logging("DEBUG")
    setup_logging("DEBUG")

    assert logger.name == "cacheapi"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, JSONFormatter)
    logger.handlers.clear()


def test_error_to_dict() -> None:
    error = CacheAPIError("boom", details={"backend": "file"})
    assert error.to_dict() == {"error": "CacheAPIError", "message": "boom", "details": {"backend": "file"}}


def test_dependency_error_message() -> None:
    error = DependencyError("redis", feature="the redis cache backend", install_hint="pip install redis")

    assert error.package == "redis"
    assert "missing for the redis cache backend" in error.message
    assert error.details["install_hint"] == "pip install redis"
