"""
CacheAPI — Version Compatibility Tests
"""

import pytest

from cacheapi.cache.versions import compare_versions, is_compatible, parse_version


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        ("1.0", (1, 0, 0, 3, 0)),
        ("1.0.999", (1, 0, 999, 3, 0)),
        ("1.0 RC1", (1, 0, 0, 2, 1)),
        ("1.0 Beta 2", (1, 0, 0, 1, 2)),
        ("2.1.3 alpha", (2, 1, 3, 0, 0)),
        ("  3 ", (3, 0, 0, 3, 0)),
    ],
)
def test_parse_version(version: str, expected: tuple[int, ...]) -> None:
    assert parse_version(version) == expected


@pytest.mark.parametrize("version", ["", "abc", "1.x", "1.0 gamma", "v1.0"])
def test_parse_version_rejects_garbage(version: str) -> None:
    assert parse_version(version) is None


def test_stage_ordering() -> None:
    ordered = ["1.0 Alpha 1", "1.0 Beta 1", "1.0 Beta 2", "1.0 RC1", "1.0 RC2", "1.0", "1.0.1", "1.1"]
    for lower, higher in zip(ordered, ordered[1:]):
        assert compare_versions(lower, higher) == -1
        assert compare_versions(higher, lower) == 1


def test_compare_equal_forms() -> None:
    assert compare_versions("1.0", "1.0.0") == 0
    assert compare_versions("1.0", "junk") is None


@pytest.mark.parametrize(
    ("host", "expected"),
    [
        ("1.0", True),
        ("1.0 RC1", True),
        ("1.0.999", True),
        ("1.0 Beta 3", False),
        ("1.1", False),
        ("not-a-version", False),
    ],
)
def test_is_compatible(host: str, expected: bool) -> None:
    assert is_compatible(host, "1.0 RC1", "1.0.999") is expected
