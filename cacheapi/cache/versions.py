"""
CacheAPI — Version Compatibility

Parses host/backend version strings such as "1.0", "1.0.999", "1.0 RC1" or
"1.0 Beta 2" and checks a host version against a backend's supported range.
"""

import logging
import re

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(
    r"^\s*(\d+)(?:\.(\d+))?(?:\.(\d+))?\s*(?:(alpha|beta|rc)\s*(\d*))?\s*$",
    re.IGNORECASE,
)

_STAGE_RANK = {"alpha": 0, "beta": 1, "rc": 2}
_STABLE = 3

VersionKey = tuple[int, int, int, int, int]


def parse_version(version: str) -> VersionKey | None:
    """
    Parse a version string into a comparable tuple.

    Returns:
        (major, minor, patch, stage, stage_number), or None when unparseable.
        Pre-release stages sort alpha < beta < rc < stable.
    """
    match = _VERSION_RE.match(version or "")
    if match is None:
        return None

    major, minor, patch, stage, stage_number = match.groups()
    rank = _STAGE_RANK[stage.lower()] if stage else _STABLE
    return (
        int(major),
        int(minor or 0),
        int(patch or 0),
        rank,
        int(stage_number or 0),
    )


def compare_versions(left: str, right: str) -> int | None:
    """
    Compare two version strings.

    Returns:
        -1, 0 or 1 like a classic cmp(); None if either side is unparseable
    """
    left_key = parse_version(left)
    right_key = parse_version(right)
    if left_key is None or right_key is None:
        return None
    return (left_key > right_key) - (left_key < right_key)


def is_compatible(host_version: str, minimum: str, maximum: str) -> bool:
    """Check minimum <= host_version <= maximum; unparseable input is incompatible."""
    lower = compare_versions(host_version, minimum)
    upper = compare_versions(host_version, maximum)
    if lower is None or upper is None:
        logger.debug(
            "Unparseable version in compatibility check",
            extra={"host_version": host_version, "minimum": minimum, "maximum": maximum},
        )
        return False
    return lower >= 0 and upper <= 0
