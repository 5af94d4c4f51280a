"""
Version parsing for version-floor probes.

Tools print their version in many shapes ("v0.10.0", "git version 2.43.0",
"javac 17.0.2"). We take the first standalone MAJOR.MINOR.PATCH token and
compare tuples, the same way sys.version_info is compared. Partial numbers
("v0.10", "42") and digits glued to words ("12abc") are not versions.
"""

import re
from typing import Tuple

VersionTuple = Tuple[int, int, int]

_VERSION_PATTERN = re.compile(r"(?<![\w.])v?(\d+)\.(\d+)\.(\d+)(?![\w.])")


class VersionParseError(ValueError):
    """Raised when no version number can be found in a string."""

    def __init__(self, text: str):
        self.text = text
        shown = text.strip() or "<empty>"
        super().__init__(f"Cannot parse a version number from: {shown}")


def parse_version(text: str) -> VersionTuple:
    """
    Extract a (major, minor, patch) tuple from tool output.

    Raises:
        VersionParseError: No complete version number in text
    """
    match = _VERSION_PATTERN.search(text or "")
    if not match:
        raise VersionParseError(text or "")
    major, minor, patch = (int(part) for part in match.groups())
    return (major, minor, patch)


def format_version(version: VersionTuple) -> str:
    return ".".join(str(part) for part in version)


def satisfies_floor(installed: str, floor: str) -> bool:
    """True when installed >= floor. Both arguments are parsed first."""
    return parse_version(installed) >= parse_version(floor)
