"""Server version parsing and vendor detection.

Version strings such as ``10.1.22-MariaDB-1:10.1.22+maria~jessie`` are
reduced to an integer ``major * 10000 + minor * 100 + patch`` which orders
the same way as the dotted version.

Example:
    >>> version_to_int("5.6.35")
    50635
    >>> parse_version("10.1.22-MariaDB-")
    (100122, 10, False)
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

# Oldest server release the facade supports without warning
MINIMUM_VERSION = 50500

_VERSION_PATTERN = re.compile(r"^\s*(\d+)(?:\.(\d+))?(?:\.(\d+))?")

MARIADB_MARKER = "MariaDB"
PERCONA_MARKER = "Percona"


def version_to_int(version: str) -> int:
    """Encode the leading ``major.minor.patch`` groups of a version string.

    Missing groups count as zero and anything after the numeric groups is
    ignored. A string without leading digits encodes as 0.
    """
    match = _VERSION_PATTERN.match(version or "")
    if match is None:
        return 0
    major, minor, patch = (int(group) if group else 0 for group in match.groups())
    return major * 10000 + minor * 100 + patch


def parse_version(version: str) -> Tuple[int, int, bool]:
    """Return ``(version_int, major_version, is_upgrade_required)``."""
    version_int = version_to_int(version)
    return version_int, version_int // 10000, version_int < MINIMUM_VERSION


def detect_vendor(version: str, comment: str = "") -> Tuple[bool, bool]:
    """Return ``(is_mariadb, is_percona)`` from the version and its comment.

    Markers are matched case-sensitively; a MariaDB marker wins over a
    Percona one so the flags never both hold.
    """
    text = f"{version or ''} {comment or ''}"
    is_mariadb = MARIADB_MARKER in text
    is_percona = not is_mariadb and PERCONA_MARKER in text
    return is_mariadb, is_percona


@dataclass(frozen=True)
class ServerVersion:
    """Parsed ``@@version`` / ``@@version_comment`` pair."""
    version_int: int
    version_string: str
    version_comment: str = ""
    is_mariadb: bool = False
    is_percona: bool = False

    @property
    def major(self) -> int:
        return self.version_int // 10000

    @property
    def is_upgrade_required(self) -> bool:
        return self.version_int < MINIMUM_VERSION

    @classmethod
    def parse(cls, version: str, comment: str = "") -> "ServerVersion":
        is_mariadb, is_percona = detect_vendor(version, comment)
        return cls(
            version_int=version_to_int(version),
            version_string=version,
            version_comment=comment,
            is_mariadb=is_mariadb,
            is_percona=is_percona,
        )

    @classmethod
    def from_row(cls, row: Optional[Dict[str, Any]]) -> Optional["ServerVersion"]:
        """Build from a version row, or None when the row is unusable."""
        if not isinstance(row, dict):
            return None
        version = row.get("@@version")
        if isinstance(version, (bytes, bytearray)):
            version = version.decode("utf-8", errors="replace")
        if not isinstance(version, str) or not _VERSION_PATTERN.match(version):
            return None
        comment = row.get("@@version_comment") or ""
        if isinstance(comment, (bytes, bytearray)):
            comment = comment.decode("utf-8", errors="replace")
        return cls.parse(version, str(comment))
