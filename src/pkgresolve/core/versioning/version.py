"""Semantic versions with an optional fourth ``revision`` component.

Precedence follows SemVer 2.0.0 section 11: numeric components compare
numerically, a pre-release version has lower precedence than the associated
normal version, and build metadata never affects precedence. Legacy package
feeds also publish four-part versions (``1.2.3.4``), so a ``revision``
component is carried after ``patch``.

References
----------
.. [SemVer] Preston-Werner, T. (2013). "Semantic Versioning 2.0.0."
   https://semver.org/
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field

from pkgresolve.exceptions import VersionFormatError


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

_VERSION_RE = re.compile(
    r"^(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?(?:\.(?P<revision>\d+))?"
    r"(?:-(?P<pre>[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?$"
)


def _release_key(release: str) -> tuple[tuple[int, int | str], ...]:
    """Order pre-release identifiers: numeric ones numerically, below alphanumerics."""
    parts: list[tuple[int, int | str]] = []
    for ident in release.split("."):
        if ident.isdigit():
            parts.append((0, int(ident)))
        else:
            parts.append((1, ident.lower()))
    return tuple(parts)


# ---------------------------------------------------------------------------
# SemanticVersion
# ---------------------------------------------------------------------------


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class SemanticVersion:
    """An immutable, totally ordered package version.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        revision: Fourth component used by legacy feeds; zero when absent.
        release: Pre-release label without the leading dash, or "".
        metadata: Build metadata without the leading plus, or "".
    """

    major: int
    minor: int = 0
    patch: int = 0
    revision: int = 0
    release: str = ""
    metadata: str = field(default="", compare=False)

    @classmethod
    def parse(cls, text: str) -> SemanticVersion:
        """Parse a version string such as ``1.0``, ``2.1.3-beta.1`` or ``1.2.3.4``.

        Raises:
            VersionFormatError: If *text* is not a valid version.
        """
        if isinstance(text, SemanticVersion):
            return text
        m = _VERSION_RE.match(str(text).strip())
        if not m:
            raise VersionFormatError(f"Invalid version: {text!r}")
        return cls(
            major=int(m.group("major")),
            minor=int(m.group("minor") or 0),
            patch=int(m.group("patch") or 0),
            revision=int(m.group("revision") or 0),
            release=m.group("pre") or "",
            metadata=m.group("build") or "",
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.release)

    def _sort_key(self) -> tuple:
        # A release version sorts above every pre-release of the same numbers.
        release_key = (1, ()) if not self.release else (0, _release_key(self.release))
        return (self.major, self.minor, self.patch, self.revision, release_key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.revision:
            text += f".{self.revision}"
        if self.release:
            text += f"-{self.release}"
        return text

    def __repr__(self) -> str:
        return f"SemanticVersion({str(self)!r})"
