"""Version ranges: the containment test attached to every dependency edge.

Two notations are accepted.

Interval notation, as published by package feeds:

- ``1.0``          -- minimum version, inclusive (``>= 1.0``)
- ``[1.0]``        -- exact version
- ``[1.0,2.0)``    -- inclusive minimum, exclusive maximum
- ``(,2.0]``       -- no minimum, inclusive maximum
- ``(1.0,)``       -- exclusive minimum, no maximum

Operator notation, comma separated, all atoms must hold:

- ``>=1.0,<2.0``, ``==1.2.3``, ``!=1.5``, ``>1``, ``<=3.0``

``*`` (or an empty string) matches every version.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pkgresolve.core.versioning.version import SemanticVersion
from pkgresolve.exceptions import VersionFormatError


_ATOM_RE = re.compile(r"^\s*(?P<op>==|!=|>=|<=|>|<)\s*(?P<ver>\S+)\s*$")


@dataclass(frozen=True)
class VersionRange:
    """An interval of versions, optionally with excluded points.

    Attributes:
        min_version: Lower bound, or None for unbounded.
        min_inclusive: Whether ``min_version`` itself satisfies the range.
        max_version: Upper bound, or None for unbounded.
        max_inclusive: Whether ``max_version`` itself satisfies the range.
        excluded: Versions rejected even when inside the bounds (``!=``).
    """

    min_version: SemanticVersion | None = None
    min_inclusive: bool = True
    max_version: SemanticVersion | None = None
    max_inclusive: bool = False
    excluded: frozenset[SemanticVersion] = frozenset()

    @classmethod
    def all(cls) -> VersionRange:
        """The range that places no constraint on the version."""
        return cls()

    @classmethod
    def exact(cls, version: SemanticVersion) -> VersionRange:
        return cls(version, True, version, True)

    @classmethod
    def parse(cls, text: str | None) -> VersionRange:
        """Parse interval or operator notation.

        Raises:
            VersionFormatError: If *text* is not a valid range.
        """
        if text is None:
            return cls.all()
        stripped = str(text).strip()
        if stripped in ("", "*"):
            return cls.all()
        if stripped[0] in "[(":
            return cls._parse_interval(stripped)
        if stripped[0] in "<>=!":
            return cls._parse_operators(stripped)
        return cls(min_version=SemanticVersion.parse(stripped), min_inclusive=True)

    @classmethod
    def _parse_interval(cls, text: str) -> VersionRange:
        if len(text) < 3 or text[-1] not in "])":
            raise VersionFormatError(f"Invalid version range: {text!r}")
        min_inclusive = text[0] == "["
        max_inclusive = text[-1] == "]"
        body = text[1:-1]
        parts = [p.strip() for p in body.split(",")]

        if len(parts) == 1:
            # [1.0] is the only legal single-point form
            if not (min_inclusive and max_inclusive) or not parts[0]:
                raise VersionFormatError(f"Invalid version range: {text!r}")
            return cls.exact(SemanticVersion.parse(parts[0]))
        if len(parts) != 2 or not (parts[0] or parts[1]):
            raise VersionFormatError(f"Invalid version range: {text!r}")

        low = SemanticVersion.parse(parts[0]) if parts[0] else None
        high = SemanticVersion.parse(parts[1]) if parts[1] else None
        if low is not None and high is not None and high < low:
            raise VersionFormatError(f"Invalid version range: {text!r}")
        return cls(low, min_inclusive, high, max_inclusive)

    @classmethod
    def _parse_operators(cls, text: str) -> VersionRange:
        low: SemanticVersion | None = None
        low_inc = True
        high: SemanticVersion | None = None
        high_inc = False
        excluded: set[SemanticVersion] = set()

        for atom in (a for a in text.split(",") if a.strip()):
            m = _ATOM_RE.match(atom)
            if not m:
                raise VersionFormatError(f"Invalid constraint atom: {atom!r}")
            op = m.group("op")
            ver = SemanticVersion.parse(m.group("ver"))

            if op == "!=":
                excluded.add(ver)
                continue
            if op in ("==", ">=", ">"):
                inc = op != ">"
                # tighten the lower bound
                if low is None or ver > low or (ver == low and not inc):
                    low, low_inc = ver, inc
            if op in ("==", "<=", "<"):
                inc = op != "<"
                if high is None or ver < high or (ver == high and not inc):
                    high, high_inc = ver, inc

        return cls(low, low_inc, high, high_inc, frozenset(excluded))

    def satisfies(self, version: SemanticVersion | None) -> bool:
        """Return True if *version* lies inside this range.

        A missing version (the absent candidate) never satisfies a range.
        """
        if version is None:
            return False
        if self.min_version is not None:
            if version < self.min_version:
                return False
            if version == self.min_version and not self.min_inclusive:
                return False
        if self.max_version is not None:
            if version > self.max_version:
                return False
            if version == self.max_version and not self.max_inclusive:
                return False
        return version not in self.excluded

    def __contains__(self, version: SemanticVersion) -> bool:
        return self.satisfies(version)

    def __str__(self) -> str:
        low, high = self.min_version, self.max_version
        if low is None and high is None:
            text = "*"
        elif high is None and self.min_inclusive:
            text = f">= {low}"
        elif low is not None and low == high and self.min_inclusive and self.max_inclusive:
            text = f"[{low}]"
        else:
            text = (
                ("[" if self.min_inclusive and low is not None else "(")
                + (str(low) if low is not None else "")
                + ", "
                + (str(high) if high is not None else "")
                + ("]" if self.max_inclusive and high is not None else ")")
            )
        if self.excluded:
            text += " " + " ".join(f"!= {v}" for v in sorted(self.excluded))
        return text
