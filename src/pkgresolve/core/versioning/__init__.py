"""Versions and version ranges consumed by the resolver as opaque values.

The resolver only ever compares versions and asks a range whether it
contains a version; everything else about versioning lives here.
"""

from pkgresolve.core.versioning.ranges import VersionRange
from pkgresolve.core.versioning.version import SemanticVersion

__all__ = [
    "SemanticVersion",
    "VersionRange",
]
