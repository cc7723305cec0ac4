"""Resolver candidates: one version of a package id, or its absence.

A candidate group holds every candidate for one package id. Besides the
real versions from the catalog, a group for an id that the caller did not
ask for also holds an ``AbsentPackage``: picking it means the id is left
out of the solution entirely.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pkgresolve.core.identity import PackageDependency, PackageIdentity, normalize_id
from pkgresolve.core.versioning import SemanticVersion, VersionRange


class ResolverPackage:
    """Common interface of the two candidate kinds.

    Subclasses are ``PresentPackage`` and ``AbsentPackage``. Code that needs
    a version must check ``absent`` first; an absent candidate has no
    ``version`` or ``dependencies`` attribute at all.
    """

    id: str
    absent: bool = False

    def find_dependency_range(self, target_id: str) -> VersionRange | None:
        raise NotImplementedError


@dataclass(frozen=True, eq=False)
class PresentPackage(ResolverPackage):
    """A real package version with its (possibly stripped) dependency edges."""

    id: str
    version: SemanticVersion
    dependencies: tuple[PackageDependency, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    @property
    def identity(self) -> PackageIdentity:
        return PackageIdentity(self.id, self.version)

    def find_dependency_range(self, target_id: str) -> VersionRange | None:
        """Return the range this package requires for *target_id*.

        An edge declared without a range yields ``VersionRange.all()``.
        Returns None when there is no edge on *target_id*.
        """
        key = normalize_id(target_id)
        for dep in self.dependencies:
            if normalize_id(dep.id) == key:
                return dep.version_range if dep.version_range is not None else VersionRange.all()
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PresentPackage):
            return NotImplemented
        return (normalize_id(self.id), self.version) == (normalize_id(other.id), other.version)

    def __hash__(self) -> int:
        return hash((normalize_id(self.id), self.version))

    def __repr__(self) -> str:
        return f"PresentPackage({self.id!r}, {str(self.version)!r})"


@dataclass(frozen=True, eq=False)
class AbsentPackage(ResolverPackage):
    """Sentinel candidate: the package id is not part of the solution."""

    id: str
    absent: bool = field(default=True, init=False)

    def find_dependency_range(self, target_id: str) -> VersionRange | None:
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbsentPackage):
            return NotImplemented
        return normalize_id(self.id) == normalize_id(other.id)

    def __hash__(self) -> int:
        return hash((normalize_id(self.id), None))

    def __repr__(self) -> str:
        return f"AbsentPackage({self.id!r})"
