"""Package identities, dependency edges and catalog entries.

Package ids are case-insensitive everywhere: two identities that differ only
in the case of their id are the same package.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pkgresolve.core.versioning import SemanticVersion, VersionRange


def normalize_id(package_id: str) -> str:
    """Return the comparison key for a package id."""
    return package_id.casefold()


@dataclass(frozen=True, eq=False)
class PackageIdentity:
    """A package id with an optional version.

    A ``None`` version means "any version" when used as a target and is
    never produced by the resolver.
    """

    id: str
    version: SemanticVersion | None = None

    @property
    def key(self) -> tuple[str, SemanticVersion | None]:
        return normalize_id(self.id), self.version

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageIdentity):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __lt__(self, other: PackageIdentity) -> bool:
        if normalize_id(self.id) != normalize_id(other.id):
            return normalize_id(self.id) < normalize_id(other.id)
        if self.version is None or other.version is None:
            return self.version is None and other.version is not None
        return self.version < other.version

    def __str__(self) -> str:
        if self.version is None:
            return self.id
        return f"{self.id} {self.version}"


@dataclass(frozen=True)
class PackageDependency:
    """A dependency edge: "requires ``id`` at a version inside ``version_range``".

    Attributes:
        id: The id of the required package.
        version_range: Allowed versions, or None for any version.
    """

    id: str
    version_range: VersionRange | None = None


@dataclass(frozen=True)
class PackageDependencyInfo:
    """One catalog entry: a package version and the edges it declares."""

    id: str
    version: SemanticVersion
    dependencies: tuple[PackageDependency, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    @property
    def identity(self) -> PackageIdentity:
        return PackageIdentity(self.id, self.version)
