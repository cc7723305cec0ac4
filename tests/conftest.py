"""Shared fixtures for pkgresolve tests."""

import pytest

from pkgresolve.core.identity import PackageDependency, PackageDependencyInfo
from pkgresolve.core.versioning import SemanticVersion, VersionRange


@pytest.fixture
def diamond_packages() -> list[PackageDependencyInfo]:
    """A -> [B, C], B -> [D], C -> [D], every package at 1.0."""

    def pkg(pkg_id: str, *deps: str) -> PackageDependencyInfo:
        return PackageDependencyInfo(
            pkg_id,
            SemanticVersion(1),
            tuple(PackageDependency(d, VersionRange.all()) for d in deps),
        )

    return [pkg("A", "B", "C"), pkg("B", "D"), pkg("C", "D"), pkg("D")]
