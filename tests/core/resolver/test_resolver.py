"""Tests for PackageResolver: validation, grouping, policies and ordering.

Scenarios mirror common package manager situations: diamonds, version
spreads, stability of installed packages and unsatisfiable graphs.
"""

from __future__ import annotations

import pytest

from pkgresolve.core.identity import (
    PackageDependency,
    PackageDependencyInfo,
    PackageIdentity,
)
from pkgresolve.core.resolver import DependencyBehavior, PackageResolver, resolve
from pkgresolve.core.versioning import SemanticVersion, VersionRange
from pkgresolve.exceptions import (
    InvalidInputContractError,
    MissingCandidateInfoError,
    NoSolutionError,
    ResolutionCancelledError,
    ResolverInputError,
)


# ===========================================================================
# Helpers
# ===========================================================================


def _pkg(pkg_id: str, version: str, deps: dict[str, str | None] | None = None) -> PackageDependencyInfo:
    """Convenience factory for catalog entries; None means any version."""
    return PackageDependencyInfo(
        pkg_id,
        SemanticVersion.parse(version),
        tuple(
            PackageDependency(d, None if r is None else VersionRange.parse(r))
            for d, r in (deps or {}).items()
        ),
    )


def _ident(pkg_id: str, version: str) -> PackageIdentity:
    return PackageIdentity(pkg_id, SemanticVersion.parse(version))


def _versions(solution: list[PackageIdentity]) -> dict[str, str]:
    return {p.id: str(p.version) for p in solution}


def _diamond() -> list[PackageDependencyInfo]:
    """A -> [B, C], B -> [D], C -> [D]."""
    return [
        _pkg("A", "1.0", {"B": None, "C": None}),
        _pkg("B", "1.0", {"D": None}),
        _pkg("C", "1.0", {"D": None}),
        _pkg("D", "1.0"),
    ]


def _spread_catalog() -> list[PackageDependencyInfo]:
    """Catalog used by the lowest/highest-minor/highest-patch scenarios."""
    return [
        _pkg("A", "1.0", {"B": "1.0"}),
        _pkg("B", "2.0", {"C": "1.1"}),
        _pkg("B", "1.0", {"C": "1.1"}),
        _pkg("B", "1.0.1"),
        _pkg("D", "2.0"),
        _pkg("C", "1.1.3", {"D": "1.0"}),
        _pkg("C", "1.1.1", {"D": "1.0"}),
        _pkg("C", "1.5.1", {"D": "1.0"}),
        _pkg("B", "1.0.9", {"C": "1.1"}),
        _pkg("B", "1.1", {"C": "1.1"}),
    ]


# ===========================================================================
# Scenarios
# ===========================================================================


class TestScenarios:
    """End-to-end resolution scenarios."""

    def test_diamond(self) -> None:
        solution = PackageResolver(DependencyBehavior.LOWEST).resolve(["A"], _diamond())
        assert _versions(solution) == {"A": "1.0.0", "B": "1.0.0", "C": "1.0.0", "D": "1.0.0"}
        assert [p.id for p in solution][0] == "D"
        assert [p.id for p in solution][-1] == "A"

    def test_diamond_with_version_spread(self) -> None:
        catalog = [
            _pkg("A", "1.0", {"B": None, "C": None}),
            _pkg("B", "1.0", {"D": "1.0", "E": "2.0"}),
            _pkg("C", "1.0", {"D": "2.0", "E": "1.0"}),
            _pkg("D", "2.0"),
            _pkg("D", "1.0"),
            _pkg("E", "2.0"),
            _pkg("E", "1.0"),
        ]
        solution = PackageResolver(DependencyBehavior.LOWEST).resolve(["A"], catalog)

        assert len(solution) == 5
        assert _versions(solution) == {
            "A": "1.0.0", "B": "1.0.0", "C": "1.0.0", "D": "2.0.0", "E": "2.0.0",
        }
        ids = [p.id for p in solution]
        assert set(ids[:2]) == {"D", "E"}
        assert set(ids[2:4]) == {"B", "C"}
        assert ids[4] == "A"

    def test_prefers_installed_packages(self) -> None:
        catalog = [
            _pkg("A", "1.0", {"B": "1.0", "C": "1.0"}),
            _pkg("B", "1.0"),
            _pkg("B", "1.1"),
            _pkg("C", "1.0"),
            _pkg("C", "2.0"),
        ]
        installed = [_ident("B", "1.0"), _ident("C", "1.0")]
        targets = [_ident("A", "1.0"), *installed]

        solution = PackageResolver(DependencyBehavior.HIGHEST_MINOR).resolve(
            targets, catalog, installed
        )
        assert _versions(solution) == {"A": "1.0.0", "B": "1.0.0", "C": "1.0.0"}

    def test_missing_dependency_has_no_solution(self) -> None:
        catalog = [_pkg("A", "1.0", {"B": None})]
        with pytest.raises(NoSolutionError):
            PackageResolver(DependencyBehavior.LOWEST).resolve(["A"], catalog)

    def test_ignore_returns_only_targets(self) -> None:
        solution = PackageResolver(DependencyBehavior.IGNORE).resolve(["A"], _diamond())
        assert solution == [_ident("A", "1.0")]

    def test_simple_update(self) -> None:
        catalog = [_pkg("A", "2.0", {"B": "1.0"}), _pkg("B", "1.0")]
        solution = PackageResolver(DependencyBehavior.HIGHEST_PATCH).resolve(["A"], catalog)
        assert _versions(solution) == {"A": "2.0.0", "B": "1.0.0"}

    def test_basic_range(self) -> None:
        catalog = [
            _pkg("a", "1.0", {"b": "[1.0,3.0]"}),
            _pkg("b", "2.0"),
            _pkg("b", "2.5"),
            _pkg("b", "4.0"),
        ]
        solution = resolve(["a"], catalog, behavior=DependencyBehavior.LOWEST)
        assert _versions(solution) == {"a": "1.0.0", "b": "2.0.0"}

    def test_highest_picks_in_range_maximum(self) -> None:
        catalog = [
            _pkg("a", "1.0", {"b": "[1.0,3.0]"}),
            _pkg("b", "2.0"),
            _pkg("b", "2.5"),
            _pkg("b", "4.0"),
        ]
        solution = resolve(["a"], catalog, behavior="highest")
        assert _versions(solution) == {"a": "1.0.0", "b": "2.5.0"}

    def test_unrelated_catalog_packages_are_left_out(self) -> None:
        catalog = [*_diamond(), _pkg("Z", "9.0"), _pkg("Y", "1.0", {"Z": None})]
        solution = resolve(["B"], catalog)
        assert {p.id for p in solution} == {"B", "D"}


class TestPolicies:
    """Version selection per DependencyBehavior."""

    def test_lowest(self) -> None:
        catalog = [info for info in _spread_catalog() if info.identity != _ident("B", "1.0")]
        solution = resolve(["A"], catalog, behavior=DependencyBehavior.LOWEST)
        assert _versions(solution) == {"A": "1.0.0", "B": "1.0.1"}

    def test_lowest_follows_dependencies_of_lowest_pick(self) -> None:
        solution = resolve(["A"], _spread_catalog(), behavior=DependencyBehavior.LOWEST)
        assert _versions(solution) == {
            "A": "1.0.0", "B": "1.0.0", "C": "1.1.1", "D": "2.0.0",
        }

    def test_highest_minor(self) -> None:
        solution = resolve(["A"], _spread_catalog(), behavior=DependencyBehavior.HIGHEST_MINOR)
        assert _versions(solution) == {
            "A": "1.0.0", "B": "1.1.0", "C": "1.5.1", "D": "2.0.0",
        }

    def test_highest_patch(self) -> None:
        solution = resolve(["A"], _spread_catalog(), behavior=DependencyBehavior.HIGHEST_PATCH)
        assert _versions(solution) == {
            "A": "1.0.0", "B": "1.0.9", "C": "1.1.3", "D": "2.0.0",
        }

    def test_highest(self) -> None:
        solution = resolve(["A"], _spread_catalog(), behavior=DependencyBehavior.HIGHEST)
        assert _versions(solution) == {
            "A": "1.0.0", "B": "2.0.0", "C": "1.5.1", "D": "2.0.0",
        }

    def test_new_target_takes_highest_under_lowest(self) -> None:
        catalog = [_pkg("A", "1.0"), _pkg("A", "3.0"), _pkg("A", "2.0")]
        assert _versions(resolve(["A"], catalog, behavior="lowest")) == {"A": "3.0.0"}

    def test_installed_target_keeps_configured_policy(self) -> None:
        catalog = [_pkg("A", "1.0"), _pkg("A", "3.0"), _pkg("A", "2.0")]
        solution = resolve(["A"], catalog, [_ident("A", "2.0")], behavior="lowest")
        assert _versions(solution) == {"A": "2.0.0"}

    def test_installed_version_upgraded_when_required(self) -> None:
        catalog = [
            _pkg("A", "1.0", {"B": "[2.0,)"}),
            _pkg("B", "1.0"),
            _pkg("B", "2.0"),
            _pkg("B", "3.0"),
        ]
        solution = resolve(["A", "B"], catalog, [_ident("B", "1.0")], behavior="lowest")
        assert _versions(solution) == {"A": "1.0.0", "B": "2.0.0"}


class TestValidation:
    """Input validation happens before any search."""

    def test_unknown_target(self) -> None:
        with pytest.raises(MissingCandidateInfoError) as exc_info:
            resolve(["X"], _diamond())
        assert exc_info.value.package_id == "X"
        assert "X" in str(exc_info.value)

    def test_unknown_installed(self) -> None:
        with pytest.raises(MissingCandidateInfoError):
            resolve(["A", "X"], _diamond(), [_ident("X", "1.0")])

    def test_installed_must_be_target(self) -> None:
        with pytest.raises(InvalidInputContractError) as exc_info:
            resolve(["A"], _diamond(), [_ident("B", "1.0")])
        assert exc_info.value.package_id == "B"

    def test_input_errors_share_base_class(self) -> None:
        with pytest.raises(ResolverInputError):
            resolve(["nope"], [])

    def test_target_ids_are_case_insensitive(self) -> None:
        solution = resolve(["a"], _diamond())
        assert {p.id for p in solution} == {"A", "B", "C", "D"}

    def test_empty_targets(self) -> None:
        assert resolve([], _diamond()) == []


class TestCatalogHandling:
    """Grouping details."""

    def test_duplicate_entries_are_collapsed(self) -> None:
        catalog = [_pkg("A", "1.0", {"B": None}), _pkg("A", "1.0"), _pkg("B", "1.0")]
        solution = resolve(["A"], catalog)
        assert _versions(solution) == {"A": "1.0.0", "B": "1.0.0"}

    def test_optional_unavailable_dependency_of_unused_candidate(self) -> None:
        # A 2.0 needs an id missing from the catalog; A 1.0 still resolves.
        catalog = [_pkg("A", "2.0", {"Missing": None}), _pkg("A", "1.0")]
        assert _versions(resolve(["A"], catalog, behavior="highest")) == {"A": "1.0.0"}

    def test_mixed_case_ids_group_together(self) -> None:
        catalog = [_pkg("A", "1.0", {"lib": "2.0"}), _pkg("Lib", "1.0"), _pkg("LIB", "2.0")]
        solution = resolve(["A"], catalog)
        assert [str(p.version) for p in solution] == ["2.0.0", "1.0.0"]
        assert solution[0].id == "Lib"

    def test_ignore_with_installed(self) -> None:
        catalog = [*_diamond(), _pkg("B", "2.0")]
        solution = resolve(["A", "B"], catalog, [_ident("B", "1.0")], behavior="ignore")
        assert _versions(solution) == {"A": "1.0.0", "B": "1.0.0"}


class TestResolverInstance:
    """Resolver instances hold no per-call state."""

    def test_reuse_with_different_installed_sets(self) -> None:
        catalog = [_pkg("A", "1.0"), _pkg("A", "2.0")]
        resolver = PackageResolver("lowest")
        assert _versions(resolver.resolve(["A"], catalog, [_ident("A", "1.0")])) == {"A": "1.0.0"}
        assert _versions(resolver.resolve(["A"], catalog)) == {"A": "2.0.0"}

    def test_behavior_property(self) -> None:
        assert PackageResolver("HighestPatch").behavior is DependencyBehavior.HIGHEST_PATCH

    def test_cancellation(self) -> None:
        with pytest.raises(ResolutionCancelledError):
            PackageResolver().resolve(["A"], _diamond(), should_cancel=lambda: True)
