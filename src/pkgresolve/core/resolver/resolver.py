"""Package resolver: turns targets and a catalog into an install plan.

The resolver validates its inputs, builds one candidate group per package
id, hands the groups to the combination solver together with the version
preference comparator and the dependency rejection predicate, and finally
drops absent picks and orders the rest so that dependencies come first.

Grouping rules:

- every catalog entry becomes a ``PresentPackage``; under
  ``DependencyBehavior.IGNORE`` its edges are dropped;
- the group of an id that is not a target also receives an
  ``AbsentPackage``, so the solver may leave it out;
- an id that some edge refers to but that has no catalog entry gets a group
  holding only its ``AbsentPackage``, so a required edge onto it fails.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from pkgresolve.core.identity import (
    PackageDependencyInfo,
    PackageIdentity,
    normalize_id,
)
from pkgresolve.core.resolver.behavior import DependencyBehavior
from pkgresolve.core.resolver.ordering import topological_sort
from pkgresolve.core.resolver.package import (
    AbsentPackage,
    PresentPackage,
    ResolverPackage,
)
from pkgresolve.core.resolver.policy import ResolutionContext, should_reject_pair
from pkgresolve.core.solver import CombinationSolver
from pkgresolve.exceptions import (
    InvalidInputContractError,
    MissingCandidateInfoError,
    NoSolutionError,
)

logger = logging.getLogger(__name__)

Target = PackageIdentity | str


def _as_identity(target: Target) -> PackageIdentity:
    if isinstance(target, PackageIdentity):
        return target
    return PackageIdentity(target)


class PackageResolver:
    """Dependency resolver for package installations.

    The resolver keeps only its configured behavior; everything specific to
    one call lives in a ``ResolutionContext`` built inside ``resolve``, so a
    single instance can serve any number of calls.

    Args:
        behavior: Version selection policy (default ``LOWEST``).
    """

    def __init__(self, behavior: DependencyBehavior | str = DependencyBehavior.LOWEST) -> None:
        self._behavior = DependencyBehavior.parse(behavior)

    @property
    def behavior(self) -> DependencyBehavior:
        return self._behavior

    def resolve(
        self,
        targets: Iterable[Target],
        available_packages: Iterable[PackageDependencyInfo],
        installed_packages: Iterable[PackageIdentity] = (),
        should_cancel: Callable[[], bool] | None = None,
    ) -> list[PackageIdentity]:
        """Resolve *targets* against the catalog.

        Args:
            targets: Package ids (or identities) that must be installed.
                Installed packages must be listed here as well.
            available_packages: Every installable package version.
            installed_packages: Packages already present; preferred when
                they satisfy every edge.
            should_cancel: Optional callable polled during the search.

        Returns:
            One identity per installed package id, dependencies first.

        Raises:
            MissingCandidateInfoError: A target or installed id is not in
                the catalog.
            InvalidInputContractError: An installed id is not a target.
            NoSolutionError: No combination satisfies every edge.
            ResolutionCancelledError: *should_cancel* fired.
        """
        target_list = [_as_identity(t) for t in targets]
        catalog = list(available_packages)
        installed = list(installed_packages)

        self._validate(target_list, catalog, installed)

        if not target_list:
            logger.debug("No targets to resolve")
            return []

        target_ids = [t.id for t in target_list]
        context = ResolutionContext.build(self._behavior, target_ids, installed)
        groups = self._build_groups(catalog, {normalize_id(t) for t in target_ids})
        logger.debug(
            "Resolving %d targets over %d groups (%s)",
            len(target_list), len(groups), self._behavior.value,
        )

        solver: CombinationSolver[ResolverPackage] = CombinationSolver()
        solution = solver.find_solution(
            groups, context.comparator(), should_reject_pair, should_cancel
        )
        if solution is None:
            raise NoSolutionError(
                "Unable to resolve dependencies: no combination of package "
                "versions satisfies every dependency constraint"
            )

        chosen = [c for c in solution if isinstance(c, PresentPackage)]
        ordered = topological_sort(chosen)
        logger.info("Resolved %d packages", len(ordered))
        return [c.identity for c in ordered]

    @staticmethod
    def _validate(
        targets: Sequence[PackageIdentity],
        catalog: Sequence[PackageDependencyInfo],
        installed: Sequence[PackageIdentity],
    ) -> None:
        available_ids = {normalize_id(p.id) for p in catalog}
        for target in targets:
            if normalize_id(target.id) not in available_ids:
                raise MissingCandidateInfoError(target.id)
        for package in installed:
            if normalize_id(package.id) not in available_ids:
                raise MissingCandidateInfoError(package.id)

        target_ids = {normalize_id(t.id) for t in targets}
        for package in installed:
            if normalize_id(package.id) not in target_ids:
                raise InvalidInputContractError(package.id)

    def _build_groups(
        self,
        catalog: Sequence[PackageDependencyInfo],
        target_ids: set[str],
    ) -> list[list[ResolverPackage]]:
        ignore = self._behavior is DependencyBehavior.IGNORE
        grouped: dict[str, list[ResolverPackage]] = {}
        display_ids: dict[str, str] = {}
        seen: set[PackageIdentity] = set()
        referenced: dict[str, str] = {}

        for info in catalog:
            if info.identity in seen:
                logger.debug("Skipping duplicate catalog entry %s", info.identity)
                continue
            seen.add(info.identity)

            key = normalize_id(info.id)
            display_ids.setdefault(key, info.id)
            dependencies = () if ignore else info.dependencies
            grouped.setdefault(key, []).append(
                PresentPackage(display_ids[key], info.version, dependencies)
            )
            for dep in dependencies:
                referenced.setdefault(normalize_id(dep.id), dep.id)

        for key, group in grouped.items():
            if key not in target_ids:
                group.append(AbsentPackage(display_ids[key]))

        for key, dep_id in referenced.items():
            if key not in grouped:
                logger.debug("No candidates for %s; it can only be absent", dep_id)
                grouped[key] = [AbsentPackage(dep_id)]

        return list(grouped.values())


def resolve(
    targets: Iterable[Target],
    available_packages: Iterable[PackageDependencyInfo],
    installed_packages: Iterable[PackageIdentity] = (),
    behavior: DependencyBehavior | str = DependencyBehavior.LOWEST,
    should_cancel: Callable[[], bool] | None = None,
) -> list[PackageIdentity]:
    """Resolve *targets* with a one-off ``PackageResolver``."""
    return PackageResolver(behavior).resolve(
        targets, available_packages, installed_packages, should_cancel
    )
