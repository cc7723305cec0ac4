"""Candidate ordering and pairwise rejection for package resolution.

The comparator decides which candidate of a group the solver tries first;
the rejection predicate decides which candidates of different groups may
not be picked together. Neither holds state of its own: everything specific
to one resolve call is carried by a ``ResolutionContext``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from pkgresolve.core.identity import PackageIdentity, normalize_id
from pkgresolve.core.resolver.behavior import DependencyBehavior
from pkgresolve.core.resolver.package import PresentPackage, ResolverPackage
from pkgresolve.core.solver import CompareWrapper
from pkgresolve.exceptions import InternalInvariantError


@dataclass(frozen=True)
class ResolutionContext:
    """Per-call inputs of the comparator.

    Attributes:
        behavior: Configured version selection policy.
        installed: Identities already installed; preferred for stability.
        new_ids: Case-folded target ids that are not installed yet. These
            always prefer the highest version.
    """

    behavior: DependencyBehavior
    installed: frozenset[PackageIdentity] = field(default_factory=frozenset)
    new_ids: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        behavior: DependencyBehavior,
        target_ids: Iterable[str],
        installed: Iterable[PackageIdentity] = (),
    ) -> ResolutionContext:
        installed_set = frozenset(installed)
        installed_ids = {normalize_id(p.id) for p in installed_set}
        new_ids = frozenset(normalize_id(t) for t in target_ids) - installed_ids
        return cls(behavior, installed_set, new_ids)

    def behavior_for(self, package_id: str) -> DependencyBehavior:
        if normalize_id(package_id) in self.new_ids:
            return DependencyBehavior.HIGHEST
        return self.behavior

    def is_installed(self, candidate: PresentPackage) -> bool:
        return candidate.identity in self.installed

    def comparator(self) -> CompareWrapper[ResolverPackage]:
        """Return the priority comparator bound to this context."""
        return CompareWrapper(lambda x, y: compare_candidates(self, x, y))


def _pairwise_first(
    x: PresentPackage, y: PresentPackage, key: Callable[[PresentPackage], tuple]
) -> int:
    # Sort just the pair and ask whether x came out first. Ties keep x first,
    # so with three or more versions this need not be a total order.
    first = sorted([x, y], key=key)[0]
    return -1 if first is x else 1


def _highest_minor_key(p: PresentPackage) -> tuple[int, int, int]:
    return (p.version.major, -p.version.minor, -p.version.patch)


def _highest_patch_key(p: PresentPackage) -> tuple[int, int, int]:
    return (p.version.major, p.version.minor, -p.version.patch)


def compare_candidates(
    context: ResolutionContext, x: ResolverPackage, y: ResolverPackage
) -> int:
    """Order two candidates of the same package id, preferred first.

    1. The absent candidate comes first: leave a package out unless
       something requires it.
    2. Installed versions come before versions that are not installed.
    3. Versions are ordered by the dependency behavior in effect for the id.
    """
    if x.absent and y.absent:
        return 0
    if x.absent:
        return -1
    if y.absent:
        return 1
    if not isinstance(x, PresentPackage) or not isinstance(y, PresentPackage):
        raise InternalInvariantError(f"Cannot order candidates {x!r} and {y!r}")

    x_installed = context.is_installed(x)
    y_installed = context.is_installed(y)
    if x_installed and not y_installed:
        return -1
    if y_installed and not x_installed:
        return 1

    xv, yv = x.version, y.version
    behavior = context.behavior_for(x.id)

    if behavior is DependencyBehavior.LOWEST:
        return (xv > yv) - (xv < yv)
    if behavior in (DependencyBehavior.HIGHEST, DependencyBehavior.IGNORE):
        return (xv < yv) - (xv > yv)
    if xv == yv:
        return 0
    if behavior is DependencyBehavior.HIGHEST_MINOR:
        return _pairwise_first(x, y, _highest_minor_key)
    if behavior is DependencyBehavior.HIGHEST_PATCH:
        return _pairwise_first(x, y, _highest_patch_key)
    raise ValueError(f"Unknown dependency behavior: {behavior!r}")


def should_reject_pair(x: ResolverPackage, y: ResolverPackage) -> bool:
    """Return True if *x* and *y* cannot both be part of a solution.

    If *x* declares an edge on *y*'s id, *y* must be present and inside the
    edge's range; otherwise the symmetric check applies. Candidates with no
    edge between them never reject each other.
    """
    x_to_y = x.find_dependency_range(y.id)
    if x_to_y is not None:
        return y.absent or not x_to_y.satisfies(y.version)

    y_to_x = y.find_dependency_range(x.id)
    if y_to_x is not None:
        return x.absent or not y_to_x.satisfies(x.version)

    return False
