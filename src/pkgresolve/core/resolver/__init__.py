"""Package resolution on top of the combination solver.

Public names are re-exported here, so callers can write
``from pkgresolve.core.resolver import PackageResolver``.
"""

from pkgresolve.core.resolver.behavior import DependencyBehavior
from pkgresolve.core.resolver.ordering import topological_sort
from pkgresolve.core.resolver.package import (
    AbsentPackage,
    PresentPackage,
    ResolverPackage,
)
from pkgresolve.core.resolver.policy import (
    ResolutionContext,
    compare_candidates,
    should_reject_pair,
)
from pkgresolve.core.resolver.resolver import PackageResolver, resolve

__all__ = [
    "AbsentPackage",
    "DependencyBehavior",
    "PackageResolver",
    "PresentPackage",
    "ResolutionContext",
    "ResolverPackage",
    "compare_candidates",
    "resolve",
    "should_reject_pair",
    "topological_sort",
]
