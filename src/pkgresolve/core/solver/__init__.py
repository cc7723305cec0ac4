"""Generic combination solver (FC-CBJ) and its comparator adapter.

Nothing in this package knows about packages: items are opaque, ordered by
a caller-supplied comparator and constrained by a caller-supplied pairwise
rejection predicate.
"""

from pkgresolve.core.solver.combination import CombinationSolver, find_solution
from pkgresolve.core.solver.compare import CompareWrapper

__all__ = [
    "CombinationSolver",
    "CompareWrapper",
    "find_solution",
]
