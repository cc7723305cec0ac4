"""Combination solver: forward checking with conflict-directed backjumping.

Given groups of candidates, a priority order within each group and a
predicate telling whether two candidates may not co-occur, the solver picks
exactly one candidate per group such that no pair of picks from different
groups is rejected. Candidates earlier in the priority order are preferred.

The search is FC-CBJ as described in Prosser, P. (1993). "Hybrid Algorithms
for the Constraint Satisfaction Problem." Computational Intelligence 9(3).

- **Forward checking (FC):** assigning position ``i`` immediately removes
  every candidate of each later position ``j`` that is rejected against the
  assignment. A later domain becoming empty refutes the assignment at once.
- **Conflict-directed backjumping (CBJ):** each position collects the
  earlier positions implicated in its failures. On a dead end the search
  jumps straight back to the deepest implicated position instead of the
  previous one, which can never skip a solution.

All search bookkeeping lives in one ``_SearchState`` built per call, so the
solver keeps no state between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

from pkgresolve.core.solver.compare import CompareWrapper
from pkgresolve.exceptions import InternalInvariantError, ResolutionCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _SearchState(Generic[T]):
    """Scratch state for one search, indexed by group position.

    Domains hold indices into the group's initial candidate list so that the
    candidates themselves need not be hashable.
    """

    def __init__(
        self,
        groups: Sequence[Sequence[T]],
        priority: CompareWrapper[T],
        reject: Callable[[T, T], bool],
    ) -> None:
        n = len(groups)
        self.priority = priority
        self.reject = reject
        self.initial_domains: list[list[T]] = [list(g) for g in groups]
        self.current_domains: list[set[int]] = [
            set(range(len(g))) for g in self.initial_domains
        ]
        # Earlier positions implicated in failures at each position
        self.conflict_sets: list[set[int]] = [set() for _ in range(n)]
        # past_fc[j]: positions whose assignment reduced domain j (stack)
        self.past_fc: list[list[int]] = [[] for _ in range(n)]
        # future_fc[i]: positions whose domain the assignment at i reduced (stack)
        self.future_fc: list[list[int]] = [[] for _ in range(n)]
        # reductions[j]: stack of index batches removed from domain j
        self.reductions: list[list[list[int]]] = [[] for _ in range(n)]
        self.solution: list[int | None] = [None] * n

    def candidate(self, position: int, index: int) -> T:
        return self.initial_domains[position][index]

    def assigned(self, position: int) -> T:
        index = self.solution[position]
        if index is None:
            raise InternalInvariantError(f"Position {position} has no assignment")
        return self.initial_domains[position][index]


class CombinationSolver(Generic[T]):
    """Find the best combination of compatible items, one per group.

    Usage::

        solver = CombinationSolver()
        picks = solver.find_solution(groups, priority, reject)

    Args passed to ``find_solution``:
        groups: Candidate groups; the solution holds one item per group, in
            group order.
        priority: Comparator over items of the same group. Items that sort
            first are tried first.
        reject: ``reject(x, y)`` is True when *x* and *y* (from different
            groups) cannot both be part of the solution.
        should_cancel: Optional callable polled once per search step. When
            it returns True the search raises ``ResolutionCancelledError``.

    The solver keeps no state between or during calls, so one instance may
    be shared freely.
    """

    def find_solution(
        self,
        groups: Sequence[Sequence[T]],
        priority: CompareWrapper[T] | Callable[[T, T], int],
        reject: Callable[[T, T], bool],
        should_cancel: Callable[[], bool] | None = None,
    ) -> list[T] | None:
        """Run the FC-CBJ search.

        Returns:
            One item per group, in group order, or None if no combination
            avoids every rejected pair.

        Raises:
            ResolutionCancelledError: If *should_cancel* fired.
            InternalInvariantError: If the search bookkeeping is inconsistent.
        """
        if not isinstance(priority, CompareWrapper):
            priority = CompareWrapper(priority)
        state: _SearchState[T] = _SearchState(groups, priority, reject)
        n = len(state.initial_domains)
        if n == 0:
            return []
        if any(not domain for domain in state.initial_domains):
            logger.debug("A group has no candidates; no solution possible")
            return None

        consistent = True
        i = 0
        steps = 0
        while True:
            if should_cancel is not None and should_cancel():
                raise ResolutionCancelledError(f"Search cancelled after {steps} steps")
            steps += 1
            if consistent:
                i, consistent = self._move_forward(state, i)
            else:
                i, consistent = self._move_backward(state, i)

            if i > n:
                raise InternalInvariantError("Search evaluated past the end of the groups")
            if i == n:
                logger.debug("Solution found after %d steps over %d groups", steps, n)
                return [state.assigned(p) for p in range(n)]
            if i < 0:
                logger.debug("Search exhausted after %d steps over %d groups", steps, n)
                return None

    # -- search moves -------------------------------------------------------

    def _ordered(self, state: _SearchState[T], position: int) -> list[int]:
        """Indices of the current domain at *position*, best candidate first."""
        indices = sorted(state.current_domains[position])
        return sorted(
            indices, key=lambda idx: state.priority.key(state.candidate(position, idx))
        )

    def _move_forward(self, state: _SearchState[T], i: int) -> tuple[int, bool]:
        """Assign a consistent candidate at *i*.

        Returns ``(i + 1, True)`` on success or ``(i, False)`` when every
        candidate at *i* has been refuted.
        """
        n = len(state.initial_domains)
        consistent = False

        for index in self._ordered(state, i):
            consistent = True
            state.solution[i] = index

            for j in range(i + 1, n):
                consistent = self._check_forward(state, i, j)
                if not consistent:
                    state.current_domains[i].discard(index)
                    self._undo_reductions(state, i)
                    state.conflict_sets[i].update(state.past_fc[j])
                    break

            if consistent:
                break

        return (i + 1, True) if consistent else (i, False)

    def _move_backward(self, state: _SearchState[T], i: int) -> tuple[int, bool]:
        """Jump back from the dead end at *i* to the deepest implicated position.

        Returns ``(h, True)`` if the domain at ``h`` still has candidates,
        ``(h, False)`` if the search must keep backing up from ``h``, and
        ``(-1, False)`` when *i* is the first position.
        """
        n = len(state.initial_domains)
        if i < 0 or i >= n:
            raise InternalInvariantError(f"Cannot move backward from position {i}")
        if i == 0:
            return -1, False

        implicated = state.conflict_sets[i] | set(state.past_fc[i])
        h = max(implicated, default=0)
        state.conflict_sets[h] = (implicated | state.conflict_sets[h]) - {h}

        for j in range(i, h, -1):
            state.conflict_sets[j].clear()
            self._undo_reductions(state, j)
            self._update_current_domain(state, j)

        self._undo_reductions(state, h)
        previous = state.solution[h]
        if previous is not None:
            state.current_domains[h].discard(previous)
        return h, bool(state.current_domains[h])

    def _check_forward(self, state: _SearchState[T], i: int, j: int) -> bool:
        """Remove candidates at *j* rejected by the assignment at *i*.

        Returns True if the domain at *j* is not empty afterwards.
        """
        reject = state.reject
        chosen = state.assigned(i)

        batch = [
            index
            for index in sorted(state.current_domains[j])
            if reject(chosen, state.candidate(j, index))
        ]
        if batch:
            state.current_domains[j].difference_update(batch)
            state.reductions[j].append(batch)
            state.future_fc[i].append(j)
            state.past_fc[j].append(i)

        return bool(state.current_domains[j])

    def _undo_reductions(self, state: _SearchState[T], i: int) -> None:
        """Restore every reduction the assignment at *i* made to later domains."""
        for j in reversed(state.future_fc[i]):
            if not state.reductions[j] or not state.past_fc[j]:
                raise InternalInvariantError(
                    f"No reduction recorded at position {j} to undo for {i}"
                )
            state.current_domains[j].update(state.reductions[j].pop())
            origin = state.past_fc[j].pop()
            if origin != i:
                raise InternalInvariantError(
                    f"Reduction at position {j} came from {origin}, not {i}"
                )
        state.future_fc[i].clear()

    @staticmethod
    def _update_current_domain(state: _SearchState[T], i: int) -> None:
        """Reset the domain at *i* to its initial candidates minus active reductions."""
        domain = set(range(len(state.initial_domains[i])))
        for batch in state.reductions[i]:
            domain.difference_update(batch)
        state.current_domains[i] = domain


def find_solution(
    groups: Sequence[Sequence[T]],
    priority: CompareWrapper[T] | Callable[[T, T], int],
    reject: Callable[[T, T], bool],
    should_cancel: Callable[[], bool] | None = None,
) -> list[T] | None:
    """Functional shortcut for ``CombinationSolver().find_solution(...)``."""
    return CombinationSolver().find_solution(groups, priority, reject, should_cancel)
