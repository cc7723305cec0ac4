"""pkgresolve exception hierarchy.

All public exceptions inherit from PkgResolveError, giving callers a single
base class to catch when they want to handle any resolution failure without
swallowing unrelated errors.
"""

from __future__ import annotations


class PkgResolveError(Exception):
    """Base exception for all pkgresolve errors."""


class VersionFormatError(PkgResolveError, ValueError):
    """Raised when a version or version range string cannot be parsed."""


class ResolverInputError(PkgResolveError):
    """Raised when the resolver is called with inputs it cannot accept.

    Input errors are detected before any search is attempted.
    """


class MissingCandidateInfoError(ResolverInputError):
    """Raised when a target or installed id has no entry in the catalog."""

    def __init__(self, package_id: str) -> None:
        self.package_id = package_id
        super().__init__(f"Unable to find dependency information for {package_id!r}")


class InvalidInputContractError(ResolverInputError):
    """Raised when an installed package was not also passed as a target."""

    def __init__(self, package_id: str) -> None:
        self.package_id = package_id
        super().__init__(
            f"Installed package {package_id!r} must also be passed as a target"
        )


class ResolutionError(PkgResolveError):
    """Raised when dependency resolution does not produce a solution."""


class NoSolutionError(ResolutionError):
    """Raised when no combination of candidates satisfies every dependency edge."""


class ResolutionCancelledError(ResolutionError):
    """Raised when the caller's cancellation check fires during the search."""


class InternalInvariantError(PkgResolveError):
    """Raised when the solver's bookkeeping is inconsistent.

    This indicates a bug in the search, never a normal resolution outcome.
    """


class CatalogError(PkgResolveError):
    """Raised when a catalog file cannot be read or is malformed."""
