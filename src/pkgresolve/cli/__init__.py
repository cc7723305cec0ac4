"""pkgresolve CLI package."""
