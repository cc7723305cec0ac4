"""pkgresolve: FC-CBJ dependency resolution for package managers."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
