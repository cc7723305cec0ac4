"""Version selection policies."""

from __future__ import annotations

import re
from enum import Enum


class DependencyBehavior(Enum):
    """Which version the resolver prefers among otherwise valid choices.

    IGNORE drops every dependency edge and prefers the highest version.
    LOWEST prefers the lowest version. HIGHEST_PATCH prefers the lowest
    major.minor with the highest patch, HIGHEST_MINOR the lowest major with
    the highest minor and patch, and HIGHEST the highest version.
    """

    IGNORE = "ignore"
    LOWEST = "lowest"
    HIGHEST_PATCH = "highest-patch"
    HIGHEST_MINOR = "highest-minor"
    HIGHEST = "highest"

    @classmethod
    def parse(cls, text: str | DependencyBehavior) -> DependencyBehavior:
        """Accept ``HighestMinor``, ``highest-minor``, ``HIGHEST_MINOR`` and so on."""
        if isinstance(text, cls):
            return text
        # split CamelCase, then unify separators
        spaced = re.sub(r"(?<=[a-z])(?=[A-Z])", "-", str(text).strip())
        value = re.sub(r"[\s_]+", "-", spaced).lower()
        for member in cls:
            if member.value == value:
                return member
        choices = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown dependency behavior {text!r} (choose from {choices})")
