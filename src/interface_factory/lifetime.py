from __future__ import annotations

from enum import Enum, auto


class Lifetime(Enum):
    """Define how the underlying container reuses an implementation instance."""

    SINGLETON = auto()
    """Create one instance and share it for the lifetime of the container."""

    SCOPED = auto()
    """Share one instance per scope, typically per request.

    This is the default when a class carries no registration metadata.
    """

    TRANSIENT = auto()
    """Create a new instance for every resolution call."""
