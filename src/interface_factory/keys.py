from __future__ import annotations

SYNTHETIC_TRANSIENT_KEY = "__interface_factory_transient__"
"""Reserved key prefix for the additional transient registration of scoped implementations.

Real registration keys must not start with this prefix; ``container_registration``
rejects them.
"""


def synthetic_key(key: str | None = None) -> str:
    """Return the synthetic transient key qualified by ``key``.

    Args:
        key: Real registration key, or ``None`` for unkeyed registrations.

    Returns:
        The bare reserved prefix for ``None``, otherwise prefix followed by ``key``.

    """
    if key is None:
        return SYNTHETIC_TRANSIENT_KEY
    return SYNTHETIC_TRANSIENT_KEY + key


def is_synthetic_key(key: str | None) -> bool:
    """Return whether ``key`` falls into the reserved synthetic key space."""
    return key is not None and key.startswith(SYNTHETIC_TRANSIENT_KEY)
