from __future__ import annotations

from collections.abc import Callable
from typing import Any, NamedTuple, TypeVar

from interface_factory.exceptions import (
    InterfaceFactoryInvalidLifetimeError,
    InterfaceFactoryInvalidRegistrationError,
)
from interface_factory.keys import SYNTHETIC_TRANSIENT_KEY
from interface_factory.lifetime import Lifetime

C = TypeVar("C", bound=type[Any])

_REGISTRATION_ATTR = "__interface_factory_registration__"
_IGNORE_ATTR = "__interface_factory_ignore__"


class ContainerRegistration(NamedTuple):
    """Registration metadata attached to an implementation class.

    Read by discovery through ``get_container_registration``. Metadata is not
    inherited: a subclass of a decorated class is registered with defaults
    unless it carries its own marker.
    """

    lifetime: Lifetime
    key: str | None = None


def container_registration(
    lifetime: Lifetime = Lifetime.SCOPED,
    key: str | None = None,
) -> Callable[[C], C]:
    """Attach registration metadata to an implementation class.

    Args:
        lifetime: Lifetime used when discovery registers the class.
        key: Optional key distinguishing this implementation from others of the
            same contract.

    Returns:
        A class decorator returning the class unchanged apart from the marker.

    Raises:
        InterfaceFactoryInvalidLifetimeError: If ``lifetime`` is not a ``Lifetime``.
        InterfaceFactoryInvalidRegistrationError: If ``key`` is empty, not a
            string, or starts with the reserved synthetic transient prefix.

    Examples:
        .. code-block:: python

            @container_registration(Lifetime.SCOPED, "primary")
            class PrimaryExample(IExample): ...

    """
    if not isinstance(lifetime, Lifetime):
        msg = f"container_registration() got an unrecognized lifetime {lifetime!r}."
        raise InterfaceFactoryInvalidLifetimeError(msg)
    if key is not None:
        if not isinstance(key, str) or not key:
            msg = f"container_registration() key must be a non-empty string, got {key!r}."
            raise InterfaceFactoryInvalidRegistrationError(msg)
        if key.startswith(SYNTHETIC_TRANSIENT_KEY):
            msg = (
                f"container_registration() key {key!r} starts with the reserved prefix "
                f"{SYNTHETIC_TRANSIENT_KEY!r}."
            )
            raise InterfaceFactoryInvalidRegistrationError(msg)

    registration = ContainerRegistration(lifetime=lifetime, key=key)

    def decorator(cls: C) -> C:
        setattr(cls, _REGISTRATION_ATTR, registration)
        return cls

    return decorator


def ignore_container_registration(cls: C) -> C:
    """Exclude a class from discovery even when it implements a contract."""
    setattr(cls, _IGNORE_ATTR, True)
    return cls


def get_container_registration(cls: type[Any]) -> ContainerRegistration | None:
    """Return registration metadata declared on ``cls`` itself, if any."""
    return vars(cls).get(_REGISTRATION_ATTR)


def is_registration_ignored(cls: type[Any]) -> bool:
    """Return whether ``cls`` itself carries the ignore marker."""
    return vars(cls).get(_IGNORE_ATTR, False) is True
