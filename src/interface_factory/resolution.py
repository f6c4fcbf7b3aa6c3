"""Uniform lookups with the synthetic-key fallback.

Every helper takes the contract type explicitly and an optional ``resolver``.
When ``resolver`` is omitted the adapter bound to the process-wide
``adapter_context`` is used, so callers that never saw the container can still
resolve contracts.
"""

from __future__ import annotations

import logging
from typing import TypeVar

from interface_factory.adapter_context import adapter_context
from interface_factory.adapters.protocol import ContainerResolveAdapter
from interface_factory.exceptions import InterfaceFactoryNotFoundError
from interface_factory.keys import SYNTHETIC_TRANSIENT_KEY, synthetic_key

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _get_resolver(resolver: ContainerResolveAdapter | None) -> ContainerResolveAdapter:
    if resolver is not None:
        return resolver
    return adapter_context.get_current()


def get_instance(
    contract: type[T],
    *,
    resolver: ContainerResolveAdapter | None = None,
) -> T | None:
    """Return the unkeyed implementation of ``contract`` or ``None``.

    Falls back to the bare synthetic transient key when no unkeyed registration
    exists, which covers contracts whose only implementation is keyed.

    Args:
        contract: Contract type to resolve.
        resolver: Resolve adapter to use instead of the process-wide one.

    Raises:
        InterfaceFactoryNotInitializedError: If no resolver is armed.

    """
    active = _get_resolver(resolver)
    instance = active.resolve(contract)
    if instance is not None:
        return instance

    logger.debug("No unkeyed registration for %r, trying the synthetic key", contract)
    return active.resolve_keyed(contract, SYNTHETIC_TRANSIENT_KEY)


def get_required_instance(
    contract: type[T],
    *,
    resolver: ContainerResolveAdapter | None = None,
) -> T:
    """Return the unkeyed implementation of ``contract``.

    Args:
        contract: Contract type to resolve.
        resolver: Resolve adapter to use instead of the process-wide one.

    Raises:
        InterfaceFactoryNotInitializedError: If no resolver is armed.
        InterfaceFactoryNotFoundError: If neither the unkeyed registration nor
            the synthetic transient registration exists.

    """
    active = _get_resolver(resolver)
    try:
        return active.resolve_required(contract)
    except InterfaceFactoryNotFoundError:
        logger.debug("No unkeyed registration for %r, trying the synthetic key", contract)
        return active.resolve_keyed_required(contract, SYNTHETIC_TRANSIENT_KEY)


def get_keyed_instance(
    contract: type[T],
    key: str,
    *,
    resolver: ContainerResolveAdapter | None = None,
) -> T | None:
    """Return the implementation of ``contract`` registered under ``key`` or ``None``.

    Args:
        contract: Contract type to resolve.
        key: Registration key.
        resolver: Resolve adapter to use instead of the process-wide one.

    Raises:
        InterfaceFactoryNotInitializedError: If no resolver is armed.

    """
    active = _get_resolver(resolver)
    instance = active.resolve_keyed(contract, key)
    if instance is not None:
        return instance

    logger.debug("No registration for %r under key %r, trying the synthetic key", contract, key)
    return active.resolve_keyed(contract, synthetic_key(key))


def get_required_keyed_instance(
    contract: type[T],
    key: str,
    *,
    resolver: ContainerResolveAdapter | None = None,
) -> T:
    """Return the implementation of ``contract`` registered under ``key``.

    Args:
        contract: Contract type to resolve.
        key: Registration key.
        resolver: Resolve adapter to use instead of the process-wide one.

    Raises:
        InterfaceFactoryNotInitializedError: If no resolver is armed.
        InterfaceFactoryNotFoundError: If neither ``key`` nor its synthetic
            transient key is registered.

    """
    active = _get_resolver(resolver)
    try:
        return active.resolve_keyed_required(contract, key)
    except InterfaceFactoryNotFoundError:
        logger.debug(
            "No registration for %r under key %r, trying the synthetic key",
            contract,
            key,
        )
        return active.resolve_keyed_required(contract, synthetic_key(key))


__all__ = [
    "get_instance",
    "get_keyed_instance",
    "get_required_instance",
    "get_required_keyed_instance",
]
