from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from interface_factory.lifetime import Lifetime

T = TypeVar("T")


@runtime_checkable
class ContainerRegisterAdapter(Protocol):
    """Protocol for binding contracts to implementations in a container."""

    def register(
        self,
        contract: type[Any],
        implementation: type[Any],
        lifetime: Lifetime,
    ) -> None:
        """Register ``implementation`` for ``contract`` without a key.

        Equivalent to ``register_keyed(contract, implementation, lifetime, None)``.

        Args:
            contract: Contract type callers resolve.
            implementation: Concrete type the container instantiates.
            lifetime: Instance reuse policy.

        Raises:
            InterfaceFactoryInvalidLifetimeError: If ``lifetime`` is unrecognized.
            InterfaceFactoryNotInitializedError: If no container is bound.

        """

    def register_keyed(
        self,
        contract: type[Any],
        implementation: type[Any],
        lifetime: Lifetime,
        key: str | None,
    ) -> None:
        """Register ``implementation`` for ``contract`` under an optional key.

        Args:
            contract: Contract type callers resolve.
            implementation: Concrete type the container instantiates.
            lifetime: Instance reuse policy.
            key: Registration key, or ``None`` for an unkeyed registration.

        Raises:
            InterfaceFactoryInvalidLifetimeError: If ``lifetime`` is unrecognized.
            InterfaceFactoryNotInitializedError: If no container is bound.

        """


@runtime_checkable
class ContainerResolveAdapter(Protocol):
    """Protocol for fetching contract implementations from a container."""

    def resolve(self, contract: type[T]) -> T | None:
        """Return the unkeyed implementation, or ``None`` when not registered.

        Raises:
            InterfaceFactoryNotInitializedError: If no resolver is armed.

        """

    def resolve_keyed(self, contract: type[T], key: str) -> T | None:
        """Return the implementation registered under ``key``, or ``None``.

        Raises:
            InterfaceFactoryNotInitializedError: If no resolver is armed.

        """

    def resolve_required(self, contract: type[T]) -> T:
        """Return the unkeyed implementation.

        Raises:
            InterfaceFactoryNotFoundError: If not registered.
            InterfaceFactoryNotInitializedError: If no resolver is armed.

        """

    def resolve_keyed_required(self, contract: type[T], key: str) -> T:
        """Return the implementation registered under ``key``.

        Raises:
            InterfaceFactoryNotFoundError: If not registered.
            InterfaceFactoryNotInitializedError: If no resolver is armed.

        """


@runtime_checkable
class ContainerAdapter(ContainerRegisterAdapter, ContainerResolveAdapter, Protocol):
    """Protocol for adapters offering both capabilities."""
