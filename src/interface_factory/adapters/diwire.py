from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, TypeVar

from diwire import Component, Container, Scope
from diwire import Lifetime as DIWireLifetime
from diwire.exceptions import DIWireDependencyNotRegisteredError

from interface_factory.exceptions import (
    InterfaceFactoryInvalidLifetimeError,
    InterfaceFactoryNotFoundError,
    InterfaceFactoryNotInitializedError,
)
from interface_factory.lifetime import Lifetime

if TYPE_CHECKING:
    from diwire import BaseScope, ResolverProtocol

T = TypeVar("T")


class DIWireContainerAdapter:
    """Adapt a ``diwire.Container`` to the register and resolve capabilities.

    Keys are mapped to ``Annotated[contract, Component(key)]`` dependency keys.
    Lifetimes are mapped as follows:

    * ``Lifetime.SINGLETON``: cached at ``Scope.APP`` (the container root).
    * ``Lifetime.SCOPED``: cached per ``scoped_scope`` (``Scope.REQUEST`` by default).
    * ``Lifetime.TRANSIENT``: never cached.

    Resolution goes through ``resolver``, which is the container itself or a
    resolver returned by ``container.enter_scope()``. Scoped implementations
    can only be resolved from a resolver at ``scoped_scope`` or deeper; from the
    root the container raises ``DIWireScopeMismatchError``, which is treated as
    misconfiguration and propagates. Use strict containers
    (``missing_policy=MissingPolicy.ERROR``) so missing contracts report as not
    found instead of being autoregistered.
    """

    def __init__(
        self,
        container: Container | None = None,
        *,
        resolver: Container | ResolverProtocol | None = None,
        scoped_scope: BaseScope = Scope.REQUEST,
    ) -> None:
        self._container = container
        self._resolver = resolver
        self._scoped_scope = scoped_scope

    def bind_container(self, container: Container) -> None:
        """Bind the container receiving registrations."""
        self._container = container

    def bind_resolver(self, resolver: Container | ResolverProtocol) -> None:
        """Arm resolution with ``resolver`` (a container or an entered scope)."""
        self._resolver = resolver

    def register(
        self,
        contract: type[Any],
        implementation: type[Any],
        lifetime: Lifetime,
    ) -> None:
        self.register_keyed(contract, implementation, lifetime, None)

    def register_keyed(
        self,
        contract: type[Any],
        implementation: type[Any],
        lifetime: Lifetime,
        key: str | None,
    ) -> None:
        if lifetime is Lifetime.SINGLETON:
            scope, diwire_lifetime = Scope.APP, DIWireLifetime.SCOPED
        elif lifetime is Lifetime.SCOPED:
            scope, diwire_lifetime = self._scoped_scope, DIWireLifetime.SCOPED
        elif lifetime is Lifetime.TRANSIENT:
            scope, diwire_lifetime = Scope.APP, DIWireLifetime.TRANSIENT
        else:
            msg = f"Invalid service lifetime {lifetime!r}."
            raise InterfaceFactoryInvalidLifetimeError(msg)

        container = self._get_container()
        container.add(
            implementation,
            provides=contract,
            component=key,
            scope=scope,
            lifetime=diwire_lifetime,
        )

    def resolve(self, contract: type[T]) -> T | None:
        try:
            return self.resolve_required(contract)
        except InterfaceFactoryNotFoundError:
            return None

    def resolve_keyed(self, contract: type[T], key: str) -> T | None:
        try:
            return self.resolve_keyed_required(contract, key)
        except InterfaceFactoryNotFoundError:
            return None

    def resolve_required(self, contract: type[T]) -> T:
        return self._resolve(contract, None)

    def resolve_keyed_required(self, contract: type[T], key: str) -> T:
        return self._resolve(contract, key)

    def _resolve(self, contract: type[T], key: str | None) -> T:
        resolver = self._get_resolver()
        try:
            return resolver.resolve(_dependency_key(contract, key))
        except DIWireDependencyNotRegisteredError as error:
            if key is None:
                msg = f"No registration for {contract.__qualname__}."
            else:
                msg = f"No registration for {contract.__qualname__} under key {key!r}."
            raise InterfaceFactoryNotFoundError(msg) from error

    def _get_container(self) -> Container:
        if self._container is None:
            msg = (
                "The container was not set. Pass a diwire Container to "
                "DIWireContainerAdapter or call add_interface_factories(container)."
            )
            raise InterfaceFactoryNotInitializedError(msg)
        return self._container

    def _get_resolver(self) -> Container | ResolverProtocol:
        if self._resolver is None:
            msg = (
                "The resolver was not set. Call use_interface_factory(resolver) "
                "with the container or an entered scope."
            )
            raise InterfaceFactoryNotInitializedError(msg)
        return self._resolver

    def __repr__(self) -> str:
        return f"DIWireContainerAdapter(container={self._container!r}, resolver={self._resolver!r})"


def _dependency_key(contract: type[Any], key: str | None) -> Any:
    if key is None:
        return contract
    return Annotated[contract, Component(key)]
