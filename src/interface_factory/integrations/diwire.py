from __future__ import annotations

from typing import TypeVar

from diwire import Container

from interface_factory.adapter_context import AdapterContext, adapter_context
from interface_factory.adapters.diwire import DIWireContainerAdapter
from interface_factory.catalog import TypeCatalog
from interface_factory.discovery import register_interface_factories
from interface_factory.settings import InterfaceFactorySettings

R = TypeVar("R")


def add_interface_factories(
    container: Container,
    include_external_sources: bool | None = None,
    *,
    catalog: TypeCatalog | None = None,
    settings: InterfaceFactorySettings | None = None,
) -> DIWireContainerAdapter:
    """Discover contract implementations and register them in ``container``.

    Args:
        container: Container receiving the registrations.
        include_external_sources: Load not-yet-imported modules from the scan
            directory first. ``None`` uses ``InterfaceFactorySettings``.
        catalog: Source of modules and types. Defaults to every imported module.
        settings: Discovery settings. Defaults to values from the environment.

    Returns:
        The adapter bound to ``container``. Pass it to ``use_interface_factory``
        or arm it later with ``bind_resolver``.

    Examples:
        .. code-block:: python

            container = Container(
                missing_policy=MissingPolicy.ERROR,
                dependency_registration_policy=DependencyRegistrationPolicy.IGNORE,
            )
            add_interface_factories(container)

            with container.enter_scope() as request_resolver:
                use_interface_factory(request_resolver)
                example = IExample.get_required_instance()

    """
    adapter = DIWireContainerAdapter(container)
    register_interface_factories(
        adapter,
        include_external_sources,
        catalog=catalog,
        settings=settings,
    )
    return adapter


def use_interface_factory(
    resolver: R,
    *,
    adapter: DIWireContainerAdapter | None = None,
    context: AdapterContext = adapter_context,
) -> R:
    """Arm ``context`` so contract lookups resolve through ``resolver``.

    Args:
        resolver: The container or a resolver returned by ``enter_scope``.
        adapter: Adapter to arm. A new resolve-only adapter is created when omitted.
        context: Resolution handle to arm. Defaults to the process-wide one.

    Returns:
        ``resolver`` unchanged.

    """
    if adapter is None:
        adapter = DIWireContainerAdapter(resolver=resolver)
    else:
        adapter.bind_resolver(resolver)
    context.set_current(adapter)
    return resolver


__all__ = ["add_interface_factories", "use_interface_factory"]
