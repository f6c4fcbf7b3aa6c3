from interface_factory.adapter_context import AdapterContext, adapter_context
from interface_factory.adapters import (
    ContainerAdapter,
    ContainerRegisterAdapter,
    ContainerResolveAdapter,
    DIWireContainerAdapter,
)
from interface_factory.catalog import ModuleTypeCatalog, TypeCatalog
from interface_factory.contracts import (
    Factory,
    contract_type_of,
    contract_types_of,
    is_concrete_implementation,
    is_contract_type,
)
from interface_factory.discovery import (
    DiscoveryReport,
    InterfaceFactoryDiscovery,
    register_interface_factories,
)
from interface_factory.exceptions import (
    InterfaceFactoryError,
    InterfaceFactoryInvalidLifetimeError,
    InterfaceFactoryInvalidRegistrationError,
    InterfaceFactoryNotFoundError,
    InterfaceFactoryNotInitializedError,
)
from interface_factory.integrations.diwire import add_interface_factories, use_interface_factory
from interface_factory.keys import SYNTHETIC_TRANSIENT_KEY, synthetic_key
from interface_factory.lifetime import Lifetime
from interface_factory.markers import (
    ContainerRegistration,
    container_registration,
    ignore_container_registration,
)
from interface_factory.registration import RegistrationDescriptor
from interface_factory.resolution import (
    get_instance,
    get_keyed_instance,
    get_required_instance,
    get_required_keyed_instance,
)
from interface_factory.settings import InterfaceFactorySettings

__all__ = [
    "SYNTHETIC_TRANSIENT_KEY",
    "AdapterContext",
    "ContainerAdapter",
    "ContainerRegisterAdapter",
    "ContainerRegistration",
    "ContainerResolveAdapter",
    "DIWireContainerAdapter",
    "DiscoveryReport",
    "Factory",
    "InterfaceFactoryDiscovery",
    "InterfaceFactoryError",
    "InterfaceFactoryInvalidLifetimeError",
    "InterfaceFactoryInvalidRegistrationError",
    "InterfaceFactoryNotFoundError",
    "InterfaceFactoryNotInitializedError",
    "InterfaceFactorySettings",
    "Lifetime",
    "ModuleTypeCatalog",
    "RegistrationDescriptor",
    "TypeCatalog",
    "adapter_context",
    "add_interface_factories",
    "container_registration",
    "contract_type_of",
    "contract_types_of",
    "get_instance",
    "get_keyed_instance",
    "get_required_instance",
    "get_required_keyed_instance",
    "ignore_container_registration",
    "is_concrete_implementation",
    "is_contract_type",
    "register_interface_factories",
    "synthetic_key",
    "use_interface_factory",
]
