from interface_factory.adapters.diwire import DIWireContainerAdapter
from interface_factory.adapters.protocol import (
    ContainerAdapter,
    ContainerRegisterAdapter,
    ContainerResolveAdapter,
)

__all__ = [
    "ContainerAdapter",
    "ContainerRegisterAdapter",
    "ContainerResolveAdapter",
    "DIWireContainerAdapter",
]
