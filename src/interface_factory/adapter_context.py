from __future__ import annotations

import logging

from interface_factory.adapters.protocol import ContainerResolveAdapter
from interface_factory.exceptions import InterfaceFactoryNotInitializedError

logger = logging.getLogger(__name__)


class AdapterContext:
    """Hold the active resolve adapter used by lookups without an explicit resolver.

    The binding is process-global for this ``AdapterContext`` instance (not
    task-local or thread-local). It is meant to be armed once during startup,
    before concurrent lookups begin; no locking is performed, so the host must
    make sure ``set_current`` happens-before any concurrent ``get_current``.

    Hosts that prefer explicit wiring can create their own ``AdapterContext``
    and pass ``context.get_current()`` as ``resolver=`` to the lookup helpers.
    """

    def __init__(self) -> None:
        self._adapter: ContainerResolveAdapter | None = None

    def set_current(self, adapter: ContainerResolveAdapter) -> None:
        """Arm the context with ``adapter``.

        Setting again overwrites the previous adapter.

        Args:
            adapter: Resolve adapter used by subsequent lookups.

        """
        if self._adapter is not None and self._adapter is not adapter:
            logger.debug("Replacing active resolve adapter %r with %r", self._adapter, adapter)
        self._adapter = adapter

    def get_current(self) -> ContainerResolveAdapter:
        """Return the armed resolve adapter.

        Raises:
            InterfaceFactoryNotInitializedError: If no adapter has been set yet.

        """
        if self._adapter is None:
            msg = (
                "Resolve adapter is not set for adapter_context. "
                "Call use_interface_factory(resolver) or adapter_context.set_current(adapter) "
                "during startup before resolving contracts."
            )
            raise InterfaceFactoryNotInitializedError(msg)
        return self._adapter

    @property
    def is_armed(self) -> bool:
        return self._adapter is not None

    def reset(self) -> None:
        """Drop the armed adapter, returning the context to its initial state."""
        self._adapter = None


adapter_context = AdapterContext()
"""Process-wide resolution handle."""
