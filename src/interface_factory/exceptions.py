class InterfaceFactoryError(Exception):
    """Represent a base class for all interface-factory failures.

    Catch this type when you want to handle any interface-factory error path
    without matching each concrete exception class individually.
    """


class InterfaceFactoryNotInitializedError(InterfaceFactoryError):
    """Signal use of an adapter capability before it was armed.

    Raised by ``AdapterContext.get_current`` and every lookup helper when no
    resolve adapter is set, and by register adapters that were never bound to
    a container.

    Typical fix is calling ``use_interface_factory(resolver)`` (or
    ``adapter_context.set_current(adapter)``) during application startup before
    any ``get_*_instance`` call.
    """


class InterfaceFactoryNotFoundError(InterfaceFactoryError, LookupError):
    """Signal that a required lookup had no matching registration.

    Raised by ``resolve_required``/``resolve_keyed_required`` on adapters and by
    ``get_required_instance``/``get_required_keyed_instance`` once the
    synthetic-key fallback also missed.

    Typical fixes include making sure the implementation module is imported
    before discovery runs, or passing ``include_external_sources=True``.
    """


class InterfaceFactoryInvalidLifetimeError(InterfaceFactoryError, ValueError):
    """Signal an unrecognized lifetime value reaching a register adapter.

    This is a configuration error and is never retried.
    """


class InterfaceFactoryInvalidRegistrationError(InterfaceFactoryError):
    """Signal invalid registration metadata on a class.

    Raised by ``container_registration`` when the key is empty, is not a
    string, or collides with the reserved synthetic transient key prefix.
    """
