from __future__ import annotations

import inspect
import types
from typing import Any, ForwardRef, Generic, TypeGuard, TypeVar, get_args, get_origin

from interface_factory import resolution
from interface_factory.adapters.protocol import ContainerResolveAdapter
from interface_factory.markers import is_registration_ignored

T = TypeVar("T")


class Factory(Generic[T]):
    """Mark an interface as resolvable through the interface factory.

    A contract subclasses ``Factory`` parameterized by itself. Python needs a
    forward reference for the self-reference:

    Examples:
        .. code-block:: python

            class IExample(Factory["IExample"], ABC):
                @abstractmethod
                def run(self) -> str: ...


            class MyExample(IExample):
                def run(self) -> str:
                    return "ok"


            example = IExample.get_required_instance()

    Lookups are classmethods resolving the contract found in the caller's MRO,
    so ``MyExample.get_instance()`` resolves ``IExample`` as well.
    """

    @classmethod
    def get_instance(cls, *, resolver: ContainerResolveAdapter | None = None) -> T | None:
        """Return the unkeyed implementation of this contract or ``None``."""
        return resolution.get_instance(contract_type_of(cls), resolver=resolver)

    @classmethod
    def get_required_instance(cls, *, resolver: ContainerResolveAdapter | None = None) -> T:
        """Return the unkeyed implementation of this contract."""
        return resolution.get_required_instance(contract_type_of(cls), resolver=resolver)

    @classmethod
    def get_keyed_instance(
        cls,
        key: str,
        *,
        resolver: ContainerResolveAdapter | None = None,
    ) -> T | None:
        """Return the implementation of this contract registered under ``key`` or ``None``."""
        return resolution.get_keyed_instance(contract_type_of(cls), key, resolver=resolver)

    @classmethod
    def get_required_keyed_instance(
        cls,
        key: str,
        *,
        resolver: ContainerResolveAdapter | None = None,
    ) -> T:
        """Return the implementation of this contract registered under ``key``."""
        return resolution.get_required_keyed_instance(
            contract_type_of(cls),
            key,
            resolver=resolver,
        )


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations."""
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def _refers_to(argument: object, candidate: type[Any]) -> bool:
    if argument is candidate:
        return True
    if isinstance(argument, ForwardRef):
        name = argument.__forward_arg__
    elif isinstance(argument, str):
        name = argument
    else:
        return False
    qualname = candidate.__qualname__
    return (
        name in {candidate.__name__, qualname, f"{candidate.__module__}.{qualname}"}
        or qualname.endswith(f".{name}")
    )


def is_contract_type(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when ``candidate`` declares ``Factory`` parameterized by itself.

    Only the bases written on ``candidate`` are inspected. ``Factory[Other]``
    does not make ``candidate`` a contract, and neither does inheriting from
    another contract.

    Args:
        candidate: Value being checked.

    """
    if not is_runtime_class(candidate):
        return False
    for base in vars(candidate).get("__orig_bases__", ()):
        if get_origin(base) is not Factory:
            continue
        arguments = get_args(base)
        if arguments and _refers_to(arguments[0], candidate):
            return True
    return False


def is_concrete_implementation(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when ``candidate`` may be registered as an implementation.

    Abstract classes, protocols, generic definitions with unbound type
    parameters, contract types themselves and classes marked with
    ``ignore_container_registration`` are rejected.

    Args:
        candidate: Value being checked.

    """
    if not is_runtime_class(candidate):
        return False
    if inspect.isabstract(candidate):
        return False
    if getattr(candidate, "_is_protocol", False):
        return False
    if getattr(candidate, "__parameters__", ()):
        return False
    if is_contract_type(candidate):
        return False
    return not is_registration_ignored(candidate)


def contract_types_of(implementation: type[Any]) -> tuple[type[Any], ...]:
    """Return every contract type ``implementation`` implements, in MRO order."""
    return tuple(base for base in implementation.__mro__[1:] if is_contract_type(base))


def contract_type_of(cls: type[Any]) -> type[Any]:
    """Return the nearest contract type in the MRO of ``cls``, ``cls`` included.

    Raises:
        TypeError: If ``cls`` is not a contract and implements none.

    """
    for base in cls.__mro__:
        if is_contract_type(base):
            return base
    msg = (
        f"{cls.__qualname__} is not a contract type. "
        f'Declare it as class {cls.__name__}(Factory["{cls.__name__}"]).'
    )
    raise TypeError(msg)
