from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from interface_factory.keys import is_synthetic_key, synthetic_key
from interface_factory.lifetime import Lifetime
from interface_factory.markers import ContainerRegistration

DEFAULT_REGISTRATION = ContainerRegistration(lifetime=Lifetime.SCOPED, key=None)


@dataclass(frozen=True, slots=True)
class RegistrationDescriptor:
    """Describe one registration emitted to a register adapter.

    Descriptors are derived during discovery and forwarded immediately. The
    discovery report keeps them as a record only; nothing is resolved from it.
    """

    contract: type[Any]
    implementation: type[Any]
    lifetime: Lifetime
    key: str | None = None

    @property
    def is_synthetic(self) -> bool:
        return is_synthetic_key(self.key)


def build_registration_descriptors(
    contract: type[Any],
    implementation: type[Any],
    registration: ContainerRegistration | None = None,
) -> tuple[RegistrationDescriptor, ...]:
    """Derive registrations for one eligible ``(implementation, contract)`` pair.

    Without metadata the pair is registered unkeyed with ``Lifetime.SCOPED``.
    Scoped pairs get a second, keyed registration under the synthetic transient
    key (qualified by the real key when one exists) with ``Lifetime.TRANSIENT``.

    Args:
        contract: Contract type the implementation is registered for.
        implementation: Concrete implementation type.
        registration: Metadata read from the implementation, if any.

    Returns:
        The primary descriptor, followed by the synthetic one for scoped pairs.

    """
    effective = registration or DEFAULT_REGISTRATION
    primary = RegistrationDescriptor(
        contract=contract,
        implementation=implementation,
        lifetime=effective.lifetime,
        key=effective.key,
    )
    if effective.lifetime is not Lifetime.SCOPED:
        return (primary,)

    return (
        primary,
        RegistrationDescriptor(
            contract=contract,
            implementation=implementation,
            lifetime=Lifetime.TRANSIENT,
            key=synthetic_key(effective.key),
        ),
    )
