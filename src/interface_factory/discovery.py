from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from interface_factory.adapters.protocol import ContainerRegisterAdapter
from interface_factory.catalog import ModuleTypeCatalog, TypeCatalog
from interface_factory.contracts import contract_types_of, is_concrete_implementation
from interface_factory.keys import SYNTHETIC_TRANSIENT_KEY
from interface_factory.lifetime import Lifetime
from interface_factory.markers import get_container_registration
from interface_factory.registration import RegistrationDescriptor, build_registration_descriptors
from interface_factory.settings import InterfaceFactorySettings

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DiscoveryReport:
    """Summary of one discovery run."""

    scanned_units: int = 0
    skipped_units: list[str] = field(default_factory=list)
    loaded_external_units: list[Path] = field(default_factory=list)
    registrations: list[RegistrationDescriptor] = field(default_factory=list)

    def registrations_for(self, contract: type[Any]) -> list[RegistrationDescriptor]:
        return [
            registration
            for registration in self.registrations
            if registration.contract is contract
        ]


class InterfaceFactoryDiscovery:
    """Scan loaded modules for contract implementations and register them.

    Discovery is best effort with respect to modules: a module that cannot be
    loaded or whose classes cannot be enumerated is skipped and logged at DEBUG
    level. Errors raised by the register adapter propagate.

    Discovery is meant to run once during startup. It is not safe to run
    concurrently with itself.
    """

    def __init__(
        self,
        catalog: TypeCatalog | None = None,
        *,
        settings: InterfaceFactorySettings | None = None,
    ) -> None:
        self._settings = settings if settings is not None else InterfaceFactorySettings()
        self._catalog: TypeCatalog = (
            catalog
            if catalog is not None
            else ModuleTypeCatalog(
                excluded_module_prefixes=self._settings.excluded_module_prefixes,
            )
        )

    def discover(
        self,
        register_adapter: ContainerRegisterAdapter,
        *,
        include_external_sources: bool | None = None,
    ) -> DiscoveryReport:
        """Register every eligible ``(implementation, contract)`` pair.

        Args:
            register_adapter: Adapter receiving the registrations.
            include_external_sources: Load not-yet-imported modules from the
                scan directory first. ``None`` uses the settings value.

        Returns:
            A report listing every emitted registration in emission order.

        Raises:
            InterfaceFactoryInvalidLifetimeError: If the adapter rejects a lifetime.
            InterfaceFactoryNotInitializedError: If the adapter has no container.

        """
        report = DiscoveryReport()
        if include_external_sources is None:
            include_external_sources = self._settings.include_external_sources
        if include_external_sources:
            self._load_external_units(report)

        scoped_implementations: dict[type[Any], list[RegistrationDescriptor]] = {}
        for implementation in self._iter_implementations(report):
            registration = get_container_registration(implementation)
            for contract in contract_types_of(implementation):
                for descriptor in build_registration_descriptors(
                    contract,
                    implementation,
                    registration,
                ):
                    self._emit(register_adapter, descriptor, report)
                    if descriptor.lifetime is Lifetime.SCOPED:
                        scoped_implementations.setdefault(contract, []).append(descriptor)

        for contract, descriptors in scoped_implementations.items():
            if len(descriptors) != 1 or descriptors[0].key is None:
                continue
            # The only scoped implementation is keyed: unkeyed lookups need a bare synthetic target.
            self._emit(
                register_adapter,
                RegistrationDescriptor(
                    contract=contract,
                    implementation=descriptors[0].implementation,
                    lifetime=Lifetime.TRANSIENT,
                    key=SYNTHETIC_TRANSIENT_KEY,
                ),
                report,
            )

        self._warn_duplicates(report)
        logger.info(
            "Interface factory discovery: scanned_units=%d skipped_units=%d "
            "external_units=%d registrations=%d",
            report.scanned_units,
            len(report.skipped_units),
            len(report.loaded_external_units),
            len(report.registrations),
        )
        return report

    def _iter_implementations(self, report: DiscoveryReport) -> Iterator[type[Any]]:
        for unit in self._catalog.loaded_units():
            unit_name = getattr(unit, "__name__", repr(unit))
            try:
                types = self._catalog.types_of(unit)
            except Exception:  # noqa: BLE001
                logger.debug("Skipping unit %s: types cannot be enumerated", unit_name, exc_info=True)
                report.skipped_units.append(unit_name)
                continue

            report.scanned_units += 1
            for candidate in types:
                if is_concrete_implementation(candidate):
                    yield candidate

    def _load_external_units(self, report: DiscoveryReport) -> None:
        directory = self._settings.resolve_scan_directory()
        loaded_paths = self._catalog.loaded_paths()
        candidates = sorted(
            path.resolve()
            for path in directory.glob(self._settings.external_source_glob)
            if path.is_file()
        )
        for path in candidates:
            if path in loaded_paths:
                continue
            try:
                self._catalog.load_unit(path)
            except (Exception, SystemExit):  # noqa: BLE001
                # Unrelated or incompatible files are expected in the scan directory,
                # including scripts that exit at import time.
                logger.debug("Skipping external unit %s: failed to load", path, exc_info=True)
                continue
            report.loaded_external_units.append(path)

    def _emit(
        self,
        register_adapter: ContainerRegisterAdapter,
        descriptor: RegistrationDescriptor,
        report: DiscoveryReport,
    ) -> None:
        logger.debug(
            "Registering %s for %s: lifetime=%s key=%r",
            descriptor.implementation.__qualname__,
            descriptor.contract.__qualname__,
            descriptor.lifetime.name,
            descriptor.key,
        )
        if descriptor.key is None:
            register_adapter.register(
                descriptor.contract,
                descriptor.implementation,
                descriptor.lifetime,
            )
        else:
            register_adapter.register_keyed(
                descriptor.contract,
                descriptor.implementation,
                descriptor.lifetime,
                descriptor.key,
            )
        report.registrations.append(descriptor)

    def _warn_duplicates(self, report: DiscoveryReport) -> None:
        counts = Counter(
            (registration.contract, registration.key) for registration in report.registrations
        )
        for (contract, key), count in counts.items():
            if count > 1:
                logger.warning(
                    "Contract %s has %d registrations under key %r; the last one registered wins",
                    contract.__qualname__,
                    count,
                    key,
                )


def register_interface_factories(
    register_adapter: ContainerRegisterAdapter,
    include_external_sources: bool | None = None,
    *,
    catalog: TypeCatalog | None = None,
    settings: InterfaceFactorySettings | None = None,
) -> DiscoveryReport:
    """Discover contract implementations and register them with ``register_adapter``.

    Args:
        register_adapter: Adapter receiving the registrations.
        include_external_sources: Load not-yet-imported modules from the scan
            directory first. ``None`` uses ``InterfaceFactorySettings``.
        catalog: Source of modules and types. Defaults to every imported module.
        settings: Discovery settings. Defaults to values from the environment.

    Returns:
        A report of the discovery run.

    Examples:
        .. code-block:: python

            adapter = DIWireContainerAdapter(container)
            register_interface_factories(adapter, include_external_sources=True)

    """
    discovery = InterfaceFactoryDiscovery(catalog, settings=settings)
    return discovery.discover(
        register_adapter,
        include_external_sources=include_external_sources,
    )
