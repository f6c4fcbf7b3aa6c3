from __future__ import annotations

import logging
import sys
import uuid
from abc import ABC, abstractmethod
from collections.abc import Generator
from pathlib import Path
from types import ModuleType
from typing import Any

import pytest

from interface_factory.contracts import Factory
from interface_factory.discovery import InterfaceFactoryDiscovery, register_interface_factories
from interface_factory.catalog import ModuleTypeCatalog
from interface_factory.keys import SYNTHETIC_TRANSIENT_KEY, synthetic_key
from interface_factory.lifetime import Lifetime
from interface_factory.markers import container_registration, ignore_container_registration
from interface_factory.settings import InterfaceFactorySettings
from tests.doubles import RecordingRegisterAdapter


class IExample(Factory["IExample"], ABC):
    @abstractmethod
    def name(self) -> str: ...


class IReport(Factory["IReport"]):
    pass


class IBorrowed(Factory[IExample]):
    pass


@container_registration(Lifetime.SCOPED, "MyExample")
class MyExample(IExample):
    def name(self) -> str:
        return "my"


@container_registration(Lifetime.SCOPED, "Second")
class SecondExample(IExample):
    def name(self) -> str:
        return "second"


class UnkeyedExample(IExample):
    def name(self) -> str:
        return "unkeyed"


@container_registration(Lifetime.SINGLETON, "single")
class SingletonExample(IExample):
    def name(self) -> str:
        return "singleton"


@container_registration(Lifetime.TRANSIENT)
class ExampleReport(IExample, IReport):
    def name(self) -> str:
        return "report"


class BorrowedImplementation(IBorrowed):
    pass


@ignore_container_registration
class IgnoredExample(IExample):
    def name(self) -> str:
        return "ignored"


class AbstractExample(IExample):
    pass


class _StaticCatalog:
    """Catalog serving fixed class lists; ``None`` entries fail enumeration."""

    def __init__(self, units: dict[str, list[type[Any]] | None]) -> None:
        self._units = {name: ModuleType(name) for name in units}
        self._types = units
        self.loaded: list[Path] = []
        self.paths: set[Path] = set()

    def loaded_units(self) -> list[ModuleType]:
        return list(self._units.values())

    def loaded_paths(self) -> set[Path]:
        return self.paths

    def types_of(self, unit: ModuleType) -> list[type[Any]]:
        types = self._types[unit.__name__]
        if types is None:
            msg = f"cannot enumerate {unit.__name__}"
            raise ImportError(msg)
        return types

    def load_unit(self, path: Path) -> ModuleType:
        self.loaded.append(path)
        return ModuleType(path.stem)


def _discover(
    adapter: RecordingRegisterAdapter,
    *types: type[Any],
) -> None:
    catalog = _StaticCatalog({"fake_units": list(types)})
    register_interface_factories(adapter, False, catalog=catalog)


def test_unkeyed_default_emits_scoped_and_synthetic_registrations(
    recording_adapter: RecordingRegisterAdapter,
) -> None:
    _discover(recording_adapter, UnkeyedExample)

    assert recording_adapter.calls == [
        (IExample, UnkeyedExample, Lifetime.SCOPED, None),
        (IExample, UnkeyedExample, Lifetime.TRANSIENT, SYNTHETIC_TRANSIENT_KEY),
    ]


def test_sole_keyed_scoped_implementation_gets_bare_synthetic_alias(
    recording_adapter: RecordingRegisterAdapter,
) -> None:
    _discover(recording_adapter, MyExample)

    assert recording_adapter.calls == [
        (IExample, MyExample, Lifetime.SCOPED, "MyExample"),
        (IExample, MyExample, Lifetime.TRANSIENT, synthetic_key("MyExample")),
        (IExample, MyExample, Lifetime.TRANSIENT, SYNTHETIC_TRANSIENT_KEY),
    ]


def test_several_scoped_implementations_get_no_alias(
    recording_adapter: RecordingRegisterAdapter,
) -> None:
    _discover(recording_adapter, MyExample, SecondExample)

    assert [call[3] for call in recording_adapter.calls] == [
        "MyExample",
        synthetic_key("MyExample"),
        "Second",
        synthetic_key("Second"),
    ]


def test_singleton_registration_has_no_synthetic_entry(
    recording_adapter: RecordingRegisterAdapter,
) -> None:
    _discover(recording_adapter, SingletonExample)

    assert recording_adapter.calls == [
        (IExample, SingletonExample, Lifetime.SINGLETON, "single"),
    ]


def test_implementation_is_registered_once_per_contract(
    recording_adapter: RecordingRegisterAdapter,
) -> None:
    _discover(recording_adapter, ExampleReport)

    assert recording_adapter.calls == [
        (IExample, ExampleReport, Lifetime.TRANSIENT, None),
        (IReport, ExampleReport, Lifetime.TRANSIENT, None),
    ]


def test_ineligible_types_are_never_registered(
    recording_adapter: RecordingRegisterAdapter,
) -> None:
    _discover(
        recording_adapter,
        IExample,
        IBorrowed,
        BorrowedImplementation,
        IgnoredExample,
        AbstractExample,
        int,
    )

    assert recording_adapter.calls == []


def test_failing_unit_does_not_block_healthy_unit(
    recording_adapter: RecordingRegisterAdapter,
) -> None:
    catalog = _StaticCatalog({"broken_units": None, "healthy_units": [SingletonExample]})

    report = InterfaceFactoryDiscovery(catalog).discover(recording_adapter)

    assert recording_adapter.calls == [
        (IExample, SingletonExample, Lifetime.SINGLETON, "single"),
    ]
    assert report.scanned_units == 1
    assert report.skipped_units == ["broken_units"]
    assert [registration.implementation for registration in report.registrations] == [
        SingletonExample,
    ]


def test_duplicate_registrations_are_emitted_and_logged(
    recording_adapter: RecordingRegisterAdapter,
    caplog: pytest.LogCaptureFixture,
) -> None:
    catalog = _StaticCatalog({"first": [SingletonExample], "second": [SingletonExample]})

    with caplog.at_level(logging.WARNING, logger="interface_factory.discovery"):
        register_interface_factories(recording_adapter, catalog=catalog)

    assert len(recording_adapter.calls) == 2
    assert "the last one registered wins" in caplog.text


def test_register_adapter_errors_propagate() -> None:
    class _FailingAdapter(RecordingRegisterAdapter):
        def register_keyed(
            self,
            contract: type[Any],
            implementation: type[Any],
            lifetime: Lifetime,
            key: str | None,
        ) -> None:
            msg = "container is sealed"
            raise RuntimeError(msg)

    with pytest.raises(RuntimeError, match="sealed"):
        _discover(_FailingAdapter(), UnkeyedExample)


def test_report_filters_registrations_by_contract(
    recording_adapter: RecordingRegisterAdapter,
) -> None:
    catalog = _StaticCatalog({"units": [ExampleReport, SingletonExample]})

    report = register_interface_factories(recording_adapter, catalog=catalog)

    assert [registration.implementation for registration in report.registrations_for(IReport)] == [
        ExampleReport,
    ]


@pytest.fixture()
def external_sources(tmp_path: Path) -> Generator[tuple[Path, str], None, None]:
    module_name = f"ifx_external_{uuid.uuid4().hex}"
    (tmp_path / f"{module_name}.py").write_text(
        "from abc import ABC\n"
        "\n"
        "from interface_factory import Factory, Lifetime, container_registration\n"
        "\n"
        "\n"
        'class IPlugin(Factory["IPlugin"], ABC):\n'
        "    pass\n"
        "\n"
        "\n"
        "@container_registration(Lifetime.SINGLETON)\n"
        "class Plugin(IPlugin):\n"
        "    pass\n",
    )
    (tmp_path / f"ifx_broken_{uuid.uuid4().hex}.py").write_text("def broken(:\n")
    (tmp_path / "notes.txt").write_text("not python")
    try:
        yield tmp_path, module_name
    finally:
        sys.modules.pop(module_name, None)


def test_external_sources_are_loaded_and_broken_files_skipped(
    recording_adapter: RecordingRegisterAdapter,
    external_sources: tuple[Path, str],
) -> None:
    directory, module_name = external_sources
    settings = InterfaceFactorySettings(scan_directory=directory)

    report = register_interface_factories(
        recording_adapter,
        True,
        catalog=ModuleTypeCatalog(modules=[]),
        settings=settings,
    )

    assert [
        (contract.__name__, implementation.__name__, lifetime, key)
        for contract, implementation, lifetime, key in recording_adapter.calls
    ] == [("IPlugin", "Plugin", Lifetime.SINGLETON, None)]
    assert report.loaded_external_units == [(directory / f"{module_name}.py").resolve()]
    assert module_name in sys.modules


def test_external_script_exiting_at_import_does_not_stop_loading(
    recording_adapter: RecordingRegisterAdapter,
    tmp_path: Path,
) -> None:
    suffix = uuid.uuid4().hex
    cli_name = f"ifx_a_cli_{suffix}"
    healthy_name = f"ifx_b_healthy_{suffix}"
    (tmp_path / f"{cli_name}.py").write_text(
        "import argparse\n\nargparse.ArgumentParser().parse_args(['--bogus'])\n",
    )
    (tmp_path / f"{healthy_name}.py").write_text(
        'from interface_factory import Factory\n\n\nclass ITool(Factory["ITool"]):\n    pass\n'
        "\n\nclass Tool(ITool):\n    pass\n",
    )

    try:
        report = register_interface_factories(
            recording_adapter,
            True,
            catalog=ModuleTypeCatalog(modules=[]),
            settings=InterfaceFactorySettings(scan_directory=tmp_path),
        )
    finally:
        sys.modules.pop(healthy_name, None)

    assert report.loaded_external_units == [(tmp_path / f"{healthy_name}.py").resolve()]
    assert cli_name not in sys.modules
    assert [call[1].__name__ for call in recording_adapter.calls] == ["Tool", "Tool"]


def test_keyboard_interrupt_while_loading_external_sources_propagates(
    recording_adapter: RecordingRegisterAdapter,
    tmp_path: Path,
) -> None:
    module_name = f"ifx_interrupt_{uuid.uuid4().hex}"
    (tmp_path / f"{module_name}.py").write_text("raise KeyboardInterrupt\n")

    with pytest.raises(KeyboardInterrupt):
        register_interface_factories(
            recording_adapter,
            True,
            catalog=ModuleTypeCatalog(modules=[]),
            settings=InterfaceFactorySettings(scan_directory=tmp_path),
        )

    assert module_name not in sys.modules


def test_external_sources_follow_settings_when_not_passed(
    recording_adapter: RecordingRegisterAdapter,
    external_sources: tuple[Path, str],
) -> None:
    directory, _ = external_sources
    settings = InterfaceFactorySettings(include_external_sources=True, scan_directory=directory)

    report = InterfaceFactoryDiscovery(ModuleTypeCatalog(modules=[]), settings=settings).discover(
        recording_adapter,
    )

    assert len(report.loaded_external_units) == 1
    assert len(recording_adapter.calls) == 1


def test_external_sources_are_not_loaded_by_default(
    recording_adapter: RecordingRegisterAdapter,
    external_sources: tuple[Path, str],
) -> None:
    directory, module_name = external_sources
    settings = InterfaceFactorySettings(scan_directory=directory)

    report = register_interface_factories(
        recording_adapter,
        catalog=ModuleTypeCatalog(modules=[]),
        settings=settings,
    )

    assert report.loaded_external_units == []
    assert recording_adapter.calls == []
    assert module_name not in sys.modules


def test_already_loaded_paths_are_not_loaded_again(
    recording_adapter: RecordingRegisterAdapter,
    tmp_path: Path,
) -> None:
    loaded_file = tmp_path / "already_loaded.py"
    loaded_file.write_text("")
    fresh_file = tmp_path / "fresh.py"
    fresh_file.write_text("")
    catalog = _StaticCatalog({})
    catalog.paths = {loaded_file.resolve()}

    register_interface_factories(
        recording_adapter,
        True,
        catalog=catalog,
        settings=InterfaceFactorySettings(scan_directory=tmp_path),
    )

    assert catalog.loaded == [fresh_file.resolve()]
