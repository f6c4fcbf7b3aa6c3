from __future__ import annotations

import importlib.util
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path
from types import ModuleType
from typing import Any, Protocol

from interface_factory.contracts import is_runtime_class


class TypeCatalog(Protocol):
    """Protocol for the source of loadable units (modules) and their types."""

    def loaded_units(self) -> list[ModuleType]:
        """Return a snapshot of the currently loaded units."""

    def loaded_paths(self) -> set[Path]:
        """Return resolved file paths of the currently loaded units."""

    def types_of(self, unit: ModuleType) -> list[type[Any]]:
        """Return the classes defined by ``unit``.

        May raise for units whose types cannot be enumerated.
        """

    def load_unit(self, path: Path) -> ModuleType:
        """Load a unit from ``path`` and make it part of the catalog.

        May raise for files that are not loadable units.
        """


class ModuleTypeCatalog:
    """Catalog backed by ``sys.modules`` and ``importlib``.

    Pass ``modules`` to restrict scanning to an explicit set of modules instead
    of every module imported in the process. Units loaded through ``load_unit``
    are always part of the catalog.
    """

    def __init__(
        self,
        modules: Iterable[ModuleType] | None = None,
        *,
        excluded_module_prefixes: Iterable[str] = (),
    ) -> None:
        self._modules = list(modules) if modules is not None else None
        self._loaded: list[ModuleType] = []
        self._excluded_module_prefixes = tuple(excluded_module_prefixes)

    def loaded_units(self) -> list[ModuleType]:
        if self._modules is None:
            candidates = [module for module in list(sys.modules.values()) if module is not None]
        else:
            candidates = [*self._modules, *self._loaded]

        units: list[ModuleType] = []
        seen: set[int] = set()
        for module in candidates:
            if id(module) in seen or self._is_excluded(module):
                continue
            seen.add(id(module))
            units.append(module)
        return units

    def loaded_paths(self) -> set[Path]:
        paths: set[Path] = set()
        for module in list(sys.modules.values()):
            module_file = getattr(module, "__file__", None)
            if isinstance(module_file, str) and module_file:
                paths.add(Path(module_file).resolve())
        return paths

    def types_of(self, unit: ModuleType) -> list[type[Any]]:
        module_name = unit.__name__
        top_level = [
            value
            for value in list(vars(unit).values())
            if is_runtime_class(value) and value.__module__ == module_name
        ]
        # Aliases may expose the same class twice.
        return list(
            dict.fromkeys(nested for cls in top_level for nested in _walk_nested_classes(cls)),
        )

    def load_unit(self, path: Path) -> ModuleType:
        module_name = path.stem
        if module_name in sys.modules:
            msg = f"A module named {module_name!r} is already loaded; refusing to load {path}."
            raise ImportError(msg)

        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            msg = f"{path} is not a loadable module."
            raise ImportError(msg)

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(module_name, None)
            raise

        self._loaded.append(module)
        return module

    def _is_excluded(self, module: ModuleType) -> bool:
        name = getattr(module, "__name__", "")
        return any(
            name == prefix or name.startswith(f"{prefix}.")
            for prefix in self._excluded_module_prefixes
        )


def _walk_nested_classes(cls: type[Any]) -> Iterator[type[Any]]:
    yield cls
    for value in list(vars(cls).values()):
        if is_runtime_class(value) and value.__qualname__ == f"{cls.__qualname__}.{value.__name__}":
            yield from _walk_nested_classes(value)
