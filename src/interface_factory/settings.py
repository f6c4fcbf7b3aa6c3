from __future__ import annotations

import sys
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class InterfaceFactorySettings(BaseSettings):
    """Discovery defaults read from ``INTERFACE_FACTORY_*`` environment variables.

    Explicit keyword arguments passed to discovery always win over these values.
    """

    model_config = SettingsConfigDict(env_prefix="INTERFACE_FACTORY_", frozen=True)

    include_external_sources: bool = False
    """Load modules from ``scan_directory`` that are not imported yet before scanning."""

    scan_directory: Path | None = None
    """Directory searched for external sources. Defaults to the ``__main__`` directory."""

    external_source_glob: str = "*.py"
    """Glob pattern, relative to ``scan_directory``, selecting external sources."""

    excluded_module_prefixes: tuple[str, ...] = ()
    """Module name prefixes never scanned for implementations."""

    def resolve_scan_directory(self) -> Path:
        """Return the configured scan directory or the deployment directory.

        The deployment directory is the folder holding the ``__main__`` script,
        falling back to the current working directory for interactive sessions.
        """
        if self.scan_directory is not None:
            return self.scan_directory

        main_module = sys.modules.get("__main__")
        main_file = getattr(main_module, "__file__", None)
        if main_file:
            return Path(main_file).resolve().parent
        return Path.cwd()
