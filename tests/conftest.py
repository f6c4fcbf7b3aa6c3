"""Shared pytest fixtures for interface_factory tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from interface_factory.adapter_context import adapter_context
from tests.doubles import DictContainerAdapter, RecordingRegisterAdapter


@pytest.fixture(autouse=True)
def _reset_adapter_context_state() -> Generator[None, None, None]:
    previous_adapter = adapter_context._adapter
    adapter_context.reset()
    try:
        yield
    finally:
        adapter_context._adapter = previous_adapter


@pytest.fixture()
def recording_adapter() -> RecordingRegisterAdapter:
    """Register adapter recording emitted registrations."""
    return RecordingRegisterAdapter()


@pytest.fixture()
def dict_adapter() -> DictContainerAdapter:
    """Dict-backed adapter offering both capabilities."""
    return DictContainerAdapter()
