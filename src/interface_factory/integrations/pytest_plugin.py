from __future__ import annotations

from collections.abc import Generator

import pytest

from interface_factory.adapter_context import AdapterContext, adapter_context


@pytest.fixture()
def interface_factory_context() -> Generator[AdapterContext, None, None]:
    """Isolate the process-wide resolution handle for one test.

    The handle starts unarmed and whatever adapter the test arms is dropped
    afterwards, restoring the adapter that was active before the test.

    Yields:
        The process-wide ``adapter_context``.

    """
    previous_adapter = adapter_context._adapter
    adapter_context.reset()
    try:
        yield adapter_context
    finally:
        adapter_context._adapter = previous_adapter
