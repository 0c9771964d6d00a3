"""Shared fixtures plus a tiny plugin running ``@pytest.mark.asyncio`` tests in a fresh event loop."""

from __future__ import annotations

import asyncio
import inspect
import os
import tempfile

import pytest

# Keep test logs out of the working tree; must happen before product_catalog.config is imported
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "product_catalog_test_logs"))
os.environ.setdefault("CACHE_BACKEND", "memory")

from product_catalog.data.redis.memory_cache import InMemoryCache  # noqa: E402
from tests.fakes import FakeProductRepository  # noqa: E402


@pytest.hookimpl
def pytest_configure(config: pytest.Config) -> None:  # pragma: no cover - pytest hook
    config.addinivalue_line(
        "markers",
        "asyncio: mark test to run inside an event loop",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:  # pragma: no cover - pytest hook
    if "asyncio" not in pyfuncitem.keywords:
        return None

    test_function = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_function):
        return None

    parameters = inspect.signature(test_function).parameters
    kwargs = {name: value for name, value in pyfuncitem.funcargs.items() if name in parameters}

    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(test_function(**kwargs))
    finally:
        loop.close()
    return True


@pytest.fixture
def repository() -> FakeProductRepository:
    return FakeProductRepository()


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()
