# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, List, Tuple

import pytest


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")
    config.addinivalue_line("markers", "memory: mark test as a memory test")


class Recorder:
    """Callable that records every invocation's arguments."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> None:
        self.calls.append(args)

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def manual_scheduler():
    """A virtual-clock host scheduler starting at t=0."""
    from timerpool.runtime.scheduler import ManualScheduler

    return ManualScheduler()


@pytest.fixture
def runtime(manual_scheduler):
    """A standalone runtime on the manual scheduler, shut down after the test."""
    from timerpool.runtime.context import TimerRuntime

    rt = TimerRuntime(scheduler=manual_scheduler)
    yield rt
    rt.shutdown()


@pytest.fixture
def default_runtime(manual_scheduler):
    """The process-wide runtime, configured on the manual scheduler."""
    from timerpool.runtime.context import configure, reset_runtime

    reset_runtime()
    rt = configure(scheduler=manual_scheduler)
    yield rt
    reset_runtime()


@pytest.fixture
def recorder():
    """A fresh callback recorder."""
    return Recorder()


@pytest.fixture
def make_recorder():
    """Factory for additional recorders."""
    return Recorder


@pytest.fixture(autouse=True)
def clean_default_runtime():
    yield
    from timerpool.runtime.context import reset_runtime

    reset_runtime()
