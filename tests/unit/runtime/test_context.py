# tests/unit/runtime/test_context.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from timerpool.core.errors import TimerConfigurationError
from timerpool.core.timers import DelayTimer, RepeatingTimer
from timerpool.runtime.context import (
    DEFAULT_SWEEP_INTERVAL_MS,
    RuntimeConfig,
    TimerRuntime,
    configure,
    get_runtime,
    reset_runtime,
)
from timerpool.runtime.scheduler import LoopScheduler, ManualScheduler


def test_runtime_config_defaults() -> None:
    assert RuntimeConfig().sweep_interval_ms == DEFAULT_SWEEP_INTERVAL_MS == 500


@pytest.mark.parametrize("period", [0, -10])
def test_runtime_config_rejects_non_positive_sweep(period) -> None:
    with pytest.raises(TimerConfigurationError) as excinfo:
        RuntimeConfig(sweep_interval_ms=period)
    assert excinfo.value.details == {"sweep_interval_ms": period}


def test_runtime_defaults_to_loop_scheduler() -> None:
    rt = TimerRuntime()
    assert isinstance(rt.scheduler, LoopScheduler)
    assert not rt.sweeping


def test_custom_sweep_interval(manual_scheduler) -> None:
    rt = TimerRuntime(manual_scheduler, RuntimeConfig(sweep_interval_ms=50))
    DelayTimer(100, lambda t: None, rt).kill()
    assert len(rt.reclamation) == 1

    manual_scheduler.advance(50)
    assert len(rt.reclamation) == 0
    rt.shutdown()


def test_get_runtime_is_process_wide() -> None:
    reset_runtime()
    first = get_runtime()
    assert get_runtime() is first

    reset_runtime()
    assert get_runtime() is not first


def test_configure_replaces_default(manual_scheduler) -> None:
    rt = configure(scheduler=manual_scheduler)

    assert get_runtime() is rt
    assert rt.scheduler is manual_scheduler
    timer = DelayTimer(100, lambda t: None)
    assert timer.runtime is rt


def test_configure_refuses_with_live_timers(default_runtime) -> None:
    RepeatingTimer(100, lambda t: None)

    with pytest.raises(TimerConfigurationError) as excinfo:
        configure(scheduler=ManualScheduler())
    assert excinfo.value.details == {"live": 1}
    assert get_runtime() is default_runtime


def test_shutdown_kills_timers_and_stops_sweeper(runtime, manual_scheduler, recorder) -> None:
    RepeatingTimer(100, recorder, runtime)
    DelayTimer(100, recorder, runtime)

    runtime.shutdown()

    assert len(runtime.registry) == 0
    assert len(runtime.reclamation) == 0
    assert not runtime.sweeping
    assert manual_scheduler.pending() == 0
    manual_scheduler.advance(1000)
    assert recorder.count == 0


def test_reset_runtime_shuts_down_default(default_runtime, manual_scheduler) -> None:
    RepeatingTimer(100, lambda t: None)
    reset_runtime()

    assert len(default_runtime.registry) == 0
    assert manual_scheduler.pending() == 0
