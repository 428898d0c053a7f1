# tests/unit/runtime/test_scheduler.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import asyncio

import pytest

from timerpool.core.errors import TimerSchedulingError
from timerpool.interfaces.protocols import HostScheduler
from timerpool.runtime.scheduler import LoopScheduler, ManualScheduler


# -----------------------------------------------------------------------------
# MANUAL SCHEDULER
# -----------------------------------------------------------------------------
def test_schedulers_satisfy_protocol() -> None:
    assert isinstance(ManualScheduler(), HostScheduler)
    assert isinstance(LoopScheduler(), HostScheduler)


def test_manual_timeout_fires_once(manual_scheduler, recorder) -> None:
    manual_scheduler.set_timeout(recorder, 100)

    assert manual_scheduler.advance(99) == 0
    assert manual_scheduler.advance(1) == 1
    assert manual_scheduler.advance(1000) == 0
    assert recorder.count == 1
    assert manual_scheduler.now == 1100


def test_manual_interval_fires_on_cadence(manual_scheduler, recorder) -> None:
    handle = manual_scheduler.set_interval(recorder, 100)
    manual_scheduler.advance(350)
    assert recorder.count == 3

    manual_scheduler.clear_interval(handle)
    manual_scheduler.advance(1000)
    assert recorder.count == 3


def test_manual_clear_timeout(manual_scheduler, recorder) -> None:
    handle = manual_scheduler.set_timeout(recorder, 100)
    manual_scheduler.clear_timeout(handle)
    manual_scheduler.clear_timeout(handle)
    manual_scheduler.clear_timeout(None)

    manual_scheduler.advance(1000)
    assert recorder.count == 0
    assert manual_scheduler.pending() == 0


def test_manual_fires_in_deadline_then_arming_order(manual_scheduler) -> None:
    order = []
    manual_scheduler.set_timeout(lambda: order.append("late"), 200)
    manual_scheduler.set_timeout(lambda: order.append("first"), 100)
    manual_scheduler.set_timeout(lambda: order.append("second"), 100)

    manual_scheduler.advance(500)
    assert order == ["first", "second", "late"]


def test_manual_callback_sees_its_deadline(manual_scheduler) -> None:
    seen = []
    manual_scheduler.set_timeout(lambda: seen.append(manual_scheduler.now), 150)
    manual_scheduler.advance(1000)

    assert seen == [150]


def test_manual_run_until_idle(manual_scheduler, recorder) -> None:
    manual_scheduler.set_timeout(recorder, 100)
    manual_scheduler.set_timeout(recorder, 300)

    assert manual_scheduler.next_deadline() == 100
    assert manual_scheduler.run_until_idle() == 2
    assert manual_scheduler.next_deadline() is None
    assert manual_scheduler.now == 300


def test_manual_run_until_idle_is_bounded_for_intervals(manual_scheduler, recorder) -> None:
    manual_scheduler.set_interval(recorder, 10)

    assert manual_scheduler.run_until_idle(limit=25) == 25
    assert recorder.count == 25


# -----------------------------------------------------------------------------
# LOOP SCHEDULER
# -----------------------------------------------------------------------------
def test_loop_scheduler_requires_running_loop(recorder) -> None:
    with pytest.raises(TimerSchedulingError) as excinfo:
        LoopScheduler().set_timeout(recorder, 10)
    assert excinfo.value.reason == "no running event loop"


@pytest.mark.asyncio
async def test_loop_timeout_fires(recorder) -> None:
    scheduler = LoopScheduler()
    scheduler.set_timeout(recorder, 10)
    await asyncio.sleep(0.1)

    assert recorder.count == 1


@pytest.mark.asyncio
async def test_loop_clear_timeout(recorder) -> None:
    scheduler = LoopScheduler()
    handle = scheduler.set_timeout(recorder, 20)
    scheduler.clear_timeout(handle)
    scheduler.clear_timeout(None)
    await asyncio.sleep(0.1)

    assert recorder.count == 0


@pytest.mark.asyncio
async def test_loop_interval_repeats_until_cleared(recorder) -> None:
    scheduler = LoopScheduler()
    handle = scheduler.set_interval(recorder, 10)
    await asyncio.sleep(0.1)
    scheduler.clear_interval(handle)
    fired = recorder.count
    await asyncio.sleep(0.05)

    assert fired >= 2
    assert recorder.count == fired
    assert handle.cancelled()


def test_loop_interval_handle_expires_with_its_loop(recorder) -> None:
    loop = asyncio.new_event_loop()
    handle = LoopScheduler(loop).set_interval(recorder, 10)
    assert not handle.cancelled()

    loop.close()

    assert handle.cancelled()


@pytest.mark.asyncio
async def test_loop_scheduler_with_explicit_loop(recorder) -> None:
    scheduler = LoopScheduler(asyncio.get_running_loop())
    scheduler.set_timeout(recorder, 5)
    await asyncio.sleep(0.05)

    assert recorder.count == 1
