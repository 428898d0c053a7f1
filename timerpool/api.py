# timerpool/api.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import List, Optional

from timerpool.core.base import TimerInfo
from timerpool.core.timers import BoundedTimer, DelayTimer, OneShotTimer, RepeatingTimer, TriggerTimer
from timerpool.interfaces.types import CompletionFunc, Milliseconds, TimerCallbackFunc
from timerpool.runtime.context import TimerRuntime, get_runtime


def _resolve(runtime: Optional[TimerRuntime]) -> TimerRuntime:
    return runtime if runtime is not None else get_runtime()


def create_delay_timer(
    interval: Milliseconds, callback: TimerCallbackFunc, *, runtime: Optional[TimerRuntime] = None
) -> DelayTimer:
    """
    Create a timer that fires once after interval milliseconds, and again
    after each restart.
    """
    return DelayTimer(interval, callback, _resolve(runtime))


def create_repeating_timer(
    interval: Milliseconds, callback: TimerCallbackFunc, *, runtime: Optional[TimerRuntime] = None
) -> RepeatingTimer:
    """
    Create a timer that fires every interval milliseconds until stopped.
    """
    return RepeatingTimer(interval, callback, _resolve(runtime))


def create_bounded_timer(
    interval: Milliseconds,
    repetitions: int,
    callback: TimerCallbackFunc,
    on_complete: Optional[CompletionFunc] = None,
    *,
    runtime: Optional[TimerRuntime] = None,
) -> BoundedTimer:
    """
    Create a timer that fires repetitions times, passing the repetition index,
    then calls on_complete and destroys itself.
    """
    return BoundedTimer(interval, callback, repetitions, on_complete, _resolve(runtime))


def create_one_shot_timer(
    interval: Milliseconds, callback: TimerCallbackFunc, *, runtime: Optional[TimerRuntime] = None
) -> OneShotTimer:
    """
    Create a timer that fires exactly once and destroys itself.
    """
    return OneShotTimer(interval, callback, _resolve(runtime))


def create_trigger_timer(
    interval: Milliseconds,
    callback: TimerCallbackFunc,
    trigger_interval: Milliseconds,
    trigger_callback: TimerCallbackFunc,
    *,
    runtime: Optional[TimerRuntime] = None,
) -> TriggerTimer:
    """
    Create a one-shot timer that calls trigger_callback every trigger_interval
    milliseconds until interval elapses, then calls callback and destroys
    itself.
    """
    return TriggerTimer(interval, callback, trigger_interval, trigger_callback, _resolve(runtime))


def pause_all_timers(*, runtime: Optional[TimerRuntime] = None) -> None:
    _resolve(runtime).registry.pause_all()


def restart_all_timers(*, runtime: Optional[TimerRuntime] = None) -> None:
    _resolve(runtime).registry.restart_all()


def cancel_all_timers(*, runtime: Optional[TimerRuntime] = None) -> None:
    _resolve(runtime).registry.cancel_all()


def kill_all_timers(*, runtime: Optional[TimerRuntime] = None) -> None:
    _resolve(runtime).registry.kill_all()


def active_timer_count(*, runtime: Optional[TimerRuntime] = None) -> int:
    """
    Number of live (not killed) timers, owned sub-timers included.
    """
    return len(_resolve(runtime).registry)


def active_timers(*, runtime: Optional[TimerRuntime] = None) -> List[TimerInfo]:
    """
    Snapshot of every live timer in creation order.
    """
    return _resolve(runtime).registry.snapshot()
