"""timerpool: callback timers over a host scheduling primitive

Five timer variants share one lifecycle (restart, pause, cancel, kill) and
register in a process-wide registry that supports bulk operations:

    DelayTimer       fires once per restart
    RepeatingTimer   fires every interval
    BoundedTimer     fires a fixed number of times, then completes
    OneShotTimer     fires once and destroys itself
    TriggerTimer     one-shot that ticks a repeater while it waits

Timers are armed on a HostScheduler. LoopScheduler uses the running asyncio
event loop; ManualScheduler runs on a virtual clock advanced by the caller.
Callbacks receive the owning timer as their first argument.
"""

from timerpool.api import (
    active_timer_count,
    active_timers,
    cancel_all_timers,
    create_bounded_timer,
    create_delay_timer,
    create_one_shot_timer,
    create_repeating_timer,
    create_trigger_timer,
    kill_all_timers,
    pause_all_timers,
    restart_all_timers,
)
from timerpool.core.base import AbstractTimer, TimerCallback, TimerInfo, TimerKind, TimerState
from timerpool.core.errors import TimerConfigurationError, TimerError, TimerSchedulingError
from timerpool.core.timers import BoundedTimer, DelayTimer, OneShotTimer, RepeatingTimer, TriggerTimer
from timerpool.interfaces.types import TimerId
from timerpool.runtime.context import RuntimeConfig, TimerRuntime, configure, get_runtime, reset_runtime
from timerpool.runtime.scheduler import LoopScheduler, ManualScheduler

__version__ = "0.1.0"

__all__ = [
    "AbstractTimer",
    "BoundedTimer",
    "DelayTimer",
    "LoopScheduler",
    "ManualScheduler",
    "OneShotTimer",
    "RepeatingTimer",
    "RuntimeConfig",
    "TimerCallback",
    "TimerConfigurationError",
    "TimerError",
    "TimerId",
    "TimerInfo",
    "TimerKind",
    "TimerRuntime",
    "TimerSchedulingError",
    "TimerState",
    "TriggerTimer",
    "active_timer_count",
    "active_timers",
    "cancel_all_timers",
    "configure",
    "create_bounded_timer",
    "create_delay_timer",
    "create_one_shot_timer",
    "create_repeating_timer",
    "create_trigger_timer",
    "get_runtime",
    "kill_all_timers",
    "pause_all_timers",
    "reset_runtime",
    "restart_all_timers",
]
