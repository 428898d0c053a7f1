# timerpool/core/base.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional

from timerpool.interfaces.protocols import HostScheduler
from timerpool.interfaces.types import HostCallback, HostHandle, Milliseconds, TimerCallbackFunc, TimerId
from timerpool.runtime.context import TimerRuntime, get_runtime

logger = logging.getLogger(__name__)


class TimerState(Enum):
    """Defines the possible states of a timer.

    Exactly one applies at any time; KILLED is terminal.
    """

    RUNNING = auto()  # Armed on the host primitive
    PAUSED = auto()  # Stopped by pause(); restart re-arms the full interval
    CANCELLED = auto()  # Not armed, still registered
    KILLED = auto()  # Unregistered, every operation is a no-op


class TimerKind(Enum):
    """Defines the timer variants."""

    DELAY = auto()
    REPEATING = auto()
    BOUNDED = auto()
    ONE_SHOT = auto()
    TRIGGER = auto()


@dataclass(frozen=True)
class TimerInfo:
    """
    Immutable snapshot of a timer, for enumeration and diagnostics.
    """

    id: TimerId
    kind: TimerKind
    state: TimerState
    interval: Milliseconds


class TimerCallback:
    """
    The indirection handed to the host primitive in place of the caller's
    callable. At fire time it hands the target to its timer, which invokes it
    with itself as the receiver argument.

    Once cleared the wrapper is inert: a late invocation from the host does
    nothing and touches no timer or registry state.
    """

    __slots__ = ("_timer", "_target")

    def __init__(self, timer: "AbstractTimer", target: TimerCallbackFunc) -> None:
        self._timer: Optional[AbstractTimer] = timer
        self._target: Optional[TimerCallbackFunc] = target

    @property
    def timer(self) -> Optional["AbstractTimer"]:
        return self._timer

    @property
    def target(self) -> Optional[TimerCallbackFunc]:
        return self._target

    @property
    def inert(self) -> bool:
        return self._timer is None

    def clear(self) -> None:
        """
        Detach from the timer and target.
        """
        self._timer = None
        self._target = None

    def __call__(self, *args: Any) -> None:
        timer, target = self._timer, self._target
        if timer is None or target is None:
            return
        try:
            timer._fire(target, *args)
        except Exception:
            logger.debug("Callback for timer %s raised", timer.id, exc_info=True)
            raise


class _HostBinding:
    """
    Internal pairing of a host primitive's arm and release calls.

    :param single_fire: True when the primitive is spent after one invocation.
    """

    def __init__(self, arm: str, disarm: str, single_fire: bool) -> None:
        self._arm = arm
        self._disarm = disarm
        self.single_fire = single_fire

    def arm(self, scheduler: HostScheduler, callback: HostCallback, interval: Milliseconds) -> HostHandle:
        return getattr(scheduler, self._arm)(callback, interval)

    def disarm(self, scheduler: HostScheduler, handle: HostHandle) -> None:
        getattr(scheduler, self._disarm)(handle)


TIMEOUT_BINDING = _HostBinding("set_timeout", "clear_timeout", single_fire=True)
INTERVAL_BINDING = _HostBinding("set_interval", "clear_interval", single_fire=False)


class AbstractTimer(ABC):
    """
    Base lifecycle state machine shared by every timer variant. Holds the
    interval, the caller's callback and the running/paused flags, and owns at
    most one host handle at a time.

    Variants declare their kind and the host binding they use, and may
    replace _fire to turn one host invocation into their own behavior.

    Construction registers the timer and arms it immediately.
    """

    _restart_while_running = True

    @property
    @abstractmethod
    def kind(self) -> TimerKind:
        """The variant of this timer."""

    @property
    @abstractmethod
    def _binding(self) -> _HostBinding:
        """The host primitive this timer arms."""

    def __init__(
        self,
        interval: Milliseconds,
        callback: TimerCallbackFunc,
        runtime: Optional[TimerRuntime] = None,
    ) -> None:
        """
        :param interval: Interval in milliseconds. Not validated; the host
                         primitive defines what non-positive values do.
        :param callback: Called with the timer as its first argument.
        :param runtime: Runtime to register with; defaults to the process-wide one.
        """
        self._runtime = runtime if runtime is not None else get_runtime()
        self._interval = interval
        self._callback = callback
        self._wrapper: Optional[TimerCallback] = None
        self._handle: Optional[HostHandle] = None
        self._running = False
        self._paused = False
        self._killed = False
        self.id: TimerId = self._runtime.register(self)
        self.restart()

    # -- firing --------------------------------------------------------------

    def _spend(self) -> None:
        # A single-fire handle is used up once the host invokes it.
        if self._binding.single_fire:
            self._handle = None
            self._running = False

    def _fire(self, target: TimerCallbackFunc, *args: Any) -> None:
        """
        Invoked by the wrapper when the host fires. The default passes the
        timer as the receiver argument.
        """
        self._spend()
        target(self, *args)

    # -- lifecycle -----------------------------------------------------------

    def cancel(self) -> None:
        """
        Release the host handle. The timer stays registered and can be
        restarted.
        """
        if self._killed:
            return
        if self._handle is not None:
            self._binding.disarm(self._runtime.scheduler, self._handle)
            self._handle = None
        self._running = False
        self._paused = False

    def pause(self) -> None:
        """
        Stop the timer. A later restart waits the full interval again; the
        remaining time is not preserved.
        """
        if self._killed:
            return
        self.cancel()
        self._paused = True

    def restart(self) -> None:
        """
        Cancel and re-arm with the current interval and callback.
        """
        if self._killed:
            return
        if not self._restart_while_running and self._running and not self._paused:
            return
        self.cancel()
        self._handle = self._binding.arm(self._runtime.scheduler, self.get_callback(), self._interval)
        self._running = True
        self._paused = False
        logger.debug("Armed %s timer %s (%sms)", self.kind.name, self.id, self._interval)

    def kill(self) -> None:
        """
        Cancel, unregister and retire the timer. The wrapper is made inert and
        parked in the reclamation queue in case the host still holds it.
        Killing twice is a no-op.
        """
        if self._killed:
            return
        self.cancel()
        self._killed = True
        self._runtime.unregister(self.id)
        self._handle = None
        self._retire_wrapper()
        logger.debug("Killed %s timer %s", self.kind.name, self.id)

    def _retire_wrapper(self) -> None:
        if self._wrapper is not None:
            self._wrapper.clear()
            self._runtime.reclamation.retire(self._wrapper)
            self._wrapper = None

    # -- accessors -----------------------------------------------------------

    def is_running(self) -> bool:
        return self._running

    @property
    def state(self) -> TimerState:
        if self._killed:
            return TimerState.KILLED
        if self._running:
            return TimerState.RUNNING
        if self._paused:
            return TimerState.PAUSED
        return TimerState.CANCELLED

    @property
    def handle(self) -> Optional[HostHandle]:
        """
        The host handle currently owned by the timer, or None.
        """
        return self._handle

    @property
    def runtime(self) -> TimerRuntime:
        return self._runtime

    def get_interval(self) -> Milliseconds:
        return self._interval

    def set_interval(self, interval: Milliseconds) -> None:
        """
        Change the interval. The timer is cancelled and must be restarted
        explicitly.
        """
        if self._killed:
            return
        self.cancel()
        self._interval = interval

    interval = property(get_interval, set_interval)

    def get_callback(self) -> Optional[TimerCallback]:
        """
        Return the wrapper handed to the host, building it on first use.
        Killed timers return None.
        """
        if self._killed:
            return None
        if self._wrapper is None:
            self._wrapper = TimerCallback(self, self._callback)
        return self._wrapper

    def set_callback(self, callback: TimerCallbackFunc) -> None:
        """
        Replace the caller's callback. The previous wrapper is retired; a
        running timer restarts with the new one.
        """
        if self._killed:
            return
        was_running = self._running
        if was_running:
            self.cancel()
        self._callback = callback
        self._retire_wrapper()
        if was_running:
            self.restart()

    callback = property(get_callback, set_callback)

    def get_info(self) -> TimerInfo:
        return TimerInfo(id=self.id, kind=self.kind, state=self.state, interval=self._interval)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id}, interval={self._interval!r}, state={self.state.name})"
