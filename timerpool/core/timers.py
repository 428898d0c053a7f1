# timerpool/core/timers.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from timerpool.core.base import INTERVAL_BINDING, TIMEOUT_BINDING, AbstractTimer, TimerKind
from timerpool.interfaces.types import CompletionFunc, Milliseconds, TimerCallbackFunc
from timerpool.runtime.context import TimerRuntime

logger = logging.getLogger(__name__)


class DelayTimer(AbstractTimer):
    """
    Fires once per restart after the interval elapses. The timer stays
    registered after firing and can be restarted.
    """

    kind = TimerKind.DELAY
    _binding = TIMEOUT_BINDING


class RepeatingTimer(AbstractTimer):
    """
    Fires every interval until cancelled, paused or killed.
    """

    kind = TimerKind.REPEATING
    _binding = INTERVAL_BINDING


@dataclass
class _RepetitionState:
    """
    Per-timer bookkeeping for a BoundedTimer.
    """

    remaining: int
    on_complete: Optional[CompletionFunc] = None
    fired: int = 0


class BoundedTimer(AbstractTimer):
    """
    Restarts itself a fixed number of times, then calls the completion
    callback and kills itself. The callback receives the timer and the
    zero-based repetition index.

    A repetitions count of zero or less fires no repetitions and completes
    when the first interval elapses.
    """

    kind = TimerKind.BOUNDED
    _binding = TIMEOUT_BINDING

    def __init__(
        self,
        interval: Milliseconds,
        callback: TimerCallbackFunc,
        repetitions: int,
        on_complete: Optional[CompletionFunc] = None,
        runtime: Optional[TimerRuntime] = None,
    ) -> None:
        """
        :param interval: Delay before each repetition, in milliseconds.
        :param callback: Called as callback(timer, index) for each repetition.
        :param repetitions: Number of times to call callback.
        :param on_complete: Called with no arguments after the last repetition.
        :param runtime: Runtime to register with.
        """
        self._repetition = _RepetitionState(remaining=max(repetitions, 0), on_complete=on_complete)
        super().__init__(interval, callback, runtime)

    @property
    def remaining(self) -> int:
        return self._repetition.remaining

    @property
    def fired(self) -> int:
        return self._repetition.fired

    def _fire(self, target: TimerCallbackFunc, *args: Any) -> None:
        self._spend()
        state = self._repetition
        if state.remaining > 0:
            index = state.fired
            state.fired += 1
            state.remaining -= 1
            # Armed before the callback runs so a pause, cancel or kill made
            # inside it wins.
            if state.remaining > 0:
                self.restart()
            try:
                target(self, index, *args)
            except Exception:
                self.kill()
                raise
            if state.remaining > 0:
                return
        self._complete()

    def _complete(self) -> None:
        on_complete = self._repetition.on_complete
        self._repetition.on_complete = None
        try:
            if on_complete is not None and not self._killed:
                on_complete()
        finally:
            self.kill()


class OneShotTimer(AbstractTimer):
    """
    Fires exactly once, then kills itself. Restarting while the timer is
    already armed is ignored; a paused or cancelled one-shot may be restarted.
    """

    kind = TimerKind.ONE_SHOT
    _binding = TIMEOUT_BINDING
    _restart_while_running = False

    def _fire(self, target: TimerCallbackFunc, *args: Any) -> None:
        self._spend()
        try:
            target(self, *args)
        finally:
            self.kill()


class TriggerTimer(AbstractTimer):
    """
    A one-shot timer that ticks while it waits. It owns a RepeatingTimer that
    calls trigger_callback every trigger_interval; when the outer interval
    elapses the repeater is killed, callback runs once, and the timer kills
    itself.

    Both callbacks receive the TriggerTimer as their first argument. Pausing,
    cancelling, restarting or killing the outer timer applies to the repeater
    too, so the repeater never fires outside the outer timer's lifetime. How
    many ticks occur depends on host load.
    """

    kind = TimerKind.TRIGGER
    _binding = TIMEOUT_BINDING
    _restart_while_running = False

    def __init__(
        self,
        interval: Milliseconds,
        callback: TimerCallbackFunc,
        trigger_interval: Milliseconds,
        trigger_callback: TimerCallbackFunc,
        runtime: Optional[TimerRuntime] = None,
    ) -> None:
        """
        :param interval: Total lifetime in milliseconds.
        :param callback: Called as callback(timer) when the lifetime elapses.
        :param trigger_interval: Period of the ticks, in milliseconds.
        :param trigger_callback: Called as trigger_callback(timer) on each tick.
        :param runtime: Runtime to register with.
        """
        self._trigger_callback = trigger_callback
        self._sub_timer = RepeatingTimer(trigger_interval, self._tick, runtime)
        super().__init__(interval, callback, runtime)

    @property
    def sub_timer(self) -> RepeatingTimer:
        """
        The owned repeater.
        """
        return self._sub_timer

    def _tick(self, sub_timer: RepeatingTimer, *args: Any) -> None:
        if self._killed:
            return
        self._trigger_callback(self, *args)

    def _fire(self, target: TimerCallbackFunc, *args: Any) -> None:
        self._spend()
        self._sub_timer.kill()
        try:
            target(self, *args)
        finally:
            self.kill()

    def cancel(self) -> None:
        if self._killed:
            return
        super().cancel()
        self._sub_timer.cancel()

    def pause(self) -> None:
        if self._killed:
            return
        super().pause()
        self._sub_timer.pause()

    def restart(self) -> None:
        if self._killed or (self._running and not self._paused):
            return
        super().restart()
        self._sub_timer.restart()

    def kill(self) -> None:
        if self._killed:
            return
        self._sub_timer.kill()
        super().kill()
