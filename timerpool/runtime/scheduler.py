# timerpool/runtime/scheduler.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import heapq
import logging
from typing import List, Optional, Tuple

from timerpool.core.errors import TimerSchedulingError
from timerpool.interfaces.types import HostCallback, Milliseconds

logger = logging.getLogger(__name__)


class _IntervalHandle:
    """
    Internal handle for a periodic callback on an asyncio loop. asyncio only
    offers one-shot scheduling, so each tick re-arms the next one at a fixed
    cadence from the previous deadline.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, callback: HostCallback, period: Milliseconds) -> None:
        self._loop = loop
        self._callback = callback
        self._period = period / 1000.0
        self._deadline = loop.time() + self._period
        self._cancelled = False
        self._handle: Optional[asyncio.TimerHandle] = loop.call_at(self._deadline, self._tick)

    def _tick(self) -> None:
        if self._cancelled:
            return
        self._deadline += self._period
        self._handle = self._loop.call_at(self._deadline, self._tick)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def cancelled(self) -> bool:
        # A closed loop never runs the next tick.
        return self._cancelled or self._loop.is_closed()


class LoopScheduler:
    """
    Host scheduling primitive backed by an asyncio event loop. Intervals are in
    milliseconds and converted to the loop's seconds.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """
        :param loop: Loop to schedule on. When omitted, the running loop at the
                     time of each call is used.
        """
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError as exc:
            raise TimerSchedulingError("Cannot schedule timer", "no running event loop") from exc

    def set_timeout(self, callback: HostCallback, delay: Milliseconds) -> asyncio.TimerHandle:
        return self._get_loop().call_later(delay / 1000.0, callback)

    def clear_timeout(self, handle: Optional[asyncio.TimerHandle]) -> None:
        if handle is not None:
            handle.cancel()

    def set_interval(self, callback: HostCallback, period: Milliseconds) -> _IntervalHandle:
        return _IntervalHandle(self._get_loop(), callback, period)

    def clear_interval(self, handle: Optional[_IntervalHandle]) -> None:
        if handle is not None:
            handle.cancel()


class _ManualEntry:
    """
    A single armed callback on the virtual clock.
    """

    __slots__ = ("callback", "deadline", "period", "cancelled")

    def __init__(self, callback: HostCallback, deadline: Milliseconds, period: Optional[Milliseconds]) -> None:
        self.callback = callback
        self.deadline = deadline
        self.period = period
        self.cancelled = False


class ManualScheduler:
    """
    Host scheduling primitive driven by a virtual millisecond clock. Nothing
    fires until advance() or run_until_idle() is called, which makes timer
    behavior deterministic for tests and simulations.

    Entries become due in deadline order; entries with equal deadlines fire in
    the order they were armed.
    """

    def __init__(self, start: Milliseconds = 0.0) -> None:
        self._now = start
        self._counter = 0
        self._heap: List[Tuple[Milliseconds, int, _ManualEntry]] = []

    @property
    def now(self) -> Milliseconds:
        """
        Current virtual time in milliseconds.
        """
        return self._now

    def _push(self, entry: _ManualEntry) -> None:
        heapq.heappush(self._heap, (entry.deadline, self._counter, entry))
        self._counter += 1

    def set_timeout(self, callback: HostCallback, delay: Milliseconds) -> _ManualEntry:
        entry = _ManualEntry(callback, self._now + delay, None)
        self._push(entry)
        return entry

    def clear_timeout(self, handle: Optional[_ManualEntry]) -> None:
        if handle is not None:
            handle.cancelled = True

    def set_interval(self, callback: HostCallback, period: Milliseconds) -> _ManualEntry:
        entry = _ManualEntry(callback, self._now + period, period)
        self._push(entry)
        return entry

    def clear_interval(self, handle: Optional[_ManualEntry]) -> None:
        if handle is not None:
            handle.cancelled = True

    def _prune(self) -> None:
        while self._heap and self._heap[0][2].cancelled:
            heapq.heappop(self._heap)

    def pending(self) -> int:
        """
        Number of armed, uncancelled entries.
        """
        return sum(1 for _, _, entry in self._heap if not entry.cancelled)

    def next_deadline(self) -> Optional[Milliseconds]:
        """
        Deadline of the earliest armed entry, or None when idle.
        """
        self._prune()
        if not self._heap:
            return None
        return self._heap[0][0]

    def advance(self, delta: Milliseconds) -> int:
        """
        Move the clock forward by delta, firing every entry that becomes due.
        Periodic entries are re-armed at a fixed cadence before their callback
        runs, so a callback clearing its own handle stops further ticks.

        :param delta: Milliseconds to advance.
        :return: Number of callbacks invoked.
        """
        target = self._now + delta
        fired = 0
        while True:
            self._prune()
            if not self._heap or self._heap[0][0] > target:
                break
            deadline, _, entry = heapq.heappop(self._heap)
            self._now = deadline
            if entry.period is not None:
                entry.deadline = deadline + entry.period
                self._push(entry)
            else:
                entry.cancelled = True
            fired += 1
            entry.callback()
        self._now = target
        return fired

    def run_until_idle(self, limit: int = 10000) -> int:
        """
        Fire entries in deadline order until none remain or limit callbacks
        have run. Periodic entries never go idle, so the limit bounds them.

        :return: Number of callbacks invoked.
        """
        fired = 0
        while fired < limit:
            deadline = self.next_deadline()
            if deadline is None:
                break
            fired += self.advance(max(deadline - self._now, 0.0))
        if fired >= limit:
            logger.debug("run_until_idle stopped after %d callbacks", fired)
        return fired

    def __repr__(self) -> str:
        return f"ManualScheduler(now={self._now!r}, pending={self.pending()})"
