# timerpool/runtime/registry.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

from timerpool.interfaces.types import TimerId

if TYPE_CHECKING:
    from timerpool.core.base import AbstractTimer, TimerInfo

logger = logging.getLogger(__name__)


class _Slot:
    """
    Internal arena slot. The generation counts how many timers have vacated
    the slot.
    """

    __slots__ = ("generation", "timer")

    def __init__(self) -> None:
        self.generation = 0
        self.timer: Optional["AbstractTimer"] = None


class TimerRegistry:
    """
    Bookkeeping for every live timer. Identifiers are generational arena
    indexes, so removing one timer never invalidates another timer's id.
    Iteration follows insertion order.
    """

    def __init__(self) -> None:
        self._slots: List[_Slot] = []
        self._free: List[int] = []
        self._live: Dict[TimerId, "AbstractTimer"] = {}

    def add(self, timer: "AbstractTimer") -> TimerId:
        """
        Register a timer and return its identifier.

        :param timer: The timer to track.
        :return: The generational id assigned to the timer.
        """
        if self._free:
            index = self._free.pop()
            slot = self._slots[index]
        else:
            index = len(self._slots)
            slot = _Slot()
            self._slots.append(slot)
        slot.timer = timer
        timer_id = TimerId(index, slot.generation)
        self._live[timer_id] = timer
        return timer_id

    def remove(self, timer_id: TimerId) -> bool:
        """
        Unregister the timer with the given id. Stale or unknown ids are
        ignored.

        :return: True if a timer was removed.
        """
        if self._live.pop(timer_id, None) is None:
            return False
        slot = self._slots[timer_id.index]
        slot.timer = None
        slot.generation += 1
        self._free.append(timer_id.index)
        return True

    def get(self, timer_id: TimerId) -> Optional["AbstractTimer"]:
        """
        Look up a live timer, or None if the id is stale or unknown.
        """
        return self._live.get(timer_id)

    def __contains__(self, timer_id: object) -> bool:
        return timer_id in self._live

    def __len__(self) -> int:
        return len(self._live)

    def __iter__(self) -> Iterator["AbstractTimer"]:
        return iter(list(self._live.values()))

    def snapshot(self) -> List["TimerInfo"]:
        """
        Describe every live timer in insertion order.
        """
        return [timer.get_info() for timer in self]

    def pause_all(self) -> None:
        """
        Pause every live timer.
        """
        for timer in self:
            if timer.id in self._live:
                timer.pause()

    def restart_all(self) -> None:
        """
        Restart every live timer. One-shot style timers that are already
        running ignore the request.
        """
        for timer in self:
            if timer.id in self._live:
                timer.restart()

    def cancel_all(self) -> None:
        """
        Cancel every live timer. Cancelling leaves membership untouched, so
        the walk is over a snapshot rather than draining the front.
        """
        for timer in self:
            if timer.id in self._live:
                timer.cancel()

    def kill_all(self) -> None:
        """
        Kill every live timer. Killing one timer may remove others (an owner
        takes its sub-timer with it), so the registry is drained from the
        front until empty.
        """
        while self._live:
            timer_id, timer = next(iter(self._live.items()))
            timer.kill()
            if timer_id in self._live:
                logger.warning("Timer %s survived kill(); removing it from the registry", timer_id)
                self.remove(timer_id)

    def __repr__(self) -> str:
        return f"TimerRegistry(live={len(self._live)}, slots={len(self._slots)})"
