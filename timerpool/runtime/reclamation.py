# timerpool/runtime/reclamation.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Any, List, Optional

from timerpool.interfaces.protocols import HostScheduler
from timerpool.interfaces.types import HostHandle, Milliseconds

logger = logging.getLogger(__name__)


class ReclamationQueue:
    """
    Staging area for retired callback wrappers. A killed timer's wrapper may
    still be held by the host primitive for an invocation it already queued,
    so the wrapper is kept reachable here until the next sweep drops it.

    Entries are never read back. Callers make a wrapper inert before retiring
    it, so sweeping by simple drop is always safe.
    """

    def __init__(self) -> None:
        self._entries: List[Any] = []

    def retire(self, entry: Any) -> None:
        """
        Keep an inert object alive until the next sweep.

        :param entry: The retired wrapper.
        """
        if entry is not None:
            self._entries.append(entry)

    def sweep(self) -> int:
        """
        Drop every entry present.

        :return: Number of entries dropped.
        """
        count = len(self._entries)
        self._entries.clear()
        if count:
            logger.debug("Swept %d retired callbacks", count)
        return count

    def __len__(self) -> int:
        return len(self._entries)


def _expired(handle: HostHandle) -> bool:
    # asyncio-style handles expose cancelled() as a method, virtual-clock
    # entries as a flag.
    cancelled = getattr(handle, "cancelled", False)
    return bool(cancelled() if callable(cancelled) else cancelled)


class _Sweeper:
    """
    Internal periodic task that drains a ReclamationQueue on the host's
    repeating primitive. It is not a registered timer and never appears in
    registry accounting.

    A handle the host can no longer fire (cancelled, or bound to an event
    loop that has since closed) counts as inactive, so the next start()
    re-arms the sweep on the host's current loop.
    """

    def __init__(self, queue: ReclamationQueue, scheduler: HostScheduler, period: Milliseconds) -> None:
        self._queue = queue
        self._scheduler = scheduler
        self._period = period
        self._handle: Optional[HostHandle] = None

    @property
    def active(self) -> bool:
        return self._handle is not None and not _expired(self._handle)

    def start(self) -> None:
        if self.active:
            return
        if self._handle is not None:
            logger.debug("Reclamation sweeper handle expired; re-arming")
        self._handle = self._scheduler.set_interval(self._queue.sweep, self._period)
        logger.debug("Reclamation sweeper started (period=%sms)", self._period)

    def stop(self) -> None:
        if self._handle is not None:
            self._scheduler.clear_interval(self._handle)
            self._handle = None
            logger.debug("Reclamation sweeper stopped")
