# timerpool/runtime/context.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from timerpool.core.errors import TimerConfigurationError
from timerpool.interfaces.protocols import HostScheduler
from timerpool.interfaces.types import Milliseconds, TimerId
from timerpool.runtime.reclamation import ReclamationQueue, _Sweeper
from timerpool.runtime.registry import TimerRegistry
from timerpool.runtime.scheduler import LoopScheduler

if TYPE_CHECKING:
    from timerpool.core.base import AbstractTimer

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_MS: Milliseconds = 500.0


@dataclass(frozen=True)
class RuntimeConfig:
    """
    Tunables for a TimerRuntime.

    :param sweep_interval_ms: Period of the reclamation sweep.
    """

    sweep_interval_ms: Milliseconds = DEFAULT_SWEEP_INTERVAL_MS

    def __post_init__(self) -> None:
        if self.sweep_interval_ms <= 0:
            raise TimerConfigurationError(
                "sweep_interval_ms must be positive", {"sweep_interval_ms": self.sweep_interval_ms}
            )


class TimerRuntime:
    """
    Everything timers share: the host scheduling primitive, the registry of
    live timers, and the reclamation queue with its sweeper.
    """

    def __init__(self, scheduler: Optional[HostScheduler] = None, config: Optional[RuntimeConfig] = None) -> None:
        """
        :param scheduler: Host primitive to arm timers on. Defaults to a
                          LoopScheduler on the running asyncio loop.
        :param config: Runtime tunables.
        """
        self.config = config or RuntimeConfig()
        self.scheduler: HostScheduler = scheduler if scheduler is not None else LoopScheduler()
        self.registry = TimerRegistry()
        self.reclamation = ReclamationQueue()
        self._sweeper = _Sweeper(self.reclamation, self.scheduler, self.config.sweep_interval_ms)

    @property
    def sweeping(self) -> bool:
        """
        Whether the periodic reclamation sweep is armed.
        """
        return self._sweeper.active

    def register(self, timer: "AbstractTimer") -> TimerId:
        """
        Add a timer to the registry, starting the sweeper on first use.
        """
        self._sweeper.start()
        return self.registry.add(timer)

    def unregister(self, timer_id: TimerId) -> bool:
        return self.registry.remove(timer_id)

    def shutdown(self) -> None:
        """
        Kill every live timer, stop the sweeper and drop retired callbacks.
        """
        self.registry.kill_all()
        self._sweeper.stop()
        self.reclamation.sweep()
        logger.debug("Timer runtime shut down")


_default_runtime: Optional[TimerRuntime] = None


def get_runtime() -> TimerRuntime:
    """
    Return the process-wide runtime, creating a default one on first use.
    """
    global _default_runtime
    if _default_runtime is None:
        _default_runtime = TimerRuntime()
    return _default_runtime


def configure(scheduler: Optional[HostScheduler] = None, config: Optional[RuntimeConfig] = None) -> TimerRuntime:
    """
    Replace the process-wide runtime.

    :raises TimerConfigurationError: If the current runtime still has live timers.
    """
    global _default_runtime
    if _default_runtime is not None:
        live = len(_default_runtime.registry)
        if live:
            raise TimerConfigurationError("Cannot reconfigure runtime with live timers", {"live": live})
        _default_runtime.shutdown()
    _default_runtime = TimerRuntime(scheduler, config)
    return _default_runtime


def reset_runtime() -> None:
    """
    Shut down and forget the process-wide runtime.
    """
    global _default_runtime
    if _default_runtime is not None:
        _default_runtime.shutdown()
    _default_runtime = None
