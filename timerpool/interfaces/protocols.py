# timerpool/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Optional, Protocol, runtime_checkable

from timerpool.interfaces.types import HostCallback, HostHandle, Milliseconds, TimerId


@runtime_checkable
class HostScheduler(Protocol):
    """
    Host scheduling primitive protocol.

    Methods:
        set_timeout(): Arm a callback to fire once after a delay.
        clear_timeout(): Release a handle returned by set_timeout.
        set_interval(): Arm a callback to fire every period until cleared.
        clear_interval(): Release a handle returned by set_interval.

    Runtime Invariants:
    - Handles are opaque to callers and owned by whoever armed them.
    - Clearing a handle prevents future invocations only; an invocation the
      host already queued may still run.

    Error Handling:
    - Clearing None or an already-cleared handle must be a no-op.
    - Interval validation is left to the host.
    """

    def set_timeout(self, callback: HostCallback, delay: Milliseconds) -> HostHandle:
        """Arm callback to fire once after delay milliseconds."""
        ...

    def clear_timeout(self, handle: Optional[HostHandle]) -> None:
        """Release a one-shot handle."""
        ...

    def set_interval(self, callback: HostCallback, period: Milliseconds) -> HostHandle:
        """Arm callback to fire every period milliseconds."""
        ...

    def clear_interval(self, handle: Optional[HostHandle]) -> None:
        """Release a periodic handle."""
        ...


@runtime_checkable
class TimerHandle(Protocol):
    """
    Lifecycle surface shared by every timer variant.

    Runtime Invariants:
    - A timer is in exactly one of running, paused, cancelled or killed.
    - Killed is terminal; every method on a killed timer is a no-op.
    """

    id: TimerId

    def pause(self) -> None:
        """Stop the timer; a later restart waits the full interval."""
        ...

    def restart(self) -> None:
        """Cancel and re-arm with the current interval and callback."""
        ...

    def cancel(self) -> None:
        """Release the host handle, keeping the timer registered."""
        ...

    def kill(self) -> None:
        """Cancel, unregister and retire the timer."""
        ...

    def is_running(self) -> bool:
        """True only while armed."""
        ...

    def get_interval(self) -> Milliseconds:
        ...

    def set_interval(self, interval: Milliseconds) -> None:
        ...

    def get_callback(self) -> Any:
        ...

    def set_callback(self, callback: Any) -> None:
        ...
