# timerpool/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, NamedTuple

Milliseconds = float
HostHandle = Any


class TimerId(NamedTuple):
    """
    Generational handle for a registry slot. The generation is bumped each
    time a slot is vacated, so an id held past its timer's death never
    resolves to a newer timer that reuses the slot.
    """

    index: int
    generation: int

    def __str__(self) -> str:
        return f"{self.index}:{self.generation}"


# Callback Types
TimerCallbackFunc = Callable[..., Any]
CompletionFunc = Callable[[], Any]
HostCallback = Callable[..., Any]
