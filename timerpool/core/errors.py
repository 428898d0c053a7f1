# timerpool/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Dict, Optional


class TimerError(Exception):
    """
    Base exception class for errors within the timer library.

    :param message: Human readable description.
    :param details: Optional structured context, rendered into str().
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class TimerSchedulingError(TimerError):
    """
    Raised when the host scheduling primitive cannot arm a callback, such as
    when no event loop is available.
    """

    def __init__(self, message: str, reason: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.reason = reason
        merged = {"reason": reason}
        merged.update(details or {})
        super().__init__(message, merged)


class TimerConfigurationError(TimerError):
    """
    Raised when the timer runtime is configured with invalid values or
    replaced while timers are still live.
    """
