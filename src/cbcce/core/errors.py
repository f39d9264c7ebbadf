from __future__ import annotations

from typing import Any, Literal, Tuple

ErrorKind = Literal["invalid_argument", "out_of_range", "invalid_date"]


class CbcceError(Exception):
    """Base error."""

class ParameterSetError(CbcceError, ValueError):
    """Raised when a ParameterSet is malformed (checked at construction)."""

class MissingFieldError(CbcceError, KeyError):
    """Raised by compose when a record lacks a canvas field."""

class CalendarDateError(CbcceError):
    """
    Calendar-layer validation failure.

    Carries the kind of failure, the calling function and the offending values,
    so callers can react without parsing the message.
    """
    kind: ErrorKind = "invalid_argument"

    def __init__(self, func: str, *values: Any, reason: str = "") -> None:
        self.func = func
        self.values: Tuple[Any, ...] = values
        self.reason = reason
        shown = " ".join(str(v) for v in values)
        msg = f"{func}: {self.kind.replace('_', ' ')}: {shown}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)

class InvalidArgumentError(CalendarDateError):
    kind: ErrorKind = "invalid_argument"

class OutOfRangeError(CalendarDateError):
    kind: ErrorKind = "out_of_range"

class InvalidDateError(CalendarDateError):
    kind: ErrorKind = "invalid_date"
