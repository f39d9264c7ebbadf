"""cbcce public API.

Keep this surface small: users should mostly interact with functions re-exported here.
"""

# Initialize registry on import
from . import api_init as _api_init  # noqa: F401

from .api import (
    list_parameter_sets,
    get_parameter_set,
    register_parameter_set,
    parameter_info,
    to_record,
    from_record,
)
from .core.engine import decompose, compose
from .core.errors import (
    CbcceError,
    ParameterSetError,
    MissingFieldError,
    CalendarDateError,
    InvalidArgumentError,
    OutOfRangeError,
    InvalidDateError,
)
from .core.types import CycleSpec, CanvasEntry, ParameterSet, DateRecord
from .tables import DAY_MILLISECONDS, MILESIAN_TIME, YEAR_MONTH
from .calendars.milesian import MilesianDate

__all__ = [
    "decompose",
    "compose",
    "list_parameter_sets",
    "get_parameter_set",
    "register_parameter_set",
    "parameter_info",
    "to_record",
    "from_record",
    "CycleSpec",
    "CanvasEntry",
    "ParameterSet",
    "DateRecord",
    "DAY_MILLISECONDS",
    "MILESIAN_TIME",
    "YEAR_MONTH",
    "MilesianDate",
    "CbcceError",
    "ParameterSetError",
    "MissingFieldError",
    "CalendarDateError",
    "InvalidArgumentError",
    "OutOfRangeError",
    "InvalidDateError",
]
