"""
cbcce.core.engine
-----------------
Cycle-based decomposition of a scalar quantity into named calendar fields,
and the inverse composition.

The engine knows nothing about calendars: a ParameterSet describes nested
cycles (coarsest first) and the shape of the output record. Each level is a
floor division whose quotient is capped by the level's ceiling; once the
ceiling is reached the surplus stays in the remainder, which is how a last
"long" slot (a 366-day year, a 31-day month) is encoded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple, Union

from .errors import MissingFieldError
from .types import DateRecord, NumT, ParameterSet


def _bounded_divmod(quantity: NumT, unit: NumT, ceiling: Union[int, float]) -> Tuple[NumT, NumT]:
    """
    Floor-divide `quantity` by `unit`, never letting the quotient exceed `ceiling`.

    Negative quantities borrow whole units until the remainder is in [0, unit).
    Returns (quotient, remainder); the remainder may be >= unit when capped.
    """
    r = 0
    if quantity < 0:
        r = quantity // unit
        quantity -= r * unit
    if r < ceiling:
        k = min(quantity // unit, ceiling - r)
        if k > 0:
            r += k
            quantity -= k * unit
    return r, quantity


def decompose(quantity: NumT, params: ParameterSet) -> DateRecord:
    """Scalar quantity (absolute, in the base unit) -> fresh DateRecord."""
    quantity -= params.epoch
    result = params.initial_record()

    add_cycle = 0  # +-1 when the upper level sits in its last slot
    for c in params.cycles:
        if c.is_sentinel:
            r = quantity
        else:
            ceiling = c.ceiling + add_cycle
            r, quantity = _bounded_divmod(quantity, c.cycle_length, ceiling)
            add_cycle = c.sub_cycle_shift if r == ceiling else 0
        result[c.target] += r * c.multiplier
    return result


def compose(record: Mapping[str, NumT], params: ParameterSet) -> NumT:
    """DateRecord -> scalar quantity. The caller's mapping is not modified."""
    cells: Dict[str, NumT] = {}
    for c in params.canvas:
        if c.name not in record:
            raise MissingFieldError(f"record has no field '{c.name}' (expected {list(params.field_names)})")
        cells[c.name] = record[c.name] - c.init

    quantity = params.epoch
    current_target = params.cycles[0].target
    counter = cells[current_target]
    add_cycle = 0
    for c in params.cycles:
        if c.target != current_target:
            current_target = c.target
            counter = cells[current_target]
        ceiling = c.ceiling + add_cycle
        f, counter = _bounded_divmod(counter, c.multiplier, ceiling)
        add_cycle = c.sub_cycle_shift if f == ceiling else 0
        quantity += f * c.cycle_length
    return quantity


@dataclass
class ParameterRegistry:
    _params: Dict[str, ParameterSet]

    def get(self, name: str) -> ParameterSet:
        if name not in self._params:
            raise KeyError(f"Unknown parameter set '{name}'. Available: {sorted(self._params)}")
        return self._params[name]

    def list(self) -> List[str]:
        return sorted(self._params.keys())

    def register(self, name: str, params: ParameterSet, *, overwrite: bool = False) -> None:
        if (not overwrite) and (name in self._params):
            raise KeyError(f"Parameter set '{name}' already exists. Use overwrite=True to replace.")
        if not isinstance(params, ParameterSet):
            raise TypeError(f"Expected ParameterSet, got {type(params).__name__}")
        self._params[name] = params
