from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from fractions import Fraction
from numbers import Real
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from .errors import ParameterSetError

# Scalars the engine accepts; integer arithmetic is the intended use.
NumT = Union[int, float, Fraction]

# Output of decompose / input of compose: canvas field name -> value.
DateRecord = Dict[str, int]

UNBOUNDED = math.inf


def _parse_ceiling(value: Any) -> Union[int, float]:
    if value is None:
        return UNBOUNDED
    if isinstance(value, str):
        if value.strip().lower() in ("inf", "infinity", "+inf"):
            return UNBOUNDED
        try:
            return int(value)
        except ValueError:
            raise ParameterSetError(f"ceiling must be an integer or 'Infinity', got {value!r}") from None
    if isinstance(value, float) and value == UNBOUNDED:
        return UNBOUNDED
    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value) or value != int(value):
        raise ParameterSetError(f"ceiling must be an integer or 'Infinity', got {value!r}")
    return int(value)


@dataclass(frozen=True)
class CycleSpec:
    """
    One level of the cycle table.

    cycle_length: size of one unit of this cycle in the base scalar unit.
        The value 1 marks the finest level, which takes the remainder as-is.
    ceiling: count at which the level stops counting (may be math.inf).
        The last slot absorbs any surplus, e.g. the 4th year of a quadrennium.
    sub_cycle_shift: -1, 0 or +1, added to the next level's ceiling when
        this level's count equals its effective ceiling.
    multiplier: converts this level's count into units of `target`.
    target: canvas field receiving the contribution.
    """
    cycle_length: NumT
    ceiling: Union[int, float]
    sub_cycle_shift: int
    multiplier: NumT
    target: str

    def __post_init__(self) -> None:
        if not (self.cycle_length > 0):
            raise ParameterSetError(f"cycle_length must be positive (target '{self.target}')")
        if not (self.multiplier > 0):
            raise ParameterSetError(f"multiplier must be positive (target '{self.target}')")
        if self.sub_cycle_shift not in (-1, 0, 1):
            raise ParameterSetError(f"sub_cycle_shift must be -1, 0 or 1, got {self.sub_cycle_shift!r}")
        if not (self.ceiling >= 0):
            raise ParameterSetError(f"ceiling must be >= 0 or unbounded (target '{self.target}')")
        if not math.isinf(self.ceiling) and self.ceiling != int(self.ceiling):
            raise ParameterSetError(f"ceiling must be a whole count, got {self.ceiling!r} (target '{self.target}')")
        if not self.target:
            raise ParameterSetError("target must be a non-empty field name")

    @property
    def is_sentinel(self) -> bool:
        return self.cycle_length == 1

    @property
    def bounded(self) -> bool:
        return not math.isinf(self.ceiling)


@dataclass(frozen=True)
class CanvasEntry:
    name: str
    init: int = 0


@dataclass(frozen=True)
class ParameterSet:
    """
    Declarative description of a calendar as nested cycles.

    epoch: offset of the calendar's own zero point, in the base scalar unit.
    cycles: coarsest level first.
    canvas: output fields with their value at epoch.
    """
    epoch: NumT
    cycles: Tuple[CycleSpec, ...]
    canvas: Tuple[CanvasEntry, ...]
    meta: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        # accept lists from callers, store tuples and a read-only copy of meta
        object.__setattr__(self, "cycles", tuple(self.cycles))
        object.__setattr__(self, "canvas", tuple(self.canvas))
        object.__setattr__(self, "meta", MappingProxyType(dict(self.meta)))
        self._validate()

    def _validate(self) -> None:
        if not self.cycles:
            raise ParameterSetError("cycles must not be empty")
        if not self.canvas:
            raise ParameterSetError("canvas must not be empty")

        names = [c.name for c in self.canvas]
        if len(set(names)) != len(names):
            raise ParameterSetError(f"duplicate canvas names: {names}")

        for i, c in enumerate(self.cycles):
            if c.target not in names:
                raise ParameterSetError(
                    f"cycle {i} targets '{c.target}' which is not in canvas {names}"
                )
            if c.is_sentinel and i != len(self.cycles) - 1:
                raise ParameterSetError(
                    f"cycle {i} has cycle_length 1 but is not the last level"
                )

        # Levels sharing a target must be contiguous, with decreasing place value.
        seen: list = []
        prev: Optional[CycleSpec] = None
        for i, c in enumerate(self.cycles):
            if prev is not None and c.target == prev.target:
                if not (c.multiplier < prev.multiplier):
                    raise ParameterSetError(
                        f"cycles {i - 1},{i} share target '{c.target}' "
                        "but multipliers are not strictly decreasing"
                    )
            else:
                if c.target in seen:
                    raise ParameterSetError(
                        f"levels targeting '{c.target}' are not contiguous (cycle {i})"
                    )
                seen.append(c.target)
            prev = c

        # Canvas follows the order of first occurrence of each target.
        ordered = [n for n in names if n in seen]
        if ordered != seen:
            raise ParameterSetError(
                f"canvas order {ordered} does not follow cycle target order {seen}"
            )

    # ---------------------------------------------------------
    # Convenience
    # ---------------------------------------------------------

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self.canvas)

    @property
    def targets(self) -> Tuple[str, ...]:
        out: list = []
        for c in self.cycles:
            if c.target not in out:
                out.append(c.target)
        return tuple(out)

    def initial_record(self) -> DateRecord:
        return {c.name: c.init for c in self.canvas}

    def tweak(self, **kwargs) -> "ParameterSet":
        return replace(self, **kwargs)

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "ParameterSet":
        """
        Build from the declarative mapping form:

            {"timeepoch": 0,
             "coeff": [{"cyclelength": 86400000, "ceiling": "Infinity",
                        "subCycleShift": 0, "multiplier": 1, "target": "day_number"}, ...],
             "canvas": [{"name": "day_number", "init": 0}, ...]}

        snake_case keys (epoch, cycles, cycle_length, sub_cycle_shift) are accepted too.
        """
        try:
            epoch = data["timeepoch"] if "timeepoch" in data else data.get("epoch", 0)
            rows = data["coeff"] if "coeff" in data else data["cycles"]
            cycles = []
            for row in rows:
                length = row["cyclelength"] if "cyclelength" in row else row["cycle_length"]
                shift = row.get("subCycleShift", row.get("sub_cycle_shift", 0))
                cycles.append(CycleSpec(
                    cycle_length=length,
                    ceiling=_parse_ceiling(row.get("ceiling")),
                    sub_cycle_shift=int(shift),
                    multiplier=row.get("multiplier", 1),
                    target=str(row["target"]),
                ))
            canvas = [CanvasEntry(str(c["name"]), c.get("init", 0)) for c in data["canvas"]]
        except ParameterSetError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise ParameterSetError(f"malformed parameter mapping: {e!r}") from e
        return ParameterSet(epoch=epoch, cycles=tuple(cycles), canvas=tuple(canvas),
                            meta=dict(data.get("meta", {})))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timeepoch": self.epoch,
            "coeff": [
                {
                    "cyclelength": c.cycle_length,
                    "ceiling": "Infinity" if not c.bounded else c.ceiling,
                    "subCycleShift": c.sub_cycle_shift,
                    "multiplier": c.multiplier,
                    "target": c.target,
                }
                for c in self.cycles
            ],
            "canvas": [{"name": c.name, "init": c.init} for c in self.canvas],
        }


def levels(rows: Sequence[Tuple[NumT, Union[int, float], int, NumT, str]]) -> Tuple[CycleSpec, ...]:
    """Build CycleSpec rows from (cycle_length, ceiling, shift, multiplier, target) tuples."""
    return tuple(CycleSpec(*r) for r in rows)
