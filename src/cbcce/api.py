from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

from .core.engine import ParameterRegistry, compose, decompose
from .core.types import DateRecord, NumT, ParameterSet

_registry: Optional[ParameterRegistry] = None

ParamsRef = Union[str, ParameterSet]

def set_registry(reg: ParameterRegistry) -> None:
    global _registry
    _registry = reg

def _reg() -> ParameterRegistry:
    if _registry is None:
        raise RuntimeError("Parameter registry not initialized")
    return _registry

def _resolve(params: ParamsRef) -> ParameterSet:
    if isinstance(params, ParameterSet):
        return params
    return _reg().get(params)

def list_parameter_sets() -> List[str]:
    return _reg().list()

def get_parameter_set(name: str) -> ParameterSet:
    return _reg().get(name)

def register_parameter_set(name: str, params: ParameterSet, *, overwrite: bool = False) -> None:
    _reg().register(name, params, overwrite=overwrite)

def parameter_info(name: str) -> Dict[str, Any]:
    p = _reg().get(name)
    return {
        "name": name,
        "epoch": p.epoch,
        "levels": len(p.cycles),
        "fields": list(p.field_names),
        "init": p.initial_record(),
        "targets": list(p.targets),
        "meta": dict(p.meta),
    }

def to_record(quantity: NumT, *, params: ParamsRef = "milesian") -> DateRecord:
    return decompose(quantity, _resolve(params))

def from_record(record: Mapping[str, NumT], *, params: ParamsRef = "milesian") -> NumT:
    return compose(record, _resolve(params))
