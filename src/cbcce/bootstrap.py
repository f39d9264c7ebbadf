from __future__ import annotations
from cbcce.core.engine import ParameterRegistry
from cbcce.tables import ALL_PARAMS

def build_registry() -> ParameterRegistry:
    return ParameterRegistry(dict(ALL_PARAMS))
