"""Projections module."""

from .charts import PROJECTIONS, ChartProjection, get_projection
from .invariants import InvariantPanel, invariant_panels
from .reducer import ALL_WORKERS, reduce_rows

__all__ = [
    "reduce_rows",
    "ALL_WORKERS",
    "ChartProjection",
    "PROJECTIONS",
    "get_projection",
    "InvariantPanel",
    "invariant_panels",
]
