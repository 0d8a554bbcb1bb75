"""Per-edge visual attributes, derived from an edge and the session state."""

from typing import AbstractSet

from ..models import ActivityEdge

NANOS_PER_MS = 1_000_000

SAME_WORKER_WIDTH = 2.0
CROSS_WORKER_WIDTH = 1.5
SOLID = "5,0"
DASHED = "5,5"
DIMMED_OPACITY = 0.1


def stroke_color(edge: ActivityEdge) -> str:
    return edge.kind.color


def stroke_width(edge: ActivityEdge) -> float:
    return CROSS_WORKER_WIDTH if edge.cross_worker else SAME_WORKER_WIDTH


def dash_array(edge: ActivityEdge) -> str:
    return DASHED if edge.cross_worker else SOLID


def opacity(edge: ActivityEdge, highlights: AbstractSet[str], highlight_enabled: bool) -> float:
    """Dim edges outside the highlight set while highlighting is on and the set is non-empty."""
    if not highlight_enabled or not highlights:
        return 1.0
    return 1.0 if edge.correlation_key in highlights else DIMMED_OPACITY


def label(edge: ActivityEdge) -> str:
    op = "" if edge.operator_id == 0 else f"Op{edge.operator_id} "
    length = f"({edge.length})" if edge.length > 0 else ""
    return f"{edge.kind.value} {op}{length}"


def tooltip(edge: ActivityEdge) -> str:
    return (
        f"w{edge.src.worker}, {edge.src.timestamp / NANOS_PER_MS} -> "
        f"w{edge.dst.worker}, {edge.dst.timestamp / NANOS_PER_MS}\n"
        f"type: {edge.kind.value}\n"
        f"operator: {edge.operator_id}\n"
        f"length: {edge.length}\n"
        f"traversal: {edge.traversal.value}"
    )
