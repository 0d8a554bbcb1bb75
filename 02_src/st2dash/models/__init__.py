"""Core data models for the ST2 dashboard."""

from .activity import (
    PALETTE,
    ActivityEdge,
    ActivityKind,
    AggregateRecord,
    Endpoint,
    MetricRecord,
    TraversalKind,
    correlation_key,
)
from .frames import EPOCH_BATCH, Frame, FrameType, Request
from .invariants import (
    EpochViolation,
    InvariantKind,
    MessageViolation,
    OperatorViolation,
    PagEdge,
    PagNode,
    Violation,
)
from .view import ViewOptions

__all__ = [
    # Activity
    "ActivityKind",
    "TraversalKind",
    "PALETTE",
    "Endpoint",
    "ActivityEdge",
    "AggregateRecord",
    "MetricRecord",
    "correlation_key",
    # Frames
    "FrameType",
    "EPOCH_BATCH",
    "Request",
    "Frame",
    # Invariants
    "InvariantKind",
    "PagNode",
    "PagEdge",
    "EpochViolation",
    "OperatorViolation",
    "MessageViolation",
    "Violation",
    # View
    "ViewOptions",
]
