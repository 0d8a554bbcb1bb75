"""ST2 live dashboard client."""

from .config import Settings
from .controller import EpochController, IEpochController
from .models import (
    ActivityEdge,
    ActivityKind,
    AggregateRecord,
    Endpoint,
    EpochViolation,
    Frame,
    FrameType,
    InvariantKind,
    MessageViolation,
    MetricRecord,
    OperatorViolation,
    Request,
    ViewOptions,
)
from .projections import PROJECTIONS, reduce_rows
from .session import ISession, Session
from .stores import HighlightSet, InvariantLog, ReplaceStore, StoreSet
from .timeline import TimelineMapper, ZoomTransform
from .tracker import ITracker, Tracker
from .transport import FrameError, ITransportChannel, TransportChannel

__all__ = [
    # Session
    "Session",
    "ISession",
    "Settings",
    # Models
    "ActivityKind",
    "Endpoint",
    "ActivityEdge",
    "AggregateRecord",
    "MetricRecord",
    "InvariantKind",
    "EpochViolation",
    "OperatorViolation",
    "MessageViolation",
    "FrameType",
    "Frame",
    "Request",
    "ViewOptions",
    # Components
    "ITransportChannel",
    "TransportChannel",
    "FrameError",
    "StoreSet",
    "ReplaceStore",
    "InvariantLog",
    "HighlightSet",
    "ITracker",
    "Tracker",
    "IEpochController",
    "EpochController",
    "TimelineMapper",
    "ZoomTransform",
    "reduce_rows",
    "PROJECTIONS",
]
