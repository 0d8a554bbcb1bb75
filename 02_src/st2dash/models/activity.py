"""Activity graph data models."""

from dataclasses import dataclass
from enum import Enum


class ActivityKind(str, Enum):
    """Activity types shown on the dashboard."""

    PROCESSING = "Processing"
    SPINNING = "Spinning"
    CONTROL_MESSAGE = "ControlMessage"
    DATA_MESSAGE = "DataMessage"
    WAITING = "Waiting"
    BUSY = "Busy"

    @property
    def is_idle(self) -> bool:
        """Waiting/Busy, hidden unless the show-waiting toggle is on."""
        return self in (ActivityKind.WAITING, ActivityKind.BUSY)

    @property
    def is_message(self) -> bool:
        return self in (ActivityKind.CONTROL_MESSAGE, ActivityKind.DATA_MESSAGE)

    @property
    def color(self) -> str:
        return PALETTE[self]


PALETTE: dict[ActivityKind, str] = {
    ActivityKind.PROCESSING: "#0b6623",
    ActivityKind.SPINNING: "#e48282",
    ActivityKind.CONTROL_MESSAGE: "#4b5f53",
    ActivityKind.DATA_MESSAGE: "#971757",
    ActivityKind.WAITING: "#FF0000",
    ActivityKind.BUSY: "#059dc0",
}


def correlation_key(src_timestamp: int, dst_timestamp: int) -> str:
    """Key of a (source, destination) timestamp pair, order preserved."""
    return f"{src_timestamp}{dst_timestamp}"


class TraversalKind(str, Enum):
    """Whether critical-path traversal may cross an edge."""

    UNDEFINED = "Undefined"
    BLOCK = "Block"
    UNBOUNDED = "Unbounded"


@dataclass(frozen=True)
class Endpoint:
    """One end of an activity edge."""

    worker: int
    timestamp: int  # nanoseconds
    epoch: int


@dataclass(frozen=True)
class ActivityEdge:
    """A single edge of the program activity graph."""

    kind: ActivityKind
    operator_id: int  # 0 when the activity has no operator
    length: int  # 0 when unknown
    traversal: TraversalKind
    src: Endpoint
    dst: Endpoint

    @property
    def cross_worker(self) -> bool:
        return self.src.worker != self.dst.worker

    @property
    def correlation_key(self) -> str:
        return correlation_key(self.src.timestamp, self.dst.timestamp)


@dataclass(frozen=True)
class AggregateRecord:
    """K-hop summary for one (activity type, worker) pair."""

    activity_type: ActivityKind
    worker: int
    count: int
    weighted_count: int


@dataclass(frozen=True)
class MetricRecord:
    """Per-worker (or worker pair) activity metrics for an epoch."""

    activity_type: ActivityKind
    worker_from: int
    worker_to: int | None
    activity_count: int
    activity_time: int  # nanoseconds
    record_count: int
