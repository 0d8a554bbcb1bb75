"""Invariant violation data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .activity import ActivityKind, TraversalKind


class InvariantKind(str, Enum):
    """Temporal invariants checked by the backend."""

    EPOCH = "Epoch"
    OPERATOR = "Operator"
    MESSAGE = "Message"


@dataclass(frozen=True)
class PagNode:
    """A node of the activity graph as reported with a violation."""

    timestamp: int  # nanoseconds
    worker: int
    epoch: int
    seq_no: int


@dataclass(frozen=True)
class PagEdge:
    """An activity edge as reported with a violation."""

    source: PagNode
    destination: PagNode
    kind: ActivityKind
    operator_id: int | None
    traversal: TraversalKind
    length: int | None


@dataclass(frozen=True)
class EpochViolation:
    """An epoch ran longer than allowed."""

    max_duration: int
    start: PagNode
    end: PagNode

    kind = InvariantKind.EPOCH

    @property
    def duration(self) -> int:
        return self.end.timestamp - self.start.timestamp


@dataclass(frozen=True)
class OperatorViolation:
    """An operator invocation (first to closing edge) ran longer than allowed."""

    max_duration: int
    first: PagEdge
    last: PagEdge

    kind = InvariantKind.OPERATOR

    @property
    def duration(self) -> int:
        return self.last.destination.timestamp - self.first.source.timestamp


@dataclass(frozen=True)
class MessageViolation:
    """A control or data message took longer than allowed."""

    max_duration: int
    message: PagEdge

    kind = InvariantKind.MESSAGE

    @property
    def duration(self) -> int:
        return self.message.destination.timestamp - self.message.source.timestamp


Violation = Union[EpochViolation, OperatorViolation, MessageViolation]
