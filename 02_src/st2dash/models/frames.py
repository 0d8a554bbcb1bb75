"""Wire-level request and frame models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FrameType(str, Enum):
    """Message kinds multiplexed over the backend connection."""

    PAG = "PAG"  # activity edges of one epoch
    AGG = "AGG"  # k-hop aggregates up to an epoch
    ALL = "ALL"  # correlation pairs to highlight
    MET = "MET"  # per-worker metrics
    INV = "INV"  # invariant violations, epoch independent

    @property
    def takes_epoch(self) -> bool:
        return self is not FrameType.INV


EPOCH_BATCH = (FrameType.PAG, FrameType.AGG, FrameType.ALL, FrameType.MET)


@dataclass(frozen=True)
class Request:
    """An outbound request to the backend."""

    type: FrameType
    epoch: int | None = None

    def __post_init__(self) -> None:
        if self.type.takes_epoch and self.epoch is None:
            raise ValueError(f"{self.type.value} request requires an epoch")
        if not self.type.takes_epoch and self.epoch is not None:
            raise ValueError(f"{self.type.value} request takes no epoch")
        if self.epoch is not None and self.epoch < 0:
            raise ValueError(f"epoch must be non-negative, got {self.epoch}")

    def to_wire(self) -> dict[str, Any]:
        if self.epoch is None:
            return {"type": self.type.value}
        return {"type": self.type.value, "epoch": self.epoch}


@dataclass(frozen=True)
class Frame:
    """An inbound frame with its payload already decoded."""

    type: FrameType
    payload: tuple  # records of the kind matching `type`
