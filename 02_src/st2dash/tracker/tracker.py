"""Tracker implementation for frame delivery statistics."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

from ..models import Frame, FrameType
from ..transport import FrameError, ITransportChannel


@dataclass
class FrameStats:
    """Delivery counters for one frame type."""

    received: int = 0
    entries: int = 0
    last_received: datetime | None = None


@dataclass
class TrackerSnapshot:
    """Point-in-time copy of the tracker counters."""

    frames: dict[FrameType, FrameStats] = field(default_factory=dict)
    dropped: dict[str, int] = field(default_factory=dict)


class ITracker(Protocol):
    """Counts delivered and dropped frames. Two channels: channel subscription + direct calls."""

    def record_drop(self, error: FrameError) -> None:
        """Count a dropped frame by reason."""
        ...

    def snapshot(self) -> TrackerSnapshot:
        """Copy the current counters."""
        ...


class Tracker:
    """Tracks frames via channel subscriptions and direct record_drop() calls."""

    def __init__(self, channel: ITransportChannel):
        self._channel = channel
        self._frames: dict[FrameType, FrameStats] = {t: FrameStats() for t in FrameType}
        self._dropped: Counter[str] = Counter()
        self._unsubscribers: list = []

    def start(self) -> None:
        """Subscribe to every frame type."""
        if self._unsubscribers:
            return
        for frame_type in FrameType:
            self._unsubscribers.append(
                self._channel.subscribe(frame_type, self._handle_frame)
            )

    def stop(self) -> None:
        """Unsubscribe from the channel."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def _handle_frame(self, frame: Frame) -> None:
        stats = self._frames[frame.type]
        stats.received += 1
        stats.entries += len(frame.payload)
        stats.last_received = datetime.now(timezone.utc)

    def record_drop(self, error: FrameError) -> None:
        """Count a dropped frame by reason."""
        self._dropped[error.reason] += 1

    def snapshot(self) -> TrackerSnapshot:
        """Copy the current counters."""
        return TrackerSnapshot(
            frames={
                t: FrameStats(s.received, s.entries, s.last_received)
                for t, s in self._frames.items()
            },
            dropped=dict(self._dropped),
        )
