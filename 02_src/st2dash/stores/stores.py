"""State stores, one per inbound frame kind.

Every store keeps its state as immutable tuples and swaps the reference on
update, so a reader that captured ``snapshot`` never sees a partial update.
Stores are mutated only by the channel handlers registered in ``StoreSet.bind``.
"""

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, TypeVar

from ..logging_config import get_logger
from ..models import (
    ActivityEdge,
    AggregateRecord,
    Frame,
    FrameType,
    InvariantKind,
    MetricRecord,
    Violation,
)
from ..transport import ITransportChannel
from .highlight import HighlightSet

logger = get_logger(__name__)

T = TypeVar("T")

StoreListener = Callable[[tuple], None]


class ReplaceStore(Generic[T]):
    """Holds the latest payload of one frame kind; each update replaces it wholesale."""

    def __init__(self, name: str):
        self._name = name
        self._snapshot: tuple[T, ...] = ()
        self._version = 0
        self._listeners: list[StoreListener] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def snapshot(self) -> tuple[T, ...]:
        return self._snapshot

    @property
    def version(self) -> int:
        return self._version

    def listen(self, listener: StoreListener) -> Callable[[], None]:
        """Call `listener(snapshot)` after every replace. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unlisten() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unlisten

    def replace(self, records: Iterable[T]) -> None:
        self._snapshot = tuple(records)
        self._version += 1
        logger.debug("Store %s replaced (%s records)", self._name, len(self._snapshot))

        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception as e:
                logger.error("Error in %s store listener: %s", self._name, e, exc_info=True)


@dataclass(frozen=True)
class InvariantSnapshot:
    """Arrival-ordered violation logs plus the latched thresholds."""

    logs: dict[InvariantKind, tuple[Violation, ...]] = field(default_factory=dict)
    maxima: dict[InvariantKind, int] = field(default_factory=dict)

    def log(self, kind: InvariantKind) -> tuple[Violation, ...]:
        return self.logs.get(kind, ())

    def max_duration(self, kind: InvariantKind) -> int | None:
        return self.maxima.get(kind)


class InvariantLog:
    """Three append-only violation logs; the first threshold per kind is latched."""

    def __init__(self) -> None:
        self._snapshot = InvariantSnapshot(
            logs={kind: () for kind in InvariantKind}, maxima={}
        )
        self._version = 0

    @property
    def snapshot(self) -> InvariantSnapshot:
        return self._snapshot

    @property
    def version(self) -> int:
        return self._version

    def append(self, violations: Iterable[Violation]) -> None:
        logs = dict(self._snapshot.logs)
        maxima = dict(self._snapshot.maxima)

        added = 0
        for violation in violations:
            logs[violation.kind] = logs[violation.kind] + (violation,)
            maxima.setdefault(violation.kind, violation.max_duration)
            added += 1

        if added:
            self._snapshot = InvariantSnapshot(logs=logs, maxima=maxima)
            self._version += 1


class StoreSet:
    """All per-kind stores of a session."""

    def __init__(self) -> None:
        self.activity: ReplaceStore[ActivityEdge] = ReplaceStore("activity")
        self.aggregates: ReplaceStore[AggregateRecord] = ReplaceStore("aggregates")
        self.metrics: ReplaceStore[MetricRecord] = ReplaceStore("metrics")
        self.invariants = InvariantLog()
        self._highlights = HighlightSet()
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def highlights(self) -> HighlightSet:
        return self._highlights

    def renew_highlights(self) -> None:
        """Start a fresh, empty highlight set (new connection)."""
        self._highlights = HighlightSet()

    def bind(self, channel: ITransportChannel) -> None:
        """Register one long-lived subscription per frame kind."""
        if self._unsubscribers:
            return
        handlers = {
            FrameType.PAG: self._on_pag,
            FrameType.AGG: self._on_agg,
            FrameType.ALL: self._on_all,
            FrameType.MET: self._on_met,
            FrameType.INV: self._on_inv,
        }
        for frame_type, handler in handlers.items():
            self._unsubscribers.append(channel.subscribe(frame_type, handler))

    def unbind(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def _on_pag(self, frame: Frame) -> None:
        self.activity.replace(frame.payload)

    def _on_agg(self, frame: Frame) -> None:
        self.aggregates.replace(frame.payload)

    def _on_all(self, frame: Frame) -> None:
        self._highlights.update(frame.payload)

    def _on_met(self, frame: Frame) -> None:
        self.metrics.replace(frame.payload)

    def _on_inv(self, frame: Frame) -> None:
        self.invariants.append(frame.payload)
