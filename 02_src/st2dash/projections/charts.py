"""Chart projections: store snapshot -> chart rows."""

from dataclasses import dataclass
from typing import Any, Callable

from ..models import ActivityKind, AggregateRecord, MetricRecord, ViewOptions
from ..stores import StoreSet
from .reducer import reduce_rows


def aggregate_row(record: AggregateRecord) -> dict[str, Any]:
    return {
        "activity_type": record.activity_type,
        "worker": record.worker,
        "count": record.count,
        "weighted_count": record.weighted_count,
    }


def metric_row(record: MetricRecord) -> dict[str, Any]:
    return {
        "activity_type": record.activity_type,
        "worker_from": record.worker_from,
        "worker_to": record.worker_to,
        "activity_count": record.activity_count,
        "activity_time": record.activity_time,
        "record_count": record.record_count,
    }


def metric_pair_row(record: MetricRecord) -> dict[str, Any]:
    row = metric_row(record)
    row["worker_pair"] = (record.worker_from, record.worker_to)
    return row


@dataclass(frozen=True)
class ChartProjection:
    """Parameters of one chart fed by the generic reducer."""

    name: str
    title: str
    source: str  # StoreSet attribute holding the records
    to_row: Callable[[Any], dict[str, Any]]
    value_field: str
    kinds: frozenset[ActivityKind] | None = None
    group_key_field: str = "activity_type"

    def rows(self, stores: StoreSet, view: ViewOptions) -> list[dict[str, Any]]:
        """Project the store's current snapshot under the given view options."""
        snapshot = getattr(stores, self.source).snapshot
        rows = [
            self.to_row(record)
            for record in snapshot
            if self.kinds is None or record.activity_type in self.kinds
        ]
        return reduce_rows(
            rows,
            value_field=self.value_field,
            show_waiting=view.show_waiting,
            split_worker=view.split_worker,
            group_key_field=self.group_key_field,
        )


_MESSAGES = frozenset({ActivityKind.CONTROL_MESSAGE, ActivityKind.DATA_MESSAGE})

PROJECTIONS: dict[str, ChartProjection] = {
    p.name: p
    for p in (
        ChartProjection(
            "khop_count", "K-Hops (unweighted)", "aggregates", aggregate_row, "count"
        ),
        ChartProjection(
            "khop_weighted", "K-Hops (weighted)", "aggregates", aggregate_row, "weighted_count"
        ),
        ChartProjection(
            "activity_count", "Activity Count", "metrics", metric_row, "activity_count"
        ),
        ChartProjection(
            "activity_duration", "Activity Duration (ns)", "metrics", metric_row, "activity_time"
        ),
        ChartProjection(
            "message_count",
            "Messages Count",
            "metrics",
            metric_pair_row,
            "activity_count",
            kinds=_MESSAGES,
        ),
        ChartProjection(
            "message_duration",
            "Messages Duration (ns)",
            "metrics",
            metric_pair_row,
            "activity_time",
            kinds=_MESSAGES,
        ),
        ChartProjection(
            "records_sent",
            "Records Sent",
            "metrics",
            metric_pair_row,
            "record_count",
            kinds=frozenset({ActivityKind.DATA_MESSAGE}),
        ),
        ChartProjection(
            "records_processed",
            "Records Processed",
            "metrics",
            metric_row,
            "record_count",
            kinds=frozenset({ActivityKind.PROCESSING}),
        ),
    )
}


def get_projection(name: str) -> ChartProjection:
    """Look up a chart projection. Raises KeyError for unknown names."""
    return PROJECTIONS[name]
