"""Generic filter + group reducer shared by every chart projection."""

from typing import Any, Iterable, Mapping

ALL_WORKERS = "all"

# Fields naming a worker (or worker pair); collapsed to ALL_WORKERS when grouping
WORKER_FIELDS = ("worker", "worker_from", "worker_to", "worker_pair")

Row = Mapping[str, Any]


def keep_row(row: Row, show_waiting: bool) -> bool:
    """False for Waiting/Busy rows while the show-waiting toggle is off."""
    return show_waiting or not row["activity_type"].is_idle


def reduce_rows(
    rows: Iterable[Row],
    value_field: str,
    show_waiting: bool,
    split_worker: bool,
    group_key_field: str = "activity_type",
) -> list[dict[str, Any]]:
    """
    Filter rows and optionally fold them per group key.

    Args:
        rows: Chart rows; each carries an ``activity_type`` ActivityKind.
        value_field: Field summed when folding.
        show_waiting: Keep Waiting/Busy rows.
        split_worker: Keep per-worker rows instead of folding.
        group_key_field: Field whose value identifies a group.

    Returns:
        The filtered rows when ``split_worker`` is set, otherwise one row per
        group in order of first appearance, with worker fields set to "all".
    """
    filtered = [dict(row) for row in rows if keep_row(row, show_waiting)]

    if split_worker:
        return filtered

    groups: dict[Any, dict[str, Any]] = {}
    for row in filtered:
        key = row[group_key_field]
        group = groups.get(key)
        if group is None:
            group = {group_key_field: key, value_field: row[value_field]}
            for worker_field in WORKER_FIELDS:
                if worker_field in row:
                    group[worker_field] = ALL_WORKERS
            groups[key] = group
        else:
            group[value_field] += row[value_field]

    return list(groups.values())
