"""JSON codec for the backend wire protocol.

Outbound requests are ``{"type": ..., "epoch": ...}`` objects. Inbound frames
are ``{"type": ..., "payload": [...]}`` objects whose payload entries use the
backend's short field names (``wf``, ``ac``, ``src.t`` ...). Decoding happens
once here; everything downstream works with the typed records from
``st2dash.models``.
"""

import json
from typing import Any, Callable

from ..models import (
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
    PagEdge,
    PagNode,
    Request,
    TraversalKind,
    Violation,
)

NANOS_PER_SEC = 1_000_000_000


class FrameError(ValueError):
    """An inbound frame that cannot be decoded."""

    MALFORMED = "malformed_json"
    UNKNOWN_TYPE = "unknown_type"
    BAD_PAYLOAD = "bad_payload"

    def __init__(self, reason: str, detail: str, frame_type: FrameType | None = None):
        super().__init__(f"{reason}: {detail}")
        self.reason = reason
        self.detail = detail
        self.frame_type = frame_type


class _ShapeError(Exception):
    """Payload entry does not match the expected shape."""


def encode_request(request: Request) -> str:
    """Serialize a request for the wire."""
    return json.dumps(request.to_wire())


def _int(obj: dict, key: str, default: int | None = None, nullable: bool = False) -> Any:
    if key not in obj:
        if default is not None:
            return default
        raise _ShapeError(f"missing field {key!r}")
    value = obj[key]
    if value is None:
        if nullable:
            return None
        if default is not None:
            return default
        raise _ShapeError(f"field {key!r} is null")
    if isinstance(value, bool) or not isinstance(value, int):
        raise _ShapeError(f"field {key!r} must be an integer, got {value!r}")
    return value


def _obj(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise _ShapeError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _activity_kind(value: Any) -> ActivityKind:
    try:
        return ActivityKind(value)
    except ValueError:
        raise _ShapeError(f"unknown activity type {value!r}") from None


def _traversal(value: Any) -> TraversalKind:
    if value is None:
        return TraversalKind.UNDEFINED
    try:
        return TraversalKind(value)
    except ValueError:
        raise _ShapeError(f"unknown traversal {value!r}") from None


def _timestamp(value: Any) -> int:
    # Invariant payloads carry std::time::Duration as {secs, nanos}
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    ts = _obj(value, "timestamp")
    return _int(ts, "secs") * NANOS_PER_SEC + _int(ts, "nanos")


# --- PAG / AGG / ALL / MET ---------------------------------------------------


def _endpoint(value: Any) -> Endpoint:
    ep = _obj(value, "endpoint")
    return Endpoint(worker=_int(ep, "w"), timestamp=_int(ep, "t"), epoch=_int(ep, "e", default=0))


def decode_edge(entry: Any) -> ActivityEdge:
    entry = _obj(entry, "edge")
    edge = ActivityEdge(
        kind=_activity_kind(entry.get("type")),
        operator_id=_int(entry, "o", default=0),
        length=_int(entry, "l", default=0),
        traversal=_traversal(entry.get("tr")),
        src=_endpoint(entry.get("src")),
        dst=_endpoint(entry.get("dst")),
    )
    if edge.src.timestamp > edge.dst.timestamp:
        raise _ShapeError(
            f"edge ends before it starts ({edge.src.timestamp} > {edge.dst.timestamp})"
        )
    return edge


def decode_aggregate(entry: Any) -> AggregateRecord:
    entry = _obj(entry, "aggregate")
    return AggregateRecord(
        activity_type=_activity_kind(entry.get("a")),
        worker=_int(entry, "wf"),
        count=_int(entry, "ac"),
        weighted_count=_int(entry, "wac"),
    )


def decode_pair(entry: Any) -> tuple[int, int]:
    if not isinstance(entry, (list, tuple)) or len(entry) != 2:
        raise _ShapeError(f"highlight entry must be a [src, dst] pair, got {entry!r}")
    src, dst = entry
    for value in (src, dst):
        if isinstance(value, bool) or not isinstance(value, int):
            raise _ShapeError(f"highlight timestamps must be integers, got {entry!r}")
    return src, dst


def decode_metric(entry: Any) -> MetricRecord:
    entry = _obj(entry, "metric")
    return MetricRecord(
        activity_type=_activity_kind(entry.get("a")),
        worker_from=_int(entry, "wf"),
        worker_to=_int(entry, "wt", nullable=True) if "wt" in entry else None,
        activity_count=_int(entry, "ac"),
        activity_time=_int(entry, "at"),
        record_count=_int(entry, "rc"),
    )


# --- INV ---------------------------------------------------------------------


def _pag_node(value: Any) -> PagNode:
    node = _obj(value, "node")
    return PagNode(
        timestamp=_timestamp(node.get("timestamp")),
        worker=_int(node, "worker_id"),
        epoch=_int(node, "epoch"),
        seq_no=_int(node, "seq_no", default=0),
    )


def _pag_edge(value: Any) -> PagEdge:
    edge = _obj(value, "edge")
    return PagEdge(
        source=_pag_node(edge.get("source")),
        destination=_pag_node(edge.get("destination")),
        kind=_activity_kind(edge.get("edge_type")),
        operator_id=_int(edge, "operator_id", nullable=True) if "operator_id" in edge else None,
        traversal=_traversal(edge.get("traverse")),
        length=_int(edge, "length", nullable=True) if "length" in edge else None,
    )


def decode_violation(entry: Any) -> Violation:
    entry = _obj(entry, "invariant")
    if len(entry) != 1:
        raise _ShapeError(f"invariant entry must have exactly one key, got {sorted(entry)}")
    (tag, body), = entry.items()
    try:
        kind = InvariantKind(tag)
    except ValueError:
        raise _ShapeError(f"unknown invariant kind {tag!r}") from None
    body = _obj(body, tag)

    if kind is InvariantKind.EPOCH:
        return EpochViolation(
            max_duration=_int(body, "max"),
            start=_pag_node(body.get("from")),
            end=_pag_node(body.get("to")),
        )
    if kind is InvariantKind.OPERATOR:
        return OperatorViolation(
            max_duration=_int(body, "max"),
            first=_pag_edge(body.get("from")),
            last=_pag_edge(body.get("to")),
        )
    return MessageViolation(
        max_duration=_int(body, "max"),
        message=_pag_edge(body.get("msg")),
    )


_PAYLOAD_DECODERS: dict[FrameType, Callable[[Any], Any]] = {
    FrameType.PAG: decode_edge,
    FrameType.AGG: decode_aggregate,
    FrameType.ALL: decode_pair,
    FrameType.MET: decode_metric,
    FrameType.INV: decode_violation,
}


def decode_frame(raw: str | bytes) -> Frame:
    """Decode one inbound text frame into a typed Frame.

    Raises:
        FrameError: malformed JSON, unknown frame type or payload shape mismatch.
    """
    try:
        message = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise FrameError(FrameError.MALFORMED, str(e)) from e

    if not isinstance(message, dict):
        raise FrameError(FrameError.MALFORMED, "frame must be a JSON object")

    try:
        frame_type = FrameType(message.get("type"))
    except ValueError:
        raise FrameError(
            FrameError.UNKNOWN_TYPE, f"unknown frame type {message.get('type')!r}"
        ) from None

    payload = message.get("payload")
    if not isinstance(payload, list):
        raise FrameError(
            FrameError.BAD_PAYLOAD, "payload must be a list", frame_type=frame_type
        )

    decode = _PAYLOAD_DECODERS[frame_type]
    try:
        records = tuple(decode(entry) for entry in payload)
    except _ShapeError as e:
        raise FrameError(FrameError.BAD_PAYLOAD, str(e), frame_type=frame_type) from e

    return Frame(type=frame_type, payload=records)
