"""Tests for the wire codec."""

import json

import pytest

from st2dash.models import (
    ActivityKind,
    EpochViolation,
    FrameType,
    InvariantKind,
    MessageViolation,
    OperatorViolation,
    Request,
    TraversalKind,
)
from st2dash.transport import FrameError, decode_frame, encode_request

from factories import (
    aggregate_json,
    edge_json,
    epoch_violation_json,
    frame,
    message_violation_json,
    metric_json,
    operator_violation_json,
)


class TestEncodeRequest:
    """Tests for outbound requests."""

    def test_epoch_request(self):
        assert json.loads(encode_request(Request(FrameType.ALL, 7))) == {"type": "ALL", "epoch": 7}

    def test_inv_request(self):
        assert json.loads(encode_request(Request(FrameType.INV))) == {"type": "INV"}


class TestDecodePag:
    """Tests for PAG frames."""

    def test_decodes_edges_in_order(self):
        raw = frame("PAG", [edge_json(0, 10, o=4, l=16), edge_json(5, 30, 0, 1, kind="DataMessage")])

        decoded = decode_frame(raw)

        assert decoded.type is FrameType.PAG
        assert len(decoded.payload) == 2
        first, second = decoded.payload
        assert first.kind is ActivityKind.PROCESSING
        assert first.operator_id == 4
        assert first.length == 16
        assert first.traversal is TraversalKind.UNBOUNDED
        assert (first.src.timestamp, first.dst.timestamp) == (0, 10)
        assert second.cross_worker is True

    def test_optional_fields_default(self):
        """Missing operator/length/traversal decode as 0/0/Undefined."""
        entry = {"src": {"t": 1, "w": 0}, "dst": {"t": 2, "w": 0}, "type": "Spinning"}

        (edge,) = decode_frame(frame("PAG", [entry])).payload

        assert edge.operator_id == 0
        assert edge.length == 0
        assert edge.traversal is TraversalKind.UNDEFINED
        assert edge.src.epoch == 0

    def test_empty_payload(self):
        assert decode_frame(frame("PAG", [])).payload == ()

    def test_edge_ending_before_start_rejected(self):
        with pytest.raises(FrameError) as exc:
            decode_frame(frame("PAG", [edge_json(20, 10)]))
        assert exc.value.reason == FrameError.BAD_PAYLOAD
        assert exc.value.frame_type is FrameType.PAG

    def test_unknown_activity_kind_rejected(self):
        with pytest.raises(FrameError) as exc:
            decode_frame(frame("PAG", [edge_json(0, 1, kind="Sleeping")]))
        assert exc.value.reason == FrameError.BAD_PAYLOAD

    def test_one_bad_entry_rejects_whole_frame(self):
        raw = frame("PAG", [edge_json(0, 1), {"src": {"t": "x", "w": 0}}])
        with pytest.raises(FrameError):
            decode_frame(raw)


class TestDecodeAgg:
    """Tests for AGG frames."""

    def test_decodes_aggregates(self):
        (record,) = decode_frame(frame("AGG", [aggregate_json("Busy", 1, 5, 9)])).payload

        assert record.activity_type is ActivityKind.BUSY
        assert record.worker == 1
        assert record.count == 5
        assert record.weighted_count == 9

    def test_missing_field_rejected(self):
        with pytest.raises(FrameError):
            decode_frame(frame("AGG", [{"a": "Processing", "wf": 0, "ac": 1}]))

    def test_boolean_is_not_an_integer(self):
        with pytest.raises(FrameError):
            decode_frame(frame("AGG", [aggregate_json(ac=True)]))


class TestDecodeAll:
    """Tests for ALL frames."""

    def test_decodes_pairs(self):
        decoded = decode_frame(frame("ALL", [[1, 2], [3, 4]]))
        assert decoded.payload == ((1, 2), (3, 4))

    def test_wrong_arity_rejected(self):
        with pytest.raises(FrameError):
            decode_frame(frame("ALL", [[1, 2, 3]]))

    def test_non_integer_rejected(self):
        with pytest.raises(FrameError):
            decode_frame(frame("ALL", [["1", 2]]))


class TestDecodeMet:
    """Tests for MET frames."""

    def test_local_metric(self):
        (record,) = decode_frame(frame("MET", [metric_json("Processing", 0, None, 3, 900, 12)])).payload

        assert record.worker_to is None
        assert record.activity_count == 3
        assert record.activity_time == 900
        assert record.record_count == 12

    def test_message_metric(self):
        (record,) = decode_frame(frame("MET", [metric_json("DataMessage", 0, 1)])).payload
        assert (record.worker_from, record.worker_to) == (0, 1)

    def test_worker_to_may_be_absent(self):
        entry = metric_json()
        del entry["wt"]
        (record,) = decode_frame(frame("MET", [entry])).payload
        assert record.worker_to is None


class TestDecodeInv:
    """Tests for INV frames."""

    def test_epoch_violation(self):
        (v,) = decode_frame(frame("INV", [epoch_violation_json(12_000_000, 1_000_000_000, 1_015_000_000, 3)])).payload

        assert isinstance(v, EpochViolation)
        assert v.kind is InvariantKind.EPOCH
        assert v.max_duration == 12_000_000
        assert v.start.timestamp == 1_000_000_000
        assert v.start.epoch == 3
        assert v.duration == 15_000_000

    def test_operator_violation(self):
        (v,) = decode_frame(frame("INV", [operator_violation_json(2_000_000, 100, 3_100_000, operator_id=7)])).payload

        assert isinstance(v, OperatorViolation)
        assert v.first.operator_id == 7
        assert v.first.kind is ActivityKind.PROCESSING
        assert v.duration == 3_000_000

    def test_message_violation(self):
        (v,) = decode_frame(frame("INV", [message_violation_json(1_000_000, 0, 1_500_000)])).payload

        assert isinstance(v, MessageViolation)
        assert v.message.operator_id is None
        assert v.message.source.worker == 0
        assert v.message.destination.worker == 1
        assert v.duration == 1_500_000

    def test_plain_integer_timestamps(self):
        entry = {"Epoch": {
            "max": 1,
            "from": {"timestamp": 10, "worker_id": 0, "epoch": 1},
            "to": {"timestamp": 30, "worker_id": 0, "epoch": 1},
        }}
        (v,) = decode_frame(frame("INV", [entry])).payload
        assert v.duration == 20
        assert v.start.seq_no == 0

    def test_unknown_invariant_rejected(self):
        with pytest.raises(FrameError):
            decode_frame(frame("INV", [{"Progress": {"max": 1}}]))

    def test_multiple_tags_rejected(self):
        entry = {**epoch_violation_json(1, 0, 1), **message_violation_json(1, 0, 1)}
        with pytest.raises(FrameError):
            decode_frame(frame("INV", [entry]))


class TestDecodeErrors:
    """Tests for frame-level errors."""

    def test_malformed_json(self):
        with pytest.raises(FrameError) as exc:
            decode_frame("{not json")
        assert exc.value.reason == FrameError.MALFORMED
        assert exc.value.frame_type is None

    def test_non_object(self):
        with pytest.raises(FrameError) as exc:
            decode_frame("[1, 2]")
        assert exc.value.reason == FrameError.MALFORMED

    def test_unknown_type(self):
        with pytest.raises(FrameError) as exc:
            decode_frame(frame("XYZ", []))
        assert exc.value.reason == FrameError.UNKNOWN_TYPE

    def test_payload_not_a_list(self):
        with pytest.raises(FrameError) as exc:
            decode_frame(json.dumps({"type": "MET", "payload": {}}))
        assert exc.value.reason == FrameError.BAD_PAYLOAD
        assert exc.value.frame_type is FrameType.MET

    def test_bytes_accepted(self):
        assert decode_frame(frame("ALL", [[1, 2]]).encode()).payload == ((1, 2),)

    def test_frame_error_is_value_error(self):
        assert issubclass(FrameError, ValueError)
