"""Tests for invariant log rendering."""

from st2dash.models import InvariantKind
from st2dash.projections import invariant_panels
from st2dash.projections.invariants import NO_VIOLATIONS, to_ms
from st2dash.stores import InvariantLog
from st2dash.transport import decode_frame

from factories import (
    epoch_violation_json,
    frame,
    message_violation_json,
    operator_violation_json,
)


def log_with(*violations):
    log = InvariantLog()
    log.append(decode_frame(frame("INV", list(violations))).payload)
    return log


def panel(panels, kind):
    return next(p for p in panels if p.kind is kind)


class TestToMs:
    def test_whole_milliseconds(self):
        assert to_ms(12_000_000) == "12"

    def test_fractional_milliseconds(self):
        assert to_ms(9_999_999) == "9.999999"
        assert to_ms(1_500_000) == "1.5"


class TestInvariantPanels:
    """Tests for the rendered violation logs."""

    def test_empty_logs(self):
        panels = invariant_panels(InvariantLog().snapshot)

        assert [p.kind for p in panels] == list(InvariantKind)
        for p in panels:
            assert p.lines == []
            assert p.text == NO_VIOLATIONS
            assert p.max_ms is None

    def test_title_carries_latched_max(self):
        log = log_with(
            epoch_violation_json(12_000_000, 0, 20_000_000),
            epoch_violation_json(9_999_999, 0, 15_000_000),
        )

        epoch = panel(invariant_panels(log.snapshot), InvariantKind.EPOCH)

        assert epoch.max_ms == "12"
        assert epoch.title == "Epoch Duration (max: 12ms)"

    def test_lines_sorted_longest_first(self):
        log = log_with(
            epoch_violation_json(1, 0, 15_000_000, epoch=1),
            epoch_violation_json(1, 0, 30_000_000, epoch=2),
            epoch_violation_json(1, 0, 20_000_000, epoch=3),
        )

        epoch = panel(invariant_panels(log.snapshot), InvariantKind.EPOCH)

        assert epoch.lines == [
            "Epoch 2 took 30.00ms.",
            "Epoch 3 took 20.00ms.",
            "Epoch 1 took 15.00ms.",
        ]
        # the stored log stays in arrival order
        assert [v.start.epoch for v in log.snapshot.log(InvariantKind.EPOCH)] == [1, 2, 3]

    def test_operator_line(self):
        log = log_with(operator_violation_json(2_000_000, 1_000, 3_501_000, worker=1, operator_id=7))

        (line,) = panel(invariant_panels(log.snapshot), InvariantKind.OPERATOR).lines

        assert line == "Epoch 1 | w1 @ 1000: Operator 7 (Processing) took 3.50ms."

    def test_message_line(self):
        log = log_with(message_violation_json(1_000_000, 10, 2_000_010, src_w=0, dst_w=1))

        message = panel(invariant_panels(log.snapshot), InvariantKind.MESSAGE)

        assert message.lines == ["Epoch 1 | w0 @ 10 -> w1 @ 2000010: DataMessage took 2.00ms."]
        assert message.text == message.lines[0]
        assert message.title == "Message Duration (max: 1ms)"
