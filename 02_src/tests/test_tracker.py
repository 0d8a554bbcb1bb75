"""Tests for Tracker."""

from st2dash.models import FrameType
from st2dash.tracker import Tracker
from st2dash.transport import FrameError

from factories import aggregate_json, edge_json, frame


class TestTrackerFrames:
    """Tests for delivered frame counters."""

    def test_counts_frames_and_entries(self, channel, tracker):
        channel.dispatch(frame("PAG", [edge_json(0, 1), edge_json(1, 2)]))
        channel.dispatch(frame("PAG", [edge_json(2, 3)]))

        stats = tracker.snapshot().frames[FrameType.PAG]
        assert stats.received == 2
        assert stats.entries == 3
        assert stats.last_received is not None

    def test_untouched_types_stay_zero(self, channel, tracker):
        channel.dispatch(frame("AGG", [aggregate_json()]))

        snapshot = tracker.snapshot()
        assert snapshot.frames[FrameType.AGG].received == 1
        assert snapshot.frames[FrameType.INV].received == 0
        assert snapshot.frames[FrameType.INV].last_received is None

    def test_snapshot_is_a_copy(self, channel, tracker):
        before = tracker.snapshot()
        channel.dispatch(frame("MET", []))

        assert before.frames[FrameType.MET].received == 0
        assert tracker.snapshot().frames[FrameType.MET].received == 1

    def test_start_twice_subscribes_once(self, channel):
        tr = Tracker(channel)
        tr.start()
        tr.start()

        channel.dispatch(frame("MET", []))

        assert tr.snapshot().frames[FrameType.MET].received == 1

    def test_stop_unsubscribes(self, channel, tracker):
        tracker.stop()
        channel.dispatch(frame("MET", []))

        assert tracker.snapshot().frames[FrameType.MET].received == 0


class TestTrackerDrops:
    """Tests for dropped frame counters."""

    def test_record_drop_by_reason(self, tracker):
        tracker.record_drop(FrameError(FrameError.MALFORMED, "x"))
        tracker.record_drop(FrameError(FrameError.MALFORMED, "y"))
        tracker.record_drop(FrameError(FrameError.BAD_PAYLOAD, "z", FrameType.PAG))

        assert tracker.snapshot().dropped == {
            FrameError.MALFORMED: 2,
            FrameError.BAD_PAYLOAD: 1,
        }

    def test_channel_drops_reach_tracker(self, channel, tracker):
        channel.on_drop(tracker.record_drop)

        channel.dispatch("{")
        channel.dispatch(frame("NOPE", []))

        assert tracker.snapshot().dropped == {
            FrameError.MALFORMED: 1,
            FrameError.UNKNOWN_TYPE: 1,
        }
