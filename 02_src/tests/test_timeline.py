"""Tests for the timeline coordinate mapper."""

import pytest

from st2dash.models import ActivityKind
from st2dash.stores import ReplaceStore
from st2dash.timeline import IDENTITY, LinearScale, TimelineMapper, ZoomTransform
from st2dash.timeline import style

from factories import make_edge

MS = 1_000_000


@pytest.fixture
def edges():
    """Processing 0-10ms on w0, then a DataMessage 10-30ms from w0 to w1."""
    return (
        make_edge(0, 10 * MS, src_w=0, kind=ActivityKind.PROCESSING, operator_id=3, length=16),
        make_edge(10 * MS, 30 * MS, src_w=0, dst_w=1, kind=ActivityKind.DATA_MESSAGE),
    )


@pytest.fixture
def mapper():
    """Pixel range (10, 1010)."""
    return TimelineMapper(width=1040)


class TestLinearScale:
    def test_maps_and_inverts(self):
        scale = LinearScale(domain=(0, 30), range=(10, 1010))

        assert scale(15) == pytest.approx(510)
        assert scale.invert(510) == pytest.approx(15)

    def test_degenerate_domain_maps_to_midpoint(self):
        scale = LinearScale(domain=(5, 5), range=(10, 1010))
        assert scale(5) == 510


class TestZoomTransform:
    def test_identity_rescale(self):
        scale = LinearScale(domain=(0, 30), range=(10, 1010))
        assert IDENTITY.rescale(scale).domain == pytest.approx((0, 30))

    def test_scale_by_keeps_anchor_fixed(self):
        t = IDENTITY.scale_by(4, anchor=300, k_min=1, k_max=512)

        assert t.k == 4
        assert t.apply(300) == pytest.approx(300)

    def test_scale_by_clamps(self):
        assert IDENTITY.scale_by(0.1, 0, 1, 512).k == 1
        assert IDENTITY.scale_by(10_000, 0, 1, 512).k == 512

    def test_translate(self):
        assert ZoomTransform(2, 5).translate_by(10) == ZoomTransform(2, 15)


class TestTimelineLayout:
    """Tests for edge geometry."""

    def test_domain_spans_first_start_to_last_end(self, mapper, edges):
        layout = mapper.layout(edges, frozenset(), True)

        assert layout.domain == pytest.approx((0, 30))

    def test_same_worker_edge_is_solid(self, mapper, edges):
        first = mapper.layout(edges, frozenset(), True).edges[0]

        assert first.dash == style.SOLID
        assert first.width == 2.0
        assert first.color == ActivityKind.PROCESSING.color
        assert (first.x1, first.x2) == pytest.approx((10, 10 + 1000 / 3))
        assert first.y1 == first.y2 == 100

    def test_cross_worker_edge_is_dashed(self, mapper, edges):
        second = mapper.layout(edges, frozenset(), True).edges[1]

        assert second.dash == style.DASHED
        assert second.width == 1.5
        assert (second.y1, second.y2) == (100, 200)
        assert second.x2 == pytest.approx(1010)

    def test_label_position(self, mapper, edges):
        first = mapper.layout(edges, frozenset(), True).edges[0]

        assert first.label_x == pytest.approx(10 + 500 / 3 - 30)
        assert first.label_y == 90

    def test_labels(self, edges):
        assert style.label(edges[0]) == "Processing Op3 (16)"
        assert style.label(edges[1]) == "DataMessage "

    def test_no_edges(self, mapper):
        layout = mapper.layout((), frozenset(), True)

        assert layout.domain is None
        assert layout.edges == []

    def test_single_instant_edge(self, mapper):
        """Zero-length domain puts both ends at the range midpoint."""
        layout = mapper.layout((make_edge(5 * MS, 5 * MS),), frozenset(), True)

        (edge,) = layout.edges
        assert edge.x1 == edge.x2 == 510


class TestHighlightOpacity:
    """Tests for the opacity rule."""

    def test_highlighted_edges_stay_opaque(self, mapper, edges):
        highlights = frozenset({edges[0].correlation_key})

        first, second = mapper.layout(edges, highlights, True).edges

        assert first.opacity == 1.0
        assert second.opacity == style.DIMMED_OPACITY

    def test_highlight_toggle_off(self, mapper, edges):
        highlights = frozenset({edges[0].correlation_key})

        layout = mapper.layout(edges, highlights, False)

        assert [e.opacity for e in layout.edges] == [1.0, 1.0]

    def test_empty_set_dims_nothing(self, mapper, edges):
        layout = mapper.layout(edges, frozenset(), True)

        assert [e.opacity for e in layout.edges] == [1.0, 1.0]


class TestZoomPan:
    """Tests for pan/zoom interaction."""

    def test_zoom_around_left_edge(self, mapper, edges):
        mapper.zoom(2, anchor=10)

        assert mapper.layout(edges, frozenset(), True).domain == pytest.approx((0, 15))

    def test_zoom_defaults_to_centre(self, mapper, edges):
        mapper.zoom(2)

        assert mapper.layout(edges, frozenset(), True).domain == pytest.approx((7.5, 22.5))

    def test_zoom_clamped_to_extent(self, mapper):
        assert mapper.zoom(0.5).k == 1
        assert mapper.zoom(1e6).k == 512

    def test_pan(self, mapper, edges):
        mapper.pan(100)

        assert mapper.layout(edges, frozenset(), True).domain == pytest.approx((-3, 27))

    def test_invalid_zoom_factor(self, mapper):
        with pytest.raises(ValueError):
            mapper.zoom(0)

    def test_set_transform_clamps(self, mapper):
        assert mapper.set_transform(1000, 5) == ZoomTransform(512, 5)

    def test_resize_keeps_transform(self, mapper, edges):
        mapper.zoom(2, anchor=10)

        mapper.resize(2040)

        assert mapper.transform.k == 2
        assert mapper.pixel_range == (10, 2010)

    def test_resize_rejects_non_positive(self, mapper):
        with pytest.raises(ValueError):
            mapper.resize(0)

    def test_reset(self, mapper):
        mapper.zoom(4)
        mapper.reset()

        assert mapper.transform == IDENTITY

    def test_new_edge_sequence_resets_transform(self, mapper, edges):
        store = ReplaceStore("activity")
        mapper.bind(store)
        mapper.zoom(8)
        mapper.pan(50)

        store.replace(edges)

        assert mapper.transform == IDENTITY

    def test_unbind(self, mapper, edges):
        store = ReplaceStore("activity")
        unbind = mapper.bind(store)
        mapper.zoom(8)

        unbind()
        store.replace(edges)

        assert mapper.transform.k == 8
