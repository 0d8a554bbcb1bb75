"""Timeline coordinate mapper: edge timestamps -> pixels under pan/zoom."""

from dataclasses import dataclass
from typing import AbstractSet, Callable, Sequence

from ..logging_config import get_logger
from ..models import ActivityEdge
from ..stores import ReplaceStore
from . import style
from .scale import IDENTITY, LinearScale, ZoomTransform

logger = get_logger(__name__)

NANOS_PER_MS = 1_000_000
ROW_HEIGHT = 100
LABEL_OFFSET_X = 30
LABEL_OFFSET_Y = 10
SCALE_EXTENT = (1.0, 512.0)


@dataclass(frozen=True)
class Margins:
    left: float = 10
    top: float = 10
    right: float = 30


@dataclass(frozen=True)
class EdgeGeometry:
    """Everything the renderer needs to draw one edge and its label."""

    x1: float
    y1: float
    x2: float
    y2: float
    label_x: float
    label_y: float
    color: str
    width: float
    dash: str
    opacity: float
    label: str
    tooltip: str


@dataclass(frozen=True)
class TimelineLayout:
    """Rendered timeline: visible domain (ms), axis offset and edge geometry."""

    domain: tuple[float, float] | None
    axis_y: float
    width: float
    transform: ZoomTransform
    edges: list[EdgeGeometry]


def worker_y(worker: int) -> float:
    return ROW_HEIGHT * (1 + worker)


class TimelineMapper:
    """Owns the timeline's pan/zoom transform and viewport geometry."""

    def __init__(
        self,
        width: float = 1280.0,
        margins: Margins = Margins(),
        scale_extent: tuple[float, float] = SCALE_EXTENT,
    ):
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        self._width = width
        self._margins = margins
        self._k_min, self._k_max = scale_extent
        self._transform = IDENTITY

    @property
    def width(self) -> float:
        return self._width

    @property
    def transform(self) -> ZoomTransform:
        return self._transform

    def bind(self, store: ReplaceStore[ActivityEdge]) -> Callable[[], None]:
        """Reset the transform whenever the store's edge sequence is replaced."""
        return store.listen(lambda _edges: self.reset())

    def reset(self) -> None:
        self._transform = IDENTITY
        logger.debug("Timeline transform reset")

    def resize(self, width: float) -> None:
        """Change the viewport width. The pan/zoom transform is kept."""
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        self._width = width

    def zoom(self, factor: float, anchor: float | None = None) -> ZoomTransform:
        if factor <= 0:
            raise ValueError(f"zoom factor must be positive, got {factor}")
        if anchor is None:
            r0, r1 = self.pixel_range
            anchor = (r0 + r1) / 2
        self._transform = self._transform.scale_by(factor, anchor, self._k_min, self._k_max)
        return self._transform

    def pan(self, dx: float) -> ZoomTransform:
        self._transform = self._transform.translate_by(dx)
        return self._transform

    def set_transform(self, k: float, x: float) -> ZoomTransform:
        k = min(max(k, self._k_min), self._k_max)
        self._transform = ZoomTransform(k=k, x=x)
        return self._transform

    @property
    def pixel_range(self) -> tuple[float, float]:
        return (self._margins.left, self._width - self._margins.right)

    def base_scale(self, edges: Sequence[ActivityEdge]) -> LinearScale | None:
        """First edge's start to last edge's end, in milliseconds."""
        if not edges:
            return None
        domain = (
            edges[0].src.timestamp / NANOS_PER_MS,
            edges[-1].dst.timestamp / NANOS_PER_MS,
        )
        return LinearScale(domain=domain, range=self.pixel_range)

    def effective_scale(self, edges: Sequence[ActivityEdge]) -> LinearScale | None:
        base = self.base_scale(edges)
        if base is None:
            return None
        return self._transform.rescale(base)

    def layout(
        self,
        edges: Sequence[ActivityEdge],
        highlights: AbstractSet[str],
        highlight_enabled: bool,
    ) -> TimelineLayout:
        xt = self.effective_scale(edges)
        if xt is None:
            return TimelineLayout(
                domain=None,
                axis_y=self._margins.top,
                width=self._width,
                transform=self._transform,
                edges=[],
            )

        geometry = []
        for edge in edges:
            y1 = worker_y(edge.src.worker)
            y2 = worker_y(edge.dst.worker)
            mid = (edge.src.timestamp + edge.dst.timestamp) / (2 * NANOS_PER_MS)
            geometry.append(
                EdgeGeometry(
                    x1=xt(edge.src.timestamp / NANOS_PER_MS),
                    y1=y1,
                    x2=xt(edge.dst.timestamp / NANOS_PER_MS),
                    y2=y2,
                    label_x=xt(mid) - LABEL_OFFSET_X,
                    label_y=(y1 + y2) / 2 - LABEL_OFFSET_Y,
                    color=style.stroke_color(edge),
                    width=style.stroke_width(edge),
                    dash=style.dash_array(edge),
                    opacity=style.opacity(edge, highlights, highlight_enabled),
                    label=style.label(edge),
                    tooltip=style.tooltip(edge),
                )
            )

        return TimelineLayout(
            domain=xt.domain,
            axis_y=self._margins.top,
            width=self._width,
            transform=self._transform,
            edges=geometry,
        )
