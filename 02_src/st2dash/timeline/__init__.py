"""Timeline module."""

from .mapper import EdgeGeometry, Margins, TimelineLayout, TimelineMapper
from .scale import IDENTITY, LinearScale, ZoomTransform

__all__ = [
    "TimelineMapper",
    "TimelineLayout",
    "EdgeGeometry",
    "Margins",
    "LinearScale",
    "ZoomTransform",
    "IDENTITY",
]
