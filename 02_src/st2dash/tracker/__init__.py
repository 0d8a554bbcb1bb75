"""Tracker module."""

from .tracker import FrameStats, ITracker, Tracker, TrackerSnapshot

__all__ = ["Tracker", "ITracker", "FrameStats", "TrackerSnapshot"]
