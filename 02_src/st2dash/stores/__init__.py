"""Stores module."""

from .highlight import HighlightSet, correlation_key
from .stores import InvariantLog, InvariantSnapshot, ReplaceStore, StoreSet

__all__ = [
    "StoreSet",
    "ReplaceStore",
    "InvariantLog",
    "InvariantSnapshot",
    "HighlightSet",
    "correlation_key",
]
