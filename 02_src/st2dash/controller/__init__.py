"""Controller module."""

from .controller import EpochController, IEpochController, parse_epoch

__all__ = ["EpochController", "IEpochController", "parse_epoch"]
