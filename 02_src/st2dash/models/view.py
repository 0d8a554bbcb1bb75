"""View state models."""

from dataclasses import dataclass


@dataclass
class ViewOptions:
    """Toggles shared by every projection."""

    show_waiting: bool = True
    split_worker: bool = False
    highlight: bool = True
