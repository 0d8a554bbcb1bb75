"""Transport module."""

from .channel import FrameHandler, ITransportChannel, TransportChannel
from .codec import FrameError, decode_frame, encode_request

__all__ = [
    "TransportChannel",
    "ITransportChannel",
    "FrameHandler",
    "FrameError",
    "decode_frame",
    "encode_request",
]
