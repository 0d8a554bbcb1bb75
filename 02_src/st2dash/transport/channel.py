"""Transport channel: one WebSocket connection, demultiplexed by frame type."""

import asyncio
from typing import Any, AsyncContextManager, Awaitable, Callable, Protocol

import websockets
from websockets.exceptions import WebSocketException

from ..logging_config import get_logger
from ..models import Frame, FrameType, Request
from .codec import FrameError, decode_frame, encode_request

logger = get_logger(__name__)


FrameHandler = Callable[[Frame], None]
ConnectCallback = Callable[[], Awaitable[None]]
DropCallback = Callable[[FrameError], None]


class IConnection(Protocol):
    """The subset of a websockets client connection the channel uses."""

    async def send(self, message: str) -> None:
        ...

    def __aiter__(self) -> Any:
        ...


Connector = Callable[[str], AsyncContextManager[IConnection]]


class ITransportChannel(Protocol):
    """Full-duplex request/frame channel to the ST2 backend."""

    def subscribe(self, frame_type: FrameType, handler: FrameHandler) -> Callable[[], None]:
        """Register a handler for one frame type. Returns an unsubscribe callable."""
        ...

    def on_connect(self, callback: ConnectCallback) -> None:
        """Register a callback fired after every successful (re)connection."""
        ...

    async def send(self, request: Request) -> bool:
        """Send a request. Returns False if it was dropped."""
        ...

    def dispatch(self, raw: str | bytes) -> None:
        """Decode one inbound frame and hand it to the subscribed handlers."""
        ...


class TransportChannel:
    """WebSocket transport with per-type demultiplexing and reconnect."""

    def __init__(
        self,
        url: str,
        connect: Connector | None = None,
        max_retries: int | None = 10,
        backoff_base: float = 0.5,
        backoff_max: float = 30.0,
    ):
        self._url = url
        self._connect = connect or websockets.connect
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._backoff_max = backoff_max

        self._subscribers: dict[FrameType, list[FrameHandler]] = {
            frame_type: [] for frame_type in FrameType
        }
        self._connect_callbacks: list[ConnectCallback] = []
        self._drop_callbacks: list[DropCallback] = []

        self._connection: IConnection | None = None
        self._task: asyncio.Task | None = None
        self._running = False
        self._closed = False
        self._connect_count = 0

    @property
    def url(self) -> str:
        return self._url

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @property
    def connect_count(self) -> int:
        return self._connect_count

    @property
    def closed(self) -> bool:
        """True once retries are exhausted or the channel was stopped."""
        return self._closed

    def subscribe(self, frame_type: FrameType, handler: FrameHandler) -> Callable[[], None]:
        """Register a handler for one frame type. Returns an unsubscribe callable."""
        handlers = self._subscribers[frame_type]
        handlers.append(handler)

        def unsubscribe() -> None:
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def on_connect(self, callback: ConnectCallback) -> None:
        """Register a callback fired after every successful (re)connection."""
        self._connect_callbacks.append(callback)

    def on_drop(self, callback: DropCallback) -> None:
        """Register a callback fired for every dropped inbound frame."""
        self._drop_callbacks.append(callback)

    async def send(self, request: Request) -> bool:
        """Send a request. Returns False if it was dropped."""
        connection = self._connection
        if connection is None:
            logger.warning("Dropping %s request: connection not open", request.type.value)
            return False

        try:
            await connection.send(encode_request(request))
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            logger.warning("Failed to send %s request: %s", request.type.value, e)
            return False

        logger.debug("Sent %s", request.to_wire())
        return True

    def dispatch(self, raw: str | bytes) -> None:
        """Decode one inbound frame and hand it to the subscribed handlers."""
        try:
            frame = decode_frame(raw)
        except FrameError as e:
            logger.warning(
                "Dropping inbound frame: %s",
                e,
                extra={"context": {"reason": e.reason, "frame_type": e.frame_type}},
            )
            for callback in self._drop_callbacks:
                try:
                    callback(e)
                except Exception as cb_error:
                    logger.error("Error in drop callback: %s", cb_error, exc_info=True)
            return

        # Handlers run in registration order; each store sees its frames in receipt order
        for i, handler in enumerate(list(self._subscribers[frame.type])):
            try:
                handler(frame)
            except Exception as e:
                logger.error(
                    "Error in %s handler %s: %s", frame.type.value, i, e, exc_info=True
                )

    async def start(self) -> None:
        """Start the receive loop in the background."""
        if self._running:
            return

        self._running = True
        self._closed = False
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the receive loop and close the connection."""
        self._running = False
        self._closed = True

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        self._connection = None

    async def wait_closed(self) -> None:
        """Wait until the receive loop gives up (tests, shutdown)."""
        if self._task:
            await self._task

    def _backoff(self, attempt: int) -> float:
        return min(self._backoff_base * 2 ** (attempt - 1), self._backoff_max)

    async def _run(self) -> None:
        """Receive loop with exponential-backoff reconnect."""
        attempt = 0

        while self._running:
            try:
                async with self._connect(self._url) as connection:
                    self._connection = connection
                    self._connect_count += 1
                    attempt = 0
                    logger.info("Connected to %s", self._url)

                    await self._notify_connected()

                    async for raw in connection:
                        self.dispatch(raw)

                logger.warning("Connection to %s closed by peer", self._url)
            except (OSError, TimeoutError, asyncio.TimeoutError, WebSocketException) as e:
                logger.warning("Connection to %s failed: %s", self._url, e)
            except Exception as e:
                logger.error("Unexpected error on %s: %s", self._url, e, exc_info=True)
            finally:
                self._connection = None

            if not self._running:
                break

            attempt += 1
            if self._max_retries is not None and attempt > self._max_retries:
                logger.error(
                    "Giving up on %s after %s reconnect attempts", self._url, self._max_retries
                )
                break

            delay = self._backoff(attempt)
            logger.info("Reconnecting to %s in %.2fs (attempt %s)", self._url, delay, attempt)
            await asyncio.sleep(delay)

        self._running = False
        self._closed = True

    async def _notify_connected(self) -> None:
        for callback in self._connect_callbacks:
            try:
                await callback()
            except Exception as e:
                logger.error("Error in connect callback: %s", e, exc_info=True)
