"""EpochController implementation."""

import asyncio
from typing import Protocol

from ..logging_config import get_logger
from ..models import EPOCH_BATCH, FrameType, Request
from ..transport import ITransportChannel

logger = get_logger(__name__)


def parse_epoch(raw: object) -> int | None:
    """Parse user input as a non-negative epoch. None if it is not one."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw >= 0 else None
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text or not (text.isascii() and text.isdigit()):
        return None
    return int(text)


class IEpochController(Protocol):
    """Derives outbound requests from epoch selection and a polling timer."""

    @property
    def epoch(self) -> int:
        """Currently selected epoch."""
        ...

    async def set_epoch(self, raw: str | int) -> bool:
        """Select an epoch and request its data. False if `raw` is not a valid epoch."""
        ...

    async def request_current(self) -> None:
        """Re-request everything for the current epoch plus invariants."""
        ...

    async def start(self) -> None:
        """Start invariant polling."""
        ...

    async def stop(self) -> None:
        """Stop invariant polling."""
        ...


class EpochController:
    """Sends PAG/AGG/ALL/MET batches on epoch changes and polls INV."""

    def __init__(
        self,
        channel: ITransportChannel,
        initial_epoch: int = 1,
        poll_interval: float = 5.0,
    ):
        if initial_epoch < 0:
            raise ValueError(f"initial_epoch must be non-negative, got {initial_epoch}")
        self._channel = channel
        self._epoch = initial_epoch
        self._poll_interval = poll_interval
        self._poll_task: asyncio.Task | None = None
        self._running = False

    @property
    def epoch(self) -> int:
        return self._epoch

    async def set_epoch(self, raw: str | int) -> bool:
        """Select an epoch and request its data. False if `raw` is not a valid epoch."""
        epoch = parse_epoch(raw)
        if epoch is None:
            logger.debug("Ignoring invalid epoch input %r (keeping %s)", raw, self._epoch)
            return False

        self._epoch = epoch
        logger.info("Epoch set to %s", epoch)
        await self._send_batch(epoch)
        return True

    async def request_current(self) -> None:
        await self._send_batch(self._epoch)
        await self._channel.send(Request(FrameType.INV))

    async def _send_batch(self, epoch: int) -> None:
        for frame_type in EPOCH_BATCH:
            await self._channel.send(Request(frame_type, epoch))

    async def start(self) -> None:
        """Start invariant polling."""
        if self._running:
            return

        self._running = True
        self._poll_task = asyncio.create_task(self._poll_invariants())

    async def stop(self) -> None:
        """Stop invariant polling."""
        self._running = False

        if self._poll_task:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
            self._poll_task = None

    async def _poll_invariants(self) -> None:
        """Background timer requesting invariant snapshots."""
        while self._running:
            try:
                await self._channel.send(Request(FrameType.INV))
                await asyncio.sleep(self._poll_interval)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Invariant poll error: %s", e, exc_info=True)
                await asyncio.sleep(self._poll_interval)
