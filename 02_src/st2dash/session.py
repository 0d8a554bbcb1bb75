"""Session bootstrap and lifecycle management."""

from typing import Any, Callable, Protocol

from .config import Settings
from .controller import EpochController
from .logging_config import get_logger
from .models import ViewOptions
from .projections import InvariantPanel, get_projection, invariant_panels
from .stores import StoreSet
from .timeline import TimelineLayout, TimelineMapper
from .tracker import Tracker
from .transport import TransportChannel

logger = get_logger(__name__)


class ISession(Protocol):
    """Bootstrap and lifecycle of one dashboard session."""

    async def start(self) -> None:
        """Wire components and open the backend connection."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...


class Session:
    """Owns the channel, stores, mapper and controller of one dashboard session."""

    def __init__(
        self,
        settings: Settings | None = None,
        channel: TransportChannel | None = None,
    ):
        self._settings = settings or Settings.from_env()

        self._channel = channel or TransportChannel(
            self._settings.backend_url,
            max_retries=self._settings.reconnect_max_retries,
            backoff_base=self._settings.reconnect_backoff_base,
            backoff_max=self._settings.reconnect_backoff_max,
        )
        self._stores = StoreSet()
        self._tracker = Tracker(self._channel)
        self._mapper = TimelineMapper(width=self._settings.viewport_width)
        self._controller = EpochController(
            self._channel,
            initial_epoch=self._settings.initial_epoch,
            poll_interval=self._settings.invariant_poll_interval,
        )
        self._view = ViewOptions()

        self._unbind_mapper: Callable[[], None] | None = None
        self._started = False

        # Registered once for the lifetime of the session
        self._channel.on_connect(self._handle_connected)
        self._channel.on_drop(self._tracker.record_drop)

    async def start(self) -> None:
        """Wire components in dependency order and connect."""
        if self._started:
            return
        logger.info("Starting session against %s", self._channel.url)

        # 1. Stores (one subscription per frame kind)
        self._stores.bind(self._channel)

        # 2. Tracker (subscribes to every frame kind)
        self._tracker.start()

        # 3. Mapper resets its transform when a new edge sequence arrives
        self._unbind_mapper = self._mapper.bind(self._stores.activity)

        # 4. Channel receive loop; requests go out from the connect callback
        await self._channel.start()

        # 5. Invariant polling
        await self._controller.start()

        self._started = True
        logger.info("Session started")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if not self._started:
            return

        await self._controller.stop()
        await self._channel.stop()
        if self._unbind_mapper:
            self._unbind_mapper()
            self._unbind_mapper = None
        self._tracker.stop()
        self._stores.unbind()

        self._started = False
        logger.info("Session stopped")

    async def _handle_connected(self) -> None:
        """Fresh connection: new highlight set, re-request the current epoch."""
        if self._channel.connect_count > 1:
            self._stores.renew_highlights()
            logger.info("Reconnected; highlight set renewed")
        await self._controller.request_current()

    async def set_epoch(self, raw: str | int) -> bool:
        return await self._controller.set_epoch(raw)

    def update_view(self, **changes: Any) -> ViewOptions:
        """Set view toggles (show_waiting, split_worker, highlight)."""
        for name, value in changes.items():
            if not hasattr(self._view, name):
                raise AttributeError(f"unknown view option {name!r}")
            setattr(self._view, name, value)
        return self._view

    def project(self, name: str) -> list[dict[str, Any]]:
        """Rows of one chart projection. Raises KeyError for unknown names."""
        return get_projection(name).rows(self._stores, self._view)

    def timeline(self) -> TimelineLayout:
        edges = self._stores.activity.snapshot
        highlights = self._stores.highlights.snapshot()
        return self._mapper.layout(edges, highlights, self._view.highlight)

    def invariants(self) -> list[InvariantPanel]:
        return invariant_panels(self._stores.invariants.snapshot)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def channel(self) -> TransportChannel:
        return self._channel

    @property
    def stores(self) -> StoreSet:
        return self._stores

    @property
    def tracker(self) -> Tracker:
        return self._tracker

    @property
    def mapper(self) -> TimelineMapper:
        return self._mapper

    @property
    def controller(self) -> EpochController:
        return self._controller

    @property
    def view(self) -> ViewOptions:
        return self._view

    @property
    def started(self) -> bool:
        return self._started
