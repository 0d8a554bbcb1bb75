"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fakes import FakeConnection, FakeConnector  # noqa: E402


@pytest.fixture
def fake_connection():
    """Connection that records outbound messages."""
    return FakeConnection()


@pytest.fixture
def channel():
    """TransportChannel that never connects on its own."""
    from st2dash.transport import TransportChannel

    return TransportChannel("ws://test", connect=FakeConnector(), max_retries=0)


@pytest.fixture
def open_channel(channel, fake_connection):
    """TransportChannel with an open (fake) connection."""
    channel._connection = fake_connection
    return channel


@pytest.fixture
def stores(channel):
    """StoreSet subscribed to the channel."""
    from st2dash.stores import StoreSet

    st = StoreSet()
    st.bind(channel)
    yield st
    st.unbind()


@pytest.fixture
def tracker(channel):
    """Tracker subscribed to the channel."""
    from st2dash.tracker import Tracker

    tr = Tracker(channel)
    tr.start()
    yield tr
    tr.stop()


@pytest.fixture
def mock_channel():
    """Channel double whose send() always succeeds."""
    ch = Mock()
    ch.send = AsyncMock(return_value=True)
    return ch


@pytest.fixture
def settings():
    """Settings with a long poll interval and no reconnects."""
    from st2dash.config import Settings

    return Settings(
        backend_url="ws://test",
        initial_epoch=1,
        invariant_poll_interval=60.0,
        reconnect_max_retries=0,
        reconnect_backoff_base=0.01,
        reconnect_backoff_max=0.01,
        viewport_width=1040.0,
    )


@pytest_asyncio.fixture
async def session(settings):
    """Session over a connector with no scripted connections (never connects)."""
    from st2dash.session import Session
    from st2dash.transport import TransportChannel

    ch = TransportChannel(settings.backend_url, connect=FakeConnector(), max_retries=0)
    s = Session(settings, channel=ch)
    await s.start()
    yield s
    await s.stop()
