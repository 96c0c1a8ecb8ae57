#!/usr/bin/env python3
"""pytest fixtures"""

import asyncio

import pytest

from pysoundstructure.bridge import ModuleHost


class FakeTransport:
    """Stands in for an asyncio socket transport."""

    def __init__(self, protocol, peername):
        self.protocol = protocol
        self.peername = peername
        self.written = []
        self.closing = False
        self.aborted = False

    def get_extra_info(self, name, default=None):
        if name == "peername":
            return self.peername
        return default

    def is_closing(self):
        return self.closing

    def write(self, data):
        assert not self.closing, "write on a closed transport"
        self.written.append(data)

    def abort(self):
        if self.closing:
            return
        self.closing = True
        self.aborted = True
        self.protocol.connection_lost(None)

    def peer_close(self, exc=None):
        """Simulate the device dropping the connection."""
        self.closing = True
        self.protocol.connection_lost(exc)


class FakeConnector:
    """Replaces the event loop's create_connection for an instance."""

    def __init__(self):
        self.transports = []
        self.refuse = None

    async def create_connection(self, protocol_factory, host=None, port=None):
        if self.refuse is not None:
            raise self.refuse
        protocol = protocol_factory()
        transport = FakeTransport(protocol, (host, port))
        self.transports.append(transport)
        protocol.connection_made(transport)
        return transport, protocol

    @property
    def live(self):
        return [transport for transport in self.transports if not transport.closing]


class PendingConnector(FakeConnector):
    """A connector whose connects only complete when released."""

    def __init__(self):
        super().__init__()
        self.attempts = []

    async def create_connection(self, protocol_factory, host=None, port=None):
        release = asyncio.Event()
        self.attempts.append(release)
        await release.wait()
        return await super().create_connection(protocol_factory, host=host, port=port)


class RecordingHost(ModuleHost):
    """Records every refresh call made by the bridge."""

    def __init__(self):
        self.calls = []

    def update_status(self, status, message=None):
        self.calls.append(("update_status", status, message))

    def update_actions(self):
        self.calls.append(("update_actions",))

    def update_feedbacks(self):
        self.calls.append(("update_feedbacks",))

    def check_feedbacks(self, *kinds):
        self.calls.append(("check_feedbacks",) + kinds)

    def update_variable_definitions(self):
        self.calls.append(("update_variable_definitions",))

    def statuses(self):
        return [call[1:] for call in self.calls if call[0] == "update_status"]

    def clear(self):
        self.calls.clear()


@pytest.fixture
def connector():
    """fake socket factory"""
    return FakeConnector()


@pytest.fixture
def host():
    """recording control surface"""
    return RecordingHost()


@pytest.fixture
def pending_connector():
    """fake socket factory with connects held open"""
    return PendingConnector()
