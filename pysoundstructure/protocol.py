import asyncio
import logging
from typing import Optional

from pysoundstructure.codec import LineBuffer, decode_line, encode_command


class SoundStructureProtocol(asyncio.Protocol):
    """One TCP session with the device.

    Decodes the incoming byte stream line by line and passes each event to
    its owner (the ``SoundStructureInstance`` that created it). Once aborted,
    or once the owner has moved on to a newer session, the protocol stops
    delivering anything.
    """

    _transport: Optional[asyncio.Transport]

    def __init__(self, owner):
        self._logger = logging.getLogger(__name__)
        self._owner = owner
        self._transport = None
        self._buffer = LineBuffer()
        self.peer_name = None

    @property
    def is_connected(self) -> bool:
        return self._transport is not None and not self._transport.is_closing()

    def connection_made(self, transport):
        """Method from asyncio.Protocol"""
        self._transport = transport
        self.peer_name = transport.get_extra_info("peername")
        if self._owner is None or not self._owner._session_is_current(self):
            # A newer session replaced this one while it was still connecting
            self._logger.debug(f"Dropping superseded connection to {self.peer_name}")
            self.abort()
            return
        self._logger.info(f"Connection Made: {self.peer_name}")
        self._owner._session_connected(self)

    def data_received(self, data):
        """Method from asyncio.Protocol"""
        self._logger.debug(f"data_received client: {data}")
        for line in self._buffer.feed(data):
            if self._owner is None:
                return
            self._logger.debug(f"Whole line: {line!r}")
            event = decode_line(line)
            if event is not None:
                self._owner._session_event(self, event)

    def connection_lost(self, exc):
        """Method from asyncio.Protocol"""
        self._buffer.reset()
        owner, self._owner = self._owner, None
        if owner is not None:
            owner._session_lost(self, exc)

    def send(self, cmd: str) -> bool:
        if not self.is_connected:
            return False
        self._logger.debug(f"SEND: {cmd}")
        self._transport.write(encode_command(cmd))
        return True

    def abort(self):
        """Detach from the owner and close the socket immediately."""
        self._owner = None
        self._buffer.reset()
        if self._transport is not None:
            self._transport.abort()
