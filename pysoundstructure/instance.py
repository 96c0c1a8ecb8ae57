"""SoundStructure module instance - connection lifecycle and state mirror.

This module contains the object a control surface host drives:
- Lifecycle entry points (init, config_updated, reconnect, destroy)
- The connection state machine, with at most one live socket at a time
- The session state mirror (channels, presets, mute maps) and its accessors
- Generic command sending

Reconnection happens only when the host asks for it (new config or an
explicit reconnect call); a dropped connection is reported and left alone.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Mapping, Optional, Union

from pysoundstructure.bridge import HostNotificationBridge, ModuleHost
from pysoundstructure.codec import (
    STARTUP_QUERIES,
    ChannelListUpdate,
    ChannelMuteUpdate,
    CrosspointMuteUpdate,
    PresetListUpdate,
    ProtocolEvent,
)
from pysoundstructure.config import ConnectionConfig
from pysoundstructure.listener import DeviceStateListener, MultiplexingListener
from pysoundstructure.protocol import SoundStructureProtocol
from pysoundstructure.state import SessionState


class ConnectionState(Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    DESTROYED = "destroyed"


class SoundStructureInstance:
    """One configured SoundStructure device.

    All socket callbacks arrive on the event loop that runs the lifecycle
    coroutines, so the session state is only ever touched from that loop.
    """

    def __init__(self, host: Optional[ModuleHost] = None, loop: Optional[asyncio.AbstractEventLoop] = None):
        """Initialize instance.

        Args:
            host: Control surface to refresh when state changes (optional)
            loop: Event loop to connect on, defaults to the running loop
        """
        self._logger = logging.getLogger(__name__)
        self._loop = loop

        self._config = ConnectionConfig(None, None)
        self._state = ConnectionState.IDLE
        self._protocol: Optional[SoundStructureProtocol] = None
        self._session = SessionState()

        self._multiplex_callback = MultiplexingListener()
        if host is not None:
            self._multiplex_callback.register_listener(HostNotificationBridge(host))

    def register_listener(self, listener: DeviceStateListener):
        self._multiplex_callback.register_listener(listener)

    def unregister_listener(self, listener: DeviceStateListener):
        self._multiplex_callback.unregister_listener(listener)

    # ========== Host lifecycle ==========

    async def init(self, config: Union[ConnectionConfig, Mapping[str, Any]]):
        if self._check_destroyed("init"):
            return
        self._config = self._coerce_config(config)
        await self._connect()
        if self._state is ConnectionState.DESTROYED:
            return
        self._multiplex_callback.initialised()

    async def config_updated(self, config: Union[ConnectionConfig, Mapping[str, Any]]):
        if self._check_destroyed("config_updated"):
            return
        self._config = self._coerce_config(config)
        await self._connect()

    async def reconnect(self):
        if self._check_destroyed("reconnect"):
            return
        await self._connect()

    async def destroy(self):
        if self._state is ConnectionState.DESTROYED:
            return
        self._teardown_session()
        self._session.clear()
        self._state = ConnectionState.DESTROYED
        self._logger.debug("Module instance destroyed")

    # ========== Commands ==========

    def send_command(self, cmd: str) -> bool:
        """Send a raw command. Returns False (and only logs) when not connected."""
        if self._state is not ConnectionState.CONNECTED or self._protocol is None:
            self._logger.error(f"Socket not connected, dropping command: {cmd}")
            return False
        if not self._protocol.send(cmd):
            self._logger.error(f"Socket not connected, dropping command: {cmd}")
            return False
        self._logger.debug(f"Command sent: {cmd}")
        return True

    def request_device_configuration(self):
        """Query the device for its virtual channels and presets."""
        for query in STARTUP_QUERIES:
            self.send_command(query)

    # ========== Accessors ==========

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def is_connected(self) -> bool:
        return (
            self._state is ConnectionState.CONNECTED
            and self._protocol is not None
            and self._protocol.is_connected
        )

    def get_virtual_channels(self) -> list[str]:
        return self._session.get_virtual_channels()

    def get_presets(self) -> list[str]:
        return self._session.get_presets()

    def get_channel_mute_status(self) -> dict[str, int]:
        return self._session.get_channel_mute_status()

    def get_crosspoint_mute_status(self) -> dict[str, int]:
        return self._session.get_crosspoint_mute_status()

    def get_channel_mute(self, channel: str) -> Optional[int]:
        return self._session.channel_mute(channel)

    def get_crosspoint_mute(self, input_name: str, output_name: str) -> Optional[int]:
        return self._session.crosspoint_mute(input_name, output_name)

    # ========== Connection handling ==========

    @staticmethod
    def _coerce_config(config) -> ConnectionConfig:
        if isinstance(config, ConnectionConfig):
            return config
        return ConnectionConfig.from_dict(config or {})

    def _check_destroyed(self, operation: str) -> bool:
        if self._state is ConnectionState.DESTROYED:
            self._logger.warning(f"Ignoring {operation}() on a destroyed instance")
            return True
        return False

    def _teardown_session(self):
        if self._protocol is not None:
            self._logger.debug("Closing existing connection")
            self._protocol.abort()
            self._protocol = None

    async def _connect(self):
        # The old socket is gone before the new one is opened
        self._teardown_session()

        if not self._config.is_valid():
            self._logger.debug(f"Not connecting, incomplete config: {self._config}")
            self._state = ConnectionState.IDLE
            return

        host, port = self._config.host, self._config.port
        protocol = SoundStructureProtocol(self)
        self._protocol = protocol
        self._state = ConnectionState.CONNECTING
        self._logger.info(f"Connecting to SoundStructure at {host}:{port}")
        self._multiplex_callback.connecting()

        loop = self._loop or asyncio.get_running_loop()
        try:
            await loop.create_connection(lambda: protocol, host=host, port=port)
        except (OSError, ValueError) as e:
            # ValueError covers hostnames the idna codec rejects
            if protocol is not self._protocol:
                return
            self._protocol = None
            self._state = ConnectionState.DISCONNECTED
            self._logger.error(f"Connection error: {e}")
            self._multiplex_callback.error(str(e) or type(e).__name__)

    # Called by SoundStructureProtocol

    def _session_is_current(self, protocol: SoundStructureProtocol) -> bool:
        return protocol is self._protocol and self._state is not ConnectionState.DESTROYED

    def _session_connected(self, protocol: SoundStructureProtocol):
        if not self._session_is_current(protocol):
            return
        self._state = ConnectionState.CONNECTED
        self._logger.info(f"Connected to SoundStructure at {self._config.host}:{self._config.port}")
        self._multiplex_callback.connected()
        self.request_device_configuration()

    def _session_event(self, protocol: SoundStructureProtocol, event: ProtocolEvent):
        if not self._session_is_current(protocol):
            return
        if not self._session.apply(event):
            self._logger.debug(f"No change from {event}")
            return

        if isinstance(event, ChannelListUpdate):
            self._multiplex_callback.channels_changed(self._session.get_virtual_channels())
        elif isinstance(event, PresetListUpdate):
            self._multiplex_callback.presets_changed(self._session.get_presets())
        elif isinstance(event, ChannelMuteUpdate):
            self._multiplex_callback.channel_mute_changed(event.channel, event.muted)
        elif isinstance(event, CrosspointMuteUpdate):
            self._multiplex_callback.crosspoint_mute_changed(event.input, event.output, event.muted)

    def _session_lost(self, protocol: SoundStructureProtocol, exc: Optional[Exception]):
        if not self._session_is_current(protocol):
            return
        self._protocol = None
        self._state = ConnectionState.DISCONNECTED
        if exc is not None:
            message = str(exc) or type(exc).__name__
            self._logger.error(f"Connection error: {message}")
            self._multiplex_callback.error(message)
        else:
            self._logger.warning("Connection closed")
            self._multiplex_callback.disconnected("Connection closed")
