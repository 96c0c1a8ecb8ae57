from abc import ABC, abstractmethod
from typing import List
import logging


class DeviceStateListener(ABC):

    @abstractmethod
    def connected(self):
        pass

    @abstractmethod
    def disconnected(self, message: str):
        pass

    @abstractmethod
    def error(self, error_message: str):
        pass

    @abstractmethod
    def channels_changed(self, names: list[str]):
        pass

    @abstractmethod
    def presets_changed(self, names: list[str]):
        pass

    @abstractmethod
    def channel_mute_changed(self, channel: str, muted: int):
        pass

    @abstractmethod
    def crosspoint_mute_changed(self, input_name: str, output_name: str, muted: int):
        pass

    def connecting(self):
        # By default, do nothing but can be overwritten to be notified of these messages.
        pass

    def initialised(self):
        """Called once init has finished its first connection attempt."""
        pass


class MultiplexingListener(DeviceStateListener):

    _listeners: List[DeviceStateListener]

    def __init__(self):
        self._listeners = []

    def connecting(self):
        for listener in self._listeners:
            listener.connecting()

    def connected(self):
        for listener in self._listeners:
            listener.connected()

    def disconnected(self, message: str):
        for listener in self._listeners:
            listener.disconnected(message)

    def error(self, error_message: str):
        for listener in self._listeners:
            listener.error(error_message)

    def initialised(self):
        for listener in self._listeners:
            listener.initialised()

    def channels_changed(self, names: list[str]):
        for listener in self._listeners:
            listener.channels_changed(names)

    def presets_changed(self, names: list[str]):
        for listener in self._listeners:
            listener.presets_changed(names)

    def channel_mute_changed(self, channel: str, muted: int):
        for listener in self._listeners:
            listener.channel_mute_changed(channel, muted)

    def crosspoint_mute_changed(self, input_name: str, output_name: str, muted: int):
        for listener in self._listeners:
            listener.crosspoint_mute_changed(input_name, output_name, muted)

    def register_listener(self, listener: DeviceStateListener):
        self._listeners.append(listener)

    def unregister_listener(self, listener: DeviceStateListener):
        if listener in self._listeners:
            self._listeners.remove(listener)
        else:
            logging.info("Listener isn't registered")


class LoggingListener(DeviceStateListener):

    def __init__(self, logger = logging):
        self.logger = logger

    def connecting(self):
        self.logger.info("Connecting")

    def connected(self):
        self.logger.info("Connected")

    def disconnected(self, message: str):
        self.logger.info(f"Disconnected: {message}")

    def error(self, error_message: str):
        self.logger.error(f"Connection error: {error_message}")

    def channels_changed(self, names: list[str]):
        self.logger.info(f"Virtual channels: {names}")

    def presets_changed(self, names: list[str]):
        self.logger.info(f"Presets: {names}")

    def channel_mute_changed(self, channel: str, muted: int):
        self.logger.info(f"Channel {channel} mute: {muted}")

    def crosspoint_mute_changed(self, input_name: str, output_name: str, muted: int):
        self.logger.info(f"Crosspoint {input_name} -> {output_name} mute: {muted}")
