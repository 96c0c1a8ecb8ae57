"""Translates device state changes into the host's refresh calls.

The host (a control surface plugin runtime) builds its action dropdowns from
the channel and preset lists and evaluates mute feedbacks against the mute
maps. Each kind of change only refreshes what depends on it: a channel mute
re-checks the channel mute feedbacks, never the crosspoint ones.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from pysoundstructure.listener import DeviceStateListener

FEEDBACK_CHANNEL_MUTE = "channelMuteStatus"
FEEDBACK_CROSSPOINT_MUTE = "crosspointMuteStatus"


class InstanceStatus(Enum):
    OK = "ok"
    CONNECTING = "connecting"
    ERROR = "error"
    DISCONNECTED = "disconnected"


class ModuleHost(ABC):
    """What the plugin runtime provides to this module."""

    @abstractmethod
    def update_status(self, status: InstanceStatus, message: Optional[str] = None):
        pass

    @abstractmethod
    def update_actions(self):
        """Rebuild action definitions from the current channel and preset lists."""
        pass

    @abstractmethod
    def update_feedbacks(self):
        """Redefine and re-evaluate every feedback."""
        pass

    @abstractmethod
    def check_feedbacks(self, *kinds: str):
        """Re-evaluate only the feedbacks of the given kinds."""
        pass

    @abstractmethod
    def update_variable_definitions(self):
        pass


class HostNotificationBridge(DeviceStateListener):

    def __init__(self, host: ModuleHost):
        self._logger = logging.getLogger(__name__)
        self._host = host

    def _call_host(self, name: str, *args):
        # A failing host hook must not break socket event delivery
        try:
            getattr(self._host, name)(*args)
        except Exception as e:
            self._logger.error(f"Exception in host {name}() callback: {e}", exc_info=True)

    def connecting(self):
        self._call_host("update_status", InstanceStatus.CONNECTING, None)

    def connected(self):
        self._call_host("update_status", InstanceStatus.OK, None)

    def disconnected(self, message: str):
        self._call_host("update_status", InstanceStatus.DISCONNECTED, message)

    def error(self, error_message: str):
        self._call_host("update_status", InstanceStatus.ERROR, error_message)

    def initialised(self):
        self._call_host("update_actions")
        self._call_host("update_feedbacks")
        self._call_host("update_variable_definitions")

    def channels_changed(self, names: list[str]):
        self._call_host("update_actions")

    def presets_changed(self, names: list[str]):
        self._call_host("update_actions")

    def channel_mute_changed(self, channel: str, muted: int):
        self._call_host("check_feedbacks", FEEDBACK_CHANNEL_MUTE)

    def crosspoint_mute_changed(self, input_name: str, output_name: str, muted: int):
        self._call_host("check_feedbacks", FEEDBACK_CROSSPOINT_MUTE)
