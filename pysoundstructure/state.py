"""Local mirror of the device's dynamic configuration."""

from typing import Optional

from pysoundstructure.codec import (
    ChannelListUpdate,
    ChannelMuteUpdate,
    CrosspointMuteUpdate,
    PresetListUpdate,
    ProtocolEvent,
)


def crosspoint_key(input_name: str, output_name: str) -> str:
    """Key used for a crosspoint in the crosspoint mute map: ``input:output``."""
    return f"{input_name}:{output_name}"


class SessionState:
    """Channel and preset lists plus both mute maps.

    Only ``apply`` mutates the mirror. Lists are replaced wholesale; mute
    entries are overwritten one at a time and never removed, so mutes for
    channels the device no longer reports stay until overwritten.
    """

    def __init__(self):
        self._virtual_channels: list[str] = []
        self._presets: list[str] = []
        self._channel_mute_status: dict[str, int] = {}
        self._crosspoint_mute_status: dict[str, int] = {}

    def apply(self, event: ProtocolEvent) -> bool:
        """Apply a decoded event. Returns True if anything changed."""
        if isinstance(event, ChannelListUpdate):
            names = list(event.names)
            if names == self._virtual_channels:
                return False
            self._virtual_channels = names
            return True

        if isinstance(event, PresetListUpdate):
            names = list(event.names)
            if names == self._presets:
                return False
            self._presets = names
            return True

        if isinstance(event, ChannelMuteUpdate):
            if self._channel_mute_status.get(event.channel) == event.muted:
                return False
            self._channel_mute_status[event.channel] = event.muted
            return True

        if isinstance(event, CrosspointMuteUpdate):
            key = crosspoint_key(event.input, event.output)
            if self._crosspoint_mute_status.get(key) == event.muted:
                return False
            self._crosspoint_mute_status[key] = event.muted
            return True

        raise TypeError(f"Unknown protocol event: {event!r}")

    def clear(self):
        self._virtual_channels = []
        self._presets = []
        self._channel_mute_status = {}
        self._crosspoint_mute_status = {}

    def get_virtual_channels(self) -> list[str]:
        return list(self._virtual_channels)

    def get_presets(self) -> list[str]:
        return list(self._presets)

    def get_channel_mute_status(self) -> dict[str, int]:
        return dict(self._channel_mute_status)

    def get_crosspoint_mute_status(self) -> dict[str, int]:
        return dict(self._crosspoint_mute_status)

    def channel_mute(self, channel: str) -> Optional[int]:
        return self._channel_mute_status.get(channel)

    def crosspoint_mute(self, input_name: str, output_name: str) -> Optional[int]:
        return self._crosspoint_mute_status.get(crosspoint_key(input_name, output_name))
