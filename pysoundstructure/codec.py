import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

_LOGGER = logging.getLogger(__name__)

# Every command sent to the device ends with CRLF
LINE_TERMINATOR = "\r\n"

QUERY_VIRTUAL_CHANNELS = "get virtual_channels"
QUERY_PRESETS = "get presets"
# Sent on every new connection, in this order
STARTUP_QUERIES = (QUERY_VIRTUAL_CHANNELS, QUERY_PRESETS)

VIRTUAL_CHANNELS_PREFIX = "virtual_channels="
PRESETS_PREFIX = "presets="
MUTE_PREFIX = "mute "
CROSSPOINT_MUTE_PREFIX = "crosspoint_mute "

# Longest unterminated fragment kept before it is discarded
MAX_PENDING_BYTES = 65536

# Channel mute response: mute "Main"=1
MUTE_RESPONSE = re.compile(r'^mute "([^"]*)"\s*=\s*(-?\d+)')

# Crosspoint mute response: crosspoint_mute "Mic 1" "Amp 2"=0
CROSSPOINT_MUTE_RESPONSE = re.compile(r'^crosspoint_mute "([^"]*)" "([^"]*)"\s*=\s*(-?\d+)')


@dataclass(frozen=True)
class ChannelListUpdate:
    names: tuple


@dataclass(frozen=True)
class PresetListUpdate:
    names: tuple


@dataclass(frozen=True)
class ChannelMuteUpdate:
    channel: str
    muted: int


@dataclass(frozen=True)
class CrosspointMuteUpdate:
    input: str
    output: str
    muted: int


ProtocolEvent = Union[ChannelListUpdate, PresetListUpdate, ChannelMuteUpdate, CrosspointMuteUpdate]


def encode_command(cmd: str) -> bytes:
    """Turn a command into the bytes written to the socket."""
    if not isinstance(cmd, str):
        raise TypeError(f"Command must be a str, not {type(cmd).__name__}")
    return f"{cmd}{LINE_TERMINATOR}".encode("utf-8")


def _split_list(value: str, strip_quotes: bool = False) -> tuple:
    # Entries are kept verbatim, so "virtual_channels=" is one empty name
    if strip_quotes:
        return tuple(entry.replace('"', "").strip() for entry in value.split(","))
    return tuple(entry.strip() for entry in value.split(","))


def decode_line(line: str) -> Optional[ProtocolEvent]:
    """Classify one line received from the device.

    Returns the decoded event, or None for anything that is not a state
    update (unknown responses, blank lines, and malformed mute lines).
    """
    line = line.strip()

    if line.startswith(VIRTUAL_CHANNELS_PREFIX):
        return ChannelListUpdate(_split_list(line[len(VIRTUAL_CHANNELS_PREFIX):]))

    if line.startswith(PRESETS_PREFIX):
        return PresetListUpdate(_split_list(line[len(PRESETS_PREFIX):], strip_quotes=True))

    if line.startswith(MUTE_PREFIX):
        match = MUTE_RESPONSE.match(line)
        if not match:
            _LOGGER.debug(f"Ignoring malformed mute response: {line!r}")
            return None
        return ChannelMuteUpdate(match.group(1), int(match.group(2)))

    if line.startswith(CROSSPOINT_MUTE_PREFIX):
        match = CROSSPOINT_MUTE_RESPONSE.match(line)
        if not match:
            _LOGGER.debug(f"Ignoring malformed crosspoint mute response: {line!r}")
            return None
        return CrosspointMuteUpdate(match.group(1), match.group(2), int(match.group(3)))

    return None


class LineBuffer:
    """Reassembles newline terminated lines from arbitrarily split chunks.

    The partial fragment is kept as bytes so a multi-byte character that
    straddles two chunks is decoded only once it is complete.
    """

    def __init__(self):
        self._pending = b""

    @property
    def pending(self) -> bytes:
        return self._pending

    def feed(self, data: bytes) -> list[str]:
        self._pending += data
        *complete, self._pending = self._pending.split(b"\n")
        if len(self._pending) > MAX_PENDING_BYTES:
            _LOGGER.warning(f"Discarding {len(self._pending)} bytes received without a line terminator")
            self._pending = b""
        return [raw.decode("utf-8", errors="replace") for raw in complete]

    def reset(self):
        self._pending = b""
