import logging
from typing import Any, Mapping, Optional

_LOGGER = logging.getLogger(__name__)

# SoundStructure control port (telnet)
DEFAULT_PORT = 23


class ConnectionConfig:
    """Where to reach the device. Either field may be None until configured."""

    def __init__(self, host: Optional[str] = None, port: Optional[int] = DEFAULT_PORT):
        self.host: Optional[str] = host
        self.port: Optional[int] = port

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "ConnectionConfig":
        """Build a config from raw form values, e.g. ``{"host": "10.0.0.5", "port": "23"}``.

        Bad values are logged and left as None rather than raised, so an
        incomplete form just means no connection attempt.
        """
        host = values.get("host")
        if isinstance(host, str):
            host = host.strip() or None
        elif host is not None:
            _LOGGER.warning(f"Ignoring invalid host: {host!r}")
            host = None

        port = values.get("port")
        if isinstance(port, str):
            port = port.strip() or None
        if port is not None:
            try:
                port = int(port)
            except (TypeError, ValueError):
                _LOGGER.warning(f"Ignoring invalid port: {port!r}")
                port = None
        if port is not None and not (1 <= port <= 65535):
            _LOGGER.warning(f"Ignoring out of range port: {port}")
            port = None

        return cls(host, port)

    def is_valid(self) -> bool:
        return bool(self.host) and bool(self.port)

    def __eq__(self, other):
        if not isinstance(other, ConnectionConfig):
            return NotImplemented
        return self.host == other.host and self.port == other.port

    def __repr__(self):
        return f"ConnectionConfig(host={self.host!r}, port={self.port!r})"
