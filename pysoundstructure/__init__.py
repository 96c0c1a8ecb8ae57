"""pysoundstructure Python Package

Python library for mirroring and controlling a Polycom SoundStructure.
"""

from pysoundstructure.bridge import HostNotificationBridge, InstanceStatus, ModuleHost
from pysoundstructure.config import ConnectionConfig
from pysoundstructure.instance import ConnectionState, SoundStructureInstance

__all__ = [
    "ConnectionConfig",
    "ConnectionState",
    "HostNotificationBridge",
    "InstanceStatus",
    "ModuleHost",
    "SoundStructureInstance",
]
