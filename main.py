"""
Main command-line interface for pysoundstructure.

This script provides a CLI to inspect and control a Polycom SoundStructure.
"""

import argparse
import asyncio
import logging

from pysoundstructure.config import DEFAULT_PORT, ConnectionConfig
from pysoundstructure.instance import SoundStructureInstance
from pysoundstructure.listener import LoggingListener


async def connect(hostname: str, port: int) -> SoundStructureInstance:
    print(f"Connecting to SoundStructure at {hostname}:{port}...")
    instance = SoundStructureInstance()
    await instance.init(ConnectionConfig(hostname, port))
    return instance


async def show_status(hostname: str, port: int, wait: float):
    """Print the channels, presets and mute states the device reports."""
    instance = await connect(hostname, port)
    if not instance.is_connected:
        print("Could not connect")
        await instance.destroy()
        return

    # Startup queries are sent on connect; give the device time to answer
    print("Querying virtual channels and presets...")
    await asyncio.sleep(wait)

    print("\nVirtual channels:")
    print("-" * 60)
    mutes = instance.get_channel_mute_status()
    for channel in instance.get_virtual_channels():
        muted = mutes.get(channel)
        mute_str = "unknown" if muted is None else ("MUTED" if muted else "on")
        print(f"{channel:40s} {mute_str}")
    print("-" * 60)

    print("\nPresets:")
    print("-" * 60)
    for preset in instance.get_presets():
        print(preset)
    print("-" * 60)

    crosspoints = instance.get_crosspoint_mute_status()
    if crosspoints:
        print("\nCrosspoint mutes:")
        print("-" * 60)
        for key, muted in sorted(crosspoints.items()):
            print(f"{key:40s} {'MUTED' if muted else 'on'}")
        print("-" * 60)

    await instance.destroy()


async def send_command(hostname: str, port: int, command: str, wait: float):
    """Send one raw command and log whatever the device reports back."""
    instance = await connect(hostname, port)
    instance.register_listener(LoggingListener(logging.getLogger("pysoundstructure.cli")))
    if not instance.send_command(command):
        print("Could not send, not connected")
        await instance.destroy()
        return

    await asyncio.sleep(wait)
    await instance.destroy()
    print("Done")


def main():
    parser = argparse.ArgumentParser(description="Control a Polycom SoundStructure")
    parser.add_argument("--host", required=True, help="SoundStructure hostname or IP")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help=f"Control port (default: {DEFAULT_PORT})")
    parser.add_argument("--wait", type=float, default=3.0, help="Seconds to wait for replies (default: 3)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Status command
    subparsers.add_parser("status", help="Show channels, presets and mutes")

    # Raw command
    send_parser = subparsers.add_parser("send", help="Send a raw command to the device")
    send_parser.add_argument("text", nargs="+", help='Command text, e.g. set mute "Mic 1" 1')

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    if args.command == "status":
        asyncio.run(show_status(args.host, args.port, args.wait))
    elif args.command == "send":
        asyncio.run(send_command(args.host, args.port, " ".join(args.text), args.wait))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
