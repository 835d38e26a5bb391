"""PyHWSerial - Async bridge for Lutron Homeworks over RS-232.

This package provides a typed interface for the light-level subset of the
Homeworks serial protocol, plus the reconciliation that turns level
reports into host accessories.

Main components:
- HomeworksBridge: Owns the serial port and the device directory
- classify: Sorts raw lines into noise, level reports and unknown lines
- Command builders: Functions to construct protocol commands
- Discovery: The startup sweep over the dimmer address space

Example:
    from pyhwserial import HomeworksBridge, parse_config

    config = parse_config({"serial_path": "/dev/ttyUSB0"})
    bridge = HomeworksBridge(config, registry)
    await bridge.connect()
    await bridge.start()
    await bridge.discover()
"""

from .accessory import AccessoryHandler, Characteristic
from .bridge import HomeworksBridge
from .config import HomeworksSerialConfig, parse_config
from .discovery import discovery_commands, sweep_addresses
from .exceptions import (
    HomeworksConnectionFailed,
    HomeworksConnectionLost,
    HomeworksException,
    HomeworksNoCredentialsProvided,
    HomeworksProtocolError,
)
from .messages import AnyMessage, DimmerLevelMessage, HomeworksMessage, NoiseMessage, UnknownMessage
from .models import DeviceAddress, DeviceRecord, bracket_address, normalize_address
from .protocol import classify, is_noise
from .reconciler import DeviceDirectory
from .registry import Accessory, AccessoryRegistry, accessory_key
from .transport import LineFramer, SerialTransport

__all__ = [
    # Bridge
    "HomeworksBridge",
    "DeviceDirectory",
    "AccessoryHandler",
    "Characteristic",
    # Registry contract
    "Accessory",
    "AccessoryRegistry",
    "accessory_key",
    # Configuration
    "HomeworksSerialConfig",
    "parse_config",
    # Messages
    "AnyMessage",
    "DimmerLevelMessage",
    "HomeworksMessage",
    "NoiseMessage",
    "UnknownMessage",
    # Protocol utilities
    "classify",
    "is_noise",
    "discovery_commands",
    "sweep_addresses",
    "DeviceAddress",
    "DeviceRecord",
    "bracket_address",
    "normalize_address",
    # Transport
    "LineFramer",
    "SerialTransport",
    # Exceptions
    "HomeworksConnectionFailed",
    "HomeworksConnectionLost",
    "HomeworksException",
    "HomeworksNoCredentialsProvided",
    "HomeworksProtocolError",
]
