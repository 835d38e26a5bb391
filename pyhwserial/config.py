"""Configuration for the Homeworks serial bridge.

Raw configuration is validated once, field by field. A field with the
wrong shape falls back to its default and logs a warning, so a typo in
one setting never stops the bridge from starting.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import logging
from typing import Any

import voluptuous as vol

from .models import DeviceRecord, normalize_address
from .transport import DEFAULT_BAUDRATE, DEFAULT_DELIMITER

_LOGGER = logging.getLogger(__name__)

CONF_SERIAL_PATH = "serial_path"
CONF_BAUDRATE = "baudrate"
CONF_DELIMITER = "delimiter"
CONF_LOGIN_REQUIRED = "login_required"
CONF_PASSWORD = "password"
CONF_CUSTOM_DEVICES = "custom_devices"
CONF_IGNORE_DEVICES = "ignore_devices"
CONF_DEFAULT_FADE_TIME = "default_fade_time"
CONF_ADDRESS = "address"
CONF_NAME = "name"
CONF_FADE_TIME = "fade_time"

DEFAULT_FADE_TIME = 1

FADE_TIME = vol.All(vol.Any(int, float), vol.Range(min=0))

FIELD_SCHEMAS: dict[str, vol.Schema] = {
    CONF_BAUDRATE: vol.Schema(vol.All(int, vol.Range(min=1))),
    CONF_DELIMITER: vol.Schema(vol.All(str, vol.Length(min=1))),
    CONF_LOGIN_REQUIRED: vol.Schema(bool),
    CONF_PASSWORD: vol.Schema(vol.Any(None, str)),
    CONF_CUSTOM_DEVICES: vol.Schema(list),
    CONF_IGNORE_DEVICES: vol.Schema([str]),
    CONF_DEFAULT_FADE_TIME: vol.Schema(FADE_TIME),
}

DEVICE_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_ADDRESS): str,
        vol.Optional(CONF_NAME): str,
        vol.Optional(CONF_FADE_TIME): FADE_TIME,
    },
    extra=vol.ALLOW_EXTRA,
)


@dataclass(frozen=True)
class HomeworksSerialConfig:
    """Validated bridge configuration."""

    serial_path: str
    baudrate: int = DEFAULT_BAUDRATE
    delimiter: str = DEFAULT_DELIMITER
    login_required: bool = False
    password: str | None = None
    custom_devices: Mapping[str, DeviceRecord] = field(default_factory=dict)
    ignore_devices: frozenset[str] = frozenset()
    default_fade_time: float = DEFAULT_FADE_TIME

    def device_name(self, address: str) -> str:
        """Return the configured name for an address, else the address."""
        record = self.custom_devices.get(address)
        if record is not None and record.name is not None:
            return record.name
        return address

    def device_fade_time(self, address: str) -> float:
        """Return the configured fade time for an address, else the default."""
        record = self.custom_devices.get(address)
        if record is not None and record.fade_time is not None:
            return record.fade_time
        return self.default_fade_time

    def is_ignored(self, address: str) -> bool:
        """Return True if the address is in the ignore list."""
        return address in self.ignore_devices


def _validated(raw: Mapping[str, Any], key: str, default: Any) -> Any:
    """Validate one field, falling back to the default on a bad shape."""
    if key not in raw:
        return default
    try:
        return FIELD_SCHEMAS[key](raw[key])
    except vol.Invalid as err:
        _LOGGER.warning(
            "Invalid value for %s in config (%s); using default %r", key, err, default
        )
        return default


def _parse_custom_devices(devices: list[Any]) -> dict[str, DeviceRecord]:
    """Build the address -> DeviceRecord mapping, skipping bad entries."""
    records: dict[str, DeviceRecord] = {}
    for index, device in enumerate(devices):
        if not isinstance(device, Mapping):
            _LOGGER.warning(
                "custom_devices entry at index %d is not a mapping: %s", index, device
            )
            continue
        try:
            device = DEVICE_SCHEMA(dict(device))
        except vol.Invalid as err:
            _LOGGER.warning(
                "custom_devices entry at index %d is invalid (%s): %s", index, err, device
            )
            continue

        address = normalize_address(device[CONF_ADDRESS])
        record = DeviceRecord(
            address=address,
            name=device.get(CONF_NAME),
            fade_time=device.get(CONF_FADE_TIME),
        )
        if record.name is not None:
            _LOGGER.debug("Found name %s in custom device %s", record.name, address)
        if record.fade_time is not None:
            _LOGGER.debug("Found fade time %s in custom device %s", record.fade_time, address)
        records[address] = record
    return records


def parse_config(raw: Mapping[str, Any]) -> HomeworksSerialConfig:
    """Build a validated configuration from a raw mapping.

    Raises:
        vol.Invalid: If serial_path is missing or not a string
    """
    serial_path = vol.Schema(vol.All(str, vol.Length(min=1)))(raw.get(CONF_SERIAL_PATH))

    login_required = _validated(raw, CONF_LOGIN_REQUIRED, False)
    password = _validated(raw, CONF_PASSWORD, None)
    if login_required and not password:
        _LOGGER.warning("login_required is set but no password is configured")

    custom_devices = _parse_custom_devices(_validated(raw, CONF_CUSTOM_DEVICES, []))
    ignore_devices = frozenset(
        normalize_address(addr) for addr in _validated(raw, CONF_IGNORE_DEVICES, [])
    )

    return HomeworksSerialConfig(
        serial_path=serial_path,
        baudrate=_validated(raw, CONF_BAUDRATE, DEFAULT_BAUDRATE),
        delimiter=_validated(raw, CONF_DELIMITER, DEFAULT_DELIMITER),
        login_required=login_required,
        password=password,
        custom_devices=custom_devices,
        ignore_devices=ignore_devices,
        default_fade_time=_validated(raw, CONF_DEFAULT_FADE_TIME, DEFAULT_FADE_TIME),
    )
