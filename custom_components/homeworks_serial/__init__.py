"""Support for Lutron Homeworks systems over a direct RS-232 link.

Configured from configuration.yaml:

    homeworks_serial:
      serial_path: /dev/ttyUSB0
      custom_devices:
        - address: "01:04:01:05:03"
          name: Kitchen
          fade_time: 3
      ignore_devices:
        - "01:04:01:05:04"
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

import voluptuous as vol

from homeassistant.const import EVENT_HOMEASSISTANT_STOP, Platform
from homeassistant.core import Event, HomeAssistant, callback
import homeassistant.helpers.config_validation as cv
from homeassistant.helpers.discovery import async_load_platform
from homeassistant.helpers.dispatcher import async_dispatcher_send
from homeassistant.helpers.typing import ConfigType

from pyhwserial import (
    Characteristic,
    HomeworksBridge,
    HomeworksConnectionFailed,
    parse_config,
)
from pyhwserial.config import CONF_SERIAL_PATH

from .const import DOMAIN, SIGNAL_DEVICE_UPDATE
from .registry import HassAccessoryRegistry

_LOGGER = logging.getLogger(__name__)

# Only the serial path is checked here; every other field is validated by
# pyhwserial.parse_config, which falls back to defaults instead of failing.
CONFIG_SCHEMA = vol.Schema(
    {
        DOMAIN: vol.Schema(
            {vol.Required(CONF_SERIAL_PATH): cv.string},
            extra=vol.ALLOW_EXTRA,
        )
    },
    extra=vol.ALLOW_EXTRA,
)


@dataclass
class HomeworksSerialData:
    """Container for integration data."""

    bridge: HomeworksBridge
    registry: HassAccessoryRegistry


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    """Open the serial port and load the light platform."""
    if DOMAIN not in config:
        return True

    conf = parse_config(config[DOMAIN])

    registry = HassAccessoryRegistry(hass)
    await registry.async_load()

    @callback
    def notify(address: str, characteristic: Characteristic, value: bool | int) -> None:
        async_dispatcher_send(hass, SIGNAL_DEVICE_UPDATE.format(address))

    bridge = HomeworksBridge(conf, registry, notify=notify)
    try:
        await bridge.connect()
    except HomeworksConnectionFailed as err:
        _LOGGER.error("Failed to set up Homeworks serial bridge: %s", err)
        return False

    hass.data[DOMAIN] = HomeworksSerialData(bridge=bridge, registry=registry)

    async def cleanup(event: Event) -> None:
        await bridge.stop()

    hass.bus.async_listen_once(EVENT_HOMEASSISTANT_STOP, cleanup)

    hass.async_create_task(
        async_load_platform(hass, Platform.LIGHT, DOMAIN, {}, config)
    )
    return True
