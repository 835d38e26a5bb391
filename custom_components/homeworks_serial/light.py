"""Support for Lutron Homeworks serial lights."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.light import ATTR_BRIGHTNESS, ColorMode, LightEntity
from homeassistant.core import HomeAssistant
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.start import async_at_started
from homeassistant.helpers.typing import ConfigType, DiscoveryInfoType

from pyhwserial import Accessory, AccessoryHandler, HomeworksBridge
from pyhwserial.registry import CONTEXT_FADE_TIME, MANUFACTURER, MODEL

from . import HomeworksSerialData
from .const import (
    ATTR_FADE_TIME,
    ATTR_HOMEWORKS_ADDRESS,
    DOMAIN,
    SIGNAL_ACCESSORY_UPDATE,
    SIGNAL_DEVICE_UPDATE,
)

_LOGGER = logging.getLogger(__name__)

# Level used when turning on a light last reported at 0
DEFAULT_ON_LEVEL = 100


def to_hass_level(level: int) -> int:
    """Convert Homeworks level (0-100) to HA brightness (0-255)."""
    return round(level * 255 / 100)


def to_homeworks_level(brightness: int) -> int:
    """Convert HA brightness (1-255) to Homeworks level (1-100)."""
    return max(1, min(100, round(brightness * 100 / 255)))


async def async_setup_platform(
    hass: HomeAssistant,
    config: ConfigType,
    async_add_entities: AddEntitiesCallback,
    discovery_info: DiscoveryInfoType | None = None,
) -> None:
    """Set up Homeworks serial lights."""
    if discovery_info is None:
        return

    data: HomeworksSerialData = hass.data[DOMAIN]
    bridge = data.bridge

    data.registry.async_attach(
        async_add_entities,
        lambda accessory: HomeworksSerialLight(bridge, accessory),
    )
    await bridge.start()

    async def _async_discover(hass: HomeAssistant) -> None:
        _LOGGER.debug("Home Assistant started; running discovery sweep")
        await bridge.discover()

    async_at_started(hass, _async_discover)


class HomeworksSerialLight(LightEntity):
    """Homeworks dimmer output.

    State lives in the bridge's AccessoryHandler; the entity is unavailable
    until the controller has reported the address in this run.
    """

    _attr_should_poll = False
    _attr_color_mode = ColorMode.BRIGHTNESS
    _attr_supported_color_modes = {ColorMode.BRIGHTNESS}

    def __init__(self, bridge: HomeworksBridge, accessory: Accessory) -> None:
        """Create the light for an accessory."""
        self._bridge = bridge
        self._accessory = accessory
        self._address: str = accessory.address

        self._attr_unique_id = accessory.key
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, accessory.key)},
            name=accessory.display_name,
            manufacturer=MANUFACTURER,
            model=MODEL,
            serial_number=self._address,
        )

    @property
    def _handler(self) -> AccessoryHandler | None:
        return self._bridge.directory.get(self._address)

    @property
    def name(self) -> str:
        """Return the name of the entity."""
        return self._accessory.display_name

    @property
    def available(self) -> bool:
        """Return True once the controller has reported this device."""
        return self._bridge.connected and self._handler is not None

    @property
    def is_on(self) -> bool | None:
        """Return True if the light is on."""
        handler = self._handler
        return handler.get_on() if handler else None

    @property
    def brightness(self) -> int | None:
        """Return the brightness (0-255)."""
        handler = self._handler
        return to_hass_level(handler.get_brightness()) if handler else None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return the device address and fade time."""
        return {
            ATTR_HOMEWORKS_ADDRESS: self._address,
            ATTR_FADE_TIME: self._accessory.context.get(CONTEXT_FADE_TIME),
        }

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Turn on the light."""
        handler = self._handler
        level: int | None = None
        if ATTR_BRIGHTNESS in kwargs:
            level = to_homeworks_level(kwargs[ATTR_BRIGHTNESS])
        elif handler is not None and handler.get_brightness() == 0:
            # Switching on at the stored level would send FADEDIM 0
            level = DEFAULT_ON_LEVEL

        if level is not None:
            await self._bridge.request_brightness(self._address, level)
            if self.is_on:
                return
        await self._bridge.request_on(self._address, True)

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn off the light."""
        await self._bridge.request_on(self._address, False)

    async def async_added_to_hass(self) -> None:
        """Follow handler and accessory updates."""
        self.async_on_remove(
            async_dispatcher_connect(
                self.hass,
                SIGNAL_DEVICE_UPDATE.format(self._address),
                self.async_write_ha_state,
            )
        )
        self.async_on_remove(
            async_dispatcher_connect(
                self.hass,
                SIGNAL_ACCESSORY_UPDATE.format(self._accessory.key),
                self.async_write_ha_state,
            )
        )
