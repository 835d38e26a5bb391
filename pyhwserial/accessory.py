"""Per-device state for a Homeworks dimmer output."""

from __future__ import annotations

from enum import Enum
import logging
from typing import Callable

from . import commands
from .models import bracket_address
from .registry import CONTEXT_ADDRESS, CONTEXT_FADE_TIME, CONTEXT_NAME, Accessory

_LOGGER = logging.getLogger(__name__)


class Characteristic(Enum):
    """Values the characteristic layer can observe on a handler."""

    ON = "on"
    BRIGHTNESS = "brightness"


# notify(address, characteristic, value)
NotifyCallback = Callable[[str, Characteristic, "bool | int"], None]


class AccessoryHandler:
    """State of one dimmer output.

    On/off and brightness are tracked separately: turning a light off keeps
    the last brightness so that turning it back on restores it.

    Requests return the FADEDIM command to send. Local state changes before
    the command goes out, so reads reflect the requested value right away.
    """

    def __init__(self, accessory: Accessory, notify: NotifyCallback | None = None) -> None:
        """Initialize from an accessory's context."""
        self._address: str = accessory.context[CONTEXT_ADDRESS]
        self._name: str = accessory.context.get(CONTEXT_NAME, self._address)
        self._fade_time = accessory.context[CONTEXT_FADE_TIME]
        self._notify = notify

        self._on = False
        self._brightness = 100

    @property
    def address(self) -> str:
        """Return the device address."""
        return self._address

    @property
    def name(self) -> str:
        """Return the device name."""
        return self._name

    @property
    def fade_time(self) -> float:
        """Return the fade time in seconds."""
        return self._fade_time

    def get_on(self) -> bool:
        """Return the current on/off state."""
        _LOGGER.debug("Get Characteristic On -> %s", self._on)
        return self._on

    def get_brightness(self) -> int:
        """Return the current brightness (0-100)."""
        _LOGGER.debug("Get Characteristic Brightness -> %s", self._brightness)
        return self._brightness

    def update_state(self, brightness: int) -> None:
        """Apply a level reported by the controller.

        No command is produced; the controller already has this level.
        """
        is_on = brightness != 0
        _LOGGER.info("%s: %s, %s%%", self._name, "On" if is_on else "Off", brightness)

        self._on = is_on
        self._emit(Characteristic.ON, is_on)
        self._brightness = brightness
        self._emit(Characteristic.BRIGHTNESS, brightness)

    def request_on(self, value: bool) -> str:
        """Switch the light on or off.

        Returns:
            FADEDIM command for the current brightness, or level 0 when off
        """
        _LOGGER.debug("Set Characteristic On -> %s", value)
        command = self._set_level(self._brightness if value else 0)
        self._on = value
        self._emit(Characteristic.ON, value)
        return command

    def request_brightness(self, value: int) -> str:
        """Set the brightness (0-100).

        Returns:
            FADEDIM command for the requested brightness

        Raises:
            ValueError: If value is out of range; state is left unchanged
        """
        _LOGGER.debug("Set Characteristic Brightness -> %s", value)
        command = self._set_level(value)
        self._brightness = value
        self._emit(Characteristic.BRIGHTNESS, value)
        return command

    def _set_level(self, level: int) -> str:
        return commands.fade_dim(bracket_address(self._address), level, self._fade_time)

    def _emit(self, characteristic: Characteristic, value: bool | int) -> None:
        if self._notify is not None:
            self._notify(self._address, characteristic, value)
