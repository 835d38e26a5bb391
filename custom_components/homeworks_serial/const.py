"""Constants for the Lutron Homeworks serial integration."""

from __future__ import annotations

from typing import Final

DOMAIN: Final = "homeworks_serial"

# Storage for accessory contexts
STORAGE_KEY: Final = f"{DOMAIN}.accessories"
STORAGE_VERSION: Final = 1
STORAGE_SAVE_DELAY: Final = 10

# Dispatcher signals, formatted with the device address / accessory key
SIGNAL_DEVICE_UPDATE: Final = f"{DOMAIN}_device_update_{{}}"
SIGNAL_ACCESSORY_UPDATE: Final = f"{DOMAIN}_accessory_update_{{}}"

ATTR_HOMEWORKS_ADDRESS: Final = "homeworks_address"
ATTR_FADE_TIME: Final = "fade_time"
