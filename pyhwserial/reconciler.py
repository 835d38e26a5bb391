"""Device directory reconciliation.

Maps the controller's flat stream of level reports onto a stable set of
host accessories:
- Unknown address, not ignored: create and register an accessory
- Unknown address, ignored: drop the report
- Restored accessory now ignored: unregister it
- Known address: push the level into its handler
"""

from __future__ import annotations

import logging

from .accessory import AccessoryHandler, NotifyCallback
from .config import HomeworksSerialConfig
from .messages import DimmerLevelMessage
from .registry import (
    CONTEXT_ADDRESS,
    CONTEXT_FADE_TIME,
    CONTEXT_NAME,
    Accessory,
    AccessoryRegistry,
    accessory_key,
)

_LOGGER = logging.getLogger(__name__)


class DeviceDirectory:
    """Reconcile level reports against the host registry.

    The directory maps address -> AccessoryHandler and is the only record
    of which addresses are already known. It must be driven from a single
    task; reports are applied one at a time.
    """

    def __init__(
        self,
        registry: AccessoryRegistry,
        config: HomeworksSerialConfig,
        notify: NotifyCallback | None = None,
    ) -> None:
        """Initialize the directory."""
        self._registry = registry
        self._config = config
        self._notify = notify
        self._devices: dict[str, AccessoryHandler] = {}
        self._restored: list[Accessory] = []

    def __contains__(self, address: str) -> bool:
        return address in self._devices

    def __len__(self) -> int:
        return len(self._devices)

    def get(self, address: str) -> AccessoryHandler | None:
        """Return the handler for an address, if known."""
        return self._devices.get(address)

    @property
    def addresses(self) -> list[str]:
        """Return all known addresses."""
        return list(self._devices)

    @property
    def restored(self) -> list[Accessory]:
        """Return accessories restored from the host cache."""
        return list(self._restored)

    def restore(self) -> list[Accessory]:
        """Load cached accessories from the host registry.

        Called once at startup, before discovery. Restored accessories get
        a handler only once the controller reports their address.
        """
        self._restored = list(self._registry.restore_cached())
        for accessory in self._restored:
            _LOGGER.info("Loading accessory from cache: %s", accessory.display_name)
        return self.restored

    def handle_message(self, msg: DimmerLevelMessage) -> None:
        """Apply one level report."""
        self.process(msg.address, msg.level)

    def process(self, address: str, brightness: int) -> None:
        """Create or update the device for a reported level."""
        if address in self._devices:
            _LOGGER.debug("%s: Existing device. Updating characteristics.", address)
            self.update_device(address, brightness)
        else:
            _LOGGER.debug("%s: New device. Adding to registry.", address)
            self.add_device(address, brightness)

    def update_device(self, address: str, brightness: int) -> None:
        """Push a level into a known device's handler."""
        self._devices[address].update_state(brightness)

    def add_device(self, address: str, brightness: int) -> AccessoryHandler | None:
        """Register or restore the device for a newly seen address.

        Returns:
            The new handler, or None if the address is ignored
        """
        _LOGGER.debug("Starting initialization for device %s", address)
        key = accessory_key(address)
        existing = self._registry.find_by_key(key)
        ignored = self._config.is_ignored(address)

        if existing is not None:
            if ignored:
                _LOGGER.info(
                    "Found existing device %s but is marked as an ignored device. "
                    "Removing from system.",
                    address,
                )
                self._registry.unregister(existing)
                return None

            _LOGGER.info("Restoring existing accessory from cache: %s", existing.display_name)
            self.sync_context(existing, address)
            accessory = existing
        else:
            if ignored:
                _LOGGER.info(
                    "Found device %s but is marked as an ignored device. Ignoring.", address
                )
                return None

            _LOGGER.info("Adding new accessory: %s", address)
            accessory = Accessory(key=key, display_name=address)
            self.set_context(accessory, address)
            self._registry.register(accessory)

        handler = AccessoryHandler(accessory, self._notify)
        self._devices[address] = handler
        handler.update_state(brightness)
        return handler

    def sync_context(self, accessory: Accessory, address: str) -> bool:
        """Apply configuration to an accessory and persist only on change.

        Returns:
            True if the accessory was written
        """
        if not self.set_context(accessory, address):
            return False
        self._registry.update(accessory)
        return True

    def set_context(self, accessory: Accessory, address: str) -> bool:
        """Project configuration onto an accessory's context.

        The context is only touched when a value differs, so applying the
        same configuration twice changes nothing the second time.

        Returns:
            True if any context value changed
        """
        wanted = {
            CONTEXT_ADDRESS: address,
            CONTEXT_NAME: self._config.device_name(address),
            CONTEXT_FADE_TIME: self._config.device_fade_time(address),
        }
        changed = False
        for key, value in wanted.items():
            if key in accessory.context and accessory.context[key] == value:
                continue
            if key == CONTEXT_NAME:
                _LOGGER.info("Setting name %s to device %s", value, address)
            elif key == CONTEXT_FADE_TIME:
                _LOGGER.info("Setting fade time %s to device %s", value, address)
            accessory.context[key] = value
            changed = True
        if changed:
            accessory.display_name = wanted[CONTEXT_NAME]
        return changed
