"""Home Assistant side of the accessory registry.

Accessory contexts are persisted with the storage helper. Each accessory
is exposed as one light entity; unregistering removes the entity from the
entity registry.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Any

from homeassistant.const import Platform
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers import entity_registry as er
from homeassistant.helpers.dispatcher import async_dispatcher_send
from homeassistant.helpers.entity import Entity
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.storage import Store

from pyhwserial import Accessory

from .const import (
    DOMAIN,
    SIGNAL_ACCESSORY_UPDATE,
    STORAGE_KEY,
    STORAGE_SAVE_DELAY,
    STORAGE_VERSION,
)

_LOGGER = logging.getLogger(__name__)

EntityFactory = Callable[[Accessory], Entity]


class HassAccessoryRegistry:
    """Accessory registry backed by Home Assistant storage."""

    def __init__(self, hass: HomeAssistant) -> None:
        """Initialize the registry."""
        self._hass = hass
        self._store: Store[dict[str, Any]] = Store(hass, STORAGE_VERSION, STORAGE_KEY)
        self._accessories: dict[str, Accessory] = {}
        self._add_entities: AddEntitiesCallback | None = None
        self._entity_factory: EntityFactory | None = None

    async def async_load(self) -> None:
        """Load persisted accessories."""
        data = await self._store.async_load() or {}
        for key, item in data.get("accessories", {}).items():
            self._accessories[key] = Accessory(
                key=key,
                display_name=item["display_name"],
                context=dict(item["context"]),
            )
        _LOGGER.debug("Loaded %d accessories from storage", len(self._accessories))

    @callback
    def async_attach(
        self, async_add_entities: AddEntitiesCallback, entity_factory: EntityFactory
    ) -> None:
        """Attach the light platform and add entities for cached accessories."""
        self._add_entities = async_add_entities
        self._entity_factory = entity_factory
        if self._accessories:
            async_add_entities(
                [entity_factory(accessory) for accessory in self._accessories.values()]
            )

    def restore_cached(self) -> list[Accessory]:
        """Return accessories persisted by a previous run."""
        return list(self._accessories.values())

    def find_by_key(self, key: str) -> Accessory | None:
        """Return the accessory with this key, if registered."""
        return self._accessories.get(key)

    def register(self, accessory: Accessory) -> None:
        """Add and persist a new accessory."""
        self._accessories[accessory.key] = accessory
        if self._add_entities is None or self._entity_factory is None:
            _LOGGER.warning("Light platform not ready; %s added on next start", accessory.display_name)
        else:
            self._add_entities([self._entity_factory(accessory)])
        self._schedule_save()

    def update(self, accessory: Accessory) -> None:
        """Persist a changed accessory."""
        self._accessories[accessory.key] = accessory
        async_dispatcher_send(self._hass, SIGNAL_ACCESSORY_UPDATE.format(accessory.key))
        self._schedule_save()

    def unregister(self, accessory: Accessory) -> None:
        """Remove an accessory, its entity and its persisted context."""
        self._accessories.pop(accessory.key, None)
        entity_registry = er.async_get(self._hass)
        entity_id = entity_registry.async_get_entity_id(Platform.LIGHT, DOMAIN, accessory.key)
        if entity_id is not None:
            entity_registry.async_remove(entity_id)
        self._schedule_save()

    @callback
    def _schedule_save(self) -> None:
        self._store.async_delay_save(self._data_to_save, STORAGE_SAVE_DELAY)

    @callback
    def _data_to_save(self) -> dict[str, Any]:
        return {
            "accessories": {
                key: {"display_name": accessory.display_name, "context": accessory.context}
                for key, accessory in self._accessories.items()
            }
        }
