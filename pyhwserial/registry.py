"""Contract between the bridge and the host accessory registry.

The host owns accessory persistence. The bridge only calls the operations
on ``AccessoryRegistry`` and keeps each accessory's context in sync with
configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol
import uuid

# Namespace for stable accessory keys
ACCESSORY_NAMESPACE = uuid.UUID("6f3c1c52-6b1e-4b7e-9a51-0d3f4a6f2c11")

CONTEXT_ADDRESS = "address"
CONTEXT_NAME = "name"
CONTEXT_FADE_TIME = "fade_time"

MANUFACTURER = "Lutron"
MODEL = "Homeworks Illumination"


def accessory_key(address: str) -> str:
    """Return a stable key for a device address."""
    return str(uuid.uuid5(ACCESSORY_NAMESPACE, address))


@dataclass
class Accessory:
    """A host-side accessory and its persisted context.

    Context holds the address, resolved name and resolved fade time.
    """

    key: str
    display_name: str
    context: dict[str, Any] = field(default_factory=dict)

    @property
    def address(self) -> str | None:
        """Return the device address stored in context."""
        return self.context.get(CONTEXT_ADDRESS)


class AccessoryRegistry(Protocol):
    """Operations the host registry provides."""

    def restore_cached(self) -> list[Accessory]:
        """Return accessories persisted by a previous run."""

    def find_by_key(self, key: str) -> Accessory | None:
        """Return the accessory with this key, if registered."""

    def register(self, accessory: Accessory) -> None:
        """Add and persist a new accessory."""

    def update(self, accessory: Accessory) -> None:
        """Persist a changed accessory."""

    def unregister(self, accessory: Accessory) -> None:
        """Remove an accessory and its persisted state."""
