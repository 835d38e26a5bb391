"""Data models for Homeworks serial devices."""

from __future__ import annotations

from dataclasses import dataclass

# Number of components in a dimmer output address
ADDRESS_LENGTH = 5
ADDRESS_COMPONENT_MAX = 99


def normalize_address(address: str) -> str:
    """Normalize an address to the bare zero-padded key form.

    This is the form the controller reports in level lines and the form used
    as the device directory key.

    Examples:
        "[1:4:1:5:3]" -> "01:04:01:05:03"
        "01:04:01:05:03" -> "01:04:01:05:03"
    """
    addr = address.strip().strip("[]")
    return ":".join(p.strip().zfill(2) for p in addr.split(":"))


def bracket_address(address: str) -> str:
    """Return the bracketed wire form of an address.

    Examples:
        "01:04:01:05:03" -> "[01:04:01:05:03]"
        "[01:04:01:05:03]" -> "[01:04:01:05:03]"
    """
    if address.startswith("[") and address.endswith("]"):
        return address
    return f"[{address}]"


@dataclass(frozen=True, order=True)
class DeviceAddress:
    """Address of a single dimmer output.

    Format: enclosure:zone:type:module:output
    Each component is rendered as two-digit decimal.
    """

    enclosure: int
    zone: int
    type: int
    module: int
    output: int

    def __post_init__(self) -> None:
        """Validate every component."""
        for part in self.parts:
            if not 1 <= part <= ADDRESS_COMPONENT_MAX:
                raise ValueError(f"Address component out of range: {self.parts}")

    @classmethod
    def from_string(cls, addr_str: str) -> "DeviceAddress":
        """Parse an address from bracketed or bare form."""
        parts = addr_str.strip().strip("[]").split(":")
        if len(parts) != ADDRESS_LENGTH:
            raise ValueError(f"Device address must have {ADDRESS_LENGTH} parts: {addr_str}")
        return cls(*(int(p) for p in parts))

    @property
    def parts(self) -> tuple[int, int, int, int, int]:
        """Return the address components."""
        return (self.enclosure, self.zone, self.type, self.module, self.output)

    @property
    def key(self) -> str:
        """Return the bare key form, e.g. 01:04:01:05:03."""
        return ":".join(f"{p:02d}" for p in self.parts)

    def to_wire(self) -> str:
        """Return the bracketed wire form, e.g. [01:04:01:05:03]."""
        return f"[{self.key}]"

    def __str__(self) -> str:
        return self.to_wire()


@dataclass(frozen=True)
class DeviceRecord:
    """Per-device overrides from configuration."""

    address: str  # Normalized key form
    name: str | None = None
    fade_time: float | None = None
