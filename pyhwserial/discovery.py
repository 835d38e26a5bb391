"""Discovery sweep over the dimmer address space.

Every address in the ranges below gets one RDL command. The controller
answers with a DL line for each configured output, and those lines travel
the normal inbound path. Nothing here waits for or matches responses.
"""

from __future__ import annotations

from collections.abc import Iterator
import itertools
import logging

from . import commands
from .models import DeviceAddress

_LOGGER = logging.getLogger(__name__)

# Inclusive ranges per address component
ENCLOSURE_RANGE = range(1, 17)
ZONE_RANGE = range(4, 7)
TYPE_RANGE = range(1, 5)
MODULE_RANGE = range(1, 13)
OUTPUT_RANGE = range(1, 5)

SWEEP_RANGES = (ENCLOSURE_RANGE, ZONE_RANGE, TYPE_RANGE, MODULE_RANGE, OUTPUT_RANGE)


def sweep_addresses() -> Iterator[DeviceAddress]:
    """Yield every sweep address in nested lexicographic order."""
    for parts in itertools.product(*SWEEP_RANGES):
        yield DeviceAddress(*parts)


def discovery_commands() -> Iterator[str]:
    """Yield the full discovery command sequence.

    A blank line clears any partial input on the controller, DLMON arms
    level reporting, then one RDL per address follows.
    """
    yield ""
    yield commands.enable_dimmer_monitoring()
    for address in sweep_addresses():
        yield commands.request_dimmer_level(address.to_wire())


async def async_run_discovery(transport) -> int:
    """Send the discovery sequence over a transport.

    Returns:
        Number of RDL commands sent
    """
    count = 0
    for command in discovery_commands():
        await transport.send(command)
        if command.startswith("RDL"):
            count += 1
    _LOGGER.debug("Discovery sweep sent %d level requests", count)
    return count
