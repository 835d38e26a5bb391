"""Protocol classification for Homeworks serial lines.

This module handles:
- Dropping noise lines (transport, login and validation errors)
- Recognizing dimmer level reports
- Extracting address and level from a report

Classification is stateless - one line in, one message out.
"""

from __future__ import annotations

import logging
from datetime import datetime

from .exceptions import HomeworksProtocolError
from .messages import AnyMessage, DimmerLevelMessage, NoiseMessage, UnknownMessage

_LOGGER = logging.getLogger(__name__)

# Substrings marking a line as error text. Case-sensitive, checked first.
NOISE_MARKERS: tuple[str, ...] = (
    "232",
    "incorrect",
    "Invalid",
    "invalid",
    "not in database",
)

# Substring marking a dimmer level report
DIMMER_LEVEL_MARKER = "DL, "


def noise_marker(line: str) -> str | None:
    """Return the first noise substring found in a line, if any."""
    for marker in NOISE_MARKERS:
        if marker in line:
            return marker
    return None


def is_noise(line: str) -> bool:
    """Return True if the line is error text to be discarded."""
    return noise_marker(line) is not None


def classify(line: str) -> AnyMessage:
    """Classify a single line from the controller.

    The noise check runs before anything else, so a line such as
    ``"DL, [01:04:01:05:03] not in database"`` is noise, not a report.

    Args:
        line: Decoded line without terminator

    Returns:
        NoiseMessage, DimmerLevelMessage or UnknownMessage

    Raises:
        HomeworksProtocolError: If a level report has a malformed field
    """
    timestamp = datetime.now()

    marker = noise_marker(line)
    if marker is not None:
        return NoiseMessage(raw=line, timestamp=timestamp, marker=marker)

    if DIMMER_LEVEL_MARKER in line:
        return _parse_dl(line, timestamp)

    return UnknownMessage(raw=line, timestamp=timestamp)


def _parse_dl(line: str, timestamp: datetime) -> DimmerLevelMessage:
    """Parse a DL (Dimmer Level) report.

    Format: DL, [address], <level>

    The address is the second comma field with the leading ", [" remnant and
    the closing bracket cut off; the level is the third field.
    """
    sections = line.split(",")
    if len(sections) < 3:
        raise HomeworksProtocolError(line, "Missing level report fields")

    address_field = sections[1]
    if len(address_field) < 4 or address_field[1] != "[" or address_field[-1] != "]":
        raise HomeworksProtocolError(line, "Malformed address field")
    address = address_field[2:-1]

    try:
        level = int(sections[2])
    except ValueError as err:
        raise HomeworksProtocolError(line, "Malformed level field") from err

    _LOGGER.debug("%s, %s%%", address, level)
    return DimmerLevelMessage(raw=line, timestamp=timestamp, address=address, level=level)
