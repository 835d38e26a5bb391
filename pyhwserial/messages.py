"""Typed structures for classified controller lines.

Every line read from the controller is classified into exactly one of
these types by ``protocol.classify``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class HomeworksMessage:
    """Base class for all classified lines."""

    raw: str  # Original line without terminator
    timestamp: datetime


@dataclass(frozen=True)
class NoiseMessage(HomeworksMessage):
    """Transport, login or validation error text.

    Examples:
        L232> Invalid command
        login incorrect
        Address not in database
    """

    marker: str  # The noise substring that matched


@dataclass(frozen=True)
class DimmerLevelMessage(HomeworksMessage):
    """Dimmer level report.

    Format: DL, [address], <level>

    The controller sends the same line whether the level changed on its own
    or was requested with RDL, so the two cannot be told apart.
    """

    address: str  # Bare key form, e.g. 01:04:01:05:03
    level: int  # 0-100 percent


@dataclass(frozen=True)
class UnknownMessage(HomeworksMessage):
    """Line that is neither noise nor a level report."""


# Type alias for any classified line
AnyMessage = NoiseMessage | DimmerLevelMessage | UnknownMessage
