"""Command builders for the Homeworks serial protocol.

This module is the only place that knows outbound wire syntax.
Only the light-level subset of the command set is covered.

Command format: COMMAND, param1, param2, ...
Terminated by the line delimiter (handled by transport layer).
"""

from __future__ import annotations

# Brightness bounds in percent
LEVEL_MIN = 0
LEVEL_MAX = 100


def login(password: str) -> str:
    """Build LOGIN command."""
    return f"LOGIN, {password}"


def request_dimmer_level(address: str) -> str:
    """Build RDL (Read Dimmer Level) command.

    Args:
        address: Bracketed address, e.g. [01:04:01:05:03]
    """
    return f"RDL, {address}"


def enable_dimmer_monitoring() -> str:
    """Build DLMON command (report level changes as they happen)."""
    return "DLMON"


def fade_dim(address: str, intensity: int, fade_time: float) -> str:
    """Build FADEDIM command.

    Args:
        address: Bracketed address, e.g. [01:04:06:12:04]
        intensity: Target level 0-100 percent
        fade_time: Fade time in seconds, not negative (1.0 is sent as 1)

    Returns:
        Command string

    Raises:
        ValueError: If intensity or fade_time is out of range
    """
    if not LEVEL_MIN <= intensity <= LEVEL_MAX:
        raise ValueError(f"Intensity must be {LEVEL_MIN}-{LEVEL_MAX}: {intensity}")
    if fade_time < 0:
        raise ValueError(f"Fade time must not be negative: {fade_time}")
    return f"FADEDIM, {intensity}, {fade_time:g}, 0, {address}"
