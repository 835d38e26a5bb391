"""Exceptions raised by the Homeworks serial library."""

from __future__ import annotations


class HomeworksException(Exception):
    """Base error for the Homeworks serial library."""


class HomeworksConnectionFailed(HomeworksException):
    """The serial port could not be opened."""


class HomeworksConnectionLost(HomeworksException):
    """The serial port is closed or was lost."""


class HomeworksNoCredentialsProvided(HomeworksException):
    """Login is required but no password is configured."""


class HomeworksProtocolError(HomeworksException, ValueError):
    """A level report line could not be parsed."""

    def __init__(self, line: str, reason: str) -> None:
        """Keep the offending line for logging."""
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason
