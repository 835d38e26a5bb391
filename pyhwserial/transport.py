"""Async serial transport for Homeworks RS-232 communication.

This module handles:
- Opening the serial port
- Framing received bytes into delimiter-terminated lines
- Serialized writes

No message classification here - just lines in/out.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
import logging

import serial  # type: ignore[import-untyped]
import serial_asyncio  # type: ignore[import-untyped]

from .exceptions import HomeworksConnectionFailed, HomeworksConnectionLost

_LOGGER = logging.getLogger(__name__)

DEFAULT_BAUDRATE = 115200
DEFAULT_DELIMITER = "\r"

READ_CHUNK_SIZE = 1024


class LineFramer:
    """Split a byte stream into decoded lines.

    Partial lines are buffered until their delimiter arrives.
    """

    def __init__(self, delimiter: str = DEFAULT_DELIMITER) -> None:
        """Initialize the framer."""
        self._delimiter = delimiter.encode("utf-8")
        self._buffer = b""

    def feed(self, data: bytes) -> list[str]:
        """Feed bytes and return any complete lines, delimiter stripped.

        Args:
            data: Raw bytes from the port

        Returns:
            List of lines (may be empty)
        """
        self._buffer += data
        lines = []

        while self._delimiter in self._buffer:
            raw, self._buffer = self._buffer.split(self._delimiter, 1)
            try:
                lines.append(raw.decode("utf-8"))
            except UnicodeDecodeError:
                _LOGGER.warning("Invalid line encoding: %s", raw)

        return lines

    def reset(self) -> None:
        """Clear the buffer."""
        self._buffer = b""


class SerialTransport:
    """Line-oriented transport over a serial port.

    Handles low-level serial operations:
    - Connection establishment
    - Line framing on the configured delimiter
    - One writer at a time

    Does NOT handle:
    - Line classification (use protocol.classify)
    - Command building (use commands module)
    - Reconnection
    """

    def __init__(
        self,
        path: str,
        baudrate: int = DEFAULT_BAUDRATE,
        delimiter: str = DEFAULT_DELIMITER,
    ) -> None:
        """Initialize transport.

        Args:
            path: Serial device path or pyserial URL
            baudrate: Line speed
            delimiter: Line terminator for both directions
        """
        self._path = path
        self._baudrate = baudrate
        self._delimiter = delimiter

        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._write_lock = asyncio.Lock()
        self._framer = LineFramer(delimiter)

    @property
    def connected(self) -> bool:
        """Return True if the port is open."""
        return self._writer is not None and not self._writer.is_closing()

    @property
    def path(self) -> str:
        """Return serial path."""
        return self._path

    @property
    def baudrate(self) -> int:
        """Return baud rate."""
        return self._baudrate

    async def open(self) -> None:
        """Open the serial port.

        Raises:
            HomeworksConnectionFailed: If the port cannot be opened
        """
        try:
            self._reader, self._writer = await serial_asyncio.open_serial_connection(
                url=self._path,
                baudrate=self._baudrate,
            )
        except (serial.SerialException, OSError, ValueError) as err:
            raise HomeworksConnectionFailed(
                f"Unable to open serial port {self._path}: {err}"
            ) from err

        _LOGGER.info("Serial port %s opened at %s baud", self._path, self._baudrate)

    async def send(self, line: str) -> None:
        """Write one line followed by the delimiter.

        Raises:
            HomeworksConnectionLost: If the port is not open
        """
        if not self.connected:
            raise HomeworksConnectionLost(f"Serial port {self._path} is not open")

        data = (line + self._delimiter).encode("utf-8")
        async with self._write_lock:
            self._writer.write(data)
            await self._writer.drain()
        _LOGGER.debug("Sent: %s", line)

    async def lines(self) -> AsyncIterator[str]:
        """Yield decoded lines until the stream ends.

        A read error ends the sequence instead of raising.
        """
        if self._reader is None:
            raise HomeworksConnectionLost(f"Serial port {self._path} is not open")

        while True:
            try:
                data = await self._reader.read(READ_CHUNK_SIZE)
            except (serial.SerialException, OSError) as err:
                _LOGGER.warning("Read from %s failed: %s", self._path, err)
                return
            if not data:
                _LOGGER.warning("Serial port %s closed", self._path)
                return
            for line in self._framer.feed(data):
                yield line

    async def close(self) -> None:
        """Close the serial port."""
        if self._writer is not None:
            self._writer.close()
            try:
                await self._writer.wait_closed()
            except (serial.SerialException, OSError) as err:
                _LOGGER.debug("Error while closing %s: %s", self._path, err)
            finally:
                self._writer = None
                self._reader = None
        self._framer.reset()
        _LOGGER.debug("Serial port %s closed", self._path)
