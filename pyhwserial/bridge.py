"""Bridge between a Homeworks serial controller and a host registry.

This module provides:
- Connection setup and login
- The single inbound line loop (classify, then reconcile)
- The discovery sweep
- Outbound light requests from the host

The bridge owns the transport and the device directory; nothing else
writes to either.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from . import commands
from .accessory import AccessoryHandler, NotifyCallback
from .config import HomeworksSerialConfig
from .discovery import async_run_discovery
from .exceptions import HomeworksNoCredentialsProvided, HomeworksProtocolError
from .messages import DimmerLevelMessage, NoiseMessage
from .protocol import classify
from .reconciler import DeviceDirectory
from .registry import AccessoryRegistry
from .transport import SerialTransport

_LOGGER = logging.getLogger(__name__)


class HomeworksBridge:
    """Owns the serial connection and the device directory.

    Example:
        bridge = HomeworksBridge(config, registry)
        await bridge.connect()
        await bridge.start()
        await bridge.discover()
        await bridge.request_brightness("01:04:01:05:03", 75)
    """

    def __init__(
        self,
        config: HomeworksSerialConfig,
        registry: AccessoryRegistry,
        notify: NotifyCallback | None = None,
        transport: SerialTransport | None = None,
    ) -> None:
        """Initialize bridge.

        Args:
            config: Validated configuration
            registry: Host accessory registry
            notify: Called with (address, characteristic, value) on state changes
            transport: Transport to use instead of opening config.serial_path
        """
        self._config = config
        self._transport = transport or SerialTransport(
            config.serial_path, config.baudrate, config.delimiter
        )
        self._directory = DeviceDirectory(registry, config, notify)

        self._read_task: asyncio.Task | None = None

        # Health metrics
        self._last_message_at: datetime | None = None
        self._message_count = 0
        self._noise_count = 0
        self._parse_error_count = 0

    @property
    def directory(self) -> DeviceDirectory:
        """Return the device directory."""
        return self._directory

    @property
    def config(self) -> HomeworksSerialConfig:
        """Return the configuration."""
        return self._config

    @property
    def connected(self) -> bool:
        """Return True if the transport is open."""
        return self._transport.connected

    @property
    def running(self) -> bool:
        """Return True while the line loop is running."""
        return self._read_task is not None and not self._read_task.done()

    @property
    def last_message_at(self) -> datetime | None:
        """Return time of last received line."""
        return self._last_message_at

    @property
    def message_count(self) -> int:
        """Return total lines received."""
        return self._message_count

    @property
    def noise_count(self) -> int:
        """Return lines discarded as noise."""
        return self._noise_count

    @property
    def parse_error_count(self) -> int:
        """Return malformed level reports skipped."""
        return self._parse_error_count

    async def connect(self) -> None:
        """Open the transport and log in if required.

        Raises:
            HomeworksConnectionFailed: If the port cannot be opened
        """
        await self._transport.open()

        if self._config.login_required:
            try:
                await self._login()
            except HomeworksNoCredentialsProvided as err:
                _LOGGER.warning("Skipping login: %s", err)

    async def _login(self) -> None:
        if not self._config.password:
            raise HomeworksNoCredentialsProvided("Login required but no password")
        await self._transport.send(commands.login(self._config.password))

    async def start(self) -> None:
        """Restore cached accessories and start the line loop."""
        if self.running:
            return
        self._directory.restore()
        self._read_task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the line loop and close the transport."""
        if self._read_task:
            self._read_task.cancel()
            try:
                await self._read_task
            except asyncio.CancelledError:
                pass
            self._read_task = None
        await self._transport.close()

    async def discover(self) -> int:
        """Run the discovery sweep.

        Returns:
            Number of level requests sent
        """
        _LOGGER.debug("Starting discovery sweep")
        return await async_run_discovery(self._transport)

    async def _run(self) -> None:
        """Main line loop."""
        async for line in self._transport.lines():
            try:
                self.process_line(line)
            except Exception:  # noqa: BLE001
                _LOGGER.exception("Error processing line: %s", line)
        _LOGGER.warning("No further lines from %s", self._config.serial_path)

    def process_line(self, line: str) -> None:
        """Classify one line and apply it to the directory."""
        self._message_count += 1
        self._last_message_at = datetime.now()

        try:
            msg = classify(line)
        except HomeworksProtocolError as err:
            self._parse_error_count += 1
            _LOGGER.warning("Skipping malformed line: %s", err)
            return

        if isinstance(msg, NoiseMessage):
            self._noise_count += 1
            return

        _LOGGER.debug("Received line: %s", line)
        if isinstance(msg, DimmerLevelMessage):
            self._directory.handle_message(msg)

    def _handler(self, address: str) -> AccessoryHandler:
        handler = self._directory.get(address)
        if handler is None:
            raise KeyError(f"Unknown device address: {address}")
        return handler

    async def request_on(self, address: str, value: bool) -> None:
        """Switch a known device on or off."""
        await self._transport.send(self._handler(address).request_on(value))

    async def request_brightness(self, address: str, value: int) -> None:
        """Set the brightness (0-100) of a known device."""
        await self._transport.send(self._handler(address).request_brightness(value))
