"""Fake Homeworks serial controller and accessory registry for testing."""

import asyncio
import logging
from typing import Callable

from pyhwserial import Accessory
from pyhwserial.exceptions import HomeworksConnectionFailed, HomeworksConnectionLost

_LOGGER = logging.getLogger(__name__)


class FakeSerialController:
    """A fake Homeworks controller standing in for SerialTransport.

    Simulates the RS-232 interface behavior including:
    - DL responses to RDL commands for configured dimmers
    - "not in database" responses for every other address
    - DL feedback for FADEDIM commands
    - Unsolicited lines pushed by the test
    """

    def __init__(self, fail_open: bool = False) -> None:
        """Initialize the fake controller."""
        self._fail_open = fail_open
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._connected = False

        # Simulated state
        self._dimmer_levels: dict[str, int] = {}

        # Everything written by the bridge, in order
        self.sent: list[str] = []

        # Event hooks for testing
        self.on_command: Callable[[str], None] | None = None

    @property
    def connected(self) -> bool:
        """Return True if open."""
        return self._connected

    def set_dimmer_level(self, address: str, level: int) -> None:
        """Set the dimmer level for a bare address."""
        self._dimmer_levels[address] = level

    def push(self, line: str) -> None:
        """Queue a line as if the controller had sent it."""
        self._queue.put_nowait(line)

    def disconnect(self) -> None:
        """End the line stream."""
        self._queue.put_nowait(None)

    async def open(self) -> None:
        """Open the fake port."""
        if self._fail_open:
            raise HomeworksConnectionFailed("Unable to open serial port /dev/ttyFAKE0")
        self._connected = True

    async def send(self, line: str) -> None:
        """Record a command and queue any response."""
        if not self._connected:
            raise HomeworksConnectionLost("Not open")
        self.sent.append(line)
        if self.on_command:
            self.on_command(line)
        self._process_command(line)

    def _process_command(self, command: str) -> None:
        parts = command.split(", ")
        cmd = parts[0].upper()

        if cmd == "DLMON":
            self.push("Dimmer level monitoring enabled")

        elif cmd == "RDL" and len(parts) >= 2:
            address = parts[1].strip().strip("[]")
            if address in self._dimmer_levels:
                self.push(f"DL, [{address}], {self._dimmer_levels[address]}")
            else:
                self.push(f"Address [{address}] not in database")

        elif cmd == "FADEDIM" and len(parts) >= 5:
            level = int(float(parts[1]))
            address = parts[4].strip().strip("[]")
            self._dimmer_levels[address] = level
            self.push(f"DL, [{address}], {level}")

    async def lines(self):
        """Yield queued lines until disconnected."""
        while True:
            line = await self._queue.get()
            if line is None:
                return
            yield line

    async def close(self) -> None:
        """Close the fake port."""
        self._connected = False

    async def drain(self) -> None:
        """Wait until every queued line has been taken by the reader."""
        for _ in range(100_000):
            if self._queue.empty():
                break
            await asyncio.sleep(0)
        # One more pass so the last line is fully processed
        await asyncio.sleep(0)


class FakeAccessoryRegistry:
    """In-memory accessory registry that counts writes."""

    def __init__(self, cached: list[Accessory] | None = None) -> None:
        """Initialize with optional cached accessories."""
        self._accessories: dict[str, Accessory] = {a.key: a for a in cached or []}
        self.registered: list[Accessory] = []
        self.updated: list[Accessory] = []
        self.unregistered: list[Accessory] = []
        self.restore_calls = 0

    def restore_cached(self) -> list[Accessory]:
        self.restore_calls += 1
        return list(self._accessories.values())

    def find_by_key(self, key: str) -> Accessory | None:
        return self._accessories.get(key)

    def register(self, accessory: Accessory) -> None:
        self._accessories[accessory.key] = accessory
        self.registered.append(accessory)

    def update(self, accessory: Accessory) -> None:
        self._accessories[accessory.key] = accessory
        self.updated.append(accessory)

    def unregister(self, accessory: Accessory) -> None:
        self._accessories.pop(accessory.key, None)
        self.unregistered.append(accessory)

    @property
    def writes(self) -> int:
        """Return the number of persistence writes."""
        return len(self.registered) + len(self.updated) + len(self.unregistered)
