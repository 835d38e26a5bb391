"""Tests for the Homeworks serial bridge against a fake controller.

These tests run WITHOUT Home Assistant dependencies.
"""

import pytest
import pytest_asyncio

from pyhwserial import HomeworksBridge, HomeworksConnectionFailed, parse_config

from .fake_controller import FakeAccessoryRegistry, FakeSerialController
from .test_reconciler import make_accessory

SWEEP_SIZE = 16 * 3 * 4 * 12 * 4

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def bridge(config, registry, controller):
    """Create a connected, running bridge."""
    bridge = HomeworksBridge(config, registry, transport=controller)
    await bridge.connect()
    await bridge.start()
    yield bridge
    await bridge.stop()


class TestConnect:
    """Tests for connection setup."""

    async def test_open_failure_propagates(self, config, registry):
        bridge = HomeworksBridge(
            config, registry, transport=FakeSerialController(fail_open=True)
        )
        with pytest.raises(HomeworksConnectionFailed):
            await bridge.connect()

    async def test_login_sent_when_required(self, registry, controller):
        config = parse_config(
            {"serial_path": "/dev/ttyFAKE0", "login_required": True, "password": "secret"}
        )
        bridge = HomeworksBridge(config, registry, transport=controller)

        await bridge.connect()

        assert controller.sent == ["LOGIN, secret"]

    async def test_login_skipped_without_password(self, registry, controller):
        config = parse_config({"serial_path": "/dev/ttyFAKE0", "login_required": True})
        bridge = HomeworksBridge(config, registry, transport=controller)

        await bridge.connect()

        assert controller.connected
        assert controller.sent == []

    async def test_no_login_by_default(self, bridge, controller):
        assert controller.sent == []

    async def test_start_restores_cache(self, bridge, registry):
        assert registry.restore_calls == 1
        assert bridge.running


class TestDiscovery:
    """Tests for the discovery sweep through the bridge."""

    async def test_discovery_registers_configured_dimmers(self, bridge, controller, registry):
        sent = await bridge.discover()
        await controller.drain()

        assert sent == SWEEP_SIZE
        assert sorted(bridge.directory.addresses) == ["01:04:01:05:03", "02:05:03:12:01"]
        assert [a.display_name for a in registry.registered] == ["Kitchen", "02:05:03:12:01"]
        assert bridge.directory.get("01:04:01:05:03").get_brightness() == 50
        assert bridge.directory.get("02:05:03:12:01").get_on() is False

    async def test_discovery_command_order(self, bridge, controller):
        await bridge.discover()

        assert controller.sent[:3] == ["", "DLMON", "RDL, [01:04:01:01:01]"]
        assert controller.sent[-1] == "RDL, [16:06:04:12:04]"
        assert len(controller.sent) == SWEEP_SIZE + 2

    async def test_noise_is_counted_not_reconciled(self, bridge, controller):
        await bridge.discover()
        await controller.drain()

        assert bridge.noise_count == SWEEP_SIZE - 2
        assert len(bridge.directory) == 2


class TestInboundLines:
    """Tests for unsolicited lines."""

    async def test_unsolicited_report_adds_device(self, bridge, controller):
        controller.push("DL, [03:04:01:01:01], 25")
        await controller.drain()

        assert "03:04:01:01:01" in bridge.directory

    async def test_repeated_report_keeps_directory_size(self, bridge, controller, registry):
        controller.push("DL, [03:04:01:01:01], 25")
        controller.push("DL, [03:04:01:01:01], 60")
        await controller.drain()

        assert len(bridge.directory) == 1
        assert len(registry.registered) == 1
        assert bridge.directory.get("03:04:01:01:01").get_brightness() == 60

    async def test_malformed_line_is_skipped(self, bridge, controller):
        controller.push("DL, [03:04:01:01:01], abc")
        controller.push("DL, [03:04:01:01:01], 10")
        await controller.drain()

        assert bridge.parse_error_count == 1
        assert bridge.running
        assert bridge.directory.get("03:04:01:01:01").get_brightness() == 10

    async def test_ignored_address(self, bridge, controller, registry):
        controller.push("DL, [01:04:01:05:04], 100")
        await controller.drain()

        assert "01:04:01:05:04" not in bridge.directory
        assert registry.writes == 0

    async def test_restored_ignored_device_is_removed(self, config, controller):
        accessory = make_accessory("01:04:01:05:04", "Hallway")
        registry = FakeAccessoryRegistry(cached=[accessory])
        bridge = HomeworksBridge(config, registry, transport=controller)
        await bridge.connect()
        await bridge.start()

        controller.push("DL, [01:04:01:05:04], 100")
        await controller.drain()
        await bridge.stop()

        assert registry.unregistered == [accessory]
        assert registry.registered == []

    async def test_end_of_stream_stops_loop(self, bridge, controller):
        controller.disconnect()
        await controller.drain()

        assert not bridge.running

    async def test_message_count(self, bridge, controller):
        controller.push("Dimmer level monitoring enabled")
        controller.push("login incorrect")
        await controller.drain()

        assert bridge.message_count == 2
        assert bridge.noise_count == 1
        assert bridge.last_message_at is not None


class TestOutboundRequests:
    """Tests for requests from the host."""

    async def test_off_then_brightness(self, bridge, controller):
        controller.push("DL, [01:04:01:05:03], 50")
        await controller.drain()

        await bridge.request_on("01:04:01:05:03", False)
        await bridge.request_brightness("01:04:01:05:03", 80)

        assert controller.sent[-2:] == [
            "FADEDIM, 0, 1, 0, [01:04:01:05:03]",
            "FADEDIM, 80, 1, 0, [01:04:01:05:03]",
        ]

        await controller.drain()
        handler = bridge.directory.get("01:04:01:05:03")
        assert handler.get_on() is True
        assert handler.get_brightness() == 80

    async def test_fade_time_override_used(self, bridge, controller):
        controller.push("DL, [01:04:06:12:04], 0")
        await controller.drain()

        await bridge.request_brightness("01:04:06:12:04", 75)

        assert controller.sent[-1] == "FADEDIM, 75, 3, 0, [01:04:06:12:04]"

    async def test_unknown_address(self, bridge):
        with pytest.raises(KeyError):
            await bridge.request_on("09:09:09:09:09", True)

    async def test_stop_closes_transport(self, config, registry, controller):
        bridge = HomeworksBridge(config, registry, transport=controller)
        await bridge.connect()
        await bridge.start()

        await bridge.stop()

        assert not controller.connected
        assert not bridge.running
