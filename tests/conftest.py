"""Pytest configuration for Homeworks serial tests."""

import pytest

from pyhwserial import parse_config

from .fake_controller import FakeAccessoryRegistry, FakeSerialController


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "requires_ha: mark test as requiring Home Assistant"
    )


@pytest.fixture
def config():
    """Configuration with one named device, one fade override and one ignored device."""
    return parse_config(
        {
            "serial_path": "/dev/ttyFAKE0",
            "custom_devices": [
                {"address": "01:04:01:05:03", "name": "Kitchen"},
                {"address": "[01:04:06:12:04]", "fade_time": 3},
            ],
            "ignore_devices": ["01:04:01:05:04"],
            "default_fade_time": 1,
        }
    )


@pytest.fixture
def registry():
    """Empty fake accessory registry."""
    return FakeAccessoryRegistry()


@pytest.fixture
def controller():
    """Fake serial controller with two configured dimmers."""
    controller = FakeSerialController()
    controller.set_dimmer_level("01:04:01:05:03", 50)
    controller.set_dimmer_level("02:05:03:12:01", 0)
    return controller
