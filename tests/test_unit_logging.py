"""Unit tests for the human-readable eliot destination and config helpers."""

import io
import pytest
from msc import config
from msc.logging import HumanReadableDestination


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def destination(stream):
    return HumanReadableDestination(stream)


def test_device_request_line(destination, stream):
    destination({"message_type": "device_request", "method": "PUT", "path": "levels?volume=40", "attempt": 0})
    assert stream.getvalue() == "[HTTP] PUT levels?volume=40\n"


def test_device_request_retry_suffix(destination, stream):
    destination({"message_type": "device_request", "method": "GET", "path": "levels", "attempt": 1})
    assert stream.getvalue() == "[HTTP] GET levels (retry 1)\n"


def test_value_resolved_with_current(destination, stream):
    destination(
        {
            "message_type": "value_resolved",
            "policy": "relative",
            "endpoint": "levels",
            "key": "volume",
            "current": 42,
            "value": 32,
        }
    )
    assert stream.getvalue() == "[RELATIVE] levels.volume: 42 → 32\n"


def test_value_resolved_absolute(destination, stream):
    destination({"message_type": "value_resolved", "policy": "absolute", "endpoint": "levels", "key": "mute", "value": 1})
    assert stream.getvalue() == "[ABSOLUTE] levels.mute = 1\n"


def test_command_and_error_lines(destination, stream):
    destination({"message_type": "command_dispatched", "option": "vol", "name": "volume", "kind": "stateful_field"})
    destination({"message_type": "error_occurred", "error_type": "InvalidOption", "error_message": "Missing or invalid option."})
    assert stream.getvalue().splitlines() == [
        "[CLI] vol → volume (stateful_field)",
        "[ERROR] InvalidOption: Missing or invalid option.",
    ]


def test_action_messages_skipped(destination, stream):
    destination({"action_type": "dispatch", "action_status": "started"})
    destination({"message_type": "logging_setup"})
    assert stream.getvalue() == ""


class TestConfig:
    def test_clamp_to(self):
        assert config.clamp_to(30.0, config.TIMEOUT_BOUNDS) == 5.0
        assert config.clamp_to(0.2, config.TIMEOUT_BOUNDS) == 1.0
        assert config.clamp_to(3, config.RETRY_BOUNDS) == 1

    def test_base_url_overrides(self):
        assert config.base_url("10.0.0.5", 8080) == "http://10.0.0.5:8080"

    def test_base_url_defaults(self):
        assert config.base_url() == f"http://{config.MUSO_HOST}:{config.MUSO_PORT}"

    def test_version_from_pyproject(self):
        assert config.__version__ != "unknown"
