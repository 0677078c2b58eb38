"""Unit tests for the CLI entry point (exit codes, output, argument parsing)."""

import pytest
from msc import cli
from msc.errors import ConnectFailed
from tests.mocks import MockDevice, default_resources
from unittest.mock import MagicMock, patch


@pytest.fixture
def mock_device():
    device = MockDevice(default_resources())
    with patch.object(cli, "DeviceTransport", return_value=device) as factory:
        device.factory = factory
        yield device


def test_success_exit_code(mock_device, capsys):
    assert cli.main(["volume", "-"]) == 0
    assert capsys.readouterr().out == "42\n"


def test_negative_delta_is_positional(mock_device):
    assert cli.main(["volume", "-10"]) == 0
    assert mock_device.writes == [("PUT", "levels?volume=32")]


def test_invalid_option(mock_device, capsys):
    assert cli.main(["bogus"]) == 202
    assert capsys.readouterr().err == "Missing or invalid option.\n"


def test_missing_option(mock_device):
    assert cli.main([]) == 202


def test_invalid_argument(mock_device, capsys):
    assert cli.main(["repeat", "7"]) == 200
    assert capsys.readouterr().err == "Invalid argument.\n"


def test_missing_argument(mock_device):
    assert cli.main(["seek"]) == 201


def test_list_flag(mock_device, capsys):
    assert cli.main(["radio", "--list"]) == 0
    assert capsys.readouterr().out.startswith("1) BBC Radio 3\n")


def test_help_flag(mock_device, capsys):
    assert cli.main(["--help"]) == 0
    assert "Usage: msc <option> [argument]" in capsys.readouterr().out
    assert mock_device.calls == []


def test_host_and_port_flags(mock_device):
    cli.main(["--host", "10.0.0.5", "--port", "8080", "play"])
    assert mock_device.factory.call_args.args[0] == "http://10.0.0.5:8080"


def test_timeout_clamped(mock_device):
    cli.main(["--timeout", "30", "play"])
    assert mock_device.factory.call_args.kwargs["timeout"] == 5.0


def test_transport_failure(capsys):
    transport = MagicMock()
    transport.__enter__.return_value = transport
    transport.request.side_effect = ConnectFailed()
    with patch.object(cli, "DeviceTransport", return_value=transport):
        assert cli.main(["play"]) == 7
    assert capsys.readouterr().err == "Network failure.\n"


def test_malformed_device_value(mock_device, capsys):
    mock_device.resources["nowplaying"]["transportPosition"] = "n/a"
    assert cli.main(["seek", "+10"]) == 5
    assert capsys.readouterr().err == "Unexpected value for transportPosition.\n"
