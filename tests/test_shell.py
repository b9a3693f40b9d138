import io

import pytest

from smarthouse.client import SmartHouseClient, help_text
from smarthouse.device import Device, SimulatedTransport
from smarthouse.errors import Status
from smarthouse.shell import PROMPT, Shell, main, parse_line


@pytest.fixture
def device():
    return Device()


@pytest.fixture
def shell(device):
    client = SmartHouseClient(SimulatedTransport(device))
    return Shell(client, io.StringIO(), io.StringIO(), io.StringIO())


def test_parse_line_splits_on_all_delimiters():
    assert parse_line("set_name  kitchen\t\r\n") == ["set_name", "kitchen"]
    assert parse_line("a\ab c") == ["a", "b", "c"]


def test_parse_line_empty():
    assert parse_line("") == []
    assert parse_line(" \t\r\n") == []


def test_execute_empty_continues_silently(shell):
    assert shell.execute([]) == 1
    assert shell.stdout.getvalue() == ""
    assert shell.stderr.getvalue() == ""


def test_execute_exit_returns_zero(shell):
    assert shell.execute(["exit"]) == 0


def test_unknown_command(shell):
    assert shell.execute(["bogus"]) == Status.NO_COMMAND
    assert "command not found" in shell.stderr.getvalue()


def test_set_name_success(shell, device):
    assert shell.execute(["set_name", "kitchen"]) == Status.SUCCESS
    assert shell.stdout.getvalue() == "Done!\n"
    assert device.name == "kitchen"


def test_set_name_without_argument(shell):
    assert shell.execute(["set_name"]) == Status.NO_ARGS
    assert "expected arguments" in shell.stderr.getvalue()


def test_set_name_twice(shell):
    shell.execute(["set_name", "kitchen"])
    assert shell.execute(["set_name", "other"]) == Status.NAME_ALREADY_SET
    assert "name already setted" in shell.stderr.getvalue()


def test_bad_device_name(shell):
    shell.execute(["set_name", "kitchen"])
    status = shell.execute(["set_channel_name", "garage", "switch_0", "lamp"])
    assert status == Status.BAD_NAME
    assert "no device named garage" in shell.stderr.getvalue()


def test_command_before_name(shell):
    assert shell.execute(["get_channel_value", "kitchen", "door"]) == Status.NO_NAME


def test_unknown_channel(shell):
    shell.execute(["set_name", "kitchen"])
    status = shell.execute(["set_channel_value", "kitchen", "lamp", "1"])
    assert status == Status.BAD_CHANNEL_NAME
    assert "no channnel named: lamp" in shell.stderr.getvalue()


def test_switch_output(shell, device):
    shell.execute(["set_name", "kitchen"])
    assert shell.execute(["set_channel_name", "kitchen", "switch_1", "lamp"]) == Status.SUCCESS
    assert shell.execute(["set_channel_value", "kitchen", "lamp", "1"]) == Status.SUCCESS
    assert device.outputs[1] == 1


def test_bad_switch_value(shell):
    shell.execute(["set_name", "kitchen"])
    shell.execute(["set_channel_name", "kitchen", "switch_1", "lamp"])
    assert shell.execute(["set_channel_value", "kitchen", "lamp", "300"]) == Status.BAD_VALUE
    assert "invalid switch value" in shell.stderr.getvalue()


def test_adc_read_prints_value(shell, device):
    device.set_analog_input(3, 512)
    shell.execute(["set_name", "kitchen"])
    shell.execute(["set_channel_name", "kitchen", "analog_in_3", "temp"])
    assert shell.execute(["get_adc_channel_value", "kitchen", "temp"]) == Status.SUCCESS
    assert "0512\n" in shell.stdout.getvalue()


def test_digital_read_prints_level(shell, device):
    device.set_digital_input(2, 0)
    shell.execute(["set_name", "kitchen"])
    shell.execute(["set_channel_name", "kitchen", "digital_in_2", "door"])
    shell.stdout.truncate(0)
    shell.stdout.seek(0)
    assert shell.execute(["get_channel_value", "kitchen", "door"]) == Status.SUCCESS
    assert shell.stdout.getvalue() == "0\nDone!\n"


def test_query_channels_lists_names(shell):
    shell.execute(["set_name", "kitchen"])
    shell.execute(["set_channel_name", "kitchen", "switch_0", "lamp"])
    shell.stdout.truncate(0)
    shell.stdout.seek(0)
    shell.execute(["query_channels"])
    lines = shell.stdout.getvalue().splitlines()
    assert "lamp" in lines
    assert lines.count("empty") == 23
    assert " DIGITAL OUT:" in lines


def test_help_prints_usage(shell):
    shell.execute(["help"])
    assert shell.stdout.getvalue() == "\n" + help_text() + "\n"


def test_run_stops_at_exit(device):
    client = SmartHouseClient(SimulatedTransport(device))
    stdin = io.StringIO("set_name kitchen\nexit\nhelp\n")
    stdout = io.StringIO()
    result = Shell(client, stdin, stdout, io.StringIO()).run()
    assert result == 0
    assert stdout.getvalue().count(PROMPT) == 2
    assert stdout.getvalue().count("Done!") == 1
    assert help_text() not in stdout.getvalue()


def test_run_stops_at_end_of_input(device):
    client = SmartHouseClient(SimulatedTransport(device))
    stdin = io.StringIO("set_name kitchen")
    stdout = io.StringIO()
    Shell(client, stdin, stdout, io.StringIO()).run()
    assert device.name == "kitchen"
    assert stdout.getvalue().count(PROMPT) == 1


def test_main_serial_loop(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("exit\n"))
    assert main(["--serial", "loop://"]) == 0
    assert PROMPT in capsys.readouterr().out


def test_main_connection_failure(capsys):
    assert main(["--serial", "/nonexistent/serial-port"]) == 1
    assert "Connection problem to the host" in capsys.readouterr().err