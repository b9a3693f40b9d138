"""Interactive command shell for a smart-house device."""

from __future__ import annotations

import argparse
import re
import sys
from typing import Callable, Optional, Sequence, TextIO

from .client import SmartHouseClient, help_text
from .errors import CommandError, Status, describe
from .transport import (
    DEFAULT_BAUDRATE,
    DEFAULT_BLUETOOTH_ADDRESS,
    BluetoothTransport,
    SerialTransport,
)

PROMPT = "\nsmart_house_host> "
EXIT = 0
CONTINUE = 1
EMPTY_CHANNEL = "empty"
_DELIMITERS = re.compile(r"[ \t\r\n\a]+")


def parse_line(line: str) -> list[str]:
    """Split a command line into tokens on blanks, tabs, line ends and bells."""
    return [token for token in _DELIMITERS.split(line) if token]


def _arg(args: Sequence[str], index: int) -> Optional[str]:
    return args[index] if index < len(args) else None


class Shell:
    """Reads commands, runs them on a client and reports their outcome."""

    def __init__(
        self,
        client: SmartHouseClient,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ) -> None:
        self.client = client
        self.stdin = sys.stdin if stdin is None else stdin
        self.stdout = sys.stdout if stdout is None else stdout
        self.stderr = sys.stderr if stderr is None else stderr
        self._commands: dict[str, Callable[[Sequence[str]], int]] = {
            "set_name": self._set_name,
            "set_channel_name": self._set_channel_name,
            "set_channel_value": self._set_channel_value,
            "query_channels": self._query_channels,
            "get_channel_value": self._get_channel_value,
            "get_adc_channel_value": self._get_adc_channel_value,
            "help": self._help,
        }

    def execute(self, args: Sequence[str]) -> int:
        """Run one tokenised command, report its outcome and return its status.

        An empty command returns 1 and ``exit`` returns 0, which ends the shell.
        """
        if not args:
            return CONTINUE
        command = args[0]
        if command == "exit":
            return EXIT
        handler = self._commands.get(command)
        if handler is None:
            status: int = Status.NO_COMMAND
        else:
            try:
                status = handler(args)
            except CommandError as exc:
                status = exc.status
        self._report(status, args)
        return status

    def run(self) -> int:
        """Prompt for and execute commands until ``exit`` or end of input."""
        status = CONTINUE
        while True:
            self.stdout.write(PROMPT)
            self.stdout.flush()
            raw = self.stdin.readline()
            at_end = not raw.endswith("\n")
            status = self.execute(parse_line(raw))
            if status == EXIT or at_end:
                return status

    # -- reporting ---------------------------------------------------------

    def _report(self, status: int, args: Sequence[str]) -> None:
        message = describe(status, args)
        if not message:
            return
        stream = self.stdout if status == Status.SUCCESS else self.stderr
        stream.write(message + "\n")

    # -- commands ----------------------------------------------------------

    def _set_name(self, args: Sequence[str]) -> int:
        self.client.set_name(_arg(args, 1))
        return Status.SUCCESS

    def _set_channel_name(self, args: Sequence[str]) -> int:
        self.client.set_channel_name(_arg(args, 1), _arg(args, 2), _arg(args, 3))
        return Status.SUCCESS

    def _set_channel_value(self, args: Sequence[str]) -> int:
        self.client.set_channel_value(_arg(args, 1), _arg(args, 2), _arg(args, 3))
        return Status.SUCCESS

    def _get_channel_value(self, args: Sequence[str]) -> int:
        value = self.client.get_channel_value(_arg(args, 1), _arg(args, 2))
        self.stdout.write(value + "\n")
        return Status.SUCCESS

    def _get_adc_channel_value(self, args: Sequence[str]) -> int:
        value = self.client.get_adc_channel_value(_arg(args, 1), _arg(args, 2))
        self.stdout.write(value + "\n")
        return Status.SUCCESS

    def _query_channels(self, args: Sequence[str]) -> int:
        for label, names in self.client.query_channels().items():
            self.stdout.write(f"\n {label}:\n")
            for name in names:
                self.stdout.write(f"{EMPTY_CHANNEL if name is None else name}\n")
        return CONTINUE

    def _help(self, args: Sequence[str]) -> int:
        self.stdout.write("\n" + help_text() + "\n")
        return CONTINUE


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smarthouse", description="Interactive shell for a smart-house device."
    )
    link = parser.add_mutually_exclusive_group()
    link.add_argument("--serial", metavar="PORT", help="connect through a serial port")
    link.add_argument(
        "--bluetooth",
        metavar="ADDRESS",
        default=DEFAULT_BLUETOOTH_ADDRESS,
        help="connect through Bluetooth RFCOMM (default)",
    )
    parser.add_argument("--baudrate", type=int, default=DEFAULT_BAUDRATE, help="serial line speed")
    parser.add_argument("--channel", type=int, default=1, help="RFCOMM channel")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Connect to the device and run the shell; return the process exit code."""
    options = _build_parser().parse_args(argv)
    try:
        if options.serial is not None:
            transport = SerialTransport(options.serial, options.baudrate)
        else:
            print("connecting...")
            transport = BluetoothTransport(options.bluetooth, options.channel)
            print("Connected")
    except ConnectionError as exc:
        print(exc, file=sys.stderr)
        print("Connection problem to the host", file=sys.stderr)
        return 1
    with transport:
        Shell(SmartHouseClient(transport)).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())