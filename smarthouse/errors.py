"""Status codes reported by client commands and their user-facing messages."""

from __future__ import annotations

from enum import IntEnum
from typing import Sequence


class Status(IntEnum):
    """Outcome of a client command."""

    SUCCESS = 2
    NO_ARGS = 101
    NO_NAME = 201
    BAD_NAME = 202
    NAME_ALREADY_SET = 203
    BAD_CHANNEL_NAME = 301
    BAD_ARGS = 302
    BAD_VALUE = 401
    NO_COMMAND = 501
    BAD_DATA = 601


def _token(args: Sequence[str], index: int) -> str:
    return args[index] if index < len(args) else "(null)"


def describe(status: Status | int, args: Sequence[str]) -> str:
    """Return the message shown for ``status``, given the command's tokens.

    Statuses that have no message give an empty string.
    """
    try:
        status = Status(status)
    except ValueError:
        return ""
    if status is Status.SUCCESS:
        return "Done!"
    if status is Status.NO_ARGS:
        return "avr_client: expected arguments. Please use help for more info"
    if status is Status.NO_NAME:
        return "avr_client: expected device name. Please use help for more info"
    if status is Status.NAME_ALREADY_SET:
        return "avr_client: name already setted"
    if status is Status.BAD_NAME:
        return f"avr_client: no device named {_token(args, 1)}"
    if status is Status.BAD_CHANNEL_NAME:
        return f"avr_client: no channnel named: {_token(args, 2)}"
    if status is Status.BAD_ARGS:
        return "avr_client: bad args. Please use help for more info."
    if status is Status.BAD_VALUE:
        return "avr_client: invalid switch value."
    if status is Status.NO_COMMAND:
        return 'avr_client: command not found. Please use "help" for info.'
    return ""


class CommandError(Exception):
    """A command was rejected; carries the status and the tokens it was given."""

    def __init__(self, status: Status | int, args: Sequence[str]) -> None:
        self.status = Status(status)
        self.tokens = list(args)
        self.message = describe(self.status, self.tokens)
        super().__init__(self.message or self.status.name)