"""Wire format of the frames exchanged between host and device."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

ACK = "ack"
NACK = "nack"
FIELD_SEPARATOR = ":"
FRAME_END = ";"
LINE_END = "\r"


class ChannelKind(IntEnum):
    """Kind of operation a frame asks the device to perform."""

    DIGITAL_OUT = 0
    DIGITAL_IN = 1
    ANALOG = 2
    SET_CHANNEL_NAME = 3


@dataclass(frozen=True)
class Frame:
    """A parsed request: device name, operation kind, channel and value."""

    name: str
    kind: str
    channel: str
    value: str

    @property
    def kind_code(self) -> int:
        """Numeric operation code, taken from the first digit of ``kind``."""
        if not self.kind or not self.kind[0].isdigit():
            raise ValueError(f"invalid frame kind: {self.kind!r}")
        return int(self.kind[0])

    @property
    def channel_index(self) -> int:
        """Channel number, taken from the first digit of ``channel``."""
        if not self.channel or not self.channel[0].isdigit():
            raise ValueError(f"invalid channel: {self.channel!r}")
        return int(self.channel[0])


def _field(part: object) -> str:
    if isinstance(part, IntEnum):
        return str(int(part))
    return str(part)


def encode_frame(name: str, kind: ChannelKind | int | str, channel: int | str, value: object) -> bytes:
    """Build the bytes of one request frame, terminated by ``;`` and a carriage return."""
    text = FIELD_SEPARATOR.join(_field(part) for part in (name, kind, channel, value))
    return (text + FRAME_END + LINE_END).encode("ascii")


def parse_frame(text: str | bytes) -> Frame:
    """Parse ``name:kind:channel:value;``; anything after the ``;`` is ignored."""
    if isinstance(text, bytes):
        text = text.decode("ascii")
    body, found, _ = text.partition(FRAME_END)
    if not found:
        raise ValueError(f"frame is not terminated by {FRAME_END!r}: {text!r}")
    parts = body.split(FIELD_SEPARATOR)
    if len(parts) > 4:
        raise ValueError(f"frame has too many fields: {text!r}")
    parts += [""] * (4 - len(parts))
    return Frame(*parts)