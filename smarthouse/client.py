"""Host-side commands that name, drive and read the channels of a smart-house device."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .errors import CommandError, Status
from .protocol import LINE_END, ChannelKind, encode_frame

CHANNELS = 8
VALUE_MIN = 0
VALUE_MAX = 255
ANALOG_WIDTH = 4
DIGITAL_WIDTH = 1

DEFAULT_DOUT_NAMES = tuple(f"switch_{index}" for index in range(CHANNELS))
DEFAULT_DIN_NAMES = tuple(f"digital_in_{index}" for index in range(CHANNELS))
DEFAULT_ADC_NAMES = tuple(f"analog_in_{index}" for index in range(CHANNELS))

DIGITAL_OUT_LABEL = "DIGITAL OUT"
DIGITAL_IN_LABEL = "DIGITAL IN"
ANALOG_IN_LABEL = "ANALOG IN"

_HELP_LINES = (
    "set_name <device_name> (name can't be modified if already setted)",
    "set_channel_name <device_name> <default_channel_name> <user_channel_name> "
    "(set channel's name [digital_in_(n), switch_(n), analog_in_(n)])",
    "set_channel_value <device_name> <user_channel_name> <value> "
    "(set digital_out channel's value 0 or 1 for channels from 0 to 3)",
    "set_channel_value <device_name> <user_channel_name> <value> "
    "(PWM mode for channel from 4 to 7 values from 0[HIGH] to 255[LOW])",
    "get_channel_value <device_name> <user_channel_name> (get digital_in channel's value)",
    "get_adc_channel_value <device_name> <user_channel_name> (get adc channel's value)",
    "query_channels (lists all channels setted by the user)",
)


class Transport(Protocol):
    def send(self, data: bytes) -> int: ...

    def read(self, size: int) -> bytes: ...


def help_text() -> str:
    """Usage of every command, one per line."""
    return "\n".join(_HELP_LINES)


def _tokens(*parts: Optional[str]) -> list[str]:
    """Command tokens up to the first missing one, as they would have been typed."""
    tokens: list[str] = []
    for part in parts:
        if part is None:
            break
        tokens.append(str(part))
    return tokens


def _atoi(text: str) -> int:
    """Leading integer of ``text``; 0 if there is none."""
    text = text.lstrip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = []
    for char in text:
        if not char.isdigit():
            break
        digits.append(char)
    return sign * int("".join(digits)) if digits else 0


def _find(names: Sequence[Optional[str]], wanted: Optional[str]) -> Optional[int]:
    if wanted is None:
        return None
    return next((index for index, name in enumerate(names) if name == wanted), None)


class SmartHouseClient:
    """Commands sent to one device; a rejected command raises CommandError."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self.name: Optional[str] = None
        self._dout_names: list[Optional[str]] = [None] * CHANNELS
        self._din_names: list[Optional[str]] = [None] * CHANNELS
        self._adc_names: list[Optional[str]] = [None] * CHANNELS

    # -- helpers -----------------------------------------------------------

    def _check_device(self, device: Optional[str], tokens: list[str]) -> None:
        if not device:
            raise CommandError(Status.NO_ARGS, tokens)
        if self.name is None:
            raise CommandError(Status.NO_NAME, tokens)
        if device != self.name:
            raise CommandError(Status.BAD_NAME, tokens)

    def _channel(self, names: Sequence[Optional[str]], channel: Optional[str], tokens: list[str]) -> int:
        index = _find(names, channel)
        if index is None:
            raise CommandError(Status.BAD_CHANNEL_NAME, tokens)
        return index

    def _request(self, kind: ChannelKind, channel: int | str, value: object) -> None:
        assert self.name is not None
        self._transport.send(encode_frame(self.name, kind, channel, value))

    def _read_exact(self, size: int, tokens: list[str]) -> str:
        received = bytearray()
        while len(received) < size:
            chunk = self._transport.read(size - len(received))
            if not chunk:
                raise CommandError(Status.BAD_DATA, tokens)
            received += chunk
        return received.decode("ascii")

    # -- shell commands ----------------------------------------------------

    def set_name(self, name: Optional[str]) -> None:
        """Register the device name; it can be set only once."""
        tokens = _tokens("set_name", name)
        if not name:
            raise CommandError(Status.NO_ARGS, tokens)
        if self.name is not None:
            raise CommandError(Status.NAME_ALREADY_SET, tokens)
        self._transport.send((name + LINE_END).encode("ascii"))
        self.name = name

    def set_channel_name(
        self, device: Optional[str], default_name: Optional[str], user_name: Optional[str]
    ) -> None:
        """Give the channel known by ``default_name`` the name ``user_name``."""
        tokens = _tokens("set_channel_name", device, default_name, user_name)
        self._check_device(device, tokens)
        groups = (
            ("switch_", DEFAULT_DOUT_NAMES, self._dout_names),
            ("digital_in_", DEFAULT_DIN_NAMES, self._din_names),
            ("analog_in_", DEFAULT_ADC_NAMES, self._adc_names),
        )
        for prefix, defaults, user_names in groups:
            if user_name is None or default_name is None or not default_name.startswith(prefix):
                continue
            index = self._channel(defaults, default_name, tokens)
            self._request(ChannelKind.SET_CHANNEL_NAME, default_name, user_name)
            user_names[index] = user_name
            return
        raise CommandError(Status.BAD_ARGS, tokens)

    def set_channel_value(self, device: Optional[str], channel: Optional[str], value: object) -> None:
        """Set a named output: 0/1 on channels 0-3, a PWM level 0-255 on 4-7."""
        text = None if value is None else str(value)
        tokens = _tokens("set_channel_value", device, channel, text)
        self._check_device(device, tokens)
        index = self._channel(self._dout_names, channel, tokens)
        if text is None or not VALUE_MIN <= _atoi(text) <= VALUE_MAX:
            raise CommandError(Status.BAD_VALUE, tokens)
        self._request(ChannelKind.DIGITAL_OUT, index, text)

    def get_channel_value(self, device: Optional[str], channel: Optional[str]) -> str:
        """Read a named digital input; returns ``"0"`` or ``"1"``."""
        tokens = _tokens("get_channel_value", device, channel)
        self._check_device(device, tokens)
        index = self._channel(self._din_names, channel, tokens)
        self._request(ChannelKind.DIGITAL_IN, index, channel)
        return self._read_exact(DIGITAL_WIDTH, tokens)

    def get_adc_channel_value(self, device: Optional[str], channel: Optional[str]) -> str:
        """Read a named analog input; returns four decimal digits."""
        tokens = _tokens("get_adc_channel_value", device, channel)
        self._check_device(device, tokens)
        index = self._channel(self._adc_names, channel, tokens)
        self._request(ChannelKind.ANALOG, index, channel)
        return self._read_exact(ANALOG_WIDTH, tokens)

    def query_channels(self) -> dict[str, tuple[Optional[str], ...]]:
        """User names of every channel by group; unnamed channels are None."""
        return {
            DIGITAL_OUT_LABEL: tuple(self._dout_names),
            DIGITAL_IN_LABEL: tuple(self._din_names),
            ANALOG_IN_LABEL: tuple(self._adc_names),
        }

    # -- web commands: channels are addressed by their default names --------

    def set_channel_value_web(self, device: Optional[str], channel: Optional[str], value: object) -> str:
        """Set an output addressed by its default name; the answer is empty."""
        text = None if value is None else str(value)
        tokens = _tokens("set_channel_value", device, channel, text)
        self._check_device(device, tokens)
        index = self._channel(DEFAULT_DOUT_NAMES, channel, tokens)
        if text is None:
            raise CommandError(Status.BAD_VALUE, tokens)
        self._request(ChannelKind.DIGITAL_OUT, index, text)
        return ""

    def get_channel_value_web(self, device: Optional[str], channel: Optional[str]) -> str:
        """Read a digital input addressed by its default name."""
        tokens = _tokens("get_channel_value", device, channel)
        self._check_device(device, tokens)
        index = self._channel(DEFAULT_DIN_NAMES, channel, tokens)
        self._request(ChannelKind.DIGITAL_IN, index, channel)
        return self._read_exact(DIGITAL_WIDTH, tokens)

    def get_adc_channel_value_web(self, device: Optional[str], channel: Optional[str]) -> str:
        """Read an analog input addressed by its default name."""
        tokens = _tokens("get_adc_channel_value", device, channel)
        self._check_device(device, tokens)
        index = self._channel(DEFAULT_ADC_NAMES, channel, tokens)
        self._request(ChannelKind.ANALOG, index, channel)
        return self._read_exact(ANALOG_WIDTH, tokens)