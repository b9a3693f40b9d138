"""Simulation of the device firmware: EEPROM, UART ring buffers and request handling."""

from __future__ import annotations

from .protocol import FIELD_SEPARATOR, NACK, ChannelKind, parse_frame

EEPROM_MAX_SIZE = 4096
EEPROM_ERASED = 0xFF
EEPROM_RESET_SIZE = 100
UART_BUFFER_SIZE = 256
CHANNELS = 8
ADC_MAX = 1023
PWM_FIRST_CHANNEL = 4
PWM_IDLE = 255
RECORD_END = b";"
LINE_TERMINATORS = frozenset(b"\r\n\x00\xff")


class Eeprom:
    """Byte-addressed non-volatile memory holding ``;``-terminated records."""

    def __init__(self, capacity: int = EEPROM_MAX_SIZE) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._cells = bytearray([EEPROM_ERASED]) * capacity

    @property
    def capacity(self) -> int:
        return len(self._cells)

    def fill(self, size: int, value: int) -> None:
        """Set the first ``size`` cells to ``value``."""
        if not 0 <= size <= self.capacity:
            raise ValueError(f"size out of range: {size}")
        if not 0 <= value <= 0xFF:
            raise ValueError(f"byte value out of range: {value}")
        self._cells[:size] = bytes([value]) * size

    def read(self, size: int) -> bytes:
        """Return the first ``size`` cells."""
        if not 0 <= size <= self.capacity:
            raise ValueError(f"size out of range: {size}")
        return bytes(self._cells[:size])

    def append(self, data: str | bytes) -> None:
        """Write ``data`` after the used area, followed by a ``;`` record end."""
        if isinstance(data, str):
            data = data.encode("ascii")
        start = self.used_size()
        end = start + len(data) + len(RECORD_END)
        if end > self.capacity:
            raise ValueError("not enough free space in EEPROM")
        self._cells[start:end] = data + RECORD_END

    def used_size(self) -> int:
        """Number of cells before the first erased (0xFF) cell."""
        index = self._cells.find(EEPROM_ERASED)
        return self.capacity if index < 0 else index


class RingBuffer:
    """Fixed-size FIFO of byte values, as used by the UART driver."""

    def __init__(self, capacity: int = UART_BUFFER_SIZE) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._items = [0] * capacity
        self._start = 0
        self._end = 0
        self._size = 0

    @property
    def capacity(self) -> int:
        return len(self._items)

    def put(self, value: int) -> None:
        """Append ``value``; raise BufferError when the buffer is full."""
        if self._size >= self.capacity:
            raise BufferError("ring buffer is full")
        self._items[self._end] = value
        self._end = (self._end + 1) % self.capacity
        self._size += 1

    def get(self) -> int:
        """Remove and return the oldest value; raise IndexError when empty."""
        if not self._size:
            raise IndexError("ring buffer is empty")
        value = self._items[self._start]
        self._start = (self._start + 1) % self.capacity
        self._size -= 1
        return value

    def free(self) -> int:
        """Number of values that can still be put."""
        return self.capacity - self._size

    def __len__(self) -> int:
        return self._size


class Device:
    """Request handling of the device: name registration, I/O channels and ADC."""

    def __init__(self, eeprom: Eeprom | None = None) -> None:
        self.eeprom = Eeprom() if eeprom is None else eeprom
        self.eeprom.fill(min(EEPROM_RESET_SIZE, self.eeprom.capacity), EEPROM_ERASED)
        self.name: str | None = None
        # Channels 0-3 are plain port bits, 4-7 are PWM compare values.
        self.outputs = [0] * PWM_FIRST_CHANNEL + [PWM_IDLE] * (CHANNELS - PWM_FIRST_CHANNEL)
        self._digital_inputs = [True] * CHANNELS  # inputs are pulled up
        self._analog_inputs = [0] * CHANNELS

    def set_digital_input(self, channel: int, level: bool | int) -> None:
        """Drive the level seen on a digital input pin."""
        self._check_channel(channel)
        self._digital_inputs[channel] = bool(level)

    def set_analog_input(self, channel: int, value: int) -> None:
        """Set the conversion result of an analog input (0-1023)."""
        self._check_channel(channel)
        if not 0 <= value <= ADC_MAX:
            raise ValueError(f"analog value out of range: {value}")
        self._analog_inputs[channel] = value

    def handle_line(self, line: str | bytes) -> bytes:
        """Process one received line and return the bytes sent back."""
        if isinstance(line, bytes):
            line = line.decode("ascii")
        if self.name is None:
            self.name = line
            self.eeprom.append(line)
            return b""
        frame = parse_frame(line)
        if frame.name != self.name:
            return NACK.encode("ascii")
        kind = frame.kind_code
        if kind == ChannelKind.DIGITAL_OUT:
            self._write_output(frame.channel_index, _atoi(frame.value))
        elif kind == ChannelKind.DIGITAL_IN:
            bit = frame.channel_index
            high = bit >= CHANNELS or self._digital_inputs[bit]
            return b"1" if high else b"0"
        elif kind == ChannelKind.ANALOG:
            value = self._analog_inputs[frame.channel_index & 0x07]
            return f"{value:04d}".encode("ascii")
        elif kind == ChannelKind.SET_CHANNEL_NAME:
            self.eeprom.append(f"{frame.channel}{FIELD_SEPARATOR}{frame.value}")
        return b""

    def _write_output(self, bit: int, value: int) -> None:
        if bit < PWM_FIRST_CHANNEL:
            self.outputs[bit] = 1 if value > 0 else 0
        else:
            self.outputs[min(bit, CHANNELS - 1)] = value & 0xFF

    @staticmethod
    def _check_channel(channel: int) -> None:
        if not 0 <= channel < CHANNELS:
            raise ValueError(f"channel out of range: {channel}")


def _atoi(text: str) -> int:
    """Leading integer of ``text`` the way the firmware reads it; 0 if there is none."""
    text = text.lstrip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for char in text:
        if not char.isdigit():
            break
        digits += char
    return sign * int(digits) if digits else 0


class SimulatedTransport:
    """Transport that talks to an in-process Device through UART-like buffers."""

    def __init__(self, device: Device) -> None:
        self.device = device
        self._rx = RingBuffer()
        self._tx = RingBuffer()
        self._line = bytearray()
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def send(self, data: bytes) -> int:
        """Deliver ``data`` to the device; return the number of bytes accepted."""
        self._ensure_open()
        accepted = 0
        for byte in data:
            if not self._rx.free():
                break  # received bytes are dropped while the buffer is full
            self._rx.put(byte)
            accepted += 1
        self._drain()
        return accepted

    def read(self, size: int) -> bytes:
        """Return at most ``size`` bytes the device has answered."""
        self._ensure_open()
        count = min(size, len(self._tx))
        return bytes(self._tx.get() for _ in range(count))

    def close(self) -> None:
        self.closed = True

    def _drain(self) -> None:
        while len(self._rx):
            byte = self._rx.get()
            if byte in LINE_TERMINATORS:
                line = bytes(self._line)
                self._line.clear()
                if line:
                    for out in self.device.handle_line(line):
                        self._tx.put(out)
            else:
                self._line.append(byte)

    def _ensure_open(self) -> None:
        if self.closed:
            raise ConnectionError("transport is closed")