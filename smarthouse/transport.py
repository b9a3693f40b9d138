"""Byte transports to the device: a serial line or a Bluetooth RFCOMM socket."""

from __future__ import annotations

import socket

import serial

DEFAULT_SERIAL_PORT = "/dev/ttyACM0"
DEFAULT_BAUDRATE = 9600
DEFAULT_BLUETOOTH_ADDRESS = "00:11:22:33:44:55"
READ_TIMEOUT = 0.5


class _Transport:
    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class SerialTransport(_Transport):
    """8N1 serial line without flow control and with a half-second read timeout."""

    def __init__(self, port: str = DEFAULT_SERIAL_PORT, baudrate: int = DEFAULT_BAUDRATE) -> None:
        try:
            self._serial = serial.serial_for_url(
                port,
                baudrate=baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                xonxoff=False,
                rtscts=False,
                timeout=READ_TIMEOUT,
            )
        except (serial.SerialException, OSError, ValueError) as exc:
            raise ConnectionError(f"Error opening device: {exc}") from exc
        self.port = port

    def send(self, data: bytes) -> int:
        """Write ``data``; return the number of bytes written."""
        written = self._serial.write(data)
        return len(data) if written is None else written

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; fewer are returned if the timeout expires."""
        return self._serial.read(size)

    def close(self) -> None:
        self._serial.close()


class BluetoothTransport(_Transport):
    """Stream connection to a device over Bluetooth RFCOMM."""

    def __init__(self, address: str = DEFAULT_BLUETOOTH_ADDRESS, channel: int = 1) -> None:
        family = getattr(socket, "AF_BLUETOOTH", None)
        protocol = getattr(socket, "BTPROTO_RFCOMM", None)
        if family is None or protocol is None:
            raise ConnectionError("Error opening device: Bluetooth sockets are not supported")
        sock = socket.socket(family, socket.SOCK_STREAM, protocol)
        try:
            sock.connect((address, channel))
        except OSError as exc:
            sock.close()
            raise ConnectionError(f"Error opening device: {exc.strerror or exc}") from exc
        self._sock = sock
        self.address = address
        self.channel = channel

    def send(self, data: bytes) -> int:
        """Write all of ``data``; return its length."""
        self._sock.sendall(data)
        return len(data)

    def read(self, size: int) -> bytes:
        """Read at most ``size`` bytes from the socket."""
        return self._sock.recv(size)

    def close(self) -> None:
        self._sock.close()