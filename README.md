# smarthouse

A host-side toolkit for a small smart-house controller board. The board drives
eight switch outputs (four on/off, four PWM), reads eight digital inputs and
eight analog inputs. The board and the host talk over a serial line or a
Bluetooth RFCOMM link. The host sends short text frames of this form:

```
<device>:<type>:<channel>:<value>;\r
```

The package provides:

- `smarthouse` — an interactive shell. You can use it to name the device, give
  your own names to its channels, switch outputs and read inputs.
- `smarthouse.client.SmartHouseClient` — the same operations as a Python API.
- `smarthouse.transport.SerialTransport` and
  `smarthouse.transport.BluetoothTransport` — these connect to real hardware.
- `smarthouse.device.Device` and `smarthouse.device.SimulatedTransport` — an
  in-memory model of the board, so you can try things out without hardware.
  The model covers the EEPROM, the UART ring buffers, the ports, PWM and the
  ADC.
- `smarthouse.protocol` — `encode_frame`, `parse_frame`, `Frame` and
  `ChannelKind`, for the frame format.
- `smarthouse.errors` — `Status`, `CommandError` and `describe`.

## Installing

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## The shell

Start it on a serial port:

```
smarthouse --serial /dev/ttyACM0
```

or over Bluetooth RFCOMM:

```
smarthouse --bluetooth 00:11:22:33:44:55 --channel 1
```

Options:

- `--serial PORT` — connect through a serial port (8N1, no flow control,
  half-second read timeout).
- `--bluetooth ADDRESS` — connect through Bluetooth RFCOMM. This is used when
  `--serial` is not given. The default address is a placeholder, so give your
  board's address.
- `--baudrate N` — serial line speed. The default is 9600.
- `--channel N` — RFCOMM channel. The default is 1.

If the connection cannot be opened, the command prints the error and
`Connection problem to the host`, then exits with status 1.

At the `smart_house_host>` prompt the following commands are available:

```
set_name <device_name>
set_channel_name <device_name> <default_channel_name> <user_channel_name>
set_channel_value <device_name> <user_channel_name> <value>
get_channel_value <device_name> <user_channel_name>
get_adc_channel_value <device_name> <user_channel_name>
query_channels
help
exit
```

How the commands behave:

- **Device name.** It can be set only once per session. Every other command
  must repeat it.
- **Default channel names.** They are `switch_0` … `switch_7`,
  `digital_in_0` … `digital_in_7` and `analog_in_0` … `analog_in_7`.
- **User names.** A channel has to be given a user name with
  `set_channel_name` before `set_channel_value`, `get_channel_value` or
  `get_adc_channel_value` can use it.
- **Output values.** `set_channel_value` accepts values from 0 to 255.
  - On switches 0–3, any value above 0 switches the output on.
  - Switches 4–7 are PWM outputs, from 0 (high) to 255 (low).
- **Readings.** A digital input reads as `0` or `1`. An analog input reads as
  four digits, from `0000` to `1023`.
- **`query_channels`** lists the user names of every channel. It prints
  `empty` for channels without one.
- **Results.** A successful command prints `Done!`. A failed one prints a
  message on standard error.
- **Ending the shell.** `exit` or the end of input ends it.

A typical session:

```
smart_house_host> set_name kitchen
Done!
smart_house_host> set_channel_name kitchen switch_0 lamp
Done!
smart_house_host> set_channel_value kitchen lamp 1
Done!
smart_house_host> set_channel_name kitchen analog_in_2 light
Done!
smart_house_host> get_adc_channel_value kitchen light
0512
Done!
```

## Using the library

```python
from smarthouse.client import SmartHouseClient
from smarthouse.device import Device, Eeprom, SimulatedTransport
from smarthouse.errors import CommandError

device = Device(Eeprom())
client = SmartHouseClient(SimulatedTransport(device))

client.set_name("kitchen")
client.set_channel_name("kitchen", "switch_0", "lamp")
client.set_channel_value("kitchen", "lamp", 1)
print(device.outputs[0])              # 1

client.set_channel_name("kitchen", "analog_in_2", "light")
device.set_analog_input(2, 512)
print(client.get_adc_channel_value("kitchen", "light"))   # 0512

try:
    client.set_channel_value("garage", "lamp", 1)
except CommandError as exc:
    print(exc.status, exc)            # Status.BAD_NAME ... no device named garage
```

### Transports

For a real board, give the client a different transport instead of the
simulated one:

- `SerialTransport("/dev/ttyACM0", 9600)`, or
- `BluetoothTransport("00:11:22:33:44:55", 1)`.

All transports work as context managers and close themselves on exit.

### Errors

Failed commands raise `CommandError`. Its `status` attribute, a `Status`,
tells what went wrong. A reply that stops short gives `Status.BAD_DATA`.
`describe(status, args)` turns a status into the message the shell prints.

### Default-name methods

`set_channel_value_web`, `get_channel_value_web` and
`get_adc_channel_value_web` address channels by their default names
(`switch_3`, `digital_in_5`, …). They need no user names, and return the
device's answer as a string.

### The device model

- **`Device.handle_line`** takes the first line it receives as the device
  name. It answers the frames that follow:
  - It returns `nack` for frames with another name.
  - It stores channel names in the EEPROM as `channel:value;` records.
- **`Eeprom`** is the EEPROM model. It provides `fill`, `read`, `append` and
  `used_size`.
- **`RingBuffer`** is the fixed-size FIFO used for the UART buffers.

## What this package does not do

- It has no web or WebSocket server. The `*_web` methods of
  `SmartHouseClient` are there for such a front end, but none is included.
- It does not run on the controller board, and cannot program it.
  `smarthouse.device` only simulates the board's behaviour in memory.