# xts1

A Python driver for the XT-S1 time-of-flight distance sensor. The sensor
uses Modbus RTU over a serial line at 115200 baud, 8N1, with device ID 1.

The package has three modules:

- `xts1.protocol` works with frames. It builds read and write requests and
  computes the Modbus CRC-16. It also checks register addresses, parses
  responses, and turns the sensor's negative distance codes into readable
  messages.
- `xts1.sensor` holds the `XTS1` class, which talks to the sensor through a
  serial port or any object that has `in_waiting`, `write`, `read` and
  `reset_input_buffer`.
- `xts1.demo` collects batches of distance samples and prints statistics
  for each batch.

## Installation

```
pip install .
```

## Using the sensor

```python
from xts1.sensor import XTS1

with XTS1.from_port("/dev/ttyUSB0") as sensor:
    sensor.setup()                    # 20 ms period, median filter, start measuring
    print(sensor.measure_distance())  # distance in mm, or a negative error code
    print(sensor.read_register(66))   # measurement period
    print(sensor.sys_error())         # 32-bit system error word
```

**Register access**

- Holding registers 0–7, 64, 65, 66, 86 and 87 can be read and written.
- Input registers 22–26 and 59–61 can only be read.
- Any other address raises `InvalidRegisterError`.

**Errors**

- If the sensor does not send a complete reply within the timeout,
  `ResponseTimeoutError` is raised.
- The timeout is 12 polls, 1 ms apart by default. Set it with the
  `timeout_ticks` and `tick` arguments of `XTS1`.
- Both exceptions derive from `XTS1Error`.

**Distance codes**

`measure_distance()` can return a negative value from -1 to -13. That value
is a diagnostic code, listed in `DistanceError`, and not a distance.

```python
from xts1.protocol import describe_distance_error, to_signed

print(describe_distance_error(-12))  # "ERROR -12: no object detected"
print(to_signed(0xFFF4))             # -12
```

## Protocol helpers

```python
from xts1.protocol import FunctionCode, build_read_request, crc16

frame = build_read_request(23, 1, FunctionCode.READ_INPUT)
assert crc16(frame) == 0  # a frame with its CRC appended checks to zero
```

## Demo

```
xts1-demo /dev/ttyUSB0
```

The demo first sets up the sensor. It then runs batches until you press
Ctrl-C. In each batch it:

1. Takes valid samples, one every interval. A reading below 1 mm is retried,
   and an error code is reported as `  --> ERROR ...`.
2. Prints the minimum, maximum and mean of the samples, their sample variance
   (Bessel-corrected) and their standard deviation.

Options:

- `--samples N`: samples per batch. The default is 50 and the minimum is 2.
- `--interval SECONDS`: time between samples. The default is 0.02.
- `--rounds N`: stop after N batches instead of running until interrupted.

You can also compute the statistics yourself:

```python
from xts1.demo import format_summary, summarize

print(format_summary(summarize([100, 102, 98, 101])))
```