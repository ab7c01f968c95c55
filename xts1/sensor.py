"""Driver for the XT-S1 distance sensor over a Modbus RTU serial link."""

from __future__ import annotations

import logging
import time
from typing import Protocol

import serial

from .protocol import (
    DISTANCE_REGISTER,
    REGISTER_RESPONSE_SIZE,
    SYS_ERROR_REGISTER,
    SYS_ERROR_RESPONSE_SIZE,
    WRITE_RESPONSE_SIZE,
    FunctionCode,
    ResponseTimeoutError,
    build_read_request,
    build_write_request,
    check_writable,
    parse_register_value,
    parse_sys_error,
    read_function_for,
    to_signed,
)

logger = logging.getLogger(__name__)

BAUD_RATE = 115200
DEFAULT_TIMEOUT_TICKS = 12
DEFAULT_TICK = 0.001
READ_TIMEOUT = 0.01


class Transport(Protocol):
    """The part of a serial port the driver relies on."""

    in_waiting: int

    def write(self, data: bytes) -> object: ...

    def read(self, size: int) -> bytes: ...

    def reset_input_buffer(self) -> None: ...


class XTS1:
    """An XT-S1 sensor reachable through a serial transport."""

    def __init__(self, transport: Transport, timeout_ticks: int = DEFAULT_TIMEOUT_TICKS,
                 tick: float = DEFAULT_TICK) -> None:
        self.transport = transport
        self.timeout_ticks = timeout_ticks
        self.tick = tick

    @classmethod
    def from_port(cls, port: str) -> "XTS1":
        """Open a serial port with the sensor's line settings (115200 8N1)."""
        link = serial.Serial(
            port=port,
            baudrate=BAUD_RATE,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
            timeout=READ_TIMEOUT,
        )
        return cls(link)

    def _await_response(self, size: int) -> bool:
        """Poll until exactly size bytes are buffered; False on timeout."""
        waited = 0
        while waited < self.timeout_ticks and self.transport.in_waiting != size:
            waited += 1
            time.sleep(self.tick)
        return waited != self.timeout_ticks

    def setup(self) -> None:
        """Configure a 20 ms measurement period with median filter and start measuring."""
        self.write_register(66, 20)
        self.write_register(65, 0x0101)
        self.write_register(3, 1)
        logger.info("XT-S1 Modbus Serial initialized")

    def write_register(self, address: int, value: int) -> None:
        """Write a holding register and wait for the echoed reply."""
        check_writable(address)
        self.transport.write(build_write_request(address, value))
        answered = self._await_response(WRITE_RESPONSE_SIZE)
        self.transport.reset_input_buffer()
        if not answered:
            raise ResponseTimeoutError(f"no reply writing register {address}")

    def read_register(self, address: int) -> int:
        """Read one 16-bit register."""
        function = read_function_for(address)
        self.transport.write(build_read_request(address, 1, function))
        if not self._await_response(REGISTER_RESPONSE_SIZE):
            raise ResponseTimeoutError(f"no reply reading register {address}")
        return parse_register_value(self.transport.read(REGISTER_RESPONSE_SIZE))

    def sys_error(self) -> int:
        """Read the 32-bit system error word."""
        self.transport.write(build_read_request(SYS_ERROR_REGISTER, 2, FunctionCode.READ_INPUT))
        if not self._await_response(SYS_ERROR_RESPONSE_SIZE):
            raise ResponseTimeoutError("no reply reading system error")
        return parse_sys_error(self.transport.read(SYS_ERROR_RESPONSE_SIZE))

    def measure_distance(self) -> int:
        """Return the distance in mm, or a negative DistanceError code."""
        return to_signed(self.read_register(DISTANCE_REGISTER))

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "XTS1":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()