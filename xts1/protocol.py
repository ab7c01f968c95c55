"""Modbus RTU framing and register map of the XT-S1 time-of-flight sensor."""

from __future__ import annotations

from enum import IntEnum

DEVICE_ID = 0x01

HOLDING_REGISTERS = frozenset({0, 1, 2, 3, 4, 5, 6, 7, 64, 65, 66, 86, 87})
INPUT_REGISTERS = frozenset({22, 23, 24, 25, 26, 59, 60, 61})

DISTANCE_REGISTER = 23
SYS_ERROR_REGISTER = 16

REGISTER_RESPONSE_SIZE = 7
SYS_ERROR_RESPONSE_SIZE = 9
WRITE_RESPONSE_SIZE = 8


class XTS1Error(Exception):
    """Base class for errors reported while talking to the sensor."""


class InvalidRegisterError(XTS1Error, ValueError):
    """The register cannot be accessed in the requested way."""


class ResponseTimeoutError(XTS1Error, TimeoutError):
    """The sensor did not answer with a complete frame in time."""


class FunctionCode(IntEnum):
    """Modbus function codes used by the sensor."""

    READ_HOLDING = 0x03
    READ_INPUT = 0x04
    WRITE_SINGLE = 0x06


_DISTANCE_DESCRIPTIONS = {
    -13: "overexposure",
    -12: "no object detected",
    -11: "abnormal TOF image",
    -10: "abnormal temperature image",
    -9: "abnormal grey scale image",
    -8: "reserve",
    -7: "signal too weak",
    -6: "signal too strong",
    -5: "reserve",
    -4: "sample data below min value",
    -3: "sample data beyond max value",
    -2: "pixel saturation",
    -1: "SPI communication error",
}


class DistanceError(IntEnum):
    """Negative codes the distance register reports instead of a distance."""

    OVEREXPOSURE = -13
    NO_OBJECT_DETECTED = -12
    ABNORMAL_TOF_IMAGE = -11
    ABNORMAL_TEMPERATURE_IMAGE = -10
    ABNORMAL_GREY_SCALE_IMAGE = -9
    RESERVED_8 = -8
    SIGNAL_TOO_WEAK = -7
    SIGNAL_TOO_STRONG = -6
    RESERVED_5 = -5
    BELOW_MIN_VALUE = -4
    BEYOND_MAX_VALUE = -3
    PIXEL_SATURATION = -2
    SPI_COMMUNICATION_ERROR = -1

    @property
    def description(self) -> str:
        return _DISTANCE_DESCRIPTIONS[self.value]


def crc16(data: bytes) -> int:
    """Return the Modbus CRC-16 (polynomial 0xA001, initial 0xFFFF) of data."""
    crc = 0xFFFF
    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 0x0001:
                crc = (crc >> 1) ^ 0xA001
            else:
                crc >>= 1
    return crc


def _check_word(name: str, value: int) -> None:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{name} must fit in 16 bits, got {value}")


def _frame(function: int, first: int, second: int) -> bytes:
    body = bytes([DEVICE_ID, function]) + first.to_bytes(2, "big") + second.to_bytes(2, "big")
    return body + crc16(body).to_bytes(2, "little")


def build_read_request(address: int, word_count: int, function: FunctionCode) -> bytes:
    """Build a read request for word_count 16-bit words starting at address."""
    _check_word("address", address)
    _check_word("word_count", word_count)
    return _frame(FunctionCode(function), address, word_count)


def build_write_request(address: int, value: int) -> bytes:
    """Build a 'write single register' request."""
    _check_word("address", address)
    _check_word("value", value)
    return _frame(FunctionCode.WRITE_SINGLE, address, value)


def read_function_for(address: int) -> FunctionCode:
    """Return the function code that reads the given register."""
    if address in HOLDING_REGISTERS:
        return FunctionCode.READ_HOLDING
    if address in INPUT_REGISTERS:
        return FunctionCode.READ_INPUT
    raise InvalidRegisterError(f"register {address} cannot be read")


def check_writable(address: int) -> None:
    """Raise InvalidRegisterError unless the register can be written."""
    if address not in HOLDING_REGISTERS:
        raise InvalidRegisterError(f"register {address} cannot be written")


def parse_register_value(frame: bytes) -> int:
    """Extract the 16-bit value from a single-register read response."""
    if len(frame) < REGISTER_RESPONSE_SIZE:
        raise XTS1Error(f"response too short: {len(frame)} bytes")
    return (frame[3] << 8) + frame[4]


def parse_sys_error(frame: bytes) -> int:
    """Extract the 32-bit system error word from a two-register read response."""
    if len(frame) < SYS_ERROR_RESPONSE_SIZE:
        raise XTS1Error(f"response too short: {len(frame)} bytes")
    return int.from_bytes(frame[3:7], "big")


def to_signed(value: int) -> int:
    """Interpret a 16-bit register value as a two's complement integer."""
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def describe_distance_error(code: int) -> str:
    """Return the diagnostic message for a negative distance reading."""
    try:
        error = DistanceError(code)
    except ValueError:
        raise ValueError(f"{code} is not a distance error code") from None
    return f"ERROR {error.value}: {error.description}"