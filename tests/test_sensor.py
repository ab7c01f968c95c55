from unittest import mock

import pytest

from xts1.protocol import (
    FunctionCode,
    InvalidRegisterError,
    ResponseTimeoutError,
    build_read_request,
    build_write_request,
    crc16,
)
from xts1.sensor import XTS1


class FakeDevice:
    """A serial transport that answers like the sensor."""

    def __init__(self, registers=None, silent=False, reply_size=None):
        self.registers = dict(registers or {})
        self.silent = silent
        self.reply_size = reply_size
        self.written = []
        self.buffer = bytearray()
        self.closed = False

    @property
    def in_waiting(self):
        return len(self.buffer)

    def write(self, data):
        data = bytes(data)
        self.written.append(data)
        if self.silent:
            return len(data)
        function = data[1]
        address = int.from_bytes(data[2:4], "big")
        field = int.from_bytes(data[4:6], "big")
        if function == FunctionCode.WRITE_SINGLE:
            self.registers[address] = field
            reply = data
        else:
            payload = b"".join(
                self.registers.get(address + n, 0).to_bytes(2, "big") for n in range(field)
            )
            body = bytes([1, function, len(payload)]) + payload
            reply = body + crc16(body).to_bytes(2, "little")
        if self.reply_size is not None:
            reply = reply[: self.reply_size]
        self.buffer.extend(reply)
        return len(data)

    def read(self, size):
        chunk = bytes(self.buffer[:size])
        del self.buffer[:size]
        return chunk

    def reset_input_buffer(self):
        self.buffer.clear()

    def close(self):
        self.closed = True


def make(device, ticks=12):
    return XTS1(device, timeout_ticks=ticks, tick=0)


def test_write_register_sends_frame_and_stores():
    device = FakeDevice()
    make(device).write_register(66, 20)
    assert device.written == [build_write_request(66, 20)]
    assert device.registers[66] == 20
    assert device.in_waiting == 0


def test_write_register_rejects_read_only():
    device = FakeDevice()
    with pytest.raises(InvalidRegisterError):
        make(device).write_register(23, 1)
    assert device.written == []


def test_read_holding_register():
    device = FakeDevice({64: 0xABCD})
    assert make(device).read_register(64) == 0xABCD
    assert device.written[-1] == build_read_request(64, 1, FunctionCode.READ_HOLDING)


def test_read_input_register_uses_input_code():
    device = FakeDevice({59: 321})
    assert make(device).read_register(59) == 321
    assert device.written[-1][1] == FunctionCode.READ_INPUT


def test_read_unknown_register_sends_nothing():
    device = FakeDevice()
    with pytest.raises(InvalidRegisterError):
        make(device).read_register(10)
    assert device.written == []


def test_read_timeout():
    with pytest.raises(ResponseTimeoutError):
        make(FakeDevice(silent=True)).read_register(23)


def test_write_timeout_flushes_partial_reply():
    device = FakeDevice(reply_size=3)
    with pytest.raises(ResponseTimeoutError):
        make(device).write_register(3, 1)
    assert device.in_waiting == 0


def test_timeout_is_an_oserror_timeout():
    with pytest.raises(TimeoutError):
        make(FakeDevice(silent=True), ticks=1).sys_error()


def test_sys_error_combines_two_registers():
    device = FakeDevice({16: 0x1234, 17: 0x5678})
    assert make(device).sys_error() == 0x12345678
    assert device.written[-1] == build_read_request(16, 2, FunctionCode.READ_INPUT)


def test_measure_distance_positive():
    assert make(FakeDevice({23: 1500})).measure_distance() == 1500


def test_measure_distance_error_code_is_negative():
    assert make(FakeDevice({23: (-13) & 0xFFFF})).measure_distance() == -13


def test_setup_writes_configuration_in_order():
    device = FakeDevice()
    make(device).setup()
    assert device.written == [
        build_write_request(66, 20),
        build_write_request(65, 0x0101),
        build_write_request(3, 1),
    ]


def test_context_manager_closes_transport():
    device = FakeDevice()
    with make(device) as sensor:
        assert sensor.transport is device
    assert device.closed


def test_from_port_opens_serial_link():
    device = FakeDevice()
    with mock.patch("serial.Serial", return_value=device) as opener:
        sensor = XTS1.from_port("/dev/ttyTEST0")
    assert sensor.transport is device
    kwargs = opener.call_args.kwargs
    assert kwargs["port"] == "/dev/ttyTEST0"
    assert kwargs["baudrate"] == 115200