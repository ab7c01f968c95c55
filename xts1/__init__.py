"""Modbus RTU driver and statistics demo for the XT-S1 time-of-flight distance sensor."""

__version__ = "0.1.0"
__all__ = ["protocol", "sensor", "demo"]