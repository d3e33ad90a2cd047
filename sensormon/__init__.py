"""Serial port sensor monitor: message parsing, indicators, port handling and temperature conversions."""

__version__ = "0.1.0"