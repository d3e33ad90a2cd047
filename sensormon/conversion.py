"""Conversions of MCP9803 temperature register values.

The register is 16 bits: the upper byte holds whole degrees and bits 7..4
hold sixteenths of a degree, in two's complement.
"""

from __future__ import annotations

_MASK = 0xFFFF
_SIGN = 0x8000


def raw_to_float(data: int) -> float:
    """Convert a raw register value to degrees Celsius."""
    data &= _MASK
    negative = bool(data & _SIGN)
    if negative:
        data = (~data + (1 << 4)) & _MASK
    return (-1 if negative else 1) / 16 * (data >> 4)


def float_to_raw(value: float) -> int:
    """Convert degrees Celsius to a raw register value.

    Negative values are encoded as the sign bit combined with the
    magnitude, as the device firmware does.
    """
    negative = value < 0
    data = int(value * 16) & _MASK
    if negative:
        data = (~data + 1) & _MASK
    return ((data << 4) | (_SIGN if negative else 0)) & _MASK


def raw_to_string(data: int) -> str:
    """Format a raw register value as sign, whole degrees and hundredths.

    The sign is ``'-'`` or a space; the hundredths are printed without
    zero padding.
    """
    data &= _MASK
    sign = " "
    if data & _SIGN:
        sign = "-"
        data = (~data + 0x0010) & _MASK
    whole = (data >> 8) & 0xFF
    hundredths = ((data & 0xF0) >> 4) * 100 // 16
    return f"{sign}{whole}.{hundredths}"