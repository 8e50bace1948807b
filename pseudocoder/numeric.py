"""Decimal and hexadecimal number rendering on top of the bounded text sink"""
from pseudocoder.config import UINT64_MASK
from pseudocoder.text_sink import BoundedTextSink


def to_unsigned64(value: int) -> int:
    """Wrap ``value`` into the unsigned 64-bit range."""
    return value & UINT64_MASK


def to_signed64(value: int) -> int:
    """Reinterpret the low 64 bits of ``value`` as a two's complement integer."""
    value &= UINT64_MASK
    if value & (1 << 63):
        return value - (1 << 64)
    return value


def format_unsigned(value: int) -> str:
    """Decimal digits of an unsigned 64-bit value, no leading zeros."""
    return f"{to_unsigned64(value):d}"


def format_hex(value: int) -> str:
    """Uppercase hex with a ``0x`` prefix and no zero padding."""
    return f"0x{to_unsigned64(value):X}"


def format_signed(value: int) -> str:
    """Decimal text of a signed 64-bit value."""
    value = to_signed64(value)
    if value < 0:
        # INT64_MIN negates to 2**63, which still fits the unsigned range
        return "-" + format_unsigned(-value)
    return format_unsigned(value)


def write_unsigned(sink: BoundedTextSink, value: int) -> None:
    sink.append(format_unsigned(value))


def write_hex(sink: BoundedTextSink, value: int) -> None:
    sink.append(format_hex(value))


def write_signed(sink: BoundedTextSink, value: int) -> None:
    """Emit a signed value; the sign is appended on its own before the digits."""
    value = to_signed64(value)
    if value < 0:
        sink.append("-")
        write_unsigned(sink, -value)
    else:
        write_unsigned(sink, value)
