import pytest
from hypothesis import given, strategies as st

from pseudocoder.config import INT64_MAX, INT64_MIN, UINT64_MAX
from pseudocoder.error_handling import CapacityExceededError
from pseudocoder.numeric import (
    format_hex,
    format_signed,
    format_unsigned,
    to_signed64,
    write_hex,
    write_signed,
    write_unsigned,
)
from pseudocoder.text_sink import BoundedTextSink

uint64 = st.integers(min_value=0, max_value=UINT64_MAX)
int64 = st.integers(min_value=INT64_MIN, max_value=INT64_MAX)


def _render(writer, value, capacity=64) -> str:
    sink = BoundedTextSink(bytearray(capacity))
    writer(sink, value)
    return sink.getvalue()


@pytest.mark.parametrize("value, expected", [
    (0, "0"),
    (1, "1"),
    (10, "10"),
    (UINT64_MAX, "18446744073709551615"),
])
def test_unsigned_edges(value, expected) -> None:
    assert _render(write_unsigned, value) == expected


@pytest.mark.parametrize("value, expected", [
    (0, "0x0"),
    (0x10, "0x10"),
    (0x400010, "0x400010"),
    (0xDEADBEEF, "0xDEADBEEF"),
    (UINT64_MAX, "0xFFFFFFFFFFFFFFFF"),
])
def test_hex_edges(value, expected) -> None:
    assert _render(write_hex, value) == expected


@pytest.mark.parametrize("value, expected", [
    (0, "0"),
    (8, "8"),
    (-8, "-8"),
    (INT64_MAX, "9223372036854775807"),
    (INT64_MIN, "-9223372036854775808"),
])
def test_signed_edges(value, expected) -> None:
    assert _render(write_signed, value) == expected


def test_signed_reinterprets_high_bit() -> None:
    assert to_signed64(UINT64_MAX) == -1
    assert format_signed(UINT64_MAX) == "-1"


@given(uint64)
def test_unsigned_round_trip(value) -> None:
    text = format_unsigned(value)
    assert int(text) == value
    assert text == "0" or not text.startswith("0")


@given(uint64)
def test_hex_round_trip(value) -> None:
    text = format_hex(value)
    assert text.startswith("0x")
    assert text[2:] == text[2:].upper()
    assert int(text, 16) == value


@given(int64)
def test_signed_round_trip(value) -> None:
    assert int(format_signed(value)) == value


@given(uint64)
def test_unsigned_needs_exactly_its_length(value) -> None:
    text = format_unsigned(value)
    assert _render(write_unsigned, value, capacity=len(text) + 1) == text
    with pytest.raises(CapacityExceededError):
        _render(write_unsigned, value, capacity=len(text))


@given(st.integers(min_value=INT64_MIN, max_value=-1))
def test_negative_sign_is_written_before_digits_fail(value) -> None:
    # Room for the sign only: the sign stays, the digits do not fit
    sink = BoundedTextSink(bytearray(2))
    with pytest.raises(CapacityExceededError):
        write_signed(sink, value)
    assert sink.getvalue() == "-"
