"""Bounded text emission into a caller-owned, fixed-size buffer"""
from typing import Optional

from pseudocoder.config import OUTPUT_ENCODING
from pseudocoder.error_handling import CapacityExceededError, InputValidationError


class BoundedTextSink:
    """
    Append-only writer over a caller-supplied ``bytearray``.

    The sink keeps a (position, remaining) cursor. ``remaining`` always
    reserves one byte for the NUL terminator, so the written text is never
    longer than ``capacity - 1`` bytes and is terminated after every
    successful append.

    A failed append raises :class:`CapacityExceededError` and leaves all
    earlier appends in place. There is no rollback; after a failure the
    buffer holds an unreliable prefix.
    """

    def __init__(self, buffer: bytearray, capacity: Optional[int] = None):
        """
        Args:
            buffer: Caller-owned output region; never resized
            capacity: Usable bytes of ``buffer`` (terminator included),
                defaults to ``len(buffer)``

        Raises:
            InputValidationError: If the buffer is missing or the capacity
                is zero or larger than the buffer
        """
        if buffer is None:
            raise InputValidationError("Output buffer is missing")
        if capacity is None:
            capacity = len(buffer)
        if capacity <= 0 or capacity > len(buffer):
            raise InputValidationError(
                f"Buffer capacity must be between 1 and {len(buffer)}, got {capacity}"
            )

        self._buffer = buffer
        self._capacity = capacity
        self._position = 0
        self._remaining = capacity - 1
        self._buffer[0] = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def position(self) -> int:
        """Number of bytes written so far (terminator excluded)."""
        return self._position

    @property
    def remaining(self) -> int:
        """Bytes that can still be appended."""
        return self._remaining

    def append(self, text: str) -> None:
        """
        Append ``text`` followed by a terminator.

        Raises:
            CapacityExceededError: If ``text`` is longer than the remaining capacity
        """
        data = text.encode(OUTPUT_ENCODING)
        length = len(data)

        if length > self._remaining:
            raise CapacityExceededError(length, self._remaining)

        end = self._position + length
        self._buffer[self._position:end] = data
        self._buffer[end] = 0

        self._position = end
        self._remaining -= length

    def copy_to(self, target: bytearray) -> None:
        """Copy the written text and its terminator to the start of ``target``."""
        end = self._position + 1
        target[:end] = self._buffer[:end]

    def getvalue(self) -> str:
        """Return the text written so far."""
        return self._buffer[:self._position].decode(OUTPUT_ENCODING)

    def __len__(self) -> int:
        return self._position

    def __repr__(self) -> str:
        return (f"BoundedTextSink(capacity={self._capacity}, "
                f"position={self._position}, remaining={self._remaining})")
