from __future__ import annotations

import struct
from typing import Union

WritableBuffer = Union[bytearray, memoryview]

_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFFFFFF


class WavHeaderError(RuntimeError):
    """Raised when a wav header buffer cannot be read or written."""


class BufferTooSmallError(WavHeaderError, IndexError):
    """Raised when a field access would run past the end of the buffer."""


class ByteBuffer:
    """Bounds-checked integer access into a fixed-capacity byte buffer.

    The buffer is either borrowed from the caller (any writable buffer object)
    or allocated here with the requested capacity. It is never resized.
    `buffer_offset` tracks how many leading bytes hold meaningful content.
    """

    def __init__(self, buffer: WritableBuffer | None = None, *, capacity: int = 0) -> None:
        if buffer is None:
            if capacity < 0:
                raise ValueError("capacity must be >= 0")
            buffer = bytearray(capacity)
        elif memoryview(buffer).readonly:
            raise TypeError(f"buffer must be writable, got {type(buffer).__name__}")
        self._buffer = buffer
        self._buffer_size = memoryview(buffer).nbytes
        self._buffer_offset = 0

    @property
    def buffer(self) -> WritableBuffer:
        return self._buffer

    @property
    def buffer_size(self) -> int:
        return self._buffer_size

    @property
    def buffer_offset(self) -> int:
        return self._buffer_offset

    def _check(self, offset: int, width: int) -> None:
        if offset < 0 or offset + width > self._buffer_size:
            raise BufferTooSmallError(
                f"{width}-byte field at offset {offset} exceeds buffer size {self._buffer_size}"
            )

    def _pack(self, fmt: str, offset: int, value: int, maximum: int) -> None:
        if not 0 <= value <= maximum:
            raise ValueError(f"value {value} does not fit in {fmt[1:]} field")
        self._check(offset, struct.calcsize(fmt))
        struct.pack_into(fmt, self._buffer, offset, value)

    def _unpack(self, fmt: str, offset: int) -> int:
        self._check(offset, struct.calcsize(fmt))
        return struct.unpack_from(fmt, self._buffer, offset)[0]

    def set_uint16_le(self, offset: int, value: int) -> None:
        self._pack("<H", offset, value, _U16_MAX)

    def get_uint16_le(self, offset: int) -> int:
        return self._unpack("<H", offset)

    def set_uint32_le(self, offset: int, value: int) -> None:
        self._pack("<I", offset, value, _U32_MAX)

    def get_uint32_le(self, offset: int) -> int:
        return self._unpack("<I", offset)

    def set_uint32_be(self, offset: int, value: int) -> None:
        """Big-endian store; used for four-character chunk ids."""
        self._pack(">I", offset, value, _U32_MAX)

    def get_uint32_be(self, offset: int) -> int:
        return self._unpack(">I", offset)

    @staticmethod
    def four_char_string_to_value(value: str | bytes) -> int:
        """Convert a FourCC like ``"fmt "`` to the integer `get_uint32_be` returns."""
        raw = value.encode("ascii") if isinstance(value, str) else bytes(value)
        if len(raw) != 4:
            raise ValueError(f"four character code must be 4 bytes, got {value!r}")
        return int.from_bytes(raw, byteorder="big")

    @staticmethod
    def value_to_four_char_string(value: int) -> str:
        return value.to_bytes(4, byteorder="big").decode("latin-1")
