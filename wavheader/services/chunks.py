"""RIFF sub-chunk scanning over an in-memory header buffer."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Union

from wavheader.services.byte_buffer import ByteBuffer

# Size of the RIFF preamble: "RIFF", overall size, "WAVE".
PREAMBLE_SIZE = 12
# Each sub-chunk starts with a 4-byte id and a 4-byte little-endian size.
CHUNK_HEADER_SIZE = 8

ChunkId = Union[str, bytes, int]


@dataclass(slots=True)
class Chunk:
    """A located sub-chunk. Offsets are absolute positions in the buffer."""

    fourcc: str
    data_offset: int
    data_size: int

    @property
    def header_offset(self) -> int:
        return self.data_offset - CHUNK_HEADER_SIZE


def _coerce_id(chunk_id: ChunkId) -> int:
    if isinstance(chunk_id, int):
        if not 0 <= chunk_id <= 0xFFFFFFFF:
            raise ValueError(f"chunk id {chunk_id:#x} does not fit in 32 bits")
        return chunk_id
    return ByteBuffer.four_char_string_to_value(chunk_id)


def iter_chunks(
    buf: ByteBuffer,
    extent: int,
    *,
    skip_pad_byte: bool = False,
) -> Iterator[Chunk]:
    """Yield every sub-chunk whose 8-byte header lies within `extent`.

    Only the chunk header has to be inside the extent; the payload usually is
    not (the `data` payload never is for a 44-byte header). Stops silently at
    the first header that would cross the extent, so a truncated or corrupt
    size just ends the walk.
    """
    extent = min(extent, buf.buffer_size)
    pos = PREAMBLE_SIZE
    while pos + CHUNK_HEADER_SIZE <= extent:
        chunk_id = buf.get_uint32_be(pos)
        chunk_size = buf.get_uint32_le(pos + 4)
        yield Chunk(
            fourcc=ByteBuffer.value_to_four_char_string(chunk_id),
            data_offset=pos + CHUNK_HEADER_SIZE,
            data_size=chunk_size,
        )
        pos += CHUNK_HEADER_SIZE + chunk_size
        if skip_pad_byte and chunk_size % 2:
            pos += 1


def find_chunk(
    buf: ByteBuffer,
    chunk_id: ChunkId,
    extent: int,
    *,
    skip_pad_byte: bool = False,
) -> Optional[Chunk]:
    """Return the first chunk with id `chunk_id`, or None.

    A missing chunk and a malformed chunk list both give None.
    """
    target = _coerce_id(chunk_id)
    target_fourcc = ByteBuffer.value_to_four_char_string(target)
    for chunk in iter_chunks(buf, extent, skip_pad_byte=skip_pad_byte):
        if chunk.fourcc == target_fourcc:
            return chunk
    return None
