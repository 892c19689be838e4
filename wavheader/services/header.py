from __future__ import annotations

from typing import Optional

from wavheader.config import settings
from wavheader.models import WavFormat
from wavheader.services.byte_buffer import BufferTooSmallError, ByteBuffer, WritableBuffer
from wavheader.services.chunks import Chunk, ChunkId, find_chunk

# Size of the header written by `write_header`. Files written elsewhere may
# carry extra subchunks and need a larger buffer to be scanned.
STANDARD_SIZE = 44

PCM_FMT_CHUNK_SIZE = 16
PCM_AUDIO_FORMAT = 1

# RIFF chunk size counts everything after its own field except the sample data.
RIFF_SIZE_OVERHEAD = STANDARD_SIZE - 8

_RIFF_ID = ByteBuffer.four_char_string_to_value("RIFF")
_WAVE_ID = ByteBuffer.four_char_string_to_value("WAVE")
_FMT_ID = ByteBuffer.four_char_string_to_value("fmt ")
_DATA_ID = ByteBuffer.four_char_string_to_value("data")

_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFFFFFF


def _require_fits(name: str, value: int, maximum: int) -> None:
    if not 0 <= value <= maximum:
        raise ValueError(f"{name}={value} does not fit its header field (max {maximum})")


class WavHeader(ByteBuffer):
    """Reads and writes the canonical 44-byte PCM wav header.

    Pass a writable buffer to work on caller-owned memory, or let the header
    allocate `capacity` bytes itself. The header never resizes the buffer.
    """

    def __init__(
        self,
        buffer: Optional[WritableBuffer] = None,
        *,
        capacity: int = STANDARD_SIZE,
    ) -> None:
        super().__init__(buffer, capacity=capacity)

    def write_header(
        self,
        num_channels: int,
        sample_rate: int,
        bits_per_sample: int,
        data_size: int = 0,
    ) -> None:
        """Write the header to the start of the buffer and set `buffer_offset` to 44.

        `data_size` may be left at 0 and filled in later with `set_data_size`;
        wav readers need both length fields to be correct.

        Raises BufferTooSmallError if the buffer holds fewer than 44 bytes and
        ValueError if a value does not fit its field. In both cases the buffer
        is left untouched.
        """
        if self.buffer_size < STANDARD_SIZE:
            raise BufferTooSmallError(
                f"wav header needs {STANDARD_SIZE} bytes, buffer has {self.buffer_size}"
            )
        block_align = num_channels * bits_per_sample // 8
        byte_rate = sample_rate * num_channels * bits_per_sample // 8
        _require_fits("num_channels", num_channels, _U16_MAX)
        _require_fits("sample_rate", sample_rate, _U32_MAX)
        _require_fits("bits_per_sample", bits_per_sample, _U16_MAX)
        _require_fits("block_align", block_align, _U16_MAX)
        _require_fits("byte_rate", byte_rate, _U32_MAX)
        _require_fits("data_size", data_size, _U32_MAX - RIFF_SIZE_OVERHEAD)

        self.set_uint32_be(0, _RIFF_ID)
        self.set_uint32_le(4, data_size + RIFF_SIZE_OVERHEAD)
        self.set_uint32_be(8, _WAVE_ID)

        self.set_uint32_be(12, _FMT_ID)
        self.set_uint32_le(16, PCM_FMT_CHUNK_SIZE)
        self.set_uint16_le(20, PCM_AUDIO_FORMAT)
        self.set_uint16_le(22, num_channels)
        self.set_uint32_le(24, sample_rate)
        self.set_uint32_le(28, byte_rate)
        self.set_uint16_le(32, block_align)
        self.set_uint16_le(34, bits_per_sample)

        self.set_uint32_be(36, _DATA_ID)
        self.set_uint32_le(40, data_size)

        self._buffer_offset = STANDARD_SIZE

    def write_format(self, fmt: WavFormat, data_size: int = 0) -> None:
        self.write_header(fmt.num_channels, fmt.sample_rate, fmt.bits_per_sample, data_size)

    def set_data_size(self, data_size: int) -> None:
        """Update the RIFF chunk size and the data chunk size.

        `data_size` is the number of sample bytes after `get_data_offset()`,
        which for headers written here is the file size less 44. The buffer
        must already hold a header in the standard layout; it is not checked.
        """
        _require_fits("data_size", data_size, _U32_MAX - RIFF_SIZE_OVERHEAD)
        self._check(0, STANDARD_SIZE)
        self.set_uint32_le(4, data_size + RIFF_SIZE_OVERHEAD)
        self.set_uint32_le(40, data_size)

    def get_data_offset(self) -> int:
        """Offset of the sample data: 44 for headers written by `write_header`.

        For a buffer filled with `load` this is the number of bytes loaded;
        use `find_chunk("data").data_offset` to locate the samples instead.
        """
        return self.buffer_offset

    def get_data_size(self) -> int:
        return self.get_uint32_le(40)

    def load(self, data: bytes) -> int:
        """Copy the leading bytes of an existing file into the buffer.

        Returns the number of bytes copied, which becomes the extent scanned
        by `find_chunk`.
        """
        count = min(len(data), self.buffer_size)
        memoryview(self.buffer)[:count] = data[:count]
        self._buffer_offset = count
        return count

    def to_bytes(self) -> bytes:
        return bytes(memoryview(self.buffer)[: self.buffer_offset])

    def find_chunk(self, chunk_id: ChunkId, *, skip_pad_byte: Optional[bool] = None) -> Optional[Chunk]:
        """Find a subchunk such as ``"fmt "`` or ``"data"`` within the loaded bytes.

        The whole chunk list up to the target must be in the buffer. This is
        44 bytes for headers written here; other files may have more subchunks.
        """
        if skip_pad_byte is None:
            skip_pad_byte = settings.skip_pad_byte
        return find_chunk(self, chunk_id, self.buffer_offset, skip_pad_byte=skip_pad_byte)

    def read_format(self, *, skip_pad_byte: Optional[bool] = None) -> Optional[WavFormat]:
        chunk = self.find_chunk("fmt ", skip_pad_byte=skip_pad_byte)
        if chunk is None or chunk.data_size < PCM_FMT_CHUNK_SIZE:
            return None
        if chunk.data_offset + PCM_FMT_CHUNK_SIZE > self.buffer_offset:
            return None
        if self.get_uint16_le(chunk.data_offset) != PCM_AUDIO_FORMAT:
            return None
        return WavFormat(
            num_channels=self.get_uint16_le(chunk.data_offset + 2),
            sample_rate=self.get_uint32_le(chunk.data_offset + 4),
            bits_per_sample=self.get_uint16_le(chunk.data_offset + 14),
        )
