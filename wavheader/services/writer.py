from __future__ import annotations

import logging
from typing import Optional

from wavheader.config import settings
from wavheader.models import WavFormat
from wavheader.services.header import STANDARD_SIZE, WavHeader
from wavheader.storage.base import Storage


logger = logging.getLogger(__name__)


class WavWriterError(RuntimeError):
    """Raised when a wav file cannot be written or finalized."""


class WavWriterConfigError(WavWriterError):
    """Raised when the writer's audio format is unusable."""


def _default_format() -> WavFormat:
    return WavFormat(
        num_channels=settings.num_channels,
        sample_rate=settings.sample_rate,
        bits_per_sample=settings.bits_per_sample,
    )


class WavWriter:
    """Writes a wav header to storage and fixes up its lengths afterwards.

    Usage:
    1. `start_file(storage)` writes the header; storage is left positioned for samples
    2. the caller writes raw sample bytes straight to storage
    3. `update_header_from_length(storage)` rewrites both length fields

    8-bit samples are unsigned, 16-bit samples are signed little endian.
    """

    def __init__(self, fmt: Optional[WavFormat] = None) -> None:
        self._format = fmt if fmt is not None else _default_format()
        self._header = WavHeader()
        self._started = False

    @property
    def format(self) -> WavFormat:
        return self._format

    @property
    def header(self) -> WavHeader:
        return self._header

    @property
    def num_channels(self) -> int:
        return self._format.num_channels

    @property
    def sample_rate(self) -> int:
        return self._format.sample_rate

    @property
    def bits_per_sample(self) -> int:
        return self._format.bits_per_sample

    def with_num_channels(self, num_channels: int) -> "WavWriter":
        self._format = WavFormat(**{**self._format.model_dump(), "num_channels": num_channels})
        return self

    def with_sample_rate(self, sample_rate: int) -> "WavWriter":
        self._format = WavFormat(**{**self._format.model_dump(), "sample_rate": sample_rate})
        return self

    def with_bits_per_sample(self, bits_per_sample: int) -> "WavWriter":
        self._format = WavFormat(**{**self._format.model_dump(), "bits_per_sample": bits_per_sample})
        return self

    def _write_all(self, storage: Storage, data: bytes) -> None:
        written = storage.write(data)
        if written != len(data):
            raise WavWriterError(f"Short write to storage: {written} of {len(data)} bytes")

    def start_file(self, storage: Storage) -> None:
        """Truncate storage and write the header for the configured format.

        Storage is left at offset 44, ready for sample data.
        """
        if self._format.bits_per_sample == 0 or self._format.num_channels == 0:
            raise WavWriterConfigError(
                f"Cannot record with num_channels={self.num_channels}, "
                f"bits_per_sample={self.bits_per_sample}"
            )
        try:
            self._header.write_format(self._format)
        except ValueError as exc:
            raise WavWriterConfigError(f"Format does not fit a wav header: {exc}") from exc
        logger.debug(
            "Writing wav header: channels=%d rate=%d bits=%d",
            self.num_channels,
            self.sample_rate,
            self.bits_per_sample,
        )
        storage.truncate()
        self._write_all(storage, self._header.to_bytes())
        self._started = True

    def update_header_from_length(self, storage: Storage) -> int:
        """Rewrite the header lengths from the current storage size.

        Call after all samples have been written. Returns the data size in
        bytes; storage is left positioned at its end.
        """
        if not self._started:
            raise WavWriterError("update_header_from_length called before start_file")
        total_size = storage.size()
        if total_size < STANDARD_SIZE:
            raise WavWriterError(
                f"Storage holds {total_size} bytes, less than the {STANDARD_SIZE}-byte header"
            )
        data_size = total_size - STANDARD_SIZE
        try:
            self._header.set_data_size(data_size)
        except ValueError as exc:
            raise WavWriterError(f"Data size {data_size} too large for a wav file") from exc

        logger.debug("Rewriting wav header lengths: total=%d data=%d", total_size, data_size)
        storage.seek(0)
        self._write_all(storage, self._header.to_bytes())
        storage.seek(total_size)
        logger.info("Finalized wav header: %d data bytes", data_size)
        return data_size
