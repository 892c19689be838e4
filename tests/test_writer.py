from __future__ import annotations

import io
import logging
import struct
import wave
from pathlib import Path

import pytest
from pydantic import ValidationError

from wavheader.models import WavFormat
from wavheader.services.header import WavHeader
from wavheader.services.writer import WavWriter, WavWriterConfigError, WavWriterError
from wavheader.storage.file import FileStorage


class ShortWriteStorage:
    def __init__(self) -> None:
        self.data = bytearray()

    def truncate(self) -> None:
        self.data.clear()

    def write(self, data: bytes) -> int:
        self.data.extend(data[:-1])
        return max(len(data) - 1, 0)

    def seek(self, offset: int) -> None:
        _ = offset

    def size(self) -> int:
        return len(self.data)


def _stereo_writer() -> WavWriter:
    return WavWriter(WavFormat(num_channels=2, sample_rate=22050, bits_per_sample=16))


def test_writer_round_trip_through_memory_storage() -> None:
    fileobj = io.BytesIO()
    storage = FileStorage(fileobj)
    writer = _stereo_writer()

    writer.start_file(storage)
    assert fileobj.tell() == 44

    storage.write(b"\x01\x00\xff\xff" * 500)
    data_size = writer.update_header_from_length(storage)

    raw = fileobj.getvalue()
    assert data_size == 2000
    assert len(raw) == 2044
    assert fileobj.tell() == 2044
    assert struct.unpack_from("<I", raw, 4)[0] == 2036
    assert struct.unpack_from("<I", raw, 40)[0] == 2000

    with wave.open(io.BytesIO(raw), "rb") as wf:
        assert wf.getnchannels() == 2
        assert wf.getframerate() == 22050
        assert wf.getsampwidth() == 2
        assert wf.getnframes() == 500


def test_writer_to_real_file(tmp_path: Path) -> None:
    path = tmp_path / "take.wav"
    path.write_bytes(b"stale contents " * 100)

    with FileStorage.open(path) as storage:
        writer = WavWriter(WavFormat(num_channels=1, sample_rate=8000, bits_per_sample=8))
        writer.start_file(storage)
        storage.write(b"\x80" * 801)
        writer.update_header_from_length(storage)

    raw = path.read_bytes()
    assert len(raw) == 845

    header = WavHeader()
    header.load(raw)
    data = header.find_chunk("data")
    assert data is not None and (data.data_offset, data.data_size) == (44, 801)
    assert header.read_format() == WavFormat(num_channels=1, sample_rate=8000, bits_per_sample=8)


def test_start_file_truncates_existing_contents() -> None:
    fileobj = io.BytesIO(b"previous recording" * 10)
    storage = FileStorage(fileobj)

    _stereo_writer().start_file(storage)

    assert len(fileobj.getvalue()) == 44
    assert fileobj.getvalue()[:4] == b"RIFF"


def test_update_with_no_samples_writes_zero_lengths() -> None:
    fileobj = io.BytesIO()
    storage = FileStorage(fileobj)
    writer = _stereo_writer()

    writer.start_file(storage)
    assert writer.update_header_from_length(storage) == 0
    assert struct.unpack_from("<I", fileobj.getvalue(), 4)[0] == 36


def test_chained_setters_match_explicit_format() -> None:
    chained = WavWriter().with_num_channels(2).with_sample_rate(22050).with_bits_per_sample(16)
    explicit = _stereo_writer()

    assert chained.format == explicit.format
    assert (chained.num_channels, chained.sample_rate, chained.bits_per_sample) == (2, 22050, 16)

    first, second = io.BytesIO(), io.BytesIO()
    chained.start_file(FileStorage(first))
    explicit.start_file(FileStorage(second))
    assert first.getvalue() == second.getvalue()


def test_default_format_comes_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("wavheader.services.writer.settings.num_channels", 2)
    monkeypatch.setattr("wavheader.services.writer.settings.sample_rate", 48000)
    monkeypatch.setattr("wavheader.services.writer.settings.bits_per_sample", 24)

    writer = WavWriter()

    assert writer.format == WavFormat(num_channels=2, sample_rate=48000, bits_per_sample=24)
    assert writer.format.block_align == 6
    assert writer.format.byte_rate == 288000


def test_setter_rejects_value_wider_than_header_field() -> None:
    with pytest.raises(ValidationError):
        WavWriter().with_num_channels(70_000)


def test_zero_bits_per_sample_is_a_config_error() -> None:
    writer = WavWriter().with_bits_per_sample(0)
    with pytest.raises(WavWriterConfigError):
        writer.start_file(FileStorage(io.BytesIO()))


def test_short_write_is_reported() -> None:
    with pytest.raises(WavWriterError):
        _stereo_writer().start_file(ShortWriteStorage())


def test_update_before_start_is_rejected() -> None:
    with pytest.raises(WavWriterError):
        _stereo_writer().update_header_from_length(FileStorage(io.BytesIO()))


def test_update_with_truncated_storage_is_rejected() -> None:
    fileobj = io.BytesIO()
    storage = FileStorage(fileobj)
    writer = _stereo_writer()
    writer.start_file(storage)
    fileobj.truncate(10)

    with pytest.raises(WavWriterError):
        writer.update_header_from_length(storage)


def test_finalize_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="wavheader.services.writer")
    storage = FileStorage(io.BytesIO())
    writer = _stereo_writer()

    writer.start_file(storage)
    storage.write(b"\x00" * 40)
    writer.update_header_from_length(storage)

    assert "Finalized wav header: 40 data bytes" in caplog.text


class OversizedStorage(FileStorage):
    """Reports a size past what a wav header can describe."""

    def size(self) -> int:
        return 2**32


def test_format_overflowing_header_fields_is_a_config_error() -> None:
    fileobj = io.BytesIO()
    writer = WavWriter(WavFormat(num_channels=0xFFFF, sample_rate=16000, bits_per_sample=0xFFFF))

    with pytest.raises(WavWriterConfigError):
        writer.start_file(FileStorage(fileobj))

    assert fileobj.getvalue() == b""


def test_byte_rate_overflow_is_a_config_error() -> None:
    writer = WavWriter(WavFormat(num_channels=8, sample_rate=0xFFFFFFFF, bits_per_sample=32))

    with pytest.raises(WavWriterConfigError):
        writer.start_file(FileStorage(io.BytesIO()))


def test_storage_too_large_for_wav_lengths_is_rejected() -> None:
    fileobj = io.BytesIO()
    storage = OversizedStorage(fileobj)
    writer = _stereo_writer()
    writer.start_file(storage)
    written = fileobj.getvalue()

    with pytest.raises(WavWriterError):
        writer.update_header_from_length(storage)

    assert fileobj.getvalue() == written
    assert writer.header.get_data_size() == 0


def test_rewrite_is_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="wavheader.services.writer")
    storage = FileStorage(io.BytesIO())
    writer = _stereo_writer()

    writer.start_file(storage)
    storage.write(b"\x00" * 8)
    writer.update_header_from_length(storage)

    assert "Writing wav header: channels=2 rate=22050 bits=16" in caplog.text
    assert "Rewriting wav header lengths: total=52 data=8" in caplog.text
