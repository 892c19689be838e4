"""Render or inspect wav headers from the command line.

Dump the header the writer would produce for the configured format:
  python scripts/dump_header.py --channels 2 --sample-rate 22050

List the subchunks at the start of an existing file:
  python scripts/dump_header.py --inspect recording.wav
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from wavheader.config import settings
from wavheader.services.chunks import iter_chunks
from wavheader.services.header import WavHeader


logger = logging.getLogger(__name__)


def hex_dump(data: bytes, *, width: int = 16) -> list[str]:
    """Format bytes as offset / hex / ascii rows."""
    rows = []
    for start in range(0, len(data), width):
        row = data[start : start + width]
        hex_part = " ".join(f"{byte:02x}" for byte in row)
        text_part = "".join(chr(byte) if 32 <= byte < 127 else "." for byte in row)
        rows.append(f"{start:04x}: {hex_part:<{width * 3}} {text_part}")
    return rows


def dump_new_header(num_channels: int, sample_rate: int, bits_per_sample: int) -> int:
    header = WavHeader()
    header.write_header(num_channels, sample_rate, bits_per_sample)
    logger.info(
        "Header for channels=%d rate=%d bits=%d (%d bytes)",
        num_channels,
        sample_rate,
        bits_per_sample,
        header.buffer_offset,
    )
    for line in hex_dump(header.to_bytes()):
        logger.info(line)
    return 0


def inspect_file(path: Path, *, capacity: int, skip_pad_byte: bool) -> int:
    header = WavHeader(capacity=capacity)
    with path.open("rb") as fh:
        loaded = header.load(fh.read(capacity))
    logger.info("Loaded %d header bytes from %s", loaded, path)

    for chunk in iter_chunks(header, header.buffer_offset, skip_pad_byte=skip_pad_byte):
        logger.info(
            "chunk %r at %d: data_offset=%d data_size=%d",
            chunk.fourcc,
            chunk.header_offset,
            chunk.data_offset,
            chunk.data_size,
        )

    fmt = header.read_format(skip_pad_byte=skip_pad_byte)
    if fmt is None:
        logger.warning("No PCM fmt chunk found")
    else:
        logger.info(
            "format: channels=%d rate=%d bits=%d byte_rate=%d block_align=%d",
            fmt.num_channels,
            fmt.sample_rate,
            fmt.bits_per_sample,
            fmt.byte_rate,
            fmt.block_align,
        )

    data = header.find_chunk("data", skip_pad_byte=skip_pad_byte)
    if data is None:
        logger.error("No data chunk within the first %d bytes", loaded)
        return 1
    logger.info("samples start at offset %d, %d bytes", data.data_offset, data.data_size)
    return 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Write or inspect PCM wav headers")
    parser.add_argument("--inspect", type=Path, help="Existing wav file to scan for subchunks.")
    parser.add_argument("--channels", type=int, default=settings.num_channels)
    parser.add_argument("--sample-rate", type=int, default=settings.sample_rate)
    parser.add_argument("--bits", type=int, default=settings.bits_per_sample)
    parser.add_argument(
        "--capacity",
        type=int,
        default=settings.read_capacity,
        help=f"Bytes to read when inspecting (default: {settings.read_capacity}).",
    )
    parser.add_argument(
        "--skip-pad-byte",
        action=argparse.BooleanOptionalAction,
        default=settings.skip_pad_byte,
        help="Skip the RIFF pad byte after odd-sized chunks when scanning.",
    )
    return parser.parse_args(argv)


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if args.inspect is not None:
        return inspect_file(args.inspect, capacity=args.capacity, skip_pad_byte=args.skip_pad_byte)
    return dump_new_header(args.channels, args.sample_rate, args.bits)


if __name__ == "__main__":
    sys.exit(main())
