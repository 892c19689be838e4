"""Configuration helpers for the wav header codec and writer."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off", ""}


@dataclass
class Settings:
    """Centralized environment-driven configuration.

    Defaults only; the codec itself takes every parameter explicitly and
    consults these values when a caller leaves one out.
    """

    # Default format used by WavWriter when none is passed in.
    num_channels: int = int(os.getenv("WAV_NUM_CHANNELS", "1"))
    sample_rate: int = int(os.getenv("WAV_SAMPLE_RATE", "16000"))
    bits_per_sample: int = int(os.getenv("WAV_BITS_PER_SAMPLE", "16"))
    # Header buffer capacity when reading files we did not write. Extra
    # subchunks before `data` need more than the standard 44 bytes.
    read_capacity: int = int(os.getenv("WAV_READ_CAPACITY", "512"))
    # RIFF pads odd-sized chunk payloads with one byte. When off, the scanner
    # advances by the declared size only.
    skip_pad_byte: bool = _env_bool("WAV_SKIP_PAD_BYTE", False)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance to avoid repeated environment reads."""

    return Settings()


settings = get_settings()
