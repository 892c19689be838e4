from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WavFormat(BaseModel):
    """PCM audio parameters written into the `fmt ` chunk.

    Bounds are the widths of the header fields; anything that fits is accepted.
    """

    model_config = ConfigDict(frozen=True)

    num_channels: int = Field(1, ge=0, le=0xFFFF)
    sample_rate: int = Field(16_000, ge=0, le=0xFFFFFFFF)
    bits_per_sample: int = Field(16, ge=0, le=0xFFFF)

    @property
    def block_align(self) -> int:
        return self.num_channels * self.bits_per_sample // 8

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.num_channels * self.bits_per_sample // 8
