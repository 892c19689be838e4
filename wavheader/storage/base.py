from __future__ import annotations

from typing import Protocol


class Storage(Protocol):
    """Random-access byte sink a WavWriter records into."""

    def truncate(self) -> None:
        """Discard any existing contents and move to offset 0."""
        raise NotImplementedError

    def write(self, data: bytes) -> int:
        """Write at the current position and return the number of bytes written."""
        raise NotImplementedError

    def seek(self, offset: int) -> None:
        raise NotImplementedError

    def size(self) -> int:
        raise NotImplementedError
