from __future__ import annotations

import io
import os
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator


class FileStorage:
    """Storage backed by a binary file object opened for reading and writing.

    The file object is borrowed: FileStorage never closes it. Use `open` to
    have a path opened and closed for you.
    """

    def __init__(self, fileobj: BinaryIO) -> None:
        self._file = fileobj

    @classmethod
    @contextmanager
    def open(cls, path: str | os.PathLike[str]) -> Iterator["FileStorage"]:
        """Open `path` for writing, truncating any existing contents."""
        with Path(path).open("w+b") as fileobj:
            yield cls(fileobj)

    @property
    def fileobj(self) -> BinaryIO:
        return self._file

    def truncate(self) -> None:
        self._file.seek(0)
        self._file.truncate()

    def write(self, data: bytes) -> int:
        written = self._file.write(data)
        # Raw unbuffered files may return None when the write would block.
        return written or 0

    def seek(self, offset: int) -> None:
        self._file.seek(offset, io.SEEK_SET)

    def size(self) -> int:
        current = self._file.tell()
        end = self._file.seek(0, io.SEEK_END)
        self._file.seek(current, io.SEEK_SET)
        return end
