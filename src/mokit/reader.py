"""Bounds-checked random access into a loaded catalog buffer."""

from __future__ import annotations

import struct
import sys
from enum import Enum
from pathlib import Path

from mokit.exceptions import OutOfRangeError
from mokit.logging_config import get_logger

logger = get_logger(__name__)


class Endianness(str, Enum):
    """Byte order of the 32-bit fields in a catalog."""

    LITTLE = "<"
    BIG = ">"


class ByteReader:
    """Immutable in-memory buffer with bounds-checked reads.

    A reader built with :meth:`from_file` never raises when the file is
    missing or unreadable. It records a message in ``error`` and behaves as
    an empty buffer, so every later read fails with OutOfRangeError.

    Args:
        data: The buffer to read from
    """

    def __init__(self, data: bytes = b""):
        self._data = bytes(data)
        self._length = len(self._data)
        self.error: str | None = None

    @classmethod
    def from_file(cls, path: Path | str) -> "ByteReader":
        """Load a whole file into a reader."""
        path = Path(path)
        reader = cls()
        if not path.is_file():
            reader.error = f'File "{_display_name(path)}" does not exist'
            return reader
        try:
            reader._data = path.read_bytes()
        except OSError as e:
            reader.error = (
                f'File "{_display_name(path)}" could not be read, '
                f"probably wrong permissions ({e.strerror})"
            )
            return reader
        reader._length = len(reader._data)
        logger.debug("Loaded %d bytes from %s", reader._length, path)
        return reader

    def __len__(self) -> int:
        return self._length

    def read(self, offset: int, length: int) -> bytes:
        """Read ``length`` bytes starting at ``offset``.

        Raises:
            OutOfRangeError: If the range extends past the end of the buffer
        """
        if offset < 0 or length < 0 or offset + length > self._length:
            raise OutOfRangeError(
                "Not enough bytes",
                context={"offset": offset, "length": length, "size": self._length},
            )
        return self._data[offset:offset + length]

    def read_uint32(self, offset: int, endianness: Endianness) -> int:
        """Read one 32-bit integer.

        Values whose top bit is set are clamped to ``sys.maxsize``; a
        catalog field that large can only come from a corrupt file.
        """
        (value,) = struct.unpack(f"{endianness.value}i", self.read(offset, 4))
        if value < 0:
            return sys.maxsize
        return value

    def read_uint32_array(self, offset: int, count: int, endianness: Endianness) -> list[int]:
        """Read ``count`` contiguous 32-bit unsigned integers."""
        if count <= 0:
            return []
        if count > (self._length - offset) // 4 + 1:
            # Avoids building a huge format string for an absurd count
            raise OutOfRangeError(
                "Not enough bytes",
                context={"offset": offset, "length": count * 4, "size": self._length},
            )
        data = self.read(offset, 4 * count)
        return list(struct.unpack(f"{endianness.value}{count}I", data))


def _display_name(path: Path) -> str:
    """Parent directory and file name, as shown in error messages."""
    return f"{path.parent.name}/{path.name}" if path.parent.name else path.name
