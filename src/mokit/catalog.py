"""Decoding of compiled gettext catalogs (.mo files).

Layout of the fields read here (all 32-bit, byte order chosen by the magic):

    [0, 4)    magic
    [8, 12)   number of strings N
    [12, 16)  offset of the originals table
    [16, 20)  offset of the translations table

Each table holds N ``(length, offset)`` records locating a raw byte string.
Strings are kept as bytes; decoding to text happens at lookup time with the
charset declared in the catalog header.
"""

from __future__ import annotations

from pathlib import Path

from mokit.constants import (
    MAGIC_BE,
    MAGIC_LE,
    OFFSET_COUNT,
    OFFSET_ORIGINALS,
    OFFSET_TRANSLATIONS,
)
from mokit.exceptions import (
    CatalogError,
    CatalogNotFoundError,
    CatalogUnreadableError,
    MalformedCatalogError,
    NotACatalogError,
    OutOfRangeError,
)
from mokit.logging_config import get_logger
from mokit.reader import ByteReader, Endianness

logger = get_logger(__name__)

Catalog = dict[bytes, bytes]


def detect_endianness(reader: ByteReader, name: str = "<buffer>") -> Endianness:
    """Select the field byte order from the magic bytes.

    Raises:
        NotACatalogError: If the magic matches neither byte order
    """
    try:
        magic = reader.read(0, 4)
    except OutOfRangeError:
        magic = b""
    if magic == MAGIC_LE:
        return Endianness.LITTLE
    if magic == MAGIC_BE:
        return Endianness.BIG
    raise NotACatalogError(f'File "{name}" is not a translation file (Gettext MO-file)')


def decode_reader(
    reader: ByteReader,
    name: str = "<buffer>",
    endianness: Endianness | None = None,
) -> Catalog:
    """Extract all (original, translated) pairs from a loaded buffer.

    Either the whole table is decoded or nothing is: a table that points
    outside the buffer raises before any entry is returned.
    Pass ``endianness`` when the magic bytes were already checked.

    Raises:
        NotACatalogError: If the magic bytes are not recognized
        MalformedCatalogError: If a header field or table entry is out of range
    """
    if endianness is None:
        endianness = detect_endianness(reader, name)
    try:
        total = reader.read_uint32(OFFSET_COUNT, endianness)
        originals_at = reader.read_uint32(OFFSET_ORIGINALS, endianness)
        translations_at = reader.read_uint32(OFFSET_TRANSLATIONS, endianness)

        originals = reader.read_uint32_array(originals_at, total * 2, endianness)
        translations = reader.read_uint32_array(translations_at, total * 2, endianness)

        entries: Catalog = {}
        for i in range(total):
            length, offset = originals[2 * i], originals[2 * i + 1]
            original = reader.read(offset, length)
            length, offset = translations[2 * i], translations[2 * i + 1]
            entries[original] = reader.read(offset, length)
    except OutOfRangeError as e:
        raise MalformedCatalogError(
            f'File "{name}" could not be read, the string table is malformed',
            context=e.context,
        ) from e
    return entries


def decode_bytes(data: bytes, name: str = "<buffer>") -> Catalog:
    """Decode a catalog held in memory. Raises CatalogError on failure."""
    return decode_reader(ByteReader(data), name)


class CatalogDecoder:
    """Reads one catalog file and keeps the outcome.

    ``decode()`` never raises. Failures are kept as a human-readable
    message in ``error`` and produce an empty catalog.

    Args:
        path: The catalog file, or None for an empty catalog
    """

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path is not None else None
        self.error: str | None = None
        self.endianness: Endianness | None = None

    @property
    def name(self) -> str:
        if self.path is None:
            return "<none>"
        if self.path.parent.name:
            return f"{self.path.parent.name}/{self.path.name}"
        return self.path.name

    def decode(self) -> Catalog:
        """Decode the file, returning an empty catalog on any failure."""
        self.error = None
        if self.path is None:
            return {}
        try:
            entries = self._decode()
        except CatalogError as e:
            self.error = str(e)
            logger.warning("%s", self.error)
            return {}
        logger.debug("Decoded %d entries from %s", len(entries), self.path)
        return entries

    def decode_or_raise(self) -> Catalog:
        """Decode the file, raising CatalogError on failure."""
        self.error = None
        if self.path is None:
            return {}
        try:
            return self._decode()
        except CatalogError as e:
            self.error = str(e)
            raise

    def _decode(self) -> Catalog:
        if not self.path.exists():
            raise CatalogNotFoundError(f'File "{self.name}" does not exist')
        reader = ByteReader.from_file(self.path)
        if reader.error:
            raise CatalogUnreadableError(
                f'File "{self.name}" could not be read, probably wrong permissions'
            )
        self.endianness = detect_endianness(reader, self.name)
        return decode_reader(reader, self.name, self.endianness)


def decode_catalog(path: Path | str) -> tuple[Catalog, str | None]:
    """Decode a catalog file.

    Returns:
        The decoded entries (empty on failure) and the error message, if any
    """
    decoder = CatalogDecoder(path)
    entries = decoder.decode()
    return entries, decoder.error
