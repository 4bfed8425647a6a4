"""Byte-keyed translation store."""

from __future__ import annotations

from collections.abc import Mapping


class TranslationCache:
    """Mapping of original to translated strings, both raw bytes.

    A missing key is not an error: ``get`` returns the key itself, which is
    the usual gettext fallback to the source text.

    Example:
        cache = TranslationCache()
        cache.set(b"Hello", b"Hallo")
        cache.get(b"Hello")    # b"Hallo"
        cache.get(b"Goodbye")  # b"Goodbye"
    """

    def __init__(self, entries: Mapping[bytes, bytes] | None = None):
        self._entries: dict[bytes, bytes] = dict(entries or {})

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def exists(self, key: bytes) -> bool:
        return key in self._entries

    def get(self, key: bytes) -> bytes:
        """Return the translation for ``key``, or ``key`` when there is none."""
        return self._entries.get(key, key)

    def get_all(self) -> dict[bytes, bytes]:
        return dict(self._entries)

    def set(self, key: bytes, value: bytes) -> None:
        self._entries[key] = value

    def set_all(self, entries: Mapping[bytes, bytes]) -> None:
        """Replace every entry with ``entries``."""
        self._entries = dict(entries)
