"""Translation lookups over one decoded catalog.

A Translation never raises from a lookup. Unknown keys come back as the
source text, broken plural rules select the first slot, and a catalog that
failed to load behaves as an empty one.

Format arguments follow the key:

    t.gettext("Hello")                              # plain lookup
    t.gettext("Hello %s", name)                     # positional, %-style
    t.gettext("Hello %(name)s", {"name": name})     # named, single mapping
    t.ngettext("%d file", "%d files", count, count)
"""

from __future__ import annotations

import codecs
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from mokit.cache import TranslationCache
from mokit.catalog import CatalogDecoder, decode_bytes
from mokit.constants import CONTEXT_SEPARATOR, DEFAULT_CHARSET, PLURAL_SEPARATOR
from mokit.exceptions import CatalogError
from mokit.logging_config import get_logger
from mokit.plurals import PluralRule

logger = get_logger(__name__)

Key = str | bytes

HEADER_KEY = b""

_CHARSET = re.compile(r"charset\s*=\s*([-\w.:]+)", re.IGNORECASE)


def format_text(text: str, args: tuple[Any, ...]) -> str:
    """Substitute ``args`` into ``text`` with %-formatting.

    A single mapping argument selects named placeholders. Without
    arguments the text is returned untouched, so a literal ``%d`` survives.
    """
    if not args:
        return text
    values = args[0] if len(args) == 1 and isinstance(args[0], Mapping) else args
    try:
        return text % values
    except (TypeError, ValueError, KeyError) as e:
        logger.warning("Could not format %r: %s", text, e)
        return text


def parse_headers(header: str) -> dict[str, str]:
    """Parse ``Key: value`` lines of a catalog header entry."""
    headers = {}
    for line in header.split("\n"):
        name, separator, value = line.partition(":")
        if separator and name.strip():
            headers[name.strip()] = value.strip()
    return headers


class Translation:
    """Lookup facade over one catalog.

    Args:
        entries: A TranslationCache, a mapping of raw bytes, or None for an
            empty catalog
    """

    def __init__(self, entries: TranslationCache | Mapping[bytes, bytes] | None = None):
        if isinstance(entries, TranslationCache):
            self._entries = entries
        else:
            self._entries = TranslationCache(entries)
        self.error: str | None = None
        self._headers: dict[str, str] | None = None
        self._charset: str | None = None
        self._plural_rule: PluralRule | None = None

    @classmethod
    def from_file(cls, path: Path | str | None) -> "Translation":
        """Load a catalog file. Failures leave an empty catalog and set ``error``."""
        decoder = CatalogDecoder(path)
        translation = cls(TranslationCache(decoder.decode()))
        translation.error = decoder.error
        return translation

    @classmethod
    def from_bytes(cls, data: bytes) -> "Translation":
        """Load a catalog held in memory."""
        try:
            translation = cls(TranslationCache(decode_bytes(data)))
        except CatalogError as e:
            logger.warning("%s", e)
            translation = cls()
            translation.error = str(e)
        return translation

    # ------------------------------------------------------------------
    # Header metadata
    # ------------------------------------------------------------------

    @property
    def headers(self) -> dict[str, str]:
        if self._headers is None:
            # latin-1 maps every byte, header fields are ASCII in practice
            header = self._entries.get(HEADER_KEY).decode("latin-1")
            self._headers = parse_headers(header)
        return self._headers

    @property
    def charset(self) -> str:
        """Charset declared in the header's Content-Type, or UTF-8."""
        if self._charset is None:
            charset = DEFAULT_CHARSET
            match = _CHARSET.search(self.headers.get("Content-Type", ""))
            if match:
                try:
                    charset = codecs.lookup(match.group(1)).name
                except LookupError:
                    logger.warning("Unknown charset %r, using %s", match.group(1), DEFAULT_CHARSET)
            self._charset = charset
        return self._charset

    @property
    def plural_rule(self) -> PluralRule:
        if self._plural_rule is None:
            header = self._entries.get(HEADER_KEY).decode(self.charset, errors="replace")
            self._plural_rule = PluralRule.from_header(header)
        return self._plural_rule

    def count_plural_forms(self) -> int:
        return self.plural_rule.nplurals

    def detect_plural_form(self, count: Any) -> int:
        """Return the plural slot index for ``count``."""
        try:
            n = int(count)
        except (TypeError, ValueError, OverflowError):
            return 0
        return self.plural_rule.resolve(n)

    def _reset_derived(self) -> None:
        self._headers = None
        self._charset = None
        self._plural_rule = None

    # ------------------------------------------------------------------
    # Programmatic population
    # ------------------------------------------------------------------

    def set_translation(self, key: Key, value: Key) -> None:
        raw = self._encode(key)
        self._entries.set(raw, self._encode(value))
        if raw == HEADER_KEY:
            self._reset_derived()

    def set_translations(self, entries: Mapping[Key, Key]) -> None:
        """Replace the whole catalog.

        The new header is installed first so that text keys are encoded with
        the charset it declares.
        """
        self._entries.set_all({})
        self._reset_derived()
        for key, value in entries.items():
            if self._encode(key) == HEADER_KEY:
                self._entries.set(HEADER_KEY, self._encode(value))
        self._reset_derived()
        self._entries.set_all({self._encode(k): self._encode(v) for k, v in entries.items()})
        self._reset_derived()

    def get_translations(self) -> dict[bytes, bytes]:
        return self._entries.get_all()

    def exists(self, key: Key) -> bool:
        return self._entries.exists(self._encode(key))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def gettext(self, key: Key, *args: Any) -> str:
        """Translate ``key``; an unknown key is returned as is."""
        value = self._lookup(self._encode(key))
        text = self._decode(value) if value is not None else self._text(key)
        return format_text(text, args)

    def ngettext(self, singular: Key, plural: Key, count: Any, *args: Any) -> str:
        """Translate a message with plural forms, selecting the slot for ``count``."""
        value = self._plural_lookup(self._encode(singular), self._encode(plural), count)
        if value is None:
            return self._untranslated(singular, plural, count, args)
        return format_text(self._decode(value), args)

    def pgettext(self, context: Key, key: Key, *args: Any) -> str:
        """Translate ``key`` within ``context``."""
        value = self._lookup(self._contextual(context, key))
        if value is None or CONTEXT_SEPARATOR in value:
            return format_text(self._text(key), args)
        return format_text(self._decode(value), args)

    def npgettext(self, context: Key, singular: Key, plural: Key, count: Any, *args: Any) -> str:
        """Plural lookup within ``context``."""
        value = self._plural_lookup(self._contextual(context, singular), self._encode(plural), count)
        if value is None or CONTEXT_SEPARATOR in value:
            return self._untranslated(singular, plural, count, args)
        return format_text(self._decode(value), args)

    def noop_gettext(self, key: Key, *args: Any) -> str:
        """Marks ``key`` for extraction tools; still translated like gettext."""
        return self.gettext(key, *args)

    def noop_ngettext(self, singular: Key, plural: Key, count: Any, *args: Any) -> str:
        """Marks a plural message for extraction tools; never looked up."""
        return self._untranslated(singular, plural, count, args)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lookup(self, raw: bytes) -> bytes | None:
        if self._entries.exists(raw):
            return self._entries.get(raw)
        return None

    def _plural_lookup(self, singular: bytes, plural: bytes, count: Any) -> bytes | None:
        raw = singular + PLURAL_SEPARATOR + plural
        if not self._entries.exists(raw):
            return None
        candidates = self._entries.get(raw).split(PLURAL_SEPARATOR)
        slot = self.detect_plural_form(count)
        if slot >= len(candidates):
            return candidates[0]
        return candidates[slot]

    def _untranslated(self, singular: Key, plural: Key, count: Any, args: tuple[Any, ...]) -> str:
        text = self._text(singular) if count == 1 else self._text(plural)
        return format_text(text, args)

    def _contextual(self, context: Key, key: Key) -> bytes:
        return self._encode(context) + CONTEXT_SEPARATOR + self._encode(key)

    def _encode(self, key: Key) -> bytes:
        if isinstance(key, bytes):
            return key
        return str(key).encode(self.charset, errors="backslashreplace")

    def _decode(self, value: bytes) -> str:
        return value.decode(self.charset, errors="replace")

    def _text(self, key: Key) -> str:
        if isinstance(key, bytes):
            return self._decode(key)
        return str(key)
