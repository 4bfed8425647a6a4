"""Centralized constants for mokit.

Binary layout of compiled catalogs and the separators gettext uses inside
keys and values.
"""

# Magic bytes at offset 0, one per byte order of the 32-bit fields
MAGIC_LE = b"\xde\x12\x04\x95"
MAGIC_BE = b"\x95\x04\x12\xde"

# Fixed header field offsets
OFFSET_COUNT = 8
OFFSET_ORIGINALS = 12
OFFSET_TRANSLATIONS = 16

# Separates a context from its original string
CONTEXT_SEPARATOR = b"\x04"

# Joins singular/plural originals and the per-slot translations
PLURAL_SEPARATOR = b"\x00"

DEFAULT_PLURAL_FORMS = "nplurals=2; plural=n == 1 ? 0 : 1;"
PLURAL_FORMS_PREFIX = "plural-forms:"

DEFAULT_CHARSET = "utf-8"

DEFAULT_DOMAIN = "default"
DEFAULT_LOCALE = "en"
