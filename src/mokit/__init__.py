"""mokit - Runtime loader for compiled gettext catalogs."""

import logging

from mokit.catalog import CatalogDecoder, decode_catalog
from mokit.translation import Translation
from mokit.translator import Translator

__version__ = "0.1.0"
__all__ = [
    "__version__",
    "CatalogDecoder",
    "Translation",
    "Translator",
    "decode_catalog",
]

# Prevent "No handler found" warnings when used as a library
logging.getLogger("mokit").addHandler(logging.NullHandler())
