"""Application-owned registry of translations per locale and domain."""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mokit.constants import DEFAULT_DOMAIN, DEFAULT_LOCALE
from mokit.exceptions import CatalogError
from mokit.logging_config import get_logger
from mokit.translation import Key, Translation

if TYPE_CHECKING:
    from mokit.config import Config

logger = get_logger(__name__)

_LOCALE = re.compile(r"^([a-z]{2,3})(?:[-_]([a-z]{2}))?", re.IGNORECASE)


def normalize_domain(domain: str | None) -> str:
    """Lowercase a domain name; empty or None selects the default domain."""
    if not domain:
        return DEFAULT_DOMAIN
    return domain.lower()


class Translator:
    """Holds one Translation per ``(locale, domain)``.

    The translator is created and owned by the application; nothing here is
    process-global. Catalog paths are registered already resolved, and each
    Translation is loaded on its first request.

    Example:
        translator = Translator(locale="de_DE", domain="messages")
        translator.register("messages", "de_DE", "locale/de_DE/messages.mo")
        translator.gettext("Hello")
    """

    def __init__(
        self,
        locale: str = DEFAULT_LOCALE,
        domain: str = DEFAULT_DOMAIN,
        strict: bool = False,
    ):
        self._locale = DEFAULT_LOCALE
        self._domain = normalize_domain(domain)
        self.strict = strict
        self._paths: dict[tuple[str, str], Path] = {}
        self._translations: dict[tuple[str, str], Translation] = {}
        self.set_locale(locale)

    @classmethod
    def from_config(cls, config: "Config") -> "Translator":
        """Build a translator from a catalog manifest."""
        from mokit.config import ErrorHandling

        translator = cls(
            locale=config.locale,
            domain=config.domain,
            strict=config.on_error == ErrorHandling.STOP,
        )
        for entry in config.catalogs:
            translator.register(entry.domain, entry.locale, entry.path)
        return translator

    @property
    def locale(self) -> str:
        return self._locale

    @property
    def domain(self) -> str:
        return self._domain

    def set_locale(self, locale: str | None) -> str:
        """Switch locale if ``locale`` looks like one; returns the current locale."""
        if isinstance(locale, str) and _LOCALE.match(locale):
            self._locale = locale
        else:
            logger.debug("Ignoring invalid locale %r", locale)
        return self._locale

    def set_textdomain(self, domain: str | None) -> str:
        self._domain = normalize_domain(domain)
        return self._domain

    def register(self, domain: str | None, locale: str, path: Path | str) -> None:
        """Record the catalog file for a domain and locale.

        Catalogs load on first use. In strict mode the file is decoded here
        instead, so a broken catalog fails registration and never a lookup.

        Raises:
            CatalogError: Only in strict mode, when the catalog fails to load
        """
        key = (locale, normalize_domain(domain))
        path = Path(path)
        self._translations.pop(key, None)
        if self.strict:
            translation = Translation.from_file(path)
            if translation.error:
                raise CatalogError(translation.error, context={"locale": key[0], "domain": key[1]})
            self._translations[key] = translation
        self._paths[key] = path

    def add_translation(self, domain: str | None, locale: str, translation: Translation) -> None:
        """Install a prebuilt Translation."""
        self._translations[(locale, normalize_domain(domain))] = translation

    def translation(self, domain: str | None = None) -> Translation:
        """Return the Translation for ``domain`` in the current locale.

        A catalog that fails to load is kept as an empty Translation with
        ``error`` set, so lookups through it fall back to the source text.
        """
        key = (self._locale, normalize_domain(domain) if domain else self._domain)
        if key not in self._translations:
            path = self._paths.get(key)
            if path is None:
                logger.debug("No catalog registered for locale=%s domain=%s", *key)
                self._translations[key] = Translation()
            else:
                self._translations[key] = Translation.from_file(path)
        return self._translations[key]

    def gettext(self, key: Key, *args: Any) -> str:
        return self.translation().gettext(key, *args)

    def ngettext(self, singular: Key, plural: Key, count: Any, *args: Any) -> str:
        return self.translation().ngettext(singular, plural, count, *args)

    def pgettext(self, context: Key, key: Key, *args: Any) -> str:
        return self.translation().pgettext(context, key, *args)

    def npgettext(self, context: Key, singular: Key, plural: Key, count: Any, *args: Any) -> str:
        return self.translation().npgettext(context, singular, plural, count, *args)

    def dgettext(self, domain: str, key: Key, *args: Any) -> str:
        return self.translation(domain).gettext(key, *args)

    def dngettext(self, domain: str, singular: Key, plural: Key, count: Any, *args: Any) -> str:
        return self.translation(domain).ngettext(singular, plural, count, *args)

    def dpgettext(self, domain: str, context: Key, key: Key, *args: Any) -> str:
        return self.translation(domain).pgettext(context, key, *args)

    def dnpgettext(
        self, domain: str, context: Key, singular: Key, plural: Key, count: Any, *args: Any
    ) -> str:
        return self.translation(domain).npgettext(context, singular, plural, count, *args)
