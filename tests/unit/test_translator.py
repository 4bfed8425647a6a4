"""Tests for mokit.translator module."""

import pytest

from mokit.config import load_config
from mokit.exceptions import CatalogError
from mokit.translation import Translation
from mokit.translator import Translator, normalize_domain


class TestNormalizeDomain:
    """Test domain name handling."""

    def test_lowercases(self):
        assert normalize_domain("Messages") == "messages"

    @pytest.mark.parametrize("domain", ["", None])
    def test_empty_selects_default(self, domain):
        assert normalize_domain(domain) == "default"


class TestLocaleAndDomain:
    """Test locale and text domain switching."""

    def test_defaults(self):
        translator = Translator()
        assert translator.locale == "en"
        assert translator.domain == "default"

    @pytest.mark.parametrize("locale", ["de", "de_DE", "de-DE", "fil", "pt_BR.UTF-8"])
    def test_valid_locale(self, locale):
        translator = Translator()
        assert translator.set_locale(locale) == locale

    @pytest.mark.parametrize("locale", ["", "1234", "d", None])
    def test_invalid_locale_is_ignored(self, locale):
        translator = Translator(locale="de_DE")
        assert translator.set_locale(locale) == "de_DE"

    def test_set_textdomain(self):
        translator = Translator()
        assert translator.set_textdomain("Admin") == "admin"
        assert translator.set_textdomain("") == "default"


class TestTranslations:
    """Test per-locale, per-domain translation instances."""

    def test_unregistered_is_empty(self):
        translator = Translator()
        assert translator.gettext("Column") == "Column"

    def test_registered_catalog(self, czech_mo):
        translator = Translator(locale="cs_CZ", domain="messages")
        translator.register("messages", "cs_CZ", czech_mo)
        assert translator.gettext("Column") == "Pole"
        assert translator.ngettext("%d second", "%d seconds", 2) == "%d sekundy"
        assert translator.pgettext("Display format", "Table") == "Tabulka"
        assert translator.npgettext("Display format", "%d table", "%d tables", 5) == "%d tabulek"

    def test_instance_reused(self, czech_mo):
        translator = Translator(locale="cs_CZ")
        translator.register(None, "cs_CZ", czech_mo)
        assert translator.translation() is translator.translation()

    def test_locale_selects_catalog(self, czech_mo):
        translator = Translator(locale="cs_CZ")
        translator.register("default", "cs_CZ", czech_mo)
        assert translator.gettext("Column") == "Pole"
        translator.set_locale("de_DE")
        assert translator.gettext("Column") == "Column"

    def test_explicit_domain_lookups(self, czech_mo):
        translator = Translator(locale="cs_CZ")
        translator.register("Admin", "cs_CZ", czech_mo)
        assert translator.gettext("Column") == "Column"
        assert translator.dgettext("admin", "Column") == "Pole"
        assert translator.dngettext("admin", "%d second", "%d seconds", 1) == "%d sekunda"
        assert translator.dpgettext("admin", "Display format", "Table") == "Tabulka"
        assert translator.dnpgettext("admin", "Display format", "%d table", "%d tables", 2, 2) == "2 tabulky"

    def test_add_translation(self):
        translation = Translation()
        translation.set_translation("Hello", "Hallo")
        translator = Translator(locale="de")
        translator.add_translation("default", "de", translation)
        assert translator.gettext("Hello") == "Hallo"

    def test_register_replaces_loaded(self, czech_mo, build_mo):
        translator = Translator(locale="cs")
        translator.register("default", "cs", czech_mo)
        assert translator.gettext("Column") == "Pole"
        translator.register("default", "cs", build_mo({"Column": "Sloupec"}, name="other.mo"))
        assert translator.gettext("Column") == "Sloupec"

    def test_broken_catalog_degrades(self, bad_magic_mo):
        translator = Translator(locale="cs")
        translator.register("default", "cs", bad_magic_mo)
        assert translator.gettext("Column") == "Column"
        assert "not a translation file" in translator.translation().error
        assert translator.translation() is translator.translation()

    def test_strict_raises_on_register(self, bad_magic_mo):
        translator = Translator(locale="cs", domain="messages", strict=True)
        with pytest.raises(CatalogError, match="not a translation file"):
            translator.register("messages", "cs", bad_magic_mo)
        assert translator.gettext("Hello") == "Hello"
        assert translator.ngettext("%d file", "%d files", 2) == "%d files"

    def test_strict_loads_on_register(self, czech_mo):
        translator = Translator(locale="cs", strict=True)
        translator.register("default", "cs", czech_mo)
        assert translator.translation().gettext("Column") == "Pole"


class TestFromConfig:
    """Test building a translator from a manifest."""

    def test_from_manifest(self, manifest_file):
        translator = Translator.from_config(load_config(manifest_file))
        assert translator.locale == "cs_CZ"
        assert translator.domain == "messages"
        assert translator.gettext("Column") == "Pole"

    def test_stop_on_error(self, temp_dir, bad_magic_mo):
        manifest = temp_dir / "strict.yaml"
        manifest.write_text(
            "locale: cs\n"
            "on_error: stop\n"
            "catalogs:\n"
            "  default:\n"
            "    cs: magic.mo\n"
        )
        with pytest.raises(CatalogError, match="not a translation file"):
            Translator.from_config(load_config(manifest))
