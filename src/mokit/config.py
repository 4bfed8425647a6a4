"""Catalog manifest loading for mokit.

A manifest lists already-resolved catalog files per domain and locale:

    version: 1
    locale: de_DE
    domain: messages
    on_error: continue
    catalogs:
      messages:
        de_DE: locale/de_DE/messages.mo

Relative paths are taken relative to the manifest's directory.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from mokit.constants import DEFAULT_DOMAIN, DEFAULT_LOCALE
from mokit.exceptions import ConfigError


class ErrorHandling(str, Enum):
    """What to do when a listed catalog fails to decode."""

    CONTINUE = "continue"  # Use an empty catalog, log a warning
    STOP = "stop"  # Raise CatalogError while registering


def _parse_enum(enum_class: type[Enum], value: Any, field: str | None = None) -> Enum:
    """Parse a string value into an enum with validation.

    Raises:
        ConfigError: If the value is not a valid enum member.
    """
    try:
        return enum_class(value)
    except ValueError:
        valid = ", ".join(e.value for e in enum_class)
        raise ConfigError(
            f"Invalid value '{value}'",
            field=field,
            suggestion=f"Valid values are: {valid}",
        )


@dataclass
class CatalogEntry:
    """One catalog file for a domain and locale."""
    domain: str
    locale: str
    path: Path


@dataclass
class Config:
    """Root manifest object."""
    version: int = 1
    locale: str = DEFAULT_LOCALE
    domain: str = DEFAULT_DOMAIN
    on_error: ErrorHandling = ErrorHandling.CONTINUE
    catalogs: list[CatalogEntry] = field(default_factory=list)


def parse_catalogs(data: Any, base_dir: Path) -> list[CatalogEntry]:
    """Parse the ``catalogs`` section: domain -> locale -> path."""
    if not isinstance(data, dict):
        raise ConfigError(
            "'catalogs' must map domains to locales",
            field="catalogs",
            suggestion="Use 'catalogs: {domain: {locale: path}}'",
        )

    entries = []
    for domain, locales in data.items():
        if not isinstance(locales, dict):
            raise ConfigError(
                f"Domain '{domain}' must map locales to catalog paths",
                field=f"catalogs.{domain}",
            )
        for locale, path in locales.items():
            if not isinstance(path, str) or not path:
                raise ConfigError(
                    "Catalog path must be a non-empty string",
                    field=f"catalogs.{domain}.{locale}",
                )
            catalog_path = Path(path)
            if not catalog_path.is_absolute():
                catalog_path = base_dir / catalog_path
            entries.append(CatalogEntry(
                domain=str(domain).lower(),
                locale=str(locale),
                path=catalog_path,
            ))
    return entries


def load_config(config_path: Path) -> Config:
    """Load and validate a catalog manifest."""
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}")

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a YAML dictionary")

    if "catalogs" not in data:
        raise ConfigError("Configuration must contain 'catalogs' section", field="catalogs")

    on_error = _parse_enum(ErrorHandling, data.get("on_error", "continue"), field="on_error")

    return Config(
        version=data.get("version", 1),
        locale=str(data.get("locale", DEFAULT_LOCALE)),
        domain=str(data.get("domain", DEFAULT_DOMAIN)).lower(),
        on_error=on_error,
        catalogs=parse_catalogs(data["catalogs"], config_path.parent),
    )
