"""Catalog validation for mokit.

Lookups never fail at runtime, which also means a broken catalog degrades
silently. The validator surfaces those problems ahead of time.
"""

from dataclasses import dataclass, field
from pathlib import Path

from mokit.constants import CONTEXT_SEPARATOR, PLURAL_SEPARATOR
from mokit.exceptions import PluralExpressionError
from mokit.plurals import evaluate_tokens, extract_plural_forms, parse_expression, sanitize_expression
from mokit.translation import HEADER_KEY, Translation

# Counts probed when checking which slots a plural rule can reach
SAMPLE_COUNTS = range(0, 201)


@dataclass
class ValidationResult:
    """Result of catalog validation.

    Attributes:
        valid: True if no errors were found
        errors: List of error messages (fatal issues)
        warnings: List of warning messages (non-fatal issues)
    """

    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error and mark result as invalid."""
        self.errors.append(message)
        self.valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning (does not affect validity)."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> None:
        """Merge another validation result into this one."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        if not other.valid:
            self.valid = False


class CatalogValidator:
    """Checks a loaded catalog's header and plural entries.

    Example:
        result = CatalogValidator().validate(Translation.from_file(path))
        for error in result.errors:
            print(f"Error: {error}")
    """

    def validate(self, translation: Translation) -> ValidationResult:
        result = ValidationResult()

        if translation.error:
            result.add_error(translation.error)
            return result

        result.merge(self._validate_header(translation))
        result.merge(self._validate_plural_rule(translation))
        result.merge(self._validate_plural_entries(translation))
        return result

    def _validate_header(self, translation: Translation) -> ValidationResult:
        result = ValidationResult()
        if not translation.exists(HEADER_KEY):
            result.add_warning("Catalog has no header entry")
        elif "Plural-Forms" not in translation.headers:
            result.add_warning("Header has no Plural-Forms line, using 'n == 1 ? 0 : 1'")
        return result

    def _validate_plural_rule(self, translation: Translation) -> ValidationResult:
        result = ValidationResult()
        header = translation.get_translations().get(HEADER_KEY, b"").decode(
            translation.charset, errors="replace"
        )
        forms = extract_plural_forms(header)
        expr = sanitize_expression(forms)
        try:
            tokens = parse_expression(expr)
        except PluralExpressionError as e:
            result.add_error(f"Plural expression '{expr}' does not parse: {e}")
            return result

        nplurals = translation.count_plural_forms()
        reached = set()
        for n in SAMPLE_COUNTS:
            try:
                slot = evaluate_tokens(tokens, n)
            except PluralExpressionError as e:
                result.add_error(f"Plural expression '{expr}' fails for n={n}: {e}")
                return result
            if slot >= nplurals or slot < 0:
                result.add_warning(
                    f"Plural expression yields slot {slot} for n={n}, "
                    f"but nplurals={nplurals}"
                )
                return result
            reached.add(slot)

        unreached = sorted(set(range(nplurals)) - reached)
        if unreached:
            result.add_warning(
                f"Plural slots {unreached} are never selected for n in "
                f"{SAMPLE_COUNTS.start}..{SAMPLE_COUNTS.stop - 1}"
            )
        return result

    def _validate_plural_entries(self, translation: Translation) -> ValidationResult:
        result = ValidationResult()
        nplurals = translation.count_plural_forms()
        for key, value in translation.get_translations().items():
            if PLURAL_SEPARATOR not in key:
                continue
            slots = value.split(PLURAL_SEPARATOR)
            if len(slots) != nplurals:
                original = key.split(PLURAL_SEPARATOR)[0].split(CONTEXT_SEPARATOR)[-1]
                result.add_warning(
                    f"Entry '{original.decode(translation.charset, errors='replace')}' "
                    f"has {len(slots)} plural forms, expected {nplurals}"
                )
        return result


def validate_catalog(path: Path) -> ValidationResult:
    """Decode a catalog file and validate it."""
    return CatalogValidator().validate(Translation.from_file(path))
