"""
Import of reviewed CSV translations into YAML dictionaries.
"""

from __future__ import annotations

import csv
import logging
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from translate_keys.database import Domain
from translate_keys.errors import ValidationError
from translate_keys.export.dictionary import (
    backup_file,
    load_dictionary,
    merge_dictionaries,
    save_dictionary,
    timestamp,
)
from translate_keys.export.writers import CSV_KEY_COLUMN
from translate_keys.repository import TranslationRepository

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]


@dataclass
class ImportResult:
    """Outcome of an import run."""

    source: Path
    target: Path
    domain: str
    locale: str
    confirmed: bool = False
    imported: int = 0
    total_keys: int = 0
    backup_path: Path | None = None


def infer_domain(source: Path | str) -> str | None:
    """
    Guess the domain from a ``<domain>.<locale>.csv`` file name.

    Returns:
        The domain when the name has exactly three dot-separated parts and
        the first one is a supported domain, otherwise None.
    """
    parts = Path(source).name.split(".")
    if len(parts) == 3 and parts[0] in Domain.values():
        return parts[0]
    return None


def read_csv_translations(source: Path | str, locale: str) -> dict[str, str]:
    """
    Read ``key -> translation`` pairs for ``locale`` from a CSV file.

    The first row is the header. Rows with an empty locale column are
    skipped; a key seen twice keeps its last value.

    Raises:
        ValidationError: If the file is not UTF-8 CSV or the header lacks
            the key or locale column.
    """
    try:
        return _read_csv(source, locale)
    except (UnicodeDecodeError, csv.Error) as e:
        raise ValidationError(f"File {source} is not a UTF-8 CSV file: {e}") from e


def _read_csv(source: Path | str, locale: str) -> dict[str, str]:
    translations: dict[str, str] = {}
    # utf-8-sig strips the BOM spreadsheet tools like to add
    with open(source, newline="", encoding="utf-8-sig") as f:
        reader = csv.reader(f)
        headers = next(reader, None)
        if not headers:
            raise ValidationError(f"File {source} is empty")

        missing = [c for c in (CSV_KEY_COLUMN, locale) if c not in headers]
        if missing:
            raise ValidationError(f"File {source} has no column {', '.join(missing)}")

        for row in reader:
            line = dict(zip(headers, row))
            value = line.get(locale)
            key = line.get(CSV_KEY_COLUMN)
            if not value or not key:
                continue
            translations[key] = value

    return translations


class ImportJob:
    """
    Merges a CSV of translations into ``<domain>.<locale>.yml``.

    The existing dictionary is backed up before anything changes and values
    from the CSV win over existing ones.
    """

    def __init__(
        self,
        repository: TranslationRepository,
        translations_dir: Path | str,
        *,
        confirm: ConfirmCallback | None = None,
        timestamp_format: str = "%d%m%Y-%H%M%S",
    ):
        """
        Initialize import job.

        Args:
            repository: Provides the available locales.
            translations_dir: Directory holding the YAML dictionaries.
            confirm: Asked before merging; receives the question and must
                return True to proceed. Without it the merge is refused.
            timestamp_format: strftime format of the backup file suffix.
        """
        self.repository = repository
        self.translations_dir = Path(translations_dir)
        self._confirm = confirm
        self.timestamp_format = timestamp_format

    def target_path(self, domain: str, locale: str) -> Path:
        return self.translations_dir / f"{domain}.{locale}.yml"

    def validate(self, source: Path, locale: str, domain: str | None) -> str:
        """
        Check the source file, domain and locale.

        Returns:
            The domain to import into.

        Raises:
            ValidationError: On the first invalid input.
        """
        if not source.exists():
            raise ValidationError(f"Filename {source} does not exist.")
        if source.suffix != ".csv":
            raise ValidationError(f"Filename {source} MUST be a CSV file.")

        if domain:
            if domain not in Domain.values():
                raise ValidationError(
                    f"Domain {domain} not supported. "
                    f"Supported domains are: {', '.join(Domain.values())}"
                )
        else:
            domain = infer_domain(source)
            if domain is None:
                raise ValidationError(
                    f"Could not detect the domain from {source.name}. "
                    "Name the file <domain>.<locale>.csv or pass --domain."
                )

        available = self.repository.available_locales()
        if locale not in available:
            raise ValidationError(f"Locale {locale} not supported")

        return domain

    def run(self, source: Path | str, locale: str, *, domain: str | None = None) -> ImportResult:
        """
        Import ``source`` into the dictionary of ``locale``.

        Raises:
            ValidationError: If the inputs are invalid or the CSV lacks the
                required columns.
        """
        source = Path(source)
        domain = self.validate(source, locale, domain)
        target = self.target_path(domain, locale)
        result = ImportResult(source=source, target=target, domain=domain, locale=locale)
        patch = read_csv_translations(source, locale)

        base = {}
        if target.exists():
            backup_name = f"{domain}.{locale}-{timestamp(self.timestamp_format)}.yml.backup"
            result.backup_path = backup_file(target, self.translations_dir / backup_name)
            base = load_dictionary(target)

        question = (
            f"Your translation file located into {source} will be merged with your "
            f"existing translation located at {target}. Confirm?"
        )
        if not (self._confirm and self._confirm(question)):
            logger.info("Import of %s aborted by the operator", source)
            return result
        result.confirmed = True

        merged = merge_dictionaries(base, patch)
        save_dictionary(target, merged)

        result.imported = len(patch)
        result.total_keys = len(merged)
        self.repository.log(
            "INFO",
            "import",
            f"Merged {len(patch)} translations from {source} into {target}",
            domain=domain,
            context={"locale": locale, "total_keys": len(merged)},
        )
        return result


def rebuild_cache(command: list[str]) -> subprocess.CompletedProcess:
    """
    Run the configured command that reloads translations in the application.

    Raises:
        subprocess.CalledProcessError: If the command exits non-zero.
    """
    logger.info("Running cache rebuild: %s", " ".join(command))
    return subprocess.run(command, check=True, capture_output=True, text=True)
