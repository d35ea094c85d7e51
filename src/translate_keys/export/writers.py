"""
Export file writers.

CSV files are written for human review; YAML files are merged into the
existing dictionary of the same name.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from translate_keys.config import ExportFormat
from translate_keys.export.dictionary import load_dictionary, merge_dictionaries, save_dictionary

CSV_KEY_COLUMN = "key"
CSV_SOURCE_COLUMN = "english_value"


@dataclass(frozen=True)
class ExportRecord:
    """One exported translation key."""

    key: str
    english_value: str
    translated_value: str


def write_csv(locale: str, path: Path | str, records: Iterable[ExportRecord]) -> int:
    """
    Write records as CSV with the header ``key,english_value,<locale>``.

    The file is overwritten; backing it up is the caller's business.

    Returns:
        Number of records written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow([CSV_KEY_COLUMN, CSV_SOURCE_COLUMN, locale])
        for record in records:
            writer.writerow([record.key, record.english_value, record.translated_value])
            count += 1
    return count


def write_yaml(locale: str, path: Path | str, records: Iterable[ExportRecord]) -> int:
    """
    Merge records into the YAML dictionary at ``path``.

    Existing keys are kept unless a record overrides them; the merged
    dictionary is written back sorted by key.

    Returns:
        Number of records written.
    """
    patch = {record.key: record.translated_value for record in records}
    save_dictionary(path, merge_dictionaries(load_dictionary(path), patch))
    return len(patch)


def write_records(
    fmt: ExportFormat, locale: str, path: Path | str, records: Iterable[ExportRecord]
) -> int:
    """Write records in the given format."""
    if fmt.is_yaml:
        return write_yaml(locale, path, records)
    return write_csv(locale, path, records)
