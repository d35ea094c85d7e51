"""
Export module for translate-keys.

Provides the CSV and YAML writers and the dictionary merge helpers.
"""

from translate_keys.export.dictionary import (
    load_dictionary,
    merge_dictionaries,
    save_dictionary,
    sort_dictionary,
)
from translate_keys.export.writers import ExportRecord, write_csv, write_records, write_yaml

__all__ = [
    "ExportRecord",
    "write_csv",
    "write_yaml",
    "write_records",
    "load_dictionary",
    "merge_dictionaries",
    "save_dictionary",
    "sort_dictionary",
]
