"""
translate-keys: DeepL-assisted export and import of application translations.

This package provides tools for:
- Finding translation keys that lack a value in a target locale
- Machine-translating them with DeepL while keeping {{placeholders}} intact
- Exporting them to CSV for review or merging them into YAML dictionaries
- Importing reviewed CSV files back into the YAML dictionaries
"""

__version__ = "0.1.0"

from translate_keys.config import ExportFormat, Settings, load_config
from translate_keys.database import Database, Domain, TranslationRow
from translate_keys.engine import DisabledEngine, TranslationEngine, Usage
from translate_keys.errors import (
    EngineError,
    EngineInitError,
    TranslateKeysError,
    ValidationError,
)
from translate_keys.export import ExportRecord, merge_dictionaries
from translate_keys.jobs import ExportJob, ImportJob
from translate_keys.repository import TranslationRepository

__all__ = [
    # Config
    "Settings",
    "load_config",
    "ExportFormat",
    # Database
    "Database",
    "Domain",
    "TranslationRow",
    "TranslationRepository",
    # Engine
    "TranslationEngine",
    "DisabledEngine",
    "Usage",
    # Export
    "ExportRecord",
    "merge_dictionaries",
    # Jobs
    "ExportJob",
    "ImportJob",
    # Errors
    "TranslateKeysError",
    "ValidationError",
    "EngineInitError",
    "EngineError",
]
