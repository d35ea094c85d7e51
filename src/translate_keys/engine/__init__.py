"""
Machine-translation engines.

- DeepL: the DeepL API, with placeholder protection through ignore-tags
- DisabledEngine: explicit "no translation" variant
"""

from translate_keys.engine.base import DisabledEngine, TranslationEngine, Usage
from translate_keys.engine.factory import (
    create_engine,
    create_engine_or_disabled,
    resolve_api_key,
)
from translate_keys.engine.placeholders import (
    language_code,
    protect_placeholders,
    restore_placeholders,
)

__all__ = [
    "DisabledEngine",
    "TranslationEngine",
    "Usage",
    "create_engine",
    "create_engine_or_disabled",
    "resolve_api_key",
    "language_code",
    "protect_placeholders",
    "restore_placeholders",
]
