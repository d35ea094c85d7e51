"""
DeepL translation engine.

Uses the official ``deepl`` client with XML tag handling so that template
placeholders pass through untranslated.
"""

from __future__ import annotations

import logging
from typing import Any

import deepl

from translate_keys.engine.base import TranslationEngine, Usage
from translate_keys.engine.placeholders import (
    IGNORE_TAG,
    protect_placeholders,
    restore_placeholders,
)
from translate_keys.errors import EngineError

logger = logging.getLogger(__name__)


class DeepLEngine(TranslationEngine):
    """
    DeepL API engine.

    Free keys (ending in ``:fx``) are routed to the free endpoint by the
    client library itself.
    """

    def __init__(
        self,
        api_key: str,
        *,
        server_url: str | None = None,
        max_retries: int = 3,
        timeout: float = 30.0,
        language_overrides: dict[str, str] | None = None,
        translator: Any = None,
    ):
        """
        Initialize DeepL engine.

        Args:
            api_key: DeepL authentication key.
            server_url: Alternative API endpoint.
            max_retries: Network retries performed by the client.
            timeout: Minimum connection timeout in seconds.
            language_overrides: Target codes to send instead of the bare
                language code, e.g. ``{"en": "EN-US"}``.
            translator: Pre-built client exposing ``translate_text`` and
                ``get_usage``; built from ``api_key`` when omitted.
        """
        self._language_overrides = {
            k.lower(): v for k, v in (language_overrides or {}).items()
        }

        if translator is None:
            deepl.http_client.max_network_retries = max_retries
            deepl.http_client.min_connection_timeout = timeout
            translator = deepl.Translator(api_key, server_url=server_url)
        self._translator = translator

    @property
    def name(self) -> str:
        """Engine name."""
        return "deepl"

    def target_code(self, language: str) -> str:
        """DeepL target language code for a two-letter language."""
        return self._language_overrides.get(language.lower(), language.upper())

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """
        Translate text via DeepL, keeping ``{{...}}`` placeholders intact.

        Raises:
            EngineError: If the API call fails or the response has no text.
        """
        try:
            result = self._translator.translate_text(
                protect_placeholders(text),
                source_lang=source_lang.upper(),
                target_lang=self.target_code(target_lang),
                tag_handling="xml",
                ignore_tags=[IGNORE_TAG],
            )
        except (deepl.DeepLException, ValueError) as e:
            raise EngineError(f"DeepL translation failed: {e}") from e

        if isinstance(result, list):
            result = result[0] if result else None
        translated = getattr(result, "text", None)
        if not isinstance(translated, str):
            raise EngineError(f"DeepL returned a malformed response: {result!r}")

        return restore_placeholders(translated)

    def usage(self) -> Usage:
        """
        Get character usage for the current billing period.

        Raises:
            EngineError: If the usage endpoint cannot be reached.
        """
        try:
            usage = self._translator.get_usage()
        except deepl.DeepLException as e:
            raise EngineError(f"Could not read DeepL usage: {e}") from e

        detail = getattr(usage, "character", None)
        if detail is None:
            logger.debug("DeepL usage response has no character counters")
            return Usage()
        return Usage(character_count=detail.count, character_limit=detail.limit)
