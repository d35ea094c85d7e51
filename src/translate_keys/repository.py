"""
Read access to the translation store used by the export and import jobs.
"""

from __future__ import annotations

from translate_keys.database import Database, Domain, TranslationRow

DEEPL_API_KEY_SETTING = "deepl_api_key"

# Used when no language is flagged as default in the store
FALLBACK_DEFAULT_LOCALE = "en"


class TranslationRepository:
    """
    Queries missing translations, available locales and application settings.

    Jobs depend on this class rather than on :class:`Database` so tests can
    hand them an in-memory double.
    """

    def __init__(self, db: Database):
        self.db = db

    def fetch_missing_translations(
        self,
        domain: Domain | str,
        locale: str,
        reference_locale: str,
        limit: int | None = None,
    ) -> list[TranslationRow]:
        """
        Get keys of ``domain`` translated in ``reference_locale`` but not in ``locale``.

        Args:
            domain: Translation domain to search.
            locale: Target locale, e.g. ``de_DE``.
            reference_locale: Locale holding the source text.
            limit: Maximum number of rows; ``None``, 0 or a negative value means unbounded.

        Returns:
            Rows ordered by key. An empty list means nothing is left to translate.
        """
        return self.db.get_missing_translations(domain, locale, reference_locale, limit=limit)

    def available_locales(self) -> list[str]:
        """Codes of the enabled languages."""
        return [lang.code for lang in self.db.get_languages(enabled_only=True)]

    def default_locale(self) -> str:
        """Code of the reference language."""
        language = self.db.get_default_language()
        return language.code if language else FALLBACK_DEFAULT_LOCALE

    def get_setting(self, name: str) -> str | None:
        """Get a persisted application setting."""
        return self.db.get_setting(name)

    def log(self, level: str, stage: str, message: str, **kwargs) -> None:
        """Record a job event in the processing log."""
        self.db.log(level, stage, message, **kwargs)
