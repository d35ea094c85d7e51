"""Fake engine and repository shared by the job tests."""

from __future__ import annotations

from translate_keys.database import Domain, TranslationRow
from translate_keys.engine.base import TranslationEngine, Usage
from translate_keys.errors import EngineError


class FakeEngine(TranslationEngine):
    """Engine that prefixes the target language and can be told to fail."""

    def __init__(self, failing: set[str] | None = None):
        self.failing = failing or set()
        self.calls: list[tuple[str, str, str]] = []

    @property
    def name(self) -> str:
        return "fake"

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        self.calls.append((text, source_lang, target_lang))
        if text in self.failing:
            raise EngineError(f"cannot translate {text!r}")
        return f"{target_lang}:{text}"

    def usage(self) -> Usage:
        return Usage(character_count=1234, character_limit=500000)


class FakeRepository:
    """In-memory repository returning a fixed list of rows."""

    def __init__(self, rows: list[TranslationRow], locales: list[str] | None = None):
        self.rows = rows
        self.locales = locales or ["de_DE", "en"]
        self.logged: list[tuple[str, str, str]] = []

    def fetch_missing_translations(self, domain, locale, reference_locale, limit=None):
        rows = [r for r in self.rows if r.domain.value == domain]
        return rows[:limit] if limit else rows

    def available_locales(self) -> list[str]:
        return self.locales

    def default_locale(self) -> str:
        return "en"

    def get_setting(self, name: str) -> str | None:
        return None

    def log(self, level: str, stage: str, message: str, **kwargs) -> None:
        self.logged.append((level, stage, message))


def make_row(key: str, english_value: str, domain: Domain = Domain.MESSAGES) -> TranslationRow:
    return TranslationRow(
        id=None,
        locale_code="de_DE",
        value=None,
        key=key,
        domain=domain,
        status=False,
        english_value=english_value,
    )
