"""Tests for the DuckDB translation store and repository."""

import pytest

from translate_keys.database import Database, Domain
from translate_keys.repository import TranslationRepository


def test_missing_translations_for_locale(seeded_db: Database):
    rows = seeded_db.get_missing_translations(Domain.MESSAGES, "de_DE", "en")

    # app.title is translated, app.blank has no reference text
    assert [r.key for r in rows] == ["app.cancel", "app.save", "app.space"]
    assert all(r.english_value for r in rows)
    assert all(r.locale_code == "de_DE" for r in rows)
    assert all(r.value is None and r.status is False for r in rows)
    assert all(r.domain is Domain.MESSAGES for r in rows)


def test_missing_row_with_null_value_keeps_its_id(seeded_db: Database):
    rows = {r.key: r for r in seeded_db.get_missing_translations("messages", "de_DE", "en")}

    assert rows["app.cancel"].id is not None
    assert rows["app.save"].id is None


def test_missing_translations_filters_by_domain(seeded_db: Database):
    rows = seeded_db.get_missing_translations(Domain.WORKFLOWS, "de_DE", "en")
    assert [(r.key, r.english_value) for r in rows] == [("flow.start", "Start workflow")]


def test_missing_translations_limit(seeded_db: Database):
    rows = seeded_db.get_missing_translations(Domain.MESSAGES, "fr_FR", "en", limit=2)
    assert [r.key for r in rows] == ["app.cancel", "app.save"]


def test_no_missing_translations(seeded_db: Database):
    assert seeded_db.get_missing_translations(Domain.SECURITY, "de_DE", "en") == []


def test_unknown_domain_rejected(seeded_db: Database):
    with pytest.raises(ValueError):
        seeded_db.get_missing_translations("nonsense", "de_DE", "en")


def test_set_translation_unknown_language(db: Database):
    with pytest.raises(ValueError, match="Unknown language"):
        db.set_translation("k", Domain.MESSAGES, "xx_XX", "value")


def test_set_translation_updates_value(seeded_db: Database):
    seeded_db.set_translation("app.save", Domain.MESSAGES, "de_DE", "Speichern")
    keys = [r.key for r in seeded_db.get_missing_translations("messages", "de_DE", "en")]
    assert "app.save" not in keys


def test_repository_locales(db: Database):
    repository = TranslationRepository(db)
    assert repository.available_locales() == ["de_DE", "en", "fr_FR"]
    assert repository.default_locale() == "en"


def test_repository_default_locale_fallback(tmp_path):
    database = Database(tmp_path / "empty.duckdb")
    try:
        assert TranslationRepository(database).default_locale() == "en"
    finally:
        database.close()


def test_settings_roundtrip(db: Database):
    assert db.get_setting("deepl_api_key") is None
    db.set_setting("deepl_api_key", "abc")
    db.set_setting("deepl_api_key", "def")
    assert db.get_setting("deepl_api_key") == "def"


def test_processing_log(db: Database):
    db.log("INFO", "export", "Wrote 3 records", domain="messages", context={"locale": "de_DE"})
    db.log("ERROR", "translate", "boom", domain="workflows")

    errors = db.get_logs(level="error")
    assert len(errors) == 1
    assert errors[0]["message"] == "boom"
    assert errors[0]["run_id"] == db.run_id

    by_domain = db.get_logs(domain="messages")
    assert by_domain[0]["context"] == {"locale": "de_DE"}


def test_statistics(seeded_db: Database):
    stats = {(s["locale"], s["domain"]): s for s in seeded_db.get_statistics()}

    messages_de = stats[("de_DE", "messages")]
    assert messages_de["total"] == 5
    assert messages_de["translated"] == 1
    assert messages_de["missing"] == 4
    assert ("it_IT", "messages") not in stats
