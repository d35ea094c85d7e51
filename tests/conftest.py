"""Shared fixtures for translate-keys tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from translate_keys.database import Database, Domain


@pytest.fixture
def db(tmp_path: Path):
    """Translation store with en (default), de_DE, fr_FR and disabled it_IT."""
    database = Database(tmp_path / "translations.duckdb")
    database.add_language("en", is_default=True)
    database.add_language("de_DE")
    database.add_language("fr_FR")
    database.add_language("it_IT", enabled=False)
    yield database
    database.close()


@pytest.fixture
def seeded_db(db: Database) -> Database:
    """Store with a mix of translated, missing and empty keys."""
    db.set_translation("app.title", Domain.MESSAGES, "en", "Hello {{name}}")
    db.set_translation("app.title", Domain.MESSAGES, "de_DE", "Hallo {{name}}")

    db.set_translation("app.save", Domain.MESSAGES, "en", "Save")
    db.set_translation("app.cancel", Domain.MESSAGES, "en", "Cancel")
    db.set_translation("app.cancel", Domain.MESSAGES, "de_DE", None)
    db.set_translation("app.blank", Domain.MESSAGES, "en", "")
    db.set_translation("app.space", Domain.MESSAGES, "en", " ")

    db.set_translation("flow.start", Domain.WORKFLOWS, "en", "Start workflow")
    db.set_translation("js.ok", Domain.JSMESSAGES, "en", "OK")
    return db


@pytest.fixture
def translations_dir(tmp_path: Path) -> Path:
    path = tmp_path / "translations"
    path.mkdir()
    return path
