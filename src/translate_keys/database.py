"""
DuckDB database operations for translate-keys.

Holds the translation store (languages, translation keys, translation values),
persisted application settings and the processing log.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import duckdb


class Domain(str, Enum):
    """Namespaces translation keys are partitioned into."""

    MESSAGES = "messages"
    JSMESSAGES = "jsmessages"
    WORKFLOWS = "workflows"
    VALIDATORS = "validators"
    SECURITY = "security"

    @classmethod
    def values(cls) -> list[str]:
        return [d.value for d in cls]


@dataclass
class Language:
    """Language record."""

    id: int | None = None
    code: str = ""
    enabled: bool = True
    is_default: bool = False


@dataclass(frozen=True)
class TranslationRow:
    """A translation key lacking a value in the target locale."""

    id: int | None
    locale_code: str
    value: str | None
    key: str
    domain: Domain
    status: bool
    english_value: str


class Database:
    """DuckDB database wrapper for translate-keys."""

    _SCHEMA = """
    CREATE TABLE IF NOT EXISTS languages (
        id INTEGER PRIMARY KEY,
        code VARCHAR NOT NULL UNIQUE,
        enabled BOOLEAN DEFAULT TRUE,
        is_default BOOLEAN DEFAULT FALSE
    );

    CREATE SEQUENCE IF NOT EXISTS languages_id_seq START 1;

    CREATE TABLE IF NOT EXISTS translation_keys (
        id INTEGER PRIMARY KEY,
        key VARCHAR NOT NULL,
        domain VARCHAR NOT NULL,
        UNIQUE(key, domain)
    );

    CREATE SEQUENCE IF NOT EXISTS translation_keys_id_seq START 1;

    CREATE TABLE IF NOT EXISTS translations (
        id INTEGER PRIMARY KEY,
        translation_key_id INTEGER NOT NULL,
        language_id INTEGER NOT NULL,
        value TEXT,
        UNIQUE(translation_key_id, language_id)
    );

    CREATE SEQUENCE IF NOT EXISTS translations_id_seq START 1;

    -- Application settings (e.g. the DeepL API key)
    CREATE TABLE IF NOT EXISTS app_settings (
        name VARCHAR PRIMARY KEY,
        value VARCHAR,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    -- Processing log for audit trail
    CREATE TABLE IF NOT EXISTS processing_log (
        id INTEGER PRIMARY KEY,
        run_id VARCHAR NOT NULL,
        domain VARCHAR,
        stage VARCHAR NOT NULL,
        level VARCHAR NOT NULL,
        message TEXT NOT NULL,
        context JSON,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    CREATE SEQUENCE IF NOT EXISTS processing_log_id_seq START 1;

    CREATE INDEX IF NOT EXISTS idx_keys_domain ON translation_keys(domain);
    CREATE INDEX IF NOT EXISTS idx_translations_key ON translations(translation_key_id);
    CREATE INDEX IF NOT EXISTS idx_log_lookup ON processing_log(run_id, stage, level);
    """

    def __init__(self, db_path: Path | str):
        """Initialize database connection."""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: duckdb.DuckDBPyConnection | None = None
        self._run_id = str(uuid.uuid4())

    @property
    def conn(self) -> duckdb.DuckDBPyConnection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = duckdb.connect(str(self.db_path))
            self._conn.execute(self._SCHEMA)
        return self._conn

    @property
    def run_id(self) -> str:
        """Get current run ID."""
        return self._run_id

    def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # ==================== Languages ====================

    def add_language(self, code: str, enabled: bool = True, is_default: bool = False) -> int:
        """Add a language, or update its flags if the code already exists."""
        result = self.conn.execute(
            """
            INSERT INTO languages (id, code, enabled, is_default)
            VALUES (nextval('languages_id_seq'), ?, ?, ?)
            ON CONFLICT (code) DO UPDATE
            SET enabled = EXCLUDED.enabled,
                is_default = EXCLUDED.is_default
            RETURNING id
            """,
            [code, enabled, is_default],
        ).fetchone()
        return result[0] if result else 0

    def get_languages(self, enabled_only: bool = False) -> list[Language]:
        """Get all languages ordered by code."""
        where = "WHERE enabled" if enabled_only else ""
        rows = self.conn.execute(
            f"SELECT id, code, enabled, is_default FROM languages {where} ORDER BY code"
        ).fetchall()
        return [Language(id=r[0], code=r[1], enabled=r[2], is_default=r[3]) for r in rows]

    def get_default_language(self) -> Language | None:
        """Get the language flagged as default, if any."""
        row = self.conn.execute(
            "SELECT id, code, enabled, is_default FROM languages WHERE is_default LIMIT 1"
        ).fetchone()
        if row:
            return Language(id=row[0], code=row[1], enabled=row[2], is_default=row[3])
        return None

    # ==================== Translations ====================

    def add_translation_key(self, key: str, domain: Domain | str) -> int:
        """Add a translation key to a domain, returning its ID."""
        domain_value = Domain(domain).value
        row = self.conn.execute(
            "SELECT id FROM translation_keys WHERE key = ? AND domain = ?",
            [key, domain_value],
        ).fetchone()
        if row:
            return row[0]

        result = self.conn.execute(
            """
            INSERT INTO translation_keys (id, key, domain)
            VALUES (nextval('translation_keys_id_seq'), ?, ?)
            RETURNING id
            """,
            [key, domain_value],
        ).fetchone()
        return result[0] if result else 0

    def set_translation(
        self, key: str, domain: Domain | str, locale: str, value: str | None
    ) -> int:
        """Store the value of a key for a locale, creating the key if needed."""
        language = self.conn.execute(
            "SELECT id FROM languages WHERE code = ?", [locale]
        ).fetchone()
        if not language:
            raise ValueError(f"Unknown language: {locale}")

        key_id = self.add_translation_key(key, domain)
        result = self.conn.execute(
            """
            INSERT INTO translations (id, translation_key_id, language_id, value)
            VALUES (nextval('translations_id_seq'), ?, ?, ?)
            ON CONFLICT (translation_key_id, language_id) DO UPDATE
            SET value = EXCLUDED.value
            RETURNING id
            """,
            [key_id, language[0], value],
        ).fetchone()
        return result[0] if result else 0

    def get_missing_translations(
        self,
        domain: Domain | str,
        locale: str,
        reference_locale: str,
        limit: int | None = None,
    ) -> list[TranslationRow]:
        """
        Get keys that have a reference value but no value in ``locale``.

        A key counts as missing when its translation row is absent or holds
        NULL. Rows are ordered by key.
        """
        limit_sql = f"LIMIT {int(limit)}" if limit and limit > 0 else ""
        rows = self.conn.execute(
            f"""
            SELECT
                t.id,
                lang.code,
                t.value,
                k.key,
                k.domain,
                (t.value IS NOT NULL) AS status,
                ref.value AS english_value
            FROM translation_keys AS k
            JOIN languages AS lang ON lang.code = ?
            JOIN languages AS ref_lang ON ref_lang.code = ?
            JOIN translations AS ref
                ON ref.translation_key_id = k.id AND ref.language_id = ref_lang.id
            LEFT JOIN translations AS t
                ON t.translation_key_id = k.id AND t.language_id = lang.id
            WHERE k.domain = ?
                AND ref.value <> ''
                AND t.value IS NULL
            ORDER BY k.key ASC
            {limit_sql}
            """,
            [locale, reference_locale, Domain(domain).value],
        ).fetchall()
        return [self._row_to_translation(row) for row in rows]

    def _row_to_translation(self, row: tuple) -> TranslationRow:
        """Convert database row to TranslationRow."""
        return TranslationRow(
            id=row[0],
            locale_code=row[1],
            value=row[2],
            key=row[3],
            domain=Domain(row[4]),
            status=bool(row[5]),
            english_value=row[6],
        )

    # ==================== Settings ====================

    def get_setting(self, name: str) -> str | None:
        """Get a persisted application setting."""
        row = self.conn.execute(
            "SELECT value FROM app_settings WHERE name = ?", [name]
        ).fetchone()
        return row[0] if row else None

    def set_setting(self, name: str, value: str | None) -> None:
        """Persist an application setting."""
        self.conn.execute(
            """
            INSERT INTO app_settings (name, value) VALUES (?, ?)
            ON CONFLICT (name) DO UPDATE
            SET value = EXCLUDED.value, updated_at = now()
            """,
            [name, value],
        )

    # ==================== Logging ====================

    def log(
        self,
        level: str,
        stage: str,
        message: str,
        domain: str | None = None,
        context: dict | None = None,
    ) -> None:
        """Insert a log entry."""
        context_json = json.dumps(context) if context else None
        self.conn.execute(
            """
            INSERT INTO processing_log
            (id, run_id, domain, stage, level, message, context)
            VALUES (nextval('processing_log_id_seq'), ?, ?, ?, ?, ?, ?)
            """,
            [self._run_id, domain, stage, level, message, context_json],
        )

    def get_logs(
        self,
        run_id: str | None = None,
        level: str | None = None,
        domain: str | None = None,
        limit: int = 100,
    ) -> list[dict]:
        """Get log entries, newest first."""
        conditions = []
        params: list[Any] = []

        if run_id:
            conditions.append("run_id = ?")
            params.append(run_id)
        if level:
            conditions.append("level = ?")
            params.append(level.upper())
        if domain:
            conditions.append("domain = ?")
            params.append(domain)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        rows = self.conn.execute(
            f"""
            SELECT run_id, domain, stage, level, message, context, created_at
            FROM processing_log
            {where_clause}
            ORDER BY created_at DESC, id DESC
            LIMIT ?
            """,
            [*params, limit],
        ).fetchall()

        return [
            {
                "run_id": row[0],
                "domain": row[1],
                "stage": row[2],
                "level": row[3],
                "message": row[4],
                "context": json.loads(row[5]) if row[5] else None,
                "created_at": row[6],
            }
            for row in rows
        ]

    # ==================== Statistics ====================

    def get_statistics(self) -> list[dict]:
        """Count keys, translated and missing values per enabled locale and domain."""
        rows = self.conn.execute(
            """
            SELECT lang.code, k.domain, COUNT(*) AS total, COUNT(t.value) AS translated
            FROM languages AS lang
            CROSS JOIN translation_keys AS k
            LEFT JOIN translations AS t
                ON t.translation_key_id = k.id AND t.language_id = lang.id
            WHERE lang.enabled
            GROUP BY lang.code, k.domain
            ORDER BY lang.code, k.domain
            """
        ).fetchall()
        return [
            {
                "locale": row[0],
                "domain": row[1],
                "total": row[2],
                "translated": row[3],
                "missing": row[2] - row[3],
            }
            for row in rows
        ]
