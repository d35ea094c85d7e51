"""Tests for the translate-keys command line."""

import csv

import pytest
import yaml
from typer.testing import CliRunner

from translate_keys.cli import app
from translate_keys.database import Database, Domain

runner = CliRunner()


def flat(output: str) -> str:
    """Collapse the line wrapping rich applies to console output."""
    return " ".join(output.split())


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Config file plus a seeded database, all under tmp_path."""
    monkeypatch.delenv("DEEPL_API_KEY", raising=False)
    translations_dir = tmp_path / "translations"
    database_path = tmp_path / "store.duckdb"
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "paths": {
                    "translations_dir": str(translations_dir),
                    "database_path": str(database_path),
                    "license_file": str(tmp_path / "missing.key"),
                    "logs": str(tmp_path / "logs"),
                },
                "logging": {"file": str(tmp_path / "logs" / "cli.log")},
            }
        ),
        encoding="utf-8",
    )

    db = Database(database_path)
    db.add_language("en", is_default=True)
    db.add_language("de_DE")
    db.set_translation("app.save", Domain.MESSAGES, "en", "Save")
    db.set_translation("app.hello", Domain.MESSAGES, "en", "Hello {{name}}")
    db.set_translation("flow.go", Domain.WORKFLOWS, "en", "Go")
    db.close()

    return {"config": config_path, "translations_dir": translations_dir, "db": database_path}


def test_export_without_deepl(workspace):
    result = runner.invoke(
        app,
        ["export", "de_DE", "--disable-deepl", "--overwrite", "-c", str(workspace["config"])],
    )

    assert result.exit_code == 0, result.output
    with open(workspace["translations_dir"] / "messages.de_DE.csv", newline="") as f:
        rows = list(csv.reader(f))
    assert rows == [
        ["key", "english_value", "de_DE"],
        ["app.hello", "Hello {{name}}", ""],
        ["app.save", "Save", ""],
    ]
    assert (workspace["translations_dir"] / "workflows.de_DE.csv").exists()


def test_export_missing_key_continues_untranslated(workspace):
    result = runner.invoke(
        app, ["export", "de_DE", "--domains", "workflows", "-c", str(workspace["config"])]
    )

    assert result.exit_code == 0, result.output
    assert flat(result.output).count("DeepL API key not defined") == 1
    files = list(workspace["translations_dir"].glob("workflows.de_DE-*.csv"))
    assert len(files) == 1


def test_export_simulate(workspace):
    result = runner.invoke(
        app,
        ["export", "de_DE", "--simulate", "--domains", "messages", "-c", str(workspace["config"])],
    )

    assert result.exit_code == 0, result.output
    assert "18 chars" in flat(result.output)
    assert not workspace["translations_dir"].exists()


def test_export_unsupported_format_exits_zero(workspace):
    result = runner.invoke(
        app, ["export", "de_DE", "--format", "xml", "-d", "-c", str(workspace["config"])]
    )

    assert result.exit_code == 0
    assert "Format xml is not supported" in flat(result.output)


def test_import_with_confirmation_flag(workspace, tmp_path):
    source = tmp_path / "messages.de_DE.csv"
    source.write_text("key,english_value,de_DE\napp.save,Save,Speichern\n", encoding="utf-8")

    result = runner.invoke(
        app, ["import", str(source), "de_DE", "--yes", "-c", str(workspace["config"])]
    )

    assert result.exit_code == 0, result.output
    target = workspace["translations_dir"] / "messages.de_DE.yml"
    assert yaml.safe_load(target.read_text(encoding="utf-8")) == {"app.save": "Speichern"}


def test_import_declined_at_prompt(workspace, tmp_path):
    source = tmp_path / "messages.de_DE.csv"
    source.write_text("key,english_value,de_DE\napp.save,Save,Speichern\n", encoding="utf-8")

    result = runner.invoke(
        app, ["import", str(source), "de_DE", "-c", str(workspace["config"])], input="n\n"
    )

    assert result.exit_code == 0
    assert "aborted" in flat(result.output)
    assert not (workspace["translations_dir"] / "messages.de_DE.yml").exists()


def test_import_rejects_txt(workspace, tmp_path):
    source = tmp_path / "messages.de_DE.txt"
    source.write_text("key,de_DE\n", encoding="utf-8")

    result = runner.invoke(
        app, ["import", str(source), "de_DE", "--yes", "-c", str(workspace["config"])]
    )

    assert result.exit_code == 0
    assert "MUST be a CSV file" in flat(result.output)


def test_set_api_key_and_locales(workspace):
    result = runner.invoke(app, ["set-api-key", "secret", "-c", str(workspace["config"])])
    assert result.exit_code == 0

    db = Database(workspace["db"])
    try:
        assert db.get_setting("deepl_api_key") == "secret"
    finally:
        db.close()

    result = runner.invoke(app, ["locales", "-c", str(workspace["config"])])
    assert result.exit_code == 0
    assert "de_DE" in flat(result.output)


def test_init_writes_config(tmp_path):
    output = tmp_path / "generated.yaml"
    result = runner.invoke(app, ["init", "--output", str(output)])

    assert result.exit_code == 0
    assert yaml.safe_load(output.read_text(encoding="utf-8"))["export"]["default_format"] == "csv"


def test_export_limit_zero_means_no_limit(workspace):
    result = runner.invoke(
        app,
        [
            "export", "de_DE", "-d", "--overwrite", "--limit", "0",
            "--domains", "messages", "-c", str(workspace["config"]),
        ],
    )

    assert result.exit_code == 0, result.output
    with open(workspace["translations_dir"] / "messages.de_DE.csv", newline="") as f:
        assert [row[0] for row in csv.reader(f)] == ["key", "app.hello", "app.save"]


def test_import_non_utf8_file_is_reported(workspace, tmp_path):
    source = tmp_path / "messages.de_DE.csv"
    source.write_bytes("key,english_value,de_DE\napp.size,Size,Größe\n".encode("latin-1"))

    result = runner.invoke(
        app, ["import", str(source), "de_DE", "--yes", "-c", str(workspace["config"])]
    )

    assert result.exit_code == 0, result.output
    assert "is not a UTF-8 CSV file" in flat(result.output)
    assert not (workspace["translations_dir"] / "messages.de_DE.yml").exists()


def test_init_keeps_existing_config_when_declined(tmp_path):
    output = tmp_path / "config.yaml"
    output.write_text("paths: {}\n", encoding="utf-8")

    result = runner.invoke(app, ["init", "--output", str(output)], input="n\n")

    assert result.exit_code == 0
    assert output.read_text(encoding="utf-8") == "paths: {}\n"
