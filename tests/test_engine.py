"""Tests for the DeepL engine and engine factory."""

from types import SimpleNamespace

import deepl
import pytest

from translate_keys.config import DeepLConfig
from translate_keys.engine import DisabledEngine, create_engine, create_engine_or_disabled
from translate_keys.engine.deepl_engine import DeepLEngine
from translate_keys.engine.factory import resolve_api_key
from translate_keys.errors import EngineError, EngineInitError


class FakeTranslator:
    """Mimics deepl.Translator; echoes the text with a marker around it."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def translate_text(self, text, **kwargs):
        self.calls.append((text, kwargs))
        if self.error:
            raise self.error
        if self.response is not None:
            return self.response
        return SimpleNamespace(text=f"DE[{text}]")

    def get_usage(self):
        return SimpleNamespace(character=SimpleNamespace(count=42, limit=500000))


def make_engine(translator, **kwargs):
    return DeepLEngine("test-key", translator=translator, **kwargs)


def test_translate_sends_ignore_tags_and_restores_placeholders():
    translator = FakeTranslator()
    engine = make_engine(translator)

    result = engine.translate("Hello {{name}}", "en", "de")

    sent, kwargs = translator.calls[0]
    assert sent == "Hello <ignore>name</ignore>"
    assert kwargs["tag_handling"] == "xml"
    assert kwargs["ignore_tags"] == ["ignore"]
    assert kwargs["source_lang"] == "EN"
    assert kwargs["target_lang"] == "DE"
    assert result == "DE[Hello {{name}}]"


def test_translate_applies_language_overrides():
    translator = FakeTranslator()
    engine = make_engine(translator, language_overrides={"en": "EN-GB"})

    engine.translate("Hallo", "de", "en")

    assert translator.calls[0][1]["target_lang"] == "EN-GB"


def test_translate_wraps_deepl_errors():
    engine = make_engine(FakeTranslator(error=deepl.DeepLException("quota exceeded")))

    with pytest.raises(EngineError, match="quota exceeded"):
        engine.translate("Save", "en", "de")


def test_translate_rejects_malformed_response():
    engine = make_engine(FakeTranslator(response=SimpleNamespace(detected_source_lang="EN")))

    with pytest.raises(EngineError, match="malformed"):
        engine.translate("Save", "en", "de")


def test_translate_accepts_list_response():
    engine = make_engine(FakeTranslator(response=[SimpleNamespace(text="Speichern")]))
    assert engine.translate("Save", "en", "de") == "Speichern"


def test_usage():
    usage = make_engine(FakeTranslator()).usage()
    assert usage.character_count == 42
    assert usage.character_limit == 500000
    assert usage.remaining == 499958


def test_resolve_api_key_prefers_setting(tmp_path):
    license_file = tmp_path / "deepl-license.key"
    license_file.write_text("from-file\n", encoding="utf-8")

    assert resolve_api_key("from-setting", "from-cli", license_file) == "from-setting"
    assert resolve_api_key(None, "from-cli", license_file) == "from-cli"
    assert resolve_api_key("", None, license_file) == "from-file"


def test_resolve_api_key_nothing_found(tmp_path):
    assert resolve_api_key(None, None, tmp_path / "missing.key") == ""
    assert resolve_api_key(None, None, None) == ""


def test_create_engine_requires_key():
    with pytest.raises(EngineInitError, match="DeepL API key not defined"):
        create_engine("")


def test_create_engine_builds_deepl_engine():
    engine = create_engine("fake-key:fx", DeepLConfig(max_retries=1))
    assert isinstance(engine, DeepLEngine)
    assert engine.name == "deepl"
    assert engine.target_code("pt") == "PT-PT"


def test_create_engine_or_disabled_variants():
    assert isinstance(create_engine_or_disabled("key", disabled=True), DisabledEngine)
    assert isinstance(create_engine_or_disabled("key", simulate=True), DisabledEngine)

    missing = create_engine_or_disabled("")
    assert isinstance(missing, DisabledEngine)
    assert "DeepL API key not defined" in missing.reason
