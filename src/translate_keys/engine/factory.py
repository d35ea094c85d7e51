"""
Translation engine factory.

Resolves the DeepL credential and creates the engine, or the disabled
variant when translation cannot or should not run.
"""

from __future__ import annotations

import logging
from pathlib import Path

from translate_keys.config import DeepLConfig
from translate_keys.engine.base import DisabledEngine, TranslationEngine
from translate_keys.errors import EngineInitError

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "DeepL API key not defined. Store it as the 'deepl_api_key' setting, "
    "pass --deepl-api-key (or set DEEPL_API_KEY), "
    "or put the key into the license file {license_file}."
)


def resolve_api_key(
    setting_value: str | None,
    cli_value: str | None,
    license_file: Path | str | None,
) -> str:
    """
    Resolve the DeepL API key, first match wins.

    Order: persisted application setting, command line option, license file
    contents (trimmed).

    Returns:
        The key, or an empty string if no source provides one.
    """
    if setting_value:
        return setting_value.strip()
    if cli_value:
        return cli_value.strip()
    if license_file is not None:
        path = Path(license_file)
        if path.is_file():
            return path.read_text(encoding="utf-8").strip()
    return ""


def create_engine(
    api_key: str,
    config: DeepLConfig | None = None,
    *,
    license_file: Path | str | None = None,
) -> TranslationEngine:
    """
    Create a DeepL engine.

    Args:
        api_key: Resolved API key.
        config: DeepL settings (defaults when None).
        license_file: Only used to word the error message.

    Returns:
        A ready-to-use engine.

    Raises:
        EngineInitError: If the key is empty.
    """
    if not api_key:
        raise EngineInitError(MISSING_KEY_MESSAGE.format(license_file=license_file or "-"))

    from translate_keys.engine.deepl_engine import DeepLEngine

    config = config or DeepLConfig()
    return DeepLEngine(
        api_key,
        server_url=config.server_url,
        max_retries=config.max_retries,
        timeout=config.timeout_seconds,
        language_overrides=config.language_overrides,
    )


def create_engine_or_disabled(
    api_key: str,
    config: DeepLConfig | None = None,
    *,
    disabled: bool = False,
    simulate: bool = False,
    license_file: Path | str | None = None,
) -> TranslationEngine | DisabledEngine:
    """
    Create the engine for an export run.

    Translation is off when explicitly disabled, when simulating, or when no
    key could be resolved. The last case is logged as an error and the export
    carries on untranslated.
    """
    if disabled:
        return DisabledEngine("DeepL disabled on the command line")
    if simulate:
        return DisabledEngine("simulation, no translation requested")

    try:
        return create_engine(api_key, config, license_file=license_file)
    except EngineInitError as e:
        logger.info(str(e))
        return DisabledEngine(str(e))
