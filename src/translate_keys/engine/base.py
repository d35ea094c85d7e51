"""
Base classes for translation engines.

Defines the interface every machine-translation backend implements and the
explicit "disabled" variant used when no backend is available.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Usage:
    """Quota counters reported by the translation API."""

    character_count: int | None = None
    character_limit: int | None = None

    @property
    def remaining(self) -> int | None:
        if self.character_count is None or self.character_limit is None:
            return None
        return self.character_limit - self.character_count


class TranslationEngine(ABC):
    """
    Abstract base class for machine-translation engines.

    Implementations must raise :class:`~translate_keys.errors.EngineError`
    when a call fails, so callers can skip the item and carry on.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Engine name for logging and identification."""
        ...

    @abstractmethod
    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """
        Translate a single text.

        Args:
            text: Source text, possibly containing ``{{placeholder}}`` tokens.
            source_lang: Two-letter source language code.
            target_lang: Two-letter target language code.

        Returns:
            The translated text with placeholders restored verbatim.
        """
        ...

    @abstractmethod
    def usage(self) -> Usage:
        """Cumulative quota consumption for the credential in use."""
        ...


@dataclass(frozen=True)
class DisabledEngine:
    """Stands in for an engine when translation is switched off."""

    reason: str = "translation disabled"
