"""Exception hierarchy for translate-keys."""

from __future__ import annotations


class TranslateKeysError(Exception):
    """Base class for all translate-keys errors."""


class ValidationError(TranslateKeysError):
    """Invalid operator input: format, file, locale or domain."""


class EngineInitError(TranslateKeysError):
    """The translation engine could not be set up (usually a missing API key)."""


class EngineError(TranslateKeysError):
    """A single call to the translation engine failed."""
