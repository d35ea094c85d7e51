"""
Placeholder protection for machine translation.

Template placeholders such as ``{{ count }}`` must not be translated. Their
delimiters are swapped for an XML tag the engine is told to ignore, and
swapped back once the translation comes in.
"""

from __future__ import annotations

PLACEHOLDER_OPEN = "{{"
PLACEHOLDER_CLOSE = "}}"

IGNORE_TAG = "ignore"
IGNORE_OPEN = f"<{IGNORE_TAG}>"
IGNORE_CLOSE = f"</{IGNORE_TAG}>"


def protect_placeholders(text: str) -> str:
    """Replace placeholder delimiters with ignore-tags."""
    return text.replace(PLACEHOLDER_OPEN, IGNORE_OPEN).replace(PLACEHOLDER_CLOSE, IGNORE_CLOSE)


def restore_placeholders(text: str) -> str:
    """Turn ignore-tags back into placeholder delimiters."""
    return text.replace(IGNORE_OPEN, PLACEHOLDER_OPEN).replace(IGNORE_CLOSE, PLACEHOLDER_CLOSE)


def language_code(locale: str) -> str:
    """
    Derive the engine-facing language code from a locale.

    >>> language_code("de_DE")
    'de'
    >>> language_code("fr")
    'fr'
    """
    return locale.split("_", 1)[0]
