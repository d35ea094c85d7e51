"""
YAML translation dictionaries.

A dictionary maps translation keys to translated strings for one domain and
locale. Merging is a pure function; reading and writing stay at the edges.
"""

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

Dictionary = dict[str, Any]


def merge_dictionaries(base: Dictionary, patch: Dictionary) -> Dictionary:
    """
    Merge ``patch`` over ``base`` and sort the result by key.

    Patch values win on key collision. Neither input is modified.
    """
    return sort_dictionary({**base, **patch})


def sort_dictionary(data: Dictionary) -> Dictionary:
    """Order keys lexicographically by their string form."""
    return {key: data[key] for key in sorted(data, key=str)}


def load_dictionary(path: Path | str) -> Dictionary:
    """
    Load a YAML dictionary.

    A missing, unreadable or malformed file, or one whose top level is not a
    mapping, yields an empty dictionary.
    """
    path = Path(path)
    if not path.is_file():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable dictionary %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.debug("Dictionary %s is not a mapping, starting empty", path)
        return {}
    return data


def save_dictionary(path: Path | str, data: Dictionary) -> None:
    """Write a dictionary as YAML, sorted by key, replacing the file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            sort_dictionary(data),
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
            width=4096,
        )


def timestamp(fmt: str = "%d%m%Y-%H%M%S") -> str:
    """Current local time formatted for file name suffixes."""
    return datetime.now().strftime(fmt)


def backup_file(source: Path | str, destination: Path | str) -> Path:
    """Copy ``source`` to ``destination``, keeping file metadata."""
    destination = Path(destination)
    shutil.copy2(source, destination)
    logger.info("Backed up %s to %s", source, destination)
    return destination
