"""
Logging setup for translate-keys.

Console output goes through rich, the full log goes to a rotating file.
Modules obtain their logger with ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from rich.console import Console
from rich.logging import RichHandler

from translate_keys.config import LoggingConfig

# Chatty HTTP client loggers used by the deepl package
_THIRD_PARTY_LOGGERS = ("urllib3", "urllib3.connectionpool", "requests", "deepl")


def setup_logging(
    config: LoggingConfig,
    console: Console | None = None,
    *,
    log_to_file: bool = True,
) -> None:
    """
    Configure the root logger from the logging section of the settings.

    Args:
        config: Logging configuration.
        console: Console the rich handler writes to (stderr when None).
        log_to_file: Also write a rotating log file at ``config.file``.
    """
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handlers: list[logging.Handler] = [
        RichHandler(
            console=console or Console(stderr=True),
            level=logging.WARNING,
            show_path=False,
            markup=False,
        )
    ]

    if log_to_file:
        config.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.file,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(config.format))
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in _THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
