"""
Logging configuration for the engine.

Library modules only emit records; the handler is installed by the host
through setup_logging, never on import.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "skirmish"


def setup_logging(level: int | str = logging.INFO, console: Console | None = None) -> RichHandler:
    """
    Installs a rich handler on the root logger.

    Calling it again replaces the handler installed by a previous call
    instead of stacking a second one.

    Args:
        level (int | str): Logging level, either numeric or a name such as "DEBUG".
        console (Console | None): Console to render to. Defaults to a terminal console.

    Returns:
        RichHandler: The installed handler.

    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown logging level: {level!r}")

    handler = RichHandler(
        console=console or Console(width=120, force_terminal=True, force_jupyter=False),
        show_time=True,
        show_level=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s", datefmt="[%X]"))

    root = logging.getLogger()
    for old in [h for h in root.handlers if getattr(h, "_skirmish", False)]:
        root.removeHandler(old)
    handler._skirmish = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)
    log_info("Logging configured", {"level": logging.getLevelName(level)})
    return handler


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Returns the engine logger, or one of its children.

    Args:
        name (str | None): Child name, e.g. "dice". None for the engine logger.

    Returns:
        logging.Logger: The logger.

    """
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)


logger = get_logger()


def _log(level: int, message: str, context: dict[str, Any] | None) -> None:
    if context:
        pairs = " ".join(f"{k}={v}" for k, v in context.items())
        message = f"{message} [{pairs}]"
    logger.log(level, message)


def log_error(message: str, context: dict[str, Any] | None = None) -> None:
    """Logs an error with `key=value` context."""
    _log(logging.ERROR, message, context)


def log_warning(message: str, context: dict[str, Any] | None = None) -> None:
    """Logs a warning with `key=value` context."""
    _log(logging.WARNING, message, context)


def log_info(message: str, context: dict[str, Any] | None = None) -> None:
    _log(logging.INFO, message, context)


def log_debug(message: str, context: dict[str, Any] | None = None) -> None:
    _log(logging.DEBUG, message, context)
