"""Logging setup shared by the client and the scripts."""
import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .config import Config

PACKAGE_LOGGER = "daily_fantasy"
DEBUG_FORMAT = "%(asctime)s: %(message)s"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_debug_handler: Optional[logging.Handler] = None


def debug_enabled() -> bool:
    """Check the DEBUG environment toggle."""
    return bool(os.environ.get("DEBUG"))


def enable_debug_logging(force: bool = False) -> bool:
    """Send timestamped package diagnostics to stdout when DEBUG is set.

    Safe to call repeatedly; the handler is attached once.

    Args:
        force: Attach the handler even if DEBUG is not set

    Returns:
        True if diagnostics are on
    """
    global _debug_handler
    if not (force or debug_enabled()):
        return False

    if _debug_handler is None:
        _debug_handler = logging.StreamHandler(sys.stdout)
        _debug_handler.setFormatter(logging.Formatter(DEBUG_FORMAT))
        _debug_handler.setLevel(logging.DEBUG)

        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.addHandler(_debug_handler)
        package_logger.setLevel(logging.DEBUG)

    return True


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure process logging for scripts."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def configure_logging(
    config: "Config",
    level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """Configure logging from the loaded settings.

    Args:
        config: Loaded configuration; `log_level` and `debug` are applied
        level: Overrides `config.log_level` (e.g. from a --log-level flag)
        log_file: Optional log file path
    """
    setup_logging(level or config.log_level, log_file)
    enable_debug_logging(force=config.debug)
