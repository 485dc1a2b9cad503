from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import NoReturn, Optional

DEFAULT_LOG_PATH = "./installer.log"

LOG_FORMAT = "%(asctime)s | %(levelname)-5s | %(funcName)s:%(lineno)d | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

FATAL = logging.CRITICAL + 10
logging.addLevelName(FATAL, "FATAL")


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.DEBUG,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Every record lands in the log file as
    ``timestamp | LEVEL | function:line | message``; the console only shows
    the message text at INFO and above.

    Notes:
    - If the requested path is not writable we fall back to a log file in the
      current working directory and keep going.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_lnos_configured", False):
        return getattr(logger, "_lnos_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        chosen_path = log_path
    except OSError:
        fallback = str(Path.cwd() / "installer.log")
        file_handler = logging.FileHandler(fallback)
        chosen_path = fallback
    file_handler.setFormatter(fmt)
    file_handler.setLevel(level)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter("%(message)s"))
        console.setLevel(logging.INFO)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_lnos_configured", True)
    setattr(logger, "_lnos_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path


def log_fatal(logger: logging.Logger, msg: str, *args: object) -> NoReturn:
    """Write a FATAL record attributed to the caller and exit with status 1."""

    logger.log(FATAL, msg, *args, stacklevel=2)
    raise SystemExit(1)
