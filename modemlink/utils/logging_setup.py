"""
Application logging.

Log records go to stderr, and optionally to a rotating file. stdout belongs
to the command line tool, which prints frames and decoded commands there.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler

from modemlink.config.models import LoggingConfig


LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Emits the per-frame TX/RX debug lines
FRAME_TRACE_LOGGER = "modemlink.protocol.link"


def _open_log_file(config: LoggingConfig) -> logging.Handler:
    return RotatingFileHandler(
        config.file,
        maxBytes=config.file_max_bytes,
        backupCount=config.file_backup_count,
        encoding="utf-8",
    )


def setup_logging(config: LoggingConfig) -> None:
    """
    Install handlers on the root logger, replacing any already there.

    Handlers carry no level of their own, so a logger set below the root
    level still gets through. ``trace_frames`` uses this to show every
    frame the command link sends or receives while the rest of the
    application stays at the configured level.

    Args:
        config: Logging configuration.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(config.level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if config.file:
        try:
            file_handler = _open_log_file(config)
        except OSError as e:
            root.error(f"Failed to create log file {config.file}: {e}")
        else:
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
            root.info(f"Logging to file: {config.file}")

    trace_logger = logging.getLogger(FRAME_TRACE_LOGGER)
    trace_logger.setLevel(logging.DEBUG if config.trace_frames else logging.NOTSET)

    root.debug(
        f"Logging initialized at level {config.level}"
        f" (frame trace {'on' if config.trace_frames else 'off'})"
    )
