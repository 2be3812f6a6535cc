"""
Logging for the Valheim launcher.

One console handler on the root logger plus a rotating ``launcher.log`` in
the game's logs directory for the ``valheim.launcher`` tree. ``LOG_JSON``
switches both to one JSON object per line.
"""

from __future__ import annotations
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from .settings import Settings
from .fs_layout import build_layout

LAUNCHER_LOGGER = "valheim.launcher"
LOG_FILE_NAME = "launcher.log"
PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def build_formatter(settings: Settings) -> logging.Formatter:
    if settings.log_json:
        return JsonLineFormatter()
    return logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def _swap_file_handler(logger: logging.Logger, handler: RotatingFileHandler) -> None:
    for old in [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]:
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)


def setup_logging(settings: Settings) -> Path:
    """Configure handlers; safe to call again. Returns the launcher log file path."""
    level = settings.log_level.upper()
    formatter = build_formatter(settings)

    log_file = build_layout(settings).logs_dir / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers[:] = [console]
    root.setLevel(level)

    file_handler = RotatingFileHandler(log_file, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)
    _swap_file_handler(logging.getLogger(LAUNCHER_LOGGER), file_handler)
    return log_file


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
