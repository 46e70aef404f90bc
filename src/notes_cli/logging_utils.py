from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "notes_cli"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "stage": getattr(record, "stage", ""),
            "message": record.getMessage(),
        }
        extra = getattr(record, "extra_fields", None)
        if isinstance(extra, dict):
            payload.update(extra)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def setup_logging(
    level: str = "INFO",
    log_path: Optional[Union[str, Path]] = None,
    *,
    force: bool = False,
    max_bytes: int = 5_000_000,
    backup_count: int = 5,
) -> logging.Logger:
    """Console logging through rich (stderr), plus a rotating JSON file when `log_path` is set."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    if force:
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()

    if logger.handlers:
        return logger

    console = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    console.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console)

    if log_path:
        path = Path(log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)


def log_event(logger: logging.Logger | logging.LoggerAdapter, level: str, stage: str, message: str, **fields: Any) -> None:
    fn = getattr(logger, level.lower(), logger.info)
    fn(message, extra={"stage": stage, "extra_fields": fields})
