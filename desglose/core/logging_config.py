# desglose/core/logging_config.py
"""
Logging setup for the hours tracker.

Development logs go to a colored console and a small plain-text file.
Production (`PRODUCTION=true`) logs JSON lines to `LOG_DIR/app.log` and
warnings to stdout.
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

CONSOLE_FORMAT = "%(levelname)-8s %(asctime)s [%(name)s] %(message)s"
FILE_FORMAT = "%(levelname)s %(asctime)s [%(name)s:%(lineno)d] %(message)s"


def is_production() -> bool:
    return os.getenv("PRODUCTION", "false").lower() == "true"


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    `extra_fields` passed through `extra=` and the fields of an active
    `LogContext` are merged into the top level.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(getattr(record, "context", {}))
        log_data.update(getattr(record, "extra_fields", {}))
        return json.dumps(log_data, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # other handlers see the plain name
            record.levelname = levelname


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(production: bool | None = None, log_dir: Path | None = None) -> None:
    """
    Replace the root logger's handlers.

    Args:
        production: Defaults to the `PRODUCTION` environment variable
        log_dir: Defaults to the `LOG_DIR` environment variable, or `logs`
    """
    if production is None:
        production = is_production()
    log_dir = log_dir or Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    if production:
        level = logging.INFO
        console = _handler(logging.StreamHandler(sys.stdout), logging.WARNING, JSONFormatter())
        file_formatter: logging.Formatter = JSONFormatter()
        max_bytes, backup_count = 10_000_000, 5
    else:
        level = logging.DEBUG
        console = _handler(
            logging.StreamHandler(sys.stdout),
            logging.DEBUG,
            ColoredFormatter(fmt=CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"),
        )
        file_formatter = logging.Formatter(FILE_FORMAT)
        max_bytes, backup_count = 5_000_000, 2

    app_file = logging.handlers.RotatingFileHandler(
        log_dir / "app.log",
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for old in root_logger.handlers[:]:
        root_logger.removeHandler(old)
        old.close()
    root_logger.addHandler(console)
    root_logger.addHandler(_handler(app_file, level, file_formatter))

    logging.getLogger("watchfiles").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging configured (production={production})",
        extra={"extra_fields": {"log_dir": str(log_dir.absolute())}},
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Attach fields to every record created inside the block.

    Usage:
        with LogContext(action="toggle_holiday"):
            logger.info("Holiday toggled")
    """

    def __init__(self, **fields):
        self.fields = fields
        self.old_factory = None

    def __enter__(self):
        self.old_factory = old_factory = logging.getLogRecordFactory()

        def record_factory(*args, **kwargs):
            record = old_factory(*args, **kwargs)
            record.context = {**getattr(record, "context", {}), **self.fields}
            return record

        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        logging.setLogRecordFactory(self.old_factory)
