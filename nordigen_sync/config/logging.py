import logging
import logging.config
import sys
from typing import Dict, Any, Optional
from pathlib import Path

from nordigen_sync.config.settings import settings

ROOT_LOGGER_NAME = "nordigen_sync"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s"


def build_logging_config(log_level: str, log_file: Optional[str] = None) -> Dict[str, Any]:
    """Build the ``dictConfig`` mapping for the package loggers.

    Package loggers write to stdout at ``log_level``; ``httpx`` is kept at
    WARNING so request lines do not drown out sync progress. With
    ``log_file`` every handler also writes to a rotating file.
    """
    handlers = ["console"]
    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "formatter": "default",
                "level": log_level,
            },
        },
        "loggers": {
            ROOT_LOGGER_NAME: {"level": log_level, "handlers": handlers, "propagate": False},
            "httpx": {"level": "WARNING", "handlers": handlers, "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": handlers},
    }

    if log_file:
        config["formatters"]["detailed"] = {"format": FILE_LOG_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"}
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
            "formatter": "detailed",
            "level": log_level,
        }
        # All loggers share the one list
        handlers.append("file")

    return config


def setup_logging(log_level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure package logging; the level defaults to ``settings.log_level``."""
    log_level = (log_level or settings.log_level).upper()

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(build_logging_config(log_level, log_file))


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance under the package namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def mask_sensitive_data(data: str, mask_length: int = 4) -> str:
    """Mask sensitive data for logging."""
    if not data or len(data) <= mask_length * 2:
        return "*" * len(data) if data else ""

    return f"{data[:mask_length]}{'*' * (len(data) - mask_length * 2)}{data[-mask_length:]}"
