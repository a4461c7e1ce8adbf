"""
backend/shoreline/core/logging.py

Logging setup for the Shoreline Woodworks site.
Request handlers, the Cloudinary wrapper and the contact mailer all log
through the standard `logging` module; this module wires the output:
- colorlog on the console
- backend/logs/shoreline.log, rotated at 1MB with 5 backups
- backend/logs/errors.log for ERROR and above
- LOG_LEVEL from settings sets the root level

Call `init_logging()` once before the app is created.
"""

import os
from logging.config import dictConfig

from shoreline.core.config import settings

LOG_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "logs"))
LINE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "cloudinary", "httpx")


def build_logging_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {"format": LINE_FORMAT},
            "console": {
                "()": "colorlog.ColoredFormatter",
                "format": f"%(log_color)s{LINE_FORMAT}",
                "log_colors": {
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "bold_red",
                },
            },
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "console"},
            "site_file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": os.path.join(LOG_DIR, "shoreline.log"),
                "maxBytes": 1024 * 1024,
                "backupCount": 5,
                "formatter": "plain",
                "encoding": "utf-8",
            },
            "error_file": {
                "class": "logging.FileHandler",
                "filename": os.path.join(LOG_DIR, "errors.log"),
                "level": "ERROR",
                "formatter": "plain",
                "encoding": "utf-8",
            },
        },
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        "root": {"level": level, "handlers": ["console", "site_file", "error_file"]},
    }


def init_logging(level: str | None = None) -> None:
    """Creates the log directory and applies the logging config."""
    os.makedirs(LOG_DIR, exist_ok=True)
    dictConfig(build_logging_config((level or settings.LOG_LEVEL).upper()))
