# finance_app/core/logging_config.py
import logging
from logging.config import dictConfig
from typing import Union


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"}
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "level": level,
                }
            },
            "loggers": {
                "": {"handlers": ["console"], "level": level},
                "uvicorn": {"handlers": ["console"], "level": level, "propagate": False},
                # SQL echo is noisy, keep it at WARNING unless asked for explicitly
                "sqlalchemy.engine": {"handlers": ["console"], "level": logging.WARNING, "propagate": False},
            },
        }
    )
