import logging.config

from app.core.config import settings


def get_logging_config(level: str, fmt: str) -> dict:
    formatter = "json" if fmt == "json" else "default"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            },
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
        },
        "handlers": {
            "default": {
                "formatter": formatter,
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {
            "level": level.upper(),
            "handlers": ["default"],
        },
    }


def setup_logging() -> None:
    logging.config.dictConfig(get_logging_config(settings.log_level, settings.log_format))
