import logging
import logging.config
import os

from jlpt_tryout.core.config import settings


def build_logging_config(log_level: str = None, log_dir: str = None, log_to_file: bool = None) -> dict:
    log_level = (log_level or settings.LOG_LEVEL).upper()
    log_dir = log_dir or settings.LOG_DIR
    log_to_file = settings.LOG_TO_FILE if log_to_file is None else log_to_file

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "detailed",
            "stream": "ext://sys.stdout"
        }
    }
    if log_to_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": "detailed",
            "filename": os.path.join(log_dir, "app.log"),
            "maxBytes": 10485760,
            "backupCount": 5
        }
        handlers["error_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "ERROR",
            "formatter": "detailed",
            "filename": os.path.join(log_dir, "error.log"),
            "maxBytes": 10485760,
            "backupCount": 5
        }

    app_handlers = ["console", "file"] if log_to_file else ["console"]

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": handlers,
        "root": {
            "level": log_level,
            "handlers": list(handlers)
        },
        "loggers": {
            "jlpt_tryout": {
                "level": log_level,
                "handlers": app_handlers,
                "propagate": False
            },
            "jlpt_tryout.middleware.logging": {
                "level": "INFO",
                "handlers": app_handlers,
                "propagate": False
            },
            "uvicorn.access": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False
            }
        }
    }


def configure_logging(**overrides):
    config = build_logging_config(**overrides)
    if "file" in config["handlers"]:
        os.makedirs(os.path.dirname(config["handlers"]["file"]["filename"]) or ".", exist_ok=True)
    logging.config.dictConfig(config)
