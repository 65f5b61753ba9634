import logging
import logging.config

from familyhub.config import settings


def setup_logging() -> None:
    """Setup centralized logging configuration for the application"""
    level = settings.LOG_LEVEL.upper()

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "detailed",
                "stream": "ext://sys.stdout"
            },
        },
        "loggers": {
            "": {  # Root logger
                "level": level,
                "handlers": ["console"]
            },
            "familyhub": {
                "level": "DEBUG" if settings.DEBUG else level,
                "handlers": ["console"],
                "propagate": False
            },
            "uvicorn": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False
            },
        }
    }

    logging.config.dictConfig(logging_config)

    logger = logging.getLogger(__name__)
    logger.info("Logging configuration initialized")
