import logging
import logging.config


def setup_logging(debug: bool = False) -> None:
    """
    Configure global log format
    Proxy logs follow the DEBUG flag; uvicorn logs at INFO, httpx only warns.
    """
    log_level = "DEBUG" if debug else "INFO"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                # uvicorn.error propagates here
                "uvicorn": {"handlers": ["console"], "level": "INFO", "propagate": False},
                "uvicorn.access": {"handlers": ["console"], "level": "INFO", "propagate": False},
                # httpx logs every request line at INFO, including retried ones
                "httpx": {"handlers": ["console"], "level": "WARNING", "propagate": False},
                "keyrelay": {"handlers": ["console"], "level": log_level, "propagate": False},
            },
        }
    )
