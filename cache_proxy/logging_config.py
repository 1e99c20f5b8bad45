import logging
import logging.config

from cache_proxy.config import get_settings

# Parent of the per-family loggers (cache_proxy.channels.claude / .codex / .gemini)
CHANNEL_LOGGER = "cache_proxy.channels"


class ChannelFilter(logging.Filter):
    """Expose the channel family (last segment of the logger name) as %(channel)s"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.channel = record.name.rsplit(".", 1)[-1]
        return True


def setup_logging():
    """
    Configure global log format
    Proxy and uvicorn logs share one console format; channel family logs are
    tagged with the family name instead of the module path.
    """
    settings = get_settings()
    log_level = "DEBUG" if settings.DEBUG else "INFO"

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "channel": {
                "format": "[%(asctime)s] [%(levelname)s] [%(channel)s] %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "filters": {
            "channel": {"()": ChannelFilter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stdout",
            },
            "channel_console": {
                "class": "logging.StreamHandler",
                "formatter": "channel",
                "filters": ["channel"],
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "root": {
                "handlers": ["console"],
                "level": log_level,
            },
            # uvicorn.error propagates here
            "uvicorn": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            },
            "cache_proxy": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": False,
            },
            CHANNEL_LOGGER: {
                "handlers": ["channel_console"],
                "level": log_level,
                "propagate": False,
            },
            # Outbound request lines duplicate the forwarder's own logs
            "httpx": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)
