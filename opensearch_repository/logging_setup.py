import logging
import logging.config

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class KeyValueFormatter(logging.Formatter):
    """Formatter that appends the ``extra`` context of a record as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not context:
            return line
        fields = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        return f"{line} | {fields}"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure process-wide logging once and return the package logger.

    Args:
        level (str): Log level name applied to the console handler and root logger.

    Returns:
        logging.Logger: The ``opensearch_repository`` logger.
    """
    level = level.upper()
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "key_value": {
                "()": KeyValueFormatter,
                "format": "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "key_value",
                "level": level,
                "stream": "ext://sys.stdout",
            },
        },
        "root": {
            "handlers": ["console"],
            "level": level,
        },
    }

    logging.config.dictConfig(logging_config)

    # opensearch-py logs every request at INFO
    logging.getLogger("opensearch").setLevel(
        logging.DEBUG if level == "DEBUG" else logging.WARNING
    )

    return logging.getLogger("opensearch_repository")
