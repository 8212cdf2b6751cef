# storefront/utils/logging.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

_configured = False


def setup_logging():
    global _configured
    if _configured:
        return

    log_level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    log_to_file = os.getenv("LOG_TO_FILE", "false").lower() == "true"
    log_file = os.getenv("LOG_FILE", "storefront.log")

    root = logging.getLogger()
    root.setLevel(log_level)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )

    # nie dublujemy handlerow (np. pytest/uvicorn maja swoje)
    if not root.handlers:
        ch = logging.StreamHandler(sys.stdout)
        ch.setLevel(log_level)
        ch.setFormatter(formatter)
        root.addHandler(ch)

        if log_to_file:
            try:
                fh = RotatingFileHandler(
                    log_file,
                    maxBytes=int(os.getenv("LOG_MAX_BYTES", str(2 * 1024 * 1024))),
                    backupCount=int(os.getenv("LOG_BACKUPS", "3")),
                )
                fh.setLevel(log_level)
                fh.setFormatter(formatter)
                root.addHandler(fh)
            except OSError as e:
                root.warning("Failed to initialize file logging: %s", e)

    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
