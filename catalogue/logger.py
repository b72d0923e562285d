import logging
import os
import sys

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Attach a single stdout handler to the root logger, once."""

    global _configured
    root = logging.getLogger()
    if _configured:
        # An explicit level still wins after the first configuration
        if level:
            root.setLevel(getattr(logging, level.upper(), logging.INFO))
        return

    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, log_level, logging.INFO))

    # Avoid duplicate handlers when the host already configured logging
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        root.addHandler(handler)

    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
