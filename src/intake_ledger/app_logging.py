"""Logging configuration helpers."""

import logging


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the package logger.

    Called from `build_container`, so any screen that wires the ledger through
    the container gets ledger mutations and persistence warnings on stderr.
    """
    logger = logging.getLogger("intake_ledger")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
