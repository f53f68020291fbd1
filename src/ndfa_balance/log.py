from __future__ import annotations

import logging

FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def setup_logger(name: str = "ndfa_balance", level: int = logging.INFO) -> logging.Logger:
    """Attach a stream handler to the package logger (once) and set its level."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        ch = logging.StreamHandler()
        ch.setLevel(level)
        ch.setFormatter(logging.Formatter(FORMAT))
        logger.addHandler(ch)
    return logger
