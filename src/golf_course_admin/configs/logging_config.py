from __future__ import annotations

import logging
import sys
from typing import Any


def setup_logging(level: str = "INFO") -> None:
    """
    Structured-enough logging for ops users.

    In production you would route this to files and/or a log aggregator.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    handler.setFormatter(formatter)

    # Replace existing handlers to avoid duplicates under reload.
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _kv(details: dict[str, Any]) -> str:
    return " ".join(f"{k}={v}" for k, v in sorted(details.items()))


def audit(log: logging.Logger, action: str, user_id: Any, **details: Any) -> None:
    """Record a sensitive mutation (user created, role changed, ...)."""
    log.info("AUDIT action=%s user_id=%s %s", action, user_id, _kv(details))


def security_event(log: logging.Logger, event: str, **details: Any) -> None:
    """Record an authentication or authorization denial."""
    log.warning("SECURITY event=%s %s", event, _kv(details))
