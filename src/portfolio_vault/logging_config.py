"""Structured logging for vault operations.

Every line the core emits carries an ``event`` label plus the index and
operation it belongs to, so a log stream can be filtered per index or per
operation kind. Failures add the error's stable ``error_code`` and whether it
is ``retryable``.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict

DEFAULT_ENV = os.getenv("PORTFOLIO_VAULT_ENV", os.getenv("ENV", "local"))

# Attributes every LogRecord has; anything else arrived through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line with vault context hoisted to fixed keys.

    ``index_id`` and ``operation`` are always present (``null`` when a line
    is not tied to one). Remaining ``extra`` values such as amounts and
    totals are passed through unchanged.
    """

    def __init__(self, env: str | None = None) -> None:
        super().__init__()
        self.env = env or DEFAULT_ENV

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        log_time = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": log_time.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "event": getattr(record, "event", None),
            "env": getattr(record, "env", self.env),
            "index_id": getattr(record, "index_id", None),
            "operation": getattr(record, "operation", None),
        }

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, value)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging(
    level: int = logging.INFO, env: str | None = None, json_output: bool = True
) -> None:
    """Configure root logging with a stdout handler (JSON unless disabled)."""

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if json_output:
        handler.setFormatter(JsonFormatter(env=env))
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    root_logger.addHandler(handler)


def structured_log_extra(
    *,
    env: str | None = None,
    event: str | None = None,
    index_id: str | None = None,
    operation: str | None = None,
    account: str | None = None,
    **kwargs: Any,
) -> Dict[str, Any]:
    """Build logging extras for a vault event.

    ``account`` is only included when provided so harvest and configuration
    lines stay free of empty identifiers. Amounts, totals and other fields
    are forwarded via ``**kwargs``.
    """

    extra: Dict[str, Any] = {
        "event": event,
        "env": env or DEFAULT_ENV,
        "index_id": index_id,
        "operation": operation,
    }
    if account is not None:
        extra["account"] = account

    extra.update(kwargs)
    return extra


def error_log_extra(
    exc: BaseException,
    *,
    operation: str,
    account: str | None = None,
    index_id: str | None = None,
) -> Dict[str, Any]:
    """Extras for a rolled-back operation, tagged ``<operation>_failed``.

    Vault errors contribute their ``code`` and ``retryable`` flag; anything
    else is reported as ``unexpected_error`` so alerting can tell the two
    apart.
    """

    return structured_log_extra(
        event=f"{operation}_failed",
        index_id=index_id or getattr(exc, "index_id", None),
        operation=operation,
        account=account,
        error_code=getattr(exc, "code", "unexpected_error"),
        retryable=getattr(exc, "retryable", False),
    )


__all__: list[str] = [
    "JsonFormatter",
    "configure_logging",
    "structured_log_extra",
    "error_log_extra",
]
