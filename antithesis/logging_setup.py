"""Namespaced application logging.

All loggers live under the ``antithesis`` root. A single stream handler is
installed by ``configure_logging`` with either a human readable line format
(development) or one JSON object per line (production). ``get_logger`` hands
out ``LoggerAdapter`` instances that carry a namespace plus bound metadata
(e.g. ``tenant_id``) into every record.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

ROOT_LOGGER = "antithesis"

_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

_RESERVED = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


def _record_meta(record: logging.LogRecord) -> dict[str, Any]:
    meta = dict(getattr(record, "meta", None) or {})
    for key, value in record.__dict__.items():
        if key in _RESERVED or key in ("meta", "namespace"):
            continue
        meta[key] = value
    return meta


class HumanFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        ns = getattr(record, "namespace", None)
        prefix = f"{ts} {record.levelname.lower()} [{ns}]" if ns else f"{ts} {record.levelname.lower()}"
        meta = _record_meta(record)
        line = f"{prefix}: {record.getMessage()}"
        if meta:
            line += " " + json.dumps(meta, default=str)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname.lower(),
            "message": record.getMessage(),
        }
        ns = getattr(record, "namespace", None)
        if ns:
            payload["namespace"] = ns
        payload.update(_record_meta(record))
        if record.exc_info:
            payload["stack"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class AppLogger(logging.LoggerAdapter):
    """Adapter binding a namespace + metadata; accepts ``meta={...}`` per call."""

    def __init__(self, logger: logging.Logger, namespace: str | None, meta: dict[str, Any] | None = None):
        super().__init__(logger, {})
        self.namespace = namespace
        self.meta = dict(meta or {})

    def process(self, msg, kwargs):
        call_meta = kwargs.pop("meta", None) or {}
        extra = dict(kwargs.get("extra") or {})
        extra["namespace"] = self.namespace
        extra["meta"] = {**self.meta, **call_meta}
        kwargs["extra"] = extra
        return msg, kwargs

    def child(self, **meta: Any) -> AppLogger:
        return AppLogger(self.logger, self.namespace, {**self.meta, **meta})


def configure_logging(level: str = "info", fmt: str = "human", stream=None) -> logging.Logger:
    """(Re)install the single application handler. Safe to call repeatedly."""
    root = logging.getLogger(ROOT_LOGGER)
    for h in list(root.handlers):
        if getattr(h, "_antithesis", False):
            root.removeHandler(h)
    root.propagate = False
    if level == "none":
        root.disabled = True
        return root
    root.disabled = False
    root.setLevel(_LEVELS.get(level, logging.INFO))
    handler = logging.StreamHandler(stream or sys.stdout)
    handler._antithesis = True  # type: ignore[attr-defined]
    handler.setFormatter(JsonFormatter() if fmt == "json" else HumanFormatter())
    root.addHandler(handler)
    return root


def get_logger(namespace: str | None = None, **meta: Any) -> AppLogger:
    return AppLogger(logging.getLogger(ROOT_LOGGER), namespace, meta)


__all__ = [
    "AppLogger",
    "HumanFormatter",
    "JsonFormatter",
    "configure_logging",
    "get_logger",
]
