"""Structured Logging — one JSON object per line for the portal's log pipeline.

Invariants:
    - Every line carries ts, level, logger, msg and service
    - Request/domain extras (subject_id, error_code, path, method, event_id,
      club_id, resolution) appear only when set on the record
    - setup_logging is idempotent: repeated calls replace, never stack, its handler
    - fmt="text" gives a human-readable line for local development
"""

import json
import logging
from datetime import datetime, timezone

SERVICE_NAME = "campus-portal"

_EXTRA_FIELDS = (
    "subject_id", "error_code", "path", "method",
    "event_id", "club_id", "resolution",
)

# Chatty third-party loggers pinned to WARNING regardless of app level.
_QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine")


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "service": SERVICE_NAME,
        }
        payload.update({
            key: record.__dict__[key]
            for key in _EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class _PortalHandler(logging.StreamHandler):
    """Marker subclass so setup_logging can find its own handler."""


def _text_formatter() -> logging.Formatter:
    return logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s")


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _PortalHandler)]:
        root.removeHandler(existing)

    handler = _PortalHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else _text_formatter())
    root.addHandler(handler)
    root.setLevel(logging.getLevelNamesMapping().get(level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
