"""
Structured logging for esdocs with request-id correlation.

The request-id bound in the current context is logged with every record
and also sent to the engine as the ``X-Opaque-Id`` header, so client-side
log lines can be matched against the engine's slow log and task list.

Usage::

    from esdocs.logging import configure_logging, request_scope
    configure_logging()                 # JSON to stderr, INFO level
    with request_scope("import-42"):
        doc_type.add_document(doc)      # logs and X-Opaque-Id carry "import-42"
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone

OPAQUE_ID_HEADER = "X-Opaque-Id"

_request_id_var: ContextVar[str] = ContextVar("esdocs_request_id", default="")

_RESERVED_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()) | {
    "request_id",
    "message",
    "asctime",
}


def bind_request_id(request_id: str | None = None) -> str:
    """Bind *request_id* to the current context, generating one if omitted."""
    rid = request_id or uuid.uuid4().hex[:16]
    _request_id_var.set(rid)
    return rid


def get_request_id() -> str:
    """Return the bound request-id, or ``""``."""
    return _request_id_var.get()


@contextmanager
def request_scope(request_id: str | None = None) -> Iterator[str]:
    """Bind a request-id for the duration of a ``with`` block, then restore the previous one."""
    token = _request_id_var.set(request_id or uuid.uuid4().hex[:16])
    try:
        yield _request_id_var.get()
    finally:
        _request_id_var.reset(token)


class _RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id_var.get()  # type: ignore[attr-defined]
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line.

    Always present: ``timestamp``, ``level``, ``logger``, ``message``.
    ``request_id`` is added when bound. Values passed through ``extra=``
    (for example ``index``, ``doc_type``, ``status``) are merged at the top
    level.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        rid = getattr(record, "request_id", "") or _request_id_var.get()
        if rid:
            entry["request_id"] = rid

        entry.update(
            (key, val) for key, val in record.__dict__.items() if key not in _RESERVED_ATTRS
        )

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_logging(
    level: int = logging.INFO,
    json_format: bool = True,
) -> logging.Logger:
    """Attach a single stderr handler to the ``esdocs`` logger and return it.

    Args:
        level: Logging level (default ``logging.INFO``).
        json_format: JSON lines when ``True``; otherwise a plain text format
            that still shows the request-id.
    """
    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-5s [%(request_id)s] %(name)s - %(message)s",
                defaults={"request_id": ""},
            )
        )
    handler.addFilter(_RequestIdFilter())

    root = logging.getLogger("esdocs")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
    return root
