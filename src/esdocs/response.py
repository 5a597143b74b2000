"""
Engine responses and their interpretation into typed outcomes.

:class:`Response` is the raw result every transport returns. The helper
functions below hold the policy for turning it into success, a
:class:`~esdocs.models.NotFoundError`, or a
:class:`~esdocs.models.ResponseError`, so the facades never need to tell
"the request raised" apart from "the request returned 404 / found: false".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from esdocs.document import Document
from esdocs.models import NotFoundError, ResponseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Response:
    """Decoded engine response.

    Args:
        status_code: HTTP status of the call.
        body: Decoded JSON body (``{}`` for HEAD and empty bodies).
        transfer_info: Transfer metadata such as ``method``, ``path`` and
            ``elapsed_ms``.
    """

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)
    transfer_info: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """2xx status and no body-level ``error``."""
        return 200 <= self.status_code < 300 and not self.body.get("error")

    @property
    def found(self) -> bool:
        """False only when the body explicitly reports ``found: false``."""
        return self.body.get("found") is not False

    def get(self, key: str, default: Any = None) -> Any:
        return self.body.get(key, default)

    def error_message(self) -> str:
        error = self.body.get("error")
        if isinstance(error, dict):
            reason = error.get("reason") or error.get("type") or ""
            return str(reason) or str(error)[:500]
        if error:
            return str(error)[:500]
        if self.body:
            return str(self.body)[:500]
        return "no response body"


def raise_for_response(response: Response) -> Response:
    """Return *response* if it is ok, else raise :class:`ResponseError`."""
    if not response.ok:
        raise ResponseError(response)
    return response


def is_not_found(exc: ResponseError) -> bool:
    """True when an error response means the addressed document is absent."""
    return exc.status_code == 404 or exc.response.found is False


def ensure_found(response: Response, doc_id: Any) -> Response:
    """Raise :class:`NotFoundError` unless *response* is a 200 with a found document.

    An empty body counts as absent.
    """
    if response.status_code != 200 or not response.body or not response.found:
        raise NotFoundError(f"doc id {doc_id} not found", doc_id=doc_id)
    return response


def populate_document(doc: Document, response: Response, auto_populate: bool) -> None:
    """Write server-assigned id and version back onto *doc* after a write.

    The id is assigned only when ``(doc.auto_populate or auto_populate)``
    holds, the response is ok and the document still has no id. The
    version is assigned whenever an ok response carries one.
    """
    if response.ok:
        apply_write_result(doc, response.body, auto_populate)


def apply_write_result(
    doc: Document,
    body: dict[str, Any],
    auto_populate: bool,
) -> None:
    """Copy ``_id`` and ``_version`` from a successful write result onto *doc*."""
    if (doc.auto_populate or auto_populate) and not doc.has_id():
        new_id = body.get("_id")
        if new_id is not None:
            doc.id = new_id
            logger.debug("assigned server id=%s to document", new_id)
    version = body.get("_version")
    if isinstance(version, int):
        doc.version = version


def document_from_response(
    response: Response,
    *,
    doc_id: str | int | None = None,
    doc_type: str | None = None,
    index: str | None = None,
) -> Document:
    """Build a new :class:`Document` from a get response.

    A ``fields`` projection wins over ``_source``; neither gives empty data.
    The requested *doc_id* is used when the body carries no ``_id``.
    """
    body = response.body
    if body.get("fields"):
        data = dict(body["fields"])
    elif body.get("_source") is not None:
        data = dict(body["_source"])
    else:
        data = {}

    version = body.get("_version")
    return Document(
        id=body.get("_id", doc_id),
        data=data,
        type=body.get("_type", doc_type),
        index=body.get("_index", index),
        version=version if isinstance(version, int) else None,
    )
