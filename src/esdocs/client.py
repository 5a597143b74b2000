"""
esdocs client: request dispatch, partial updates and bulk delegation.

``ESClient`` owns the transport and the validated configuration and hands
out :class:`~esdocs.index.Index` facades that share both. Every request
goes through :meth:`ESClient.request`, which raises
:class:`~esdocs.models.ResponseError` for any non-success answer; the
facades decide which of those mean "not found".

Usage:
    from esdocs import Document, ESClient

    with ESClient() as client:
        posts = client.get_index("blog").get_type("post")
        response = posts.add_document(Document(data={"title": "Hello"}, auto_populate=True))
        fetched = posts.get_document(response.get("_id"))
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterable

import httpx

from esdocs.bulk import OP_DELETE, OP_UPDATE, Action, Bulk, BulkResponseSet
from esdocs.config import ESConfig
from esdocs.document import Document, Script, UpdatePayload
from esdocs.index import Index
from esdocs.models import InvalidArgumentError, InvalidStateError, ResponseError
from esdocs.options import UPDATE_PARAMS
from esdocs.paths import build_path, join_path
from esdocs.response import Response, raise_for_response
from esdocs.transport import Transport
from esdocs.transport.http import HttpTransport

logger = logging.getLogger(__name__)


def _elapsed_ms(t0: float) -> float:
    return (time.monotonic() - t0) * 1000


def _update_body(payload: UpdatePayload) -> dict[str, Any]:
    """Request body for the ``_update`` endpoint."""
    match payload:
        case Script():
            body = payload.to_dict()
            if payload.upsert is not None:
                body["upsert"] = dict(payload.upsert.data)
        case Document():
            body = {"doc": dict(payload.data)}
            if payload.doc_as_upsert:
                body["doc_as_upsert"] = True
            elif payload.upsert is not None:
                body["upsert"] = dict(payload.upsert.data)
        case _:
            raise InvalidArgumentError(
                f"update payload must be a Document or Script, got {type(payload).__name__}"
            )
    return body


class ESClient:
    """Client for one search engine cluster.

    Holds a persistent transport (by default an httpx connection pool) and
    is usable as a context manager.

    Usage:
        with ESClient(ESConfig(base_url="http://es:9200")) as client:
            client.get_index("blog").get_type("post").exists()
    """

    def __init__(
        self,
        config: ESConfig | None = None,
        *,
        transport: Transport | None = None,
        _transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config or ESConfig.from_env()
        self._transport: Transport = transport or HttpTransport(
            self._config, _transport=_transport
        )
        self._closed = False

        logger.debug(
            "ESClient created base_url=%s transport=%s auto_populate=%s",
            self._config.base_url,
            type(self._transport).__name__,
            self._config.auto_populate,
        )

    @property
    def config(self) -> ESConfig:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    def get_index(self, name: str) -> Index:
        return Index(self, name)

    def request(
        self,
        path: str,
        method: str = "GET",
        data: dict[str, Any] | list[Any] | str | None = None,
        params: dict[str, Any] | None = None,
    ) -> Response:
        """Send one request and return the response if it is ok.

        Raises:
            ResponseError: The engine answered with a non-2xx status or a
                body-level ``error``.
            ESConnectionError: The engine could not be reached.
            ESResponseError: The answer could not be decoded.
        """
        if self._closed:
            raise RuntimeError("ESClient is closed")

        t0 = time.monotonic()
        response = self._transport.send(method, path, data, params)
        try:
            raise_for_response(response)
        except ResponseError:
            logger.warning(
                "engine %s %s returned HTTP %d (%.1fms): %s",
                method,
                path,
                response.status_code,
                _elapsed_ms(t0),
                response.error_message(),
            )
            raise
        logger.debug(
            "engine %s %s status=%d elapsed_ms=%.1f",
            method,
            path,
            response.status_code,
            _elapsed_ms(t0),
        )
        return response

    # -- Partial updates -----------------------------------------------------

    def update_document(
        self,
        doc_id: str | int,
        data: UpdatePayload,
        index: str,
        doc_type: str,
    ) -> Response:
        """Partially update the document *doc_id* through the ``_update`` endpoint.

        The document's ``_version`` is written back after a successful
        update; with autopopulation on, a ``get._source`` in the answer
        (requested with the ``fields`` option) replaces the document data.
        """
        body = _update_body(data)
        path = join_path(index, build_path(doc_type, doc_id, "_update"))
        response = self.request(path, "POST", body, data.request_params(UPDATE_PARAMS))

        if isinstance(data, Document):
            version = response.get("_version")
            if isinstance(version, int):
                data.version = version
            source = (response.get("get") or {}).get("_source")
            if (data.auto_populate or self._config.auto_populate) and isinstance(source, dict):
                data.data = dict(source)
        return response

    # -- Bulk ------------------------------------------------------------------

    def bulk(self) -> Bulk:
        return Bulk(self)

    def add_documents(self, docs: Iterable[Document]) -> BulkResponseSet:
        """Index *docs* in one bulk request."""
        docs = list(docs)
        if not docs:
            raise InvalidArgumentError("array has to consist of at least one element")
        return Bulk(self).add_documents(docs).send()

    def update_documents(self, docs: Iterable[Document | Script]) -> BulkResponseSet:
        """Partially update every document or script in one bulk request."""
        docs = list(docs)
        if not docs:
            raise InvalidArgumentError("array has to consist of at least one element")
        bulk = Bulk(self)
        for doc in docs:
            if not doc.has_id():
                raise InvalidStateError("update actions require a document id")
            bulk.add_action(Action(OP_UPDATE, doc))
        return bulk.send()

    def delete_documents(self, docs: Iterable[Document]) -> BulkResponseSet:
        """Delete *docs* in one bulk request."""
        docs = list(docs)
        if not docs:
            raise InvalidArgumentError("array has to consist of at least one element")
        return Bulk(self).add_documents(docs, OP_DELETE).send()

    def delete_ids(
        self,
        ids: Iterable[str | int],
        index: str,
        doc_type: str,
        routing: str | None = None,
    ) -> BulkResponseSet:
        """Delete the documents with *ids* from *index*/*doc_type* in one bulk request."""
        ids = list(ids)
        if not ids:
            raise InvalidArgumentError("array has to consist of at least one element")
        bulk = Bulk(self).set_index(index).set_type(doc_type)
        for doc_id in ids:
            doc = Document(id=doc_id, index=index, type=doc_type)
            doc.options.routing = routing
            bulk.add_action(Action(OP_DELETE, doc))
        return bulk.send()

    # -- Lifecycle -------------------------------------------------------------

    def close(self) -> None:
        """Close the underlying transport."""
        if not self._closed:
            self._transport.close()
            self._closed = True
            logger.debug("ESClient closed base_url=%s", self._config.base_url)

    def __enter__(self) -> ESClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
