"""
Document facade: document operations on one type inside an index.

Every operation resolves its path with :func:`~esdocs.paths.build_path`,
sends it through :meth:`Index.request <esdocs.index.Index.request>` and
reads the answer with the helpers in :mod:`esdocs.response`. Argument
problems are raised before any request is made.

Usage:
    posts = client.get_index("blog").get_type("post")
    posts.add_document(Document(id=1, data={"title": "Hello"}))
    doc = posts.get_document(1)
    posts.delete_by_id(1)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping as MappingABC
from typing import TYPE_CHECKING, Any, Iterable, Protocol, runtime_checkable

from esdocs.bulk import BulkResponseSet
from esdocs.document import Document, Script, UpdatePayload, has_identifier
from esdocs.mapping import Mapping
from esdocs.models import (
    ConfigurationMissingError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    ResponseError,
    ResultSet,
)
from esdocs.options import (
    DELETE_PARAMS,
    INDEX_PARAMS,
    DeleteByQueryOptions,
    DeleteOptions,
    GetOptions,
)
from esdocs.paths import build_path
from esdocs.response import (
    Response,
    document_from_response,
    ensure_found,
    is_not_found,
    populate_document,
)
from esdocs.search import Query, Search, SearchOptions

if TYPE_CHECKING:
    from esdocs.index import Index

logger = logging.getLogger(__name__)


@runtime_checkable
class Serializer(Protocol):
    """Turns an application object into document data."""

    def __call__(self, obj: Any) -> MappingABC[str, Any]: ...


class DocType:
    """A named document type inside an :class:`~esdocs.index.Index`."""

    def __init__(self, index: Index, name: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgumentError("type name must be a non-empty string")
        self._index = index
        self._name = name
        self._serializer: Serializer | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def index(self) -> Index:
        return self._index

    @property
    def auto_populate(self) -> bool:
        return self._index.client.config.auto_populate

    def request(
        self,
        path: str,
        method: str = "GET",
        data: dict[str, Any] | list[Any] | str | None = None,
        params: dict[str, Any] | None = None,
    ) -> Response:
        return self._index.request(path, method, data, params)

    # -- Writes ----------------------------------------------------------------

    def add_document(self, doc: Document) -> Response:
        """Index *doc*, replacing any document with the same id.

        A document with an id is PUT to its own address; one without is
        POSTed to the type so the engine assigns the id.
        """
        self._stamp(doc)
        params = doc.request_params(INDEX_PARAMS)
        if doc.has_id():
            path = build_path(self._name, doc.id)
            response = self.request(path, "PUT", dict(doc.data), params)
        else:
            response = self.request(self._name, "POST", dict(doc.data), params)

        populate_document(doc, response, self.auto_populate)
        logger.debug(
            "indexed document type=%s id=%s version=%s", self._name, doc.id, doc.version
        )
        return response

    def set_serializer(self, serializer: Serializer) -> DocType:
        if not callable(serializer):
            raise InvalidArgumentError("serializer must be callable")
        self._serializer = serializer
        return self

    def add_object(self, obj: Any, doc: Document | None = None) -> Response:
        """Serialize *obj* into *doc* (or a new document) and index it.

        Raises:
            ConfigurationMissingError: No serializer has been set.
        """
        doc = self._serialize(obj, doc)
        return self.add_document(doc)

    def add_documents(self, docs: Iterable[Document]) -> BulkResponseSet:
        return self._index.add_documents(self._stamp_all(docs))

    def add_objects(self, objs: Iterable[Any]) -> BulkResponseSet:
        return self.add_documents([self._serialize(obj) for obj in objs])

    # -- Updates ---------------------------------------------------------------

    def update_document(self, data: UpdatePayload) -> Response:
        """Partially update a document with a :class:`Document` or :class:`Script`.

        Raises:
            InvalidArgumentError: *data* is neither a Document nor a Script.
            InvalidStateError: *data* carries no id.
        """
        if not isinstance(data, (Document, Script)):
            raise InvalidArgumentError(
                f"update payload must be a Document or Script, got {type(data).__name__}"
            )
        if not data.has_id():
            raise InvalidStateError("document or script id required for update")
        data.type = self._name
        return self._index.update_document(data)

    def update_documents(self, docs: Iterable[Document | Script]) -> BulkResponseSet:
        return self._index.update_documents(self._stamp_all(docs))

    # -- Reads -----------------------------------------------------------------

    def get_document(self, doc_id: str | int, options: GetOptions | None = None) -> Document:
        """Fetch one document by id.

        Raises:
            NotFoundError: The engine answered 404, a non-200 status, an
                empty body or ``found: false``.
        """
        params = options.to_params() if options else None
        try:
            response = self.request(build_path(self._name, doc_id), "GET", None, params)
        except ResponseError as exc:
            raise NotFoundError(f"doc id {doc_id} not found", doc_id=doc_id) from exc

        ensure_found(response, doc_id)
        return document_from_response(
            response, doc_id=doc_id, doc_type=self._name, index=self._index.name
        )

    def exists(self) -> bool:
        """True if the type exists in the index, i.e. HEAD answers exactly 200."""
        try:
            response = self.request(self._name, "HEAD")
        except ResponseError as exc:
            logger.debug("exists check type=%s status=%d", self._name, exc.status_code)
            return False
        return response.status_code == 200

    # -- Deletes ---------------------------------------------------------------

    def delete_document(self, doc: Document) -> Response:
        """Delete *doc*, sending its version and delete options along."""
        return self._delete(doc.id, doc.request_params(DELETE_PARAMS))

    def delete_by_id(
        self,
        doc_id: str | int | None,
        options: DeleteOptions | None = None,
    ) -> Response:
        """Delete the document with *doc_id*.

        Raises:
            InvalidArgumentError: *doc_id* is empty or blank.
            NotFoundError: The engine reports ``found: false``.
        """
        return self._delete(doc_id, options.to_params() if options else None)

    def _delete(self, doc_id: str | int | None, params: dict[str, Any] | None) -> Response:
        if not has_identifier(doc_id):
            raise InvalidArgumentError("delete requires a non-empty document id")

        path = build_path(self._name, doc_id)
        try:
            response = self.request(path, "DELETE", None, params)
        except ResponseError as exc:
            if is_not_found(exc):
                raise NotFoundError(f"doc id {doc_id} not found", doc_id=doc_id) from exc
            raise

        if not response.found:
            raise NotFoundError(f"doc id {doc_id} not found", doc_id=doc_id)
        return response

    def delete_documents(self, docs: Iterable[Document]) -> BulkResponseSet:
        return self._index.delete_documents(self._stamp_all(docs))

    def delete_ids(self, ids: Iterable[str | int], routing: str | None = None) -> BulkResponseSet:
        return self._index.delete_ids(ids, self._name, routing)

    def delete_by_query(
        self,
        query: Any,
        options: DeleteByQueryOptions | None = None,
    ) -> Response:
        """Delete every document matching *query*.

        A string is sent as a ``q`` query-string query; anything else is
        normalized with :meth:`Query.create` and sent as the request body.
        """
        params = options.to_params() if options else {}
        path = build_path(self._name, None, "_query")
        if isinstance(query, str):
            params["q"] = query
            return self.request(path, "DELETE", None, params)

        body = Query.create(query).to_dict()
        return self.request(path, "DELETE", {"query": body.get("query", {})}, params)

    # -- More like this ----------------------------------------------------------

    def more_like_this(
        self,
        doc: Document,
        params: dict[str, Any] | None = None,
        query: Any = None,
    ) -> ResultSet:
        """Find documents similar to *doc*; *query* filters the candidates."""
        if not doc.has_id():
            raise InvalidStateError("more_like_this requires a document id")
        query_obj = Query.create(query)
        path = build_path(self._name, doc.id, "_mlt")
        response = self.request(path, "GET", query_obj.to_dict(), params)
        return ResultSet.from_response(response, query_obj)

    # -- Mapping -----------------------------------------------------------------

    def set_mapping(self, mapping: Mapping | MappingABC[str, Any]) -> Response:
        mapping = Mapping.create(mapping, self._name)
        return self.request(build_path(self._name, None, "_mapping"), "PUT", mapping.to_dict())

    def get_mapping(self) -> dict[str, Any]:
        """Mapping definitions of this type, keyed by type name."""
        response = self.request(build_path(self._name, None, "_mapping"), "GET")
        index_body = response.get(self._index.name)
        if not isinstance(index_body, dict):
            return {}
        return dict(index_body.get("mappings") or {})

    # -- Search ------------------------------------------------------------------

    def create_search(
        self,
        query: Any = None,
        options: int | SearchOptions | None = None,
    ) -> Search:
        return self._index.create_search(query, options).add_type(self)

    def search(self, query: Any = None, options: int | SearchOptions | None = None) -> ResultSet:
        return self.create_search(query, options).search()

    def count(self, query: Any = None) -> int:
        return self.create_search(query).count()

    # -- Helpers -----------------------------------------------------------------

    def _serialize(self, obj: Any, doc: Document | None = None) -> Document:
        if self._serializer is None:
            raise ConfigurationMissingError(
                "no serializer set; call set_serializer() before adding objects"
            )
        data = self._serializer(obj)
        if not isinstance(data, MappingABC):
            raise InvalidArgumentError(
                f"serializer must return a mapping, got {type(data).__name__}"
            )
        if doc is None:
            doc = Document()
        doc.data = dict(data)
        return doc

    def _stamp(self, doc: Document | Script) -> None:
        doc.type = self._name
        doc.index = self._index.name

    def _stamp_all(self, docs: Iterable[Any]) -> list[Any]:
        stamped = list(docs)
        for doc in stamped:
            doc.type = self._name
        return stamped

    def __repr__(self) -> str:
        return f"DocType({self._index.name!r}, {self._name!r})"
