"""The collection level: one named index on a client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

from esdocs.bulk import BulkResponseSet
from esdocs.doctype import DocType
from esdocs.document import Document, Script, UpdatePayload
from esdocs.models import InvalidArgumentError, InvalidStateError, ResultSet
from esdocs.paths import join_path
from esdocs.response import Response
from esdocs.search import Search, SearchOptions

if TYPE_CHECKING:
    from esdocs.client import ESClient


class Index:
    """A named index. Prefixes every request path with its name.

    Bulk operations stamp the index name on each document before handing
    the batch to the client.
    """

    def __init__(self, client: ESClient, name: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgumentError("index name must be a non-empty string")
        self._client = client
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def client(self) -> ESClient:
        return self._client

    def get_type(self, name: str) -> DocType:
        return DocType(self, name)

    def request(
        self,
        path: str,
        method: str = "GET",
        data: dict[str, Any] | list[Any] | str | None = None,
        params: dict[str, Any] | None = None,
    ) -> Response:
        return self._client.request(join_path(self._name, path), method, data, params)

    # -- Bulk ------------------------------------------------------------------

    def add_documents(self, docs: Iterable[Document]) -> BulkResponseSet:
        return self._client.add_documents(self._stamp(docs))

    def update_documents(self, docs: Iterable[Document | Script]) -> BulkResponseSet:
        return self._client.update_documents(self._stamp(docs))

    def delete_documents(self, docs: Iterable[Document]) -> BulkResponseSet:
        return self._client.delete_documents(self._stamp(docs))

    def delete_ids(
        self,
        ids: Iterable[str | int],
        doc_type: str,
        routing: str | None = None,
    ) -> BulkResponseSet:
        return self._client.delete_ids(ids, self._name, doc_type, routing)

    def update_document(self, data: UpdatePayload) -> Response:
        if not data.type:
            raise InvalidStateError("update payload has no document type")
        data.index = self._name
        return self._client.update_document(data.id, data, self._name, data.type)

    # -- Search ----------------------------------------------------------------

    def create_search(
        self,
        query: Any = None,
        options: int | SearchOptions | None = None,
    ) -> Search:
        search = Search(self._client).add_index(self)
        search.set_query(query)
        return search.set_options(options)

    def search(self, query: Any = None, options: int | SearchOptions | None = None) -> ResultSet:
        return self.create_search(query, options).search()

    def count(self, query: Any = None) -> int:
        return self.create_search(query).count()

    def _stamp(self, docs: Iterable[Any]) -> list[Any]:
        stamped = list(docs)
        for doc in stamped:
            doc.index = self._name
        return stamped

    def __repr__(self) -> str:
        return f"Index({self._name!r})"
