"""
Search requests: the top-level search body and the search facade.

:meth:`Query.create` accepts whatever callers naturally have at hand
(nothing, a query string, a :class:`~esdocs.query.QueryNode`, a raw
dict, or an existing :class:`Query`) and normalizes it into one search
body. :class:`Search` sends that body to ``_search`` or ``_count`` for a
set of indices and types.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping

from esdocs.models import ESResponseError, InvalidArgumentError, ResultSet
from esdocs.options import collect_params
from esdocs.paths import join_path
from esdocs.query import QueryNode, match_all, query_string, serialize

if TYPE_CHECKING:
    from esdocs.client import ESClient

logger = logging.getLogger(__name__)


@dataclass
class Query:
    """A complete search body: ``query`` plus paging, sorting and projections."""

    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, query: Any = None) -> Query:
        if query is None:
            return cls().set_query(match_all())
        if isinstance(query, Query):
            return query
        if isinstance(query, QueryNode):
            return cls().set_query(query)
        if isinstance(query, str):
            return cls().set_query(query_string(query))
        if isinstance(query, Mapping):
            # A bare clause like {"term": {...}} is a query; anything with a
            # "query" key is already a full search body.
            if "query" in query or not query:
                return cls(params=dict(query))
            return cls(params={"query": dict(query)})
        raise InvalidArgumentError(f"Cannot build a query from {type(query).__name__}")

    def set_query(self, query: QueryNode | Mapping[str, Any]) -> Query:
        return self.set_param("query", query)

    def get_query(self) -> Any:
        return self.params.get("query")

    def set_param(self, key: str, value: Any) -> Query:
        self.params[key] = value
        return self

    def set_size(self, size: int) -> Query:
        return self.set_param("size", size)

    def set_from(self, offset: int) -> Query:
        return self.set_param("from", offset)

    def set_sort(self, sort: Any) -> Query:
        return self.set_param("sort", sort)

    def add_sort(self, sort: Any) -> Query:
        self.params.setdefault("sort", []).append(sort)
        return self

    def set_fields(self, fields: list[str]) -> Query:
        return self.set_param("fields", fields)

    def set_source(self, source: bool | list[str] | Mapping[str, Any]) -> Query:
        return self.set_param("_source", source)

    def set_post_filter(self, post_filter: QueryNode | Mapping[str, Any]) -> Query:
        return self.set_param("post_filter", post_filter)

    def set_highlight(self, highlight: Mapping[str, Any]) -> Query:
        return self.set_param("highlight", highlight)

    def set_min_score(self, min_score: float) -> Query:
        return self.set_param("min_score", min_score)

    def set_explain(self, explain: bool = True) -> Query:
        return self.set_param("explain", explain)

    def set_version(self, version: bool = True) -> Query:
        return self.set_param("version", version)

    def to_dict(self) -> dict[str, Any]:
        return serialize(self.params)


@dataclass(frozen=True)
class SearchOptions:
    """URL options for a search call."""

    size: int | None = None
    from_: int | None = None
    search_type: str | None = None
    routing: str | None = None
    preference: str | None = None
    scroll: str | None = None
    timeout: str | None = None

    def to_params(self) -> dict[str, Any]:
        return collect_params(self, {"from_": "from"}, None)

    @classmethod
    def create(cls, options: int | SearchOptions | None) -> SearchOptions:
        """An ``int`` is shorthand for ``size``."""
        if options is None:
            return cls()
        if isinstance(options, SearchOptions):
            return options
        if isinstance(options, bool) or not isinstance(options, int):
            raise InvalidArgumentError(
                f"search options must be an int or SearchOptions, got {type(options).__name__}"
            )
        return cls(size=options)


class Search:
    """Runs queries against a set of indices and types.

    Usage::

        search = Search(client).add_index("blog").add_type("post")
        results = search.search(prefix("title", "elast"), 10)
    """

    def __init__(self, client: ESClient) -> None:
        self._client = client
        self._indices: list[str] = []
        self._types: list[str] = []
        self._query = Query.create(None)
        self._options = SearchOptions()

    @property
    def indices(self) -> list[str]:
        return list(self._indices)

    @property
    def types(self) -> list[str]:
        return list(self._types)

    def add_index(self, index: Any) -> Search:
        name = getattr(index, "name", index)
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError("index must be an Index or a non-empty name")
        if name not in self._indices:
            self._indices.append(name)
        return self

    def add_type(self, doc_type: Any) -> Search:
        name = getattr(doc_type, "name", doc_type)
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError("type must be a DocType or a non-empty name")
        if name not in self._types:
            self._types.append(name)
        return self

    def set_query(self, query: Any) -> Search:
        self._query = Query.create(query)
        return self

    def get_query(self) -> Query:
        return self._query

    def set_options(self, options: int | SearchOptions | None) -> Search:
        self._options = SearchOptions.create(options)
        return self

    def path(self, action: str = "_search") -> str:
        return join_path(",".join(self._indices), ",".join(self._types), action)

    def search(self, query: Any = None, options: int | SearchOptions | None = None) -> ResultSet:
        """Run the search and return its hits in engine order."""
        if query is not None:
            self.set_query(query)
        if options is not None:
            self.set_options(options)

        response = self._client.request(
            self.path("_search"),
            "POST",
            self._query.to_dict(),
            self._options.to_params(),
        )
        result_set = ResultSet.from_response(response, self._query)
        logger.info(
            "search path=%s total_hits=%d returned=%d took=%d",
            self.path("_search"),
            result_set.total_hits,
            len(result_set),
            result_set.took,
        )
        return result_set

    def count(self, query: Any = None) -> int:
        """Number of documents matching *query*."""
        if query is not None:
            self.set_query(query)
        body = self._query.to_dict()
        count_body = {"query": body["query"]} if "query" in body else {}
        response = self._client.request(self.path("_count"), "POST", count_body)
        count = response.get("count")
        if not isinstance(count, int):
            raise ESResponseError(
                f"Expected integer 'count' in count response, got {type(count).__name__}",
                raw_body=str(response.body),
            )
        return count
