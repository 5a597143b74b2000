"""esdocs: document and query client for Elasticsearch-style REST APIs."""

from esdocs.bulk import Action, Bulk, BulkItemResponse, BulkResponseSet
from esdocs.client import ESClient
from esdocs.config import ESConfig
from esdocs.doctype import DocType, Serializer
from esdocs.document import Document, Script
from esdocs.index import Index
from esdocs.logging import bind_request_id, configure_logging, get_request_id
from esdocs.mapping import Mapping
from esdocs.models import (
    ConfigurationMissingError,
    ESConnectionError,
    ESDocsError,
    ESResponseError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    ResponseError,
    Result,
    ResultSet,
)
from esdocs.options import DeleteByQueryOptions, DeleteOptions, DocumentOptions, GetOptions
from esdocs.query import QueryNode
from esdocs.response import Response
from esdocs.search import Query, Search, SearchOptions

__version__ = "0.1.0"

__all__ = [
    "Action",
    "Bulk",
    "BulkItemResponse",
    "BulkResponseSet",
    "ConfigurationMissingError",
    "DeleteByQueryOptions",
    "DeleteOptions",
    "DocType",
    "Document",
    "DocumentOptions",
    "ESClient",
    "ESConfig",
    "ESConnectionError",
    "ESDocsError",
    "ESResponseError",
    "GetOptions",
    "Index",
    "InvalidArgumentError",
    "InvalidStateError",
    "Mapping",
    "NotFoundError",
    "Query",
    "QueryNode",
    "Response",
    "ResponseError",
    "Result",
    "ResultSet",
    "Script",
    "Search",
    "SearchOptions",
    "Serializer",
    "__version__",
    "bind_request_id",
    "configure_logging",
    "get_request_id",
]
