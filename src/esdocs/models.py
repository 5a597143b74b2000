"""
Exception hierarchy and search result models for esdocs.

Every error this library raises derives from :class:`ESDocsError`. Input
validation errors additionally derive from the matching builtin
(``ValueError`` / ``RuntimeError``) so callers that already catch those
keep working.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Iterator

if TYPE_CHECKING:
    from esdocs.response import Response
    from esdocs.search import Query


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ESDocsError(Exception):
    """Base exception for all esdocs errors."""


class InvalidArgumentError(ESDocsError, ValueError):
    """Caller input is malformed or missing (empty id, wrong payload type)."""


class InvalidStateError(ESDocsError, RuntimeError):
    """An operation's preconditions are not met (e.g. updating a document without an id)."""


class ConfigurationMissingError(ESDocsError, RuntimeError):
    """A required collaborator, such as the object serializer, was never configured."""


class NotFoundError(ESDocsError):
    """The addressed document does not exist on the engine."""

    def __init__(self, message: str, doc_id: Any = None) -> None:
        self.doc_id = doc_id
        super().__init__(message)


class ESConnectionError(ESDocsError):
    """The engine is unreachable or a transport-level error occurred (DNS, TCP, TLS, timeout)."""


class ESResponseError(ESDocsError):
    """The engine returned a body that could not be decoded or has an unexpected shape."""

    def __init__(self, message: str, raw_body: str = "") -> None:
        self.raw_body = raw_body[:2000]
        super().__init__(message)


class ResponseError(ESDocsError):
    """The engine answered with a non-success status or a body-level ``error``.

    Carries the full :class:`~esdocs.response.Response` so callers can decide
    on retry policy from the status and body.
    """

    def __init__(self, response: Response) -> None:
        self.response = response
        self.status_code = response.status_code
        self.body = response.body
        super().__init__(f"HTTP {response.status_code}: {response.error_message()}")


# ---------------------------------------------------------------------------
# Search results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Result:
    """A single hit from a search or more-like-this response."""

    id: str
    index: str = ""
    type: str = ""
    score: float | None = None
    version: int | None = None
    source: dict[str, Any] = field(default_factory=dict)
    fields: dict[str, Any] = field(default_factory=dict)
    highlights: dict[str, list[str]] = field(default_factory=dict)

    @property
    def data(self) -> dict[str, Any]:
        """Projected ``fields`` when the search asked for them, else ``_source``."""
        return self.fields or self.source

    @classmethod
    def from_hit(cls, hit: dict[str, Any]) -> Result:
        score = hit.get("_score")
        version = hit.get("_version")
        return cls(
            id=str(hit.get("_id", "")),
            index=str(hit.get("_index", "")),
            type=str(hit.get("_type", "")),
            score=float(score) if isinstance(score, (int, float)) else None,
            version=version if isinstance(version, int) else None,
            source=dict(hit.get("_source") or {}),
            fields=dict(hit.get("fields") or {}),
            highlights=dict(hit.get("highlight") or {}),
        )


@dataclass(frozen=True)
class ResultSet:
    """Ordered hits of one search call, together with the query that produced them."""

    results: list[Result]
    total_hits: int = 0
    max_score: float | None = None
    took: int = 0
    timed_out: bool = False
    query: Query | None = field(default=None, compare=False, repr=False)
    response: Response | None = field(default=None, compare=False, repr=False)

    def __iter__(self) -> Iterator[Result]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def __getitem__(self, position: int) -> Result:
        return self.results[position]

    def ids(self) -> list[str]:
        return [r.id for r in self.results]

    def to_dict(self) -> dict[str, Any]:
        """Serialize hits and totals to a plain dict (e.g. for JSON output)."""
        return {
            "total_hits": self.total_hits,
            "max_score": self.max_score,
            "took": self.took,
            "timed_out": self.timed_out,
            "results": [asdict(r) for r in self.results],
        }

    @classmethod
    def from_response(cls, response: Response, query: Query | None = None) -> ResultSet:
        """Parse the ``hits`` section of a search response.

        Raises ESResponseError when ``hits`` is not a mapping or its
        ``hits`` list holds anything other than hit objects.
        """
        body = response.body
        hits = body.get("hits", {})
        if not isinstance(hits, dict):
            raise ESResponseError(
                f"Expected 'hits' dict in search response, got {type(hits).__name__}",
                raw_body=str(body)[:2000],
            )

        total = hits.get("total", 0)
        if isinstance(total, dict):
            total = total.get("value", 0)
        if not isinstance(total, int):
            total = 0

        raw_hits = hits.get("hits", [])
        if not isinstance(raw_hits, list) or not all(isinstance(h, dict) for h in raw_hits):
            raise ESResponseError(
                "Expected a list of hit objects in search response",
                raw_body=str(body)[:2000],
            )

        max_score = hits.get("max_score")
        took = body.get("took", 0)
        return cls(
            results=[Result.from_hit(h) for h in raw_hits],
            total_hits=total,
            max_score=float(max_score) if isinstance(max_score, (int, float)) else None,
            took=took if isinstance(took, int) else 0,
            timed_out=bool(body.get("timed_out", False)),
            query=query,
            response=response,
        )
