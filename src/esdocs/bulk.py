"""
Bulk aggregation: many document operations in one ``_bulk`` round trip.

Each :class:`Action` becomes one NDJSON action line, followed by a source
line for everything except deletes. The engine answers with one item per
action in request order; :class:`BulkResponseSet` pairs them back up by
position, so creates without an id can still be matched to their
documents. A failed item is reported on its :class:`BulkItemResponse` and
never stops the other items from being interpreted.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Iterator

from esdocs.document import Document, Script
from esdocs.models import ESResponseError, InvalidArgumentError, InvalidStateError
from esdocs.options import BULK_PARAMS
from esdocs.paths import join_path
from esdocs.response import Response, apply_write_result

if TYPE_CHECKING:
    from esdocs.client import ESClient

logger = logging.getLogger(__name__)

OP_INDEX = "index"
OP_CREATE = "create"
OP_UPDATE = "update"
OP_DELETE = "delete"

_OP_TYPES = frozenset({OP_INDEX, OP_CREATE, OP_UPDATE, OP_DELETE})


@dataclass
class Action:
    """One bulk operation on one document or script."""

    op_type: str
    payload: Document | Script

    def __post_init__(self) -> None:
        if self.op_type not in _OP_TYPES:
            raise InvalidArgumentError(
                f"op_type must be one of {sorted(_OP_TYPES)}, got {self.op_type!r}"
            )
        if isinstance(self.payload, Script) and self.op_type != OP_UPDATE:
            raise InvalidArgumentError("scripts can only be sent as update actions")
        if self.op_type == OP_UPDATE and not self.payload.has_id():
            raise InvalidStateError("update actions require a document id")
        if self.op_type == OP_DELETE and not self.payload.has_id():
            raise InvalidArgumentError("delete actions require a document id")

    def metadata(self) -> dict[str, Any]:
        meta: dict[str, Any] = {}
        if self.payload.index:
            meta["_index"] = self.payload.index
        if self.payload.type:
            meta["_type"] = self.payload.type
        if self.payload.has_id():
            meta["_id"] = str(self.payload.id)
        for key, value in self.payload.request_params(BULK_PARAMS).items():
            meta[f"_{key}"] = value
        return meta

    def source(self) -> dict[str, Any] | None:
        payload = self.payload
        if self.op_type == OP_DELETE:
            return None
        if isinstance(payload, Script):
            body = payload.to_dict()
            if payload.upsert is not None:
                body["upsert"] = dict(payload.upsert.data)
            return body
        if self.op_type == OP_UPDATE:
            body = {"doc": dict(payload.data)}
            if payload.doc_as_upsert:
                body["doc_as_upsert"] = True
            elif payload.upsert is not None:
                body["upsert"] = dict(payload.upsert.data)
            return body
        return dict(payload.data)

    def to_lines(self) -> list[str]:
        lines = [json.dumps({self.op_type: self.metadata()}, default=str)]
        source = self.source()
        if source is not None:
            lines.append(json.dumps(source, default=str))
        return lines


@dataclass(frozen=True)
class BulkItemResponse:
    """Outcome of the action at the same position in the request."""

    action: Action
    op_type: str
    status: int
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300 and not self.body.get("error")

    @property
    def error(self) -> str:
        error = self.body.get("error")
        if isinstance(error, dict):
            return str(error.get("reason") or error.get("type") or error)
        return str(error or "")

    @property
    def id(self) -> str | None:
        return self.body.get("_id")

    @property
    def version(self) -> int | None:
        version = self.body.get("_version")
        return version if isinstance(version, int) else None


@dataclass(frozen=True)
class BulkResponseSet:
    """Per-action outcomes of one bulk call, in request order."""

    response: Response
    items: list[BulkItemResponse]

    def __iter__(self) -> Iterator[BulkItemResponse]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, position: int) -> BulkItemResponse:
        return self.items[position]

    @property
    def ok(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        return any(not item.ok for item in self.items)

    @property
    def errors(self) -> list[BulkItemResponse]:
        return [item for item in self.items if not item.ok]

    @property
    def took(self) -> int:
        took = self.response.get("took", 0)
        return took if isinstance(took, int) else 0


def _parse_items(response: Response, actions: list[Action]) -> list[BulkItemResponse]:
    raw_items = response.get("items")
    if not isinstance(raw_items, list):
        raise ESResponseError(
            f"Expected 'items' list in bulk response, got {type(raw_items).__name__}",
            raw_body=str(response.body),
        )
    if len(raw_items) != len(actions):
        raise ESResponseError(
            f"Bulk response has {len(raw_items)} items for {len(actions)} actions",
            raw_body=str(response.body),
        )

    items: list[BulkItemResponse] = []
    for action, raw in zip(actions, raw_items):
        if not isinstance(raw, dict) or len(raw) != 1:
            raise ESResponseError(
                "Malformed bulk response item", raw_body=str(raw)[:2000]
            )
        op_type, body = next(iter(raw.items()))
        body = body if isinstance(body, dict) else {}
        status = body.get("status", 0)
        items.append(
            BulkItemResponse(
                action=action,
                op_type=op_type,
                status=status if isinstance(status, int) else 0,
                body=body,
            )
        )
    return items


class Bulk:
    """Collects actions and sends them as one ``_bulk`` request.

    Usage::

        bulk = Bulk(client).set_index("blog").set_type("post")
        bulk.add_documents([doc1, doc2])
        bulk.add_action(Action(OP_DELETE, Document(id="old")))
        response_set = bulk.send()
    """

    def __init__(self, client: ESClient) -> None:
        self._client = client
        self._actions: list[Action] = []
        self._index: str | None = None
        self._type: str | None = None
        self._params: dict[str, Any] = {}

    @property
    def actions(self) -> list[Action]:
        return list(self._actions)

    def set_index(self, index: Any) -> Bulk:
        self._index = getattr(index, "name", index)
        return self

    def set_type(self, doc_type: Any) -> Bulk:
        self._type = getattr(doc_type, "name", doc_type)
        return self

    def set_refresh(self, refresh: bool = True) -> Bulk:
        self._params["refresh"] = refresh
        return self

    def set_consistency(self, consistency: str) -> Bulk:
        self._params["consistency"] = consistency
        return self

    def path(self) -> str:
        return join_path(self._index, self._type if self._index else None, "_bulk")

    def add_action(self, action: Action) -> Bulk:
        self._actions.append(action)
        return self

    def add_document(self, doc: Document, op_type: str | None = None) -> Bulk:
        """Queue *doc*; the op type defaults to the document's ``op_type`` option, else index."""
        return self.add_action(Action(op_type or doc.options.op_type or OP_INDEX, doc))

    def add_documents(self, docs: Iterable[Document], op_type: str | None = None) -> Bulk:
        for doc in docs:
            self.add_document(doc, op_type)
        return self

    def add_script(self, script: Script) -> Bulk:
        return self.add_action(Action(OP_UPDATE, script))

    def to_ndjson(self) -> str:
        lines: list[str] = []
        for action in self._actions:
            lines.extend(action.to_lines())
        return "\n".join(lines) + "\n"

    def send(self) -> BulkResponseSet:
        """Send all queued actions in one request and interpret every item."""
        if not self._actions:
            raise InvalidArgumentError("bulk request has no actions")

        t0 = time.monotonic()
        response = self._client.request(self.path(), "POST", self.to_ndjson(), self._params)
        items = _parse_items(response, self._actions)

        auto_populate = self._client.config.auto_populate
        for item in items:
            payload = item.action.payload
            if item.ok and isinstance(payload, Document) and item.op_type != OP_DELETE:
                apply_write_result(payload, item.body, auto_populate)

        result = BulkResponseSet(response=response, items=items)
        elapsed = (time.monotonic() - t0) * 1000
        if result.has_errors:
            logger.warning(
                "bulk path=%s actions=%d failed=%d elapsed_ms=%.1f",
                self.path(),
                len(items),
                len(result.errors),
                elapsed,
            )
        else:
            logger.info(
                "bulk path=%s actions=%d elapsed_ms=%.1f", self.path(), len(items), elapsed
            )
        return result
