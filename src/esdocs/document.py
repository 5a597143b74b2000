"""
Documents and scripts: the payloads the document facade writes.

A :class:`Document` starts detached. Facades stamp it with the type and
index that process it, the engine may assign it an id, and every write
response that carries ``_version`` updates its version. Only the facades
and the bulk aggregator write those fields back.

:class:`Document` and :class:`Script` together form the partial-update
payload union accepted by ``DocType.update_document``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from esdocs.options import DocumentOptions


def has_identifier(value: str | int | None) -> bool:
    """True for ints and for strings that are not blank after stripping."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


@dataclass
class Document:
    """A single addressable unit of stored data."""

    id: str | int | None = None
    data: dict[str, Any] = field(default_factory=dict)
    type: str | None = None
    index: str | None = None
    version: int | None = None
    options: DocumentOptions = field(default_factory=DocumentOptions)
    auto_populate: bool = False
    upsert: Document | None = None
    doc_as_upsert: bool = False

    def has_id(self) -> bool:
        return has_identifier(self.id)

    def set(self, key: str, value: Any) -> Document:
        self.data[key] = value
        return self

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def remove(self, key: str) -> Document:
        self.data.pop(key, None)
        return self

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def request_params(self, allowed: frozenset[str]) -> dict[str, Any]:
        """Query parameters for an operation that accepts the *allowed* options.

        The current version is included under ``version`` so that a write of
        a previously fetched document is checked against the engine's copy.
        """
        params = self.options.to_params(allowed)
        if self.version is not None and "version" in allowed:
            params["version"] = self.version
        return params


@dataclass
class Script:
    """A scripted partial update of the document with the given id."""

    source: str
    params: dict[str, Any] = field(default_factory=dict)
    lang: str | None = None
    id: str | int | None = None
    type: str | None = None
    index: str | None = None
    upsert: Document | None = None
    options: DocumentOptions = field(default_factory=DocumentOptions)

    def has_id(self) -> bool:
        return has_identifier(self.id)

    def request_params(self, allowed: frozenset[str]) -> dict[str, Any]:
        return self.options.to_params(allowed)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"script": self.source}
        if self.params:
            body["params"] = dict(self.params)
        if self.lang:
            body["lang"] = self.lang
        return body


UpdatePayload = Union[Document, Script]
