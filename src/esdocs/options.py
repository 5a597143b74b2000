"""
Per-request option structures and the allow-lists that govern them.

Options are plain dataclasses, so a misspelt option name fails with a
``TypeError`` when the structure is built instead of being sent to the
engine. Each operation only forwards the fields on its allow-list.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

# Query parameters each document operation accepts.
INDEX_PARAMS = frozenset(
    {
        "version",
        "version_type",
        "routing",
        "percolate",
        "parent",
        "ttl",
        "timestamp",
        "op_type",
        "consistency",
        "replication",
        "refresh",
        "timeout",
    }
)
UPDATE_PARAMS = frozenset(
    {
        "version",
        "version_type",
        "routing",
        "percolate",
        "parent",
        "fields",
        "retry_on_conflict",
        "consistency",
        "replication",
        "refresh",
        "timeout",
    }
)
DELETE_PARAMS = frozenset(
    {"version", "routing", "parent", "replication", "consistency", "refresh", "timeout"}
)

# Bulk action metadata keys (underscore-prefixed on the wire).
BULK_PARAMS = frozenset(
    {
        "version",
        "version_type",
        "routing",
        "percolate",
        "parent",
        "ttl",
        "timestamp",
        "retry_on_conflict",
    }
)


def to_wire(value: Any) -> Any:
    """Convert a Python option value to its query-string form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return value


def collect_params(
    obj: Any,
    names: dict[str, str],
    allowed: frozenset[str] | None,
) -> dict[str, Any]:
    """Wire parameters for the non-``None`` fields of dataclass *obj*.

    *names* renames fields whose wire name is not a valid identifier
    (``from_`` -> ``from``); *allowed*, when given, is the operation's
    allow-list of wire names.
    """
    params: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        wire = names.get(f.name, f.name)
        if allowed is not None and wire not in allowed:
            continue
        params[wire] = to_wire(value)
    return params


@dataclass
class DocumentOptions:
    """Request modifiers carried by a :class:`~esdocs.document.Document`.

    The document's ``version`` lives on the document itself, since the
    engine writes it back after every successful write.
    """

    version_type: str | None = None
    routing: str | None = None
    percolate: str | None = None
    parent: str | int | None = None
    ttl: str | int | None = None
    timestamp: str | None = None
    op_type: str | None = None
    consistency: str | None = None
    replication: str | None = None
    refresh: bool | None = None
    timeout: str | None = None
    retry_on_conflict: int | None = None
    fields: list[str] | None = None

    def to_params(self, allowed: frozenset[str] | None = None) -> dict[str, Any]:
        """Return the set options restricted to *allowed* wire names."""
        return collect_params(self, {}, allowed)


@dataclass(frozen=True)
class GetOptions:
    """Options for fetching a single document."""

    routing: str | None = None
    parent: str | int | None = None
    preference: str | None = None
    realtime: bool | None = None
    refresh: bool | None = None
    fields: list[str] | None = None
    source: bool | list[str] | None = None

    def to_params(self) -> dict[str, Any]:
        return collect_params(self, {"source": "_source"}, None)


@dataclass(frozen=True)
class DeleteOptions:
    """Options for deleting a document addressed by id."""

    version: int | None = None
    routing: str | None = None
    parent: str | int | None = None
    replication: str | None = None
    consistency: str | None = None
    refresh: bool | None = None
    timeout: str | None = None

    def to_params(self) -> dict[str, Any]:
        return collect_params(self, {}, DELETE_PARAMS)


@dataclass(frozen=True)
class DeleteByQueryOptions:
    routing: str | None = None
    consistency: str | None = None
    replication: str | None = None
    timeout: str | None = None
    default_operator: str | None = None
    analyzer: str | None = None
    df: str | None = None

    def to_params(self) -> dict[str, Any]:
        return collect_params(self, {}, None)
