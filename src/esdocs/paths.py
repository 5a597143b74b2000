"""Request path construction.

Caller-supplied identifiers are always percent-encoded; fixed action
suffixes such as ``_mapping`` or ``_mlt`` never are.
"""

from __future__ import annotations

from urllib.parse import quote


def quote_id(doc_id: str | int) -> str:
    """Percent-encode a document id so it stays a single path segment."""
    return quote(str(doc_id), safe="")


def build_path(
    resource: str | None,
    doc_id: str | int | None = None,
    action: str | None = None,
) -> str:
    """Join *resource*, the encoded *doc_id* and *action* with ``/``.

    Empty parts are skipped, so ``build_path("tweet", None, "_mapping")``
    gives ``"tweet/_mapping"``.
    """
    parts: list[str] = []
    if resource:
        parts.append(resource.strip("/"))
    if doc_id is not None and str(doc_id) != "":
        parts.append(quote_id(doc_id))
    if action:
        parts.append(action)
    return "/".join(parts)


def join_path(*segments: str | None) -> str:
    """Join already-resolved path segments, dropping empty ones."""
    return "/".join(s.strip("/") for s in segments if s and s.strip("/"))
