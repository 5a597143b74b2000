"""
Composable query clauses.

Every clause is a :class:`QueryNode`: a clause kind plus one ordered
parameter mapping. Builder functions (``prefix``, ``term``,
``bool_query`` ...) create nodes, and typed setters (``set_prefix``,
``add_must`` ...) always reduce to :meth:`QueryNode.set_params` or
:meth:`QueryNode.add_param`. No clause keeps state outside its
parameter mapping, so all clauses serialize the same way.

Example::

    from esdocs.query import bool_query, prefix, term

    q = bool_query(must=[prefix("title", "elast")], must_not=[term("status", "draft")])
    q.to_dict()
    # {"bool": {"must": [{"prefix": {"title": {"value": "elast", "boost": 1.0}}}],
    #           "must_not": [{"term": {"status": "draft"}}]}}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping


def serialize(value: Any) -> Any:
    """Recursively turn nodes (and anything with ``to_dict``) into plain JSON types."""
    if isinstance(value, QueryNode):
        return value.to_dict()
    if hasattr(value, "to_dict") and callable(value.to_dict):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {k: serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    return value


@dataclass
class QueryNode:
    """One query clause: ``{kind: params}`` on the wire."""

    kind: str
    params: dict[str, Any] = field(default_factory=dict)

    def set_param(self, key: str, value: Any) -> QueryNode:
        self.params[key] = value
        return self

    def set_params(self, params: Mapping[str, Any]) -> QueryNode:
        """Merge *params* into the node; keys not named in *params* are kept."""
        self.params.update(params)
        return self

    def add_param(self, key: str, value: Any) -> QueryNode:
        """Append *value* to the list stored under *key*."""
        current = self.params.get(key)
        if current is None:
            self.params[key] = [value]
        elif isinstance(current, list):
            current.append(value)
        else:
            self.params[key] = [current, value]
        return self

    def get_param(self, key: str, default: Any = None) -> Any:
        return self.params.get(key, default)

    def has_param(self, key: str) -> bool:
        return key in self.params

    def to_params(self) -> dict[str, Any]:
        """The serialized parameter mapping, without the clause kind."""
        return serialize(self.params)

    def to_dict(self) -> dict[str, Any]:
        return {self.kind: self.to_params()}


# ---------------------------------------------------------------------------
# Typed setters
# ---------------------------------------------------------------------------


def set_raw_prefix(node: QueryNode, prefix: Mapping[str, Any]) -> QueryNode:
    """Store a pre-shaped prefix mapping such as ``{"user": {"value": "ki"}}``."""
    return node.set_params(prefix)


def set_prefix(node: QueryNode, key: str, value: str, boost: float = 1.0) -> QueryNode:
    return set_raw_prefix(node, {key: {"value": value, "boost": boost}})


def set_raw_wildcard(node: QueryNode, wildcard: Mapping[str, Any]) -> QueryNode:
    return node.set_params(wildcard)


def set_wildcard(node: QueryNode, key: str, value: str, boost: float = 1.0) -> QueryNode:
    return set_raw_wildcard(node, {key: {"value": value, "boost": boost}})


def set_raw_term(node: QueryNode, term_: Mapping[str, Any]) -> QueryNode:
    return node.set_params(term_)


def set_term(node: QueryNode, key: str, value: Any, boost: float | None = None) -> QueryNode:
    if boost is None:
        return set_raw_term(node, {key: value})
    return set_raw_term(node, {key: {"value": value, "boost": boost}})


def set_field_query(node: QueryNode, key: str, text: str, **options: Any) -> QueryNode:
    """Set a ``match``-style field clause, e.g. ``{"title": {"query": "x", "operator": "and"}}``."""
    if not options:
        return node.set_params({key: text})
    return node.set_params({key: {"query": text, **options}})


def add_must(node: QueryNode, clause: QueryNode) -> QueryNode:
    return node.add_param("must", clause)


def add_should(node: QueryNode, clause: QueryNode) -> QueryNode:
    return node.add_param("should", clause)


def add_must_not(node: QueryNode, clause: QueryNode) -> QueryNode:
    return node.add_param("must_not", clause)


def add_filter(node: QueryNode, clause: QueryNode) -> QueryNode:
    return node.add_param("filter", clause)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def match_all(boost: float | None = None) -> QueryNode:
    node = QueryNode("match_all")
    if boost is not None:
        node.set_param("boost", boost)
    return node


def raw_prefix(prefix_: Mapping[str, Any]) -> QueryNode:
    return set_raw_prefix(QueryNode("prefix"), prefix_)


def prefix(key: str, value: str, boost: float = 1.0) -> QueryNode:
    return set_prefix(QueryNode("prefix"), key, value, boost)


def wildcard(key: str, value: str, boost: float = 1.0) -> QueryNode:
    return set_wildcard(QueryNode("wildcard"), key, value, boost)


def term(key: str, value: Any, boost: float | None = None) -> QueryNode:
    return set_term(QueryNode("term"), key, value, boost)


def terms(key: str, values: Iterable[Any], minimum_match: int | None = None) -> QueryNode:
    node = QueryNode("terms").set_param(key, list(values))
    if minimum_match is not None:
        node.set_param("minimum_match", minimum_match)
    return node


def match(key: str, text: str, **options: Any) -> QueryNode:
    return set_field_query(QueryNode("match"), key, text, **options)


def ids(values: Iterable[str | int], doc_type: str | list[str] | None = None) -> QueryNode:
    node = QueryNode("ids").set_param("values", [str(v) for v in values])
    if doc_type is not None:
        node.set_param("type", doc_type)
    return node


def query_string(
    query: str,
    *,
    default_field: str | None = None,
    default_operator: str | None = None,
    fields: list[str] | None = None,
    **options: Any,
) -> QueryNode:
    node = QueryNode("query_string").set_param("query", query)
    extra: dict[str, Any] = {
        "default_field": default_field,
        "default_operator": default_operator,
        "fields": fields,
        **options,
    }
    return node.set_params({k: v for k, v in extra.items() if v is not None})


def range_query(
    key: str,
    *,
    gte: Any = None,
    gt: Any = None,
    lte: Any = None,
    lt: Any = None,
    boost: float | None = None,
) -> QueryNode:
    bounds = {"gte": gte, "gt": gt, "lte": lte, "lt": lt, "boost": boost}
    return QueryNode("range").set_param(key, {k: v for k, v in bounds.items() if v is not None})


def bool_query(
    *,
    must: Iterable[QueryNode] = (),
    should: Iterable[QueryNode] = (),
    must_not: Iterable[QueryNode] = (),
    filter: Iterable[QueryNode] = (),
    minimum_should_match: int | str | None = None,
    boost: float | None = None,
) -> QueryNode:
    node = QueryNode("bool")
    for clause in must:
        add_must(node, clause)
    for clause in should:
        add_should(node, clause)
    for clause in must_not:
        add_must_not(node, clause)
    for clause in filter:
        add_filter(node, clause)
    if minimum_should_match is not None:
        node.set_param("minimum_should_match", minimum_should_match)
    if boost is not None:
        node.set_param("boost", boost)
    return node
