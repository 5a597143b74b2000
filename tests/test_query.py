"""Tests for esdocs.query -- query node parameter bag and builders."""

from __future__ import annotations

from esdocs.query import (
    QueryNode,
    add_must,
    bool_query,
    ids,
    match,
    match_all,
    prefix,
    query_string,
    range_query,
    raw_prefix,
    set_prefix,
    set_raw_prefix,
    term,
    terms,
    wildcard,
)


class TestPrefix:
    def test_set_prefix_serializes_exactly(self) -> None:
        node = set_prefix(QueryNode("prefix"), "title", "foo", 2.0)
        assert node.to_params() == {"title": {"value": "foo", "boost": 2.0}}
        assert node.to_dict() == {"prefix": {"title": {"value": "foo", "boost": 2.0}}}

    def test_default_boost(self) -> None:
        assert prefix("title", "foo").to_params() == {"title": {"value": "foo", "boost": 1.0}}

    def test_raw_prefix_stored_as_given(self) -> None:
        node = raw_prefix({"user": "ki"})
        assert node.to_dict() == {"prefix": {"user": "ki"}}

    def test_raw_setter_keeps_unrelated_keys(self) -> None:
        node = prefix("title", "foo")
        set_raw_prefix(node, {"tag": {"value": "py"}})
        assert set(node.params) == {"title", "tag"}

    def test_typed_setter_touches_one_key(self) -> None:
        node = raw_prefix({"tag": "py"})
        set_prefix(node, "title", "bar", 3.0)
        assert node.params == {"tag": "py", "title": {"value": "bar", "boost": 3.0}}


class TestParameterBag:
    def test_set_and_get(self) -> None:
        node = QueryNode("term").set_param("user", "kimchy")
        assert node.get_param("user") == "kimchy"
        assert node.has_param("user")
        assert not node.has_param("other")
        assert node.get_param("other", 5) == 5

    def test_add_param_appends(self) -> None:
        node = QueryNode("bool").add_param("must", 1).add_param("must", 2)
        assert node.params["must"] == [1, 2]

    def test_add_param_promotes_scalar(self) -> None:
        node = QueryNode("bool").set_param("should", 1).add_param("should", 2)
        assert node.params["should"] == [1, 2]


class TestBuilders:
    def test_match_all(self) -> None:
        assert match_all().to_dict() == {"match_all": {}}
        assert match_all(1.5).to_dict() == {"match_all": {"boost": 1.5}}

    def test_term_with_boost(self) -> None:
        assert term("user", "kimchy").to_dict() == {"term": {"user": "kimchy"}}
        assert term("user", "kimchy", 2.0).to_dict() == {
            "term": {"user": {"value": "kimchy", "boost": 2.0}}
        }

    def test_terms(self) -> None:
        node = terms("tags", ("a", "b"), minimum_match=1)
        assert node.to_dict() == {"terms": {"tags": ["a", "b"], "minimum_match": 1}}

    def test_match_with_options(self) -> None:
        assert match("body", "quick fox", operator="and").to_dict() == {
            "match": {"body": {"query": "quick fox", "operator": "and"}}
        }

    def test_wildcard(self) -> None:
        assert wildcard("user", "ki*y").to_dict() == {
            "wildcard": {"user": {"value": "ki*y", "boost": 1.0}}
        }

    def test_ids_stringified(self) -> None:
        assert ids([1, "b"], "post").to_dict() == {"ids": {"values": ["1", "b"], "type": "post"}}

    def test_query_string_drops_unset_options(self) -> None:
        assert query_string("a AND b", default_field="title").to_dict() == {
            "query_string": {"query": "a AND b", "default_field": "title"}
        }

    def test_range(self) -> None:
        assert range_query("age", gte=10, lt=20).to_dict() == {
            "range": {"age": {"gte": 10, "lt": 20}}
        }

    def test_bool_nests_recursively(self) -> None:
        node = bool_query(must=[term("user", "kimchy")], minimum_should_match=1)
        add_must(node, prefix("title", "el"))
        assert node.to_dict() == {
            "bool": {
                "must": [
                    {"term": {"user": "kimchy"}},
                    {"prefix": {"title": {"value": "el", "boost": 1.0}}},
                ],
                "minimum_should_match": 1,
            }
        }
