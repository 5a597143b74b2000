"""Tests for the CLI entry point (python -m esdocs)."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from esdocs.__main__ import main
from esdocs.client import ESClient
from esdocs.config import ESConfig
from esdocs.models import ESConnectionError
from esdocs.response import Response
from esdocs.transport.memory import RecordingTransport


def _patched_client(transport: RecordingTransport):
    """Patch the CLI's ESClient so it talks to *transport*."""

    def factory(config: ESConfig) -> ESClient:
        return ESClient(config, transport=transport)

    return patch("esdocs.__main__.ESClient", side_effect=factory)


def test_get(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.argv", ["esdocs", "get", "blog", "post", "1"])
    transport = RecordingTransport(
        responses=[Response(200, {"_id": "1", "_version": 2, "found": True, "_source": {"t": 1}})]
    )
    with _patched_client(transport):
        main()

    output = json.loads(capsys.readouterr().out)
    assert output["id"] == "1"
    assert output["data"] == {"t": 1}
    assert output["version"] == 2
    assert transport.last_call.path == "blog/post/1"


def test_index_without_id(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(
        "sys.argv", ["esdocs", "index", "blog", "post", '{"title": "Hi"}', "--refresh"]
    )
    transport = RecordingTransport(responses=[Response(201, {"_id": "srv-1", "_version": 1})])
    with _patched_client(transport):
        main()

    output = json.loads(capsys.readouterr().out)
    assert output == {"_id": "srv-1", "_version": 1, "status": 201}
    assert transport.last_call.method == "POST"
    assert transport.last_call.params == {"refresh": "true"}


def test_index_rejects_non_object(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.argv", ["esdocs", "index", "blog", "post", "[1, 2]"])
    with _patched_client(RecordingTransport()):
        with pytest.raises(SystemExit, match="1"):
            main()


def test_search(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "sys.argv", ["esdocs", "search", "blog", "post", "title:hello", "--size", "3"]
    )
    transport = RecordingTransport(
        responses=[Response(200, {"hits": {"total": 1, "hits": [{"_id": "9"}]}})]
    )
    with _patched_client(transport):
        main()

    output = json.loads(capsys.readouterr().out)
    assert output["total_hits"] == 1
    assert transport.last_call.params == {"size": 3}
    assert transport.last_call.body == {"query": {"query_string": {"query": "title:hello"}}}


def test_count_match_all(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("sys.argv", ["esdocs", "count", "blog", "post"])
    transport = RecordingTransport(responses=[Response(200, {"count": 12})])
    with _patched_client(transport):
        main()

    assert json.loads(capsys.readouterr().out) == {"count": 12}
    assert transport.last_call.body == {"query": {"match_all": {}}}


def test_delete_not_found_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.argv", ["esdocs", "delete", "blog", "post", "1"])
    transport = RecordingTransport(responses=[Response(404, {"found": False})])
    with _patched_client(transport):
        with pytest.raises(SystemExit, match="1"):
            main()


def test_connection_error_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.argv", ["esdocs", "count", "blog", "post"])
    with patch("esdocs.__main__.ESClient", side_effect=ESConnectionError("unreachable")):
        with pytest.raises(SystemExit, match="1"):
            main()


def test_no_args(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.argv", ["esdocs"])
    with pytest.raises(SystemExit):
        main()
