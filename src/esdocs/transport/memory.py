"""Recording transport for tests and offline development."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from esdocs.response import Response

Handler = Callable[[str, str, Any, dict[str, Any]], Response]


@dataclass(frozen=True)
class Call:
    """One request as the transport received it."""

    method: str
    path: str
    body: Any
    params: dict[str, Any]


class RecordingTransport:
    """A :class:`~esdocs.transport.Transport` that answers without a network.

    Answers come from *handler* when given, otherwise from the queued
    *responses* in order, otherwise an empty 200.

    Usage::

        transport = RecordingTransport(responses=[Response(201, {"_id": "a1", "_version": 1})])
        client = ESClient(transport=transport)
        client.get_index("blog").get_type("post").add_document(Document(data={"t": 1}))
        assert transport.calls[0].method == "POST"
    """

    def __init__(
        self,
        handler: Handler | None = None,
        responses: Iterable[Response] | None = None,
    ) -> None:
        self._handler = handler
        self._responses: deque[Response] = deque(responses or [])
        self.calls: list[Call] = []
        self.closed = False

    def queue(self, *responses: Response) -> None:
        self._responses.extend(responses)

    def send(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | list[Any] | str | None = None,
        params: dict[str, Any] | None = None,
    ) -> Response:
        method = method.upper()
        params = dict(params or {})
        self.calls.append(Call(method=method, path=path, body=body, params=params))
        if self._handler is not None:
            return self._handler(method, path, body, params)
        if self._responses:
            return self._responses.popleft()
        return Response(status_code=200, body={})

    @property
    def last_call(self) -> Call:
        return self.calls[-1]

    def close(self) -> None:
        self.closed = True
