"""Pluggable transports for esdocs.

The :class:`Transport` protocol is the narrow seam between the document
facades and the network. The default implementation is
:class:`~esdocs.transport.http.HttpTransport`, which talks to the engine
over httpx. :class:`~esdocs.transport.memory.RecordingTransport` answers
from a handler function and records every call, for tests and offline
development.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from esdocs.response import Response


@runtime_checkable
class Transport(Protocol):
    """Protocol for transports used by :class:`~esdocs.client.ESClient`.

    ``send`` must return a :class:`~esdocs.response.Response` for every
    status code the engine answers with; only failures to get an answer at
    all (connection, timeout, undecodable body) are raised.
    """

    def send(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | list[Any] | str | None = None,
        params: dict[str, Any] | None = None,
    ) -> Response: ...

    def close(self) -> None: ...


__all__ = ["Transport"]
