"""httpx transport for the search engine's REST API.

Holds one ``httpx.Client`` with connection pooling. Every status code the
engine answers with comes back as a :class:`~esdocs.response.Response`;
httpx exceptions are mapped to :class:`~esdocs.models.ESConnectionError`
and :class:`~esdocs.models.ESResponseError`.
"""

from __future__ import annotations

import importlib.metadata
import logging
import time
from contextlib import nullcontext
from typing import Any

import httpx

from esdocs.config import ESConfig
from esdocs.logging import OPAQUE_ID_HEADER, get_request_id
from esdocs.models import ESConnectionError, ESResponseError
from esdocs.response import Response

logger = logging.getLogger(__name__)

try:
    _PKG_VERSION = importlib.metadata.version("esdocs")
except importlib.metadata.PackageNotFoundError:
    _PKG_VERSION = "dev"

_USER_AGENT = f"esdocs/{_PKG_VERSION}"
_NDJSON = "application/x-ndjson"

_otel_tracer: Any = None
try:
    from opentelemetry import trace

    _otel_tracer = trace.get_tracer("esdocs")
except ImportError:
    pass


def _elapsed_ms(t0: float) -> float:
    return (time.monotonic() - t0) * 1000


def _otel_span(method: str, path: str, base_url: str) -> Any:
    """Return an OTel span context manager, or nullcontext if OTel is absent."""
    if _otel_tracer is not None:
        return _otel_tracer.start_as_current_span(
            f"esdocs {method}",
            attributes={"http.method": method, "esdocs.path": path, "esdocs.base_url": base_url},
        )
    return nullcontext()


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any]:
    if not params:
        return {}
    out: dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        out[key] = value
    return out


def _decode(resp: httpx.Response, method: str) -> dict[str, Any]:
    if method == "HEAD" or not resp.content:
        return {}
    try:
        data = resp.json()
    except ValueError as exc:
        raise ESResponseError(
            f"Failed to decode engine response as JSON: {exc}",
            raw_body=resp.text,
        ) from exc
    if not isinstance(data, dict):
        raise ESResponseError(
            f"Expected a JSON object from the engine, got {type(data).__name__}",
            raw_body=resp.text,
        )
    return data


class HttpTransport:
    """Default :class:`~esdocs.transport.Transport` backed by ``httpx.Client``.

    Usable as a context manager. The ``_transport`` hook accepts any
    ``httpx.BaseTransport`` (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        config: ESConfig,
        *,
        _transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config

        timeout = httpx.Timeout(
            connect=config.timeout_connect,
            read=config.timeout_read,
            pool=config.timeout_pool,
            write=config.timeout_read,
        )
        headers = {"Accept": "application/json", "User-Agent": _USER_AGENT}

        transport = _transport or httpx.HTTPTransport(
            retries=config.retries,
            verify=config.verify_ssl,  # type: ignore[arg-type]
        )
        self._client = httpx.Client(
            base_url=config.base_url,
            transport=transport,
            timeout=timeout,
            headers=headers,
            auth=config.auth,
        )

    def send(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | list[Any] | str | None = None,
        params: dict[str, Any] | None = None,
    ) -> Response:
        method = method.upper()
        url = "/" + path.lstrip("/")
        headers: dict[str, str] = {}
        rid = get_request_id()
        if rid:
            headers[OPAQUE_ID_HEADER] = rid

        request_kwargs: dict[str, Any] = {"params": _clean_params(params), "headers": headers}
        if isinstance(body, str):
            headers["Content-Type"] = _NDJSON
            request_kwargs["content"] = body.encode("utf-8")
        elif body is not None:
            request_kwargs["json"] = body

        with _otel_span(method, url, self._config.base_url):
            t0 = time.monotonic()
            try:
                resp = self._client.request(method, url, **request_kwargs)
            except httpx.ConnectError as exc:
                logger.warning(
                    "engine connect failed %s %s elapsed_ms=%.1f", method, url, _elapsed_ms(t0)
                )
                raise ESConnectionError(
                    f"Cannot connect to engine at {self._config.base_url}: {exc}"
                ) from exc
            except httpx.TimeoutException as exc:
                logger.warning("engine timeout %s %s elapsed_ms=%.1f", method, url, _elapsed_ms(t0))
                raise ESConnectionError(
                    f"Timeout talking to engine at {self._config.base_url}: {exc}"
                ) from exc
            except httpx.HTTPError as exc:
                logger.warning(
                    "engine error %s %s elapsed_ms=%.1f: %s", method, url, _elapsed_ms(t0), exc
                )
                raise ESConnectionError(f"Engine request failed: {exc}") from exc

            data = _decode(resp, method)
            elapsed = _elapsed_ms(t0)

        logger.debug(
            "engine %s %s status=%d elapsed_ms=%.1f",
            method,
            url,
            resp.status_code,
            elapsed,
        )
        return Response(
            status_code=resp.status_code,
            body=data,
            transfer_info={
                "method": method,
                "path": url,
                "url": str(resp.request.url),
                "elapsed_ms": elapsed,
            },
        )

    # -- Lifecycle -----------------------------------------------------------

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
