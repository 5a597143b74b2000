"""
Pytest configuration and shared fixtures.

Facade tests run against :class:`RecordingTransport`, which records every
call and answers from a queue or a handler. Tests of the HTTP layer use
``httpx.MockTransport`` through the client's ``_transport`` hook.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from esdocs.client import ESClient
from esdocs.config import ESConfig
from esdocs.doctype import DocType
from esdocs.transport.memory import RecordingTransport


@pytest.fixture(autouse=True)
def _reset_esdocs_logger() -> Iterator[None]:
    """Undo configure_logging() so caplog keeps seeing esdocs records."""
    yield
    logger = logging.getLogger("esdocs")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def client(transport: RecordingTransport) -> Iterator[ESClient]:
    with ESClient(ESConfig(base_url="http://es:9200"), transport=transport) as es:
        yield es


@pytest.fixture
def posts(client: ESClient) -> DocType:
    return client.get_index("blog").get_type("post")
