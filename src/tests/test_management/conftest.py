from __future__ import annotations

import json
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest
import requests

from o365toolbox.management.client import ManagementActivityClient

TENANT_ID = "41463f53-8812-40f4-890f-865bf6e35190"
FEED_URL = f"https://manage.office.com/api/v1.0/{TENANT_ID}/activity/feed"


def _make_response(
    status: int = 200,
    payload: Any = None,
    *,
    headers: dict[str, str] | None = None,
    method: str = "GET",
    url: str = FEED_URL,
) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = b"" if payload is None else json.dumps(payload).encode()
    response.headers.update(headers or {})
    response.url = url
    response.request = requests.Request(method, url).prepare()
    return response


@pytest.fixture()
def make_response() -> Callable[..., requests.Response]:
    """Factory for real :class:`requests.Response` objects carrying JSON."""
    return _make_response


@pytest.fixture()
def feed_url() -> str:
    return FEED_URL


@pytest.fixture()
def tenant_id() -> str:
    return TENANT_ID


@pytest.fixture()
def credential() -> MagicMock:
    """A credential whose tokens are always ``tok``."""
    cred = MagicMock()
    cred.get_token.return_value.token = "tok"
    return cred


@pytest.fixture()
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture()
def client(credential: MagicMock, session: MagicMock) -> ManagementActivityClient:
    return ManagementActivityClient(credential, TENANT_ID, session=session)
