"""
Pytest configuration and shared fixtures.

Fixtures available to all tests:
  • make_response(...)  : build a real ``requests.Response``
  • queue_responses     : make ``client.session.request`` return responses in order
"""

import json
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
import requests


def _response(
    status_code: int = 200,
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
    url: str = "https://api.example.test/"
) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.encoding = "utf-8"

    if body is None:
        response._content = b""
    elif isinstance(body, bytes):
        response._content = body
    else:
        response._content = json.dumps(body).encode()
        response.headers["Content-Type"] = "application/json; charset=utf-8"

    response.headers.update(headers or {})
    return response


@pytest.fixture
def make_response():
    return _response


@pytest.fixture
def queue_responses():
    """Replace ``client.session.request`` with a mock returning ``responses`` in order."""
    def _install(client: Any, responses: List[requests.Response]) -> MagicMock:
        mock = MagicMock(side_effect=list(responses))
        client.session.request = mock
        return mock
    return _install

