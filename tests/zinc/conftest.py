import json
from unittest.mock import MagicMock

import pytest

from zinc_sdk.client_base import BaseAPIClient
from zinc_sdk.zinc_api import ZincClient


BASE_URL = "https://api.example.com/v1"


class FakeResponse:
    def __init__(self, status_code=200, content=b"{}"):
        self.status_code = status_code
        self.content = content


def to_response(payload, status_code=200):
    if isinstance(payload, (FakeResponse, BaseException)):
        return payload
    if isinstance(payload, bytes):
        return FakeResponse(status_code, payload)
    return FakeResponse(status_code, json.dumps(payload).encode())


@pytest.fixture
def client():
    return ZincClient("test-token", base_url=BASE_URL)


@pytest.fixture
def respond(monkeypatch):
    """
    Replace the HTTP session with a fake.

    respond(payload, ...) answers calls in order; respond(routes={...}) answers
    by the first route whose key is a suffix of the request URL. Payloads can
    be dicts (sent as JSON), raw bytes, FakeResponse objects or exceptions.
    """

    def _install(*payloads, status_code=200, routes=None):
        session = MagicMock()
        if routes is not None:

            def route(method, url, **kwargs):
                for suffix, payload in routes.items():
                    if url.endswith(suffix):
                        result = to_response(payload, status_code)
                        if isinstance(result, BaseException):
                            raise result
                        return result
                raise AssertionError(f"unexpected request to {url}")

            session.request.side_effect = route
        else:
            session.request.side_effect = [
                to_response(p, status_code) for p in payloads
            ]
        monkeypatch.setattr(BaseAPIClient, "_create_session", lambda self: session)
        return session

    return _install
