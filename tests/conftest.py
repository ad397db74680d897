"""Shared fixtures: client options, Litmos-shaped XML pages and mock transports."""

from typing import Callable, List

import httpx
import pytest

from litmos_client import ClientOptions, Litmos

XSI = "http://www.w3.org/2001/XMLSchema-instance"


def user_xml(n: int) -> str:
    return (
        "<User>"
        f"<Id>u{n}</Id>"
        f"<UserName>user{n}@example.com</UserName>"
        f"<FirstName>First{n}</FirstName>"
        '<Email i:nil="true"/>'
        "</User>"
    )


def users_page(start: int, count: int) -> str:
    """A /users page holding `count` users numbered from `start`."""
    if count == 0:
        return f'<Users xmlns:i="{XSI}"/>'
    users = "".join(user_xml(n) for n in range(start, start + count))
    return f'<Users xmlns:i="{XSI}">{users}</Users>'


def make_options(**overrides) -> ClientOptions:
    values = {"apiKey": "test-key", "source": "test-source", **overrides}
    return ClientOptions.from_mapping(values, use_settings=False)


class RecordingHandler:
    """A MockTransport handler that records requests and replays responses."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.responder = responder
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


def paged_users_responder(total: int) -> Callable[[httpx.Request], httpx.Response]:
    """Serves `total` users honouring the `start` and `limit` query params."""

    def respond(request: httpx.Request) -> httpx.Response:
        start = int(request.url.params.get("start", 0))
        limit = int(request.url.params.get("limit", 1000))
        count = max(0, min(limit, total - start))
        return httpx.Response(200, text=users_page(start, count))

    return respond


@pytest.fixture
def options() -> ClientOptions:
    return make_options()


@pytest.fixture
def make_client():
    """Builds a Litmos client whose HTTP traffic goes to `handler`."""

    def _make(handler, **overrides) -> Litmos:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return Litmos(make_options(**overrides), http_client=http_client)

    return _make
