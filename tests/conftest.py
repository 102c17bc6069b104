"""Shared fixtures for refiner tests."""

import json
from typing import Callable, List

import httpx
import pytest

from refiner.config import RefinerConfig


API_URL = "https://refine.test/api/refine"
LINT_URL = "https://refine.test/api/lint"
GITHUB_URL = "https://github.test"


@pytest.fixture
def config():
    return RefinerConfig(api_url=API_URL, lint_url=LINT_URL, github_api_url=GITHUB_URL, timeout=5)


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def json_body(self, index: int = 0):
        return json.loads(self.requests[index].content)


@pytest.fixture
def recorder():
    def make(handler):
        return Recorder(handler)
    return make


@pytest.fixture
def http_client():
    """Build an httpx.Client backed by a MockTransport handler."""
    clients = []

    def make(handler):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield make
    for client in clients:
        client.close()
