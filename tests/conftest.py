"""
pytest configuration for portal client tests.

Adds the api directory to the Python path and provides a fake portal
backed by httpx.MockTransport.
"""

import json
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

import httpx
import pytest

api_dir = Path(__file__).parent.parent / "api"
sys.path.insert(0, str(api_dir))

from portalapi.client import PortalClient  # noqa: E402
from portalapi.token_cache import TokenCache  # noqa: E402

BASE_URL = "https://portal.test"
OAUTH_URL = f"{BASE_URL}/api/v2/config/login/oauth"
V2_LOGIN_URL = f"{BASE_URL}/api/v2/login"
LEGACY_LOGIN_URL = f"{BASE_URL}/api/login"


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakePortal:
    """Routes requests by URL to per-endpoint handlers and records them."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def route(self, url: str, handler: Callable[[httpx.Request], httpx.Response]):
        self.routes[url] = handler

    def respond(self, url: str, status_code: int = 200, json_body=None):
        self.route(url, lambda request: httpx.Response(status_code, json=json_body))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(str(request.url))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)

    def urls(self) -> List[str]:
        return [str(r.url) for r in self.requests]

    def calls_to(self, url: str) -> int:
        return self.urls().count(url)

    @staticmethod
    def body(request: httpx.Request):
        return json.loads(request.content)


class RecordingSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float):
        self.delays.append(seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def portal():
    return FakePortal()


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def token_cache(clock):
    return TokenCache(clock=clock)


@pytest.fixture
def make_client(portal, sleeper, token_cache):
    def _make(account_id_header: Optional[str] = None, **kwargs) -> PortalClient:
        return PortalClient(
            base_url=BASE_URL,
            username="agent-api",
            password="s3cret",
            account_id_header=account_id_header,
            token_cache=token_cache,
            transport=httpx.MockTransport(portal.handler),
            sleep=sleeper,
            **kwargs,
        )

    return _make
