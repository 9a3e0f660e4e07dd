"""Shared fixtures: an in-memory FanDuel behind httpx.MockTransport."""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Optional, Union

import httpx
import pytest

from daily_fantasy.common.config import FanDuelConfig
from daily_fantasy.fanduel.api import FanDuelApiClient

LANDING_HTML = """<html>
<head>
<script src="/static/app.js"></script>
<script>
window.analytics = {page: 'home'};
</script>
<script>
FD.config = {
    user: {
        id: 4242,
        username: 'sharpshooter',
        apiClientId: 'YWJjMTIzOmRlZjQ1Ng==',
        currency: 'usd',
    },
};
</script>
</head>
<body></body>
</html>"""

Route = Union[httpx.Response, Callable[[httpx.Request], Awaitable[httpx.Response]]]


class FakeClock:
    """Settable clock for token expiry."""

    def __init__(self):
        self.now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeFanDuel:
    """Answers the web login pages and registered API routes.

    login_mode:
        "credentials" - login page sets PHPSESSID, CCAuth issues the token
        "direct"      - login page sets X-Auth-Token right away
        "none"        - login page sets no cookies at all
    """

    def __init__(self):
        self.login_mode = "credentials"
        self.valid_credentials = True
        self.landing_html = LANDING_HTML
        self.landing_status = 200
        self.tokens_issued = 0
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Route] = {}

    def add(
        self,
        method: str,
        path: str,
        payload: Any = None,
        status: int = 200,
        text: Optional[str] = None,
    ) -> None:
        if text is not None:
            self.routes[(method, path)] = httpx.Response(status, text=text)
        else:
            self.routes[(method, path)] = httpx.Response(status, json=payload)

    def add_handler(self, method: str, path: str, handler: Route) -> None:
        self.routes[(method, path)] = handler

    def _issue_token(self) -> str:
        self.tokens_issued += 1
        return f"X-Auth-Token=token-{self.tokens_issued}; Path=/; HttpOnly"

    def count(self, path: str, host: Optional[str] = None) -> int:
        return sum(
            1 for r in self.requests
            if r.url.path == path and (host is None or r.url.host == host)
        )

    def api_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "api.fanduel.com"]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        # Let concurrent callers interleave, as real network I/O would
        await asyncio.sleep(0)

        if request.url.host == "www.fanduel.com":
            return self._web(request)

        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, httpx.Response):
            return httpx.Response(
                route.status_code,
                headers=route.headers,
                content=route.content,
            )
        return await route(request)

    def _web(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path

        if path == "/p/login":
            if self.login_mode == "direct":
                return httpx.Response(200, headers=[("set-cookie", self._issue_token())], text="")
            if self.login_mode == "credentials":
                return httpx.Response(
                    200,
                    headers=[("set-cookie", "PHPSESSID=sess-abc; path=/")],
                    text="<html>login</html>",
                )
            return httpx.Response(200, text="<html>login</html>")

        if path == "/c/CCAuth" and request.method == "POST":
            if self.valid_credentials:
                return httpx.Response(200, headers=[("set-cookie", self._issue_token())], text="")
            return httpx.Response(200, text="<html>bad login</html>")

        if path == "/":
            return httpx.Response(self.landing_status, text=self.landing_html)

        return httpx.Response(404, text="not found")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake() -> FakeFanDuel:
    return FakeFanDuel()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> FanDuelConfig:
    return FanDuelConfig(username="fan@example.com", password="hunter2")


@pytest.fixture
def api(fake, clock, config) -> FanDuelApiClient:
    return FanDuelApiClient(config, client=fake.client(), clock=clock)
