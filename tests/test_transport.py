"""Tests for request options and response classification."""
import asyncio

import httpx
import pytest

from daily_fantasy.common.config import FanDuelConfig
from daily_fantasy.common.exceptions import FanDuelHTTPError, FanDuelParseError
from daily_fantasy.fanduel.pipeline import RequestPipeline
from daily_fantasy.fanduel.transport import (
    RequestOptions,
    default_options,
    merge_options,
    raise_for_status,
    send,
)

API_URL = "https://api.fanduel.com/fixture-lists"


# ---------- option merging ----------


def test_default_options():
    config = FanDuelConfig(timeout=12.5, user_agent="agent/1.0")

    options = default_options(config)

    assert options.method == "GET"
    assert options.follow_redirects is True
    assert options.timeout == 12.5
    assert options.headers == {"User-Agent": "agent/1.0"}


def test_merge_precedence_caller_over_session_over_fallback():
    fallback = RequestOptions(
        method="GET",
        headers={"User-Agent": "fallback", "Authorization": "fallback"},
        follow_redirects=True,
        timeout=30.0,
    )
    session_headers = {"Authorization": "Basic session", "X-Auth-Token": "tok"}
    caller = RequestOptions(
        method="PUT",
        headers={"X-Auth-Token": "caller", "Content-Type": "application/json"},
        timeout=5.0,
    )

    merged = merge_options(caller, session_headers, fallback)

    assert merged.method == "PUT"
    assert merged.timeout == 5.0
    assert merged.follow_redirects is True
    assert merged.headers == {
        "User-Agent": "fallback",
        "Authorization": "Basic session",
        "X-Auth-Token": "caller",
        "Content-Type": "application/json",
    }


def test_merge_header_names_are_case_insensitive():
    fallback = default_options(FanDuelConfig())
    caller = RequestOptions(headers={"user-agent": "custom/2.0"})

    merged = merge_options(caller, {"x-auth-token": "tok"}, fallback)

    assert merged.headers.get_list("User-Agent") == ["custom/2.0"]
    assert merged.headers["X-Auth-Token"] == "tok"


def test_lowercase_caller_header_is_sent_once():
    seen = []

    def handler(request):
        seen.append(request.headers.get_list("user-agent"))
        return httpx.Response(200)

    async def scenario():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            options = merge_options(
                RequestOptions(headers={"user-agent": "custom/2.0"}),
                None,
                default_options(FanDuelConfig()),
            )
            await send(client, API_URL, options)

    asyncio.run(scenario())

    assert seen == [["custom/2.0"]]


def test_merge_does_not_mutate_inputs():
    fallback = default_options(FanDuelConfig())
    session_headers = {"X-Auth-Token": "tok"}
    caller = RequestOptions(headers={"Accept": "application/json"})

    merge_options(caller, session_headers, fallback)

    assert fallback.headers == {"User-Agent": FanDuelConfig().user_agent}
    assert caller.headers == {"Accept": "application/json"}
    assert session_headers == {"X-Auth-Token": "tok"}


def test_merge_without_caller_uses_fallback():
    fallback = default_options(FanDuelConfig())

    merged = merge_options(None, None, fallback)

    assert merged == fallback
    assert merged is not fallback


def test_caller_can_disable_redirects():
    merged = merge_options(
        RequestOptions(follow_redirects=False), None, default_options(FanDuelConfig())
    )

    assert merged.follow_redirects is False


# ---------- send / classification ----------


def test_transport_failure_becomes_http_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            await send(client, API_URL, RequestOptions(method="GET"))

    with pytest.raises(FanDuelHTTPError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.status is None
    assert isinstance(exc_info.value.cause, httpx.ConnectError)


def test_raise_for_status_keeps_body():
    request = httpx.Request("GET", API_URL)
    response = httpx.Response(500, text="upstream down", request=request)

    with pytest.raises(FanDuelHTTPError) as exc_info:
        raise_for_status(response)

    assert exc_info.value.status == 500
    assert exc_info.value.body == "upstream down"


def test_raise_for_status_accepts_success_and_redirect_codes():
    request = httpx.Request("GET", API_URL)

    raise_for_status(httpx.Response(200, request=request))
    raise_for_status(httpx.Response(302, request=request))


def test_forbidden_response_is_http_error_not_json(fake, api):
    fake.add("GET", "/fixture-lists", text='{"error": "forbidden"}', status=403)

    with pytest.raises(FanDuelHTTPError) as exc_info:
        asyncio.run(api.pipeline.execute_json(API_URL))

    assert exc_info.value.status == 403
    assert exc_info.value.body == '{"error": "forbidden"}'


def test_invalid_json_is_parse_error(fake, api):
    fake.add("GET", "/fixture-lists", text="<html>oops</html>")

    with pytest.raises(FanDuelParseError) as exc_info:
        asyncio.run(api.pipeline.execute_json(API_URL))

    assert exc_info.value.body == "<html>oops</html>"
    assert isinstance(exc_info.value.cause, ValueError)


def test_execute_raw_returns_body(fake, api):
    fake.add("GET", "/fixture-lists", text="plain body")

    body = asyncio.run(api.pipeline.execute_raw(API_URL))

    assert body == "plain body"


def test_pipeline_closes_owned_client(config):
    async def scenario():
        async with RequestPipeline(config) as pipeline:
            client = pipeline.client
        return client

    client = asyncio.run(scenario())

    assert client.is_closed


def test_pipeline_leaves_injected_client_open(config, fake):
    async def scenario():
        client = fake.client()
        async with RequestPipeline(config, client=client):
            pass
        return client

    client = asyncio.run(scenario())

    assert not client.is_closed
