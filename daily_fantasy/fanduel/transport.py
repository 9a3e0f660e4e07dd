"""Request options and the single HTTP send used by login and API calls."""
import logging
from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Optional

import httpx

from ..common.config import FanDuelConfig
from ..common.exceptions import FanDuelHTTPError

logger = logging.getLogger(__name__)


@dataclass
class RequestOptions:
    """Per-request transport options. None means "not specified"."""
    method: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Optional[dict[str, Any]] = None
    json: Any = None
    data: Optional[dict[str, str]] = None
    files: Optional[dict[str, Any]] = None  # multipart parts
    follow_redirects: Optional[bool] = None
    timeout: Optional[float] = None


def default_options(config: FanDuelConfig) -> RequestOptions:
    """Hardcoded fallbacks: GET, redirects followed, fixed User-Agent."""
    return RequestOptions(
        method="GET",
        headers={"User-Agent": config.user_agent},
        follow_redirects=True,
        timeout=config.timeout,
    )


def merge_options(
    caller: Optional[RequestOptions],
    session_headers: Optional[dict[str, str]],
    fallback: RequestOptions,
) -> RequestOptions:
    """Merge request options.

    Precedence is caller overrides > session defaults > hardcoded fallbacks.
    The session only contributes headers; headers merge key by key, with
    names compared case-insensitively.

    Args:
        caller: Options passed by the caller (may be None)
        session_headers: Auth headers of the current session
        fallback: Hardcoded defaults, see default_options()

    Returns:
        New RequestOptions (headers as httpx.Headers); inputs are not modified
    """
    caller = caller or RequestOptions()

    merged = RequestOptions()
    for f in fields(RequestOptions):
        if f.name == "headers":
            continue
        value = getattr(caller, f.name)
        setattr(merged, f.name, value if value is not None else getattr(fallback, f.name))

    headers = httpx.Headers(fallback.headers)
    headers.update(session_headers or {})
    headers.update(caller.headers)
    merged.headers = headers
    return merged


async def send(client: httpx.AsyncClient, url: str, options: RequestOptions) -> httpx.Response:
    """Issue one HTTP call.

    Raises:
        FanDuelHTTPError: On transport failure (no status)
    """
    kwargs: dict[str, Any] = {"headers": options.headers}
    for name in ("params", "json", "data", "files", "follow_redirects", "timeout"):
        value = getattr(options, name)
        if value is not None:
            kwargs[name] = value

    method = options.method or "GET"
    logger.debug(f"FanDuel {method} {url}")

    try:
        return await client.request(method, url, **kwargs)
    except httpx.HTTPError as e:
        raise FanDuelHTTPError(f"{method} {url} failed: {e}", cause=e) from e


def raise_for_status(response: httpx.Response) -> None:
    """Turn an HTTP status >= 400 into FanDuelHTTPError carrying the raw body."""
    if response.status_code >= 400:
        raise FanDuelHTTPError(
            f"HTTP {response.status_code} from {response.request.method} {response.request.url}",
            status=response.status_code,
            body=response.text,
        )
