"""Request pipeline: every API call goes through here.

The pipeline makes sure the session is valid before dispatch (logging in if
needed), applies default transport options, classifies the response, and
decodes JSON bodies.
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Callable, Optional

import httpx

from ..common.config import FanDuelConfig
from ..common.exceptions import FanDuelHTTPError, FanDuelParseError
from ..common.models import Identity
from .auth import FanDuelAuthenticator
from .identity import IdentityExtractor
from .session import FanDuelSession, utc_now
from .transport import (
    RequestOptions,
    default_options,
    merge_options,
    raise_for_status,
    send,
)

logger = logging.getLogger(__name__)


def _retrieve_login_error(task: asyncio.Task) -> None:
    # Every waiter may have been cancelled; mark the failure as seen
    if not task.cancelled():
        task.exception()


class RequestPipeline:
    """Authenticated request execution over one shared session."""

    def __init__(
        self,
        config: FanDuelConfig,
        client: Optional[httpx.AsyncClient] = None,
        identity_extractor: Optional[IdentityExtractor] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the pipeline.

        Args:
            config: FanDuel credentials and HTTP settings
            client: HTTP client to use. Created (and owned) if not provided.
            identity_extractor: Strategy for scraping the identity
            clock: Source of the current time, for token expiry
        """
        self.config = config
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=config.timeout)

        # The client's cookie jar is the session's cookie store
        self.session = FanDuelSession(self.client.cookies, clock)
        self.authenticator = FanDuelAuthenticator(
            config, self.session, self.client, identity_extractor
        )
        self._fallback = default_options(config)
        self._pending_login: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "RequestPipeline":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def login(self) -> Identity:
        """Log in now, joining a login already in flight."""
        if self._pending_login is None:
            self._pending_login = asyncio.ensure_future(self._run_login())
            self._pending_login.add_done_callback(_retrieve_login_error)
        # Shielded so a cancelled waiter does not cancel the shared login
        return await asyncio.shield(self._pending_login)

    async def _run_login(self) -> Identity:
        try:
            return await self.authenticator.login()
        finally:
            self._pending_login = None

    async def ensure_session(self) -> None:
        """Log in unless the session is valid right now.

        Concurrent callers that find the session invalid share one login.
        """
        if self.session.is_valid():
            return
        logger.debug(f"Session not valid ({self.session.state.value}), logging in")
        await self.login()

    async def execute_raw(self, url: str, options: Optional[RequestOptions] = None) -> str:
        """Execute an authenticated request and return the raw body.

        Raises:
            FanDuelHTTPError: Transport failure or HTTP status >= 400
            FanDuelAuthError: Login needed and failed
        """
        await self.ensure_session()

        sent_token = self.session.x_auth_token
        merged = merge_options(options, self.session.auth_headers(), self._fallback)
        response = await send(self.client, url, merged)

        if response.status_code == 401:
            if self.session.x_auth_token == sent_token:
                # Rejected token; the next call logs in again
                self.session.invalidate("after 401 response")
            else:
                logger.debug("Ignoring 401 for a token that has since been replaced")

        try:
            raise_for_status(response)
        except FanDuelHTTPError as e:
            logger.error(f"FanDuel API request failed: {e}")
            raise

        return response.text

    async def execute_json(self, url: str, options: Optional[RequestOptions] = None) -> Any:
        """Execute an authenticated request and decode the JSON body.

        Raises:
            FanDuelParseError: Body is not valid JSON
        """
        body = await self.execute_raw(url, options)

        try:
            return json.loads(body)
        except ValueError as e:
            raise FanDuelParseError(f"Invalid JSON from {url}: {e}", body=body, cause=e) from e
