"""FanDuel web login.

FanDuel issues no API token directly. The client walks the web login:

1. GET /p/login. FanDuel sometimes sets the X-Auth-Token cookie right away;
   otherwise it sets a PHPSESSID session cookie.
2. With only a session id, POST the credential form to /c/CCAuth, which
   answers with the X-Auth-Token cookie when the credentials are good.
3. GET the landing page with the token and scrape the user id, username and
   API client id out of its inline config script.
"""

import logging
from typing import Optional

import httpx

from ..common.config import FanDuelConfig
from ..common.exceptions import AuthFailure, FanDuelAuthError, InvalidConfigError
from ..common.models import Identity
from .identity import IdentityExtractor, ScriptConfigIdentityExtractor
from .session import FanDuelSession
from .transport import (
    RequestOptions,
    default_options,
    merge_options,
    raise_for_status,
    send,
)

logger = logging.getLogger(__name__)

FANDUEL_WEB_BASE = "https://www.fanduel.com"
LOGIN_URL = f"{FANDUEL_WEB_BASE}/p/login"
CREDENTIAL_AUTH_URL = f"{FANDUEL_WEB_BASE}/c/CCAuth"
LOGIN_FAILURE_URL = f"{FANDUEL_WEB_BASE}/p/LoginPp"
LANDING_URL = f"{FANDUEL_WEB_BASE}/"

AUTH_TOKEN_COOKIE = "X-Auth-Token"
SESSION_ID_COOKIE = "PHPSESSID"


def find_set_cookie(response: httpx.Response, name: str) -> Optional[str]:
    """Find the most recent Set-Cookie header that sets cookie `name`.

    Redirect responses are searched too, since the login pages redirect.
    Deletion cookies (empty value) are skipped.
    """
    for r in reversed([*response.history, response]):
        for header in r.headers.get_list("set-cookie"):
            header = header.strip()
            if header.startswith(f"{name}=") and cookie_value(header, name):
                return header
    return None


def cookie_value(set_cookie: str, name: str) -> str:
    """Value of a Set-Cookie header: text before the first ';', name stripped."""
    return set_cookie.split(";")[0].strip().replace(f"{name}=", "", 1)


class FanDuelAuthenticator:
    """Runs the login sequence and establishes the session."""

    def __init__(
        self,
        config: FanDuelConfig,
        session: FanDuelSession,
        client: httpx.AsyncClient,
        identity_extractor: Optional[IdentityExtractor] = None,
    ):
        self.config = config
        self.session = session
        self.client = client
        self.identity_extractor = identity_extractor or ScriptConfigIdentityExtractor()
        self._fallback = default_options(config)

    def _options(self, caller: Optional[RequestOptions] = None) -> RequestOptions:
        # Login requests never carry session auth headers
        return merge_options(caller, None, self._fallback)

    async def login(self) -> Identity:
        """Log in and establish the session.

        Returns:
            Identity of the logged-in user

        Raises:
            FanDuelAuthError: Missing cookies, bad credentials or no identity
            FanDuelHTTPError: Transport failure or landing page error
            InvalidConfigError: Credentials needed but not configured
        """
        logger.debug("Logging in to FanDuel...")
        self.session.begin_login()

        try:
            token = await self._obtain_token()
            issued_at = self.session.clock()
            logger.debug(f"Got X-Auth-Token = {token}")

            identity = await self._load_identity(token)
        except Exception:
            self.session.invalidate("after failed login")
            raise

        self.session.establish(token, identity, issued_at)
        logger.info(f"Logged in to FanDuel as {identity.username}")
        return identity

    async def _obtain_token(self) -> str:
        response = await send(self.client, LOGIN_URL, self._options())

        token_cookie = find_set_cookie(response, AUTH_TOKEN_COOKIE)
        if token_cookie:
            logger.debug("Login page issued the auth token directly")
            return cookie_value(token_cookie, AUTH_TOKEN_COOKIE)

        session_cookie = find_set_cookie(response, SESSION_ID_COOKIE)
        if not session_cookie:
            raise FanDuelAuthError(AuthFailure.MISSING_SESSION_COOKIE)

        if not self.config.has_credentials:
            raise InvalidConfigError("FanDuel username or password not configured")

        form = {
            "cc_session_id": cookie_value(session_cookie, SESSION_ID_COOKIE),
            "cc_action": "cca_login",
            "cc_failure_url": LOGIN_FAILURE_URL,
            "cc_success_url": LANDING_URL,
            "email": self.config.username,
            "password": self.config.password,
            "checkbox_remember": "1",
            "login": "Log in to your account",
        }

        # Sent as multipart/form-data, one part per field, no filenames
        parts = {key: (None, value) for key, value in form.items()}

        logger.debug(f"Submitting credentials for {self.config.username}")
        response = await send(
            self.client,
            CREDENTIAL_AUTH_URL,
            self._options(RequestOptions(method="POST", files=parts)),
        )

        token_cookie = find_set_cookie(response, AUTH_TOKEN_COOKIE)
        if not token_cookie:
            raise FanDuelAuthError(AuthFailure.INVALID_CREDENTIALS)

        return cookie_value(token_cookie, AUTH_TOKEN_COOKIE)

    async def _load_identity(self, token: str) -> Identity:
        logger.debug("Loading user data...")
        response = await send(
            self.client,
            LANDING_URL,
            self._options(RequestOptions(headers={AUTH_TOKEN_COOKIE: token})),
        )
        raise_for_status(response)

        return self.identity_extractor.extract(response.text)
