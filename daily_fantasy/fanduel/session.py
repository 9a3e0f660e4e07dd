"""FanDuel session state.

The session is the single source of truth for whether the client may call
the API. The auth token has a fixed one-hour lifetime; expiry is a deadline
checked lazily by the request pipeline, never a timer flipping state in the
background.
"""

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional

import httpx

from ..common.models import Identity

logger = logging.getLogger(__name__)

TOKEN_TTL = timedelta(hours=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionState(str, Enum):
    """Authentication lifecycle states."""
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class FanDuelSession:
    """Authentication state, cookie store and derived identity.

    Invariant: when `authenticated` is True, both `x_auth_token` and
    `identity` are set. Only `establish()` sets them, all at once.
    """

    def __init__(
        self,
        cookies: Optional[httpx.Cookies] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize an unauthenticated session.

        Args:
            cookies: Cookie store shared with the HTTP client.
            clock: Source of the current time (timezone-aware).
        """
        self.cookies = cookies if cookies is not None else httpx.Cookies()
        self.clock = clock
        self.state = SessionState.UNAUTHENTICATED
        self.x_auth_token: Optional[str] = None
        self.identity: Optional[Identity] = None
        self.token_issued_at: Optional[datetime] = None

    @property
    def authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED

    @property
    def expires_at(self) -> Optional[datetime]:
        if self.token_issued_at is None:
            return None
        return self.token_issued_at + TOKEN_TTL

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """Check whether API calls may use this session right now."""
        if not self.authenticated or self.expires_at is None:
            return False
        if now is None:
            now = self.clock()
        return now < self.expires_at

    def begin_login(self) -> None:
        """Drop any previous credentials and enter AUTHENTICATING."""
        self.state = SessionState.AUTHENTICATING
        self.x_auth_token = None
        self.identity = None
        self.token_issued_at = None
        self.cookies.clear()

    def establish(self, token: str, identity: Identity, issued_at: datetime) -> None:
        """Store a freshly issued token and identity."""
        self.x_auth_token = token
        self.identity = identity
        self.token_issued_at = issued_at
        self.state = SessionState.AUTHENTICATED
        logger.debug(f"Session established for {identity.username}, expires {self.expires_at}")

    def invalidate(self, reason: str = "") -> None:
        """Return to UNAUTHENTICATED; the next pipeline call logs in again."""
        if self.state != SessionState.UNAUTHENTICATED:
            logger.debug(f"Session invalidated {reason}".rstrip())
        self.state = SessionState.UNAUTHENTICATED

    def auth_headers(self) -> dict[str, str]:
        """Headers every authenticated API call carries."""
        if not self.authenticated:
            return {}
        return {
            "X-Auth-Token": self.x_auth_token,
            "Authorization": f"Basic {self.identity.api_client_id}",
        }
