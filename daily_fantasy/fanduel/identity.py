"""Identity extraction from fanduel.com page markup.

FanDuel has no API that returns the API client id; it only appears in the
inline page config script of the landing page. Extraction sits behind
`IdentityExtractor` so a different strategy can replace the pattern-based one
without touching the login flow.
"""
import logging
import re
from abc import ABC, abstractmethod

from bs4 import BeautifulSoup

from ..common.exceptions import AuthFailure, FanDuelAuthError
from ..common.models import Identity

logger = logging.getLogger(__name__)


class IdentityExtractor(ABC):
    """Turns landing page HTML into an Identity."""

    @abstractmethod
    def extract(self, html: str) -> Identity:
        """Extract the logged-in identity.

        Args:
            html: Landing page HTML fetched with a valid auth token

        Returns:
            Identity of the logged-in user

        Raises:
            FanDuelAuthError: IDENTITY_MARKUP_NOT_FOUND or
                IDENTITY_FIELD_NOT_FOUND
        """
        pass


class ScriptConfigIdentityExtractor(IdentityExtractor):
    """Reads the identity out of the inline `FD.config` script block."""

    MARKERS = ("apiClientId", "FD.config")
    FIELD_PATTERNS = {
        "user_id": re.compile(r"id: (\d+?),"),
        "username": re.compile(r"username: '(.+?)',"),
        "api_client_id": re.compile(r"apiClientId: '(.+?)',"),
    }

    def find_config_block(self, html: str) -> str:
        soup = BeautifulSoup(html, "html.parser")

        for script in soup.find_all("script"):
            text = script.string or script.get_text()
            if text and all(marker in text for marker in self.MARKERS):
                return text

        raise FanDuelAuthError(AuthFailure.IDENTITY_MARKUP_NOT_FOUND)

    def extract(self, html: str) -> Identity:
        block = self.find_config_block(html)

        fields = {}
        for name, pattern in self.FIELD_PATTERNS.items():
            match = pattern.search(block)
            if not match:
                raise FanDuelAuthError(AuthFailure.IDENTITY_FIELD_NOT_FOUND, name)
            fields[name] = match.group(1)

        identity = Identity(**fields)
        logger.debug(f"Extracted identity: user {identity.user_id} ({identity.username})")
        return identity
