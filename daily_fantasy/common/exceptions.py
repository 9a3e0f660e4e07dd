"""Custom exceptions for the daily fantasy application."""
from enum import Enum
from typing import Optional


class DailyFantasyError(Exception):
    """Base exception for all daily fantasy errors."""
    pass


# FanDuel-related exceptions
class FanDuelError(DailyFantasyError):
    """Base exception for FanDuel-related errors."""
    pass


class AuthFailure(str, Enum):
    """Reason codes carried by FanDuelAuthError."""
    MISSING_SESSION_COOKIE = "missing session cookie"
    INVALID_CREDENTIALS = "invalid credentials"
    IDENTITY_MARKUP_NOT_FOUND = "identity markup not found"
    IDENTITY_FIELD_NOT_FOUND = "identity field not found"


class FanDuelAuthError(FanDuelError):
    """Failed to establish an authenticated FanDuel session."""

    def __init__(self, reason: AuthFailure, detail: Optional[str] = None):
        message = reason.value if not detail else f"{reason.value}: {detail}"
        super().__init__(message)
        self.reason = reason
        self.detail = detail


class FanDuelHTTPError(FanDuelError):
    """Transport failure or an HTTP status >= 400."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        body: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.status = status
        self.body = body
        self.cause = cause


class FanDuelParseError(FanDuelError):
    """Response body was not valid JSON."""

    def __init__(self, message: str, body: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.body = body
        self.cause = cause


class FanDuelShapeError(FanDuelError):
    """Well-formed response is missing a field needed for reshaping."""

    def __init__(self, path: str, detail: Optional[str] = None):
        message = f"Response missing expected field '{path}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.path = path


# Optimizer-related exceptions
class OptimizerError(DailyFantasyError):
    """Base exception for optimizer-related errors."""
    pass


class NoValidLineupError(OptimizerError):
    """Optimizer could not generate a valid lineup."""
    pass


class InsufficientPlayersError(OptimizerError):
    """Not enough players available to fill roster."""
    pass


# Configuration exceptions
class ConfigError(DailyFantasyError):
    """Base exception for configuration errors."""
    pass


class InvalidConfigError(ConfigError):
    """Configuration is invalid or missing required fields."""
    pass
