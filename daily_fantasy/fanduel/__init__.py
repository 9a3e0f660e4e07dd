"""FanDuel DFS integration module.

This module provides API access to FanDuel's DFS platform: slates, contests,
player pools, upcoming rosters, and contest entry submission.

Authentication is automatic. The client walks FanDuel's web login with the
configured username and password, scrapes the user identity from the landing
page, and logs in again whenever the one-hour auth token expires.
"""

from .api import FanDuelApiClient
from .lineups import LineupService
from .pipeline import RequestPipeline

__all__ = ["FanDuelApiClient", "LineupService", "RequestPipeline"]
