"""FanDuel API client for slates, contests, players and entries.

The client logs in with the configured FanDuel credentials on first use and
again whenever the one-hour auth token has expired, so callers never handle
tokens themselves:

    async with FanDuelApiClient(get_config().fanduel) as client:
        slates = await client.list_slates(Sport.NFL)
        players = await client.slate_players(slates[0])

Payload reshaping lives in plain functions (flatten_open_contests,
reshape_slate_details, ...) so it can be used and tested without HTTP.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Optional, Union

import httpx
from pydantic import ValidationError

from ..common.config import FanDuelConfig
from ..common.exceptions import FanDuelShapeError
from ..common.log_setup import enable_debug_logging
from ..common.models import (
    Contest,
    ContestEntry,
    ContestResult,
    Identity,
    Lineup,
    Player,
    Slate,
    SlateDetails,
    SlateGame,
    Sport,
    UpcomingRoster,
)
from .identity import IdentityExtractor
from .pipeline import RequestPipeline
from .session import utc_now
from .transport import RequestOptions

logger = logging.getLogger(__name__)

FANDUEL_API_BASE = "https://api.fanduel.com"

ENTRY_CONTENT_TYPE = "application/json;charset=utf-8"
DEFAULT_CURRENCY = "usd"

SlateRef = Union[Slate, str, int]
ContestRef = Union[Contest, str, int]


def _ref_id(ref: Union[Slate, Contest, str, int]) -> str:
    return str(ref.id) if isinstance(ref, (Slate, Contest)) else str(ref)


def require(payload: Any, path: str) -> Any:
    """Walk a dotted path ("fixture_lists.0.contests") through a payload.

    Raises:
        FanDuelShapeError: If any step is missing
    """
    current = payload
    for step in path.split("."):
        try:
            if isinstance(current, list):
                current = current[int(step)]
            elif isinstance(current, dict):
                current = current[step]
            else:
                raise FanDuelShapeError(path, f"'{step}' reached a {type(current).__name__}")
        except (KeyError, IndexError, ValueError) as e:
            raise FanDuelShapeError(path) from e
    return current


def _validate(model, data: Any, path: str):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise FanDuelShapeError(path, str(e)) from e


def flatten_open_contests(raw_slate: dict) -> dict:
    """Replace a fixture list's {open, closed, ...} contests with the open list."""
    flat = dict(raw_slate)
    flat["contests"] = require(raw_slate, "contests.open")
    return flat


def flatten_team_side(raw_side: dict) -> dict:
    """Flatten {team: {_members: [...]}, score, sport_specific}.

    Only applies to raw API sides; a side without `_members` (including an
    already flattened one) is a shape error.
    """
    return {
        "team": require(raw_side, "team._members.0"),
        "score": raw_side.get("score"),
        "sport_specific": raw_side.get("sport_specific"),
    }


def reshape_slate_details(payload: dict) -> dict:
    """Merge fixtures into the fixture list as `games`, sides flattened."""
    details = dict(require(payload, "fixture_lists.0"))

    games = []
    for index, fixture in enumerate(require(payload, "fixtures")):
        game = dict(fixture)
        for side in ("away_team", "home_team"):
            game[side] = flatten_team_side(require(fixture, side))
        games.append(game)
        logger.debug(f"Flattened game {index} ({game.get('id')})")

    details["games"] = games
    return details


def merge_entry_fees(payload: dict) -> dict:
    """Copy the envelope's `_meta.entry_fees` onto the result."""
    result = dict(payload)
    result["entry_fees"] = require(payload, "_meta.entry_fees")
    return result


def build_entry_body(lineup: Lineup, currency: str = DEFAULT_CURRENCY) -> dict:
    """Request body for creating or updating a contest entry."""
    roster = [
        {"position": slot.position, "player": {"id": slot.player.id}}
        for slot in lineup.roster
    ]
    return {
        "entries": [{
            "entry_fee": {"currency": currency},
            "roster": {"lineup": roster},
        }]
    }


class FanDuelApiClient:
    """Client for the FanDuel DFS API.

    Authentication is handled by the request pipeline; every call logs in
    first if the session is missing or expired.
    """

    def __init__(
        self,
        config: FanDuelConfig,
        client: Optional[httpx.AsyncClient] = None,
        identity_extractor: Optional[IdentityExtractor] = None,
        clock: Callable[[], datetime] = utc_now,
        base_url: str = FANDUEL_API_BASE,
    ):
        """Initialize FanDuel API client.

        Args:
            config: FanDuel credentials and HTTP settings
            client: Optional httpx.AsyncClient (e.g. with a mock transport)
            identity_extractor: Strategy for scraping the user identity
            clock: Source of the current time, for token expiry
            base_url: API base URL
        """
        enable_debug_logging()
        self.base_url = base_url
        self.pipeline = RequestPipeline(config, client, identity_extractor, clock)

    async def __aenter__(self) -> "FanDuelApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.pipeline.aclose()

    @property
    def session(self):
        return self.pipeline.session

    @property
    def identity(self) -> Optional[Identity]:
        """Identity of the current session, if logged in."""
        return self.session.identity

    async def login(self) -> Identity:
        """Force a fresh login."""
        return await self.pipeline.login()

    async def _get(self, endpoint: str, params: Optional[dict] = None) -> Any:
        return await self.pipeline.execute_json(
            f"{self.base_url}{endpoint}", RequestOptions(params=params)
        )

    async def list_slates(self, sport: Optional[Union[Sport, str]] = None) -> list[Slate]:
        """Fetch available fixture lists (slates).

        A fixture list represents a slate of games with a shared player pool.
        Only each slate's open contests are kept.

        Args:
            sport: Filter by sport. None returns all sports.

        Returns:
            List of Slate objects
        """
        data = await self._get("/fixture-lists")

        fixture_lists = [flatten_open_contests(f) for f in require(data, "fixture_lists")]

        # Filter by sport if specified
        if sport:
            sport_code = sport.value if isinstance(sport, Sport) else str(sport).upper()
            fixture_lists = [fl for fl in fixture_lists if fl.get("sport") == sport_code]

        slates = [_validate(Slate, fl, "fixture_lists") for fl in fixture_lists]
        logger.info(f"Fetched {len(slates)} fixture lists from FanDuel")
        return slates

    async def slate_details(self, slate: SlateRef) -> SlateDetails:
        """Fetch a slate with its games.

        Args:
            slate: Slate or fixture list id

        Returns:
            SlateDetails with flattened away/home teams
        """
        slate_id = _ref_id(slate)
        data = await self._get(f"/fixture-lists/{slate_id}")

        details = _validate(SlateDetails, reshape_slate_details(data), "fixture_lists.0")
        logger.info(f"Fetched fixture list {slate_id} details ({len(details.games)} games)")
        return details

    async def available_contests(self, slate: SlateRef) -> ContestResult:
        """Fetch contests for a slate, with the entry fee list.

        Args:
            slate: Slate or fixture list id

        Returns:
            ContestResult holding contests and entry_fees
        """
        slate_id = _ref_id(slate)
        params = {"fixture_list": slate_id, "include_restricted": "false"}

        data = await self._get("/contests", params=params)

        result = _validate(ContestResult, merge_entry_fees(data), "contests")
        logger.info(f"Fetched {len(result.contests)} contests for fixture list {slate_id}")
        return result

    async def slate_games(self, slate: SlateRef) -> list[SlateGame]:
        """Fetch the games of a slate's player pool."""
        slate_id = _ref_id(slate)
        data = await self._get(f"/fixture-lists/{slate_id}/players")

        return [_validate(SlateGame, f, "fixtures") for f in require(data, "fixtures")]

    async def slate_players(self, slate: SlateRef) -> list[Player]:
        """Fetch the player pool for a slate.

        Args:
            slate: Slate or fixture list id

        Returns:
            List of players with salaries and fppg
        """
        slate_id = _ref_id(slate)
        data = await self._get(f"/fixture-lists/{slate_id}/players")

        players = [_validate(Player, p, "players") for p in require(data, "players")]
        logger.info(f"Fetched {len(players)} players for fixture list {slate_id}")
        return players

    async def upcoming_rosters(self) -> UpcomingRoster:
        """Fetch the logged-in user's upcoming rosters."""
        # The user id comes from the session identity
        await self.pipeline.ensure_session()
        user_id = self.session.identity.user_id

        data = await self._get(
            f"/users/{user_id}/rosters",
            params={"page": 1, "page_size": 1000, "status": "upcoming"},
        )

        up = _validate(UpcomingRoster, data, "rosters")
        logger.info(f"Fetched {len(up.rosters)} upcoming rosters for user {user_id}")
        return up

    async def submit_entry(self, contest: ContestRef, lineup: Lineup) -> list[ContestEntry]:
        """Enter a lineup into a contest.

        Args:
            contest: Contest or contest id
            lineup: Lineup to enter

        Returns:
            Entries created by FanDuel
        """
        url = f"{self.base_url}/contests/{_ref_id(contest)}/entries"
        return await self._roster_request("POST", url, lineup)

    async def update_entry(self, entry_id: Union[str, int], lineup: Lineup) -> list[ContestEntry]:
        """Replace the roster of an existing entry.

        Args:
            entry_id: Entry id assigned by FanDuel
            lineup: New lineup

        Returns:
            Updated entries
        """
        url = f"{self.base_url}/entries/{entry_id}"
        return await self._roster_request("PUT", url, lineup)

    async def _roster_request(self, method: str, url: str, lineup: Lineup) -> list[ContestEntry]:
        options = RequestOptions(
            method=method,
            json=build_entry_body(lineup),
            headers={"Content-Type": ENTRY_CONTENT_TYPE},
        )
        data = await self.pipeline.execute_json(url, options)

        entries = [_validate(ContestEntry, e, "entries") for e in require(data, "entries")]
        logger.info(f"{method} {url}: {len(entries)} entries")
        return entries
