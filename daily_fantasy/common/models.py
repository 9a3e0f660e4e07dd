"""Pydantic models for type-safe data handling."""
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class Sport(str, Enum):
    """Supported sports."""
    NFL = "NFL"
    NBA = "NBA"
    MLB = "MLB"
    NHL = "NHL"
    PGA = "PGA"
    NASCAR = "NASCAR"
    SOCCER = "SOCCER"


class Identity(BaseModel):
    """Logged-in user, scraped from the site's page config."""
    user_id: str
    username: str
    api_client_id: str

    class Config:
        frozen = True


class ApiRecord(BaseModel):
    """Base for FanDuel API records.

    Payloads carry many more fields than the client reshapes; extra fields
    are kept so records round-trip.
    """

    @field_validator("id", mode="before", check_fields=False)
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        # The API mixes numeric and string ids
        if isinstance(value, int):
            return str(value)
        return value

    class Config:
        extra = "allow"


class Contest(ApiRecord):
    """A FanDuel contest scoped to a slate."""
    id: str
    name: Optional[str] = None


class Slate(ApiRecord):
    """A fixture list: games sharing one player pool.

    `contests` holds only the open contests of the fixture list.
    """
    id: str
    label: Optional[str] = None
    sport: Optional[str] = None
    start_date: Optional[str] = None
    contests: list[Contest] = []


class TeamSide(BaseModel):
    """Flattened away/home side of a game."""
    team: Any = None
    score: Any = None
    sport_specific: Any = None


class Fixture(ApiRecord):
    """Game inside slate details, with both sides flattened."""
    id: str
    away_team: TeamSide
    home_team: TeamSide


class SlateDetails(Slate):
    """A slate merged with its games.

    `contests` is passed through as the details endpoint returns it.
    """
    contests: Any = None
    games: list[Fixture] = []


class SlateGame(ApiRecord):
    """Raw fixture from the slate player pool endpoint."""
    id: str


class Player(ApiRecord):
    """Player from a slate's roster-eligible pool."""
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    position: Optional[str] = None
    salary: Optional[int] = None
    fppg: Optional[float] = None  # Fantasy points per game
    injured: Optional[bool] = None
    injury_status: Optional[str] = None
    team: Any = None

    @property
    def name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class LineupSlot(BaseModel):
    """Player assigned to a roster position."""
    position: str
    player: Player


class Lineup(BaseModel):
    """Roster produced by a lineup generator and submitted as an entry."""
    roster: list[LineupSlot]

    @property
    def total_salary(self) -> int:
        return sum(slot.player.salary or 0 for slot in self.roster)


class ContestEntry(ApiRecord):
    """Server-assigned record returned after a roster submission."""
    id: Optional[str] = None


class ContestResult(ApiRecord):
    """Contests for a slate plus the envelope's entry fees."""
    contests: list[Contest] = []
    entry_fees: Any = None
    meta: Optional[dict] = Field(default=None, alias="_meta")


class UpcomingRoster(ApiRecord):
    """The user's upcoming rosters, copied field for field from the API."""
    rosters: list[dict] = []
    meta: Optional[dict] = Field(default=None, alias="_meta")
