"""Multi-step lineup use cases on top of the API client."""
import asyncio
import logging
from typing import Union

from ..common.models import Contest, ContestEntry, Lineup, Slate
from ..optimizer.base import LineupGenerator
from .api import FanDuelApiClient, SlateRef

logger = logging.getLogger(__name__)


class LineupService:
    """Builds lineups for slates and enters them into contests."""

    def __init__(self, client: FanDuelApiClient, generator: LineupGenerator):
        self.client = client
        self.generator = generator

    async def create_valid_lineup(self, slate: SlateRef) -> Lineup:
        """Build a valid lineup for a slate.

        Slate details and the player pool are fetched concurrently, then
        handed to the lineup generator. Failures propagate unchanged.
        """
        details, players = await asyncio.gather(
            self.client.slate_details(slate),
            self.client.slate_players(slate),
        )
        logger.info(f"Generating lineup for fixture list {details.id} from {len(players)} players")

        return await self.generator.create_valid_lineup(details, players)

    async def submit_lineup(
        self,
        slate: SlateRef,
        contest: Union[Contest, str, int],
        lineup: Lineup,
    ) -> list[ContestEntry]:
        """Enter a lineup into a contest on the slate."""
        slate_id = slate.id if isinstance(slate, Slate) else slate
        logger.info(f"Submitting lineup ({len(lineup.roster)} players) for fixture list {slate_id}")
        return await self.client.submit_entry(contest, lineup)

    async def update_lineup(
        self,
        slate: SlateRef,
        entry_id: Union[str, int],
        lineup: Lineup,
    ) -> list[ContestEntry]:
        """Replace the roster of an existing entry."""
        slate_id = slate.id if isinstance(slate, Slate) else slate
        logger.info(f"Updating entry {entry_id} for fixture list {slate_id}")
        return await self.client.update_entry(entry_id, lineup)
