"""FanDuel lineup generator using pydfs-lineup-optimizer."""
import asyncio
import logging
from typing import Any, Optional

from pydfs_lineup_optimizer import Site, Sport as PDFSSport, get_optimizer, LineupOptimizer
from pydfs_lineup_optimizer.exceptions import LineupOptimizerException
from pydfs_lineup_optimizer.player import Player as PDFSPlayer

from ..common.exceptions import InsufficientPlayersError, NoValidLineupError, OptimizerError
from ..common.models import Lineup, LineupSlot, Player, SlateDetails, Sport
from .base import LineupGenerator

logger = logging.getLogger(__name__)


# Map our Sport enum to pydfs-lineup-optimizer Sport enum
SPORT_MAPPING = {
    Sport.NFL: PDFSSport.FOOTBALL,
    Sport.NBA: PDFSSport.BASKETBALL,
    Sport.MLB: PDFSSport.BASEBALL,
    Sport.NHL: PDFSSport.HOCKEY,
    Sport.PGA: PDFSSport.GOLF,
    Sport.NASCAR: PDFSSport.NASCAR,
    Sport.SOCCER: PDFSSport.SOCCER,
}

# FanDuel injury statuses that rule a player out (GTD/Q players are kept)
EXCLUDED_STATUSES = {"O", "IR", "NA"}


def team_code(team: Any) -> str:
    """FanDuel references teams as {"_members": [id]}; return the id."""
    if isinstance(team, dict):
        members = team.get("_members") or []
        return str(members[0]) if members else ""
    return str(team or "")


def convert_player(player: Player) -> Optional[PDFSPlayer]:
    """Convert a FanDuel player to a pydfs Player.

    Returns None for players the optimizer should not see: injured or out,
    no projection, or no salary/position.
    """
    if player.injured or player.injury_status in EXCLUDED_STATUSES:
        return None
    if not player.fppg or player.fppg <= 0:
        return None
    if player.salary is None or not player.position:
        return None

    return PDFSPlayer(
        player_id=player.id,
        first_name=player.first_name or "",
        last_name=player.last_name or "",
        positions=player.position.split("/"),
        team=team_code(player.team),
        salary=player.salary,
        fppg=player.fppg,
    )


class FanDuelOptimizer(LineupGenerator):
    """Lineup generator for FanDuel classic contests."""

    def __init__(self, sport: Optional[Sport] = None):
        """Initialize FanDuel optimizer.

        Args:
            sport: Force a sport. By default the slate's sport is used.
        """
        self.sport = sport

    def _resolve_sport(self, details: SlateDetails) -> PDFSSport:
        sport = self.sport
        if sport is None:
            try:
                sport = Sport(str(details.sport).upper())
            except ValueError as e:
                raise OptimizerError(f"Sport {details.sport} not supported") from e

        pdfs_sport = SPORT_MAPPING.get(sport)
        if not pdfs_sport:
            raise OptimizerError(f"Sport {sport} not supported")
        return pdfs_sport

    async def create_valid_lineup(self, details: SlateDetails, players: list[Player]) -> Lineup:
        # The solver is synchronous; keep it off the event loop
        return await asyncio.to_thread(self.optimize, details, players)

    def optimize(self, details: SlateDetails, players: list[Player]) -> Lineup:
        """Build the single best lineup for a slate.

        Raises:
            InsufficientPlayersError: Fewer usable players than roster slots
            NoValidLineupError: The solver found no lineup
        """
        optimizer: LineupOptimizer = get_optimizer(Site.FANDUEL, self._resolve_sport(details))

        pdfs_players = [p for p in (convert_player(player) for player in players) if p]
        roster_size = len(optimizer.settings.positions)
        if len(pdfs_players) < roster_size:
            raise InsufficientPlayersError(
                f"Not enough usable players ({len(pdfs_players)}, need {roster_size}) "
                f"for fixture list {details.id}"
            )

        optimizer.load_players(pdfs_players)
        logger.info(f"Loaded {len(pdfs_players)} players into optimizer for fixture list {details.id}")

        try:
            pdfs_lineup = next(iter(optimizer.optimize(n=1)), None)
        except LineupOptimizerException as e:
            raise NoValidLineupError(f"Optimization failed for fixture list {details.id}: {e}") from e

        if pdfs_lineup is None:
            raise NoValidLineupError(f"No lineup generated for fixture list {details.id}")

        player_lookup = {p.id: p for p in players}
        roster = [
            LineupSlot(position=p.lineup_position, player=player_lookup[p.id])
            for p in pdfs_lineup.players
        ]

        lineup = Lineup(roster=roster)
        logger.info(f"Generated lineup with salary {lineup.total_salary}")
        return lineup
