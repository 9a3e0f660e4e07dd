"""Abstract base class for lineup generators."""
from abc import ABC, abstractmethod

from ..common.models import Lineup, Player, SlateDetails


class LineupGenerator(ABC):
    """Produces a valid lineup for a slate from its player pool."""

    @abstractmethod
    async def create_valid_lineup(
        self,
        details: SlateDetails,
        players: list[Player],
    ) -> Lineup:
        """Build one lineup satisfying the slate's salary and position rules.

        Args:
            details: Slate with its games
            players: Slate player pool

        Returns:
            Lineup whose roster maps positions to players

        Raises:
            OptimizerError: If no valid lineup can be built
        """
        pass
