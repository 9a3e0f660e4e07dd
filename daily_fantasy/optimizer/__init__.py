"""Lineup generation for FanDuel slates.

The pydfs-backed generator lives in `fanduel_optimizer` and is imported from
there, so loading the client does not load the solver.
"""

from .base import LineupGenerator

__all__ = ["LineupGenerator"]
