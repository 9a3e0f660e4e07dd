"""Tests for the pydfs-lineup-optimizer backed FanDuel generator."""
import asyncio

import pytest

from daily_fantasy.common.exceptions import InsufficientPlayersError, OptimizerError
from daily_fantasy.common.models import Player, SlateDetails, Sport
from daily_fantasy.optimizer.fanduel_optimizer import (
    FanDuelOptimizer,
    convert_player,
    team_code,
)

NFL_SLOTS = {"QB": 1, "RB": 2, "WR": 3, "TE": 1, "D": 1}
FANDUEL_NFL_CAP = 60000


def make_player(player_id, position, salary=6000, fppg=10.0, team="t1", **extra):
    return Player(
        id=player_id,
        first_name="First",
        last_name=player_id,
        position=position,
        salary=salary,
        fppg=fppg,
        team={"_members": [team]},
        **extra,
    )


def nfl_pool():
    """Four teams, each with a full position set, all cheap enough to fit."""
    players = []
    for team in ("buf", "kc", "phi", "sf"):
        for position, count in NFL_SLOTS.items():
            for n in range(count + 1):
                players.append(make_player(
                    f"{team}-{position}-{n}",
                    position,
                    salary=5000,
                    fppg=5.0 + n,
                    team=team,
                ))
    return players


def test_team_code():
    assert team_code({"_members": ["123"]}) == "123"
    assert team_code({"_members": []}) == ""
    assert team_code("KC") == "KC"
    assert team_code(None) == ""


def test_convert_player():
    pdfs_player = convert_player(make_player("p1", "PG/SG", salary=7200, fppg=30.5, team="lal"))

    assert pdfs_player.id == "p1"
    assert pdfs_player.positions == ["PG", "SG"]
    assert pdfs_player.team == "lal"
    assert pdfs_player.salary == 7200
    assert pdfs_player.fppg == 30.5


@pytest.mark.parametrize(
    "overrides",
    [
        {"injured": True},
        {"injury_status": "O"},
        {"injury_status": "IR"},
        {"fppg": 0.0},
        {"fppg": None},
        {"salary": None},
        {"position": None},
    ],
)
def test_convert_player_skips_unusable(overrides):
    fields = {"player_id": "p1", "position": "QB", "salary": 8000, "fppg": 20.0}
    fields.update(overrides)
    player_id = fields.pop("player_id")
    position = fields.pop("position")
    salary = fields.pop("salary")
    fppg = fields.pop("fppg")

    player = make_player(player_id, position, salary=salary, fppg=fppg, **fields)

    assert convert_player(player) is None


def test_questionable_players_are_kept():
    assert convert_player(make_player("p1", "QB", injury_status="Q")) is not None


def test_unsupported_sport():
    details = SlateDetails(id="1", sport="CURLING")

    with pytest.raises(OptimizerError, match="not supported"):
        FanDuelOptimizer().optimize(details, nfl_pool())


def test_insufficient_players():
    details = SlateDetails(id="1", sport="NFL")
    players = [make_player("p1", "QB"), make_player("p2", "RB")]

    with pytest.raises(InsufficientPlayersError):
        FanDuelOptimizer().optimize(details, players)


def test_builds_fanduel_nfl_lineup():
    details = SlateDetails(id="77", sport="NFL")
    pool = nfl_pool()

    lineup = asyncio.run(FanDuelOptimizer().create_valid_lineup(details, pool))

    assert len(lineup.roster) == 9
    assert lineup.total_salary <= FANDUEL_NFL_CAP
    pool_ids = {p.id for p in pool}
    chosen = [slot.player.id for slot in lineup.roster]
    assert set(chosen) <= pool_ids
    assert len(set(chosen)) == 9
    # Roster slots map back to the original FanDuel player records
    assert all(isinstance(slot.player, Player) for slot in lineup.roster)


def test_forced_sport_overrides_slate():
    details = SlateDetails(id="77", sport="nfl")

    lineup = FanDuelOptimizer(sport=Sport.NFL).optimize(details, nfl_pool())

    assert len(lineup.roster) == 9
