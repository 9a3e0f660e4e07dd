#!/usr/bin/env python3
"""Browse FanDuel slates, build a lineup and optionally enter it.

Credentials come from config/settings.yaml or the environment (a .env file
is loaded if present):

    export DFS_FANDUEL_USERNAME="you@example.com"
    export DFS_FANDUEL_PASSWORD="..."

Usage:
    # List open slates
    python scripts/fanduel_slates.py --sport NFL

    # Show contests and players for a slate
    python scripts/fanduel_slates.py --slate-id 12345 --contests --players

    # Build a lineup for a slate and enter it into a contest
    python scripts/fanduel_slates.py --slate-id 12345 --lineup --submit 98765

Set DEBUG=1 (or debug: true in settings.yaml) for timestamped request/login
diagnostics.
"""
import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from daily_fantasy.common.config import get_config
from daily_fantasy.common.exceptions import DailyFantasyError
from daily_fantasy.common.log_setup import configure_logging
from daily_fantasy.common.models import Lineup, Slate
from daily_fantasy.fanduel import FanDuelApiClient, LineupService
from daily_fantasy.optimizer.fanduel_optimizer import FanDuelOptimizer

logger = logging.getLogger(__name__)


def display_slates(slates: list[Slate]) -> None:
    if not slates:
        print("No open fixture lists found.")
        return

    print(f"\n{'='*70}")
    print("AVAILABLE FIXTURE LISTS")
    print(f"{'='*70}")
    print(f"{'ID':<12} {'Sport':<6} {'Label':<30} {'Contests':>8}")
    print("-" * 70)

    for slate in slates:
        print(
            f"{slate.id:<12} "
            f"{slate.sport or '':<6} "
            f"{(slate.label or '')[:28]:<30} "
            f"{len(slate.contests):>8}"
        )

    print("-" * 70)
    print(f"Total: {len(slates)} fixture lists")


def display_lineup(lineup: Lineup) -> None:
    print(f"\n{'='*60}")
    print("LINEUP")
    print(f"{'='*60}")
    print(f"{'Pos':<6} {'Name':<30} {'Salary':>8} {'FPPG':>8}")
    print("-" * 60)

    for slot in lineup.roster:
        player = slot.player
        print(
            f"{slot.position:<6} "
            f"{player.name[:28]:<30} "
            f"${player.salary or 0:>7,} "
            f"{player.fppg or 0:>8.1f}"
        )

    print("-" * 60)
    print(f"Total salary: ${lineup.total_salary:,}")


async def run(args: argparse.Namespace) -> int:
    config = get_config(args.config)

    async with FanDuelApiClient(config.fanduel) as client:
        if not args.slate_id:
            display_slates(await client.list_slates(args.sport))
            return 0

        if args.contests:
            result = await client.available_contests(args.slate_id)
            print(f"\nContests for fixture list {args.slate_id}: {len(result.contests)}")
            for contest in result.contests:
                print(f"  {contest.id:<12} {contest.name or ''}")

        if args.players:
            players = await client.slate_players(args.slate_id)
            players.sort(key=lambda p: p.salary or 0, reverse=True)
            print(f"\n{'Name':<25} {'Pos':<5} {'Salary':>8} {'FPPG':>8}")
            for player in players:
                print(
                    f"{player.name[:23]:<25} "
                    f"{player.position or '':<5} "
                    f"${player.salary or 0:>7,} "
                    f"{player.fppg or 0:>8.1f}"
                )

        if args.lineup or args.submit:
            service = LineupService(client, FanDuelOptimizer())
            lineup = await service.create_valid_lineup(args.slate_id)
            display_lineup(lineup)

            if args.submit:
                entries = await service.submit_lineup(args.slate_id, args.submit, lineup)
                print(f"\nEntered contest {args.submit}: {[e.id for e in entries]}")

    return 0


def main():
    parser = argparse.ArgumentParser(
        description="FanDuel slates, contests and lineup entry",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", help="Path to settings.yaml")
    parser.add_argument("--sport", help="Filter slates by sport (NFL, NBA, ...)")
    parser.add_argument("--slate-id", help="Fixture list (slate) ID")
    parser.add_argument("--contests", action="store_true", help="Show contests for the slate")
    parser.add_argument("--players", action="store_true", help="Show the slate player pool")
    parser.add_argument("--lineup", action="store_true", help="Build a lineup for the slate")
    parser.add_argument("--submit", metavar="CONTEST_ID", help="Enter the built lineup into a contest")
    parser.add_argument("--log-level", help="Logging level (default: log_level from settings)")

    args = parser.parse_args()

    load_dotenv()
    configure_logging(get_config(args.config), args.log_level)

    try:
        sys.exit(asyncio.run(run(args)))
    except DailyFantasyError as e:
        logger.error(f"{type(e).__name__}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
