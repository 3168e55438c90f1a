"""
Main CLI entry point for the BGG aggregator package.
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError

from ..data import CollectionAggregator, apply_filters
from ..error_handling import FetchError
from ..logging_config import setup_logging
from ..models import FilterState, GameData

logger = logging.getLogger(__name__)

SORT_CHOICES = ["name", "rating", "rank", "complexity", "playingTime", "owners"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Combine the owned BGG collections of several users")
    parser.add_argument("usernames", nargs="+", help="BGG usernames to aggregate")
    parser.add_argument("--players", type=int, default=None, help="Only games that support this player count")
    parser.add_argument("--min-time", type=int, default=None, help="Minimum play time in minutes")
    parser.add_argument("--max-time", type=int, default=None, help="Maximum play time in minutes")
    parser.add_argument("--min-complexity", type=float, default=None, help="Minimum weight (1-5)")
    parser.add_argument("--max-complexity", type=float, default=None, help="Maximum weight (1-5)")
    parser.add_argument("--min-rating", type=float, default=None, help="Minimum average rating")
    parser.add_argument("--search", type=str, default=None, help="Case-insensitive name search")
    parser.add_argument("--sort-by", choices=SORT_CHOICES, default="name", help="Sort key (default: name)")
    parser.add_argument("--order", choices=["asc", "desc"], default="asc", help="Sort order (default: asc)")
    parser.add_argument("--json", action="store_true", help="Print games as JSON instead of a table")
    parser.add_argument("--log-file", type=str, default=None, help="Custom log file name or absolute path")
    return parser


def filters_from_args(args: argparse.Namespace) -> FilterState:
    return FilterState(
        player_count=args.players,
        min_play_time=args.min_time,
        max_play_time=args.max_time,
        min_complexity=args.min_complexity,
        max_complexity=args.max_complexity,
        min_rating=args.min_rating,
        search=args.search,
        sort_by=args.sort_by,
        sort_order=args.order,
    )


def _fmt(value: Optional[float], digits: int = 1) -> str:
    if value is None:
        return "-"
    return f"{value:.{digits}f}" if isinstance(value, float) else str(value)


def format_table(games: List[GameData]) -> str:
    """Render games as a fixed-width text table."""
    header = f"{'Rank':>6}  {'Name':<40} {'Players':>7} {'Time':>7} {'Weight':>6} {'Rating':>6}  Owners"
    lines = [header, "-" * len(header)]
    for game in games:
        players = f"{_fmt(game.min_players)}-{_fmt(game.max_players)}"
        lines.append(
            f"{_fmt(game.rank):>6}  {game.name[:40]:<40} {players:>7} {_fmt(game.playing_time):>7} "
            f"{_fmt(game.complexity, 2):>6} {_fmt(game.rating):>6}  {', '.join(game.owners)}"
        )
    return "\n".join(lines)


async def run(usernames: List[str], filters: FilterState) -> List[GameData]:
    """Aggregate the users' collections and apply the filters."""
    async with CollectionAggregator() as aggregator:
        games = await aggregator.get_games(usernames)
    return apply_filters(games, filters)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point for collection aggregation."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Build a default per-run log filename when not provided
    if args.log_file:
        log_file = args.log_file
    else:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = f"run_{ts}_{len(args.usernames)}users.log"
    setup_logging(log_file)

    try:
        filters = filters_from_args(args)
    except ValidationError as e:
        parser.error(str(e))

    try:
        games = asyncio.run(run(args.usernames, filters))
    except FetchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nProcess interrupted by user", file=sys.stderr)
        return 130

    if args.json:
        print(json.dumps([game.to_dict() for game in games], indent=2))
    else:
        print(format_table(games))
        print(f"\n{len(games)} games")
    return 0


if __name__ == "__main__":
    sys.exit(main())
