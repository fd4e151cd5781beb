from __future__ import annotations

import argparse
import random
from typing import Iterable

from .config import get_settings
from .errors import LeagueError
from .league import League
from .logger import configure_logging, get_logger
from .models import PredictedStanding

log = get_logger(__name__)


def format_standings(league: League) -> str:
    lines = ["Pos Team             Pts  P  W  D  L  GF  GA  GD"]
    for idx, row in enumerate(league.get_standings(), start=1):
        lines.append(
            f"{idx:>3} {row.team_name:<16} {row.points:>3} {row.played:>2} {row.wins:>2} {row.draws:>2}"
            f" {row.losses:>2} {row.goals:>3} {row.against:>3} {row.diff:>3}"
        )
    return "\n".join(lines)


def format_predictions(predictions: Iterable[PredictedStanding]) -> str:
    lines = ["Team             Pts  Strength   Odds"]
    for pred in sorted(predictions, key=lambda p: p.odds, reverse=True):
        odds = "out" if pred.eliminated else f"{pred.odds:5.1f}%"
        lines.append(f"{pred.team_name:<16} {pred.points:>3} {pred.strength:>9.2f} {odds:>6}")
    return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="league-sim", description="Round-robin league simulator")
    sub = parser.add_subparsers(dest="command")

    run = sub.add_parser("run", help="simulate a season in memory and print the table")
    run.add_argument("--teams", type=int, default=4)
    run.add_argument("--seed", type=int, default=None)
    run.add_argument("--weeks", type=int, default=1, help="number of weeks to play")
    run.add_argument("--all", action="store_true", help="play every remaining week")

    serve = sub.add_parser("serve", help="start the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8080)
    return parser


def run_season(teams: int, seed: int | None, weeks: int, play_all: bool) -> League:
    rng = random.Random(seed)
    league = League.create("Exhibition", teams, rng)
    if play_all:
        league.simulate_weeks(play_all=True, rng=rng)
    else:
        for _ in range(max(0, weeks)):
            if league.is_complete():
                break
            league.simulate_weeks(rng=rng)
    return league


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("league_sim.api:create_app", factory=True, host=args.host, port=args.port)
        return 0

    seed = getattr(args, "seed", None)
    try:
        league = run_season(
            getattr(args, "teams", 4),
            seed if seed is not None else settings.seed,
            getattr(args, "weeks", 1),
            getattr(args, "all", False),
        )
    except LeagueError as exc:
        log.error("Simulation failed: %s", exc)
        return 2

    print(f"Week {league.current_week}/{league.total_weeks}")
    print(format_standings(league))
    print()
    print(format_predictions(league.predict(settings.weight_points, settings.weight_strength)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
