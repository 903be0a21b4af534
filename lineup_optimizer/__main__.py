"""Command-line entry point: python -m lineup_optimizer players.csv --budget 150000000

Loads a player pool (optionally projecting predicted scores from point
history with --project), runs the formation sweep and prints the best lineup
plus the ranked alternatives as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from lineup_optimizer.config import solver_cfg
from lineup_optimizer.data.loader import candidates_from_frame, read_player_frame
from lineup_optimizer.logging_config import setup_logging
from lineup_optimizer.projection import compute_projections
from lineup_optimizer.schemas.lineup_rules import FORMATION_NAMES
from lineup_optimizer.schemas.player import SweepResult
from lineup_optimizer.solver.exact import DEFAULT_BACKEND
from lineup_optimizer.solver.sweep import optimize_arena_lineup, optimize_lineup
from lineup_optimizer.utils.nan_handling import scrub_nan, scrub_value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lineup_optimizer",
        description="Pick the best-scoring starting XI within a budget.",
    )
    parser.add_argument("players", help="CSV or JSON file with one row per player")
    parser.add_argument("--budget", type=float, default=None,
                        help="Spending ceiling (default: arena budget %d)" % solver_cfg.arena_budget)
    parser.add_argument("--formation", choices=FORMATION_NAMES, default=None,
                        help="Restrict to one formation (default: compare all)")
    parser.add_argument("--exclude", action="append", default=[], metavar="PLAYER_ID",
                        help="Player ID to leave out (repeatable)")
    parser.add_argument("--score-col", default="predicted_score",
                        help="Column holding the predicted score")
    parser.add_argument("--project", action="store_true",
                        help="Compute predicted scores from the points_hist column first")
    parser.add_argument("--fixtures", default=None, metavar="JSON",
                        help="With --project: file with \"matches\" and \"odds\" lists")
    parser.add_argument("--arena", action="store_true",
                        help="Fixed arena budget, all formations, skip injured/unavailable players")
    parser.add_argument("--no-milp", action="store_true",
                        help="Skip the MILP and use the greedy heuristic only")
    parser.add_argument("--workers", type=int, default=1,
                        help="Evaluate formations on this many threads")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def result_to_dict(sweep: SweepResult) -> dict:
    """JSON-safe view of a sweep result."""
    best = sweep.best
    return {
        "found": sweep.found,
        "formation": best.formation if best else None,
        "objective": best.objective if best else None,
        "remaining_budget": best.remaining_budget if best else None,
        "method": best.method.value if best else None,
        "lineup": scrub_nan([p.model_dump(mode="json") for p in best.lineup]) if best else [],
        "alternatives": [a.model_dump(mode="json") for a in sweep.alternatives],
        "stats": scrub_value(sweep.stats.model_dump()),
    }


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        force=True,
    )

    df = read_player_frame(args.players)
    score_col = args.score_col
    if args.project:
        if "points_hist" not in df.columns:
            parser.error("--project needs a points_hist column in the player file")
        fixtures = {}
        if args.fixtures:
            with open(args.fixtures) as f:
                fixtures = json.load(f)
        df = compute_projections(df, fixtures.get("matches"), fixtures.get("odds"))
        score_col = "predicted_score"
    players = candidates_from_frame(df, score_col=score_col)
    backend = None if args.no_milp else DEFAULT_BACKEND

    if args.arena:
        sweep = optimize_arena_lineup(
            players, exclusions=args.exclude, backend=backend, max_workers=args.workers,
        )
    else:
        budget = args.budget if args.budget is not None else solver_cfg.arena_budget
        sweep = optimize_lineup(
            players, budget,
            formation=args.formation,
            exclusions=args.exclude,
            backend=backend,
            max_workers=args.workers,
        )

    json.dump(result_to_dict(sweep), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0 if sweep.found else 1


if __name__ == "__main__":
    sys.exit(main())
