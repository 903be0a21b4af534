"""Build optimizer candidates from tabular player data.

The optimizer consumes ``PlayerCandidate`` models; upstream data usually
arrives as a DataFrame (one row per player).  Columns other than the
known ones are carried through untouched in ``extra`` so the caller can
display them next to the chosen lineup.

Expected columns::

    player_id, position, cost, <score_col>      required
    name, team, injured, status                 optional
"""

from __future__ import annotations

import math
from pathlib import Path

import pandas as pd

from lineup_optimizer.logging_config import get_logger
from lineup_optimizer.schemas.player import PlayerCandidate, Position
from lineup_optimizer.utils.nan_handling import safe_float, scrub_value

logger = get_logger(__name__)

_KNOWN_COLS = {"player_id", "position", "cost", "name", "team", "injured", "status"}

# Longer position labels seen in exports, mapped to the canonical codes
POSITION_ALIASES: dict[str, str] = {
    "GK": "GK", "GKP": "GK", "GOALKEEPER": "GK", "TW": "GK",
    "DEF": "DEF", "DEFENDER": "DEF", "ABW": "DEF",
    "MID": "MID", "MIDFIELDER": "MID", "MF": "MID",
    "FWD": "FWD", "FORWARD": "FWD", "ANG": "FWD",
}


def _text(value) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value)


def normalize_position(value) -> Position | None:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    code = POSITION_ALIASES.get(str(value).strip().upper())
    return Position(code) if code else None


_TRUE_FLAGS = {"true", "1", "yes", "y"}


def parse_flag(value) -> bool:
    """Read a yes/no cell; text such as "False" or "0" counts as False."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_FLAGS
    return bool(value)


def candidates_from_frame(
    df: pd.DataFrame,
    score_col: str = "predicted_score",
) -> list[PlayerCandidate]:
    """Convert a player DataFrame into candidates, preserving row order.

    Rows missing position, cost or score, or with an unknown position, a
    negative cost or a non-finite score, are skipped with a warning.
    """
    required = ["player_id", "position", "cost", score_col]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Player frame missing required column(s): {', '.join(missing)}")

    clean = df.dropna(subset=required)
    if len(clean) < len(df):
        logger.warning("Dropped %d row(s) with missing %s", len(df) - len(clean), required)

    extra_cols = [c for c in clean.columns if c not in _KNOWN_COLS and c != score_col]
    candidates: list[PlayerCandidate] = []
    skipped = 0
    for row in clean.to_dict(orient="records"):
        position = normalize_position(row["position"])
        cost = safe_float(row["cost"], default=-1.0)
        score = safe_float(row[score_col], default=math.nan)
        if position is None or cost < 0 or math.isnan(score):
            skipped += 1
            continue
        candidates.append(PlayerCandidate(
            player_id=str(row["player_id"]),
            position=position,
            cost=int(round(cost)),
            predicted_score=score,
            name=_text(row.get("name")),
            team=_text(row.get("team")),
            injured=parse_flag(row.get("injured")),
            status=int(safe_float(row.get("status"), default=0.0)),
            extra={c: scrub_value(row[c]) for c in extra_cols},
        ))
    if skipped:
        logger.warning(
            "Skipped %d row(s) with unknown position, negative cost or non-finite score",
            skipped,
        )
    return candidates


def read_player_frame(path: str | Path) -> pd.DataFrame:
    """Read a CSV or JSON player file into a DataFrame."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        df = pd.read_json(path)
    else:
        df = pd.read_csv(path)
    logger.info("Loaded %d player rows from %s", len(df), path)
    return df


def load_candidates(path: str | Path, score_col: str = "predicted_score") -> list[PlayerCandidate]:
    """Read a CSV or JSON player file and convert it to candidates."""
    return candidates_from_frame(read_player_frame(path), score_col=score_col)
