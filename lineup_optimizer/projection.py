"""Predicted-score projection from point history, minutes and match odds.

Produces the ``predicted_score`` column the optimizer maximises:

    predicted = w_base * base
              + w_form * form_boost
              + w_odds * odds_modifier
              + w_home * home_bonus
              + w_minutes * minutes_weight
              - w_risk * risk_penalty

Odds probabilities are taken from the home side's perspective for both
teams in a match.  Risk data is not available yet, so the penalty is 0.
"""

from __future__ import annotations

import json
from dataclasses import replace

import numpy as np
import pandas as pd

from lineup_optimizer.config import ProjectionConfig, projection_cfg
from lineup_optimizer.logging_config import get_logger

log = get_logger(__name__)

PROJECTION_COLS = [
    "predicted_score",
    "value_ratio",
    "form_boost",
    "odds_modifier",
    "home_bonus",
    "minutes_weight",
]


def implied_probabilities(odds: dict) -> tuple[float, float, float]:
    """Return (win, draw, loss) probabilities for one odds row.

    ``format='prob'`` rows are normalised by their sum; decimal odds are
    inverted and normalised.  Degenerate rows give all zeros.
    """
    prices = [float(odds.get("home", 0)), float(odds.get("draw", 0)), float(odds.get("away", 0))]
    if odds.get("format", "decimal") == "prob":
        total = sum(prices)
        if total == 0:
            return 0.0, 0.0, 0.0
        return prices[0] / total, prices[1] / total, prices[2] / total

    inverse = [1.0 / p if p > 0 else 0.0 for p in prices]
    total = sum(inverse)
    if total == 0:
        return 0.0, 0.0, 0.0
    return inverse[0] / total, inverse[1] / total, inverse[2] / total


def _as_array(values) -> np.ndarray:
    if values is None or (isinstance(values, float) and np.isnan(values)):
        return np.array([], dtype=float)
    if isinstance(values, str):
        # CSV cells hold histories as JSON lists, e.g. "[2, 4, 6]"
        values = json.loads(values) if values.strip() else []
    return np.asarray(list(values), dtype=float)


def base_score(points: np.ndarray, mode: str, window: int = 3) -> float:
    if len(points) == 0:
        return 0.0
    if mode == "sum":
        return float(points.sum())
    if mode == "last3":
        return float(points[-window:].mean())
    return float(points.mean())


def form_boost(points: np.ndarray, window: int = 3) -> float:
    """z-score of the recent mean against the season mean (population std)."""
    if len(points) == 0:
        return 0.0
    mean = points.mean()
    recent = points[-window:].mean()
    std = float(points.std()) if len(points) > 1 else 0.0
    return float((recent - mean) / (std or 1.0))


def minutes_weight(minutes: np.ndarray, full_match: int = 90) -> float:
    if len(minutes) == 0:
        return 1.0
    return float(np.clip(minutes.sum() / (len(minutes) * full_match), 0.0, 1.0))


def compute_projections(
    players: pd.DataFrame,
    matches: list[dict] | None = None,
    odds: list[dict] | None = None,
    params: ProjectionConfig | None = None,
    **overrides,
) -> pd.DataFrame:
    """Add projection columns to a player DataFrame.

    Parameters
    ----------
    players:
        One row per player with ``team``, ``cost``, ``points_hist`` (list of
        per-matchday points) and optionally ``minutes_hist``.
    matches:
        ``{"match_id", "home", "away"}`` rows for the upcoming matchday.
    odds:
        ``{"match_id", "home", "draw", "away", "format"}`` rows.
    params / overrides:
        Projection weights; keyword overrides replace single fields.

    Returns
    -------
    Copy of ``players`` with :data:`PROJECTION_COLS` added.
    """
    cfg = params or projection_cfg
    if overrides:
        cfg = replace(cfg, **overrides)
    if cfg.base_mode not in cfg.base_modes:
        raise ValueError(f"Unknown base mode {cfg.base_mode!r}; expected one of {cfg.base_modes}")

    matches = matches or []
    odds_by_match = {o["match_id"]: o for o in (odds or [])}

    def _match_for(team: str) -> dict | None:
        for m in matches:
            if m.get("home") == team or m.get("away") == team:
                return m
        return None

    df = players.copy()
    rows: list[dict] = []
    for rec in df.to_dict(orient="records"):
        points = _as_array(rec.get("points_hist"))
        minutes = _as_array(rec.get("minutes_hist"))
        team = rec.get("team")
        match = _match_for(team)
        odds_row = odds_by_match.get(match.get("match_id")) if match else None
        win, draw, loss = implied_probabilities(odds_row) if odds_row else (0.0, 0.0, 0.0)

        odds_mod = 0.0 if cfg.w_odds == 0 else cfg.alpha * win + cfg.beta * draw - cfg.gamma * loss
        home = 1.0 if match and match.get("home") == team else 0.0
        mins = minutes_weight(minutes, cfg.full_match_minutes)
        form = form_boost(points, cfg.form_window)
        risk_penalty = 0.0

        predicted = (
            cfg.w_base * base_score(points, cfg.base_mode, cfg.form_window)
            + cfg.w_form * form
            + cfg.w_odds * odds_mod
            + cfg.w_home * home
            + cfg.w_minutes * mins
            - cfg.w_risk * risk_penalty
        )
        cost = float(rec.get("cost") or 0)
        rows.append({
            "predicted_score": predicted,
            "value_ratio": predicted / cost if cost > 0 else 0.0,
            "form_boost": form,
            "odds_modifier": odds_mod,
            "home_bonus": home,
            "minutes_weight": mins,
        })

    proj = pd.DataFrame(rows, index=df.index, columns=PROJECTION_COLS)
    for col in PROJECTION_COLS:
        df[col] = proj[col]
    log.info("Projected %d players (base=%s)", len(df), cfg.base_mode)
    return df
