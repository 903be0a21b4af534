"""Player availability checks and pool filtering."""

from __future__ import annotations

from typing import Callable, Iterable

from lineup_optimizer.config import eligibility_cfg
from lineup_optimizer.logging_config import get_logger
from lineup_optimizer.schemas.player import PlayerCandidate

logger = get_logger(__name__)


def is_player_unavailable(player: PlayerCandidate) -> bool:
    """True when the player is flagged injured or carries an unavailable status code."""
    return player.injured or player.status in eligibility_cfg.unavailable_status_codes


def filter_eligible(
    players: list[PlayerCandidate],
    exclusions: Iterable[str] = (),
    is_unavailable: Callable[[PlayerCandidate], bool] | None = None,
) -> list[PlayerCandidate]:
    """Drop excluded (and optionally unavailable) players, keeping pool order."""
    excluded = set(exclusions)
    kept = [
        p for p in players
        if p.player_id not in excluded
        and not (is_unavailable is not None and is_unavailable(p))
    ]
    dropped = len(players) - len(kept)
    if dropped:
        logger.debug("Filtered out %d player(s); %d remaining", dropped, len(kept))
    return kept
