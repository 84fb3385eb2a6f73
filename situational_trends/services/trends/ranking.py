"""Ordering of games for display."""

import re
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime, time, timezone
from typing import Literal, TypeVar, get_args
from zoneinfo import ZoneInfo

import structlog

from situational_trends.services.trends.grouping import GameTrends
from situational_trends.services.trends.rounding import edge_magnitude
from situational_trends.services.trends.scorer import (
    MIN_ATS_DIFFERENCE,
    MIN_GAMES_THRESHOLD,
    MIN_PERCENTAGE,
    ScoredGame,
    score_game,
)
from situational_trends.services.trends.situations import (
    SCORING_CATEGORIES,
    SituationCategory,
)

logger = structlog.get_logger()

SortMode = Literal["time", "ou-consensus", "ats-dominance"]
SORT_MODES: tuple[str, ...] = get_args(SortMode)

DEFAULT_TIPOFF_TIMEZONE = "America/New_York"

_TIME_ONLY = re.compile(r"^\d{1,2}:\d{2}(:\d{2})?$")

T = TypeVar("T")


def parse_tipoff(
    tipoff: str | None,
    game: GameTrends,
    tz_name: str = DEFAULT_TIPOFF_TIMEZONE,
) -> datetime | None:
    """
    Tipoff as an aware UTC datetime.

    Accepts full ISO timestamps (naive ones are taken as UTC) and
    time-only strings like "19:30", which are placed on the game date in
    tz_name. Anything else is treated as unknown.
    """
    if not tipoff:
        return None

    value = tipoff.strip()
    if _TIME_ONLY.match(value):
        if game.game_date is None:
            return None
        try:
            clock = time(*(int(p) for p in value.split(":")))
        except ValueError:
            return None
        local = datetime.combine(game.game_date, clock, tzinfo=ZoneInfo(tz_name))
        return local.astimezone(timezone.utc)

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def time_sort_key(game: GameTrends, tz_name: str = DEFAULT_TIPOFF_TIMEZONE) -> tuple:
    """Known tipoffs first in tipoff order, then the rest by game date."""
    game_date = game.game_date or date.max
    tipoff = parse_tipoff(game.tipoff_time, game, tz_name)
    if tipoff is None:
        return (1, 0.0, game_date)
    return (0, tipoff.timestamp(), game_date)


def rank(
    games: Iterable[GameTrends],
    mode: SortMode = "time",
    categories: Sequence[SituationCategory] = SCORING_CATEGORIES,
    tz_name: str = DEFAULT_TIPOFF_TIMEZONE,
    min_games: int = MIN_GAMES_THRESHOLD,
    min_percentage: float = MIN_PERCENTAGE,
    min_difference: float = MIN_ATS_DIFFERENCE,
) -> list[ScoredGame]:
    """
    Order games for display.

    - time: ascending by tipoff; games with a known tipoff come first,
      then by game date.
    - ou-consensus / ats-dominance: descending by that score, computed
      fresh on every call. Equal scores keep input order.

    Scores are only filled in for the score modes. Incomplete games are
    skipped. Inputs are not modified and the same input always yields
    the same order.

    Raises:
        ValueError: If mode is not a known sort mode
    """
    if mode not in SORT_MODES:
        raise ValueError(f"Unknown sort mode: {mode!r}")

    games = list(games)
    complete = [g for g in games if g.is_complete]
    if len(complete) < len(games):
        logger.warning(
            "Skipping incomplete games",
            skipped=len(games) - len(complete),
        )
    games = complete

    if mode == "time":
        ranked = sorted(
            (ScoredGame(game=g) for g in games),
            key=lambda s: time_sort_key(s.game, tz_name),
        )
    else:
        scored = [
            score_game(
                g,
                categories,
                min_games=min_games,
                min_percentage=min_percentage,
                min_difference=min_difference,
            )
            for g in games
        ]
        if mode == "ou-consensus":
            ranked = sorted(scored, key=lambda s: -s.ou_consensus_score)
        else:
            ranked = sorted(scored, key=lambda s: -s.ats_dominance_score)

    logger.debug("Ranked games", mode=mode, count=len(ranked))
    return ranked


def sort_by_edge(items: Iterable[T], edge_of: Callable[[T], float | None]) -> list[T]:
    """
    Order items by rounded edge size, largest first.

    Uses the same half-point rounding as the displayed edge. Items with
    no edge go last; ties keep input order.
    """
    def key(item: T) -> tuple:
        edge = edge_of(item)
        if edge is None:
            return (1, 0.0)
        return (0, -edge_magnitude(edge))

    return sorted(items, key=key)
