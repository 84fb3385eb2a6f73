"""Row validation and pairing of team rows into two-sided games."""

import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any

import structlog

from situational_trends.services.trends.situations import (
    ALL_CATEGORIES,
    VALID_SIDES,
    CategoryTrend,
    SituationalTrendRow,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class GameTrends:
    """Both teams' situational rows for one game."""

    game_id: int | str
    game_date: date | None
    away_side: SituationalTrendRow | None = None
    home_side: SituationalTrendRow | None = None
    tipoff_time: str | None = None

    @property
    def is_complete(self) -> bool:
        """Both slots filled, each by a row tagged for that slot."""
        return (
            self.away_side is not None
            and self.home_side is not None
            and self.away_side.team_side == "away"
            and self.home_side.team_side == "home"
        )


def as_pct(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        pct = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(pct) else pct


def as_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def has_valid_identity(raw: Mapping[str, Any]) -> bool:
    """True when the row has a game_id and a side of exactly "home" or "away"."""
    side = raw.get("team_side")
    if side not in VALID_SIDES:
        logger.warning(
            "Dropping row with invalid team_side",
            game_id=raw.get("game_id"),
            team_side=side,
        )
        return False

    if raw.get("game_id") is None:
        logger.warning("Dropping row without game_id", team_side=side)
        return False

    return True


def build_trend_row(raw: Mapping[str, Any]) -> SituationalTrendRow | None:
    """
    Build a SituationalTrendRow from one normalized upstream row.

    Returns None when the side discriminator is not exactly "home" or
    "away", or when the game id or game date is unusable.
    """
    if not has_valid_identity(raw):
        return None
    side = raw["team_side"]

    game_date = as_date(raw.get("game_date"))
    if game_date is None:
        logger.warning(
            "Dropping row with invalid game_date",
            game_id=raw.get("game_id"),
            game_date=raw.get("game_date"),
        )
        return None

    categories = {}
    for category in ALL_CATEGORIES:
        categories[category.key] = CategoryTrend(
            situation=raw.get(category.label_column),
            ats_record=raw.get(category.ats_record_column),
            ats_cover_pct=as_pct(raw.get(category.ats_cover_pct_column)),
            ou_record=raw.get(category.ou_record_column),
            ou_over_pct=as_pct(raw.get(category.ou_over_pct_column)),
            ou_under_pct=as_pct(raw.get(category.ou_under_pct_column)),
        )

    return SituationalTrendRow(
        game_id=raw["game_id"],
        game_date=game_date,
        team_side=side,
        team_name=raw.get("team_name") or "",
        team_abbr=raw.get("team_abbr") or "",
        team_id=raw.get("team_id"),
        categories=categories,
    )


def group_rows(
    rows: Iterable[Mapping[str, Any] | Any],
    build: Callable[[Mapping[str, Any]], Any] = build_trend_row,
    game_type: type[GameTrends] = GameTrends,
) -> list[GameTrends]:
    """
    Pair team rows into complete two-sided games.

    Rows are keyed by game_id. The first row seen for a game creates it;
    later rows fill the slot named by their side. A later row for an
    already-filled slot replaces the earlier one. Games missing either
    side are left out of the result entirely.

    Args:
        rows: Normalized upstream rows or already-built team rows
        build: Turns one upstream mapping into a team row, or None to drop it
        game_type: GameTrends class to create per game

    Returns:
        Complete games in first-seen order
    """
    games: dict[int | str, GameTrends] = {}
    dropped = 0

    for raw in rows:
        row = build(raw) if isinstance(raw, Mapping) else raw
        if row is None or row.team_side not in VALID_SIDES:
            dropped += 1
            continue

        game = games.get(row.game_id)
        if game is None:
            game = game_type(game_id=row.game_id, game_date=row.game_date)

        slot = "away_side" if row.team_side == "away" else "home_side"
        if getattr(game, slot) is not None:
            logger.warning(
                "Duplicate side row replaced",
                game_id=row.game_id,
                team_side=row.team_side,
            )
        games[row.game_id] = replace(game, **{slot: row})

    complete = [g for g in games.values() if g.is_complete]
    partial = len(games) - len(complete)

    if partial:
        logger.info(
            "Excluded partial games",
            partial=partial,
            game_ids=[g.game_id for g in games.values() if not g.is_complete],
        )

    logger.info(
        "Grouped trend rows",
        games=len(complete),
        dropped_rows=dropped,
    )
    return complete


def merge_tipoff_times(
    games: Iterable[GameTrends],
    tipoffs: Mapping[Any, str | None],
) -> list[GameTrends]:
    """Attach tipoff times by game_id. Games without one keep None."""
    return [
        replace(game, tipoff_time=tipoffs.get(game.game_id) or None)
        for game in games
    ]
