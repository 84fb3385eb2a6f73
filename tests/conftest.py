"""Shared row builders for trends tests."""

import pytest

from situational_trends.services.trends.grouping import GameTrends, group_rows
from situational_trends.services.trends.halftime import (
    HALFTIME_LINE_COLUMNS,
    HALFTIME_PCT_COLUMNS,
    HalftimeGame,
    group_halftime_rows,
)
from situational_trends.services.trends.situations import ALL_CATEGORIES


def build_row(
    game_id=101,
    side="away",
    game_date="2026-01-15",
    team_name=None,
    team_abbr=None,
    **columns,
) -> dict:
    """A normalized upstream row with every category column empty."""
    row = {
        "game_id": game_id,
        "game_date": game_date,
        "team_side": side,
        "team_name": team_name or f"{str(side).title()} Team",
        "team_abbr": team_abbr or str(side)[:3].upper(),
        "team_id": None,
    }
    for category in ALL_CATEGORIES:
        row[category.label_column] = None
        row[category.ats_record_column] = None
        row[category.ats_cover_pct_column] = None
        row[category.ou_record_column] = None
        row[category.ou_over_pct_column] = None
        row[category.ou_under_pct_column] = None
    row.update(columns)
    return row


def build_game(away: dict | None = None, home: dict | None = None, game_id=101, **kwargs) -> GameTrends:
    """A complete game from per-side column overrides."""
    rows = [
        build_row(game_id=game_id, side="away", **kwargs, **(away or {})),
        build_row(game_id=game_id, side="home", **kwargs, **(home or {})),
    ]
    return group_rows(rows)[0]


@pytest.fixture
def make_row():
    return build_row


@pytest.fixture
def make_game():
    return build_game


def build_halftime_row(
    game_id=201,
    side="away",
    game_date="2026-01-15",
    team_name=None,
    **columns,
) -> dict:
    """A normalized halftime row with every line and percentage empty."""
    row = {
        "game_id": game_id,
        "game_date": game_date,
        "team_side": side,
        "team_name": team_name or f"{str(side).title()} Team",
        "rest_bucket": None,
        "todays_lost_both_halves_last_game": False,
    }
    for column in HALFTIME_PCT_COLUMNS + HALFTIME_LINE_COLUMNS:
        row[column] = None
    row.update(columns)
    return row


def build_halftime_game(away: dict | None = None, home: dict | None = None, game_id=201, **kwargs) -> HalftimeGame:
    rows = [
        build_halftime_row(game_id=game_id, side="away", **kwargs, **(away or {})),
        build_halftime_row(game_id=game_id, side="home", **kwargs, **(home or {})),
    ]
    return group_halftime_rows(rows)[0]


@pytest.fixture
def make_halftime_row():
    return build_halftime_row


@pytest.fixture
def make_halftime_game():
    return build_halftime_game
