"""Halftime trends: first half, second half and flip leans, and their ranking.

Halftime rows carry per-team win/over percentages split by half. Those are
graded into red/yellow/green bands (53 and 57 are the cut points), and the
two teams' bands are compared to produce a lean. A lean is a no play, a
slight lean or a heavy lean, toward a side (spread) or a direction (total).

Percentages may arrive on either a 0-1 or a 0-100 scale. Anything at or
below 1 is read as a fraction.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal, get_args

import structlog

from situational_trends.services.trends.grouping import (
    GameTrends,
    as_date,
    as_pct,
    group_rows,
    has_valid_identity,
)
from situational_trends.services.trends.ranking import (
    DEFAULT_TIPOFF_TIMEZONE,
    sort_by_edge,
    time_sort_key,
)
from situational_trends.services.trends.situations import TeamSide

logger = structlog.get_logger()

HalftimeSortMode = Literal["time", "1h", "2h", "flip"]
HALFTIME_SORT_MODES: tuple[str, ...] = get_args(HalftimeSortMode)

HalftimeView = Literal["ats", "ou"]
HALFTIME_VIEWS: tuple[str, ...] = get_args(HalftimeView)

LeanStrength = Literal["no_play", "slight", "heavy"]
FlipLean = Literal["no_play", "heavy_same", "slight_flip", "heavy_flip"]
Bucket = Literal["red", "yellow", "green"]

RED_AT_OR_BELOW = 53.0
YELLOW_AT_OR_BELOW = 57.0

# Flip grading
FLIP_RED_SUPPORT_ABOVE = 45.0
SAME_SIDE_AT_OR_BELOW = 40.0

# O/U lean cut points on the game average
OU_HEAVY_OVER = 57.0
OU_SLIGHT_OVER = 53.0
OU_SLIGHT_UNDER = 47.0
OU_HEAVY_UNDER = 43.0

FIRST_HALF_SIDE_COLUMNS = (
    "first_half_side_win_pct",
    "first_half_side_rest_win_pct",
    "first_half_favdog_side_win_pct",
)
SECOND_HALF_SIDE_COLUMNS = (
    "second_half_side_win_pct",
    "second_half_side_rest_win_pct",
)
FLIP_COLUMNS = ("side_flip_pct", "side_rest_flip_pct")

FIRST_HALF_OU_COLUMNS = (
    "first_half_ou_side_over_pct",
    "first_half_ou_side_rest_over_pct",
    "first_half_ou_favdog_side_over_pct",
)
SECOND_HALF_OU_COLUMNS = (
    "second_half_ou_side_over_pct",
    "second_half_ou_side_rest_over_pct",
)
OU_FLIP_COLUMN = "ou_side_flip_pct"

HALFTIME_PCT_COLUMNS = (
    FIRST_HALF_SIDE_COLUMNS
    + SECOND_HALF_SIDE_COLUMNS
    + FLIP_COLUMNS
    + FIRST_HALF_OU_COLUMNS
    + SECOND_HALF_OU_COLUMNS
    + (
        OU_FLIP_COLUMN,
        "ou_side_rest_flip_pct",
        "second_half_ou_favdog_side_over_pct",
        "lost_both_1h_side_win_pct",
    )
)

# Today's half lines
HALFTIME_LINE_COLUMNS = (
    "todays_first_half_ats",
    "todays_second_half_ats",
    "todays_first_half_ou",
    "todays_second_half_ou",
)

REST_BUCKET_LABELS = {
    "no_rest": "No rest",
    "one_day_off": "1 day off",
    "two_three_days_off": "2-3 days off",
    "four_plus_days_off": "4+ days off",
}

_BUCKET_ORDER: tuple[Bucket, ...] = ("red", "yellow", "green")

FLIP_WEIGHTS: dict[str, int] = {
    "heavy_flip": 3,
    "slight_flip": 2,
    "heavy_same": 1,
    "no_play": 0,
}


@dataclass(frozen=True)
class HalftimeTrendRow:
    """One team's halftime trends for one game."""

    game_id: int | str
    game_date: date | None
    team_side: TeamSide
    team_name: str
    team_abbr: str = ""
    rest_bucket: str | None = None
    lost_both_halves_last_game: bool = False
    lines: dict[str, float | None] = field(default_factory=dict)
    pcts: dict[str, float | None] = field(default_factory=dict)

    def pct(self, column: str) -> float | None:
        return self.pcts.get(column)

    def line(self, column: str) -> float | None:
        return self.lines.get(column)


@dataclass(frozen=True)
class HalftimeGame(GameTrends):
    """A game whose two sides are HalftimeTrendRow values."""


@dataclass(frozen=True)
class HalfPick:
    """A lean for one half: toward a side (spread) or a direction (total)."""

    strength: LeanStrength = "no_play"
    side: TeamSide | None = None
    direction: Literal["over", "under"] | None = None

    @property
    def has_pick(self) -> bool:
        return self.strength != "no_play"

    @property
    def weight(self) -> int:
        if self.strength == "heavy":
            return 2
        if self.strength == "slight":
            return 1
        return 0


NO_PLAY = HalfPick()


@dataclass(frozen=True)
class HalftimeConsensus:
    first_half: HalfPick
    second_half: HalfPick
    flip: HalfPick


@dataclass(frozen=True)
class ScoredHalftimeGame:
    """A halftime game with the values used for one ranking pass."""

    game: HalftimeGame
    score: float | None = None
    avg_edge: float | None = None
    lean_weight: int | None = None


def to_pct100(value: float | None) -> float | None:
    """Percentage on a 0-100 scale."""
    if value is None:
        return None
    return value if value > 1 else value * 100


def _pct100_or_zero(value: float | None) -> float:
    pct = to_pct100(value)
    return 0.0 if pct is None else pct


def halftime_bucket(pct: float | None) -> Bucket | None:
    """Red at or below 53, yellow up to 57, green above."""
    pct = to_pct100(pct)
    if pct is None:
        return None
    if pct <= RED_AT_OR_BELOW:
        return "red"
    if pct <= YELLOW_AT_OR_BELOW:
        return "yellow"
    return "green"


def format_rest_bucket(rest: str | None) -> str:
    if not rest:
        return "-"
    return REST_BUCKET_LABELS.get(rest, rest.replace("_", " "))


def side_lean(away_pct: float | None, home_pct: float | None) -> HalfPick:
    """
    Lean for one first/second half metric.

    Same band on both sides is a no play. Green against red is a heavy
    lean to the green side; any other one-band gap is a slight lean to
    the better side.
    """
    away = halftime_bucket(away_pct)
    home = halftime_bucket(home_pct)
    if away is None or home is None or away == home:
        return NO_PLAY

    side = "away" if _BUCKET_ORDER.index(away) > _BUCKET_ORDER.index(home) else "home"
    strength = "heavy" if {away, home} == {"green", "red"} else "slight"
    return HalfPick(strength=strength, side=side)


def flip_lean(away_pct: float | None, home_pct: float | None) -> FlipLean:
    """
    Lean for a flip metric (how often the first-half result flips in the second).

    Both green is a heavy flip. Green with yellow, or both yellow, is a
    slight flip. Green with red is a slight flip only when the red side
    is above 45. Both red and both at or below 40 means the first-half
    result tends to hold.
    """
    away = halftime_bucket(away_pct)
    home = halftime_bucket(home_pct)
    if away is None or home is None:
        return "no_play"

    bands = {away, home}
    if bands == {"green"}:
        return "heavy_flip"
    if bands in ({"green", "yellow"}, {"yellow"}):
        return "slight_flip"
    if bands == {"green", "red"}:
        red_pct = to_pct100(away_pct if away == "red" else home_pct)
        return "slight_flip" if red_pct > FLIP_RED_SUPPORT_ABOVE else "no_play"
    if bands == {"red"}:
        if (
            to_pct100(away_pct) <= SAME_SIDE_AT_OR_BELOW
            and to_pct100(home_pct) <= SAME_SIDE_AT_OR_BELOW
        ):
            return "heavy_same"
    return "no_play"


def _agreeing_lean(
    away_first: float | None,
    home_first: float | None,
    away_second: float | None,
    home_second: float | None,
) -> HalfPick:
    values = [to_pct100(v) for v in (away_first, home_first, away_second, home_second)]
    if any(v is None for v in values):
        return NO_PLAY

    a1, h1, a2, h2 = values
    away_leads = a1 > h1 and a2 > h2
    home_leads = h1 > a1 and h2 > a2
    if not away_leads and not home_leads:
        return NO_PLAY

    return side_lean((a1 + a2) / 2, (h1 + h2) / 2)


def ats_consensus(game: HalftimeGame) -> HalftimeConsensus:
    """
    Spread consensus per half.

    A half only gets a pick when one team leads in both of its metrics
    (1H by side and 1H fav/dog; 2H by side and 2H by side + rest). The
    strength comes from the two metrics' averages. Flip needs both flip
    metrics to grade as a play and is heavy if either is heavy.
    """
    away = game.away_side
    home = game.home_side

    first_half = _agreeing_lean(
        away.pct("first_half_side_win_pct"),
        home.pct("first_half_side_win_pct"),
        away.pct("first_half_favdog_side_win_pct"),
        home.pct("first_half_favdog_side_win_pct"),
    )
    second_half = _agreeing_lean(
        away.pct("second_half_side_win_pct"),
        home.pct("second_half_side_win_pct"),
        away.pct("second_half_side_rest_win_pct"),
        home.pct("second_half_side_rest_win_pct"),
    )

    flips = [flip_lean(away.pct(c), home.pct(c)) for c in FLIP_COLUMNS]
    flip = NO_PLAY
    if all(f != "no_play" for f in flips):
        heavy = any(f.startswith("heavy") for f in flips)
        flip = HalfPick(strength="heavy" if heavy else "slight")

    return HalftimeConsensus(first_half, second_half, flip)


def _mean(values: Iterable[float | None]) -> float | None:
    present = [v for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)


def team_ou_average(row: HalftimeTrendRow, half: str) -> float | None:
    columns = FIRST_HALF_OU_COLUMNS if half == "1h" else SECOND_HALF_OU_COLUMNS
    return _mean(to_pct100(row.pct(c)) for c in columns)


def game_ou_average(game: HalftimeGame, half: str) -> float | None:
    """
    Game over percentage for one half.

    The first half pools every team value; the second half averages the
    two team averages.
    """
    if half == "1h":
        return _mean(
            to_pct100(side.pct(c))
            for side in (game.away_side, game.home_side)
            for c in FIRST_HALF_OU_COLUMNS
        )
    return _mean([
        team_ou_average(game.away_side, half),
        team_ou_average(game.home_side, half),
    ])


def ou_lean(
    game_avg: float | None,
    away_avg: float | None,
    home_avg: float | None,
) -> HalfPick:
    """
    Total lean from the game average.

    When both team averages are known they must agree on a direction
    (both above 50 or both below), otherwise it is a no play. With a
    team average missing the game average alone decides.
    """
    if game_avg is None:
        return NO_PLAY

    if away_avg is not None and home_avg is not None:
        if away_avg > 50 and home_avg > 50:
            if game_avg > OU_HEAVY_OVER:
                return HalfPick("heavy", direction="over")
            if game_avg > OU_SLIGHT_OVER:
                return HalfPick("slight", direction="over")
            return NO_PLAY
        if away_avg < 50 and home_avg < 50:
            if game_avg < OU_HEAVY_UNDER:
                return HalfPick("heavy", direction="under")
            if game_avg < OU_SLIGHT_UNDER:
                return HalfPick("slight", direction="under")
        return NO_PLAY

    if game_avg > OU_HEAVY_OVER:
        return HalfPick("heavy", direction="over")
    if game_avg > OU_SLIGHT_OVER:
        return HalfPick("slight", direction="over")
    if game_avg >= OU_SLIGHT_UNDER:
        return NO_PLAY
    if game_avg >= OU_HEAVY_UNDER:
        return HalfPick("slight", direction="under")
    return HalfPick("heavy", direction="under")


def ou_half_lean(game: HalftimeGame, half: str) -> HalfPick:
    return ou_lean(
        game_ou_average(game, half),
        team_ou_average(game.away_side, half),
        team_ou_average(game.home_side, half),
    )


def ou_half_score(game: HalftimeGame, half: str) -> float:
    """Distance of the game average from 50 when both teams lean the same way."""
    game_avg = game_ou_average(game, half)
    away_avg = team_ou_average(game.away_side, half)
    home_avg = team_ou_average(game.home_side, half)
    if game_avg is None or away_avg is None or home_avg is None:
        return 0.0

    both_over = away_avg > 50 and home_avg > 50
    both_under = away_avg < 50 and home_avg < 50
    if not both_over and not both_under:
        return 0.0
    return abs(game_avg - 50)


def ou_flip_lean(game: HalftimeGame) -> HalfPick:
    lean = flip_lean(
        game.away_side.pct(OU_FLIP_COLUMN),
        game.home_side.pct(OU_FLIP_COLUMN),
    )
    if lean in ("heavy_flip", "heavy_same"):
        return HalfPick("heavy")
    if lean == "slight_flip":
        return HalfPick("slight")
    return NO_PLAY


def ou_consensus(game: HalftimeGame) -> HalftimeConsensus:
    return HalftimeConsensus(
        first_half=ou_half_lean(game, "1h"),
        second_half=ou_half_lean(game, "2h"),
        flip=ou_flip_lean(game),
    )


def side_score(game: HalftimeGame, mode: str) -> tuple[float, float]:
    """
    Cumulative lean strength and average edge for one spread sort mode.

    1h sums three side metrics (max 6), 2h sums two (max 4) and flip sums
    the two flip metrics using flip weights (max 6). The edge is the
    mean absolute gap between the two teams' percentages, with a missing
    percentage read as 0.
    """
    if mode == "flip":
        columns = FLIP_COLUMNS
    elif mode == "1h":
        columns = FIRST_HALF_SIDE_COLUMNS
    else:
        columns = SECOND_HALF_SIDE_COLUMNS

    away = game.away_side
    home = game.home_side

    score = 0
    edges = []
    for column in columns:
        away_pct = away.pct(column)
        home_pct = home.pct(column)
        if mode == "flip":
            score += FLIP_WEIGHTS[flip_lean(away_pct, home_pct)]
        else:
            score += side_lean(away_pct, home_pct).weight
        edges.append(abs(_pct100_or_zero(away_pct) - _pct100_or_zero(home_pct)))

    return float(score), sum(edges) / len(edges)


def build_halftime_row(raw: Mapping[str, Any]) -> HalftimeTrendRow | None:
    """Build a HalftimeTrendRow from one normalized upstream row, or None to drop it."""
    if not has_valid_identity(raw):
        return None

    return HalftimeTrendRow(
        game_id=raw["game_id"],
        game_date=as_date(raw.get("game_date")),
        team_side=raw["team_side"],
        team_name=raw.get("team_name") or "",
        team_abbr=raw.get("team_abbr") or "",
        rest_bucket=raw.get("rest_bucket"),
        lost_both_halves_last_game=raw.get("todays_lost_both_halves_last_game") is True,
        lines={c: as_pct(raw.get(c)) for c in HALFTIME_LINE_COLUMNS},
        pcts={c: as_pct(raw.get(c)) for c in HALFTIME_PCT_COLUMNS},
    )


def group_halftime_rows(rows: Iterable[Mapping[str, Any] | HalftimeTrendRow]) -> list[HalftimeGame]:
    return group_rows(rows, build=build_halftime_row, game_type=HalftimeGame)


def lost_both_halves(rows: Iterable[HalftimeTrendRow | None]) -> list[HalftimeTrendRow]:
    """Teams that lost both halves of their previous game."""
    return [r for r in rows if r is not None and r.lost_both_halves_last_game]


def rank_halftime(
    games: Iterable[HalftimeGame],
    mode: HalftimeSortMode = "time",
    view: HalftimeView = "ats",
    tz_name: str = DEFAULT_TIPOFF_TIMEZONE,
) -> list[ScoredHalftimeGame]:
    """
    Order halftime games.

    - time: by tipoff, then game date.
    - ats view, 1h/2h/flip: cumulative lean strength, then average edge
      (rounded to the half point it is shown at), then tipoff.
    - ou view, 1h/2h: distance from 50, then lean strength, then tipoff.
    - ou view, flip: flip lean strength, then tipoff.

    All sorts are descending on the score and stable.

    Raises:
        ValueError: If mode or view is unknown
    """
    if mode not in HALFTIME_SORT_MODES:
        raise ValueError(f"Unknown halftime sort mode: {mode!r}")
    if view not in HALFTIME_VIEWS:
        raise ValueError(f"Unknown halftime view: {view!r}")

    by_time = sorted(
        (g for g in games if g.is_complete),
        key=lambda g: time_sort_key(g, tz_name),
    )

    if mode == "time":
        return [ScoredHalftimeGame(game=g) for g in by_time]

    if view == "ats":
        scored = []
        for game in by_time:
            score, avg_edge = side_score(game, mode)
            scored.append(ScoredHalftimeGame(game=game, score=score, avg_edge=avg_edge))
        ranked = sort_by_edge(scored, lambda s: s.avg_edge)
        ranked = sorted(ranked, key=lambda s: -s.score)
    elif mode == "flip":
        ranked = [
            ScoredHalftimeGame(game=g, lean_weight=ou_flip_lean(g).weight)
            for g in by_time
        ]
        ranked = sorted(ranked, key=lambda s: -s.lean_weight)
    else:
        ranked = [
            ScoredHalftimeGame(
                game=g,
                score=ou_half_score(g, mode),
                lean_weight=ou_half_lean(g, mode).weight,
            )
            for g in by_time
        ]
        ranked = sorted(ranked, key=lambda s: (-s.score, -s.lean_weight))

    logger.debug("Ranked halftime games", mode=mode, view=view, count=len(ranked))
    return ranked
