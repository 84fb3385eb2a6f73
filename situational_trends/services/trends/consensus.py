"""Directional consensus between both teams' histories in one category."""

from dataclasses import dataclass, replace
from typing import Literal

from situational_trends.services.trends.grouping import GameTrends
from situational_trends.services.trends.rounding import is_green, is_yellow
from situational_trends.services.trends.situations import SituationCategory, TeamSide

ConsensusKind = Literal["none", "team", "over", "under", "no_consensus"]


@dataclass(frozen=True)
class ConsensusResult:
    """Outcome of a consensus check, attributed to one side when there is one."""

    kind: ConsensusKind
    side: TeamSide | None = None
    team_name: str | None = None
    team_abbr: str | None = None

    @property
    def has_pick(self) -> bool:
        return self.side is not None


NO_PICK = ConsensusResult(kind="none")
NO_CONSENSUS = ConsensusResult(kind="no_consensus")


def resolve_ats(away_pct: float | None, home_pct: float | None) -> ConsensusResult:
    """
    ATS consensus: the side with the strictly higher cover percentage.

    Either percentage missing, or an exact tie, gives no pick.
    """
    if away_pct is None or home_pct is None:
        return NO_PICK
    if away_pct > home_pct:
        return ConsensusResult(kind="team", side="away")
    if home_pct > away_pct:
        return ConsensusResult(kind="team", side="home")
    return NO_PICK


def resolve_total(
    away_over_pct: float | None,
    away_under_pct: float | None,
    home_over_pct: float | None,
    home_under_pct: float | None,
) -> ConsensusResult:
    """
    Over/Under consensus from both sides' over and under percentages.

    Green is above 55, yellow is 45-55 inclusive. Checked in order:
    1. Both green on over -> over, side with the higher over %
    2. Both green on under -> under, side with the higher under %
    3. One green over, the other green under -> no consensus
    4. One green over, the other yellow over -> over, the green side
    5. One green under, the other yellow under -> under, the green side
    6. Anything else -> no consensus

    Rule 3 must run before 4 and 5.
    """
    away_over_green = is_green(away_over_pct)
    away_under_green = is_green(away_under_pct)
    home_over_green = is_green(home_over_pct)
    home_under_green = is_green(home_under_pct)

    if away_over_green and home_over_green:
        side = "away" if away_over_pct > home_over_pct else "home"
        return ConsensusResult(kind="over", side=side)

    if away_under_green and home_under_green:
        side = "away" if away_under_pct > home_under_pct else "home"
        return ConsensusResult(kind="under", side=side)

    if (away_over_green and home_under_green) or (away_under_green and home_over_green):
        return NO_CONSENSUS

    if away_over_green and is_yellow(home_over_pct):
        return ConsensusResult(kind="over", side="away")
    if home_over_green and is_yellow(away_over_pct):
        return ConsensusResult(kind="over", side="home")

    if away_under_green and is_yellow(home_under_pct):
        return ConsensusResult(kind="under", side="away")
    if home_under_green and is_yellow(away_under_pct):
        return ConsensusResult(kind="under", side="home")

    # Both yellow on the same direction, or nothing qualifies
    return NO_CONSENSUS


@dataclass(frozen=True)
class CategoryConsensus:
    """ATS and totals consensus for one category of one game."""

    category: str
    ats: ConsensusResult
    total: ConsensusResult


def _with_team(result: ConsensusResult, game: GameTrends) -> ConsensusResult:
    if result.side is None:
        return result
    row = game.away_side if result.side == "away" else game.home_side
    return replace(result, team_name=row.team_name, team_abbr=row.team_abbr)


def game_consensus(game: GameTrends, category: SituationCategory) -> CategoryConsensus:
    """Resolve both markets for one category and attach the winning team."""
    away = game.away_side.trend(category)
    home = game.home_side.trend(category)

    ats = resolve_ats(away.ats_cover_pct, home.ats_cover_pct)
    total = resolve_total(
        away.ou_over_pct,
        away.ou_under_pct,
        home.ou_over_pct,
        home.ou_under_pct,
    )
    return CategoryConsensus(
        category=category.key,
        ats=_with_team(ats, game),
        total=_with_team(total, game),
    )
