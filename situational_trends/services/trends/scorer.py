"""Reliability-weighted ranking scores for a game."""

from collections.abc import Sequence
from dataclasses import dataclass

from situational_trends.services.trends.grouping import GameTrends
from situational_trends.services.trends.records import parse_record
from situational_trends.services.trends.situations import (
    SCORING_CATEGORIES,
    SituationCategory,
)

MIN_GAMES_THRESHOLD = 5
MIN_PERCENTAGE = 55.0
MIN_ATS_DIFFERENCE = 10.0


@dataclass(frozen=True)
class ScoredGame:
    """A game with the scores computed for one ranking pass."""

    game: GameTrends
    ou_consensus_score: float | None = None
    ats_dominance_score: float | None = None


def _both_above(away_pct: float | None, home_pct: float | None, threshold: float) -> bool:
    return (
        away_pct is not None
        and home_pct is not None
        and away_pct > threshold
        and home_pct > threshold
    )


def ou_category_score(
    away_pct: float,
    away_games: int,
    home_pct: float,
    home_games: int,
) -> float:
    """Sample-weighted average percentage times the thinner sample."""
    avg_pct = (away_pct * away_games + home_pct * home_games) / (away_games + home_games)
    return avg_pct * min(away_games, home_games)


def compute_ou_consensus_strength(
    game: GameTrends,
    categories: Sequence[SituationCategory] = SCORING_CATEGORIES,
    min_games: int = MIN_GAMES_THRESHOLD,
    min_percentage: float = MIN_PERCENTAGE,
) -> float:
    """
    Over/Under Consensus Strength.

    A category counts when both teams are above min_percentage on the
    over (or both on the under) and each side has at least min_games in
    its O/U record. Its contribution is the sample-weighted average
    percentage multiplied by the smaller of the two sample sizes.

    Args:
        game: Complete game
        categories: Categories to sum over, in order
        min_games: Minimum record total for each side
        min_percentage: Strict lower bound for both percentages

    Returns:
        Non-negative score, 0 when no category qualifies or a side is
        missing
    """
    total_score = 0.0
    if not game.is_complete:
        return total_score

    for category in categories:
        away = game.away_side.trend(category)
        home = game.home_side.trend(category)

        away_games = parse_record(away.ou_record).total
        home_games = parse_record(home.ou_record).total
        if away_games < min_games or home_games < min_games:
            continue

        if _both_above(away.ou_over_pct, home.ou_over_pct, min_percentage):
            total_score += ou_category_score(
                away.ou_over_pct, away_games, home.ou_over_pct, home_games
            )

        if _both_above(away.ou_under_pct, home.ou_under_pct, min_percentage):
            total_score += ou_category_score(
                away.ou_under_pct, away_games, home.ou_under_pct, home_games
            )

    return total_score


def compute_ats_dominance(
    game: GameTrends,
    categories: Sequence[SituationCategory] = SCORING_CATEGORIES,
    min_games: int = MIN_GAMES_THRESHOLD,
    min_difference: float = MIN_ATS_DIFFERENCE,
) -> float:
    """
    ATS Dominance: how far apart the two cover percentages are.

    A category counts when both cover percentages are present, the smaller
    ATS sample is at least min_games, and the gap is strictly greater than
    min_difference. Its contribution is gap * smaller sample.
    """
    total_score = 0.0
    if not game.is_complete:
        return total_score

    for category in categories:
        away = game.away_side.trend(category)
        home = game.home_side.trend(category)

        if away.ats_cover_pct is None or home.ats_cover_pct is None:
            continue

        min_sample = min(
            parse_record(away.ats_record).total,
            parse_record(home.ats_record).total,
        )
        if min_sample < min_games:
            continue

        difference = abs(away.ats_cover_pct - home.ats_cover_pct)
        if difference > min_difference:
            total_score += difference * min_sample

    return total_score


def score_game(
    game: GameTrends,
    categories: Sequence[SituationCategory] = SCORING_CATEGORIES,
    min_games: int = MIN_GAMES_THRESHOLD,
    min_percentage: float = MIN_PERCENTAGE,
    min_difference: float = MIN_ATS_DIFFERENCE,
) -> ScoredGame:
    """Compute both scores for one game."""
    return ScoredGame(
        game=game,
        ou_consensus_score=compute_ou_consensus_strength(
            game, categories, min_games=min_games, min_percentage=min_percentage
        ),
        ats_dominance_score=compute_ats_dominance(
            game, categories, min_games=min_games, min_difference=min_difference
        ),
    )
