"""Trends API endpoints for the situational trends board."""

from collections.abc import Sequence

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from situational_trends.config import settings
from situational_trends.schemas.trends import (
    CategoryConsensusResponse,
    CategoryTrendResponse,
    ConsensusResponse,
    GameTrendsBoardResponse,
    GameTrendsResponse,
    TeamTrendsResponse,
)
from situational_trends.services.data import (
    SupabaseTrendsClient,
    TrendsDataError,
    get_sport_profile,
    get_trends_client,
)
from situational_trends.services.trends import (
    ConsensusResult,
    ScoredGame,
    SortMode,
    game_consensus,
    group_rows,
    merge_tipoff_times,
    rank,
)
from situational_trends.services.trends.rounding import format_pct, percentage_tier
from situational_trends.services.trends.situations import (
    SituationalTrendRow,
    SituationCategory,
    format_situation,
)

logger = structlog.get_logger()

router = APIRouter()


def _team_response(
    row: SituationalTrendRow,
    categories: Sequence[SituationCategory],
) -> TeamTrendsResponse:
    trends = []
    for category in categories:
        trend = row.trend(category)
        trends.append(CategoryTrendResponse(
            category=category.key,
            title=category.title,
            situation=trend.situation,
            situation_label=format_situation(trend.situation),
            ats_record=trend.ats_record,
            ats_cover_pct=trend.ats_cover_pct,
            ats_tier=percentage_tier(trend.ats_cover_pct),
            ats_cover_display=format_pct(trend.ats_cover_pct),
            ou_record=trend.ou_record,
            ou_over_pct=trend.ou_over_pct,
            ou_over_tier=percentage_tier(trend.ou_over_pct),
            ou_over_display=format_pct(trend.ou_over_pct),
            ou_under_pct=trend.ou_under_pct,
            ou_under_tier=percentage_tier(trend.ou_under_pct),
            ou_under_display=format_pct(trend.ou_under_pct),
        ))

    return TeamTrendsResponse(
        side=row.team_side,
        team_name=row.team_name,
        team_abbr=row.team_abbr,
        team_id=row.team_id,
        categories=trends,
    )


def _consensus_response(result: ConsensusResult) -> ConsensusResponse:
    return ConsensusResponse(
        kind=result.kind,
        side=result.side,
        team_name=result.team_name,
        team_abbr=result.team_abbr,
    )


def build_game_response(
    scored: ScoredGame,
    categories: Sequence[SituationCategory],
) -> GameTrendsResponse:
    """Shape one ranked game for the board."""
    game = scored.game

    consensus = []
    for category in categories:
        result = game_consensus(game, category)
        consensus.append(CategoryConsensusResponse(
            category=result.category,
            ats=_consensus_response(result.ats),
            total=_consensus_response(result.total),
        ))

    return GameTrendsResponse(
        game_id=game.game_id,
        game_date=game.game_date,
        tipoff_time=game.tipoff_time,
        away_team=_team_response(game.away_side, categories),
        home_team=_team_response(game.home_side, categories),
        consensus=consensus,
        ou_consensus_score=scored.ou_consensus_score,
        ats_dominance_score=scored.ats_dominance_score,
    )


@router.get("/trends/{sport}/games", response_model=GameTrendsBoardResponse)
async def get_trends_board(
    sport: str,
    sort: SortMode = Query("time", description="time, ou-consensus or ats-dominance"),
    client: SupabaseTrendsClient = Depends(get_trends_client),
) -> GameTrendsBoardResponse:
    """
    Get today's games with situational trends, ranked.

    Rows are paired into complete games (partial games are left out),
    tipoff times are merged in when available, and games are ordered by
    the requested sort mode.
    """
    profile = get_sport_profile(sport)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"Unknown sport: {sport}")

    try:
        rows = await client.fetch_trend_rows(profile)
    except TrendsDataError as e:
        logger.error("Failed to fetch trend rows", sport=sport, error=str(e))
        raise HTTPException(status_code=502, detail=str(e))

    games = group_rows(rows)
    tipoffs = await client.fetch_tipoff_times(profile, [g.game_id for g in games])
    games = merge_tipoff_times(games, tipoffs)

    ranked = rank(
        games,
        sort,
        tz_name=settings.tipoff_timezone,
        min_games=settings.min_games_threshold,
        min_percentage=settings.min_consensus_pct,
        min_difference=settings.min_ats_difference,
    )

    logger.info("Built trends board", sport=profile.sport, sort=sort, games=len(ranked))

    return GameTrendsBoardResponse(
        sport=profile.sport,
        sort=sort,
        count=len(ranked),
        games=[build_game_response(s, profile.display_categories) for s in ranked],
    )
