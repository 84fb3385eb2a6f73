"""Halftime trends API endpoints."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from situational_trends.config import settings
from situational_trends.schemas.halftime import (
    HalfPickResponse,
    HalftimeBoardResponse,
    HalftimeConsensusResponse,
    HalftimeGameResponse,
    HalftimeTeamResponse,
)
from situational_trends.services.data import (
    SupabaseTrendsClient,
    TrendsDataError,
    get_sport_profile,
    get_trends_client,
)
from situational_trends.services.trends import merge_tipoff_times
from situational_trends.services.trends.halftime import (
    HalfPick,
    HalftimeConsensus,
    HalftimeGame,
    HalftimeSortMode,
    HalftimeTrendRow,
    HalftimeView,
    ScoredHalftimeGame,
    ats_consensus,
    build_halftime_row,
    format_rest_bucket,
    group_halftime_rows,
    lost_both_halves,
    ou_consensus,
    rank_halftime,
)
from situational_trends.services.trends.rounding import round_to_half

logger = structlog.get_logger()

router = APIRouter()


def _team_response(row: HalftimeTrendRow) -> HalftimeTeamResponse:
    return HalftimeTeamResponse(
        side=row.team_side,
        team_name=row.team_name,
        team_abbr=row.team_abbr,
        rest_bucket=row.rest_bucket,
        rest_label=format_rest_bucket(row.rest_bucket),
        lost_both_halves_last_game=row.lost_both_halves_last_game,
        lines=row.lines,
        percentages=row.pcts,
    )


def _pick_response(pick: HalfPick, game: HalftimeGame) -> HalfPickResponse:
    team_name = None
    if pick.side == "away":
        team_name = game.away_side.team_name
    elif pick.side == "home":
        team_name = game.home_side.team_name

    return HalfPickResponse(
        strength=pick.strength,
        side=pick.side,
        team_name=team_name,
        direction=pick.direction,
    )


def _consensus_response(
    consensus: HalftimeConsensus,
    game: HalftimeGame,
) -> HalftimeConsensusResponse:
    return HalftimeConsensusResponse(
        first_half=_pick_response(consensus.first_half, game),
        second_half=_pick_response(consensus.second_half, game),
        flip=_pick_response(consensus.flip, game),
    )


def build_halftime_game_response(scored: ScoredHalftimeGame) -> HalftimeGameResponse:
    """Shape one ranked halftime game. The edge is shown at half-point precision."""
    game = scored.game
    avg_edge = None if scored.avg_edge is None else round_to_half(scored.avg_edge)

    return HalftimeGameResponse(
        game_id=game.game_id,
        game_date=game.game_date,
        tipoff_time=game.tipoff_time,
        away_team=_team_response(game.away_side),
        home_team=_team_response(game.home_side),
        ats=_consensus_response(ats_consensus(game), game),
        ou=_consensus_response(ou_consensus(game), game),
        score=scored.score,
        avg_edge=avg_edge,
        lean_weight=scored.lean_weight,
    )


@router.get("/trends/{sport}/halftime", response_model=HalftimeBoardResponse)
async def get_halftime_board(
    sport: str,
    sort: HalftimeSortMode = Query("time", description="time, 1h, 2h or flip"),
    view: HalftimeView = Query("ats", description="ats (spread) or ou (totals)"),
    client: SupabaseTrendsClient = Depends(get_trends_client),
) -> HalftimeBoardResponse:
    """
    Get today's halftime trends, ranked.

    Score sorts use spread leans in the ats view and total leans in the
    ou view. Teams that lost both halves last game are listed separately.
    """
    profile = get_sport_profile(sport)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"Unknown sport: {sport}")

    try:
        rows = await client.fetch_halftime_rows(profile)
    except TrendsDataError as e:
        logger.error("Failed to fetch halftime rows", sport=sport, error=str(e))
        raise HTTPException(status_code=502, detail=str(e))

    team_rows = [build_halftime_row(row) for row in rows]
    games = group_halftime_rows(r for r in team_rows if r is not None)
    tipoffs = await client.fetch_tipoff_times(profile, [g.game_id for g in games])
    games = merge_tipoff_times(games, tipoffs)

    ranked = rank_halftime(games, sort, view, tz_name=settings.tipoff_timezone)

    logger.info(
        "Built halftime board",
        sport=profile.sport,
        sort=sort,
        view=view,
        games=len(ranked),
    )

    return HalftimeBoardResponse(
        sport=profile.sport,
        sort=sort,
        view=view,
        count=len(ranked),
        games=[build_halftime_game_response(s) for s in ranked],
        lost_both_halves=[r.team_name for r in lost_both_halves(team_rows)],
    )
