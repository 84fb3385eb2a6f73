"""Situational trends Pydantic schemas."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

Tier = Literal["green", "yellow", "red"]


class CategoryTrendResponse(BaseModel):
    """One team's record in one situational category."""

    category: str
    title: str
    situation: str | None = None
    situation_label: str

    ats_record: str | None = None
    ats_cover_pct: float | None = None
    ats_tier: Tier | None = None
    ats_cover_display: str = "-"

    ou_record: str | None = None
    ou_over_pct: float | None = None
    ou_over_tier: Tier | None = None
    ou_over_display: str = "-"
    ou_under_pct: float | None = None
    ou_under_tier: Tier | None = None
    ou_under_display: str = "-"


class TeamTrendsResponse(BaseModel):
    """One side of a game."""

    side: Literal["home", "away"]
    team_name: str
    team_abbr: str
    team_id: int | None = None
    categories: list[CategoryTrendResponse]


class ConsensusResponse(BaseModel):
    """Consensus outcome for one market."""

    kind: Literal["none", "team", "over", "under", "no_consensus"]
    side: Literal["home", "away"] | None = None
    team_name: str | None = None
    team_abbr: str | None = None


class CategoryConsensusResponse(BaseModel):
    category: str
    ats: ConsensusResponse
    total: ConsensusResponse


class GameTrendsResponse(BaseModel):
    """A complete game with both sides and per-category consensus."""

    game_id: int | str
    game_date: date
    tipoff_time: str | None = None
    away_team: TeamTrendsResponse
    home_team: TeamTrendsResponse
    consensus: list[CategoryConsensusResponse]

    # Only present for score sort modes
    ou_consensus_score: float | None = Field(default=None, ge=0)
    ats_dominance_score: float | None = Field(default=None, ge=0)


class GameTrendsBoardResponse(BaseModel):
    """Response for the trends board endpoint."""

    sport: str
    sort: Literal["time", "ou-consensus", "ats-dominance"]
    count: int
    games: list[GameTrendsResponse]
