"""Halftime trends Pydantic schemas."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

Strength = Literal["no_play", "slight", "heavy"]


class HalfPickResponse(BaseModel):
    """Lean for one half. side is set for spread picks, direction for totals."""

    strength: Strength
    side: Literal["home", "away"] | None = None
    team_name: str | None = None
    direction: Literal["over", "under"] | None = None


class HalftimeConsensusResponse(BaseModel):
    first_half: HalfPickResponse
    second_half: HalfPickResponse
    flip: HalfPickResponse


class HalftimeTeamResponse(BaseModel):
    """One side's halftime lines and percentages."""

    side: Literal["home", "away"]
    team_name: str
    team_abbr: str
    rest_bucket: str | None = None
    rest_label: str
    lost_both_halves_last_game: bool = False
    lines: dict[str, float | None]
    percentages: dict[str, float | None]


class HalftimeGameResponse(BaseModel):
    game_id: int | str
    game_date: date | None = None
    tipoff_time: str | None = None
    away_team: HalftimeTeamResponse
    home_team: HalftimeTeamResponse
    ats: HalftimeConsensusResponse
    ou: HalftimeConsensusResponse

    # Only present for score sort modes
    score: float | None = Field(default=None, ge=0)
    avg_edge: float | None = Field(default=None, ge=0)
    lean_weight: int | None = Field(default=None, ge=0)


class HalftimeBoardResponse(BaseModel):
    """Response for the halftime trends board endpoint."""

    sport: str
    sort: Literal["time", "1h", "2h", "flip"]
    view: Literal["ats", "ou"]
    count: int
    games: list[HalftimeGameResponse]
    lost_both_halves: list[str] = []
