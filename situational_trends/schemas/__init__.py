"""Pydantic schemas for API request/response models."""

from situational_trends.schemas.halftime import (
    HalfPickResponse,
    HalftimeBoardResponse,
    HalftimeConsensusResponse,
    HalftimeGameResponse,
    HalftimeTeamResponse,
)
from situational_trends.schemas.trends import (
    CategoryConsensusResponse,
    CategoryTrendResponse,
    ConsensusResponse,
    GameTrendsBoardResponse,
    GameTrendsResponse,
    TeamTrendsResponse,
)

__all__ = [
    "HalfPickResponse",
    "HalftimeBoardResponse",
    "HalftimeConsensusResponse",
    "HalftimeGameResponse",
    "HalftimeTeamResponse",
    "CategoryConsensusResponse",
    "CategoryTrendResponse",
    "ConsensusResponse",
    "GameTrendsBoardResponse",
    "GameTrendsResponse",
    "TeamTrendsResponse",
]
