"""Situational betting-trends aggregation and consensus scoring."""

from situational_trends.services.trends.records import SituationalRecord, parse_record
from situational_trends.services.trends.grouping import GameTrends, group_rows, merge_tipoff_times
from situational_trends.services.trends.consensus import (
    ConsensusResult,
    game_consensus,
    resolve_ats,
    resolve_total,
)
from situational_trends.services.trends.scorer import (
    ScoredGame,
    compute_ats_dominance,
    compute_ou_consensus_strength,
    score_game,
)
from situational_trends.services.trends.ranking import SortMode, rank, sort_by_edge
from situational_trends.services.trends.rounding import edge_magnitude, round_to_half
from situational_trends.services.trends.halftime import (
    HalftimeGame,
    HalftimeSortMode,
    ats_consensus,
    group_halftime_rows,
    ou_consensus,
    rank_halftime,
)

__all__ = [
    "SituationalRecord",
    "parse_record",
    "GameTrends",
    "group_rows",
    "merge_tipoff_times",
    "ConsensusResult",
    "game_consensus",
    "resolve_ats",
    "resolve_total",
    "ScoredGame",
    "compute_ats_dominance",
    "compute_ou_consensus_strength",
    "score_game",
    "SortMode",
    "rank",
    "sort_by_edge",
    "edge_magnitude",
    "round_to_half",
    "HalftimeGame",
    "HalftimeSortMode",
    "ats_consensus",
    "group_halftime_rows",
    "ou_consensus",
    "rank_halftime",
]
