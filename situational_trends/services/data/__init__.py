"""Upstream data access."""

from situational_trends.services.data.sports import SportProfile, get_sport_profile
from situational_trends.services.data.trends_client import (
    SupabaseTrendsClient,
    TrendsDataError,
    get_trends_client,
    normalize_row,
)

__all__ = [
    "SportProfile",
    "get_sport_profile",
    "SupabaseTrendsClient",
    "TrendsDataError",
    "get_trends_client",
    "normalize_row",
]
