"""Per-sport upstream table layout."""

from dataclasses import dataclass

from situational_trends.services.trends.situations import (
    ALL_CATEGORIES,
    SCORING_CATEGORIES,
    SituationCategory,
)


@dataclass(frozen=True)
class SportProfile:
    """Where one sport's situational trends and tipoff times live."""

    sport: str
    trends_table: str
    fallback_table: str
    tipoff_table: str
    tipoff_columns: tuple[str, ...]
    halftime_table: str
    display_categories: tuple[SituationCategory, ...] = SCORING_CATEGORIES


NBA = SportProfile(
    sport="nba",
    trends_table="nba_game_situational_trends_today",
    fallback_table="nba_game_situational_trends",
    tipoff_table="nba_input_values_view",
    tipoff_columns=("tipoff_time_et",),
    halftime_table="nba_halftime_trends_today",
)

NCAAB = SportProfile(
    sport="ncaab",
    trends_table="ncaab_game_situational_trends_today",
    fallback_table="ncaab_game_situational_trends",
    tipoff_table="v_cbb_input_values",
    tipoff_columns=("start_utc", "tipoff_time_et"),
    halftime_table="ncaab_halftime_trends_today",
    display_categories=ALL_CATEGORIES,
)

SPORT_PROFILES = {p.sport: p for p in (NBA, NCAAB)}


def get_sport_profile(sport: str) -> SportProfile | None:
    return SPORT_PROFILES.get(sport.lower())
