"""Situational categories and the per-team trend row shape."""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Literal

TeamSide = Literal["home", "away"]
VALID_SIDES: tuple[str, ...] = ("home", "away")


@dataclass(frozen=True)
class SituationCategory:
    """One historical context used as an independent evidence bucket."""

    key: str
    title: str
    label_column: str

    @property
    def ats_record_column(self) -> str:
        return f"ats_{self.key}_record"

    @property
    def ats_cover_pct_column(self) -> str:
        return f"ats_{self.key}_cover_pct"

    @property
    def ou_record_column(self) -> str:
        return f"ou_{self.key}_record"

    @property
    def ou_over_pct_column(self) -> str:
        return f"ou_{self.key}_over_pct"

    @property
    def ou_under_pct_column(self) -> str:
        return f"ou_{self.key}_under_pct"


LAST_GAME = SituationCategory("last_game", "Last Game", "last_game_situation")
FAV_DOG = SituationCategory("fav_dog", "Favorite / Underdog", "fav_dog_situation")
SIDE_FAV_DOG = SituationCategory("side_fav_dog", "Side + Fav/Dog", "side_spread_situation")
REST_BUCKET = SituationCategory("rest_bucket", "Rest", "rest_bucket")
REST_COMP = SituationCategory("rest_comp", "Rest Comparison", "rest_comp")
HOME_AWAY = SituationCategory("home_away", "Home / Away", "home_away_situation")

# Fixed scoring order
SCORING_CATEGORIES: tuple[SituationCategory, ...] = (
    LAST_GAME,
    FAV_DOG,
    SIDE_FAV_DOG,
    REST_BUCKET,
    REST_COMP,
)

ALL_CATEGORIES: tuple[SituationCategory, ...] = SCORING_CATEGORIES + (HOME_AWAY,)

CATEGORIES_BY_KEY = {c.key: c for c in ALL_CATEGORIES}

SITUATION_LABELS = {
    "is_after_loss": "After Loss",
    "is_after_win": "After Win",
    "is_fav": "Favorite",
    "is_dog": "Underdog",
    "is_home_fav": "Home Favorite",
    "is_away_fav": "Away Favorite",
    "is_home_dog": "Home Underdog",
    "is_away_dog": "Away Underdog",
    "one_day_off": "1 Day Off",
    "two_three_days_off": "2-3 Days Off",
    "four_plus_days_off": "4+ Days Off",
    "rest_advantage": "Rest Advantage",
    "rest_disadvantage": "Rest Disadvantage",
    "rest_equal": "Rest Equal",
}


def format_situation(situation: str | None) -> str:
    """Readable label for a situation code ("is_home_fav" -> "Home Favorite")."""
    if not situation:
        return "-"
    if situation in SITUATION_LABELS:
        return SITUATION_LABELS[situation]
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), situation.replace("_", " "))


@dataclass(frozen=True)
class CategoryTrend:
    """A team's ATS and O/U history in one situational category."""

    situation: str | None = None
    ats_record: str | None = None
    ats_cover_pct: float | None = None
    ou_record: str | None = None
    ou_over_pct: float | None = None
    ou_under_pct: float | None = None


EMPTY_TREND = CategoryTrend()


@dataclass(frozen=True)
class SituationalTrendRow:
    """One team's situational history going into one game."""

    game_id: int | str
    game_date: date
    team_side: TeamSide
    team_name: str
    team_abbr: str
    team_id: int | None = None
    categories: dict[str, CategoryTrend] = field(default_factory=dict)

    def trend(self, category: SituationCategory) -> CategoryTrend:
        return self.categories.get(category.key, EMPTY_TREND)
