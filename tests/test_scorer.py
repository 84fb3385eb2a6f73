"""Tests for OU Consensus Strength and ATS Dominance."""

from dataclasses import replace

import pytest

from situational_trends.services.trends.grouping import group_rows
from situational_trends.services.trends.scorer import (
    compute_ats_dominance,
    compute_ou_consensus_strength,
    ou_category_score,
    score_game,
)
from situational_trends.services.trends.situations import ALL_CATEGORIES, FAV_DOG


def _ou(key, record, over, under):
    return {
        f"ou_{key}_record": record,
        f"ou_{key}_over_pct": over,
        f"ou_{key}_under_pct": under,
    }


def _ats(key, record, pct):
    return {f"ats_{key}_record": record, f"ats_{key}_cover_pct": pct}


def test_empty_game_scores_zero(make_game):
    scored = score_game(make_game())
    assert scored.ou_consensus_score == 0
    assert scored.ats_dominance_score == 0


@pytest.mark.parametrize("missing", ["away_side", "home_side"])
def test_game_missing_a_side_scores_zero(make_game, missing):
    scored = score_game(replace(make_game(), **{missing: None}))
    assert scored.ou_consensus_score == 0
    assert scored.ats_dominance_score == 0


def test_end_to_end_ats_dominance(make_row):
    games = group_rows([
        make_row(game_id=101, side="away", **_ats("fav_dog", "5-3-0", 62.0)),
        make_row(game_id=101, side="home", **_ats("fav_dog", "4-5-0", 40.0)),
    ])

    assert compute_ats_dominance(games[0]) == 176.0


def test_ats_dominance_gap_boundary(make_game):
    at_boundary = make_game(
        away=_ats("last_game", "6-4-0", 60.0),
        home=_ats("last_game", "5-5-0", 50.0),
    )
    assert compute_ats_dominance(at_boundary) == 0

    above = make_game(
        away=_ats("last_game", "6-4-0", 60.01),
        home=_ats("last_game", "5-5-0", 50.0),
    )
    assert compute_ats_dominance(above) == pytest.approx(10.01 * 10)


def test_ats_dominance_requires_min_sample(make_game):
    game = make_game(
        away=_ats("rest_bucket", "3-1-0", 75.0),
        home=_ats("rest_bucket", "2-8-0", 20.0),
    )
    assert compute_ats_dominance(game) == 0


def test_ats_dominance_skips_missing_pct(make_game):
    game = make_game(
        away=_ats("rest_comp", "8-2-0", 80.0),
        home=_ats("rest_comp", "2-8-0", None),
    )
    assert compute_ats_dominance(game) == 0


def test_ats_dominance_sums_categories(make_game):
    game = make_game(
        away={**_ats("last_game", "7-3-0", 70.0), **_ats("rest_comp", "6-6-0", 30.0)},
        home={**_ats("last_game", "4-6-0", 40.0), **_ats("rest_comp", "8-2-0", 80.0)},
    )
    assert compute_ats_dominance(game) == pytest.approx(30 * 10 + 50 * 10)


def test_ou_both_over(make_game):
    game = make_game(
        away=_ou("fav_dog", "6-4-0", 60.0, 40.0),
        home=_ou("fav_dog", "14-6-0", 70.0, 30.0),
    )
    expected = (60.0 * 10 + 70.0 * 20) / 30 * 10
    assert compute_ou_consensus_strength(game) == pytest.approx(expected)


def test_ou_both_under(make_game):
    game = make_game(
        away=_ou("side_fav_dog", "3-7-0", 30.0, 70.0),
        home=_ou("side_fav_dog", "4-6-0", 40.0, 60.0),
    )
    assert compute_ou_consensus_strength(game) == pytest.approx(65.0 * 10)


def test_ou_threshold_is_strict(make_game):
    game = make_game(
        away=_ou("last_game", "6-4-0", 55.0, 45.0),
        home=_ou("last_game", "7-3-0", 70.0, 30.0),
    )
    assert compute_ou_consensus_strength(game) == 0


def test_ou_requires_min_games_on_both_sides(make_game):
    game = make_game(
        away=_ou("last_game", "3-1-0", 75.0, 25.0),
        home=_ou("last_game", "15-5-0", 75.0, 25.0),
    )
    assert compute_ou_consensus_strength(game) == 0


def test_ou_null_percentage_does_not_qualify(make_game):
    game = make_game(
        away=_ou("rest_bucket", "6-4-0", None, None),
        home=_ou("rest_bucket", "7-3-0", 70.0, 30.0),
    )
    assert compute_ou_consensus_strength(game) == 0


def _ou_fav_dog_score(make_game, away_n, home_n, away_pct=60.0, home_pct=60.0):
    game = make_game(
        away=_ou("fav_dog", f"{away_n}-0-0", away_pct, 100 - away_pct),
        home=_ou("fav_dog", f"{home_n}-0-0", home_pct, 100 - home_pct),
    )
    return compute_ou_consensus_strength(game)


def test_ou_larger_sample_growth_has_no_effect(make_game):
    base = _ou_fav_dog_score(make_game, away_n=20, home_n=6)
    assert _ou_fav_dog_score(make_game, away_n=40, home_n=6) == pytest.approx(base)


def test_ou_smaller_sample_growth_increases_score(make_game):
    base = _ou_fav_dog_score(make_game, away_n=20, home_n=6)
    assert _ou_fav_dog_score(make_game, away_n=20, home_n=8) > base
    assert _ou_fav_dog_score(make_game, away_n=20, home_n=8, away_pct=70, home_pct=58) > \
        _ou_fav_dog_score(make_game, away_n=20, home_n=6, away_pct=70, home_pct=58)


def test_ou_category_score_formula():
    assert ou_category_score(60.0, 10, 70.0, 10) == pytest.approx(650.0)


def test_home_away_category_only_scored_when_requested(make_game):
    game = make_game(
        away=_ats("home_away", "8-2-0", 80.0),
        home=_ats("home_away", "3-7-0", 30.0),
    )
    assert compute_ats_dominance(game) == 0
    assert compute_ats_dominance(game, ALL_CATEGORIES) == pytest.approx(50 * 10)


def test_thresholds_can_be_overridden(make_game):
    game = make_game(
        away=_ats("fav_dog", "2-1-0", 66.0),
        home=_ats("fav_dog", "1-2-0", 33.0),
    )
    assert compute_ats_dominance(game) == 0
    assert compute_ats_dominance(game, [FAV_DOG], min_games=3) == pytest.approx(33 * 3)
