"""Tests for the hosted data store client and row normalization."""

import asyncio

import httpx
import pytest

from situational_trends.services.data.sports import NBA, NCAAB, get_sport_profile
from situational_trends.services.data.trends_client import (
    SupabaseTrendsClient,
    TrendsDataError,
    normalize_game_id,
    normalize_row,
)

BASE_URL = "https://example.supabase.co/rest/v1"


def _client(handler) -> SupabaseTrendsClient:
    return SupabaseTrendsClient(
        base_url=BASE_URL,
        api_key="test-key",
        transport=httpx.MockTransport(handler),
    )


def test_normalize_row_renames_aliases_and_coerces():
    row = normalize_row({
        "game_id": 101,
        "team_side": "away",
        "api_team_id": 52,
        "team_abbreviation": "DUKE",
        "side_fav_dog_situation": "is_away_fav",
        "ats_fav_dog_cover_pct": "61.5",
        "ou_fav_dog_over_pct": "",
        "ats_fav_dog_record": " 8-5-0 ",
    })

    assert row["team_id"] == 52
    assert row["team_abbr"] == "DUKE"
    assert row["side_spread_situation"] == "is_away_fav"
    assert row["ats_fav_dog_cover_pct"] == 61.5
    assert row["ou_fav_dog_over_pct"] is None
    assert row["ats_fav_dog_record"] == "8-5-0"
    assert "api_team_id" not in row


def test_normalize_row_keeps_canonical_over_alias():
    row = normalize_row({"team_abbr": "UNC", "team_abbreviation": "NC", "team_side": "home"})
    assert row["team_abbr"] == "UNC"


def test_normalize_row_leaves_side_untouched():
    assert normalize_row({"team_side": " Away"})["team_side"] == " Away"


def test_fetch_trend_rows_from_today_table():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"game_id": 1, "team_side": "home"}])

    rows = asyncio.run(_client(handler).fetch_trend_rows(NBA))

    assert rows == [{"game_id": 1, "team_side": "home"}]
    assert seen[0].url.path == "/rest/v1/nba_game_situational_trends_today"
    assert seen[0].url.params["order"] == "game_date.asc,game_id.asc"
    assert seen[0].headers["apikey"] == "test-key"
    assert seen[0].headers["authorization"] == "Bearer test-key"


@pytest.mark.parametrize("primary_status, primary_body", [(200, []), (500, {"message": "boom"})])
def test_fetch_trend_rows_falls_back(primary_status, primary_body):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("_today"):
            return httpx.Response(primary_status, json=primary_body)
        return httpx.Response(200, json=[{"game_id": 2, "team_side": "away"}])

    rows = asyncio.run(_client(handler).fetch_trend_rows(NCAAB))
    assert rows == [{"game_id": 2, "team_side": "away"}]


def test_fetch_trend_rows_raises_when_fallback_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"message": "down"})

    with pytest.raises(TrendsDataError):
        asyncio.run(_client(handler).fetch_trend_rows(NBA))


def test_fetch_tipoff_times_prefers_first_column():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[
            {"game_id": 1, "start_utc": "2026-01-15T23:00:00Z", "tipoff_time_et": "18:00"},
            {"game_id": 2, "start_utc": None, "tipoff_time_et": "19:30"},
            {"game_id": 3, "start_utc": None, "tipoff_time_et": None},
        ])

    tipoffs = asyncio.run(_client(handler).fetch_tipoff_times(NCAAB, [1, 2, 3]))

    assert tipoffs == {1: "2026-01-15T23:00:00Z", 2: "19:30", 3: None}
    assert seen[0].url.path == "/rest/v1/v_cbb_input_values"
    assert seen[0].url.params["game_id"] == "in.(1,2,3)"
    assert seen[0].url.params["select"] == "game_id,start_utc,tipoff_time_et"


def test_fetch_tipoff_times_failure_degrades_to_empty():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    assert asyncio.run(_client(handler).fetch_tipoff_times(NBA, [1])) == {}


def test_fetch_tipoff_times_skips_request_without_games():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert asyncio.run(_client(handler).fetch_tipoff_times(NBA, [])) == {}


def test_sport_profiles():
    assert get_sport_profile("NBA") is NBA
    assert get_sport_profile("ncaab") is NCAAB
    assert get_sport_profile("nhl") is None
    assert "home_away" in [c.key for c in NCAAB.display_categories]
    assert "home_away" not in [c.key for c in NBA.display_categories]


def test_fetch_tipoff_times_non_json_body_degrades_to_empty():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    assert asyncio.run(_client(handler).fetch_tipoff_times(NBA, [1])) == {}


def test_fetch_trend_rows_non_json_today_table_falls_back():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("_today"):
            return httpx.Response(200, text="<html>gateway</html>")
        return httpx.Response(200, json=[{"game_id": 2, "team_side": "away"}])

    rows = asyncio.run(_client(handler).fetch_trend_rows(NBA))
    assert rows == [{"game_id": 2, "team_side": "away"}]


@pytest.mark.parametrize("body", [
    {"text": "<html>gateway</html>"},
    {"json": {"message": "not a list"}},
])
def test_fetch_trend_rows_bad_fallback_body_raises(body):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("_today"):
            return httpx.Response(200, json=[])
        return httpx.Response(200, **body)

    with pytest.raises(TrendsDataError):
        asyncio.run(_client(handler).fetch_trend_rows(NBA))


@pytest.mark.parametrize("value, expected", [
    (101, 101),
    ("101", 101),
    (" 101 ", 101),
    (101.0, 101),
    ("g-101", "g-101"),
    (None, None),
])
def test_normalize_game_id(value, expected):
    assert normalize_game_id(value) == expected


def test_string_and_int_game_ids_line_up_with_tipoffs():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("_today"):
            return httpx.Response(200, json=[{"game_id": "101", "team_side": "home"}])
        return httpx.Response(200, json=[{"game_id": 101, "tipoff_time_et": "19:30"}])

    client = _client(handler)
    rows = asyncio.run(client.fetch_trend_rows(NBA))
    tipoffs = asyncio.run(client.fetch_tipoff_times(NBA, [rows[0]["game_id"]]))

    assert rows[0]["game_id"] == 101
    assert tipoffs == {101: "19:30"}


def test_fetch_halftime_rows():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{
            "game_id": "55",
            "team_side": "away",
            "first_half_side_win_pct": "0.61",
            "todays_first_half_ou_line": "112.5",
        }])

    rows = asyncio.run(_client(handler).fetch_halftime_rows(NCAAB))

    assert seen[0].url.path == "/rest/v1/ncaab_halftime_trends_today"
    assert seen[0].url.params["order"] == "game_id.asc"
    assert rows == [{
        "game_id": 55,
        "team_side": "away",
        "first_half_side_win_pct": 0.61,
        "todays_first_half_ou": 112.5,
    }]


def test_fetch_halftime_rows_failure_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    with pytest.raises(TrendsDataError):
        asyncio.run(_client(handler).fetch_halftime_rows(NBA))
