"""Hosted data store client for situational trend rows."""

from collections.abc import Iterable
from typing import Any

import httpx
import structlog

from situational_trends.config import settings
from situational_trends.services.data.sports import SportProfile
from situational_trends.services.trends.halftime import (
    HALFTIME_LINE_COLUMNS,
    HALFTIME_PCT_COLUMNS,
)
from situational_trends.services.trends.situations import ALL_CATEGORIES

logger = structlog.get_logger()

# Upstream column aliases -> engine column names
COLUMN_ALIASES = {
    "api_team_id": "team_id",
    "team_abbreviation": "team_abbr",
    "side_fav_dog_situation": "side_spread_situation",
    "todays_first_half_ou_line": "todays_first_half_ou",
    "todays_second_half_ou_line": "todays_second_half_ou",
}

PCT_COLUMNS = frozenset(
    column
    for category in ALL_CATEGORIES
    for column in (
        category.ats_cover_pct_column,
        category.ou_over_pct_column,
        category.ou_under_pct_column,
    )
)


HALFTIME_FLOAT_COLUMNS = frozenset(HALFTIME_PCT_COLUMNS + HALFTIME_LINE_COLUMNS)


class TrendsDataError(Exception):
    """Upstream trend data could not be fetched."""


def _clean(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _to_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def normalize_game_id(value: Any) -> Any:
    """Integer game ids as int, whether they arrive as 101, 101.0 or "101"."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return value


def normalize_row(
    raw: dict[str, Any],
    float_columns: Iterable[str] = PCT_COLUMNS,
) -> dict[str, Any]:
    """
    Rename upstream columns to the engine schema and coerce values.

    Alias columns only fill a canonical column that is absent or empty.
    Blank strings become None, game ids become ints where they can, and
    float_columns become floats. The side discriminator is passed through
    untouched so the engine can reject bad values.
    """
    row = {key: _clean(value) for key, value in raw.items()}

    for alias, canonical in COLUMN_ALIASES.items():
        if alias in row:
            value = row.pop(alias)
            if row.get(canonical) is None:
                row[canonical] = value

    if "game_id" in row:
        row["game_id"] = normalize_game_id(row["game_id"])

    for column in float_columns:
        if column in row:
            row[column] = _to_float(row[column])

    if "team_side" in raw:
        row["team_side"] = raw["team_side"]

    return row


class SupabaseTrendsClient:
    """PostgREST client for the trends tables."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.rest_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.supabase_key
        self.timeout = timeout or settings.request_timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {}
        if self.api_key:
            headers = {
                "apikey": self.api_key,
                "Authorization": f"Bearer {self.api_key}",
            }
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _select(self, table: str, params: dict[str, str]) -> list[dict]:
        """
        Run one PostgREST select.

        Raises:
            httpx.HTTPError: On transport errors or a non-2xx status
            TrendsDataError: If the body is not a JSON array
        """
        async with self._client() as client:
            response = await client.get(f"/{table}", params=params)
            response.raise_for_status()

        try:
            rows = response.json()
        except ValueError as e:
            raise TrendsDataError(f"Invalid JSON from {table}") from e

        if not isinstance(rows, list):
            raise TrendsDataError(f"Expected a list of rows from {table}")
        return rows

    async def fetch_trend_rows(self, profile: SportProfile) -> list[dict]:
        """
        Fetch today's trend rows, falling back to the full table.

        The fallback is used when the today table errors or is empty.

        Raises:
            TrendsDataError: If the fallback table also fails
        """
        params = {"select": "*", "order": "game_date.asc,game_id.asc"}

        try:
            rows = await self._select(profile.trends_table, params)
        except (httpx.HTTPError, TrendsDataError) as e:
            logger.warning(
                "Trends table failed, falling back",
                table=profile.trends_table,
                error=str(e),
            )
            rows = []

        if not rows:
            logger.info(
                "Falling back to full trends table",
                sport=profile.sport,
                table=profile.fallback_table,
            )
            try:
                rows = await self._select(profile.fallback_table, params)
            except (httpx.HTTPError, TrendsDataError) as e:
                raise TrendsDataError(
                    f"Failed to fetch {profile.sport} trends: {e}"
                ) from e

        logger.info("Fetched trend rows", sport=profile.sport, rows=len(rows))
        return [normalize_row(row) for row in rows]

    async def fetch_tipoff_times(
        self,
        profile: SportProfile,
        game_ids: Iterable[int | str],
    ) -> dict[Any, str | None]:
        """
        Look up tipoff times by game_id.

        The first non-empty configured time column wins. Failures are
        logged and return an empty mapping so games fall back to
        date-only ordering.
        """
        game_ids = list(game_ids)
        if not game_ids:
            return {}

        params = {
            "select": ",".join(("game_id",) + profile.tipoff_columns),
            "game_id": f"in.({','.join(str(g) for g in game_ids)})",
        }

        try:
            rows = await self._select(profile.tipoff_table, params)
        except (httpx.HTTPError, TrendsDataError) as e:
            logger.warning(
                "Error fetching tipoff times",
                sport=profile.sport,
                error=str(e),
            )
            return {}

        tipoffs: dict[Any, str | None] = {}
        for row in rows:
            tipoffs[normalize_game_id(row.get("game_id"))] = next(
                (row[c] for c in profile.tipoff_columns if row.get(c)),
                None,
            )
        return tipoffs

    async def fetch_halftime_rows(self, profile: SportProfile) -> list[dict]:
        """
        Fetch today's halftime trend rows.

        Raises:
            TrendsDataError: If the halftime table cannot be read
        """
        params = {"select": "*", "order": "game_id.asc"}

        try:
            rows = await self._select(profile.halftime_table, params)
        except (httpx.HTTPError, TrendsDataError) as e:
            raise TrendsDataError(
                f"Failed to fetch {profile.sport} halftime trends: {e}"
            ) from e

        logger.info("Fetched halftime rows", sport=profile.sport, rows=len(rows))
        return [normalize_row(row, HALFTIME_FLOAT_COLUMNS) for row in rows]


_trends_client: SupabaseTrendsClient | None = None


def get_trends_client() -> SupabaseTrendsClient:
    """Get or create the trends client singleton."""
    global _trends_client
    if _trends_client is None:
        _trends_client = SupabaseTrendsClient()
    return _trends_client
