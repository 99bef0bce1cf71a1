from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from scoreboard_feed.core.dates import compact_date
from scoreboard_feed.providers.base.client import AsyncHttpClient
from scoreboard_feed.providers.base.errors import ProviderResponseError

ApiItem = dict[str, Any]

# ESPN sport/league path segments per canonical league key.
ESPN_LEAGUE_PATHS: dict[str, str] = {
    "MLB": "baseball/mlb",
    "NFL": "football/nfl",
    "NBA": "basketball/nba",
    "NHL": "hockey/nhl",
    "WNBA": "basketball/wnba",
    "MLS": "soccer/usa.1",
    "EPL": "soccer/eng.1",
    "NCAAF": "football/college-football",
    "NCAAM": "basketball/mens-college-basketball",
    "NCAAW": "basketball/womens-college-basketball",
}


@dataclass
class EspnClient:
    http: AsyncHttpClient
    limit: int = 500

    async def aclose(self) -> None:
        await self.http.aclose()

    async def get_scoreboard_events(self, league_path: str, game_date: date) -> list[ApiItem]:
        """Events on ESPN's scoreboard for one calendar day."""

        payload = await self.http.get_json(
            f"/{league_path}/scoreboard",
            params={"dates": compact_date(game_date), "limit": str(self.limit)},
        )

        events = payload.get("events")
        if events is None:
            return []
        if not isinstance(events, list):
            raise ProviderResponseError(f"Expected 'events' list, got: {type(events)}")
        return [e for e in events if isinstance(e, dict)]
