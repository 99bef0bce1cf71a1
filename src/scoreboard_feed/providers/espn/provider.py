from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from scoreboard_feed.core.config import settings
from scoreboard_feed.core.logging import logger
from scoreboard_feed.providers.base.adapter import ScoreProvider
from scoreboard_feed.providers.base.client import AsyncHttpClient
from scoreboard_feed.providers.base.errors import ProviderError
from scoreboard_feed.providers.base.registry import ProviderKey, ProviderRegistry
from scoreboard_feed.providers.base.types import (
    ProviderFailure,
    ProviderGames,
    ProviderResult,
    ScoreboardRequest,
)
from scoreboard_feed.providers.espn.client import ESPN_LEAGUE_PATHS, EspnClient

ESPN_PROVIDER_KEY = "ESPN"


def _competitor_payload(competitor: dict[str, Any]) -> dict[str, Any]:
    team = competitor.get("team") or {}
    return {
        "abbreviation": team.get("abbreviation"),
        "displayName": team.get("displayName"),
        "shortDisplayName": team.get("shortDisplayName"),
        "score": competitor.get("score"),
    }


def event_to_game(event: dict[str, Any]) -> dict[str, Any] | None:
    """Flatten one ESPN scoreboard event into our provider game shape.

    Returns None for events without a home and an away competitor.
    """

    competitions = event.get("competitions") or []
    if not competitions or not isinstance(competitions[0], dict):
        return None
    competition = competitions[0]

    home = away = None
    for competitor in competition.get("competitors") or []:
        if not isinstance(competitor, dict):
            continue
        if competitor.get("homeAway") == "home":
            home = competitor
        elif competitor.get("homeAway") == "away":
            away = competitor
    if home is None or away is None:
        return None

    status_type = (competition.get("status") or {}).get("type") or {}
    start_time = competition.get("date") or event.get("date")

    return {
        "id": event.get("id"),
        "gameDate": start_time[:10] if isinstance(start_time, str) else None,
        "startTime": start_time,
        "status": status_type.get("name"),
        "state": status_type.get("state"),
        "detail": status_type.get("shortDetail"),
        "homeTeam": _competitor_payload(home),
        "awayTeam": _competitor_payload(away),
    }


def _involves(game: dict[str, Any], teams: tuple[str, ...]) -> bool:
    wanted = {t.upper() for t in teams}
    codes = {
        str(game["homeTeam"].get("abbreviation") or "").upper(),
        str(game["awayTeam"].get("abbreviation") or "").upper(),
    }
    return bool(wanted & codes)


@dataclass
class EspnScoreProvider(ScoreProvider):
    """Score provider backed by ESPN's public scoreboard JSON."""

    client: EspnClient
    provider_key: str = ESPN_PROVIDER_KEY

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> EspnScoreProvider:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def fetch_games(self, request: ScoreboardRequest, game_date: date) -> ProviderResult:
        league_path = ESPN_LEAGUE_PATHS.get(request.league.upper())
        if league_path is None:
            return ProviderFailure(reason=f"ESPN does not support league={request.league}")

        try:
            events = await self.client.get_scoreboard_events(league_path, game_date)
        except ProviderError as e:
            return ProviderFailure(reason=str(e), error=e)

        games: list[dict[str, Any]] = []
        for event in events:
            game = event_to_game(event)
            if game is None:
                logger.debug("espn_event_skipped", league=request.league, event_id=event.get("id"))
                continue
            games.append(game)

        if request.teams is not None:
            games = [g for g in games if _involves(g, request.teams)]

        return ProviderGames(
            games=games,
            sort_index=settings.sort_index_for(request.league),
            no_games_today=not games,
        )


def make_espn_provider() -> EspnScoreProvider:
    http = AsyncHttpClient(
        base_url=settings.espn_base_url,
        timeout_s=settings.http_timeout_s,
        connect_timeout_s=settings.http_connect_timeout_s,
        headers={"User-Agent": "scoreboard-feed/1.0", "Accept": "application/json"},
    )
    return EspnScoreProvider(client=EspnClient(http=http))


def register_espn_providers(registry: ProviderRegistry) -> None:
    # One registration serves every league; unsupported leagues fail per day.
    registry.register(ProviderKey(provider=ESPN_PROVIDER_KEY), factory=make_espn_provider)


def build_default_registry() -> ProviderRegistry:
    registry = ProviderRegistry()
    register_espn_providers(registry)
    return registry
