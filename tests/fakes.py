from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date
from typing import Any

from scoreboard_feed.core.dates import iso_date
from scoreboard_feed.providers.base.errors import ProviderRequestError
from scoreboard_feed.providers.base.types import ProviderGames, ScoreboardRequest


def game(home: str, away: str, **extra: Any) -> dict[str, Any]:
    return {"hTeam": home, "vTeam": away, **extra}


class FakeScoreProvider:
    """In-memory provider that records every date it is asked for."""

    provider_key = "FAKE"

    def __init__(
        self,
        slates: Mapping[Any, list[dict[str, Any]]] | None = None,
        *,
        failing: tuple[Any, ...] = (),
        default: Callable[[date], list[dict[str, Any]]] | None = None,
        sort_index: int = 3,
    ) -> None:
        self.slates = {iso_date(k): v for k, v in (slates or {}).items()}
        self.failing = {iso_date(d) for d in failing}
        self.default = default
        self.sort_index = sort_index
        self.calls: list[str] = []
        self.requests: list[ScoreboardRequest] = []
        self.closed = False

    async def fetch_games(self, request: ScoreboardRequest, game_date: date) -> ProviderGames:
        day = game_date.isoformat()
        self.calls.append(day)
        self.requests.append(request)

        if day in self.failing:
            raise ProviderRequestError(f"boom on {day}")

        games = self.slates.get(day)
        if games is None and self.default is not None:
            games = self.default(game_date)
        games = list(games or [])
        return ProviderGames(games=games, sort_index=self.sort_index, no_games_today=not games)

    async def aclose(self) -> None:
        self.closed = True
