from __future__ import annotations

from datetime import date
from typing import Protocol

from .types import ProviderResult, ScoreboardRequest


class ScoreProvider(Protocol):
    """
    The search depends on this, not on any HTTP client.

    One provider per data source; a provider may only support some leagues.
    """

    provider_key: str

    async def fetch_games(self, request: ScoreboardRequest, game_date: date) -> ProviderResult:
        """
        Fetch one day's games for `request.league`.

        Returns ProviderGames on success and ProviderFailure when the day
        could not be fetched. Implementations should not raise for ordinary
        transport or schema problems.
        """
        ...
