from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

Json = dict[str, Any]

NO_SORT_INDEX = 999


@dataclass(frozen=True)
class ScoreboardRequest:
    """
    What a provider is asked for.
    `teams=None` means the full day's slate for the league.
    """
    league: str
    game_date: date
    teams: tuple[str, ...] | None = None
    season_start: str | None = None
    season_end: str | None = None
    use_fake_date: str | None = None


@dataclass(frozen=True)
class ProviderGames:
    """Successful fetch: raw game records plus the provider's sort hint."""
    games: list[Mapping[str, Any]]
    sort_index: int = NO_SORT_INDEX
    no_games_today: bool = False


@dataclass(frozen=True)
class ProviderFailure:
    """A day's fetch that did not produce games."""
    reason: str
    error: BaseException | None = field(default=None, compare=False)


ProviderResult = ProviderGames | ProviderFailure
