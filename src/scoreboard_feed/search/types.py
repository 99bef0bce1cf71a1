from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from scoreboard_feed.core.dates import iso_date, parse_calendar_date
from scoreboard_feed.providers.base.adapter import ScoreProvider
from scoreboard_feed.providers.base.types import NO_SORT_INDEX, ScoreboardRequest
from scoreboard_feed.search.games import Game
from scoreboard_feed.search.season import SeasonWindow


class MalformedQueryError(ValueError):
    """A search query is missing or has an invalid league, teams or base date."""


@dataclass(frozen=True)
class ScoreQuery:
    """
    One search: find at least `minimum_games` games for `teams` in `league`,
    starting at `base_date`. `minimum_games=0` means the base date only.
    """

    league: str
    teams: tuple[str, ...]
    base_date: date
    provider: ScoreProvider
    minimum_games: int = 0
    season: SeasonWindow = field(default_factory=SeasonWindow)
    use_fake_date: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.league, str) or not self.league.strip():
            raise MalformedQueryError(f"league must be a non-empty string, got {self.league!r}")

        if isinstance(self.teams, str) or not isinstance(self.teams, Sequence):
            raise MalformedQueryError(f"teams must be a sequence of team codes, got {self.teams!r}")
        teams = tuple(self.teams)
        if not teams or not all(isinstance(t, str) and t.strip() for t in teams):
            raise MalformedQueryError(f"teams must be non-empty team codes, got {self.teams!r}")
        object.__setattr__(self, "teams", teams)

        try:
            object.__setattr__(self, "base_date", parse_calendar_date(self.base_date))
        except ValueError as e:
            raise MalformedQueryError(f"base_date is not a calendar date: {self.base_date!r}") from e

        if isinstance(self.minimum_games, bool) or not isinstance(self.minimum_games, int):
            raise MalformedQueryError(f"minimum_games must be an integer, got {self.minimum_games!r}")
        if self.minimum_games < 0:
            raise MalformedQueryError(f"minimum_games must be >= 0, got {self.minimum_games}")

        if self.use_fake_date is not None:
            try:
                object.__setattr__(self, "use_fake_date", iso_date(self.use_fake_date))
            except ValueError as e:
                raise MalformedQueryError(
                    f"use_fake_date is not a calendar date: {self.use_fake_date!r}"
                ) from e

        if self.provider is None:
            raise MalformedQueryError("provider is required")

    def provider_request(self, game_date: date) -> ScoreboardRequest:
        """Request for the full day's slate; team filtering happens on our side."""
        return ScoreboardRequest(
            league=self.league,
            game_date=game_date,
            teams=None,
            season_start=self.season.start,
            season_end=self.season.end,
            use_fake_date=self.use_fake_date,
        )


@dataclass
class DayBucket:
    actual_date: str
    games: list[Game] = field(default_factory=list)
    sort_index: int = NO_SORT_INDEX

    def to_payload(self) -> dict[str, Any]:
        return {
            "actualDate": self.actual_date,
            "scores": [g.to_payload() for g in self.games],
            "sortIndex": self.sort_index,
        }


@dataclass
class SearchState:
    """Working state of one search invocation; never shared between searches."""

    processed_dates: set[str] = field(default_factory=set)
    total_count: int = 0
    buckets: dict[str, DayBucket] = field(default_factory=dict)

    def add_games(self, day: str, games: list[Game], sort_index: int) -> None:
        bucket = self.buckets.get(day)
        if bucket is None:
            bucket = self.buckets[day] = DayBucket(actual_date=day, sort_index=sort_index)
        bucket.games.extend(games)
        self.total_count += len(games)

    def bucketed_game_ids(self) -> set[int]:
        return {id(g) for bucket in self.buckets.values() for g in bucket.games}


@dataclass(frozen=True)
class SearchResult:
    league: str
    base_date: str
    buckets: dict[str, DayBucket]
    total_count: int
    error: bool = False
    out_of_season: bool = False
    no_games_today: bool = False
    fallback_count: int = 0

    @classmethod
    def failed(cls, query: ScoreQuery) -> SearchResult:
        base = iso_date(query.base_date)
        return cls(
            league=query.league,
            base_date=base,
            buckets={base: DayBucket(actual_date=base)},
            total_count=0,
            error=True,
            no_games_today=True,
        )

    def all_games(self) -> list[Game]:
        return [g for bucket in self.buckets.values() for g in bucket.games]

    def to_payload(self) -> dict[str, Any]:
        return {
            "league": self.league,
            "baseDate": self.base_date,
            "error": self.error,
            "outOfSeason": self.out_of_season,
            "noGamesToday": self.no_games_today,
            "totalGames": self.total_count,
            "fallbackGames": self.fallback_count,
            "days": {day: bucket.to_payload() for day, bucket in self.buckets.items()},
        }
