from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from scoreboard_feed.core.dates import day_difference
from scoreboard_feed.search.cache import DailyGameCache
from scoreboard_feed.search.games import Game
from scoreboard_feed.search.types import ScoreQuery


@dataclass(frozen=True)
class FallbackPick:
    game: Game
    game_date: date
    distance: int
    sort_index: int


class FallbackSelector:
    """Picks the closest already-fetched non-team games for a league.

    Only the cache is consulted; no provider calls are made here. Games
    involving any of the query's teams are never candidates: those were
    either counted by the primary search or deliberately left out of it.
    """

    def __init__(self, cache: DailyGameCache) -> None:
        self.cache = cache

    def candidates(self, query: ScoreQuery, *, exclude: set[int] | None = None) -> list[FallbackPick]:
        exclude = exclude or set()
        picks: list[FallbackPick] = []
        for entry in self.cache.entries_for_league(query.league):
            distance = abs(day_difference(entry.game_date, query.base_date))
            for game in entry.games:
                if game.involves_any(query.teams) or id(game) in exclude:
                    continue
                picks.append(
                    FallbackPick(
                        game=game,
                        game_date=entry.game_date,
                        distance=distance,
                        sort_index=entry.sort_index,
                    )
                )

        # sorted() is stable: ties keep discovery order.
        return sorted(picks, key=lambda p: p.distance)

    def select(
        self, query: ScoreQuery, needed: int, *, exclude: set[int] | None = None
    ) -> list[FallbackPick]:
        if needed <= 0:
            return []
        return self.candidates(query, exclude=exclude)[:needed]
