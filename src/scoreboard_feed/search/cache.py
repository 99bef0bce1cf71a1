from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date
from typing import Any

from scoreboard_feed.core.dates import cache_key, parse_calendar_date
from scoreboard_feed.core.logging import logger
from scoreboard_feed.search.games import Game


@dataclass(frozen=True)
class CacheEntry:
    league: str
    game_date: date
    games: tuple[Game, ...]
    sort_index: int


class DailyGameCache:
    """Fetched games keyed by (league, date), dropped wholesale when the day changes.

    Entries always hold the full unfiltered slate for the day so that later
    searches can reuse games for teams nobody asked about. There is no
    per-entry expiry and no locking; concurrent writers for the same key
    simply overwrite each other.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self.last_cleared: date | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, league: str, value: Any) -> CacheEntry | None:
        return self._entries.get(cache_key(league, value))

    def put(self, league: str, value: Any, games: list[Game], sort_index: int) -> CacheEntry:
        game_date = parse_calendar_date(value)
        entry = CacheEntry(
            league=league,
            game_date=game_date,
            games=tuple(games),
            sort_index=sort_index,
        )
        self._entries[cache_key(league, game_date)] = entry
        return entry

    def entries_for_league(self, league: str) -> Iterator[CacheEntry]:
        """Entries for `league` in the order they were first written."""
        for entry in list(self._entries.values()):
            if entry.league == league:
                yield entry

    def clear(self) -> None:
        self._entries.clear()

    def roll_over(self, current: Any) -> bool:
        """Drop everything if `current` is a different calendar day than last seen.

        Returns True when the cache was cleared.
        """
        today = parse_calendar_date(current)
        if self.last_cleared == today:
            return False

        dropped = len(self._entries)
        self.clear()
        self.last_cleared = today
        logger.debug("cache_rolled_over", date=today.isoformat(), dropped_entries=dropped)
        return True


# One cache per process unless a caller injects its own.
default_cache = DailyGameCache()
