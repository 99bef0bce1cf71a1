"""Minimum-games search.

Starting at the base date, the search walks outward one day at a time
(yesterday, tomorrow, two days ago, two days ahead, ...) collecting games for
the query's teams until it has `minimum_games` of them or runs out of day
offsets. If it is still short, it tops up with the closest games already in
the cache for other teams in the league.

Order matters here: closer days outrank farther ones and, at equal distance,
the past outranks the future. Every fetch is therefore awaited one after the
other; nothing within a search runs concurrently.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

from scoreboard_feed.core.config import settings
from scoreboard_feed.core.dates import iso_date, parse_calendar_date, shift_days
from scoreboard_feed.core.logging import logger
from scoreboard_feed.search.cache import DailyGameCache, default_cache
from scoreboard_feed.search.fallback import FallbackSelector
from scoreboard_feed.search.fetcher import DayFetcher
from scoreboard_feed.search.season import is_in_season
from scoreboard_feed.search.types import MalformedQueryError, ScoreQuery, SearchResult, SearchState


class SearchOrchestrator:
    def __init__(
        self,
        cache: DailyGameCache | None = None,
        *,
        max_day_offset: int | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.cache = cache if cache is not None else default_cache
        self.max_day_offset = settings.max_day_offset if max_day_offset is None else max_day_offset
        self.clock = clock
        self.fetcher = DayFetcher(self.cache)
        self.fallback = FallbackSelector(self.cache)

    def current_date(self, query: ScoreQuery) -> date:
        if query.use_fake_date:
            return parse_calendar_date(query.use_fake_date)
        return self.clock()

    async def search(self, query: ScoreQuery) -> SearchResult:
        """Run one search.

        Raises MalformedQueryError for a bad query before anything is fetched.
        Any other failure is logged and returned as an error result holding
        an empty bucket for the base date.
        """

        if not isinstance(query, ScoreQuery):
            raise MalformedQueryError(f"Expected ScoreQuery, got {type(query).__name__}")

        try:
            return await self._run(query)
        except Exception:
            logger.exception(
                "search_failed",
                league=query.league,
                base_date=iso_date(query.base_date),
            )
            return SearchResult.failed(query)

    async def _run(self, query: ScoreQuery) -> SearchResult:
        self.cache.roll_over(self.current_date(query))

        state = SearchState()
        base = query.base_date
        logger.info(
            "search_started",
            league=query.league,
            teams=list(query.teams),
            base_date=base.isoformat(),
            minimum_games=query.minimum_games,
        )

        out_of_season = not is_in_season(query.season, base)
        today_count = await self._process_day(query, state, base, 0)

        if query.minimum_games == 0 or state.total_count >= query.minimum_games:
            return self._finish(query, state, out_of_season, today_count, fallback_count=0)

        offset = 1
        while offset <= self.max_day_offset and state.total_count < query.minimum_games:
            await self._process_day(query, state, shift_days(base, -offset), -offset)
            if state.total_count >= query.minimum_games:
                break

            await self._process_day(query, state, shift_days(base, offset), offset)
            offset += 1

        fallback_count = 0
        if state.total_count < query.minimum_games:
            fallback_count = self._fill_from_cache(query, state)

        return self._finish(query, state, out_of_season, today_count, fallback_count)

    async def _process_day(
        self, query: ScoreQuery, state: SearchState, target: date, day_offset: int
    ) -> int:
        day = target.isoformat()
        if day in state.processed_dates:
            return 0

        try:
            if not is_in_season(query.season, target):
                logger.debug(
                    "day_out_of_season",
                    league=query.league,
                    date=day,
                    season=query.season.describe(),
                )
                return 0

            fetched = await self.fetcher.fetch_day(query, target, day_offset)
            if fetched.games:
                state.add_games(day, fetched.games, fetched.sort_index)
            return len(fetched.games)
        finally:
            state.processed_dates.add(day)

    def _fill_from_cache(self, query: ScoreQuery, state: SearchState) -> int:
        needed = query.minimum_games - state.total_count
        picks = self.fallback.select(query, needed, exclude=state.bucketed_game_ids())
        for pick in picks:
            state.add_games(pick.game_date.isoformat(), [pick.game], pick.sort_index)

        logger.info(
            "fallback_selected",
            league=query.league,
            needed=needed,
            selected=len(picks),
        )
        return len(picks)

    def _finish(
        self,
        query: ScoreQuery,
        state: SearchState,
        out_of_season: bool,
        today_count: int,
        fallback_count: int,
    ) -> SearchResult:
        result = SearchResult(
            league=query.league,
            base_date=query.base_date.isoformat(),
            buckets=state.buckets,
            total_count=state.total_count,
            out_of_season=out_of_season,
            no_games_today=today_count == 0,
            fallback_count=fallback_count,
        )
        logger.info(
            "search_finished",
            league=query.league,
            base_date=result.base_date,
            total_games=result.total_count,
            days=list(result.buckets),
            fallback_games=fallback_count,
            dates_processed=len(state.processed_dates),
        )
        return result


async def gather_minimum_games(
    query: ScoreQuery, *, cache: DailyGameCache | None = None
) -> SearchResult:
    """Convenience wrapper around SearchOrchestrator for one-off searches."""
    return await SearchOrchestrator(cache).search(query)
