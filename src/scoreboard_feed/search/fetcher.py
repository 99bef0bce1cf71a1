from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from scoreboard_feed.core.logging import logger
from scoreboard_feed.providers.base.errors import ProviderError, GameRecordError
from scoreboard_feed.providers.base.types import NO_SORT_INDEX, ProviderFailure, ProviderGames
from scoreboard_feed.search.cache import DailyGameCache
from scoreboard_feed.search.games import Game, filter_team_games, normalize_game
from scoreboard_feed.search.types import ScoreQuery


@dataclass(frozen=True)
class DayFetch:
    """Team games for one day, plus how they were obtained."""

    game_date: date
    games: list[Game] = field(default_factory=list)
    sort_index: int = NO_SORT_INDEX
    no_games: bool = False
    from_cache: bool = False
    failed: bool = False


class DayFetcher:
    """Resolves one (league, date) to the caller's team games via cache or provider."""

    def __init__(self, cache: DailyGameCache) -> None:
        self.cache = cache

    async def fetch_day(self, query: ScoreQuery, target_date: date, day_offset: int) -> DayFetch:
        # Today's scores are live, so offset 0 always goes to the provider.
        if day_offset != 0:
            entry = self.cache.get(query.league, target_date)
            if entry is not None:
                games = filter_team_games(entry.games, query.teams)
                logger.debug(
                    "day_cache_hit",
                    league=query.league,
                    date=target_date.isoformat(),
                    day_offset=day_offset,
                    cached_games=len(entry.games),
                    team_games=len(games),
                )
                return DayFetch(
                    game_date=target_date,
                    games=games,
                    sort_index=entry.sort_index,
                    no_games=not entry.games,
                    from_cache=True,
                )

        try:
            result = await query.provider.fetch_games(query.provider_request(target_date), target_date)
        except ProviderError as e:
            result = ProviderFailure(reason=str(e), error=e)
        except Exception as e:
            # Any provider exception counts as a failed day.
            result = ProviderFailure(reason=f"{type(e).__name__}: {e}", error=e)

        if isinstance(result, ProviderFailure):
            return self._failed(query, target_date, day_offset, result)

        if not isinstance(result, ProviderGames) or not isinstance(result.games, list):
            return self._failed(
                query,
                target_date,
                day_offset,
                ProviderFailure(reason=f"Malformed provider result: {type(result).__name__}"),
            )

        all_games = self._normalize(query, target_date, result.games)
        self.cache.put(query.league, target_date, all_games, result.sort_index)

        games = filter_team_games(all_games, query.teams)
        logger.debug(
            "day_fetched",
            league=query.league,
            date=target_date.isoformat(),
            day_offset=day_offset,
            provider=getattr(query.provider, "provider_key", None),
            slate_games=len(all_games),
            team_games=len(games),
        )
        return DayFetch(
            game_date=target_date,
            games=games,
            sort_index=result.sort_index,
            no_games=result.no_games_today or not all_games,
        )

    def _normalize(self, query: ScoreQuery, target_date: date, raw_games: list) -> list[Game]:
        games: list[Game] = []
        for raw in raw_games:
            try:
                games.append(normalize_game(raw))
            except GameRecordError as e:
                logger.warning(
                    "game_skipped",
                    league=query.league,
                    date=target_date.isoformat(),
                    **e.log_fields(),
                )
        return games

    def _failed(
        self, query: ScoreQuery, target_date: date, day_offset: int, failure: ProviderFailure
    ) -> DayFetch:
        logger.warning(
            "provider_failure",
            league=query.league,
            date=target_date.isoformat(),
            day_offset=day_offset,
            provider=getattr(query.provider, "provider_key", None),
            reason=failure.reason,
        )
        return DayFetch(game_date=target_date, no_games=True, failed=True)
