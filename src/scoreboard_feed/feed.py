"""Request handling for the scoreboard feed.

A request payload names a league, the teams the display cares about, and
optionally a minimum number of games, a season window and a fake "today".
The response carries the games grouped by the date they were played.
`whichDay` can skip the main search (`notRun`) or add a single-day
search for the day before the base date under `yesterday`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import date
from typing import Any

from scoreboard_feed.core.config import settings
from scoreboard_feed.core.dates import parse_calendar_date, shift_days
from scoreboard_feed.core.logging import logger
from scoreboard_feed.providers.base.registry import ProviderRegistry
from scoreboard_feed.providers.base.types import NO_SORT_INDEX
from scoreboard_feed.providers.espn.provider import build_default_registry
from scoreboard_feed.search.orchestrator import SearchOrchestrator
from scoreboard_feed.search.season import SeasonWindow, is_in_season
from scoreboard_feed.search.types import DayBucket, MalformedQueryError, ScoreQuery, SearchResult


def _parse_teams(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        raise MalformedQueryError(f"teams must be a list of team codes, got {value!r}")
    teams = tuple(str(t).strip() for t in value if str(t).strip())
    if not teams:
        raise MalformedQueryError("teams must name at least one team code")
    return teams


def _parse_minimum(value: Any) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise MalformedQueryError(f"minimumNumberOfGames must be an integer, got {value!r}")
    try:
        minimum = int(value)
    except (TypeError, ValueError) as e:
        raise MalformedQueryError(
            f"minimumNumberOfGames must be an integer, got {value!r}"
        ) from e
    if minimum < 0:
        raise MalformedQueryError(f"minimumNumberOfGames must be >= 0, got {minimum}")
    return minimum


def _parse_season(payload: Mapping[str, Any]) -> SeasonWindow:
    try:
        return SeasonWindow(start=payload.get("from") or None, end=payload.get("to") or None)
    except ValueError as e:
        raise MalformedQueryError(str(e)) from e


def _parse_date_field(payload: Mapping[str, Any], key: str) -> date | None:
    raw = payload.get(key)
    if not raw:
        return None
    try:
        return parse_calendar_date(raw)
    except ValueError as e:
        raise MalformedQueryError(f"{key} is not a calendar date: {raw!r}") from e


def _day_flag(value: Any, key: str) -> bool:
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, str):
        flag = value.strip().lower()
        if flag in ("yes", "true"):
            return True
        if flag in ("no", "false", "erase", ""):
            return False
    raise MalformedQueryError(f"whichDay.{key} must be yes/no or a boolean, got {value!r}")


def _parse_which_day(value: Any) -> tuple[bool, bool]:
    """(run today, run yesterday). Without `whichDay` only today runs."""
    if value is None:
        return True, False
    if not isinstance(value, Mapping):
        raise MalformedQueryError(f"whichDay must be a mapping, got {value!r}")
    return (
        _day_flag(value.get("today", True), "today"),
        _day_flag(value.get("yesterday", False), "yesterday"),
    )


def _response(payload: Mapping[str, Any], provider_key: str, result: SearchResult) -> dict[str, Any]:
    response = result.to_payload()
    response.update(
        {
            "instanceId": payload.get("instanceId"),
            "index": result.league,
            "label": payload.get("label"),
            "provider": provider_key,
        }
    )
    return response


def _placeholder(query: ScoreQuery, **flags: bool) -> SearchResult:
    base = query.base_date.isoformat()
    return SearchResult(
        league=query.league,
        base_date=base,
        buckets={base: DayBucket(actual_date=base, sort_index=NO_SORT_INDEX)},
        total_count=0,
        **flags,
    )


class ScoreboardFeed:
    """Turns request payloads into search results, one league per request."""

    def __init__(
        self,
        *,
        registry: ProviderRegistry | None = None,
        orchestrator: SearchOrchestrator | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.registry = registry if registry is not None else build_default_registry()
        self.orchestrator = orchestrator if orchestrator is not None else SearchOrchestrator(clock=clock)
        self.clock = clock

    def build_query(self, payload: Mapping[str, Any]) -> ScoreQuery:
        league = payload.get("league")
        if not isinstance(league, str) or not league.strip():
            raise MalformedQueryError(f"league must be a non-empty string, got {league!r}")
        league = league.strip().upper()

        teams = _parse_teams(payload.get("teams"))
        fake_date = _parse_date_field(payload, "useFakeDate")
        base_date = _parse_date_field(payload, "gameDate") or fake_date or self.clock()
        minimum_games = _parse_minimum(payload.get("minimumNumberOfGames"))
        season = _parse_season(payload)

        # Providers own HTTP clients, so one is only built for a fully parsed request.
        provider_key = payload.get("provider") or settings.default_provider
        provider = self.registry.get(provider=provider_key, league_key=league)

        return ScoreQuery(
            league=league,
            teams=teams,
            base_date=base_date,
            provider=provider,
            minimum_games=minimum_games,
            season=season,
            use_fake_date=fake_date,
        )

    async def handle(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        run_today, run_yesterday = _parse_which_day(payload.get("whichDay"))
        query = self.build_query(payload)
        provider_key = getattr(query.provider, "provider_key", str(payload.get("provider")))

        try:
            if query.minimum_games == 0 and not is_in_season(query.season, query.base_date):
                # Single-day request outside the season: nothing to fetch.
                logger.debug(
                    "league_out_of_season",
                    league=query.league,
                    season=query.season.describe(),
                )
                result = _placeholder(query, out_of_season=True, no_games_today=True)
                return _response(payload, provider_key, result)

            if run_today:
                result = await self.orchestrator.search(query)
            else:
                result = _placeholder(query)
            response = _response(payload, provider_key, result)
            response["notRun"] = not run_today

            if run_yesterday:
                yesterday = replace(
                    query, base_date=shift_days(query.base_date, -1), minimum_games=0
                )
                response["yesterday"] = (await self.orchestrator.search(yesterday)).to_payload()
            return response
        finally:
            aclose = getattr(query.provider, "aclose", None)
            if aclose is not None:
                await aclose()


async def handle_score_request(
    payload: Mapping[str, Any], *, feed: ScoreboardFeed | None = None
) -> dict[str, Any]:
    return await (feed or ScoreboardFeed()).handle(payload)
