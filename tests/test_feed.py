from __future__ import annotations

from datetime import date

import pytest

from fakes import FakeScoreProvider, game
from scoreboard_feed.feed import ScoreboardFeed, handle_score_request
from scoreboard_feed.providers.base.errors import ProviderCapabilityError
from scoreboard_feed.providers.base.registry import ProviderKey, ProviderRegistry
from scoreboard_feed.search.cache import DailyGameCache
from scoreboard_feed.search.orchestrator import SearchOrchestrator
from scoreboard_feed.search.types import MalformedQueryError

TODAY = date(2024, 7, 15)


def _feed(provider: FakeScoreProvider, builds: list | None = None) -> ScoreboardFeed:
    def factory() -> FakeScoreProvider:
        if builds is not None:
            builds.append(provider)
        return provider

    registry = ProviderRegistry()
    registry.register(ProviderKey(provider="FAKE", league_key="MLB"), factory)
    registry.register(ProviderKey(provider="FAKE"), factory)
    clock = lambda: TODAY  # noqa: E731
    return ScoreboardFeed(
        registry=registry,
        orchestrator=SearchOrchestrator(DailyGameCache(), clock=clock),
        clock=clock,
    )


@pytest.mark.asyncio
async def test_handle_runs_search_and_echoes_request_fields() -> None:
    provider = FakeScoreProvider(default=lambda d: [game("SEA", "TOR")])

    response = await handle_score_request(
        {
            "league": " mlb ",
            "teams": ["SEA"],
            "gameDate": "2024-07-15",
            "minimumNumberOfGames": "2",
            "from": "03-01",
            "to": "11-15",
            "provider": "FAKE",
            "instanceId": "module_1",
            "label": "Baseball",
        },
        feed=_feed(provider),
    )

    assert response["instanceId"] == "module_1"
    assert response["index"] == "MLB"
    assert response["label"] == "Baseball"
    assert response["provider"] == "FAKE"
    assert response["error"] is False
    assert response["totalGames"] == 2
    assert list(response["days"]) == ["2024-07-15", "2024-07-14"]
    assert response["notRun"] is False
    assert "yesterday" not in response
    assert provider.closed


@pytest.mark.asyncio
async def test_base_date_defaults_to_today_or_fake_date() -> None:
    provider = FakeScoreProvider(default=lambda d: [])
    feed = _feed(provider)

    await feed.handle({"league": "MLB", "teams": "SEA", "provider": "FAKE"})
    await feed.handle({"league": "MLB", "teams": "SEA", "provider": "FAKE", "useFakeDate": "2024-02-11"})

    assert provider.calls == ["2024-07-15", "2024-02-11"]


@pytest.mark.asyncio
async def test_out_of_season_single_day_request_makes_no_calls() -> None:
    provider = FakeScoreProvider(default=lambda d: [game("KC", "NE")])

    response = await _feed(provider).handle(
        {"league": "NFL", "teams": ["KC", "NE"], "from": "09-01", "to": "02-15", "provider": "FAKE"}
    )

    assert provider.calls == []
    assert response["outOfSeason"] is True
    assert response["noGamesToday"] is True
    assert response["days"] == {
        "2024-07-15": {"actualDate": "2024-07-15", "scores": [], "sortIndex": 999}
    }


@pytest.mark.asyncio
async def test_out_of_season_with_minimum_still_searches() -> None:
    provider = FakeScoreProvider(default=lambda d: [])

    response = await _feed(provider).handle(
        {
            "league": "NFL",
            "teams": ["KC"],
            "from": "09-01",
            "to": "02-15",
            "minimumNumberOfGames": 1,
            "provider": "FAKE",
        }
    )

    # Every date within 20 days of mid-July is outside the NFL window.
    assert provider.calls == []
    assert response["outOfSeason"] is True
    assert response["totalGames"] == 0
    assert response["days"] == {}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"teams": ["SEA"]},
        {"league": "MLB"},
        {"league": "MLB", "teams": []},
        {"league": "MLB", "teams": ["SEA"], "gameDate": "15/07/2024"},
        {"league": "MLB", "teams": ["SEA"], "minimumNumberOfGames": "lots"},
        {"league": "MLB", "teams": ["SEA"], "minimumNumberOfGames": -2},
        {"league": "MLB", "teams": ["SEA"], "from": "3-1"},
        {"league": "MLB", "teams": ["SEA"], "gameDate": "2024-07-15", "useFakeDate": "nope"},
        {"league": "MLB", "teams": ["SEA"], "whichDay": "today"},
        {"league": "MLB", "teams": ["SEA"], "whichDay": {"yesterday": "maybe"}},
    ],
)
async def test_malformed_payloads_raise_before_fetching(payload: dict) -> None:
    provider = FakeScoreProvider(default=lambda d: [game("SEA", "TOR")])
    builds: list = []

    with pytest.raises(MalformedQueryError):
        await _feed(provider, builds).handle({"provider": "FAKE", **payload})

    # No provider (and so no HTTP client) is built for a request that fails to parse.
    assert builds == []
    assert provider.calls == []


@pytest.mark.asyncio
async def test_bad_fake_date_error_names_its_key() -> None:
    with pytest.raises(MalformedQueryError, match="useFakeDate"):
        await _feed(FakeScoreProvider()).handle(
            {"league": "MLB", "teams": ["SEA"], "useFakeDate": "nope", "provider": "FAKE"}
        )


@pytest.mark.asyncio
async def test_unknown_provider_raises() -> None:
    with pytest.raises(ProviderCapabilityError):
        await _feed(FakeScoreProvider()).handle({"league": "MLB", "teams": ["SEA"], "provider": "SNET"})


@pytest.mark.asyncio
async def test_which_day_can_skip_today_and_add_yesterday() -> None:
    provider = FakeScoreProvider(default=lambda d: [game("SEA", "TOR")])

    response = await _feed(provider).handle(
        {
            "league": "MLB",
            "teams": ["SEA"],
            "minimumNumberOfGames": 3,
            "whichDay": {"today": "no", "yesterday": "yes"},
            "provider": "FAKE",
        }
    )

    assert provider.calls == ["2024-07-14"]
    assert response["notRun"] is True
    assert response["noGamesToday"] is False
    assert response["days"] == {
        "2024-07-15": {"actualDate": "2024-07-15", "scores": [], "sortIndex": 999}
    }
    yesterday = response["yesterday"]
    assert yesterday["baseDate"] == "2024-07-14"
    assert yesterday["totalGames"] == 1
    assert list(yesterday["days"]) == ["2024-07-14"]
    assert provider.closed


@pytest.mark.asyncio
async def test_yesterday_runs_after_the_main_search() -> None:
    provider = FakeScoreProvider(default=lambda d: [game("SEA", "TOR")])

    response = await _feed(provider).handle(
        {"league": "MLB", "teams": ["SEA"], "whichDay": {"today": True, "yesterday": True}, "provider": "FAKE"}
    )

    assert provider.calls == ["2024-07-15", "2024-07-14"]
    assert response["notRun"] is False
    assert response["totalGames"] == 1
    assert response["yesterday"]["totalGames"] == 1
