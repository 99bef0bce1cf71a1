from __future__ import annotations

import pytest

from fakes import FakeScoreProvider
from scoreboard_feed.providers.base.errors import ProviderCapabilityError
from scoreboard_feed.providers.base.registry import ProviderKey, ProviderRegistry
from scoreboard_feed.providers.espn.provider import EspnScoreProvider, build_default_registry


def test_exact_registration_wins_over_league_agnostic() -> None:
    generic = FakeScoreProvider()
    nfl_only = FakeScoreProvider()

    registry = ProviderRegistry()
    registry.register(ProviderKey(provider="fake"), lambda: generic)
    registry.register(ProviderKey(provider="FAKE", league_key="nfl"), lambda: nfl_only)

    assert registry.get(provider="FAKE", league_key="NFL") is nfl_only
    assert registry.get(provider="fake", league_key="MLB") is generic


def test_missing_provider_raises() -> None:
    registry = ProviderRegistry()
    with pytest.raises(ProviderCapabilityError) as exc:
        registry.get(provider="SNET", league_key="NHL")

    assert (exc.value.provider, exc.value.league) == ("SNET", "NHL")


def test_duplicate_registration_raises() -> None:
    registry = ProviderRegistry()
    registry.register(ProviderKey(provider="FAKE"), FakeScoreProvider)
    with pytest.raises(ValueError):
        registry.register(ProviderKey(provider="fake"), FakeScoreProvider)


def test_default_registry_serves_espn_for_any_league() -> None:
    registry = build_default_registry()
    assert registry.providers() == ["ESPN"]
    assert isinstance(registry.get(provider="espn", league_key="NHL"), EspnScoreProvider)
