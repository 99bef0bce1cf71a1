from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .adapter import ScoreProvider
from .errors import ProviderCapabilityError


@dataclass(frozen=True)
class ProviderKey:
    provider: str
    league_key: str | None = None


ProviderFactory = Callable[[], ScoreProvider]


class ProviderRegistry:
    def __init__(self) -> None:
        self._factories: dict[ProviderKey, ProviderFactory] = {}

    def register(self, key: ProviderKey, factory: ProviderFactory) -> None:
        key = ProviderKey(
            provider=key.provider.upper(),
            league_key=key.league_key.upper() if key.league_key else None,
        )
        if key in self._factories:
            raise ValueError(f"Duplicate provider registration: {key}")
        self._factories[key] = factory

    def get(self, *, provider: str, league_key: str) -> ScoreProvider:
        # Try exact match first.
        factory = self._factories.get(
            ProviderKey(provider=provider.upper(), league_key=league_key.upper())
        )

        # Fallback: league-agnostic registration for the provider.
        if factory is None:
            factory = self._factories.get(ProviderKey(provider=provider.upper()))

        if factory is None:
            raise ProviderCapabilityError(provider, league_key)

        return factory()

    def providers(self) -> list[str]:
        return sorted({key.provider for key in self._factories})
