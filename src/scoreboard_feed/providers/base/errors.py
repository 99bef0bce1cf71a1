from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class ProviderError(RuntimeError):
    """A score provider could not deliver a day's slate."""


class ProviderRequestError(ProviderError):
    """The scoreboard request itself failed (timeout, connection, non-2xx, bad JSON)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProviderRateLimited(ProviderRequestError):
    """HTTP 429. `retry_after` is the server's Retry-After in seconds, when it sent one."""

    def __init__(self, message: str, *, retry_after: float | None = None) -> None:
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class ProviderResponseError(ProviderError):
    """The provider answered, but not with a scoreboard we can read."""


class ProviderCapabilityError(ProviderError):
    """No provider is registered for the requested provider/league pair."""

    def __init__(self, provider: str, league: str) -> None:
        super().__init__(f"No score provider registered for provider={provider} league={league}")
        self.provider = provider
        self.league = league


class GameRecordError(ProviderError):
    """One game in a slate lacks the team codes a search matches on."""

    def __init__(self, message: str, raw: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.raw_type = type(raw).__name__
        self.raw_keys = sorted(str(k) for k in raw) if isinstance(raw, Mapping) else None

    def log_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {"reason": self.message, "record_type": self.raw_type}
        if self.raw_keys is not None:
            fields["record_keys"] = self.raw_keys
        return fields
