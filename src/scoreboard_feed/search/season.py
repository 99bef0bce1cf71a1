from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from scoreboard_feed.core.dates import month_day, validate_month_day

SEASON_START_DEFAULT = "01-01"
SEASON_END_DEFAULT = "12-31"


@dataclass(frozen=True)
class SeasonWindow:
    """A league's active season as MM-DD bounds, no year component.

    `start > end` describes a season that wraps over New Year (e.g. NFL
    09-01 -> 02-15). Both bounds absent means year-round.
    """

    start: str | None = None
    end: str | None = None

    def __post_init__(self) -> None:
        if self.start is not None:
            validate_month_day(self.start)
        if self.end is not None:
            validate_month_day(self.end)

    @property
    def year_round(self) -> bool:
        return self.start is None and self.end is None

    def describe(self) -> str:
        return f"{self.start or SEASON_START_DEFAULT} to {self.end or SEASON_END_DEFAULT}"


def is_in_season(window: SeasonWindow, value: Any) -> bool:
    """Return True if the calendar date `value` falls inside `window`.

    Only MM-DD is compared; 02-29 is treated like any other day.
    """

    if window.year_round:
        return True

    current = month_day(value)
    start = window.start or SEASON_START_DEFAULT
    end = window.end or SEASON_END_DEFAULT

    if start <= end:
        return start <= current <= end
    return current >= start or current <= end
