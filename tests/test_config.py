from __future__ import annotations

from scoreboard_feed.core.config import Settings
from scoreboard_feed.providers.base.types import NO_SORT_INDEX


def test_sort_index_follows_configured_league_order() -> None:
    s = Settings(league_order=["MLB", "NFL"])

    assert s.sort_index_for("mlb") == 0
    assert s.sort_index_for("NFL") == 1
    assert s.sort_index_for("CFL") == NO_SORT_INDEX
