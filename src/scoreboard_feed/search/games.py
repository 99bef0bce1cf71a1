from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from scoreboard_feed.providers.base.errors import GameRecordError

# Provider shapes seen in the wild, in lookup order.
HOME_FIELDS = ("hTeam", "homeTeam", "home")
AWAY_FIELDS = ("vTeam", "awayTeam", "away")


@dataclass(frozen=True, eq=False)
class Game:
    """Canonical game: normalized team codes plus the untouched provider record.

    Compared by identity; two games between the same teams on one day
    (doubleheaders) are different games.
    """

    home: str
    away: str
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False)

    def involves_any(self, teams: Iterable[str]) -> bool:
        wanted = {t.strip().upper() for t in teams}
        return self.home.upper() in wanted or self.away.upper() in wanted

    def to_payload(self) -> dict[str, Any]:
        payload = dict(self.raw)
        payload["home"] = self.home
        payload["away"] = self.away
        return payload


def _team_code(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, Mapping):
        abbreviation = value.get("abbreviation")
        if isinstance(abbreviation, str) and abbreviation.strip():
            return abbreviation.strip()
    return None


def _first_code(raw: Mapping[str, Any], fields: tuple[str, ...]) -> str | None:
    for name in fields:
        code = _team_code(raw.get(name))
        if code is not None:
            return code
    return None


def normalize_game(raw: Any) -> Game:
    """
    Build a Game from a provider record.

    Accepts flat codes (`hTeam: "SEA"`) or nested objects exposing an
    abbreviation (`homeTeam: {"abbreviation": "SEA"}`).
    Raises GameRecordError if either side has no usable code.
    """
    if isinstance(raw, Game):
        return raw
    if not isinstance(raw, Mapping):
        raise GameRecordError("Game record is not a mapping", raw)

    home = _first_code(raw, HOME_FIELDS)
    away = _first_code(raw, AWAY_FIELDS)
    if home is None or away is None:
        raise GameRecordError("Game record has no home/away team code", raw)

    return Game(home=home, away=away, raw=raw)


def filter_team_games(games: Iterable[Game], teams: Iterable[str]) -> list[Game]:
    teams = tuple(teams)
    return [g for g in games if g.involves_any(teams)]
