from __future__ import annotations

import asyncio
import json

import typer

from scoreboard_feed.core.config import settings
from scoreboard_feed.core.dates import parse_calendar_date
from scoreboard_feed.feed import handle_score_request
from scoreboard_feed.providers.base.errors import ProviderCapabilityError
from scoreboard_feed.search.season import SeasonWindow, is_in_season
from scoreboard_feed.search.types import MalformedQueryError

app = typer.Typer(help="Search scoreboards and check season windows.")


@app.command("search")
def search_cmd(
    league: str = typer.Option(..., "--league", help="League key (e.g. MLB, NFL)."),
    teams: list[str] = typer.Option(
        ..., "--team", help="Team code to follow (repeatable, e.g. --team SEA --team TOR)."
    ),
    game_date: str | None = typer.Option(
        None, "--date", help="Base date YYYY-MM-DD (defaults to today)."
    ),
    minimum: int = typer.Option(
        0, "--minimum", min=0, help="Minimum number of games to find (0 = base date only)."
    ),
    season_from: str | None = typer.Option(None, "--from", help="Season start MM-DD."),
    season_to: str | None = typer.Option(None, "--to", help="Season end MM-DD."),
    provider: str = typer.Option(
        settings.default_provider, "--provider", help="Score provider key."
    ),
    fake_date: str | None = typer.Option(
        None, "--fake-date", help="Pretend today is this date (YYYY-MM-DD)."
    ),
    yesterday: bool = typer.Option(
        False, "--yesterday", help="Also fetch the day before the base date."
    ),
) -> None:
    """Find at least --minimum games for the given teams and print them as JSON."""

    payload = {
        "league": league,
        "teams": list(teams),
        "gameDate": game_date,
        "minimumNumberOfGames": minimum,
        "from": season_from,
        "to": season_to,
        "provider": provider,
        "useFakeDate": fake_date,
        "whichDay": {"today": True, "yesterday": yesterday},
    }

    try:
        response = asyncio.run(handle_score_request(payload))
    except (MalformedQueryError, ProviderCapabilityError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2) from e

    typer.echo(json.dumps(response, indent=2, default=str))
    if response.get("error"):
        raise typer.Exit(code=1)


@app.command("in-season")
def in_season_cmd(
    game_date: str = typer.Argument(..., help="Date to check, YYYY-MM-DD."),
    season_from: str | None = typer.Option(None, "--from", help="Season start MM-DD."),
    season_to: str | None = typer.Option(None, "--to", help="Season end MM-DD."),
) -> None:
    """Print whether a date falls inside a season window."""

    try:
        window = SeasonWindow(start=season_from, end=season_to)
        day = parse_calendar_date(game_date)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2) from e

    in_season = is_in_season(window, day)
    typer.echo(f"{day.isoformat()} {'in' if in_season else 'out of'} season ({window.describe()})")
    if not in_season:
        raise typer.Exit(code=1)
