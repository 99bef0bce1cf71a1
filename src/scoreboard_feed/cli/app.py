from __future__ import annotations

import typer

from scoreboard_feed.cli.scores import app as scores_app

app = typer.Typer(no_args_is_help=True)
app.add_typer(scores_app, name="scores")
