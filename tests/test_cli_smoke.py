from __future__ import annotations

from typer.testing import CliRunner

from scoreboard_feed.cli.app import app


def test_cli_help_smoke() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    # Basic sanity checks that a top-level command is registered.
    assert "scores" in result.stdout


def test_in_season_command_handles_wraparound() -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["scores", "in-season", "2025-01-01", "--from", "09-01", "--to", "02-15"])
    assert result.exit_code == 0
    assert "2025-01-01 in season (09-01 to 02-15)" in result.stdout

    result = runner.invoke(app, ["scores", "in-season", "2024-06-01", "--from", "09-01", "--to", "02-15"])
    assert result.exit_code == 1
    assert "out of season" in result.stdout


def test_in_season_command_rejects_bad_bounds() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["scores", "in-season", "2024-06-01", "--from", "9-1"])
    assert result.exit_code == 2


def test_search_command_prints_json(monkeypatch) -> None:
    captured: dict = {}

    async def fake_handle(payload):
        captured.update(payload)
        return {"index": payload["league"], "error": False, "days": {}}

    monkeypatch.setattr("scoreboard_feed.cli.scores.handle_score_request", fake_handle)

    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "scores", "search", "--league", "MLB", "--team", "SEA", "--team", "TOR",
            "--minimum", "3", "--yesterday",
        ],
    )

    assert result.exit_code == 0, result.output
    assert '"index": "MLB"' in result.stdout
    assert captured["teams"] == ["SEA", "TOR"]
    assert captured["minimumNumberOfGames"] == 3
    assert captured["whichDay"] == {"today": True, "yesterday": True}
