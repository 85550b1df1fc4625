"""Tests for CLI commands: due, answer, hint, stats, advance and config."""

import json
import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import yaml
from typer.testing import CliRunner

from tierdeck.domain.constants import FALLBACK_HINT
from tierdeck.interface.cli import app

runner = CliRunner()


def _read(path: Path) -> dict:
    return yaml.safe_load(path.read_text())


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "tierdeck: tiered spaced repetition" in result.stdout
    for command in ("due", "answer", "hint", "stats", "advance", "config"):
        assert command in result.stdout


# --- Due ---


def test_due_uses_deck_day(deck_file):
    # Day 4: tier 0, tier 1 (every 2 days) and nothing from tier 3.
    result = runner.invoke(app, ["due", str(deck_file)])
    assert result.exit_code == 0
    assert "Day 4: 2 card(s) due" in result.stdout
    assert "[tier 1] adios" in result.stdout
    assert "[tier 0] hola" in result.stdout
    assert "gracias" not in result.stdout


def test_due_day_option(deck_file):
    result = runner.invoke(app, ["due", str(deck_file), "--day", "0"])
    assert result.exit_code == 0
    assert "Day 0: 3 card(s) due" in result.stdout
    assert "[tier 3] gracias" in result.stdout


def test_due_day_from_env(deck_file, monkeypatch):
    monkeypatch.setenv("TIERDECK_DAY", "1")
    result = runner.invoke(app, ["due", str(deck_file)])
    assert "Day 1: 1 card(s) due" in result.stdout


def test_due_empty_deck(tmp_path):
    result = runner.invoke(app, ["due", str(tmp_path / "empty.yaml")])
    assert result.exit_code == 0
    assert "No cards due on day 0." in result.stdout


def test_due_reports_bad_deck(tmp_path):
    path = tmp_path / "deck.yaml"
    path.write_text("day: -3\n")
    result = runner.invoke(app, ["due", str(path)])
    assert result.exit_code == 1
    assert "non-negative integer" in result.output


# --- Answer ---


def test_answer_moves_card_and_saves(deck_file):
    result = runner.invoke(app, ["answer", "adios", "easy", str(deck_file)])
    assert result.exit_code == 0
    assert "adios: tier 1 -> 2" in result.stdout
    assert "every 4 day(s)" in result.stdout

    saved = _read(deck_file)
    assert "adios" in saved["buckets"][2]
    assert 1 not in saved["buckets"]
    assert saved["history"][-1] == {
        "front": "adios",
        "back": "goodbye",
        "difficulty": "easy",
        "day": 4,
        "previous_bucket": 1,
        "new_bucket": 2,
    }


def test_answer_wrong_demotes(deck_file):
    result = runner.invoke(app, ["answer", "gracias", "wrong", str(deck_file), "--day", "8"])
    assert result.exit_code == 0
    saved = _read(deck_file)
    assert sorted(saved["buckets"][0]) == ["gracias", "hola"]
    assert saved["history"][-1]["day"] == 8


def test_answer_dry_run_does_not_save(deck_file):
    before = deck_file.read_text()
    result = runner.invoke(app, ["answer", "hola", "hard", str(deck_file), "--dry-run"])
    assert result.exit_code == 0
    assert "Dry run" in result.stdout
    assert deck_file.read_text() == before


def test_answer_unknown_card(deck_file):
    result = runner.invoke(app, ["answer", "nope", "easy", str(deck_file)])
    assert result.exit_code == 1
    assert "No card with front 'nope'" in result.output


def test_answer_bad_difficulty(deck_file):
    result = runner.invoke(app, ["answer", "hola", "meh", str(deck_file)])
    assert result.exit_code == 2


# --- Hint ---


def test_hint(deck_file):
    result = runner.invoke(app, ["hint", "hola", str(deck_file)])
    assert result.exit_code == 0
    assert result.stdout.strip() == "A greeting"


def test_hint_fallback(deck_file):
    result = runner.invoke(app, ["hint", "adios", str(deck_file)])
    assert result.stdout.strip() == FALLBACK_HINT


# --- Stats ---


def test_stats_json(deck_file):
    result = runner.invoke(app, ["stats", str(deck_file), "--json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["total_cards"] == 3
    assert data["cards_by_bucket"] == [1, 1, 0, 1]
    assert data["total_practice_events"] == 3
    assert data["average_moves_per_card"] == 1.0
    assert abs(data["success_rate"] - 200 / 3) < 1e-9


def test_stats_text(deck_file):
    result = runner.invoke(app, ["stats", str(deck_file)])
    assert result.exit_code == 0
    assert "Cards:           3" in result.stdout
    assert "Success rate:    66.7%" in result.stdout


# --- Advance ---


def test_advance(deck_file):
    result = runner.invoke(app, ["advance", str(deck_file), "--days", "3"])
    assert result.exit_code == 0
    assert "Study day is now 7." in result.stdout
    assert _read(deck_file)["day"] == 7


# --- Config ---


@patch("tierdeck.interface.cli.resolve_config")
def test_config_show_command(mock_resolve_config):
    mock_config = MagicMock()
    mock_config.model_dump.return_value = {
        "deck_path": str(Path("/tmp/deck.yaml")),
        "day": None,
        "verbose": 1,
    }
    mock_resolve_config.return_value = mock_config

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    output_data = json.loads(result.stdout)
    assert output_data["deck_path"] == str(Path("/tmp/deck.yaml"))
    assert output_data["day"] is None


# --- Verbosity ---


def test_default_verbosity_logs_at_info(deck_file):
    result = runner.invoke(app, ["due", str(deck_file)])
    assert result.exit_code == 0
    assert logging.getLogger("tierdeck").level == logging.INFO


def test_single_verbose_flag_enables_debug(deck_file):
    result = runner.invoke(app, ["-v", "due", str(deck_file)])
    assert result.exit_code == 0
    assert logging.getLogger("tierdeck").level == logging.DEBUG


def test_verbose_from_env(deck_file, monkeypatch):
    monkeypatch.setenv("TIERDECK_VERBOSE", "2")
    result = runner.invoke(app, ["due", str(deck_file)])
    assert result.exit_code == 0
    assert logging.getLogger("tierdeck").level == logging.DEBUG


# --- Malformed decks ---


def test_non_list_cards_is_reported(tmp_path):
    path = tmp_path / "deck.yaml"
    path.write_text("cards: 5\n")
    result = runner.invoke(app, ["stats", str(path)])
    assert result.exit_code == 1
    assert "'cards' must be a list" in result.output
