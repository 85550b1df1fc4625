"""tierdeck CLI: study a YAML deck from the terminal."""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer

from tierdeck.application.config import AppConfig, resolve_config
from tierdeck.application.scheduler import review_interval
from tierdeck.application.session import StudySession
from tierdeck.domain.cards.models import AnswerDifficulty
from tierdeck.domain.cards.ports import DeckSnapshot
from tierdeck.domain.errors import TierdeckError
from tierdeck.infrastructure.deck_file import YamlDeckRepository

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="tierdeck: tiered spaced repetition for flashcard decks.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage tierdeck configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

DeckArg = Annotated[
    Path | None,
    typer.Argument(help="Path to the deck YAML file. Defaults to 'deck_path' in config, or ./deck.yaml."),
]
DayOpt = Annotated[
    int | None,
    typer.Option("--day", "-d", min=0, help="Study day. Defaults to the day stored in the deck."),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve(ctx: typer.Context, **overrides) -> AppConfig:
    # Each -v raises the configured default of 1; without -v, env/TOML apply.
    bonus = ctx.obj.get("verbose_bonus", 0) if ctx.obj else 0
    if bonus:
        overrides["verbose"] = 1 + bonus
    config = resolve_config(overrides)
    logging.getLogger("tierdeck").setLevel(logging.DEBUG if config.verbose > 1 else logging.INFO)
    return config


def _open_session(config: AppConfig) -> tuple[YamlDeckRepository, StudySession]:
    repo = YamlDeckRepository(config.deck_path)
    return repo, StudySession(repo.load())


def _fail(error: TierdeckError) -> typer.Exit:
    typer.secho(f"Error: {error}", fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


def _effective_day(config: AppConfig, session: StudySession) -> int:
    return config.day if config.day is not None else session.snapshot.day


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. -v turns on debug logging."
        ),
    ] = 0,
):
    """Global settings for tierdeck."""
    ctx.ensure_object(dict)
    ctx.obj["verbose_bonus"] = verbose


# ---------------------------------------------------------------------------
# Study commands
# ---------------------------------------------------------------------------


@app.command()
def due(ctx: typer.Context, deck: DeckArg = None, day: DayOpt = None):
    """List the cards [bold green]due[/bold green] on a study day."""
    config = _resolve(ctx, deck_path=deck, day=day)
    try:
        _, session = _open_session(config)
    except TierdeckError as e:
        raise _fail(e) from e

    study_day = _effective_day(config, session)
    cards = session.due_cards(study_day)
    if not cards:
        typer.echo(f"No cards due on day {study_day}.")
        return

    typer.echo(f"Day {study_day}: {len(cards)} card(s) due")
    for card in cards:
        typer.echo(f"  [tier {session.tier_of(card)}] {card.front}")


@app.command()
def answer(
    ctx: typer.Context,
    front: Annotated[str, typer.Argument(help="Front text of the answered card.")],
    difficulty: Annotated[str, typer.Argument(help="How it went: wrong, hard or easy.")],
    deck: DeckArg = None,
    day: DayOpt = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Show the move without saving the deck.")
    ] = False,
):
    """Record an answer and move the card to its new tier."""
    try:
        outcome = AnswerDifficulty.parse(difficulty)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="DIFFICULTY") from e

    config = _resolve(ctx, deck_path=deck, day=day)
    try:
        repo, session = _open_session(config)
        card = session.card(front)
    except TierdeckError as e:
        raise _fail(e) from e

    record = session.answer(card, outcome, day=_effective_day(config, session))
    typer.echo(
        f"{card.front}: tier {record.previous_bucket} -> {record.new_bucket} "
        f"(next review every {review_interval(record.new_bucket)} day(s))"
    )

    if dry_run:
        typer.echo("Dry run: deck not saved.")
        return
    repo.save(session.snapshot)


@app.command()
def hint(
    ctx: typer.Context,
    front: Annotated[str, typer.Argument(help="Front text of the card.")],
    deck: DeckArg = None,
):
    """Show a card's hint."""
    config = _resolve(ctx, deck_path=deck)
    try:
        _, session = _open_session(config)
        typer.echo(session.hint(front))
    except TierdeckError as e:
        raise _fail(e) from e


@app.command()
def stats(
    ctx: typer.Context,
    deck: DeckArg = None,
    as_json: Annotated[bool, typer.Option("--json", help="Emit JSON.")] = False,
):
    """Summarize progress across tiers and practice history."""
    config = _resolve(ctx, deck_path=deck)
    try:
        _, session = _open_session(config)
    except TierdeckError as e:
        raise _fail(e) from e

    progress = session.progress()
    if as_json:
        payload = asdict(progress)
        payload["cards_by_bucket"] = list(progress.cards_by_bucket)
        typer.echo(json.dumps(payload, indent=2))
        return

    typer.echo(f"Cards:           {progress.total_cards}")
    for tier, count in enumerate(progress.cards_by_bucket):
        typer.echo(f"  tier {tier}:        {count}")
    typer.echo(f"Practice events: {progress.total_practice_events}")
    typer.echo(f"Success rate:    {progress.success_rate:.1f}%")
    typer.echo(f"Attempts/card:   {progress.average_moves_per_card:.2f}")


@app.command()
def advance(
    ctx: typer.Context,
    deck: DeckArg = None,
    days: Annotated[int, typer.Option("--days", "-n", min=1, help="Days to move forward.")] = 1,
):
    """Move the deck's study day forward."""
    config = _resolve(ctx, deck_path=deck)
    try:
        repo, session = _open_session(config)
    except TierdeckError as e:
        raise _fail(e) from e

    current = session.snapshot
    repo.save(
        DeckSnapshot(
            cards=current.cards,
            buckets=current.buckets,
            history=current.history,
            day=current.day + days,
        )
    )
    typer.echo(f"Study day is now {current.day + days}.")


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Print the resolved configuration as JSON."""
    config = resolve_config()
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    app()
