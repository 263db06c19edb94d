"""wordbox CLI: study and inspect progress."""

import json
import logging
import sys
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer

from wordbox.application.config import EngineConfig, resolve_config
from wordbox.domain.errors import WordboxError

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="wordbox: Spaced-repetition and progress engine for vocabulary study.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage wordbox configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [_to_jsonable(v) for v in value]
        return sorted(items) if isinstance(value, (set, frozenset)) else items
    if isinstance(value, Path):
        return str(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.name.lower()
    return value


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(_to_jsonable(data), indent=2))


def _config(ctx: typer.Context, **overrides: Any) -> EngineConfig:
    ctx.ensure_object(dict)
    return resolve_config({**ctx.obj.get("overrides", {}), **overrides})


def _fail(e: WordboxError) -> NoReturn:
    typer.secho(f"Error: {e}", fg="red", err=True)
    raise typer.Exit(1)


def parse_answer(token: str) -> tuple[str, bool, float | None]:
    """
    Parse ``ITEM:c`` / ``ITEM:w`` with an optional ``:SECONDS`` suffix.

    Item references may themselves contain colons; the result flag is the
    last or second-to-last field.
    """
    parts = token.split(":")
    elapsed = None
    if len(parts) >= 3 and parts[-1] and parts[-1].replace(".", "", 1).isdigit():
        elapsed = float(parts.pop())
    if len(parts) < 2 or parts[-1].lower() not in ("c", "w"):
        raise typer.BadParameter(f"Expected ITEM:c or ITEM:w[:SECONDS], got {token!r}")
    flag = parts.pop().lower()
    return ":".join(parts), flag == "c", elapsed


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    data_dir: Annotated[
        Path | None, typer.Option(help="Directory holding srs.json and ledgers.json.")
    ] = None,
    learner: Annotated[str | None, typer.Option(help="Learner id.")] = None,
):
    """Global settings for wordbox."""
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {"data_dir": data_dir, "learner_id": learner}
    logging.getLogger().setLevel(LOG_LEVELS.get(verbose, logging.DEBUG))


# ---------------------------------------------------------------------------
# Study commands
# ---------------------------------------------------------------------------


@app.command()
def review(
    ctx: typer.Context,
    item: Annotated[str, typer.Argument(help="Item reference, e.g. the word.")],
    correct: Annotated[
        bool, typer.Option("--correct/--wrong", help="Whether the answer was correct.")
    ] = True,
):
    """Record one answer and print the item's updated schedule."""
    from wordbox.application.factory import get_progress_service

    try:
        service = get_progress_service(_config(ctx))
        entry = service.review(item, correct)
    except WordboxError as e:
        _fail(e)
    _echo_json({"item": item, **asdict(entry)})


@app.command()
def due(
    ctx: typer.Context,
    items: Annotated[list[str], typer.Argument(help="Items to check.")],
):
    """List which of ITEMS are due today."""
    from wordbox.application import scheduler
    from wordbox.application.factory import get_clock, get_srs_store

    try:
        config = _config(ctx)
        today = get_clock(config).today()
        due_items = scheduler.get_due_items(get_srs_store(config), items, today)
    except WordboxError as e:
        _fail(e)
    for ref in due_items:
        typer.echo(ref)


@app.command()
def queue(
    ctx: typer.Context,
    items: Annotated[list[str], typer.Argument(help="Candidate items.")],
    limit: Annotated[int | None, typer.Option(help="Maximum queue length.")] = None,
):
    """Print today's study queue: due items, most urgent first."""
    from wordbox.application import scheduler
    from wordbox.application.factory import get_clock, get_srs_store

    try:
        config = _config(ctx, queue_limit=limit)
        store = get_srs_store(config)
        today = get_clock(config).today()
        due_items = scheduler.get_due_items(store, items, today)
        ordered = scheduler.build_study_queue(store, due_items, config.queue_limit)
    except WordboxError as e:
        _fail(e)
    for ref in ordered:
        typer.echo(ref)


@app.command()
def stats(
    ctx: typer.Context,
    items: Annotated[list[str], typer.Argument(help="Items to aggregate over.")],
):
    """Show box distribution, due count and accuracy for ITEMS."""
    from wordbox.application import scheduler
    from wordbox.application.factory import get_clock, get_srs_store

    try:
        config = _config(ctx)
        today = get_clock(config).today()
        result = scheduler.compute_stats(get_srs_store(config), items, today)
    except WordboxError as e:
        _fail(e)
    _echo_json(asdict(result))


@app.command()
def info(
    ctx: typer.Context,
    item: Annotated[str, typer.Argument(help="Item reference.")],
):
    """Show one item's box, streak, accuracy and days until due."""
    from wordbox.application import scheduler
    from wordbox.application.factory import get_clock, get_srs_store

    try:
        config = _config(ctx)
        today = get_clock(config).today()
        result = scheduler.get_item_info(get_srs_store(config), item, today)
    except WordboxError as e:
        _fail(e)
    _echo_json(asdict(result))


@app.command()
def session(
    ctx: typer.Context,
    answers: Annotated[
        list[str],
        typer.Argument(help="Answers in order, as ITEM:c or ITEM:w, optionally :SECONDS."),
    ],
    hints: Annotated[int, typer.Option(help="Hints used during the session.")] = 0,
):
    """Record a whole practice session: reviews, XP, streak and badges."""
    from wordbox.application.factory import get_progress_service
    from wordbox.domain.progress.models import SessionAccumulator

    parsed = [parse_answer(a) for a in answers]
    if hints < 0:
        raise typer.BadParameter("--hints must be >= 0")

    try:
        config = _config(ctx)
        service = get_progress_service(config)
        acc = SessionAccumulator()
        for item, correct, elapsed in parsed:
            service.review(item, correct)
            acc.record_answer(correct, elapsed)
        for _ in range(hints):
            acc.record_hint()
        outcome = service.complete_session(config.learner_id, acc)
    except WordboxError as e:
        _fail(e)

    _echo_json(
        {
            "session": acc.counters(),
            "xp": asdict(outcome.breakdown),
            "xp_gained": outcome.xp_gained,
            "total_xp": outcome.ledger.xp,
            "streak_days": outcome.new_streak,
            "new_badges": [
                {"id": b.id, "name": b.name, "xp": b.xp_reward} for b in outcome.new_badges
            ],
        }
    )
    for badge in outcome.new_badges:
        typer.secho(
            f"Badge unlocked: {badge.name} (+{badge.xp_reward} XP)", fg="green", err=True
        )


@app.command()
def learned(
    ctx: typer.Context,
    count: Annotated[int, typer.Option(help="Number of words learned.")] = 1,
):
    """Credit newly learned words."""
    from wordbox.application.factory import get_progress_service

    try:
        config = _config(ctx)
        service = get_progress_service(config)
        unlocked = []
        for _ in range(count):
            unlocked.extend(service.record_word_learned(config.learner_id).new_badges)
    except WordboxError as e:
        _fail(e)
    for badge in unlocked:
        typer.secho(f"Badge unlocked: {badge.name} (+{badge.xp_reward} XP)", fg="green")


@app.command()
def level(ctx: typer.Context):
    """Show XP, level and progress to the next level."""
    from wordbox.application.factory import get_leveling_table, get_progress_service
    from wordbox.application.leveling import level_title

    try:
        config = _config(ctx)
        ledger = get_progress_service(config).load_ledger(config.learner_id)
        table = get_leveling_table(config)
    except WordboxError as e:
        _fail(e)
    lvl = table.level_for_xp(ledger.xp)
    _echo_json(
        {
            "xp": ledger.xp,
            "level": lvl,
            "title": level_title(lvl),
            "xp_to_next_level": table.xp_to_next_level(ledger.xp),
            "progress": round(table.level_progress_fraction(ledger.xp), 1),
            "streak_days": ledger.streak_days,
        }
    )


@app.command()
def goal(
    ctx: typer.Context,
    done: Annotated[int, typer.Argument(help="Words studied today.")],
):
    """Show progress toward the configured daily goal."""
    from wordbox.application.leveling import daily_goal_progress

    try:
        config = _config(ctx)
    except WordboxError as e:
        _fail(e)
    pct = daily_goal_progress(done, config.daily_goal)
    typer.echo(f"{done}/{config.daily_goal} ({pct:.0f}%)")


@app.command()
def badges(
    ctx: typer.Context,
    category: Annotated[str | None, typer.Option(help="Only this category.")] = None,
):
    """List catalog badges and which ones are earned."""
    from wordbox.application.factory import get_progress_service

    try:
        config = _config(ctx)
        service = get_progress_service(config)
        ledger = service.load_ledger(config.learner_id)
    except WordboxError as e:
        _fail(e)

    catalog = service.catalog
    listed = catalog.by_category(category) if category else list(catalog)
    progress = catalog.progress(ledger.earned_badge_ids)
    typer.echo(f"Earned {progress.earned}/{progress.total} ({progress.percentage}%)")
    for badge in listed:
        mark = "x" if badge.id in ledger.earned_badge_ids else " "
        typer.echo(f"[{mark}] {badge.id:>3}  {badge.name}  ({badge.rarity.name.lower()})")


@app.command()
def reset(
    ctx: typer.Context,
    item: Annotated[str | None, typer.Argument(help="Item to reset.")] = None,
    all_items: Annotated[bool, typer.Option("--all", help="Reset every item.")] = False,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation for destructive actions.")
    ] = False,
):
    """Forget scheduling state (debugging)."""
    from wordbox.application import scheduler
    from wordbox.application.factory import get_srs_store

    if not item and not all_items:
        typer.secho("Give an ITEM or --all.", fg="yellow")
        raise typer.Exit(2)

    try:
        store = get_srs_store(_config(ctx))
        if all_items:
            if not force and not typer.confirm("Reset ALL scheduling data?"):
                raise typer.Exit(1)
            scheduler.reset_all(store)
            typer.secho("Reset all items.", fg="green")
        else:
            scheduler.reset_item(store, item)
            typer.secho(f"Reset {item}.", fg="green")
    except WordboxError as e:
        _fail(e)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    try:
        config = _config(ctx)
    except WordboxError as e:
        _fail(e)
    _echo_json(config.model_dump())
