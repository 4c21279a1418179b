"""
Lexicon Lengthen: terminal front end for the spaced-repetition core.

Commands:
- lexicon add      - Start studying an item
- lexicon due      - List items due for review
- lexicon review   - Record a graded review
- lexicon session  - Preview today's study session
- lexicon stats    - Show retention and mastery statistics
- lexicon plan     - Recommend a daily pace for new items
"""
from __future__ import annotations

import sys
from typing import List, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lexicon.config import get_settings, get_srs_config
from lexicon.srs import (
    MasteryRecord,
    ReviewQuality,
    SchedulingError,
    Skill,
    SpacedRepetitionEngine,
    mastery_distribution,
    recommended_new_items_per_day,
    retention_rate,
)
from lexicon.srs.models import LEVEL_DESCRIPTIONS
from lexicon.store import MasteryStore

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="lexicon",
    help="Lexicon Lengthen: spaced repetition for your vocabulary",
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Styling
# =============================================================================

STYLES = {
    "correct": "bold green",
    "incorrect": "bold red",
    "info": "bold cyan",
    "level": {
        0: "dim",
        1: "red",
        2: "yellow",
        3: "cyan",
        4: "blue",
        5: "bold green",
    },
}


def style_level(record: MasteryRecord) -> str:
    """Get styled mastery level string."""
    color = STYLES["level"].get(record.mastery_level, "white")
    return f"[{color}]{record.mastery_level} {record.level_description}[/{color}]"


# =============================================================================
# Helpers
# =============================================================================


def _open_store() -> MasteryStore:
    return MasteryStore(get_settings().state_db_path)


def _engine() -> SpacedRepetitionEngine:
    return SpacedRepetitionEngine(config=get_srs_config())


def _parse_payload(pairs: list[str]) -> dict[str, object]:
    """Parse KEY=VALUE pairs, turning integer values into ints."""
    payload: dict[str, object] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got {pair!r}")
        payload[key] = int(value) if value.lstrip("-").isdigit() else value
    return payload


def _record_table(title: str, records: list[MasteryRecord], engine: SpacedRepetitionEngine) -> Table:
    table = Table(title=title)
    table.add_column("Item")
    table.add_column("Skill")
    table.add_column("Level")
    table.add_column("Ease", justify="right")
    table.add_column("Overdue", justify="right")

    for record in records:
        overdue = "new" if record.never_studied else f"{engine.overdue_days(record)}d"
        table.add_row(
            record.item_id,
            Skill(record.skill).value,
            style_level(record),
            f"{record.ease_factor:.2f}",
            overdue,
        )
    return table


# =============================================================================
# Commands
# =============================================================================


@app.command()
def add(
    item_id: str = typer.Argument(..., help="Identifier of the item to learn"),
    skill: Skill = typer.Option(Skill.DEFINITION, "--skill", "-s", help="Skill to practice"),
    payload: Optional[List[str]] = typer.Option(
        None,
        "--payload", "-p",
        help="Display/points data as KEY=VALUE (e.g. definition_length=42)",
    ),
) -> None:
    """Start studying an item."""
    store = _open_store()
    if store.get_record(item_id, skill) is not None:
        console.print(f"[yellow]{item_id} ({skill.value}) is already being studied[/yellow]")
        raise typer.Exit(0)

    record = _engine().new_record(item_id, skill=skill, payload=_parse_payload(payload or []))
    store.save_record(record)
    console.print(f"[green]Added {item_id} ({skill.value})[/green]")


@app.command()
def due(
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Maximum items to list"),
) -> None:
    """List items due for review, most urgent first."""
    engine = _engine()
    records = engine.select_due(_open_store().list_records(), limit=limit)

    if not records:
        console.print("[green]Nothing due. Come back later![/green]")
        return

    console.print(_record_table("Due for Review", records, engine))


@app.command()
def review(
    item_id: str = typer.Argument(..., help="Identifier of the reviewed item"),
    grade: int = typer.Argument(..., help="Quality of recall, 0 (blackout) to 5 (perfect)"),
    skill: Skill = typer.Option(Skill.DEFINITION, "--skill", "-s", help="Skill reviewed"),
) -> None:
    """Record a graded review and reschedule the item."""
    store = _open_store()
    record = store.get_record(item_id, skill)
    if record is None:
        console.print(f"[red]Unknown item: {item_id} ({skill.value})[/red]")
        raise typer.Exit(1)

    engine = _engine()
    try:
        result = engine.process_review(record, grade)
    except SchedulingError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    updated = result.apply_to(record)
    store.save_record(updated)
    store.log_review(
        item_id, skill, grade, updated.last_reviewed_at, points_awarded=result.points_awarded
    )

    style = STYLES["correct"] if result.was_correct else STYLES["incorrect"]
    icon = "[green]✓[/green]" if result.was_correct else "[red]✗[/red]"
    content = (
        f"{icon} {ReviewQuality(grade).description}\n\n"
        f"Level: {style_level(updated)}\n"
        f"Next review in {updated.interval_days} day(s): "
        f"{updated.next_review_at:%Y-%m-%d}\n"
        f"Ease factor: {updated.ease_factor:.2f}"
    )
    if result.points_awarded:
        content += f"\n[bold yellow]+{result.points_awarded} points[/bold yellow]"

    console.print(Panel(content, title=item_id, title_align="left", border_style=style))


@app.command()
def session(
    max_new: Optional[int] = typer.Option(None, "--max-new", "-n", help="Maximum new items"),
    max_review: Optional[int] = typer.Option(None, "--max-review", "-r", help="Maximum reviews"),
) -> None:
    """Preview today's study session."""
    settings = get_settings()
    engine = _engine()
    records = _open_store().list_records()

    if max_new is None:
        max_new = settings.session_max_new
    if max_review is None:
        max_review = settings.session_max_review

    new_items = [r for r in records if r.never_studied]
    try:
        due_items = engine.select_due(
            [r for r in records if not r.never_studied], limit=max_review
        )
        plan = engine.create_session(new_items, due_items, max_new=max_new, max_review=max_review)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    if plan.is_empty:
        console.print("[green]Nothing to study right now.[/green]")
        return

    console.print(
        f"\n[bold]Session:[/bold] {len(plan.review_items)} review + {len(plan.new_items)} new "
        f"(~{plan.estimated_minutes} min)\n"
    )
    if plan.review_items:
        console.print(_record_table("Reviews", plan.review_items, engine))
    if plan.new_items:
        console.print(_record_table("New", plan.new_items, engine))


@app.command()
def stats() -> None:
    """Show retention and mastery statistics."""
    records = _open_store().list_records()

    console.print(f"\n[bold]Items studied:[/bold] {len(records)}")
    console.print(f"[bold]Retention:[/bold] {retention_rate(records) * 100:.0f}%")
    console.print(f"[bold]Points:[/bold] {sum(r.points_earned for r in records)}\n")

    table = Table(title="Mastery Distribution")
    table.add_column("Level")
    table.add_column("Definition label")
    table.add_column("Items", justify="right")

    try:
        distribution = mastery_distribution(records)
    except SchedulingError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    for level, count in distribution.items():
        table.add_row(str(level), LEVEL_DESCRIPTIONS[Skill.DEFINITION][level], str(count))

    console.print(table)


@app.command()
def plan(
    total: int = typer.Argument(..., help="Items still to learn"),
    load: int = typer.Option(0, "--load", help="Reviews already due per day"),
    minutes: Optional[int] = typer.Option(None, "--minutes", "-m", help="Daily study budget"),
) -> None:
    """Recommend how many new items to start per day."""
    minutes = get_settings().target_daily_minutes if minutes is None else minutes
    per_day = recommended_new_items_per_day(total, load, target_minutes=minutes)

    console.print(f"Start [bold cyan]{per_day}[/bold cyan] new item(s) per day")
    if total > 0:
        days = -(-total // per_day)
        console.print(f"[dim]About {days} day(s) to introduce all {total} items[/dim]")


# =============================================================================
# Entry Point
# =============================================================================


def configure_logging() -> None:
    """Route loguru output according to settings."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="10 MB")


def main() -> None:
    """CLI entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
