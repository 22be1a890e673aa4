# -*- coding: utf-8 -*-
import typing as t
from datetime import datetime

import click
from pydantic import ValidationError
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from intake.convert import FetchResult, load_assignments, load_attendance, load_lectures
from intake.models import Snapshot
from orchestrator.utils import configure_logging, console, err_console, load_json_file
from status_server.models import AssignmentStatus, SubmissionStatus
from status_server.status import (
    aggregate_attendance,
    attendance_band,
    classify_assignment,
    classify_submission,
    days_remaining,
    deadline_urgency,
    summarize_submissions,
    upcoming_deadlines,
)
from timetable_server.catalog import SlotCatalog
from timetable_server.errors import ScheduleError
from timetable_server.grid import TimetableGrid
from timetable_server.lectures import next_lecture_today
from timetable_server.store import JsonFileStore

STATUS_STYLES = {
    AssignmentStatus.ACTIVE: "green",
    AssignmentStatus.DUE_SOON: "yellow",
    AssignmentStatus.OVERDUE: "red",
    SubmissionStatus.SUBMITTED: "green",
    SubmissionStatus.PENDING: "yellow",
    SubmissionStatus.OVERDUE: "red",
}

BAND_STYLES = {"success": "green", "warning": "yellow", "error": "red"}

URGENCY_STYLES = {"red": "red", "orange": "dark_orange", "yellow": "yellow", "green": "green"}


def parse_now(value: t.Optional[str]) -> datetime:
    """Parse --now, defaulting to the current local time."""
    if not value:
        return datetime.now().astimezone()
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise click.BadParameter(f"not an ISO datetime: {value!r}", param_hint="--now") from e
    return moment if moment.tzinfo else moment.astimezone()


def read_snapshot(path: str) -> Snapshot:
    try:
        return Snapshot.model_validate(load_json_file(path))
    except ValidationError as e:
        err_console.print(f"[red]Error:[/red] '{path}' is not a valid snapshot: {e}")
        raise SystemExit(1)


def report_fetch_error(result: FetchResult, kind: str) -> None:
    if not result.ok:
        err_console.print(f"[yellow]Warning:[/yellow] {kind}: {result.error}")


def create_timetable_table(grid: TimetableGrid, highlight_id: t.Optional[str] = None) -> Table:
    """Create a rich table with one row per time slot and one column per day."""
    title = f"🗓️ Timetable - {grid.owner}" if grid.owner else "🗓️ Timetable"
    table = Table(title=title, show_header=True, header_style="bold magenta", show_lines=True)
    table.add_column("Time", style="cyan", no_wrap=True)
    for day in grid.catalog.days:
        table.add_column(day)

    for slot, cells in grid.rows():
        row = [slot]
        for entry in cells:
            if entry is None:
                row.append(Text("—", style="dim"))
                continue
            text = Text(entry.subject, style="bold green" if entry.id == highlight_id else "bold")
            if entry.room:
                text.append(f"\n{entry.room}", style="white")
            if entry.teacher_name:
                text.append(f"\n{entry.teacher_name}", style="dim")
            row.append(text)
        table.add_row(*row)
    return table


def build_grid(snapshot: Snapshot, catalog: SlotCatalog, owner: str) -> TimetableGrid:
    lectures = load_lectures(snapshot.lectures)
    report_fetch_error(lectures, "lectures")
    grid = TimetableGrid(catalog, owner=owner)
    for entry in lectures.records:
        if owner and entry.class_ref and entry.class_ref != owner:
            continue
        try:
            grid.upsert(entry)
        except ScheduleError as e:
            err_console.print(f"[yellow]Skipped:[/yellow] {e}")
    return grid


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--log-level", default=None, help="Log level (defaults to SCHEDULE_LOG_LEVEL or INFO).")
def main(log_level: t.Optional[str]) -> None:
    """School timetable and status dashboard."""
    configure_logging(log_level)


@main.command()
@click.argument("snapshot_path", metavar="SNAPSHOT", type=click.Path(exists=True, dir_okay=False))
@click.option("--owner", default="", help="Only show lectures of this class.")
@click.option("--store", "store_path", default=None, type=click.Path(dir_okay=False),
              help="Schedule settings file; overrides the snapshot's settings.")
@click.option("--now", default=None, help="ISO datetime to treat as the current instant.")
def timetable(snapshot_path: str, owner: str, store_path: t.Optional[str], now: t.Optional[str]) -> None:
    """Show the weekly timetable and highlight the next lecture."""
    snapshot = read_snapshot(snapshot_path)
    if store_path:
        catalog = SlotCatalog.load(JsonFileStore(store_path))
    else:
        catalog = SlotCatalog(days=snapshot.settings.days, slots=snapshot.settings.slots)

    grid = build_grid(snapshot, catalog, owner)
    upcoming = next_lecture_today(grid, parse_now(now))

    console.print(create_timetable_table(grid, highlight_id=upcoming.id if upcoming else None))

    orphans = grid.orphans()
    if orphans:
        console.print(f"[dim]{len(orphans)} lecture(s) sit on days or time slots that are not configured.[/dim]")

    if upcoming:
        console.print(Panel(
            f"[bold]{upcoming.subject}[/bold] at {upcoming.start_time} in {upcoming.room or '—'}",
            title="⏭️ Next lecture", border_style="green", expand=False,
        ))
    else:
        console.print("[dim]No more lectures today.[/dim]")


@main.command()
@click.argument("snapshot_path", metavar="SNAPSHOT", type=click.Path(exists=True, dir_okay=False))
@click.option("--student", default="", help="Show submission status for this student id.")
@click.option("--now", default=None, help="ISO datetime to treat as the current instant.")
def assignments(snapshot_path: str, student: str, now: t.Optional[str]) -> None:
    """List assignments with their derived status."""
    snapshot = read_snapshot(snapshot_path)
    result = load_assignments(snapshot.assignments)
    report_fetch_error(result, "assignments")
    moment = parse_now(now)

    table = Table(title="📚 Assignments", show_header=True, header_style="bold magenta")
    table.add_column("Title", style="white")
    table.add_column("Due", style="yellow")
    table.add_column("Days", justify="right")
    table.add_column("Status")

    for assignment in sorted(result.records, key=lambda a: a.due_date):
        if student:
            status = classify_submission(assignment, assignment.submissions, student, moment)
        else:
            status = classify_assignment(assignment.due_date, moment)
        table.add_row(
            assignment.title,
            Text(assignment.due_date.astimezone().strftime("%m/%d %H:%M"),
                 style=URGENCY_STYLES[deadline_urgency(assignment.due_date, moment)]),
            str(days_remaining(assignment.due_date, moment)),
            Text(status.value, style=STATUS_STYLES[status]),
        )
    console.print(table)

    if student:
        counts = summarize_submissions(result.records, student, moment)
        stats = Text()
        for status, count in counts.items():
            stats.append(f"{status.value}: ", style="white")
            stats.append(f"{count}  ", style=f"bold {STATUS_STYLES[status]}")
        console.print(Panel(stats, title="📊 Submissions", border_style="green", expand=False))

        upcoming = upcoming_deadlines(result.records, student, moment)
        for assignment in upcoming:
            console.print(f"  • {assignment.title} - due in {days_remaining(assignment.due_date, moment)} day(s)")


@main.command()
@click.argument("snapshot_path", metavar="SNAPSHOT", type=click.Path(exists=True, dir_okay=False))
def attendance(snapshot_path: str) -> None:
    """Summarize attendance records."""
    snapshot = read_snapshot(snapshot_path)
    result = load_attendance(snapshot.attendance)
    report_fetch_error(result, "attendance")
    aggregate = aggregate_attendance(result.records)
    band = attendance_band(aggregate.attendance_percentage)

    stats_text = Text()
    stats_text.append("Total classes: ", style="white")
    stats_text.append(f"{aggregate.total_classes}\n", style="bold")
    stats_text.append("Present: ", style="white")
    stats_text.append(f"{aggregate.present_days}\n", style="bold green")
    stats_text.append("Late: ", style="white")
    stats_text.append(f"{aggregate.late_days}\n", style="bold yellow")
    stats_text.append("Absent: ", style="white")
    stats_text.append(f"{aggregate.absent_days}\n", style="bold red")
    stats_text.append("Attendance: ", style="white")
    stats_text.append(f"{aggregate.attendance_percentage}%", style=f"bold {BAND_STYLES[band]}")
    console.print(Panel(stats_text, title="📊 Attendance", border_style=BAND_STYLES[band], expand=False))


@main.group()
@click.option("--store", "store_path", default=None, type=click.Path(dir_okay=False),
              help="Schedule settings file (defaults to SCHEDULE_STORE_PATH).")
@click.pass_context
def settings(ctx: click.Context, store_path: t.Optional[str]) -> None:
    """Manage the timetable's days and time slots."""
    ctx.obj = SlotCatalog.load(JsonFileStore(store_path))


def _print_settings(catalog: SlotCatalog) -> None:
    console.print(f"[bold]Days:[/bold] {', '.join(catalog.days) or '—'}")
    console.print(f"[bold]Time slots:[/bold] {', '.join(catalog.slots) or '—'}")


def _apply(catalog: SlotCatalog, action: t.Callable[[], t.Any]) -> None:
    try:
        action()
    except ScheduleError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)
    _print_settings(catalog)


@settings.command("show")
@click.pass_obj
def show_settings(catalog: SlotCatalog) -> None:
    """Print the configured days and time slots."""
    _print_settings(catalog)


@settings.command("add-day")
@click.argument("label")
@click.pass_obj
def add_day(catalog: SlotCatalog, label: str) -> None:
    """Add a day column."""
    _apply(catalog, lambda: catalog.add_day(label))


@settings.command("remove-day")
@click.argument("label")
@click.pass_obj
def remove_day(catalog: SlotCatalog, label: str) -> None:
    """Remove a day column."""
    _apply(catalog, lambda: catalog.remove_day(label))


@settings.command("add-slot")
@click.argument("label", required=False)
@click.option("--start", default=None, help="Start time, e.g. 09:00.")
@click.option("--end", default=None, help="End time, e.g. 10:30.")
@click.pass_obj
def add_slot(catalog: SlotCatalog, label: t.Optional[str], start: t.Optional[str], end: t.Optional[str]) -> None:
    """Add a time slot, either as a label or from --start and --end."""
    if label:
        _apply(catalog, lambda: catalog.add_slot(label))
    else:
        _apply(catalog, lambda: catalog.add_slot_range(start, end))


@settings.command("remove-slot")
@click.argument("label")
@click.pass_obj
def remove_slot(catalog: SlotCatalog, label: str) -> None:
    """Remove a time slot."""
    _apply(catalog, lambda: catalog.remove_slot(label))


if __name__ == "__main__":
    main()
