#!/usr/bin/env python3
"""
Command-line interface for replaying a CV onto a remote profile.

Parses a markdown CV, opens a browser, logs in with the credentials named by
the surface profile, and fills one entry form per CV entry. Every run reports
an outcome per entry and the position to continue from, so long CVs can be
synced in several runs. Ctrl+C stops after the current wait and prints the
continuation command.

Commands:
    run      - Sync entries of a CV onto a profile
    profiles - List bundled surface profiles
    events   - Show recent run events

Exit codes of run:
    0 - every processed entry was applied
    1 - fatal error (unreadable CV, bad profile, login failed)
    2 - run finished with unapplied entries or was stopped early
"""

import signal
import threading
import time
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from cvrelay.contexts.intake import CVDocument, DocumentReadError, ParserOptions
from cvrelay.contexts.intake.cv_data_structure import REPLAY_CATEGORIES
from cvrelay.contexts.syncing import (
    AuthenticationRequired,
    SurfaceProfileError,
    SurfaceProfileRegistry,
    SyncDriver,
    SyncOptions,
)
from cvrelay.contexts.syncing.logger import log_run_summary, setup_syncing_logger
from cvrelay.contexts.syncing.outcomes import OutcomeKind, SyncReport
from cvrelay.contexts.syncing.playwright_surface import launch_surface
from cvrelay.contexts.syncing.progress import (
    compute_progress,
    max_entries_from_cli,
    start_index_from_cli,
)
from cvrelay.contexts.syncing.session import establish_session
from cvrelay.utils.event_logging import LOGS_PATH, get_recent_events, log_sync_event, log_sync_outcome
from cvrelay.utils.report_formatter import Column, TableFormatter
from cvrelay.utils.timestamp import format_timestamp, new_run_id

app = typer.Typer(
    add_completion=False,
    help="Replay a CV onto a remote profile (XING, LinkedIn, ...)",
    invoke_without_command=True,
)

OUTCOME_COLORS = {
    OutcomeKind.APPLIED: typer.colors.GREEN,
    OutcomeKind.PARTIALLY_APPLIED: typer.colors.YELLOW,
    OutcomeKind.SAVE_TIMED_OUT: typer.colors.RED,
    OutcomeKind.NAVIGATION_FAILED: typer.colors.RED,
}


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _kind_color(value: Optional[str]):
    try:
        return OUTCOME_COLORS[OutcomeKind(value)]
    except ValueError:
        return None


def _fail(message: str, error: Exception) -> None:
    typer.secho(f"\n✗ {message}", fg=typer.colors.RED, bold=True, err=True)
    typer.secho(str(error), fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def format_report(report: SyncReport, profile_name: str, category: str) -> str:
    """Render the outcome table and counts of a finished run."""
    table = TableFormatter(
        [
            Column("#", 4, ">"),
            Column("Outcome", 18),
            Column("Entry", 34),
            Column("Unresolved", 20),
        ]
    )
    table.add_section_header(f"Sync report: {category} on {profile_name}")
    table.add_table_header().add_separator()
    for outcome in report.outcomes:
        table.add_row(
            [outcome.index + 1, outcome.kind.value, outcome.label, ", ".join(outcome.unresolved) or "-"]
        )
    table.add_separator()

    counts = {kind.value: count for kind, count in report.counts_by_kind().items()}
    table.add_counts(counts, empty_text="No entries processed")
    return table.render()


def continuation_hint(cv_path: Path, report: SyncReport, max_raw: Optional[str], profile: str, category: str) -> str:
    """Command that continues where this run stopped ("" when nothing is left)."""
    if report.progress.remaining_count == 0:
        return ""
    parts = ["sync_profile.py run", str(cv_path), str(report.progress.next_start_index + 1)]
    if max_raw:
        parts.append(max_raw)
    parts += ["--profile", profile, "--category", category]
    return " ".join(parts)


@app.command("run")
def run_command(
    cv_path: Annotated[Path, typer.Argument(help="Markdown CV file", dir_okay=False, resolve_path=True)],
    start: Annotated[Optional[str], typer.Argument(help="1-based position of the first entry")] = None,
    max_entries: Annotated[Optional[str], typer.Argument(help="Number of entries to process")] = None,
    profile: Annotated[
        str, typer.Option("--profile", "-p", help="Surface profile name or YAML path")
    ] = "xing",
    category: Annotated[
        str, typer.Option("--category", "-c", help=f"One of: {', '.join(REPLAY_CATEGORIES)}")
    ] = "experience",
    headless: Annotated[bool, typer.Option("--headless", help="Run the browser without a window")] = False,
    user_data_dir: Annotated[
        Optional[Path],
        typer.Option("--user-data-dir", help="Persistent browser profile (keeps the login between runs)"),
    ] = None,
    title_first: Annotated[
        bool,
        typer.Option("--title-first", help="First bold line of an entry is the title, not the company"),
    ] = False,
    log_dir: Annotated[
        Optional[Path], typer.Option("--log-dir", help="Directory for the run log (default: LOGS_PATH/sync_<timestamp>)")
    ] = None,
):
    """
    Sync CV entries onto a remote profile.

    START is 1-based; MAX limits the number of entries in this run. The end
    of every run prints the command that continues where it stopped.

    Examples:\n

        $ sync_profile.py run cv.md                      # all experience entries

        $ sync_profile.py run cv.md 3 2 --profile linkedin

        $ sync_profile.py run cv.md --category education --profile linkedin

        $ sync_profile.py run cv.md --category summary --profile linkedin   # the About text
    """
    if category not in REPLAY_CATEGORIES:
        raise typer.BadParameter(
            f"Unknown category '{category}'. Valid categories are: {', '.join(REPLAY_CATEGORIES)}"
        )

    run_id = new_run_id("sync")
    log_file = setup_syncing_logger(log_dir or LOGS_PATH / run_id, profile=profile, category=category)
    typer.echo(f"Log file: {log_file}")

    options = ParserOptions(emphasis_order="title_first" if title_first else "company_first")
    try:
        document = CVDocument.from_file(cv_path, options)
    except DocumentReadError as e:
        _fail("Could not read CV", e)

    try:
        surface_profile = SurfaceProfileRegistry().get_profile(profile)
        surface_profile.category(category)
    except SurfaceProfileError as e:
        _fail("Invalid surface profile", e)

    sync_options = SyncOptions(
        start_index=start_index_from_cli(start),
        max_entries=max_entries_from_cli(max_entries),
        category=category,
    )
    total = len(document.entries_for(category))
    window = compute_progress(total, sync_options.start_index, sync_options.max_entries)
    if not window.processed_range:
        typer.secho(f"Nothing to sync: {total} {category} entries, start position {start}", fg=typer.colors.YELLOW)
        raise typer.Exit(code=0)

    typer.secho(
        f"\nSyncing {category} entries {window.processed_range.start + 1}-{window.processed_range.stop} "
        f"of {total} onto {surface_profile.name}",
        fg=typer.colors.BLUE,
        bold=True,
    )

    stop_event = threading.Event()

    def _request_stop(signum, frame):
        typer.secho("\nStop requested, finishing the current wait...", fg=typer.colors.YELLOW, err=True)
        stop_event.set()

    previous_handler = signal.signal(signal.SIGINT, _request_stop)
    log_sync_event(
        "run_started",
        run_id,
        source="cli",
        profile=surface_profile.name,
        category=category,
        cv=str(cv_path),
        start_index=sync_options.start_index,
        max_entries=sync_options.max_entries,
    )

    start_time = time.time()
    try:
        with launch_surface(headless=headless, user_data_dir=user_data_dir, stop_event=stop_event) as surface:
            try:
                establish_session(surface, surface_profile)
            except AuthenticationRequired as e:
                log_sync_event("run_aborted", run_id, source="cli", reason=str(e))
                _fail("Authentication required", e)

            driver = SyncDriver(
                surface,
                surface_profile,
                clock=surface.clock,
                stop_event=stop_event,
                on_outcome=lambda outcome: log_sync_outcome(outcome, run_id, surface_profile.name),
            )
            report = driver.sync(document, sync_options)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    elapsed_time = time.time() - start_time
    log_run_summary(report, elapsed_time)
    log_sync_event(
        "run_finished",
        run_id,
        source="cli",
        interrupted=report.interrupted,
        next_start_index=report.progress.next_start_index,
        remaining=report.progress.remaining_count,
        counts={kind.value: count for kind, count in report.counts_by_kind().items()},
    )

    typer.echo("\n" + format_report(report, surface_profile.name, category))
    for outcome in report.outcomes:
        if outcome.detail:
            typer.secho(f"  {outcome.index + 1}: {outcome.detail}", fg=OUTCOME_COLORS[outcome.kind])

    hint = continuation_hint(cv_path, report, max_entries, profile, category)
    if hint:
        typer.secho(
            f"\n{report.progress.remaining_count} entries remaining. Continue with:",
            fg=typer.colors.YELLOW,
        )
        typer.echo(f"  {hint}")
    else:
        typer.secho(f"\nAll {category} entries processed.", fg=typer.colors.GREEN)

    raise typer.Exit(code=0 if report.all_applied and not report.interrupted else 2)


@app.command("profiles")
def profiles_command():
    """List the surface profiles available in SURFACE_PROFILES_PATH."""
    registry = SurfaceProfileRegistry()
    names = registry.available_profiles()

    if not names:
        typer.secho(f"No profiles found in {registry.profiles_path}", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"\nProfiles in {registry.profiles_path}", fg=typer.colors.BLUE, bold=True)
    for name in names:
        try:
            surface_profile = registry.get_profile(name)
        except SurfaceProfileError as e:
            typer.secho(f"✗ {name}: {e.message}", fg=typer.colors.RED)
            continue
        typer.echo(f"• {name:<12} categories: {', '.join(surface_profile.categories)}")


@app.command("events")
def events_command(
    n: Annotated[int, typer.Option("--number", "-n", help="Number of events to show")] = 20,
    run_id: Annotated[Optional[str], typer.Option("--run-id", "-r", help="Only events of this run")] = None,
    event_type: Annotated[
        Optional[str], typer.Option("--type", "-t", help="Only events of this type (e.g. entry_outcome)")
    ] = None,
):
    """
    Show recent sync run events.

    Examples:\n

        $ sync_profile.py events -n 50

        $ sync_profile.py events --type entry_outcome
    """
    events = get_recent_events(n=n, run_id=run_id, event_type=event_type)
    if not events:
        typer.echo("No events recorded yet.")
        return

    for event in events:
        when = format_timestamp(event.get("timestamp", ""), relative=True)
        line = f"{when:>10}  {event.get('run_id', '?'):<22} {event.get('event_type', '?'):<14}"
        if event.get("event_type") == "entry_outcome":
            line += f" #{event.get('index', 0) + 1} {event.get('kind')}: {event.get('label', '')}"
            typer.secho(line, fg=_kind_color(event.get("kind")))
        else:
            typer.echo(line)


if __name__ == "__main__":
    app()
