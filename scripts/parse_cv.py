#!/usr/bin/env python3
"""
Command-line interface for inspecting how a CV is parsed.

Shows what the heuristic parser recovers from a markdown CV before anything is
replayed onto a remote profile. Use it to check entry boundaries and to pick
START/MAX values for sync_profile.py.

Commands:
    show    - Summary of personal info and parsed sections (optionally as YAML)
    entries - Numbered entries of a category, marking the selected window
"""

from pathlib import Path
from typing import Optional

import typer
from omegaconf import OmegaConf
from typing_extensions import Annotated

from cvrelay.contexts.intake import CVDocument, DocumentReadError, ParserOptions
from cvrelay.contexts.intake.cv_data_structure import REPLAY_CATEGORIES
from cvrelay.contexts.intake.logger import setup_intake_logger
from cvrelay.contexts.syncing.driver import entry_label
from cvrelay.contexts.syncing.progress import (
    compute_progress,
    max_entries_from_cli,
    start_index_from_cli,
)

app = typer.Typer(
    add_completion=False,
    help="Inspect how a CV is parsed",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _load(cv_path: Path, title_first: bool, log_dir: Optional[Path]) -> CVDocument:
    if log_dir:
        setup_intake_logger(log_dir, source=cv_path.name)

    options = ParserOptions(emphasis_order="title_first" if title_first else "company_first")
    try:
        return CVDocument.from_file(cv_path, options)
    except DocumentReadError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("show")
def show_command(
    cv_path: Annotated[Path, typer.Argument(help="Markdown CV file", dir_okay=False, resolve_path=True)],
    as_yaml: Annotated[
        bool, typer.Option("--yaml", "-y", help="Dump the full parsed document as YAML")
    ] = False,
    title_first: Annotated[
        bool,
        typer.Option("--title-first", help="First bold line of an entry is the title, not the company"),
    ] = False,
    log_dir: Annotated[
        Optional[Path], typer.Option("--log-dir", help="Write a detailed parse log to this directory")
    ] = None,
):
    """
    Show what the parser recovered from a CV.

    Examples:\n

        $ parse_cv.py show cv.md

        $ parse_cv.py show cv.md --yaml > parsed.yaml
    """
    document = _load(cv_path, title_first, log_dir)

    if as_yaml:
        typer.echo(OmegaConf.to_yaml(OmegaConf.create(document.to_dict())))
        return

    info = document.personal_info
    typer.secho(f"\n{info.name or '(no name found)'}", fg=typer.colors.BLUE, bold=True)
    for label, value in (
        ("Email", info.email),
        ("Phone", info.phone),
        ("Location", info.location),
        ("LinkedIn", info.linkedin),
        ("Website", info.website),
    ):
        if value:
            typer.echo(f"  {label + ':':<10} {value}")

    if document.summary:
        summary = document.summary
        typer.echo(f"\nSummary: {summary[:117] + '...' if len(summary) > 120 else summary}")

    typer.echo("\n" + "=" * 80)
    typer.echo("Sections:")
    typer.echo(f"  Experience:     {len(document.experience)}")
    typer.echo(f"  Education:      {len(document.education)}")
    typer.echo(f"  Skills:         {len(document.skills)}")
    typer.echo(f"  Certifications: {len(document.certifications)}")
    typer.echo(f"  Languages:      {len(document.languages)}")

    if not document.experience:
        typer.secho("\nNo experience entries recognized.", fg=typer.colors.YELLOW)


@app.command("entries")
def entries_command(
    cv_path: Annotated[Path, typer.Argument(help="Markdown CV file", dir_okay=False, resolve_path=True)],
    start: Annotated[Optional[str], typer.Argument(help="1-based position of the first entry")] = None,
    max_entries: Annotated[Optional[str], typer.Argument(help="Number of entries to process")] = None,
    category: Annotated[
        str, typer.Option("--category", "-c", help=f"One of: {', '.join(REPLAY_CATEGORIES)}")
    ] = "experience",
    title_first: Annotated[
        bool,
        typer.Option("--title-first", help="First bold line of an entry is the title, not the company"),
    ] = False,
):
    """
    List the entries of a category and mark the ones a sync run would process.

    Examples:\n

        $ parse_cv.py entries cv.md

        $ parse_cv.py entries cv.md 3 2     # entries 3 and 4
    """
    if category not in REPLAY_CATEGORIES:
        raise typer.BadParameter(
            f"Unknown category '{category}'. Valid categories are: {', '.join(REPLAY_CATEGORIES)}"
        )

    document = _load(cv_path, title_first, None)
    entries = document.entries_for(category)
    window = compute_progress(len(entries), start_index_from_cli(start), max_entries_from_cli(max_entries))

    typer.secho(f"\n{len(entries)} {category} entries", fg=typer.colors.BLUE, bold=True)
    for index, entry in enumerate(entries):
        selected = index in window.processed_range
        marker = "▶" if selected else " "
        line = f"{marker} {index + 1:>3}. {entry_label(entry)}"
        duration = getattr(entry, "duration", "")
        if duration:
            line += f" ({duration})"
        if selected:
            typer.secho(line, fg=typer.colors.GREEN)
        else:
            typer.echo(line)

    typer.echo(
        f"\nSelected {len(window.processed_range)}, "
        f"{window.remaining_count} remaining after this window"
    )


if __name__ == "__main__":
    app()
