# Shiori CLI - Content Commands
"""
validate / generate / update コマンド
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shiori.cli.main import (
    OutputFormat,
    get_shiori,
    print_error,
    print_success,
    print_warning,
)
from shiori.errors import ShioriError

console = Console()


def _print_validation(report, limit: int = 50):
    """検証結果をテーブル表示"""
    result = report.result
    diagnostics = result.errors + result.warnings

    if diagnostics:
        table = Table(title="Validation Diagnostics")
        table.add_column("Severity")
        table.add_column("Code", style="cyan")
        table.add_column("Path")
        table.add_column("Message")
        for diagnostic in diagnostics[:limit]:
            color = "red" if diagnostic.is_error else "yellow"
            table.add_row(
                f"[{color}]{diagnostic.severity.value}[/{color}]",
                diagnostic.code.value,
                escape(diagnostic.path),
                escape(diagnostic.message),
            )
        console.print(table)
        if len(diagnostics) > limit:
            console.print(f"[dim]... and {len(diagnostics) - limit} more[/dim]")

    for warning in report.scan_warnings:
        print_warning(warning)
    for skipped in report.skipped:
        print_warning(f"Skipped unreadable file: {skipped}")

    checked = ", ".join(f"{kind}: {count}" for kind, count in result.stats.checked.items())
    console.print(f"\n[dim]Checked {checked}[/dim]")


def validate(
    root: Optional[Path] = typer.Argument(None, help="Content repository root"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file path"
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.text, "--output", "-o", help="Output format"
    ),
):
    """Validate the content tree

    Exits with status 1 when any validation error is found.
    """
    try:
        shiori = get_shiori(root, config)
        report = shiori.validate()
    except ShioriError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if output == OutputFormat.json:
        console.print_json(json.dumps(report.to_dict(), ensure_ascii=False))
    else:
        _print_validation(report)

    if not report.is_valid:
        if output == OutputFormat.text:
            print_error(f"Validation failed with {report.result.error_count} errors")
        raise typer.Exit(1)

    if output == OutputFormat.text:
        print_success(f"Validated {report.element_count} elements")


def generate(
    root: Optional[Path] = typer.Argument(None, help="Content repository root"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file path"
    ),
    skip_validation: bool = typer.Option(
        False, "--skip-validation", help="Generate even if validation fails"
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.text, "--output", "-o", help="Output format"
    ),
):
    """Regenerate every metadata JSON file"""
    try:
        shiori = get_shiori(root, config)

        async def run():
            scan = await shiori.scan_async()
            report = await shiori.validate_async(scan)
            if not report.is_valid and not skip_validation:
                return report, None
            return report, await shiori.generate_async(scan.tree)

        with console.status("[bold green]Generating metadata...", spinner="dots"):
            report, result = asyncio.run(run())
    except ShioriError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if result is None:
        _print_validation(report)
        print_error(
            f"Validation failed with {report.result.error_count} errors; "
            "use --skip-validation to generate anyway"
        )
        raise typer.Exit(1)

    if output == OutputFormat.json:
        console.print_json(json.dumps(result.to_dict(), ensure_ascii=False))
    else:
        stats = result.stats
        print_success(
            f"Generated {stats['files_written']} files "
            f"({stats['locales']} locales, {stats['folders']} folders) "
            f"in {stats['duration_ms']:.0f}ms"
        )


def update(
    root: Optional[Path] = typer.Argument(None, help="Content repository root"),
    before: Optional[str] = typer.Option(
        None, "--before", "-b", help="Base revision (full regeneration when omitted)"
    ),
    after: str = typer.Option("HEAD", "--after", "-a", help="Target revision"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file path"
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.text, "--output", "-o", help="Output format"
    ),
):
    """Update metadata for the files changed between two revisions"""
    try:
        shiori = get_shiori(root, config)
        with console.status("[bold green]Updating metadata...", spinner="dots"):
            outcome = shiori.update(before, after)
    except ShioriError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if output == OutputFormat.json:
        console.print_json(json.dumps(outcome.to_dict(), ensure_ascii=False))
        return

    if outcome.incremental and outcome.incremental.requires_full_regeneration:
        for reason in outcome.incremental.reasons:
            print_warning(f"Full regeneration required: {reason}")

    if not outcome.changes and not outcome.regenerated:
        print_success("No content changes")
        return

    mode = "full regeneration" if outcome.regenerated else "incremental update"
    print_success(f"Updated {len(outcome.updated_files)} files ({mode})")
    for path in outcome.updated_files[:20]:
        console.print(f"  [dim]{escape(path)}[/dim]")
