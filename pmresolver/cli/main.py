"""CLI entry point for setup-pm - choose and inspect the package manager."""

import os
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pmresolver.core import get_all_specs, get_selection_prompt, is_available
from pmresolver.exceptions import PMError
from pmresolver.preferences import PreferenceScope, set_preference
from pmresolver.resolver import DetectionReport, SourceResult, detect

app = typer.Typer(
    name="setup-pm",
    help="Detect or set the package manager used by the session hooks.",
    add_completion=False,
)

console = Console()


def _usage_error(ctx: typer.Context, message: str | None = None) -> None:
    """Print usage to stderr and exit with a usage error."""
    if message:
        typer.echo(f"Error: {message}", err=True)
    typer.echo(ctx.get_usage(), err=True)
    typer.echo(f"Try '{ctx.info_name} --help' for help.", err=True)
    raise typer.Exit(2)


def _format_result(result: SourceResult) -> str:
    name = result.source.value
    if result.error:
        return f"  [yellow]![/yellow] {name}: [dim]skipped ({escape(result.error)})[/dim]"
    if result.matched:
        detail = f" [dim]({escape(result.detail)})[/dim]" if result.detail else ""
        return f"  [green]✓[/green] {name}: {result.package_manager}{detail}"
    if result.detail:
        return f"  [dim]-[/dim] {name}: [dim]ignored {escape(result.detail)}[/dim]"
    return f"  [dim]- {name}: not set[/dim]"


def _show_detection(report: DetectionReport, project_root: Path) -> None:
    console.print(f"[dim]Project: {escape(str(project_root))}[/dim]")
    console.print()
    console.print("[bold]Sources (highest precedence first):[/bold]")
    for result in report.results:
        console.print(_format_result(result))

    console.print()
    winner = report.winner
    if winner is None:
        console.print("[red]Resolved: none[/red] [dim](no package manager available)[/dim]")
        console.print()
        console.print(escape(get_selection_prompt()))
        return
    console.print(
        f"[bold]Resolved:[/bold] [green]{winner.package_manager}[/green] "
        f"[dim](from {winner.source.value})[/dim]"
    )


def _show_list() -> None:
    table = Table(title="Package managers")
    table.add_column("Name", style="cyan")
    table.add_column("Installed")
    table.add_column("Lock file")

    env = os.environ
    for spec in get_all_specs():
        installed = "[green]yes[/green]" if is_available(spec.manager, env) else "[dim]no[/dim]"
        table.add_row(spec.name, installed, spec.lock_file)

    console.print(table)


def _set(scope: PreferenceScope, candidate: str) -> None:
    try:
        path = set_preference(scope, candidate)
    except PMError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    console.print(
        f"[green]Set {scope.value} package manager to '{candidate.strip().lower()}'[/green]"
    )
    console.print(f"[dim]Saved to {escape(str(path))}[/dim]")


@app.command()
def main(
    ctx: typer.Context,
    global_pm: Annotated[
        Optional[str],
        typer.Option(
            "--global",
            "-g",
            metavar="PM",
            help="Save the preference to ~/.claude/package-manager.json.",
        ),
    ] = None,
    project_pm: Annotated[
        Optional[str],
        typer.Option(
            "--project",
            "-p",
            metavar="PM",
            help="Save the preference to ./.claude/package-manager.json.",
        ),
    ] = None,
    detect_flag: Annotated[
        bool,
        typer.Option(
            "--detect",
            "-d",
            help="Show every detection source and the resolved package manager.",
        ),
    ] = False,
    list_flag: Annotated[
        bool,
        typer.Option(
            "--list",
            "-l",
            help="List supported package managers and whether they are installed.",
        ),
    ] = False,
) -> None:
    """Detect or set the preferred package manager.

    Examples:
        setup-pm --detect
        setup-pm --global pnpm
        setup-pm --project bun
        setup-pm --list
    """
    chosen = [
        flag
        for flag, given in (
            ("--global", global_pm is not None),
            ("--project", project_pm is not None),
            ("--detect", detect_flag),
            ("--list", list_flag),
        )
        if given
    ]
    if not chosen:
        _usage_error(ctx)
    if len(chosen) > 1:
        _usage_error(ctx, f"Options {', '.join(chosen)} cannot be combined")

    if global_pm is not None:
        _set(PreferenceScope.GLOBAL, global_pm)
    elif project_pm is not None:
        _set(PreferenceScope.PROJECT, project_pm)
    elif detect_flag:
        project_root = Path.cwd()
        _show_detection(detect(project_root, os.environ), project_root)
    else:
        _show_list()


if __name__ == "__main__":
    app()
