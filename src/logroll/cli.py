"""Typer CLI: init, status, history, write, prune commands."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from logroll import __version__

app = typer.Typer(
    name="logroll",
    help="Time-bucketed rolling log files with bounded history.",
    no_args_is_help=True,
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"logroll v{__version__}")
        raise typer.Exit()


def _load_valid_config(project_dir: Path) -> dict:
    from logroll.config import load_config, validate_config

    config = load_config(project_dir)
    errors = validate_config(config)
    if errors:
        for e in errors:
            console.print(f"  [red]Config error: {e}[/red]")
        raise typer.Exit(1)
    return config


def _human_size(size: int) -> str:
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version.", callback=_version_callback, is_eager=True
    ),
) -> None:
    """logroll - rolling log files."""


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
    project_dir: Path = typer.Option(Path.cwd(), "--dir", help="Project directory"),
) -> None:
    """Create .logroll/config.json in the project."""
    from logroll.config import CONFIG_DIR, CONFIG_FILE, DEFAULT_CONFIG, save_config, validate_config
    from logroll.utils import deep_merge, load_json

    console.print(Panel("[bold]logroll init[/bold]", style="blue"))

    config_path = project_dir / CONFIG_DIR / CONFIG_FILE
    if config_path.exists() and not force:
        existing = load_json(config_path)
        config = deep_merge(DEFAULT_CONFIG, existing)
        console.print("  [yellow]Merged with existing config[/yellow]")
    else:
        config = DEFAULT_CONFIG.copy()
        console.print("  [green]Created default config[/green]")

    errors = validate_config(config)
    if errors:
        for e in errors:
            console.print(f"  [red]Config error: {e}[/red]")
        raise typer.Exit(1)

    save_config(config, project_dir)
    console.print(f"  Config: [cyan]{config_path}[/cyan]")

    limit = config["max_rolls"]
    console.print(
        Panel(
            f"[green]logroll initialized![/green]\n"
            f"  Log file: {config['file_path']}\n"
            f"  Pattern: {config['pattern']}\n"
            f"  Keep: {limit if limit > 0 else 'unlimited'}\n\n"
            f"Next: pipe output through [bold]logroll write[/bold].",
            title="Ready",
            style="green",
        )
    )


@app.command()
def status(
    project_dir: Path = typer.Option(Path.cwd(), "--dir", help="Project directory"),
) -> None:
    """Show config, active file and history summary."""
    from logroll.config import build_rolling, get_config_path, load_config, validate_config
    from logroll.errors import RotationError

    console.print(Panel("[bold]logroll status[/bold]", style="blue"))

    config_path = get_config_path(project_dir)
    if not config_path.exists():
        console.print("  Config: [red]not found[/red] (run `logroll init`)")
        raise typer.Exit(1)

    config = load_config(project_dir)
    errors = validate_config(config)
    if errors:
        console.print(f"  Config: [red]invalid ({len(errors)} errors)[/red]")
        for e in errors:
            console.print(f"    [red]{e}[/red]")
        raise typer.Exit(1)
    console.print(f"  Config: [green]valid[/green] ({config_path})")

    rolling = build_rolling(config, config_path.parent.parent)
    active = Path(rolling.active_path)
    if active.exists():
        console.print(f"  Active: [cyan]{active}[/cyan] ({_human_size(active.stat().st_size)})")
    else:
        console.print(f"  Active: [dim]not created yet[/dim] ({active})")

    try:
        history = rolling.history() if Path(rolling.dir_path).is_dir() else []
    except RotationError as exc:
        console.print(f"  History: [red]{exc}[/red]")
        raise typer.Exit(1)
    limit = config["max_rolls"]
    limit_text = str(limit) if limit > 0 else "unlimited"
    console.print(f"  History: [cyan]{len(history)}[/cyan] / {limit_text}")


@app.command()
def history(
    project_dir: Path = typer.Option(Path.cwd(), "--dir", help="Project directory"),
) -> None:
    """List rolled files, oldest first."""
    from logroll.config import build_rolling, get_config_path
    from logroll.errors import RotationError

    config = _load_valid_config(project_dir)
    rolling = build_rolling(config, get_config_path(project_dir).parent.parent)

    if not Path(rolling.dir_path).is_dir():
        console.print("[dim]No log directory yet.[/dim]")
        return
    try:
        names = rolling.history()
    except RotationError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"History of {rolling.file_name}", show_lines=False)
    table.add_column("#", justify="right", width=4)
    table.add_column("File", style="cyan")
    table.add_column("Size", justify="right")
    for i, name in enumerate(names, 1):
        path = Path(rolling.dir_path) / name
        table.add_row(str(i), name, _human_size(path.stat().st_size))
    console.print(table)
    console.print(f"\n[bold]{len(names)}[/bold] history file(s)")


@app.command()
def write(
    level: str = typer.Option("INFO", "--level", "-l", help="Level assigned to each line"),
    logger_name: str = typer.Option("stdin", "--name", help="Logger name stamped on records"),
    project_dir: Path = typer.Option(Path.cwd(), "--dir", help="Project directory"),
) -> None:
    """Read lines from stdin and append them to the rolling log."""
    from logroll.config import build_handler, get_config_path

    levelno = logging.getLevelName(level.upper())
    if not isinstance(levelno, int):
        console.print(f"[red]Unknown level '{level}'[/red]")
        raise typer.Exit(1)

    config = _load_valid_config(project_dir)
    handler = build_handler(config, get_config_path(project_dir).parent.parent)
    stdin = typer.get_text_stream("stdin")
    count = 0
    try:
        for line in stdin:
            line = line.rstrip("\r\n")
            if not line:
                continue
            record = logging.LogRecord(logger_name, levelno, "", 0, line, None, None)
            failed_before = handler.failed_emits
            handler.handle(record)
            if handler.failed_emits == failed_before:
                count += 1
    finally:
        handler.close()
    console.print(f"[green]{count} line(s) written[/green] to {handler.rolling.active_path}")
    if handler.failed_emits:
        console.print(f"[red]{handler.failed_emits} line(s) could not be written[/red]")
        raise typer.Exit(1)


@app.command()
def prune(
    project_dir: Path = typer.Option(Path.cwd(), "--dir", help="Project directory"),
) -> None:
    """Delete history files beyond the retention limit."""
    from logroll.config import build_rolling, get_config_path
    from logroll.errors import RotationError

    config = _load_valid_config(project_dir)
    rolling = build_rolling(config, get_config_path(project_dir).parent.parent)
    if config["max_rolls"] <= 0:
        console.print("[yellow]Retention is unlimited; nothing to prune.[/yellow]")
        return
    if not Path(rolling.dir_path).is_dir():
        console.print("[dim]No log directory yet.[/dim]")
        return

    try:
        deleted, warnings = rolling.apply_retention()
    except RotationError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    for name in deleted:
        console.print(f"  [red]deleted[/red] {name}")
    for w in warnings:
        console.print(f"  [yellow]warning:[/yellow] {w}")
    console.print(f"\n[bold]Pruned:[/bold] {len(deleted)} file(s)")
    if warnings:
        raise typer.Exit(1)
