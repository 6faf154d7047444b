"""CLI entry point using Click."""

from __future__ import annotations

import logging
from pathlib import Path

import click


class _DefaultGroup(click.Group):
    """Insert 'run' when the first arg is not a registered subcommand."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.no_args_is_help = False  # bare `tui-blobby` runs the app

    def invoke(self, ctx):
        if not ctx._protected_args and not ctx.args:
            ctx._protected_args = ["run"]
        return super().invoke(ctx)

    def resolve_command(self, ctx, args):
        cmd_name = args[0] if args else None
        if cmd_name and cmd_name in self.commands:
            return super().resolve_command(ctx, args)
        return super().resolve_command(ctx, ["run"] + list(args))


def _project_dir(path: str, create: bool = False) -> Path:
    project_dir = Path(path).resolve()
    if not project_dir.exists():
        if create and click.confirm(f"'{project_dir}' does not exist. Create it?"):
            project_dir.mkdir(parents=True, exist_ok=True)
            click.echo(f"Created {project_dir}")
        else:
            raise SystemExit(0 if create else 1)
    elif not project_dir.is_dir():
        click.echo(f"Error: '{project_dir}' is not a directory.", err=True)
        raise SystemExit(1)
    return project_dir


@click.group(cls=_DefaultGroup)
@click.option("--no-color", is_flag=True, help="Disable color output")
@click.option("-v", "--verbose", count=True, help="Log to stderr (-vv for debug)")
@click.version_option(package_name="tui-blobby")
@click.pass_context
def main(ctx, no_color: bool, verbose: int) -> None:
    """TUI Blobby - terminal pregnancy timeline planner."""
    ctx.ensure_object(dict)
    ctx.obj["no_color"] = no_color
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )


@main.command()
@click.argument("path", default=".", type=click.Path())
@click.pass_context
def run(ctx, path: str) -> None:
    """Open the timeline stored in PATH/.tui-blobby."""
    from tui_blobby.app import BlobbyApp

    project_dir = _project_dir(path, create=True)
    app = BlobbyApp(project_dir=project_dir, no_color=ctx.obj["no_color"])
    app.run()
    if app.return_code:
        raise SystemExit(app.return_code)


@main.command("export")
@click.argument("path", default=".", type=click.Path())
@click.option("-o", "--output", type=click.Path(), default=None, help="Output file (default: blobby-plan-<today>.json)")
def export_cmd(path: str, output: str | None) -> None:
    """Export the saved plan in PATH to a JSON file."""
    from tui_blobby.storage import default_export_name, export_to_file, load_local

    project_dir = _project_dir(path)
    snapshot = load_local(project_dir)
    if snapshot is None:
        click.echo(f"No saved plan in {project_dir}", err=True)
        raise SystemExit(1)
    output_path = Path(output) if output else Path.cwd() / default_export_name()
    export_to_file(output_path, snapshot.due_date, snapshot.events)
    click.echo(f"Exported {len(snapshot.events)} events to {output_path}")


@main.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("path", default=".", type=click.Path())
@click.option("-y", "--yes", is_flag=True, help="Replace without asking")
def import_cmd(file: str, path: str, yes: bool) -> None:
    """Replace the plan in PATH with the one in FILE."""
    from tui_blobby.storage import SnapshotError, import_from_file, save_local

    project_dir = _project_dir(path)
    try:
        snapshot = import_from_file(Path(file))
    except SnapshotError as e:
        click.echo(f"Import failed: {e}", err=True)
        raise SystemExit(1)
    if not yes and not click.confirm(
        f"Load plan from file? This will replace your current timeline with {len(snapshot.events)} events."
    ):
        raise SystemExit(0)
    saved = save_local(project_dir, snapshot.due_date, snapshot.events)
    click.echo(f"Imported {len(snapshot.events)} events into {saved}")


@main.command("generate")
@click.argument("path", default=".", type=click.Path())
@click.option("--model", default=None, help="Model name (default from settings)")
@click.option("--due", default=None, help="Due date YYYY-MM-DD (default: saved due date)")
def generate_cmd(path: str, model: str | None, due: str | None) -> None:
    """Generate a starter plan with AI and merge it into PATH."""
    from tui_blobby.config import get_generation_settings, load_settings
    from tui_blobby.generation import GenerationError, generate_timeline_content
    from tui_blobby.models import DEFAULT_DUE_DATE, parse_date
    from tui_blobby.storage import load_local, save_local

    project_dir = _project_dir(path)
    snapshot = load_local(project_dir)
    events = list(snapshot.events) if snapshot else []
    try:
        due_date = parse_date(due) if due else (snapshot.due_date if snapshot else DEFAULT_DUE_DATE)
    except ValueError:
        click.echo(f"Invalid due date: {due}", err=True)
        raise SystemExit(1)

    settings = get_generation_settings(load_settings(project_dir))
    try:
        generated = generate_timeline_content(
            due_date,
            model=model or settings["model"],
            endpoint=settings["endpoint"],
            timeout=settings["timeout"],
        )
    except GenerationError as e:
        click.echo(f"Generation failed: {e}", err=True)
        raise SystemExit(1)

    save_local(project_dir, due_date, events + generated)
    click.echo(f"Added {len(generated)} events (total {len(events) + len(generated)})")


@main.command("layout")
@click.argument("path", default=".", type=click.Path())
@click.option("--zoom", type=float, default=None, help="Pixels per day (default from config)")
def layout_cmd(path: str, zoom: float | None) -> None:
    """Print the computed lane layout of the saved plan."""
    from rich.console import Console
    from rich.table import Table

    from tui_blobby.config import (
        effective_zoom,
        get_canvas_metrics,
        get_card_geometry,
        get_zoom_settings,
        load_config,
        load_settings,
        validate_window,
    )
    from tui_blobby.layout import ConfigurationError, DateScale, build_layout
    from tui_blobby.models import DEFAULT_DUE_DATE, format_date
    from tui_blobby.storage import load_local

    project_dir = _project_dir(path)
    config = load_config(project_dir)
    settings = load_settings(project_dir)
    if zoom is not None:
        config.zoom = zoom
    min_zoom, max_zoom, _ = get_zoom_settings(settings)
    card_width, gutter = get_card_geometry(settings)
    try:
        scale = DateScale(validate_window(config.window), effective_zoom(config, settings), min_zoom, max_zoom)
    except ConfigurationError as e:
        click.echo(f"Invalid timeline configuration: {e}", err=True)
        raise SystemExit(1)

    snapshot = load_local(project_dir)
    due_date = snapshot.due_date if snapshot else DEFAULT_DUE_DATE
    layout = build_layout(
        snapshot.events if snapshot else [],
        due_date,
        scale,
        metrics=get_canvas_metrics(settings),
        card_width=card_width,
        gutter=gutter,
    )

    table = Table(title=f"Zoom {scale.zoom:g}px/day, due {format_date(due_date)}")
    table.add_column("Date")
    table.add_column("x", justify="right")
    table.add_column("Lane", justify="right")
    table.add_column("Category")
    table.add_column("Title")
    for positioned in sorted(layout.standard + layout.markers, key=lambda p: (p.x, p.lane is None, p.lane or 0)):
        event = positioned.event
        table.add_row(
            format_date(event.date),
            f"{positioned.x:g}",
            "cue" if positioned.lane is None else str(positioned.lane),
            event.category.value,
            event.title,
        )
    console = Console()
    console.print(table)
    console.print(
        f"{len(layout.standard)} cards in {layout.events.lane_count} lanes, "
        f"{len(layout.markers)} cues; canvas {layout.canvas.width:g} x {layout.canvas.height:g}px"
    )
