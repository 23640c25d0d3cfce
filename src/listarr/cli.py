"""Command-line interface for ListArr."""

import asyncio
import sys
from pathlib import Path

import click

from listarr import __version__
from listarr.config import load_config
from listarr.core.commands import CommandStatus
from listarr.core.sync import ImportListSyncCommand
from listarr.models.import_list import ImportExclusion
from listarr.services import build_services
from listarr.utils.logger import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (defaults to built-in defaults)",
)
@click.pass_context
def cli(ctx, config):
    """ListArr - keep a movie library in sync with import lists."""
    try:
        cfg = load_config(config)
        ctx.ensure_object(dict)
        ctx.obj["config"] = cfg

        setup_logging(cfg.logging)

    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--list-id",
    "-l",
    type=int,
    default=0,
    show_default=True,
    help="Only sync this list (0 syncs all lists and may clean the library)",
)
@click.pass_context
def sync(ctx, list_id):
    """Run an import list sync now."""
    config = ctx.obj["config"]

    async def _sync():
        services = build_services(config)
        try:
            return await services.command_queue.run(ImportListSyncCommand(list_id=list_id))
        finally:
            await services.close()

    target = f"list {list_id}" if list_id else "all lists"
    click.echo(f"Syncing {target}...")

    record = asyncio.run(_sync())

    if record.status == CommandStatus.COMPLETED:
        click.secho(f"✓ {record.message}", fg="green")
        sys.exit(0)
    else:
        click.secho(f"✗ Sync failed: {record.message}", fg="red", err=True)
        sys.exit(1)


@cli.command(name="lists")
@click.pass_context
def list_import_lists(ctx):
    """Show configured import lists and their health."""
    config = ctx.obj["config"]
    services = build_services(config)

    statuses = {s.provider_id: s for s in services.status_service.get_all()}
    providers = services.factory.all()

    if not providers:
        click.secho("⊘ No import lists configured", fg="yellow")
        return

    for provider in providers:
        definition = provider.definition
        flags = []
        if not definition.enabled:
            flags.append("disabled")
        if definition.enable_auto:
            flags.append("auto-add")

        line = f"[{definition.id}] {definition.name} ({definition.implementation})"
        if flags:
            line += f" [{', '.join(flags)}]"

        list_status = statuses.get(definition.id)
        if list_status and list_status.is_blocked():
            click.secho(f"✗ {line} blocked until {list_status.disabled_till:%Y-%m-%d %H:%M}", fg="red")
        elif list_status:
            click.secho(f"⊙ {line} failing (level {list_status.escalation_level})", fg="yellow")
        else:
            click.secho(f"✓ {line}", fg="green")


@cli.group()
def exclusions():
    """Manage import exclusions."""


@exclusions.command(name="list")
@click.pass_context
def list_exclusions(ctx):
    """Show import exclusions."""
    services = build_services(ctx.obj["config"])
    entries = services.exclusion_service.get_all_exclusions()

    if not entries:
        click.echo("No exclusions")
        return

    for entry in entries:
        year = f" ({entry.year})" if entry.year else ""
        click.echo(f"{entry.tmdb_id}\t{entry.title or ''}{year}")


@exclusions.command(name="add")
@click.argument("tmdb_id", type=int)
@click.option("--title", "-t", default=None, help="Movie title")
@click.option("--year", "-y", type=int, default=0, help="Release year")
@click.pass_context
def add_exclusion(ctx, tmdb_id, title, year):
    """Exclude a TMDB id from automatic adds."""
    services = build_services(ctx.obj["config"])
    services.exclusion_service.add(ImportExclusion(tmdb_id=tmdb_id, title=title, year=year))
    click.secho(f"✓ Excluded {tmdb_id}", fg="green")


@exclusions.command(name="remove")
@click.argument("tmdb_id", type=int)
@click.pass_context
def remove_exclusion(ctx, tmdb_id):
    """Remove an import exclusion."""
    services = build_services(ctx.obj["config"])
    if services.exclusion_service.delete(tmdb_id):
        click.secho(f"✓ Removed exclusion {tmdb_id}", fg="green")
    else:
        click.secho(f"⊘ No exclusion for {tmdb_id}", fg="yellow")
        sys.exit(1)


@cli.command()
@click.pass_context
def daemon(ctx):
    """Start the API server and the scheduled sync."""
    config = ctx.obj["config"]

    click.echo("Starting ListArr daemon...")
    click.echo(f"Listening on {config.api.host}:{config.api.port}")
    if config.sync.interval_minutes:
        click.echo(f"Syncing import lists every {config.sync.interval_minutes} minutes")
    else:
        click.echo("Scheduled sync disabled")
    click.echo("")
    click.echo("Press Ctrl+C to stop")

    from listarr.daemon import start_daemon

    try:
        start_daemon(config)
    except KeyboardInterrupt:
        click.echo("\n\nDaemon stopped")
        sys.exit(0)


@cli.command()
def version():
    """Show version information."""
    click.echo(f"ListArr v{__version__}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
