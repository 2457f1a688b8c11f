#!/usr/bin/env python3

import json
from typing import Optional

import click

from fretboard_trainer.core.config import ConfigManager
from fretboard_trainer.core.factory import MAX_AUTO_ADVANCE_DELAY_MS, ComponentFactory
from fretboard_trainer.logger import get_logger
from fretboard_trainer.logging_config import setup_logging
from fretboard_trainer.stats import fret_rows, note_rows


def _factory(ctx: click.Context) -> ComponentFactory:
    return ctx.obj["factory"]


@click.group(invoke_without_command=True)
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Configuration directory (default: ~/.config/fretboard_trainer).",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, config_dir: Optional[str]) -> None:
    """Fretboard Trainer - learn the notes on the guitar neck."""
    setup_logging(level="DEBUG" if debug else "WARNING")
    ctx.ensure_object(dict)
    ctx.obj["factory"] = ComponentFactory(ConfigManager(config_dir))
    if ctx.invoked_subcommand is None:
        ctx.invoke(play)


@cli.command()
@click.option(
    "--delay",
    type=click.IntRange(0, MAX_AUTO_ADVANCE_DELAY_MS),
    default=None,
    help="Auto-advance delay in ms after a correct answer.",
)
@click.option("--save", is_flag=True, help="Remember --delay for later sessions.")
@click.pass_context
def play(ctx: click.Context, delay: Optional[int], save: bool) -> None:
    """Open the trainer window."""
    logger = get_logger(__name__)
    factory = _factory(ctx)

    # Imported here so the other commands work without a display
    from fretboard_trainer.ui.pygame_ui import PygameUI

    overrides = {"auto_advance_delay_ms": delay} if delay is not None else {}
    if overrides and save:
        factory.config_manager.update_config("trainer", overrides)
    stats_store = factory.create_stats_store()
    controller = factory.create_round_controller(stats_store=stats_store, **overrides)
    display = factory.display_config()

    try:
        ui = PygameUI(
            controller,
            factory.create_settings_store(),
            stats_store,
            width=display["width"],
            height=display["height"],
            fps=display["fps"],
        )
        ui.run()
    except Exception:
        logger.exception("An unhandled error occurred in the trainer window.")
        raise
    finally:
        logger.info("Fretboard Trainer is shutting down.")


@cli.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Print all-time accuracy by note and by fret."""
    record = _factory(ctx).create_stats_store().load()
    click.echo(f"Attempts: {record.total_attempts}")
    click.echo(f"Accuracy: {record.accuracy}%")
    for title, rows in (("By note", note_rows(record)), ("By fret", fret_rows(record))):
        click.echo("")
        click.echo(title)
        for row in rows:
            click.echo(f"  {row.label:<8} {row.value_text:>5}  ({row.correct}/{row.total})")


@cli.command("reset-stats")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def reset_stats(ctx: click.Context, yes: bool) -> None:
    """Clear all-time statistics."""
    if not yes and not click.confirm("Reset all progress data?"):
        click.echo("Aborted.")
        return
    _factory(ctx).create_stats_store().reset()
    click.echo("Statistics reset.")


@cli.command("reset-settings")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def reset_settings(ctx: click.Context, yes: bool) -> None:
    """Re-enable every fret and string."""
    if not yes and not click.confirm("Reset settings to defaults?"):
        click.echo("Aborted.")
        return
    _factory(ctx).create_settings_store().reset_defaults()
    click.echo("Settings reset.")


def _section(ctx: click.Context, section: str) -> ConfigManager:
    manager = _factory(ctx).config_manager
    if section not in manager.default_configs:
        known = ", ".join(sorted(manager.default_configs))
        raise click.BadParameter(f"unknown section {section!r} (expected one of: {known})", param_hint="SECTION")
    return manager


@cli.group("config")
def config_group() -> None:
    """Show or change the trainer and display configuration."""


@config_group.command("show")
@click.argument("section", required=False)
@click.pass_context
def config_show(ctx: click.Context, section: Optional[str]) -> None:
    """Print one configuration section, or all of them."""
    manager = _factory(ctx).config_manager
    names = [section] if section else sorted(manager.default_configs)
    for name in names:
        _section(ctx, name)
        click.echo(f"[{name}]")
        for key, value in sorted(manager.get_config(name).items()):
            click.echo(f"  {key} = {json.dumps(value)}")


@config_group.command("set")
@click.argument("section")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx: click.Context, section: str, key: str, value: str) -> None:
    """Set SECTION.KEY to VALUE (parsed as JSON, else taken as a string)."""
    manager = _section(ctx, section)
    if key not in manager.default_configs[section]:
        raise click.BadParameter(f"unknown key {key!r} in [{section}]", param_hint="KEY")
    try:
        parsed = json.loads(value)
    except (ValueError, RecursionError):
        parsed = value
    if not manager.update_config(section, {key: parsed}):
        raise click.ClickException(f"Could not save the [{section}] configuration")
    click.echo(f"{section}.{key} = {json.dumps(parsed)}")


@config_group.command("reset")
@click.argument("section")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def config_reset(ctx: click.Context, section: str, yes: bool) -> None:
    """Restore one configuration section to its defaults."""
    manager = _section(ctx, section)
    if not yes and not click.confirm(f"Reset the [{section}] configuration?"):
        click.echo("Aborted.")
        return
    if not manager.reset_config(section):
        raise click.ClickException(f"Could not save the [{section}] configuration")
    click.echo(f"Configuration [{section}] reset.")


if __name__ == "__main__":
    cli()
