"""journal-cli - git-backed daily journal."""

import logging
import sys
from functools import wraps
from pathlib import Path

import click

from .config import Config, get_config_path, load_config, normalize_extension, save_config
from .core.session import SessionOutcome
from .errors import InvalidMacroName, JournalError
from .workflows import edit_template, open_page, open_today


def print_err(message: str) -> None:
    click.echo(click.style("error: ", fg="red") + message, err=True)


def print_warning(message: str) -> None:
    click.echo(click.style("warning: ", fg="yellow") + message, err=True)


def fatal_errors(func):
    """Report JournalError as an error line and exit with status 1."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except JournalError as e:
            print_err(str(e))
            sys.exit(1)

    return wrapper


def _report(outcome: SessionOutcome) -> None:
    for message in outcome.warnings:
        print_warning(message)


@click.group(invoke_without_command=True)
@click.version_option(package_name="journal-cli")
@click.option("--offline", "-o", is_flag=True, help="Edit files in offline mode, without pulling or pushing")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
@fatal_errors
def main(ctx, offline: bool, debug: bool):
    """Simple git based journaling app."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )

    ctx.ensure_object(dict)
    ctx.obj["offline"] = offline

    if ctx.invoked_subcommand is None:
        config = load_config()
        _report(open_today(config, offline))


@main.command()
@click.option("--date", "-d", "target_date", required=True,
              type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Date of the page (YYYY-MM-DD)")
@click.pass_context
@fatal_errors
def page(ctx, target_date):
    """Edit specific page."""
    config = load_config()
    _report(open_page(config, target_date.date(), ctx.obj["offline"]))


@main.command()
@click.pass_context
@fatal_errors
def template(ctx):
    """Edit template."""
    config = load_config()
    _report(edit_template(config, ctx.obj["offline"]))


def _show_config(config: Config) -> None:
    click.echo(f"config:          {get_config_path()}")
    click.echo(f"path:            {config.path or '(not set)'}")
    click.echo(f"editor:          {config.editor or '(not set, using $EDITOR)'}")
    click.echo(f"extension:       {config.extension}")
    click.echo(f"midnight_offset: {config.midnight_offset}")
    click.echo(f"macros:          {len(config.macros)}")


@main.command("config")
@click.option("--path", default=None, type=click.Path(file_okay=False), help="Repo path")
@click.option("--editor", default=None, help="Default text editor")
@click.option("--midnight-offset", default=None, type=click.IntRange(0, 23),
              help="Number of hours after midnight before a new day starts")
@click.option("--extension", default=None, help="File extension for journal entries")
@fatal_errors
def config_cmd(path: str | None, editor: str | None, midnight_offset: int | None, extension: str | None):
    """Show or edit config."""
    config = load_config()

    if path is None and editor is None and midnight_offset is None and extension is None:
        _show_config(config)
        return

    if path is not None:
        config.path = str(Path(path).expanduser().resolve())
    if editor is not None:
        config.editor = editor
    if midnight_offset is not None:
        config.midnight_offset = midnight_offset
    if extension is not None:
        extension = normalize_extension(extension)
        if not extension:
            raise click.BadParameter("extension must not be empty", param_hint="--extension")
        config.extension = extension

    saved_to = save_config(config)
    click.echo(f"Config saved to {saved_to}")


@main.group()
def macro():
    """Add or remove macro."""
    pass


@macro.command("add")
@click.argument("name")
@click.argument("command")
@fatal_errors
def macro_add(name: str, command: str):
    """Add new macro."""
    if not name.isalnum():
        raise InvalidMacroName(name)

    config = load_config()
    replaced = name in config.macros
    config.macros[name] = command
    save_config(config)

    verb = "Updated" if replaced else "Added"
    click.echo(f"{verb} macro ${name}")


@macro.command("rm")
@click.argument("name")
@fatal_errors
def macro_rm(name: str):
    """Remove macro."""
    config = load_config()
    if name not in config.macros:
        print_warning(f"No macro named '{name}'.")
        return

    del config.macros[name]
    save_config(config)
    click.echo(f"Removed macro ${name}")


@macro.command("list")
@fatal_errors
def macro_list():
    """List macros."""
    config = load_config()
    if "DATE" not in config.macros:
        click.echo("$DATE  (built-in)")
    for name, command in sorted(config.macros.items()):
        click.echo(f"${name}  {command}")


if __name__ == "__main__":
    main()
