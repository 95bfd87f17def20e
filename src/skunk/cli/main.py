"""CLI interface for skunk using Typer."""

import asyncio
from pathlib import Path
from typing import Annotated

import click
import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from typer.core import TyperGroup

from skunk import __version__
from skunk.cli import commands
from skunk.cli.doctor import run_diagnostics
from skunk.cli.onboarding import SetupWizard
from skunk.utils.config import Config, default_workspace
from skunk.utils.logging import setup_logging

console = Console()


class SkunkGroup(TyperGroup):
    """Command group that answers unknown commands with the help text."""

    def resolve_command(self, ctx: click.Context, args: list[str]):
        if args and not args[0].startswith("-") and self.get_command(ctx, args[0]) is None:
            console.print(f"Unknown command: {args[0]}")
            commands.show_help()
            ctx.exit(0)
        return super().resolve_command(ctx, args)


app = typer.Typer(
    name="skunk",
    help="Skunk CLI: install OpenClaw skills and Skunk WordPress plugins",
    cls=SkunkGroup,
    invoke_without_command=True,
    add_completion=True,
)
install_app = typer.Typer(help="Install a skill or plugin", invoke_without_command=True)
remove_app = typer.Typer(help="Remove an installed skill", invoke_without_command=True)
app.add_typer(install_app, name="install")
app.add_typer(remove_app, name="remove")


def get_config(ctx: typer.Context) -> Config:
    return ctx.obj["config"]


def version_callback(value: bool) -> None:
    if value:
        console.print(f"skunk {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log progress to stderr"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version", callback=version_callback, is_eager=True, help="Show version"
        ),
    ] = False,
) -> None:
    """
    Skunk CLI: install OpenClaw skills and Skunk WordPress plugins.

    Settings are read from ~/.skunk/config.yaml when present.
    """
    try:
        cfg = Config.load(default_workspace())
    except (ValidationError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading config: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    setup_logging(cfg, console_output=verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg

    if ctx.invoked_subcommand is None:
        commands.show_help()


@install_app.callback()
def install(ctx: typer.Context) -> None:
    """Install a skill or plugin."""
    if ctx.invoked_subcommand is None:
        console.print("Usage: skunk install skill <name>")
        console.print("       skunk install plugin <name> [--license=KEY]")


@install_app.command("skill")
def install_skill(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Skill to install")] = "",
) -> None:
    """Install a skill from the skills repository."""
    asyncio.run(commands.install_skill(get_config(ctx), name))


@install_app.command("plugin")
def install_plugin(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Plugin name, add -pro for the pro version")] = "",
    license_key: Annotated[
        str | None,
        typer.Option("--license", help="License key for pro plugins"),
    ] = None,
    path: Annotated[
        Path | None,
        typer.Option("--path", help="WordPress install to target"),
    ] = None,
) -> None:
    """Install a Skunk WordPress plugin."""
    asyncio.run(
        commands.install_plugin(get_config(ctx), name, license_key=license_key, wp_path=path)
    )


@remove_app.callback()
def remove(ctx: typer.Context) -> None:
    """Remove an installed skill."""
    if ctx.invoked_subcommand is None:
        console.print("Usage: skunk remove skill <name>")


@remove_app.command("skill")
def remove_skill(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Skill to remove")] = "",
) -> None:
    """Remove an installed skill."""
    commands.remove_skill(get_config(ctx), name)


@app.command("list")
def list_skills(ctx: typer.Context) -> None:
    """List installed skills."""
    commands.list_skills(get_config(ctx))


@app.command()
def available(ctx: typer.Context) -> None:
    """List skills available to install."""
    asyncio.run(commands.list_available(get_config(ctx)))


@app.command()
def plugins(ctx: typer.Context) -> None:
    """List installable WordPress plugins."""
    commands.print_registry()


@app.command()
def status(
    ctx: typer.Context,
    path: Annotated[
        Path | None,
        typer.Option("--path", help="WordPress install to inspect"),
    ] = None,
) -> None:
    """Show latest plugin versions and what is installed locally."""
    asyncio.run(commands.show_status(get_config(ctx), wp_path=path))


@app.command()
def update(
    ctx: typer.Context,
    path: Annotated[
        Path | None,
        typer.Option("--path", help="WordPress install to update"),
    ] = None,
) -> None:
    """Update installed skills and outdated plugins."""
    asyncio.run(commands.run_update(get_config(ctx), wp_path=path))


@app.command()
def doctor(ctx: typer.Context) -> None:
    """Diagnose your OpenClaw and WordPress setup."""
    asyncio.run(run_diagnostics(get_config(ctx)))


@app.command()
def setup(ctx: typer.Context) -> None:
    """Guided setup: check tools and install the essential skills."""
    wizard = SetupWizard(get_config(ctx))
    try:
        exit_code = wizard.run()
    except Exception as e:
        console.print(f"[red]Setup failed: {e}[/red]")
        raise typer.Exit(1)
    raise typer.Exit(exit_code)


@app.command("help")
def help_command(ctx: typer.Context) -> None:
    """Show usage."""
    commands.show_help()


if __name__ == "__main__":
    app()
