"""CLI command handlers for skunk."""

import logging
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from skunk.core.exceptions import CatalogError, SkillSourceError
from skunk.plugins.catalog import PluginCatalog
from skunk.plugins.installer import PluginInstaller, PluginInstallStatus
from skunk.plugins.registry import PluginRegistry, PluginRequest
from skunk.plugins.wordpress import WordPressCLI
from skunk.skills.installer import SkillInstaller, SkillInstallStatus
from skunk.utils.config import Config

logger = logging.getLogger(__name__)
console = Console()

SKILLS_URL = "https://github.com/skunkceo/openclaw-skills"
PRICING_URL = "https://skunkglobal.com/pricing"

HELP_TEXT = """
[bold]🦨 Skunk CLI[/bold] - Install skills for OpenClaw and Skunk WordPress plugins

[bold]Usage:[/bold]
  skunk setup                              Guided setup
  skunk install skill <name>               Install a skill
  skunk install plugin <name> [--license=KEY]
                                           Install a WordPress plugin
  skunk remove skill <name>                Remove an installed skill
  skunk list                               List installed skills
  skunk available                          List available skills
  skunk plugins                            List installable plugins
  skunk status                             Show latest plugin versions
  skunk update                             Update installed skills and plugins
  skunk doctor                             Diagnose your setup
  skunk help                               Show this help

[bold]Examples:[/bold]
  skunk install skill wordpress-studio
  skunk install plugin skunkcrm
  skunk install plugin skunkforms-pro --license=XXXX-XXXX

Skills: {skills_url}
"""


def show_help() -> None:
    """Print usage text."""
    console.print(HELP_TEXT.format(skills_url=SKILLS_URL), highlight=False)


# ============================================================================
# Skills
# ============================================================================


def list_skills(config: Config) -> None:
    """List installed skills."""
    skills = SkillInstaller.from_config(config).list_installed()

    if not skills:
        console.print("No skills installed yet.")
        return

    console.print("Installed skills:")
    for name in skills:
        console.print(f"  - {name}")


async def list_available(config: Config) -> None:
    """List skills published in the skills repository."""
    console.print("Fetching available skills...\n")

    try:
        skills = await SkillInstaller.from_config(config).list_available()
    except SkillSourceError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return

    console.print("Available skills:")
    for name in skills:
        console.print(f"  - {name}")
    console.print("\nInstall with: skunk install skill <skill-name>")


async def install_skill(config: Config, name: str) -> None:
    """Install a single skill and report the outcome."""
    if not name:
        console.print("Usage: skunk install skill <skill-name>")
        console.print('Run "skunk available" to see available skills')
        return

    console.print(f"Installing {escape(name)}...")
    result = await SkillInstaller.from_config(config).install(name)

    match result.status:
        case SkillInstallStatus.INSTALLED:
            console.print(
                f"[green]✓[/green] Installed {name} to {result.path}", highlight=False
            )
        case SkillInstallStatus.EXISTS:
            console.print(
                f"Skill {name} is already installed. "
                f"Remove it first with: skunk remove skill {name}"
            )
        case SkillInstallStatus.INVALID:
            console.print(f"[red]✗[/red] Invalid skill name: {escape(name)}")
        case _:
            console.print(
                f'[red]✗[/red] Skill "{name}" not found. '
                'Run "skunk available" to see available skills.'
            )


def remove_skill(config: Config, name: str) -> None:
    """Remove an installed skill."""
    if not name:
        console.print("Usage: skunk remove skill <skill-name>")
        return

    if SkillInstaller.from_config(config).remove(name):
        console.print(f"[green]✓[/green] Removed {name}")
    else:
        console.print(f"Skill {escape(name)} is not installed.")


# ============================================================================
# Plugins
# ============================================================================


def print_registry(registry: PluginRegistry | None = None) -> None:
    """Print every installable plugin with its free and pro slugs."""
    registry = registry or PluginRegistry.with_builtins()

    table = Table(title="Skunk plugins")
    table.add_column("Name", style="cyan")
    table.add_column("Plugin")
    table.add_column("Free slug")
    table.add_column("Pro slug")
    for entry in registry.list_all():
        table.add_row(entry.key, entry.display_name, entry.free_slug, entry.pro_slug)
    console.print(table)
    console.print("\nInstall with: skunk install plugin <name>[-pro] [--license=KEY]")


def print_tool_guidance(out: Console | None = None) -> None:
    out = out or console
    out.print("[red]✗[/red] No WordPress CLI tools found")
    out.print("  Install one of:")
    out.print("    WP-CLI: https://wp-cli.org/")
    out.print("    WordPress Studio: https://developer.wordpress.org/studio/")


async def install_plugin(
    config: Config,
    name: str,
    license_key: str | None = None,
    wp_path: Path | None = None,
    out: Console | None = None,
) -> bool:
    """Install a plugin and report the outcome. Returns True on success."""
    out = out or console
    if not name:
        out.print("Usage: skunk install plugin <name> [--license=KEY]")
        out.print('Run "skunk plugins" to see installable plugins')
        return False

    installer = PluginInstaller.from_config(config)
    out.print(f"Installing plugin {escape(name)}...")
    result = await installer.install(name, license_key=license_key, wp_path=wp_path)

    match result.status:
        case PluginInstallStatus.INSTALLED:
            out.print(f"[green]✓[/green] {escape(result.message)}")
        case PluginInstallStatus.UNKNOWN:
            out.print(f"[red]✗[/red] Unknown plugin: {escape(name)}")
            out.print("\nKnown plugins:")
            for entry in installer.registry.list_all():
                out.print(f"  - {entry.key} ({entry.display_name}), {entry.pro_slug}")
        case PluginInstallStatus.NO_TOOL:
            print_tool_guidance(out)
        case PluginInstallStatus.LICENSE_REQUIRED:
            out.print(f"[yellow]![/yellow] {escape(result.message)}")
            out.print(
                f"  Install with: skunk install plugin {escape(name)} --license=YOUR-KEY"
            )
            out.print(f"  Get a license: {PRICING_URL}")
        case PluginInstallStatus.LICENSE_INVALID:
            out.print(f"[red]✗[/red] License rejected: {escape(result.message)}")
        case _:
            out.print(f"[red]✗[/red] {escape(result.message)}")

    return result.ok


async def show_status(config: Config, wp_path: Path | None = None) -> None:
    """Print latest plugin versions, plus installed versions when possible."""
    registry = PluginRegistry.with_builtins()
    catalog = PluginCatalog.from_config(config)

    try:
        latest = await catalog.fetch_latest()
    except CatalogError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        return

    wp = WordPressCLI.detect(wp_path)
    installed = wp.installed_plugins() if wp else None

    slugs = [
        slug for entry in registry.list_all() for slug in (entry.free_slug, entry.pro_slug)
    ]
    rows = catalog.build_rows(latest, slugs, installed)

    table = Table(title="Skunk plugin versions")
    table.add_column("Plugin", style="cyan")
    table.add_column("Latest")
    if installed is not None:
        table.add_column("Installed")

    for row in rows:
        cells = [row.slug, row.latest]
        if installed is not None:
            if row.installed is None:
                cells.append("[dim]-[/dim]")
            elif row.outdated:
                cells.append(f"[yellow]{row.installed}[/yellow]")
            else:
                cells.append(f"[green]{row.installed}[/green]")
        table.add_row(*cells)

    console.print(table)
    if installed is None:
        console.print("[dim]WP-CLI or WordPress Studio not found; local versions unknown.[/dim]")
    elif any(row.outdated for row in rows):
        console.print("Run [bold]skunk update[/bold] to upgrade outdated plugins.")


async def run_update(config: Config, wp_path: Path | None = None) -> None:
    """Refresh installed skills, then upgrade outdated registry plugins."""
    skills = SkillInstaller.from_config(config)
    names = skills.list_installed()

    if not names:
        console.print("No skills installed yet.")
    for name in names:
        result = await skills.update(name)
        if result.status == SkillInstallStatus.UPDATED:
            console.print(f"[green]✓[/green] Updated skill {name}")
        else:
            console.print(
                f"[yellow]![/yellow] Could not fetch {name}; kept the installed copy"
            )

    wp = WordPressCLI.detect(wp_path)
    if wp is None:
        console.print("[dim]No WordPress CLI tool found; skipping plugin updates.[/dim]")
        return

    try:
        latest = await PluginCatalog.from_config(config).fetch_latest()
    except CatalogError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        return

    installed = wp.installed_plugins()
    installer = PluginInstaller.from_config(config)
    outdated = 0

    for entry in installer.registry.list_all():
        for pro in (False, True):
            slug = entry.slug(pro)
            current = installed.get(slug)
            if current is None or slug not in latest or current == latest[slug]:
                continue

            outdated += 1
            license_key = config.licenses.get(entry.key) if pro else None
            if pro and not license_key:
                console.print(
                    f"[yellow]![/yellow] {slug} {current} -> {latest[slug]} needs a license; "
                    f"run: skunk install plugin {slug} --license=KEY"
                )
                continue

            request = PluginRequest(entry=entry, pro=pro, license_key=license_key)
            result = await installer.install_request(request, wp, force=True)
            if result.ok:
                console.print(f"[green]✓[/green] {slug} {current} -> {latest[slug]}")
            else:
                console.print(f"[red]✗[/red] {escape(result.message)}")

    if outdated == 0:
        console.print("Plugins are up to date.")
