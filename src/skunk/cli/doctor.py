"""Read-only diagnostics for a skunk setup."""

import logging

import httpx
from rich.console import Console
from rich.markup import escape

from skunk.skills.installer import SkillInstaller
from skunk.utils import http
from skunk.utils.config import Config
from skunk.utils.tools import command_exists, get_version, run_tool

logger = logging.getLogger(__name__)
console = Console()

PROBE_TIMEOUT = 10.0
OPENCLAW_GUIDE_URL = "https://skunkglobal.com/guides/openclaw-wordpress"


def success(msg: str) -> None:
    console.print(f"[green]✓[/green] {msg}", highlight=False)


def warn(msg: str) -> None:
    console.print(f"[yellow]![/yellow] {msg}", highlight=False)


def error(msg: str) -> None:
    console.print(f"[red]✗[/red] {msg}", highlight=False)


def hint(msg: str) -> None:
    console.print(f"  [dim]{msg}[/dim]", highlight=False)


def check_openclaw() -> bool:
    """Report the OpenClaw runtime and whether its gateway is running."""
    console.print("[bold]Checking OpenClaw...[/bold]")

    if not command_exists("openclaw"):
        error("OpenClaw not found in PATH")
        hint(f"Install from: {OPENCLAW_GUIDE_URL}")
        console.print()
        return False

    version = get_version("openclaw")
    if version:
        success(f"OpenClaw installed: {escape(version)}")
    else:
        warn("OpenClaw found but version check failed")

    # Exit status is the contract; the human-readable text is not parsed
    gateway = run_tool(["openclaw", "gateway", "status"], timeout=15)
    if gateway.ok:
        success("Gateway is running")
    else:
        warn("Gateway is not running")
        hint("Start with: openclaw gateway start")

    console.print()
    return True


def check_wordpress_tools() -> bool:
    """Report WP-CLI and WordPress Studio. True if at least one exists."""
    console.print("[bold]Checking WordPress tools...[/bold]")

    has_wp = command_exists("wp")
    if has_wp:
        version = get_version("wp", prefix="WP-CLI ")
        if version:
            success(f"WP-CLI installed: {escape(version)}")
        else:
            warn("WP-CLI found but version check failed")
    else:
        warn("WP-CLI not found")
        hint("Install from: https://wp-cli.org/")

    has_studio = command_exists("studio")
    if has_studio:
        version = get_version("studio")
        if version:
            success(f"WordPress Studio installed: {escape(version)}")
        else:
            warn("WordPress Studio found but version check failed")
    else:
        console.print("[cyan]ℹ[/cyan] WordPress Studio not found (optional)")
        hint("Install from: https://developer.wordpress.org/studio/")

    if not has_wp and not has_studio:
        error("No WordPress CLI tools found")
        console.print("  [yellow]At least one is required for plugin installation[/yellow]")

    console.print()
    return has_wp or has_studio


def check_installed_skills(config: Config) -> bool:
    """Report every skill directory and the state of its files."""
    console.print("[bold]Checking installed skills...[/bold]")

    if not config.skills_path.is_dir():
        warn(f"Skills directory does not exist: {config.skills_path}")
        hint("This will be created when you install your first skill")
        console.print()
        return False

    skills = SkillInstaller.from_config(config).inspect_installed()
    if not skills:
        warn(f"No skills found in {config.skills_path}")
        hint("Install skills with: skunk install skill <name>")
        console.print()
        return False

    success(f"Found {len(skills)} skill{'' if len(skills) == 1 else 's'}:")
    for skill in skills:
        parts = [
            "[green]SKILL.md[/green]" if skill.has_skill_md else "[red]missing SKILL.md[/red]",
            {
                "ok": "[green]config.json[/green]",
                "invalid": "[yellow]invalid config.json[/yellow]",
                "missing": "[dim]no config.json[/dim]",
            }[skill.config_state],
        ]
        console.print(f"  [cyan]●[/cyan] {skill.name} ({', '.join(parts)})", highlight=False)

    console.print()
    return True


async def probe(
    url: str, transport: httpx.AsyncBaseTransport | None = None
) -> str | None:
    """GET ``url`` with a fixed timeout. Returns None if reachable, else the reason."""
    try:
        async with http.create_client(PROBE_TIMEOUT, transport) as client:
            response = await client.get(url)
    except httpx.TimeoutException:
        return "Connection timeout"
    except httpx.HTTPError as e:
        return str(e) or type(e).__name__

    if not response.is_success:
        return f"HTTP {response.status_code}"
    return None


async def check_connectivity(
    config: Config, transport: httpx.AsyncBaseTransport | None = None
) -> bool:
    """Probe the vendor API and the skills repository."""
    console.print("[bold]Checking connectivity...[/bold]")

    targets = [
        ("skunkglobal.com API", f"{config.api_base}/plugins/versions"),
        (
            "GitHub skills repository",
            SkillInstaller.LISTING_URL.format(repo=config.skills_repo),
        ),
    ]

    all_ok = True
    for label, url in targets:
        reason = await probe(url, transport)
        if reason is None:
            success(f"{label} is reachable")
        else:
            all_ok = False
            logger.warning(f"{label} unreachable: {reason}")
            error(f"Cannot reach {label}")
            hint(f"Error: {escape(reason)}")

    console.print()
    return all_ok


def provide_suggestions(has_openclaw: bool, has_wp_tools: bool, has_skills: bool) -> None:
    """Print numbered next steps for whatever is missing."""
    console.print("[bold]💡 Recommendations:[/bold]\n")

    step = 0
    if not has_openclaw:
        step += 1
        console.print(f"[cyan]{step}.[/cyan] Install OpenClaw:")
        hint(f" {OPENCLAW_GUIDE_URL}\n")

    if not has_wp_tools:
        step += 1
        console.print(f"[cyan]{step}.[/cyan] Install a WordPress CLI tool:")
        hint(" WP-CLI: https://wp-cli.org/")
        hint(" WordPress Studio: https://developer.wordpress.org/studio/\n")

    if not has_skills:
        step += 1
        console.print(f"[cyan]{step}.[/cyan] Install your first skill:")
        hint(" skunk available")
        hint(" skunk install skill skunkforms\n")

    if step == 0:
        console.print("[green]✓ Your setup looks good![/green]\n")
        console.print("[dim]Next steps:[/dim]")
        console.print("  • Install WordPress plugins: [dim]skunk install plugin <name>[/dim]")
        console.print("  • Check for updates: [dim]skunk status[/dim]")
        console.print("  • Get help: [dim]skunk help[/dim]\n")


async def run_diagnostics(
    config: Config, transport: httpx.AsyncBaseTransport | None = None
) -> None:
    """Run every check and print recommendations. Never modifies anything."""
    console.print("[bold]🩺 Skunk CLI Doctor[/bold]\n")
    console.print("[dim]Checking your setup...[/dim]\n")

    has_openclaw = check_openclaw()
    has_wp_tools = check_wordpress_tools()
    has_skills = check_installed_skills(config)
    await check_connectivity(config, transport)
    provide_suggestions(has_openclaw, has_wp_tools, has_skills)
