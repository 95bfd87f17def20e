"""Setup wizard step classes."""

import asyncio

import questionary
from rich.console import Console

from skunk.cli import commands
from skunk.plugins.registry import PluginRegistry
from skunk.skills.installer import SkillInstaller, SkillInstallStatus
from skunk.utils.config import Config
from skunk.utils.tools import command_exists, get_version, run_tool

OPENCLAW_GUIDE_URL = "https://skunkglobal.com/guides/openclaw-wordpress"


class BaseStep:
    """Base class for setup steps."""

    title: str = ""

    def __init__(self, config: Config, console: Console):
        self.config = config
        self.console = console

    def run(self, state: dict) -> bool:
        """Execute step. Return True on success, False to abort."""
        raise NotImplementedError


class CheckEnvironmentStep(BaseStep):
    """Check Node.js, OpenClaw and WordPress Studio."""

    title = "Checking environment..."

    INSTALL_OPENCLAW = "install"
    CONTINUE = "continue"
    EXIT = "exit"

    def run(self, state: dict) -> bool:
        node_version = get_version("node")
        if not node_version:
            self.console.print("[red]✗[/red] Node.js not found")
            self.console.print("\n   Install Node.js: https://nodejs.org/")
            state["exit_code"] = 1
            return False
        self.console.print(f"[green]✓[/green] Node.js {node_version}", highlight=False)

        state["openclaw"] = command_exists("openclaw")
        if state["openclaw"]:
            version = get_version("openclaw")
            suffix = f" ({version})" if version else ""
            self.console.print(f"[green]✓[/green] OpenClaw installed{suffix}", highlight=False)
        elif not self._resolve_missing_openclaw(state):
            self.console.print("\n   Run `skunk setup` again after installing OpenClaw.")
            state["exit_code"] = 0
            return False

        if command_exists("studio"):
            version = get_version("studio")
            suffix = f" ({version})" if version else ""
            self.console.print(
                f"[green]✓[/green] WordPress Studio installed{suffix}", highlight=False
            )
        else:
            self.console.print("[yellow]![/yellow] WordPress Studio not found")
            self.console.print("")
            self.console.print("   WordPress Studio is great for local WordPress development.")
            self.console.print("   Your AI can create and manage sites through it.")
            self.console.print("")
            self.console.print("   Install it from: https://developer.wordpress.org/studio/")
            self.console.print("   macOS:  brew install --cask wordpress-studio")
            self.console.print("")

        state["wp_tool"] = command_exists("wp") or command_exists("studio")
        return True

    def _resolve_missing_openclaw(self, state: dict) -> bool:
        """Offer to install OpenClaw. Returns False if the user wants to stop."""
        self.console.print("[red]✗[/red] OpenClaw not found")
        self.console.print("")
        self.console.print("   OpenClaw is your AI assistant that uses these skills.")
        self.console.print(f"   Setup guide: [cyan]{OPENCLAW_GUIDE_URL}[/cyan]")
        self.console.print("")

        choices = []
        if command_exists("npm"):
            choices.append(
                questionary.Choice("Install OpenClaw with npm now", value=self.INSTALL_OPENCLAW)
            )
        choices.append(
            questionary.Choice("Continue installing skills anyway", value=self.CONTINUE)
        )
        choices.append(questionary.Choice("Exit setup", value=self.EXIT))

        choice = questionary.select("What would you like to do?", choices=choices).ask()

        if choice == self.INSTALL_OPENCLAW:
            self.console.print("   Running: npm install -g openclaw")
            result = run_tool(["npm", "install", "-g", "openclaw"])
            if result.ok:
                self.console.print("[green]✓[/green] OpenClaw installed")
                state["openclaw"] = True
            else:
                self.console.print(
                    "[yellow]![/yellow] npm could not install OpenClaw; continuing without it"
                )
            return True

        return choice == self.CONTINUE


class InstallSkillsStep(BaseStep):
    """Install the skills the WordPress + Skunk workflow relies on."""

    title = "Installing AI skills..."

    CORE_SKILLS = [
        ("wordpress-studio", "WordPress site management"),
        ("woocommerce", "WooCommerce store operations"),
        ("skunkcrm", "SkunkCRM contact & pipeline management"),
        ("skunkforms", "SkunkForms form building"),
        ("skunkpages", "SkunkPages landing page optimization"),
    ]

    def run(self, state: dict) -> bool:
        self.console.print("")
        self.console.print("   [dim]Skills teach your AI assistant how to work with WordPress[/dim]")
        self.console.print("   [dim]and Skunk products. Installing the essentials...[/dim]")
        self.console.print("")

        state["skills"] = asyncio.run(self._install_all())
        return True

    async def _install_all(self) -> dict[str, SkillInstallStatus]:
        installer = SkillInstaller.from_config(self.config)
        results = {}
        for name, desc in self.CORE_SKILLS:
            self.console.print(f"   {name} ", end="")
            result = await installer.install(name)
            results[name] = result.status

            if result.status == SkillInstallStatus.INSTALLED:
                self.console.print(f"[green]✓[/green] [dim]{desc}[/dim]")
            elif result.status == SkillInstallStatus.EXISTS:
                self.console.print("[dim]✓ already installed[/dim]")
            else:
                self.console.print("[yellow]! not available yet[/yellow]")
        return results


class SelectPluginsStep(BaseStep):
    """Offer the free Skunk plugins when a WordPress tool is available."""

    title = "WordPress plugins"

    def run(self, state: dict) -> bool:
        if not state.get("wp_tool"):
            self.console.print(
                "   [dim]No WP-CLI or WordPress Studio found; skipping plugin installation.[/dim]"
            )
            return True

        registry = PluginRegistry.with_builtins()
        selected = (
            questionary.checkbox(
                "Select Skunk plugins to install:",
                choices=[
                    questionary.Choice(title=entry.display_name, value=entry.key)
                    for entry in registry.list_all()
                ],
            ).ask()
            or []
        )

        state["plugins"] = {}
        for key in selected:
            state["plugins"][key] = asyncio.run(
                commands.install_plugin(self.config, key, out=self.console)
            )
        return True


class FinishStep(BaseStep):
    """Print what to do next."""

    title = "Ready!"

    def run(self, state: dict) -> bool:
        self.console.print("")
        self.console.print("   [green]Skills installed![/green]")
        self.console.print("")

        if state.get("openclaw"):
            self.console.print("   [yellow]Restart OpenClaw to load the new skills:[/yellow]")
            self.console.print("      [cyan]openclaw gateway restart[/cyan]")
            self.console.print("")
            self.console.print("   Then start chatting:")
            self.console.print("")
            self.console.print('      [cyan]"Create a new WordPress site called my-store"[/cyan]')
            self.console.print('      [cyan]"Install WooCommerce and set up a UK store"[/cyan]')
            self.console.print('      [cyan]"Install SkunkCRM"[/cyan]')
            self.console.print('      [cyan]"Create a contact form"[/cyan]')
        else:
            self.console.print("   After installing OpenClaw, run `skunk setup` again")
            self.console.print("   to verify everything is ready.")

        self.console.print("")
        self.console.print(f"   [dim]Guide: {OPENCLAW_GUIDE_URL}[/dim]")
        self.console.print("")
        return True
