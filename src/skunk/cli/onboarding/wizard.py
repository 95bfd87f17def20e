# src/skunk/cli/onboarding/wizard.py
"""Setup wizard orchestrator."""

from rich.console import Console
from rich.markup import escape

from skunk.cli.onboarding.steps import (
    BaseStep,
    CheckEnvironmentStep,
    FinishStep,
    InstallSkillsStep,
    SelectPluginsStep,
)
from skunk.utils.config import Config


class SetupWizard:
    """Guides users through tool checks, skills and plugins."""

    STEPS: list[type[BaseStep]] = [
        CheckEnvironmentStep,
        InstallSkillsStep,
        SelectPluginsStep,
        FinishStep,
    ]

    def __init__(self, config: Config, console: Console | None = None):
        self.config = config
        self.console = console or Console()

    def run(self) -> int:
        """Run all setup steps. Returns the process exit code."""
        state: dict = {}

        self.console.print("\n[bold]🦨 Skunk Global[/bold]")
        self.console.print("[dim]Welcome! Let's get your AI-powered WordPress toolkit ready.[/dim]\n")

        total = len(self.STEPS)
        for num, step_cls in enumerate(self.STEPS, start=1):
            step = step_cls(self.config, self.console)
            self.console.print(
                f"\n[cyan]{escape(f'[{num}/{total}]')}[/cyan] [bold]{step.title}[/bold]"
            )
            if not step.run(state):
                return state.get("exit_code", 0)

        return 0
