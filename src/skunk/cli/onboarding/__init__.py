"""Interactive setup wizard."""

from skunk.cli.onboarding.wizard import SetupWizard

__all__ = ["SetupWizard"]
