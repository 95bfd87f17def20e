"""Skunk: install OpenClaw skills and Skunk WordPress plugins."""

__version__ = "0.3.0"
