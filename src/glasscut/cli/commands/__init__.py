"""CLI command implementations for the glasscut application.

This package contains subcommands for the glasscut CLI:
- optimize: Plan, review and optionally commit pending cuts
- validate: Validate a configuration or inventory file
- history: List committed optimizations
"""

from glasscut.cli.commands.history import history_command
from glasscut.cli.commands.optimize import optimize_command
from glasscut.cli.commands.validate import validate_command

__all__ = ["history_command", "optimize_command", "validate_command"]
