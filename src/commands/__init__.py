#!/usr/bin/env python3
"""
Command endpoints for the landing insights toolkit.

Each major functionality is handled by a dedicated command class.
"""

from typing import Dict, Type
from .base import BaseCommand
from .cwv import CWVCommand
from .experiments import ExperimentsCommand
from .quality import QualityCommand
from .strategy import StrategyCommand
from .history import HistoryCommand
from .health import HealthCommand
from .integrations import IntegrationsCommand

# Command registry for easy extension
COMMANDS: Dict[str, Type[BaseCommand]] = {
    'cwv': CWVCommand,
    'experiments': ExperimentsCommand,
    'quality': QualityCommand,
    'strategy': StrategyCommand,
    'history': HistoryCommand,
    'health': HealthCommand,
    'integrations': IntegrationsCommand,
}


def get_command(command_name: str) -> BaseCommand:
    """Get a command instance by name."""
    if command_name not in COMMANDS:
        available = ', '.join(COMMANDS.keys())
        raise ValueError(f"Unknown command '{command_name}'. Available: {available}")

    command_class = COMMANDS[command_name]
    return command_class()


def list_commands() -> Dict[str, str]:
    """Get list of available commands with descriptions."""
    commands = {}
    for name, command_class in COMMANDS.items():
        commands[name] = getattr(command_class, '__doc__', 'No description available')
    return commands
