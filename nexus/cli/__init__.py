"""Nexus CLI - query connect params and guest policy decisions.

Usage:
    nexus --help
    nexus --accounts accounts.json params 100
    nexus --accounts accounts.json call 100 200
    nexus --accounts accounts.json chat 100 200 --group
"""

from nexus.cli.main import app

__all__ = ["app"]
