"""Shared utilities for the Nexus CLI.

This module provides common functionality for:
- Running async functions from sync CLI context
- Loading the account directory
- Exit codes
"""

import asyncio
from typing import Any, Coroutine, Optional, TypeVar

from nexus.config import NEXUS_ACCOUNTS_FILE
from nexus.connect.accounts import StaticAccountDirectory, load_account_directory

# Exit codes
EXIT_SUCCESS = 0
EXIT_DENIED = 1
EXIT_UNRESOLVED = 2
EXIT_CONFIG_ERROR = 3

T = TypeVar("T")


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run async function from sync CLI context.

    Args:
        coro: Coroutine to execute

    Returns:
        Result of the coroutine
    """
    return asyncio.run(coro)


def load_directory(path: Optional[str]) -> StaticAccountDirectory:
    """Load the account directory from ``path`` or ``NEXUS_ACCOUNTS_FILE``.

    An empty directory is returned when neither is set, in which case
    every lookup resolves to a directory miss.

    Raises:
        ConfigurationError: If the accounts file is unreadable or malformed.
    """
    path = path or NEXUS_ACCOUNTS_FILE
    if not path:
        return StaticAccountDirectory()
    return load_account_directory(path)
