# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Extension connect-params resolution.

Lookup order for an extension:

1. The TTL cache.
2. A local account provisioned for that extension, queried against its
   own PBX.
3. The directory's default account, queried against *its* PBX but for the
   requested extension. Guest extensions usually have no local account,
   and the default account reaches the same Nexus instance.

Any ``ConnectParamsError`` along the way is logged and reported as an
unresolved (``None``) result. Only successful fetches are cached.

Concurrent lookups of the same uncached extension through the same account
directory share one in-flight fetch.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional, Tuple

from nexus.connect.accounts import AccountDirectory, AccountRef
from nexus.connect.cache import ConnectParamsCache
from nexus.connect.client import ConnectParamsClient
from nexus.connect.dns import resolve_hostname
from nexus.connect.exceptions import (
    ConnectParamsError,
    DirectoryMiss,
    ResolutionFailure,
)
from nexus.connect.models import ConnectParams

log = logging.getLogger(__name__)

AddressResolver = Callable[[str], Awaitable[str]]
InflightKey = Tuple[str, int]


class ExtensionResolver:
    """Resolves extensions to connect params through cache, accounts and Nexus."""

    def __init__(
        self,
        client: ConnectParamsClient,
        cache: Optional[ConnectParamsCache] = None,
        directory: Optional[AccountDirectory] = None,
        resolve_address: AddressResolver = resolve_hostname,
    ):
        """Initialize the resolver.

        Args:
            client: Nexus client used for fetches.
            cache: Params cache; a fresh one is created when omitted.
            directory: Default account directory for lookups.
            resolve_address: Coroutine mapping a PBX domain to an address.
        """
        self.client = client
        self.cache = cache if cache is not None else ConnectParamsCache()
        self.directory = directory
        self._resolve_address = resolve_address
        self._inflight: Dict[InflightKey, "asyncio.Task[Optional[ConnectParams]]"] = {}

    async def resolve_params(
        self,
        extension: Optional[str],
        directory: Optional[AccountDirectory] = None,
    ) -> Optional[ConnectParams]:
        """Resolve connect params for ``extension``.

        Args:
            extension: Extension to resolve.
            directory: Account directory overriding the resolver's own.

        Returns:
            ConnectParams, or None if they could not be determined.
        """
        if not extension:
            log.error("Extension is null")
            return None

        cached = self.cache.get(extension)
        if cached is not None:
            log.debug(f"Using cached connect params for extension [{extension}]")
            return cached

        directory = directory if directory is not None else self.directory
        if directory is None:
            log.error(f"No account directory to resolve extension [{extension}]")
            return None

        # Fetches are shared per (extension, directory): another directory
        # may route the same extension to a different PBX.
        key = (extension, id(directory))
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_cache(extension, directory))
            self._inflight[key] = task
            task.add_done_callback(lambda t: self._forget(key, t))
        else:
            log.debug(f"Joining in-flight fetch for extension [{extension}]")

        # Shielded so one cancelled caller does not cancel the shared fetch
        return await asyncio.shield(task)

    def _forget(self, key: InflightKey, task: "asyncio.Task[Optional[ConnectParams]]") -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        # Mark the outcome retrieved even if every waiter was cancelled
        if not task.cancelled():
            task.exception()

    async def _fetch_and_cache(
        self,
        extension: str,
        directory: AccountDirectory,
    ) -> Optional[ConnectParams]:
        try:
            params = await self._lookup(extension, directory)
        except ConnectParamsError as e:
            log.error(
                f"Failed to fetch connect params for extension [{extension}]: "
                f"{e.message} ({e.code})"
            )
            return None

        self.cache.put(extension, params)
        return params

    async def _lookup(self, extension: str, directory: AccountDirectory) -> ConnectParams:
        account = directory.find_account_by_extension(extension)
        if account is not None:
            return await self._fetch_for_account(account)

        log.debug(
            f"No local account found for extension [{extension}], "
            f"attempting to fetch using default account's PBX address"
        )
        default = directory.default_account()
        if default is None:
            raise DirectoryMiss.no_account(extension)
        return await self._fetch_for_account(default, target_extension=extension)

    async def _fetch_for_account(
        self,
        account: AccountRef,
        target_extension: Optional[str] = None,
    ) -> ConnectParams:
        """Fetch params via ``account``'s PBX.

        ``target_extension`` defaults to the account's own extension.
        """
        if target_extension is None:
            target_extension = account.extension_id()
            if not target_extension:
                raise ResolutionFailure.missing_extension()

        domain = account.server_domain()
        if not domain:
            raise ResolutionFailure.missing_domain(target_extension)

        pbx_address = await self._resolve_address(domain)
        return await self.client.fetch(pbx_address, domain, target_extension)
