# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Connect policy service.

The entry point the rest of the client talks to. Owns the shared HTTP
client, the params cache and the resolver, and answers the three policy
questions by extension. Built explicitly by the application's composition
root; there is no module-level instance.
"""

import asyncio
import logging
from typing import Optional, Tuple

import httpx

from nexus.connect.accounts import AccountDirectory
from nexus.connect.cache import ConnectParamsCache
from nexus.connect.client import ConnectParamsClient
from nexus.connect.models import ConnectParams, PolicyDecision
from nexus.connect.policy import (
    conversations_page_decision,
    outgoing_call_decision,
    outgoing_chat_decision,
)
from nexus.connect.resolver import ExtensionResolver

log = logging.getLogger(__name__)


class ConnectPolicyService:
    """Resolves connect params and applies guest policy between extensions."""

    def __init__(self, resolver: ExtensionResolver):
        self.resolver = resolver

    @classmethod
    def from_config(
        cls,
        directory: AccountDirectory,
        http: Optional[httpx.AsyncClient] = None,
    ) -> "ConnectPolicyService":
        """Build a service from ``nexus.config`` settings."""
        client = ConnectParamsClient(http=http)
        return cls(ExtensionResolver(client, ConnectParamsCache(), directory))

    @property
    def http_client(self) -> httpx.AsyncClient:
        """The shared HTTP client used for Nexus requests."""
        return self.resolver.client.http

    @property
    def cache(self) -> ConnectParamsCache:
        return self.resolver.cache

    async def connect_params(self, extension: Optional[str]) -> Optional[ConnectParams]:
        return await self.resolver.resolve_params(extension)

    async def _resolve_pair(
        self,
        from_extension: Optional[str],
        to_extension: Optional[str],
    ) -> Tuple[Optional[ConnectParams], Optional[ConnectParams]]:
        from_params, to_params = await asyncio.gather(
            self.resolver.resolve_params(from_extension),
            self.resolver.resolve_params(to_extension),
        )
        log.info(
            f"Extension [{from_extension}] is_guest="
            f"{from_params.is_guest if from_params else None}, "
            f"extension [{to_extension}] is_guest="
            f"{to_params.is_guest if to_params else None}"
        )
        return from_params, to_params

    async def conversations_page_decision(self, extension: Optional[str]) -> PolicyDecision:
        params = await self.resolver.resolve_params(extension)
        return conversations_page_decision(params)

    async def conversations_page_enabled(self, extension: Optional[str]) -> bool:
        """Whether the conversations page should be shown for ``extension``."""
        return (await self.conversations_page_decision(extension)).allowed

    async def outgoing_chat_decision(
        self,
        from_extension: Optional[str],
        to_extension: Optional[str],
        is_group_chat: bool,
    ) -> PolicyDecision:
        log.info(
            f"Outgoing chat check from [{from_extension}] "
            f"to [{to_extension}], group chat: {is_group_chat}"
        )
        from_params, to_params = await self._resolve_pair(from_extension, to_extension)
        return outgoing_chat_decision(
            from_params, to_params, is_group_chat, from_extension, to_extension
        )

    async def outgoing_chat_allowed(
        self,
        from_extension: Optional[str],
        to_extension: Optional[str],
        is_group_chat: bool,
    ) -> bool:
        """Whether ``from_extension`` may send a message to ``to_extension``."""
        decision = await self.outgoing_chat_decision(from_extension, to_extension, is_group_chat)
        return decision.allowed

    async def outgoing_call_decision(
        self,
        from_extension: Optional[str],
        to_extension: Optional[str],
    ) -> PolicyDecision:
        from_params, to_params = await self._resolve_pair(from_extension, to_extension)
        return outgoing_call_decision(from_params, to_params, from_extension, to_extension)

    async def outgoing_call_allowed(
        self,
        from_extension: Optional[str],
        to_extension: Optional[str],
    ) -> bool:
        """Whether ``from_extension`` may place a call to ``to_extension``."""
        return (await self.outgoing_call_decision(from_extension, to_extension)).allowed

    async def aclose(self) -> None:
        await self.resolver.client.aclose()

    async def __aenter__(self) -> "ConnectPolicyService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
