# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Shared test fixtures for the Nexus connect-policy test suite.

Provides a mock httpx transport that answers getConnectParams requests
per extension, a controllable clock, a fake PBX address resolver and a
ready-wired ``ConnectPolicyService``.
"""

from __future__ import annotations

import asyncio
import json
from typing import Dict, List, Optional, Tuple
from urllib.parse import parse_qs

import httpx
import pytest
import pytest_asyncio

from nexus.connect.accounts import StaticAccount, StaticAccountDirectory
from nexus.connect.cache import ConnectParamsCache
from nexus.connect.client import ConnectParamsClient
from nexus.connect.resolver import ExtensionResolver
from nexus.connect.service import ConnectPolicyService

PBX_DOMAIN = "pbx.example.com"
PBX_ADDRESS = "10.0.0.5"

GUEST_NO_RIGHTS = {
    "is_guest_extension": True,
    "is_guest_to_admin_messaging_enabled": False,
    "is_guest_to_guest_calling_enabled": False,
}
ADMIN = {
    "is_guest_extension": False,
    "is_guest_to_admin_messaging_enabled": False,
    "is_guest_to_guest_calling_enabled": False,
}


# =========================================================================
# Mock transport for httpx
# =========================================================================


class NexusTransport(httpx.AsyncBaseTransport):
    """Mock Nexus server answering getConnectParams by extension.

    Extensions without a configured response get a 404.
    """

    def __init__(self, delay: float = 0.0):
        self.responses: Dict[str, Tuple[int, bytes]] = {}
        self.requests: List[httpx.Request] = []
        self.delay = delay

    def set_params(self, extension: str, data: object, status_code: int = 200) -> None:
        self.responses[extension] = (status_code, json.dumps(data).encode())

    def set_raw(self, extension: str, content: bytes, status_code: int = 200) -> None:
        self.responses[extension] = (status_code, content)

    @staticmethod
    def form(request: httpx.Request) -> Dict[str, str]:
        fields = parse_qs(request.content.decode())
        return {k: v[0] for k, v in fields.items()}

    def requested_extensions(self) -> List[str]:
        return [self.form(r)["extension"] for r in self.requests]

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        await request.aread()
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        extension = self.form(request).get("extension", "")
        status_code, content = self.responses.get(extension, (404, b"not found"))
        return httpx.Response(
            status_code=status_code,
            content=content,
            headers={"content-type": "application/json"},
        )


class TimeoutTransport(httpx.AsyncBaseTransport):
    """Transport that always times out."""

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("Mock timeout", request=request)


class ConnectErrorTransport(httpx.AsyncBaseTransport):
    """Transport that always fails to connect."""

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)


# =========================================================================
# Clock and DNS
# =========================================================================


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAddressResolver:
    """Maps PBX domains to fixed addresses and records lookups."""

    def __init__(self, addresses: Optional[Dict[str, str]] = None):
        self.addresses = addresses if addresses is not None else {PBX_DOMAIN: PBX_ADDRESS}
        self.lookups: List[str] = []

    async def __call__(self, hostname: str) -> str:
        self.lookups.append(hostname)
        return self.addresses.get(hostname, hostname)


# =========================================================================
# Fixtures
# =========================================================================


@pytest.fixture
def transport() -> NexusTransport:
    return NexusTransport()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def address_resolver() -> FakeAddressResolver:
    return FakeAddressResolver()


@pytest.fixture
def directory() -> StaticAccountDirectory:
    """Extension 100 is provisioned locally on pbx.example.com."""
    return StaticAccountDirectory([StaticAccount(extension="100", domain=PBX_DOMAIN)])


@pytest_asyncio.fixture
async def http(transport: NexusTransport):
    client = httpx.AsyncClient(transport=transport)
    yield client
    await client.aclose()


@pytest.fixture
def cache(clock: FakeClock) -> ConnectParamsCache:
    return ConnectParamsCache(ttl_seconds=60.0, clock=clock)


@pytest.fixture
def resolver(http, cache, directory, address_resolver) -> ExtensionResolver:
    return ExtensionResolver(
        ConnectParamsClient(http=http),
        cache=cache,
        directory=directory,
        resolve_address=address_resolver,
    )


@pytest.fixture
def service(resolver: ExtensionResolver) -> ConnectPolicyService:
    return ConnectPolicyService(resolver)
