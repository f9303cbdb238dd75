# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Nexus getConnectParams HTTP client.

Issues a single form-encoded POST per lookup. There is no retry: any
failure is raised as a ``ConnectParamsError`` and the resolver decides
what to do with it.
"""

import asyncio
import logging
from typing import Optional

import httpx

from nexus.config import NEXUS_ENDPOINT, NEXUS_PORT, NEXUS_RESOURCE_TIMEOUT
from nexus.connect.exceptions import (
    ParseFailure,
    ProtocolFailure,
    ResolutionFailure,
    TransportFailure,
)
from nexus.connect.http_client import build_http_client
from nexus.connect.models import ConnectParams

log = logging.getLogger(__name__)


class ConnectParamsClient:
    """HTTP client for the Nexus getConnectParams endpoint."""

    def __init__(
        self,
        http: Optional[httpx.AsyncClient] = None,
        port: int = NEXUS_PORT,
        endpoint: str = NEXUS_ENDPOINT,
        resource_timeout: float = NEXUS_RESOURCE_TIMEOUT,
    ):
        """Initialize the client.

        Args:
            http: Shared client to use. When omitted one is built from
                configuration and closed by ``aclose()``.
            port: Nexus HTTPS port on the PBX.
            endpoint: Endpoint path segment.
            resource_timeout: Overall deadline for one request, in seconds.
        """
        self._owns_http = http is None
        self._http = http if http is not None else build_http_client()
        self.port = port
        self.endpoint = endpoint.strip("/")
        self.resource_timeout = resource_timeout

    @property
    def http(self) -> httpx.AsyncClient:
        return self._http

    def build_url(self, pbx_address: str) -> str:
        # IPv6 literals need brackets in the URL authority
        if ":" in pbx_address and not pbx_address.startswith("["):
            pbx_address = f"[{pbx_address}]"
        return f"https://{pbx_address}:{self.port}/{self.endpoint}"

    async def fetch(self, pbx_address: str, domain: str, extension: str) -> ConnectParams:
        """Fetch connect params for ``extension`` from the PBX at ``pbx_address``.

        Args:
            pbx_address: Resolved PBX address (IPv4, IPv6 literal or hostname).
            domain: PBX SIP domain, sent as the ``domain`` form field.
            extension: Extension to query, sent as the ``extension`` form field.

        Returns:
            ConnectParams parsed from the response.

        Raises:
            TransportFailure: Connection error, TLS error or timeout.
            ProtocolFailure: Status other than 200.
            ResolutionFailure: ``pbx_address`` does not form a valid URL.
            ParseFailure: Body is not a JSON object.
        """
        url = self.build_url(pbx_address)
        log.debug(f"Fetching connect params for extension [{extension}] from {url}")

        try:
            response = await asyncio.wait_for(
                self._http.post(
                    url,
                    data={"domain": domain, "extension": extension},
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                ),
                timeout=self.resource_timeout,
            )
        except httpx.InvalidURL as e:
            raise ResolutionFailure.invalid_address(pbx_address, str(e)) from e
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise TransportFailure.timeout(url) from e
        except httpx.HTTPError as e:
            raise TransportFailure.unreachable(url, str(e) or type(e).__name__) from e

        if response.status_code != 200:
            raise ProtocolFailure.bad_status(response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise ParseFailure.not_json(extension) from e

        if not isinstance(data, dict):
            raise ParseFailure.not_object(extension)

        return ConnectParams.from_response(data)

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http and not self._http.is_closed:
            await self._http.aclose()

    async def __aenter__(self) -> "ConnectParamsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
