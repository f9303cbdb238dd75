# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Shared httpx.AsyncClient for Nexus requests.

One pooled client is built per service and reused for every
getConnectParams call, instead of paying a TCP connect and TLS handshake
per lookup.

Usage:
    from nexus.connect.http_client import build_http_client

    http = build_http_client()
    response = await http.post(url, data={...})
"""

import logging
from typing import Optional

import httpx

from nexus.config import (
    NEXUS_MAX_CONNECTIONS,
    NEXUS_MAX_KEEPALIVE,
    NEXUS_REQUEST_TIMEOUT,
    NEXUS_SKIP_TLS_VERIFY,
    is_production,
)
from nexus.connect.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def build_http_client(
    request_timeout: float = NEXUS_REQUEST_TIMEOUT,
    skip_tls_verify: bool = NEXUS_SKIP_TLS_VERIFY,
    production: Optional[bool] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the pooled client used for Nexus requests.

    Args:
        request_timeout: Connect/read/write/pool timeout in seconds.
        skip_tls_verify: Trust every server certificate. Lab use only.
        production: Override for the build environment check; defaults to
            ``NEXUS_ENVIRONMENT``.
        transport: Optional transport (tests).

    Raises:
        ConfigurationError: If TLS verification is skipped in production.
    """
    if production is None:
        production = is_production()

    if skip_tls_verify:
        if production:
            raise ConfigurationError(
                "NEXUS_SKIP_TLS_VERIFY cannot be enabled in a production build"
            )
        logger.warning(
            "SSL certificate verification is DISABLED for Nexus requests - "
            "only use for testing!"
        )

    limits = httpx.Limits(
        max_connections=NEXUS_MAX_CONNECTIONS,
        max_keepalive_connections=NEXUS_MAX_KEEPALIVE,
        keepalive_expiry=30.0,
    )
    client = httpx.AsyncClient(
        timeout=httpx.Timeout(request_timeout),
        limits=limits,
        verify=not skip_tls_verify,
        transport=transport,
    )
    logger.info("Created shared httpx.AsyncClient for Nexus requests")
    return client
