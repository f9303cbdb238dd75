# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Nexus connect-policy configuration.

Wire constants are fixed by the Nexus endpoint. Configurable defaults may be
overridden via environment variables.
"""

import os

# =============================================================================
# NEXUS ENDPOINT
# =============================================================================

NEXUS_PORT: int = int(os.getenv("NEXUS_PORT", "8443"))
NEXUS_ENDPOINT: str = os.getenv("NEXUS_ENDPOINT", "getConnectParams")

# =============================================================================
# HTTP CLIENT
# =============================================================================

# Per-request timeout (connect/read/write/pool) and overall per-resource deadline
NEXUS_REQUEST_TIMEOUT: float = float(os.getenv("NEXUS_REQUEST_TIMEOUT", "30.0"))
NEXUS_RESOURCE_TIMEOUT: float = float(os.getenv("NEXUS_RESOURCE_TIMEOUT", "60.0"))

NEXUS_MAX_CONNECTIONS: int = int(os.getenv("NEXUS_MAX_CONNECTIONS", "20"))
NEXUS_MAX_KEEPALIVE: int = int(os.getenv("NEXUS_MAX_KEEPALIVE", "10"))

# WARNING: lab testing with self-signed certificates only. Refused when
# NEXUS_ENVIRONMENT is "production".
NEXUS_SKIP_TLS_VERIFY: bool = os.getenv("NEXUS_SKIP_TLS_VERIFY", "false").lower() == "true"
NEXUS_ENVIRONMENT: str = os.getenv("NEXUS_ENVIRONMENT", "production").lower()

# =============================================================================
# CACHING
# =============================================================================

# One minute, to stay under the Nexus rate limit
NEXUS_CACHE_TTL: float = float(os.getenv("NEXUS_CACHE_TTL", "60.0"))

# =============================================================================
# ACCOUNTS
# =============================================================================

NEXUS_ACCOUNTS_FILE: str = os.getenv("NEXUS_ACCOUNTS_FILE", "")

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL: str = os.getenv("NEXUS_LOG_LEVEL", "INFO")
LOG_FORMAT: str = os.getenv("NEXUS_LOG_FORMAT", "json")


def is_production() -> bool:
    """True when running a production build."""
    return NEXUS_ENVIRONMENT == "production"
