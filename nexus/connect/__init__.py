# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Nexus connect-params resolution, caching and guest policy."""

from nexus.connect.accounts import (
    AccountDirectory,
    AccountRef,
    StaticAccount,
    StaticAccountDirectory,
    load_account_directory,
)
from nexus.connect.cache import ConnectParamsCache
from nexus.connect.client import ConnectParamsClient
from nexus.connect.dns import resolve_hostname
from nexus.connect.exceptions import (
    ConfigurationError,
    ConnectParamsError,
    DirectoryMiss,
    ParseFailure,
    ProtocolFailure,
    ResolutionFailure,
    TransportFailure,
)
from nexus.connect.models import ConnectParams, PolicyDecision
from nexus.connect.policy import (
    conversations_page_enabled,
    outgoing_call_allowed,
    outgoing_chat_allowed,
)
from nexus.connect.resolver import ExtensionResolver
from nexus.connect.service import ConnectPolicyService

__all__ = [
    "AccountDirectory",
    "AccountRef",
    "ConfigurationError",
    "ConnectParams",
    "ConnectParamsCache",
    "ConnectParamsClient",
    "ConnectParamsError",
    "ConnectPolicyService",
    "DirectoryMiss",
    "ExtensionResolver",
    "ParseFailure",
    "PolicyDecision",
    "ProtocolFailure",
    "ResolutionFailure",
    "StaticAccount",
    "StaticAccountDirectory",
    "TransportFailure",
    "conversations_page_enabled",
    "load_account_directory",
    "outgoing_call_allowed",
    "outgoing_chat_allowed",
    "resolve_hostname",
]
