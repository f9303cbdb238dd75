# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Connect-params errors mapped to failure codes.

Every ``ConnectParamsError`` is caught at the resolver boundary and turned
into an unresolved result; none of them reach policy callers.
"""

from typing import Optional


class ConnectParamsError(Exception):
    """Base exception for connect-params resolution failures."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class ResolutionFailure(ConnectParamsError):
    """No PBX address, domain or extension could be derived from an account."""

    @classmethod
    def missing_domain(cls, extension: str) -> "ResolutionFailure":
        return cls(
            code="RESOLUTION_NO_DOMAIN",
            message=f"Account for extension [{extension}] has no server domain",
        )

    @classmethod
    def missing_extension(cls) -> "ResolutionFailure":
        return cls(
            code="RESOLUTION_NO_EXTENSION",
            message="Account has no identity extension",
        )

    @classmethod
    def invalid_address(cls, address: str, reason: str) -> "ResolutionFailure":
        return cls(
            code="RESOLUTION_INVALID_ADDRESS",
            message=f"PBX address [{address}] does not form a valid URL: {reason}",
        )


class TransportFailure(ConnectParamsError):
    """Connect, timeout or TLS error talking to Nexus."""

    @classmethod
    def timeout(cls, url: str) -> "TransportFailure":
        return cls(code="TRANSPORT_TIMEOUT", message=f"Request to {url} timed out")

    @classmethod
    def unreachable(cls, url: str, reason: str) -> "TransportFailure":
        return cls(code="TRANSPORT_UNREACHABLE", message=f"Request to {url} failed: {reason}")


class ProtocolFailure(ConnectParamsError):
    """Nexus answered with a status other than 200."""

    def __init__(self, code: str, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(code, message)

    @classmethod
    def bad_status(cls, status_code: int) -> "ProtocolFailure":
        return cls(
            code="PROTOCOL_BAD_STATUS",
            message=f"Failed to fetch connect params: HTTP {status_code}",
            status_code=status_code,
        )


class ParseFailure(ConnectParamsError):
    """Response body is not a JSON object."""

    @classmethod
    def not_json(cls, extension: str) -> "ParseFailure":
        return cls(
            code="PARSE_NOT_JSON",
            message=f"Response is not valid JSON for extension [{extension}]",
        )

    @classmethod
    def not_object(cls, extension: str) -> "ParseFailure":
        return cls(
            code="PARSE_NOT_OBJECT",
            message=f"Response is not a JSON object for extension [{extension}]",
        )


class DirectoryMiss(ConnectParamsError):
    """No local account matched and no default account is available."""

    @classmethod
    def no_account(cls, extension: str) -> "DirectoryMiss":
        return cls(
            code="DIRECTORY_MISS",
            message=f"No account available to fetch params for extension [{extension}]",
        )


class ConfigurationError(Exception):
    """Invalid Nexus client configuration."""
    pass
