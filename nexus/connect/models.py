# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Connect-params data model.

``ConnectParams`` is the three-flag policy bundle Nexus returns for an
extension. Absent or mistyped flags mean "not granted", so a response is
never partially populated.
"""

from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional

# Wire field names on the getConnectParams response
FIELD_IS_GUEST = "is_guest_extension"
FIELD_GUEST_TO_ADMIN_MESSAGING = "is_guest_to_admin_messaging_enabled"
FIELD_GUEST_TO_GUEST_CALLING = "is_guest_to_guest_calling_enabled"


def _flag(data: Mapping[str, Any], name: str) -> bool:
    value = data.get(name)
    # JSON true/false only; 1, "true" and friends are not grants
    return value if isinstance(value, bool) else False


@dataclass(frozen=True)
class ConnectParams:
    """Frequency Connect parameters for one extension.

    Attributes:
        is_guest: Extension is a guest (restricted) extension.
        is_guest_to_admin_messaging_enabled: Guest may message admin extensions.
        is_guest_to_guest_calling_enabled: Guest may call other guests.
    """

    is_guest: bool = False
    is_guest_to_admin_messaging_enabled: bool = False
    is_guest_to_guest_calling_enabled: bool = False

    @classmethod
    def from_response(cls, data: Mapping[str, Any]) -> "ConnectParams":
        """Build params from a decoded getConnectParams JSON object."""
        return cls(
            is_guest=_flag(data, FIELD_IS_GUEST),
            is_guest_to_admin_messaging_enabled=_flag(data, FIELD_GUEST_TO_ADMIN_MESSAGING),
            is_guest_to_guest_calling_enabled=_flag(data, FIELD_GUEST_TO_GUEST_CALLING),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CacheEntry:
    """Cached params with the clock reading taken when they were stored."""

    params: ConnectParams
    fetched_at: float


@dataclass(frozen=True)
class PolicyDecision:
    """Outcome of a policy rule, with the reason it was reached."""

    allowed: bool
    reason: str
    from_params: Optional[ConnectParams] = None
    to_params: Optional[ConnectParams] = None

    def __bool__(self) -> bool:
        return self.allowed

    def to_dict(self) -> dict:
        return {
            "allowed": self.allowed,
            "reason": self.reason,
            "from_params": self.from_params.to_dict() if self.from_params else None,
            "to_params": self.to_params.to_dict() if self.to_params else None,
        }
