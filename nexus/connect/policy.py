# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Guest calling and messaging rules.

Pure functions over resolved ``ConnectParams``. Missing params on either
side always allow: an unreachable Nexus must not block calls or chats.

The ``*_decision`` functions report which rule fired; the boolean
functions wrap them.
"""

import logging
from typing import Optional

from nexus.connect.models import ConnectParams, PolicyDecision

log = logging.getLogger(__name__)

# Decision reasons
REASON_ALLOWED = "allowed"
REASON_UNRESOLVED = "params_unresolved"
REASON_GUEST_TO_GUEST_MESSAGE = "guest_to_guest_messaging"
REASON_GUEST_GROUP_CHAT = "guest_group_chat"
REASON_GUEST_TO_ADMIN_DISABLED = "guest_to_admin_messaging_disabled"
REASON_GUEST_TO_GUEST_CALL_DISABLED = "guest_to_guest_calling_disabled"


def conversations_page_decision(params: Optional[ConnectParams]) -> PolicyDecision:
    if params is not None and params.is_guest and not params.is_guest_to_admin_messaging_enabled:
        log.info("Guest without admin messaging rights - disabling conversations page")
        return PolicyDecision(False, REASON_GUEST_TO_ADMIN_DISABLED, from_params=params)
    reason = REASON_ALLOWED if params is not None else REASON_UNRESOLVED
    return PolicyDecision(True, reason, from_params=params)


def conversations_page_enabled(params: Optional[ConnectParams]) -> bool:
    """Whether the conversations page is shown for an extension with ``params``."""
    return conversations_page_decision(params).allowed


def outgoing_chat_decision(
    from_params: Optional[ConnectParams],
    to_params: Optional[ConnectParams],
    is_group_chat: bool,
    from_extension: Optional[str] = None,
    to_extension: Optional[str] = None,
) -> PolicyDecision:
    """Decide whether ``from`` may message ``to``.

    Denied when the sender is a guest and any of these hold:

    * the recipient is also a guest,
    * the chat is a group chat,
    * the sender lacks guest-to-admin messaging (the recipient, not being
      a guest, is an admin).
    """
    if from_params is None or to_params is None:
        log.warning(
            "Connect params unresolved for sender or recipient, "
            "allowing outgoing message by default"
        )
        return PolicyDecision(True, REASON_UNRESOLVED, from_params, to_params)

    if from_params.is_guest and to_params.is_guest:
        log.warning(
            f"Guest extension [{from_extension or ''}] is not allowed to message "
            f"extension [{to_extension or ''}] because it is another guest extension"
        )
        return PolicyDecision(False, REASON_GUEST_TO_GUEST_MESSAGE, from_params, to_params)

    if from_params.is_guest and is_group_chat:
        log.warning(
            f"Guest extension [{from_extension or ''}] is not allowed to create group chats"
        )
        return PolicyDecision(False, REASON_GUEST_GROUP_CHAT, from_params, to_params)

    if from_params.is_guest and not from_params.is_guest_to_admin_messaging_enabled:
        log.warning(
            f"Guest extension [{from_extension or ''}] is not allowed to message admin "
            f"extension [{to_extension or ''}] because guest-to-admin messaging is disabled"
        )
        return PolicyDecision(False, REASON_GUEST_TO_ADMIN_DISABLED, from_params, to_params)

    return PolicyDecision(True, REASON_ALLOWED, from_params, to_params)


def outgoing_chat_allowed(
    from_params: Optional[ConnectParams],
    to_params: Optional[ConnectParams],
    is_group_chat: bool,
) -> bool:
    return outgoing_chat_decision(from_params, to_params, is_group_chat).allowed


def outgoing_call_decision(
    from_params: Optional[ConnectParams],
    to_params: Optional[ConnectParams],
    from_extension: Optional[str] = None,
    to_extension: Optional[str] = None,
) -> PolicyDecision:
    """Decide whether ``from`` may call ``to``.

    Only guest-to-guest calls are restricted, and only when the caller's
    guest-to-guest calling flag is off.
    """
    if from_params is None or to_params is None:
        log.warning(
            "Connect params unresolved for sender or recipient, "
            "allowing outgoing call by default"
        )
        return PolicyDecision(True, REASON_UNRESOLVED, from_params, to_params)

    if (
        from_params.is_guest
        and to_params.is_guest
        and not from_params.is_guest_to_guest_calling_enabled
    ):
        log.warning(
            f"Guest extension [{from_extension or ''}] is not allowed to call extension "
            f"[{to_extension or ''}] because guest-to-guest calling is disabled"
        )
        return PolicyDecision(False, REASON_GUEST_TO_GUEST_CALL_DISABLED, from_params, to_params)

    return PolicyDecision(True, REASON_ALLOWED, from_params, to_params)


def outgoing_call_allowed(
    from_params: Optional[ConnectParams],
    to_params: Optional[ConnectParams],
) -> bool:
    return outgoing_call_decision(from_params, to_params).allowed
