"""Tests for guest calling and messaging rules (nexus.connect.policy)."""

import logging

import pytest

from nexus.connect.models import ConnectParams
from nexus.connect.policy import (
    REASON_ALLOWED,
    REASON_GUEST_GROUP_CHAT,
    REASON_GUEST_TO_ADMIN_DISABLED,
    REASON_GUEST_TO_GUEST_CALL_DISABLED,
    REASON_GUEST_TO_GUEST_MESSAGE,
    REASON_UNRESOLVED,
    conversations_page_decision,
    conversations_page_enabled,
    outgoing_call_allowed,
    outgoing_call_decision,
    outgoing_chat_allowed,
    outgoing_chat_decision,
)

ADMIN = ConnectParams(is_guest=False)
GUEST = ConnectParams(is_guest=True)
GUEST_ALL_RIGHTS = ConnectParams(
    is_guest=True,
    is_guest_to_admin_messaging_enabled=True,
    is_guest_to_guest_calling_enabled=True,
)
GUEST_CAN_MESSAGE_ADMIN = ConnectParams(is_guest=True, is_guest_to_admin_messaging_enabled=True)
GUEST_CAN_CALL_GUESTS = ConnectParams(is_guest=True, is_guest_to_guest_calling_enabled=True)


class TestConversationsPage:
    def test_guest_without_admin_messaging_disabled(self):
        assert conversations_page_enabled(GUEST) is False

    def test_guest_with_admin_messaging_enabled(self):
        assert conversations_page_enabled(GUEST_CAN_MESSAGE_ADMIN) is True

    def test_non_guest_enabled(self):
        assert conversations_page_enabled(ADMIN) is True

    def test_unresolved_enabled(self):
        assert conversations_page_enabled(None) is True
        assert conversations_page_decision(None).reason == REASON_UNRESOLVED


class TestOutgoingCall:
    def test_guest_to_guest_without_right_denied(self):
        assert outgoing_call_allowed(GUEST, GUEST) is False
        assert outgoing_call_decision(GUEST, GUEST).reason == REASON_GUEST_TO_GUEST_CALL_DISABLED

    def test_guest_to_guest_with_right_allowed(self):
        assert outgoing_call_allowed(GUEST_CAN_CALL_GUESTS, GUEST) is True

    def test_callee_flag_irrelevant(self):
        """Only the caller's guest-to-guest flag counts."""
        assert outgoing_call_allowed(GUEST, GUEST_CAN_CALL_GUESTS) is False

    def test_guest_to_admin_allowed(self):
        assert outgoing_call_allowed(GUEST, ADMIN) is True

    def test_admin_to_guest_allowed(self):
        assert outgoing_call_allowed(ADMIN, GUEST) is True

    @pytest.mark.parametrize("from_params,to_params", [(None, GUEST), (GUEST, None), (None, None)])
    def test_unresolved_allowed(self, from_params, to_params, caplog):
        with caplog.at_level(logging.WARNING, logger="nexus.connect.policy"):
            decision = outgoing_call_decision(from_params, to_params)
        assert decision.allowed is True
        assert decision.reason == REASON_UNRESOLVED
        assert "allowing outgoing call by default" in caplog.text


class TestOutgoingChat:
    def test_guest_to_guest_denied_regardless_of_flags(self):
        decision = outgoing_chat_decision(GUEST_ALL_RIGHTS, GUEST_ALL_RIGHTS, False)
        assert decision.allowed is False
        assert decision.reason == REASON_GUEST_TO_GUEST_MESSAGE

    def test_guest_to_admin_without_right_denied(self):
        decision = outgoing_chat_decision(GUEST, ADMIN, False)
        assert decision.allowed is False
        assert decision.reason == REASON_GUEST_TO_ADMIN_DISABLED

    def test_guest_to_admin_with_right_allowed(self):
        assert outgoing_chat_allowed(GUEST_CAN_MESSAGE_ADMIN, ADMIN, False) is True

    def test_guest_group_chat_denied_even_with_rights(self):
        decision = outgoing_chat_decision(GUEST_ALL_RIGHTS, ADMIN, True)
        assert decision.allowed is False
        assert decision.reason == REASON_GUEST_GROUP_CHAT

    def test_admin_to_guest_allowed(self):
        assert outgoing_chat_allowed(ADMIN, GUEST, False) is True

    def test_admin_group_chat_allowed(self):
        assert outgoing_chat_allowed(ADMIN, GUEST, True) is True

    def test_admin_to_admin_allowed(self):
        decision = outgoing_chat_decision(ADMIN, ADMIN, False)
        assert decision.allowed is True
        assert decision.reason == REASON_ALLOWED

    @pytest.mark.parametrize("from_params,to_params", [(None, GUEST), (GUEST, None), (None, None)])
    def test_unresolved_allowed(self, from_params, to_params, caplog):
        with caplog.at_level(logging.WARNING, logger="nexus.connect.policy"):
            assert outgoing_chat_allowed(from_params, to_params, True) is True
        assert "allowing outgoing message by default" in caplog.text

    def test_denial_logs_extensions(self, caplog):
        with caplog.at_level(logging.WARNING, logger="nexus.connect.policy"):
            outgoing_chat_decision(GUEST, GUEST, False, "100", "101")
        assert "[100]" in caplog.text
        assert "[101]" in caplog.text
