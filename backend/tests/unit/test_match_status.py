"""Unit tests for item and match status state machines"""

from reunite.domain.matching.status import (
    ItemStatus,
    ItemType,
    MatchStatus,
    RejectionReason,
    can_transition_item,
    can_transition_match,
)


class TestItemStatusStateMachine:
    """Test ItemStatus transitions"""

    def test_initial_state_transition(self):
        """Test new items start ACTIVE"""
        assert can_transition_item(None, ItemStatus.ACTIVE) is True
        assert can_transition_item(None, ItemStatus.MATCHED) is False
        assert can_transition_item(None, ItemStatus.RETURNED) is False

    def test_active_to_matched(self):
        assert can_transition_item(ItemStatus.ACTIVE, ItemStatus.MATCHED) is True

    def test_active_cannot_skip_to_returned(self):
        assert can_transition_item(ItemStatus.ACTIVE, ItemStatus.RETURNED) is False

    def test_matched_back_to_active(self):
        """Test MATCHED → ACTIVE (every match rejected)"""
        assert can_transition_item(ItemStatus.MATCHED, ItemStatus.ACTIVE) is True

    def test_matched_to_returned(self):
        assert can_transition_item(ItemStatus.MATCHED, ItemStatus.RETURNED) is True

    def test_same_status_is_allowed(self):
        """Test re-asserting the current status stays idempotent"""
        assert can_transition_item(ItemStatus.MATCHED, ItemStatus.MATCHED) is True

    def test_returned_is_terminal(self):
        assert can_transition_item(ItemStatus.RETURNED, ItemStatus.ACTIVE) is False
        assert can_transition_item(ItemStatus.RETURNED, ItemStatus.MATCHED) is False


class TestMatchStatusStateMachine:
    """Test MatchStatus transitions"""

    def test_pending_outcomes(self):
        assert can_transition_match(None, MatchStatus.PENDING) is True
        assert can_transition_match(MatchStatus.PENDING, MatchStatus.SUCCESS) is True
        assert can_transition_match(MatchStatus.PENDING, MatchStatus.REJECTED) is True

    def test_terminal_states(self):
        for terminal in (MatchStatus.SUCCESS, MatchStatus.REJECTED):
            for target in MatchStatus:
                assert can_transition_match(terminal, target) is False

    def test_rejected_cannot_repeat(self):
        assert can_transition_match(MatchStatus.REJECTED, MatchStatus.REJECTED) is False


def test_item_type_opposite():
    assert ItemType.LOST.opposite is ItemType.FOUND
    assert ItemType.FOUND.opposite is ItemType.LOST


def test_rejection_reason_values():
    assert {reason.value for reason in RejectionReason} == {
        "wrong_item", "wrong_brand", "wrong_location", "already_returned", "other",
    }
