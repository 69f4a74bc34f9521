"""Integration tests for MatchOrchestrator against the database"""

from uuid import uuid4

import pytest

from reunite.dependencies import build_orchestrator
from reunite.domain.matching.breakdown import MatchBreakdown
from reunite.infrastructure.repositories import ItemRepository, MatchRepository, RejectedPairRepository
from reunite.matching.orchestrator import MatchOrchestrator
from reunite.models import Item, Match


@pytest.fixture
def orchestrator(db_session):
    return build_orchestrator(db_session)


def _profile(db_session, item):
    return ItemRepository(db_session).get_item(item.id)


def test_new_lost_item_creates_matches(db_session, make_item, orchestrator):
    found = make_item("found")
    make_item("found", item_name="Red Umbrella", category="Umbrella", description="folding", location="Gym")
    lost = make_item("lost")

    created = orchestrator.match_new_lost_item(_profile(db_session, lost))

    assert created == 1
    matches = MatchRepository(db_session).matches_for_item(lost.id)
    assert len(matches) == 1
    assert matches[0].lost_item_id == lost.id
    assert matches[0].found_item_id == found.id
    assert matches[0].score == 85

    items = ItemRepository(db_session)
    assert items.get_item(lost.id).status == "matched"
    assert items.get_item(found.id).status == "matched"


def test_trigger_side_does_not_change_breakdown(db_session, make_item):
    """Same stored pair scored from either side gives the same breakdown"""
    lost = make_item("lost", purpose="calls")
    found = make_item("found", location="Library reading room")

    from_lost = build_orchestrator(db_session)
    from_lost.match_new_item(_profile(db_session, lost))
    via_lost = MatchRepository(db_session).matches_for_item(lost.id)[0].breakdown

    db_session.query(Match).delete()
    db_session.query(Item).update({"status": "active"})
    db_session.commit()

    build_orchestrator(db_session).match_new_item(_profile(db_session, found))
    via_found = MatchRepository(db_session).matches_for_item(found.id)[0].breakdown

    assert via_lost == via_found


def test_own_items_are_never_candidates(db_session, make_item, orchestrator):
    user_id = uuid4()
    make_item("found", user_id=user_id)
    lost = make_item("lost", user_id=user_id)

    assert orchestrator.match_new_item(_profile(db_session, lost)) == 0


def test_other_communities_are_never_candidates(db_session, make_item, orchestrator):
    make_item("found", community="south-campus")
    lost = make_item("lost")

    assert orchestrator.match_new_item(_profile(db_session, lost)) == 0


def test_blacklisted_partner_is_excluded(db_session, make_item, orchestrator):
    found = make_item("found")
    lost = make_item("lost")
    RejectedPairRepository(db_session).insert_rejected_pair(lost.id, found.id, lost.user_id, None)

    assert orchestrator.match_new_item(_profile(db_session, lost)) == 0


def test_rerun_does_not_duplicate(db_session, make_item, orchestrator):
    make_item("found")
    make_item("found")
    lost = make_item("lost")

    assert orchestrator.match_new_item(_profile(db_session, lost)) == 2
    assert orchestrator.match_new_item(_profile(db_session, lost)) == 0
    assert len(MatchRepository(db_session).matches_for_item(lost.id)) == 2


class FlakyMatchStore(MatchRepository):
    """Fails the first create_match call only."""

    def __init__(self, db):
        super().__init__(db)
        self.calls = 0

    def create_match(self, lost_item_id, found_item_id, breakdown: MatchBreakdown):
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("connection reset")
        return super().create_match(lost_item_id, found_item_id, breakdown)


def test_one_failed_write_does_not_stop_the_batch(db_session, make_item):
    make_item("found")
    make_item("found")
    lost = make_item("lost")
    orchestrator = MatchOrchestrator(
        items=ItemRepository(db_session),
        matches=FlakyMatchStore(db_session),
        blacklist=RejectedPairRepository(db_session),
    )

    created = orchestrator.match_new_item(_profile(db_session, lost))

    assert created == 1
    assert len(orchestrator.last_failures) == 1
    assert orchestrator.last_failures[0].operation == "create_match"


def test_unexpected_error_reports_zero(db_session, make_item, orchestrator):
    lost = make_item("lost")
    profile = _profile(db_session, lost)

    # dispatching a lost item to the found entry point is an internal error
    assert orchestrator.match_new_found_item(profile) == 0


def test_stale_embedding_in_pool_does_not_block_other_matches(db_session, make_item, orchestrator):
    make_item("found", image_embedding=[1.0, 0.0, 0.0])
    found = make_item("found", image_embedding=[1.0, 0.0])
    lost = make_item("lost", image_embedding=[1.0, 0.0])

    created = orchestrator.match_new_lost_item(_profile(db_session, lost))

    assert created == 1
    matches = MatchRepository(db_session).matches_for_item(lost.id)
    assert [m.found_item_id for m in matches] == [found.id]
