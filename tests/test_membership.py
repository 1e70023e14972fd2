"""
Tests for the membership helpers and plan models.

Run with: pytest tests/test_membership.py -v
"""

from datetime import datetime, timezone

from tripshare.core.plans.membership import (
    expected_member_ids,
    merge_member_ids,
    needs_member_ids_repair,
)
from tripshare.core.plans.models import Member, MemberRole, Plan


class TestMergeMemberIds:
    """Tests for the memberIds union."""

    def test_appends_new_id(self):
        assert merge_member_ids(["owner1"], "U2") == ["owner1", "U2"]

    def test_existing_id_not_duplicated(self):
        assert merge_member_ids(["owner1", "U2"], "U2") == ["owner1", "U2"]

    def test_existing_order_kept(self):
        assert merge_member_ids(["c", "a", "b"], "d") == ["c", "a", "b", "d"]

    def test_drops_existing_duplicates(self):
        assert merge_member_ids(["a", "a", "b"], "c") == ["a", "b", "c"]

    def test_empty_list(self):
        assert merge_member_ids([], "U2") == ["U2"]

    def test_grows_by_at_most_one(self):
        existing = ["a", "b"]
        for uid in ("a", "b", "c"):
            assert len(merge_member_ids(existing, uid)) - len(existing) <= 1


class TestRepairDetection:
    """Tests for the containment check used by repair."""

    def test_missing_id_needs_repair(self):
        assert needs_member_ids_repair({"a": {}, "b": {}}, ["a"])

    def test_consistent_needs_no_repair(self):
        assert not needs_member_ids_repair({"a": {}, "b": {}}, ["b", "a"])

    def test_stale_surplus_is_not_detected(self):
        assert not needs_member_ids_repair({"a": {}}, ["a", "gone"])

    def test_empty_members(self):
        assert not needs_member_ids_repair({}, [])
        assert not needs_member_ids_repair({}, ["gone"])

    def test_expected_ids_follow_map_order(self):
        assert expected_member_ids({"b": {}, "a": {}}) == ["b", "a"]


class TestPlanModel:
    """Tests for Plan parsing from Firestore documents."""

    def test_from_firestore_dict(self):
        joined = datetime(2024, 5, 1, tzinfo=timezone.utc)
        plan = Plan.from_firestore_dict("P1", {
            "members": {"owner1": {"role": "owner", "joinedAt": joined}},
            "memberIds": ["owner1"],
            "inviteToken": "tok",
            "name": "Kyoto trip",
        })
        assert plan.id == "P1"
        assert plan.members["owner1"].role == MemberRole.OWNER.value
        assert plan.members["owner1"].joined_at == joined
        assert plan.member_ids == ["owner1"]
        assert plan.invite_token == "tok"

    def test_missing_and_null_fields_default_empty(self):
        plan = Plan.from_firestore_dict("P1", {"members": None, "memberIds": None})
        assert plan.members == {}
        assert plan.member_ids == []
        assert plan.invite_token is None

    def test_partial_member_entries(self):
        plan = Plan.from_firestore_dict("P1", {"members": {"a": {}, "b": {}}})
        assert list(plan.members) == ["a", "b"]
        assert plan.members["a"].role is None

    def test_inviter_roles(self):
        plan = Plan.from_firestore_dict("P1", {
            "members": {
                "o": {"role": "owner"},
                "e": {"role": "editor"},
                "v": {"role": "viewer"},
                "n": {},
            },
        })
        assert plan.can_invite("o")
        assert plan.can_invite("e")
        assert not plan.can_invite("v")
        assert not plan.can_invite("n")
        assert not plan.can_invite("stranger")

    def test_member_can_invite(self):
        assert Member(role="owner").can_invite
        assert not Member().can_invite
