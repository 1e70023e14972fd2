"""
Tests for the memberIds repair operations.

Run with: pytest tests/test_repair_service.py -v
"""

import pytest

from conftest import FakePlanRepository, caller
from tripshare import config
from tripshare.core.plans.repair import MemberIdsRepairService, require_repair_access
from tripshare.errors import CallableError, ErrorCode


@pytest.fixture
def drifted_plans() -> FakePlanRepository:
    return FakePlanRepository({
        "broken": {"members": {"a": {}, "b": {}}, "memberIds": ["a"]},
        "ok": {"members": {"a": {}, "b": {}}, "memberIds": ["b", "a"]},
        "stale": {"members": {"a": {}}, "memberIds": ["a", "gone"]},
        "no-ids": {"members": {"x": {"role": "owner"}}},
    })


class TestRepairPlan:
    """Tests for repairSinglePlanMemberIds."""

    def test_repairs_missing_ids(self):
        plans = FakePlanRepository({"P": {"members": {"a": {}, "b": {}}, "memberIds": ["a"]}})
        service = MemberIdsRepairService(plans=plans)

        result = service.repair_plan("P")

        assert result.success is True
        assert result.plan_id == "P"
        assert result.old_member_ids == ["a"]
        assert result.new_member_ids == ["a", "b"]
        assert result.member_ids is None
        assert result.message == "Successfully repaired plan P"
        assert plans.documents["P"]["memberIds"] == ["a", "b"]

    def test_second_run_needs_no_repair(self):
        plans = FakePlanRepository({"P": {"members": {"a": {}, "b": {}}, "memberIds": ["a"]}})
        service = MemberIdsRepairService(plans=plans)
        service.repair_plan("P")

        result = service.repair_plan("P")

        assert result.success is True
        assert result.member_ids == ["a", "b"]
        assert result.old_member_ids is None
        assert result.message == "Plan P does not need repair"
        assert len(plans.writes) == 1

    def test_stale_ids_are_kept(self, drifted_plans):
        service = MemberIdsRepairService(plans=drifted_plans)
        result = service.repair_plan("stale")
        assert result.member_ids == ["a", "gone"]
        assert drifted_plans.writes == []

    def test_missing_plan_id(self, repair_service):
        with pytest.raises(CallableError) as excinfo:
            repair_service.repair_plan("")
        assert excinfo.value.code == ErrorCode.INVALID_ARGUMENT
        assert excinfo.value.message == "planId is required"

    def test_plan_not_found(self, repair_service):
        with pytest.raises(CallableError) as excinfo:
            repair_service.repair_plan("missing")
        assert excinfo.value.code == ErrorCode.NOT_FOUND
        assert excinfo.value.message == "Plan missing not found"

    def test_empty_document_is_internal(self):
        service = MemberIdsRepairService(plans=FakePlanRepository({"P": None}))
        with pytest.raises(CallableError) as excinfo:
            service.repair_plan("P")
        assert excinfo.value.code == ErrorCode.INTERNAL
        assert excinfo.value.message == "Plan data is empty"


class TestRepairAll:
    """Tests for repairExistingPlansMemberIds."""

    def test_repairs_only_inconsistent_plans(self, drifted_plans):
        service = MemberIdsRepairService(plans=drifted_plans)

        result = service.repair_all()

        assert result.success is True
        assert result.repaired == 2
        assert result.repaired_plan_ids == ["broken", "no-ids"]
        assert result.message == "Successfully repaired 2 plans"
        assert drifted_plans.documents["broken"]["memberIds"] == ["a", "b"]
        assert drifted_plans.documents["no-ids"]["memberIds"] == ["x"]
        assert drifted_plans.documents["ok"]["memberIds"] == ["b", "a"]
        assert drifted_plans.documents["stale"]["memberIds"] == ["a", "gone"]

    def test_single_batch(self, drifted_plans):
        MemberIdsRepairService(plans=drifted_plans).repair_all()
        assert drifted_plans.writes == [("batch", {"broken": ["a", "b"], "no-ids": ["x"]})]

    def test_nothing_to_repair(self, repair_service, plans):
        result = repair_service.repair_all()

        assert result.repaired == 0
        assert result.repaired_plan_ids == []
        assert result.message == "No plans needed repair"
        assert plans.writes == []

    def test_batch_failure_is_internal(self, drifted_plans):
        def fail(updates):
            raise RuntimeError("batch rejected")

        drifted_plans.batch_update_member_ids = fail
        with pytest.raises(CallableError) as excinfo:
            MemberIdsRepairService(plans=drifted_plans).repair_all()
        assert excinfo.value.code == ErrorCode.INTERNAL


class TestRepairAccess:
    """Tests for the optional admin gate."""

    def test_open_by_default(self, monkeypatch):
        monkeypatch.setattr(config, "REPAIR_REQUIRE_ADMIN", False)
        require_repair_access(None)

    def test_requires_caller_when_enabled(self, monkeypatch):
        monkeypatch.setattr(config, "REPAIR_REQUIRE_ADMIN", True)
        with pytest.raises(CallableError) as excinfo:
            require_repair_access(None)
        assert excinfo.value.code == ErrorCode.UNAUTHENTICATED

    def test_requires_admin_claim_when_enabled(self, monkeypatch):
        monkeypatch.setattr(config, "REPAIR_REQUIRE_ADMIN", True)
        with pytest.raises(CallableError) as excinfo:
            require_repair_access(caller("u1"))
        assert excinfo.value.code == ErrorCode.PERMISSION_DENIED

        require_repair_access(caller("u1", admin=True))
