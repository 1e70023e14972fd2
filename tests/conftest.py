"""
Shared fixtures: in-memory stand-ins for the Firestore repositories and the
Firebase Auth lookup, so service tests run without a Firebase project.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import pytest

from tripshare.core.plans.membership import merge_member_ids
from tripshare.core.plans.models import MemberRole, Plan
from tripshare.core.plans.repair import MemberIdsRepairService
from tripshare.core.plans.service import InviteService
from tripshare.core.repositories.exceptions import PlanDataMissingError


class FakeBatch:
    """Queues writes and applies them on commit, or none of them when ``fail`` is set."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.pending: List[Callable[[], None]] = []

    def commit(self) -> None:
        if self.fail:
            raise RuntimeError("commit rejected")
        for apply in self.pending:
            apply()
        self.pending = []


class FakePlanRepository:
    """Dict-backed PlanRepository that records every write."""

    def __init__(self, documents: Optional[Dict[str, Optional[Dict[str, Any]]]] = None):
        self.documents: Dict[str, Optional[Dict[str, Any]]] = documents or {}
        self.writes: List[tuple] = []
        self.fail_next_batch = False

    def get(self, plan_id: str) -> Optional[Plan]:
        if plan_id not in self.documents:
            return None
        data = self.documents[plan_id]
        if data is None:
            raise PlanDataMissingError(plan_id)
        return Plan.from_firestore_dict(plan_id, data)

    def find_by_invite_token(self, token: str) -> Optional[Plan]:
        for plan_id, data in self.documents.items():
            if data and data.get("inviteToken") == token:
                return Plan.from_firestore_dict(plan_id, data)
        return None

    def iter_plans(self):
        for plan_id, data in self.documents.items():
            yield Plan.from_firestore_dict(plan_id, data or {})

    def batch(self) -> FakeBatch:
        batch = FakeBatch(fail=self.fail_next_batch)
        self.fail_next_batch = False
        return batch

    def add_member(
        self,
        plan: Plan,
        uid: str,
        role: MemberRole = MemberRole.EDITOR,
        batch: Optional[FakeBatch] = None,
    ) -> List[str]:
        member_ids = merge_member_ids(plan.member_ids, uid)

        def apply():
            doc = self.documents[plan.id]
            doc.setdefault("members", {})[uid] = {"role": role.value, "joinedAt": datetime.now(timezone.utc)}
            doc["memberIds"] = member_ids
            self.writes.append(("add_member", plan.id, uid))

        if batch is not None:
            batch.pending.append(apply)
        else:
            apply()
        return member_ids

    def set_invite_token(self, plan_id: str, token: str) -> None:
        self.documents[plan_id]["inviteToken"] = token
        self.writes.append(("set_invite_token", plan_id, token))

    def update_member_ids(self, plan_id: str, member_ids: List[str]) -> None:
        self.documents[plan_id]["memberIds"] = list(member_ids)
        self.writes.append(("update_member_ids", plan_id, list(member_ids)))

    def batch_update_member_ids(self, updates: Dict[str, List[str]]) -> None:
        for plan_id, member_ids in updates.items():
            self.documents[plan_id]["memberIds"] = list(member_ids)
        self.writes.append(("batch", dict(updates)))


class FakeUserRepository:
    def __init__(self):
        self.documents: Dict[str, Dict[str, Any]] = {}

    def set_active_plan(self, uid: str, plan_id: str, batch: Optional[FakeBatch] = None) -> None:
        def apply():
            self.documents.setdefault(uid, {}).update({"activePlanId": plan_id})

        if batch is not None:
            batch.pending.append(apply)
        else:
            apply()


class FakeIdentityProvider:
    def __init__(self, users_by_email: Optional[Dict[str, str]] = None):
        self.users_by_email = users_by_email or {}
        self.lookups: List[str] = []

    def get_uid_by_email(self, email: str) -> Optional[str]:
        self.lookups.append(email)
        return self.users_by_email.get(email)


def caller(uid: str, **claims: Any) -> Dict[str, Any]:
    return {"uid": uid, "email": f"{uid}@example.com", "claims": {"uid": uid, **claims}}


@pytest.fixture
def plans() -> FakePlanRepository:
    return FakePlanRepository({
        "P1": {
            "members": {
                "owner1": {"role": "owner"},
                "editor1": {"role": "editor"},
                "viewer1": {"role": "viewer"},
            },
            "memberIds": ["owner1", "editor1", "viewer1"],
        },
    })


@pytest.fixture
def users() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider({"new@x.com": "U2", "editor1@x.com": "editor1"})


@pytest.fixture
def invite_service(plans, users, identity) -> InviteService:
    return InviteService(plans=plans, users=users, identity=identity)


@pytest.fixture
def repair_service(plans) -> MemberIdsRepairService:
    return MemberIdsRepairService(plans=plans)
