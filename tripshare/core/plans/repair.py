"""
memberIds Repair

Maintenance operations that rebuild a plan's denormalized ``memberIds`` list
from its ``members`` map. Only plans missing at least one member id are
rewritten; surplus ids without a ``members`` entry are left in place.
"""

from typing import Any, Dict, List, Optional

from tripshare import config
from tripshare.config import logger
from tripshare.core.plans.membership import expected_member_ids, needs_member_ids_repair
from tripshare.core.repositories.exceptions import PlanDataMissingError
from tripshare.core.repositories.plans import PlanRepository
from tripshare.errors import CallableError, ErrorCode, callable_errors, internal, unauthenticated
from tripshare.schemas import RepairAllResult, RepairPlanResult

Caller = Optional[Dict[str, Any]]


def require_repair_access(caller: Caller) -> None:
    """
    Gate the repair callables when REPAIR_REQUIRE_ADMIN is enabled.

    The caller then needs an ``admin`` custom claim.
    """
    if not config.REPAIR_REQUIRE_ADMIN:
        return
    if not caller or not caller.get("uid"):
        raise unauthenticated()
    claims = caller.get("claims") or {}
    if claims.get(config.ADMIN_CLAIM) is not True:
        raise CallableError(ErrorCode.PERMISSION_DENIED, "Admin access required")


class MemberIdsRepairService:
    """Rebuilds ``memberIds`` from ``members`` for one plan or all plans."""

    def __init__(self, plans: Optional[PlanRepository] = None):
        self._plans = plans or PlanRepository()

    @callable_errors("repairExistingPlansMemberIds")
    def repair_all(self) -> RepairAllResult:
        """
        Scan every plan and repair the inconsistent ones in one atomic batch.

        A failed batch commit fails the whole run; nothing is retried.
        """
        updates: Dict[str, List[str]] = {}
        for plan in self._plans.iter_plans():
            if not needs_member_ids_repair(plan.members, plan.member_ids):
                continue
            new_ids = expected_member_ids(plan.members)
            updates[plan.id] = new_ids
            logger.info("Repairing plan %s: adding memberIds %s", plan.id, new_ids)

        if updates:
            self._plans.batch_update_member_ids(updates)
            message = f"Successfully repaired {len(updates)} plans"
        else:
            message = "No plans needed repair"
        logger.info(message)

        return RepairAllResult(
            repaired=len(updates),
            repaired_plan_ids=list(updates),
            message=message,
        )

    @callable_errors("repairSinglePlanMemberIds")
    def repair_plan(self, plan_id: Optional[str]) -> RepairPlanResult:
        """Repair a single plan, reporting the before and after lists."""
        if not plan_id:
            raise CallableError(ErrorCode.INVALID_ARGUMENT, "planId is required")

        try:
            plan = self._plans.get(plan_id)
        except PlanDataMissingError:
            raise internal("Plan data is empty")
        if plan is None:
            raise CallableError(ErrorCode.NOT_FOUND, f"Plan {plan_id} not found")

        if not needs_member_ids_repair(plan.members, plan.member_ids):
            return RepairPlanResult(
                plan_id=plan_id,
                member_ids=plan.member_ids,
                message=f"Plan {plan_id} does not need repair",
            )

        new_ids = expected_member_ids(plan.members)
        self._plans.update_member_ids(plan_id, new_ids)
        logger.info("Successfully repaired plan %s: memberIds updated to %s", plan_id, new_ids)
        return RepairPlanResult(
            plan_id=plan_id,
            old_member_ids=plan.member_ids,
            new_member_ids=new_ids,
            message=f"Successfully repaired plan {plan_id}",
        )
