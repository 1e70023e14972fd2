"""
Callable endpoints.

Each route speaks the Firebase callable protocol: the payload arrives as
``{"data": {...}}`` and the result leaves as ``{"result": {...}}``. Errors
are rendered by the CallableError handler registered in ``main``.
"""

from typing import Any, Dict, Optional, Type, TypeVar

from fastapi import APIRouter, Depends

from tripshare.core.firebase_client import get_optional_caller
from tripshare.core.plans.repair import MemberIdsRepairService, require_repair_access
from tripshare.core.plans.service import InviteService
from tripshare.schemas import (
    AcceptInviteData,
    BaseSchema,
    CallableRequest,
    CallableResponse,
    InviteByEmailData,
    InviteTokenData,
    RepairPlanData,
)

router = APIRouter(prefix="/api/functions", tags=["Functions"])

DataT = TypeVar("DataT", bound=BaseSchema)


def get_invite_service() -> InviteService:
    return InviteService()


def get_repair_service() -> MemberIdsRepairService:
    return MemberIdsRepairService()


def _data(payload: Optional[CallableRequest], model: Type[DataT]) -> DataT:
    if payload is None or payload.data is None:
        return model()
    return payload.data


@router.post("/inviteUserToPlan", response_model=CallableResponse)
def invite_user_to_plan(
    payload: Optional[CallableRequest[InviteByEmailData]] = None,
    caller: Optional[Dict[str, Any]] = Depends(get_optional_caller),
    service: InviteService = Depends(get_invite_service),
) -> CallableResponse:
    """Invite a registered user to a plan by email."""
    data = _data(payload, InviteByEmailData)
    return CallableResponse.wrap(service.invite_by_email(caller, data.plan_id, data.email))


@router.post("/generateInviteToken", response_model=CallableResponse)
def generate_invite_token(
    payload: Optional[CallableRequest[InviteTokenData]] = None,
    caller: Optional[Dict[str, Any]] = Depends(get_optional_caller),
    service: InviteService = Depends(get_invite_service),
) -> CallableResponse:
    """Get or create the plan's shareable invite token."""
    data = _data(payload, InviteTokenData)
    return CallableResponse.wrap(service.issue_invite_token(caller, data.plan_id))


@router.post("/acceptInviteToken", response_model=CallableResponse)
def accept_invite_token(
    payload: Optional[CallableRequest[AcceptInviteData]] = None,
    caller: Optional[Dict[str, Any]] = Depends(get_optional_caller),
    service: InviteService = Depends(get_invite_service),
) -> CallableResponse:
    """Join the plan behind an invite token."""
    data = _data(payload, AcceptInviteData)
    return CallableResponse.wrap(service.accept_invite_token(caller, data.token))


# -----------------------------------------------------------------------------
# Maintenance
# -----------------------------------------------------------------------------

@router.post("/repairExistingPlansMemberIds", response_model=CallableResponse)
def repair_existing_plans_member_ids(
    caller: Optional[Dict[str, Any]] = Depends(get_optional_caller),
    service: MemberIdsRepairService = Depends(get_repair_service),
) -> CallableResponse:
    """Rebuild memberIds on every plan missing a member id."""
    require_repair_access(caller)
    return CallableResponse.wrap(service.repair_all())


@router.post("/repairSinglePlanMemberIds", response_model=CallableResponse)
def repair_single_plan_member_ids(
    payload: Optional[CallableRequest[RepairPlanData]] = None,
    caller: Optional[Dict[str, Any]] = Depends(get_optional_caller),
    service: MemberIdsRepairService = Depends(get_repair_service),
) -> CallableResponse:
    """Rebuild memberIds on one plan."""
    require_repair_access(caller)
    data = _data(payload, RepairPlanData)
    return CallableResponse.wrap(service.repair_plan(data.plan_id))
