"""
Pydantic models for the callable payloads.

Field names follow the web client's camelCase wire format. Request fields
are optional at the schema level so that missing values reach the handlers,
which report them as INVALID_ARGUMENT after the authentication check.
"""

from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


# -----------------------------------------------------------------------------
# Base Models
# -----------------------------------------------------------------------------

class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    model_config = ConfigDict(populate_by_name=True)


DataT = TypeVar("DataT", bound=BaseSchema)


class CallableRequest(BaseModel, Generic[DataT]):
    """Firebase callable request envelope: ``{"data": {...}}``."""
    data: Optional[DataT] = None


class CallableResponse(BaseModel):
    """Firebase callable response envelope: ``{"result": {...}}``."""
    result: Dict[str, Any]

    @classmethod
    def wrap(cls, result: BaseSchema) -> "CallableResponse":
        return cls(result=result.model_dump(by_alias=True, exclude_none=True))


# -----------------------------------------------------------------------------
# Request Payloads
# -----------------------------------------------------------------------------

class InviteByEmailData(BaseSchema):
    plan_id: Optional[str] = Field(None, alias="planId", description="Plan to invite into")
    email: Optional[str] = Field(None, description="Invitee email address")


class InviteTokenData(BaseSchema):
    plan_id: Optional[str] = Field(None, alias="planId", description="Plan to issue a token for")


class AcceptInviteData(BaseSchema):
    token: Optional[str] = Field(None, description="Invite token from the shared URL")


class RepairPlanData(BaseSchema):
    plan_id: Optional[str] = Field(None, alias="planId", description="Plan to repair")


# -----------------------------------------------------------------------------
# Results
# -----------------------------------------------------------------------------

class InviteByEmailResult(BaseSchema):
    success: bool = True
    message: str


class InviteTokenResult(BaseSchema):
    invite_token: str = Field(..., alias="inviteToken")


class AcceptInviteResult(BaseSchema):
    """Either ``success`` or ``alreadyMember`` is set, never both."""
    success: Optional[bool] = None
    already_member: Optional[bool] = Field(None, alias="alreadyMember")
    plan_id: str = Field(..., alias="planId")


class RepairAllResult(BaseSchema):
    success: bool = True
    repaired: int
    repaired_plan_ids: List[str] = Field(default_factory=list, alias="repairedPlanIds")
    message: str


class RepairPlanResult(BaseSchema):
    """
    Single-plan repair outcome.

    A repaired plan reports ``oldMemberIds``/``newMemberIds``; a plan that was
    already consistent reports ``memberIds``.
    """
    success: bool = True
    plan_id: str = Field(..., alias="planId")
    old_member_ids: Optional[List[str]] = Field(None, alias="oldMemberIds")
    new_member_ids: Optional[List[str]] = Field(None, alias="newMemberIds")
    member_ids: Optional[List[str]] = Field(None, alias="memberIds")
    message: str


# -----------------------------------------------------------------------------
# Health
# -----------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime
