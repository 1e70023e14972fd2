"""
Plan Models

Type-safe views of plan documents and their membership map.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MemberRole(str, Enum):
    """Roles a member can hold on a plan."""
    OWNER = "owner"
    EDITOR = "editor"


# Roles allowed to invite others or issue invite links
INVITER_ROLES = frozenset({MemberRole.OWNER.value, MemberRole.EDITOR.value})


class Member(BaseModel):
    """A single entry of a plan's ``members`` map."""

    model_config = ConfigDict(populate_by_name=True)

    # Stored documents may hold partial entries (e.g. ``{}``) or unknown roles
    role: Optional[str] = Field(None, description="Member role ('owner' or 'editor')")
    joined_at: Optional[datetime] = Field(None, alias="joinedAt", description="Join timestamp")

    @property
    def can_invite(self) -> bool:
        return self.role in INVITER_ROLES


class Plan(BaseModel):
    """A shared trip plan as stored in the ``plans`` collection."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, description="Firestore document id")
    members: Dict[str, Member] = Field(default_factory=dict, description="Membership map keyed by uid")
    member_ids: List[str] = Field(
        default_factory=list,
        alias="memberIds",
        description="Denormalized list of the membership map's keys",
    )
    invite_token: Optional[str] = Field(None, alias="inviteToken", description="Shareable invite token")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt", description="Last update timestamp")

    @field_validator("members", mode="before")
    @classmethod
    def validate_members(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {uid: (entry if isinstance(entry, dict) else {}) for uid, entry in v.items()}
        return v

    @field_validator("member_ids", mode="before")
    @classmethod
    def validate_member_ids(cls, v: Any) -> Any:
        return [] if v is None else v

    def is_member(self, uid: str) -> bool:
        return uid in self.members

    def can_invite(self, uid: str) -> bool:
        member = self.members.get(uid)
        return member is not None and member.can_invite

    @classmethod
    def from_firestore_dict(cls, plan_id: str, data: Dict[str, Any]) -> "Plan":
        """Create a Plan from a Firestore document body."""
        return cls.model_validate({**data, "id": plan_id})
