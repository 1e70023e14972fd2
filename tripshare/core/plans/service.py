"""
Invite Service

Business logic behind the three invite callables: inviting by email,
issuing a shareable invite token and redeeming one.
"""

import uuid
from typing import Any, Dict, Optional

from tripshare.config import logger
from tripshare.core.identity import IdentityProvider
from tripshare.core.plans.models import MemberRole, Plan
from tripshare.core.repositories.exceptions import PlanDataMissingError
from tripshare.core.repositories.plans import PlanRepository
from tripshare.core.repositories.users import UserRepository
from tripshare.core.security import hash_token, mask_email
from tripshare.errors import CallableError, ErrorCode, callable_errors, internal, unauthenticated
from tripshare.schemas import AcceptInviteResult, InviteByEmailResult, InviteTokenResult

Caller = Optional[Dict[str, Any]]


def require_uid(caller: Caller) -> str:
    """Return the caller's uid or raise UNAUTHENTICATED."""
    if not caller or not caller.get("uid"):
        raise unauthenticated()
    return caller["uid"]


def generate_invite_token() -> str:
    """A new random (UUID4) invite token."""
    return str(uuid.uuid4())


class InviteService:
    """
    Service layer for plan invitations.

    Every public method validates in a fixed order (authentication, arguments,
    plan lookup, permission) and raises CallableError for anything the client
    should see. Other failures become INTERNAL.
    """

    def __init__(
        self,
        plans: Optional[PlanRepository] = None,
        users: Optional[UserRepository] = None,
        identity: Optional[IdentityProvider] = None,
    ):
        self._plans = plans or PlanRepository()
        self._users = users or UserRepository()
        self._identity = identity or IdentityProvider()

    def _load_plan(self, plan_id: str) -> Plan:
        try:
            plan = self._plans.get(plan_id)
        except PlanDataMissingError:
            raise internal("Plan data is missing.")
        if plan is None:
            raise CallableError(ErrorCode.NOT_FOUND, f"Plan with ID {plan_id} not found.")
        return plan

    @callable_errors("inviteUserToPlan")
    def invite_by_email(self, caller: Caller, plan_id: Optional[str], email: Optional[str]) -> InviteByEmailResult:
        """
        Add the account registered under ``email`` to a plan as an editor.

        Raises:
            CallableError: UNAUTHENTICATED, INVALID_ARGUMENT, NOT_FOUND,
                PERMISSION_DENIED or ALREADY_EXISTS
        """
        inviter_uid = require_uid(caller)
        if not plan_id or not email:
            raise CallableError(
                ErrorCode.INVALID_ARGUMENT,
                "The function must be called with a 'planId' and 'email'.",
            )

        plan = self._load_plan(plan_id)
        if not plan.can_invite(inviter_uid):
            raise CallableError(
                ErrorCode.PERMISSION_DENIED,
                "You do not have permission to invite users to this plan.",
            )

        invitee_uid = self._identity.get_uid_by_email(email)
        if invitee_uid is None:
            raise CallableError(ErrorCode.NOT_FOUND, f"No user found with email {email}.")

        if plan.is_member(invitee_uid):
            raise CallableError(
                ErrorCode.ALREADY_EXISTS,
                f"User {email} is already a member of this plan.",
            )

        self._plans.add_member(plan, invitee_uid, MemberRole.EDITOR)
        logger.info("User %s invited %s to plan %s", inviter_uid, mask_email(email), plan_id)
        return InviteByEmailResult(message=f"Successfully invited {email} to the plan.")

    @callable_errors("generateInviteToken")
    def issue_invite_token(self, caller: Caller, plan_id: Optional[str]) -> InviteTokenResult:
        """
        Return the plan's invite token, creating one on first use.

        Two concurrent first calls may both create a token; the last write
        wins and the other caller holds a token that no longer redeems.
        """
        uid = require_uid(caller)
        if not plan_id:
            raise CallableError(ErrorCode.INVALID_ARGUMENT, "The function must be called with a 'planId'.")

        plan = self._load_plan(plan_id)
        if not plan.can_invite(uid):
            raise CallableError(
                ErrorCode.PERMISSION_DENIED,
                "You do not have permission to create an invite link for this plan.",
            )

        if plan.invite_token:
            return InviteTokenResult(invite_token=plan.invite_token)

        token = generate_invite_token()
        self._plans.set_invite_token(plan_id, token)
        logger.info("User %s issued invite token %s for plan %s", uid, hash_token(token), plan_id)
        return InviteTokenResult(invite_token=token)

    @callable_errors("acceptInviteToken")
    def accept_invite_token(self, caller: Caller, token: Optional[str]) -> AcceptInviteResult:
        """
        Join the caller to the plan holding ``token`` and make it their active plan.

        Redeeming a plan the caller already belongs to writes nothing. The
        membership and the active plan are committed in one batch.
        """
        uid = require_uid(caller)
        if not token:
            raise CallableError(ErrorCode.INVALID_ARGUMENT, "The function must be called with a 'token'.")

        plan = self._plans.find_by_invite_token(token)
        if plan is None:
            raise CallableError(ErrorCode.NOT_FOUND, "Invalid or expired invite token.")

        if plan.is_member(uid):
            return AcceptInviteResult(already_member=True, plan_id=plan.id)

        batch = self._plans.batch()
        self._plans.add_member(plan, uid, MemberRole.EDITOR, batch=batch)
        self._users.set_active_plan(uid, plan.id, batch=batch)
        batch.commit()
        logger.info("User %s joined plan %s via invite token %s", uid, plan.id, hash_token(token))
        return AcceptInviteResult(success=True, plan_id=plan.id)
