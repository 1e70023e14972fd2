"""
Plan Membership Module

Invitation and memberIds maintenance logic for shared trip plans. Services
live in ``service`` and ``repair``; import them from there.
"""

from tripshare.core.plans.models import Member, MemberRole, Plan

__all__ = [
    "Member",
    "MemberRole",
    "Plan",
]
