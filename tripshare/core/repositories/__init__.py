"""
Repository layer for Firestore data access.
"""

from tripshare.core.repositories.exceptions import (
    PlanDataMissingError,
    PlanRepositoryError,
    RepositoryError,
)
from tripshare.core.repositories.plans import PlanRepository
from tripshare.core.repositories.users import UserRepository

__all__ = [
    "PlanDataMissingError",
    "PlanRepository",
    "PlanRepositoryError",
    "RepositoryError",
    "UserRepository",
]
